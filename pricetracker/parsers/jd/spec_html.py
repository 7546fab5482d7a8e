from __future__ import annotations

import html
import logging
from dataclasses import dataclass, field

from pricetracker.urls import jd_product_url

from .patterns import (
    PACKAGE_CONTENTS_KEY,
    PAGE_TITLE_RE,
    PRODUCT_PAGE_TITLE_SUFFIX_RE,
    SPEC_BRAND_RE,
    SPEC_ITEM_RE,
    SPEC_PACKAGE_RE,
    SPEC_PRODUCT_ID_RE,
    SPEC_SKIPPED_KEYS,
)

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class JDSpecSheet:
    title: str | None = None
    brand: str | None = None
    product_id: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def source_address(self) -> str | None:
        if not self.product_id:
            return None
        return jd_product_url(self.product_id)

    def specification_text(self) -> str:
        return "\n".join(f"{key}: {value}" for key, value in self.attributes.items())


def _clean(value: str) -> str:
    return html.unescape(value).strip()


def parse_jd_spec_html(page: str) -> JDSpecSheet:
    """
    Pull the specification table out of a saved JD product page.

    String matching only: the page is never rendered, so markup that drifts
    away from the `item`/`name`/`text` block layout yields an empty sheet.
    """
    sheet = JDSpecSheet()

    title_match = PAGE_TITLE_RE.search(page)
    if title_match:
        title = PRODUCT_PAGE_TITLE_SUFFIX_RE.sub("", _clean(title_match.group("title")))
        sheet.title = title.strip() or None

    brand_match = SPEC_BRAND_RE.search(page)
    if brand_match:
        sheet.brand = _clean(brand_match.group("brand")) or None

    product_id_match = SPEC_PRODUCT_ID_RE.search(page)
    if product_id_match:
        sheet.product_id = product_id_match.group("product_id")

    for match in SPEC_ITEM_RE.finditer(page):
        key = _clean(match.group("key"))
        value = _clean(match.group("value"))
        if not key or not value or key in SPEC_SKIPPED_KEYS:
            continue
        sheet.attributes.setdefault(key, value)

    package_match = SPEC_PACKAGE_RE.search(page)
    if package_match:
        sheet.attributes[PACKAGE_CONTENTS_KEY] = _clean(package_match.group("value"))

    LOGGER.debug("JD spec sheet: %d attributes", len(sheet.attributes))
    return sheet
