from __future__ import annotations

import json
import logging
from typing import Any, Literal

from pricetracker.core.base import BaseProductParser
from pricetracker.core.models import ParsedProduct, ParseResult
from pricetracker.urls import jd_product_url

from ..normalizers import (
    DEFAULT_QUANTITY,
    canonical_brand,
    canonicalize_slash_brand,
    dig,
    find_quantity,
    has_cjk,
    has_latin,
    quantity_from_specification,
    to_float,
    to_price,
)
from .patterns import (
    CN_BRAND_PAREN_RE,
    CN_BRAND_SLASH_RE,
    FEED_KEYS,
    TITLE_PAREN_BRAND_RE,
    TITLE_SLASH_BRAND_RE,
)
from .promotions import extract_discounts

LOGGER = logging.getLogger(__name__)

PriceSource = Literal["multi_unit", "final", "current", "original"]


def _load_feed(text: str) -> dict[str, Any]:
    payload = json.loads(text.strip())
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object at the top level")
    return payload


def _title_latin_brand(title: str) -> str | None:
    for pattern in (TITLE_SLASH_BRAND_RE, TITLE_PAREN_BRAND_RE):
        match = pattern.match(title)
        if match:
            return match.group("latin").strip()
    return None


def normalize_brand(raw_brand: str | None, title: str | None) -> str | None:
    brand = (raw_brand or "").strip()
    if not brand:
        return None

    for pattern in (CN_BRAND_PAREN_RE, CN_BRAND_SLASH_RE):
        match = pattern.match(brand)
        if match:
            return canonical_brand(match.group("chinese"), match.group("latin"))

    if "/" in brand:
        return canonicalize_slash_brand(brand)

    if has_cjk(brand) and not has_latin(brand) and title:
        latin = _title_latin_brand(title)
        if latin:
            LOGGER.debug("Recovered latin brand %r from title", latin)
            return canonical_brand(brand, latin)

    return brand


def _multi_unit_price(price_map: object) -> float | None:
    raw = dig(price_map, "multiUnitPrice")
    if isinstance(raw, dict):
        raw = raw.get("price")
    return to_price(raw)


def select_price(price_map: object) -> tuple[float | None, PriceSource | None]:
    candidates: tuple[tuple[PriceSource, float | None], ...] = (
        ("multi_unit", _multi_unit_price(price_map)),
        ("final", to_price(dig(price_map, "finalPrice", "price"))),
        ("current", to_price(dig(price_map, "p"))),
        ("original", to_price(dig(price_map, "op"))),
    )
    for source, value in candidates:
        if value is not None:
            return value, source
    return None, None


def select_original_price(price_map: object, source: PriceSource | None) -> float | None:
    regular = to_price(dig(price_map, "regularPrice"))
    current = to_price(dig(price_map, "p"))
    original = to_price(dig(price_map, "op"))

    # The multi-unit branch prefers the list price so the bigger saving shows.
    if source == "multi_unit":
        ordered = (regular, original, current)
    elif source == "final":
        ordered = (current, original)
    else:
        ordered = (regular, original)

    return next((value for value in ordered if value is not None), None)


def _sale_attributes(raw: object) -> list[dict[str, Any]]:
    if isinstance(raw, str):
        raw = json.loads(raw)
    if not isinstance(raw, list):
        raise ValueError("sale_attributes is not a list")
    return [item for item in raw if isinstance(item, dict)]


def build_specification(ware_info: object) -> str | None:
    raw = dig(ware_info, "sale_attributes")
    if raw:
        try:
            attributes = _sale_attributes(raw)
        except ValueError:
            LOGGER.debug("Unreadable sale_attributes, falling back to size", exc_info=True)
        else:
            attributes.sort(key=lambda item: to_float(item.get("sequenceNo")) or 0.0)
            lines = [
                f"{item.get('saleName')}: {item.get('saleValue')}"
                for item in attributes
                if item.get("saleName") and item.get("saleValue") is not None
            ]
            if lines:
                return "\n".join(lines)

    size = dig(ware_info, "size")
    if isinstance(size, str) and size.strip():
        return size.strip()
    return None


class JDProductParser(BaseProductParser):
    parser_name = "JD.com JSON Parser"

    def sniff(self, text: str) -> bool:
        trimmed = (text or "").strip()
        if not trimmed.startswith("{"):
            return False

        try:
            payload = json.loads(trimmed)
        except (ValueError, RecursionError):
            return False

        return isinstance(payload, dict) and any(payload.get(key) for key in FEED_KEYS)

    def _extract(self, text: str) -> ParseResult:
        feed = _load_feed(text)
        ware_info = feed.get("wareInfoReadMap") or {}
        price_map = feed.get("price") or {}
        warnings: list[str] = []

        title = dig(ware_info, "sku_name")
        title = title.strip() if isinstance(title, str) else ""
        if not title:
            warnings.append("Product name not found")

        raw_brand = dig(ware_info, "cn_brand")
        brand = normalize_brand(raw_brand if isinstance(raw_brand, str) else None, title)
        if not brand:
            warnings.append("Brand not found")

        price, source = select_price(price_map)
        if price is None:
            warnings.append("Price not found")
        original_price = select_original_price(price_map, source)
        LOGGER.debug("Price %s from %s, original %s", price, source, original_price)

        specification = build_specification(ware_info)
        quantity = (
            quantity_from_specification(specification)
            or (find_quantity(title, last=True) if title else None)
            or DEFAULT_QUANTITY
        )

        product_id = dig(ware_info, "product_id")
        source_address = jd_product_url(str(product_id)) if product_id not in (None, "") else None

        discounts = extract_discounts(feed, price, original_price)

        product = ParsedProduct(
            title=title or None,
            brand=brand,
            price=price,
            original_price=original_price,
            specification=specification,
            quantity=quantity.quantity,
            unit=quantity.unit,
            comparison_unit=quantity.comparison_unit,
            source_address=source_address,
            discounts=tuple(discounts),
        )
        return ParseResult.ok(product, warnings)
