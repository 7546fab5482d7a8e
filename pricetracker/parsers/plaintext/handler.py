from __future__ import annotations

import logging

from pricetracker.core.base import BaseProductParser
from pricetracker.core.models import ParsedProduct, ParseResult

from ..discounts import PLAIN_TEXT_LINE_RULES, scan_lines
from ..normalizers import (
    DEFAULT_QUANTITY,
    find_quantity,
    is_currency_line,
    is_json_shaped,
    is_numeric_line,
    split_lines,
    strip_quantity,
    to_price,
)
from ..patterns import CURRENCY_GLYPHS, CURRENCY_PRICE_RE
from .patterns import (
    BRAND_MISSING_WARNING,
    DISCOUNT_TRIGGERS,
    MARKED_BRAND_RE,
    PARENTHESIZED_BRAND_RE,
    SEPARATED_BRAND_RE,
)

LOGGER = logging.getLogger(__name__)


def split_brand_and_title(line: str) -> tuple[str | None, str]:
    match = MARKED_BRAND_RE.match(line)
    if match:
        return match.group("brand").strip(), match.group("rest").strip()

    match = PARENTHESIZED_BRAND_RE.match(line)
    if match:
        brand = match.group("brand").strip()
        return brand, f"{brand}{match.group('rest').strip()}"

    # Uncertain split: keep the whole line as the title.
    match = SEPARATED_BRAND_RE.match(line)
    if match:
        return match.group("brand"), line

    return None, line


def _inline_prices(lines: list[str]) -> list[float]:
    prices: list[float] = []
    for line in lines:
        for match in CURRENCY_PRICE_RE.finditer(line):
            value = to_price(match.group("value"))
            if value is not None:
                prices.append(value)
    return prices


def _split_line_prices(lines: list[str]) -> list[float]:
    prices: list[float] = []
    for index, line in enumerate(lines[:-1]):
        following = lines[index + 1]
        if is_currency_line(line) and is_numeric_line(following):
            value = to_price(following)
            if value is not None:
                prices.append(value)
    return prices


def extract_prices(lines: list[str]) -> tuple[float | None, float | None]:
    candidates = _inline_prices(lines) or _split_line_prices(lines)
    if not candidates:
        return None, None

    distinct = sorted(set(candidates))
    price = distinct[0]
    original_price = distinct[-1] if len(distinct) > 1 else None
    return price, original_price


class PlainTextParser(BaseProductParser):
    parser_name = "Plain Text Parser"

    def sniff(self, text: str) -> bool:
        if not text or not text.strip() or is_json_shaped(text):
            return False
        if len(split_lines(text)) < 2:
            return False
        return any(glyph in text for glyph in CURRENCY_GLYPHS) or any(
            trigger in text for trigger in DISCOUNT_TRIGGERS
        )

    def _extract(self, text: str) -> ParseResult:
        lines = split_lines(text)
        if not lines:
            raise ValueError("No text lines to parse")

        warnings: list[str] = []

        brand, title = split_brand_and_title(lines[0])
        if not brand:
            warnings.append(BRAND_MISSING_WARNING)

        quantity = find_quantity(title, last=True)
        if quantity is not None and quantity.matched_text:
            title = strip_quantity(title, quantity.matched_text)
        else:
            quantity = DEFAULT_QUANTITY

        price, original_price = extract_prices(lines)
        if price is None:
            warnings.append("Price not found")

        discounts = scan_lines(lines, PLAIN_TEXT_LINE_RULES)
        LOGGER.debug("Plain text: brand=%r price=%s discounts=%d", brand, price, len(discounts))

        product = ParsedProduct(
            title=title,
            brand=brand,
            price=price,
            original_price=original_price,
            quantity=quantity.quantity,
            unit=quantity.unit,
            comparison_unit=quantity.comparison_unit,
            discounts=tuple(discounts),
        )
        return ParseResult.ok(product, warnings)
