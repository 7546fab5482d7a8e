from __future__ import annotations

import logging

from pricetracker.core.base import BaseProductParser
from pricetracker.core.models import ParsedProduct, ParseResult

from ..discounts import TAOBAO_LINE_RULES, scan_lines
from ..normalizers import (
    DEFAULT_QUANTITY,
    canonicalize_slash_brand,
    find_quantity,
    is_currency_line,
    is_json_shaped,
    is_numeric_line,
    quantity_from_specification,
    split_lines,
    to_price,
)
from ..patterns import BARE_NUMBER_RE, CURRENCY_PRICE_RE
from .parameters import parse_parameter_block
from .patterns import BRAND_KEY, ORIGINAL_PRICE_LABELS, PRICE_LABELS, SNIFF_MARKERS

LOGGER = logging.getLogger(__name__)


def _label_of(line: str) -> str | None:
    for label in (*PRICE_LABELS, *ORIGINAL_PRICE_LABELS):
        if label in line:
            return label
    return None


def _line_at(lines: list[str], index: int) -> str:
    return lines[index] if index < len(lines) else ""


def _labelled_value(lines: list[str], index: int, label: str) -> float | None:
    following = _line_at(lines, index + 1)
    if is_currency_line(following):
        below = _line_at(lines, index + 2)
        return to_price(below) if is_numeric_line(below) else None

    match = CURRENCY_PRICE_RE.search(f"{lines[index]} {following}")
    if match:
        return to_price(match.group("value"))

    match = BARE_NUMBER_RE.search(lines[index].split(label, 1)[1])
    if match:
        return to_price(match.group("value"))

    return to_price(following) if is_numeric_line(following) else None


def extract_prices(lines: list[str]) -> tuple[float | None, float | None]:
    price: float | None = None
    original_price: float | None = None
    label_glyph_lines: set[int] = set()

    for index, line in enumerate(lines):
        label = _label_of(line)
        if label is None:
            continue
        if is_currency_line(_line_at(lines, index + 1)):
            label_glyph_lines.add(index + 1)

        value = _labelled_value(lines, index, label)
        if value is None:
            continue
        if label in PRICE_LABELS and price is None:
            price = value
        elif label in ORIGINAL_PRICE_LABELS and original_price is None:
            original_price = value

    labelled_fallback: float | None = None
    for index, line in enumerate(lines[:-1]):
        if not is_currency_line(line):
            continue
        following = lines[index + 1]
        if not is_numeric_line(following):
            continue
        value = to_price(following)
        if value is None:
            continue
        if index in label_glyph_lines:
            if labelled_fallback is None:
                labelled_fallback = value
            continue
        if price is None:
            price = value
        elif original_price is None and value != price:
            original_price = value

    # a glyph owned by a label still counts when nothing else gave a price
    if price is None:
        price = labelled_fallback

    if original_price is None and price is not None:
        original_price = price
    return price, original_price


class TaobaoProductParser(BaseProductParser):
    parser_name = "Taobao/Tmall Product Parser"

    def sniff(self, text: str) -> bool:
        if not text or not text.strip() or is_json_shaped(text):
            return False
        return any(marker in text for marker in SNIFF_MARKERS)

    def _extract(self, text: str) -> ParseResult:
        lines = split_lines(text)
        if not lines:
            raise ValueError("No text lines to parse")

        warnings: list[str] = []
        title = lines[0]

        price, original_price = extract_prices(lines)
        if price is None:
            warnings.append("Price not found")

        parameters = parse_parameter_block(lines)
        raw_brand = parameters.get(BRAND_KEY)
        brand = canonicalize_slash_brand(raw_brand) if raw_brand else None
        if not brand:
            warnings.append("Brand not found in parameters")

        specification = parameters.specification_text()
        quantity = (
            quantity_from_specification(specification)
            or find_quantity(title, last=True)
            or DEFAULT_QUANTITY
        )

        discounts = scan_lines(lines, TAOBAO_LINE_RULES)
        LOGGER.debug("Taobao: %d parameters, %d discounts", len(parameters.entries), len(discounts))

        product = ParsedProduct(
            title=title,
            brand=brand,
            price=price,
            original_price=original_price,
            specification=specification,
            quantity=quantity.quantity,
            unit=quantity.unit,
            comparison_unit=quantity.comparison_unit,
            discounts=tuple(discounts),
        )
        return ParseResult.ok(product, warnings)
