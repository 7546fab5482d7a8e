from __future__ import annotations

import re
from dataclasses import dataclass

from pricetracker.core.models import UNITS, Unit
from pricetracker.units import default_comparison_unit

from .patterns import (
    CAPITAL_LATIN_LEADING_RE,
    CJK_RE,
    CURRENCY_GLYPHS,
    LATIN_RE,
    MULTISPACE_RE,
    NUMERIC_LINE_RE,
    QUANTITY_FIELD_LABELS,
    QUANTITY_RE,
    UNIT_TOKENS,
)


@dataclass(frozen=True, slots=True)
class QuantityMatch:
    quantity: float
    unit: Unit
    comparison_unit: Unit
    matched_text: str | None = None


DEFAULT_QUANTITY = QuantityMatch(quantity=1.0, unit="piece", comparison_unit="piece")


def split_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def is_json_shaped(text: str) -> bool:
    trimmed = text.strip()
    return trimmed.startswith("{") or trimmed.startswith("[")


def is_currency_line(line: str) -> bool:
    return line.strip() in CURRENCY_GLYPHS


def is_numeric_line(line: str) -> bool:
    return bool(NUMERIC_LINE_RE.match(line.strip()))


def to_float(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    token = str(value).strip().replace(",", "")
    if not token:
        return None
    try:
        return float(token)
    except ValueError:
        return None


def to_price(value: object) -> float | None:
    number = to_float(value)
    if number is None or number <= 0:
        return None
    return number


def format_number(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def has_cjk(text: str) -> bool:
    return bool(CJK_RE.search(text))


def has_latin(text: str) -> bool:
    return bool(LATIN_RE.search(text))


def canonical_brand(chinese: str | None, latin: str | None) -> str | None:
    chinese = (chinese or "").strip()
    latin = (latin or "").strip()
    if chinese and latin:
        return f"{chinese}/{latin}"
    return chinese or latin or None


def canonicalize_slash_brand(value: str) -> str:
    """
    `Colgate/高露洁` -> `高露洁/Colgate`. Values whose halves cannot be told apart
    as one Chinese and one capital-Latin name are returned unchanged.
    """
    if "/" not in value:
        return value.strip()

    left, right = (part.strip() for part in value.split("/", 1))
    if has_cjk(left) and CAPITAL_LATIN_LEADING_RE.match(right):
        return canonical_brand(left, right) or value.strip()
    if has_cjk(right) and CAPITAL_LATIN_LEADING_RE.match(left):
        return canonical_brand(right, left) or value.strip()
    return value.strip()


def normalize_unit_token(token: str) -> Unit | None:
    unit = UNIT_TOKENS.get(token) or UNIT_TOKENS.get(token.lower())
    if unit not in UNITS:
        return None
    return unit  # type: ignore[return-value]


def _to_quantity_match(match: re.Match[str]) -> QuantityMatch | None:
    unit = normalize_unit_token(match.group("u"))
    if unit is None:
        return None
    return QuantityMatch(
        quantity=float(match.group("q")),
        unit=unit,
        comparison_unit=default_comparison_unit(unit),
        matched_text=match.group(0),
    )


def find_quantity(text: str, *, last: bool = False) -> QuantityMatch | None:
    matches = list(QUANTITY_RE.finditer(text))
    if last:
        matches.reverse()
    for match in matches:
        found = _to_quantity_match(match)
        if found is not None:
            return found
    return None


def quantity_from_specification(specification: str | None) -> QuantityMatch | None:
    if not specification:
        return None

    for label in QUANTITY_FIELD_LABELS:
        label_re = re.compile(rf"^{label}\s*[:：]\s*(?P<value>.+)$", re.MULTILINE)
        for match in label_re.finditer(specification):
            found = find_quantity(match.group("value"))
            if found is not None:
                return found
    return None


def strip_quantity(title: str, matched_text: str) -> str:
    head, _, tail = title.rpartition(matched_text)
    cleaned = MULTISPACE_RE.sub(" ", f"{head} {tail}").strip()
    return cleaned or title.strip()


def dig(mapping: object, *keys: str) -> object:
    current = mapping
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current
