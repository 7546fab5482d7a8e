from __future__ import annotations

import math

from pricetracker.core.models import Unit

BASE_UNIT: Unit = "jin"

# 1 jin = 500 g; volumes are approximated as weights, 1 ml ~ 1 g.
CONVERSION_TO_JIN: dict[str, float] = {
    "g": 1 / 500,
    "kg": 2,
    "jin": 1,
    "liang": 0.1,
    "ml": 1 / 500,
    "l": 2,
}


def ceil_to_two(value: float) -> float:
    """Round up to two decimals so a displayed unit price never understates cost."""
    return math.ceil(value * 100) / 100


def is_convertible_to_jin(unit: str) -> bool:
    return unit in CONVERSION_TO_JIN


def convert_to_jin(quantity: float, unit: str) -> float | None:
    if not is_convertible_to_jin(unit):
        return None
    return quantity * CONVERSION_TO_JIN[unit]


def convert_unit(quantity: float, from_unit: str, to_unit: str) -> float | None:
    if from_unit == to_unit:
        return quantity

    if from_unit == "piece" or to_unit == "piece":
        return None

    if not is_convertible_to_jin(from_unit) or not is_convertible_to_jin(to_unit):
        return None

    jin_quantity = convert_to_jin(quantity, from_unit)
    if jin_quantity is None:
        return None
    return jin_quantity / CONVERSION_TO_JIN[to_unit]


def unit_price(price: float, quantity: float, unit: str, comparison_unit: str) -> float | None:
    if quantity <= 0:
        return None

    converted = convert_unit(quantity, unit, comparison_unit)
    if converted is None or converted == 0:
        return None

    return price / converted


def default_comparison_unit(unit: str) -> Unit:
    return "piece" if unit == "piece" else BASE_UNIT
