from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable
from dataclasses import dataclass

from pricetracker.core.models import DiscountRecord
from pricetracker.parsers.normalizers import format_number, to_float

LOGGER = logging.getLogger(__name__)

FINAL_PRICE_TOLERANCE = 0.01

_QUANTITY_PERCENTAGE_RE = re.compile(r"满(?P<threshold>\d+)件(?P<rate>\d+(?:\.\d+)?)折")
_SPEND_PERCENTAGE_RE = re.compile(r"满(?P<threshold>\d+)元(?P<rate>\d+(?:\.\d+)?)折")
_SPEND_REDUCTION_RE = re.compile(r"满(?P<threshold>\d+)减(?P<amount>\d+(?:\.\d+)?)")
_QUANTITY_REDUCTION_RE = re.compile(r"满(?P<threshold>\d+)件减(?P<amount>\d+(?:\.\d+)?)")
_PER_PIECES_RE = re.compile(r"每满(?P<threshold>\d+)件减(?P<amount>\d+(?:\.\d+)?)")
_PER_AMOUNT_RE = re.compile(r"每满(?P<threshold>\d+)减(?P<amount>\d+(?:\.\d+)?)")
_PURCHASE_LIMIT_RE = re.compile(r"^(?P<limit>\d+)-(?P<amount>\d+(?:\.\d+)?)$")


@dataclass(frozen=True, slots=True)
class Savings:
    amount: float
    percentage: float


@dataclass(frozen=True, slots=True)
class PriceEstimate:
    final_price: float
    applied: tuple[DiscountRecord, ...]
    skipped: tuple[DiscountRecord, ...]
    formula: str


def calculate_savings(original_price: float, final_price: float) -> Savings:
    if original_price <= 0 or final_price <= 0:
        return Savings(amount=0.0, percentage=0.0)

    amount = round(original_price - final_price, 2)
    percentage = round(amount / original_price * 100, 1)
    return Savings(amount=amount, percentage=percentage)


def _rate(record: DiscountRecord, original_price: float, quantity: int) -> float | None:
    if record.kind == "percentage":
        return to_float(record.value)

    value = str(record.value)
    if record.kind == "quantity_threshold_percentage":
        match = _QUANTITY_PERCENTAGE_RE.search(value)
        if match and int(match.group("threshold")) <= quantity:
            return float(match.group("rate"))
    elif record.kind == "spend_threshold_percentage":
        match = _SPEND_PERCENTAGE_RE.search(value)
        if match and original_price >= int(match.group("threshold")):
            return float(match.group("rate"))
    return None


def _reduction(record: DiscountRecord, original_price: float, quantity: int) -> float | None:
    if record.kind in ("instant_reduction", "first_purchase"):
        return to_float(record.value)

    value = str(record.value)
    if record.kind == "spend_threshold_reduction":
        match = _SPEND_REDUCTION_RE.search(value)
        if match and original_price >= int(match.group("threshold")):
            return float(match.group("amount"))
    elif record.kind == "quantity_threshold_reduction":
        match = _QUANTITY_REDUCTION_RE.search(value)
        if match and int(match.group("threshold")) <= quantity:
            return float(match.group("amount"))
    elif record.kind == "per_threshold_reduction":
        match = _PER_PIECES_RE.search(value)
        if match:
            times = quantity // int(match.group("threshold"))
            return times * float(match.group("amount")) if times else None
        match = _PER_AMOUNT_RE.search(value)
        if match:
            times = math.floor(original_price / int(match.group("threshold")))
            return times * float(match.group("amount")) if times else None
    elif record.kind == "purchase_limit":
        match = _PURCHASE_LIMIT_RE.match(value)
        if match and int(match.group("limit")) >= quantity:
            return float(match.group("amount"))
    return None


def estimate_final_price(
    original_price: float,
    discounts: Iterable[DiscountRecord],
    quantity: int = 1,
) -> PriceEstimate:
    """
    Replay discount records against a list price.

    Rates multiply first, then fixed amounts come off the result. A record
    whose condition does not hold, or whose value cannot be read, ends up in
    `skipped` instead of silently changing the price.
    """
    applied: list[DiscountRecord] = []
    skipped: list[DiscountRecord] = []
    rates: list[float] = []
    reductions: list[float] = []

    for record in discounts:
        rate = _rate(record, original_price, quantity)
        if rate is not None and rate > 0:
            rates.append(rate)
            applied.append(record)
            continue

        amount = _reduction(record, original_price, quantity)
        if amount is not None and amount > 0:
            reductions.append(amount)
            applied.append(record)
            continue

        skipped.append(record)

    factor = 1.0
    for rate in rates:
        factor *= rate / 10

    price = original_price * factor - sum(reductions)
    final_price = max(round(price, 2), 0.0)

    head = format_number(original_price)
    if rates:
        head = f"{head} × {factor:.3f}"
    parts = [head, *(format_number(amount) for amount in reductions)]
    formula = f"{final_price:.2f} = {' - '.join(parts)}"

    if skipped:
        LOGGER.debug("Skipped %d discount records: %s", len(skipped), skipped)
    return PriceEstimate(
        final_price=final_price,
        applied=tuple(applied),
        skipped=tuple(skipped),
        formula=formula,
    )


def matches_final_price(estimate: PriceEstimate, final_price: float) -> bool:
    return abs(estimate.final_price - final_price) < FINAL_PRICE_TOLERANCE
