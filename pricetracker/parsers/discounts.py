from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from pricetracker.core.models import DiscountKind, DiscountOwner, DiscountRecord, DiscountValue

from .normalizers import format_number

LOGGER = logging.getLogger(__name__)

_NUMBER = r"\d+(?:\.\d+)?"


@dataclass(frozen=True, slots=True)
class DiscountRule:
    name: str
    pattern: re.Pattern[str]
    kind: DiscountKind
    build_value: Callable[[re.Match[str]], DiscountValue]
    owner: DiscountOwner | None = None

    def apply(self, text: str, owner: DiscountOwner | None = None) -> DiscountRecord | None:
        match = self.pattern.search(text)
        if match is None:
            return None

        resolved_owner = owner or self.owner
        if resolved_owner is None:
            raise ValueError(f"Discount rule '{self.name}' needs an owner")

        LOGGER.debug("Discount rule %s matched %r", self.name, match.group(0))
        return DiscountRecord(owner=resolved_owner, kind=self.kind, value=self.build_value(match))


def _amount(match: re.Match[str]) -> float:
    return float(match.group("amount"))


def _spend_reduction_text(match: re.Match[str]) -> str:
    return f"满{int(match.group('threshold'))}减{int(match.group('amount'))}"


SPEND_THRESHOLD_REDUCTION = DiscountRule(
    name="spend_threshold_reduction",
    pattern=re.compile(r"满(?P<threshold>\d+)减(?P<amount>\d+)"),
    kind="spend_threshold_reduction",
    build_value=_spend_reduction_text,
    owner="platform",
)

INSTANT_REDUCTION = DiscountRule(
    name="instant_reduction",
    pattern=re.compile(rf"立减(?P<amount>{_NUMBER})元?"),
    kind="instant_reduction",
    build_value=_amount,
    owner="platform",
)

STRAIGHT_PERCENTAGE = DiscountRule(
    name="straight_percentage",
    pattern=re.compile(rf"(?P<amount>{_NUMBER})折"),
    kind="percentage",
    build_value=_amount,
    owner="store",
)

STORE_DIRECT_REDUCTION = DiscountRule(
    name="store_direct_reduction",
    pattern=re.compile(rf"直降(?P<amount>{_NUMBER})元?"),
    kind="instant_reduction",
    build_value=_amount,
    owner="store",
)

COIN_REDUCTION = DiscountRule(
    name="coin_reduction",
    pattern=re.compile(rf"淘金币已抵(?P<amount>{_NUMBER})元?"),
    kind="instant_reduction",
    build_value=_amount,
    owner="platform",
)

QUANTITY_THRESHOLD_PERCENTAGE = DiscountRule(
    name="quantity_threshold_percentage",
    pattern=re.compile(rf"满(?P<threshold>\d+)(?:件享|件|享)(?P<rate>{_NUMBER})折"),
    kind="quantity_threshold_percentage",
    build_value=lambda m: f"满{m.group('threshold')}件{format_number(float(m.group('rate')))}折",
)

SPEND_THRESHOLD_PERCENTAGE = DiscountRule(
    name="spend_threshold_percentage",
    pattern=re.compile(rf"满(?P<threshold>\d+)元(?P<rate>{_NUMBER})折"),
    kind="spend_threshold_percentage",
    build_value=lambda m: f"满{m.group('threshold')}元{format_number(float(m.group('rate')))}折",
)

PER_PIECES_REDUCTION = DiscountRule(
    name="per_pieces_reduction",
    pattern=re.compile(rf"每满(?P<threshold>\d+)件减(?P<amount>{_NUMBER})"),
    kind="per_threshold_reduction",
    build_value=lambda m: f"每满{m.group('threshold')}件减{format_number(float(m.group('amount')))}",
)

PER_AMOUNT_REDUCTION = DiscountRule(
    name="per_amount_reduction",
    pattern=re.compile(rf"每满(?P<threshold>\d+)减(?P<amount>{_NUMBER})"),
    kind="per_threshold_reduction",
    build_value=lambda m: f"每满{m.group('threshold')}减{format_number(float(m.group('amount')))}",
)

QUANTITY_THRESHOLD_REDUCTION = DiscountRule(
    name="quantity_threshold_reduction",
    pattern=re.compile(r"满(?P<threshold>\d+)件减(?P<amount>\d+)"),
    kind="quantity_threshold_reduction",
    build_value=lambda m: f"满{m.group('threshold')}件减{m.group('amount')}",
)

FIRST_PURCHASE = DiscountRule(
    name="first_purchase",
    pattern=re.compile(rf"首购礼金\s*(?P<amount>{_NUMBER})元?"),
    kind="first_purchase",
    build_value=_amount,
)

# Plain text listings: every rule is tried on every line.
PLAIN_TEXT_LINE_RULES: tuple[DiscountRule, ...] = (
    SPEND_THRESHOLD_REDUCTION,
    INSTANT_REDUCTION,
    STRAIGHT_PERCENTAGE,
)

TAOBAO_LINE_RULES: tuple[DiscountRule, ...] = (
    SPEND_THRESHOLD_REDUCTION,
    INSTANT_REDUCTION,
    STORE_DIRECT_REDUCTION,
    COIN_REDUCTION,
    STRAIGHT_PERCENTAGE,
)

# Promotion descriptions: first matching rule wins, most specific first.
PROMOTION_RULES: tuple[DiscountRule, ...] = (
    QUANTITY_THRESHOLD_PERCENTAGE,
    SPEND_THRESHOLD_PERCENTAGE,
    PER_PIECES_REDUCTION,
    PER_AMOUNT_REDUCTION,
    QUANTITY_THRESHOLD_REDUCTION,
    SPEND_THRESHOLD_REDUCTION,
    FIRST_PURCHASE,
)


def scan_lines(lines: Iterable[str], rules: Sequence[DiscountRule]) -> list[DiscountRecord]:
    records: list[DiscountRecord] = []
    for line in lines:
        for rule in rules:
            record = rule.apply(line)
            if record is not None:
                records.append(record)
    return records


def classify_promotion(
    description: str,
    owner: DiscountOwner,
    rules: Sequence[DiscountRule] = PROMOTION_RULES,
) -> DiscountRecord | None:
    for rule in rules:
        record = rule.apply(description, owner=owner)
        if record is not None:
            return record
    return None
