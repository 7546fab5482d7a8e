from __future__ import annotations

import logging
import math

from pricetracker.core.models import DiscountOwner, DiscountRecord

from ..discounts import classify_promotion
from ..normalizers import dig, format_number, to_float, to_price
from .patterns import (
    COMMON_SUBSIDY_RATIOS,
    GOVERNMENT_SUBSIDY_MARKER,
    LIMIT_PREFERENCE_TAG,
    LIMIT_PREFERENCE_TEXT,
    LIMIT_PREFERENCE_VALUE_RE,
    LIMIT_TEXT_RE,
    MEANINGFUL_LIMIT_MAX,
    SUBSIDY_TOP_DESC,
)

LOGGER = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def discount_owner(feed: dict) -> DiscountOwner:
    return "store" if dig(feed, "wareInfoReadMap", "vender_id") else "platform"


def _subtrahends(feed: dict) -> list[dict]:
    raw = dig(feed, "preference", "preferencePopUp", "expression", "subtrahends")
    if not isinstance(raw, list):
        return []
    return [item for item in raw if isinstance(item, dict)]


def _is_subsidy(subtrahend: dict) -> bool:
    description = str(subtrahend.get("preferenceDesc") or "")
    return subtrahend.get("topDesc") == SUBSIDY_TOP_DESC or GOVERNMENT_SUBSIDY_MARKER in description


def _quantity_rate(record: DiscountRecord) -> float | None:
    if record.kind != "quantity_threshold_percentage" or not isinstance(record.value, str):
        return None
    head, _, tail = record.value.partition("件")
    threshold = to_float(head.lstrip("满"))
    rate = to_float(tail.rstrip("折"))
    if threshold is None or rate is None or threshold > 1:
        return None
    return rate


def subsidy_from_subtrahend(subtrahend: dict, running_price: float) -> DiscountRecord | None:
    amount = to_float(subtrahend.get("preferenceAmount"))
    if amount is None:
        return None

    if running_price > 0:
        ratio = amount / running_price
        looks_like_percentage = any(abs(ratio - pct) < 0.01 for pct in COMMON_SUBSIDY_RATIOS)
        if looks_like_percentage and ratio < 0.5:
            return DiscountRecord(
                owner="government",
                kind="percentage",
                value=_round_half_up((1 - ratio) * 100) / 10,
            )

    return DiscountRecord(owner="government", kind="instant_reduction", value=amount)


def extract_promotions(feed: dict, owner: DiscountOwner, base_price: float | None) -> list[DiscountRecord]:
    subtrahends = _subtrahends(feed)
    if not subtrahends:
        return []

    records: list[DiscountRecord] = []
    running_price = base_price or 0.0

    for subtrahend in subtrahends:
        description = subtrahend.get("preferenceDesc")
        if not description or _is_subsidy(subtrahend):
            continue

        record = classify_promotion(str(description), owner)
        if record is None:
            LOGGER.debug("Unrecognised promotion description: %r", description)
            continue

        records.append(record)
        rate = _quantity_rate(record)
        if rate is not None:
            running_price *= rate / 10

    for subtrahend in subtrahends:
        if not subtrahend.get("preferenceDesc") or not _is_subsidy(subtrahend):
            continue
        record = subsidy_from_subtrahend(subtrahend, running_price)
        if record is not None:
            records.append(record)

    return records


def final_price_subsidy(feed: dict) -> DiscountRecord | None:
    content = dig(feed, "price", "finalPrice", "priceContent")
    if not isinstance(content, str) or GOVERNMENT_SUBSIDY_MARKER not in content:
        return None

    final_price = to_float(dig(feed, "price", "finalPrice", "price")) or 0.0
    current_price = to_float(dig(feed, "price", "p")) or 0.0
    if final_price <= 0 or current_price <= 0 or final_price >= current_price:
        return None

    return DiscountRecord(
        owner="government",
        kind="percentage",
        value=round(final_price / current_price * 10, 1),
    )


def _limit_from_preferences(feed: dict, original_price: float | None, owner: DiscountOwner) -> DiscountRecord | None:
    preferences = dig(feed, "preference", "preferencePopUp", "morePreference")
    if not isinstance(preferences, list):
        return None

    for preference in preferences:
        if not isinstance(preference, dict):
            continue
        if preference.get("text") != LIMIT_PREFERENCE_TEXT or preference.get("tag") != LIMIT_PREFERENCE_TAG:
            continue

        match = LIMIT_PREFERENCE_VALUE_RE.search(str(preference.get("value") or ""))
        if match is None:
            return None

        limit_price = float(match.group("price"))
        if original_price and limit_price < original_price:
            amount = round(original_price - limit_price, 2)
            return DiscountRecord(
                owner=owner,
                kind="purchase_limit",
                value=f"{int(match.group('count'))}-{format_number(amount)}",
            )
        return None
    return None


def purchase_limit(
    feed: dict,
    price: float | None,
    original_price: float | None,
    owner: DiscountOwner,
) -> DiscountRecord | None:
    record = _limit_from_preferences(feed, original_price, owner)
    if record is not None:
        return record

    limit_text = dig(feed, "commonLimitInfo", "limitText")
    if not isinstance(limit_text, str) or not limit_text:
        return None

    match = LIMIT_TEXT_RE.search(limit_text)
    if match is None:
        return None

    limit = int(match.group("count"))
    if limit >= MEANINGFUL_LIMIT_MAX:
        return None

    value = str(limit)
    if price and original_price and price < original_price:
        value = f"{limit}-{format_number(round(original_price - price, 2))}"
    return DiscountRecord(owner=owner, kind="purchase_limit", value=value)


def extract_discounts(feed: dict, price: float | None, original_price: float | None) -> list[DiscountRecord]:
    """
    Promotions, then government subsidy, then purchase limit, then a plain
    instant reduction for whatever price gap nothing else explains. The last two
    only fire when nothing earlier produced a record, which loses information
    on purpose when several mechanisms overlap.
    """
    owner = discount_owner(feed)
    base_price = to_price(dig(feed, "preference", "preferencePopUp", "expression", "basePrice")) or original_price

    records = extract_promotions(feed, owner, base_price)

    if not any(record.owner == "government" for record in records):
        subsidy = final_price_subsidy(feed)
        if subsidy is not None:
            records.append(subsidy)

    if not records:
        limit = purchase_limit(feed, price, original_price, owner)
        if limit is not None:
            records.append(limit)

    if not records and price and original_price and price < original_price:
        records.append(
            DiscountRecord(
                owner=owner,
                kind="instant_reduction",
                value=round(original_price - price, 2),
            )
        )

    return records
