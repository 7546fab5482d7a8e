from __future__ import annotations

import unittest

from pricetracker.core.models import DiscountRecord
from pricetracker.parsers.discounts import (
    COIN_REDUCTION,
    FIRST_PURCHASE,
    INSTANT_REDUCTION,
    PER_AMOUNT_REDUCTION,
    PER_PIECES_REDUCTION,
    PLAIN_TEXT_LINE_RULES,
    QUANTITY_THRESHOLD_PERCENTAGE,
    SPEND_THRESHOLD_REDUCTION,
    STORE_DIRECT_REDUCTION,
    STRAIGHT_PERCENTAGE,
    classify_promotion,
    scan_lines,
)


class DiscountRuleTests(unittest.TestCase):
    def test_spend_threshold_reduction_keeps_description(self) -> None:
        self.assertEqual(
            SPEND_THRESHOLD_REDUCTION.apply("跨店满300减30"),
            DiscountRecord("platform", "spend_threshold_reduction", "满300减30"),
        )

    def test_instant_reduction_parses_amount(self) -> None:
        self.assertEqual(INSTANT_REDUCTION.apply("超级立减20元"), DiscountRecord("platform", "instant_reduction", 20.0))
        self.assertEqual(INSTANT_REDUCTION.apply("立减7.5"), DiscountRecord("platform", "instant_reduction", 7.5))

    def test_straight_percentage_is_store_owned(self) -> None:
        self.assertEqual(STRAIGHT_PERCENTAGE.apply("限时8.8折"), DiscountRecord("store", "percentage", 8.8))

    def test_store_direct_and_coin_reductions(self) -> None:
        self.assertEqual(STORE_DIRECT_REDUCTION.apply("直降15元"), DiscountRecord("store", "instant_reduction", 15.0))
        self.assertEqual(COIN_REDUCTION.apply("淘金币已抵3.5元"), DiscountRecord("platform", "instant_reduction", 3.5))

    def test_rule_without_default_owner_needs_one(self) -> None:
        with self.assertRaises(ValueError):
            QUANTITY_THRESHOLD_PERCENTAGE.apply("满2件9折")

        self.assertEqual(
            QUANTITY_THRESHOLD_PERCENTAGE.apply("满2件9折", owner="store"),
            DiscountRecord("store", "quantity_threshold_percentage", "满2件9折"),
        )

    def test_no_match_returns_none(self) -> None:
        self.assertIsNone(SPEND_THRESHOLD_REDUCTION.apply("包邮"))
        self.assertIsNone(FIRST_PURCHASE.apply("首单", owner="store"))

    def test_per_threshold_descriptions(self) -> None:
        self.assertEqual(PER_PIECES_REDUCTION.apply("每满2件减10", owner="store").value, "每满2件减10")
        self.assertEqual(PER_AMOUNT_REDUCTION.apply("每满200减25.0", owner="store").value, "每满200减25")


class ScanLinesTests(unittest.TestCase):
    def test_every_matching_rule_fires_per_line(self) -> None:
        records = scan_lines(["满100减10 立减5元 9折", "包邮"], PLAIN_TEXT_LINE_RULES)

        self.assertEqual(
            records,
            [
                DiscountRecord("platform", "spend_threshold_reduction", "满100减10"),
                DiscountRecord("platform", "instant_reduction", 5.0),
                DiscountRecord("store", "percentage", 9.0),
            ],
        )


class ClassifyPromotionTests(unittest.TestCase):
    def test_most_specific_rule_wins(self) -> None:
        cases = {
            "满2件享9折": DiscountRecord("platform", "quantity_threshold_percentage", "满2件9折"),
            "满2件9.5折": DiscountRecord("platform", "quantity_threshold_percentage", "满2件9.5折"),
            "满300元9折": DiscountRecord("platform", "spend_threshold_percentage", "满300元9折"),
            "每满2件减10": DiscountRecord("platform", "per_threshold_reduction", "每满2件减10"),
            "每满200减25": DiscountRecord("platform", "per_threshold_reduction", "每满200减25"),
            "满3件减15": DiscountRecord("platform", "quantity_threshold_reduction", "满3件减15"),
            "满199减20": DiscountRecord("platform", "spend_threshold_reduction", "满199减20"),
            "首购礼金 5元": DiscountRecord("platform", "first_purchase", 5.0),
        }
        for description, expected in cases.items():
            with self.subTest(description=description):
                self.assertEqual(classify_promotion(description, "platform"), expected)

    def test_unknown_description(self) -> None:
        self.assertIsNone(classify_promotion("赠品", "store"))


if __name__ == "__main__":
    unittest.main()
