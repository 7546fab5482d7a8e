from __future__ import annotations

import json
import unittest

from pricetracker.core.models import DiscountRecord
from pricetracker.parsers.jd.handler import JDProductParser


def _feed(**sections) -> str:
    return json.dumps(sections, ensure_ascii=False)


class JDSniffTests(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = JDProductParser()

    def test_accepts_feed_with_known_keys(self) -> None:
        self.assertTrue(self.parser.sniff(_feed(price={"p": "1"})))
        self.assertTrue(self.parser.sniff("  " + _feed(wareInfoReadMap={"sku_name": "x"})))

    def test_rejects_other_inputs(self) -> None:
        self.assertFalse(self.parser.sniff(""))
        self.assertFalse(self.parser.sniff("   "))
        self.assertFalse(self.parser.sniff('{"other": 1}'))
        self.assertFalse(self.parser.sniff('{"price": '))
        self.assertFalse(self.parser.sniff('[{"price": {"p": "1"}}]'))
        self.assertFalse(self.parser.sniff("三九牌感冒灵颗粒\n¥ 30.00"))

    def test_name(self) -> None:
        self.assertEqual(self.parser.name(), "JD.com JSON Parser")


class JDExtractTests(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = JDProductParser()

    def _extract(self, **sections):
        result = self.parser.extract(_feed(**sections))
        self.assertTrue(result.success, result.error)
        return result

    def test_quantity_from_title(self) -> None:
        result = self._extract(
            wareInfoReadMap={"sku_name": "Product 500ml bottle", "cn_brand": "Brand"},
            price={"p": "50.00"},
        )

        data = result.data
        self.assertEqual(data.title, "Product 500ml bottle")
        self.assertEqual(data.brand, "Brand")
        self.assertEqual(data.price, 50.0)
        self.assertEqual(data.quantity, 500)
        self.assertEqual(data.unit, "ml")
        self.assertEqual(data.comparison_unit, "jin")
        self.assertEqual(result.warnings, ())

    def test_title_keeps_quantity_and_last_mention_wins(self) -> None:
        data = self._extract(
            wareInfoReadMap={"sku_name": "洗衣液 2kg 加赠 500g", "cn_brand": "蓝月亮"},
            price={"p": "39.9"},
        ).data

        self.assertEqual(data.title, "洗衣液 2kg 加赠 500g")
        self.assertEqual((data.quantity, data.unit), (500, "g"))

    def test_defaults_to_one_piece(self) -> None:
        data = self._extract(wareInfoReadMap={"sku_name": "数据线", "cn_brand": "绿联"}, price={"p": "19"}).data

        self.assertEqual((data.quantity, data.unit, data.comparison_unit), (1, "piece", "piece"))

    def test_parenthesized_brand_is_canonicalized(self) -> None:
        data = self._extract(wareInfoReadMap={"sku_name": "豆浆机", "cn_brand": "九阳（Joyoung）"}, price={"p": "299"}).data

        self.assertEqual(data.brand, "九阳/Joyoung")

    def test_latin_first_brand_is_swapped(self) -> None:
        data = self._extract(wareInfoReadMap={"sku_name": "iPhone", "cn_brand": "Apple/苹果"}, price={"p": "5999"}).data

        self.assertEqual(data.brand, "苹果/Apple")

    def test_latin_brand_recovered_from_title(self) -> None:
        data = self._extract(
            wareInfoReadMap={"sku_name": "Apple/苹果 iPhone 15 128GB", "cn_brand": "苹果"},
            price={"p": "5999"},
        ).data

        self.assertEqual(data.brand, "苹果/Apple")
        self.assertEqual(data.unit, "piece")

    def test_latin_brand_recovered_from_parenthesized_title(self) -> None:
        data = self._extract(
            wareInfoReadMap={"sku_name": "九阳（Joyoung）破壁机", "cn_brand": "九阳"},
            price={"p": "399"},
        ).data

        self.assertEqual(data.brand, "九阳/Joyoung")

    def test_missing_fields_are_warnings(self) -> None:
        result = self._extract(price={"op": "0"}, wareInfoReadMap={"product_id": "1"})

        self.assertIsNone(result.data.title)
        self.assertIsNone(result.data.brand)
        self.assertIsNone(result.data.price)
        self.assertEqual(result.warnings, ("Product name not found", "Brand not found", "Price not found"))

    def test_multi_unit_price_takes_priority(self) -> None:
        data = self._extract(
            wareInfoReadMap={"sku_name": "x", "cn_brand": "y"},
            price={"multiUnitPrice": {"price": "45"}, "finalPrice": {"price": "48"}, "p": "50", "op": "60"},
        ).data

        self.assertEqual(data.price, 45.0)
        self.assertEqual(data.original_price, 60.0)

    def test_multi_unit_price_falls_back_to_current_price(self) -> None:
        data = self._extract(
            wareInfoReadMap={"sku_name": "x", "cn_brand": "y"},
            price={"multiUnitPrice": "45", "p": "50"},
        ).data

        self.assertEqual((data.price, data.original_price), (45.0, 50.0))

    def test_final_price_uses_current_price_as_original(self) -> None:
        data = self._extract(
            wareInfoReadMap={"sku_name": "x", "cn_brand": "y"},
            price={"finalPrice": {"price": "45", "priceContent": "政府补贴价"}, "p": "50", "op": "60"},
        ).data

        self.assertEqual((data.price, data.original_price), (45.0, 50.0))
        self.assertEqual(data.discounts, (DiscountRecord("government", "percentage", 9.0),))

    def test_current_price_with_regular_price(self) -> None:
        data = self._extract(
            wareInfoReadMap={"sku_name": "x", "cn_brand": "y"},
            price={"p": "50", "regularPrice": "70", "op": "60"},
        ).data

        self.assertEqual((data.price, data.original_price), (50.0, 70.0))

    def test_original_price_is_last_resort(self) -> None:
        data = self._extract(wareInfoReadMap={"sku_name": "x", "cn_brand": "y"}, price={"op": "60"}).data

        self.assertEqual(data.price, 60.0)

    def test_specification_sorted_by_sequence(self) -> None:
        attributes = [
            {"saleName": "颜色", "saleValue": "红色", "sequenceNo": 2},
            {"saleName": "净含量", "saleValue": "1kg", "sequenceNo": 1},
        ]
        data = self._extract(
            wareInfoReadMap={
                "sku_name": "大米 500g",
                "cn_brand": "福临门",
                "sale_attributes": json.dumps(attributes, ensure_ascii=False),
            },
            price={"p": "30"},
        ).data

        self.assertEqual(data.specification, "净含量: 1kg\n颜色: 红色")
        self.assertEqual((data.quantity, data.unit), (1, "kg"))

    def test_specification_falls_back_to_size(self) -> None:
        data = self._extract(
            wareInfoReadMap={"sku_name": "x", "cn_brand": "y", "sale_attributes": "not json", "size": "大号"},
            price={"p": "30"},
        ).data

        self.assertEqual(data.specification, "大号")

    def test_source_address_from_product_id(self) -> None:
        data = self._extract(wareInfoReadMap={"sku_name": "x", "product_id": 100012345}, price={"p": "1"}).data

        self.assertEqual(data.source_address, "https://item.jd.com/100012345.html")

    def test_malformed_json_is_a_failure(self) -> None:
        result = self.parser.extract('{"price": ')

        self.assertFalse(result.success)
        self.assertTrue(result.error)
        self.assertIsNone(result.data)

    def test_non_object_json_is_a_failure(self) -> None:
        result = self.parser.extract("[1, 2]")

        self.assertFalse(result.success)

    def test_extract_is_repeatable(self) -> None:
        text = _feed(
            wareInfoReadMap={"sku_name": "牛奶 250ml", "cn_brand": "伊利", "vender_id": "9"},
            price={"p": "40", "op": "50"},
        )

        self.assertEqual(self.parser.extract(text), self.parser.extract(text))


class JDDiscountTests(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = JDProductParser()

    def _discounts(self, **sections) -> tuple[DiscountRecord, ...]:
        sections.setdefault("wareInfoReadMap", {"sku_name": "x", "cn_brand": "y"})
        result = self.parser.extract(_feed(**sections))
        self.assertTrue(result.success, result.error)
        return result.data.discounts

    def test_price_gap_becomes_store_instant_reduction(self) -> None:
        discounts = self._discounts(
            wareInfoReadMap={"sku_name": "x", "cn_brand": "y", "vender_id": "123"},
            price={"p": "80", "op": "100"},
        )

        self.assertEqual(discounts, (DiscountRecord("store", "instant_reduction", 20.0),))

    def test_price_gap_without_vendor_is_platform_owned(self) -> None:
        discounts = self._discounts(price={"p": "80.5", "op": "100"})

        self.assertEqual(discounts, (DiscountRecord("platform", "instant_reduction", 19.5),))

    def test_no_gap_no_discount(self) -> None:
        self.assertEqual(self._discounts(price={"p": "100", "op": "100"}), ())

    def test_promotions_and_percentage_subsidy(self) -> None:
        discounts = self._discounts(
            price={"p": "170", "op": "200"},
            preference={
                "preferencePopUp": {
                    "expression": {
                        "basePrice": "200",
                        "subtrahends": [
                            {"topDesc": "补贴", "preferenceDesc": "政府补贴15%", "preferenceAmount": "30"},
                            {"preferenceDesc": "满199减20"},
                        ],
                    }
                }
            },
        )

        self.assertEqual(
            discounts,
            (
                DiscountRecord("platform", "spend_threshold_reduction", "满199减20"),
                DiscountRecord("government", "percentage", 8.5),
            ),
        )

    def test_quantity_rate_scales_subsidy_base(self) -> None:
        discounts = self._discounts(
            price={"p": "144", "op": "200"},
            preference={
                "preferencePopUp": {
                    "expression": {
                        "basePrice": "200",
                        "subtrahends": [
                            {"preferenceDesc": "满1件享9折"},
                            {"topDesc": "补贴", "preferenceDesc": "国家补贴", "preferenceAmount": "36"},
                        ],
                    }
                }
            },
        )

        self.assertEqual(
            discounts,
            (
                DiscountRecord("platform", "quantity_threshold_percentage", "满1件9折"),
                DiscountRecord("government", "percentage", 8.0),
            ),
        )

    def test_irregular_subsidy_is_an_instant_reduction(self) -> None:
        discounts = self._discounts(
            price={"p": "167", "op": "200"},
            preference={
                "preferencePopUp": {
                    "expression": {
                        "subtrahends": [{"preferenceDesc": "政府补贴", "preferenceAmount": "33"}],
                    }
                }
            },
        )

        self.assertEqual(discounts, (DiscountRecord("government", "instant_reduction", 33.0),))

    def test_promotion_kinds(self) -> None:
        descriptions = ["满2件8.5折", "满300元9折", "每满2件减10", "每满200减25", "满3件减15", "首购礼金 5元"]
        discounts = self._discounts(
            wareInfoReadMap={"sku_name": "x", "cn_brand": "y", "vender_id": "1"},
            price={"p": "100", "op": "100"},
            preference={
                "preferencePopUp": {
                    "expression": {"subtrahends": [{"preferenceDesc": text} for text in descriptions]}
                }
            },
        )

        self.assertEqual(
            discounts,
            (
                DiscountRecord("store", "quantity_threshold_percentage", "满2件8.5折"),
                DiscountRecord("store", "spend_threshold_percentage", "满300元9折"),
                DiscountRecord("store", "per_threshold_reduction", "每满2件减10"),
                DiscountRecord("store", "per_threshold_reduction", "每满200减25"),
                DiscountRecord("store", "quantity_threshold_reduction", "满3件减15"),
                DiscountRecord("store", "first_purchase", 5.0),
            ),
        )

    def test_purchase_limit_from_limit_text(self) -> None:
        discounts = self._discounts(price={"p": "80", "op": "100"}, commonLimitInfo={"limitText": "限购2件"})

        self.assertEqual(discounts, (DiscountRecord("platform", "purchase_limit", "2-20"),))

    def test_purchase_limit_without_price_gap(self) -> None:
        discounts = self._discounts(price={"p": "100", "op": "100"}, commonLimitInfo={"limitText": "每人限购5件"})

        self.assertEqual(discounts, (DiscountRecord("platform", "purchase_limit", "5"),))

    def test_large_limits_are_ignored(self) -> None:
        discounts = self._discounts(price={"p": "80", "op": "100"}, commonLimitInfo={"limitText": "限购9999件"})

        self.assertEqual(discounts, (DiscountRecord("platform", "instant_reduction", 20.0),))

    def test_purchase_limit_from_preference(self) -> None:
        discounts = self._discounts(
            price={"p": "90", "op": "100"},
            preference={
                "preferencePopUp": {
                    "morePreference": [{"text": "限购", "tag": 3, "value": "购买至少2件时可享受单件价￥85"}]
                }
            },
        )

        self.assertEqual(discounts, (DiscountRecord("platform", "purchase_limit", "2-15"),))


if __name__ == "__main__":
    unittest.main()
