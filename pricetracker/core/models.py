from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Literal, Union

from pricetracker.urls import clean_product_url

Unit = Literal["ml", "l", "liang", "jin", "kg", "g", "piece"]
DiscountOwner = Literal["government", "platform", "store", "payment"]
DiscountKind = Literal[
    "percentage",
    "spend_threshold_percentage",
    "quantity_threshold_percentage",
    "spend_threshold_reduction",
    "quantity_threshold_reduction",
    "per_threshold_reduction",
    "instant_reduction",
    "first_purchase",
    "purchase_limit",
]
DiscountValue = Union[float, str]

UNITS: tuple[Unit, ...] = ("ml", "l", "liang", "jin", "kg", "g", "piece")
DISCOUNT_OWNERS: tuple[DiscountOwner, ...] = ("government", "platform", "store", "payment")
DISCOUNT_KINDS: tuple[DiscountKind, ...] = (
    "percentage",
    "spend_threshold_percentage",
    "quantity_threshold_percentage",
    "spend_threshold_reduction",
    "quantity_threshold_reduction",
    "per_threshold_reduction",
    "instant_reduction",
    "first_purchase",
    "purchase_limit",
)

CATEGORIES: tuple[str, ...] = (
    "電器",
    "數碼",
    "家電",
    "家俱",
    "廚用",
    "衞浴",
    "家紡",
    "衣物",
    "服裝",
    "書籍",
    "食品",
    "醫用",
    "藥用",
    "藥材",
    "水果",
    "零食",
    "飲品",
    "五金",
    "糧食",
)
CATEGORY_KEYS: tuple[str, ...] = (
    "electronics",
    "digital",
    "appliances",
    "furniture",
    "kitchen",
    "bathroom",
    "textiles",
    "clothing",
    "apparel",
    "books",
    "food",
    "medical",
    "pharmacy",
    "herbs",
    "fruit",
    "snacks",
    "drinks",
    "hardware",
    "grain",
)


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass(frozen=True, slots=True)
class DiscountRecord:
    owner: DiscountOwner
    kind: DiscountKind
    value: DiscountValue


@dataclass(frozen=True, slots=True)
class ParsedProduct:
    title: str | None = None
    brand: str | None = None
    price: float | None = None
    original_price: float | None = None
    specification: str | None = None
    quantity: float | None = None
    unit: Unit | None = None
    comparison_unit: Unit | None = None
    source_address: str | None = None
    discounts: tuple[DiscountRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["discounts"] = list(out["discounts"])
        return out


@dataclass(frozen=True, slots=True)
class ParseResult:
    success: bool
    data: ParsedProduct | None = None
    warnings: tuple[str, ...] = ()
    error: str | None = None

    @classmethod
    def ok(cls, data: ParsedProduct, warnings: list[str] | tuple[str, ...] = ()) -> ParseResult:
        return cls(success=True, data=data, warnings=tuple(warnings))

    @classmethod
    def fail(cls, error: str) -> ParseResult:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            out["data"] = self.data.to_dict()
        if self.warnings:
            out["warnings"] = list(self.warnings)
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(slots=True)
class PriceEntry:
    """
    A tracked price observation as the table/CSV/storage layers see it.
    """

    title: str
    brand: str
    category: str
    price: float
    url: str = ""
    specification: str | None = None
    observed_on: date = field(default_factory=date.today)
    remark: str | None = None

    id: int | None = None
    created_at: datetime | None = None

    @classmethod
    def from_parsed(
        cls,
        product: ParsedProduct,
        *,
        category: str,
        observed_on: date | None = None,
        remark: str | None = None,
    ) -> PriceEntry:
        return cls(
            title=product.title or "",
            brand=product.brand or "",
            category=category,
            price=product.price if product.price is not None else (product.original_price or 0.0),
            url=clean_product_url(product.source_address or ""),
            specification=product.specification or None,
            observed_on=observed_on or date.today(),
            remark=remark,
        )

    def with_identity(self, entry_id: int, created_at: datetime) -> PriceEntry:
        return replace(self, id=entry_id, created_at=created_at)
