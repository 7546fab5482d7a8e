from .base import BaseProductParser
from .dispatcher import DispatchEvent, ParserDispatcher, ParserEntry
from .models import (
    DiscountKind,
    DiscountOwner,
    DiscountRecord,
    ParsedProduct,
    ParseResult,
    PriceEntry,
    Unit,
)

__all__ = [
    "BaseProductParser",
    "DiscountKind",
    "DiscountOwner",
    "DiscountRecord",
    "DispatchEvent",
    "ParseResult",
    "ParsedProduct",
    "ParserDispatcher",
    "ParserEntry",
    "PriceEntry",
    "Unit",
]
