from __future__ import annotations

from collections.abc import Callable

from .core import (
    BaseProductParser,
    DiscountRecord,
    DispatchEvent,
    ParsedProduct,
    ParseResult,
    ParserDispatcher,
    PriceEntry,
)
from .parsers import register_builtin_parsers
from .units import ceil_to_two, convert_unit, unit_price


def build_default_dispatcher(on_event: Callable[[DispatchEvent], None] | None = None) -> ParserDispatcher:
    dispatcher = ParserDispatcher(on_event=on_event)
    register_builtin_parsers(dispatcher)
    return dispatcher


_DEFAULT_DISPATCHER = build_default_dispatcher()


def parse_product_info(text: str) -> ParseResult:
    return _DEFAULT_DISPATCHER.parse(text)


__all__ = [
    "BaseProductParser",
    "DiscountRecord",
    "DispatchEvent",
    "ParseResult",
    "ParsedProduct",
    "ParserDispatcher",
    "PriceEntry",
    "build_default_dispatcher",
    "ceil_to_two",
    "convert_unit",
    "parse_product_info",
    "register_builtin_parsers",
    "unit_price",
]
