from __future__ import annotations

from pricetracker.core.dispatcher import ParserDispatcher

from .handler import TaobaoProductParser
from .parameters import ParameterBlock, parse_parameter_block


def register(dispatcher: ParserDispatcher) -> None:
    dispatcher.register(TaobaoProductParser())


__all__ = ["ParameterBlock", "TaobaoProductParser", "parse_parameter_block", "register"]
