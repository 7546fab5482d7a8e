from __future__ import annotations

from pricetracker.core.dispatcher import ParserDispatcher

from .handler import PlainTextParser


def register(dispatcher: ParserDispatcher) -> None:
    dispatcher.register(PlainTextParser())


__all__ = ["PlainTextParser", "register"]
