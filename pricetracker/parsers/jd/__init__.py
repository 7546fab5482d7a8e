from __future__ import annotations

from pricetracker.core.dispatcher import ParserDispatcher

from .handler import JDProductParser
from .spec_html import JDSpecSheet, parse_jd_spec_html


def register(dispatcher: ParserDispatcher) -> None:
    dispatcher.register(JDProductParser())


__all__ = ["JDProductParser", "JDSpecSheet", "parse_jd_spec_html", "register"]
