from __future__ import annotations

from pricetracker.core.dispatcher import ParserDispatcher

from . import jd
from . import plaintext
from . import taobao


def register_builtin_parsers(dispatcher: ParserDispatcher) -> None:
    jd.register(dispatcher)
    taobao.register(dispatcher)
    plaintext.register(dispatcher)


__all__ = ["register_builtin_parsers"]
