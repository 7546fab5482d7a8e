from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .models import ParseResult

LOGGER = logging.getLogger(__name__)


class BaseProductParser(ABC):
    """
    One source format: a cheap `sniff` predicate plus a full `extract`.

    `extract` never raises; subclasses implement `_extract` and let any failure
    propagate to here, where it becomes a failed ParseResult.
    """

    parser_name: str

    def name(self) -> str:
        return self.parser_name

    @abstractmethod
    def sniff(self, text: str) -> bool:
        raise NotImplementedError

    def extract(self, text: str) -> ParseResult:
        try:
            return self._extract(text)
        except Exception as exc:
            LOGGER.debug("%s failed to extract", self.parser_name, exc_info=True)
            return ParseResult.fail(str(exc) or exc.__class__.__name__)

    @abstractmethod
    def _extract(self, text: str) -> ParseResult:
        raise NotImplementedError
