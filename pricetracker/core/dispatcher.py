from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, NamedTuple

from .base import BaseProductParser
from .models import ParseResult

LOGGER = logging.getLogger(__name__)

EMPTY_INPUT_ERROR = "Empty input"

SniffFn = Callable[[str], bool]
ExtractFn = Callable[[str], ParseResult]
DispatchStage = Literal["sniff", "selected", "failed", "succeeded"]


class ParserEntry(NamedTuple):
    name: str
    sniff: SniffFn
    extract: ExtractFn


@dataclass(frozen=True, slots=True)
class DispatchEvent:
    stage: DispatchStage
    parser_name: str
    detail: str | None = None


class ParserDispatcher:
    def __init__(self, on_event: Callable[[DispatchEvent], None] | None = None) -> None:
        self._entries: list[ParserEntry] = []
        self._on_event = on_event

    def register(self, parser: BaseProductParser) -> None:
        self.register_functions(parser.name(), parser.sniff, parser.extract)

    def register_functions(self, name: str, sniff: SniffFn, extract: ExtractFn) -> None:
        parser_name = name.strip()
        if not parser_name:
            raise ValueError("Parser name must be non-empty")
        if any(entry.name.lower() == parser_name.lower() for entry in self._entries):
            raise ValueError(f"Parser '{parser_name}' is already registered")

        self._entries.append(ParserEntry(parser_name, sniff, extract))

    def registered_parsers(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self._entries)

    def supported_formats(self) -> str:
        return "\n".join(f"- {name}" for name in self.registered_parsers())

    def parse(self, text: str) -> ParseResult:
        trimmed = (text or "").strip()
        if not trimmed:
            return ParseResult.fail(EMPTY_INPUT_ERROR)

        for entry in self._entries:
            if not self._sniff(entry, trimmed):
                continue

            LOGGER.info("Using parser: %s", entry.name)
            self._emit("selected", entry.name)
            result = self._extract(entry, trimmed)
            if result.success:
                self._emit("succeeded", entry.name)
                return result

            LOGGER.warning("%s failed: %s", entry.name, result.error)
            self._emit("failed", entry.name, result.error)

        return ParseResult.fail(f"Unsupported format. Supported formats:\n{self.supported_formats()}")

    def _sniff(self, entry: ParserEntry, text: str) -> bool:
        try:
            matched = bool(entry.sniff(text))
        except Exception:
            LOGGER.warning("%s sniff raised, treating as no match", entry.name, exc_info=True)
            matched = False

        self._emit("sniff", entry.name, "match" if matched else "no match")
        return matched

    @staticmethod
    def _extract(entry: ParserEntry, text: str) -> ParseResult:
        try:
            return entry.extract(text)
        except Exception as exc:
            LOGGER.warning("%s extract raised", entry.name, exc_info=True)
            return ParseResult.fail(str(exc) or exc.__class__.__name__)

    def _emit(self, stage: DispatchStage, parser_name: str, detail: str | None = None) -> None:
        if self._on_event is None:
            return
        self._on_event(DispatchEvent(stage=stage, parser_name=parser_name, detail=detail))
