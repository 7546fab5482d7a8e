from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass, field

from .patterns import KNOWN_PARAMETER_KEYS, PARAMETERS_MARKER, SECTION_SUFFIX

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ParameterBlock:
    entries: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.entries.get(key)

    def specification_text(self) -> str | None:
        if not self.entries:
            return None
        return "\n".join(f"{key}: {value}" for key, value in self.entries.items())


def find_parameter_lines(lines: list[str]) -> list[str]:
    try:
        start = lines.index(PARAMETERS_MARKER) + 1
    except ValueError:
        return []

    end = len(lines)
    for index in range(start, len(lines)):
        line = lines[index]
        if line.endswith(SECTION_SUFFIX) and line != PARAMETERS_MARKER:
            end = index
            break
    return lines[start:end]


def detect_flip(block: list[str], known_keys: Collection[str] = KNOWN_PARAMETER_KEYS) -> int:
    """
    Index where the block switches from VALUE-KEY to KEY-VALUE pairs.

    Two known keys in a row mean the first closes a VALUE-KEY pair and the
    second opens a KEY-VALUE one. Without that signal the block gets a single
    ordering by majority vote over non-overlapping pairs: `len(block)` for
    VALUE-KEY throughout, `0` for KEY-VALUE throughout. Short blocks can vote
    wrong; the result is a best guess.
    """
    for index in range(len(block) - 1):
        if block[index] in known_keys and block[index + 1] in known_keys:
            return index + 1

    value_key = 0
    key_value = 0
    for index in range(0, len(block) - 1, 2):
        first_is_key = block[index] in known_keys
        second_is_key = block[index + 1] in known_keys
        if not first_is_key and second_is_key:
            value_key += 1
        elif first_is_key and not second_is_key:
            key_value += 1

    return len(block) if value_key > key_value else 0


def parse_parameter_block(
    lines: list[str],
    known_keys: Collection[str] = KNOWN_PARAMETER_KEYS,
) -> ParameterBlock:
    block = find_parameter_lines(lines)
    result = ParameterBlock()
    if not block:
        return result

    flip = detect_flip(block, known_keys)
    LOGGER.debug("Parameter block: %d lines, flip at %d", len(block), flip)

    index = 0
    while index + 1 < flip:
        value, key = block[index], block[index + 1]
        result.entries[key] = value
        index += 2
    index = max(index, flip)

    while index + 1 < len(block):
        first, second = block[index], block[index + 1]
        if first in known_keys:
            if second in known_keys:
                # key without a value
                index += 1
                continue
            key, value = first, second
        elif flip > 0:
            key, value = first, second
        elif len(first) <= len(second):
            key, value = first, second
        else:
            key, value = second, first

        result.entries[key] = value
        index += 2

    return result
