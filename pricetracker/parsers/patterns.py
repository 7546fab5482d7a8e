from __future__ import annotations

import re

CURRENCY_GLYPHS = ("¥", "￥")

CURRENCY_RE = re.compile(r"[¥￥]")
CURRENCY_PRICE_RE = re.compile(r"[¥￥]\s*(?P<value>\d+(?:\.\d+)?)")
BARE_NUMBER_RE = re.compile(r"(?P<value>\d+(?:\.\d+)?)")
NUMERIC_LINE_RE = re.compile(r"^\d+(?:\.\d+)?$")

CJK_RE = re.compile(r"[一-龥]")
LATIN_RE = re.compile(r"[A-Za-z]")
CAPITAL_LATIN_LEADING_RE = re.compile(r"^[A-Z]")
MULTISPACE_RE = re.compile(r"\s+")

# Longest tokens first so 毫升 wins over 升 and kg over g.
UNIT_TOKENS: dict[str, str] = {
    "毫升": "ml",
    "千克": "kg",
    "公斤": "kg",
    "克": "g",
    "升": "l",
    "斤": "jin",
    "两": "liang",
    "兩": "liang",
    "ml": "ml",
    "mL": "ml",
    "ML": "ml",
    "kg": "kg",
    "KG": "kg",
    "Kg": "kg",
    "g": "g",
    "G": "g",
    "l": "l",
    "L": "l",
}

_UNIT_ALTERNATION = "|".join(sorted((re.escape(token) for token in UNIT_TOKENS), key=len, reverse=True))
QUANTITY_RE = re.compile(rf"(?P<q>\d+(?:\.\d+)?)\s*(?P<u>{_UNIT_ALTERNATION})(?![A-Za-z])")

QUANTITY_FIELD_LABELS = ("净含量", "规格", "容量", "重量")
