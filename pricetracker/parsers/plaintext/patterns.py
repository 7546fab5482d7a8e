from __future__ import annotations

import re

DISCOUNT_TRIGGERS = ("减", "折", "立减", "满")

# Tried in order on the first line; the first match wins.
MARKED_BRAND_RE = re.compile(r"^(?P<brand>[^牌]{2,6})牌(?P<rest>.+)$")
PARENTHESIZED_BRAND_RE = re.compile(r"^(?P<brand>[^（(]+)[（(](?P<inner>[^）)]+)[）)](?P<rest>.+)$")
SEPARATED_BRAND_RE = re.compile(r"^(?P<brand>[^\s，。、]{2,6})[，。、\s](?P<rest>.+)$")

BRAND_MISSING_WARNING = "Brand not extracted, please fill manually"
