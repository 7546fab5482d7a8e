from __future__ import annotations

import re

FEED_KEYS = ("wareInfoReadMap", "price")

CN_BRAND_SLASH_RE = re.compile(r"^(?P<latin>[A-Za-z][A-Za-z0-9\s&]+)/\s*(?P<chinese>[一-龥]+)")
CN_BRAND_PAREN_RE = re.compile(r"^(?P<chinese>[一-龥]+)[（(](?P<latin>[A-Za-z][A-Za-z0-9\s&]+)[）)]")

TITLE_SLASH_BRAND_RE = re.compile(r"^(?P<latin>[A-Z][A-Za-z0-9\s&]+)/\s*[一-龥]+")
TITLE_PAREN_BRAND_RE = re.compile(r"^[一-龥]+[（(](?P<latin>[A-Z][A-Za-z0-9\s&]+)[）)]")

GOVERNMENT_SUBSIDY_MARKER = "政府补贴"
SUBSIDY_TOP_DESC = "补贴"
COMMON_SUBSIDY_RATIOS = (0.05, 0.10, 0.15, 0.20, 0.25, 0.30, 0.35, 0.40, 0.45)

LIMIT_PREFERENCE_TEXT = "限购"
LIMIT_PREFERENCE_TAG = 3
LIMIT_PREFERENCE_VALUE_RE = re.compile(r"购买至少(?P<count>\d+)件时可享受单件价[￥¥](?P<price>\d+(?:\.\d+)?)")
LIMIT_TEXT_RE = re.compile(r"(?P<count>\d+)件")
# 9999-style limits mean "no limit".
MEANINGFUL_LIMIT_MAX = 100

PRODUCT_PAGE_TITLE_SUFFIX_RE = re.compile(r"【行情 报价 价格 评测】-京东$")
SPEC_ITEM_RE = re.compile(r'<div class="name">(?P<key>[^<]+)</div>\s*<div class="text">\s*(?P<value>[^<]+?)\s*</div>')
SPEC_PACKAGE_RE = re.compile(r'<div class="name">包装清单</div>\s*<div class="text">\s*(?P<value>[^<]+?)\s*</div>')
SPEC_BRAND_RE = re.compile(r'<div class="name">品牌</div>\s*<div class="text">\s*<a[^>]*>\s*(?P<brand>[^<]+?)\s*</a>')
SPEC_PRODUCT_ID_RE = re.compile(r'<div class="name">商品编号</div>\s*<div class="text">\s*(?P<product_id>\d+)\s*</div>')
PAGE_TITLE_RE = re.compile(r"<title>(?P<title>[^<]+)</title>")
SPEC_SKIPPED_KEYS = ("品牌", "商品编号")
PACKAGE_CONTENTS_KEY = "包装清单"
