from __future__ import annotations

import logging
import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

LOGGER = logging.getLogger(__name__)

_JD_HOSTS = {"item.jd.com", "item.m.jd.com"}
_TAOBAO_HOSTS = {"detail.tmall.com", "item.taobao.com"}
_TAOBAO_KEEP_PARAMS = ("id", "skuId")
_JD_PATH_RE = re.compile(r"/(\d+)\.html")


def jd_product_url(product_id: str) -> str:
    return f"https://item.jd.com/{product_id.strip()}.html"


def clean_product_url(url: str) -> str:
    if not url:
        return url

    try:
        parts = urlsplit(url)
    except ValueError as exc:
        LOGGER.debug("Leaving unparsable URL as is: %s (%s)", url, exc)
        return url

    if not parts.scheme or not parts.netloc:
        return url

    host = parts.netloc.lower()
    if host in _JD_HOSTS:
        match = _JD_PATH_RE.search(parts.path)
        if match:
            return jd_product_url(match.group(1))

    if not parts.query:
        return url

    if host in _TAOBAO_HOSTS:
        kept = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key in _TAOBAO_KEEP_PARAMS]
        return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(kept), ""))

    return url
