# app/core/sanitization.py
"""
Input sanitization shared by every request schema.

Schemas call these helpers from their validators so that all user supplied
text passes through one place before it reaches the database.
"""
import html
import re
from typing import Iterable, List, Optional
from urllib.parse import urlparse

import nh3

_SCRIPT_PROTOCOL_RE = re.compile(r"javascript\s*:", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r"on\w+\s*=", re.IGNORECASE)
_DANGEROUS_SCHEME_RE = re.compile(r"^\s*(javascript|data|vbscript|file):", re.IGNORECASE)

GITHUB_PREFIX = "https://github.com/"


def sanitize_input(value: Optional[str]) -> str:
    """Strip markup and script vectors from free text. Non-strings become ''."""
    if not isinstance(value, str):
        return ""
    # 去掉全部标签，保留文本；nh3 输出是转义后的 HTML，入库前还原
    cleaned = html.unescape(nh3.clean(value, tags=set()))
    cleaned = _SCRIPT_PROTOCOL_RE.sub("", cleaned)
    cleaned = _EVENT_HANDLER_RE.sub("", cleaned)
    cleaned = cleaned.replace("<", "").replace(">", "").replace("&#", "")
    return cleaned.strip()


def sanitize_url(value: Optional[str]) -> Optional[str]:
    """Return the URL when it is a plain http(s) URL, otherwise None."""
    if not isinstance(value, str) or _DANGEROUS_SCHEME_RE.match(value):
        return None
    parsed = urlparse(value.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return parsed.geturl()


def sanitize_tags(tags: Optional[Iterable]) -> List[str]:
    if not tags:
        return []
    result = []
    for tag in tags:
        cleaned = sanitize_input(tag)
        if cleaned:
            result.append(cleaned)
    return result


def is_github_url(value: Optional[str]) -> bool:
    return isinstance(value, str) and value.startswith(GITHUB_PREFIX)
