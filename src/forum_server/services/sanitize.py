import re

import bleach
from bleach.callbacks import target_blank
from bleach.linkifier import Linker

BODY_TAGS = frozenset({"pre", "code", "b", "i", "strong", "em", "p", "br"})

_URL_RE = re.compile(r"\bhttps?://[^\s<>\"']+", re.IGNORECASE)


def _noopener(attrs: dict, new: bool = False) -> dict:
    attrs[(None, "rel")] = "noopener noreferrer"
    return attrs


_linker = Linker(url_re=_URL_RE, callbacks=[target_blank, _noopener])


def clean_text(value: str | None) -> str:
    """Drop every tag, keeping only the text."""
    return bleach.clean(value or "", tags=set(), attributes={}, strip=True).strip()


def clean_optional_text(value: str | None) -> str | None:
    cleaned = clean_text(value)
    return cleaned or None


def clean_body(value: str | None, *, wrapper: str) -> str:
    """Keep simple formatting tags, drop attributes, and wrap in ``wrapper``.

    ``wrapper`` is the opening tag, e.g. ``<pre class="responsive">``.
    """
    cleaned = bleach.clean(value or "", tags=BODY_TAGS, attributes={}, strip=True)
    return f"{wrapper}{cleaned}</pre>"


def clean_thread_body(value: str | None) -> str:
    return clean_body(value, wrapper='<pre class="responsive">')


def clean_reply_body(value: str | None) -> str:
    return clean_body(value, wrapper="<pre>")


def linkify(html: str) -> str:
    return _linker.linkify(html)
