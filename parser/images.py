"""Recover thumbnail sources planted by inline scripts.

Result pages ship thumbnails as placeholders and fill them in from script
blocks of the form::

    var s='data:image/jpeg;base64,\\x2F9j\\x2F4AAQ...';var ii=['dimg_1'];

The literal bound to `s` is a backslash-escaped JavaScript string; the first
id in `ii` names the `<img>` it belongs to.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup

from core.config import ExtractorConfig
from core.models import ImageIndex
from core.structured_logging import emit_error_event


_ENCODED_SRC_RE = re.compile(r"var\s+s\s*=\s*'([^']+)'")
_IMAGE_ID_RE = re.compile(r"var\s+ii\s*=\s*\[\s*'([^']+)'")

_ESCAPE_RE = re.compile(
    r"\\(?:x(?P<hex>[0-9A-Fa-f]{2})"
    r"|u\{(?P<braced>[0-9A-Fa-f]{1,6})\}"
    r"|u(?P<unicode>[0-9A-Fa-f]{4})"
    r"|(?P<simple>[\\\"'/bfnrtv]))"
)
_SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


class EscapeDecodeError(ValueError):
    """Raised when a string literal contains an unsupported escape sequence."""


def _checked_gap(gap: str, offset: int) -> str:
    if "\\" in gap:
        position = offset + gap.index("\\")
        raise EscapeDecodeError(f"Unsupported escape sequence at offset {position}")
    return gap


def unescape_js_literal(value: str) -> str:
    """
    Decode the body of a backslash-escaped string literal.

    Supported: \\\\ \\" \\' \\/ \\b \\f \\n \\r \\t \\v \\xHH \\uXXXX \\u{H...}.
    UTF-16 surrogate pairs written as two \\u escapes are recombined.

    Raises:
        EscapeDecodeError: On any other escape, including a trailing backslash.
    """
    pieces: list[str] = []
    position = 0
    for match in _ESCAPE_RE.finditer(value):
        pieces.append(_checked_gap(value[position : match.start()], position))
        if match.group("simple") is not None:
            pieces.append(_SIMPLE_ESCAPES[match.group("simple")])
        else:
            digits = match.group("hex") or match.group("braced") or match.group("unicode")
            codepoint = int(digits, 16)
            if codepoint > 0x10FFFF:
                raise EscapeDecodeError(f"Code point out of range: {digits}")
            pieces.append(chr(codepoint))
        position = match.end()
    pieces.append(_checked_gap(value[position:], position))

    decoded = "".join(pieces)
    try:
        return decoded.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeDecodeError as exc:
        raise EscapeDecodeError("Unpaired surrogate in escaped literal") from exc


def _is_image_script(text: str) -> bool:
    return any(marker in text for marker in ExtractorConfig.IMAGE_SCRIPT_MARKERS)


def build_image_index(soup: BeautifulSoup, run_id: str | None = None) -> ImageIndex:
    """
    Build the image index for one document.

    Scripts lacking either variable are skipped. A literal that fails to
    decode marks its id undecodable and is logged; other scripts still count.
    """
    sources: dict[str, str] = {}
    undecodable: set[str] = set()

    for script in soup.find_all("script"):
        script_text = script.string or ""
        if not _is_image_script(script_text):
            continue

        encoded_match = _ENCODED_SRC_RE.search(script_text)
        id_match = _IMAGE_ID_RE.search(script_text)
        if encoded_match is None or id_match is None:
            continue

        image_id = id_match.group(1)
        try:
            sources[image_id] = unescape_js_literal(encoded_match.group(1))
        except EscapeDecodeError as exc:
            undecodable.add(image_id)
            emit_error_event(
                "srp_image_decode_error",
                exc,
                run_id=run_id,
                component="parser",
                stage="image_index",
                image_id=image_id,
            )

    return ImageIndex(sources=sources, undecodable=frozenset(undecodable - sources.keys()))
