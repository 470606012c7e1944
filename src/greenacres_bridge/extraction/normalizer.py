#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Text Normalizer

Turns raw notification markup into the two views the field extractors work
on: a flat, whitespace-collapsed text string for pattern matching and the
untouched markup for extractors that need links or styling. Also decodes
MIME transfer encodings for bodies taken straight from an email.
"""

import re
import base64
import binascii
import quopri
from dataclasses import dataclass
from functools import cached_property
from typing import Optional

from bs4 import BeautifulSoup

from greenacres_bridge.utils.logger import get_logger

logger = get_logger(__name__)

TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Entity handling applied after tags are removed, in this order
ENTITY_REPLACEMENTS = (
    ("&nbsp;", " "),
    ("&#x200E;", ""),
    ("&amp;", "&"),
)

QUOTED_PRINTABLE = "quoted-printable"
BASE64 = "base64"


@dataclass(frozen=True)
class NormalizedBody:
    """Searchable text plus the original markup of one notification body."""
    text: str
    markup: str

    @cached_property
    def soup(self) -> BeautifulSoup:
        """Parsed markup for link and style based extractors."""
        return BeautifulSoup(self.markup, "html.parser")

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text)


def html_to_text(markup: str) -> str:
    """
    Flatten notification markup into searchable text.

    Tags become spaces, the handful of entities the portal emits are decoded
    and whitespace runs are collapsed. The result is not stripped so label
    based patterns see the same spacing on every template.
    """
    text = TAG_PATTERN.sub(" ", markup)
    for entity, replacement in ENTITY_REPLACEMENTS:
        text = text.replace(entity, replacement)
    return collapse_whitespace(text)


def normalize_body(markup: Optional[str]) -> NormalizedBody:
    """Build the text and markup views for a notification body."""
    markup = markup or ""
    return NormalizedBody(text=html_to_text(markup), markup=markup)


def strip_markup(markup: str) -> str:
    """Visible text of an arbitrary HTML page, whitespace collapsed."""
    soup = BeautifulSoup(markup, "html.parser")
    return collapse_whitespace(soup.get_text(" ")).strip()


def decode_bytes(raw: bytes, charset: str) -> str:
    """Decode bytes in the declared charset, falling back to utf-8 for unknown charsets."""
    try:
        return raw.decode(charset, errors="replace")
    except LookupError:
        logger.debug(f"Unknown charset {charset!r}, decoding as utf-8")
        return raw.decode("utf-8", errors="replace")


def decode_quoted_printable(payload: str, charset: str = "utf-8") -> str:
    """Unescape =XX sequences and join soft line breaks."""
    raw = quopri.decodestring(payload.encode("utf-8", errors="surrogateescape"))
    return decode_bytes(raw, charset)


def decode_base64(payload: str, charset: str = "utf-8") -> str:
    """Decode a whole base64 block, ignoring embedded whitespace."""
    compact = WHITESPACE_PATTERN.sub("", payload)
    raw = base64.b64decode(compact, validate=True)
    return decode_bytes(raw, charset)


def decode_transfer_encoding(
    payload: str,
    encoding: Optional[str],
    charset: Optional[str] = None,
) -> str:
    """
    Decode a MIME body according to its declared Content-Transfer-Encoding.

    Unknown encodings (7bit, 8bit, binary, none) pass through unchanged. A
    body that fails to decode is returned as-is rather than aborting the
    pipeline; the extractors can still find something in garbled text.

    Args:
        payload: Body text as it appears in the message
        encoding: Declared transfer encoding, case-insensitive
        charset: Declared charset of the decoded bytes

    Returns:
        str: Decoded body, or the original payload when decoding fails
    """
    encoding = (encoding or "").strip().lower()
    charset = charset or "utf-8"

    try:
        if encoding == QUOTED_PRINTABLE:
            return decode_quoted_printable(payload, charset)
        if encoding == BASE64:
            return decode_base64(payload, charset)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Could not decode {encoding} body, using raw text: {str(e)}")

    return payload
