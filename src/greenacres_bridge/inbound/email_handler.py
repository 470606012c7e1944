#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Inbound email transport.

Accepts a raw RFC 822 message forwarded by the mail router, checks that it
comes from the portal, pulls out the HTML part and runs it through the lead
bridge. Nothing is raised to the mail router: every outcome, including
rejection, is returned as an EmailOutcome and logged.
"""

import email
from dataclasses import dataclass
from email.errors import HeaderParseError
from email.header import decode_header, make_header
from email.message import Message
from typing import Optional, Union

from greenacres_bridge.config import AppConfig, config as default_config
from greenacres_bridge.extraction.normalizer import (
    BASE64,
    QUOTED_PRINTABLE,
    decode_bytes,
    decode_transfer_encoding,
)
from greenacres_bridge.pipeline.assembler import LeadParsingError
from greenacres_bridge.pipeline.bridge import BridgeResult, LeadBridge
from greenacres_bridge.utils.logger import get_logger

logger = get_logger(__name__)

REJECTION_REASON = "Not a Green-Acres email"
NO_HTML_REASON = "No HTML body found"
HTML_MARKERS = ("<html", "<table")


class EmailRejectedError(Exception):
    """Raised when a message fails the origin check."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass
class EmailOutcome:
    """What happened to one inbound message."""
    accepted: bool
    reason: Optional[str] = None
    result: Optional[BridgeResult] = None

    @property
    def submitted(self) -> bool:
        return self.result is not None and self.result.success


def parse_message(raw: Union[str, bytes]) -> Message:
    if isinstance(raw, bytes):
        return email.message_from_bytes(raw)
    return email.message_from_string(raw)


def raw_as_text(raw: Union[str, bytes]) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    return raw


def decode_header_value(value: Optional[str]) -> str:
    """Decode an RFC 2047 encoded header into plain text."""
    if not value:
        return ""
    try:
        return str(make_header(decode_header(value)))
    except (UnicodeDecodeError, LookupError, HeaderParseError):
        return str(value)


def decode_part(part: Message) -> str:
    """Decoded text of a single MIME part."""
    charset = part.get_content_charset() or "utf-8"
    encoding = (part.get("Content-Transfer-Encoding") or "").strip().lower()

    if encoding in (QUOTED_PRINTABLE, BASE64):
        return decode_transfer_encoding(part.get_payload(), encoding, charset)

    raw = part.get_payload(decode=True) or b""
    return decode_bytes(raw, charset)


def extract_html_body(message: Message, raw_text: str) -> Optional[str]:
    """
    Locate the HTML body of a message.

    Args:
        message: Parsed message
        raw_text: The message as text, used when no text/html part exists

    Returns:
        Optional[str]: Decoded HTML, the raw message itself when it looks like
        bare markup, or None
    """
    for part in message.walk():
        if part.is_multipart():
            continue
        if part.get_content_type() == "text/html":
            return decode_part(part)

    if any(marker in raw_text for marker in HTML_MARKERS):
        return raw_text

    return None


class InboundEmailHandler:
    """Email transport entry point."""

    def __init__(
        self,
        bridge: Optional[LeadBridge] = None,
        config: Optional[AppConfig] = None,
    ):
        self.config = config or default_config
        self.bridge = bridge or LeadBridge(config=self.config)

    def check_origin(self, message: Message, raw_text: str, subject: str, mail_from: str = "") -> None:
        """
        Heuristic origin check.

        A message passes when the portal domain shows up in the envelope
        sender, the From header or anywhere in the raw message, or when the
        subject carries the portal's inquiry phrase.

        Raises:
            EmailRejectedError: If none of the signals is present
        """
        domain = self.config.trusted_sender_domain.lower()
        phrase = self.config.trusted_subject_phrase.lower()
        header_from = decode_header_value(message.get("from"))

        trusted = (
            domain in (mail_from or "").lower()
            or domain in header_from.lower()
            or domain in raw_text.lower()
            or phrase in subject.lower()
        )
        if not trusted:
            raise EmailRejectedError(REJECTION_REASON)

    def handle(self, raw: Union[str, bytes], mail_from: str = "") -> EmailOutcome:
        """
        Process one raw message.

        Args:
            raw: Complete message as delivered
            mail_from: Envelope sender, when the router provides it

        Returns:
            EmailOutcome: Rejection, skip or the bridge result
        """
        try:
            message = parse_message(raw)
            raw_text = raw_as_text(raw)
            subject = decode_header_value(message.get("subject"))

            try:
                self.check_origin(message, raw_text, subject, mail_from)
            except EmailRejectedError as e:
                logger.info(f"[Email] Rejected: {e.reason} (from: {mail_from})")
                return EmailOutcome(accepted=False, reason=e.reason)

            logger.info(f"[Email] Processing: {subject}")

            html_body = extract_html_body(message, raw_text)
            if not html_body:
                logger.error(NO_HTML_REASON)
                return EmailOutcome(accepted=True, reason=NO_HTML_REASON)

            result = self.bridge.process(html_body, subject)
            return EmailOutcome(accepted=True, result=result)

        except LeadParsingError as e:
            logger.warning(f"[Email] Could not parse lead: {str(e)}")
            return EmailOutcome(accepted=True, reason=str(e))
        except Exception as e:
            logger.error(f"[Email] Error: {str(e)}", exc_info=True)
            return EmailOutcome(accepted=True, reason=str(e))
