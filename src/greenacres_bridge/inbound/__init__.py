"""
Inbound transports other than the webhook.
"""

from greenacres_bridge.inbound.email_handler import (
    EmailOutcome,
    EmailRejectedError,
    InboundEmailHandler,
    extract_html_body,
)

__all__ = ["EmailOutcome", "EmailRejectedError", "InboundEmailHandler", "extract_html_body"]
