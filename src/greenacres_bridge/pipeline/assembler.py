#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Lead Assembler - builds a LeadRecord from one notification.

Normalizes the body, runs the field extractors, matches the developer
vocabulary, classifies the property and stamps the metadata. Individual
extraction misses leave fields empty; the only hard failure is a body with
no text at all.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from greenacres_bridge.classification.classifier import (
    ClassificationSignals,
    PropertyClassifier,
)
from greenacres_bridge.classification.remote import PropertyPageFetcher
from greenacres_bridge.config import AppConfig, config as default_config
from greenacres_bridge.extraction.extractors import (
    FIELD_EXTRACTORS,
    Extractor,
    extract_fields,
)
from greenacres_bridge.extraction.normalizer import normalize_body
from greenacres_bridge.extraction.reference import match_developer
from greenacres_bridge.models.lead import LeadRecord
from greenacres_bridge.utils.logger import get_logger, log_processing_event

logger = get_logger(__name__)


class LeadParsingError(Exception):
    """Base exception for notifications that cannot be parsed."""
    pass


class EmptyBodyError(LeadParsingError):
    """Raised when a notification body has no text to parse."""
    pass


def build_searchable_text(property_title: Optional[str], subject: Optional[str], body_text: str) -> str:
    """Lower-cased title, subject and body, used for keyword matching."""
    return " ".join([property_title or "", subject or "", body_text]).lower()


class LeadAssembler:
    """
    Turns a notification subject and HTML body into a LeadRecord.

    The assembler holds no per-lead state, so one instance can serve any
    number of notifications concurrently.
    """

    def __init__(
        self,
        classifier: Optional[PropertyClassifier] = None,
        config: Optional[AppConfig] = None,
        extractors: Sequence[Extractor] = FIELD_EXTRACTORS,
    ):
        """
        Initialize the assembler.

        Args:
            classifier: Property classifier; a default one with a live page
                fetcher is built from config when omitted
            config: Application configuration object
            extractors: Field extractors to run
        """
        self.config = config or default_config
        self.classifier = classifier or PropertyClassifier(
            PropertyPageFetcher(self.config),
            remote_enabled=self.config.remote_classification_enabled,
        )
        self.extractors = extractors

    def assemble(
        self,
        html_body: Optional[str],
        subject: Optional[str] = "",
        received_at: Optional[datetime] = None,
    ) -> LeadRecord:
        """
        Build the lead for one notification.

        Args:
            html_body: Notification body markup
            subject: Notification subject line
            received_at: Generation timestamp, defaults to now (UTC)

        Returns:
            LeadRecord: The assembled lead

        Raises:
            EmptyBodyError: If the body contains no text
        """
        subject = subject or ""
        body = normalize_body(html_body)
        if body.is_empty:
            raise EmptyBodyError("Notification body is empty")

        fields: Dict[str, Any] = extract_fields(body, subject, self.extractors)

        searchable = build_searchable_text(fields.get("property_title"), subject, body.text)
        developer = match_developer(searchable)
        if developer:
            fields["developer"] = developer

        classification = self.classifier.classify(
            ClassificationSignals(
                has_land=fields.get("has_land"),
                property_type=fields.get("property_type"),
                searchable_text=searchable,
                property_url=fields.get("property_url"),
            )
        )

        lead = LeadRecord(
            **fields,
            property_category=classification.category,
            source=self.config.lead_source_name,
        )
        if received_at is not None:
            lead.received_at = received_at

        log_processing_event(
            "assembler",
            "complete",
            f"Extracted {len(fields)} fields, category "
            f"{lead.property_category.value if lead.property_category else 'unknown'} "
            f"({classification.basis.value})",
        )
        return lead
