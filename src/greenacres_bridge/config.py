#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Configuration management for the Green-Acres CRM Lead Bridge.

This module loads configuration from environment variables (optionally via a
.env file) and provides sensible defaults. It also validates configuration
values.
"""

import os
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# Log levels
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

DEFAULT_LEAD_SOURCE_TAG = "greenAcres"
DEFAULT_LEAD_SOURCE_NAME = "Green-Acres"
DEFAULT_TRUSTED_SENDER_DOMAIN = "green-acres.com"
DEFAULT_TRUSTED_SUBJECT_PHRASE = "request for information"
DEFAULT_USER_AGENT = "Mozilla/5.0"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_optional_path(name: str) -> Optional[Path]:
    value = os.getenv(name)
    return Path(value) if value else None


@dataclass
class AppConfig:
    """Application configuration."""

    # CRM
    crm_api_url: Optional[str] = field(default_factory=lambda: os.getenv("CRM_API_URL"))
    crm_api_key: Optional[str] = field(default_factory=lambda: os.getenv("CRM_API_KEY"))
    crm_timeout_seconds: int = field(
        default_factory=lambda: int(os.getenv("CRM_TIMEOUT_SECONDS", "30"))
    )
    lead_source_tag: str = field(
        default_factory=lambda: os.getenv("LEAD_SOURCE_TAG", DEFAULT_LEAD_SOURCE_TAG)
    )
    lead_source_name: str = field(
        default_factory=lambda: os.getenv("LEAD_SOURCE_NAME", DEFAULT_LEAD_SOURCE_NAME)
    )

    # Inbound email origin check
    trusted_sender_domain: str = field(
        default_factory=lambda: os.getenv(
            "TRUSTED_SENDER_DOMAIN", DEFAULT_TRUSTED_SENDER_DOMAIN
        )
    )
    trusted_subject_phrase: str = field(
        default_factory=lambda: os.getenv(
            "TRUSTED_SUBJECT_PHRASE", DEFAULT_TRUSTED_SUBJECT_PHRASE
        )
    )

    # Remote classification fallback
    remote_classification_enabled: bool = field(
        default_factory=lambda: _env_flag("REMOTE_CLASSIFICATION_ENABLED", "true")
    )
    property_page_user_agent: str = field(
        default_factory=lambda: os.getenv("PROPERTY_PAGE_USER_AGENT", DEFAULT_USER_AGENT)
    )
    property_page_timeout_seconds: int = field(
        default_factory=lambda: int(os.getenv("PROPERTY_PAGE_TIMEOUT_SECONDS", "30"))
    )

    # Logging
    log_level: int = field(
        default_factory=lambda: LOG_LEVELS.get(
            os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO
        )
    )
    log_file_path: Optional[Path] = field(
        default_factory=lambda: _env_optional_path("LOG_FILE_PATH")
    )
    json_logs: bool = field(default_factory=lambda: _env_flag("JSON_LOGS", "false"))

    # Webhook server
    api_host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))

    # Debug options
    debug_mode: bool = field(default_factory=lambda: _env_flag("DEBUG_MODE", "false"))

    def validate(self) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List[str]: List of validation errors, empty if valid
        """
        errors = []

        if not self.crm_api_url:
            errors.append("CRM_API_URL is required to submit leads")

        if not self.crm_api_key:
            errors.append("CRM_API_KEY is required to submit leads")

        if self.log_file_path is not None and not self.log_file_path.parent.exists():
            errors.append(f"Log file path parent does not exist: {self.log_file_path.parent}")

        # Validate numeric values
        if self.crm_timeout_seconds <= 0:
            errors.append("CRM_TIMEOUT_SECONDS must be positive")

        if self.property_page_timeout_seconds <= 0:
            errors.append("PROPERTY_PAGE_TIMEOUT_SECONDS must be positive")

        if not 0 < self.api_port < 65536:
            errors.append("PORT must be between 1 and 65535")

        return errors


# Create a global config instance
config = AppConfig()
