#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
CRM API Integration

Posts assembled leads to the CRM lead endpoint. Each lead is sent once;
failures are logged and reported back as an unsuccessful CRMResult.
"""

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

import requests

from greenacres_bridge.config import AppConfig, config as default_config
from greenacres_bridge.crm.crm_mapper import CRMMapper
from greenacres_bridge.models.lead import LeadRecord
from greenacres_bridge.utils.logger import get_logger, log_integration_event, log_sensitive

logger = get_logger(__name__)

API_KEY_HEADER = "x-api-key"


class CRMSubmissionError(Exception):
    """Exception raised when the CRM does not accept a lead."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class CRMResult:
    """Outcome of one CRM submission."""
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
    payload: Optional[Dict[str, Any]] = None


class CRMClient:
    """Client for the CRM lead endpoint."""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        session: Optional[requests.Session] = None,
        mapper: Optional[CRMMapper] = None,
    ):
        """
        Initialize the CRM client.

        Args:
            config: Application configuration object
            session: Optional requests session, mainly for tests. Without
                one every request opens and closes its own session
            mapper: Lead to payload mapper
        """
        self.config = config or default_config
        self.session = session
        self.mapper = mapper or CRMMapper(lead_source_tag=self.config.lead_source_tag)
        self.timeout = self.config.crm_timeout_seconds

    @contextmanager
    def _open_session(self) -> Iterator[requests.Session]:
        # The client is shared by the webhook worker threads
        if self.session is not None:
            yield self.session
            return
        with requests.Session() as session:
            yield session

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            API_KEY_HEADER: self.config.crm_api_key or "",
        }

    def _post(self, payload: Dict[str, Any]) -> requests.Response:
        """
        Send the payload.

        Raises:
            CRMSubmissionError: If the endpoint is not configured, unreachable
                or answers with a non-success status
        """
        if not self.config.crm_api_url:
            raise CRMSubmissionError("CRM_API_URL is not configured")

        try:
            with self._open_session() as session:
                response = session.post(
                    self.config.crm_api_url,
                    headers=self._headers(),
                    data=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            raise CRMSubmissionError(f"CRM request failed: {str(e)}") from e

        if not response.ok:
            raise CRMSubmissionError(
                f"CRM returned {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        return response

    def submit(self, lead: LeadRecord) -> CRMResult:
        """
        Submit a lead to the CRM.

        Args:
            lead: Fully assembled lead

        Returns:
            CRMResult: Whether the CRM accepted the lead
        """
        payload = self.mapper.map_lead(lead)
        log_sensitive(
            logger,
            logging.DEBUG,
            f"CRM payload: {json.dumps(payload, ensure_ascii=False)}",
            phone=payload.get("phone"),
            email=payload.get("email"),
        )

        try:
            response = self._post(payload)
        except CRMSubmissionError as e:
            log_integration_event("crm", "error", str(e), logging.ERROR)
            return CRMResult(ok=False, status_code=e.status_code, error=str(e), payload=payload)

        log_integration_event("crm", "submit", f"Lead posted: {payload['name']}")
        return CRMResult(ok=True, status_code=response.status_code, payload=payload)
