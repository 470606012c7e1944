#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Lead Bridge - assemble a lead and hand it to the CRM.

Both inbound transports (webhook and email) end here once they have a
subject and an HTML body.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional

from greenacres_bridge.config import AppConfig, config as default_config
from greenacres_bridge.crm.crm_client import CRMClient, CRMResult
from greenacres_bridge.models.lead import LeadRecord
from greenacres_bridge.pipeline.assembler import LeadAssembler
from greenacres_bridge.utils.logger import get_logger, log_sensitive

logger = get_logger(__name__)


@dataclass
class BridgeResult:
    lead: LeadRecord
    crm: Optional[CRMResult] = None

    @property
    def success(self) -> bool:
        return bool(self.crm and self.crm.ok)


class LeadBridge:
    """Runs the assembler and submits the result to the CRM."""

    def __init__(
        self,
        assembler: Optional[LeadAssembler] = None,
        crm_client: Optional[CRMClient] = None,
        config: Optional[AppConfig] = None,
    ):
        self.config = config or default_config
        self.assembler = assembler or LeadAssembler(config=self.config)
        self.crm_client = crm_client or CRMClient(config=self.config)

    def process(self, html_body: Optional[str], subject: Optional[str] = "", submit: bool = True) -> BridgeResult:
        """
        Assemble a lead and optionally submit it.

        Args:
            html_body: Notification body markup
            subject: Notification subject line
            submit: Whether to post the lead to the CRM

        Returns:
            BridgeResult: The lead and, when submitted, the CRM outcome

        Raises:
            EmptyBodyError: If the body contains no text
        """
        lead = self.assembler.assemble(html_body, subject)
        log_sensitive(
            logger,
            logging.INFO,
            f"Extracted lead: {json.dumps(lead.summary(), ensure_ascii=False)}",
            phone=lead.phone,
            email=lead.email,
        )

        if not submit:
            return BridgeResult(lead=lead)

        return BridgeResult(lead=lead, crm=self.crm_client.submit(lead))
