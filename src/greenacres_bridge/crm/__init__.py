#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
CRM integration package for the Green-Acres CRM Lead Bridge.

Provides the lead to payload mapper and the client that posts leads to the
CRM lead endpoint.
"""

from greenacres_bridge.crm.crm_client import CRMClient, CRMResult, CRMSubmissionError
from greenacres_bridge.crm.crm_mapper import CRMMapper

__all__ = ["CRMClient", "CRMResult", "CRMSubmissionError", "CRMMapper"]
