#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
CRM Data Mapper

Maps a LeadRecord to the flat JSON payload accepted by the CRM lead
endpoint. Fields without a value are left out of the payload entirely.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from greenacres_bridge.config import config
from greenacres_bridge.models.lead import LeadRecord

UNKNOWN_CONTACT_NAME = "Unknown"

# LeadRecord attribute -> CRM payload field, copied as-is
DEFAULT_FIELD_MAPPINGS: Mapping[str, str] = {
    "phone": "phone",
    "email": "email",
    "country": "country",
    "city": "emirate",
    "area_name": "location",
    "developer": "developer",
}

# (LeadRecord attribute, note template) in the order they appear in the notes
NOTE_TEMPLATES: Tuple[Tuple[str, str], ...] = (
    ("message", "{}"),
    ("property_title", "Property: {}"),
    ("property_url", "URL: {}"),
    ("property_ref", "Ref: {}"),
    ("property_type", "Type: {}"),
    ("transaction_type", "Transaction: {}"),
    ("surface_m2", "Surface: {} m²"),
    ("rooms", "Rooms: {}"),
)


def parse_price(value: Optional[str]) -> Optional[int]:
    """Numeric budget from a thousands-separated price string."""
    if not value:
        return None
    try:
        return int(value.replace(",", "").strip())
    except ValueError:
        return None


class CRMMapper:
    """
    Maps leads to the CRM payload format.

    The lead source tag and the attribute mapping can be overridden, which
    keeps the mapper usable for CRMs that name the fields differently.
    """

    def __init__(
        self,
        lead_source_tag: Optional[str] = None,
        field_mappings: Optional[Mapping[str, str]] = None,
    ):
        self.lead_source_tag = lead_source_tag or config.lead_source_tag
        self.field_mappings = dict(field_mappings or DEFAULT_FIELD_MAPPINGS)

    def build_notes(self, lead: LeadRecord) -> str:
        """
        Newline-joined free-text notes for the CRM record.

        Args:
            lead: Lead to describe

        Returns:
            str: Notes, empty when the lead has none of the note fields
        """
        lines: List[str] = []
        for lead_field, template in NOTE_TEMPLATES:
            value = getattr(lead, lead_field)
            if value:
                lines.append(template.format(value))
        return "\n".join(lines)

    def map_lead(self, lead: LeadRecord) -> Dict[str, Any]:
        """
        Map a lead to the CRM payload.

        Args:
            lead: Lead to map

        Returns:
            Dict[str, Any]: Payload with empty fields omitted
        """
        payload: Dict[str, Any] = {
            "name": lead.contact_name or UNKNOWN_CONTACT_NAME,
        }

        for lead_field, crm_field in self.field_mappings.items():
            payload[crm_field] = getattr(lead, lead_field, None)

        if lead.property_category is not None:
            payload["category"] = lead.property_category.value.lower()

        payload["beds"] = lead.bedrooms
        payload["budget_min"] = parse_price(lead.price)
        payload["lead_source"] = self.lead_source_tag
        payload["notes"] = self.build_notes(lead)

        return {key: value for key, value in payload.items() if value not in (None, "")}
