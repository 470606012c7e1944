#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Lead Model - Defines the structure of a Green-Acres property inquiry lead.
"""

import json
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional


class PropertyCategory(str, Enum):
    """Closed set of property categories understood by the CRM."""
    VILLA = "villa"
    TOWNHOUSE = "townhouse"
    APARTMENT = "apartment"

    @classmethod
    def coerce(cls, value: Any) -> Optional["PropertyCategory"]:
        """Return the matching category, or None for anything outside the set."""
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


SUMMARY_FIELDS = ("contact_name", "phone", "email", "city", "property_category", "price")


@dataclass
class LeadRecord:
    """
    One property inquiry, assembled from a single inbound notification.

    Every attribute is optional; None means the value could not be extracted.
    """

    # Identity
    contact_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    country: Optional[str] = None

    # Geography
    city: Optional[str] = None
    area_name: Optional[str] = None

    # Property
    property_type: Optional[str] = None
    transaction_type: Optional[str] = None
    property_category: Optional[PropertyCategory] = None
    property_title: Optional[str] = None
    property_ref: Optional[str] = None
    property_url: Optional[str] = None
    profile_analysis_url: Optional[str] = None
    developer: Optional[str] = None

    # Measurements
    area_m2: Optional[str] = None
    surface_m2: Optional[str] = None
    rooms: Optional[str] = None
    bedrooms: Optional[str] = None
    has_land: Optional[bool] = None

    # Commercial
    price: Optional[str] = None

    # Free text
    message: Optional[str] = None

    # Metadata
    source: Optional[str] = None
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        self.property_category = PropertyCategory.coerce(self.property_category)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the lead to a dictionary holding only populated fields."""
        data: Dict[str, Any] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, datetime):
                value = value.isoformat()
            data[item.name] = value
        return data

    def to_json(self) -> str:
        """Convert lead to JSON string."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    def summary(self) -> Dict[str, Any]:
        """Reduced view of the lead returned to webhook callers."""
        data = {name: getattr(self, name) for name in SUMMARY_FIELDS}
        if self.property_category is not None:
            data["property_category"] = self.property_category.value
        return data
