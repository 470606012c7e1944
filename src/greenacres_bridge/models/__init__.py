"""
Data models for the Green-Acres CRM Lead Bridge.
"""

from greenacres_bridge.models.lead import LeadRecord, PropertyCategory

__all__ = ["LeadRecord", "PropertyCategory"]
