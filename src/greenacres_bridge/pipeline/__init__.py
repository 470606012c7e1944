"""
Lead assembly pipeline for the Green-Acres CRM Lead Bridge.
"""

from greenacres_bridge.pipeline.assembler import EmptyBodyError, LeadAssembler, LeadParsingError
from greenacres_bridge.pipeline.bridge import BridgeResult, LeadBridge

__all__ = ["EmptyBodyError", "LeadAssembler", "LeadParsingError", "BridgeResult", "LeadBridge"]
