"""
Property classification: local decision steps and the remote page fallback.
"""

from greenacres_bridge.classification.classifier import (
    Classification,
    ClassificationBasis,
    ClassificationSignals,
    PropertyClassifier,
    classify_text,
)
from greenacres_bridge.classification.remote import PropertyPageFetcher

__all__ = [
    "Classification",
    "ClassificationBasis",
    "ClassificationSignals",
    "PropertyClassifier",
    "PropertyPageFetcher",
    "classify_text",
]
