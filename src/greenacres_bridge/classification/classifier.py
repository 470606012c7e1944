#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Property Classification Module

Decides whether a lead concerns a villa, a townhouse or an apartment. The
decision is a fixed sequence of steps and the first step that yields a
category wins:

1. structural: a listed land surface means a house (villa or townhouse)
2. keyword: category words in the title, subject and body
3. remote: the same keyword scan over the linked listing page
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from greenacres_bridge.classification.remote import PropertyPageFetcher
from greenacres_bridge.models.lead import PropertyCategory
from greenacres_bridge.utils.logger import get_logger

logger = get_logger(__name__)

TOWNHOUSE_KEYWORDS = ("townhouse", "town house")
VILLA_KEYWORDS = ("villa",)
APARTMENT_KEYWORDS = ("apartment", "flat", "studio", "penthouse", "duplex")

# Scan order matters: "townhouse villa" is a townhouse
CATEGORY_KEYWORDS: Sequence[Tuple[PropertyCategory, Sequence[str]]] = (
    (PropertyCategory.TOWNHOUSE, TOWNHOUSE_KEYWORDS),
    (PropertyCategory.VILLA, VILLA_KEYWORDS),
    (PropertyCategory.APARTMENT, APARTMENT_KEYWORDS),
)


class ClassificationBasis(str, Enum):
    """Which step of the decision sequence produced the category."""
    STRUCTURAL = "structural"
    KEYWORD = "keyword"
    REMOTE = "remote"
    NONE = "none"


@dataclass(frozen=True)
class ClassificationSignals:
    """Everything the classifier looks at for one lead."""
    has_land: Optional[bool] = None
    property_type: Optional[str] = None
    searchable_text: str = ""
    property_url: Optional[str] = None


@dataclass(frozen=True)
class Classification:
    category: Optional[PropertyCategory]
    basis: ClassificationBasis


def classify_text(text: Optional[str]) -> Optional[PropertyCategory]:
    """
    Keyword classification of free text.

    Args:
        text: Any text; matching is case-insensitive

    Returns:
        Optional[PropertyCategory]: First category whose keywords appear
    """
    if not text:
        return None
    haystack = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in haystack for keyword in keywords):
            return category
    return None


def classify_structure(has_land: Optional[bool], property_type: Optional[str]) -> Optional[PropertyCategory]:
    """Category implied by a land surface, or None without one."""
    if not has_land:
        return None
    type_text = (property_type or "").lower()
    if any(keyword in type_text for keyword in TOWNHOUSE_KEYWORDS):
        return PropertyCategory.TOWNHOUSE
    return PropertyCategory.VILLA


class PropertyClassifier:
    """
    Runs the classification steps in priority order.

    The remote step is only reachable when a page fetcher is supplied and
    remote classification is enabled.
    """

    def __init__(
        self,
        page_fetcher: Optional[PropertyPageFetcher] = None,
        remote_enabled: bool = True,
    ):
        self.page_fetcher = page_fetcher
        self.remote_enabled = remote_enabled

    @property
    def steps(self) -> List[Tuple[ClassificationBasis, Callable[[ClassificationSignals], Optional[PropertyCategory]]]]:
        return [
            (ClassificationBasis.STRUCTURAL, self._structural_step),
            (ClassificationBasis.KEYWORD, self._keyword_step),
            (ClassificationBasis.REMOTE, self._remote_step),
        ]

    def classify(self, signals: ClassificationSignals) -> Classification:
        """
        Classify one lead.

        Args:
            signals: Structural and textual evidence for the lead

        Returns:
            Classification: The category (possibly None) and the deciding step
        """
        for basis, step in self.steps:
            category = step(signals)
            if category is not None:
                logger.debug(f"Classified as {category.value} by {basis.value} step")
                return Classification(category, basis)

        return Classification(None, ClassificationBasis.NONE)

    def _structural_step(self, signals: ClassificationSignals) -> Optional[PropertyCategory]:
        return classify_structure(signals.has_land, signals.property_type)

    def _keyword_step(self, signals: ClassificationSignals) -> Optional[PropertyCategory]:
        return classify_text(signals.searchable_text)

    def _remote_step(self, signals: ClassificationSignals) -> Optional[PropertyCategory]:
        if not (self.remote_enabled and self.page_fetcher and signals.property_url):
            return None

        logger.info("Fetching property page for classification...")
        page_text = self.page_fetcher.fetch_text(signals.property_url)
        return classify_text(page_text)
