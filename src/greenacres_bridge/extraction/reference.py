#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Reference vocabularies and the matchers that canonicalize free text against
them. Lookups are case-insensitive substring checks; the first entry found
in the text wins.
"""

from typing import Mapping, Optional, Sequence

EMIRATES: Sequence[str] = (
    "Abu Dhabi",
    "Dubai",
    "Sharjah",
    "Ajman",
    "Ras Al Khaimah",
    "Umm Al Quwain",
    "Fujairah",
)

# Checked before EMIRATES
EMIRATE_ALIASES: Mapping[str, str] = {
    "ras al khaima": "Ras Al Khaimah",
    "rak": "Ras Al Khaimah",
}

DEVELOPERS: Sequence[str] = (
    "Emaar",
    "Damac",
    "Binghatti",
    "Ora Developers",
    "Ora Properties",
    "Reportage",
    "Danube",
    "Nakheel",
    "Azizi",
    "Samana",
    "Sobha",
    "Dubai South",
)


def match_vocabulary(text: Optional[str], vocabulary: Sequence[str]) -> Optional[str]:
    """Return the first vocabulary entry contained in the text."""
    if not text:
        return None
    haystack = text.lower()
    for entry in vocabulary:
        if entry.lower() in haystack:
            return entry
    return None


def match_emirate(
    text: Optional[str],
    emirates: Sequence[str] = EMIRATES,
    aliases: Mapping[str, str] = EMIRATE_ALIASES,
) -> Optional[str]:
    """Canonical emirate mentioned in the text, aliases first."""
    if not text:
        return None
    haystack = text.lower()
    for alias, canonical in aliases.items():
        if alias in haystack:
            return canonical
    return match_vocabulary(text, emirates)


def match_developer(
    text: Optional[str],
    developers: Sequence[str] = DEVELOPERS,
) -> Optional[str]:
    """Canonical developer brand mentioned in the text."""
    return match_vocabulary(text, developers)
