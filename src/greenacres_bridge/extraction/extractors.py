#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Field Extractors

One small function per lead attribute. Every extractor takes the normalized
body and the subject line and returns a dict holding only the fields it
found, so a miss simply contributes nothing. Extractors never depend on each
other's output; the only ordering is the fallback pass, which fills a field
the primary extractors left empty.

Notification layout the patterns are written against::

    Subject: Request for information - Villa - Buy - Al Badaia 245m² 2,634,000

    Mr or Mrs Jane Doe (France)
    Abu Dhabi : Al Manhal - Hab surface: 305 m² - Land: 390 m² - 4 room - 4 bedroom
    Contact name Jane Doe  Phone number +971 50 123 4567  E-mail jane@example.com
    Message I would like to visit the property.
"""

import re
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from greenacres_bridge.extraction.normalizer import NormalizedBody, collapse_whitespace
from greenacres_bridge.extraction.reference import match_emirate
from greenacres_bridge.utils.logger import get_logger

logger = get_logger(__name__)

Extractor = Callable[[NormalizedBody, str], Dict[str, Any]]

SUBJECT_SEPARATOR = " - "
MIN_SUBJECT_SEGMENTS = 4

AREA_PATTERN = re.compile(r"([\d,.]+)\s*m²")
CONTACT_NAME_PATTERN = re.compile(
    r"Contact\s+name\s+(.*?)(?=Phone|E-mail|Message|$)", re.IGNORECASE | re.DOTALL
)
PHONE_TEXT_PATTERN = re.compile(r"Phone\s+number\s+([\d\s+()-]+)", re.IGNORECASE)
MESSAGE_PATTERN = re.compile(
    r"Message\s+(.*?)(?=Contact\s+name|$)", re.IGNORECASE | re.DOTALL
)
COUNTRY_PATTERN = re.compile(r"Mr or Mrs .+?\((.+?)\)")
REF_PATTERN = re.compile(r"\bRef\b[.:]?\s*([\w-]+)")

# "<region> : <area> - Hab surface: <n> m² [- Land: <n> m²] - <n> room - <n> bedroom"
PROPERTY_LINE_PATTERN = re.compile(
    r"(?P<region>[A-Z][a-zA-Z\s]+?)\s*:\s*"
    r"(?P<area>[A-Z][a-zA-Z\s]+?)\s*-\s*"
    r"Hab surface:\s*(?P<surface>[\d,.]+)\s*m²"
    r"(?P<land>\s*-\s*Land:\s*[\d,.]+\s*m²)?\s*-\s*"
    r"(?P<rooms>\d+)\s*room\s*-\s*"
    r"(?P<bedrooms>\d+)\s*bedroom"
)

# Grouped thousands ("2,634,000") or a long bare number tagged with the currency
GROUPED_PRICE_PATTERN = re.compile(r"(\d[\d,]*,\d+)\s*(?:AED)?")
CURRENCY_PRICE_PATTERN = re.compile(r"(\d{5,})\s*AED")

BRAND_HEADER_STYLE = re.compile(r"background-color:\s*rgb\(8,\s*81,\s*67\)", re.IGNORECASE)
MORE_DETAILS_PHRASE = "more details"
CLICK_HERE_PHRASE = "click here"


def _found(**values: Any) -> Dict[str, Any]:
    """Keep only the values an extractor actually produced."""
    return {key: value for key, value in values.items() if value not in (None, "")}


def _group(pattern: re.Pattern, text: str, group: int = 1) -> Optional[str]:
    match = pattern.search(text)
    if not match:
        return None
    return match.group(group).strip() or None


def _link_target(body: NormalizedBody, scheme: str) -> Optional[str]:
    prefix = re.compile(rf"^\s*{scheme}:", re.IGNORECASE)
    link = body.soup.find("a", href=prefix)
    if link is None:
        return None
    return link["href"].split(":", 1)[1].strip() or None


def _link_with_text(body: NormalizedBody, phrase: str) -> Optional[str]:
    for link in body.soup.find_all("a", href=True):
        if phrase in link.get_text(" ").lower():
            return link["href"]
    return None


# ---------------------------------------------------------------------------
# Subject line
# ---------------------------------------------------------------------------

def extract_subject_fields(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    """
    Property type, transaction type and living area from the subject.

    Only the fourth segment is scanned for the area. A location that itself
    contains " - " shifts the measurement into a later segment and it is
    not picked up.
    """
    segments = (subject or "").split(SUBJECT_SEPARATOR)
    if len(segments) < MIN_SUBJECT_SEGMENTS:
        return {}

    return _found(
        property_type=segments[1].strip(),
        transaction_type=segments[2].strip(),
        area_m2=_group(AREA_PATTERN, segments[3].strip()),
    )


# ---------------------------------------------------------------------------
# Contact
# ---------------------------------------------------------------------------

def extract_contact_name(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    return _found(contact_name=_group(CONTACT_NAME_PATTERN, body.text))


def extract_phone(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    """A tel: link wins over the "Phone number" text label."""
    phone = _link_target(body, "tel")
    if phone is None:
        phone = _group(PHONE_TEXT_PATTERN, body.text)
    return _found(phone=phone)


def extract_email(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    address = _link_target(body, "mailto")
    if address:
        address = address.split("?", 1)[0]
    return _found(email=address)


def extract_message(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    # Some templates put the message before the contact block
    return _found(message=_group(MESSAGE_PATTERN, body.text))


def extract_country(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    return _found(country=_group(COUNTRY_PATTERN, body.text))


# ---------------------------------------------------------------------------
# Property
# ---------------------------------------------------------------------------

def extract_property_ref(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    return _found(property_ref=_group(REF_PATTERN, body.text))


def extract_property_line(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    """
    Location, surface and room counts from the structured property line.

    The optional land clause is the has_land signal: only houses are listed
    with a plot surface.
    """
    match = PROPERTY_LINE_PATTERN.search(body.text)
    if not match:
        return {}

    region = match.group("region").strip()
    return _found(
        city=match_emirate(region) or region,
        area_name=match.group("area").strip(),
        surface_m2=match.group("surface").strip(),
        has_land=match.group("land") is not None,
        rooms=match.group("rooms"),
        bedrooms=match.group("bedrooms"),
    )


def extract_city_fallback(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    return _found(city=match_emirate(body.text))


def extract_price(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    price = _group(GROUPED_PRICE_PATTERN, body.text) or _group(
        CURRENCY_PRICE_PATTERN, body.text
    )
    return _found(price=price)


def extract_property_title(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    header = body.soup.find(style=BRAND_HEADER_STYLE)
    if header is None:
        return {}
    link = header.find_next("a")
    if link is None:
        return {}
    return _found(property_title=collapse_whitespace(link.get_text(" ")).strip())


def extract_property_url(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    return _found(property_url=_link_with_text(body, MORE_DETAILS_PHRASE))


def extract_profile_analysis_url(body: NormalizedBody, subject: str) -> Dict[str, Any]:
    return _found(profile_analysis_url=_link_with_text(body, CLICK_HERE_PHRASE))


FIELD_EXTRACTORS: Sequence[Extractor] = (
    extract_subject_fields,
    extract_contact_name,
    extract_phone,
    extract_email,
    extract_message,
    extract_country,
    extract_property_ref,
    extract_property_line,
    extract_price,
    extract_property_title,
    extract_property_url,
    extract_profile_analysis_url,
)

# Applied only when the primary extractors left the field empty
FALLBACK_EXTRACTORS: Sequence[Tuple[str, Extractor]] = (
    ("city", extract_city_fallback),
)


def run_extractor(extractor: Extractor, body: NormalizedBody, subject: str) -> Dict[str, Any]:
    """Run one extractor, treating an unexpected failure as a miss."""
    try:
        return extractor(body, subject)
    except Exception as e:
        logger.warning(f"Extractor {extractor.__name__} failed: {str(e)}", exc_info=True)
        return {}


def extract_fields(
    body: NormalizedBody,
    subject: str,
    extractors: Sequence[Extractor] = FIELD_EXTRACTORS,
    fallbacks: Sequence[Tuple[str, Extractor]] = FALLBACK_EXTRACTORS,
) -> Dict[str, Any]:
    """
    Run every extractor over one notification and merge the results.

    Args:
        body: Normalized notification body
        subject: Notification subject line
        extractors: Primary extractors
        fallbacks: (field, extractor) pairs used when the field is still empty

    Returns:
        Dict[str, Any]: Extracted lead fields
    """
    fields: Dict[str, Any] = {}
    for extractor in extractors:
        fields.update(run_extractor(extractor, body, subject))

    for field_name, extractor in fallbacks:
        if fields.get(field_name) is None:
            fields.update(run_extractor(extractor, body, subject))

    return fields
