#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Unit tests for the field extractors.
"""

import unittest

import pytest

from greenacres_bridge.extraction.extractors import (
    FIELD_EXTRACTORS,
    extract_city_fallback,
    extract_contact_name,
    extract_country,
    extract_email,
    extract_fields,
    extract_message,
    extract_phone,
    extract_price,
    extract_profile_analysis_url,
    extract_property_line,
    extract_property_ref,
    extract_property_title,
    extract_property_url,
    extract_subject_fields,
    run_extractor,
)
from greenacres_bridge.extraction.normalizer import normalize_body


def body(markup):
    return normalize_body(markup)


class TestSubjectFields(unittest.TestCase):
    """Tests for subject line parsing."""

    def test_full_subject(self):
        fields = extract_subject_fields(
            body("<p>x</p>"),
            "Request for information - Villa - Buy - Al Badaia 245m² 2,634,000",
        )
        self.assertEqual(fields, {"property_type": "Villa", "transaction_type": "Buy", "area_m2": "245"})

    def test_too_few_segments(self):
        self.assertEqual(extract_subject_fields(body("<p>x</p>"), "Request for information - Villa"), {})
        self.assertEqual(extract_subject_fields(body("<p>x</p>"), ""), {})

    def test_area_missing_from_fourth_segment(self):
        fields = extract_subject_fields(body("<p>x</p>"), "Request - Apartment - Rent - Dubai Marina")
        self.assertEqual(fields, {"property_type": "Apartment", "transaction_type": "Rent"})

    def test_location_with_separator_hides_area(self):
        # The area lands in the fifth segment, which is not scanned
        fields = extract_subject_fields(
            body("<p>x</p>"),
            "Request for information - Villa - Buy - Jumeirah - Park 300m² 5,000,000",
        )
        self.assertNotIn("area_m2", fields)
        self.assertEqual(fields["property_type"], "Villa")


class TestContactExtractors(unittest.TestCase):
    """Tests for the contact extractors."""

    def test_contact_name_stops_at_phone(self):
        fields = extract_contact_name(body("<p>Contact name Jane Doe</p><p>Phone number +33 6</p>"), "")
        self.assertEqual(fields, {"contact_name": "Jane Doe"})

    def test_contact_name_until_end(self):
        fields = extract_contact_name(body("<p>contact NAME  Ali Hassan</p>"), "")
        self.assertEqual(fields, {"contact_name": "Ali Hassan"})

    def test_contact_name_missing(self):
        self.assertEqual(extract_contact_name(body("<p>Nothing here</p>"), ""), {})

    def test_tel_link_wins_over_text(self):
        markup = '<p>Phone number <a href="tel:+971501234567">050 123 4567</a></p>'
        self.assertEqual(extract_phone(body(markup), ""), {"phone": "+971501234567"})

    def test_phone_text_fallback(self):
        markup = "<p>Phone number +971 50 123 4567</p><p>E-mail</p>"
        self.assertEqual(extract_phone(body(markup), ""), {"phone": "+971 50 123 4567"})

    def test_email_from_mailto(self):
        markup = '<a href="mailto:jane.doe@example.com?subject=Hello">write</a>'
        self.assertEqual(extract_email(body(markup), ""), {"email": "jane.doe@example.com"})

    def test_email_without_mailto(self):
        self.assertEqual(extract_email(body("<p>E-mail jane@example.com</p>"), ""), {})

    def test_message_before_contact_block(self):
        markup = "<p>Message</p><p>Please call me.</p><p>Contact name Jane</p>"
        self.assertEqual(extract_message(body(markup), ""), {"message": "Please call me."})

    def test_message_until_end(self):
        markup = "<p>Contact name Jane</p><p>Message</p><p>Is it still available?</p>"
        self.assertEqual(extract_message(body(markup), ""), {"message": "Is it still available?"})

    def test_country(self):
        markup = "<p>Mr or Mrs Jane Doe (France)</p>"
        self.assertEqual(extract_country(body(markup), ""), {"country": "France"})


class TestPropertyExtractors(unittest.TestCase):
    """Tests for the property extractors."""

    def test_property_line_without_land(self):
        markup = "<p>Sharjah : Al Badaia - Hab surface: 245 m² - 4 room - 4 bedroom</p>"
        fields = extract_property_line(body(markup), "")
        self.assertEqual(
            fields,
            {
                "city": "Sharjah",
                "area_name": "Al Badaia",
                "surface_m2": "245",
                "has_land": False,
                "rooms": "4",
                "bedrooms": "4",
            },
        )

    def test_property_line_with_land(self):
        markup = "<p>Sharjah : Al Badaia - Hab surface: 245 m² - Land: 390 m² - 4 room - 4 bedroom</p>"
        fields = extract_property_line(body(markup), "")
        self.assertTrue(fields["has_land"])
        self.assertEqual(fields["surface_m2"], "245")

    def test_property_line_region_canonicalized(self):
        markup = "<p>RAK : Mina Al Arab - Hab surface: 120 m² - 2 room - 1 bedroom</p>"
        self.assertEqual(extract_property_line(body(markup), "")["city"], "Ras Al Khaimah")

    def test_property_line_unknown_region_kept(self):
        markup = "<p>Muscat : Al Mouj - Hab surface: 90 m² - 2 room - 1 bedroom</p>"
        self.assertEqual(extract_property_line(body(markup), "")["city"], "Muscat")

    def test_property_line_missing(self):
        self.assertEqual(extract_property_line(body("<p>No structured line</p>"), ""), {})

    def test_city_fallback(self):
        self.assertEqual(extract_city_fallback(body("<p>Flat in Dubai Marina</p>"), ""), {"city": "Dubai"})

    def test_ref_variants(self):
        for markup in ("<p>Ref GA-1</p>", "<p>Ref. GA-1</p>", "<p>Ref: GA-1</p>"):
            self.assertEqual(extract_property_ref(body(markup), ""), {"property_ref": "GA-1"})

    def test_ref_not_matched_inside_words(self):
        self.assertEqual(extract_property_ref(body("<p>Reference GA-1</p>"), ""), {})

    def test_title_after_brand_header(self):
        markup = (
            '<a href="/other">Logo</a>'
            '<td style="background-color: rgb(8, 81, 67);"><a href="/listing">Sea view   villa</a></td>'
        )
        self.assertEqual(extract_property_title(body(markup), ""), {"property_title": "Sea view villa"})

    def test_title_without_header(self):
        self.assertEqual(extract_property_title(body('<a href="/listing">Villa</a>'), ""), {})

    def test_property_url(self):
        markup = '<a href="/a">Logo</a><a href="https://www.green-acres.ae/p/1">See MORE DETAILS</a>'
        self.assertEqual(extract_property_url(body(markup), ""), {"property_url": "https://www.green-acres.ae/p/1"})

    def test_profile_analysis_url(self):
        markup = '<p>Profile: <a href="https://www.green-acres.ae/profile">click here</a></p>'
        self.assertEqual(
            extract_profile_analysis_url(body(markup), ""),
            {"profile_analysis_url": "https://www.green-acres.ae/profile"},
        )


class TestPriceExtractor:
    """Tests for price extraction."""

    @pytest.mark.parametrize(
        "markup, expected",
        [
            ("<p>Price 2,634,000 AED</p>", "2,634,000"),
            ("<p>Price 2,634,000</p>", "2,634,000"),
            ("<p>Price 950000 AED</p>", "950000"),
        ],
    )
    def test_price_found(self, markup, expected):
        assert extract_price(body(markup), "") == {"price": expected}

    @pytest.mark.parametrize("markup", ["<p>4 room - 3 bedroom</p>", "<p>1234 AED</p>", "<p>950000</p>"])
    def test_small_or_untagged_numbers_rejected(self, markup):
        assert extract_price(body(markup), "") == {}


class TestExtractFields:
    """Tests for the combined extraction pass."""

    def test_sample_notification(self, sample_html, sample_subject):
        fields = extract_fields(normalize_body(sample_html), sample_subject)

        assert fields["property_type"] == "Villa"
        assert fields["transaction_type"] == "Buy"
        assert fields["area_m2"] == "305"
        assert fields["contact_name"] == "Jane Doe"
        assert fields["phone"] == "+971501234567"
        assert fields["email"] == "jane.doe@example.com"
        assert fields["message"] == "I would like to visit this villa next week."
        assert fields["country"] == "France"
        assert fields["property_ref"] == "GA-12345"
        assert fields["city"] == "Abu Dhabi"
        assert fields["area_name"] == "Al Manhal"
        assert fields["surface_m2"] == "305"
        assert fields["has_land"] is True
        assert fields["rooms"] == "4"
        assert fields["bedrooms"] == "4"
        assert fields["price"] == "2,634,000"
        assert fields["property_title"] == "Villa with garden by Emaar"
        assert fields["property_url"].endswith("/al-manhal/GA-12345.htm")
        assert fields["profile_analysis_url"] == "https://www.green-acres.ae/en/pro/profile-analysis?id=abc123"

    def test_city_fallback_only_when_missing(self):
        fields = extract_fields(body("<p>Flat in Dubai Marina, close to Sharjah</p>"), "")
        assert fields["city"] == "Dubai"

    def test_rak_mention_sets_city(self):
        fields = extract_fields(body("<p>Looking for something in RAK</p>"), "")
        assert fields["city"] == "Ras Al Khaimah"

    def test_failing_extractor_is_a_miss(self):
        def broken(body, subject):
            raise RuntimeError("boom")

        markup = "<p>Contact name Jane</p>"
        fields = extract_fields(body(markup), "", extractors=(broken, extract_contact_name))
        assert fields == {"contact_name": "Jane"}

    def test_run_extractor_swallows_errors(self):
        def broken(body, subject):
            raise ValueError("bad")

        assert run_extractor(broken, body("<p>x</p>"), "") == {}

    def test_extractor_order_does_not_matter(self, sample_html, sample_subject):
        normalized = normalize_body(sample_html)
        forward = extract_fields(normalized, sample_subject, FIELD_EXTRACTORS)
        backward = extract_fields(normalized, sample_subject, tuple(reversed(FIELD_EXTRACTORS)))
        assert forward == backward


if __name__ == "__main__":
    unittest.main()
