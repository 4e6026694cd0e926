"""Tests for personal information detection and phone validation."""

import pytest
from resume_pipeline.core.personal_info import (
    detect_personal_info,
    extract_linkedin_url,
    extract_phone_number,
    is_valid_phone_number,
)


def test_detects_name_email_phone():
    info = detect_personal_info("John Doe\njohn.doe@example.com\n+1 (555) 123-4567\n\nEXPERIENCE")
    assert info.name == "John Doe"
    assert info.email == "john.doe@example.com"
    assert info.phone == "+1 (555) 123-4567"


def test_name_skips_leading_blank_lines():
    assert detect_personal_info("\n\n  Jane Smith  \nDeveloper").name == "Jane Smith"


def test_french_phone():
    assert extract_phone_number("Tél : 06 12 34 56 78") == "06 12 34 56 78"


def test_year_range_is_not_a_phone():
    assert extract_phone_number("Worked 2015-2019 at Acme") is None


def test_missing_fields_are_none():
    info = detect_personal_info("Jane Smith\nNo contact details here")
    assert info.email is None
    assert info.phone is None


def test_empty_input():
    info = detect_personal_info("")
    assert info.name is None and info.email is None and info.phone is None
    assert detect_personal_info(None).name is None


class TestLinkedIn:

    def test_bare_reference(self):
        assert extract_linkedin_url("My profile is on linkedin.com/in/johndoe") == (
            "https://www.linkedin.com/in/johndoe"
        )

    def test_full_url(self):
        assert extract_linkedin_url("https://www.linkedin.com/in/jane-doe/") == (
            "https://www.linkedin.com/in/jane-doe"
        )

    def test_host_is_lowercased(self):
        assert extract_linkedin_url("LinkedIn.com/in/jdoe") == "https://www.linkedin.com/in/jdoe"
        assert extract_linkedin_url("WWW.LINKEDIN.COM/IN/jdoe") == "https://www.linkedin.com/in/jdoe"

    def test_absent(self):
        assert extract_linkedin_url("github.com/janedoe") is None
        assert extract_linkedin_url(None) is None


class TestPhoneValidation:

    @pytest.mark.parametrize("value", [
        "555-1234",
        "+1 (555) 123-4567",
        "06.12.34.56.78",
        "+33 6 12 34 56 78",
    ])
    def test_valid(self, value):
        assert is_valid_phone_number(value)

    @pytest.mark.parametrize("value", [
        None,
        "",
        "   ",
        "123",
        "1234567890123456",
        "555-CALL-NOW",
    ])
    def test_invalid(self, value):
        assert not is_valid_phone_number(value)


def test_accented_email():
    assert detect_personal_info("André Martin\nandré.martin@exemple.fr").email == "andré.martin@exemple.fr"
