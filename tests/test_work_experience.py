"""Tests for work experience extraction from the experience section."""

from datetime import date

from resume_pipeline.core.work_experience import (
    is_date_line,
    is_description_line,
    parse_work_experience,
    split_title_company,
)

TODAY = date(2024, 6, 1)


def test_standard_english_format():
    """Title / company / dates blocks, most recent first."""
    text = (
        "Senior Software Engineer\n"
        "Google Inc.\n"
        "January 2020 - Present\n"
        "• Developed scalable microservices\n"
        "\n"
        "Software Developer\n"
        "Microsoft Corporation\n"
        "June 2018 - December 2019\n"
        "• Built cloud solutions\n"
    )
    entries = parse_work_experience(text, today=TODAY)

    assert len(entries) == 2
    first, second = entries
    assert first.job_title == "Senior Software Engineer"
    assert first.company == "Google Inc."
    assert first.start_date == date(2020, 1, 1)
    assert first.end_date is None
    assert first.description == "• Developed scalable microservices"

    assert second.job_title == "Software Developer"
    assert second.company == "Microsoft Corporation"
    assert second.start_date == date(2018, 6, 1)
    assert second.end_date == date(2019, 12, 1)


def test_french_format():
    text = (
        "Ingénieur Logiciel Senior\n"
        "Google France\n"
        "janvier 2020 - Aujourd'hui\n"
        "• Développement de microservices\n"
    )
    entries = parse_work_experience(text, today=TODAY)

    assert len(entries) == 1
    entry = entries[0]
    assert entry.job_title == "Ingénieur Logiciel Senior"
    assert entry.company == "Google France"
    assert entry.start_date == date(2020, 1, 1)
    assert entry.end_date is None
    assert entry.description == "• Développement de microservices"


def test_single_header_line_with_at():
    text = "Software Engineer at Google\n2020 - Present\n• Built search infrastructure"
    entries = parse_work_experience(text, today=TODAY)
    assert len(entries) == 1
    assert entries[0].job_title == "Software Engineer"
    assert entries[0].company == "Google"
    assert entries[0].start_date == date(2020, 1, 1)


def test_single_header_line_company_first():
    text = "Acme Corp | Data Analyst\n03/2017 - 05/2019"
    entries = parse_work_experience(text, today=TODAY)
    assert entries[0].job_title == "Data Analyst"
    assert entries[0].company == "Acme Corp"
    assert entries[0].start_date == date(2017, 3, 1)
    assert entries[0].end_date == date(2019, 5, 1)


def test_company_from_date_line():
    text = "Software Engineer\nGlobex, Jun 2016 - Aug 2018"
    entries = parse_work_experience(text, today=TODAY)
    assert entries[0].job_title == "Software Engineer"
    assert entries[0].company == "Globex"
    assert entries[0].start_date == date(2016, 6, 1)
    assert entries[0].end_date == date(2018, 8, 1)


def test_no_header_lines_uses_date_line():
    text = "Jan 2019 - Dec 2020 | Backend Developer at Initech\n• Led API redesign"
    entries = parse_work_experience(text, today=TODAY)
    assert entries[0].job_title == "Backend Developer"
    assert entries[0].company == "Initech"
    assert entries[0].description == "• Led API redesign"


def test_three_header_lines():
    text = "Acme Corp\nSenior Data Engineer\nBerlin\n2019 - 2022"
    entries = parse_work_experience(text, today=TODAY)
    assert entries[0].job_title == "Senior Data Engineer"
    assert entries[0].company == "Acme Corp"


def test_description_keeps_bullets_and_action_verbs():
    text = (
        "Senior Software Engineer\n"
        "Google Inc.\n"
        "January 2020 - Present\n"
        "Team of twelve engineers\n"
        "• Developed scalable microservices\n"
        "Led the search migration\n"
    )
    entries = parse_work_experience(text, today=TODAY)
    assert entries[0].description == "• Developed scalable microservices\nLed the search migration"


def test_invalid_dates_sort_last():
    text = (
        "Consultant\n"
        "Future Co\n"
        "2025 - Present\n"
        "Analyst\n"
        "Past Co\n"
        "2015 - 2018\n"
    )
    entries = parse_work_experience(text, today=TODAY)
    assert [e.job_title for e in entries] == ["Analyst", "Consultant"]
    assert entries[1].start_date is None
    assert entries[1].end_date is None


def test_entry_without_company_dropped():
    assert parse_work_experience("Freelancing\n2018 - 2019", today=TODAY) == []


def test_fallback_without_date_lines():
    text = (
        "Senior Developer\n"
        "Initech\n"
        "• Maintained legacy systems\n"
        "Project Manager\n"
        "Globex Corporation\n"
        "• Managed a team of five\n"
    )
    entries = parse_work_experience(text, today=TODAY)
    assert [(e.job_title, e.company) for e in entries] == [
        ("Senior Developer", "Initech"),
        ("Project Manager", "Globex Corporation"),
    ]
    assert entries[0].description == "• Maintained legacy systems"
    assert all(e.start_date is None for e in entries)


def test_extraction_is_extractive():
    text = (
        "Senior Software Engineer\nGoogle Inc.\nJanuary 2020 - Present\n\n"
        "Acme Corp | Data Analyst\n03/2017 - 05/2019\n"
    )
    for entry in parse_work_experience(text, today=TODAY):
        assert entry.job_title in text
        assert entry.company in text
        for line in entry.description.splitlines():
            assert line in text


def test_edge_cases():
    assert parse_work_experience(None) == []
    assert parse_work_experience("") == []
    assert parse_work_experience("   \n  ") == []


class TestHelpers:

    def test_split_title_company(self):
        assert split_title_company("Software Engineer at Google") == ("Software Engineer", "Google")
        assert split_title_company("Ingénieur Logiciel chez Google") == ("Ingénieur Logiciel", "Google")
        assert split_title_company("Google Inc. | Software Engineer") == ("Software Engineer", "Google Inc.")
        assert split_title_company("Consultant") == ("Consultant", None)

    def test_is_date_line(self):
        assert is_date_line("January 2020 - Present")
        assert is_date_line("janvier 2020 - Aujourd'hui")
        assert is_date_line("01/2020 - 12/2022")
        assert is_date_line("du janvier 2020 au décembre 2022")
        assert is_date_line("2015 - 2019")
        assert not is_date_line("Senior Software Engineer")
        assert not is_date_line("Graduated 2019")

    def test_is_description_line(self):
        assert is_description_line("• Built cloud solutions")
        assert is_description_line("Developed a billing service")
        assert is_description_line("Géré une équipe de cinq personnes")
        assert not is_description_line("Google Inc.")
