"""
Tests for confidence-scored section splitting.

English and French résumés, multi-line headers, decorated headers, and the
rejection rules that keep job-entry lines from being read as headers.
"""

import pytest
from resume_pipeline.core.header_confidence import HeaderConfidence, has_company_suffix
from resume_pipeline.core.section_splitter import (
    detect_headers,
    normalize_section_key,
    split_into_lines,
    split_text_into_sections,
)


ENGLISH_RESUME = (
    "John Doe\n"
    "Software Engineer\n\n"
    "Summary\n"
    "A passionate software engineer.\n\n"
    "Work Experience\n"
    "Software Engineer at Google\n"
    "2020 - Present\n\n"
    "Education\n"
    "M.Sc. in Computer Science\n"
    "2018-2020\n\n"
    "Skills\n"
    "Java, Python, Spring Boot"
)

FRENCH_RESUME = (
    "Jean Dupont\n"
    "Ingénieur Logiciel\n\n"
    "Résumé\n"
    "Un ingénieur logiciel passionné.\n\n"
    "Expérience professionnelle\n"
    "Ingénieur Logiciel chez Google\n"
    "2020 - Présent\n\n"
    "Formation\n"
    "M.Sc. en Informatique\n"
    "2018-2020\n\n"
    "Compétences\n"
    "Java, Python, Spring Boot"
)

FRENCH_MULTI_LINE_RESUME = (
    "Jean Dupont\n"
    "Ingénieur Logiciel\n\n"
    "EXPÉRIENCE\n"
    "PROFESSIONNELLE\n"
    "Ingénieur Logiciel chez Google\n"
    "2020 - Présent\n\n"
    "ÉDUCATION ET\n"
    "FORMATION\n"
    "M.Sc. en Informatique\n"
    "2018-2020\n\n"
)


class TestSplitting:

    def test_english_resume(self):
        sections = split_text_into_sections(ENGLISH_RESUME)
        assert set(sections) == {"summary", "experience", "education", "skills"}
        assert sections["summary"] == "A passionate software engineer."
        assert sections["experience"] == "Software Engineer at Google\n2020 - Present"
        assert sections["education"] == "M.Sc. in Computer Science\n2018-2020"
        assert sections["skills"] == "Java, Python, Spring Boot"

    def test_english_bodies_do_not_overlap(self):
        sections = split_text_into_sections(ENGLISH_RESUME)
        bodies = list(sections.values())
        for i, a in enumerate(bodies):
            for b in bodies[i + 1:]:
                assert a not in b and b not in a

    def test_french_resume(self):
        sections = split_text_into_sections(FRENCH_RESUME)
        assert set(sections) == {"summary", "experience", "education", "skills"}
        assert sections["summary"] == "Un ingénieur logiciel passionné."
        assert sections["experience"] == "Ingénieur Logiciel chez Google\n2020 - Présent"
        assert sections["education"] == "M.Sc. en Informatique\n2018-2020"
        assert sections["skills"] == "Java, Python, Spring Boot"

    def test_french_multi_line_headers(self):
        sections = split_text_into_sections(FRENCH_MULTI_LINE_RESUME)
        assert sections["experience"] == "Ingénieur Logiciel chez Google\n2020 - Présent"
        assert sections["education"] == "M.Sc. en Informatique\n2018-2020"
        # Preamble before the first header
        assert sections["summary"] == "Jean Dupont\nIngénieur Logiciel"

    def test_multi_line_header_absorbs_single_line_candidates(self):
        headers = detect_headers(split_into_lines(FRENCH_MULTI_LINE_RESUME))
        assert [(h.key, h.style) for h in headers] == [
            ("experience", "multi-line"),
            ("education", "multi-line"),
        ]
        assert headers[0].start == 3 and headers[0].end == 4

    def test_ocr_broken_header(self):
        text = "Jean Dupont\n\nExpe'rience professionnelle\nIngénieur chez Acme\n2019 - 2021"
        sections = split_text_into_sections(text)
        assert sections["experience"] == "Ingénieur chez Acme\n2019 - 2021"

    def test_indented_header(self):
        text = (
            "Jane Doe\n"
            "Python developer with ten years of practice\n\n"
            "   SKILLS\n"
            "Java, Python, Docker, AWS\n"
            "Kubernetes and Terraform"
        )
        sections = split_text_into_sections(text)
        assert sections["skills"] == "Java, Python, Docker, AWS\nKubernetes and Terraform"
        assert sections["summary"] == "Jane Doe\nPython developer with ten years of practice"

    def test_bulleted_header(self):
        text = (
            "Jane Doe\n\n"
            "• Education\n"
            "Bachelor of Science\n"
            "University of Toronto\n"
            "2016 - 2020"
        )
        sections = split_text_into_sections(text)
        assert sections["education"] == "Bachelor of Science\nUniversity of Toronto\n2016 - 2020"

    def test_repeated_keys_are_joined(self):
        text = (
            "Jane Doe\n\n"
            "SKILLS\n"
            "Java, Python, Docker\n\n"
            "EXPERIENCE\n"
            "Software Engineer at Acme\n"
            "2019 - 2021\n\n"
            "TECHNICAL SKILLS\n"
            "Kubernetes, AWS, SQL\n"
            "Terraform, Git, Jenkins"
        )
        sections = split_text_into_sections(text)
        assert sections["skills"] == (
            "Java, Python, Docker\n\nKubernetes, AWS, SQL\nTerraform, Git, Jenkins"
        )
        assert sections["experience"] == "Software Engineer at Acme\n2019 - 2021"


class TestRejection:

    def test_company_name_is_not_a_header(self):
        text = (
            "Jane Doe\n\n"
            "EXPERIENCE\n"
            "Software Engineer\n"
            "ACME SKILLS INC\n"
            "2019 - 2021\n"
            "• Developed APIs"
        )
        sections = split_text_into_sections(text)
        assert "skills" not in sections
        assert "ACME SKILLS INC" in sections["experience"]

    def test_header_like_line_inside_job_entry(self):
        text = (
            "Jane Doe\n\n"
            "EXPERIENCE\n"
            "Senior Engineer\n"
            "PROJECTS DELIVERED\n"
            "2019 - 2021\n"
            "• Led migration"
        )
        sections = split_text_into_sections(text)
        assert "projects" not in sections
        assert "PROJECTS DELIVERED" in sections["experience"]

    def test_header_without_content_is_dropped(self):
        text = "Jane Doe\nBackend developer\n\nSKILLS"
        sections = split_text_into_sections(text)
        assert sections == {"summary": "Jane Doe\nBackend developer\n\nSKILLS"}


class TestEdgeCases:

    def test_empty_input(self):
        assert split_text_into_sections(None) == {}
        assert split_text_into_sections("") == {}
        assert split_text_into_sections("   \n\n  ") == {}

    def test_no_headers_maps_to_summary(self):
        text = "Just some text\nwithout any structure"
        assert split_text_into_sections(text) == {"summary": "Just some text\nwithout any structure"}

    def test_fresh_map_per_call(self):
        first = split_text_into_sections(ENGLISH_RESUME)
        first["experience"] = "mutated"
        assert split_text_into_sections(ENGLISH_RESUME)["experience"] != "mutated"


class TestKeyNormalization:

    def test_canonical_keys(self):
        assert normalize_section_key("Expérience professionnelle") == "experience"
        assert normalize_section_key("Work History") == "experience"
        assert normalize_section_key("Formation") == "education"
        assert normalize_section_key("Compétences techniques") == "skills"
        assert normalize_section_key("À propos") == "summary"
        assert normalize_section_key("Career Objective") == "summary"
        assert normalize_section_key("Centres d'intérêt") == "interests"
        assert normalize_section_key("Languages") == "languages"
        assert normalize_section_key("Personal Info") == "personal"

    def test_information_headers_are_not_education(self):
        assert normalize_section_key("Personal Information") == "personal"
        assert normalize_section_key("Contact Information") == "contact"
        assert normalize_section_key("Informations personnelles") == "personal"
        assert normalize_section_key("Coordonnées") == "contact"

    def test_unknown_defaults_to_summary(self):
        assert normalize_section_key("Miscellaneous") == "summary"


class TestHeaderConfidence:

    def test_exact_all_caps_single_line(self):
        assert HeaderConfidence.single_line("EXPERIENCE", "experience") == 1.0

    def test_company_suffix_penalty(self):
        assert HeaderConfidence.single_line("ACME SKILLS INC", "skills") == pytest.approx(0.5)

    def test_company_suffix_whole_word_only(self):
        assert has_company_suffix("Acme Inc.")
        assert has_company_suffix("Dupont SARL")
        assert not has_company_suffix("Incorporated knowledge")

    def test_content_mean_of_floor_scores(self):
        assert HeaderConfidence.content("experience", ["foo", "bar", "baz"]) == 0.3

    def test_content_empty(self):
        assert HeaderConfidence.content("skills", []) == 0.0

    def test_neutral_content_for_other_sections(self):
        assert HeaderConfidence.content("languages", ["english", "french"]) == 0.5
