"""
Unit tests for text_normalization module.

Tests the preprocessing applied before section detection.
"""

from resume_pipeline.core.text_normalization import (
    fix_ocr_artifacts,
    normalize_lines,
    preprocess_text,
)


class TestOcrRepairs:
    """Test narrow OCR artifact repairs."""

    def test_apostrophe_accent(self):
        assert fix_ocr_artifacts("Expe'rience professionnelle") == "Expérience professionnelle"

    def test_upper_case_accent(self):
        assert fix_ocr_artifacts("EXPE'RIENCE") == "EXPÉRIENCE"

    def test_contractions_untouched(self):
        assert fix_ocr_artifacts("we're hiring, she'll lead") == "we're hiring, she'll lead"

    def test_lone_l_becomes_I(self):
        assert fix_ocr_artifacts("l led the team") == "I led the team"

    def test_french_elision_untouched(self):
        assert fix_ocr_artifacts("l'entreprise") == "l'entreprise"

    def test_lone_rn_becomes_m(self):
        assert fix_ocr_artifacts("5 rn users") == "5 m users"

    def test_space_before_colon_removed(self):
        assert fix_ocr_artifacts("Skills : Python ; Java") == "Skills: Python; Java"

    def test_regular_words_untouched(self):
        text = "Developed Orleans platform"
        assert fix_ocr_artifacts(text) == text


class TestWhitespace:

    def test_line_endings(self):
        assert preprocess_text("a\r\nb\rc") == "a\nb\nc"

    def test_inner_whitespace_collapsed(self):
        assert preprocess_text("Senior    Software\tEngineer   ") == "Senior Software Engineer"

    def test_indentation_preserved(self):
        assert preprocess_text("Name\n    EXPERIENCE") == "Name\n    EXPERIENCE"

    def test_tab_indent_expanded(self):
        assert preprocess_text("Name\n\tSKILLS") == "Name\n    SKILLS"

    def test_blank_runs_collapsed(self):
        assert normalize_lines("\n\na\n\n\n\nb\n\n") == ["a", "", "b"]

    def test_empty(self):
        assert preprocess_text("") == ""

    def test_nfc(self):
        decomposed = "Expérience"
        assert preprocess_text(decomposed) == "Expérience"
