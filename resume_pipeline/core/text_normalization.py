"""
Text normalization utilities for cleaning up PDF/DOCX/OCR extraction artifacts.

Applied once, before section detection. Repairs are deliberately narrow:
- OCR confusions (stray apostrophes for accents, l/I, O/0, rn/m)
- line endings and whitespace runs
- runs of blank lines
Leading indentation survives because indented headers are a detection signal.
"""

import re
import unicodedata
from typing import List


# ============================================================================
# OCR repairs
# ============================================================================

# "expe'rience" -> "expérience". English contractions (we're, she'll, I've,
# it's, he'd, don't, I'm) keep their apostrophe.
_CONTRACTION_GUARD = r"(?!(?:re|ll|ve|s|d|t|m)\b)"

OCR_ACCENT_FIXES = [
    (re.compile(r"(?<=\w)e'" + _CONTRACTION_GUARD + r"(?=\w)"), "é"),
    (re.compile(r"(?<=\w)E'" + _CONTRACTION_GUARD + r"(?=\w)"), "É"),
    (re.compile(r"(?<=\w)a'" + _CONTRACTION_GUARD + r"(?=\w)"), "à"),
    (re.compile(r"(?<=\w)A'" + _CONTRACTION_GUARD + r"(?=\w)"), "À"),
]

# Lone glyphs OCR commonly confuses. French elision (l', d') is left alone.
OCR_TOKEN_FIXES = [
    (re.compile(r"(?<![\w'])l(?![\w'])"), "I"),
    (re.compile(r"(?<![\w'])O(?![\w'])"), "0"),
    (re.compile(r"(?<![\w'])rn(?![\w'])"), "m"),
]

SPACE_BEFORE_PUNCT_RE = re.compile(r"[ \t]+([:;])")

_LEADING_WS_RE = re.compile(r"^[ \t]*")
_INNER_WS_RE = re.compile(r"[ \t]+")


def fix_ocr_artifacts(text: str) -> str:
    """Apply the OCR repair table to a block of text."""
    for pattern, repl in OCR_ACCENT_FIXES:
        text = pattern.sub(repl, text)
    for pattern, repl in OCR_TOKEN_FIXES:
        text = pattern.sub(repl, text)
    return SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)


# ============================================================================
# Whitespace
# ============================================================================

def _normalize_line(line: str) -> str:
    """Collapse inner whitespace runs while keeping leading indentation."""
    line = line.rstrip()
    if not line:
        return ""
    indent = _LEADING_WS_RE.match(line).group(0).replace("\t", "    ")
    body = _INNER_WS_RE.sub(" ", line.lstrip())
    return indent + body


def normalize_lines(text: str) -> List[str]:
    """
    Split text into normalized lines.

    Blank-line runs collapse to a single blank line; leading and trailing
    blank lines are dropped.
    """
    out: List[str] = []
    for raw in text.split("\n"):
        line = _normalize_line(raw)
        if not line and (not out or not out[-1]):
            continue
        out.append(line)
    while out and not out[-1]:
        out.pop()
    return out


# ============================================================================
# Public API
# ============================================================================

def preprocess_text(text: str) -> str:
    """
    Normalize raw résumé text before header detection.

    Args:
        text: Raw text as produced by a document extractor or typed by a reviewer

    Returns:
        NFC-normalized text with OCR repairs, "\\n" line endings, collapsed
        whitespace and at most one consecutive blank line
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFC", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = fix_ocr_artifacts(text)
    return "\n".join(normalize_lines(text))
