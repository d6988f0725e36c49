# transcript_finder/acquisition/normalize.py
"""
Text normalization for raw caption text.

Steps, in fixed order:
1. Named HTML entities (case-insensitive, doubly escaped forms included)
2. Numeric character references (decimal and hex)
3. Remaining markup tags
4. Whitespace: runs -> single space, blank-line runs -> one newline, trim
5. C0/C1 control characters
6. Repeated punctuation

The full pass repeats until the text stops changing, so normalize() is
idempotent even when a later step exposes input for an earlier one.
"""

from __future__ import annotations

import re


NAMED_ENTITIES = {
    "quot": '"',
    "apos": "'",
    "lt": "<",
    "gt": ">",
    "nbsp": " ",
    "ndash": "–",
    "mdash": "—",
    "hellip": "...",
    "lsquo": "‘",
    "rsquo": "’",
    "sbquo": "‚",
    "ldquo": "“",
    "rdquo": "”",
    "bdquo": "„",
    "laquo": "«",
    "raquo": "»",
}

AMP_RE = re.compile(r"&amp;", re.IGNORECASE)
NAMED_RE = re.compile(r"&(" + "|".join(NAMED_ENTITIES) + r");", re.IGNORECASE)
DECIMAL_RE = re.compile(r"&#(\d{1,7});")
HEX_RE = re.compile(r"&#x([0-9a-f]{1,6});", re.IGNORECASE)
TAG_RE = re.compile(r"</?[a-zA-Z][^<>]*>|<!--.*?-->", re.DOTALL)
INLINE_SPACE_RE = re.compile(r"[^\S\n]+")
NEWLINE_SPACE_RE = re.compile(r" ?\n ?")
BLANK_LINES_RE = re.compile(r"\n{2,}")
CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
DOTS_RE = re.compile(r"\.{3,}")
REPEATED_PUNCT_RE = re.compile(r"([?!,])\1+")

def _codepoint(value: int) -> str:
    if value == 0 or value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
        return ""
    return chr(value)


def decode_named_entities(text: str) -> str:
    previous = None
    while previous != text:
        previous = text
        text = AMP_RE.sub("&", text)
    return NAMED_RE.sub(lambda m: NAMED_ENTITIES[m.group(1).lower()], text)


def decode_numeric_references(text: str) -> str:
    text = DECIMAL_RE.sub(lambda m: _codepoint(int(m.group(1))), text)
    return HEX_RE.sub(lambda m: _codepoint(int(m.group(1), 16)), text)


def strip_tags(text: str) -> str:
    return TAG_RE.sub("", text)


def collapse_whitespace(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = INLINE_SPACE_RE.sub(" ", text)
    text = NEWLINE_SPACE_RE.sub("\n", text)
    text = BLANK_LINES_RE.sub("\n", text)
    return text.strip()


def strip_control_characters(text: str) -> str:
    return CONTROL_RE.sub("", text)


def collapse_punctuation(text: str) -> str:
    text = DOTS_RE.sub("...", text)
    return REPEATED_PUNCT_RE.sub(r"\1", text)


PIPELINE = (
    decode_named_entities,
    decode_numeric_references,
    strip_tags,
    collapse_whitespace,
    strip_control_characters,
    collapse_punctuation,
)


def _single_pass(text: str) -> str:
    for step in PIPELINE:
        text = step(text)
    return text


def normalize(raw_text: str) -> str:
    """Clean raw caption text into a single tidy string. Total and idempotent."""
    text = raw_text or ""
    # Every pass shortens the text or canonicalizes whitespace, so this terminates.
    while True:
        cleaned = _single_pass(text)
        if cleaned == text:
            return text
        text = cleaned
