"""Content processing utilities: size, checksum and descriptive metadata."""

import hashlib
import re
from typing import Any, Dict

KEYWORD_LIMIT = 20
KEYWORD_MIN_LENGTH = 5
SUMMARY_LINES = 3
SUMMARY_LENGTH = 200

_ALPHA_WORD = re.compile(r"^[a-zA-Z]+$")


def content_size(content: str) -> int:
    """UTF-8 byte length."""
    return len(content.encode("utf-8"))


def compute_checksum(content: str) -> str:
    """SHA-256 hex digest of the UTF-8 content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def mime_type_for(file_name: str) -> str:
    return "text/markdown" if file_name.lower().endswith(".md") else "text/plain"


def extract_keywords(words: list[str]) -> list[str]:
    """Unique lowercase alphabetic words of 5+ characters, first seen first."""
    seen: dict[str, None] = {}
    for word in words:
        if len(word) >= KEYWORD_MIN_LENGTH and _ALPHA_WORD.match(word):
            seen.setdefault(word.lower(), None)
        if len(seen) >= KEYWORD_LIMIT:
            break
    return list(seen)


def summarize(content: str) -> str:
    """First three non-empty lines joined by spaces, capped at 200 chars."""
    lines = [line for line in content.split("\n") if line.strip()]
    return " ".join(lines[:SUMMARY_LINES])[:SUMMARY_LENGTH]


def build_content_metadata(content: str, file_name: str) -> Dict[str, Any]:
    """Descriptive metadata shared by file rows and version records."""
    words = content.split()
    summary = summarize(content)
    return {
        "encoding": "utf-8",
        "mime_type": mime_type_for(file_name),
        "word_count": len(words),
        "line_count": len(content.split("\n")),
        "keywords": extract_keywords(words),
        "summary": summary or None,
    }
