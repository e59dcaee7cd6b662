"""Split compound skill phrases into atomic candidates.

"communication and presentation skills" -> ["communication", "presentation skills"]
"welding/fabrication, blueprint reading" -> ["welding", "fabrication", "blueprint reading"]
"""

import re

# Multi-word skills joined by "and" that must stay whole.
KEEP_WHOLE: tuple[str, ...] = (
    "reading and writing",
    "judgment and decision making",
    "operation and control",
    "research and development",
    "health and safety",
    "oil and gas",
    "heating and cooling",
    "instrumentation and controls",
    "time and attendance",
    "quality assurance and control",
)

_SEPARATORS = re.compile(r"\s+(?:and|&)\s+|\s*[/,]\s*", re.IGNORECASE)
_CONJUNCTION = re.compile(r"\s+(?:and|&)\s+", re.IGNORECASE)
_PLACEHOLDER = "\x00"

# Longest first so "quality assurance and control" wins over shorter overlaps.
_KEEP_WHOLE_PATTERN = re.compile(
    r"\b(?:"
    + "|".join(re.escape(p) for p in sorted(KEEP_WHOLE, key=len, reverse=True))
    + r")\b",
    re.IGNORECASE,
)


def _protect(match: re.Match) -> str:
    return _CONJUNCTION.sub(_PLACEHOLDER, match.group(0))


def split(phrase: str) -> list[str]:
    """Split *phrase* on top-level conjunctions, slashes and commas.

    Order is preserved and nothing is deduplicated. A phrase without
    separators comes back as ``[phrase]``.
    """
    if not isinstance(phrase, str):
        return []

    protected = _KEEP_WHOLE_PATTERN.sub(_protect, phrase)
    parts = [
        p.replace(_PLACEHOLDER, " and ").strip()
        for p in _SEPARATORS.split(protected)
    ]
    parts = [p for p in parts if p]
    return parts or [phrase]
