"""Canonicalise raw free-text skill phrases.

``normalize`` lower-cases a phrase, removes punctuation (keeping internal
hyphens and the ``,`` / ``/`` list separators the splitter works on),
collapses whitespace and drops leading qualifier adjectives such as
"excellent" or "proven". It returns ``None`` when nothing usable is left.
"""

import re

MIN_LENGTH = 2

# Leading qualifiers that say how good the skill should be, not what it is.
QUALIFIER_WORDS: frozenset[str] = frozenset({
    "excellent", "good", "strong", "great", "outstanding", "exceptional",
    "superior", "superb", "solid", "sound", "proven", "demonstrated",
    "demonstrable", "extensive", "thorough", "effective", "proficient",
    "competent", "skilled", "experienced", "highly", "very", "relevant",
    "previous", "prior", "keen", "exemplary",
})

_PUNCTUATION = re.compile(r"[^\w\s,/-]|_")
# A hyphen survives only between two alphanumerics ("hands-on", "e-commerce").
_LOOSE_HYPHEN = re.compile(r"(?<![^\W_])-+|-+(?![^\W_])")
_COMMA = re.compile(r"\s*,[\s,]*")
_SLASH = re.compile(r"\s*/[\s/]*")
_EDGE_SEPARATORS = re.compile(r"^[\s,/]+|[\s,/]+$")
_WHITESPACE = re.compile(r"\s+")


def _strip_qualifiers(text: str) -> str:
    while True:
        text = _EDGE_SEPARATORS.sub("", _WHITESPACE.sub(" ", text)).strip()
        first, _, rest = text.partition(" ")
        if first not in QUALIFIER_WORDS:
            return text
        text = rest


def normalize(phrase: str) -> str | None:
    """Return the normalized skill text, or ``None`` if it is not a skill.

    Idempotent: ``normalize(normalize(p)) == normalize(p)`` for any phrase
    whose first result is not ``None``.
    """
    if not isinstance(phrase, str):
        return None

    text = phrase.lower().replace("&", " and ")
    text = _PUNCTUATION.sub(" ", text)
    text = _LOOSE_HYPHEN.sub(" ", text)
    text = _COMMA.sub(", ", text)
    text = _SLASH.sub("/", text)
    text = _strip_qualifiers(text)

    if len(text) < MIN_LENGTH:
        return None
    return text
