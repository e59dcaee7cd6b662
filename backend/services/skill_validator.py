"""Reject candidate phrases that are not plausible skill names.

Besides task phrasing and boilerplate, requirement fragments are rejected:
pay figures, years of experience, degrees and licences, "ability to ..."
phrases and terms too generic to name a skill.

Precision over recall: dropping a real skill is acceptable, keeping a
sentence fragment pollutes the taxonomy cache. The same check filters
taxonomy skill names before they are scored by the fuzzy matcher.
"""

import re

MAX_LENGTH = 40
MAX_WORDS = 5

# Instruction-style openers ("maintain records", "delegate tasks ...").
TASK_VERBS: frozenset[str] = frozenset({
    "delegate", "organize", "establish", "maintain", "develop", "implement",
    "create", "manage", "coordinate", "supervise", "direct", "oversee",
    "monitor", "evaluate", "assess", "review", "update", "prepare",
    "conduct", "perform", "execute", "complete", "ensure", "provide",
    "assist", "facilitate", "deliver", "follow", "adhere", "comply",
    "handle", "achieve", "demonstrate",
})

RECRUITMENT_PHRASES: tuple[str, ...] = (
    "join our", "join us", "work with us", "partner with", "become part",
    "be part of", "we are", "we offer", "our team", "our company",
    "our culture", "our mission", "world-class", "industry-leading",
    "award-winning", "state-of-the-art", "leading provider",
)

# Posting artifacts and section headers that show up in skill lists.
NON_SKILL_TERMS: frozenset[str] = frozenset({
    "responsibilities", "requirements", "qualifications", "compensation",
    "benefits", "duties", "job description", "job requirements",
    "key responsibilities", "basic qualifications", "essential functions",
    "what you will do", "how to apply", "equal opportunity",
    "career", "career development", "professional development",
    "full-time", "part-time", "contract", "temporary", "permanent",
    "remote", "on-site", "hybrid", "etc", "n/a", "none", "other",
})

# Terms too broad to be a skill on their own.
GENERIC_TERMS: frozenset[str] = frozenset({
    "experience", "skills", "skill", "knowledge", "ability", "abilities",
    "qualification", "qualifications", "requirement", "requirements",
    "background", "expertise", "capability", "capabilities", "competency",
    "competencies", "proficiency", "characteristic", "characteristics",
    "attribute", "attributes", "trait", "traits", "thinking skills",
    "just experience", "work experience",
})

_PASSIVE_TASK = re.compile(r"\bthat (?:has|have|had) been\b", re.IGNORECASE)
_FIRST_PERSON = re.compile(r"\b(?:our|we|us)\b", re.IGNORECASE)
_STARTS_WITH_LETTER = re.compile(r"^[a-z]", re.IGNORECASE)

# Pay, percentages and large figures: "401k", "$25/hour", "40,000".
_MONEY = re.compile(r"[$€£%]|\b(?:usd|eur|gbp)\b|\d+k\b|\d{3,}", re.IGNORECASE)
_EXPERIENCE_REQUIREMENT = re.compile(
    r"\b\d+\+?\s*(?:years?|yrs?|months?)\b"
    r"|\byears? (?:of )?experience\b"
    r"|\b(?:one|two|three|four|five) years?\b"
    r"|\binternships?\b|\bwork experience\b|\bup to \d+",
    re.IGNORECASE,
)
_CREDENTIAL_REQUIREMENT = re.compile(
    r"\b(?:degree|diploma|clearance|certification|certified|license|licensed)\b",
    re.IGNORECASE,
)
_ABILITY_TO = re.compile(r"^(?:the )?ability to\b", re.IGNORECASE)
_CONDITIONS = re.compile(
    r"\btravel \d+|willing to travel|\bus citizen|citizenship required|flexible hours",
    re.IGNORECASE,
)


def _is_requirement(lower: str) -> bool:
    if not _STARTS_WITH_LETTER.match(lower):
        return True
    if lower in GENERIC_TERMS or _ABILITY_TO.search(lower):
        return True
    return bool(
        _MONEY.search(lower)
        or _EXPERIENCE_REQUIREMENT.search(lower)
        or _CREDENTIAL_REQUIREMENT.search(lower)
        or _CONDITIONS.search(lower)
    )


def _is_boilerplate(lower: str) -> bool:
    if lower in NON_SKILL_TERMS:
        return True
    if any(phrase in lower for phrase in RECRUITMENT_PHRASES):
        return True
    return bool(_FIRST_PERSON.search(lower))


def is_valid(candidate: str) -> bool:
    """Return True if *candidate* looks like a skill name."""
    if not isinstance(candidate, str):
        return False
    text = candidate.strip()
    if not text:
        return False

    lower = text.lower()
    words = lower.split()

    if words[0] in TASK_VERBS:
        return False
    if len(text) > MAX_LENGTH:
        return False
    if len(words) > MAX_WORDS:
        return False
    if _PASSIVE_TASK.search(text):
        return False
    if _is_requirement(lower):
        return False
    return not _is_boilerplate(lower)


def mentions_pay(phrase: str) -> bool:
    """True for raw phrases quoting pay or percentages ("$25/hour", "401k", "10% travel").

    Checked before normalization, which strips the currency and percent signs.
    """
    return isinstance(phrase, str) and bool(_MONEY.search(phrase))
