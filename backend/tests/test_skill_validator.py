import pytest

from services.skill_validator import is_valid, mentions_pay


@pytest.mark.parametrize("candidate", [
    "Welding",
    "blueprint reading",
    "written communication skills",
    "hands-on experience",
    "health and safety",
])
def test_accepts_skill_names(candidate):
    assert is_valid(candidate) is True


def test_rejects_task_verb_opener():
    assert is_valid("delegate tasks to team members") is False
    assert is_valid("Maintain records") is False


def test_rejects_long_phrases():
    assert is_valid("x" * 41) is False
    assert is_valid("x" * 40) is True


def test_rejects_too_many_words():
    assert is_valid("one two three four five six") is False
    assert is_valid("one two three four five") is True


def test_rejects_passive_task_description():
    assert is_valid("work that has been assigned") is False


@pytest.mark.parametrize("candidate", [
    "work with us",
    "join our crew",
    "our values",
    "benefits",
    "Responsibilities",
    "full-time",
])
def test_rejects_boilerplate(candidate):
    assert is_valid(candidate) is False


@pytest.mark.parametrize("candidate", ["", "   ", None, 3])
def test_rejects_empty_and_non_strings(candidate):
    assert is_valid(candidate) is False


def test_is_pure():
    assert [is_valid("welding") for _ in range(3)] == [True, True, True]


@pytest.mark.parametrize("candidate", [
    "5 years of experience",
    "2 yrs welding",
    "years experience",
    "bachelor s degree",
    "cdl license",
    "forklift certification",
    "ability to lift 50 lbs",
    "the ability to travel",
    "willing to travel",
    "401k",
    "salary 45000",
    "skills",
    "knowledge",
    "work experience",
    "3d modeling",
])
def test_rejects_requirements_and_generic_terms(candidate):
    assert is_valid(candidate) is False


@pytest.mark.parametrize("candidate", ["welding experience", "computer skills", "electrical knowledge"])
def test_generic_word_inside_skill_is_kept(candidate):
    assert is_valid(candidate) is True


def test_mentions_pay():
    assert mentions_pay("$25/hour") is True
    assert mentions_pay("10% travel") is True
    assert mentions_pay("£30k") is True
    assert mentions_pay("welding") is False
    assert mentions_pay(None) is False
