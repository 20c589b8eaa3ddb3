import itertools

import pytest

from aiquiz.models.records import PersonalityAnswer
from aiquiz.services.personality import PersonalityEngine, axis_for_question

PAIRS = [("E", "I"), ("S", "N"), ("T", "F"), ("J", "P")]


def answers_for(options):
    return [PersonalityAnswer(question_id=i, selected_option=opt) for i, opt in enumerate(options, start=1)]


@pytest.mark.parametrize("options", [
    [0] * 8,
    [2] * 8,
    [1] * 8,
    [0, 2, 1, 0, 2, 2, 0, 1],
    [2, 0, 0, 1, 1, 2, 2, 0, 0, 2],
])
def test_paired_scores_sum_to_one(options):
    scores = PersonalityEngine.score(answers_for(options))

    assert set(scores) == {"E", "I", "S", "N", "T", "F", "J", "P"}
    for first, second in PAIRS:
        assert abs(scores[first] + scores[second] - 1.0) < 1e-9
        assert 0.0 <= scores[first] <= 1.0


def test_axis_comes_from_question_id_not_trait_label():
    answers = [PersonalityAnswer(question_id=1, selected_option=2, trait="J/P")]
    scores = PersonalityEngine.score(answers)

    assert scores["E"] == pytest.approx(0.35)
    assert scores["I"] == pytest.approx(0.65)
    assert scores["J"] == 0.5


def test_axis_mapping():
    assert [axis_for_question(i) for i in range(1, 10)] == [
        "E/I", "E/I", "S/N", "S/N", "T/F", "T/F", "J/P", "J/P", "J/P",
    ]


def test_derive_type_extremes_and_ties():
    engine = PersonalityEngine()
    assert engine.derive_type(engine.score(answers_for([0] * 8))) == "ESTJ"
    assert engine.derive_type(engine.score(answers_for([2] * 8))) == "INFP"
    # Neutral answers tie on every axis
    assert engine.derive_type(engine.score(answers_for([1] * 8))) == "ESTJ"


def test_derive_type_is_pure():
    scores = {"E": 0.4, "I": 0.6, "S": 0.5, "N": 0.5, "T": 0.7, "F": 0.3, "J": 0.2, "P": 0.8}
    assert PersonalityEngine.derive_type(scores) == PersonalityEngine.derive_type(dict(scores)) == "ISTP"


def test_confidence_bounds():
    neutral = {letter: 0.5 for letter in "ESTJINFP"}
    assert PersonalityEngine.confidence(neutral) == 0.0

    extreme = {"E": 1.0, "I": 0.0, "S": 0.0, "N": 1.0, "T": 1.0, "F": 0.0, "J": 0.0, "P": 1.0}
    assert PersonalityEngine.confidence(extreme) == 1.0

    for options in itertools.product([0, 1, 2], repeat=4):
        value = PersonalityEngine.confidence(PersonalityEngine.score(answers_for(options * 2)))
        assert 0.0 <= value <= 1.0


def test_lookups_and_generic_fallbacks():
    engine = PersonalityEngine()
    assert engine.title("INTJ") == "The Architect"
    assert engine.strengths("INTJ") == ["Strategic thinking", "Independent problem-solving", "Long-term vision"]

    assert engine.title("XXXX") == "Unique Personality"
    assert engine.strengths("XXXX") == ["Unique perspective", "Personal authenticity", "Individual strengths"]
    assert engine.growth_areas("XXXX") == ["Continued learning", "Skill development", "Personal growth"]


def test_analyze_uses_static_description_without_generator():
    result = PersonalityEngine().analyze(answers_for([2] * 8))

    assert result.personality_type == "INFP"
    assert result.title == "The Mediator"
    assert result.description.startswith("The Mediator - ")
    assert result.ai_generated is False
    assert len(result.strengths) == 3


def test_analyze_ignores_short_generated_description():
    result = PersonalityEngine().analyze(answers_for([0] * 8), describe=lambda t: "Too short.")

    assert result.description.startswith("The Executive - ")
    assert result.ai_generated is False


def test_analyze_truncates_long_generated_description():
    long_text = "Organized and decisive. " * 20
    result = PersonalityEngine().analyze(answers_for([0] * 8), describe=lambda t: long_text)

    assert result.ai_generated is True
    assert len(result.description) == 203
    assert result.description.endswith("...")
