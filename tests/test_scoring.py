# tests/test_scoring.py
import sqlite3
from unittest.mock import patch

from conftest import make_test
from aceprep.models import Outcome
from aceprep.schemas import PracticeTest
from aceprep.scoring import grade, PersonalBest, ScoringEngine


def test_marking_rule_example():
    """6 correct, 2 incorrect, 2 skipped out of 10 gives 22."""
    qs = make_test(10)
    answers = {i: "A" for i in range(1, 7)}
    answers.update({7: "B", 8: "C"})
    result = grade(qs, answers)
    assert result.total == 22
    assert (result.correct, result.incorrect, result.skipped) == (6, 2, 2)
    assert result.max_total == 40


def test_negative_total_not_clamped():
    result = grade(make_test(1), {1: "D"})
    assert result.total == -1
    assert result.outcome_for(1) is Outcome.INCORRECT


def test_all_skipped_scores_zero():
    result = grade(make_test(5), {})
    assert result.total == 0
    assert all(o is Outcome.SKIPPED for o in result.outcomes.values())
    assert result.accuracy == 0.0


def test_exact_string_match_only():
    """Case and whitespace differences count as incorrect."""
    result = grade(make_test(3), {1: "a", 2: " A", 3: "A"})
    assert [result.outcome_for(i) for i in (1, 2, 3)] == [
        Outcome.INCORRECT, Outcome.INCORRECT, Outcome.CORRECT,
    ]
    assert result.total == 2


def test_numerical_answers():
    qs = PracticeTest.model_validate({
        "subject": "Physics", "topic": "Kinematics",
        "questions": [
            {"id": 7, "type": "NUMERICAL", "questionText": "g?", "correctAnswer": "9.8", "solution": "."},
            {"id": 9, "type": "NUMERICAL", "questionText": "c?", "correctAnswer": "3", "solution": "."},
        ],
    })
    result = grade(qs, {7: "9.8", 9: "3.0"})
    assert result.outcome_for(7) is Outcome.CORRECT
    assert result.outcome_for(9) is Outcome.INCORRECT
    assert result.total == 3


def test_outcomes_follow_question_order():
    qs = make_test(4)
    result = grade(qs, {3: "A"})
    assert list(result.outcomes) == [1, 2, 3, 4]


def test_answers_for_unknown_questions_are_ignored():
    result = grade(make_test(2), {1: "A", 99: "A"})
    assert result.total == 4
    assert 99 not in result.outcomes


def test_grade_is_deterministic():
    qs = make_test(10)
    answers = {1: "A", 2: "B", 5: "A"}
    assert grade(qs, answers) == grade(qs, answers)


def test_accuracy():
    result = grade(make_test(4), {1: "A", 2: "A", 3: "A", 4: "B"})
    assert result.accuracy == 75.0


def test_personal_best_defaults_to_zero(pb_slot):
    assert PersonalBest(pb_slot).get() == 0


def test_personal_best_unparsable_reads_zero(pb_slot):
    pb_slot.save("lots")
    assert PersonalBest(pb_slot).get() == 0


def test_personal_best_only_increases(pb_slot):
    pb = PersonalBest(pb_slot)
    assert pb.record(12) is True
    assert pb.record(8) is False
    assert pb.record(12) is False
    assert pb.get() == 12
    assert pb.record(20) is True
    assert pb_slot.load() == "20"


def test_negative_total_never_beats_default(pb_slot):
    pb = PersonalBest(pb_slot)
    assert pb.record(-3) is False
    assert pb_slot.load() is None


def test_personal_best_monotonic_across_scores(pb_slot):
    engine = ScoringEngine(PersonalBest(pb_slot))
    qs = make_test(5)
    seen = []
    for answers in ({1: "A"}, {1: "A", 2: "A", 3: "A"}, {1: "B"}, {}, {i: "A" for i in range(1, 6)}, {1: "A"}):
        engine.score(qs, answers)
        seen.append(engine.personal_best.get())
    assert seen == sorted(seen)
    assert seen[-1] == 20


def test_engine_without_personal_best(pb_slot):
    result = ScoringEngine().score(make_test(2), {1: "A", 2: "A"})
    assert result.total == 8
    assert pb_slot.load() is None


def test_personal_best_write_failure_is_not_raised(pb_slot):
    pb = PersonalBest(pb_slot)
    with patch.object(pb_slot, "save", side_effect=sqlite3.OperationalError("locked")):
        assert pb.record(10) is False
    assert pb.get() == 0
