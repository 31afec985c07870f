"""Negative-marking score engine and personal-best tracking."""
import logging
import sqlite3
from typing import Mapping, Optional

from aceprep.db import SettingSlot
from aceprep.models import MARKS, CORRECT_MARKS, Outcome, ScoreResult
from aceprep.schemas import PracticeTest

logger = logging.getLogger(__name__)


def grade(question_set: PracticeTest, answers: Mapping[int, str]) -> ScoreResult:
    """Score ``answers`` against ``question_set``.

    Unanswered questions score 0, exact matches of the correct answer token
    score +4 and anything else scores -1. The total is not clamped.
    """
    outcomes = {}
    for question in question_set.questions:
        if question.id not in answers:
            outcomes[question.id] = Outcome.SKIPPED
        elif answers[question.id] == question.correct_answer:
            outcomes[question.id] = Outcome.CORRECT
        else:
            outcomes[question.id] = Outcome.INCORRECT
    total = sum(MARKS[o] for o in outcomes.values())
    return ScoreResult(
        total=total,
        outcomes=outcomes,
        max_total=CORRECT_MARKS * len(question_set.questions),
    )


class PersonalBest:
    """Highest total ever scored, held in a persisted slot."""

    def __init__(self, slot: SettingSlot):
        self.slot = slot

    def get(self) -> int:
        raw = self.slot.load()
        if raw is None:
            return 0
        try:
            return int(raw)
        except ValueError:
            logger.error("Ignoring unparsable personal best %r in %s", raw, self.slot)
            return 0

    def record(self, total: int) -> bool:
        """Store ``total`` if it beats the current best. Returns True when stored."""
        if total <= self.get():
            return False
        try:
            self.slot.save(str(total))
        except sqlite3.Error:
            logger.warning("Could not persist personal best %d", total, exc_info=True)
            return False
        logger.info("New personal best: %d", total)
        return True


class ScoringEngine:
    """Grades submissions and, when given a personal best, keeps it current."""

    def __init__(self, personal_best: Optional[PersonalBest] = None):
        self.personal_best = personal_best

    def score(self, question_set: PracticeTest, answers: Mapping[int, str]) -> ScoreResult:
        result = grade(question_set, answers)
        if self.personal_best is not None:
            self.personal_best.record(result.total)
        return result
