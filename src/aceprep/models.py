"""Data classes for locally held state."""
from dataclasses import dataclass, field, asdict
from enum import Enum
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class SavedTemplate:
    id: str
    subjects: tuple
    topics: tuple
    exam_level: str
    count: int

    def to_dict(self) -> dict:
        data = asdict(self)
        data["subjects"] = list(self.subjects)
        data["topics"] = list(self.topics)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SavedTemplate":
        return cls(
            id=str(data["id"]),
            subjects=tuple(data["subjects"]),
            topics=tuple(data["topics"]),
            exam_level=str(data["exam_level"]),
            count=int(data["count"]),
        )


class Outcome(Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    SKIPPED = "skipped"


CORRECT_MARKS = 4
INCORRECT_MARKS = -1
SKIPPED_MARKS = 0

MARKS = {
    Outcome.CORRECT: CORRECT_MARKS,
    Outcome.INCORRECT: INCORRECT_MARKS,
    Outcome.SKIPPED: SKIPPED_MARKS,
}


@dataclass(frozen=True)
class ScoreResult:
    total: int
    outcomes: Mapping = field(default_factory=dict)  # question id -> Outcome, in set order
    max_total: int = 0

    def __post_init__(self):
        object.__setattr__(self, "outcomes", MappingProxyType(dict(self.outcomes)))

    def outcome_for(self, question_id: int) -> Outcome:
        return self.outcomes[question_id]

    def count(self, outcome: Outcome) -> int:
        return sum(1 for o in self.outcomes.values() if o is outcome)

    @property
    def correct(self) -> int:
        return self.count(Outcome.CORRECT)

    @property
    def incorrect(self) -> int:
        return self.count(Outcome.INCORRECT)

    @property
    def skipped(self) -> int:
        return self.count(Outcome.SKIPPED)

    @property
    def accuracy(self) -> float:
        """Percentage correct among attempted questions."""
        attempted = self.correct + self.incorrect
        if attempted == 0:
            return 0.0
        return round(self.correct / attempted * 100, 1)
