"""Declared JSON shapes for replies from the generation service.

These models double as the ``response_schema`` sent with each request and as
the validator for the reply body. A reply that fails validation is a failed
request; fields are never recovered one by one.
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Question(WireModel):
    id: int
    type: Literal["MCQ", "NUMERICAL"] = Field(description="MCQ or NUMERICAL")
    question_text: str = Field(alias="questionText")
    options: Optional[list[str]] = Field(
        default=None,
        description="Array of 4 options for MCQs. Leave empty for NUMERICAL type.",
    )
    correct_answer: str = Field(
        alias="correctAnswer",
        description="The correct option (A/B/C/D) or the specific numerical value.",
    )
    solution: str = Field(description="Detailed step-by-step pedagogical solution.")
    difficulty_level: Optional[str] = Field(default=None, alias="difficultyLevel")

    @field_validator("type", mode="before")
    @classmethod
    def _upper_type(cls, value):
        return value.strip().upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _mcq_needs_options(self):
        if self.type == "MCQ" and len(self.options or []) < 2:
            raise ValueError(f"MCQ question {self.id} has no options")
        return self

    @property
    def is_mcq(self) -> bool:
        return self.type == "MCQ"

    def option_labels(self) -> list[tuple[str, str]]:
        """Pair each option with its letter label (A, B, C, ...)."""
        return [(chr(65 + i), opt) for i, opt in enumerate(self.options or [])]


class PracticeTest(WireModel):
    subject: str
    topic: str
    questions: list[Question]

    @model_validator(mode="after")
    def _unique_ids(self):
        ids = [q.id for q in self.questions]
        if len(ids) != len(set(ids)):
            raise ValueError("question ids are not unique")
        return self


class FormulaCard(WireModel):
    title: str
    formulas: list[str]
    concepts: list[str]
    reactions: Optional[list[str]] = None
    pro_tip: str = Field(alias="proTip")


class ScheduleSlot(WireModel):
    time: str
    activity: str
    subject: str
    topic: str
    type: Literal["Theory", "Practice", "Revision", "Break"] = Field(
        description="Theory, Practice, Revision, or Break"
    )

    @field_validator("type", mode="before")
    @classmethod
    def _title_type(cls, value):
        return value.strip().title() if isinstance(value, str) else value


class TimeTable(WireModel):
    title: str
    description: str
    schedule: list[ScheduleSlot]
    tips: list[str]


class PYQSolution(WireModel):
    underlying_concept: str = Field(alias="underlyingConcept")
    mathematical_derivation: str = Field(alias="mathematicalDerivation")
    pro_tip: str = Field(alias="proTip")
