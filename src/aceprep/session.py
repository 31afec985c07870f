"""View state machine for one browsing session.

A session is always in exactly one of four view states:

* ``Dashboard``
* ``Configuring(tool)`` - the tool's form is being edited
* ``Loading(tool, token)`` - a generation request is in flight
* ``Reviewing(tool, result)`` - the reply is being shown

Every submit takes a fresh request token. A reply is applied only while the
session is still ``Loading`` with that same token, so a slow reply that
arrives after the user moved on is dropped instead of overwriting the view.

Test-taking tools review through an ``AnswerSheet``, which starts in the
answering phase and, once submitted, freezes its answers and score.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from aceprep import catalog
from aceprep.errors import FormValidationError, GenerationError, InvalidTransitionError
from aceprep.generation import GenerationService
from aceprep.models import SavedTemplate, ScoreResult
from aceprep.schemas import PracticeTest
from aceprep.scoring import PersonalBest, ScoringEngine
from aceprep.selection import Selection
from aceprep.templates import TemplateStore

logger = logging.getLogger(__name__)


class Tool(Enum):
    CUSTOM_TEST = "Custom Test"
    FORMULA_CARDS = "Formula Cards"
    TIME_TABLE = "AI Time Table"
    ARCHIVE = "PYQ Browser"


@dataclass(frozen=True)
class Dashboard:
    pass


@dataclass(frozen=True)
class Configuring:
    tool: Tool


@dataclass(frozen=True)
class Loading:
    tool: Tool
    token: int


@dataclass(frozen=True)
class Reviewing:
    tool: Tool
    result: Any


ViewState = Union[Dashboard, Configuring, Loading, Reviewing]


class AnswerSheet:
    """Answers for one question set, mutable until submitted."""

    def __init__(self, question_set: PracticeTest, engine: ScoringEngine):
        self.question_set = question_set
        self.engine = engine
        self._answers: dict = {}
        self._result: Optional[ScoreResult] = None
        self._ids = {q.id for q in question_set.questions}

    @property
    def answers(self) -> Mapping:
        return MappingProxyType(self._answers)

    @property
    def submitted(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Optional[ScoreResult]:
        return self._result

    def handle_answer(self, question_id: int, answer: str) -> bool:
        """Record an answer. Ignored once submitted or for unknown questions."""
        if self.submitted or question_id not in self._ids:
            return False
        self._answers[question_id] = answer
        return True

    def submit(self) -> ScoreResult:
        if self._result is None:
            self._result = self.engine.score(self.question_set, dict(self._answers))
            logger.debug("Submitted %d answers, total %d", len(self._answers), self._result.total)
        return self._result


@dataclass
class CustomTestForm:
    selection: Selection = field(
        default_factory=lambda: Selection(catalog.chapter_catalog(), ["Chemistry"], ["Hydrocarbons"])
    )
    exam_level: str = "JEE Main"
    count: int = 15

    def validate(self) -> None:
        if not self.selection.subjects or not self.selection.topics:
            raise FormValidationError("Please select at least one subject and pick topics.")

    def apply_template(self, template: SavedTemplate) -> None:
        self.selection = Selection.from_lists(self.selection.catalog, template.subjects, template.topics)
        self.exam_level = template.exam_level
        self.count = template.count

    def request(self, service: GenerationService) -> PracticeTest:
        return service.practice_test(
            ", ".join(self.selection.subjects),
            ", ".join(self.selection.topics),
            self.count,
            self.exam_level,
        )


@dataclass
class FormulaCardForm:
    subject: str = "Physics"
    topic: str = ""
    exam: str = "JEE Main"

    def validate(self) -> None:
        if not (self.topic or "").strip():
            raise FormValidationError("Enter a topic or pick a chapter.")

    def chapters(self) -> tuple:
        return catalog.chapter_catalog().topics(self.subject)

    def request(self, service: GenerationService):
        return service.formula_card((self.topic or "").strip(), self.exam)


@dataclass
class TimeTableForm:
    selection: Selection = field(default_factory=lambda: Selection(catalog.chapter_catalog(), ["Physics"]))
    hours: int = 8
    exam: str = "JEE Main"
    weak_topics: str = ""

    def validate(self) -> None:
        if not self.selection.subjects:
            raise FormValidationError("Please select at least one focus subject.")

    def weak_areas(self) -> str:
        areas = list(self.selection.topics)
        if self.weak_topics.strip():
            areas.append(self.weak_topics.strip())
        return ", ".join(areas)

    def request(self, service: GenerationService):
        return service.time_table(self.hours, self.exam, self.weak_areas(), ", ".join(self.selection.subjects))


@dataclass
class ArchiveForm:
    exam: str = "JEE Main"
    year: str = "2024"
    subject: Optional[str] = None
    topic: Optional[str] = None
    manual: bool = False
    question: str = ""

    def validate(self) -> None:
        if self.manual:
            if not self.question.strip():
                raise FormValidationError("Paste a question to solve.")
        elif not self.subject or not self.topic:
            raise FormValidationError("Pick a subject and a topic.")

    def chapters(self) -> tuple:
        return catalog.archive_catalog().topics(self.subject) if self.subject else ()

    def request(self, service: GenerationService):
        if self.manual:
            return service.solve_pyq(self.question.strip(), self.exam, self.year, self.subject or "Physics")
        return service.pyq_test(self.exam, self.subject, self.topic)


FORMS = {
    Tool.CUSTOM_TEST: CustomTestForm,
    Tool.FORMULA_CARDS: FormulaCardForm,
    Tool.TIME_TABLE: TimeTableForm,
    Tool.ARCHIVE: ArchiveForm,
}


class Session:
    def __init__(self, service: GenerationService, templates: TemplateStore, personal_best: PersonalBest):
        self.service = service
        self.templates = templates
        self.personal_best = personal_best
        self.state: ViewState = Dashboard()
        self.last_error: Optional[str] = None
        self._token = 0
        self.forms = self._new_forms()

    @staticmethod
    def _new_forms() -> dict:
        return {tool: factory() for tool, factory in FORMS.items()}

    def form(self, tool: Tool):
        return self.forms[tool]

    @property
    def tool(self) -> Optional[Tool]:
        return getattr(self.state, "tool", None)

    @property
    def current_result(self) -> Any:
        if isinstance(self.state, Reviewing):
            return self.state.result
        return None

    def open_tool(self, tool: Tool) -> None:
        if not isinstance(self.state, Dashboard):
            raise InvalidTransitionError(f"Cannot open {tool.value} from {type(self.state).__name__}")
        self.state = Configuring(tool)

    def submit(self) -> int:
        """Validate the current form and enter ``Loading``. Returns the request token."""
        if not isinstance(self.state, Configuring):
            raise InvalidTransitionError(f"Cannot submit from {type(self.state).__name__}")
        tool = self.state.tool
        self.forms[tool].validate()
        self._token += 1
        self.last_error = None
        self.state = Loading(tool, self._token)
        logger.info("Submitted %s request #%d", tool.value, self._token)
        return self._token

    def _is_current(self, token: int) -> bool:
        return isinstance(self.state, Loading) and self.state.token == token

    def resolve(self, token: int, payload: Any) -> bool:
        """Apply a successful reply. Returns False if the reply was superseded."""
        if not self._is_current(token):
            logger.debug("Dropping superseded reply #%d", token)
            return False
        tool = self.state.tool
        self.state = Reviewing(tool, self._wrap(tool, payload))
        return True

    def reject(self, token: int, error: Exception) -> bool:
        """Return to configuring after a failed request. No partial result is kept."""
        if not self._is_current(token):
            logger.debug("Dropping superseded failure #%d", token)
            return False
        tool = self.state.tool
        self.last_error = str(error)
        self.state = Configuring(tool)
        logger.warning("%s request #%d failed: %s", tool.value, token, error)
        return True

    def _wrap(self, tool: Tool, payload: Any) -> Any:
        if tool is Tool.CUSTOM_TEST:
            return AnswerSheet(payload, ScoringEngine())
        if tool is Tool.ARCHIVE and isinstance(payload, PracticeTest):
            return AnswerSheet(payload, ScoringEngine(self.personal_best))
        return payload

    def run(self) -> ViewState:
        """Submit the current form and wait for the reply."""
        token = self.submit()
        form = self.forms[self.state.tool]
        try:
            payload = form.request(self.service)
        except GenerationError as exc:
            self.reject(token, exc)
        else:
            self.resolve(token, payload)
        return self.state

    def start_over(self) -> None:
        if not isinstance(self.state, Reviewing):
            raise InvalidTransitionError(f"Nothing to start over from {type(self.state).__name__}")
        self.state = Configuring(self.state.tool)

    def go_home(self) -> None:
        """Back to the dashboard. Tool forms reset; templates and personal best persist."""
        self.state = Dashboard()
        self.last_error = None
        self.forms = self._new_forms()

    def save_template(self) -> SavedTemplate:
        form = self.forms[Tool.CUSTOM_TEST]
        return self.templates.save(form.selection, form.exam_level, form.count)

    def apply_template(self, template_id: str) -> SavedTemplate:
        template = self.templates.apply(template_id)
        self.forms[Tool.CUSTOM_TEST].apply_template(template)
        return template
