"""Client for the hosted generative model.

Every request pairs a prompt with a pydantic ``response_schema``; the reply
body must parse as JSON matching that schema or the request counts as failed.
"""
import logging
from typing import Optional, TypeVar

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError

from aceprep import prompts
from aceprep.config import DEFAULT_MODEL
from aceprep.errors import GenerationError
from aceprep.schemas import FormulaCard, PracticeTest, PYQSolution, TimeTable

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

PYQ_TEST_SIZE = 10
TIME_TABLE_THINKING_BUDGET = 4000


class GenerationService:
    def __init__(self, api_key: Optional[str] = None, model: str = DEFAULT_MODEL, client=None):
        self.api_key = api_key
        self.model = model
        self._client = client

    @property
    def client(self):
        if self._client is None:
            try:
                self._client = genai.Client(api_key=self.api_key)
            except ValueError as exc:
                raise GenerationError("No API key configured. Set GEMINI_API_KEY.") from exc
        return self._client

    def _generate(self, prompt: str, schema: type[T], thinking_budget: Optional[int] = None) -> T:
        thinking = None
        if thinking_budget is not None:
            thinking = types.ThinkingConfig(thinking_budget=thinking_budget)
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
            thinking_config=thinking,
        )

        logger.debug("Requesting %s from %s", schema.__name__, self.model)
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except GenerationError:
            raise
        except Exception as exc:
            logger.exception("Generation request for %s failed", schema.__name__)
            raise GenerationError(f"The generation request failed: {exc}") from exc

        text = getattr(response, "text", None)
        if not text:
            raise GenerationError(f"Empty reply while generating {schema.__name__}")
        try:
            return schema.model_validate_json(text)
        except ValidationError as exc:
            logger.error("Reply for %s did not match the declared shape: %s", schema.__name__, exc)
            raise GenerationError(f"Malformed reply while generating {schema.__name__}") from exc

    def practice_test(self, subjects: str, topics: str, count: int, exam_level: str) -> PracticeTest:
        prompt = prompts.practice_test_prompt(subjects, topics, count, exam_level)
        return self._generate(prompt, PracticeTest)

    def formula_card(self, topic: str, exam: str = "JEE Main") -> FormulaCard:
        return self._generate(prompts.formula_card_prompt(topic, exam), FormulaCard)

    def time_table(self, hours: int, exam: str, weak_areas: str, focus_subjects: str) -> TimeTable:
        prompt = prompts.time_table_prompt(hours, exam, weak_areas, focus_subjects)
        return self._generate(prompt, TimeTable, thinking_budget=TIME_TABLE_THINKING_BUDGET)

    def pyq_test(self, exam: str, subject: str, topic: str) -> PracticeTest:
        prompt = prompts.pyq_test_prompt(exam, subject, topic, count=PYQ_TEST_SIZE)
        return self._generate(prompt, PracticeTest)

    def solve_pyq(self, question: str, exam: str, year: str, subject: str) -> PYQSolution:
        prompt = prompts.pyq_solution_prompt(question, exam, year, subject)
        return self._generate(prompt, PYQSolution)
