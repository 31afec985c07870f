"""Static subject and chapter catalogs for each tool."""
import json
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from collections.abc import Iterator, Mapping

CONTENT_DIR = Path(__file__).parent / "content"


class SubjectCatalog(Mapping):
    """Read-only mapping of subject name to its ordered topic tuple."""

    def __init__(self, chapters: Mapping[str, list]):
        self._chapters = MappingProxyType({s: tuple(t) for s, t in chapters.items()})

    def __getitem__(self, subject: str) -> tuple:
        return self._chapters[subject]

    def __iter__(self) -> Iterator[str]:
        return iter(self._chapters)

    def __len__(self) -> int:
        return len(self._chapters)

    def topics(self, subject: str) -> tuple:
        """Topics of ``subject``, or an empty tuple for an unknown subject."""
        return self._chapters.get(subject, ())


@lru_cache(maxsize=1)
def load_content() -> dict:
    return json.loads((CONTENT_DIR / "catalog.json").read_text(encoding="utf-8"))


def chapter_catalog() -> SubjectCatalog:
    """Full chapter list shared by the test, formula card and time table tools."""
    return SubjectCatalog(load_content()["chapters"])


def archive_catalog() -> SubjectCatalog:
    """Abbreviated chapter list used by the previous-year question browser."""
    return SubjectCatalog(load_content()["archive_chapters"])


def exam_levels() -> list[str]:
    return list(load_content()["exam_levels"])


def question_counts() -> list[int]:
    return list(load_content()["question_counts"])


def study_hours() -> list[int]:
    return list(load_content()["study_hours"])


def subjects() -> list[str]:
    return list(load_content()["subjects"])


def pyq_exams() -> list[dict]:
    return [dict(exam) for exam in load_content()["pyq_exams"]]


def pyq_years(exam: str) -> list[str]:
    for entry in load_content()["pyq_exams"]:
        if entry["name"] == exam:
            return list(entry["years"])
    return []


def leaderboard() -> list[dict]:
    return [dict(entry) for entry in load_content()["leaderboard"]]
