"""Bounded, persisted list of saved test configurations."""
import json
import logging
import sqlite3
import uuid

from aceprep.db import SettingSlot
from aceprep.errors import TemplateNotFoundError
from aceprep.models import SavedTemplate
from aceprep.selection import Selection

logger = logging.getLogger(__name__)

MAX_TEMPLATES = 10


class TemplateStore:
    """Most-recent-first list of at most ``MAX_TEMPLATES`` saved templates."""

    def __init__(self, slot: SettingSlot, limit: int = MAX_TEMPLATES):
        self.slot = slot
        self.limit = limit
        self._templates: list[SavedTemplate] = self._load()

    def _load(self) -> list[SavedTemplate]:
        raw = self.slot.load()
        if not raw:
            return []
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a list, got {type(data).__name__}")
            return [SavedTemplate.from_dict(entry) for entry in data][: self.limit]
        except (ValueError, KeyError, TypeError):
            logger.exception("Failed to parse saved tests from %s; starting empty", self.slot)
            return []

    def _persist(self) -> None:
        payload = json.dumps([t.to_dict() for t in self._templates])
        try:
            self.slot.save(payload)
        except sqlite3.Error:
            logger.warning("Could not persist saved tests", exc_info=True)

    def entries(self) -> list[SavedTemplate]:
        return list(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def save(self, selection: Selection, exam_level: str, count: int) -> SavedTemplate:
        template = SavedTemplate(
            id=uuid.uuid4().hex,
            subjects=selection.subjects,
            topics=selection.topics,
            exam_level=exam_level,
            count=count,
        )
        self._templates = [template, *self._templates][: self.limit]
        self._persist()
        logger.debug("Saved template %s (%d stored)", template.id, len(self._templates))
        return template

    def remove(self, template_id: str) -> None:
        remaining = [t for t in self._templates if t.id != template_id]
        if len(remaining) != len(self._templates):
            self._templates = remaining
            self._persist()

    def apply(self, template_id: str) -> SavedTemplate:
        """Return the stored template unchanged; the list is not reordered.

        The template is the saved selection snapshot (subjects and topics)
        together with the exam level and question count saved alongside it.
        """
        for template in self._templates:
            if template.id == template_id:
                return template
        raise TemplateNotFoundError(template_id)
