"""Subject and topic selection bookkeeping."""
from typing import Iterable

from aceprep.catalog import SubjectCatalog


class Selection:
    """Mutually consistent subject and topic selections for one catalog.

    Every selected topic belongs to the topic list of at least one selected
    subject. Both collections keep insertion order so prompts and displays
    list them the way the user picked them.
    """

    def __init__(self, catalog: SubjectCatalog, subjects: Iterable[str] = (), topics: Iterable[str] = ()):
        self.catalog = catalog
        self._subjects: list[str] = []
        self._topics: list[str] = []
        for subject in subjects:
            if subject in catalog and subject not in self._subjects:
                self._subjects.append(subject)
        for topic in topics:
            self.add_topic(topic)

    @classmethod
    def from_lists(cls, catalog: SubjectCatalog, subjects: Iterable[str], topics: Iterable[str]) -> "Selection":
        """Rebuild a selection from stored lists, dropping anything inconsistent."""
        return cls(catalog, subjects, topics)

    @property
    def subjects(self) -> tuple:
        return tuple(self._subjects)

    @property
    def topics(self) -> tuple:
        return tuple(self._topics)

    def is_subject_selected(self, name: str) -> bool:
        return name in self._subjects

    def is_topic_selected(self, name: str) -> bool:
        return name in self._topics

    def toggle_subject(self, name: str) -> None:
        if name in self._subjects:
            self._subjects.remove(name)
            dropped = set(self.catalog.topics(name))
            self._topics = [t for t in self._topics if t not in dropped]
        elif name in self.catalog:
            self._subjects.append(name)

    def add_topic(self, name: str) -> None:
        if name in self._topics:
            return
        if any(name in self.catalog.topics(s) for s in self._subjects):
            self._topics.append(name)

    def remove_topic(self, name: str) -> None:
        if name in self._topics:
            self._topics.remove(name)

    def selected_topics_for(self, subject: str) -> list[str]:
        """Selected topics of ``subject`` in catalog order."""
        return [t for t in self.catalog.topics(subject) if t in self._topics]

    def available_topics(self, subject: str) -> list[str]:
        """Topics of ``subject`` not yet selected, in catalog order."""
        return [t for t in self.catalog.topics(subject) if t not in self._topics]

    def is_all_selected(self, subject: str) -> bool:
        chapters = self.catalog.topics(subject)
        return bool(chapters) and set(self.selected_topics_for(subject)) == set(chapters)

    def toggle_all_in_subject(self, name: str) -> None:
        """Select every topic of ``name``, or clear them all if already complete."""
        if name not in self._subjects:
            return
        chapters = self.catalog.topics(name)
        if self.is_all_selected(name):
            self._topics = [t for t in self._topics if t not in chapters]
        else:
            others = [t for t in self._topics if t not in chapters]
            self._topics = others + list(chapters)

    def clear(self) -> None:
        self._subjects.clear()
        self._topics.clear()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Selection):
            return NotImplemented
        return set(self._subjects) == set(other._subjects) and set(self._topics) == set(other._topics)

    def __repr__(self) -> str:
        return f"Selection(subjects={self._subjects!r}, topics={self._topics!r})"
