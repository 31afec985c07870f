import json
import logging
import sqlite3
from unittest.mock import patch

import pytest

from aceprep.catalog import chapter_catalog
from aceprep.db import SettingSlot, TEMPLATES_KEY
from aceprep.errors import TemplateNotFoundError
from aceprep.selection import Selection
from aceprep.templates import TemplateStore, MAX_TEMPLATES


def physics(*topics):
    return Selection(chapter_catalog(), ["Physics"], topics)


def test_empty_store(template_slot):
    store = TemplateStore(template_slot)
    assert store.entries() == []
    assert len(store) == 0


def test_save_prepends_and_persists(tmp_db, template_slot):
    store = TemplateStore(template_slot)
    first = store.save(physics("Optics"), "JEE Main", 15)
    second = store.save(physics("Kinematics"), "NEET", 30)
    assert [t.id for t in store.entries()] == [second.id, first.id]
    reloaded = TemplateStore(SettingSlot(tmp_db, TEMPLATES_KEY))
    assert reloaded.entries() == store.entries()


def test_save_records_selection_fields(template_slot):
    store = TemplateStore(template_slot)
    sel = Selection(chapter_catalog(), ["Chemistry", "Physics"], ["Hydrocarbons", "Optics"])
    template = store.save(sel, "JEE Advanced", 45)
    assert template.subjects == ("Chemistry", "Physics")
    assert template.topics == ("Hydrocarbons", "Optics")
    assert template.exam_level == "JEE Advanced"
    assert template.count == 45


def test_ids_are_unique(template_slot):
    store = TemplateStore(template_slot)
    ids = {store.save(physics("Optics"), "JEE Main", 15).id for _ in range(5)}
    assert len(ids) == 5


def test_eleventh_save_evicts_oldest(template_slot):
    store = TemplateStore(template_slot)
    saved = [store.save(physics("Optics"), "JEE Main", 15 + i) for i in range(MAX_TEMPLATES + 1)]
    entries = store.entries()
    assert len(entries) == MAX_TEMPLATES
    assert saved[0].id not in {t.id for t in entries}
    for template in saved[1:]:
        applied = store.apply(template.id)
        assert applied == template
        assert applied.count == template.count


def test_apply_does_not_reorder(template_slot):
    store = TemplateStore(template_slot)
    a = store.save(physics("Optics"), "JEE Main", 15)
    b = store.save(physics("Kinematics"), "JEE Main", 25)
    store.apply(a.id)
    assert [t.id for t in store.entries()] == [b.id, a.id]


def test_apply_returns_selection_snapshot(template_slot):
    store = TemplateStore(template_slot)
    sel = Selection(chapter_catalog(), ["Physics", "Chemistry"], ["Optics", "Hydrocarbons"])
    saved = store.save(sel, "NEET", 30)
    applied = store.apply(saved.id)
    assert Selection.from_lists(chapter_catalog(), applied.subjects, applied.topics) == sel
    assert (applied.exam_level, applied.count) == ("NEET", 30)


def test_apply_unknown_raises(template_slot):
    store = TemplateStore(template_slot)
    with pytest.raises(TemplateNotFoundError):
        store.apply("nope")


def test_remove(template_slot):
    store = TemplateStore(template_slot)
    a = store.save(physics("Optics"), "JEE Main", 15)
    b = store.save(physics("Kinematics"), "JEE Main", 25)
    store.remove(a.id)
    assert [t.id for t in store.entries()] == [b.id]
    assert [t["id"] for t in json.loads(template_slot.load())] == [b.id]


def test_remove_missing_is_noop(template_slot):
    store = TemplateStore(template_slot)
    store.save(physics("Optics"), "JEE Main", 15)
    store.remove("does-not-exist")
    assert len(store) == 1


@pytest.mark.parametrize("payload", [
    "{not json",
    '{"id": "x"}',
    '[{"id": "x"}]',
    '[{"id": "x", "subjects": [], "topics": [], "exam_level": "NEET", "count": "many"}]',
])
def test_corrupt_payload_loads_empty(template_slot, payload, caplog):
    template_slot.save(payload)
    with caplog.at_level(logging.ERROR, logger="aceprep.templates"):
        store = TemplateStore(template_slot)
    assert store.entries() == []
    assert "Failed to parse saved tests" in caplog.text


def test_corrupt_payload_is_replaced_on_next_save(template_slot):
    template_slot.save("garbage")
    store = TemplateStore(template_slot)
    store.save(physics("Optics"), "JEE Main", 15)
    assert len(json.loads(template_slot.load())) == 1


def test_write_failure_is_not_raised(template_slot, caplog):
    store = TemplateStore(template_slot)
    with patch.object(template_slot, "save", side_effect=sqlite3.OperationalError("disk I/O error")):
        with caplog.at_level(logging.WARNING, logger="aceprep.templates"):
            template = store.save(physics("Optics"), "JEE Main", 15)
    assert store.entries() == [template]
    assert "Could not persist saved tests" in caplog.text
