"""End-to-end checks across the session, storage and generation layers."""
from conftest import make_test_payload, reply
from aceprep.db import SettingSlot, TEMPLATES_KEY, PERSONAL_BEST_KEY
from aceprep.scoring import PersonalBest
from aceprep.session import Reviewing, Session, Tool
from aceprep.templates import TemplateStore


def new_session(tmp_db, service):
    return Session(
        service=service,
        templates=TemplateStore(SettingSlot(tmp_db, TEMPLATES_KEY)),
        personal_best=PersonalBest(SettingSlot(tmp_db, PERSONAL_BEST_KEY)),
    )


def test_templates_and_best_survive_restart(tmp_db, service, fake_client):
    fake_client.models.generate_content.return_value = reply(make_test_payload(5))
    first = new_session(tmp_db, service)
    first.open_tool(Tool.CUSTOM_TEST)
    first.form(Tool.CUSTOM_TEST).count = 25
    saved = first.save_template()
    first.go_home()

    first.open_tool(Tool.ARCHIVE)
    form = first.form(Tool.ARCHIVE)
    form.subject, form.topic = "Chemistry", "Hydrocarbons"
    assert isinstance(first.run(), Reviewing)
    sheet = first.current_result
    for qid in (1, 2, 3, 4):
        sheet.handle_answer(qid, "A")
    sheet.handle_answer(5, "D")
    assert sheet.submit().total == 15

    second = new_session(tmp_db, service)
    assert second.personal_best.get() == 15
    assert second.templates.apply(saved.id).count == 25
    second.open_tool(Tool.CUSTOM_TEST)
    second.apply_template(saved.id)
    assert second.form(Tool.CUSTOM_TEST).count == 25


def test_lower_score_keeps_best(tmp_db, service, fake_client):
    fake_client.models.generate_content.return_value = reply(make_test_payload(3))
    session = new_session(tmp_db, service)
    session.open_tool(Tool.ARCHIVE)
    form = session.form(Tool.ARCHIVE)
    form.subject, form.topic = "Physics", "Optics"
    session.run()
    for qid in (1, 2, 3):
        session.current_result.handle_answer(qid, "A")
    session.current_result.submit()
    session.start_over()
    session.run()
    session.current_result.handle_answer(1, "B")
    assert session.current_result.submit().total == -1
    assert session.personal_best.get() == 12
