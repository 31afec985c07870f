"""Interactive CLI application."""
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt
from rich.table import Table

from aceprep import catalog
from aceprep.config import load_settings
from aceprep.db import init_db, SettingSlot, TEMPLATES_KEY, PERSONAL_BEST_KEY
from aceprep.errors import AcePrepError, FormValidationError
from aceprep.generation import GenerationService
from aceprep.models import Outcome
from aceprep.schemas import FormulaCard, PYQSolution, TimeTable
from aceprep.scoring import PersonalBest
from aceprep.session import AnswerSheet, Configuring, Reviewing, Session, Tool
from aceprep.templates import TemplateStore

logger = logging.getLogger(__name__)

console = Console()

OUTCOME_STYLE = {
    Outcome.CORRECT: "[green]Correct (+4)[/green]",
    Outcome.INCORRECT: "[red]Incorrect (-1)[/red]",
    Outcome.SKIPPED: "[dim]Skipped (0)[/dim]",
}

SLOT_COLOR = {
    "Theory": "blue",
    "Practice": "magenta",
    "Revision": "yellow",
    "Break": "dim",
}


def show_welcome():
    console.print(Panel(
        "[bold]AcePrep AI[/bold]\n[dim]JEE / NEET practice, revision and planning[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_dashboard(session: Session):
    console.print("\n[bold]Tools:[/bold]")
    commands = [
        ("test", "Custom practice test"),
        ("cards", "Formula revision cards"),
        ("timetable", "AI study time table"),
        ("pyq", "Previous year questions"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")
    exams = ", ".join(
        f"{e['name']} ({e['years'][-1]}-{e['years'][0]})" for e in catalog.pyq_exams()
    )
    console.print(f"\n  [dim]PYQ archive:[/dim] {exams}")
    console.print(f"  Personal best: [bold]{session.personal_best.get()}[/bold]  |  "
                  f"Saved tests: [bold]{len(session.templates)}[/bold]")


def choose(label: str, options: list, default=None) -> str:
    """Numbered pick list. Returns the chosen option, or ``default`` on Enter.

    Without a default in ``options`` an empty answer is rejected and re-asked.
    """
    for i, opt in enumerate(options, 1):
        console.print(f"  [cyan]{i:>2}[/cyan]) {opt}")
    choices = [str(i) for i in range(1, len(options) + 1)]
    if default in options:
        answer = Prompt.ask(label, choices=choices, default=str(options.index(default) + 1), show_choices=False)
    else:
        answer = Prompt.ask(label, choices=choices, show_choices=False)
    if not answer:
        return default
    return options[int(answer) - 1]


def generate(session: Session) -> bool:
    """Submit the active tool's form. Returns True when a result is ready."""
    try:
        with console.status(f"[bold]Generating {session.tool.value}...[/bold]"):
            session.run()
    except FormValidationError as e:
        console.print(f"[yellow]{e}[/yellow]")
        return False
    if session.last_error:
        console.print("[red]Failed to generate. Please check your API key and try again.[/red]")
        console.print(f"[dim]{session.last_error}[/dim]")
        return False
    return isinstance(session.state, Reviewing)


# --- Answering ---


def run_answer_session(sheet: AnswerSheet) -> None:
    questions = sheet.question_set.questions
    console.print(f"\n[bold]{sheet.question_set.subject}[/bold]: {sheet.question_set.topic} "
                  f"({len(questions)} questions)\n")
    for i, q in enumerate(questions, 1):
        level = f" [dim]{q.difficulty_level}[/dim]" if q.difficulty_level else ""
        console.print(f"[bold]Q{i}.[/bold] [{q.type}]{level} {q.question_text}\n")
        if q.is_mcq:
            labels = q.option_labels()
            for label, opt in labels:
                console.print(f"  [cyan]{label})[/cyan] {opt}")
            answer = Prompt.ask("\nYour answer (Enter to skip)",
                                choices=[label for label, _ in labels], default="",
                                show_choices=False, case_sensitive=False)
        else:
            answer = Prompt.ask("\nYour numerical answer (Enter to skip)", default="")
        answer = answer.strip().upper() if q.is_mcq else answer.strip()
        if answer:
            sheet.handle_answer(q.id, answer)
        console.print()
    sheet.submit()
    show_score(sheet)


def show_score(sheet: AnswerSheet) -> None:
    result = sheet.result
    table = Table(title="Review")
    table.add_column("Q", justify="right")
    table.add_column("Your answer")
    table.add_column("Correct")
    table.add_column("Outcome")
    for i, q in enumerate(sheet.question_set.questions, 1):
        table.add_row(
            str(i),
            sheet.answers.get(q.id, "-"),
            q.correct_answer,
            OUTCOME_STYLE[result.outcome_for(q.id)],
        )
    console.print(table)
    color = "green" if result.total >= 0 else "red"
    console.print(f"\n[bold]Score: [{color}]{result.total}[/{color}] / {result.max_total}[/bold]  "
                  f"({result.correct} correct, {result.incorrect} incorrect, {result.skipped} skipped; "
                  f"accuracy {result.accuracy}%)\n")
    for i, q in enumerate(sheet.question_set.questions, 1):
        console.print(Panel(q.solution, title=f"Solution Q{i}", border_style="dim"))


# --- Custom test ---


def show_test_config(session: Session):
    form = session.form(Tool.CUSTOM_TEST)
    sel = form.selection
    table = Table(title="Custom Test")
    table.add_column("Subject", style="cyan")
    table.add_column("Selected chapters")
    for subject in sel.subjects:
        picked = sel.selected_topics_for(subject)
        table.add_row(f"{subject} ({len(picked)}/{len(sel.catalog.topics(subject))})", ", ".join(picked) or "[dim]none[/dim]")
    console.print(table)
    console.print(f"  Exam: [bold]{form.exam_level}[/bold]  |  Questions: [bold]{form.count}[/bold]")


def show_templates(session: Session):
    templates = session.templates.entries()
    if not templates:
        console.print("[dim]No saved tests yet.[/dim]")
        return []
    table = Table(title="Saved Tests")
    table.add_column("#", justify="right")
    table.add_column("Subjects")
    table.add_column("Topics")
    table.add_column("Exam")
    table.add_column("Qs", justify="right")
    for i, t in enumerate(templates, 1):
        table.add_row(str(i), ", ".join(t.subjects), ", ".join(t.topics), t.exam_level, str(t.count))
    console.print(table)
    return templates


def pick_template(session: Session):
    templates = show_templates(session)
    if not templates:
        return None
    index = IntPrompt.ask("Saved test number", choices=[str(i) for i in range(1, len(templates) + 1)])
    return templates[index - 1]


def cmd_custom_test(session: Session):
    session.open_tool(Tool.CUSTOM_TEST)
    actions = ["subject", "add", "remove", "all", "exam", "count", "save", "load", "delete", "generate", "back"]
    while isinstance(session.state, Configuring):
        form = session.form(Tool.CUSTOM_TEST)
        show_test_config(session)
        action = Prompt.ask("Action", choices=actions, default="generate")
        if action == "subject":
            form.selection.toggle_subject(choose("Toggle subject", list(form.selection.catalog)))
        elif action in ("add", "remove", "all"):
            if not form.selection.subjects:
                console.print("[yellow]Select a subject first.[/yellow]")
                continue
            subject = choose("Subject", list(form.selection.subjects))
            if action == "all":
                form.selection.toggle_all_in_subject(subject)
            elif action == "add":
                options = form.selection.available_topics(subject)
                if options:
                    form.selection.add_topic(choose("Add chapter", options))
            else:
                options = form.selection.selected_topics_for(subject)
                if options:
                    form.selection.remove_topic(choose("Remove chapter", options))
        elif action == "exam":
            form.exam_level = choose("Exam", catalog.exam_levels(), default=form.exam_level)
        elif action == "count":
            form.count = int(choose("Questions", catalog.question_counts(), default=form.count))
        elif action == "save":
            session.save_template()
            console.print("[green]Test configuration saved successfully![/green]")
        elif action == "load":
            template = pick_template(session)
            if template:
                session.apply_template(template.id)
        elif action == "delete":
            template = pick_template(session)
            if template:
                session.templates.remove(template.id)
        elif action == "generate":
            if generate(session):
                run_answer_session(session.current_result)
                after = Prompt.ask("Next", choices=["save", "new", "back"], default="new")
                if after == "save":
                    session.save_template()
                    console.print("[green]Test configuration saved successfully![/green]")
                if after == "back":
                    break
                session.start_over()
        else:
            break
    session.go_home()


# --- Formula cards ---


def show_formula_card(card: FormulaCard):
    console.print(Panel(f"[bold]{card.title}[/bold]", border_style="magenta"))
    sections = [("Formulas", card.formulas, "cyan"), ("Concepts", card.concepts, "green")]
    if card.reactions:
        sections.append(("Reactions", card.reactions, "yellow"))
    for title, items, color in sections:
        body = "\n".join(f"• {item}" for item in items) or "[dim]none[/dim]"
        console.print(Panel(body, title=title, border_style=color))
    console.print(Panel(card.pro_tip, title="Pro Tip", border_style="bold blue"))


def cmd_formula_cards(session: Session):
    session.open_tool(Tool.FORMULA_CARDS)
    while isinstance(session.state, Configuring):
        form = session.form(Tool.FORMULA_CARDS)
        console.print(f"\n[bold]Formula Cards[/bold]  Subject: [cyan]{form.subject}[/cyan]  "
                      f"Exam: [cyan]{form.exam}[/cyan]")
        action = Prompt.ask("Action", choices=["chapter", "topic", "subject", "exam", "back"], default="chapter")
        if action == "subject":
            form.subject = choose("Subject", catalog.subjects(), default=form.subject)
            continue
        if action == "exam":
            form.exam = choose("Exam", catalog.exam_levels(), default=form.exam)
            continue
        if action == "back":
            break
        if action == "chapter":
            form.topic = choose("Chapter", list(form.chapters())) or ""
        else:
            form.topic = Prompt.ask("Topic")
        if generate(session):
            show_formula_card(session.current_result)
            if Prompt.ask("Next", choices=["new", "back"], default="new") == "back":
                break
            session.start_over()
    session.go_home()


# --- Time table ---


def show_time_table(table_data: TimeTable):
    console.print(Panel(table_data.description, title=table_data.title, border_style="green"))
    table = Table()
    table.add_column("Time")
    table.add_column("Activity")
    table.add_column("Subject")
    table.add_column("Topic")
    table.add_column("Type")
    for slot in table_data.schedule:
        color = SLOT_COLOR.get(slot.type, "white")
        table.add_row(slot.time, slot.activity, slot.subject, slot.topic, f"[{color}]{slot.type}[/{color}]")
    console.print(table)
    if table_data.tips:
        console.print(Panel("\n".join(f"• {tip}" for tip in table_data.tips), title="Tips"))


def cmd_time_table(session: Session):
    session.open_tool(Tool.TIME_TABLE)
    actions = ["subject", "weak", "note", "hours", "exam", "generate", "back"]
    while isinstance(session.state, Configuring):
        form = session.form(Tool.TIME_TABLE)
        console.print(f"\n[bold]AI Time Table[/bold]  Focus: [cyan]{', '.join(form.selection.subjects) or 'none'}[/cyan]"
                      f"  Hours: [cyan]{form.hours}[/cyan]  Exam: [cyan]{form.exam}[/cyan]")
        console.print(f"  Weak areas: {form.weak_areas() or '[dim]none[/dim]'}")
        action = Prompt.ask("Action", choices=actions, default="generate")
        if action == "subject":
            form.selection.toggle_subject(choose("Toggle focus subject", catalog.subjects()))
        elif action == "weak":
            if not form.selection.subjects:
                console.print("[yellow]Select a focus subject first.[/yellow]")
                continue
            subject = choose("Subject", list(form.selection.subjects))
            chapter = choose("Weak chapter", list(form.selection.catalog.topics(subject)))
            if form.selection.is_topic_selected(chapter):
                form.selection.remove_topic(chapter)
            else:
                form.selection.add_topic(chapter)
        elif action == "note":
            form.weak_topics = Prompt.ask("Other weak topics", default=form.weak_topics)
        elif action == "hours":
            form.hours = int(choose("Study hours per day", catalog.study_hours(), default=form.hours))
        elif action == "exam":
            form.exam = choose("Exam", catalog.exam_levels(), default=form.exam)
        elif action == "generate":
            if generate(session):
                show_time_table(session.current_result)
                if Prompt.ask("Next", choices=["new", "back"], default="back") == "back":
                    break
                session.start_over()
        else:
            break
    session.go_home()


# --- Previous year questions ---


def show_solution(solution: PYQSolution):
    console.print(Panel(solution.underlying_concept, title="Underlying Concept", border_style="cyan"))
    console.print(Panel(solution.mathematical_derivation, title="Derivation", border_style="green"))
    console.print(Panel(solution.pro_tip, title="Pro Tip", border_style="bold blue"))


def show_leaderboard(session: Session):
    table = Table(title="Leaderboard")
    table.add_column("Rank", justify="right")
    table.add_column("Name")
    table.add_column("Subject")
    table.add_column("Score", justify="right")
    for entry in catalog.leaderboard():
        table.add_row(str(entry["rank"]), entry["name"], entry["subject"], str(entry["score"]))
    table.add_row("", "[bold]You (personal best)[/bold]", "", f"[bold]{session.personal_best.get()}[/bold]")
    console.print(table)


def cmd_pyq(session: Session):
    session.open_tool(Tool.ARCHIVE)
    form = session.form(Tool.ARCHIVE)
    form.exam = choose("Exam", [e["name"] for e in catalog.pyq_exams()], default=form.exam)
    years = catalog.pyq_years(form.exam)
    form.year = choose("Year", years, default=years[0])
    while isinstance(session.state, Configuring):
        form = session.form(Tool.ARCHIVE)
        console.print(f"\n[bold]PYQ Browser[/bold]  {form.exam} {form.year}  "
                      f"Subject: [cyan]{form.subject or 'none'}[/cyan]")
        action = Prompt.ask("Action", choices=["browse", "solve", "leaderboard", "back"], default="browse")
        if action == "leaderboard":
            show_leaderboard(session)
            continue
        if action == "back":
            break
        form.subject = choose("Subject", catalog.subjects(), default=form.subject)
        if action == "browse":
            form.manual = False
            form.topic = choose("Topic", list(form.chapters()))
        else:
            form.manual = True
            form.question = Prompt.ask("Paste the question")
        if generate(session):
            result = session.current_result
            if isinstance(result, AnswerSheet):
                run_answer_session(result)
                console.print(f"Personal best: [bold]{session.personal_best.get()}[/bold]")
            else:
                show_solution(result)
            if Prompt.ask("Next", choices=["new", "back"], default="new") == "back":
                break
            session.start_over()
    session.go_home()


def build_session(settings) -> Session:
    init_db(settings.db_path)
    return Session(
        service=GenerationService(api_key=settings.api_key, model=settings.model),
        templates=TemplateStore(SettingSlot(settings.db_path, TEMPLATES_KEY)),
        personal_best=PersonalBest(SettingSlot(settings.db_path, PERSONAL_BEST_KEY)),
    )


def main():
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    session = build_session(settings)
    if not settings.api_key:
        console.print("[yellow]GEMINI_API_KEY is not set; generation requests will fail.[/yellow]")

    show_welcome()

    while True:
        show_dashboard(session)
        choice = Prompt.ask("\n[bold]>[/bold]", default="test").strip().lower()
        try:
            if choice == "test":
                cmd_custom_test(session)
            elif choice == "cards":
                cmd_formula_cards(session)
            elif choice == "timetable":
                cmd_time_table(session)
            elif choice == "pyq":
                cmd_pyq(session)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Good luck on your exam![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            session.go_home()
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except AcePrepError as e:
            session.go_home()
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
