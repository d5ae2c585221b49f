"""Interactive terminal front end."""
import logging
import os
import time
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn
from rich.prompt import Prompt
from rich.table import Table

from nederlearn.api import NOT_FOUND, RESUMED, UNAVAILABLE, NederLearn
from nederlearn.catalog import get_section_display
from nederlearn.config import settings
from nederlearn.errors import NederlearnError
from nederlearn.models import MODE_EXAM, SECTION_ACTIVE, SECTION_COMPLETED, SECTION_LOCKED
from nederlearn.progress import level_progress, xp_to_next_level
from nederlearn.session import FINISHED, required_to_pass

console = Console()
logger = logging.getLogger(__name__)

STATE_STYLES = {
    SECTION_COMPLETED: "green",
    SECTION_ACTIVE: "cyan",
    SECTION_LOCKED: "dim",
}


class SessionExitRequested(Exception):
    """Raised when the user types q/menu in the middle of a session."""


def setup_logging() -> None:
    logger = logging.getLogger("nederlearn")
    logger.setLevel(settings.LOG_LEVEL)
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
    file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(file_handler)


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in ("q", "menu"):
        raise SessionExitRequested()
    return answer


def section_title(app: NederLearn, section) -> str:
    key = get_section_display(section.id).title_key
    return app.translator(key) if key else section.title


def show_welcome(app: NederLearn):
    t = app.translator
    console.print(Panel(
        f"[bold]{t('app.name')}[/bold]\n[dim]{t('app.subtitle')}[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("sections", "Vocabulary sections"),
        ("quiz", "Practice a section"),
        ("exam", "Final spelling exam"),
        ("unlock", "Spend XP to unlock a section"),
        ("profile", "Level, XP and badges"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def show_xp_bar(app: NederLearn) -> None:
    profile = app.get_profile()
    if profile is None:
        return
    t = app.translator
    with Progress(
        TextColumn(f"{t('home.level')} {profile.level}"),
        BarColumn(),
        TextColumn(t("home.xpNeeded", xp=xp_to_next_level(profile))),
        console=console,
        transient=False,
    ) as bar:
        task = bar.add_task("xp", total=1.0)
        bar.update(task, completed=level_progress(profile))


def cmd_sections(app: NederLearn):
    t = app.translator
    show_xp_bar(app)
    table = Table(title=t("home.vocabularySections"))
    table.add_column("#", justify="right")
    table.add_column("Section")
    table.add_column("Words", justify="right")
    table.add_column("Status")
    table.add_column("Best", justify="right")
    progress = app.get_progress()
    states = app.section_states()
    for i, (section, state) in enumerate(states, 1):
        style = STATE_STYLES[state]
        record = progress.section_progress.get(section.id)
        best = f"{record.score * 100:.0f}%" if record else ""
        label = t(f"section.{state}") if state != SECTION_LOCKED else t("home.locked")
        table.add_row(str(i), section_title(app, section), str(len(section.items)),
                      f"[{style}]{label}[/{style}]", best)
    console.print(table)
    done = sum(1 for _, state in states if state == SECTION_COMPLETED)
    console.print(t("home.sectionsCompleted", completed=done, total=len(states)))
    if app.can_take_exam():
        console.print(f"[green]{t('home.readyForExam')}[/green]")
    else:
        console.print(f"[dim]{t('home.completeMore', count=len(states) - done)}[/dim]")


def choose_section(app: NederLearn) -> str:
    sections = app.catalog.list_sections()
    for i, section in enumerate(sections, 1):
        console.print(f"  [cyan]{i}[/cyan]) {section_title(app, section)}")
    choice = Prompt.ask("Select section", choices=[str(i) for i in range(1, len(sections) + 1)])
    return sections[int(choice) - 1].id


def pause_for_feedback(feedback) -> None:
    """Hold the feedback on screen; a correct answer flashes its XP first."""
    delay = settings.FEEDBACK_DELAY_SECONDS
    if feedback.xp_awarded:
        signal = min(settings.XP_SIGNAL_SECONDS, delay)
        with console.status(f"[yellow]+{feedback.xp_awarded} XP[/yellow]"):
            time.sleep(signal)
        delay -= signal
    if delay > 0:
        time.sleep(delay)


def run_session(app: NederLearn) -> None:
    """Drive the active session until it finishes or the user quits."""
    t = app.translator
    session = app.session
    while session.status != FINISHED:
        question = session.current_question
        console.print(f"\n[dim]{t('quiz.questionOf', current=session.current_index + 1, total=session.question_count)}"
                      f"  |  {t('quiz.score')}: {session.correct_count}/{session.current_index}[/dim]")
        if session.mode == MODE_EXAM:
            console.print(f"[bold]{t('exam.question', word=question.source_word)}[/bold]")
            answer = session_prompt(f"[dim]{t('exam.hint')}[/dim]")
            feedback = app.submit_answer(answer)
            if feedback is None:
                continue
        else:
            console.print(f"{t('quiz.question')} [bold]{question.source_word}[/bold]\n")
            for i, option in enumerate(question.options, 1):
                console.print(f"  [cyan]{i})[/cyan] {option}")
            choice = session_prompt("\nYour answer", choices=[str(i) for i in range(1, len(question.options) + 1)])
            feedback = app.submit_answer(question.options[int(choice) - 1])
        if feedback.correct:
            console.print(f"[green]{t('quiz.correct')}[/green]")
        elif session.mode == MODE_EXAM:
            console.print(f"[red]{t('quiz.incorrect')}[/red] {t('exam.correctAnswer', answer=feedback.correct_answer)}")
        else:
            console.print(f"[red]{t('quiz.incorrect')}[/red] [green]{feedback.correct_answer}[/green]")
        pause_for_feedback(feedback)
        app.advance()
    show_result(app, session.result)


def show_result(app: NederLearn, result) -> None:
    t = app.translator
    pct = result.score * 100
    if result.mode == MODE_EXAM:
        title = t("exam.passed") if result.passed else t("exam.failed")
    elif result.passed:
        title = t("section.complete")
    else:
        title = t("section.sectionFailed")
    body = (f"{t('section.correctAnswers')}: [bold]{result.correct_count}/{result.total_questions}[/bold] ({pct:.0f}%)\n"
            f"{t('section.xpEarned')}: [yellow]{result.xp_gained}[/yellow]")
    if result.mode != MODE_EXAM and not result.passed:
        body += f"\n[dim]{t('section.needMore', count=required_to_pass(result.total_questions))}[/dim]"
    if result.new_badges:
        body += f"\n[magenta]New badges: {', '.join(sorted(result.new_badges))}[/magenta]"
    console.print(Panel(body, title=title, border_style="green" if result.passed else "red"))


def cmd_quiz(app: NederLearn):
    section_id = choose_section(app)
    start = app.start_or_resume_quiz(section_id)
    if start.status == NOT_FOUND:
        console.print(f"[red]{app.translator('common.notFound', id=section_id)}[/red]")
        return
    if start.status == UNAVAILABLE:
        console.print(f"[yellow]{app.translator('quiz.unavailable')}[/yellow]")
        return
    if start.status == RESUMED:
        console.print(f"[cyan]{app.translator('quiz.resumed')}[/cyan]")
    run_session(app)


def cmd_exam(app: NederLearn):
    start = app.start_exam()
    if not start.ok:
        console.print(f"[yellow]{app.translator('quiz.unavailable')}[/yellow]")
        return
    run_session(app)


def cmd_unlock(app: NederLearn):
    t = app.translator
    section_id = choose_section(app)
    console.print(t("section.unlockCost", xp=settings.UNLOCK_COST))
    if app.unlock_section(section_id):
        console.print(f"[green]{t('section.unlocked')}[/green]")
    else:
        console.print(f"[red]{t('section.notEnoughXP')}[/red] {t('section.needXP', xp=settings.UNLOCK_COST)}")


def cmd_profile(app: NederLearn):
    t = app.translator
    profile = app.get_profile()
    progress = app.get_progress()
    console.print(Panel(
        f"[bold]{profile.display_name}[/bold]\n"
        f"{t('profile.level')}: {profile.level}   {t('profile.totalXP')}: {profile.total_xp}\n"
        f"{t('profile.sectionsCompleted')}: {len(progress.completed_sections)}\n"
        f"{t('profile.xpRemaining', xp=xp_to_next_level(profile))}\n"
        f"[dim]{t('profile.memberSince', date=profile.created_at[:10])}[/dim]",
        title=t("profile.title"),
    ))
    table = Table(title=t("profile.badges"))
    table.add_column("Badge")
    table.add_column("Description")
    for badge in app.badges():
        style = "green" if badge["earned"] else "dim"
        table.add_row(f"[{style}]{badge['name']}[/{style}]", badge["description"])
    console.print(table)


def main():
    setup_logging()
    try:
        app = NederLearn.open()
    except NederlearnError as e:
        console.print(f"[red]Cannot start: {e}[/red]")
        raise SystemExit(1)
    if app.get_profile() is None:
        name = Prompt.ask("What should we call you?", default="Learner")
        app.init_user(name)

    show_welcome(app)

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="sections").strip().lower()
        try:
            if choice == "sections":
                cmd_sections(app)
            elif choice == "quiz":
                cmd_quiz(app)
            elif choice == "exam":
                cmd_exam(app)
            elif choice == "unlock":
                cmd_unlock(app)
            elif choice == "profile":
                cmd_profile(app)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]Tot ziens![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except SessionExitRequested:
            console.print("[dim]Progress saved. Back to the menu.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except NederlearnError as e:
            logger.exception("Command failed")
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
