"""Interactive CLI application."""
import uuid
from datetime import date, datetime

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from study_rounds.config import get_settings
from study_rounds.dashboard import get_achievability_color, get_plan_summary
from study_rounds.db import init_db
from study_rounds.errors import StudyRoundsError
from study_rounds.logging_config import configure_logging
from study_rounds.models import PlanStatus, ReviewItem, StudyPlan, StudySession
from study_rounds.plans import create_plan, get_plan, list_plans, pause, resume, update_plan
from study_rounds.progress import calculate_progress
from study_rounds.review import (
    create_review_item, get_due_review_items, get_review_items_for_plan,
    record_review_result, schedule_legacy_review,
)
from study_rounds.rounds import plan_round_tasks
from study_rounds.scheduler import generate_plan
from study_rounds.sessions import create_session, get_sessions_for_day, get_sessions_for_plan, get_sessions_for_plan_until
from study_rounds.status import update_status

console = Console()

EXIT_WORDS = ("q", "menu")


class SessionExitRequested(Exception):
    """Raised when the user leaves a command to go back to the menu."""


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def session_int_prompt(prompt: str, **kwargs) -> int:
    return int(session_prompt(prompt, **kwargs))


def session_float_prompt(prompt: str, **kwargs) -> float:
    return float(session_prompt(prompt, **kwargs))


def new_id() -> str:
    return uuid.uuid4().hex[:12]


def show_welcome():
    console.print(Panel(
        "[bold]Study Rounds[/bold]\n[dim]Multi-round study planner[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("plans", "List study plans"),
        ("new", "Create a study plan"),
        ("log", "Log a study session"),
        ("tasks", "Upcoming daily tasks"),
        ("rounds", "Round plan, hard chunks first"),
        ("review", "Review due units"),
        ("status", "Progress + achievability"),
        ("pause", "Pause or resume a plan"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<10}[/cyan] {desc}")


def choose_plan(db_path: str, user_id: str) -> StudyPlan:
    plans = list_plans(db_path, user_id)
    if not plans:
        console.print("[yellow]No plans yet. Use 'new' to create one.[/yellow]")
        raise SessionExitRequested()
    for i, p in enumerate(plans, 1):
        console.print(f"  [cyan]{i}[/cyan]) {p.title} [dim]({p.status.value})[/dim]")
    index = session_int_prompt("Select plan", choices=[str(i) for i in range(1, len(plans) + 1)])
    return plans[index - 1]


def refresh_plan_status(db_path: str, plan: StudyPlan, today: date) -> StudyPlan:
    """Re-evaluate a plan's status after new sessions and store it if it changed."""
    sessions = get_sessions_for_plan(db_path, plan.id)
    earlier = get_sessions_for_plan_until(db_path, plan.id, today)
    tasks = generate_plan(plan, earlier, today).daily_tasks
    if plan.status is PlanStatus.COMPLETED_TODAY and plan.completed_today_on == today:
        # Marked done earlier today; upcoming days must not reopen it before tomorrow
        tasks = [task for task in tasks if task.is_today(today)]
    todays_sessions = get_sessions_for_day(db_path, plan.id, today)
    all_done = calculate_progress(plan, sessions).is_complete
    updated = update_status(plan, tasks, todays_sessions, all_done, today)
    if updated.status is not plan.status:
        logger.info("Plan {} moved from {} to {}", plan.id, plan.status.value, updated.status.value)
        updated = update_plan(db_path, updated)
    return updated


def cmd_plans(db_path: str, user_id: str, today: date):
    plans = list_plans(db_path, user_id)
    if not plans:
        console.print("[yellow]No plans yet. Use 'new' to create one.[/yellow]")
        return
    table = Table(title="Study Plans")
    table.add_column("Plan", style="cyan")
    table.add_column("Units", justify="right")
    table.add_column("Rounds", justify="right")
    table.add_column("Deadline")
    table.add_column("Progress", justify="right")
    table.add_column("Status")
    for p in plans:
        summary = get_plan_summary(db_path, p.id, today)
        table.add_row(
            p.title, f"{p.total_units} {p.unit}", str(p.target_rounds), p.deadline.isoformat(),
            f"{summary['percentage']}%", summary["status_message"],
        )
    console.print(table)


def cmd_new(db_path: str, user_id: str, today: date):
    console.print("\n[bold]New Study Plan[/bold] [dim](q to cancel)[/dim]")
    title = session_prompt("Title")
    total_units = session_int_prompt("Total units")
    unit = session_prompt("Unit label", default="problem")
    deadline = date.fromisoformat(session_prompt("Deadline (YYYY-MM-DD)"))
    target_rounds = session_int_prompt("Target rounds", default="1")
    minutes = session_float_prompt("Minutes per unit", default="5")
    days = session_prompt("Study weekdays (1=Mon..7=Sun)", default="12345")
    plan = StudyPlan(
        id=new_id(),
        user_id=user_id,
        title=title,
        total_units=total_units,
        unit=unit,
        created_at=today,
        deadline=deadline,
        target_rounds=target_rounds,
        estimated_time_per_unit=minutes,
        study_days=tuple(sorted({int(d) for d in days if d.isdigit()})),
    )
    create_plan(db_path, plan)
    console.print(f"[green]Created '{plan.title}'.[/green]")


def cmd_log(db_path: str, user_id: str, today: date):
    plan = choose_plan(db_path, user_id)
    console.print(f"\n[bold]Log Session[/bold] — {plan.title} [dim](q to cancel)[/dim]")
    round_number = session_int_prompt("Round", default="1")
    start_unit = session_int_prompt("First unit studied")
    units = session_int_prompt("Units completed")
    minutes = session_float_prompt("Minutes spent")
    concentration = session_int_prompt("Concentration (0-100)", default="70")
    difficulty = session_int_prompt("Difficulty (1=easy, 5=hard)", choices=["1", "2", "3", "4", "5"])
    now = datetime.now()
    session = StudySession(
        id=new_id(),
        user_id=user_id,
        plan_id=plan.id,
        date=now,
        units_completed=units,
        duration_minutes=minutes,
        concentration=concentration / 100,
        difficulty=difficulty,
        round=round_number,
        start_unit=start_unit,
        end_unit=start_unit + units - 1,
    )
    create_session(db_path, session)
    known = {item.unit_number for item in get_review_items_for_plan(db_path, plan.id)}
    first_review = schedule_legacy_review(now)
    for unit_number in range(session.start_unit, session.end_unit + 1):
        if unit_number in known:
            continue
        create_review_item(db_path, ReviewItem(
            id=new_id(), user_id=user_id, plan_id=plan.id, unit_number=unit_number,
            last_review_date=now, next_review_date=first_review,
        ))
    updated = refresh_plan_status(db_path, plan, today)
    console.print(f"[green]Logged {session.units_completed} units.[/green] Status: {updated.status.value}")


def cmd_tasks(db_path: str, user_id: str, today: date):
    plan = choose_plan(db_path, user_id)
    result = generate_plan(plan, get_sessions_for_plan_until(db_path, plan.id, today), today)
    if not result.daily_tasks:
        console.print("[green]Nothing left to schedule for this plan.[/green]")
        return
    table = Table(title=f"{plan.title}: daily quota {result.daily_quota:.1f} {plan.unit}")
    table.add_column("Date")
    table.add_column("Task", style="cyan")
    table.add_column("Units", justify="right")
    table.add_column("Est.", justify="right")
    table.add_column("Advice", style="dim")
    for task in result.daily_tasks[:14]:
        table.add_row(
            task.date.isoformat(), task.title(plan.title), str(task.units),
            f"{task.estimated_duration:.0f}m", task.advice or "",
        )
    console.print(table)
    if len(result.daily_tasks) > 14:
        console.print(f"[dim]... {len(result.daily_tasks) - 14} more until {result.provisional_deadline}[/dim]")


def cmd_rounds(db_path: str, user_id: str, today: date):
    plan = choose_plan(db_path, user_id)
    tasks = plan_round_tasks(plan, get_sessions_for_plan(db_path, plan.id))
    table = Table(title=f"{plan.title}: {plan.target_rounds} rounds")
    table.add_column("Round", justify="right")
    table.add_column("Units")
    table.add_column("Advice")
    for task in tasks:
        style = "red" if task.advice and "hard" in task.advice else ""
        table.add_row(
            str(task.round), f"{task.start_unit}-{task.end_unit}",
            f"[{style}]{task.advice}[/{style}]" if style else (task.advice or "Full pass"),
        )
    console.print(table)
    if len(tasks) == 1 and plan.target_rounds > 1:
        console.print("[dim]Later rounds are planned once round 1 is finished.[/dim]")


def cmd_review(db_path: str, user_id: str, today: date):
    items = get_due_review_items(db_path, user_id, today)
    if not items:
        console.print("[yellow]No units due for review right now![/yellow]")
        return
    console.print(f"\n[bold]Review[/bold] — {len(items)} units due [dim](q to stop)[/dim]\n")
    plans = {}
    for i, item in enumerate(items, 1):
        if item.plan_id not in plans:
            plans[item.plan_id] = get_plan(db_path, item.plan_id)
        plan = plans[item.plan_id]
        console.print(Panel(
            f"{plan.title}: {plan.unit} {item.unit_number}",
            title=f"Item {i}/{len(items)}", border_style="cyan",
        ))
        quality = session_int_prompt(
            "Rate your recall (0=forgot, 3=hard, 4=good, 5=easy)", choices=["0", "1", "2", "3", "4", "5"],
        )
        updated = record_review_result(db_path, item.id, quality, datetime.now())
        console.print(f"[dim]Next review {updated.next_review_date.date().isoformat()}[/dim]\n")


def cmd_status(db_path: str, user_id: str, today: date):
    plan = choose_plan(db_path, user_id)
    plan = refresh_plan_status(db_path, plan, today)
    summary = get_plan_summary(db_path, plan.id, today)
    color = get_achievability_color(summary["achievability"])
    console.print(Panel(
        f"[bold]{summary['title']}[/bold] — {summary['status_message']}",
        title="Plan Status", border_style="blue",
    ))

    bar_filled = int(summary["percentage"] / 5)
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(
        f"\n  Progress: [bold]{summary['percentage']}%[/bold] {bar} [{color}]{summary['label']}[/{color}]"
        f"  ({summary['completed']}/{summary['total']})\n"
    )

    table = Table(title="Rounds")
    table.add_column("Round", justify="right")
    table.add_column("Done", justify="right")
    for r in summary["rounds"]:
        table.add_row(str(r["round"]), f"{r['percentage']}%")
    console.print(table)

    console.print(f"\n  Days left: [bold]{summary['remaining_days']}[/bold]  |  "
                  f"Sessions: [bold]{summary['sessions']}[/bold]  |  "
                  f"Trend: [bold]{summary['trend']}[/bold]  |  "
                  f"Quality: [bold]{summary['quality']}[/bold]")
    if not summary["can_study"]:
        console.print("\n  [yellow]This plan is not open for study right now.[/yellow]")


def cmd_pause(db_path: str, user_id: str, today: date):
    plan = choose_plan(db_path, user_id)
    if plan.status is PlanStatus.COMPLETED:
        console.print("[yellow]Plan already completed.[/yellow]")
        return
    if plan.status is PlanStatus.PAUSED:
        plan = update_plan(db_path, resume(plan))
        console.print(f"[green]Resumed '{plan.title}'.[/green]")
    else:
        plan = update_plan(db_path, pause(plan))
        console.print(f"[yellow]Paused '{plan.title}'.[/yellow]")


COMMANDS = {
    "plans": cmd_plans,
    "new": cmd_new,
    "log": cmd_log,
    "tasks": cmd_tasks,
    "rounds": cmd_rounds,
    "review": cmd_review,
    "status": cmd_status,
    "pause": cmd_pause,
}


def main():
    settings = get_settings()
    configure_logging(settings.log_level)
    db_path = settings.db_path
    init_db(db_path)

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="tasks").strip().lower()
        if choice in ("quit", "exit", "q"):
            console.print("[dim]See you next session![/dim]")
            break
        command = COMMANDS.get(choice)
        if command is None:
            console.print("[red]Unknown command. Try again.[/red]")
            continue
        try:
            command(db_path, settings.user_id, date.today())
        except SessionExitRequested:
            console.print("[dim]Back to menu.[/dim]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except (StudyRoundsError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
