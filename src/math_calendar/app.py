"""Interactive CLI application."""
import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from math_calendar.config import Settings, load_settings
from math_calendar.content import ContentStore, fetch_content, load_bundled_content
from math_calendar.dashboard import get_badges, get_progress_color, get_progress_label
from math_calendar.db import init_db
from math_calendar.errors import ValidationError
from math_calendar.gateway import GatewayClient, PromptKind
from math_calendar.importer import import_file, load_saved_pack
from math_calendar.models import Outcome
from math_calendar.progress import ProgressStore
from math_calendar.view import PEEK_WARNING, CalendarView

console = Console()

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
LETTERS = "abcdefgh"
STARTUP_FETCH_TIMEOUT = 3


def show_welcome():
    console.print(Panel(
        "[bold]Daily Math Trivia Calendar[/bold]\n[dim]One question for every day of the year[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("<n> / day <n>", "Open a day of this month"),
        ("today", "Open today's question"),
        ("next / prev", "Change month"),
        ("month <n|name>", "Jump to a month"),
        ("stats", "Progress and streak"),
        ("badges", "Unlocked badges"),
        ("sync", "Load questions from the calendar service"),
        ("import", "Load a custom question pack"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<16}[/cyan] {desc}")


def render_month(view: CalendarView) -> None:
    month = view.content.get_month(view.month_id)
    cells = view.month_grid()
    table = Table(title=f"{month.name}: {month.mathematician}", caption=f"[dim]{month.theme}[/dim]")
    for name in WEEKDAYS:
        table.add_column(name, justify="center")
    row = []
    for cell in cells:
        if cell is None:
            row.append("")
        elif cell.completed:
            row.append(f"[green]{cell.day} ✓[/green]")
        elif cell.today:
            row.append(f"[bold reverse]{cell.day}[/bold reverse]")
        else:
            row.append(str(cell.day))
        if len(row) == 7:
            table.add_row(*row)
            row = []
    if row:
        table.add_row(*(row + [""] * (7 - len(row))))
    console.print(table)


def show_stats(view: CalendarView) -> None:
    stats = view.stats()
    color = get_progress_color(stats.percent)
    label = get_progress_label(stats.percent)
    bar_filled = int(stats.percent / 5)
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(f"\n  Solved: [bold]{stats.completed}/{stats.total}[/bold] {bar} "
                  f"[bold]{stats.percent}%[/bold] [{color}]{label}[/{color}]")
    console.print(f"  Streak: [bold]{stats.streak}[/bold] day{'s' if stats.streak != 1 else ''} 🔥\n")


def show_badges(store: ProgressStore) -> None:
    table = Table(title="Badges")
    table.add_column("Problems", justify="right")
    table.add_column("Status")
    for threshold, unlocked in get_badges(store).items():
        status = "[green]🏆 Unlocked[/green]" if unlocked else "[dim]Locked[/dim]"
        table.add_row(str(threshold), status)
    console.print(table)


def show_question(view: CalendarView) -> None:
    opening = view.opening
    q = opening.question
    month = view.content.get_month(opening.month_id)
    lines = [f"[dim]{q.topic}[/dim]", "", q.question, ""]
    for letter, choice in zip(LETTERS, opening.choices):
        if (opening.locked or opening.submitted) and q.is_correct(choice):
            lines.append(f"  [green]{letter})[/green] [green]{choice}[/green]")
        elif opening.submitted and choice == opening.choice:
            lines.append(f"  [red]{letter})[/red] [red]{choice}[/red]")
        else:
            lines.append(f"  [cyan]{letter})[/cyan] {choice}")
    console.print(Panel("\n".join(lines), title=f"{month.name} {opening.day}", border_style="cyan"))


def show_reply(kind: PromptKind, text: str) -> None:
    console.print(Panel(text, title=kind.value.replace("_", " ").title(), border_style="magenta"))


def run_gateway(view: CalendarView, client: GatewayClient, kind: PromptKind):
    """Start a gateway request in the background and return its thread.

    The reply is shown when it arrives, and only if the same opening is
    still on screen. The session keeps taking input meanwhile.
    """
    request = view.prompt_request(kind)
    if request is None and kind is PromptKind.EXPLANATION and view.opening is not None:
        console.print(Panel(PEEK_WARNING, border_style="yellow"))
        reveal = Prompt.ask("Reveal anyway?", choices=["y", "n"], default="n")
        if reveal != "y":
            return None
        view.confirm_reveal()
        request = view.prompt_request(kind)
    if request is None:
        return None
    ticket, prompt = request

    def on_reply(reply_ticket, text):
        if view.deliver(reply_ticket, text):
            show_reply(kind, text)

    console.print("[dim]Thinking... keep going, the reply will show up here.[/dim]")
    return client.submit(ticket, kind, prompt, on_reply)


def run_day_session(view: CalendarView, client: GatewayClient, month_id: int, day: int) -> None:
    opening = view.open_day(month_id, day)
    if opening is None:
        console.print(f"[red]No question for day {day}.[/red]")
        return
    show_question(view)
    if opening.feedback:
        console.print(f"[green]{opening.feedback}[/green]")
    letters = list(LETTERS[:len(opening.choices)])
    try:
        while True:
            action = Prompt.ask(
                f"\nAnswer ({'/'.join(letters)}), hint, explain, context or back", default="back",
            ).strip().lower()
            if action in ("back", "q", "quit"):
                break
            elif action in letters:
                result = view.submit_choice(opening.choices[letters.index(action)])
                if result.outcome is Outcome.REJECTED:
                    console.print("[yellow]This question is already answered.[/yellow]")
                    continue
                show_question(view)
                color = "green" if result.outcome is Outcome.SUCCESS else "red"
                console.print(f"[{color}]{opening.feedback}[/{color}]")
                if result.stats:
                    show_stats(view)
            elif action == "hint":
                run_gateway(view, client, PromptKind.HINT)
            elif action == "explain":
                run_gateway(view, client, PromptKind.EXPLANATION)
            elif action == "context":
                run_gateway(view, client, PromptKind.FUN_FACT)
            else:
                console.print("[red]Unknown command. Try again.[/red]")
    finally:
        view.close_day()


def parse_month_arg(text: str, content: ContentStore) -> int:
    text = text.strip().lower()
    if text.isdigit():
        return int(text)
    for month in content.months:
        if text and month.name.lower().startswith(text):
            return month.id
    raise ValidationError(f"unknown month: {text}")


def cmd_sync(view: CalendarView, settings: Settings) -> None:
    with console.status("[dim]Fetching questions...[/dim]"):
        store = fetch_content(settings.api_url, view.content)
    if store is view.content:
        console.print("[yellow]Calendar service not available; using bundled questions.[/yellow]")
        return
    view.content = store
    console.print(f"[green]Loaded {store.total_count()} questions from {settings.api_url}[/green]")


def cmd_import(db_path: str, view: CalendarView) -> None:
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    result = import_file(db_path, file_path, view.content)
    view.content = result["store"]
    console.print(f"[green]Imported {result['filename']} → {result['questions']} questions[/green]")


def setup_logging(verbose: bool = False, level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="math-calendar", description="Daily math trivia calendar.")
    parser.add_argument("--db", help="Progress database path (default: MATH_CALENDAR_DB or ~/.math_calendar/calendar.db).")
    parser.add_argument("--api-url", help="Base URL of the calendar service.")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP service instead of the calendar.")
    parser.add_argument("--port", type=int, help="Port for --serve (default: PORT or 3001).")
    parser.add_argument("--minimal", action="store_true", help="With --serve, leave question data out of /api/months.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging.")
    return parser


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)
    settings = load_settings()
    if args.db:
        settings.db_path = args.db
    if args.api_url:
        settings.api_url = args.api_url

    if args.serve:
        setup_logging(args.verbose, level=logging.INFO)
        from math_calendar.server import run
        run(port=args.port, minimal=True if args.minimal else None, settings=settings)
        return

    setup_logging(args.verbose)
    db_path = settings.db_path
    init_db(db_path)
    store = ProgressStore(db_path)
    content = fetch_content(settings.api_url, load_bundled_content(), timeout=STARTUP_FETCH_TIMEOUT)
    content = load_saved_pack(db_path, content)
    view = CalendarView(content, store)
    client = GatewayClient(settings.api_url, timeout=settings.gemini_timeout)

    show_welcome()
    render_month(view)

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="today").strip().lower()
        command, _, arg = choice.partition(" ")
        try:
            if command.isdigit():
                run_day_session(view, client, view.month_id, int(command))
                render_month(view)
            elif command == "day":
                run_day_session(view, client, view.month_id, int(arg))
                render_month(view)
            elif command == "today":
                view.select_month(view.today.month)
                run_day_session(view, client, view.today.month, view.today.day)
                render_month(view)
            elif command == "next":
                view.next_month()
                render_month(view)
            elif command == "prev":
                view.prev_month()
                render_month(view)
            elif command == "month":
                view.select_month(parse_month_arg(arg, view.content))
                render_month(view)
            elif command == "stats":
                show_stats(view)
            elif command == "badges":
                show_badges(store)
            elif command == "sync":
                cmd_sync(view, settings)
                render_month(view)
            elif command == "import":
                cmd_import(db_path, view)
                render_month(view)
            elif command in ("quit", "exit", "q"):
                console.print("[dim]See you tomorrow![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
