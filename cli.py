#!/usr/bin/env python3
"""
Command Line Interface for EduVision.

Runs the study tools from a terminal through the same key rotation and
retry path as the API.

COMMANDS:
- keys:      Show the configured key pool (masked)
- ask:       Ask the AI professor a question
- worksheet: Generate a practice worksheet
- quiz:      Play a quiz battle
"""
import sys
import time
import asyncio
import argparse
import logging
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.markdown import Markdown
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Prompt, Confirm
from rich.logging import RichHandler
from rich import box

from backend import db_connection
from backend.features import (
    FeatureRunner,
    QuizBattle,
    GameState,
    SYLLABUS,
    ask_professor,
    generate_quiz_question,
    generate_worksheet,
)
from backend.llm_router import FailureKind, KeyPool, LLMError, RetryOrchestrator, failure_kind_of
from backend.models import Difficulty, ProfessorLevel
from configs import GEMINI_MODEL, QUIZ_START_HEALTH, VERBOSE

console = Console()


def build_runner(pool: Optional[KeyPool] = None) -> FeatureRunner:
    return FeatureRunner(RetryOrchestrator(pool or KeyPool.from_env()))


def run_with_spinner(description: str, coro):
    """Run a coroutine to completion behind a transient spinner."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True
    ) as progress:
        progress.add_task(description=description, total=None)
        return asyncio.run(coro)


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def print_header():
    console.print(Panel(
        f"[bold cyan]EduVision[/bold cyan]  [dim]model: {GEMINI_MODEL}[/dim]",
        border_style="cyan",
        padding=(0, 2)
    ))


def print_llm_error(e: LLMError):
    if failure_kind_of(e) is FailureKind.RATE_LIMITED:
        console.print("[yellow]⚠️ Every key is rate limited right now. Try again in a moment.[/yellow]")
    else:
        console.print(f"[red]Error: {e}[/red]")


# ============================================================
# COMMANDS
# ============================================================

def keys_command(args) -> int:
    pool = KeyPool.from_env()
    table = Table(title="Gemini API Keys", box=box.ROUNDED)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Key", style="cyan")
    for i, masked in enumerate(pool.masked_keys(), 1):
        table.add_row(str(i), masked)

    if pool.size == 0:
        console.print("[red]No keys configured. Set API_KEY=key1,key2 in your .env file.[/red]")
        return 1
    console.print(table)
    return 0


def ask_command(args) -> int:
    level = ProfessorLevel(args.level)
    result = run_with_spinner(
        f"Asking the professor ({level.value})...",
        ask_professor(build_runner(), args.question, level),
    )
    console.print(Panel(Markdown(result.text), title="Professor", border_style="green"))

    if result.grounding_metadata and result.grounding_metadata.sources:
        console.print("[bold]Sources:[/bold]")
        for source in result.grounding_metadata.sources:
            console.print(f"  • {source.title or source.uri} [dim]{source.uri}[/dim]")
    return 0


def worksheet_command(args) -> int:
    difficulty = Difficulty(args.difficulty)
    sheet = run_with_spinner(
        f"Writing {args.count} {difficulty.value} questions on {args.topic}...",
        generate_worksheet(build_runner(), args.topic, difficulty, args.count),
    )

    table = Table(title=sheet.title or args.topic, box=box.ROUNDED, show_lines=True)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Question", style="white")
    table.add_column("Answer", style="green")
    for q in sheet.questions:
        table.add_row(str(q.id), q.question, q.answer)
    console.print(table)

    if args.explain:
        for q in sheet.questions:
            console.print(Panel(Markdown(q.explanation or "_No explanation_"), title=f"Q{q.id}", border_style="dim"))
    return 0


def quiz_command(args) -> int:
    """Interactive quiz battle; the answer clock runs while the prompt waits."""
    grade = args.grade
    topics = SYLLABUS.get(grade)
    if not topics:
        console.print(f"[red]Unknown grade '{grade}'. Choose from: {', '.join(SYLLABUS)}[/red]")
        return 2
    topic = args.topic or Prompt.ask("Topic", choices=topics, default=topics[-1])

    runner = build_runner()
    battle = QuizBattle()
    question = run_with_spinner("Summoning the first question...", generate_quiz_question(runner, topic, grade))
    battle.start(topic, grade, question)

    while battle.state is GameState.PLAYING:
        q = battle.question
        console.print(Panel(
            f"[bold]{q.question}[/bold]\n\n"
            + "\n".join(f"[cyan]{i}.[/cyan] {opt}" for i, opt in enumerate(q.options, 1)),
            title=f"❤️ {battle.health}/{QUIZ_START_HEALTH}   ⭐ {battle.score}   🔥 {battle.streak}",
            border_style="magenta"
        ))

        started = time.monotonic()
        choice = Prompt.ask(
            f"Answer ({battle.time_left}s)",
            choices=[str(i) for i in range(1, len(q.options) + 1)]
        )
        if battle.tick(int(time.monotonic() - started)):
            console.print(f"[bold red]{battle.result_message}[/bold red]")
            break

        outcome = battle.answer(q.options[int(choice) - 1])
        style = "green" if outcome.correct else "red"
        console.print(f"[bold {style}]{outcome.message}[/bold {style}]")
        if not outcome.correct:
            console.print(f"[dim]Correct answer: {q.correct_answer}. {q.explanation}[/dim]")
        if outcome.game_over:
            break

        battle.next_round(run_with_spinner("Next question...", generate_quiz_question(runner, topic, grade)))

    console.print(Panel(
        f"[bold]{battle.result_message}[/bold]\n\n"
        f"Score: {battle.score}\nXP earned: {battle.xp_earned}",
        title="Battle Over",
        border_style="yellow"
    ))

    if args.user and battle.score > 0 and Confirm.ask("Save score to the leaderboard?", default=True):
        db_connection.save_score(args.user, args.user, battle.score)
        total = db_connection.update_user_xp(args.user, battle.xp_earned, args.user)
        console.print(f"[green]Saved. Total XP: {total}[/green]")
    return 0


# ============================================================
# ENTRY POINT
# ============================================================

def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="EduVision - Gemini-backed study tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py keys
  python cli.py ask "Why is the sky blue?" --level "College (Undergrad)"
  python cli.py worksheet "Quadratic Equations" -n 10 -d Hard
  python cli.py quiz --grade "Grade 10" --topic Trigonometry --user alice
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=VERBOSE,
        help="Log key rotation and retries"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("keys", help="Show configured keys (masked)")

    ask = sub.add_parser("ask", help="Ask the AI professor")
    ask.add_argument("question", type=str)
    ask.add_argument(
        "--level",
        default=ProfessorLevel.HIGH.value,
        choices=[lvl.value for lvl in ProfessorLevel],
    )

    ws = sub.add_parser("worksheet", help="Generate a practice worksheet")
    ws.add_argument("topic", type=str)
    ws.add_argument("-n", "--count", type=int, default=5)
    ws.add_argument(
        "-d", "--difficulty",
        default=Difficulty.MEDIUM.value,
        choices=[d.value for d in Difficulty],
    )
    ws.add_argument("--explain", action="store_true", help="Print explanations after the table")

    quiz = sub.add_parser("quiz", help="Play a quiz battle")
    quiz.add_argument("--grade", default="Grade 10")
    quiz.add_argument("--topic", default=None)
    quiz.add_argument("--user", default=None, help="Save the score under this user id")

    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    commands = {
        "keys": keys_command,
        "ask": ask_command,
        "worksheet": worksheet_command,
        "quiz": quiz_command,
    }

    print_header()
    try:
        return commands[args.command](args)
    except LLMError as e:
        print_llm_error(e)
        return 1
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        return 2
    except KeyboardInterrupt:
        console.print("\n[dim]Bye![/dim]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
