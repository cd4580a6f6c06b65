"""Interactive terminal front-end — ``survey-take`` and ``survey-results``.

``survey-take`` walks a respondent through the survey one question at a
time: it collects the evaluation header, drives a ``SurveyWizard`` with
Rich prompts, and submits through ``HttpEvaluationGateway``.  A failed
submission keeps every answer, and the respondent can retry.

``survey-results`` lists the user's evaluations, or shows one evaluation
with its answers grouped by category.

Examples::

    uv run survey-take --user-id u-123
    uv run survey-results --user-id u-123
    uv run survey-results --user-id u-123 3f6c0c4e-...
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

import pydantic
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from survey_core.constants import KIND_MULTISELECT, KIND_SELECT, PHASES
from survey_core.coordinator import SubmissionCoordinator
from survey_core.errors import SurveyError
from survey_core.models.evaluation import EvaluationDetail, EvaluationHeader
from survey_core.models.question import Question
from survey_core.wizard import SurveyWizard, WizardStatus

from survey_client.http import HttpEvaluationGateway, SurveyApiClient

logger = logging.getLogger(__name__)

console = Console()


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------

def parse_selection(raw: str, options: list[str]) -> list[str]:
    """Map a comma-separated list of 1-based option numbers to labels.

    Out-of-range numbers and non-numeric tokens are ignored; duplicates
    collapse, and labels keep the order of *options*.
    """
    picked: set[int] = set()
    for token in raw.split(","):
        token = token.strip()
        if token.isdigit() and 1 <= int(token) <= len(options):
            picked.add(int(token) - 1)
    return [options[i] for i in sorted(picked)]


def format_answer(value: str | list[str]) -> str:
    """Render a decoded answer for display."""
    if isinstance(value, list):
        return ", ".join(value) if value else "-"
    return value or "-"


def _ask_header() -> EvaluationHeader:
    """Collect name, description, and phase before the first question."""
    console.rule("[bold]New evaluation")
    while True:
        name = Prompt.ask("Evaluation name", console=console)
        description = Prompt.ask("Description (optional)", default="", console=console)
        phase = Prompt.ask("Phase", choices=list(PHASES), default=PHASES[0], console=console)
        try:
            return EvaluationHeader(name=name, description=description or None, phase=phase)
        except pydantic.ValidationError as exc:
            for err in exc.errors():
                console.print(f"[red]{err['msg'].removeprefix('Value error, ')}[/]")


def _render_step(wizard: SurveyWizard) -> None:
    question = wizard.current_question
    lines = [f"[bold]{question.text}[/]"]
    if question.required:
        lines[0] += " [red]*[/]"
    if question.help_text:
        lines.append(f"[dim]{question.help_text}[/]")
    if question.options:
        for i, option in enumerate(question.options, start=1):
            lines.append(f"  {i}. {option}")
    current = wizard.answer_for(question.id)
    lines.append(f"[dim]Current answer:[/] {format_answer(current)}")
    error = wizard.errors.get(question.id)
    if error:
        lines.append(f"[red]{error}[/]")

    title = f"Question {wizard.step_index + 1} of {wizard.total_steps} ({wizard.progress:.0f}%)"
    subtitle = question.category or None
    console.print(Panel("\n".join(lines), title=title, subtitle=subtitle))


def _ask_answer(wizard: SurveyWizard) -> None:
    """Prompt for the current question; an empty entry keeps the draft."""
    question = wizard.current_question
    if question.kind == KIND_MULTISELECT:
        raw = Prompt.ask(
            "Options (comma-separated numbers, Enter to keep)", default="", console=console,
        )
        if raw.strip():
            wizard.set_answer(question.id, parse_selection(raw, question.options or []))
    elif question.kind == KIND_SELECT:
        raw = Prompt.ask("Option number (Enter to keep)", default="", console=console)
        picked = parse_selection(raw, question.options or [])
        if picked:
            wizard.set_answer(question.id, picked[0])
    else:
        hint = question.placeholder or "Answer"
        raw = Prompt.ask(f"{hint} (Enter to keep)", default="", console=console)
        if raw.strip():
            wizard.set_answer(question.id, raw)


async def run_wizard(wizard: SurveyWizard) -> bool:
    """Drive *wizard* until it is submitted or the respondent gives up.

    Returns ``True`` if the evaluation was stored.
    """
    while wizard.status != WizardStatus.SUBMITTED:
        _render_step(wizard)
        _ask_answer(wizard)

        choices = ["back"] if not wizard.is_first_step else []
        choices.insert(0, "submit" if wizard.is_last_step else "next")
        action = Prompt.ask("Action", choices=choices, default=choices[0], console=console)

        if action == "back":
            wizard.retreat()
        elif action == "next":
            wizard.advance()
        else:
            result = await wizard.submit()
            if result is None or result.ok:
                continue
            console.print(f"[red]Submission failed:[/] {result.error.message}")
            if not Confirm.ask("Retry submission?", default=True, console=console):
                return False
    return True


# ---------------------------------------------------------------------------
# survey-take
# ---------------------------------------------------------------------------

async def take_survey(api: SurveyApiClient) -> int:
    """Run one interactive survey session; returns a process exit code."""
    try:
        questions: list[Question] = await api.get_questions()
    except SurveyError as exc:
        console.print(f"[red]Could not load questions:[/] {exc.message}")
        return 1
    if not questions:
        console.print("[yellow]The survey has no active questions.[/]")
        return 1

    header = _ask_header()
    coordinator = SubmissionCoordinator(HttpEvaluationGateway(api))
    wizard = SurveyWizard(questions, coordinator, header)

    if not await run_wizard(wizard):
        console.print("[yellow]Survey not submitted.[/]")
        return 1

    evaluation = wizard.result.evaluation
    console.print(f"[green]Evaluation saved[/] (id {evaluation.id})")
    return 0


# ---------------------------------------------------------------------------
# survey-results
# ---------------------------------------------------------------------------

def render_detail(detail: EvaluationDetail) -> None:
    """Print one evaluation with its responses grouped by category."""
    console.rule(f"[bold]{detail.name}")
    console.print(f"  Phase:     {detail.phase}")
    console.print(f"  Status:    {detail.status}")
    if detail.description:
        console.print(f"  Notes:     {detail.description}")
    if detail.completed_at:
        console.print(f"  Completed: {detail.completed_at:%Y-%m-%d %H:%M}")

    for category, responses in detail.grouped.items():
        table = Table(title=category, show_lines=True, title_justify="left")
        table.add_column("Question")
        table.add_column("Answer")
        for response in responses:
            table.add_row(response.question_text, format_answer(response.display_value()))
        console.print(table)


async def show_results(api: SurveyApiClient, evaluation_id: str | None) -> int:
    try:
        if evaluation_id:
            render_detail(await api.get_evaluation(evaluation_id))
            return 0
        evaluations = await api.list_evaluations()
    except SurveyError as exc:
        console.print(f"[red]{exc.message}[/]")
        return 1

    if not evaluations:
        console.print("No evaluations yet.")
        return 0
    for phase in PHASES:
        group = [e for e in evaluations if e.phase == phase]
        if not group:
            continue
        table = Table(title=f"{phase.capitalize()} AI Evaluations")
        table.add_column("ID", style="dim")
        table.add_column("Name")
        table.add_column("Responses", justify="right")
        table.add_column("Created")
        for e in group:
            table.add_row(e.id, e.name, str(e.response_count), f"{e.created_at:%Y-%m-%d}")
        console.print(table)
    return 0


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def _base_parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument(
        "--base-url",
        default=os.getenv("SURVEY_API_URL", "http://localhost:8080"),
        help="Survey server URL (default: $SURVEY_API_URL or http://localhost:8080)",
    )
    parser.add_argument(
        "--user-id",
        default=os.getenv("SURVEY_USER_ID"),
        help="User id sent as X-User-ID (default: $SURVEY_USER_ID)",
    )
    parser.add_argument(
        "--proxy-secret",
        default=os.getenv("TRUSTED_PROXY_SECRET"),
        help="Value sent as X-Proxy-Secret (default: $TRUSTED_PROXY_SECRET)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )
    return parser


def _setup(args: argparse.Namespace) -> SurveyApiClient:
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if not args.user_id:
        console.print("[red]A user id is required (--user-id or $SURVEY_USER_ID).[/]")
        sys.exit(2)
    return SurveyApiClient(
        args.base_url, user_id=args.user_id, proxy_secret=args.proxy_secret,
    )


def take_cli() -> None:
    """Console-script entry point: ``survey-take``."""
    parser = _base_parser("survey-take", "Take the AI adoption survey interactively.")
    args = parser.parse_args()
    api = _setup(args)

    async def _main() -> int:
        async with api:
            return await take_survey(api)

    sys.exit(asyncio.run(_main()))


def results_cli() -> None:
    """Console-script entry point: ``survey-results``."""
    parser = _base_parser("survey-results", "Show stored survey evaluations.")
    parser.add_argument("evaluation_id", nargs="?", help="Show one evaluation in detail")
    args = parser.parse_args()
    api = _setup(args)

    async def _main() -> int:
        async with api:
            return await show_results(api, args.evaluation_id)

    sys.exit(asyncio.run(_main()))
