"""Rich console output for the CLI."""

import json
from typing import Any

from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table

from brandquiz.schemas.records import (
    AnswerOptionRecord,
    QuestionRecord,
    QuizRecord,
    ResultTypeRecord,
    ScoreResult,
)


class OutputFormatter:
    """Formats CLI output with rich."""

    def __init__(self, force_color: bool = False):
        self.console = Console(force_terminal=force_color or None)
        self.err_console = Console(stderr=True)

    def print_json(self, data: Any, indent: int = 2) -> None:
        """Print JSON with syntax highlighting."""
        self.console.print(JSON(json.dumps(data, indent=indent, ensure_ascii=False)))

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        self.err_console.print(f"[red]✗[/red] {message}")

    def print_warning(self, message: str) -> None:
        self.err_console.print(f"[yellow]⚠[/yellow] {message}")

    def print_info(self, message: str) -> None:
        self.console.print(f"[blue]ℹ[/blue] {message}")

    def print_quiz(
        self,
        quiz: QuizRecord,
        questions: list[QuestionRecord],
        options: dict[str, list[AnswerOptionRecord]],
        result_types: list[ResultTypeRecord],
    ) -> None:
        """Print a stored quiz with the identifiers needed to score it."""
        self.console.print(
            Panel(
                quiz.description or "",
                title=f"[bold]{quiz.title}[/bold] ({quiz.status.value}, /{quiz.slug})",
                subtitle=f"id {quiz.id}",
            )
        )

        for question in questions:
            table = Table(
                title=f"{question.sort_order + 1}. {question.text}",
                show_header=True,
                header_style="bold magenta",
                title_justify="left",
            )
            table.add_column("Option id", style="dim")
            table.add_column("Answer", style="cyan")
            for option in options.get(question.id, []):
                table.add_row(option.id, option.text)
            self.console.print(table)

        results = Table(title="Result types", show_header=True, header_style="bold magenta")
        results.add_column("#")
        results.add_column("Name", style="cyan")
        results.add_column("Colour")
        for result_type in result_types:
            colour = result_type.colour or ""
            results.add_row(
                str(result_type.sort_order),
                result_type.name,
                f"[{colour}]{colour}[/{colour}]" if colour else "",
            )
        self.console.print(results)

    def print_score(self, score: ScoreResult) -> None:
        """Print the winning result type."""
        body = score.description
        if score.recommendation_detail:
            body += f"\n\n[bold]Your recommendation:[/bold] {score.recommendation_detail}"
        self.console.print(
            Panel(
                body,
                title=f"[bold]{score.name}[/bold]",
                subtitle=f"score {score.score}",
                border_style=score.colour or "green",
            )
        )
