"""CLI interface for brandquiz."""

import functools
import json
import sys
from pathlib import Path
from typing import Any, Callable, Optional

import click

from brandquiz.cli.formatters import OutputFormatter
from brandquiz.core.config import USER_CONFIG_PATH, Config
from brandquiz.core.errors import BrandQuizError, GenerationExhausted
from brandquiz.core.logging import configure_logging
from brandquiz.core.pipeline import QuizPipeline
from brandquiz.core.validator import validate_schema
from brandquiz.schemas.brand import BrandSummary
from brandquiz.schemas.concept import QuizConceptList
from brandquiz.schemas.records import (
    AnswerOptionRecord,
    QuestionRecord,
    QuizStatus,
)
from brandquiz.scoring.engine import ScoringEngine
from brandquiz.scoring.responses import ResponseRecorder, Submission, SubmittedAnswer
from brandquiz.storage import JsonFileQuizStore, get_workspace_quiz

formatter = OutputFormatter()


def _handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn brandquiz errors into a user-facing message and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except GenerationExhausted as e:
            formatter.print_error(e.user_message)
            click.echo(f"  Stage: {e.stage}", err=True)
            click.echo(f"  Last error: {e.last_error}", err=True)
            sys.exit(1)
        except BrandQuizError as e:
            formatter.print_error(e.user_message)
            click.echo(f"  {e}", err=True)
            sys.exit(1)
        except ValueError as e:
            formatter.print_error(str(e))
            sys.exit(1)

    return wrapper


def _read_json(path: Path) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _write_or_print(data: Any, output: Optional[Path]) -> None:
    if output:
        Path(output).write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        formatter.print_success(f"Wrote {output}")
    else:
        formatter.print_json(data)


def _open_store(config: Config) -> JsonFileQuizStore:
    return JsonFileQuizStore(config.get_store_path())


@click.group()
@click.version_option(package_name="brandquiz")
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Extra YAML/JSON config file (applied after user and project config)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: INFO)",
)
@click.option("--json-logs/--no-json-logs", default=None, help="Emit JSON log lines")
@click.option("--store", "store_path", default=None, help="JSON store file (default: ~/.brandquiz/store.json)")
@click.pass_context
def main(ctx, config_file, log_level, json_logs, store_path):
    """
    brandquiz - Generate brand recommendation quizzes with AI and score responses.

    Typical flow: analyse a website, generate concepts, create a quiz from one
    concept, publish it, then score answers against it.
    """
    try:
        config = Config.load(
            cli_args={"log_level": log_level, "json_logs": json_logs, "store_path": store_path},
            config_file=config_file,
        )
    except ValueError as e:
        raise click.UsageError(f"Invalid configuration: {e}")
    configure_logging(level=config.log_level, json_output=config.json_logs, log_file=config.log_file)
    ctx.obj = config


@main.command()
@click.argument("url")
@click.option("--description", "-d", default=None, help="Brand description, used if the site can't be read")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
@_handle_errors
def analyse(config: Config, url: str, description: Optional[str], output: Optional[Path]):
    """Summarise the brand behind URL."""
    pipeline = QuizPipeline.from_config(config)
    summary = pipeline.analyse_brand(url, description)
    _write_or_print(summary.model_dump(mode="json"), output)


@main.command()
@click.argument("summary_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
@_handle_errors
def concepts(config: Config, summary_file: Path, output: Optional[Path]):
    """Generate quiz concepts from a brand summary file."""
    summary = validate_schema(_read_json(summary_file), BrandSummary)
    pipeline = QuizPipeline.from_config(config)
    generated = pipeline.generate_concepts(summary)
    _write_or_print([concept.model_dump(mode="json") for concept in generated], output)


@main.command()
@click.argument("summary_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("concepts_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--pick", "-n", type=int, default=1, show_default=True, help="1-based concept number")
@click.option("--workspace", default=None, help="Owning workspace id")
@click.pass_obj
@_handle_errors
def create(config: Config, summary_file: Path, concepts_file: Path, pick: int, workspace: Optional[str]):
    """Generate and store a quiz for one of the concepts."""
    summary = validate_schema(_read_json(summary_file), BrandSummary)
    concept_list = validate_schema(_read_json(concepts_file), QuizConceptList)
    if not 1 <= pick <= len(concept_list):
        raise click.BadParameter(f"must be between 1 and {len(concept_list)}", param_hint="--pick")
    concept = concept_list[pick - 1]

    pipeline = QuizPipeline.from_config(config)
    quiz = pipeline.create_quiz(summary, concept, _open_store(config), workspace_id=workspace)
    formatter.print_success(f"Created quiz '{quiz.title}'")
    click.echo(f"id:   {quiz.id}")
    click.echo(f"slug: {quiz.slug}")


@main.command()
@click.argument("quiz_id")
@click.option("--workspace", default=None, help="Only show the quiz if it belongs to this workspace")
@click.pass_obj
@_handle_errors
def show(config: Config, quiz_id: str, workspace: Optional[str]):
    """Show a stored quiz with its option ids."""
    store = _open_store(config)
    quiz = get_workspace_quiz(store, quiz_id, workspace)
    questions = sorted(store.find(QuestionRecord, quiz_id=quiz.id), key=lambda q: q.sort_order)
    options: dict[str, list[AnswerOptionRecord]] = {}
    for option in store.find_in(AnswerOptionRecord, "question_id", [q.id for q in questions]):
        options.setdefault(option.question_id, []).append(option)
    for question_options in options.values():
        question_options.sort(key=lambda o: o.sort_order)
    result_types = ScoringEngine(store).result_types(quiz.id)
    formatter.print_quiz(quiz, questions, options, result_types)


@main.command()
@click.argument("quiz_id")
@click.option(
    "--status",
    type=click.Choice([status.value for status in QuizStatus]),
    default=QuizStatus.LIVE.value,
    show_default=True,
)
@click.option("--workspace", default=None, help="Require the quiz to belong to this workspace")
@click.pass_obj
@_handle_errors
def publish(config: Config, quiz_id: str, status: str, workspace: Optional[str]):
    """Change a quiz's status (live by default)."""
    store = _open_store(config)
    quiz = get_workspace_quiz(store, quiz_id, workspace)
    store.update(type(quiz), quiz.id, status=QuizStatus(status))
    formatter.print_success(f"Quiz /{quiz.slug} is now {status}")


@main.command()
@click.argument("quiz_id")
@click.argument("option_ids", nargs=-1, required=True)
@click.pass_obj
@_handle_errors
def score(config: Config, quiz_id: str, option_ids: tuple[str, ...]):
    """Score a set of selected option ids against a stored quiz."""
    store = _open_store(config)
    quiz = get_workspace_quiz(store, quiz_id)
    result = ScoringEngine(store).score(quiz.id, option_ids)
    if result is None:
        formatter.print_warning("No result: the quiz has no result types or nothing was selected")
        sys.exit(1)
    formatter.print_score(result)


@main.command()
@click.argument("slug")
@click.argument("option_ids", nargs=-1, required=True)
@click.option("--email", default=None, help="Respondent email")
@click.pass_obj
@_handle_errors
def respond(config: Config, slug: str, option_ids: tuple[str, ...], email: Optional[str]):
    """Record a response to a live quiz, answering with OPTION_IDS."""
    store = _open_store(config)
    options = {option.id: option for option in store.find_in(AnswerOptionRecord, "id", option_ids)}
    missing = [option_id for option_id in option_ids if option_id not in options]
    if missing:
        raise click.BadParameter(f"unknown option ids: {', '.join(missing)}", param_hint="OPTION_IDS")

    submission = Submission(
        answers=[
            SubmittedAnswer(question_id=options[option_id].question_id, option_id=option_id)
            for option_id in option_ids
        ],
        email=email,
    )
    response, result = ResponseRecorder(store).submit(slug, submission)
    formatter.print_score(result)
    formatter.print_success(f"Recorded response {response.id}")


@main.command(name="config")
@click.option("--show", "action", flag_value="show", default=True, help="Print the effective configuration")
@click.option("--init", "action", flag_value="init", help="Write the effective configuration to the user config file")
@click.pass_obj
def config_command(config: Config, action: str):
    """Show or initialise configuration."""
    if action == "init":
        config.save(USER_CONFIG_PATH)
        formatter.print_success(f"Wrote {USER_CONFIG_PATH}")
        return

    data = config.to_dict()
    if data.get("api_key"):
        data["api_key"] = "****"
    formatter.print_json(data)


if __name__ == "__main__":
    main()
