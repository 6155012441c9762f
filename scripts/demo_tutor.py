# ABOUTME: Provides a CLI that walks through tutoring decisions for a demo classroom.
# ABOUTME: Seeds in-memory stores from a YAML fixture and renders results with rich tables.

from pathlib import Path
from typing import Optional, Tuple

import typer
import yaml
from rich.console import Console
from rich.table import Table

from src.adaptive.composer import RecommendationComposer
from src.adaptive.intervention import InterventionAdvisor
from src.common.config import TutorConfig, load_tutor_config
from src.common.errors import TutorCoreError
from src.common.schemas import (
    AdaptiveRecommendation,
    ContentItem,
    EngagementMetrics,
    KnowledgeComponent,
    Student,
)
from src.common.stores import InMemoryContentProvider, InMemoryStudentStore

console = Console()
app = typer.Typer(help="Explore BKT mastery, fuzzy recommendations, and learning paths on a demo classroom.")

DEFAULT_CLASSROOM = Path("configs/demo_classroom.yaml")


def load_classroom(
    fixture_path: Path, config: Optional[TutorConfig] = None
) -> Tuple[InMemoryStudentStore, InMemoryContentProvider, RecommendationComposer]:
    """Build stores and a composer from a classroom fixture."""
    with open(fixture_path) as f:
        raw = yaml.safe_load(f) or {}

    config = config or TutorConfig()
    store = InMemoryStudentStore(
        students=[Student(**row) for row in raw.get("students", [])],
        components=[KnowledgeComponent(**row) for row in raw.get("knowledge_components", [])],
    )
    content = InMemoryContentProvider(
        [ContentItem(**row) for row in raw.get("content", [])],
        max_items=config.content.max_items,
    )
    composer = RecommendationComposer(store, content, config=config)

    for row in raw.get("knowledge_states", []):
        params = {k: v for k, v in row.items() if k.startswith("p_")}
        composer.tracker.initialize(row["student_id"], row["knowledge_component_id"], params)
    for row in raw.get("engagement", []):
        store.record_engagement(
            row["student_id"],
            EngagementMetrics(
                time_on_task=row.get("time_on_task", 0),
                activity_count=row.get("activity_count", 0),
                help_requests=row.get("help_requests", 0),
            ),
        )
    return store, content, composer


def _adaptive_table(rec: AdaptiveRecommendation) -> Table:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Output")
    table.add_column("Score")
    table.add_column("Label")
    table.add_row("Difficulty", f"{rec.difficulty_score:.3f}", rec.difficulty_label)
    table.add_row("Hint level", f"{rec.hint_level_score:.3f}", rec.hint_level_label)
    table.add_row("Teacher alert", f"{rec.teacher_alert_score:.3f}", rec.teacher_alert_label)
    return table


def _classroom_option() -> Path:
    return typer.Option(DEFAULT_CLASSROOM, "--classroom", help="YAML fixture describing the demo classroom.")


def _config_option() -> Optional[Path]:
    return typer.Option(None, "--config", help="Tutor core config YAML (defaults to built-in settings).")


@app.command("next-content")
def next_content(
    student_id: str = typer.Option(..., "--student-id", help="Student identifier in the fixture."),
    classroom: Path = _classroom_option(),
    config: Optional[Path] = _config_option(),
) -> None:
    """
    Show the next knowledge component and the content the fuzzy engine would pick.
    """
    _, _, composer = load_classroom(classroom, load_tutor_config(config))
    try:
        rec = composer.get_next_recommended_content(student_id)
    except TutorCoreError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    console.rule(f"[bold blue]Next content for {student_id}[/bold blue]")
    console.print(f"[bold]Component:[/] {rec.entry.curriculum_code} {rec.entry.name}")
    console.print(f"[bold]Mastery:[/] {rec.knowledge_state.p_mastery:.3f}   [bold]Engagement:[/] {rec.engagement:.3f}")
    console.print(_adaptive_table(rec.adaptive))

    items = Table(show_header=True, header_style="bold magenta")
    items.add_column("Item ID")
    items.add_column("Type")
    items.add_column("Difficulty")
    items.add_column("Body")
    for item in rec.lessons + rec.questions:
        items.add_row(item.id, item.content_type, str(item.difficulty), item.body)
    console.print(items)
    console.print(rec.adaptive.recommendation_text)


@app.command()
def respond(
    student_id: str = typer.Option(..., "--student-id", help="Student identifier in the fixture."),
    content_id: str = typer.Option(..., "--content-id", help="Question being answered."),
    answer: str = typer.Option(..., "--answer", help="Student's answer."),
    time_spent: float = typer.Option(60.0, "--time-spent", help="Seconds spent on the question."),
    hints: int = typer.Option(0, "--hints", help="Hints requested while answering."),
    classroom: Path = _classroom_option(),
    config: Optional[Path] = _config_option(),
) -> None:
    """
    Grade one answer, update mastery, and show the resulting recommendation.
    """
    _, _, composer = load_classroom(classroom, load_tutor_config(config))
    try:
        result = composer.process_response(student_id, content_id, answer, time_spent, {"hint_requests": hints})
    except TutorCoreError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    verdict = "[green]correct[/green]" if result.correct else "[red]incorrect[/red]"
    console.print(f"Answer was {verdict}; mastery now {result.knowledge_state.p_mastery:.3f}")
    console.print(_adaptive_table(result.adaptive))
    console.print(result.adaptive.recommendation_text)


@app.command()
def path(
    student_id: str = typer.Option(..., "--student-id", help="Student identifier in the fixture."),
    classroom: Path = _classroom_option(),
    config: Optional[Path] = _config_option(),
) -> None:
    """
    Generate the learning path ordered from weakest to strongest component.
    """
    _, _, composer = load_classroom(classroom, load_tutor_config(config))
    try:
        learning_path = composer.generate_learning_path(student_id)
    except TutorCoreError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#")
    table.add_column("Code")
    table.add_column("Name")
    table.add_column("Mastery")
    table.add_column("Status")
    for position, entry in enumerate(learning_path.sequence, start=1):
        table.add_row(str(position), entry.curriculum_code, entry.name, f"{entry.mastery_snapshot:.2f}", entry.status)
    console.print(table)


@app.command()
def simulate(
    answers: str = typer.Option("1111111111", "--answers", help="Sequence of 1 (correct) / 0 (incorrect)."),
    p_mastery: float = typer.Option(0.3, "--p-mastery", help="Initial mastery."),
    p_transit: float = typer.Option(0.1, "--p-transit", help="Learning transition probability."),
    p_guess: float = typer.Option(0.2, "--p-guess", help="Guess probability."),
    p_slip: float = typer.Option(0.1, "--p-slip", help="Slip probability."),
) -> None:
    """
    Trace BKT mastery over a sequence of answers for a single skill.
    """
    store = InMemoryStudentStore()
    composer = RecommendationComposer(store, InMemoryContentProvider())
    params = {"p_mastery": p_mastery, "p_transit": p_transit, "p_guess": p_guess, "p_slip": p_slip}
    try:
        composer.tracker.initialize("sim", "skill", params)
    except TutorCoreError as exc:
        raise typer.BadParameter(str(exc)) from exc

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Step")
    table.add_column("Answer")
    table.add_column("Mastery")
    for step, symbol in enumerate(answers.strip(), start=1):
        if symbol not in "01":
            raise typer.BadParameter(f"Unexpected answer symbol '{symbol}'", param_hint="--answers")
        state = composer.update_knowledge_state("sim", "skill", symbol == "1")
        table.add_row(str(step), "correct" if symbol == "1" else "incorrect", f"{state.p_mastery:.4f}")
    console.print(table)


@app.command("class-report")
def class_report(
    classroom: Path = _classroom_option(),
    config: Optional[Path] = _config_option(),
) -> None:
    """
    Summarize mastery per component and flag students who need intervention.
    """
    with open(classroom) as f:
        raw = yaml.safe_load(f) or {}
    tutor_config = load_tutor_config(config)
    store, _, _ = load_classroom(classroom, tutor_config)
    student_ids = [row["id"] for row in raw.get("students", [])]
    components = [KnowledgeComponent(**row) for row in raw.get("knowledge_components", [])]

    advisor = InterventionAdvisor(store, tutor_config)
    summary = advisor.class_mastery_report(student_ids, components)

    kc_table = Table(show_header=True, header_style="bold magenta")
    for column in ["curriculum_code", "total_students", "average_mastery", "veryLow", "low", "medium", "high", "veryHigh"]:
        kc_table.add_column(column)
    for _, row in summary.iterrows():
        kc_table.add_row(
            str(row["curriculum_code"]),
            str(row["total_students"]),
            f"{row['average_mastery']:.2f}",
            *[str(row[band]) for band in ["veryLow", "low", "medium", "high", "veryHigh"]],
        )
    console.print(kc_table)

    for assessment in advisor.assess_classroom(student_ids):
        if assessment.error:
            console.print(f"[yellow]{assessment.student_id}: {assessment.error}[/yellow]")
            continue
        color = "red" if assessment.needed else "green"
        console.print(
            f"[{color}]{assessment.student_id}[/{color}] mastery={assessment.average_mastery:.2f} "
            f"engagement={assessment.engagement:.2f} priority={assessment.priority}"
        )


if __name__ == "__main__":
    app()
