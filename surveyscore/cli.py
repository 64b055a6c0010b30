"""Command-line interface for surveyscore."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from surveyscore import __version__
from surveyscore.config import SurveyScoreSettings, load_settings
from surveyscore.questions import (
    INSTRUMENT_TITLES,
    LIKERT_KEYS,
    NPS_QUESTION,
    OBJET_CATEGORICAL_QUESTIONS,
    OBJET_LIKERT_QUESTIONS,
    SBLOT_CANDIDATES,
    SBLOT_QUESTIONS,
    Instrument,
    is_categorical,
)

app = typer.Typer(
    name="surveyscore",
    help="Score tallied design-survey responses and write short verdicts.",
    no_args_is_help=True,
)
console = Console(width=min(100, Console().width))

StateOption = Annotated[
    Path | None,
    typer.Option("--state", "-s", help="Session state file (default: .surveyscore/state.json)."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable verbose logging."),
]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"surveyscore {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Score tallied design-survey responses and write short verdicts."""


def _startup(state_file: Path | None, verbose: bool) -> SurveyScoreSettings:
    from pydantic import ValidationError

    from surveyscore.logging import setup_logging

    try:
        settings = load_settings(state_file=state_file)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        _fail(f"Invalid settings: {problems}")
    setup_logging(
        output_dir=settings.output_dir, verbose=verbose, file_level=settings.log_level
    )
    return settings


def _fail(message: str) -> NoReturn:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@app.command()
def show(
    instrument: Annotated[Instrument, typer.Argument(help="Instrument: sblot or objet.")],
    state_file: StateOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Compute and print scores, rankings and the narrative for an instrument."""
    from surveyscore.session import load_state, score_design_choice, score_product_survey

    settings = _startup(state_file, verbose)
    state = load_state(settings.state_file)

    console.print(f"\n  [bold]{INSTRUMENT_TITLES[instrument]}[/bold]\n")
    if instrument is Instrument.SBLOT:
        result = score_design_choice(state, min_sample_size=settings.min_sample_size)
        _print_design_choice(state.sblot.counts, state.sblot.weights, result)
    else:
        result = score_product_survey(
            state,
            min_sample_size=settings.min_sample_size,
            keyword_top_k=settings.keyword_top_k,
            colour_top_k=settings.colour_top_k,
        )
        _print_product_survey(result)

    console.print(Panel(result.interpretation_text, title="Interpretation", expand=False))
    console.print(Panel(result.conclusion_text, title="Conclusion", expand=False))


def _print_design_choice(counts: list[list[int]], weights: dict[str, float], result: object) -> None:
    from surveyscore.analysis.models import DesignChoiceResult

    assert isinstance(result, DesignChoiceResult)

    table = Table(title="Responses", title_justify="left")
    table.add_column("Question")
    for label in SBLOT_CANDIDATES:
        table.add_column(label, justify="right")
    table.add_column("N", justify="right")
    table.add_column("Weight", justify="right")
    for key, row, total in zip(SBLOT_QUESTIONS, counts, result.totals):
        table.add_row(key, *(str(c) for c in row), str(total), f"{weights.get(key, 0.0):.2f}")
    console.print(table)
    console.print(
        f"  [dim]Weight sum {result.weight_sum:.2f} (normalised to 1.00) · "
        f"mean respondents {result.mean_respondents:.1f}[/dim]\n"
    )

    ranking = Table(title="Composite score (0–100)", title_justify="left")
    ranking.add_column("Rank", justify="right")
    ranking.add_column("Design")
    ranking.add_column("Score", justify="right")
    for score in result.ranking:
        ranking.add_row(str(score.rank), score.label, f"{score.score:.1f}")
    console.print(ranking)


def _print_product_survey(result: object) -> None:
    from surveyscore.analysis.models import ProductSurveyResult

    assert isinstance(result, ProductSurveyResult)

    labels = {q.key: q.label for q in OBJET_LIKERT_QUESTIONS}
    table = Table(title="Likert questions (1–5)", title_justify="left")
    for name in ("Question", "Label", "N", "Mean", "Top-2", "Score"):
        table.add_column(name, justify="left" if name in ("Question", "Label") else "right")
    for stat in result.likert_stats:
        table.add_row(
            stat.key,
            labels[stat.key],
            str(stat.n),
            f"{stat.mean:.2f}",
            f"{stat.top2_share * 100:.1f}%",
            f"{stat.score100:.1f}",
        )
    console.print(table)

    nps = result.nps
    console.print(
        f"  Overall [bold]{result.overall_score:.1f}[/bold] · "
        f"Top-2 Box mean {result.top2_mean * 100:.1f}% · "
        f"NPS [bold]{nps.nps:.1f}[/bold] "
        f"(P {nps.promoter_share * 100:.1f}% / Pa {nps.passive_share * 100:.1f}% / "
        f"D {nps.detractor_share * 100:.1f}%, n={nps.total})\n"
    )

    for cq in OBJET_CATEGORICAL_QUESTIONS:
        summary = result.categorical[cq.key]
        kind = "multi" if cq.multi else "single"
        cat = Table(title=f"{cq.key} {cq.label} ({kind}, {summary.total} selections)", title_justify="left")
        cat.add_column("Option")
        cat.add_column("Count", justify="right")
        for option in summary.ranking:
            cat.add_row(option.label, str(option.count))
        console.print(cat)
        if summary.favorability is not None:
            fav = summary.favorability
            console.print(
                f"  [dim]Favorability {fav.index:.1f}pt "
                f"(+{fav.positive} / ±{fav.neutral} / -{fav.negative})[/dim]"
            )


# ---------------------------------------------------------------------------
# Editing
# ---------------------------------------------------------------------------


@app.command(name="set")
def set_cell(
    instrument: Annotated[Instrument, typer.Argument(help="Instrument: sblot or objet.")],
    question: Annotated[str, typer.Argument(help="Question key, e.g. Q3 (Q17 is the NPS question).")],
    option: Annotated[
        str,
        typer.Argument(
            help="S-Blot design (1–4 or #01–#04), Likert answer (1–5), "
            "NPS answer (0–10) or categorical option number (1–n)."
        ),
    ],
    value: Annotated[str, typer.Argument(help="Response count (invalid values store 0).")],
    state_file: StateOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Set one response count."""
    from surveyscore.session import (
        load_state,
        set_category,
        set_count,
        set_likert,
        set_nps,
        write_state,
    )

    settings = _startup(state_file, verbose)
    state = load_state(settings.state_file)
    question = question.upper()

    try:
        if instrument is Instrument.SBLOT:
            label = option if option.startswith("#") else f"#{option.zfill(2)}"
            if label not in SBLOT_CANDIDATES:
                _fail(f"Unknown design '{option}' (expected 1–{len(SBLOT_CANDIDATES)})")
            stored = set_count(state, question, SBLOT_CANDIDATES.index(label), value)
        elif question == NPS_QUESTION:
            stored = set_nps(state, _parse_int(option), value)
        elif question in LIKERT_KEYS:
            stored = set_likert(state, question, _parse_int(option), value)
        elif is_categorical(question):
            stored = set_category(state, question, _parse_int(option) - 1, value)
        else:
            _fail(f"Unknown Objet question '{question}'")
    except ValueError as exc:
        _fail(str(exc))

    write_state(state, settings.state_file)
    console.print(f"{instrument.value} {question} option {option} = {stored}")


@app.command()
def weight(
    question: Annotated[str, typer.Argument(help="S-Blot question key, e.g. Q1.")],
    value: Annotated[str, typer.Argument(help="Raw weight (weights are normalised when scoring).")],
    state_file: StateOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Set one S-Blot question weight."""
    from surveyscore.session import load_state, set_weight, write_state

    settings = _startup(state_file, verbose)
    state = load_state(settings.state_file)
    try:
        stored = set_weight(state, question.upper(), value)
    except ValueError as exc:
        _fail(str(exc))
    write_state(state, settings.state_file)
    total = sum(state.sblot.weights.values())
    console.print(f"sblot {question.upper()} weight = {stored:.2f} [dim](sum {total:.2f})[/dim]")


@app.command()
def reset(
    instrument: Annotated[Instrument, typer.Argument(help="Instrument: sblot or objet.")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Don't ask for confirmation.")] = False,
    state_file: StateOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Clear an instrument's counts (and restore default weights)."""
    from surveyscore.session import load_state
    from surveyscore.session import reset as reset_state
    from surveyscore.session import write_state

    settings = _startup(state_file, verbose)
    if not yes and not typer.confirm(f"Reset all {instrument.value} data?"):
        raise typer.Exit()
    state = load_state(settings.state_file)
    reset_state(state, instrument)
    write_state(state, settings.state_file)
    console.print(f"{instrument.value} reset to defaults")


def _parse_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        msg = f"Expected a whole number, got '{text}'"
        raise ValueError(msg) from None


# ---------------------------------------------------------------------------
# Import / export
# ---------------------------------------------------------------------------


@app.command(name="import-csv")
def import_csv(
    csv_file: Annotated[
        Path,
        typer.Argument(help="CSV with Question,#01,#02,#03,#04[,N] rows.", exists=True, dir_okay=False),
    ],
    state_file: StateOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Replace the S-Blot counts with the contents of a CSV file."""
    from surveyscore.formats import import_counts_csv
    from surveyscore.session import load_state, write_state

    settings = _startup(state_file, verbose)
    try:
        text = csv_file.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError:
        _fail(f"{csv_file.name} is not UTF-8 text; re-save it as CSV UTF-8 and try again")
    state = load_state(settings.state_file)
    state.sblot.counts = import_counts_csv(text)
    write_state(state, settings.state_file)
    total = sum(sum(row) for row in state.sblot.counts)
    console.print(f"Imported {csv_file.name}: {total} responses")


@app.command(name="export-csv")
def export_csv(
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: <output_dir>/sblot_counts.csv)."),
    ] = None,
    state_file: StateOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Write the S-Blot counts as CSV."""
    from surveyscore.formats import export_counts_csv
    from surveyscore.session import load_state

    settings = _startup(state_file, verbose)
    state = load_state(settings.state_file)
    path = output or settings.output_dir / "sblot_counts.csv"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_counts_csv(state), encoding="utf-8")
    console.print(f"Wrote {path}")


@app.command(name="export-json")
def export_json(
    instrument: Annotated[Instrument, typer.Argument(help="Instrument: sblot or objet.")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: <output_dir>/<instrument>_results.json)."),
    ] = None,
    state_file: StateOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Write inputs and computed results as JSON."""
    from surveyscore.formats import export_results_json
    from surveyscore.session import load_state, score_design_choice, score_product_survey

    settings = _startup(state_file, verbose)
    state = load_state(settings.state_file)
    if instrument is Instrument.SBLOT:
        result = score_design_choice(state, min_sample_size=settings.min_sample_size)
    else:
        result = score_product_survey(
            state,
            min_sample_size=settings.min_sample_size,
            keyword_top_k=settings.keyword_top_k,
            colour_top_k=settings.colour_top_k,
        )
    path = output or settings.output_dir / f"{instrument.value}_results.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_results_json(instrument, state, result), encoding="utf-8")
    console.print(f"Wrote {path}")
