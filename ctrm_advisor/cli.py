"""
CTRM Advisor — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Validate inputs.
  4. Score / recommend / collect feedback.
  5. Report result to stdout.

Install and run::

    pip install -e .
    ctrm-advisor --help
    ctrm-advisor validate-config
    ctrm-advisor catalog
    ctrm-advisor recommend --answers answers.json --explain
    ctrm-advisor ask
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Sequence

import typer

app = typer.Typer(
    name="ctrm-advisor",
    help="CTRM lead-qualification advisor — recommends an ideal fit and a strong alternative.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from ctrm_advisor.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from ctrm_advisor.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_answers_or_exit(answers_file: str):
    """Read and validate a JSON answers file, exiting with code 1 on failure."""
    from pydantic import ValidationError

    from ctrm_advisor.questionnaire import answers_from_mapping

    path = Path(answers_file)
    if not path.exists():
        typer.echo(f"[ERROR] Answers file not found: {path}", err=True)
        raise typer.Exit(code=1)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        typer.echo(f"[ERROR] Answers file is not valid JSON: {exc}", err=True)
        raise typer.Exit(code=1)
    if not isinstance(data, dict):
        typer.echo("[ERROR] Answers file must contain a JSON object.", err=True)
        raise typer.Exit(code=1)

    try:
        return answers_from_mapping(data)
    except ValidationError as exc:
        typer.echo(f"[ERROR] {exc.error_count()} invalid answer(s):", err=True)
        for err in exc.errors():
            loc = ".".join(str(p) for p in err["loc"]) or "answers"
            typer.echo(f"  {loc}: {err['msg']}", err=True)
        raise typer.Exit(code=1)


def parse_choice(raw: str, options: Sequence[str]) -> Optional[str]:
    """Resolve a 1-based option number or an exact label (case-insensitive).

    Returns ``None`` for a blank answer.

    Raises:
        ValueError: If ``raw`` matches no option.
    """
    raw = raw.strip()
    if not raw:
        return None
    if raw.isdigit():
        index = int(raw) - 1
        if 0 <= index < len(options):
            return options[index]
        raise ValueError(f"Choose a number between 1 and {len(options)}.")
    for option in options:
        if option.lower() == raw.lower():
            return option
    raise ValueError(f"'{raw}' is not one of: {', '.join(options)}.")


def parse_multi_choice(raw: str, options: Sequence[str]) -> list[str]:
    """Resolve a comma-separated list of option numbers or labels."""
    chosen: list[str] = []
    for part in raw.split(","):
        value = parse_choice(part, options)
        if value is not None and value not in chosen:
            chosen.append(value)
    return chosen


def _parse_amount(raw: str) -> Optional[float]:
    raw = raw.strip().replace(",", "").replace("$", "")
    if not raw:
        return None
    multiplier = 1.0
    if raw[-1].lower() == "k":
        multiplier, raw = 1_000.0, raw[:-1]
    elif raw[-1].lower() == "m":
        multiplier, raw = 1_000_000.0, raw[:-1]
    return float(raw) * multiplier


def _prompt_until_valid(text: str, parse):
    """Prompt repeatedly until ``parse(raw)`` succeeds."""
    while True:
        raw = typer.prompt(text, default="", show_default=False)
        try:
            return parse(raw)
        except ValueError as exc:
            typer.echo(f"  {exc}")


def _ask_questions():
    """Run the questionnaire on the terminal and return validated answers."""
    from pydantic import ValidationError

    from ctrm_advisor.questionnaire import (
        DEFAULT_USERS,
        QUESTIONS,
        USERS_MAX,
        USERS_MIN,
        answers_from_mapping,
    )

    def _users(raw: str) -> int:
        if not raw.strip():
            return DEFAULT_USERS
        value = int(raw)
        if not USERS_MIN <= value <= USERS_MAX:
            raise ValueError(f"Enter a number between {USERS_MIN} and {USERS_MAX}.")
        return value

    while True:
        raw: dict = {}
        total = len(QUESTIONS)
        for step, question in enumerate(QUESTIONS, start=1):
            typer.echo("")
            typer.echo(f"[{step}/{total}] {question.text}")
            for n, option in enumerate(question.options, start=1):
                typer.echo(f"  {n}. {option}")

            if question.kind in ("select", "dropdown"):
                raw[question.id] = _prompt_until_valid(
                    "Choice (blank to skip)", lambda r, q=question: parse_choice(r, q.options)
                )
            elif question.kind == "multiselect":
                raw[question.id] = _prompt_until_valid(
                    "Choices, comma-separated (blank for none)",
                    lambda r, q=question: parse_multi_choice(r, q.options),
                )
            elif question.kind == "number":
                raw[question.id] = _prompt_until_valid(f"Users [{DEFAULT_USERS}]", _users)
            elif question.kind == "budget-range":
                raw[question.id] = {
                    "min": _prompt_until_valid("Minimum, e.g. 200k (blank to skip)", _parse_amount),
                    "max": _prompt_until_valid("Maximum, e.g. 1.5M (blank to skip)", _parse_amount),
                }

        try:
            return answers_from_mapping(raw)
        except ValidationError as exc:
            typer.echo("")
            typer.echo("Some answers need another look:")
            for err in exc.errors():
                loc = ".".join(str(p) for p in err["loc"])
                typer.echo(f"  {loc}: {err['msg']}")


def _collect_correction(session, recommendation):
    """Ask for corrected products and priority weights until they reconcile."""
    from ctrm_advisor.feedback.reconcile import (
        CorrectionDraft,
        RawFeedbackInput,
        normalize_weights,
        reconcile,
        weight_total,
    )
    from ctrm_advisor.taxonomy.answer_taxonomy import RANKING_FACTOR_LABELS, RankingFactor

    catalog_ids = [p.id for p in session.catalog]
    typer.echo("")
    typer.echo("Refine your recommendation.")

    while True:
        typer.echo("")
        typer.echo("1. Distribute 100% across these factors:")
        raw_weights: dict[str, str] = {}
        for factor in RankingFactor:
            raw_weights[factor.value] = typer.prompt(
                f"  {RANKING_FACTOR_LABELS[factor]} %", default="0"
            )
        weights, _ = normalize_weights(raw_weights)
        typer.echo(f"  Total: {weight_total(weights)}% / 100%")

        typer.echo("")
        typer.echo("2. Which products are a better fit?")
        for n, product in enumerate(session.catalog, start=1):
            marker = " (our rec)" if product.id in (
                recommendation.ideal.id, recommendation.strong.id
            ) else ""
            typer.echo(f"  {n}. {product.name}{marker}")
        draft = CorrectionDraft()
        ideal = _prompt_until_valid(
            "Ideal fit", lambda r: parse_choice(r, catalog_ids)
        )
        if ideal:
            draft = draft.select(ideal, "ideal")
        strong = _prompt_until_valid(
            "Strong alternative (blank for none)", lambda r: parse_choice(r, catalog_ids)
        )
        if strong:
            draft = draft.select(strong, "strong")

        comment = typer.prompt("3. Additional comments (optional)", default="", show_default=False)

        result = reconcile(
            RawFeedbackInput(
                rating="inaccurate",
                comment=comment,
                corrected_ideal=draft.ideal,
                corrected_strong=draft.strong,
                priority_weights=raw_weights,
            ),
            session.catalog,
        )
        if result.ok:
            return result.feedback
        typer.echo("")
        typer.echo("[BLOCKED] Please fix the following before submitting:")
        for reason in result.errors:
            typer.echo(f"  - {reason}")


def _submit(session, answers, recommendation, feedback) -> None:
    outcome = session.submit_feedback(answers, recommendation.result, feedback)
    while not outcome.saved:
        typer.echo(f"[WARN] {outcome.error}", err=True)
        if not typer.confirm("Retry now?", default=False):
            typer.echo("Your feedback (not yet saved):")
            typer.echo(json.dumps(outcome.record.to_sheet_row(), indent=2))
            raise typer.Exit(code=2)
        outcome = session.retry_submission(outcome)
    typer.echo("[OK] Thank you! Your feedback was saved.")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)
    key_set = config.justification.api_key() is not None

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Justification:    {'enabled' if config.justification.enabled else 'disabled'}")
    typer.echo(f"  Model:            {config.justification.model}")
    typer.echo(f"  API key ({config.justification.api_key_env}): {'set' if key_set else 'NOT SET (fallback text)'}")
    typer.echo(f"  Feedback storage: {config.storage.script_url or 'log only'}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("catalog")
def catalog() -> None:
    """List the product catalog in tie-break order."""
    from ctrm_advisor.catalog import PRODUCTS
    from ctrm_advisor.reporting.formatters import format_catalog

    typer.echo(format_catalog(PRODUCTS))


@app.command("recommend")
def recommend(
    answers_file: str = typer.Option(
        ...,
        "--answers",
        "-a",
        help="Path to a JSON answers file (snake_case or camelCase keys).",
    ),
    explain: bool = typer.Option(
        False,
        "--explain",
        help="Print the per-rule-group score breakdown.",
    ),
    justify: bool = typer.Option(
        True,
        "--justify/--no-justify",
        help="Fetch justification text from the text-generation service.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Recommend an ideal fit and a strong alternative for an answers file."""
    from ctrm_advisor.advisor import AdvisorSession
    from ctrm_advisor.reporting.formatters import (
        format_answers_summary,
        format_recommendation,
        format_score_table,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    answers = _load_answers_or_exit(answers_file)

    session = AdvisorSession(config)
    rec = session.recommend(answers, justify=justify)

    typer.echo(format_answers_summary(answers))
    typer.echo(format_recommendation(rec.result, rec.justification))
    if explain:
        typer.echo(format_score_table(rec.ranked, rec.breakdown))


@app.command("ask")
def ask(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Run the questionnaire interactively, then collect feedback.

    \b
    Feedback is optional:
      y    — the recommendation is accurate; a follow-up suggestion is shown.
      n    — refine it: re-weight factors (must total 100%) and pick products.
      skip — finish without feedback.
    """
    from ctrm_advisor.advisor import AdvisorSession
    from ctrm_advisor.feedback.reconcile import reconcile_accurate
    from ctrm_advisor.reporting.formatters import format_recommendation

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    session = AdvisorSession(config)

    answers = _ask_questions()
    typer.echo("")
    typer.echo("Analyzing your answers...")
    rec = session.recommend(answers)
    typer.echo(format_recommendation(rec.result, rec.justification))

    typer.echo("")
    verdict = _prompt_until_valid(
        "Was this recommendation accurate? [y/n/skip]",
        lambda r: parse_choice(r, ("y", "n", "skip")) or "skip",
    )
    if verdict == "skip":
        typer.echo("[OK] Done.")
        return

    if verdict == "y":
        suggestion = session.suggest(answers, rec.ideal)
        typer.echo("")
        typer.echo(f"Suggested next step: {suggestion}")
        feedback = reconcile_accurate(suggestion).feedback
    else:
        feedback = _collect_correction(session, rec)

    _submit(session, answers, rec, feedback)


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
