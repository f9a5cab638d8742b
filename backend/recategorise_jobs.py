from __future__ import annotations
import typer

from jobboard.core.logging import setup_logging
from jobboard.db.database import SessionLocal
from jobboard.db.init_db import init_db
from jobboard.services.classifier import CategoryClassifier
from jobboard.services.recategorise import ALL_LIMIT, DEFAULT_LIMIT, RecategoriseReport, run_recategorisation
from jobboard.services.settings_service import load_taxonomy

app = typer.Typer(add_completion=False)


def parse_limit(value: str) -> int:
    if value.lower() == "all":
        return ALL_LIMIT
    try:
        limit = int(value)
    except ValueError as exc:
        raise typer.BadParameter(f"expected a number or 'all', got {value!r}") from exc
    if limit < 0:
        raise typer.BadParameter("limit must not be negative")
    return limit or ALL_LIMIT


def print_report(report: RecategoriseReport) -> None:
    mode = "COMMIT" if report.commit else "DRY RUN"
    typer.echo("=" * 60)
    typer.echo(f"Recategorisation report ({mode})")
    typer.echo("=" * 60)
    typer.echo(f"Jobs selected:      {report.total}")
    typer.echo(f"Classified:         {report.classified} ({report.success_rate}%)")
    typer.echo(f"With warnings:      {report.with_warnings}")
    typer.echo(f"Failed:             {report.failed}")
    if report.stopped_early:
        typer.echo("Stopped early on first error.")

    if report.by_category:
        typer.echo("\nBy category:")
        for slug, count in report.by_category.most_common():
            typer.echo(f"  {slug:<26} {count}")

    if report.by_confidence:
        typer.echo("\nBy confidence:")
        for level in ("high", "medium", "low"):
            typer.echo(f"  {level:<26} {report.by_confidence.get(level, 0)}")

    if report.proposals and not report.commit:
        typer.echo("\nProposed changes:")
        for p in report.proposals:
            typer.echo(f"  #{p.job_id} {p.title[:50]!r}: {p.old_category} -> {p.new_category} [{p.confidence}]")
            typer.echo(f"      {p.rationale}")

    if report.issues:
        typer.echo("\nIssues by type:")
        for issue, count in report.issues_by_type.most_common():
            typer.echo(f"  {issue:<40} {count}")
        typer.echo("\nIssue log:")
        for i in report.issues:
            typer.echo(f"  [{i.severity.upper()}] #{i.job_id} {i.job_title[:40]!r}: {i.issue} ({i.value})")

    if not report.commit and report.classified:
        typer.echo("\nRe-run with --commit to write these categories.")


@app.command()
def main(
    limit: str = typer.Argument(str(DEFAULT_LIMIT), help="Number of jobs to process, or 'all'."),
    commit: bool = typer.Option(False, "--commit", help="Write the new categories."),
    stop_on_error: bool = typer.Option(False, "--stop-on-error", help="Halt at the first failure."),
):
    """Reassign legacy-category jobs to the current taxonomy."""
    setup_logging()
    init_db()
    db = SessionLocal()
    try:
        classifier = CategoryClassifier(taxonomy=load_taxonomy(db))
        report = run_recategorisation(
            db, classifier, limit=parse_limit(limit), commit=commit, stop_on_error=stop_on_error
        )
    finally:
        db.close()

    print_report(report)
    if report.stopped_early:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
