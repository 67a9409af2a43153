"""rag-report — command-line entry point.

    rag-report project.csv phases.csv defects.csv -o report.csv --details
"""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from rag_report import __version__
from rag_report.config import load_config
from rag_report.csv_renderer import write_csv
from rag_report.enums import RagStatus
from rag_report.exceptions import RagReportError
from rag_report.generator import ReportGenerator
from rag_report.json_renderer import render_json
from rag_report.report_data import ReportData

console = Console()

STATUS_STYLE = {
    RagStatus.GREEN: "green",
    RagStatus.AMBER: "yellow",
    RagStatus.RED: "red",
}

_input_file = click.Path(dir_okay=False, path_type=Path)


def _summary_table(data: ReportData) -> Table:
    s = data.scores
    title = f"{data.project.name} ({data.project.id}) as of {data.reference_date.isoformat()}"
    table = Table(title=escape(title))
    table.add_column("Component", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    table.add_column("Details")
    for component, score, status, details in (
        ("Schedule Health", s.schedule_score, s.schedule_status, s.schedule_summary),
        ("Phase Health", s.phase_score, s.phase_status, s.phase_summary),
        ("Defect Health", s.defect_score, s.defect_status, s.defect_summary),
        ("Overall Status", s.overall_score, s.overall_status, s.overall_summary),
    ):
        style = STATUS_STYLE[status]
        table.add_row(component, f"{score:.2f}", f"[{style}]{status.value}[/]", escape(details))
    return table


@click.command()
@click.argument("project_file", type=_input_file)
@click.argument("phase_file", type=_input_file)
@click.argument("defect_file", type=_input_file)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              default=Path("rag_report.csv"), show_default=True, help="Report file to write")
@click.option("--format", "fmt", type=click.Choice(["csv", "json"]), default="csv",
              show_default=True, help="Report format")
@click.option("--details/--no-details", default=False, help="Append phase and defect tables (CSV only)")
@click.option("--reference-date", "-r", default=None,
              help="'today', 'earliest' or a YYYY-MM-DD date (overrides config)")
@click.option("--date-format", default=None, help="strptime format of input dates, e.g. %d/%m/%Y")
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="YAML engine configuration")
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr")
@click.version_option(__version__, prog_name="rag-report")
def main(project_file, phase_file, defect_file, output, fmt, details,
         reference_date, date_format, config_path, verbose) -> None:
    """Compute the RAG health status of a project and write a report."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = load_config(config_path)
        overrides = {}
        if reference_date:
            overrides["reference"] = reference_date
        if date_format:
            overrides["date_format"] = date_format
        if overrides:
            config = dataclasses.replace(config, **overrides)

        data = ReportGenerator(config).generate_from_files(project_file, phase_file, defect_file)
    except RagReportError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        if fmt == "json":
            output.write_text(render_json(data) + "\n", encoding="utf-8")
        else:
            write_csv(data, output, include_details=details)
    except OSError as exc:
        raise click.ClickException(f"cannot write report {output}: {exc.strerror or exc}") from exc

    console.print(_summary_table(data))
    console.print(f"[green]✓[/] Report written to [cyan]{escape(str(output))}[/]")


if __name__ == "__main__":
    main()
