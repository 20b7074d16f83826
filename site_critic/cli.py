"""Click-based CLI for assessing and improving generated websites."""

import sys
from pathlib import Path
from typing import Any

import click

from . import __version__
from .artifact import WebsiteArtifact
from .assessment import QualityAssessor
from .config import CriticConfig, SessionConfig, load_config, parse_config
from .critic_logging import LogCategory, get_category_logger, setup_logging
from .domain import INDUSTRY_PRESETS, DomainContext
from .errors import ArtifactLoadError, CriticError, handle_exception
from .models import FinalAssessment, Verdict
from .orchestrator import ImprovementOrchestrator
from .reporters import (
    CLIReportConfig,
    CLIReporter,
    JSONReporter,
    MarkdownReporter,
    should_use_color,
)
from .session import ImprovementSession

logger = get_category_logger(LogCategory.CLI)

# Exit codes: 0=success, 1=configuration or load error, 2=quality gate failed
EXIT_GATE_FAILED = 2

VERDICT_CHOICES = [v.value for v in Verdict]


def common_options(f: Any) -> Any:
    """Options shared by every command."""
    f = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")(f)
    f = click.option("--quiet", "-q", is_flag=True, help="Only print the verdict line")(f)
    f = click.option("--no-color", is_flag=True, help="Disable colored output")(f)
    f = click.option(
        "--format",
        "output_format",
        type=click.Choice(["text", "json", "markdown"]),
        default="text",
        help="Report format",
    )(f)
    f = click.option(
        "--output",
        "-o",
        type=click.Path(dir_okay=False),
        help="Write the report to a file instead of stdout",
    )(f)
    f = click.option(
        "--industry",
        type=click.Choice(sorted(INDUSTRY_PRESETS)),
        help="Industry preset for category weights",
    )(f)
    f = click.option(
        "--fail-under",
        type=click.Choice(VERDICT_CHOICES),
        help="Exit with code 2 when the verdict is below this tier",
    )(f)
    return f


def _load(path: str, industry: str | None) -> tuple[WebsiteArtifact, CriticConfig, DomainContext]:
    site_dir = Path(path).resolve()
    config = load_config(site_dir)
    artifact = WebsiteArtifact.from_directory(site_dir)
    domain = DomainContext(
        industry=industry or config.industry or artifact.business.industry or None,
        weights=None if industry else config.weights,
    )
    return artifact, config, domain


def _emit(
    result: FinalAssessment | ImprovementSession,
    output_format: str,
    output: str | None,
    quiet: bool,
    no_color: bool,
) -> None:
    if output_format == "json":
        if output:
            JSONReporter().export(result, Path(output))
        else:
            click.echo(JSONReporter().export_json(result))
        return

    if output_format == "markdown":
        if output:
            MarkdownReporter().generate(result, Path(output))
        else:
            click.echo(MarkdownReporter().render(result), nl=False)
        return

    if output:
        with open(output, "w", encoding="utf-8") as stream:
            CLIReporter(CLIReportConfig(use_color=False, quiet=quiet, stream=stream)).report(
                result
            )
    else:
        CLIReporter(CLIReportConfig.from_flags(quiet=quiet, no_color=no_color)).report(
            result
        )


def _gate(verdict: Verdict, fail_under: str | None) -> int:
    if fail_under and verdict.rank < Verdict(fail_under).rank:
        logger.info(f"Verdict {verdict.value} is below the {fail_under} gate")
        return EXIT_GATE_FAILED
    return 0


def _fail(error: Exception, no_color: bool, verbose: bool) -> None:
    use_color = should_use_color(explicit_flag=False if no_color else None, stream=sys.stderr)
    message, exit_code = handle_exception(error, use_color=use_color, verbose=verbose)
    click.echo(message, err=True)
    sys.exit(exit_code)


@click.group()
@click.version_option(version=__version__, prog_name="site-critic")
def cli() -> None:
    """Site Critic - multi-rubric quality assessment and repair for generated websites."""


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@common_options
def assess(
    path: str,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    output_format: str,
    output: str | None,
    industry: str | None,
    fail_under: str | None,
) -> None:
    """Score the website in PATH against every rubric.

    Examples:
        site-critic assess ./build
        site-critic assess ./build --format json --fail-under Good
    """
    setup_logging(level="WARNING", quiet=quiet, verbose=verbose)
    try:
        artifact, config, domain = _load(path, industry)
        assessment = QualityAssessor(config=config, domain=domain).assess(
            artifact.snapshot()
        )
    except CriticError as e:
        _fail(e, no_color, verbose)
        return

    _emit(assessment, output_format, output, quiet, no_color)
    sys.exit(_gate(assessment.verdict, fail_under))


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False))
@common_options
@click.option("--target", type=float, help="Weighted score to reach (0-100)")
@click.option("--min-category", type=float, help="Minimum score for every category (0-10)")
@click.option("--max-iterations", type=int, help="Iteration cap")
@click.option("--budget", type=float, help="Wall-clock budget in seconds")
@click.option(
    "--write",
    "write_to",
    type=click.Path(file_okay=False),
    help="Directory to write the improved site to",
)
def improve(
    path: str,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    output_format: str,
    output: str | None,
    industry: str | None,
    fail_under: str | None,
    target: float | None,
    min_category: float | None,
    max_iterations: int | None,
    budget: float | None,
    write_to: str | None,
) -> None:
    """Repair the website in PATH one fix at a time until it meets the bar.

    Examples:
        site-critic improve ./build --target 85 --write ./build-improved
        site-critic improve ./build --max-iterations 5 --format markdown -o report.md
    """
    setup_logging(level="WARNING", quiet=quiet, verbose=verbose)
    try:
        artifact, config, domain = _load(path, industry)
        overrides = {
            "target_score": target,
            "min_category_score": min_category,
            "max_iterations": max_iterations,
            "time_budget_seconds": budget,
        }
        session_data = config.session.model_dump()
        session_data.update({k: v for k, v in overrides.items() if v is not None})
        session_config = parse_config(SessionConfig, session_data)

        orchestrator = ImprovementOrchestrator(config=config, domain=domain)
        session = orchestrator.improve(artifact, session_config)
    except CriticError as e:
        _fail(e, no_color, verbose)
        return

    if write_to:
        try:
            written = artifact.write_directory(Path(write_to))
        except OSError as e:
            error = ArtifactLoadError(
                f"Cannot write improved site to {write_to}: {e}",
                path=write_to,
                suggestion="Choose a writable directory for --write",
            )
            _fail(error, no_color, verbose)
            return
        logger.info(f"Wrote {len(written)} file(s) to {write_to}")

    _emit(session, output_format, output, quiet, no_color)
    sys.exit(_gate(session.final_assessment.verdict, fail_under))


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
