"""Smart Connect CLI -- operator tools for the abuse-mitigation layer."""

import sys

import click
from rich.console import Console
from rich.table import Table

from smartconnect import __version__

console = Console()


@click.group()
@click.version_option(version=__version__)
def main():
    """Raipur Smart Connect -- abuse-mitigation tooling.

    Inspect the effective rate-limit policy and try submissions against
    the spam checks without going through the API.
    """


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("text")
def validate(text: str):
    """Run the static spam checks against TEXT.

    Exits with status 1 when the text would be rejected.
    """
    from smartconnect.security.content_validator import validate_content

    verdict = validate_content(text)
    if verdict.is_valid:
        console.print("[green]v[/] Content passes all checks")
        return
    console.print(f"[red]x[/] Rejected: {verdict.reason}")
    sys.exit(1)


# ── Limits ───────────────────────────────────────────────────────────


@main.command()
@click.option("--config", "config_path", default=None, help="YAML policy override file")
def limits(config_path: str | None):
    """Show the effective rate-limit and escalation policy."""
    from smartconnect.security.config import load_config

    try:
        config = load_config(config_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Failed to load config:[/] {e}")
        sys.exit(1)

    table = Table(title="Rate limits")
    table.add_column("Category", style="cyan")
    table.add_column("Max requests", justify="right")
    table.add_column("Window (s)", justify="right")
    for name, limit in config.categories.items():
        table.add_row(name, str(limit.max_requests), str(limit.window_seconds))
    console.print(table)

    console.print(f"Warnings before block: [bold]{config.warning_threshold}[/]")
    console.print(f"Block duration: [bold]{config.block_duration_seconds // 60} minutes[/]")
    console.print(f"Duplicate window: [bold]{config.duplicate_window_seconds // 60} minutes[/]")
    console.print(f"Activity log capacity: [bold]{config.activity_log_capacity}[/]")
    if config.shared_counters:
        console.print("[yellow]![/] Counters are shared across categories")


# ── Classify ─────────────────────────────────────────────────────────


@main.command()
@click.option("--title", required=True)
@click.option("--description", required=True)
@click.option("--category", required=True)
@click.option("--location", default="")
@click.option("--community", is_flag=True, help="Classify as a community issue")
def classify(title: str, description: str, category: str, location: str, community: bool):
    """Ask the AI spam classifier about a complaint.

    Requires ANTHROPIC_API_KEY; without it every submission is allowed.
    """
    from smartconnect.spam.classifier import SpamClassifier

    classifier = SpamClassifier()
    if not classifier.configured:
        console.print("[yellow]LLM not configured; the classifier allows everything.[/]")

    if community:
        verdict = classifier.classify_community_issue(title, description, category)
    else:
        verdict = classifier.classify_complaint(title, description, category, location)

    status = "[red]REJECT[/]" if verdict.should_reject() else "[green]ALLOW[/]"
    console.print(f"{status} {verdict.category} ({verdict.confidence:.2f}): {verdict.reason}")
