"""CLI entry point for aumos-policy-enforcer.

Invoked as::

    policy-enforcer [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m aumos_policy_enforcer.cli.main

Commands
--------
- audit     Summarise a decision audit log
- check     Run the enforcer for one request against a config and token
- paths     List the protected paths of a config
- validate  Validate an enforcer config file
- version   Show version information
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from aumos_policy_enforcer.errors import EnforcerConfigError

console = Console()
err_console = Console(stderr=True)

_DEFAULT_CONFIG = Path("enforcer.yaml")


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="aumos-policy-enforcer")
def cli() -> None:
    """Policy Enforcer CLI: evaluate requests against protected paths."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from aumos_policy_enforcer import __version__

    console.print(
        Panel(
            f"[bold]aumos-policy-enforcer[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Request-time policy enforcement point for token-embedded permissions.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.option(
    "--config",
    "-c",
    "config_path",
    default=str(_DEFAULT_CONFIG),
    show_default=True,
    type=click.Path(exists=True),
    help="Path to enforcer.yaml.",
)
def validate_command(config_path: str) -> None:
    """Validate an enforcer configuration file."""
    from aumos_policy_enforcer.config.loader import ConfigLoader

    try:
        settings = ConfigLoader().load(config_path)
    except EnforcerConfigError as exc:
        err_console.print(f"[red]INVALID:[/red] {exc}")
        sys.exit(1)

    console.print(
        f"[green]VALID[/green]: {len(settings.paths)} protected paths, "
        f"enforcement mode [cyan]{settings.enforcement_mode.value}[/cyan]"
    )


# ---------------------------------------------------------------------------
# paths
# ---------------------------------------------------------------------------


@cli.command(name="paths")
@click.option(
    "--config",
    "-c",
    "config_path",
    default=str(_DEFAULT_CONFIG),
    show_default=True,
    type=click.Path(exists=True),
    help="Path to enforcer.yaml.",
)
def paths_command(config_path: str) -> None:
    """List protected paths and their method requirements."""
    from aumos_policy_enforcer.config.loader import ConfigLoader

    try:
        settings = ConfigLoader().load(config_path)
    except EnforcerConfigError as exc:
        err_console.print(f"[red]Invalid config:[/red] {exc}")
        sys.exit(1)

    registry = settings.build_registry()
    if not len(registry):
        console.print("[yellow]No protected paths configured.[/yellow]")
        return

    table = Table(title="Protected Paths", box=box.SIMPLE)
    table.add_column("Path", style="cyan")
    table.add_column("Resource", style="magenta")
    table.add_column("Mode")
    table.add_column("Default scopes")
    table.add_column("Methods")

    for config in registry:
        mode = config.effective_enforcement_mode(settings.enforcement_mode)
        methods = ", ".join(
            f"{m.method}[{m.scopes_enforcement_mode.value}]: {' '.join(m.scopes) or '-'}"
            for m in config.methods.values()
        )
        table.add_row(
            config.path,
            str(config.id),
            mode.value,
            " ".join(config.scopes) or "-",
            methods or "-",
        )

    console.print(table)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.option("--path", "-p", "request_path", required=True, help="Request path, e.g. /orders/42.")
@click.option("--method", "-m", default="GET", show_default=True, help="HTTP method.")
@click.option(
    "--token",
    "-t",
    "token_file",
    type=click.Path(exists=True),
    help="JSON file holding the validated token claims.",
)
@click.option("--anonymous", is_flag=True, help="Send the request without a security context.")
@click.option(
    "--config",
    "-c",
    "config_path",
    default=str(_DEFAULT_CONFIG),
    show_default=True,
    type=click.Path(exists=True),
    help="Path to enforcer.yaml.",
)
def check_command(
    request_path: str,
    method: str,
    token_file: str | None,
    anonymous: bool,
    config_path: str,
) -> None:
    """Evaluate one request and exit 0 when granted, 1 when denied."""
    from aumos_policy_enforcer.config.loader import ConfigLoader
    from aumos_policy_enforcer.enforcement.enforcer import PolicyEnforcer
    from aumos_policy_enforcer.http.facade import BearerChallenge, HttpFacade, HttpRequest
    from aumos_policy_enforcer.tokens.access_token import AccessToken, SecurityContext

    if anonymous and token_file:
        err_console.print("[red]--anonymous and --token are mutually exclusive.[/red]")
        sys.exit(2)
    if not anonymous and not token_file:
        err_console.print("[red]Provide --token FILE or --anonymous.[/red]")
        sys.exit(2)

    security_context: SecurityContext | None = None
    if token_file:
        try:
            claims = json.loads(Path(token_file).read_text(encoding="utf-8"))
            security_context = SecurityContext(AccessToken.from_claims(claims))
        except (json.JSONDecodeError, ValueError, AttributeError) as exc:
            err_console.print(f"[red]Invalid token claims:[/red] {exc}")
            sys.exit(2)

    try:
        settings = ConfigLoader().load(config_path)
    except EnforcerConfigError as exc:
        err_console.print(f"[red]Invalid config:[/red] {exc}")
        sys.exit(2)

    enforcer = PolicyEnforcer.from_settings(
        settings, challenge_handler=BearerChallenge(realm="policy-enforcer")
    )
    facade = HttpFacade(HttpRequest(method=method, path=request_path), security_context)
    decision = enforcer.authorize(facade)

    status_str = "[green]GRANTED[/green]" if decision.granted else "[red]DENIED[/red]"
    console.print(Panel(status_str, title="Enforcement Result", border_style="blue"))
    console.print(f"  Reason: [cyan]{decision.reason}[/cyan]")
    if decision.path_config is not None:
        console.print(f"  Matched path: [bold]{decision.path_config.path}[/bold]")
    if facade.response.committed:
        console.print(f"  Response status: [bold]{facade.response.status}[/bold]")
        for name, value in facade.response.headers.items():
            console.print(f"  {name}: {value}")

    if decision.permissions:
        table = Table(title="Token Permissions", box=box.SIMPLE)
        table.add_column("Resource", style="cyan")
        table.add_column("Name", style="magenta")
        table.add_column("Scopes")
        for permission in decision.permissions:
            table.add_row(
                permission.resource_id or "*",
                permission.resource_name or "",
                " ".join(sorted(permission.scopes)) or "(unrestricted)",
            )
        console.print(table)

    sys.exit(0 if decision.granted else 1)


# ---------------------------------------------------------------------------
# audit
# ---------------------------------------------------------------------------


@cli.command(name="audit")
@click.option(
    "--log",
    "-l",
    "log_path",
    required=True,
    type=click.Path(exists=True),
    help="Path to the decision audit .jsonl file.",
)
@click.option("--denied", is_flag=True, help="Show only denied decisions.")
@click.option("--last", "last", default=20, show_default=True, help="Number of decisions to show.")
def audit_command(log_path: str, denied: bool, last: int) -> None:
    """Summarise recorded authorization decisions."""
    from aumos_policy_enforcer.audit.logger import DecisionAuditLogger

    audit = DecisionAuditLogger(Path(log_path))
    records = audit.decisions(granted=False if denied else None)
    if not records:
        console.print("[yellow]No decisions recorded.[/yellow]")
        return

    summary = Table(title="Decisions by Reason", box=box.SIMPLE)
    summary.add_column("Reason", style="cyan")
    summary.add_column("Count", justify="right")
    for reason, count in audit.summary().most_common():
        summary.add_row(reason, str(count))
    console.print(summary)
    console.print(
        f"  Granted: [green]{audit.count(granted=True)}[/green]  "
        f"Denied: [red]{audit.count(granted=False)}[/red]"
    )

    table = Table(title="Recent Decisions", box=box.SIMPLE)
    table.add_column("Time")
    table.add_column("Method")
    table.add_column("Path", style="cyan")
    table.add_column("Outcome")
    table.add_column("Reason")
    for record in records[-last:] if last > 0 else []:
        outcome = "[green]GRANTED[/green]" if record.get("granted") else "[red]DENIED[/red]"
        table.add_row(
            str(record.get("timestamp", ""))[:19],
            str(record.get("method", "")),
            str(record.get("path", "")),
            outcome,
            str(record.get("reason", "")),
        )
    console.print(table)


if __name__ == "__main__":
    cli()
