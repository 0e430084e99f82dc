# crossmatch/cli/runner.py

"""Headless CLI: fetch a listing and print its cross-platform matches."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from crossmatch.models.product import (
    MatchResult,
    NormalizedProduct,
    Platform,
)
from crossmatch.providers.base_provider import ProviderError
from crossmatch.services.match_orchestrator import MatchOrchestrator

logger = logging.getLogger("crossmatch.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _print_table(
    source: NormalizedProduct, matches: list[MatchResult],
) -> None:
    """Render a Rich table of matches to stdout."""
    table = Table(
        title=f"Matches for {source.title[:60]}",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Confidence", justify="right")
    table.add_column("Method", style="magenta")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, m in enumerate(matches, 1):
        p = m.product
        price_str = (
            f"{p.currency} {p.price:,.2f}" if p.price > 0 else "N/A"
        )
        table.add_row(
            str(idx),
            p.title[:60],
            price_str,
            f"{m.confidence:.2f}",
            m.match_method.value,
            p.url,
        )

    Console().print(table)


def cli_match(
    platform_id: str,
    product_id: str,
    output_format: str,
    orchestrator: MatchOrchestrator | None = None,
) -> int:
    """Match one listing and return an exit code (0=ok, 1=fail)."""
    platform = Platform(platform_id)
    orchestrator = orchestrator or MatchOrchestrator.from_settings()

    if not orchestrator.providers.is_configured(platform):
        _err.print(
            f"[red]{platform.value} provider is not configured.[/red]"
        )
        return 1

    _err.print(
        f"[bold]Fetching:[/bold] {platform.value} {product_id}"
    )
    try:
        source = orchestrator.fetch_source(platform, product_id)
    except ProviderError as exc:
        logger.error(
            "Source fetch failed for %s:%s: %s",
            platform.value,
            product_id,
            exc,
            exc_info=True,
        )
        _err.print(f"[red]Could not fetch product: {exc}[/red]")
        return 1

    matches = orchestrator.find_matches(source)
    if not matches:
        _err.print("[yellow]No matches found.[/yellow]")
    else:
        _err.print(
            f"[green]✓ {len(matches)} matches "
            f"({matches[0].match_method.value})[/green]"
        )

    if output_format == "table":
        _print_table(source, matches)
    else:
        json.dump(
            {
                "source": source.to_dict(),
                "matches": [m.to_dict() for m in matches],
            },
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0


async def run_health_check() -> int:
    """Run configuration/connectivity checks on all providers."""
    from crossmatch.services.health_checker import HealthChecker

    _err.print("[bold]Running provider health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Provider Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Provider", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        elif r.status == "unconfigured":
            status = "[yellow]➖ UNCONFIGURED[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(
            r.provider_id, status, latency, r.message,
        )

    Console().print(table)
    return 1 if any_down else 0
