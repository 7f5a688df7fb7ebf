"""Main CLI entry point for the NeuroLink demo."""

import asyncio
import json
import sys
import time
from typing import Any, Dict, List, Optional

import aiohttp
import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from neurolink_demo import __version__
from neurolink_demo.config import ConfigurationError, analyze_environment, load_config, setup_logging
from neurolink_demo.llm import (
    ALL_PROVIDERS,
    AUTO_PROVIDER,
    AllProvidersFailedError,
    FallbackChainConfig,
    FallbackSequencer,
    GenerationOptions,
    ProviderProber,
    UsageStats,
    best_provider,
)

# Load environment variables from .env file
load_dotenv()

console = Console()

BENCHMARK_PROMPT = "Write a haiku about artificial intelligence."
PROVIDER_CHOICE = click.Choice(list(ALL_PROVIDERS))


def build_prober() -> ProviderProber:
    return ProviderProber(config=FallbackChainConfig())


def build_sequencer() -> FallbackSequencer:
    return FallbackSequencer(config=FallbackChainConfig(), usage=UsageStats())


def _flag(value: bool) -> str:
    return "[green]yes[/green]" if value else "[red]no[/red]"


@click.group()
@click.version_option(version=__version__, prog_name="neurolink-demo")
@click.option(
    "--verbose", "-v", is_flag=True, help="Enable verbose output"
)
@click.option(
    "--config",
    "-c",
    default=None,
    help="Configuration file path",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: Optional[str]) -> None:
    """NeuroLink demo: multi-provider text generation with fallback."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config

    if verbose:
        try:
            demo_config = load_config(config)
        except ConfigurationError as e:
            raise click.ClickException(str(e))
        demo_config.logging.level = "DEBUG"
        setup_logging(demo_config)
        console.print(f"[green]NeuroLink demo v{__version__}[/green]")


@cli.command()
@click.option("--provider", "-p", type=PROVIDER_CHOICE, help="Probe a single provider")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def status(provider: Optional[str], as_json: bool) -> None:
    """Probe providers for configuration, availability and authentication."""
    prober = build_prober()
    providers = [provider] if provider else None
    statuses = asyncio.run(prober.probe_all(providers))

    if as_json:
        click.echo(json.dumps(
            {
                "providers": {name: s.to_dict() for name, s in statuses.items()},
                "best_provider": best_provider(statuses),
            },
            indent=2,
        ))
        return

    table = Table(title="Provider Status")
    table.add_column("Provider", style="cyan")
    table.add_column("Configured")
    table.add_column("Available")
    table.add_column("Authenticated")
    table.add_column("Model", style="dim")
    table.add_column("Error", style="yellow")

    for name, provider_state in statuses.items():
        table.add_row(
            name,
            _flag(provider_state.configured),
            _flag(provider_state.available),
            _flag(provider_state.authenticated),
            provider_state.model,
            provider_state.error or "",
        )
    console.print(table)

    best = best_provider(statuses)
    if best:
        console.print(f"[green]Best provider:[/green] {best}")
    else:
        console.print("[red]No authenticated providers[/red]")


@cli.command()
@click.argument("prompt")
@click.option("--provider", "-p", default=AUTO_PROVIDER, show_default=True, help="Provider name or 'auto'")
@click.option("--max-tokens", type=int, help="Output budget override")
@click.option("--temperature", type=float, help="Sampling temperature override")
@click.option("--system-prompt", help="System prompt")
@click.option("--timeout", type=float, help="Per-attempt timeout in seconds")
def generate(
    prompt: str,
    provider: str,
    max_tokens: Optional[int],
    temperature: Optional[float],
    system_prompt: Optional[str],
    timeout: Optional[float],
) -> None:
    """Generate text, falling back across configured providers."""
    if not prompt.strip():
        raise click.BadParameter("Prompt is required", param_hint="PROMPT")

    sequencer = build_sequencer()
    options = GenerationOptions(
        max_tokens=max_tokens,
        temperature=temperature,
        system_prompt=system_prompt,
        timeout=timeout,
    )
    try:
        result = asyncio.run(sequencer.generate(provider, prompt, options))
    except AllProvidersFailedError as e:
        console.print(f"[red]{e.message}[/red]")
        sys.exit(1)

    console.print(result.content)
    fallback_note = " (fallback)" if result.fallback_used else ""
    console.print(
        f"[dim]{result.provider}/{result.model}{fallback_note} in {result.response_time_ms}ms, "
        f"{result.attempted_count} attempt(s)[/dim]"
    )


async def _run_benchmark(
    sequencer: FallbackSequencer,
    providers: List[str],
    iterations: int,
) -> Dict[str, Dict[str, Any]]:
    """Time repeated single-provider runs; no fallback."""
    results: Dict[str, Dict[str, Any]] = {}
    options = GenerationOptions(max_tokens=100, temperature=0.7)

    for name in providers:
        timings: List[float] = []
        errors: List[str] = []
        for _ in range(iterations):
            start_time = time.monotonic()
            try:
                await sequencer.generate(name, BENCHMARK_PROMPT, options, fallback=False)
                timings.append((time.monotonic() - start_time) * 1000)
            except AllProvidersFailedError as e:
                errors.append(e.message)

        entry: Dict[str, Any] = {"successes": len(timings), "failures": len(errors)}
        if timings:
            entry.update(
                average_ms=round(sum(timings) / len(timings)),
                min_ms=round(min(timings)),
                max_ms=round(max(timings)),
            )
        if errors:
            entry["last_error"] = errors[-1]
        results[name] = entry

    return results


@cli.command()
@click.option("--provider", "-p", type=PROVIDER_CHOICE, multiple=True, help="Provider(s) to benchmark")
@click.option("--iterations", "-n", type=click.IntRange(min=1), default=3, show_default=True)
def benchmark(provider: tuple, iterations: int) -> None:
    """Benchmark response times across providers."""
    sequencer = build_sequencer()
    providers = list(provider) or list(ALL_PROVIDERS)
    console.print(f"[blue]Benchmarking {len(providers)} provider(s), {iterations} iteration(s) each[/blue]")

    results = asyncio.run(_run_benchmark(sequencer, providers, iterations))

    table = Table(title="Benchmark Results")
    table.add_column("Provider", style="cyan")
    table.add_column("OK", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Avg (ms)", justify="right")
    table.add_column("Min (ms)", justify="right")
    table.add_column("Max (ms)", justify="right")
    for name, entry in results.items():
        table.add_row(
            name,
            str(entry["successes"]),
            str(entry["failures"]),
            str(entry.get("average_ms", "-")),
            str(entry.get("min_ms", "-")),
            str(entry.get("max_ms", "-")),
        )
    console.print(table)

    ranking = sorted(
        (name for name, entry in results.items() if entry["successes"]),
        key=lambda name: results[name]["average_ms"],
    )
    if ranking:
        console.print("[green]Ranking (fastest first):[/green]")
        for position, name in enumerate(ranking, start=1):
            console.print(f"  {position}. {name} ({results[name]['average_ms']}ms)")
    else:
        console.print("[red]No provider completed a run[/red]")


@cli.command()
def env() -> None:
    """Analyze provider environment configuration."""
    for report in analyze_environment():
        marker = "[green][OK][/green]" if report.configured else "[red][--][/red]"
        console.print(f"\n{marker} [bold]{report.provider}[/bold]")

        for var in report.required:
            value = var.masked_value if var.present else "Not set"
            console.print(f"    required  {var.name}: {value}")
        for var in report.optional:
            if var.present:
                console.print(f"    optional  {var.name}: {var.masked_value}")

        if report.auth_method:
            console.print(f"    auth method: {report.auth_method}")
        for check, passed in report.checks.items():
            console.print(f"    check {check}: {_flag(passed)}")
        for warning in report.warnings:
            console.print(f"    [yellow]warning: {warning}[/yellow]")


async def _fetch_analytics(url: str) -> Dict[str, Any]:
    timeout = aiohttp.ClientTimeout(total=10)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.get(f"{url.rstrip('/')}/api/analytics") as response:
            response.raise_for_status()
            return await response.json()


@cli.command()
@click.option("--url", default="http://localhost:9876", show_default=True, help="Running demo server")
def analytics(url: str) -> None:
    """Show usage statistics from a running server."""
    try:
        data = asyncio.run(_fetch_analytics(url))
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        console.print(f"[red]Could not fetch analytics from {url}: {e}[/red]")
        sys.exit(1)

    console.print(f"Total requests: {data['total_requests']}")
    console.print(f"Total tokens:   {data['total_tokens']}")
    console.print(f"Total errors:   {data['total_errors']}")
    console.print(f"Avg tokens/req: {data['average_tokens_per_request']}")
    console.print(f"Error rate:     {data['error_rate']}%")

    usage = data.get("provider_usage") or {}
    if usage:
        table = Table(title="Provider Usage")
        table.add_column("Provider", style="cyan")
        for column in ("attempts", "successes", "failures", "tokens"):
            table.add_column(column.title(), justify="right")
        for name, counters in usage.items():
            table.add_row(
                name,
                *(str(counters.get(column, 0)) for column in ("attempts", "successes", "failures", "tokens")),
            )
        console.print(table)


@cli.command()
@click.option("--host", default=None, help="Bind address")
@click.option("--port", type=int, default=None, help="Bind port")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Run the demo HTTP server."""
    import uvicorn

    try:
        demo_config = load_config(ctx.obj.get("config"))
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    host = host or demo_config.server.host
    port = port or demo_config.server.port
    console.print(f"[green]Starting NeuroLink demo server on http://{host}:{port}[/green]")
    uvicorn.run("neurolink_demo.api.main:app", host=host, port=port)


def main() -> int:
    """Main entry point for the CLI."""
    try:
        cli()
        return 0
    except KeyboardInterrupt:
        console.print("\n[red]Operation cancelled by user[/red]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
