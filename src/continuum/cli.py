"""Command-line interface using Typer."""

from typing import Optional
from uuid import UUID

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from continuum import __version__
from continuum.logging import setup_logging

setup_logging()

app = typer.Typer(
    name="continuum",
    help="Continuum - brand-aware prompt synthesis CLI",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"Continuum v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Continuum - synthesize prompts, predict platforms and inspect learned patterns."""
    pass


@app.command()
def translate(
    text: str = typer.Argument(..., help="Description to check against content policy"),
) -> None:
    """Rewrite brand and model names into generic visual descriptors."""
    from continuum.services.policy import translate_for_policy

    result = translate_for_policy(text)
    if result.was_translated:
        console.print(f"[yellow]Matched:[/yellow] {result.matched_phrase}")
    else:
        console.print("[dim]No protected names found[/dim]")
    console.print(result.translated_text)


@app.command()
def budget(
    duration: float = typer.Argument(..., help="Clip duration in seconds"),
) -> None:
    """Show the complexity budget for a clip duration."""
    from continuum.services.complexity import get_complexity_budget

    complexity = get_complexity_budget(duration)
    console.print(Panel(complexity.format_rules(duration), title="Complexity Budget"))


@app.command()
def templates() -> None:
    """List shot templates."""
    from continuum.presets.shots import DEFAULT_SHOT_CATALOG, get_shot_type_names

    table = Table(title="Shot Templates")
    table.add_column("Shot Type", style="cyan")
    table.add_column("Name")
    table.add_column("Optimal Duration")
    table.add_column("Camera")

    for name in get_shot_type_names():
        template = DEFAULT_SHOT_CATALOG.template(name)
        requirements = DEFAULT_SHOT_CATALOG.requirements_for(name)
        table.add_row(
            name,
            template.name,
            f"{requirements.optimal_duration_min}-{requirements.optimal_duration_max}s",
            template.camera_instruction[:60],
        )

    console.print(table)


@app.command()
def platforms() -> None:
    """List known platforms and their limits."""
    from continuum.presets.platforms import DEFAULT_PLATFORM_CATALOG, get_platform_names

    table = Table(title="Platforms")
    table.add_column("Platform", style="cyan")
    table.add_column("Outputs")
    table.add_column("Char Limit")
    table.add_column("Best For")

    for name in get_platform_names():
        capability = DEFAULT_PLATFORM_CATALOG.capability(name)
        limit = DEFAULT_PLATFORM_CATALOG.char_limit(name)
        table.add_row(
            name,
            ", ".join(sorted(k.value for k in capability.output_kinds)),
            str(limit) if limit else "-",
            ", ".join(capability.best_for[:3]) or "-",
        )

    console.print(table)


@app.command()
def predict(
    shot_type: str = typer.Option("auto", "--shot", "-s", help="Shot type"),
    duration: float = typer.Option(7, "--duration", "-d", help="Duration in seconds"),
    still: bool = typer.Option(False, "--still", help="Predict for still output"),
    description: str = typer.Option("", "--description", help="Shot description"),
    platform: Optional[str] = typer.Option(None, "--platform", "-p", help="Requested platform"),
) -> None:
    """Rank platforms for a shot."""
    from continuum.domain.enums import OutputKind
    from continuum.services.prediction import PredictionEngine

    output_kind = OutputKind.STILL if still else OutputKind.VIDEO
    prediction = PredictionEngine().predict(
        shot_type,
        duration,
        output_kind,
        description=description,
        requested_platform=platform,
    )

    console.print(
        f"[bold green]Recommended: {prediction.recommended_platform} "
        f"({prediction.confidence}%)[/bold green]"
    )
    console.print(f"[dim]{prediction.rationale}[/dim]")

    table = Table(title="Ranking")
    table.add_column("Platform", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Warnings")

    for entry in prediction.ranking:
        table.add_row(entry.platform, str(entry.score), "; ".join(entry.warnings) or "-")

    console.print(table)

    for warning in prediction.warnings:
        console.print(f"[yellow]! {warning}[/yellow]")


@app.command()
def intelligence(
    brand_id: str = typer.Argument(..., help="Brand ID"),
    owner: str = typer.Option(..., "--owner", "-o", help="Owner ID of the brand"),
    min_confidence: float = typer.Option(0.0, "--min-confidence", help="Confidence cutoff"),
    limit: int = typer.Option(25, "--limit", "-n", help="Maximum patterns to show"),
) -> None:
    """Show learned patterns for a brand."""
    try:
        brand_uuid = UUID(brand_id)
    except ValueError:
        console.print(f"[bold red]Invalid brand ID: {brand_id}[/bold red]")
        raise typer.Exit(code=1)

    try:
        from continuum.db.session import get_session_context
        from continuum.services.intelligence import BrandIntelligenceStore
        from continuum.services.tenant_store import BrandNotFoundError, TenantStore

        with get_session_context() as session:
            try:
                brand = TenantStore(session).get_brand(brand_uuid, owner)
            except BrandNotFoundError as e:
                console.print(f"[bold red]{e}[/bold red]")
                raise typer.Exit(code=1)

            records = BrandIntelligenceStore(session).list_for_tenant(
                brand.id, min_confidence=min_confidence, limit=limit
            )

            table = Table(title=f"Learned Patterns: {brand.name}")
            table.add_column("Type", style="cyan")
            table.add_column("Value")
            table.add_column("Confidence", justify="right")
            table.add_column("Seen", justify="right")

            for record in records:
                table.add_row(
                    record.pattern_type,
                    record.pattern_value,
                    f"{record.confidence:.2f}",
                    str(record.occurrences),
                )

            console.print(table)
            if not records:
                console.print("[dim]No patterns learned yet[/dim]")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind host"),
    port: Optional[int] = typer.Option(None, "--port", help="Bind port"),
) -> None:
    """Run the API server."""
    import uvicorn

    from continuum.config import settings

    uvicorn.run(
        "continuum.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    app()
