"""Typer CLI — ``spawnsmart calculate``, ``spawnsmart spores`` and friends."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from spawnsmart.calculator.data import CONTAINER_SIZES, CULTIVATION_TIPS, EXPERIENCE_LEVELS, SUBSTRATE_TYPES
from spawnsmart.calculator.user_data import UserDataStore
from spawnsmart.config import load_config
from spawnsmart.context import AppContext
from spawnsmart.schemas.config import AppConfig
from spawnsmart.schemas.content import SUPPLIER_TYPES
from spawnsmart.shared.progress import LoadProgress

# Load .env file from the working directory (if it exists)
load_dotenv()

app = typer.Typer(
    name="spawnsmart",
    help="SpawnSmart — mushroom cultivation calculator, spore finder and grower resources.",
    no_args_is_help=True,
)
console = Console()

ConfigOption = typer.Option(None, "--config", "-c", help="Path to spawnsmart.yml")
VerboseOption = typer.Option(False, "--verbose", "-v")
DryRunOption = typer.Option(False, "--dry-run", help="Use canned AI replies (no API calls).")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load(config: Path | None) -> AppConfig:
    try:
        return load_config(config)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {escape(str(exc))}")
        raise typer.Exit(code=1)


def _apply_inputs(
    store: UserDataStore,
    *,
    experience: str | None,
    spawn: float | None,
    ratio: int | None,
    substrate: str | None,
    container: float | None,
) -> None:
    """Start from the saved selections, then apply the command-line overrides."""
    store.load()
    # Experience first: it resets the ratio to the level's default.
    updates = [
        ("experience_level", experience),
        ("spawn_amount", spawn),
        ("substrate_ratio", ratio),
        ("substrate_type", substrate),
        ("container_size", container),
    ]
    try:
        for field, value in updates:
            if value is not None:
                store.update(field, value)
    except ValueError as exc:
        console.print(f"[red]Invalid calculator input:[/] {escape(str(exc))}")
        raise typer.Exit(code=1)


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------


@app.command()
def validate(config: Path = ConfigOption, verbose: bool = VerboseOption) -> None:
    """Validate the configuration without loading any content."""
    _setup_logging(verbose)
    cfg = _load(config)

    console.print("[green]Config is valid![/]\n")
    cms = cfg.contentful
    console.print(f"  Contentful space:  {cms.space_id or '(not set)'}")
    console.print(f"  Environment:       {cms.environment}")
    console.print(f"  Access token:      {'set' if cms.access_token else '(not set)'}")
    console.print(f"  OpenAI model:      {cfg.openai.model}")
    console.print(f"  OpenAI API key:    {'set' if cfg.openai.api_key else '(not set)'}")
    console.print(f"  Recommendations:   {cfg.recommendations.max_requests} requests, "
                  f"{cfg.recommendations.min_interval_seconds:g}s apart")
    console.print(f"  Saved state:       {cfg.state_path}")


@app.command()
def calculate(
    experience: str = typer.Option(None, "--experience", "-e", help="beginner, intermediate or expert"),
    spawn: float = typer.Option(None, "--spawn", "-s", help="Spawn amount in quarts"),
    ratio: int = typer.Option(None, "--ratio", "-r", help="Substrate parts per part of spawn"),
    substrate: str = typer.Option(None, "--substrate", "-t", help="cvg, manure or sawdust"),
    container: float = typer.Option(None, "--container", "-k", help="Container size in quarts"),
    save: bool = typer.Option(False, "--save", help="Remember these selections."),
    reset: bool = typer.Option(False, "--reset", help="Forget saved selections first."),
    options: bool = typer.Option(False, "--options", help="List the available choices and exit."),
    config: Path = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Calculate a spawn-to-substrate mix."""
    _setup_logging(verbose)
    if options:
        _print_options()
        return

    store = UserDataStore(_load(config).state_path)
    if reset:
        store.reset()
        store.save()
    _apply_inputs(store, experience=experience, spawn=spawn, ratio=ratio, substrate=substrate, container=container)
    _print_results(store)

    if save:
        if store.save():
            console.print(f"\n[green]Settings saved to[/] {store.path}")
        else:
            console.print("\n[red]Failed to save settings[/]")
            raise typer.Exit(code=1)


@app.command()
def suppliers(
    supplier_type: str = typer.Option(None, "--type", "-t", help=f"One of: {', '.join(SUPPLIER_TYPES)}"),
    featured: bool = typer.Option(False, "--featured", help="Only featured suppliers."),
    config: Path = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """List suppliers and the products they carry."""
    _setup_logging(verbose)
    asyncio.run(_run_suppliers(_load(config), supplier_type, featured))


@app.command()
def spores(
    search: str = typer.Option("", "--search", "-q", help="Match name or description."),
    spore_type: str = typer.Option("all", "--type", "-t", help="cubensis, cyanescens, gourmet, medicinal or all"),
    config: Path = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Find spore varieties."""
    _setup_logging(verbose)
    asyncio.run(_run_spores(_load(config), search, spore_type))


@app.command()
def learn(
    category: str = typer.Argument(None, help="Category to show; omit to list categories."),
    config: Path = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Browse educational content."""
    _setup_logging(verbose)
    asyncio.run(_run_learn(_load(config), category))


@app.command()
def faq(
    category: str = typer.Option(None, "--category", help="Only this category."),
    config: Path = ConfigOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show frequently asked questions."""
    _setup_logging(verbose)
    asyncio.run(_run_faq(_load(config), category))


@app.command()
def fact(config: Path = ConfigOption, verbose: bool = VerboseOption, dry_run: bool = DryRunOption) -> None:
    """Print an interesting mushroom fact."""
    _setup_logging(verbose)
    asyncio.run(_run_fact(_load(config), dry_run=dry_run))


@app.command()
def advice(
    experience: str = typer.Option(None, "--experience", "-e"),
    spawn: float = typer.Option(None, "--spawn", "-s"),
    ratio: int = typer.Option(None, "--ratio", "-r"),
    substrate: str = typer.Option(None, "--substrate", "-t"),
    container: float = typer.Option(None, "--container", "-k"),
    config: Path = ConfigOption,
    verbose: bool = VerboseOption,
    dry_run: bool = DryRunOption,
) -> None:
    """Get AI cultivation advice for a setup (saved selections plus overrides)."""
    _setup_logging(verbose)
    cfg = _load(config)
    inputs = dict(experience=experience, spawn=spawn, ratio=ratio, substrate=substrate, container=container)
    asyncio.run(_run_advice(cfg, inputs, dry_run=dry_run))


@app.command()
def recommend(
    experience: str = typer.Option(None, "--experience", "-e"),
    spawn: float = typer.Option(None, "--spawn", "-s"),
    ratio: int = typer.Option(None, "--ratio", "-r"),
    substrate: str = typer.Option(None, "--substrate", "-t"),
    container: float = typer.Option(None, "--container", "-k"),
    config: Path = ConfigOption,
    verbose: bool = VerboseOption,
    dry_run: bool = DryRunOption,
) -> None:
    """Get personalized recommendations for a setup."""
    _setup_logging(verbose)
    cfg = _load(config)
    inputs = dict(experience=experience, spawn=spawn, ratio=ratio, substrate=substrate, container=container)
    asyncio.run(_run_recommend(cfg, inputs, dry_run=dry_run))


@app.command()
def status(config: Path = ConfigOption, verbose: bool = VerboseOption) -> None:
    """Load every content category and report where each one came from."""
    _setup_logging(verbose)
    asyncio.run(_run_status(_load(config)))


# ----------------------------------------------------------------------
# Async runners
# ----------------------------------------------------------------------


async def _run_suppliers(cfg: AppConfig, supplier_type: str | None, featured: bool) -> None:
    async with AppContext.create(cfg) as ctx:
        resolver = ctx.resolver
        if supplier_type and featured:
            found = await resolver.get_featured_suppliers_by_type(supplier_type)
        elif supplier_type:
            found = await resolver.get_all_suppliers_by_type(supplier_type)
        elif featured:
            found = await resolver.get_featured_suppliers()
        else:
            found = await resolver.get_all_suppliers()
        copy = await resolver.get_component_content("substrateSuppliers")

    if not found:
        console.print("[yellow]No suppliers available.[/]")
        return

    table = Table(title=escape(copy.get("title", "Suppliers")))
    table.add_column("Supplier", style="bold")
    table.add_column("Type")
    table.add_column("Products")
    table.add_column("URL", overflow="fold")
    for s in found:
        name = escape(f"★ {s.name}" if s.featured else s.name)
        products = ", ".join(p.name for p in s.products) or "-"
        table.add_row(name, s.type, escape(products), escape(s.url))
    console.print(table)
    if copy.get("disclaimer"):
        console.print(f"[dim]{escape(copy['disclaimer'])}[/]")


async def _run_spores(cfg: AppConfig, search: str, spore_type: str) -> None:
    async with AppContext.create(cfg) as ctx:
        found = await ctx.resolver.search_spores(search, spore_type)

    if not found:
        console.print("No spores found matching your criteria. Try adjusting your search.")
        return

    table = Table(title="Spore Finder")
    table.add_column("Variety", style="bold")
    table.add_column("Type")
    table.add_column("Difficulty")
    table.add_column("Colonization")
    table.add_column("Price")
    table.add_column("Suppliers")
    for s in found:
        table.add_row(
            escape(s.name), s.type, s.difficulty, escape(s.colonization_time), escape(s.price),
            escape(", ".join(s.supplier_names) or "-"),
        )
    console.print(table)


async def _run_learn(cfg: AppConfig, category: str | None) -> None:
    async with AppContext.create(cfg) as ctx:
        if category is None:
            categories = await ctx.resolver.get_educational_categories()
            items = []
        else:
            categories = []
            items = await ctx.resolver.get_educational_content(category)

    if category is None:
        if not categories:
            console.print("[yellow]No educational content available.[/]")
            return
        console.print("[bold]Categories:[/]")
        for name in categories:
            console.print(f"  - {escape(name)}")
        return

    if not items:
        console.print(f"[yellow]No educational content in {escape(repr(category))}.[/]")
        return
    for item in items:
        body = item.body or item.description
        subtitle = escape(", ".join(item.tags)) if item.tags else None
        console.print(Panel(escape(body), title=f"[bold]{escape(item.title)}[/]", subtitle=subtitle))


async def _run_faq(cfg: AppConfig, category: str | None) -> None:
    async with AppContext.create(cfg) as ctx:
        faqs = await ctx.resolver.get_faqs(category)

    if not faqs:
        console.print("[yellow]No FAQs available.[/]")
        return
    current = None
    for item in faqs:
        if item.category != current:
            current = item.category
            console.print(f"\n[bold blue]{escape(current)}[/]")
        console.print(f"[bold]{item.order}. {escape(item.question)}[/]")
        console.print(f"   {escape(item.answer)}")


async def _run_fact(cfg: AppConfig, *, dry_run: bool) -> None:
    async with AppContext.create(cfg, dry_run=dry_run) as ctx:
        copy = await ctx.resolver.get_component_content("mushroomFacts")
        result = await ctx.advisor.interesting_fact()
    console.print(Panel(escape(result.text), title=escape(copy.get("title", "Mushroom Fact"))))


async def _run_advice(cfg: AppConfig, inputs: dict, *, dry_run: bool) -> None:
    async with AppContext.create(cfg, dry_run=dry_run) as ctx:
        _apply_inputs(ctx.user_data, **inputs)
        copy = await ctx.resolver.get_component_content("aiAdvice")
        result = await ctx.advisor.generate_advice(ctx.user_data.inputs)

    title = escape(copy.get("title", "AI Cultivation Advisor"))
    if result.ok:
        console.print(Panel(escape(result.text), title=title))
        return
    console.print(Panel(f"[red]{escape(result.text)}[/]", title=title))
    if result.error:
        console.print(f"[dim]{escape(result.error)}[/]")
    raise typer.Exit(code=1)


async def _run_recommend(cfg: AppConfig, inputs: dict, *, dry_run: bool) -> None:
    async with AppContext.create(cfg, dry_run=dry_run) as ctx:
        _apply_inputs(ctx.user_data, **inputs)
        copy = await ctx.resolver.get_component_content("recommendations")
        result = await ctx.recommendations.get_personalized_recommendations(ctx.user_data.inputs)

    source = "AI" if result.source == "ai" else "static"
    title = escape(copy.get("title", "Cultivation Recommendations"))
    console.print(f"[bold]{title}[/] [dim]({source})[/]")
    for i, rec in enumerate(result.recommendations, 1):
        console.print(f"  {i}. {escape(rec)}")
    if result.limit_reached:
        console.print("[yellow]Request limit reached; showing general recommendations.[/]")


async def _run_status(cfg: AppConfig) -> None:
    with LoadProgress() as progress:
        progress.print_phase("Loading content")
        async with AppContext.create(cfg, on_step=progress.on_step) as ctx:
            await ctx.resolver.ensure_loaded()
            report = ctx.resolver.load_report

    table = Table(title="Content sources")
    table.add_column("Category", style="bold")
    table.add_column("Status")
    table.add_column("Items", justify="right")
    table.add_column("Error", overflow="fold")
    styles = {"loaded": "green", "fallback": "yellow", "empty": "dim", "failed": "red"}
    for name, outcome in report:
        style = styles[outcome.status]
        table.add_row(name, f"[{style}]{outcome.status}[/]", str(outcome.count), escape(outcome.error))
    console.print(table)


# ----------------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------------


def _print_results(store: UserDataStore) -> None:
    inputs = store.inputs
    results = store.results

    console.print(Panel(
        f"Experience: {escape(inputs.experience_level)}   Spawn: {inputs.spawn_amount:g} qt   "
        f"Ratio: 1:{inputs.substrate_ratio}   Substrate: {escape(inputs.substrate_type)}   "
        f"Container: {inputs.container_size:g} qt",
        title="[bold]Calculation Results[/]",
    ))
    console.print(f"  Spawn Amount:           {results.spawn_amount:g} quarts")
    console.print(f"  Substrate Volume:       {results.substrate_volume} quarts")
    console.print(f"  Total Mix Volume:       {results.total_mix_volume} quarts")
    console.print(f"  Container Fill:         {results.container_fill}%")
    console.print(f"  Optimal Monotub Volume: {results.optimal_monotub_volume} quarts")
    if results.container_overfilled:
        console.print(
            "\n[yellow]Warning: Your container size is smaller than the total volume. "
            "Consider using a larger container or reducing amounts.[/]"
        )

    if results.ingredients:
        console.print("\n[bold]Substrate Ingredients[/]")
        for item in results.ingredients:
            console.print(f"  {item.ingredient}: {item.amount} {item.unit}")

    console.print("\n[bold]Recommendations[/]")
    for rec in store.recommendations:
        console.print(f"  - {escape(rec)}")


def _print_options() -> None:
    console.print("[bold]Experience levels[/]")
    for level in EXPERIENCE_LEVELS:
        console.print(f"  {level.id:<13} 1:{level.default_substrate_ratio}  {level.description}")
    console.print("\n[bold]Substrate types[/]")
    for sub in SUBSTRATE_TYPES:
        console.print(f"  {sub.id:<13} {sub.label}: {sub.description}")
    console.print("\n[bold]Container sizes[/]")
    for c in CONTAINER_SIZES:
        console.print(f"  {c.label:<13} {c.description}")
    console.print("\n[bold]Tips[/]")
    for tip in CULTIVATION_TIPS:
        console.print(f"  - {tip}")
