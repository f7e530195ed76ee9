# ABOUTME: Main CLI application entry point using asyncclick for native async support
# ABOUTME: Provides commands that fetch Lodestone pages and print their serialized records

import json as jsonlib
from typing import Any

import asyncclick as click
from rich.console import Console

from flarestone.config import get_config
from flarestone.engine import load_object_from_url, serialize
from flarestone.errors import FlarestoneError
from flarestone.models import CharacterPage, CharacterSearchPage, FreeCompany, FreeCompanyMembers, WorldStatusPage
from flarestone.transformers import (
    PageAggregationOptions,
    RankSearchOptions,
    aggregate_pages,
    build_search_params,
    extract_ranks_from_pages,
    fetch_page_with_meta,
    filter_exact_matches,
    find_free_company_ranks,
    flatten_world_status,
)
from flarestone.utils.logging import LoggingMode, configure_logging, get_logging_status, with_pipeline_context
from flarestone.utils.rich_tables import (
    create_logging_status_table,
    create_rank_table,
    create_world_status_table,
    print_rich_table,
)
from flarestone.utils.urls import (
    character_search_url,
    character_url,
    free_company_members_url,
    free_company_url,
    worldstatus_url,
)

console = Console()


def _emit(data: Any, json_output: bool) -> None:
    """Print a wire value: compact JSON for machines, highlighted JSON for people."""
    if json_output:
        click.echo(jsonlib.dumps(data, ensure_ascii=False))
    else:
        console.print_json(data=data)


def _fail(ctx, error: FlarestoneError) -> None:
    console.print(f"[red]❌ {error}[/red]")
    ctx.exit(1)


@click.command()
@click.argument("character_id")
@click.pass_context
async def character(ctx, character_id: str):
    """
    🧑 Fetch a character profile.

    The output carries a _meta block describing whether the profile was
    available, private, hidden, missing or behind maintenance.
    """
    json_output = ctx.obj["json_output"]

    with with_pipeline_context("character", character_id=character_id) as logger:
        try:
            result = await fetch_page_with_meta(character_url(character_id), CharacterPage)
        except FlarestoneError as e:
            _fail(ctx, e)
            return

        data = serialize(result.data) or {}
        data["_meta"] = serialize(result.scrape_meta)

        if result.data is not None and result.data.name:
            logger.info("Fetched character", name=result.data.name)
        else:
            logger.warning(
                "Character not available",
                result_code=result.scrape_meta.result_code.value,
                upstream_status_code=result.scrape_meta.upstream_status_code,
            )

        _emit(data, json_output)

    if result.response_status_code >= 400:
        ctx.exit(1)


@click.command()
@click.argument("name")
@click.option("--world", help="Only search this world")
@click.option("--datacenter", help="Only search this data center (ignored when --world is given)")
@click.option("--exact", is_flag=True, help="Only return characters whose name matches exactly")
@click.pass_context
async def search(ctx, name: str, world: str | None, datacenter: str | None, exact: bool):
    """
    🔎 Search for characters by name.
    """
    params = build_search_params(name, world=world, datacenter=datacenter, exact=exact)

    with with_pipeline_context("character_search", name=name, exact=exact):
        try:
            page = await load_object_from_url(character_search_url(params), CharacterSearchPage)
        except FlarestoneError as e:
            _fail(ctx, e)
            return

        if exact:
            page.results = filter_exact_matches(page.results, name)

        _emit(serialize(page), ctx.obj["json_output"])


@click.command(name="free-company")
@click.argument("fc_id")
@click.pass_context
async def free_company(ctx, fc_id: str):
    """
    🏰 Fetch a free company profile.
    """
    with with_pipeline_context("free_company", fc_id=fc_id):
        try:
            record = await load_object_from_url(free_company_url(fc_id), FreeCompany)
        except FlarestoneError as e:
            _fail(ctx, e)
            return

        _emit(serialize(record), ctx.obj["json_output"])


@click.command()
@click.argument("fc_id")
@click.option("--max-pages", type=int, help="Stop after this many pages")
@click.option("--max-items", type=int, help="Stop after this many members")
@click.pass_context
async def members(ctx, fc_id: str, max_pages: int | None, max_items: int | None):
    """
    👥 Fetch every member of a free company across all pages.

    Ranks are included only when the whole member list was read.
    """
    config = get_config()
    options = PageAggregationOptions(
        max_pages=max_pages, max_items=max_items, base_url=config.base_url, delay_ms=config.request_delay_ms
    )

    with with_pipeline_context("free_company_members", fc_id=fc_id):
        try:
            result = await aggregate_pages(
                free_company_members_url(fc_id), FreeCompanyMembers, lambda page: page.members, options
            )
        except FlarestoneError as e:
            _fail(ctx, e)
            return

        data: dict[str, Any] = {"members": serialize(result.items)}
        if result.complete:
            data["ranks"] = serialize(extract_ranks_from_pages(result.pages))
        data["metadata"] = result.metadata.model_dump(mode="json")

        _emit(data, ctx.obj["json_output"])


@click.command()
@click.argument("fc_id")
@click.option("--delay-ms", type=int, help="Pause after each fetched page (defaults to config)")
@click.option("--preload-pages", type=int, help="Pages to preload before binary search (defaults to config)")
@click.pass_context
async def ranks(ctx, fc_id: str, delay_ms: int | None, preload_pages: int | None):
    """
    🏅 Discover a free company's ranks while fetching as few pages as possible.

    Member counts only cover the pages that were checked.
    """
    config = get_config()
    options = RankSearchOptions(
        base_url=config.base_url,
        delay_ms=config.request_delay_ms if delay_ms is None else delay_ms,
        preload_pages=preload_pages or config.preload_pages,
    )

    with with_pipeline_context("free_company_ranks", fc_id=fc_id):
        try:
            result = await find_free_company_ranks(fc_id, options)
        except FlarestoneError as e:
            _fail(ctx, e)
            return

        if ctx.obj["json_output"]:
            _emit(serialize(result), json_output=True)
        else:
            table = create_rank_table(result.ranks, result.metadata.total_pages, result.metadata.pages_checked)
            print_rich_table(console, table)


@click.command()
@click.option("--flat", is_flag=True, help="One row per world instead of the region tree")
@click.pass_context
async def worldstatus(ctx, flat: bool):
    """
    🌐 Show the status of every world.
    """
    json_output = ctx.obj["json_output"]

    with with_pipeline_context("worldstatus", flat=flat):
        try:
            page = await load_object_from_url(worldstatus_url(), WorldStatusPage)
        except FlarestoneError as e:
            _fail(ctx, e)
            return

        if not flat:
            _emit(serialize(page), json_output)
            return

        worlds = flatten_world_status(page.regions)
        if json_output:
            _emit(serialize(worlds), json_output=True)
        else:
            print_rich_table(console, create_world_status_table(worlds))


def _initialize_logging(json_output: bool, log_level: str | None = None, log_file: str | None = None) -> None:
    """Initialize logging configuration."""
    try:
        config = get_config()
        mode = LoggingMode.PRODUCTION if json_output else LoggingMode.INTERACTIVE

        # Use config defaults when CLI parameters are not provided
        final_log_level = log_level or config.log_level
        final_log_file = log_file or (str(config.log_file) if config.log_file else None)

        configure_logging(mode=mode, log_level=final_log_level, log_file=final_log_file)
    except (FileNotFoundError, PermissionError, OSError):
        # Log directory unusable; emit JSON logs to stdout instead
        configure_logging(mode=LoggingMode.PRODUCTION, log_level=log_level or "INFO", log_file=log_file)


@click.command(name="logging-status")
def logging_status():
    """
    📊 Show current logging configuration and status.
    """
    status = get_logging_status()
    logging_table = create_logging_status_table(status)
    print_rich_table(console, logging_table)


@click.group(invoke_without_command=True)
@click.option("--json", is_flag=True, help="Print compact JSON and structured JSON logs instead of rich output")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-file", help="Custom log file path")
@click.pass_context
def app(ctx, json: bool, log_level: str | None, log_file: str | None):
    """
    🔥 Flarestone - Structured data from the Lodestone

    Fetch character, free company and world status pages and turn them into
    clean, stable JSON.
    """
    ctx.ensure_object(dict)
    ctx.obj["json_output"] = json

    _initialize_logging(json, log_level, log_file)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


app.add_command(character)
app.add_command(search)
app.add_command(free_company)
app.add_command(members)
app.add_command(ranks)
app.add_command(worldstatus)
app.add_command(logging_status)


if __name__ == "__main__":
    app()
