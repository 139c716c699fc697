"""Main CLI entry point for Asset Preview."""

import asyncio
from pathlib import Path

import click
from pydantic import ValidationError

from asset_preview.assets.cache import WorkspaceAssetCache
from asset_preview.cli.display import console, show_error, show_info, show_stats, show_success
from asset_preview.core.config.settings import Settings, get_settings
from asset_preview.core.exceptions.errors import AssetPreviewError
from asset_preview.core.logger.logger import setup_logging
from asset_preview.preview import HoverPreviewer


def run_async(coro):
    """Run async coroutine synchronously."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def build_cache(ctx: click.Context) -> WorkspaceAssetCache:
    """Create a cache from the options stored on the click context."""
    settings: Settings = ctx.obj["settings"]
    return WorkspaceAssetCache(settings.preview, ctx.obj["workspaces"])


@click.group(invoke_without_command=True)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file",
)
@click.option(
    "--workspace",
    "-w",
    "workspaces",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Workspace root (repeatable, first is primary; default: current directory)",
)
@click.pass_context
def main(
    ctx: click.Context,
    version: bool,
    config_path: Path | None,
    workspaces: tuple[Path, ...],
) -> None:
    """Asset Preview - resolve image references and asset tokens in text."""
    if version:
        from asset_preview import __version__

        click.echo(f"Asset Preview version {__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    try:
        settings = Settings.from_yaml(config_path) if config_path else get_settings()
    except (AssetPreviewError, ValidationError) as e:
        show_error("Configuration Error", str(e))
        ctx.exit(1)

    setup_logging(settings.logging)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["workspaces"] = list(workspaces) or [Path.cwd()]


@main.command()
@click.pass_context
def reload(ctx: click.Context) -> None:
    """Reload asset mappings from local files and the asset API.

    Examples:
        asset-preview reload
        asset-preview -w ./site -c asset-preview.yaml reload
    """

    async def _reload():
        cache = build_cache(ctx)
        try:
            outcomes = await cache.reload()
            return cache.get_stats(), outcomes
        finally:
            await cache.close()

    stats, outcomes = run_async(_reload())
    show_stats(stats, outcomes)

    errors = [outcome.error for outcome in outcomes if not outcome.success]
    if errors:
        show_error("Remote Fetch Failed", "; ".join(e or "unknown error" for e in errors))
        ctx.exit(1)
    show_success("Reload Complete", f"Loaded {stats.total} asset mappings")


@main.command()
@click.argument("asset_id")
@click.option("--document", "-d", type=click.Path(path_type=Path), help="Document used to pick the workspace")
@click.pass_context
def resolve(ctx: click.Context, asset_id: str, document: Path | None) -> None:
    """Resolve an asset identifier to its URL.

    Examples:
        asset-preview resolve __ASSET_12_7
    """
    if not WorkspaceAssetCache.is_asset_identifier(asset_id):
        show_error("Invalid Asset ID", f"{asset_id} is not of the form __ASSET_<n>_<n>")
        ctx.exit(2)

    async def _resolve():
        cache = build_cache(ctx)
        try:
            await cache.reload()
            return cache.resolve(asset_id, document)
        finally:
            await cache.close()

    url = run_async(_resolve())
    if url is None:
        show_error("Asset Not Found", f"No mapping for {asset_id}")
        ctx.exit(1)
    console.print(url)


@main.command("list")
@click.option("--document", "-d", type=click.Path(path_type=Path), help="Document used to pick the workspace")
@click.pass_context
def list_assets(ctx: click.Context, document: Path | None) -> None:
    """List the asset identifiers known for a workspace."""

    async def _list():
        cache = build_cache(ctx)
        try:
            await cache.reload()
            return cache.get_all_asset_ids(document)
        finally:
            await cache.close()

    asset_ids = run_async(_list())
    if not asset_ids:
        show_info("Asset Mappings", "No asset mappings loaded")
        return
    for asset_id in sorted(asset_ids):
        console.print(asset_id)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("line", type=click.IntRange(min=1))
@click.argument("column", type=click.IntRange(min=1))
@click.pass_context
def hover(ctx: click.Context, file: Path, line: int, column: int) -> None:
    """Show the preview for a position in a file (1-based line and column).

    Examples:
        asset-preview hover src/App.tsx 42 17
    """
    lines = file.read_text(encoding="utf-8", errors="replace").splitlines()
    if line > len(lines):
        show_error("Invalid Position", f"{file} has only {len(lines)} lines")
        ctx.exit(2)
    text = lines[line - 1]
    document = file.absolute()

    async def _hover():
        cache = build_cache(ctx)
        try:
            await cache.reload()
            return HoverPreviewer(cache).preview_now(document, text, column - 1)
        finally:
            await cache.close()

    preview = run_async(_hover())
    if preview is None:
        show_info("No Image", "Nothing at this position looks like an image reference")
        return
    console.print(preview.markdown, markup=False, highlight=False)
    if not preview.found:
        ctx.exit(1)


if __name__ == "__main__":
    main()
