"""slicemap CLI.

Command-line interface for resolving a composition descriptor into slice
boxes at a chosen target resolution.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from slicemap import __version__
from slicemap.composition import (
    CompositionDescriptor,
    CompositionError,
    ResolvedComposition,
    ViewMode,
    parse_descriptor,
    parse_resolume_xml,
    parse_target,
    resolve,
)
from slicemap.config import ConfigError, settings
from slicemap.geometry import Size
from slicemap.utils.logging import (
    configure_logging,
    get_logger,
    set_correlation_context,
)

app = typer.Typer(
    name="slicemap",
    help="slicemap: resolve video-mapping slices into render regions",
    add_completion=False,
)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"slicemap {__version__}")


@app.command("resolve")
def resolve_command(
    descriptor_path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Resolume XML export, or a .json composition mapping",
        ),
    ],
    view: Annotated[
        ViewMode | None,
        typer.Option("--view", "-m", help="Resolve input or output rectangles"),
    ] = None,
    target: Annotated[
        str | None,
        typer.Option(
            "--target",
            "-t",
            help="original, 1080p, 4K, 8K or WIDTHxHEIGHT",
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"
        ),
    ] = 0,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Resolve the slices of one composition descriptor."""
    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        target_size = _target_size(target)
        fallback_size = settings.require_fallback_size()
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(2) from None

    view_mode = view or settings.DEFAULT_VIEW_MODE
    set_correlation_context(
        composition=descriptor_path.name, view_mode=view_mode.value
    )
    logger.info("Resolving descriptor", path=str(descriptor_path))

    try:
        descriptor = _load_descriptor(descriptor_path)
    except CompositionError as e:
        logger.error("Descriptor rejected", error=str(e))
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    result = resolve(descriptor, view_mode, target_size, fallback_size=fallback_size)

    if json_output:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        _print_result(descriptor, result)


# =============================================================================
# Helpers
# =============================================================================


def _configure_logging(verbose: int) -> None:
    """Configure logging based on verbosity level."""
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:  # verbose >= 2
        level = "DEBUG"

    configure_logging(level=level)


def _target_size(target: str | None) -> Size | None:
    if target is None:
        return settings.require_target()
    try:
        return parse_target(target)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--target") from None


def _load_descriptor(path: Path) -> CompositionDescriptor:
    content = path.read_bytes()
    if path.suffix.lower() == ".json":
        try:
            raw = json.loads(content)
        except UnicodeDecodeError as e:
            message = f"Descriptor is not UTF-8 encoded: {e}"
            raise CompositionError(message, path.name) from e
        except json.JSONDecodeError as e:
            message = f"Descriptor is not valid JSON: {e}"
            raise CompositionError(message, path.name) from e
        return parse_descriptor(raw, path.name)
    # Bytes let the XML declaration pick the encoding
    return parse_resolume_xml(content, path.name)


def _print_result(
    descriptor: CompositionDescriptor, result: ResolvedComposition
) -> None:
    typer.echo(f"{descriptor.name} ({descriptor.version})")
    typer.echo(
        f"view={result.view_mode.value} internal={result.internal_resolution} "
        f"output={result.output_size} scale=({result.scale.x:g}, {result.scale.y:g})"
    )
    for piece in result.slices:
        x, y, width, height = piece.resolved_box.to_tuple()
        typer.echo(
            f"  {piece.id:<24} {piece.name:<24} x={x} y={y} w={width} h={height}"
        )
    for diagnostic in result.diagnostics:
        typer.echo(
            f"  dropped {diagnostic.slice_id} ({diagnostic.slice_name}): "
            f"{diagnostic.reason.value} {diagnostic.detail}".rstrip()
        )
    for issue in result.issues:
        typer.echo(f"  note: {issue.value}")
    typer.echo(result.summary())
