from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from room_fit.core.application import Application, demo_layout
from room_fit.core.codec import LayoutDecodeError, decode_layout, encode_layout
from room_fit.core.settings import Settings
from room_fit.core.view.transform import VIEW_ANGLES, ProjectionMode
from room_fit.schemas.layout import LayoutState
from room_fit.utilities.utilities import Utilities


app: typer.Typer = typer.Typer(add_completion=False, help="Test-fit furniture in a rectangular room.")
console: Console = Console()


@app.callback()
def cli(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output."),
) -> None:
    settings: Settings = Settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def check(
    layout: str = typer.Argument(..., help="Path to a layout JSON file, or a transport string."),
) -> None:
    """Report items that leave the room or overlap each other."""
    application = Application(settings=Settings(), layout=_load_layout(layout))
    _print_validity(application)

    if application.has_invalid_items:
        raise typer.Exit(code=1)


@app.command()
def view(
    layout: str = typer.Argument(..., help="Path to a layout JSON file, or a transport string."),
    angle: int = typer.Option(0, "--angle", "-a", help="View rotation: 0, 90, 180 or 270."),
    projection: ProjectionMode | None = typer.Option(None, "--projection", "-p", help="isometric or orthographic."),
    ppu: float | None = typer.Option(None, "--ppu", help="Pixels per inch."),
) -> None:
    """Print the render plan (screen-space geometry, back to front) as JSON."""
    if angle not in VIEW_ANGLES:
        typer.secho(f"Unsupported view angle {angle}; use one of {list(VIEW_ANGLES)}.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    overrides: dict = {}
    if projection is not None:
        overrides["projection"] = projection.value
    if ppu is not None:
        overrides["pixels_per_unit"] = ppu

    try:
        settings = Settings(**overrides)
    except ValueError as exception:
        typer.secho("Invalid view options.", fg=typer.colors.RED, err=True)
        typer.echo(str(exception), err=True)
        raise typer.Exit(code=1)

    application = Application(settings=settings, layout=_load_layout(layout), view_angle=angle)
    typer.echo(application.render_plan().model_dump_json(indent=2))


@app.command()
def demo() -> None:
    """Validate the demo bedroom and print its transport string."""
    application = Application(settings=Settings(), layout=demo_layout())
    _print_validity(application)
    typer.echo(application.to_transport())


@app.command()
def encode(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Layout JSON file."),
) -> None:
    """Turn a layout JSON file into a transport string."""
    typer.echo(encode_layout(_load_layout(str(path))))


@app.command()
def decode(
    encoded: str = typer.Argument(..., help="Transport string."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the JSON here instead of stdout."),
) -> None:
    """Turn a transport string back into layout JSON."""
    layout = _load_layout(encoded)
    if output is None:
        typer.echo(layout.model_dump_json(indent=2))
        return
    Utilities.write_json(output, layout)
    typer.secho(f"Wrote {output}", fg=typer.colors.GREEN)


def _load_layout(source: str) -> LayoutState:
    path = Path(source)
    try:
        text = Utilities.read_text(path) if _is_file(path) else source
        return decode_layout(text)
    except (LayoutDecodeError, OSError) as exception:
        typer.secho("Could not read the layout.", fg=typer.colors.RED, err=True)
        typer.echo(str(exception), err=True)
        raise typer.Exit(code=1)


def _is_file(path: Path) -> bool:
    # transport strings can exceed the OS filename limit
    try:
        return path.is_file()
    except OSError:
        return False


def _print_validity(application: Application) -> None:
    layout = application.layout
    table = Table(title=f"Room {layout.room.width:g} x {layout.room.height:g} in")
    table.add_column("id")
    table.add_column("kind")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("footprint", justify="right")
    table.add_column("status")

    for item in layout.items:
        status = "[red]invalid[/red]" if item.id in application.invalid_ids else "[green]ok[/green]"
        table.add_row(
            item.id,
            item.kind,
            f"{item.x:g}",
            f"{item.y:g}",
            f"{item.effective_width:g} x {item.effective_height:g}",
            status,
        )
    console.print(table)

    for issue in application.geometry_service.describe_issues(layout.room, layout.items):
        typer.secho(issue, fg=typer.colors.YELLOW)

    if application.has_invalid_items:
        typer.secho("Layout has invalid items.", fg=typer.colors.RED)
    else:
        typer.secho("Layout fits.", fg=typer.colors.GREEN)


def main() -> None:
    app()
