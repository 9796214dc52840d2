from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.filesystem.output_repository import FileSystemRenderOutputRepository
from adapters.filesystem.scene_repository import FileSystemSceneRepository
from app import render_wiring
from app.config import load_settings
from domain.models import SceneFormatError
from domain.services.scene_walker import SceneWalker

app = typer.Typer(add_completion=False)
console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in root.handlers):
        root.addHandler(RichHandler(console=err_console, show_path=False))


@app.command()
def render(
    input_path: Path = typer.Argument(..., help="Scene JSON file."),
    output_dir: Path = typer.Argument(..., help="Directory for <slug>.svg and <slug>.png."),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
    no_png: bool = typer.Option(False, "--no-png", help="Write the SVG only."),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Lay out the scene and report skipped elements only."
    ),
) -> None:
    try:
        settings = load_settings(config)
    except FileNotFoundError as exc:
        err_console.print(f"[red]Config file not found:[/] {escape(str(exc.filename))}")
        raise typer.Exit(code=1) from exc
    except ValidationError as exc:
        err_console.print(f"[red]Invalid config:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    if no_png:
        settings = settings.model_copy(
            update={"render": settings.render.model_copy(update={"write_png": False})}
        )
    configure_logging(settings.render.log_level)

    if not input_path.exists():
        err_console.print(f"[red]File not found:[/] {escape(str(input_path))}")
        raise typer.Exit(code=1)

    try:
        scene = FileSystemSceneRepository().load(input_path)
    except SceneFormatError as exc:
        err_console.print(f"[red]Invalid scene:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if dry_run:
        plan = SceneWalker(settings.style.to_defaults()).walk(scene)
        console.print(
            f"[green]{plan.slug}[/]: {len(plan.instructions)} instruction(s), "
            f"{len(plan.skipped)} skipped element(s)"
        )
        for skipped in plan.skipped:
            console.print(
                f"  [yellow]#{skipped.index}[/] {skipped.element_type}: {escape(skipped.reason)}"
            )
        return

    rendered = render_wiring.build_scene_renderer(settings).render(scene)
    for path in FileSystemRenderOutputRepository().save(rendered, output_dir):
        kind = path.suffix.lstrip(".").upper()
        console.print(f"[green]{kind} saved:[/] {escape(str(path))}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
