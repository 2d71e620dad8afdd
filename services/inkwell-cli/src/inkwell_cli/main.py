"""CLI entry point - thin adapter over inkwell-core."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import NoReturn, TypeVar

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich import print as rprint
from rich.table import Table

from inkwell_core import __version__
from inkwell_core.aggregates import project_stats
from inkwell_core.config.settings import StudioSettings, get_settings
from inkwell_core.errors import InkwellError
from inkwell_core.history import PromptHistory
from inkwell_core.library import filter_projects
from inkwell_core.ports.storage import StoreError
from inkwell_core.store import ManuscriptStore
from inkwell_core.sync import SyncController
from inkwell_core.util.logging import configure_logging
from inkwell_io.storage import FileSystemProjectStore, FileSystemPromptHistoryStore
from inkwell_llm import build_generation_service
from inkwell_schemas.manuscript import ScenePatch

ResultT = TypeVar("ResultT")

app = typer.Typer(help="inkwell - Manuscript and codex studio", no_args_is_help=True)

TITLE_OPTION = typer.Option(None, "--title", "-t", help="Title (a default is used when omitted)")
GENRE_OPTION = typer.Option(None, "--genre", "-g", help="Genre label")
TAG_OPTION = typer.Option(None, "--tag", help="Tag; repeat for several")
FILE_ARGUMENT = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="UTF-8 text file")


@app.callback()
def _configure(
    ctx: typer.Context,
    data_dir: Path | None = typer.Option(None, "--data-dir", help="Override the data directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    _load_dotenv(Path.cwd())
    try:
        settings = get_settings()
    except ValidationError as exc:
        _report_invalid_configuration(exc)
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": data_dir})
    configure_logging("debug" if verbose else settings.log_level)
    ctx.obj = settings


@app.command()
def version() -> None:
    """Show CLI version."""
    typer.echo(f"inkwell v{__version__}")


@app.command()
def new(
    ctx: typer.Context,
    title: str | None = TITLE_OPTION,
    genre: str | None = GENRE_OPTION,
    tag: list[str] | None = TAG_OPTION,
) -> None:
    """Create a project with one empty act."""

    async def _run(controller: SyncController, settings: StudioSettings) -> None:
        project = await controller.create_project(settings.owner_id, title, genre, tag or [])
        rprint(f"[green]Created[/green] {project.title} ({project.id})")

    _execute(ctx, _run)


@app.command("list")
def list_projects(
    ctx: typer.Context,
    query: str = typer.Option("", "--query", "-q", help="Filter by title or genre"),
    tag: str | None = typer.Option(None, "--tag", help="Only projects with this tag"),
) -> None:
    """List projects, most recently edited first."""

    async def _run(controller: SyncController, settings: StudioSettings) -> None:
        projects = filter_projects(controller.store.projects, query, tag)
        if not projects:
            rprint("[yellow]No projects found[/yellow]")
            return
        table = Table(title=f"Projects of {settings.owner_id}")
        table.add_column("ID")
        table.add_column("Title")
        table.add_column("Genre")
        table.add_column("Words", justify="right")
        table.add_column("Last edited")
        table.add_column("Tags")
        for project in projects:
            table.add_row(
                project.id,
                project.title,
                project.genre,
                str(project.word_count),
                project.last_edited.strftime("%Y-%m-%d %H:%M"),
                ", ".join(project.tags),
            )
        rprint(table)

    _execute(ctx, _run)


@app.command()
def delete(ctx: typer.Context, project_id: str = typer.Argument(..., help="Project id")) -> None:
    """Delete a project permanently."""

    async def _run(controller: SyncController, _settings: StudioSettings) -> None:
        await controller.delete_project(project_id)
        rprint(f"[green]Deleted[/green] {project_id}")

    _execute(ctx, _run)


@app.command()
def stats(ctx: typer.Context, project_id: str = typer.Argument(..., help="Project id")) -> None:
    """Show word counts, structure and reading time."""

    async def _run(controller: SyncController, _settings: StudioSettings) -> None:
        project = controller.store.get(project_id)
        summary = project_stats(project)
        table = Table(title=project.title, show_header=False)
        table.add_row("Words", str(summary.word_count))
        table.add_row("Acts", str(summary.act_count))
        table.add_row("Scenes", str(summary.scene_count))
        table.add_row("Reading time", f"{summary.reading_minutes} min")
        for status, count in summary.scenes_by_status.items():
            table.add_row(f"Scenes {status}", str(count))
        for entry_type, count in summary.codex_by_type.items():
            table.add_row(f"Codex {entry_type}", str(count))
        rprint(table)
        for act in project.acts:
            rprint(f"[bold]{act.title}[/bold] ({act.id})")
            for scene in act.scenes:
                rprint(f"  {scene.title} ({scene.id}) - {scene.status}, {scene.word_count} words")

    _execute(ctx, _run)


@app.command("add-act")
def add_act(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project id"),
    title: str | None = TITLE_OPTION,
) -> None:
    """Append an act to a project."""

    async def _run(controller: SyncController, _settings: StudioSettings) -> None:
        project = controller.add_act(project_id, title)
        act = project.acts[-1]
        rprint(f"[green]Added[/green] {act.title} ({act.id})")

    _execute(ctx, _run)


@app.command("add-scene")
def add_scene(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project id"),
    act_id: str = typer.Argument(..., help="Act id"),
    title: str | None = TITLE_OPTION,
) -> None:
    """Append a scene to an act."""

    async def _run(controller: SyncController, _settings: StudioSettings) -> None:
        project = controller.add_scene(project_id, act_id, title)
        scene = next(act for act in project.acts if act.id == act_id).scenes[-1]
        rprint(f"[green]Added[/green] {scene.title} ({scene.id})")

    _execute(ctx, _run)


@app.command()
def write(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project id"),
    scene_id: str = typer.Argument(..., help="Scene id"),
    source: Path = FILE_ARGUMENT,
) -> None:
    """Replace a scene's text with the contents of a file."""
    content = source.read_text(encoding="utf-8")

    async def _run(controller: SyncController, _settings: StudioSettings) -> None:
        project = controller.apply_edit(project_id, ScenePatch(scene_id=scene_id, content=content))
        rprint(f"[green]Saved[/green] scene {scene_id}; project now has {project.word_count} words")

    _execute(ctx, _run)


@app.command()
def scan(ctx: typer.Context, project_id: str = typer.Argument(..., help="Project id")) -> None:
    """Extract characters from the manuscript into the codex."""

    async def _run(controller: SyncController, settings: StudioSettings) -> None:
        _attach_generation(controller, settings)
        before = {entry.id: entry for entry in controller.store.get(project_id).codex}
        project = await controller.run_codex_scan(project_id)
        added = [entry.name for entry in project.codex if entry.id not in before]
        updated = [
            entry.name for entry in project.codex if entry.id in before and entry != before[entry.id]
        ]
        rprint(f"[green]Scan complete[/green]: {len(added)} added, {len(updated)} updated")
        for name in added:
            rprint(f"  + {name}")
        for name in updated:
            rprint(f"  ~ {name}")

    _execute(ctx, _run)


@app.command("import-codex")
def import_codex(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project id"),
    source: Path = FILE_ARGUMENT,
) -> None:
    """Import pasted character notes as a locked codex entry."""
    raw_text = source.read_text(encoding="utf-8")

    async def _run(controller: SyncController, _settings: StudioSettings) -> None:
        project = controller.import_manual_codex_entry(project_id, raw_text)
        entry = project.codex[-1]
        rprint(f"[green]Imported[/green] {entry.name} ({entry.id}, locked)")

    _execute(ctx, _run)


@app.command()
def draft(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project id"),
    scene_id: str = typer.Argument(..., help="Scene id"),
    request: str = typer.Argument(..., help="What to draft"),
) -> None:
    """Generate prose and append it to a scene."""

    async def _run(controller: SyncController, settings: StudioSettings) -> None:
        _attach_generation(controller, settings)
        project = await controller.draft_scene(project_id, scene_id, request)
        rprint(f"[green]Drafted[/green] into scene {scene_id}; project now has {project.word_count} words")

    _execute(ctx, _run, uses_history=True)


@app.command()
def chat(
    ctx: typer.Context,
    project_id: str = typer.Argument(..., help="Project id"),
    message: str = typer.Argument(..., help="Message for the workshop assistant"),
) -> None:
    """Brainstorm, research or draft with the workshop assistant."""

    async def _run(controller: SyncController, settings: StudioSettings) -> None:
        _attach_generation(controller, settings)
        reply = await controller.workshop_chat(project_id, message)
        rprint(reply)

    _execute(ctx, _run, uses_history=True)


@app.command()
def history(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Number of prompts to show"),
) -> None:
    """Show recently used prompts, newest first."""

    async def _run(controller: SyncController, _settings: StudioSettings) -> None:
        entries = controller.history.recent(limit)
        if not entries:
            rprint("[yellow]No prompts yet[/yellow]")
            return
        table = Table(title="Prompt history")
        table.add_column("When")
        table.add_column("Prompt")
        for entry in entries:
            table.add_row(entry.timestamp.strftime("%Y-%m-%d %H:%M"), entry.text)
        rprint(table)

    _execute(ctx, _run, uses_history=True)


def _load_dotenv(base_dir: Path) -> None:
    env_path = base_dir / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)


def _report_invalid_configuration(exc: ValidationError) -> NoReturn:
    rprint(f"[red]Invalid configuration:[/red] {exc.errors()[0]['msg']}")
    raise typer.Exit(code=1) from None


def _attach_generation(controller: SyncController, settings: StudioSettings) -> None:
    controller.generation = build_generation_service(settings.to_generation_config())


def _execute(
    ctx: typer.Context,
    command: Callable[[SyncController, StudioSettings], Awaitable[ResultT]],
    *,
    uses_history: bool = False,
) -> ResultT:
    settings: StudioSettings = ctx.obj
    try:
        return asyncio.run(_with_controller(settings, command, uses_history=uses_history))
    except (InkwellError, StoreError) as exc:
        rprint(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from None
    except KeyError as exc:
        rprint(f"[red]Error:[/red] {exc.args[0]}")
        raise typer.Exit(code=1) from None
    except ValidationError as exc:
        _report_invalid_configuration(exc)


async def _with_controller(
    settings: StudioSettings,
    command: Callable[[SyncController, StudioSettings], Awaitable[ResultT]],
    *,
    uses_history: bool,
) -> ResultT:
    backend = FileSystemProjectStore(settings.data_dir)
    history_store = FileSystemPromptHistoryStore(settings.data_dir)
    prompts = PromptHistory(await history_store.load_prompts()) if uses_history else PromptHistory()
    store = ManuscriptStore(backend)
    controller = SyncController(
        store,
        debounce_seconds=settings.debounce_seconds,
        max_scan_chars=settings.max_scan_chars,
        history=prompts,
    )
    await controller.load(settings.owner_id)
    for error in backend.unreadable:
        path = error.info.details.path if error.info.details else None
        rprint(f"[yellow]Warning:[/yellow] skipped unreadable project document {path}: {error}")

    try:
        result = await command(controller, settings)
    finally:
        # Prompts are kept even when the request itself failed.
        if prompts.changed:
            await history_store.save_prompts(prompts.entries)
    await controller.flush()
    if store.failures:
        _project_id, error = store.failures[-1]
        raise error
    return result


def main() -> None:
    """Entrypoint invoked by ``python -m inkwell_cli`` or console scripts."""
    app()


if __name__ == "__main__":
    main()
