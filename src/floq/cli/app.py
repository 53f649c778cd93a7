"""CLI application using Typer."""

try:
    import typer
    from rich.console import Console
    from rich.markup import escape
    from rich.table import Table
except ImportError as e:
    raise ImportError("CLI requires typer and rich. Install with: pip install floq[cli]") from e

import asyncio
import os
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

from floq.config import get_config_path, load_config, save_config
from floq.database.orm_manager import ORMManager
from floq.domain.entities.task import TaskDTO
from floq.domain.exceptions import AmbiguousIdError, FloqError
from floq.domain.lifecycle import ALL_STATUSES, MOVE_TARGETS
from floq.logging_config import configure_logging
from floq.services import AppContext, TaskService

T = TypeVar("T")

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(
    name="floq",
    help="floq - GTD task manager for the terminal",
    no_args_is_help=True,
)

STATUS_STYLES = {
    "inbox": "cyan",
    "next": "green",
    "waiting": "yellow",
    "someday": "magenta",
    "done": "dim",
}


@app.callback()
def main_callback(
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """floq - GTD task manager for the terminal."""
    config = load_config()
    configure_logging("DEBUG" if debug else config.log_level)


def _run(action: Callable[[TaskService], Awaitable[T]]) -> T:
    """Run ``action`` against a fresh AppContext, exiting 1 on domain errors."""
    context = AppContext.from_config(load_config())
    try:
        return asyncio.run(action(context.task_service))
    except AmbiguousIdError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        for match_id, title in e.matches:
            err_console.print(f"  [{match_id[:8]}] {title}", markup=False)
        raise typer.Exit(1)
    except FloqError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    finally:
        context.close()


def _print_tasks(tasks: List[TaskDTO], title: str) -> None:
    if not tasks:
        console.print("No tasks found.")
        return

    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Status")
    table.add_column("Context")
    table.add_column("Waiting For")

    for t in tasks:
        style = STATUS_STYLES.get(t.status, "")
        table.add_row(
            t.short_id,
            escape(t.title),
            f"[{style}]{t.status}[/{style}]" if style else t.status,
            t.context or "",
            t.waiting_for or "",
        )

    console.print(table)


# Task commands


@app.command("add")
def task_add(
    title: str = typer.Argument(..., help="Task title"),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project id or name"),
    context: Optional[str] = typer.Option(None, "--context", "-c", help="Context tag"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
) -> None:
    """Add a task to the inbox (or to a project)."""

    async def action(service: TaskService) -> TaskDTO:
        parent_id = (await service.resolve_project(project)).id if project else None
        return await service.add_task(
            title, parent_id=parent_id, context=context, description=description
        )

    task = _run(action)
    console.print(f"[green]Added:[/green] {escape(task.title)} [dim]({task.short_id})[/dim]")


@app.command("list")
def task_list(
    status: Optional[str] = typer.Option(
        None, "--status", "-s", help=f"Filter by status ({', '.join(ALL_STATUSES)})"
    ),
    context: Optional[str] = typer.Option(None, "--context", "-c", help="Filter by context"),
) -> None:
    """List tasks."""
    tasks = _run(lambda service: service.list_tasks(status=status, context=context))
    _print_tasks(tasks, f"Tasks ({status})" if status else "Tasks")


@app.command("move")
def task_move(
    task_id: str = typer.Argument(..., help="Task id or prefix"),
    status: str = typer.Argument(..., help=f"Target status ({', '.join(MOVE_TARGETS)}, waiting)"),
    waiting_for: Optional[str] = typer.Option(
        None, "--waiting-for", "-w", help="Who you are waiting for (required for waiting)"
    ),
) -> None:
    """Move a task to another status."""

    async def action(service: TaskService) -> str:
        task = await service.resolve_task(task_id)
        return await service.move_task(task.id, status, waiting_for=waiting_for)

    console.print(f"[green]{escape(_run(action))}[/green]")


@app.command("done")
def task_done(
    task_id: str = typer.Argument(..., help="Task id or prefix"),
) -> None:
    """Mark a task as done."""

    async def action(service: TaskService) -> str:
        task = await service.resolve_task(task_id)
        return await service.complete_task(task.id)

    console.print(f"[green]{escape(_run(action))}[/green]")


@app.command("delete")
def task_delete(
    task_id: str = typer.Argument(..., help="Task id or prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task and its comments."""

    async def action(service: TaskService) -> str:
        task = await service.resolve_task(task_id)
        if not yes and not typer.confirm(f'Delete "{task.title}"?'):
            raise typer.Abort()
        return await service.delete_task(task.id)

    console.print(f"[green]{escape(_run(action))}[/green]")


@app.command("search")
def task_search(
    query: str = typer.Argument(..., help="Text to search for"),
) -> None:
    """Search tasks by title and description."""
    tasks = _run(lambda service: service.search_tasks(query))
    _print_tasks(tasks, f"Search: '{query}'")


# Project commands
project_app = typer.Typer(help="Project management commands")
app.add_typer(project_app, name="project")


@project_app.command("add")
def project_add(
    name: str = typer.Argument(..., help="Project name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description"),
) -> None:
    """Create a new project."""
    project = _run(lambda service: service.add_project(name, description=description))
    console.print(
        f"[green]Project created:[/green] {escape(project.title)} [dim]({project.short_id})[/dim]"
    )


@project_app.command("list")
def project_list(
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Filter by status"),
) -> None:
    """List projects with task counts."""
    projects = _run(lambda service: service.list_projects(status=status))
    if not projects:
        console.print("No projects found.")
        return

    table = Table(title="Projects")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Status")
    table.add_column("Tasks")

    for entry in projects:
        p = entry["project"]
        total = entry["active"] + entry["done"]
        table.add_row(p.short_id, escape(p.title), p.status, f"{entry['done']}/{total}")

    console.print(table)


@project_app.command("show")
def project_show(
    project: str = typer.Argument(..., help="Project id prefix or name"),
) -> None:
    """Show a project and its tasks grouped by status."""

    async def action(service: TaskService) -> Any:
        found = await service.resolve_project(project)
        return found, await service.list_tasks(parent_id=found.id)

    found, children = _run(action)
    console.print(f"\n[bold]Project: {escape(found.title)}[/bold]")
    console.print(f"ID: {found.id}")
    console.print(f"Status: {found.status}")
    if found.description:
        console.print(f"Description: {found.description}")
    console.print(f"Tasks: {len(children)}")

    for status in ALL_STATUSES:
        group = [t for t in children if t.status == status]
        if not group:
            continue
        console.print(f"\n  [bold]{status}[/bold]:")
        for t in group:
            line = f"    [{t.short_id}] {t.title}"
            if t.waiting_for:
                line += f" (waiting: {t.waiting_for})"
            console.print(line, markup=False)


@project_app.command("convert")
def project_convert(
    task_id: str = typer.Argument(..., help="Task id or prefix"),
) -> None:
    """Turn a task into a project."""

    async def action(service: TaskService) -> str:
        task = await service.resolve_task(task_id)
        return await service.convert_to_project(task.id)

    console.print(f"[green]{escape(_run(action))}[/green]")


@project_app.command("link")
def project_link(
    task_id: str = typer.Argument(..., help="Task id or prefix"),
    project: str = typer.Argument(..., help="Project id prefix or name"),
) -> None:
    """Attach a task to a project."""

    async def action(service: TaskService) -> str:
        task = await service.resolve_task(task_id)
        target = await service.resolve_project(project)
        return await service.link_task(task.id, target.id)

    console.print(f"[green]{escape(_run(action))}[/green]")


@project_app.command("unlink")
def project_unlink(
    task_id: str = typer.Argument(..., help="Task id or prefix"),
) -> None:
    """Detach a task from its project."""

    async def action(service: TaskService) -> str:
        task = await service.resolve_task(task_id)
        return await service.unlink_task(task.id)

    console.print(f"[green]{escape(_run(action))}[/green]")


# Context commands
context_app = typer.Typer(help="Context commands")
app.add_typer(context_app, name="context")


@context_app.command("set")
def context_set(
    task_id: str = typer.Argument(..., help="Task id or prefix"),
    context: str = typer.Argument(..., help="Context tag, e.g. @home"),
) -> None:
    """Set a task's context."""

    async def action(service: TaskService) -> str:
        task = await service.resolve_task(task_id)
        return await service.set_context(task.id, context)

    console.print(f"[green]{escape(_run(action))}[/green]")


@context_app.command("clear")
def context_clear(
    task_id: str = typer.Argument(..., help="Task id or prefix"),
) -> None:
    """Remove a task's context."""

    async def action(service: TaskService) -> str:
        task = await service.resolve_task(task_id)
        return await service.set_context(task.id, None)

    console.print(f"[green]{escape(_run(action))}[/green]")


@context_app.command("list")
def context_list() -> None:
    """List contexts in use."""
    contexts = _run(lambda service: service.list_contexts())
    if not contexts:
        console.print("No contexts found.")
        return
    for context in contexts:
        console.print(f"  {context}", markup=False)


# Comment commands
comment_app = typer.Typer(help="Comment commands")
app.add_typer(comment_app, name="comment")


@comment_app.command("add")
def comment_add(
    task_id: str = typer.Argument(..., help="Task id or prefix"),
    content: str = typer.Argument(..., help="Comment text"),
) -> None:
    """Add a comment to a task."""

    async def action(service: TaskService) -> Any:
        task = await service.resolve_task(task_id)
        return await service.add_comment(task.id, content)

    comment = _run(action)
    console.print(f"[green]Comment added[/green] [dim]({comment.id[:8]})[/dim]")


@comment_app.command("list")
def comment_list(
    task_id: str = typer.Argument(..., help="Task id or prefix"),
) -> None:
    """List a task's comments."""

    async def action(service: TaskService) -> Any:
        task = await service.resolve_task(task_id)
        return task, await service.list_comments(task.id)

    task, comments = _run(action)
    console.print(f"\n[bold]{escape(task.title)}[/bold]")
    if not comments:
        console.print("No comments.")
        return
    for c in comments:
        stamp = c.created_at.strftime("%Y-%m-%d %H:%M") if c.created_at else ""
        console.print(f"  [{c.id[:8]}] {stamp} {c.content}", markup=False)


@comment_app.command("delete")
def comment_delete(
    comment_id: str = typer.Argument(..., help="Comment id or prefix"),
) -> None:
    """Delete a comment."""

    async def action(service: TaskService) -> str:
        comment = await service.resolve_comment(comment_id)
        return await service.delete_comment(comment.id)

    console.print(f"[green]{escape(_run(action))}[/green]")


# Config commands
config_app = typer.Typer(help="Configuration commands")
app.add_typer(config_app, name="config")


@config_app.command("show")
def config_show() -> None:
    """Show the active configuration and database status."""
    config = load_config()
    rows = [
        ("Config file", str(get_config_path())),
        ("Database", config.db_path),
        ("Log level", config.log_level),
        ("Log file", config.log_file or ""),
        ("History size", str(config.history_size)),
    ]

    orm_manager = ORMManager(config.db_path)
    try:
        health = orm_manager.perform_health_check()
    finally:
        orm_manager.close()

    if health["healthy"]:
        rows.append(("Tasks", str(health["task_count"])))
        rows.append(("Comments", str(health["comment_count"])))
    else:
        rows.append(("Status", f"unavailable: {health['error']}"))

    for label, value in rows:
        console.print(f"[bold cyan]{label}:[/bold cyan] {escape(value)}", soft_wrap=True)
    if os.environ.get("FLOQ_DB_PATH"):
        console.print("[yellow]FLOQ_DB_PATH is set and overrides the config file.[/yellow]")


@config_app.command("db")
def config_db(
    path: Optional[str] = typer.Argument(None, help="Database file; omit to use the default"),
) -> None:
    """Set the database path, or reset it to the default."""
    db_path = str(Path(path).expanduser().resolve()) if path else None
    if not save_config({"db_path": db_path}):
        err_console.print(f"[red]Error:[/red] Could not write {escape(str(get_config_path()))}")
        raise typer.Exit(1)

    console.print(f"[green]Database: {escape(load_config().db_path)}[/green]", soft_wrap=True)


@app.command("tui")
def tui() -> None:
    """Launch the interactive terminal UI (with undo/redo)."""
    from floq.tui import main as tui_main

    tui_main()


def create_app() -> typer.Typer:
    """Create and return the Typer app."""
    return app
