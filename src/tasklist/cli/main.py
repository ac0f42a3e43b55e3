# src/tasklist/cli/main.py

"""
CLI entrypoint.

`tasklist serve` runs the backend under uvicorn. The other commands drive the
client store against a running backend (TASKLIST_API_URL):

    tasklist ls --filter active
    tasklist add "Buy milk"
    tasklist toggle 1
    tasklist rename 1 "Buy oat milk"
    tasklist rm 1 --yes
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import click

from ..client.store import ActionResult, TaskClientStore
from ..config import get_settings
from ..core.ports import ConfirmFn
from ..logging_setup import level_from_name, setup_logging
from ..tasks.task_models import Task, TaskFilter, format_timestamp
from .bootstrap import create_client_state, create_server_app

logger = logging.getLogger(__name__)

StoreAction = Callable[[TaskClientStore], Awaitable[ActionResult]]


def _format_task(task: Task) -> str:
    mark = "x" if task.is_done else " "
    line = f"[{mark}] {task.id:>4}  {task.title}"
    if task.completed_at is not None:
        line += f"  (done {format_timestamp(task.completed_at)})"
    return line


def _click_confirm(prompt: str) -> bool:
    return click.confirm(prompt, default=False)


def _run_store_action(
    ctx: click.Context,
    action: StoreAction,
    *,
    confirm: ConfirmFn | None = None,
) -> TaskClientStore:
    """Run one store action on a fresh client session; exit 1 if it failed."""
    obj: dict[str, Any] = ctx.obj

    async def _run() -> tuple[TaskClientStore, ActionResult]:
        state = create_client_state(
            confirm=confirm or _click_confirm,
            settings=obj["settings"],
            transport=obj.get("transport"),
        )
        try:
            return state.store, await action(state.store)
        finally:
            await state.aclose()

    store, result = asyncio.run(_run())
    if result.skipped:
        click.echo(f"Skipped: {result.error}")
    elif not result.ok:
        click.echo(f"Error: {store.error or result.error}", err=True)
        ctx.exit(1)
    return store


async def _with_task(
    store: TaskClientStore,
    task_id: int,
    action: Callable[[Task], Awaitable[ActionResult]],
) -> ActionResult:
    fetched = await store.fetch_tasks()
    if not fetched.ok:
        return fetched
    task = store.find(task_id)
    if task is None:
        return ActionResult.failure(f"Task not found: {task_id}")
    return await action(task)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """To-do list backend and client."""
    ctx.ensure_object(dict)
    settings = ctx.obj.setdefault("settings", get_settings())
    if not ctx.obj.get("logging_configured"):
        setup_logging(
            log_dir=settings.data_dir if getattr(settings, "log_to_file", True) else None,
            console_level=level_from_name(getattr(settings, "log_level", "INFO")),
        )
        ctx.obj["logging_configured"] = True


@cli.command()
@click.option("--host", default=None, help="Bind address (default: TASKLIST_HOST).")
@click.option("--port", type=int, default=None, help="Bind port (default: TASKLIST_PORT).")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Run the HTTP backend."""
    import uvicorn

    settings = ctx.obj["settings"]
    app = create_server_app(settings=settings)
    host = host or settings.host
    port = port or settings.port

    logger.info("Starting %s on %s:%s", settings.app_name, host, port)
    # log_config=None keeps the handlers installed by setup_logging().
    uvicorn.run(app, host=host, port=port, log_config=None)
    logger.info("Bye.")


@cli.command("ls")
@click.option(
    "--filter",
    "task_filter",
    type=click.Choice([f.value for f in TaskFilter]),
    default=TaskFilter.ALL.value,
    show_default=True,
)
@click.pass_context
def list_cmd(ctx: click.Context, task_filter: str) -> None:
    """List tasks, newest first."""
    store = _run_store_action(ctx, lambda s: s.fetch_tasks())
    store.set_filter(task_filter)
    tasks = store.filtered_tasks
    if not tasks:
        click.echo("No tasks.")
        return
    for task in tasks:
        click.echo(_format_task(task))


@cli.command()
@click.argument("title")
@click.pass_context
def add(ctx: click.Context, title: str) -> None:
    """Add a task."""
    store = _run_store_action(ctx, lambda s: s.add_task(title))
    if store.tasks:
        click.echo(_format_task(store.tasks[0]))


@cli.command()
@click.argument("task_id", type=int)
@click.pass_context
def toggle(ctx: click.Context, task_id: int) -> None:
    """Flip a task between done and not done."""
    store = _run_store_action(ctx, lambda s: _with_task(s, task_id, s.toggle_task))
    task = store.find(task_id)
    if task is not None:
        click.echo(_format_task(task))


@cli.command()
@click.argument("task_id", type=int)
@click.argument("title")
@click.pass_context
def rename(ctx: click.Context, task_id: int, title: str) -> None:
    """Change a task's title."""
    store = _run_store_action(
        ctx, lambda s: _with_task(s, task_id, lambda t: s.update_title(t, title))
    )
    task = store.find(task_id)
    if task is not None:
        click.echo(_format_task(task))


@cli.command()
@click.argument("task_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def rm(ctx: click.Context, task_id: int, yes: bool) -> None:
    """Delete a task."""
    confirm = (lambda _prompt: True) if yes else None
    store = _run_store_action(ctx, lambda s: _with_task(s, task_id, s.delete_task), confirm=confirm)
    if store.find(task_id) is None:
        click.echo(f"Deleted {task_id}.")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
