# src/taskique/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.errors import NotFound, ValidationSkipped
from ..core.state import AppState
from ..storage.preferences import save_theme
from ..tasks.task_api import build_draft, parse_due_date, parse_estimation
from ..tasks.task_models import Priority, Task
from ..tasks.task_query import SortKey, TaskFilter, group_upcoming, query_tasks, recent_tasks
from ..tasks.task_stats import format_hours

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Handlers may be plain functions or coroutines.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting ----


def format_task(task: Task, state: AppState | None = None) -> str:
    box = "[x]" if task.completed else "[ ]"
    details = [task.priority.value]
    if task.due_date is not None:
        details.append(f"due {task.due_date:%Y-%m-%d}")
    if task.estimation.value is not None:
        details.append(f"{task.estimation.value:g} {task.estimation.unit.value}")

    line = f"{box} {task.id}  {task.title}  ({', '.join(details)})"
    if task.tags:
        names = []
        for tag_id in task.tags:
            tag = state.tag_store.get(tag_id) if state is not None else None
            names.append(f"#{tag.name}" if tag else f"#{tag_id}")
        line += " " + " ".join(names)
    return line


def _format_list(state: AppState, tasks: list[Task], empty: str) -> str:
    if not tasks:
        return empty
    return "\n".join(format_task(t, state) for t in tasks)


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list                  -> current view filter + sort
    /list <filter>         -> all | active | completed | overdue | today
    /list <filter> words   -> ... then search title/description
    """
    mode = state.view_filter
    if args:
        try:
            mode = TaskFilter(args[0].lower())
            args = args[1:]
        except ValueError:
            pass
    state.view_filter = mode

    search = " ".join(args).strip() or None
    tasks = query_tasks(state.task_store.tasks, mode=mode, search=search, sort=state.view_sort)
    header = f"{len(tasks)} task(s) [{mode.value}, sorted by {state.view_sort.key.value} {state.view_sort.direction.value}]"
    empty = "Try a different search term or filter." if search else "No tasks found."
    return header + "\n" + _format_list(state, tasks, empty)


def cmd_sort(state: AppState, args: list[str]) -> str:
    """/sort <dueDate|priority|title|createdAt> (same key again flips direction)"""
    if not args:
        return f"Sorted by {state.view_sort.key.value} {state.view_sort.direction.value}."
    by_name = {k.value.lower(): k for k in SortKey}
    key = by_name.get(args[0].lower())
    if key is None:
        return "Usage: /sort dueDate | priority | title | createdAt"
    state.view_sort = state.view_sort.select(key)
    return f"Sorted by {state.view_sort.key.value} {state.view_sort.direction.value}."


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title> | <description> | <due> | <priority> | <estimate> | <tag ids, comma separated>
    Only the title is required.
    """
    fields = [f.strip() for f in " ".join(args).split("|")]
    fields += [""] * (6 - len(fields))
    title, description, due, priority, estimate, tag_ids = fields[:6]
    tags = tuple(t.strip() for t in tag_ids.split(",") if t.strip())

    try:
        draft = build_draft(
            title,
            description=description,
            due=due or None,
            priority=priority or None,
            estimate=estimate or None,
            tags=tags,
        )
    except ValidationSkipped as e:
        return str(e)
    except ValueError as e:
        return f"Invalid task: {e}"

    task = await state.task_store.create(draft)
    if task is None:
        return f"Task was not created: {state.task_store.last_error}"
    return format_task(task, state)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> title=... description=... due=... priority=... estimate=... status=..."""
    if len(args) < 2:
        return "Usage: /edit <id> field=value [field=value ...]"

    task_id = args[0]
    changes: dict[str, object] = {}
    try:
        for pair in args[1:]:
            key, sep, value = pair.partition("=")
            if not sep:
                return f"Expected field=value, got {pair!r}."
            key = key.strip().lower()
            if key == "due":
                changes["due_date"] = parse_due_date(value)
            elif key == "estimate":
                changes["estimation"] = parse_estimation(value)
            elif key == "tags":
                changes["tags"] = [t for t in value.split(",") if t]
            elif key == "completed":
                changes["completed"] = value.strip().lower() in {"1", "true", "yes", "y", "on"}
            else:
                changes[key] = value
        task = await state.task_store.update(task_id, changes)
    except NotFound as e:
        return str(e)
    except ValueError as e:
        return f"Invalid update: {e}"

    if task is None:
        return f"Task was not updated: {state.task_store.last_error}"
    return format_task(task, state)


async def cmd_done(state: AppState, args: list[str]) -> str:
    """/done <id> toggles completion."""
    if not args:
        return "Usage: /done <id>"
    try:
        task = await state.task_store.toggle_completion(args[0])
    except NotFound as e:
        return str(e)
    if task is None:
        return f"Status was not changed: {state.task_store.last_error}"
    return format_task(task, state)


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <id>"
    try:
        ok = await state.task_store.delete(args[0])
    except NotFound as e:
        return str(e)
    return f"Deleted {args[0]}." if ok else f"Task was not deleted: {state.task_store.last_error}"


async def cmd_ai(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    text = " ".join(args).strip()
    if not text:
        return "Please enter a prompt: /ai <text>"
    if emit:
        emit("Processing...")
    created = await state.task_store.process_prompt(text)
    if not created:
        if state.task_store.last_error:
            return f"AI processing failed: {state.task_store.last_error}"
        return "The assistant did not produce any tasks."
    return f"{len(created)} new task(s):\n" + _format_list(state, created, "")


async def cmd_refresh(state: AppState, args: list[str]) -> str:
    ok = await state.task_store.refresh()
    if not ok:
        return f"Refresh failed: {state.task_store.last_error}"
    return f"Loaded {len(state.task_store.tasks)} task(s)."


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = state.task_store.stats
    return (
        "Stats:\n"
        f"  Total: {s.total} (completed {s.completed}, pending {s.pending}, {s.completion_rate}% done)\n"
        f"  Priority: high {s.by_priority[Priority.HIGH]}, medium {s.by_priority[Priority.MEDIUM]}, low {s.by_priority[Priority.LOW]}\n"
        f"  Due today: {s.due_today}  Upcoming: {s.upcoming}  Overdue: {s.overdue}\n"
        f"  Estimated: {s.total_estimated_time} ({format_hours(s.total_estimated_hours)})\n"
        f"  Source: {s.source}"
    )


def cmd_upcoming(state: AppState, args: list[str]) -> str:
    groups = group_upcoming(state.task_store.tasks)
    sections = [
        ("Tomorrow", groups.tomorrow),
        ("Next 7 days", groups.next_week),
        ("Later", groups.later),
    ]
    return "\n".join(
        f"{title}:\n" + _format_list(state, tasks, "  (nothing)") for title, tasks in sections
    )


def cmd_recent(state: AppState, args: list[str]) -> str:
    return _format_list(state, recent_tasks(state.task_store.tasks), "No tasks created this week.")


def cmd_tags(state: AppState, args: list[str]) -> str:
    tags = state.tag_store.tags
    if not tags:
        return "No tags."
    return "\n".join(f"{t.id}  {t.name}  {t.color}" for t in tags)


async def cmd_tag(state: AppState, args: list[str]) -> str:
    """
    /tag add <name> [color]
    /tag rm <tag_id>
    /tag <tag_id> <task_id>   -> toggle the tag on the task
    """
    usage = "Usage: /tag add <name> [color] | /tag rm <tag_id> | /tag <tag_id> <task_id>"
    if not args:
        return usage

    sub = args[0].lower()
    if sub == "add" and len(args) >= 2:
        color = args[2] if len(args) >= 3 else "#9b87f5"
        try:
            tag = state.tag_store.add_tag(args[1], color)
        except ValueError as e:
            return str(e)
        state.notifier.notify("Tag created successfully", "success")
        return f"Tag {tag.name} created (id={tag.id})."

    if sub == "rm" and len(args) >= 2:
        existed = state.tag_store.delete_tag(args[1])
        if not existed:
            return f"tag not found: {args[1]}"
        state.notifier.notify("Tag deleted", "success")
        return f"Tag {args[1]} deleted."

    if len(args) == 2:
        tag_id, task_id = args
        if state.tag_store.get(tag_id) is None:
            return f"tag not found: {tag_id}"
        task = state.task_store.get(task_id)
        if task is None:
            return f"task not found: {task_id}"
        if tag_id in task.tags:
            tags = [t for t in task.tags if t != tag_id]
        else:
            tags = [*task.tags, tag_id]
        updated = await state.task_store.update(task_id, {"tags": tags})
        if updated is None:
            return f"Task was not updated: {state.task_store.last_error}"
        return format_task(updated, state)

    return usage


def cmd_theme(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Theme: {state.theme.value}. Use /theme light | dark | system."
    try:
        state.theme = save_theme(state.storage, args[0].lower())
    except ValueError:
        return "Usage: /theme light | dark | system"
    return f"Theme set to {state.theme.value}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "list", cmd_list, help_text="List tasks: /list [all|active|completed|overdue|today] [search...]."
)
registry.register("sort", cmd_sort, help_text="Sort list: /sort dueDate|priority|title|createdAt.")
registry.register(
    "add",
    cmd_add,
    help_text="Create: /add title | description | due | priority | estimate | tag ids.",
)
registry.register("edit", cmd_edit, help_text="Update fields: /edit <id> field=value ...")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("ai", cmd_ai, help_text="Generate tasks from free text: /ai <text>.")
registry.register("refresh", cmd_refresh, help_text="Reload tasks from the server.")
registry.register("stats", cmd_stats, help_text="Show task statistics.")
registry.register("upcoming", cmd_upcoming, help_text="Show tasks due tomorrow, this week and later.")
registry.register("recent", cmd_recent, help_text="Show tasks created in the last 7 days.")
registry.register("tags", cmd_tags, help_text="List tags.")
registry.register(
    "tag",
    cmd_tag,
    help_text="Manage tags: /tag add <name> [color] | /tag rm <id> | /tag <tag_id> <task_id>.",
)
registry.register("theme", cmd_theme, help_text="Show or set theme: /theme light|dark|system.")
