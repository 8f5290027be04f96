# src/taskflow/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from pathlib import Path
from typing import cast

from ..connectors.rendering import render_notification, render_stats, render_view
from ..core import commands as core
from ..core.commands import CommandResult, NotificationLevel
from ..core.state import AppState
from ..storage.transfer import write_export
from ..tasks.task_models import KNOWN_CATEGORIES, SortKey, StatusFilter

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

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

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

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
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_result(state: AppState, result: CommandResult, *, show_view: bool = True) -> str:
    """Notifications first, then the refreshed view."""
    lines: list[str] = []
    for n in result.notifications:
        # Error notifications always show; the rest follow the user's setting.
        if n.level == NotificationLevel.ERROR or state.user_settings.notifications:
            lines.append(render_notification(n))
    if show_view and not result.noop and result.ok:
        lines.append(render_view(state, result.view))
    return "\n".join(lines)


def _usage(text: str) -> str:
    return f"Usage: {text}"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_view(state, core.current_view(state))


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add [@Category] [due:YYYY-MM-DD] text...
    """
    category: str | None = None
    due: str | None = None
    words: list[str] = []
    for tok in args:
        if tok.startswith("@") and len(tok) > 1 and category is None:
            category = tok[1:]
        elif tok.lower().startswith("due:") and due is None:
            due = tok[4:]
        else:
            words.append(tok)
    return format_result(state, core.add_task(state, " ".join(words), category, due))


def cmd_edit(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return _usage("/edit <id> <new text>")
    result = core.edit_task(state, args[0], " ".join(args[1:]))
    if result.noop:
        return "No changes."
    return format_result(state, result)


def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return _usage("/done <id>")
    return format_result(state, core.toggle_task(state, args[0]))


def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return _usage("/rm <id>")
    return format_result(state, core.remove_task(state, args[0]))


def cmd_clear_done(state: AppState, args: list[str]) -> str:
    return format_result(state, core.clear_completed(state))


def cmd_clear_all(state: AppState, args: list[str]) -> str:
    return format_result(state, core.clear_all(state))


def cmd_undo(state: AppState, args: list[str]) -> str:
    return format_result(state, core.undo(state))


def cmd_redo(state: AppState, args: list[str]) -> str:
    return format_result(state, core.redo(state))


def cmd_filter(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return _usage("/filter " + " | ".join(f.value for f in StatusFilter))
    return format_result(state, core.set_filter(state, args[0]))


def cmd_cat(state: AppState, args: list[str]) -> str:
    if not args:
        return _usage("/cat all | " + " | ".join(KNOWN_CATEGORIES))
    return format_result(state, core.set_category(state, " ".join(args)))


def cmd_sort(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return _usage("/sort " + " | ".join(s.value for s in SortKey))
    return format_result(state, core.set_sort(state, args[0]))


def cmd_search(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /search text  -> filter by text/category (debounced when an emitter is available)
    /search       -> clear the search
    """
    query = " ".join(args)
    if emit is None:
        return format_result(state, core.set_search_query(state, query))

    core.schedule_search(state, query, lambda result: emit(format_result(state, result)))
    return f'Searching for "{query}"...' if query else "Clearing search..."


def cmd_stats(state: AppState, args: list[str]) -> str:
    return render_stats(core.current_result(state).stats)


def cmd_export(state: AppState, args: list[str]) -> str:
    result = core.export_tasks(state)
    out = format_result(state, result, show_view=False)
    if result.export is None:
        return out
    target = Path(args[0]).expanduser() if args else Path(state.settings.export_dir)
    path = write_export(result.export, target)
    return f"{out}\nSaved to {path}"


def cmd_import(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return _usage("/import <file.json>")
    path = Path(args[0]).expanduser()
    try:
        payload = path.read_text("utf-8")
    except OSError as e:
        logger.info("Import file unreadable path=%s err=%s", path, e)
        return f"[ERROR] Error importing tasks! Cannot read {path}."
    return format_result(state, core.import_tasks(state, payload))


def cmd_theme(state: AppState, args: list[str]) -> str:
    return format_result(state, core.toggle_theme(state), show_view=False)


def cmd_view(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return _usage("/view list | grid")
    return format_result(state, core.set_view_mode(state, args[0]))


def cmd_set(state: AppState, args: list[str]) -> str:
    """
    /set                -> show user settings
    /set <name>         -> toggle auto_save | notifications | sound_effects
    """
    if not args:
        prefs = state.user_settings
        return (
            "Settings:\n"
            f"  theme: {prefs.theme.value}\n"
            f"  view_mode: {prefs.view_mode.value}\n"
            f"  auto_save: {'ON' if prefs.auto_save else 'OFF'}\n"
            f"  notifications: {'ON' if prefs.notifications else 'OFF'}\n"
            f"  sound_effects: {'ON' if prefs.sound_effects else 'OFF'}"
        )
    return format_result(state, core.toggle_setting(state, args[0]), show_view=False)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the current view.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add [@Category] [due:YYYY-MM-DD] text.")
registry.register("edit", cmd_edit, help_text="Change a task's text: /edit <id> <text>.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"])
registry.register("clear-done", cmd_clear_done, help_text="Delete all completed tasks.")
registry.register("clear-all", cmd_clear_all, help_text="Delete every task.")
registry.register("undo", cmd_undo, help_text="Undo the last change.", aliases=["z"])
registry.register("redo", cmd_redo, help_text="Redo the last undone change.", aliases=["y"])
registry.register("filter", cmd_filter, help_text="Status filter: all | completed | pending.")
registry.register("cat", cmd_cat, help_text="Category filter: /cat all | <category>.")
registry.register("sort", cmd_sort, help_text="Sort: newest | oldest | due-date | category | alphabetical.")
registry.register("search", cmd_search, help_text="Search text and category: /search <text>.", aliases=["f"])
registry.register("stats", cmd_stats, help_text="Show totals and completion rate.")
registry.register("export", cmd_export, help_text="Write a text report: /export [dir].")
registry.register("import", cmd_import, help_text="Append tasks from a JSON file: /import <file>.")
registry.register("theme", cmd_theme, help_text="Toggle light/dark theme.")
registry.register("view", cmd_view, help_text="Layout: /view list | grid.")
registry.register("set", cmd_set, help_text="Show or toggle settings: /set [auto_save|notifications|sound_effects].")
