# src/taskflow/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.commands import current_view
from ..core.state import AppState
from .rendering import render_view

logger = logging.getLogger(__name__)

WELCOME = (
    "Welcome to {app}!\n"
    "  Add a task:      /add @Work due:2025-01-31 Write the report\n"
    "  Complete it:     /done <id>\n"
    "  Undo mistakes:   /undo  (and /redo)\n"
    "  Everything else: /help"
)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def ask_yes_no(question: str) -> bool:
    """Blocking y/N prompt used as the confirmation port."""
    try:
        answer = input(f"{question} [y/N] ").strip().lower()
    except EOFError:
        return False
    return answer in ("y", "yes")


async def run_console_loop(state: AppState) -> None:
    """
    Console REPL.

    input() runs in a worker thread so the event loop stays free for the
    auto-save tick and debounced searches; every command still executes on
    the loop thread.
    """
    app_name = str(getattr(state.settings, "app_name", "TaskFlow"))
    logger.info("Console connector started.")

    if state.first_run:
        print(WELCOME.format(app=app_name))
    _print_ts(f"[{app_name}] Type /help for commands, /exit to quit.\n")
    print(render_view(state, current_view(state)))

    def emit(text: str) -> None:
        # Deferred output (debounced search results).
        if text:
            _print_ts(text)

    while True:
        try:
            user_input = (await asyncio.to_thread(input, ">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # Plain text is a shortcut for /add.
        line = user_input if user_input.startswith("/") else f"/add {user_input}"

        try:
            response = command_registry.handle(state, line, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response:
            print(response, flush=True)

    if state.search_debouncer is not None:
        state.search_debouncer.cancel()
    logger.info("Console connector finished.")
