# src/taskdesk/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from pathlib import Path
from typing import cast

from ..accounts.models import ADMIN_USERNAME
from ..backup.snapshot import import_snapshot, read_snapshot_file, write_snapshot
from ..core.errors import TaskdeskError
from ..core.state import AppState
from ..tasks.task_models import Task, TaskStatus
from ..tasks.task_store import filter_tasks, stats

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /login, ...)."""

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

        Arguments are shell-split, so values with spaces can be quoted.
        Operation errors (validation, conflict, auth, import) become the reply.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}."
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

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except TaskdeskError as e:
            logger.debug("/%s failed: %r", name, e)
            return f"{e.kind}: {e.message}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _format_task(task: Task) -> str:
    mark = "x" if task.status is TaskStatus.COMPLETED else " "
    due = f", due {task.due_date}" if task.due_date else ""
    line = f"[{mark}] {task.id}  {task.title} ({task.priority}{due})"
    if task.description:
        line += f"\n      {task.description}"
    return line


def _current_tasks(state: AppState) -> list[Task]:
    if state.tasks_cache is None:
        return state.reload_tasks()
    return state.tasks_cache


# ---- accounts / session ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    session = state.sessions.current_session()
    user = session.username if session else "(nobody)"
    return (
        "Status:\n"
        f"  App: {getattr(state.settings, 'app_name', 'taskdesk')}\n"
        f"  Mode: {state.sessions.ui_mode().value}\n"
        f"  Logged in: {user}\n"
        f"  Stored keys: {state.store.count()}"
    )


def cmd_register(state: AppState, args: list[str]) -> str:
    """/register <username> <email> <password>"""
    if len(args) != 3:
        return "Usage: /register <username> <email> <password>"
    record = state.directory.register(args[0], args[1], args[2])
    return f"Account {record.username} created. Please log in with your new account."


def cmd_login(state: AppState, args: list[str]) -> str:
    """/login <username> <password>"""
    if len(args) != 2:
        return "Usage: /login <username> <password>"
    identity = state.sessions.login(args[0], args[1])
    tasks = _current_tasks(state)
    extra = " Admin commands enabled (/admin)." if state.admin.is_admin() else ""
    return f"Hello, {identity.username}. You have {len(tasks)} task(s).{extra}"


def cmd_logout(state: AppState, args: list[str]) -> str:
    state.sessions.logout()
    state.tasks_cache = None
    return "Logged out."


def cmd_whoami(state: AppState, args: list[str]) -> str:
    identity = state.sessions.require_session()
    role = " (admin)" if state.admin.is_admin() else ""
    return f"{identity.username} <{identity.email}>{role}"


def cmd_passwd(state: AppState, args: list[str]) -> str:
    """/passwd <current> <new>"""
    if len(args) != 2:
        return "Usage: /passwd <current password> <new password>"
    identity = state.sessions.require_session()
    state.directory.change_password(identity.username, args[0], args[1])
    return "Password updated."


# ---- tasks ----


def cmd_tasks(state: AppState, args: list[str]) -> str:
    """
    /tasks                      -> all tasks
    /tasks milk                 -> search title/description
    /tasks status=pending       -> filter (also priority=high)
    """
    state.sessions.require_session()
    status = None
    priority = None
    words: list[str] = []
    for a in args:
        if a.startswith("status="):
            status = a.split("=", 1)[1].lower() or None
        elif a.startswith("priority="):
            priority = a.split("=", 1)[1].lower() or None
        else:
            words.append(a)

    tasks = filter_tasks(_current_tasks(state), search=" ".join(words), status=status, priority=priority)
    if not tasks:
        return "No tasks found."
    return "\n".join(_format_task(t) for t in tasks)


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title> [description] [priority] [due date]"""
    identity = state.sessions.require_session()
    if not args:
        return 'Usage: /add "<title>" ["description"] [low|medium|high] [due date]'
    task = state.task_store.add_task(
        identity.username,
        title=args[0],
        description=args[1] if len(args) > 1 else "",
        priority=args[2] if len(args) > 2 else "medium",
        due_date=args[3] if len(args) > 3 else None,
    )
    state.reload_tasks()
    return f"Task {task.id} created."


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> <title|description|priority|due> <value>"""
    identity = state.sessions.require_session()
    fields = {"title": "title", "description": "description", "priority": "priority", "due": "due_date"}
    if len(args) < 3 or args[1].lower() not in fields:
        return "Usage: /edit <id> <title|description|priority|due> <value>"
    changes = {fields[args[1].lower()]: " ".join(args[2:])}
    task = state.task_store.update_task(identity.username, args[0], **changes)
    state.reload_tasks()
    return f"Task {task.id} updated."


def cmd_done(state: AppState, args: list[str]) -> str:
    identity = state.sessions.require_session()
    if len(args) != 1:
        return "Usage: /done <id>"
    task = state.task_store.toggle_status(identity.username, args[0])
    state.reload_tasks()
    return f"Task {task.id} is now {task.status.value}."


def cmd_rm(state: AppState, args: list[str]) -> str:
    identity = state.sessions.require_session()
    if len(args) != 1:
        return "Usage: /rm <id>"
    state.task_store.delete_task(identity.username, args[0])
    state.reload_tasks()
    return f"Task {args[0]} deleted."


def cmd_stats(state: AppState, args: list[str]) -> str:
    state.sessions.require_session()
    s = stats(_current_tasks(state))
    return f"Total: {s.total}  Pending: {s.pending}  Completed: {s.completed}"


# ---- admin ----


def cmd_admin(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /admin users           -> every account with its password
    /admin delete <user>   -> delete an account and its tasks
    /admin cleanup         -> delete every account except Admin_00
    """
    sub = args[0].lower() if args else ""

    if sub == "users":
        records = state.admin.list_accounts()
        if not records:
            return "No users found in database."
        lines = ["Accounts:"]
        for r in records:
            tag = "  [Admin, protected]" if r.username == ADMIN_USERNAME else ""
            lines.append(f"  {r.username}  {r.email}  {r.password}{tag}")
        return "\n".join(lines)

    if sub == "delete":
        if len(args) != 2:
            return "Usage: /admin delete <username>"
        removed = state.admin.delete_user(args[1])
        if not removed:
            return f"No account named {args[1]}; any stored tasks for it were removed."
        return f'User "{args[1]}" deleted successfully.'

    if sub == "cleanup":
        removed = state.admin.cleanup_all_except_admin()
        state.reload_tasks()
        if emit is not None and removed:
            emit(f"Removed: {', '.join(removed)}")
        return f"Account cleanup complete: {len(removed)} account(s) removed."

    return (
        "Admin commands:\n"
        "  /admin users          - list accounts (with passwords)\n"
        "  /admin delete <user>  - delete an account and its tasks\n"
        "  /admin cleanup        - delete all accounts except Admin_00\n"
    )


# ---- backup ----


def cmd_export(state: AppState, args: list[str]) -> str:
    """/export [directory]"""
    out_dir = Path(args[0]) if args else Path(state.settings.backup_dir)
    path = write_snapshot(state.store, out_dir)
    return f"Backup written to {path}"


def cmd_import(state: AppState, args: list[str]) -> str:
    """/import <file>"""
    if len(args) != 1:
        return "Usage: /import <backup file>"
    written = import_snapshot(state.store, read_snapshot_file(args[0]))
    state.reload()
    return f"Data imported successfully ({len(written)} keys merged)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show mode, current user and store size.")
registry.register("register", cmd_register, help_text="Create an account: /register <user> <email> <password>.")
registry.register("login", cmd_login, help_text="Log in: /login <user> <password>.")
registry.register("logout", cmd_logout, help_text="Log out.")
registry.register("whoami", cmd_whoami, help_text="Show the logged-in account.")
registry.register("passwd", cmd_passwd, help_text="Change password: /passwd <current> <new>.")
registry.register("tasks", cmd_tasks, help_text="List tasks: /tasks [search] [status=..] [priority=..].", aliases=["ls"])
registry.register("add", cmd_add, help_text='Add a task: /add "<title>" ["desc"] [priority] [due].')
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <title|description|priority|due> <value>.")
registry.register("done", cmd_done, help_text="Toggle a task between pending and completed.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.")
registry.register("stats", cmd_stats, help_text="Show task counts.")
registry.register("admin", cmd_admin, help_text="Admin tools: /admin users | delete <user> | cleanup.")
registry.register("export", cmd_export, help_text="Write a backup of all data: /export [dir].")
registry.register("import", cmd_import, help_text="Merge a backup file into the store: /import <file>.")
