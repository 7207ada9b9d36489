"""Line-based interactive shell over a Session."""

from __future__ import annotations

import shlex
from collections.abc import Callable
from pathlib import Path

from rich.console import Console
from rich.prompt import Prompt

from todoboard.models import (
    StatusFilter,
    Task,
    TaskDraft,
    TaskValidationError,
    ViewMode,
    parse_due_date,
    parse_due_time,
    parse_priority,
)
from todoboard.pipeline import SORT_PRESETS
from todoboard.session import Session

HELP = """\
[bold]Tasks[/bold]
  add TEXT [category=C] [priority=P] [due=YYYY-MM-DD] [time=HH:MM]
  edit REF field=value ...     fields: text, category, priority, due, time
  done REF                     toggle complete
  rm REF | dup REF
  move REF TO                  drag REF onto position TO of the current view
[bold]View[/bold]
  ls                           show the current view
  view list|board|calendar
  search [TERM]                empty term clears the search
  filter category|priority|status VALUE ...   (no values = all)
  filter clear
  sort {sorts}
  page N | next | prev | per-page N
[bold]Files[/bold]
  import FILE | export [FILE]
  help | quit

REF is a row number from the list view or an id prefix."""

# key=value fields accepted by add/edit
FIELD_PARSERS: dict[str, tuple[str, Callable]] = {
    "text": ("text", str),
    "category": ("category", lambda v: None if v.lower() == "none" else v),
    "priority": ("priority", parse_priority),
    "due": ("due_date", parse_due_date),
    "time": ("due_time", parse_due_time),
}


class ShellError(Exception):
    """A command could not be carried out; message is shown to the user."""

    pass


def split_fields(tokens: list[str]) -> tuple[list[str], dict]:
    """Separate key=value field tokens from free text tokens."""
    words: list[str] = []
    fields: dict = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if sep and key in FIELD_PARSERS:
            name, parse = FIELD_PARSERS[key]
            fields[name] = parse(value)
        else:
            words.append(token)
    return words, fields


class Shell:
    """Reads commands, applies them to the session, renders the result."""

    def __init__(self, session: Session, console: Console | None = None):
        self.session = session
        self.console = console or Console()
        self._commands: dict[str, Callable[[list[str]], None]] = {
            "add": self._add,
            "edit": self._edit,
            "done": self._done,
            "rm": self._rm,
            "dup": self._dup,
            "move": self._move,
            "ls": self._ls,
            "view": self._view,
            "search": self._search,
            "filter": self._filter,
            "sort": self._sort,
            "page": self._page,
            "next": lambda args: self._page([str(self.session.page + 1)]),
            "prev": lambda args: self._page([str(self.session.page - 1)]),
            "per-page": self._per_page,
            "import": self._import,
            "export": self._export,
            "help": self._help,
        }

    @property
    def store(self):
        return self.session.store

    def run(self) -> None:
        self.console.print("[bold]todoboard[/bold] [dim]- type 'help' for commands[/dim]")
        while True:
            try:
                line = Prompt.ask("[cyan]>[/cyan]", console=self.console)
            except (EOFError, KeyboardInterrupt):
                break
            if not self.execute(line):
                break

    def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the shell should exit."""
        try:
            tokens = shlex.split(line)
        except ValueError as e:
            self.console.print(f"[red]Error:[/red] {e}")
            return True
        if not tokens:
            return True

        name, args = tokens[0].lower(), tokens[1:]
        if name in ("quit", "exit", "q"):
            return False
        handler = self._commands.get(name)
        if handler is None:
            self.console.print(f"[red]Error:[/red] Unknown command '{name}'. Type 'help'.")
            return True
        try:
            handler(args)
        except (ShellError, ValueError) as e:
            # TaskValidationError and CsvImportError are ValueErrors
            self.console.print(f"[red]Error:[/red] {e}")
        return True

    # --- helpers ---

    def resolve(self, ref: str) -> Task:
        """Find a task by 1-based row number in the current view or by id prefix."""
        if ref.isdigit():
            visible = self.session.visible_tasks()
            index = int(ref) - 1
            if 0 <= index < len(visible):
                return visible[index]
            raise ShellError(f"No row {ref} in the current view")

        matches = [t for t in self.store.tasks if t.id.startswith(ref)]
        if len(matches) == 1:
            return matches[0]
        if not matches:
            raise ShellError(f"Task not found: {ref}")
        raise ShellError(f"Ambiguous id '{ref}' matches {len(matches)} tasks")

    def _require(self, args: list[str], count: int, usage: str) -> None:
        if len(args) < count:
            raise ShellError(f"Usage: {usage}")

    # --- task commands ---

    def _add(self, args: list[str]) -> None:
        words, fields = split_fields(args)
        if "text" in fields:
            words.insert(0, fields.pop("text"))
        self.store.set_adding(True)
        try:
            task = self.store.add(TaskDraft(text=" ".join(words), **fields))
        finally:
            self.store.set_adding(False)
        self.console.print(f"[green]✓[/green] Added: {task.text} [dim]({task.id})[/dim]")

    def _edit(self, args: list[str]) -> None:
        self._require(args, 2, "edit REF field=value ...")
        task = self.resolve(args[0])
        words, fields = split_fields(args[1:])
        if words:
            raise ShellError(f"Expected field=value, got: {' '.join(words)}")
        self.store.set_editing_task(task.id)
        try:
            updated = self.store.update(task.id, **fields)
        except TaskValidationError:
            self.store.cancel_editing()
            raise
        self.console.print(f"[green]✓[/green] Updated: {updated.text}")

    def _done(self, args: list[str]) -> None:
        self._require(args, 1, "done REF")
        task = self.store.toggle(self.resolve(args[0]).id)
        mark = "Done" if task.completed else "Reopened"
        self.console.print(f"[green]✓[/green] {mark}: {task.text}")

    def _rm(self, args: list[str]) -> None:
        self._require(args, 1, "rm REF")
        task = self.resolve(args[0])
        self.store.delete(task.id)
        self.console.print(f"[yellow]✓[/yellow] Removed: {task.text}")

    def _dup(self, args: list[str]) -> None:
        self._require(args, 1, "dup REF")
        copy = self.store.duplicate(self.resolve(args[0]).id)
        self.console.print(f"[green]✓[/green] Added: {copy.text} [dim]({copy.id})[/dim]")

    def _move(self, args: list[str]) -> None:
        self._require(args, 2, "move REF TO")
        task = self.resolve(args[0])
        target = self.resolve(args[1])
        if self.session.drop(task.id, target.id):
            self.console.print(f"[green]✓[/green] Moved: {task.text}")
        else:
            self.console.print("[dim]Nothing to move[/dim]")

    # --- view commands ---

    def _ls(self, args: list[str]) -> None:
        self.render()

    def render(self) -> None:
        from todoboard.formatters import BoardFormatter, CalendarFormatter, TableFormatter

        self.session.settle()
        view = self.store.state.view
        if view == ViewMode.BOARD:
            output = BoardFormatter().format(self.session.visible_tasks())
        elif view == ViewMode.CALENDAR:
            output = CalendarFormatter().format(self.session.visible_tasks())
        else:
            page = self.session.current_page()
            output = TableFormatter().format(list(page.items), page=page)
        self.console.print(output)

    def _view(self, args: list[str]) -> None:
        self._require(args, 1, "view list|board|calendar")
        try:
            view = ViewMode(args[0].lower())
        except ValueError:
            raise ShellError(f"Unknown view '{args[0]}'. Use list, board or calendar") from None
        self.store.set_view(view)
        self.render()

    def _search(self, args: list[str]) -> None:
        self.session.type_search(" ".join(args))
        self.render()

    def _filter(self, args: list[str]) -> None:
        self._require(args, 1, "filter category|priority|status VALUE ... | filter clear")
        kind, values = args[0].lower(), args[1:]
        session = self.session
        if kind == "clear":
            for menu in (session.categories, session.priorities, session.statuses):
                menu.open()
                menu.select_all()
        elif kind in ("category", "cat"):
            session.categories.open()
            session.categories.set(values or session.categories.options)
        elif kind in ("priority", "prio"):
            session.priorities.open()
            session.priorities.set([parse_priority(v) for v in values] or session.priorities.options)
        elif kind == "status":
            session.statuses.open()
            try:
                session.statuses.set([StatusFilter(v.lower()) for v in values] or session.statuses.options)
            except ValueError:
                session.statuses.close()
                raise ShellError("Status must be 'complete' or 'incomplete'") from None
        else:
            raise ShellError(f"Unknown filter '{kind}'")
        session.commit_filters()
        self.render()

    def _sort(self, args: list[str]) -> None:
        self._require(args, 1, "sort PRESET")
        self.session.sort(args[0])
        self.render()

    def _page(self, args: list[str]) -> None:
        self._require(args, 1, "page N")
        if not args[0].lstrip("-").isdigit():
            raise ShellError(f"Not a page number: {args[0]}")
        self.session.go_to(int(args[0]))
        self.render()

    def _per_page(self, args: list[str]) -> None:
        self._require(args, 1, "per-page N")
        if not args[0].isdigit():
            raise ShellError(f"Not a number: {args[0]}")
        self.session.set_page_size(int(args[0]))
        self.render()

    # --- files ---

    def _import(self, args: list[str]) -> None:
        from todoboard.csvio import build_import, parse_csv

        self._require(args, 1, "import FILE")
        path = Path(args[0]).expanduser()
        if not path.exists():
            raise ShellError(f"File not found: {path}")
        try:
            text = path.read_text()
        except UnicodeDecodeError:
            raise ShellError(f"{path.name}: not a UTF-8 text file") from None
        rows = parse_csv(text)
        if not rows:
            self.console.print("[yellow]No valid tasks found in the file.[/yellow]")
            return
        self.store.import_tasks(build_import(self.store.tasks, rows))
        self.console.print(f"[green]✓[/green] Imported {len(rows)} tasks")

    def _export(self, args: list[str]) -> None:
        from todoboard.csvio import export_csv

        if not len(self.store):
            raise ShellError("No tasks to export")
        content = export_csv(self.store.tasks)
        if not args:
            self.console.print(content, markup=False, highlight=False, soft_wrap=True)
            return
        path = Path(args[0]).expanduser()
        path.write_text(content + "\n")
        self.console.print(f"[green]✓[/green] Exported {len(self.store)} tasks to {path}")

    def _help(self, args: list[str]) -> None:
        self.console.print(HELP.format(sorts="|".join(SORT_PRESETS)))
