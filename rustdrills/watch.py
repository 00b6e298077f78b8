"""Watch mode: re-check exercises whenever a source file changes."""

from __future__ import annotations

import itertools
import os
import queue
import subprocess
import sys
import threading
from collections.abc import Callable, Iterable
from enum import Enum
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from rustdrills.exercise import Exercise
from rustdrills.verify import ExerciseFailed, verify

_HELP = "\n".join(
    [
        "Commands available to you in watch mode:",
        "  hint   - prints the current exercise's hint",
        "  clear  - clears the screen",
        "  quit   - quits watch mode",
        "  !<cmd> - executes a command, like `!rustc --explain E0381`",
        "  help   - displays this help message",
        "",
        "Watch mode automatically re-evaluates the current exercise",
        "when you edit a file's contents.",
    ]
)


class WatchStatus(Enum):
    """How watch mode ended."""

    FINISHED = "finished"
    UNFINISHED = "unfinished"


def handle_shell_command(line: str, hint: str | None) -> bool:
    """Act on one line typed in watch mode; return True if the user asked to quit."""
    command = line.strip()
    if command == "hint":
        if hint is not None:
            print(hint)
    elif command == "clear":
        print("\x1b[2J\x1b[1;1H")
    elif command == "quit":
        print("Bye!")
        return True
    elif command == "help":
        print(_HELP)
    elif command.startswith("!"):
        cmd = command[1:]
        parts = cmd.split()
        if not parts:
            print("no command provided")
        else:
            try:
                subprocess.run(parts, check=False)
            except OSError as err:
                print(f"failed to execute command `{cmd}`: {err}")
    else:
        print(f"unknown command: {command}")
    return False


def spawn_watch_shell(
    hint_holder: Callable[[], str | None], should_quit: threading.Event
) -> threading.Thread:
    """Start a background thread reading commands from standard input."""
    print(
        "Welcome to watch mode! You can type 'help' to get an overview "
        "of the commands you can use here."
    )

    def loop() -> None:
        while True:
            try:
                line = sys.stdin.readline()
            except (OSError, ValueError) as err:
                print(f"error reading command: {err}")
                return
            if not line:
                return
            if handle_shell_command(line, hint_holder()):
                should_quit.set()

    thread = threading.Thread(target=loop, daemon=True)
    thread.start()
    return thread


class _Forwarder(FileSystemEventHandler):
    def __init__(self, events: queue.Queue) -> None:
        super().__init__()
        self._events = events

    def _forward(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._events.put(os.fsdecode(event.src_path))

    def on_created(self, event: FileSystemEvent) -> None:
        self._forward(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        self._forward(event)


def _clear_screen() -> None:
    print("\x1bc")


def _ends_with(filepath: Path, path: Path) -> bool:
    tail = path.parts
    return bool(tail) and filepath.parts[-len(tail):] == tail


def _changed_rust_file(events: queue.Queue, first: str) -> Path | None:
    batch = [first]
    while True:
        try:
            batch.append(events.get_nowait())
        except queue.Empty:
            break
    for raw in reversed(batch):
        path = Path(raw)
        if path.suffix == ".rs" and path.exists():
            return path.resolve()
    return None


def watch(exercises: Iterable[Exercise], verbose: bool, success_hints: bool) -> WatchStatus:
    """Verify exercises, then re-verify whenever a file under ./exercises changes."""
    exercises = list(exercises)
    total = len(exercises)
    events: queue.Queue = queue.Queue()
    should_quit = threading.Event()

    observer = Observer()
    observer.schedule(_Forwarder(events), "./exercises", recursive=True)
    observer.start()
    try:
        _clear_screen()
        try:
            verify(exercises, (0, total), verbose, success_hints)
        except ExerciseFailed as err:
            failed_hint: str | None = err.exercise.hint
        else:
            return WatchStatus.FINISHED

        spawn_watch_shell(lambda: failed_hint, should_quit)
        while True:
            try:
                first = events.get(timeout=1)
            except queue.Empty:
                pass
            else:
                filepath = _changed_rust_file(events, first)
                if filepath is not None:
                    current = next(
                        (e for e in exercises if _ends_with(filepath, e.path)), None
                    )
                    others = (
                        e
                        for e in exercises
                        if not e.looks_done() and not _ends_with(filepath, e.path)
                    )
                    pending = itertools.chain([current] if current else [], others)
                    num_done = sum(1 for e in exercises if e.looks_done())
                    _clear_screen()
                    try:
                        verify(pending, (num_done, total), verbose, success_hints)
                    except ExerciseFailed as err:
                        failed_hint = err.exercise.hint
                    else:
                        return WatchStatus.FINISHED
            if should_quit.is_set():
                return WatchStatus.UNFINISHED
    finally:
        observer.stop()
        observer.join()