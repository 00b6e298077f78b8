"""Exercises: their description, state, compilation and execution."""

from __future__ import annotations

import os
import re
import subprocess
import threading
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

RUSTC_COLOR_ARGS = ["--color", "always"]
RUSTC_EDITION_ARGS = ["--edition", "2021"]
I_AM_DONE_REGEX = re.compile(r"^\s*///?\s*I\s+AM\s+NOT\s+DONE", re.MULTILINE)
CONTEXT = 2
CLIPPY_CARGO_TOML_PATH = "./exercises/clippy/Cargo.toml"
BUILD_SCRIPT_CARGO_TOML_PATH = "./exercises/tests/Cargo.toml"


def temp_file() -> str:
    """Return a temporary binary name unique to this process and thread."""
    return f"./temp_{os.getpid()}_ThreadId{threading.get_ident()}"


def clean() -> None:
    """Remove the temporary binary, if there is one."""
    try:
        os.remove(temp_file())
    except OSError:
        pass


class Mode(Enum):
    """How an exercise is checked."""

    COMPILE = "compile"
    TEST = "test"
    CLIPPY = "clippy"
    BUILD_SCRIPT = "buildscript"


@dataclass(frozen=True)
class ContextLine:
    """A source line shown around the pending marker."""

    line: str
    number: int
    important: bool


@dataclass(frozen=True)
class State:
    """Done when there is no context; pending otherwise."""

    context: tuple[ContextLine, ...] = ()

    def done(self) -> bool:
        return not self.context


@dataclass(frozen=True)
class ExerciseOutput:
    """Captured output of a command."""

    stdout: str
    stderr: str


class CompilationFailed(Exception):
    """The exercise did not compile."""

    def __init__(self, output: ExerciseOutput) -> None:
        super().__init__("compilation failed")
        self.output = output


class RunFailed(Exception):
    """The compiled exercise exited unsuccessfully."""

    def __init__(self, output: ExerciseOutput) -> None:
        super().__init__("run failed")
        self.output = output


@dataclass
class CompiledExercise:
    """A successfully compiled exercise; leaving the context removes the binary."""

    exercise: Exercise

    def run(self) -> ExerciseOutput:
        return self.exercise._run()

    def __enter__(self) -> CompiledExercise:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        clean()


def _output_of(result: subprocess.CompletedProcess) -> ExerciseOutput:
    return ExerciseOutput(
        stdout=(result.stdout or b"").decode("utf-8", errors="replace"),
        stderr=(result.stderr or b"").decode("utf-8", errors="replace"),
    )


def _cargo_toml(name: str) -> str:
    return (
        "[package]\n"
        f'name = "{name}"\n'
        'version = "0.0.1"\n'
        'edition = "2021"\n'
        "[[bin]]\n"
        f'name = "{name}"\n'
        f'path = "{name}.rs"'
    )


def _write_manifest(path: str, name: str) -> None:
    if "NO_EMOJI" in os.environ:
        message = "Failed to write Clippy Cargo.toml file."
    else:
        message = "Failed to write 📎 Clippy 📎 Cargo.toml file."
    try:
        Path(path).write_text(_cargo_toml(name), encoding="utf-8")
    except OSError as err:
        raise OSError(message) from err


def _lines(source: str) -> list[str]:
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _capture(args: list[str]) -> subprocess.CompletedProcess:
    return subprocess.run(args, capture_output=True, check=False)


@dataclass
class Exercise:
    """An exercise as described in the exercise list."""

    name: str
    path: Path
    mode: Mode
    hint: str = ""
    _unused: None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.path = Path(self.path)

    def _rustc(self, *extra: str) -> list[str]:
        return [
            "rustc",
            *extra,
            str(self.path),
            "-o",
            temp_file(),
            *RUSTC_COLOR_ARGS,
            *RUSTC_EDITION_ARGS,
        ]

    def compile(self) -> CompiledExercise:
        """Compile the exercise; raise CompilationFailed on failure."""
        if self.mode is Mode.COMPILE:
            result = _capture(self._rustc())
        elif self.mode is Mode.TEST:
            result = _capture(self._rustc("--test"))
        elif self.mode is Mode.CLIPPY:
            _write_manifest(CLIPPY_CARGO_TOML_PATH, self.name)
            # Build a binary too so the exercise can be run afterwards.
            _capture(self._rustc())
            _capture(
                ["cargo", "clean", "--manifest-path", CLIPPY_CARGO_TOML_PATH, *RUSTC_COLOR_ARGS]
            )
            result = _capture(
                [
                    "cargo",
                    "clippy",
                    "--manifest-path",
                    CLIPPY_CARGO_TOML_PATH,
                    *RUSTC_COLOR_ARGS,
                    "--",
                    "-D",
                    "warnings",
                    "-D",
                    "clippy::float_cmp",
                ]
            )
        else:
            _write_manifest(BUILD_SCRIPT_CARGO_TOML_PATH, self.name)
            result = _capture(
                ["cargo", "test", "--manifest-path", BUILD_SCRIPT_CARGO_TOML_PATH]
            )

        if result.returncode == 0:
            return CompiledExercise(self)
        clean()
        raise CompilationFailed(_output_of(result))

    def _run(self) -> ExerciseOutput:
        if self.mode is Mode.BUILD_SCRIPT:
            return ExerciseOutput(stdout="", stderr="")
        args = [temp_file()]
        if self.mode is Mode.TEST:
            args.append("--show-output")
        result = _capture(args)
        output = _output_of(result)
        if result.returncode != 0:
            raise RunFailed(output)
        return output

    def state(self) -> State:
        """Find the pending marker and the lines around it."""
        source = self.path.read_text(encoding="utf-8")
        if not I_AM_DONE_REGEX.search(source):
            return State()
        lines = _lines(source)
        matched = next(
            (index for index, line in enumerate(lines) if I_AM_DONE_REGEX.search(line)),
            None,
        )
        if matched is None:
            raise ValueError(f"pending marker in {self.path} spans several lines")
        low = max(matched - CONTEXT, 0)
        high = matched + CONTEXT
        return State(
            tuple(
                ContextLine(line=line, number=index + 1, important=index == matched)
                for index, line in enumerate(lines)
                if low <= index <= high
            )
        )

    def looks_done(self) -> bool:
        """Whether the pending marker has been removed."""
        return self.state().done()

    def __str__(self) -> str:
        return str(self.path)


_FIELDS = ("name", "path", "mode", "hint")


def parse_exercise_list(text: str) -> list[Exercise]:
    """Parse the TOML exercise list."""
    data = tomllib.loads(text)
    entries = data.get("exercises")
    if not isinstance(entries, list):
        raise ValueError("missing field `exercises`")
    exercises = []
    for entry in entries:
        missing = [key for key in _FIELDS if key not in entry]
        if missing:
            raise ValueError(f"missing field `{missing[0]}`")
        exercises.append(
            Exercise(
                name=str(entry["name"]),
                path=Path(entry["path"]),
                mode=Mode(entry["mode"]),
                hint=str(entry["hint"]),
            )
        )
    return exercises


def load_exercises(path: str | os.PathLike) -> list[Exercise]:
    """Read and parse an exercise list file."""
    return parse_exercise_list(Path(path).read_text(encoding="utf-8"))