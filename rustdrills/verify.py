"""Checking exercises in order and reporting how far the learner has come."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.status import Status
from rich.text import Text

from rustdrills.exercise import (
    CompilationFailed,
    CompiledExercise,
    Exercise,
    Mode,
    RunFailed,
)
from rustdrills.ui import success, warn

_BAR_WIDTH = 60
_SEPARATOR = "=" * 20


class ExerciseFailed(Exception):
    """An exercise did not compile, failed when run, or is still marked pending."""

    def __init__(self, exercise: Exercise) -> None:
        super().__init__(f"{exercise} failed")
        self.exercise = exercise


def _console() -> Console:
    return Console(highlight=False, soft_wrap=True)


@contextmanager
def _spinner(message: str) -> Iterator[Status]:
    status = _console().status(message)
    status.start()
    try:
        yield status
    finally:
        status.stop()


def _bar(position: int, total: int) -> str:
    filled = _BAR_WIDTH if total <= 0 else min(_BAR_WIDTH, _BAR_WIDTH * position // total)
    if filled >= _BAR_WIDTH:
        return "#" * _BAR_WIDTH
    return "#" * filled + ">" + "-" * (_BAR_WIDTH - filled - 1)


def _show_progress(position: int, total: int, percentage: float) -> None:
    line = Text("Progress: [")
    line.append(_bar(position, total), style="green")
    line.append(f"] {position}/{total} ({percentage:.1f} %)")
    _console().print(line)


def verify(
    exercises: Iterable[Exercise],
    progress: tuple[int, int],
    verbose: bool,
    success_hints: bool,
) -> None:
    """Check each exercise in turn; raise ExerciseFailed at the first that is not done."""
    num_done, total = progress
    percentage = num_done / total * 100.0 if total else 0.0
    position = num_done
    _show_progress(position, total, percentage)

    for exercise in exercises:
        if exercise.mode in (Mode.TEST, Mode.BUILD_SCRIPT):
            finished = _compile_and_test(exercise, True, verbose, success_hints)
        elif exercise.mode is Mode.COMPILE:
            finished = _compile_and_run_interactively(exercise, success_hints)
        else:
            finished = _compile_only(exercise, success_hints)
        if not finished:
            raise ExerciseFailed(exercise)
        if total:
            percentage += 100.0 / total
        position += 1
        _show_progress(position, total, percentage)


def test(exercise: Exercise, verbose: bool) -> None:
    """Compile and run the exercise's test harness without prompting."""
    _compile_and_test(exercise, False, verbose, False)


def _compile(exercise: Exercise, status: Status) -> CompiledExercise:
    try:
        return exercise.compile()
    except CompilationFailed as err:
        status.stop()
        warn(f"Compiling of {exercise} failed! Please try again. Here's the output:")
        print(err.output.stderr)
        raise ExerciseFailed(exercise) from err


def _compile_only(exercise: Exercise, success_hints: bool) -> bool:
    with _spinner(f"Compiling {exercise}...") as status:
        with _compile(exercise, status):
            pass
    return prompt_for_completion(exercise, None, success_hints)


def _compile_and_run_interactively(exercise: Exercise, success_hints: bool) -> bool:
    with _spinner(f"Compiling {exercise}...") as status:
        with _compile(exercise, status) as compiled:
            status.update(f"Running {exercise}...")
            try:
                output = compiled.run()
            except RunFailed as err:
                status.stop()
                warn(f"Ran {exercise} with errors")
                print(err.output.stdout)
                print(err.output.stderr)
                raise ExerciseFailed(exercise) from err
    return prompt_for_completion(exercise, output.stdout, success_hints)


def _compile_and_test(
    exercise: Exercise, interactive: bool, verbose: bool, success_hints: bool
) -> bool:
    with _spinner(f"Testing {exercise}...") as status:
        with _compile(exercise, status) as compiled:
            try:
                output = compiled.run()
            except RunFailed as err:
                status.stop()
                warn(f"Testing of {exercise} failed! Please try again. Here's the output:")
                print(err.output.stdout)
                raise ExerciseFailed(exercise) from err
    if verbose:
        print(output.stdout)
    if interactive:
        return prompt_for_completion(exercise, None, success_hints)
    return True


_SUCCESS_LABELS = {
    Mode.COMPILE: "Successfully ran {}!",
    Mode.TEST: "Successfully tested {}!",
    Mode.CLIPPY: "Successfully compiled {}!",
    Mode.BUILD_SCRIPT: "Successfully compiled {}!",
}


def _success_message(mode: Mode, no_emoji: bool) -> str:
    if mode is Mode.COMPILE:
        return "The code is compiling!"
    if mode is Mode.TEST:
        return "The code is compiling, and the tests pass!"
    if mode is Mode.CLIPPY:
        if no_emoji:
            return "The code is compiling, and Clippy is happy!"
        return "The code is compiling, and 📎 Clippy 📎 is happy!"
    return "Build script works!"


def prompt_for_completion(
    exercise: Exercise, prompt_output: str | None, success_hints: bool
) -> bool:
    """Return True if the exercise is done; otherwise show where the marker is and return False."""
    state = exercise.state()
    if state.done():
        return True

    success(_SUCCESS_LABELS[exercise.mode].format(exercise))
    no_emoji = "NO_EMOJI" in os.environ
    message = _success_message(exercise.mode, no_emoji)
    console = _console()
    separator = Text(_SEPARATOR, style="bold")

    console.print()
    if no_emoji:
        console.print(Text(f"~*~ {message} ~*~"))
    else:
        console.print(Text(f"🎉 🎉  {message} 🎉 🎉"))
    console.print()

    if prompt_output is not None:
        console.print("Output:")
        console.print(separator)
        console.print(Text(prompt_output))
        console.print(separator)
        console.print()
    if success_hints:
        console.print("Hints:")
        console.print(separator)
        console.print(Text(exercise.hint))
        console.print(separator)
        console.print()

    console.print("You can keep working on this exercise,")
    console.print(
        Text.assemble(
            "or jump into the next one by removing the ",
            ("`I AM NOT DONE`", "bold"),
            " comment:",
        )
    )
    console.print()
    for context_line in state.context:
        console.print(
            Text.assemble(
                (f"{context_line.number:>2}", "bold blue"),
                " ",
                ("|", "blue"),
                "  ",
                (context_line.line, "bold") if context_line.important else context_line.line,
            )
        )
    return False