"""Running a single exercise and resetting it."""

from __future__ import annotations

import subprocess
from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console
from rich.status import Status

from rustdrills.exercise import CompilationFailed, Exercise, Mode, RunFailed
from rustdrills.ui import success, warn
from rustdrills.verify import ExerciseFailed, test


@contextmanager
def _spinner(message: str) -> Iterator[Status]:
    status = Console(highlight=False).status(message)
    status.start()
    try:
        yield status
    finally:
        status.stop()


def run(exercise: Exercise, verbose: bool) -> None:
    """Compile and run an exercise; raise ExerciseFailed if it fails."""
    if exercise.mode in (Mode.TEST, Mode.BUILD_SCRIPT):
        test(exercise, verbose)
    else:
        _compile_and_run(exercise)


def reset(exercise: Exercise) -> None:
    """Stash the learner's changes to the exercise file."""
    try:
        subprocess.Popen(["git", "stash", "--", str(exercise.path)])
    except OSError as err:
        raise ExerciseFailed(exercise) from err


def _compile_and_run(exercise: Exercise) -> None:
    with _spinner(f"Compiling {exercise}...") as status:
        try:
            compiled = exercise.compile()
        except CompilationFailed as err:
            status.stop()
            warn(f"Compilation of {exercise} failed!, Compiler error message:\n")
            print(err.output.stderr)
            raise ExerciseFailed(exercise) from err
        with compiled:
            status.update(f"Running {exercise}...")
            try:
                output = compiled.run()
            except RunFailed as err:
                status.stop()
                print(err.output.stdout)
                print(err.output.stderr)
                warn(f"Ran {exercise} with errors")
                raise ExerciseFailed(exercise) from err
    print(output.stdout)
    success(f"Successfully ran {exercise}")