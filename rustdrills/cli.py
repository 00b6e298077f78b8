"""Command-line entry point."""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from rustdrills.checklist import cicv_verify
from rustdrills.exercise import Exercise, load_exercises
from rustdrills.project import RustAnalyzerProject
from rustdrills.run import reset, run
from rustdrills.verify import ExerciseFailed, verify
from rustdrills.watch import WatchStatus
from rustdrills.watch import watch as watch_exercises

VERSION = "5.5.1"
INFO_FILE = "info.toml"

WELCOME = """\
       welcome to...
   ___ _   _ ___ _____ ___  ___ ___ _    _    ___
  | _ \\ | | / __|_   _|   \\| _ \\_ _| |  | |  / __|
  |   / |_| \\__ \\ | | | |) |   /| || |__| |__\\__ \\
  |_|_\\\\___/|___/ |_| |___/|_|_\\___|____|____|___/"""

DEFAULT_OUT = """\
Thanks for installing rustdrills!

Is this your first time? Don't worry, these drills are made for beginners.
Before you start, here are a few notes on how things work:

1. You solve exercises. Each one usually has a mistake in it that stops it
   from compiling or from passing its tests; sometimes the mistake is in the
   logic rather than the syntax. Your job is to find it and fix it. Once the
   exercise compiles and passes, you can move on to the next one.
2. In watch mode (recommended) the first unfinished exercise is checked right
   away. An error message appearing immediately is part of the exercise: open
   the file in your editor and start investigating.
3. Stuck? Type 'hint' in watch mode, or run `rustdrills hint exercise_name`.
4. To use `rust-analyzer` with the exercises, run `rustdrills lsp`.

Got all that? Great! Run `rustdrills watch` to get the first exercise.
Make sure to have your editor open!"""

FINISH_LINE = """\
+----------------------------------------------------+
|           You made it to the finish line!          |
+----------------------------------------------------+

We hope you enjoyed learning about the various aspects of Rust!
If you noticed any issues, please report them.
You can also contribute your own exercises to help others learn!"""


class _Parser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str) -> None:
        prefix = "the following arguments are required:"
        if message.startswith(prefix):
            missing = message[len(prefix):].strip()
            self.exit(1, f"Required positional arguments not provided:\n    {missing}\n")
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser with all subcommands."""
    parser = _Parser(
        prog="rustdrills",
        description="A collection of small exercises to get you used to reading and writing Rust code",
    )
    parser.add_argument(
        "--nocapture", action="store_true", help="show outputs from the test exercises"
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="show the executable version"
    )
    commands = parser.add_subparsers(dest="command")

    commands.add_parser("verify", help="verifies all exercises according to the recommended order")

    watch_parser = commands.add_parser("watch", help="reruns `verify` when files were edited")
    watch_parser.add_argument(
        "--success-hints", action="store_true", help="show hints on success"
    )

    for name, text in (
        ("run", "runs/tests a single exercise"),
        ("reset", 'resets a single exercise using "git stash -- <filename>"'),
        ("hint", "returns a hint for the given exercise"),
    ):
        sub = commands.add_parser(name, help=text)
        sub.add_argument("name", help="the name of the exercise")

    list_parser = commands.add_parser("list", help="lists the available exercises")
    list_parser.add_argument(
        "-p", "--paths", action="store_true", help="show only the paths of the exercises"
    )
    list_parser.add_argument(
        "-n", "--names", action="store_true", help="show only the names of the exercises"
    )
    list_parser.add_argument(
        "-f",
        "--filter",
        default=None,
        help="a string to match exercise names; comma separated patterns are acceptable",
    )
    list_parser.add_argument(
        "-u", "--unsolved", action="store_true", help="display only exercises not yet solved"
    )
    list_parser.add_argument(
        "-s", "--solved", action="store_true", help="display only exercises that have been solved"
    )

    commands.add_parser("lsp", help="enable rust-analyzer for exercises")
    commands.add_parser("cicvverify", help="check every exercise and record the results")
    return parser


def rustc_exists() -> bool:
    """Whether `rustc --version` runs successfully."""
    try:
        result = subprocess.run(
            ["rustc", "--version"], stdout=subprocess.DEVNULL, check=False
        )
    except OSError:
        return False
    return result.returncode == 0


def find_exercise(name: str, exercises: Sequence[Exercise]) -> Exercise:
    """Find an exercise by name, or the first unfinished one for "next"."""
    if name == "next":
        found = next((e for e in exercises if not e.looks_done()), None)
        if found is None:
            raise LookupError(
                "🎉 Congratulations! You have done all the exercises!\n"
                "🔚 There are no more exercises to do next!"
            )
        return found
    found = next((e for e in exercises if e.name == name), None)
    if found is None:
        raise LookupError(f"No exercise found for '{name}'!")
    return found


def list_exercises(
    exercises: Sequence[Exercise],
    paths: bool = False,
    names: bool = False,
    pattern: str | None = None,
    unsolved: bool = False,
    solved: bool = False,
) -> list[str]:
    """Return the lines of the exercise listing, ending with the progress line."""
    lines: list[str] = []
    if not paths and not names:
        lines.append(f"{'Name':<17}\t{'Path':<46}\t{'Status':<7}")
    filters = [f for f in (pattern or "").lower().split(",") if f.strip()]
    done_count = 0
    for exercise in exercises:
        fname = str(exercise.path)
        matches = any(f in exercise.name or f in fname for f in filters)
        done = exercise.looks_done()
        if done:
            done_count += 1
        status = "Done" if done else "Pending"
        wanted = (done and solved) or (not done and unsolved) or (not solved and not unsolved)
        if wanted and (matches or pattern is None):
            if paths:
                lines.append(fname)
            elif names:
                lines.append(exercise.name)
            else:
                lines.append(f"{exercise.name:<17}\t{fname:<46}\t{status:<7}")
    total = len(exercises)
    percentage = done_count / total * 100.0 if total else float("nan")
    lines.append(
        f"Progress: You completed {done_count} / {total} exercises ({percentage:.1f} %)."
    )
    return lines


def _print_lines(lines: list[str]) -> int:
    for line in lines:
        try:
            sys.stdout.write(line + "\n")
            sys.stdout.flush()
        except BrokenPipeError:
            return 0
        except OSError:
            return 1
    return 0


def _lsp() -> int:
    project = RustAnalyzerProject()
    try:
        project.get_sysroot_src()
    except OSError:
        print("Couldn't find toolchain path, do you have `rustc` installed?")
        return 1
    project.exercises_to_json()
    if not project.crates:
        print("Failed find any exercises, make sure you're in the exercises folder")
        return 0
    try:
        project.write_to_disk()
    except OSError:
        print("Failed to write rust-project.json to disk for rust-analyzer")
        return 0
    print("Successfully generated rust-project.json")
    print("rust-analyzer will now parse exercises, restart your language server or editor")
    return 0


def _watch(exercises: list[Exercise], verbose: bool, success_hints: bool) -> int:
    try:
        status = watch_exercises(exercises, verbose, success_hints)
    except OSError as err:
        print(f"Error: Could not watch your progress. Error message was {err!r}.")
        print(
            "Most likely you've run out of disk space or your 'inotify limit' has been reached."
        )
        return 1
    if status is WatchStatus.FINISHED:
        emoji = "★" if "NO_EMOJI" in os.environ else "🎉"
        print(f"{emoji} All exercises completed! {emoji}")
        print(f"\n{FINISH_LINE}\n")
    else:
        print("We hope you're enjoying learning about Rust!")
        print(
            "If you want to continue working on the exercises at a later point, "
            "you can simply run `rustdrills watch` again"
        )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; return the exit status."""
    try:
        args = build_parser().parse_args(argv)
    except SystemExit as err:
        code = err.code
        if isinstance(code, int):
            return code
        return 0 if code is None else 1

    if args.version:
        print(f"v{VERSION}")
        return 0

    if args.command is None:
        print(f"\n{WELCOME}\n")

    if not Path(INFO_FILE).exists():
        print(f"{sys.argv[0]} must be run from the exercises directory")
        print("Try `cd rustdrills/`!")
        return 1

    if not rustc_exists():
        print("We cannot find `rustc`.")
        print("Try running `rustc --version` to diagnose your problem.")
        print("For instructions on how to install Rust, check the README.")
        return 1

    exercises = load_exercises(INFO_FILE)
    verbose = args.nocapture

    if args.command is None:
        print(f"{DEFAULT_OUT}\n")
        return 0

    if args.command == "list":
        return _print_lines(
            list_exercises(
                exercises,
                paths=args.paths,
                names=args.names,
                pattern=args.filter,
                unsolved=args.unsolved,
                solved=args.solved,
            )
        )

    if args.command in ("run", "reset", "hint"):
        try:
            exercise = find_exercise(args.name, exercises)
        except LookupError as err:
            print(err.args[0])
            return 1
        if args.command == "hint":
            print(exercise.hint)
            return 0
        action = run if args.command == "run" else reset
        try:
            if args.command == "run":
                action(exercise, verbose)
            else:
                action(exercise)
        except ExerciseFailed:
            return 1
        return 0

    if args.command == "verify":
        try:
            verify(exercises, (0, len(exercises)), verbose, False)
        except ExerciseFailed:
            return 1
        return 0

    if args.command == "cicvverify":
        try:
            cicv_verify(exercises)
        except OSError as err:
            print(f"Failed to write the check results: {err}")
            return 1
        return 0

    if args.command == "lsp":
        return _lsp()

    return _watch(exercises, verbose, args.success_hints)