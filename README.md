# rustdrills

A checker for a collection of small Rust exercises. It reads the exercise list
from `info.toml`, compiles each exercise with `rustc` (or runs `cargo clippy` /
`cargo test` for the exercises that need it), and shows how far along you are.

An exercise counts as pending for as long as its file still holds an
`// I AM NOT DONE` comment (a line that starts, after optional whitespace,
with `//` or `///` followed by `I AM NOT DONE`). Remove the comment once the
exercise compiles and its tests pass, and the checker moves on to the next one.

## Requirements

- Python 3.11 or later
- A Rust toolchain with `rustc` on your `PATH` (`cargo` as well for the clippy
  and build-script exercises)

## Installation

```
pip install .
```

## The exercise list

Every command except `--version` must be run from a directory that holds
`info.toml`; otherwise it exits with status 1. The file lists the exercises in
their recommended order:

```toml
[[exercises]]
name = "vecs1"
path = "exercises/vecs/vecs1.rs"
mode = "test"
hint = "Use the vec! macro."
```

`mode` is one of:

- `compile` – build with `rustc` and run the binary
- `test` – build with `rustc --test` and run the test harness
- `clippy` – write `exercises/clippy/Cargo.toml` and run `cargo clippy`
  with warnings denied
- `buildscript` – write `exercises/tests/Cargo.toml` and run `cargo test`

Compiled binaries are written to a temporary file in the current directory
and removed again once the exercise has been run.

## Usage

```
rustdrills                  # welcome message and a short introduction
rustdrills --version        # print the version
rustdrills watch            # re-check exercises whenever a file changes
rustdrills verify           # check all exercises in the recommended order
rustdrills run NAME         # compile and run (or test) one exercise
rustdrills run next         # run the first exercise that is not done yet
rustdrills hint NAME        # show the hint for an exercise
rustdrills reset NAME       # discard your changes with `git stash -- <file>`
rustdrills list             # table of exercises with their status
rustdrills lsp              # write rust-project.json for rust-analyzer
rustdrills cicvverify       # grade all exercises and write a JSON report
```

Add `--nocapture` before the subcommand to see the output of test exercises.
`verify`, `run` and `reset` exit with status 1 when the exercise fails (or,
for `verify`, at the first exercise that fails or is still pending); an
unknown exercise name also gives status 1.

### Watch mode

`rustdrills watch` verifies the exercises one by one and stops at the first one
that fails or is still pending. After each change to a `.rs` file under
`exercises/` it checks the changed exercise first, then the other pending ones.
While it runs, you can type:

- `hint` – show the hint for the current exercise
- `clear` – clear the screen
- `quit` – leave watch mode
- `!<cmd>` – run a command, e.g. `!rustc --explain E0381`
- `help` – list these commands

Pass `--success-hints` to see each exercise's hint as soon as it compiles.

### Listing exercises

```
rustdrills list --paths            # paths only
rustdrills list --names            # names only
rustdrills list --filter vec,str   # names or paths containing any pattern
rustdrills list --solved           # only exercises that are done
rustdrills list --unsolved         # only exercises still pending
```

The listing ends with a line giving how many exercises are done.

### Grading report

`rustdrills cicvverify` runs every exercise concurrently, prints progress as
it goes, and writes the outcome for each exercise together with totals and
elapsed time to `.github/result/check_result.json`. The `.github/result`
directory must already exist.

### Editor support

`rustdrills lsp` adds every `.rs` file under `exercises/` as a crate to
`rust-project.json` in the current directory, with the standard library
sources taken from `RUST_SRC_PATH` or from `rustc --print sysroot`.

## Environment

Set `NO_EMOJI` to print plain-text markers instead of emoji. Set
`RUST_SRC_PATH` to tell `rustdrills lsp` where the standard library sources
are instead of asking `rustc`.

## What is not included

The package is the checker only. It ships no exercises and no `info.toml`;
you supply the exercise files and the list describing them.

## Running the tests

```
pip install .[test]
pytest
```