import pytest

from rustdrills.cli import (
    build_parser,
    find_exercise,
    list_exercises,
    main,
    rustc_exists,
)
from rustdrills.exercise import Exercise, Mode

PENDING_SOURCE = "// fake_exercise\n\n// I AM NOT DONE\n\nfn main() {\n\n}\n"
FINISHED_SOURCE = "// fake_exercise\n\nfn main() {\n\n}\n"

STATE_INFO = """\
[[exercises]]
name = "pending_exercise"
path = "pending_exercise.rs"
mode = "compile"
hint = ""

[[exercises]]
name = "finished_exercise"
path = "finished_exercise.rs"
mode = "compile"
hint = ""
"""

FAILURE_INFO = """\
[[exercises]]
name = "testFailure"
path = "testFailure.rs"
mode = "test"
hint = "Hello!"
"""


@pytest.fixture
def fake_rustc(tmp_path, monkeypatch):
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    rustc = bin_dir / "rustc"
    rustc.write_text("#!/bin/sh\nexit 0\n")
    rustc.chmod(0o755)
    monkeypatch.setenv("PATH", str(bin_dir))
    return rustc


@pytest.fixture
def state_dir(tmp_path, monkeypatch, fake_rustc):
    work = tmp_path / "state"
    work.mkdir()
    (work / "pending_exercise.rs").write_text(PENDING_SOURCE)
    (work / "finished_exercise.rs").write_text(FINISHED_SOURCE)
    (work / "info.toml").write_text(STATE_INFO)
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def failure_dir(tmp_path, monkeypatch, fake_rustc):
    work = tmp_path / "failure"
    work.mkdir()
    (work / "testFailure.rs").write_text("#[test]\nfn passing() {\n    asset!(true);\n}\n")
    (work / "info.toml").write_text(FAILURE_INFO)
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def exercises(tmp_path):
    pending = tmp_path / "pending_exercise.rs"
    pending.write_text(PENDING_SOURCE)
    finished = tmp_path / "finished_exercise.rs"
    finished.write_text(FINISHED_SOURCE)
    return [
        Exercise("pending_exercise", pending, Mode.COMPILE, ""),
        Exercise("finished_exercise", finished, Mode.COMPILE, ""),
    ]


def test_parser_list_options():
    args = build_parser().parse_args(["list", "-p", "-f", "a,b", "-u"])
    assert args.command == "list"
    assert args.paths is True
    assert args.names is False
    assert args.filter == "a,b"
    assert args.unsolved is True
    assert args.solved is False


def test_parser_watch_and_nocapture():
    args = build_parser().parse_args(["--nocapture", "watch", "--success-hints"])
    assert args.command == "watch"
    assert args.nocapture is True
    assert args.success_hints is True


def test_parser_run_name():
    args = build_parser().parse_args(["run", "testSuccess"])
    assert (args.command, args.name) == ("run", "testSuccess")


def test_rustc_exists_with_fake_rustc(fake_rustc):
    assert rustc_exists() is True


def test_rustc_missing(tmp_path, monkeypatch):
    empty = tmp_path / "empty"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    assert rustc_exists() is False


def test_find_exercise_by_name(exercises):
    assert find_exercise("finished_exercise", exercises).name == "finished_exercise"


def test_find_exercise_next_is_first_pending(exercises):
    assert find_exercise("next", exercises).name == "pending_exercise"


def test_find_exercise_next_when_all_done(exercises):
    with pytest.raises(LookupError, match="no more exercises"):
        find_exercise("next", exercises[1:])


def test_find_exercise_missing(exercises):
    with pytest.raises(LookupError, match="No exercise found for 'nope'!"):
        find_exercise("nope", exercises)


def test_list_all(exercises):
    lines = list_exercises(exercises)
    assert lines[0].split("\t")[0].strip() == "Name"
    body = "\n".join(lines)
    assert "Done" in body
    assert "Pending" in body
    assert lines[-1] == "Progress: You completed 1 / 2 exercises (50.0 %)."


def test_list_solved_only(exercises):
    lines = list_exercises(exercises, solved=True)
    assert len(lines) == 3
    assert "finished_exercise" in lines[1]
    assert "Pending" not in "\n".join(lines)


def test_list_unsolved_only(exercises):
    lines = list_exercises(exercises, unsolved=True)
    assert len(lines) == 3
    assert "pending_exercise" in lines[1]
    assert "Done" not in "\n".join(lines)


def test_list_names_and_filter(exercises):
    lines = list_exercises(exercises, names=True, pattern="PEND")
    assert lines == [
        "pending_exercise",
        "Progress: You completed 1 / 2 exercises (50.0 %).",
    ]


def test_list_paths(exercises):
    lines = list_exercises(exercises, paths=True)
    assert lines[:2] == [str(exercises[0].path), str(exercises[1].path)]


def test_list_comma_separated_filter(exercises):
    lines = list_exercises(exercises, names=True, pattern="pend,finished")
    assert lines[:2] == ["pending_exercise", "finished_exercise"]


def test_version(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out == "v5.5.1\n"


def test_runs_without_arguments(state_dir, capsys):
    assert main([]) == 0
    assert "Thanks for installing" in capsys.readouterr().out


def test_fails_when_in_wrong_dir(tmp_path, monkeypatch, fake_rustc):
    monkeypatch.chdir(tmp_path)
    assert main([]) == 1


def test_fails_without_rustc(state_dir, tmp_path, monkeypatch, capsys):
    empty = tmp_path / "nothing"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    assert main(["list"]) == 1
    assert "We cannot find `rustc`." in capsys.readouterr().out


def test_run_single_test_no_filename(state_dir):
    assert main(["run"]) == 1


def test_reset_no_exercise(capsys):
    assert main(["reset"]) == 1
    assert "positional arguments not provided" in capsys.readouterr().err


def test_run_unknown_exercise(state_dir, capsys):
    assert main(["run", "compNoExercise.rs"]) == 1
    assert "No exercise found for 'compNoExercise.rs'!" in capsys.readouterr().out


def test_get_hint_for_single_test(failure_dir, capsys):
    assert main(["hint", "testFailure"]) == 0
    assert capsys.readouterr().out == "Hello!\n"


def test_list_both_done_and_pending(state_dir, capsys):
    assert main(["list"]) == 0
    out = capsys.readouterr().out
    assert "Done" in out
    assert "Pending" in out


def test_list_without_pending(state_dir, capsys):
    assert main(["list", "--solved"]) == 0
    out = capsys.readouterr().out
    assert "Pending" not in out
    assert "finished_exercise" in out


def test_list_without_done(state_dir, capsys):
    assert main(["list", "--unsolved"]) == 0
    out = capsys.readouterr().out
    assert "Done" not in out
    assert "pending_exercise" in out