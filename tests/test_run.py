import subprocess
from unittest import mock

import pytest

from rustdrills.exercise import Exercise, Mode, temp_file
from rustdrills.run import reset, run
from rustdrills.verify import ExerciseFailed

PENDING = "// fake_exercise\n\n// I AM NOT DONE\n\nfn main() {\n\n}\n"
FINISHED = "fn main() {\n}\n"


def make_exercise(tmp_path, name, source, mode=Mode.COMPILE):
    path = tmp_path / f"{name}.rs"
    path.write_text(source, encoding="utf-8")
    return Exercise(name=name, path=path, mode=mode, hint="Hello!")


def fake_runner(compile_code=0, run_code=0, stdout=b"", stderr=b""):
    calls = []

    def fake(args, **kwargs):
        calls.append(list(args))
        code = compile_code if args[0] in ("rustc", "cargo") else run_code
        return subprocess.CompletedProcess(args, code, stdout=stdout, stderr=stderr)

    return fake, calls


def test_run_compile_success(tmp_path, capsys):
    exercise = make_exercise(tmp_path, "compSuccess", FINISHED)
    fake, calls = fake_runner(stdout=b"program says hi")
    with mock.patch("subprocess.run", side_effect=fake):
        assert run(exercise, False) is None
    assert calls[1] == [temp_file()]
    out = capsys.readouterr().out
    assert "program says hi" in out
    assert "Successfully ran" in out


def test_run_compile_failure(tmp_path, capsys):
    exercise = make_exercise(tmp_path, "compFailure", FINISHED)
    fake, calls = fake_runner(compile_code=1, stderr=b"expected pattern")
    with mock.patch("subprocess.run", side_effect=fake):
        with pytest.raises(ExerciseFailed) as info:
            run(exercise, False)
    assert info.value.exercise is exercise
    assert len(calls) == 1
    out = capsys.readouterr().out
    assert "Compiler error message" in out
    assert "expected pattern" in out


def test_run_binary_failure(tmp_path, capsys):
    exercise = make_exercise(tmp_path, "crash", FINISHED)
    fake, _ = fake_runner(run_code=101, stderr=b"panicked")
    with mock.patch("subprocess.run", side_effect=fake):
        with pytest.raises(ExerciseFailed):
            run(exercise, False)
    out = capsys.readouterr().out
    assert "with errors" in out
    assert "panicked" in out


def test_run_compile_exercise_does_not_prompt(tmp_path, capsys):
    exercise = make_exercise(tmp_path, "pending_exercise", PENDING)
    fake, _ = fake_runner()
    with mock.patch("subprocess.run", side_effect=fake):
        run(exercise, False)
    assert "I AM NOT DONE" not in capsys.readouterr().out


def test_run_test_exercise_does_not_prompt(tmp_path, capsys):
    exercise = make_exercise(tmp_path, "pending_test_exercise", PENDING, Mode.TEST)
    fake, _ = fake_runner()
    with mock.patch("subprocess.run", side_effect=fake):
        run(exercise, False)
    assert "I AM NOT DONE" not in capsys.readouterr().out


def test_run_test_with_output(tmp_path, capsys):
    exercise = make_exercise(tmp_path, "testSuccess", FINISHED, Mode.TEST)
    fake, _ = fake_runner(stdout=b"THIS TEST TOO SHALL PASS")
    with mock.patch("subprocess.run", side_effect=fake):
        run(exercise, True)
    assert "THIS TEST TOO SHALL PASS" in capsys.readouterr().out


def test_run_test_without_output(tmp_path, capsys):
    exercise = make_exercise(tmp_path, "testSuccess", FINISHED, Mode.TEST)
    fake, _ = fake_runner(stdout=b"THIS TEST TOO SHALL PASS")
    with mock.patch("subprocess.run", side_effect=fake):
        run(exercise, False)
    assert "THIS TEST TOO SHALL PASS" not in capsys.readouterr().out


def test_run_test_failure(tmp_path):
    exercise = make_exercise(tmp_path, "testNotPassed", FINISHED, Mode.TEST)
    fake, _ = fake_runner(run_code=101)
    with mock.patch("subprocess.run", side_effect=fake):
        with pytest.raises(ExerciseFailed):
            run(exercise, False)


def test_reset_stashes_file(tmp_path):
    exercise = make_exercise(tmp_path, "intro1", FINISHED)
    with mock.patch("subprocess.Popen") as popen:
        assert reset(exercise) is None
    popen.assert_called_once_with(["git", "stash", "--", str(exercise.path)])


def test_reset_failure_raises(tmp_path):
    exercise = make_exercise(tmp_path, "intro1", FINISHED)
    with mock.patch("subprocess.Popen", side_effect=FileNotFoundError("git")):
        with pytest.raises(ExerciseFailed) as info:
            reset(exercise)
    assert info.value.exercise is exercise