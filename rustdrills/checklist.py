"""Checking every exercise at once and recording the results as JSON."""

from __future__ import annotations

import json
import os
import threading
import time
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from pathlib import Path

from rustdrills.exercise import Exercise
from rustdrills.run import run
from rustdrills.verify import ExerciseFailed

DEFAULT_OUTPUT_PATH = ".github/result/check_result.json"


def _now() -> int:
    return int(time.time())


@dataclass
class ExerciseResult:
    """Whether one exercise passed."""

    name: str
    result: bool


@dataclass
class ExerciseStatistics:
    """Totals over a whole check."""

    total_exercations: int
    total_succeeds: int = 0
    total_failures: int = 0
    total_time: int = 0


@dataclass
class ExerciseCheckList:
    """The results of a whole check, as written to disk."""

    statistics: ExerciseStatistics
    exercises: list[ExerciseResult] = field(default_factory=list)
    user_name: str | None = None

    def to_json(self) -> str:
        """Serialise as pretty-printed JSON."""
        data = {
            "exercises": [asdict(result) for result in self.exercises],
            "user_name": self.user_name,
            "statistics": asdict(self.statistics),
        }
        return json.dumps(data, indent=2, ensure_ascii=False)


def cicv_verify(
    exercises: Iterable[Exercise],
    output_path: str | os.PathLike = DEFAULT_OUTPUT_PATH,
) -> ExerciseCheckList:
    """Run every exercise concurrently, report progress and write the results."""
    exercises = list(exercises)
    started = _now()
    total = len(exercises)
    checklist = ExerciseCheckList(ExerciseStatistics(total_exercations=total))
    lock = threading.Lock()

    def check(exercise: Exercise, exercise_started: int) -> None:
        try:
            run(exercise, True)
            passed = True
        except ExerciseFailed:
            passed = False
        with lock:
            if passed:
                checklist.statistics.total_succeeds += 1
                print(f"{exercise.name}执行成功")
            else:
                checklist.statistics.total_failures += 1
                print(f"{exercise.name}执行失败")
            print(f"总的题目数: {total}")
            print(f"当前做正确的题目数: {checklist.statistics.total_succeeds}")
            print(f"当前修改试卷耗时: {_now() - exercise_started} s")
            checklist.exercises.append(ExerciseResult(name=exercise.name, result=passed))

    with ThreadPoolExecutor() as pool:
        futures = [pool.submit(check, exercise, _now()) for exercise in exercises]
        for future in futures:
            future.result()

    total_time = _now() - started
    print(
        "===============================试卷批改完成,总耗时: "
        f"{total_time} s; =================================="
    )
    checklist.statistics.total_time = total_time
    Path(output_path).write_text(checklist.to_json(), encoding="utf-8")
    return checklist