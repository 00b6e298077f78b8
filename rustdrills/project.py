"""Generation of a rust-project.json describing every exercise as a crate."""

from __future__ import annotations

import json
import os
import subprocess
from dataclasses import asdict, dataclass, field
from pathlib import Path


@dataclass
class Crate:
    """One entry of the crates list."""

    root_module: str
    edition: str = "2021"
    deps: list[str] = field(default_factory=list)
    # Lets the language server look inside test blocks.
    cfg: list[str] = field(default_factory=lambda: ["test"])


@dataclass
class RustAnalyzerProject:
    """The contents of rust-project.json."""

    sysroot_src: str = ""
    crates: list[Crate] = field(default_factory=list)

    def to_json(self) -> str:
        """Serialise the project as compact JSON."""
        return json.dumps(asdict(self), separators=(",", ":"), ensure_ascii=False)

    def write_to_disk(self, path: str | os.PathLike = "./rust-project.json") -> None:
        """Write the project file."""
        Path(path).write_text(self.to_json(), encoding="utf-8")

    def path_to_json(self, path: str | os.PathLike) -> None:
        """Add a crate for the path if it is a Rust source file."""
        path = Path(path)
        if path.suffix == ".rs":
            self.crates.append(Crate(root_module=str(path)))

    def exercises_to_json(self, root: str | os.PathLike = "./exercises") -> None:
        """Add a crate for every Rust source file below root."""
        for path in sorted(Path(root).rglob("*")):
            self.path_to_json(path)

    def get_sysroot_src(self) -> None:
        """Find the standard library sources, from RUST_SRC_PATH or the compiler."""
        from_env = os.environ.get("RUST_SRC_PATH")
        if from_env is not None:
            self.sysroot_src = from_env
            return
        raw = subprocess.run(
            ["rustc", "--print", "sysroot"], capture_output=True, check=False
        ).stdout
        text = (raw or b"").decode("utf-8", errors="replace")
        words = text.split()
        toolchain = words[0] if words else text
        print(f"Determined toolchain: {toolchain}\n")
        self.sysroot_src = str(
            Path(toolchain) / "lib" / "rustlib" / "src" / "rust" / "library"
        )