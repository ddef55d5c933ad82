#!/usr/bin/env python3

from pathlib import Path

import pytest

from pypatcher.runner import PatchMode, PatchRunner, PatchRunResult

REVERSED_OUTPUT = (
    "patching file adapters.py\n"
    "Reversed (or previously applied) patch detected!  Assuming -R.\n"
)


class FakeRunner(PatchRunner):
    """Stands in for patch(1) and records every invocation."""

    def __init__(self, applied=(), probe_fail=(), apply_fail=()):
        super().__init__("patch")
        self.applied = set(applied)
        self.probe_fail = set(probe_fail)
        self.apply_fail = set(apply_fail)
        self.calls: list[tuple[str, PatchMode, Path]] = []

    def available(self) -> bool:
        return True

    def run(self, patch_path: Path, target_dir: Path, mode: PatchMode) -> PatchRunResult:
        name = patch_path.name
        self.calls.append((name, mode, target_dir))

        returncode = 0
        stdout = "patching file adapters.py\n"
        if mode is PatchMode.PROBE:
            if name in self.probe_fail:
                returncode = 2
            elif name in self.applied:
                stdout = REVERSED_OUTPUT
        elif name in self.apply_fail:
            returncode = 1

        return PatchRunResult(
            stdout=stdout,
            stderr="",
            returncode=returncode,
            command=self.command(mode),
            cwd=str(target_dir),
            mode=mode,
        )

    def mutating_calls(self) -> list[tuple[str, PatchMode]]:
        return [(name, mode) for name, mode, _ in self.calls if mode is not PatchMode.PROBE]


class FakeLocator:
    """Resolves module files against a fixed set of installed modules."""

    def __init__(self, site_dir: Path, installed: list[str]):
        self.site_dir = site_dir
        self.installed = set(installed)
        self.lookups: list[str] = []

    def __call__(self, module_file: str) -> Path | None:
        self.lookups.append(module_file)
        if module_file in self.installed:
            return self.site_dir / module_file
        return None


@pytest.fixture
def patches_dir(tmp_path):
    path = tmp_path / "patches"
    path.mkdir()
    return path


@pytest.fixture
def site_dir(tmp_path):
    path = tmp_path / "site-packages"
    path.mkdir()
    return path


def write_patches(patches_dir: Path, *names: str) -> None:
    for name in names:
        (patches_dir / name).write_text("--- a.py\n+++ a.py\n")


@pytest.fixture
def latin1_patch_program(tmp_path):
    """A patch(1) stand-in that echoes a Latin-1 file name, as patch does for such headers."""
    if not Path("/bin/sh").exists():
        pytest.skip("needs /bin/sh")
    program = tmp_path / "fake-patch"
    program.write_bytes(b"#!/bin/sh\ncat > /dev/null\nprintf 'checking file caf\\351.py\\n'\n")
    program.chmod(0o755)
    return program
