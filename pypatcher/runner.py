#!/usr/bin/env python3

import logging
import os
import re
import shutil
import subprocess
from enum import Enum
from pathlib import Path
from typing import NamedTuple

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# patch(1) prints "Reversed (or previously applied) patch detected!"
REVERSED_RE = re.compile(r"Reversed .*patch detected")


class PatchMode(str, Enum):
    PROBE = "probe"
    FORWARD = "forward"
    REVERSE = "reverse"


MODE_ARGS = {
    PatchMode.PROBE: ["-t", "--dry-run"],
    PatchMode.FORWARD: ["--forward"],
    PatchMode.REVERSE: ["--reverse"],
}


class PatchRunResult(BaseModel):
    """Result of one patch program invocation."""

    stdout: str = Field(description="Standard output")
    stderr: str = Field(description="Standard error")
    returncode: int = Field(description="Exit code")
    command: list[str] = Field(description="Command that was executed")
    cwd: str = Field(description="Working directory used")
    mode: PatchMode

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return self.stdout + self.stderr


class ProbeResult(NamedTuple):
    already_applied: bool
    run: PatchRunResult


def detect_already_applied(output: str) -> bool:
    """Tell from dry-run output whether the patch is already in place."""
    return REVERSED_RE.search(output) is not None


def _c_locale_env() -> dict[str, str]:
    # diagnostics must stay untranslated for detect_already_applied
    env = dict(os.environ)
    env["LC_ALL"] = "C"
    env["LANG"] = "C"
    env.pop("LANGUAGE", None)
    return env


class PatchRunner:
    """Runs the external patch program against a module directory."""

    def __init__(self, program: str = "patch"):
        self.program = program

    def available(self) -> bool:
        return shutil.which(self.program) is not None

    def command(self, mode: PatchMode) -> list[str]:
        return [self.program, *MODE_ARGS[mode]]

    def run(self, patch_path: Path, target_dir: Path, mode: PatchMode) -> PatchRunResult:
        """Feed patch_path to the patch program on stdin, inside target_dir."""
        command = self.command(mode)
        logger.debug(f"Running {command} in {target_dir} < {patch_path}")

        try:
            with open(patch_path, "rb") as patch_input:
                result = subprocess.run(
                    command,
                    cwd=target_dir,
                    stdin=patch_input,
                    capture_output=True,
                    text=True,
                    errors="replace",
                    env=_c_locale_env(),
                )
        except OSError as e:
            logger.error(f"Failed to execute {command}: {e}")
            return PatchRunResult(
                stdout="",
                stderr=str(e),
                returncode=127,
                command=command,
                cwd=str(target_dir),
                mode=mode,
            )

        if result.returncode != 0:
            logger.debug(f"{command} exited with {result.returncode}: {result.stdout}{result.stderr}")

        return PatchRunResult(
            stdout=result.stdout,
            stderr=result.stderr,
            returncode=result.returncode,
            command=command,
            cwd=str(target_dir),
            mode=mode,
        )

    def probe(self, patch_path: Path, target_dir: Path) -> ProbeResult:
        """Dry-run the patch and report whether it's already applied."""
        run = self.run(patch_path, target_dir, PatchMode.PROBE)
        return ProbeResult(already_applied=detect_already_applied(run.output), run=run)


def run_patch(
    patch_path: Path, target_dir: Path, mode: PatchMode, program: str = "patch"
) -> PatchRunResult:
    """Convenience function to run the patch program once."""
    return PatchRunner(program).run(patch_path, target_dir, mode)
