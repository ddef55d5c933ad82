#!/usr/bin/env python3

"""Apply or reverse a directory of module patches on the installed modules."""

import logging
import os
from collections.abc import Callable
from pathlib import Path

from pypatcher.config import PatcherConfig
from pypatcher.filename import PatchFile, parse_patch_filename
from pypatcher.locator import module_path
from pypatcher.report import BatchReport, Envelope, finalize_report
from pypatcher.runner import PatchMode, PatchRunner

logger = logging.getLogger(__name__)

Locator = Callable[[str], Path | None]


class ModulePatcher:
    """Walks a patches directory and brings each installed module to the requested state."""

    def __init__(
        self,
        config: PatcherConfig,
        locate: Locator = module_path,
        runner: PatchRunner | None = None,
        logger: logging.Logger = logger,
    ):
        self.config = config
        self.locate = locate
        self.runner = runner or PatchRunner(config.patch_program)
        self.log = logger
        self.report = BatchReport()

    def run(self) -> Envelope:
        patches_dir = self.config.normalized_patches_dir()
        if not patches_dir:
            return Envelope(status=400, message="Please specify patches_dir")

        if not self.runner.available():
            return Envelope(
                status=412,
                message=f"Required program '{self.runner.program}' not found in PATH",
            )

        self.log.debug(f"Opening patches_dir '{patches_dir}' ...")
        try:
            filenames = sorted(os.listdir(patches_dir))
        except OSError as e:
            return Envelope(
                status=500, message=f"Can't open patches_dir '{patches_dir}': {e.strerror or e}"
            )

        for filename in filenames:
            self.process_file(Path(patches_dir), filename)

        return finalize_report(self.report.results)

    def process_file(self, patches_dir: Path, filename: str) -> None:
        self.log.debug(f"Considering file '{filename}' ...")
        patch_file = parse_patch_filename(filename)
        patch_path = patches_dir / filename
        if patch_file is None:
            self.log.debug(f"Skipped file '{filename}' (doesn't match pattern)")
            return

        mod_path = self.locate(patch_file.module_file)
        if not mod_path:
            self.log.info(
                f"Skipping patch '{filename}' (module {patch_file.module_name} not installed)"
            )
            return
        mod_dir = Path(mod_path).parent

        try:
            with open(patch_path, "rb"):
                pass
        except OSError as e:
            self.log.error(f"Skipping patch '{filename}' (can't open file: {e.strerror or e})")
            self.report.add_result(filename, 500, f"Can't open: {e.strerror or e}")
            return

        probe = self.runner.probe(patch_path, mod_dir)
        if not probe.run.ok:
            self.log.error(
                f"Skipping patch '{filename}' (can't probe whether applied: exit status {probe.run.returncode})"
            )
            self.report.add_result(
                filename, 500, f"Can't probe: exit status {probe.run.returncode}"
            )
            return

        if self.config.reverse:
            self._reverse(patch_file, patch_path, mod_dir, probe.already_applied)
        else:
            self._apply(patch_file, patch_path, mod_dir, probe.already_applied)

    def _apply(
        self, patch_file: PatchFile, patch_path: Path, mod_dir: Path, already_applied: bool
    ) -> None:
        filename = patch_file.filename
        if already_applied:
            self.log.info(f"Skipping patch '{filename}' (already applied)")
            self.report.add_result(filename, 304, "Already applied")
            return

        if self.config.dry_run:
            self.log.info(f"[DRY-RUN] Applying patch '{filename}' to {patch_file.module_name}")
            self.report.add_result(filename, 200, "Applying (dry-run)")
            return

        result = self.runner.run(patch_path, mod_dir, PatchMode.FORWARD)
        if not result.ok:
            self.log.error(
                f"Skipping patch '{filename}' (can't apply: exit status {result.returncode})"
            )
            self.report.add_result(filename, 500, f"Can't apply: exit status {result.returncode}")
            return

        self.log.info(f"Applied patch '{filename}' to {patch_file.module_name}")
        self.report.add_result(filename, 200, "Applied")

    def _reverse(
        self, patch_file: PatchFile, patch_path: Path, mod_dir: Path, already_applied: bool
    ) -> None:
        filename = patch_file.filename
        if not already_applied:
            self.log.info(f"Skipping patch '{filename}' (already reversed)")
            self.report.add_result(filename, 304, "Already reversed")
            return

        if self.config.dry_run:
            self.log.info(
                f"[DRY-RUN] Reverse-applying patch '{filename}' to {patch_file.module_name}"
            )
            self.report.add_result(filename, 200, "Reverse-applying (dry-run)")
            return

        result = self.runner.run(patch_path, mod_dir, PatchMode.REVERSE)
        if not result.ok:
            self.log.error(
                f"Skipping patch '{filename}' (can't reverse-apply: exit status {result.returncode})"
            )
            self.report.add_result(
                filename, 500, f"Can't reverse-apply: exit status {result.returncode}"
            )
            return

        self.log.info(f"Reverse-applied patch '{filename}' to {patch_file.module_name}")
        self.report.add_result(filename, 200, "Reverse-applied")


def apply_patches(
    config: PatcherConfig,
    *,
    locate: Locator = module_path,
    runner: PatchRunner | None = None,
    logger: logging.Logger = logger,
) -> Envelope:
    """Apply (or with ``config.reverse``, reverse) every matching patch.

    Returns the run's envelope. Whole-run problems (no patches_dir, missing
    patch program, unreadable directory) give an error envelope without a
    payload; per-file outcomes are collected into the payload in filename
    order.
    """
    return ModulePatcher(config, locate=locate, runner=runner, logger=logger).run()
