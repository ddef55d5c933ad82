"""pypatcher - apply a directory of patches to installed Python modules."""

from pypatcher.config import ConfigError, PatcherConfig
from pypatcher.filename import PatchFile, parse_patch_filename
from pypatcher.locator import module_path
from pypatcher.patcher import ModulePatcher, apply_patches
from pypatcher.report import BatchReport, Envelope, ItemResult, finalize_report
from pypatcher.runner import (
    PatchMode,
    PatchRunner,
    PatchRunResult,
    ProbeResult,
    detect_already_applied,
    run_patch,
)

__all__ = [
    "ConfigError",
    "PatcherConfig",
    "PatchFile",
    "parse_patch_filename",
    "module_path",
    "ModulePatcher",
    "apply_patches",
    "BatchReport",
    "Envelope",
    "ItemResult",
    "finalize_report",
    "PatchMode",
    "PatchRunner",
    "PatchRunResult",
    "ProbeResult",
    "detect_already_applied",
    "run_patch",
]
