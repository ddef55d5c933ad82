#!/usr/bin/env python3

import re
from typing import NamedTuple

PATCH_FILENAME_RE = re.compile(
    r"pm-"
    r"(\w+(?:-\w+)*)-"  # module name, dash separated
    r"([0-9][0-9._]*)-"  # version
    r"([^.]+)"  # topic
    r"\.patch"
)

MODULE_SEPARATOR = "."
MODULE_SUFFIX = ".py"


class PatchFile(NamedTuple):
    """A patch file name decomposed into its target module, version and topic."""
    filename: str
    module_dash: str
    module_name: str
    module_file: str
    version: str
    topic: str


def parse_patch_filename(filename: str) -> PatchFile | None:
    """Decompose a patch file name, or return None if it isn't one of ours.

    ``pm-requests-adapters-2.31.0-retry_fix.patch`` targets module
    ``requests.adapters`` which lives in ``requests/adapters.py``.
    """
    match = PATCH_FILENAME_RE.fullmatch(filename)
    if not match:
        return None

    module_dash, version, topic = match.groups()
    return PatchFile(
        filename=filename,
        module_dash=module_dash,
        module_name=module_dash.replace("-", MODULE_SEPARATOR),
        # path form always uses "/", which is also what module_path expects
        module_file=module_dash.replace("-", "/") + MODULE_SUFFIX,
        version=version,
        topic=topic,
    )
