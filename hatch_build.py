"""Hatchling build hook that embeds git build info into the package."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

BUILD_INFO_PATH = "hecto/_build_info.py"


class CustomBuildHook(BuildHookInterface):
    """Writes hecto/_build_info.py so installed copies know their commit."""

    def initialize(self, version: str, build_data: dict[str, Any]) -> None:
        root = Path(self.root)
        commit = self._git(root, "rev-parse", "HEAD")
        date = self._git(root, "show", "-s", "--format=%cI", "HEAD")
        (root / BUILD_INFO_PATH).write_text(
            "# Generated by hatch_build.py; do not edit.\n"
            f"COMMIT = {commit!r}\n"
            f"DATE = {date!r}\n",
            encoding="utf-8",
        )
        build_data.setdefault("artifacts", []).append(BUILD_INFO_PATH)

    @staticmethod
    def _git(root: Path, *args: str) -> str | None:
        # A missing git or a source tarball build leaves the fields empty
        try:
            out = subprocess.check_output(["git", *args], cwd=str(root), stderr=subprocess.DEVNULL)
        except (subprocess.CalledProcessError, FileNotFoundError, OSError):
            return None
        return out.decode().strip() or None
