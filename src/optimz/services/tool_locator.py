"""Discovery of the external size-reduction programs."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from ..models.tool_set import Capability, ToolSet

# LLVM flavours are preferred over the GNU binutils fallbacks.
DEFAULT_TOOL_NAMES: dict[Capability, list[str]] = {
    Capability.STRIP: ["llvm-strip", "strip"],
    Capability.SECTION_EDITOR: ["llvm-objcopy", "objcopy"],
    Capability.RPATH_SHRINKER: ["patchelf"],
    Capability.SUPER_STRIP: ["sstrip"],
    Capability.PACKER: ["upx"],
}


class NoToolsAvailable(RuntimeError):
    """Raised when not a single shrinking capability could be located."""


def search_dirs_from_env(environ: Mapping[str, str] | None = None) -> list[Path]:
    env = os.environ if environ is None else environ
    raw = env.get("PATH")
    if not raw:
        return []
    return [Path(entry) for entry in raw.split(os.pathsep) if entry]


class ToolLocator:
    def __init__(self, search_dirs: Iterable[Path | str] | None = None) -> None:
        if search_dirs is None:
            self.search_dirs = search_dirs_from_env()
        else:
            self.search_dirs = [Path(entry) for entry in search_dirs if str(entry)]

    def locate(self, names: Sequence[str]) -> Path | None:
        """Return the first name, in preference order, found anywhere on the search path."""
        search_path = os.pathsep.join(str(directory) for directory in self.search_dirs)
        for name in names:
            found = shutil.which(name, path=search_path)
            if found:
                return Path(found).absolute()
        return None

    def detect(
        self,
        preferences: Mapping[Capability, Sequence[str]] | None = None,
    ) -> ToolSet:
        names_by_capability = dict(DEFAULT_TOOL_NAMES)
        if preferences:
            names_by_capability.update({cap: list(names) for cap, names in preferences.items() if names})
        found: dict[Capability, Path] = {}
        for capability in Capability:
            located = self.locate(names_by_capability.get(capability, []))
            if located is not None:
                found[capability] = located
        return ToolSet(found)

    def require_any(
        self,
        preferences: Mapping[Capability, Sequence[str]] | None = None,
    ) -> ToolSet:
        tools = self.detect(preferences)
        if not tools:
            wanted = ", ".join("/".join(names) for names in DEFAULT_TOOL_NAMES.values())
            raise NoToolsAvailable(f"No optimization tools found in PATH ({wanted}).")
        return tools
