from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Mapping


class Capability(Enum):
    STRIP = "strip"
    SECTION_EDITOR = "section-editor"
    RPATH_SHRINKER = "rpath-shrinker"
    SUPER_STRIP = "super-strip"
    PACKER = "packer"


@dataclass(frozen=True)
class ToolSet:
    """Located external programs keyed by the capability they provide."""

    tools: Mapping[Capability, Path] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tools", MappingProxyType(dict(self.tools)))

    def has(self, capability: Capability) -> bool:
        return capability in self.tools

    def get(self, capability: Capability) -> Path | None:
        return self.tools.get(capability)

    def available(self) -> list[Capability]:
        return [capability for capability in Capability if capability in self.tools]

    def __contains__(self, capability: object) -> bool:
        return capability in self.tools

    def __iter__(self) -> Iterator[Capability]:
        return iter(self.available())

    def __bool__(self) -> bool:
        return bool(self.tools)

    def describe(self) -> str:
        if not self.tools:
            return "none"
        return ", ".join(f"{cap.value}={self.tools[cap]}" for cap in self.available())
