"""Lightweight persistence for optimizer settings."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import json
from pathlib import Path
from typing import Any

from .models.tool_set import Capability
from .services.backup_guard import DEFAULT_BACKUP_SUFFIX
from .services.shrink_pipeline import PASS_POLICIES, PER_STEP_POLICY
from .services.tool_locator import DEFAULT_TOOL_NAMES


def _default_tool_names() -> dict[str, list[str]]:
    return {capability.value: list(names) for capability, names in DEFAULT_TOOL_NAMES.items()}


def _string_list(value: Any) -> list[str] | None:
    """Accept a single string or a list of strings; anything else is invalid."""
    if isinstance(value, str):
        return [value] if value else None
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    return None


@dataclass
class OptimizerConfig:
    passes: int = 1
    policy: str = PER_STEP_POLICY
    quiet: bool = False
    verify: bool = False
    backup_suffix: str = DEFAULT_BACKUP_SUFFIX
    search_path: list[str] | None = None
    tool_names: dict[str, list[str]] = field(default_factory=_default_tool_names)

    def tool_preferences(self) -> dict[Capability, list[str]]:
        preferences: dict[Capability, list[str]] = {}
        for key, names in self.tool_names.items():
            try:
                capability = Capability(key)
            except ValueError:
                continue
            if names:
                preferences[capability] = [str(name) for name in names]
        return preferences


class ConfigManager:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self, *, create_missing: bool = True) -> OptimizerConfig:
        if not self.path.exists():
            return self._save_default() if create_missing else OptimizerConfig()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            return OptimizerConfig()
        if not isinstance(data, dict):
            return OptimizerConfig()

        merged: dict[str, Any] = asdict(OptimizerConfig())
        merged.update({k: v for k, v in data.items() if k in merged})
        config = OptimizerConfig(**merged)
        return self._normalize(config)

    def save(self, config: OptimizerConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(asdict(config), indent=2), encoding="utf-8")

    def _save_default(self) -> OptimizerConfig:
        config = OptimizerConfig()
        self.save(config)
        return config

    def _normalize(self, config: OptimizerConfig) -> OptimizerConfig:
        try:
            config.passes = max(1, int(config.passes))
        except (TypeError, ValueError):
            config.passes = 1
        if config.policy not in PASS_POLICIES:
            config.policy = PER_STEP_POLICY
        if not config.backup_suffix or not isinstance(config.backup_suffix, str):
            config.backup_suffix = DEFAULT_BACKUP_SUFFIX
        if config.search_path is not None:
            config.search_path = _string_list(config.search_path)
        tool_names = _default_tool_names()
        if isinstance(config.tool_names, dict):
            for key, names in config.tool_names.items():
                normalized = _string_list(names)
                if isinstance(key, str) and normalized is not None:
                    tool_names[key] = normalized
        config.tool_names = tool_names
        config.quiet = bool(config.quiet)
        config.verify = bool(config.verify)
        return config
