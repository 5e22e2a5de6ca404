from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class StepResult:
    name: str
    argv: list[str]
    returncode: int
    size_before: int
    size_after: int

    @property
    def shrank(self) -> bool:
        return self.returncode == 0 and self.size_after < self.size_before


@dataclass
class PassResult:
    index: int
    size_start: int
    size_end: int = 0
    steps: list[StepResult] = field(default_factory=list)
    shrank: bool = False

    @property
    def saved_bytes(self) -> int:
        return self.size_start - self.size_end


@dataclass
class OptimizationReport:
    original_size: int
    final_size: int = 0
    passes: list[PassResult] = field(default_factory=list)
    stop_reason: str = "exhausted"

    @property
    def saved_bytes(self) -> int:
        return self.original_size - self.final_size

    def percent_saved(self) -> float:
        if self.original_size <= 0:
            return 0.0
        return 100.0 * self.saved_bytes / self.original_size
