from __future__ import annotations

from pathlib import Path
from typing import Callable

from ..models.results import OptimizationReport
from ..models.tool_set import ToolSet
from ..services.shrink_pipeline import ShrinkPipeline, file_size


class PassController:
    """Repeat the shrink pipeline until a pass stops paying off or the budget is spent."""

    def __init__(
        self,
        pipeline: ShrinkPipeline,
        on_output: Callable[[str], None] | None = None,
    ) -> None:
        self.pipeline = pipeline
        self.on_output = on_output

    def optimize(self, target: Path | str, tools: ToolSet, passes: int = 1) -> OptimizationReport:
        target = Path(target)
        passes = max(1, int(passes))
        report = OptimizationReport(original_size=file_size(target))

        for index in range(1, passes + 1):
            self._emit(f"Pass {index}/{passes}")
            result = self.pipeline.run_pass(target, tools, index=index)
            report.passes.append(result)
            if not result.shrank:
                self._emit("No further changes; stopping early.")
                report.stop_reason = "early"
                break

        report.final_size = file_size(target)
        self._emit(
            f"Reduced {report.original_size} -> {report.final_size} bytes "
            f"({report.percent_saved():.1f}%)"
        )
        self._emit("Done.")
        return report

    def _emit(self, message: str) -> None:
        if self.on_output:
            self.on_output(message)
