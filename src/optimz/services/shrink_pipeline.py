"""One pass of the ordered shrink steps over a target binary."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol, Sequence

from ..models.results import PassResult, StepResult
from ..models.tool_set import Capability, ToolSet

PER_STEP_POLICY = "per-step"
WHOLE_PASS_POLICY = "whole-pass"
PASS_POLICIES = (PER_STEP_POLICY, WHOLE_PASS_POLICY)

METADATA_SECTIONS = (".comment", ".note", ".note.*", ".gnu_debuglink")


class Runner(Protocol):
    def run(self, argv: Sequence[str], *, quiet: bool = False) -> int: ...


@dataclass(frozen=True)
class ShrinkStep:
    name: str
    capability: Capability
    options: tuple[str, ...] = ()

    def argv(self, tool: Path, target: Path) -> list[str]:
        return [str(tool), *self.options, str(target)]


# Order matters: later steps rely on what earlier ones removed and the packer
# must run last because nothing else can inspect its output.
SHRINK_STEPS: tuple[ShrinkStep, ...] = (
    ShrinkStep("strip-unneeded", Capability.STRIP, ("--strip-unneeded",)),
    ShrinkStep("strip-all", Capability.STRIP, ("--strip-all",)),
    ShrinkStep("strip-debug", Capability.SECTION_EDITOR, ("--strip-debug",)),
    ShrinkStep(
        "remove-metadata",
        Capability.SECTION_EDITOR,
        tuple(f"--remove-section={section}" for section in METADATA_SECTIONS),
    ),
    ShrinkStep("compress-debug", Capability.SECTION_EDITOR, ("--compress-debug-sections",)),
    ShrinkStep("shrink-rpath", Capability.RPATH_SHRINKER, ("--shrink-rpath",)),
    ShrinkStep("super-strip", Capability.SUPER_STRIP),
    ShrinkStep("pack", Capability.PACKER, ("--best", "--lzma")),
)


def file_size(path: Path | str) -> int:
    try:
        return os.stat(path).st_size
    except OSError:
        return 0


def _per_step_shrank(result: PassResult) -> bool:
    return any(step.shrank for step in result.steps)


def _whole_pass_shrank(result: PassResult) -> bool:
    any_success = any(step.returncode == 0 for step in result.steps)
    return any_success and result.size_end <= result.size_start


_POLICY_DECIDERS: dict[str, Callable[[PassResult], bool]] = {
    PER_STEP_POLICY: _per_step_shrank,
    WHOLE_PASS_POLICY: _whole_pass_shrank,
}


class ShrinkPipeline:
    """Run every available shrink step once against a target, measuring each one."""

    def __init__(
        self,
        runner: Runner,
        *,
        policy: str = PER_STEP_POLICY,
        quiet: bool = False,
        steps: Sequence[ShrinkStep] = SHRINK_STEPS,
        on_output: Callable[[str], None] | None = None,
    ) -> None:
        if policy not in _POLICY_DECIDERS:
            raise ValueError(
                f"Unknown pass policy '{policy}'. Expected one of: {', '.join(PASS_POLICIES)}"
            )
        self.runner = runner
        self.policy = policy
        self.quiet = quiet
        self.steps = tuple(steps)
        self.on_output = on_output

    def planned_steps(self, tools: ToolSet) -> list[tuple[ShrinkStep, Path]]:
        return [(step, tools.tools[step.capability]) for step in self.steps if tools.has(step.capability)]

    def run_pass(self, target: Path | str, tools: ToolSet, *, index: int = 1) -> PassResult:
        target = Path(target)
        size_now = file_size(target)
        result = PassResult(index=index, size_start=size_now)

        for step, tool in self.planned_steps(tools):
            argv = step.argv(tool, target)
            size_before = size_now
            returncode = self.runner.run(argv, quiet=self.quiet)
            size_now = file_size(target)
            step_result = StepResult(
                name=step.name,
                argv=argv,
                returncode=returncode,
                size_before=size_before,
                size_after=size_now,
            )
            result.steps.append(step_result)
            if self.on_output:
                if returncode != 0:
                    self.on_output(f"{step.name}: {tool.name} exited with {returncode}")
                self.on_output(f"{step.name}: {size_before} -> {size_now} bytes")

        result.size_end = size_now
        result.shrank = _POLICY_DECIDERS[self.policy](result)
        if self.on_output:
            self.on_output(f"Size: {result.size_end} bytes")
        return result
