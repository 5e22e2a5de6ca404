"""Blocking execution of external tools with inherited standard streams."""

from __future__ import annotations

import shlex
import subprocess
from typing import Callable, Sequence


class CommandRunner:
    def __init__(self, on_output: Callable[[str], None] | None = None) -> None:
        self.on_output = on_output

    def run(self, argv: Sequence[str], *, quiet: bool = False) -> int:
        command = [str(arg) for arg in argv]
        if not quiet and self.on_output:
            self.on_output(f"[exec] {shlex.join(command)}")
        try:
            completed = subprocess.run(command, check=False)
        except OSError as exc:
            if self.on_output:
                self.on_output(f"Unable to launch {command[0] if command else '<empty>'}: {exc}")
            return exc.errno or 1
        if completed.returncode < 0:
            # Terminated by a signal; report it the way a shell would.
            return 128 - completed.returncode
        return completed.returncode
