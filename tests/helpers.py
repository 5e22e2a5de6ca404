import stat
from pathlib import Path
from typing import List

ELF_HEADER = b"\x7fELF\x02\x01\x01" + b"\x00" * 9


def make_elf(path: Path, size: int = 10_000, *, executable: bool = True) -> Path:
    path.write_bytes(ELF_HEADER + b"\xaa" * (size - len(ELF_HEADER)))
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR if executable else mode & ~(stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))
    return path


def make_tool(directory: Path, name: str, body: str = "exit 0") -> Path:
    """Write a tiny /bin/sh program standing in for an external shrinking tool."""
    directory.mkdir(parents=True, exist_ok=True)
    tool = directory / name
    tool.write_text(
        "#!/bin/sh\nPATH=/usr/bin:/bin\nexport PATH\n" + body + "\n",
        encoding="utf-8",
    )
    tool.chmod(0o755)
    return tool


# Shell snippet resolving the last argument (the target) into $target.
LAST_ARG = 'for target in "$@"; do :; done'


def truncating_tool(directory: Path, name: str, size: int) -> Path:
    return make_tool(directory, name, f'{LAST_ARG}\ntruncate -s {size} "$target"')


class RecordingRunner:
    """Runner double that records argv and optionally rewrites the target size."""

    def __init__(self, sizes: dict[str, int] | None = None, returncode: int = 0) -> None:
        self.calls: List[List[str]] = []
        self.quiet_flags: List[bool] = []
        self.sizes = sizes or {}
        self.returncode = returncode

    def run(self, argv, *, quiet: bool = False) -> int:
        argv = [str(arg) for arg in argv]
        self.calls.append(argv)
        self.quiet_flags.append(quiet)
        tool_name = Path(argv[0]).name
        if tool_name in self.sizes:
            target = Path(argv[-1])
            data = target.read_bytes()
            size = self.sizes[tool_name]
            target.write_bytes(data[:size] + b"\x00" * max(0, size - len(data)))
        return self.returncode

    def tool_names(self) -> List[str]:
        return [Path(argv[0]).name for argv in self.calls]
