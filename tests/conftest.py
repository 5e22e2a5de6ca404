import sys
from pathlib import Path
from typing import Callable, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
TESTS = Path(__file__).resolve().parent
for path in (str(SRC), str(TESTS)):
    if path not in sys.path:
        sys.path.insert(0, path)

from helpers import make_elf  # noqa: E402


@pytest.fixture
def elf_target(tmp_path: Path) -> Path:
    return make_elf(tmp_path / "a.out")


@pytest.fixture
def tool_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "bin"
    directory.mkdir()
    return directory


@pytest.fixture
def messages() -> List[str]:
    return []


@pytest.fixture
def collect(messages: List[str]) -> Callable[[str], None]:
    return messages.append
