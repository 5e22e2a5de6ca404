import tempfile
import unittest
from pathlib import Path

from helpers import make_elf

from optimz.services.format_probe import ensure_candidate, has_elf_magic, is_candidate


class TestFormatProbe(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_executable_elf_is_candidate(self) -> None:
        target = make_elf(self.root / "prog")
        self.assertTrue(is_candidate(target))
        self.assertEqual(ensure_candidate(target), target)

    def test_missing_file_is_rejected(self) -> None:
        missing = self.root / "missing"
        self.assertFalse(is_candidate(missing))
        with self.assertRaises(FileNotFoundError):
            ensure_candidate(missing)

    def test_directory_is_rejected(self) -> None:
        self.assertFalse(is_candidate(self.root))
        with self.assertRaises(PermissionError):
            ensure_candidate(self.root)

    def test_non_executable_elf_is_rejected(self) -> None:
        target = make_elf(self.root / "prog", executable=False)
        self.assertFalse(is_candidate(target))
        with self.assertRaises(PermissionError):
            ensure_candidate(target)

    def test_wrong_magic_is_rejected(self) -> None:
        script = self.root / "script.sh"
        script.write_bytes(b"#!/bin/sh\necho hi\n")
        script.chmod(0o755)
        self.assertFalse(is_candidate(script))
        with self.assertRaises(ValueError):
            ensure_candidate(script)

    def test_short_file_is_rejected(self) -> None:
        stub = self.root / "stub"
        stub.write_bytes(b"\x7fEL")
        stub.chmod(0o755)
        self.assertFalse(has_elf_magic(stub))
        self.assertFalse(is_candidate(stub))


if __name__ == "__main__":
    unittest.main()
