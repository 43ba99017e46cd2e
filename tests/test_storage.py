import json
import os
import stat
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from errors import PersistenceError
from models import Task, TaskState
from storage import Storage


class TestStorage(unittest.TestCase):
    def setUp(self) -> None:
        td_ctx = tempfile.TemporaryDirectory()
        self.addCleanup(td_ctx.cleanup)
        self.root = Path(td_ctx.name)
        self.path = self.root / "data" / "todos.json"
        self.storage = Storage(self.path)

    def _write(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")

    def test_missing_file_loads_empty(self) -> None:
        self.assertFalse(self.storage.exists())
        self.assertEqual(self.storage.load(), [])

    def test_blank_file_loads_empty(self) -> None:
        self._write("  \n\t")
        self.assertTrue(self.storage.exists())
        self.assertEqual(self.storage.load(), [])

    def test_round_trip_preserves_order_and_state(self) -> None:
        tasks = [
            Task("Buy milk"),
            Task("Write report", TaskState.IN_PROGRESS),
            Task("Café ☕", TaskState.DONE),
        ]
        self.storage.save(tasks)
        self.assertEqual(self.storage.load(), tasks)

    def test_round_trip_empty(self) -> None:
        self.storage.save([])
        self.assertTrue(self.storage.exists())
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), [])
        self.assertEqual(self.storage.load(), [])

    def test_saved_format(self) -> None:
        self.storage.save([Task("Buy milk", TaskState.IN_PROGRESS)])
        text = self.path.read_text(encoding="utf-8")
        self.assertIn("\n    ", text)
        self.assertEqual(json.loads(text), [{"description": "Buy milk", "state": "InProgress"}])

    def test_save_replaces_content_without_leftovers(self) -> None:
        self.storage.save([Task("A"), Task("B")])
        self.storage.save([Task("C")])
        self.assertEqual([t.description for t in self.storage.load()], ["C"])
        self.assertEqual(os.listdir(self.path.parent), ["todos.json"])

    def test_missing_state_defaults_to_new(self) -> None:
        self._write('[{"description": "Old task"}]')
        self.assertEqual(self.storage.load(), [Task("Old task", TaskState.NEW)])

    def test_invalid_json_raises(self) -> None:
        self._write("[{not json")
        with self.assertRaises(PersistenceError) as ctx:
            self.storage.load()
        self.assertIsInstance(ctx.exception.cause, json.JSONDecodeError)
        self.assertIs(ctx.exception.__cause__, ctx.exception.cause)

    def test_deeply_nested_json_raises(self) -> None:
        self._write("[" * 200000 + "]" * 200000)
        with self.assertRaises(PersistenceError) as ctx:
            self.storage.load()
        self.assertIsInstance(ctx.exception.cause, RecursionError)

    def test_non_array_document_raises(self) -> None:
        self._write('{"description": "A"}')
        with self.assertRaises(PersistenceError):
            self.storage.load()

    def test_invalid_record_fails_whole_load(self) -> None:
        self._write(json.dumps([
            {"description": "Fine", "state": "New"},
            {"description": "   ", "state": "Done"},
        ]))
        with self.assertRaises(PersistenceError) as ctx:
            self.storage.load()
        self.assertIn("record 2", str(ctx.exception))

    def test_non_object_record_raises(self) -> None:
        self._write('["just text"]')
        with self.assertRaises(PersistenceError):
            self.storage.load()

    def test_unreadable_path_raises(self) -> None:
        self.path.mkdir(parents=True)
        with self.assertRaises(PersistenceError) as ctx:
            self.storage.load()
        self.assertIsInstance(ctx.exception.cause, OSError)

    def test_save_failure_raises(self) -> None:
        blocker = self.root / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        storage = Storage(blocker / "todos.json")
        with self.assertRaises(PersistenceError) as ctx:
            storage.save([Task("A")])
        self.assertIsInstance(ctx.exception.cause, OSError)

    def test_failed_replace_keeps_old_file_and_removes_temp(self) -> None:
        self.storage.save([Task("A")])
        before = self.path.read_text(encoding="utf-8")
        with patch("storage.os.replace", side_effect=OSError("disk full")):
            with self.assertRaises(PersistenceError):
                self.storage.save([Task("B")])
        self.assertEqual(self.path.read_text(encoding="utf-8"), before)
        self.assertEqual(os.listdir(self.path.parent), ["todos.json"])

    @unittest.skipIf(os.name == "nt", "POSIX permissions")
    def test_new_file_gets_umask_mode(self) -> None:
        umask = os.umask(0o022)
        self.addCleanup(os.umask, umask)
        self.storage.save([Task("A")])
        self.assertEqual(stat.S_IMODE(self.path.stat().st_mode), 0o644)

    @unittest.skipIf(os.name == "nt", "POSIX permissions")
    def test_existing_file_mode_is_kept(self) -> None:
        self.storage.save([Task("A")])
        os.chmod(self.path, 0o640)
        self.storage.save([Task("B")])
        self.assertEqual(stat.S_IMODE(self.path.stat().st_mode), 0o640)


if __name__ == "__main__":
    unittest.main()
