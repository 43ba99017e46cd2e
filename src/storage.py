"""Persistence helpers (load/save) for the task list.

The file holds a JSON array of {"description", "state"} objects in storage
order (oldest first). Writes go to a temp file in the same directory and are
renamed over the target so a crash never leaves a half-written file.
"""
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Iterable, List, Union

from errors import PersistenceError, ValidationError
from models import Task

logger = logging.getLogger(__name__)

DEFAULT_TASKS_FILE = Path(__file__).parent.parent / 'data' / 'todos.json'


class Storage:
    def __init__(self, path: Union[str, Path] = DEFAULT_TASKS_FILE):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> List[Task]:
        """Load tasks from disk in storage order.

        Missing file or blank content -> empty list. Anything unreadable,
        including a single invalid record, raises PersistenceError.
        """
        if not self._path.exists():
            logger.debug("no task file at %s", self._path)
            return []
        try:
            text = self._path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Error reading {self._path.name}: {exc}", exc) from exc
        if not text.strip():
            return []
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, RecursionError) as exc:
            raise PersistenceError(f"Error parsing {self._path.name}: {exc}", exc) from exc
        if not isinstance(data, list):
            raise PersistenceError(
                f"Error parsing {self._path.name}: expected a JSON array, got {type(data).__name__}"
            )
        tasks: List[Task] = []
        for position, raw in enumerate(data, start=1):
            tasks.append(self._task_from_record(raw, position))
        logger.debug("loaded %d task(s) from %s", len(tasks), self._path)
        return tasks

    def save(self, tasks: Iterable[Task]) -> None:
        """Persist the full collection (pretty-printed), replacing the file."""
        try:
            payload = json.dumps([t.to_dict() for t in tasks], ensure_ascii=False, indent=4)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Error serializing tasks: {exc}", exc) from exc
        try:
            _atomic_write_text(self._path, payload + "\n")
        except OSError as exc:
            logger.error("saving %s failed: %s", self._path, exc)
            raise PersistenceError(f"Error writing {self._path.name}: {exc}", exc) from exc
        logger.debug("saved tasks to %s", self._path)

    def _task_from_record(self, raw: Any, position: int) -> Task:
        if not isinstance(raw, dict):
            raise PersistenceError(
                f"Error parsing {self._path.name}: record {position} is not an object"
            )
        try:
            return Task.from_dict(raw)
        except ValidationError as exc:
            raise PersistenceError(
                f"Error parsing {self._path.name}: record {position}: {exc}", exc
            ) from exc


def _target_mode(path: Path) -> int:
    """Mode the file would get from a plain open(): its current mode, else 0666 minus umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=path.name + ".", dir=str(path.parent))
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(text)
        # mkstemp creates 0600
        os.chmod(tmp, _target_mode(path))
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.unlink(tmp)
