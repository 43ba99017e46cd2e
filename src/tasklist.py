"""Task list logic: ordered collection, display numbering and mutation.

Storage order is insertion order (oldest first). Display numbers run the
other way: 1 is the most recently added task, L the oldest. Every lookup
by display number goes through display_to_storage_index.
"""
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from errors import RangeError
from models import Task, TaskState


class UpdateResult(NamedTuple):
    task: Task
    old_state: TaskState
    new_state: TaskState
    changed: bool


class TaskList:
    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self._tasks: List[Task] = list(tasks) if tasks else []

    def __len__(self) -> int:
        return len(self._tasks)

    # -------------------- queries --------------------
    @property
    def tasks(self) -> List[Task]:
        """Copy of the collection in storage order."""
        return list(self._tasks)

    def counts(self) -> Dict[TaskState, int]:
        totals = {state: 0 for state in TaskState}
        for task in self._tasks:
            totals[task.state] += 1
        return totals

    def display_to_storage_index(self, display_number: int) -> int:
        size = len(self._tasks)
        if not 1 <= display_number <= size:
            if size == 0:
                raise RangeError(f"No task #{display_number}: the list is empty.")
            raise RangeError(f"No task #{display_number}; choose 1-{size}.")
        return size - display_number

    def get(self, display_number: int) -> Task:
        return self._tasks[self.display_to_storage_index(display_number)]

    def list_for_display(self) -> Iterator[Tuple[int, Task]]:
        """Yield (display_number, task) from newest (1) to oldest (L)."""
        size = len(self._tasks)
        for idx in range(size - 1, -1, -1):
            yield size - idx, self._tasks[idx]

    # -------------------- task operations --------------------
    def add(self, description: str) -> Task:
        task = Task(description)
        self._tasks.append(task)
        return task

    def update_state(self, display_number: int, new_state: TaskState) -> UpdateResult:
        task = self.get(display_number)
        old_state = task.state
        if old_state == new_state:
            return UpdateResult(task, old_state, new_state, False)
        task.state = new_state
        return UpdateResult(task, old_state, new_state, True)

    def delete(self, display_number: int) -> Task:
        return self._tasks.pop(self.display_to_storage_index(display_number))

    def __str__(self) -> str:
        totals = self.counts()
        return (f'New: {totals[TaskState.NEW]} tasks, '
                f'In-Progress: {totals[TaskState.IN_PROGRESS]} tasks, '
                f'Done: {totals[TaskState.DONE]} tasks')
