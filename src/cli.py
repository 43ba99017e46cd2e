"""Interactive menu loop for the ToDo list.

The controller is a small state machine: every pass starts at MAIN_MENU,
the selected option's tag names the next state, and each action returns to
MAIN_MENU when it finishes or is cancelled. EXITING ends the loop.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

import click

from errors import PersistenceError, RangeError, ValidationError
from models import TaskState
from storage import Storage
from tasklist import TaskList
from terminal import Choice, TerminalUI
from theme import state_label

logger = logging.getLogger(__name__)

APP_TITLE = "Simple ToDo"


class MenuState(Enum):
    MAIN_MENU = "main-menu"
    VIEWING = "viewing"
    ADDING = "adding"
    UPDATING = "updating"
    DELETING = "deleting"
    EXITING = "exiting"


MAIN_MENU_CHOICES = (
    Choice(MenuState.VIEWING, "View all tasks"),
    Choice(MenuState.ADDING, "Add new task"),
    Choice(MenuState.UPDATING, "Update task status"),
    Choice(MenuState.DELETING, "Delete task"),
    Choice(MenuState.EXITING, "Exit application"),
)

CANCEL = "cancel"
CONFIRM_DELETE = "delete"


@dataclass
class AppContext:
    """Everything the menu loop works on: the task list and where it is saved."""
    task_list: TaskList
    storage: Storage


def load_context(storage: Storage, ui: TerminalUI) -> AppContext:
    """Load saved tasks; a failed load is reported and leaves the list empty."""
    ui.info("Loading existing tasks...")
    try:
        tasks = storage.load()
    except PersistenceError as exc:
        logger.warning("could not load %s: %s", storage.path, exc)
        ui.warning(f"Warning: Could not load existing tasks: {exc}")
        ui.info("Starting with empty task list.")
        return AppContext(TaskList(), storage)
    if tasks:
        ui.info(f"Loaded {len(tasks)} existing task(s).")
    elif storage.exists():
        ui.info("No existing tasks found.")
    else:
        ui.info("Starting with empty task list.")
    return AppContext(TaskList(tasks), storage)


class MenuController:
    def __init__(self, context: AppContext, ui: TerminalUI):
        self.context = context
        self.ui = ui
        self._clear_next = False
        # Actions return True when their output should stay on screen until acknowledged.
        self._actions: Dict[MenuState, Callable[[], bool]] = {
            MenuState.VIEWING: self._view,
            MenuState.ADDING: self._add,
            MenuState.UPDATING: self._update,
            MenuState.DELETING: self._delete,
        }

    @property
    def task_list(self) -> TaskList:
        return self.context.task_list

    def run(self) -> None:
        """Drive the menu until the operator exits (or interrupts the terminal)."""
        state = MenuState.MAIN_MENU
        try:
            while state is not MenuState.EXITING:
                state = self.step(state)
        except (click.Abort, KeyboardInterrupt, EOFError):
            self.ui.echo()
            self.ui.info("Interrupted.")
        self.ui.success(f"Thank you for using {APP_TITLE}!")

    def step(self, state: MenuState) -> MenuState:
        if state is MenuState.MAIN_MENU:
            return self._main_menu()
        action = self._actions[state]
        try:
            acknowledge = action()
        except (click.Abort, KeyboardInterrupt, EOFError):
            raise
        except Exception:
            logger.exception("menu action %s failed", state.value)
            self.ui.error("Something went wrong while handling that action. Please try again.")
            acknowledge = True
        if acknowledge:
            self.ui.pause()
        # Unacknowledged output (a cancel note) stays on screen under the next menu.
        self._clear_next = acknowledge
        return MenuState.MAIN_MENU

    # -------------------- menu states --------------------
    def _main_menu(self) -> MenuState:
        if self._clear_next:
            self.ui.clear()
        self.ui.heading(APP_TITLE)
        self.ui.info(str(self.task_list))
        return self.ui.choose("What would you like to do?", MAIN_MENU_CHOICES)

    def _view(self) -> bool:
        self.ui.heading("View All Tasks")
        if not len(self.task_list):
            self.ui.info("No tasks found. Add some tasks to get started!")
            return True
        self.ui.info(f"Found {len(self.task_list)} task(s), newest first:")
        self.ui.show_tasks(self.task_list.list_for_display())
        self.ui.info(str(self.task_list))
        return True

    def _add(self) -> bool:
        self.ui.heading("Add New Task")
        while True:
            raw = self.ui.prompt_text("Description (leave blank to cancel)")
            if not raw.strip():
                self.ui.info("Add cancelled.")
                return False
            try:
                task = self.task_list.add(raw)
            except ValidationError as exc:
                self.ui.warning(f"{exc} Please try again.")
                continue
            break
        self.ui.success(f'Added "{task.description}" as task #1.')
        self._save()
        return True

    def _update(self) -> bool:
        self.ui.heading("Update Task Status")
        if not self._show_or_report_empty():
            return True
        number = self._select_task("update")
        if number is None:
            self.ui.info("Update cancelled.")
            return False
        task = self.task_list.get(number)
        choices = [Choice(state, state_label(state)) for state in TaskState]
        choices.append(Choice(CANCEL, "Cancel"))
        picked = self.ui.choose(f'New status for "{task.description}":', choices)
        if picked == CANCEL:
            self.ui.info("Update cancelled.")
            return False
        result = self.task_list.update_state(number, picked)
        if not result.changed:
            self.ui.info(f'Task #{number} is already "{state_label(result.new_state)}".')
            return True
        self.ui.success(
            f'Task #{number} changed from "{state_label(result.old_state)}" '
            f'to "{state_label(result.new_state)}".'
        )
        self._save()
        return True

    def _delete(self) -> bool:
        self.ui.heading("Delete Task")
        if not self._show_or_report_empty():
            return True
        number = self._select_task("delete")
        if number is None:
            self.ui.info("Delete cancelled.")
            return False
        task = self.task_list.get(number)
        picked = self.ui.choose(
            f'Delete "{task.description}"?',
            [Choice(CONFIRM_DELETE, "Delete"), Choice(CANCEL, "Cancel")],
        )
        if picked == CANCEL:
            self.ui.info("Delete cancelled.")
            return False
        removed = self.task_list.delete(number)
        self.ui.success(f'Deleted "{removed.description}".')
        self._save()
        return True

    # -------------------- helpers --------------------
    def _show_or_report_empty(self) -> bool:
        if not len(self.task_list):
            self.ui.info("No tasks yet. Add a task first.")
            return False
        self.ui.show_tasks(self.task_list.list_for_display())
        return True

    def _select_task(self, verb: str) -> Optional[int]:
        """Ask for a display number until it is valid; None means cancelled."""
        while True:
            number = self.ui.prompt_int(f"Task number to {verb} (0 to cancel)")
            if number is None:
                self.ui.warning("Please enter a number.")
                continue
            if number == 0:
                return None
            try:
                self.task_list.display_to_storage_index(number)
            except RangeError as exc:
                self.ui.warning(f"Invalid selection. {exc}")
                continue
            return number

    def _save(self) -> None:
        try:
            self.context.storage.save(self.task_list.tasks)
        except PersistenceError as exc:
            self.ui.error(f"Error: could not save tasks: {exc}")
            self.ui.warning("The change is kept for this session but may not be saved to disk.")
