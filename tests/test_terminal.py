import unittest
from unittest.mock import patch

from models import Task, TaskState
from terminal import Choice, TerminalUI
from theme import state_label


class TestTerminalUI(unittest.TestCase):
    def setUp(self) -> None:
        self.ui = TerminalUI(pause_seconds=0.25)

    def test_prompt_int_parses_or_returns_none(self) -> None:
        with patch("click.prompt", side_effect=[" 3 ", "three", ""]):
            self.assertEqual(self.ui.prompt_int("Task number"), 3)
            self.assertIsNone(self.ui.prompt_int("Task number"))
            self.assertIsNone(self.ui.prompt_int("Task number"))

    def test_choose_returns_tag(self) -> None:
        choices = [Choice("a", "First"), Choice(TaskState.DONE, "Done")]
        with patch("click.prompt", return_value=2), patch("click.echo"):
            self.assertIs(self.ui.choose("Pick one", choices), TaskState.DONE)

    def test_choose_requires_choices(self) -> None:
        with self.assertRaises(ValueError):
            self.ui.choose("Pick one", [])

    def _pause_with(self, stdin_tty: bool, stdout_tty: bool):
        with patch("sys.stdin") as stdin, patch("sys.stdout") as stdout, \
                patch("time.sleep") as sleep, patch("click.pause") as pause:
            stdin.isatty.return_value = stdin_tty
            stdout.isatty.return_value = stdout_tty
            self.ui.pause()
        return sleep, pause

    def test_pause_sleeps_without_tty(self) -> None:
        sleep, pause = self._pause_with(False, False)
        sleep.assert_called_once_with(0.25)
        pause.assert_not_called()

    def test_pause_sleeps_when_stdout_is_piped(self) -> None:
        sleep, pause = self._pause_with(True, False)
        sleep.assert_called_once_with(0.25)
        pause.assert_not_called()

    def test_pause_waits_for_key_on_tty(self) -> None:
        sleep, pause = self._pause_with(True, True)
        pause.assert_called_once()
        sleep.assert_not_called()

    def test_show_tasks_uses_state_labels(self) -> None:
        with patch("click.echo") as echo:
            self.ui.show_tasks([(1, Task("Ship it", TaskState.IN_PROGRESS))])
        line = echo.call_args[0][0]
        self.assertIn("Ship it", line)
        self.assertIn(state_label(TaskState.IN_PROGRESS), line)


class TestStateLabels(unittest.TestCase):
    def test_every_state_has_a_label(self) -> None:
        self.assertEqual(
            [state_label(s) for s in TaskState],
            ["New", "In progress", "Done"],
        )


if __name__ == "__main__":
    unittest.main()
