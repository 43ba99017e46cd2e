"""Main entry point for the terminal ToDo list."""
from cli import APP_TITLE, MenuController, load_context
from config import Settings, setup_logging
from storage import Storage
from terminal import TerminalUI


def main():
    settings = Settings.from_env()
    logging_problem = setup_logging(settings)
    ui = TerminalUI(pause_seconds=settings.pause_seconds, clear_screen=settings.clear_screen)
    if logging_problem:
        ui.warning(logging_problem)
    ui.heading(f"{APP_TITLE} Application")
    ui.echo("Welcome to your personal task manager!")
    context = load_context(Storage(settings.data_file), ui)
    MenuController(context, ui).run()

if __name__ == "__main__":
    main()
