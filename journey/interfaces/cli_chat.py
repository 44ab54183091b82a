"""
CLI Interface

Interactive terminal front end for Learning Journey.
Onboards a goal, then logs days and edits the goal through slash commands.
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from journey.core import calendar_grid
from journey.core.goal_tracker import DayStatus, Duration
from journey.core.logger import ActionLogger
from journey.core.session import ActivitySession
from journey.utils.paths import base_path

logger = logging.getLogger(__name__)

_STATUS_MARKS = {
    DayStatus.LEARNED: "*",
    DayStatus.FROZEN: "~",
    DayStatus.UNSET: " ",
}


def _get_prompt_fn() -> Callable[[str], str]:
    """Use prompt_toolkit on a TTY, plain input() when stdin is piped."""
    if not sys.stdin.isatty():
        def prompt(prefix: str = "> ") -> str:
            return input(prefix).strip()
        return prompt

    from prompt_toolkit import PromptSession
    from prompt_toolkit.history import FileHistory

    history_file = Path(base_path()) / "data" / "cli_history.txt"
    history_file.parent.mkdir(exist_ok=True)
    session = PromptSession(history=FileHistory(str(history_file)))

    def prompt(prefix: str = "> ") -> str:
        return session.prompt(prefix).strip()

    return prompt


def _error(message: str) -> None:
    print(f"\n\033[91mError:\033[0m {message}\n")


class CLIChat:
    """
    CLI front end for one learning goal.

    - Onboarding (topic + duration)
    - Commands (/learned, /freeze, /date, /week, /month, /edit, /help)
    - Goal completion choices
    """

    COMMANDS = {
        "/help": "Show available commands",
        "/learned": "Log (or un-log) the selected day as learned",
        "/freeze": "Freeze (or un-freeze) the selected day",
        "/date": "Select a day (/date YYYY-MM-DD)",
        "/week": "Move the selection by weeks (/week +1, /week -1)",
        "/month": "Show a month (/month [YYYY-MM], /month +1, /month -1)",
        "/status": "Show goal progress",
        "/edit": "Change goal and duration (resets progress)",
        "/restart": "Start the same goal again from zero",
        "/new": "Set a new learning goal",
        "/exit": "Exit",
        "/quit": "Exit",
    }

    def __init__(
        self,
        session: Optional[ActivitySession] = None,
        prompt_fn: Optional[Callable[[str], str]] = None,
        action_logger: Optional[ActionLogger] = None,
    ) -> None:
        self.session = session
        self._action_logger = action_logger
        self._prompt_fn = prompt_fn or _get_prompt_fn()
        self._month_anchor: Optional[date] = None

    def start(self) -> None:
        """Start the interactive loop."""
        self._print_welcome()
        try:
            if self.session is None:
                self.session = self._onboard()
        except (EOFError, KeyboardInterrupt):
            print()
            return
        self._show_status()

        while True:
            try:
                user_input = self._prompt_fn("> ").strip()

                if not user_input:
                    continue

                if not user_input.startswith("/"):
                    print("Commands start with '/'. Type /help for the list.")
                    continue

                if not self._handle_command(user_input):
                    break

            except KeyboardInterrupt:
                print("\n\nUse /exit to quit")
                continue
            except EOFError:
                break
            except Exception as e:
                _error(str(e))
                logger.error("CLI error: %s", e, exc_info=True)

        print("\nKeep learning!\n")

    def _print_welcome(self) -> None:
        print("\n" + "=" * 60)
        print("Hello Learner")
        print("=" * 60)
        print("\nThis app will help you learn everyday!\n")

    def _ask_goal(self, default_topic: str = "") -> tuple:
        suffix = f" [{default_topic}]" if default_topic else ""
        topic = self._prompt_fn(f"I want to learn{suffix}: ").strip() or default_topic
        choices = "/".join(d.title for d in Duration)
        while True:
            raw = self._prompt_fn(f"I want to learn it in a ({choices}) [Week]: ").strip()
            try:
                return topic, Duration.parse(raw or "week")
            except ValueError as e:
                _error(str(e))

    def _onboard(self) -> ActivitySession:
        topic, duration = self._ask_goal()
        return ActivitySession.start(topic, duration, action_logger=self._action_logger)

    def _handle_command(self, command: str) -> bool:
        """
        Handle slash commands.

        Returns:
            False if should exit, True otherwise
        """
        parts = command.split(maxsplit=1)
        cmd = parts[0].lower()
        args = parts[1].strip() if len(parts) > 1 else ""

        if cmd in ["/exit", "/quit"]:
            return False

        if cmd == "/help":
            self._show_help()
        elif cmd == "/learned":
            self._log_learned()
        elif cmd == "/freeze":
            self._log_frozen()
        elif cmd == "/date":
            self._select_date(args)
        elif cmd == "/week":
            self._change_week(args)
        elif cmd == "/month":
            self._show_month(args)
        elif cmd == "/status":
            self._show_status()
        elif cmd == "/edit":
            self._edit_goal()
        elif cmd == "/restart":
            self.session.restart_same_goal()
            print("\n\033[92m[OK]\033[0m Progress cleared, same goal and duration.\n")
        elif cmd == "/new":
            topic, duration = self._ask_goal()
            self.session.start_new_goal(topic, duration)
            self._show_status()
        else:
            print(f"\n\033[91mUnknown command:\033[0m {cmd}")
            print("Type /help for available commands\n")

        return True

    def _show_help(self) -> None:
        print("\n\033[1mAvailable Commands:\033[0m")
        print("-" * 60)
        for cmd, desc in self.COMMANDS.items():
            print(f"  {cmd:<15} {desc}")
        print()

    def _log_learned(self) -> None:
        status = self.session.log_learned()
        day = self.session.selected_date.isoformat()
        if status is DayStatus.LEARNED:
            print(f"\n\033[92m[OK]\033[0m {day} logged as learned")
        else:
            print(f"\n{day} un-logged")
        self._print_completion()

    def _log_frozen(self) -> None:
        day = self.session.selected_date.isoformat()
        if not self.session.log_frozen():
            print(f"\nNo freezes left: {self.session.freeze_usage_label()}\n")
            return
        if self.session.tracker.status(self.session.selected_date) is DayStatus.FROZEN:
            print(f"\n\033[96m[~]\033[0m {day} frozen")
        else:
            print(f"\n{day} un-frozen")
        print(f"  {self.session.freeze_usage_label()}")
        self._print_completion()

    def _print_completion(self) -> None:
        if self.session.tracker.is_complete():
            print("\n\033[1mWell done!\033[0m Goal completed!")
            print("  /restart to learn it again, /new to set a new learning goal")
        print()

    def _select_date(self, args: str) -> None:
        if not args:
            _error("Usage: /date YYYY-MM-DD")
            return
        try:
            day = date.fromisoformat(args)
        except ValueError:
            _error(f"Invalid date {args!r}")
            return
        self.session.select_date(day)
        self._print_week()

    def _change_week(self, args: str) -> None:
        try:
            offset = int(args or "1")
        except ValueError:
            _error("Usage: /week +N or /week -N")
            return
        try:
            self.session.change_week(offset)
        except OverflowError:
            _error(f"Week offset {offset} is out of range")
            return
        self._print_week()

    def _edit_goal(self) -> None:
        draft = self.session.request_goal_edit()
        print("\n\033[93mUpdating your goal will reset your current progress.\033[0m")
        answer = self._prompt_fn("Update anyway? (y/N): ").strip().lower()
        if answer not in ("y", "yes"):
            self.session.cancel_goal_edit()
            print("Goal unchanged.\n")
            return
        topic, duration = self._ask_goal(default_topic=draft)
        self.session.confirm_goal_edit(topic, duration)
        self._show_status()

    def _print_week(self) -> None:
        tracker = self.session.tracker
        selected = self.session.selected_date
        headers = calendar_grid.weekday_headers(self.session.first_weekday)
        cells = []
        for d in self.session.week_days():
            if d is None:
                cells.append(" " * 5)
                continue
            mark = _STATUS_MARKS[tracker.status(d)]
            cell = f"{d.day:>2}{mark}"
            cells.append(f"[{cell}]" if d == selected else f" {cell} ")
        print("\n" + calendar_grid.month_title(selected))
        print(" ".join(f"{h:^5}" for h in headers))
        print(" ".join(cells))
        print(f"\n  {self.session.day_label()}\n")

    def _show_month(self, args: str) -> None:
        """Show a month: /month, /month YYYY-MM, or /month +N / -N from the last one shown."""
        if args[:1] in ("+", "-"):
            try:
                offset = int(args)
                anchor = calendar_grid.shift_month(
                    self._month_anchor or self.session.selected_date, offset,
                )
            except ValueError:
                _error("Usage: /month +N or /month -N")
                return
            except OverflowError:
                _error(f"Month offset {args} is out of range")
                return
        elif args:
            try:
                anchor = date.fromisoformat(f"{args}-01")
            except ValueError:
                _error("Usage: /month YYYY-MM")
                return
        else:
            anchor = self.session.selected_date
        self._month_anchor = anchor
        tracker = self.session.tracker
        first = self.session.first_weekday
        print("\n" + calendar_grid.month_title(anchor))
        print(" ".join(f"{h:^4}" for h in calendar_grid.weekday_headers(first)))
        for row in calendar_grid.month_grid(anchor, first):
            cells = []
            for d in row:
                if d is None:
                    cells.append("    ")
                else:
                    cells.append(f"{d.day:>3}{_STATUS_MARKS[tracker.status(d)]}")
            print(" ".join(cells))
        print("\n  * learned   ~ frozen\n")

    def _show_status(self) -> None:
        state = self.session.snapshot()
        print("\n\033[1mActivity:\033[0m")
        print("-" * 60)
        if state["topic"].strip():
            print(f"  Learning: {state['topic']}")
        print(f"  Duration: {Duration.parse(state['duration']).title}")
        print(f"  Days learned: {state['learned_count']}")
        print(f"  Days frozen:  {state['frozen_count']}")
        print(f"  Progress: {state['learned_count'] + state['frozen_count']}"
              f" / {state['target_days']} days")
        print(f"  {state['freeze_usage']}")
        self._print_week()
        if state["is_complete"]:
            self._print_completion()


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    from journey.utils.config import get_logging_config

    load_dotenv(Path(base_path()) / ".env")
    log_cfg = get_logging_config()
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logging.getLogger("journey").setLevel(log_cfg["level"])

    action_logger = ActionLogger() if log_cfg["action_log"] else None
    try:
        CLIChat(action_logger=action_logger).start()
    finally:
        if action_logger is not None:
            action_logger.close()


if __name__ == "__main__":
    main()
