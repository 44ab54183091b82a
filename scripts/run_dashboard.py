r"""
Run the Learning Journey web API standalone.

Starts a session for the given goal and serves the JSON API that the
calendar screen polls.

Run: python scripts/run_dashboard.py --topic "Swift" --duration month

Then open http://127.0.0.1:5000/api/state
"""

import argparse
import logging
import sys
from pathlib import Path

_root = Path(__file__).resolve().parent.parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from dotenv import load_dotenv

load_dotenv(_root / ".env", override=True)

from journey.core.logger import ActionLogger
from journey.core.session import ActivitySession
from journey.utils.config import get_logging_config, get_web_config
from journey.web.dashboard import init_dashboard, run_dashboard


def main() -> None:
    web_cfg = get_web_config()
    log_cfg = get_logging_config()

    parser = argparse.ArgumentParser(description="Learning Journey web API")
    parser.add_argument("--topic", default="", help="What you want to learn")
    parser.add_argument("--duration", default="week", help="week, month or year")
    parser.add_argument("--host", default=web_cfg["host"])
    parser.add_argument("--port", type=int, default=web_cfg["port"])
    args = parser.parse_args()

    logging.basicConfig(
        level=log_cfg["level"],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    action_logger = ActionLogger() if log_cfg["action_log"] else None
    try:
        session = ActivitySession.start(args.topic, args.duration, action_logger=action_logger)
    except ValueError as e:
        parser.error(str(e))
    init_dashboard(session)

    print(f"Starting API at http://{args.host}:{args.port}/api/state")
    print("Press Ctrl+C to stop")
    try:
        run_dashboard(host=args.host, port=args.port)
    finally:
        if action_logger is not None:
            action_logger.close()


if __name__ == "__main__":
    main()
