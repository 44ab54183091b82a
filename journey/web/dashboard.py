"""
Learning Journey Web API

JSON endpoints the calendar screen polls and posts actions to.
Uses Flask for the backend; the session is injected via init_dashboard().
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from journey.core import calendar_grid
from journey.core.goal_tracker import Duration
from journey.core.session import ActivitySession, GoalEditError

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Global reference (set by the launcher via init_dashboard)
_session: Optional[ActivitySession] = None


def init_dashboard(session: Optional[ActivitySession]) -> None:
    """Initialize the API with the active session."""
    global _session
    _session = session
    logger.info("Dashboard initialized (session=%s)", "yes" if session else "none")


class _BadRequest(Exception):
    pass


def _payload() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise _BadRequest("JSON object expected")
    return data


def _parse_date(value: Any) -> date:
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise _BadRequest(f"Invalid date {value!r} (expected YYYY-MM-DD)")


def _parse_goal(data: Dict[str, Any]) -> tuple:
    topic = data.get("topic", "")
    if not isinstance(topic, str):
        raise _BadRequest("topic must be a string")
    try:
        duration = Duration.parse(data.get("duration", "week"))
    except ValueError as e:
        raise _BadRequest(str(e))
    return topic, duration


@app.errorhandler(_BadRequest)
def _handle_bad_request(e: _BadRequest):
    return jsonify({"error": str(e)}), 400


@app.errorhandler(OverflowError)
def _handle_overflow(e: OverflowError):
    return jsonify({"error": f"Date out of range: {e}"}), 400


@app.before_request
def _require_session():
    if _session is None:
        return jsonify({"error": "Session not initialized"}), 503
    return None


@app.route("/api/state")
def api_state():
    """Current snapshot of the activity screen."""
    return jsonify(_session.snapshot())


@app.route("/api/select", methods=["POST"])
def api_select():
    data = _payload()
    if "date" not in data:
        raise _BadRequest("date required")
    _session.select_date(_parse_date(data["date"]))
    return jsonify(_session.snapshot())


@app.route("/api/week", methods=["POST"])
def api_week():
    offset = _payload().get("offset", 0)
    # bool is an int subclass
    if isinstance(offset, bool) or not isinstance(offset, int):
        raise _BadRequest("offset must be an integer")
    _session.change_week(offset)
    return jsonify(_session.snapshot())


@app.route("/api/log/learned", methods=["POST"])
def api_log_learned():
    data = _payload()
    day = _parse_date(data["date"]) if "date" in data else None
    _session.log_learned(day)
    return jsonify(_session.snapshot())


@app.route("/api/log/frozen", methods=["POST"])
def api_log_frozen():
    """Freeze a day. Over quota the state is unchanged and accepted=false."""
    data = _payload()
    day = _parse_date(data["date"]) if "date" in data else None
    accepted = _session.log_frozen(day)
    state = _session.snapshot()
    state["accepted"] = accepted
    return jsonify(state)


@app.route("/api/days/<day>")
def api_day(day: str):
    parsed = _parse_date(day)
    return jsonify({
        "date": parsed.isoformat(),
        "status": _session.tracker.status(parsed).value,
        "label": _session.day_label(parsed),
    })


@app.route("/api/calendar")
def api_calendar():
    """Month grid for the full calendar view (?month=YYYY-MM&offset=N)."""
    month = request.args.get("month")
    anchor = _parse_date(f"{month}-01") if month else _session.selected_date
    raw_offset = request.args.get("offset")
    if raw_offset is not None:
        try:
            offset = int(raw_offset)
        except ValueError:
            raise _BadRequest("offset must be an integer")
        anchor = calendar_grid.shift_month(anchor, offset)
    tracker = _session.tracker
    grid = []
    for row in calendar_grid.month_grid(anchor, _session.first_weekday):
        grid.append([
            None if d is None else {
                "date": d.isoformat(),
                "day": d.day,
                "status": tracker.status(d).value,
            }
            for d in row
        ])
    return jsonify({
        "title": calendar_grid.month_title(anchor),
        "headers": calendar_grid.weekday_headers(_session.first_weekday),
        "grid": grid,
    })


@app.route("/api/goal/edit", methods=["POST"])
def api_goal_edit():
    """Ask to edit the goal. Returns the warning and the current topic as draft."""
    draft = _session.request_goal_edit()
    return jsonify({
        "draft": draft,
        "warning": "Updating your goal will reset your current progress.",
    })


@app.route("/api/goal/confirm", methods=["POST"])
def api_goal_confirm():
    topic, duration = _parse_goal(_payload())
    try:
        _session.confirm_goal_edit(topic, duration)
    except GoalEditError as e:
        return jsonify({"error": str(e)}), 409
    return jsonify(_session.snapshot())


@app.route("/api/goal/cancel", methods=["POST"])
def api_goal_cancel():
    _session.cancel_goal_edit()
    return jsonify(_session.snapshot())


@app.route("/api/goal/restart", methods=["POST"])
def api_goal_restart():
    _session.restart_same_goal()
    return jsonify(_session.snapshot())


@app.route("/api/goal/new", methods=["POST"])
def api_goal_new():
    topic, duration = _parse_goal(_payload())
    _session.start_new_goal(topic, duration)
    return jsonify(_session.snapshot())


def run_dashboard(host: str = "127.0.0.1", port: int = 5000) -> None:
    """Run the API server (blocking)."""
    logger.info("Starting dashboard on %s:%s", host, port)
    app.run(host=host, port=port, debug=False, use_reloader=False)
