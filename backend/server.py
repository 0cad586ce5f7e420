import os
import sys
import time
import random
import threading

# Ensure backend/ is on sys.path so sibling imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException
from dotenv import load_dotenv

from data_loader import load_data
from plan_config import (
    MAX_CREDIT_LIMIT,
    MAX_ELECTIVE_COUNT,
    MAX_TERM_COUNT,
)
from semester_planner import run_plan

load_dotenv()

app = Flask(__name__)

# ── Paths ─────────────────────────────────────────────────────────────────────
BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(BACKEND_DIR)
_DEFAULT_DATA_PATH = os.path.join(PROJECT_ROOT, "data", "courses.csv")


def _resolve_data_path(raw: str | None) -> str:
    if not raw:
        return _DEFAULT_DATA_PATH
    return raw if os.path.isabs(raw) else os.path.join(PROJECT_ROOT, raw)


DATA_PATH = _resolve_data_path(os.environ.get("DATA_PATH"))
_data_lock = threading.Lock()
_data_mtime = None

_SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "same-origin",
}


def _env_float(name: str, default: float, minimum: float = 0.0) -> float:
    try:
        return max(minimum, float(os.environ.get(name, "")))
    except ValueError:
        return default


_SLOW_REQUEST_LOG_MS = _env_float("SLOW_REQUEST_LOG_MS", 750.0)


def _data_file_mtime(path: str):
    """Modification time of the course table, or None when it is missing."""
    if os.path.isdir(path):
        path = os.path.join(path, "courses.csv")
    try:
        return os.path.getmtime(path)
    except OSError:
        return None


def _load_catalog(path: str) -> dict:
    data = load_data(path)
    print(f"[OK] Loaded {len(data['courses_df'])} courses from {path}")
    return data


# ── Startup data load ──────────────────────────────────────────────────────────
try:
    if not os.path.exists(DATA_PATH) and DATA_PATH != _DEFAULT_DATA_PATH:
        print(
            f"[WARN] DATA_PATH not found ({DATA_PATH}); using bundled catalog ({_DEFAULT_DATA_PATH}).",
            file=sys.stderr,
        )
        DATA_PATH = _DEFAULT_DATA_PATH
    _data = _load_catalog(DATA_PATH)
    _data_mtime = _data_file_mtime(DATA_PATH)
except FileNotFoundError:
    print(f"[FATAL] Course table not found: {DATA_PATH}", file=sys.stderr)
    sys.exit(1)
except Exception as exc:
    print(f"[FATAL] Failed to load course table: {exc}", file=sys.stderr)
    sys.exit(1)


def _reload_data_if_changed(force: bool = False) -> bool:
    """
    Reload the course table when its file is newer than the loaded copy.

    A failed reload keeps serving the previous table. Returns True when the
    table was swapped.
    """
    global _data, _data_mtime

    with _data_lock:
        mtime = _data_file_mtime(DATA_PATH)
        stale = mtime is not None and (_data_mtime is None or mtime > _data_mtime)
        if not (force or stale):
            return False
        try:
            new_data = _load_catalog(DATA_PATH)
        except Exception as exc:
            print(f"[WARN] Course table reload failed; keeping previous table: {exc}", file=sys.stderr)
            return False
        _data, _data_mtime = new_data, mtime
        return True


_TABLE_ENDPOINTS = {"get_courses", "generate_plan", "api_courses", "api_plan"}


# -- Request hooks ------------------------------------------------------------
@app.before_request
def _before_request():
    g._request_start_time = time.perf_counter()
    if request.endpoint in _TABLE_ENDPOINTS:
        try:
            _reload_data_if_changed()
        except OSError as exc:
            print(f"[WARN] Course table reload check failed: {exc}", file=sys.stderr)


@app.after_request
def _after_request(response):
    response.headers.update(_SECURITY_HEADERS)

    started = getattr(g, "_request_start_time", None)
    if started is not None:
        duration_ms = (time.perf_counter() - started) * 1000.0
        if duration_ms >= _SLOW_REQUEST_LOG_MS:
            print(
                f"[SLOW] {request.method} {request.path} "
                f"status={response.status_code} duration_ms={duration_ms:.1f}"
            )
    return response


# -- Health endpoint --------------------------------------------------------
@app.route("/health", methods=["GET"])
def health_endpoint():
    return jsonify({
        "status": "ok",
        "version": "1.0.0",
        "courses_loaded": len(_data["courses"]) if _data else 0,
    })


# -- Input validation ------------------------------------------------------
def _parse_bounded_int(body: dict, field: str, low: int, high: int):
    """Returns (value, error_message). value is None when the field is absent."""
    raw = body.get(field)
    if raw in (None, ""):
        return None, None
    if isinstance(raw, bool):
        return None, f"{field} must be an integer between {low} and {high}."
    try:
        value = int(raw)
        if isinstance(raw, float) and raw != value:
            raise ValueError
        if not (low <= value <= high):
            raise ValueError
    except (TypeError, ValueError):
        return None, f"{field} must be an integer between {low} and {high}."
    return value, None


def _validate_plan_body(body):
    """Returns (error_code, message, parsed). parsed is None on invalid input."""
    if body is None:
        return "INVALID_INPUT", "Request body must be valid JSON.", None
    if not isinstance(body, dict):
        return "INVALID_INPUT", "Request body must be a JSON object.", None

    bounds = {
        "term_count": (1, MAX_TERM_COUNT),
        "target_credits": (1, MAX_CREDIT_LIMIT),
        "max_credits": (1, MAX_CREDIT_LIMIT),
        "min_credits": (0, MAX_CREDIT_LIMIT),
        "elective_count": (0, MAX_ELECTIVE_COUNT),
    }
    parsed = {}
    for field, (low, high) in bounds.items():
        value, err = _parse_bounded_int(body, field, low, high)
        if err:
            return "INVALID_INPUT", err, None
        parsed[field] = value

    seed = body.get("seed")
    if seed not in (None, ""):
        if isinstance(seed, bool):
            return "INVALID_INPUT", "seed must be an integer.", None
        try:
            seed = int(seed)
        except (TypeError, ValueError):
            return "INVALID_INPUT", "seed must be an integer.", None
    else:
        seed = None
    parsed["seed"] = seed

    # Only explicit request values are cross-checked; defaults are clamped later.
    max_credits = parsed["max_credits"]
    if max_credits is not None:
        if parsed["min_credits"] is not None and parsed["min_credits"] > max_credits:
            return "INVALID_INPUT", "min_credits cannot exceed max_credits.", None
        if parsed["target_credits"] is not None and parsed["target_credits"] > max_credits:
            return "INVALID_INPUT", "target_credits cannot exceed max_credits.", None
    return None, None, parsed


def _error_response(error_code: str, message: str, status: int):
    return jsonify({
        "mode": "error",
        "error": {"error_code": error_code, "message": message},
    }), status


# ── 500 handler ────────────────────────────────────────────────────────────────
@app.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    print(f"[ERROR] Unhandled exception: {e!r}", file=sys.stderr)
    return _error_response("SERVER_ERROR", "An unexpected server error occurred.", 500)


# ── Routes ─────────────────────────────────────────────────────────────────────
@app.route("/courses", methods=["GET"])
def get_courses():
    if not _data:
        return jsonify({"error": "Data not loaded"}), 500
    df = _data["courses_df"]
    cols = ["course_code", "title", "credits", "prerequisite", "instructor", "meeting_time", "elective_menu"]
    records = df[cols].to_dict(orient="records")
    for rec in records:
        rec["elective_menu"] = bool(rec["elective_menu"])
    return jsonify({"courses": records})


@app.route("/plan", methods=["POST"])
def generate_plan():
    data = _data
    if not data:
        return _error_response("SERVER_ERROR", "Data not loaded.", 500)

    body = request.get_json(force=True, silent=True)
    err_code, err_msg, parsed = _validate_plan_body(body)
    if err_code:
        return _error_response(err_code, err_msg, 400)

    if not data["courses"]:
        return _error_response("NO_COURSES", "No required courses found in the course table.", 404)

    limits = {
        k: parsed[k]
        for k in ("term_count", "target_credits", "max_credits", "min_credits")
        if parsed[k] is not None
    }
    rng = random.Random(parsed["seed"]) if parsed["seed"] is not None else None
    try:
        result = run_plan(
            data["courses"],
            limits=limits,
            elective_menu=data["elective_menu"],
            elective_count=parsed["elective_count"] or 0,
            rng=rng,
        )
    except ValueError as exc:
        return _error_response("INVALID_INPUT", str(exc), 400)

    return jsonify({"mode": "plan", **result})


# -- Canonical API routes ----------------------------------------------------
app.add_url_rule("/api/health", endpoint="api_health", view_func=health_endpoint, methods=["GET"])
app.add_url_rule("/api/courses", endpoint="api_courses", view_func=get_courses, methods=["GET"])
app.add_url_rule("/api/plan", endpoint="api_plan", view_func=generate_plan, methods=["POST"])


# -- API catch-all (404 for unknown /api/* routes) -------------------
@app.route("/api/<path:rest>", methods=["GET", "POST", "PUT", "DELETE", "PATCH"])
def api_catch_all(rest):
    return jsonify({"error": f"/api/{rest} not found"}), 404


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    debug = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(host="0.0.0.0", port=port, debug=debug)
