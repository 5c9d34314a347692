from __future__ import annotations

import logging
import os
import uuid
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request

from corehacker_core.catalog import LEVELS, is_generated, move_limit_for_index
from corehacker_core.db import ProgressStore
from corehacker_core.grid import Pos
from corehacker_core.level import level_from_json, level_to_json
from corehacker_core.session import PuzzleSession

DEFAULT_DB = os.getenv("CORE_HACKER_DB", "data/progress.db")
MAX_SESSIONS = int(os.getenv("CORE_HACKER_MAX_SESSIONS", "256"))

if os.getenv("CORE_HACKER_DEBUG", "0").lower() in ("1", "true", "yes", "on"):
    logging.basicConfig(level=logging.DEBUG)

logger = logging.getLogger(__name__)

app = Flask(__name__)

# Live sessions by id, least recently used first. A renderer keeps its id and drives the puzzle through the API.
SESSIONS: "OrderedDict[str, PuzzleSession]" = OrderedDict()


def _hold_until_complete(move, done) -> None:
    # Deferred sessions keep the lock until the renderer posts /api/complete.
    pass


def progress_store() -> ProgressStore:
    return ProgressStore(app.config.get("CORE_HACKER_DB", DEFAULT_DB))


def _pos_to_json(p: Optional[Pos]) -> Optional[List[int]]:
    if p is None:
        return None
    return [int(p[0]), int(p[1]), int(p[2])]


def _register(s: PuzzleSession) -> str:
    sid = uuid.uuid4().hex
    SESSIONS[sid] = s
    limit = max(1, int(app.config.get("CORE_HACKER_MAX_SESSIONS", MAX_SESSIONS)))
    while len(SESSIONS) > limit:
        old, _ = SESSIONS.popitem(last=False)
        logger.info("session %s evicted", old)
    return sid


def state_to_json(sid: str, s: PuzzleSession) -> Dict[str, Any]:
    return {
        "session": sid,
        "levelIndex": s.level_index,
        "level": {"id": s.level.id, "name": s.level.name, "moveLimit": s.level.move_limit},
        "target": _pos_to_json(s.target_position()),
        "core": _pos_to_json(s.core_position()),
        "blocks": [{"pos": _pos_to_json(p), "type": int(c)} for p, c in s.blocks()],
        "moveCount": s.move_count,
        "historyDepth": s.history_depth(),
        "isLocked": s.is_locked,
        "isCleared": s.is_cleared,
        "overLimit": s.is_over_limit(),
    }


def _session_from_body() -> Tuple[Optional[str], Optional[PuzzleSession], Dict[str, Any]]:
    body = request.get_json(force=True, silent=True) or {}
    sid = body.get("session")
    if not isinstance(sid, str):
        return None, None, body
    s = SESSIONS.get(sid)
    if s is not None:
        SESSIONS.move_to_end(sid)
    return sid, s, body


def _missing_session(sid: Optional[str]) -> Any:
    if sid is None:
        return jsonify({"ok": False, "error": "session required"}), 400
    return jsonify({"ok": False, "error": f"unknown session {sid}"}), 404


def _new_session(body: Dict[str, Any]) -> PuzzleSession:
    transition = _hold_until_complete if bool(body.get("deferred", False)) else None
    store = progress_store()
    index = body.get("level")
    if index is None:
        index = store.load() or 0
    seed = body.get("seed")
    return PuzzleSession(
        index=int(index),
        seed=int(seed) if seed is not None else None,
        transition=transition,
        progress=store,
    )


# ---------- Level info ----------

@app.get("/api/levels")
def api_levels() -> Any:
    return jsonify({
        "ok": True,
        "levels": [level_to_json(lv) for lv in LEVELS],
    })


@app.get("/api/progress")
def api_progress() -> Any:
    index = progress_store().load()
    return jsonify({
        "ok": True,
        "levelIndex": index,
        "firstRun": index is None,
    })


# ---------- Session lifecycle ----------

@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        s = _new_session(body)
    except (TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad request: {e}"}), 400
    sid = _register(s)
    logger.info("session %s started on level %d", sid, s.level_index)
    payload = state_to_json(sid, s)
    payload["generated"] = is_generated(s.level_index)
    payload["limit"] = move_limit_for_index(s.level_index)
    return jsonify({"ok": True, "state": payload})


@app.post("/api/new_from")
def api_new_from() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    lv_in = body.get("level")
    if not isinstance(lv_in, dict):
        return jsonify({"ok": False, "error": "level required"}), 400
    try:
        level = level_from_json(lv_in)
        transition = _hold_until_complete if bool(body.get("deferred", False)) else None
        s = PuzzleSession(transition=transition)
        s.load_custom(level)
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad level: {e}"}), 400
    sid = _register(s)
    return jsonify({"ok": True, "state": state_to_json(sid, s)})


@app.post("/api/state")
def api_state() -> Any:
    sid, s, _ = _session_from_body()
    if s is None:
        return _missing_session(sid)
    return jsonify({"ok": True, "state": state_to_json(sid, s)})


@app.post("/api/reset")
def api_reset() -> Any:
    sid, s, _ = _session_from_body()
    if s is None:
        return _missing_session(sid)
    s.reset()
    return jsonify({"ok": True, "state": state_to_json(sid, s)})


@app.post("/api/next")
def api_next() -> Any:
    sid, s, _ = _session_from_body()
    if s is None:
        return _missing_session(sid)
    s.next_level()
    return jsonify({"ok": True, "state": state_to_json(sid, s)})


# ---------- Moves ----------

@app.post("/api/move")
def api_move() -> Any:
    sid, s, body = _session_from_body()
    if s is None:
        return _missing_session(sid)
    try:
        res = s.try_move(body["pos"], str(body["axis"]), int(body["dir"]))
    except (KeyError, TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad move: {e}"}), 400
    if not res.accepted:
        assert res.reason is not None
        return jsonify({
            "ok": False,
            "error": "Move rejected",
            "reason": res.reason.value,
            "state": state_to_json(sid, s),
        }), 400
    assert res.move is not None
    return jsonify({
        "ok": True,
        "move": {"from": _pos_to_json(res.move.src), "to": _pos_to_json(res.move.dst)},
        "state": state_to_json(sid, s),
        "won": s.is_won(),
    })


@app.post("/api/undo")
def api_undo() -> Any:
    sid, s, _ = _session_from_body()
    if s is None:
        return _missing_session(sid)
    undone = s.undo()
    return jsonify({"ok": True, "undone": undone, "state": state_to_json(sid, s)})


@app.post("/api/complete")
def api_complete() -> Any:
    sid, s, _ = _session_from_body()
    if s is None:
        return _missing_session(sid)
    released = s.complete_transition()
    return jsonify({"ok": True, "released": released, "state": state_to_json(sid, s)})


@app.post("/api/close")
def api_close() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    sid = body.get("session")
    if not isinstance(sid, str):
        return _missing_session(None)
    if SESSIONS.pop(sid, None) is None:
        return _missing_session(sid)
    logger.info("session %s closed", sid)
    return jsonify({"ok": True, "closed": sid})


@app.post("/api/hints")
def api_hints() -> Any:
    sid, s, body = _session_from_body()
    if s is None:
        return _missing_session(sid)
    if "pos" not in body:
        return jsonify({"ok": False, "error": "pos required"}), 400
    hints = [{"axis": a, "dir": d, "to": _pos_to_json(dst)} for a, d, dst in s.valid_moves(body["pos"])]
    return jsonify({"ok": True, "moves": hints})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
