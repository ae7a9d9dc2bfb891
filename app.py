from __future__ import annotations

import logging
import os
import random
from typing import Any, Dict, Iterable, List, Optional, Tuple

from flask import Flask, jsonify, request

from game import (
    CLOCKWISE,
    Coord,
    DecodeError,
    DynamazeError,
    TurnController,
    check_shape,
    controller_from_dict,
    controller_to_dict,
    guide_count,
    slot_from_json,
)

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = int(os.getenv("DYNAMAZE_WIDTH", "7"))
DEFAULT_HEIGHT = int(os.getenv("DYNAMAZE_HEIGHT", "7"))
LOG_LEVEL = os.getenv("DYNAMAZE_LOG_LEVEL", "INFO").upper()

app = Flask(__name__)


def _coords_to_json(coords: Iterable[Coord]) -> List[List[int]]:
    return [[int(r), int(c)] for (r, c) in sorted(coords)]


def _coord_from_json(obj: Any) -> Coord:
    try:
        r, c = obj
        return int(r), int(c)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"bad coordinate: {obj!r}") from exc


def state_to_json(ctl: TurnController) -> Dict[str, Any]:
    return controller_to_dict(ctl)


def _seed(body: Dict[str, Any]) -> Optional[int]:
    seed = body.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise DecodeError(f"seed must be an integer, got {seed!r}")
    return seed


def _body() -> Dict[str, Any]:
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        raise DecodeError("JSON object body required")
    return body


def _load_state(body: Dict[str, Any]) -> TurnController:
    s_in = body.get("state")
    if not isinstance(s_in, dict):
        raise DecodeError("state required")
    return controller_from_dict(s_in, rng=random.Random(_seed(body)))


def _reply(ctl: TurnController, **extra: Any) -> Any:
    out: Dict[str, Any] = {"ok": True, "state": state_to_json(ctl)}
    out.update(extra)
    return jsonify(out)


@app.errorhandler(DynamazeError)
def _rule_error(e: DynamazeError) -> Tuple[Any, int]:
    logger.debug("Rejected request: %s", e)
    return jsonify({"ok": False, "error": str(e)}), 400


# ---------- Game API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        body = {}
    try:
        width = int(body.get("width", DEFAULT_WIDTH))
        height = int(body.get("height", DEFAULT_HEIGHT))
        players = [int(p) for p in body.get("players", [1, 2])]
    except (TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": f"bad request: {e}"}), 400
    ctl = TurnController.new_game(width, height, players, seed=_seed(body))
    return _reply(ctl, reachable=_coords_to_json(ctl.reachable()))


@app.post("/api/rotate")
def api_rotate() -> Any:
    body = _body()
    ctl = _load_state(body)
    try:
        turns = int(body.get("turns", 1))
    except (TypeError, ValueError) as e:
        raise DecodeError(f"bad turns: {e}") from e
    ctl.rotate_loose_tile(turns)
    return _reply(ctl)


@app.post("/api/insert")
def api_insert() -> Any:
    body = _body()
    ctl = _load_state(body)
    direction, guide = slot_from_json(body.get("direction"), body.get("guide"))
    ctl.insert(direction, guide)
    return _reply(ctl, reachable=_coords_to_json(ctl.reachable()))


@app.post("/api/move")
def api_move() -> Any:
    body = _body()
    ctl = _load_state(body)
    dest = _coord_from_json(body.get("move"))
    reachable = ctl.reachable()
    if dest not in reachable:
        return jsonify({"ok": False, "error": "Illegal move", "reachable": _coords_to_json(reachable)}), 400
    scored = ctl.move(dest)
    return _reply(ctl, scored=scored)


@app.post("/api/reachable")
def api_reachable() -> Any:
    body = _body()
    ctl = _load_state(body)
    if body.get("from") is not None:
        cells = ctl.board.reachable_coords(_coord_from_json(body["from"]))
    else:
        cells = ctl.reachable()
    return jsonify({"ok": True, "reachable": _coords_to_json(cells)})


@app.get("/api/slots")
def api_slots() -> Any:
    try:
        width = int(request.args.get("width", DEFAULT_WIDTH))
        height = int(request.args.get("height", DEFAULT_HEIGHT))
    except ValueError as e:
        return jsonify({"ok": False, "error": f"bad size: {e}"}), 400
    check_shape(width, height)
    slots = [[d.name, g] for d in CLOCKWISE for g in range(guide_count(width, height, d))]
    return jsonify({"ok": True, "slots": slots})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL)
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
