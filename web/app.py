from __future__ import annotations

import threading
from typing import Any, Mapping, Optional

from flask import Flask, jsonify, request

from adjudicator import Game, JsonFileStore, MemoryStore, ScoreStore, Side
from adjudicator.game import event_to_dict

DEFAULTS = {
    "DRAW_LANGUAGE": "en",
    "WIN_POINTS": 10,
    # None keeps scores in memory for the lifetime of the app
    "SCORE_FILE": None,
}


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.update(DEFAULTS)
    app.config.from_prefixed_env()
    if config:
        app.config.update(config)

    score_file = app.config["SCORE_FILE"]
    store = JsonFileStore(score_file) if score_file else MemoryStore()
    scores = ScoreStore(store)
    game = Game(
        language=app.config["DRAW_LANGUAGE"],
        score_store=scores,
        win_points=int(app.config["WIN_POINTS"]),
    )
    # One game, one tracker: requests are serialised
    lock = threading.Lock()

    def bad_request(exc: Exception):
        app.logger.warning("rejected request to %s: %s", request.path, exc)
        return jsonify({"error": str(exc)}), 400

    @app.post("/api/new")
    def api_new():
        data = request.get_json(silent=True) or {}
        fen = data.get("fen")
        with lock:
            try:
                game.reset(fen)
            except ValueError as exc:
                return bad_request(exc)
            return jsonify(game.snapshot())

    @app.get("/api/state")
    def api_state():
        with lock:
            return jsonify(game.snapshot())

    @app.post("/api/move")
    def api_move():
        payload = request.get_json(silent=True) or {}
        uci = payload.get("move")
        if not uci:
            return jsonify({"error": "Missing move"}), 400

        with lock:
            try:
                event = game.push_uci(uci)
            except ValueError as exc:
                return bad_request(exc)
            snap = game.snapshot()
        snap["draw_event"] = event_to_dict(event)
        return jsonify(snap)

    @app.post("/api/claim")
    def api_claim():
        with lock:
            try:
                game.claim_draw()
            except ValueError as exc:
                return bad_request(exc)
            return jsonify(game.snapshot())

    @app.post("/api/decline")
    def api_decline():
        with lock:
            try:
                game.decline_draw()
            except ValueError as exc:
                return bad_request(exc)
            return jsonify(game.snapshot())

    @app.get("/api/score")
    def api_score():
        with lock:
            return jsonify({side.value: scores.total_points(side) for side in Side})

    @app.post("/api/score/reset")
    def api_score_reset():
        with lock:
            scores.reset()
            return jsonify({side.value: scores.total_points(side) for side in Side})

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
