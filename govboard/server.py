#!/usr/bin/env python3
"""
govboard Kanban server
----------------------
Serves the audit-findings board as a JSON API backed by the audit service.

Usage:
    govboard-server                         # defaults / govboard.yaml
    govboard-server --config board.yaml --port 3000

API:
    GET    /api/board?q=            → { lanes, stats, search }
    POST   /api/board/refresh       → { ok, stats }
    POST   /api/cards/<id>/move     → JSON body: { from, to }
                                      202 { accepted: true, card } | 200 { accepted: false }
    POST   /api/findings            → 201 | 400 (validation) | 502 (backend)
    DELETE /api/findings/<id>       → 200 | 502
    GET    /api/notifications       → { notifications }
"""

import argparse
import logging
import sys
from datetime import date
from typing import Optional

from flask import Flask, jsonify, request

from .api import findings_from_config
from .config import Config
from .kanban.board import KanbanBoard
from .kanban.schema import Card, FindingValidationError, commitment_priority
from .notify import Notifier

logger = logging.getLogger(__name__)


def _card_json(card: Card, today: Optional[date] = None) -> dict:
    data = card.to_dict()
    data["priority"] = commitment_priority(card.get("commitment_date"), today)
    return data


def create_app(board: KanbanBoard) -> Flask:
    app = Flask(__name__)
    app.config["BOARD"] = board

    # ── Board ────────────────────────────────────────────────────────────────

    @app.route("/api/board")
    def api_board():
        # Per-request filter; clients share one board
        term = request.args.get("q", "")
        today = date.today()
        columns = board.columns(term)
        lanes = [
            {
                "key": lane.key,
                "label": lane.label,
                "count": len(columns[lane.key]),
                "cards": [_card_json(c, today) for c in columns[lane.key]],
            }
            for lane in board.lanes
        ]
        return jsonify({
            "lanes":  lanes,
            "stats":  board.stats(),
            "search": term,
        })

    @app.route("/api/board/refresh", methods=["POST"])
    def api_refresh():
        ok = board.refresh()
        return jsonify({"ok": ok, "stats": board.stats()}), (200 if ok else 502)

    @app.route("/api/cards/<card_id>/move", methods=["POST"])
    def api_move(card_id):
        data = request.get_json(force=True, silent=True) or {}
        to_lane = str(data.get("to", "")).strip()
        card = board.store.get(card_id)
        from_lane = data.get("from") or (card.status if card else "")
        if not to_lane:
            return jsonify({"error": "'to' lane is required"}), 400

        future = board.handle_drop(card_id, from_lane, to_lane)
        if future is None:
            return jsonify({"accepted": False})
        moved = board.store.get(card_id)
        return jsonify({"accepted": True, "card": moved.to_dict() if moved else None}), 202

    # ── Findings ─────────────────────────────────────────────────────────────

    @app.route("/api/findings", methods=["POST"])
    def api_create_finding():
        data = request.get_json(force=True, silent=True) or {}
        try:
            ok = board.create_finding(data)
        except FindingValidationError as e:
            return jsonify({"error": str(e), "problems": e.problems}), 400
        if not ok:
            return jsonify({"error": "Failed to create audit finding"}), 502
        return jsonify({"ok": True, "stats": board.stats()}), 201

    @app.route("/api/findings/<card_id>", methods=["DELETE"])
    def api_delete_finding(card_id):
        if board.delete_finding(card_id):
            return jsonify({"ok": True})
        return jsonify({"error": "Failed to delete audit finding"}), 502

    @app.route("/api/notifications")
    def api_notifications():
        limit = request.args.get("limit", 20, type=int)
        return jsonify({"notifications": [t.to_dict() for t in board.notifier.recent(limit)]})

    return app


def main(argv=None):
    parser = argparse.ArgumentParser(description="govboard Kanban server")
    parser.add_argument("--config", help="Path to govboard.yaml")
    parser.add_argument("--host", help="Bind address")
    parser.add_argument("--port", type=int, help="Listen port")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [govboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    cfg = Config.load(args.config)
    board = KanbanBoard(findings_from_config(cfg), Notifier(cfg.notification_history))
    if not board.refresh():
        logger.warning(f"Starting with an empty board; {cfg.audit_service_url} unavailable")

    app = create_app(board)
    host = args.host or cfg.host
    port = args.port or cfg.port
    logger.info(f"Serving board on http://{host}:{port}")
    try:
        app.run(host=host, port=port)
    finally:
        board.close(wait=False)


if __name__ == "__main__":
    main()
