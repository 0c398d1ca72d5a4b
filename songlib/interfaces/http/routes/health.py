from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from songlib.database.db_manager import db

health_bp = Blueprint("health_bp", __name__)


def _database_check() -> str:
    try:
        db.session.execute(text("SELECT 1"))
        return "ok"
    except Exception as exc:  # pragma: no cover - DB failure path
        return f"error: {exc.__class__.__name__}"


def _detail_service_configured() -> bool:
    client = current_app.extensions.get("detail_client")
    return bool(getattr(client, "configured", client is not None))


@health_bp.route("/healthz")
def healthz():
    checks = {"database": _database_check()}
    status = 200 if checks["database"] == "ok" else 503
    overall = "ok" if status == 200 else "degraded"
    return jsonify({"status": overall, "checks": checks}), status


@health_bp.route("/readyz")
def readyz():
    checks = {
        "database": _database_check(),
        "detail_service": "configured" if _detail_service_configured() else "missing",
    }
    healthy = checks["database"] == "ok" and checks["detail_service"] == "configured"
    status = 200 if healthy else 503
    return jsonify({"status": "ready" if healthy else "blocked", "checks": checks}), status
