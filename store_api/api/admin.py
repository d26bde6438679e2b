from datetime import datetime, timezone

from flask import Blueprint, jsonify

from store_api.middleware.auth import require_admin
from store_api.services import get_services

admin_bp = Blueprint("admin", __name__, url_prefix="/api")


@admin_bp.route("/stats", methods=["GET"])
@require_admin
def get_stats():
    """Dashboard counters with month-over-month growth (admin only)."""
    return jsonify({"success": True, "data": get_services().stats.summary()})


@admin_bp.route("/health", methods=["GET"])
def health():
    """Liveness check."""
    return jsonify({"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()})
