# backend/kegtrack/routes/system.py
"""
System health endpoint.

Reports the size of every store collection so a deploy can be checked
without touching real records.
"""

import time
from flask import Blueprint, jsonify

from ..extensions import get_store
from ..time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)


@system_bp.get("/api/health")
def health():
    start_time = time.time()
    counts = get_store().counts()
    elapsed_ms = (time.time() - start_time) * 1000

    return jsonify({
        "status": "healthy",
        "timestamp": to_utc_z(utcnow()),
        "store": {
            "latency_ms": round(elapsed_ms, 2),
            "details": counts,
        },
    })
