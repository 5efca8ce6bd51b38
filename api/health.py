from datetime import datetime, timezone

from flask import Blueprint

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: API is up
        schema:
          type: object
          properties:
            status:
              type: string
              example: ok
            timestamp:
              type: string
              format: date-time
    """
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}, 200
