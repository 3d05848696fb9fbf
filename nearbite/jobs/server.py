"""HTTP entrypoint serving meal recommendations (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any

from flask import Flask, jsonify, request

from nearbite.core.config import get_settings
from nearbite.core.service import get_availability, get_recommendations
from nearbite.models import sanitize_request

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; reports which providers have credentials."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "providers": {
                    "google": bool(settings.google_api_key),
                    "kakao": bool(settings.kakao_api_key),
                },
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.get("/availability")
def availability() -> Any:
    country_code = request.args.get("country_code")
    return jsonify(get_availability(country_code).to_dict()), 200


@app.post("/recommendations")
def recommendations() -> Any:
    """
    Recommend nearby places.
    Required JSON fields: lat, lng, mode
    Optional: radius_m, limit, categories, price_levels, open_now, randomness_level,
    exclude_place_ids, recently_shown_place_ids, country_code
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid JSON"}), 400

    settings = get_settings()
    try:
        search = sanitize_request(payload, default_limit=settings.default_limit, max_limit=settings.max_limit)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    logger.info(
        "Recommendation request mode=%s radius=%d limit=%d vibe=%s country=%s",
        search.mode,
        search.radius_m,
        search.limit,
        search.randomness_level,
        search.country_code,
    )
    result = get_recommendations(search, settings=settings)
    return jsonify(result.to_dict()), 200


def main() -> None:
    """Bind on $PORT when injected by the platform, else WORKER_PORT."""
    env_port = os.getenv("PORT")
    port = int(env_port or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
