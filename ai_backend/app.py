# --- app.py ---
# Serves the current Mayon alert level to the map and mobile clients.

import logging

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_cors import CORS

from mayon_alert.config import Settings
from mayon_alert.ingest import AlertIngestor
from mayon_alert.preprocess.normalizer import ALERT_LEVELS, ERROR_FALLBACK_SOURCE, fallback_reading

load_dotenv()

logger = logging.getLogger(__name__)

# Intermediary caches may reuse a response for the same window as the in-process cache.
CACHE_CONTROL = "s-maxage={seconds}, stale-while-revalidate"


def create_app(ingestor=None, settings=None):
    settings = settings or Settings.from_env()
    # One ingestor (and with it one reading cache) per process, built at startup.
    if ingestor is None:
        ingestor = AlertIngestor.from_settings(settings)

    app = Flask(__name__)
    CORS(app, resources={r"/api/*": {"origins": "*", "methods": ["GET"]}})
    app.config["INGESTOR"] = ingestor

    @app.route("/", methods=["GET"])
    def home():
        return jsonify({"message": "Mayon alert backend is running!"})

    @app.route("/api/alert", methods=["GET", "HEAD"])
    def alert():
        """Current alert reading. Always 200, fallback included."""
        # Flask answers HEAD on GET routes by default; only GET runs a cycle.
        if request.method == "HEAD":
            return method_not_allowed(None)
        try:
            reading = ingestor.get_reading()
        except Exception:
            logger.exception("ingestion raised, serving error fallback")
            reading = fallback_reading(settings.volcano, source=ERROR_FALLBACK_SOURCE)

        resp = jsonify(reading.to_dict())
        resp.headers["Access-Control-Allow-Methods"] = "GET"
        resp.headers["Cache-Control"] = CACHE_CONTROL.format(seconds=settings.cache_seconds)
        return resp

    @app.route("/api/alert/levels", methods=["GET"])
    def alert_levels():
        return jsonify({str(level): info for level, info in ALERT_LEVELS.items()})

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return jsonify({"error": "Method not allowed"}), 405

    return app


if __name__ == "__main__":
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("--- Initializing Mayon Alert Backend ---")
    app = create_app(settings=settings)
    app.run(host="0.0.0.0", port=settings.port, threaded=True)
