"""
Flask application server for the Allbridge dashboard.

Reloads the CSV sources on each request so a fresh export is picked up
immediately, and serves the derived dataset as JSON.
"""

from flask import Flask, jsonify

from config import Settings, load_settings
from fetch_sources import SourceLoadError
from generate_report import load_dashboard

FLOW_DIRECTIONS = ("outflow", "inflow")


def create_app(settings: Settings | None = None) -> Flask:
    app = Flask(__name__)
    app.config["DASHBOARD_SETTINGS"] = settings or load_settings()

    def load_all_data() -> dict:
        return load_dashboard(app.config["DASHBOARD_SETTINGS"])

    @app.errorhandler(SourceLoadError)
    def source_load_failed(exc):
        return jsonify({"status": "error", "message": "Failed to load data."}), 503

    @app.route("/api/data")
    def api_data():
        """Return the full dashboard dataset."""
        return jsonify(load_all_data())

    @app.route("/api/metrics")
    def api_metrics():
        data = load_all_data()
        return jsonify({
            "status": data["status"],
            "message": data["message"],
            "metrics": data["metrics"],
        })

    @app.route("/api/flows/<direction>")
    def api_flows(direction):
        if direction not in FLOW_DIRECTIONS:
            return jsonify({"status": "error", "message": f"Unknown direction: {direction}"}), 404
        data = load_all_data()
        return jsonify({"hub": data["hub"], "graph": data[direction]})

    @app.route("/health")
    def health():
        """Health check endpoint."""
        return jsonify({"status": "ok"})

    return app


app = create_app()


if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5000)
