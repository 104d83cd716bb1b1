"""Flask front for PageScan.

POST /detect runs the detector on a page the caller already has, stores the
report and sends the browser on to the explanation view. When detection
fails, the failure record replaces the report and /explanation returns it
with a null summary.

Run: python -m pagescan.api
"""

import os
import logging
from flask import Flask, request, jsonify, abort, redirect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from pagescan import db
from pagescan.app.scanner import ReportAggregator
from pagescan.config import RESULTS_PAGE, load_config
from pagescan.html_scanner import snapshot_from_html
from pagescan.models import DetectionOutcome

# Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("api")

# Flask app
app = Flask(__name__)

# Rate limiter: prefer Redis storage in production when REDIS_URL is set
REDIS_URL = os.getenv("REDIS_URL")
if REDIS_URL:
    limiter = Limiter(get_remote_address, app=app,
                      default_limits=["60 per minute"], storage_uri=REDIS_URL)
    logger.info("Using Redis at %s for rate limiting", REDIS_URL)
else:
    limiter = Limiter(get_remote_address, app=app, default_limits=["60 per minute"])

# API key
API_KEY = os.getenv("PAGESCAN_API_KEY", None)
if API_KEY:
    logger.info("API key enabled")

aggregator = ReportAggregator(load_config())

# Initialize DB
db.init_db()


def require_api_key() -> None:
    if not API_KEY:
        return
    key = request.headers.get("X-API-Key") or request.args.get("api_key")
    if not key or key != API_KEY:
        abort(401, description="Invalid or missing API key")


def _request_data() -> dict:
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def detect_page(url: str, html: str) -> DetectionOutcome:
    """Snapshot the page and run the detector; never raises."""
    try:
        snapshot = snapshot_from_html(html, url)
    except Exception as e:
        logger.exception("Could not snapshot %s: %s", url, e)
        return DetectionOutcome.failed(url, e)
    return aggregator.run(snapshot)


@app.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok", "version": "1.0"})


@app.route("/detect", methods=["POST"])
@limiter.limit("30 per minute")
def detect():
    require_api_key()
    data = _request_data()
    url = data.get("url")
    if not isinstance(url, str) or not url.strip():
        return jsonify({"error": "missing 'url'"}), 400
    url = url.strip()
    html = data.get("html")
    if not isinstance(html, str):
        html = ""

    outcome = detect_page(url, html)
    try:
        db.store_outcome(outcome)
    except Exception:
        # storage problems must not keep the user on the page
        logger.exception("Failed to store detection result for %s", url)

    return redirect(RESULTS_PAGE, code=303)


@app.route(RESULTS_PAGE, methods=["GET"])
@limiter.limit("20 per minute")
def explanation():
    report = db.get_entry(db.REPORT_KEY)
    if report is None:
        return jsonify({"error": "not_found"}), 404
    # a failure record has no summary of its own; the stored one belongs to an older run
    summary = None if "error" in report else db.get_entry(db.SUMMARY_KEY)
    return jsonify({"report": report, "summary": summary})


@app.route("/report/summary", methods=["GET"])
@limiter.limit("20 per minute")
def report_summary():
    summary = db.get_entry(db.SUMMARY_KEY)
    if summary is None:
        return jsonify({"error": "not_found"}), 404
    return jsonify(summary)


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", 5050)), debug=False)
