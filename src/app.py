"""
Flask web application for live competition results.
"""
import os
import time
import yaml
import requests
from flask import Flask, render_template, jsonify, Response, stream_with_context
from core.errors import ApiError, DataConsistencyError, SnapshotFormatError
from core.loader import load_competition
from core.results import build_results_view

# Templates ship as core package data
TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'core', 'templates')

app = Flask(__name__, template_folder=TEMPLATE_DIR)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('COMPETITION_DATA_DIR', os.path.join(BASE_DIR, 'data'))

SUMMARY_FILE = os.environ.get(
    'COMPETITION_SUMMARY_FILE',
    os.path.join(DATA_DIR, 'competition-state', 'competition-summary.json'))
SUMMARY_URL = os.environ.get('COMPETITION_SUMMARY_URL')
SETTINGS_FILE = os.path.join(DATA_DIR, 'settings.yaml')

# Change stream timing
POLL_INTERVAL_SECONDS = 3
HEARTBEAT_INTERVAL_SECONDS = 15


def get_default_settings():
    """Return default display settings."""
    return {
        'title_suffix': '',
        'show_point_table': True,
        'refresh_seconds': 15,
        'request_timeout_seconds': 10,
    }


def load_settings():
    """Load display settings from YAML file, merged over the defaults."""
    defaults = get_default_settings()
    if not os.path.exists(SETTINGS_FILE):
        return defaults
    try:
        with open(SETTINGS_FILE, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        app.logger.warning(f'Failed to parse {SETTINGS_FILE}: {e}')
        return defaults
    if not data:
        return defaults
    return {**defaults, **data}


def _snapshot_source() -> str:
    return SUMMARY_URL or SUMMARY_FILE


def _get_live_data() -> dict:
    """Build the template context dict for the live results view.

    Returns:
        Dictionary with keys: results (the results view model) and settings.
    """
    settings = load_settings()
    snapshot = load_competition(_snapshot_source(), timeout=settings['request_timeout_seconds'])
    return dict(results=build_results_view(snapshot), settings=settings)


@app.errorhandler(ApiError)
def handle_api_error(e):
    app.logger.error(f'Competition summary unavailable: {e}')
    return jsonify({'error': f'Competition summary unavailable: {e.status} {e.status_text}'}), 502


@app.errorhandler(requests.exceptions.RequestException)
def handle_request_exception(e):
    app.logger.error(f'Competition summary unreachable: {e}')
    return jsonify({'error': 'Competition summary unreachable'}), 502


@app.errorhandler(SnapshotFormatError)
def handle_snapshot_format_error(e):
    app.logger.error(f'Malformed competition summary: {e}')
    return jsonify({'error': f'Malformed competition summary: {e}'}), 502


@app.errorhandler(DataConsistencyError)
def handle_data_consistency_error(e):
    app.logger.error(f'Inconsistent competition data: {e}')
    return jsonify({'error': f'Inconsistent competition data: {e}'}), 500


@app.route('/')
def live():
    """Read-only live view of the competition results."""
    return render_template('live.html', **_get_live_data())


@app.route('/api/live-html')
def api_live_html():
    """Return only the inner HTML of the live content area (partial template)."""
    return render_template('live_content.html', **_get_live_data())


@app.route('/api/competition')
def api_competition():
    """Return the results view model as JSON."""
    return jsonify(_get_live_data()['results'])


def _get_summary_mtime() -> float:
    """Return the snapshot file's mtime, or 0.0 if missing."""
    return os.path.getmtime(SUMMARY_FILE) if os.path.exists(SUMMARY_FILE) else 0.0


@app.route('/api/live-stream')
def api_live_stream():
    """Server-Sent Events stream that notifies clients when results change."""
    remote = bool(SUMMARY_URL)
    refresh_seconds = load_settings()['refresh_seconds']

    def generate():
        """Yield SSE events, checking the summary mtime every few seconds."""
        yield "event: connected\ndata: ok\n\n"

        last_mtime = _get_summary_mtime()
        heartbeat_counter = 0
        refresh_counter = 0

        while True:
            time.sleep(POLL_INTERVAL_SECONDS)
            heartbeat_counter += POLL_INTERVAL_SECONDS
            refresh_counter += POLL_INTERVAL_SECONDS

            if remote:
                # The remote summary can't be watched, refresh on a timer
                if refresh_counter >= refresh_seconds:
                    refresh_counter = 0
                    yield f"event: update\ndata: {time.time()}\n\n"
            else:
                current_mtime = _get_summary_mtime()
                if current_mtime != last_mtime:
                    last_mtime = current_mtime
                    yield f"event: update\ndata: {time.time()}\n\n"

            if heartbeat_counter >= HEARTBEAT_INTERVAL_SECONDS:
                heartbeat_counter = 0
                yield ": heartbeat\n\n"

    return Response(
        stream_with_context(generate()),
        mimetype='text/event-stream',
        headers={
            'Cache-Control': 'no-cache',
            'X-Accel-Buffering': 'no',
        },
    )


if __name__ == '__main__':
    app.run(debug=True, port=5000)
