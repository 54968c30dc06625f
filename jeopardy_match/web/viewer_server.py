"""
Web server for viewing saved match runs.
"""

import json
from pathlib import Path
from flask import Flask, jsonify, request, send_from_directory

from .run_recorder import RunRecorder


class ViewerServer:
    """JSON API over the recorded runs directory."""

    def __init__(self, port: int = 5000, host: str = '127.0.0.1', runs_dir: str = "runs"):
        self.port = port
        self.host = host
        self.runs_dir = Path(runs_dir)
        self.run_recorder = RunRecorder(runs_dir=runs_dir)

        self.app = Flask(__name__)

        # Setup routes
        self._setup_routes()

    def _run_dir(self, run_name: str) -> Path:
        # Run names are directory names; nothing outside runs_dir is served
        return self.runs_dir / Path(run_name).name

    def _setup_routes(self):
        """Setup Flask routes."""
        @self.app.route('/api/runs')
        def list_runs():
            """List all available runs."""
            return jsonify(self.run_recorder.list_runs())

        @self.app.route('/api/runs/<run_name>/events')
        def get_events(run_name: str):
            """Get events for a specific run, optionally after a position (for live updates)."""
            events_file = self._run_dir(run_name) / "events.jsonl"

            if not events_file.exists():
                return jsonify({"error": "Run not found"}), 404

            last_position = request.args.get('last_position', 0, type=int)

            events = []
            current_position = 0
            try:
                with open(events_file, 'r', encoding='utf-8') as f:
                    for line in f:
                        current_position += 1
                        if current_position > last_position and line.strip():
                            events.append(json.loads(line))
            except (OSError, json.JSONDecodeError) as e:
                return jsonify({"error": str(e)}), 500

            return jsonify({
                "events": events,
                "position": current_position
            })

        @self.app.route('/api/runs/<run_name>/metadata')
        def get_metadata(run_name: str):
            """Get metadata for a specific run."""
            metadata_file = self._run_dir(run_name) / "metadata.json"

            if not metadata_file.exists():
                return jsonify({"error": "Run not found"}), 404

            try:
                with open(metadata_file, 'r', encoding='utf-8') as f:
                    metadata = json.load(f)
                return jsonify(metadata)
            except (OSError, json.JSONDecodeError) as e:
                return jsonify({"error": str(e)}), 500

        @self.app.route('/api/runs/<run_name>/exports')
        def list_exports(run_name: str):
            """List exported question files of a run."""
            if not self._run_dir(run_name).is_dir():
                return jsonify({"error": "Run not found"}), 404
            return jsonify(self.run_recorder.list_exports(run_name))

        @self.app.route('/api/runs/<run_name>/exports/<filename>')
        def download_export(run_name: str, filename: str):
            """Download one exported question file."""
            run_dir = self._run_dir(run_name)
            if filename not in self.run_recorder.list_exports(run_name):
                return jsonify({"error": "Export not found"}), 404
            return send_from_directory(run_dir.resolve(), filename, as_attachment=True)

    def start(self) -> None:
        """Start the web server."""
        print(f"\n{'='*60}")
        print(f"Starting viewer server on http://{self.host}:{self.port}")
        print(f"Runs directory: {self.runs_dir}")
        print(f"{'='*60}\n")
        self.app.run(host=self.host, port=self.port, debug=False, use_reloader=False)
