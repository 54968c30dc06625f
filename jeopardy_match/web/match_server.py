"""
Web server broadcasting live match events to browser clients.
"""

import threading
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING
from flask import Flask, jsonify
from flask_socketio import SocketIO, emit

from .event_emitter import EventEmitter

if TYPE_CHECKING:
    from ..session import MatchSession


class MatchServer:
    """Streams emitted match events (including ability announcements) to connected observers."""

    def __init__(self, port: int = 5000, host: str = '127.0.0.1', event_emitter: Optional[EventEmitter] = None):
        self.port = port
        self.host = host

        self.app = Flask(__name__)
        self.socketio = SocketIO(self.app, cors_allowed_origins="*", async_mode='threading')
        self.event_emitter = event_emitter or EventEmitter()
        self.match_thread: Optional[threading.Thread] = None
        self.session: Optional['MatchSession'] = None
        self.clients_connected = 0
        self._clients_lock = threading.Lock()

        # Register event emitter listener
        self.event_emitter.register_listener(self._broadcast_event)

        self._setup_routes()
        self._setup_socketio()

    def _setup_routes(self):
        """Setup Flask routes."""
        @self.app.route('/api/match')
        def match_summary():
            return jsonify(self._get_match_state())

    def _setup_socketio(self):
        """Setup SocketIO event handlers."""
        @self.socketio.on('connect')
        def handle_connect():
            with self._clients_lock:
                self.clients_connected += 1
                total = self.clients_connected
            print(f"Client connected. Total clients: {total}")

            # Send current match state if a match is attached
            if self.session:
                emit('match_state_update', {'match_state': self._get_match_state()})

        @self.socketio.on('disconnect')
        def handle_disconnect():
            with self._clients_lock:
                self.clients_connected -= 1
                total = self.clients_connected
            print(f"Client disconnected. Total clients: {total}")

    def _broadcast_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """Broadcast an event to all connected clients."""
        if self.clients_connected > 0:
            self.socketio.emit(event_type, data)

    def _get_match_state(self) -> Dict[str, Any]:
        """Current match summary for newly connected clients."""
        if not self.session:
            return {}
        return self.session.get_summary()

    def run_match_in_background(self, session: 'MatchSession', runner: Callable[[], Any]) -> None:
        """Attach a session and drive it from a background thread."""
        self.session = session

        def run_match():
            try:
                result = runner()
                print(f"\nMatch completed. Winner: {result}")
            except Exception as e:
                print(f"\nError running match: {e}")
                raise

        self.match_thread = threading.Thread(target=run_match, daemon=True)
        self.match_thread.start()

    def start(self) -> None:
        """Start the web server."""
        print(f"\n{'='*60}")
        print(f"Starting match server on http://{self.host}:{self.port}")
        print(f"{'='*60}\n")
        self.socketio.run(self.app, host=self.host, port=self.port, debug=False, allow_unsafe_werkzeug=True)

    def wait_for_match_completion(self) -> None:
        """Wait for match thread to complete."""
        if self.match_thread:
            self.match_thread.join()
