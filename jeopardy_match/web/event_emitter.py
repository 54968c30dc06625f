"""
Event emitter for recording match events to files and forwarding them to live viewers.
"""

from typing import Any, Callable, Dict, List, Optional
from threading import Lock

from .run_recorder import RunRecorder


Listener = Callable[[str, Dict[str, Any]], None]


class EventEmitter:
    """Event emitter that records match events and notifies registered listeners."""

    def __init__(self, run_recorder: Optional[RunRecorder] = None):
        self.run_recorder = run_recorder or RunRecorder()
        self._listeners: List[Listener] = []
        self._lock = Lock()

    def register_listener(self, listener: Listener) -> None:
        """Register a callable receiving (event_type, data) for every event."""
        with self._lock:
            self._listeners.append(listener)

    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        """Emit an event by recording it to file and notifying listeners."""
        if self.run_recorder:
            try:
                self.run_recorder.record_event(event_type, data)
            except Exception as e:
                # Don't let recording errors break the match
                print(f"Error recording event: {e}")

        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event_type, data)
            except Exception as e:
                print(f"Error in event listener: {e}")

    def emit_match_start(self, lobby_code: str, game_master: Dict[str, Any], settings: Dict[str, Any]) -> None:
        """Emit match (session) creation event."""
        self._emit("match_start", {
            "lobby_code": lobby_code,
            "game_master": game_master,
            "settings": settings
        })

    def emit_participant_joined(self, participant_id: str, name: str, role: str) -> None:
        self._emit("participant_joined", {
            "participant_id": participant_id,
            "name": name,
            "role": role
        })

    def emit_participant_left(self, participant_id: str, name: str, reason: str) -> None:
        self._emit("participant_left", {
            "participant_id": participant_id,
            "name": name,
            "reason": reason
        })

    def emit_settings_update(self, settings: Dict[str, Any]) -> None:
        self._emit("settings_update", {"settings": settings})

    def emit_categories_set(self, categories: List[str], source: str) -> None:
        self._emit("categories_set", {
            "categories": categories,
            "source": source  # "manual", "llm" or "placeholder"
        })

    def emit_category_fallback(self, reason: str, count: int) -> None:
        """Emit event when category generation failed and placeholders were used."""
        self._emit("category_fallback", {
            "reason": reason,
            "count": count
        })

    def emit_phase_change(self, phase: str) -> None:
        """Emit phase change event."""
        self._emit("phase_change", {"phase": phase})

    def emit_question_submitted(self, question_id: str, creator_id: str, category: str, status: str, points: int) -> None:
        """Emit question submission event (the question text stays private)."""
        self._emit("question_submitted", {
            "question_id": question_id,
            "creator_id": creator_id,
            "category": category,
            "status": status,
            "points": points
        })

    def emit_question_reviewed(self, question_id: str, category: str, status: str, points: int) -> None:
        self._emit("question_reviewed", {
            "question_id": question_id,
            "category": category,
            "status": status,
            "points": points
        })

    def emit_cell_selected(self, row: int, column: int, question_id: str, category: str, points: int,
                           prompt: str, countdown_seconds: int) -> None:
        """Emit event when the GM opens a board cell."""
        self._emit("cell_selected", {
            "row": row,
            "column": column,
            "question_id": question_id,
            "category": category,
            "points": points,
            "question": prompt,
            "countdown_seconds": countdown_seconds
        })

    def emit_answer_revealed(self, question_id: str, answer: str) -> None:
        self._emit("answer_revealed", {
            "question_id": question_id,
            "answer": answer
        })

    def emit_question_resolved(self, question_id: str, points: int, share: int, recipients: List[str],
                               charged: List[str], skipped: bool) -> None:
        """Emit scoring result for a closed question."""
        self._emit("question_resolved", {
            "question_id": question_id,
            "points": points,
            "share": share,
            "recipients": recipients,
            "charged": charged,
            "skipped": skipped
        })

    def emit_ability_activated(self, participant_id: str, name: str, ability: str, description: str, cost: int) -> None:
        """Broadcast an ability activation to every observer."""
        self._emit("ability_activated", {
            "participant_id": participant_id,
            "name": name,
            "ability": ability,
            "description": description,
            "cost": cost
        })

    def emit_score_adjusted(self, participant_id: str, action: str, amount: int, score: int) -> None:
        self._emit("score_adjusted", {
            "participant_id": participant_id,
            "action": action,
            "amount": amount,
            "score": score
        })

    def emit_command_rejected(self, command: str, error_type: str, message: str,
                              participant_id: Optional[str] = None) -> None:
        """Emit event for a refused command (the match state is unchanged)."""
        self._emit("command_rejected", {
            "command": command,
            "error_type": error_type,
            "message": message,
            "participant_id": participant_id
        })

    def emit_announcement(self, message: str, phase: str, resolution: str) -> None:
        """Emit host announcement event."""
        self._emit("announcement", {
            "message": message,
            "phase": phase,
            "resolution": resolution
        })

    def emit_match_state_update(self, match_state: Dict[str, Any]) -> None:
        """Emit match state update event."""
        self._emit("match_state_update", {
            "match_state": match_state
        })

    def emit_match_complete(self, ranking: List[Dict[str, Any]], winner: Optional[str]) -> None:
        """Emit final ranking event."""
        self._emit("match_complete", {
            "ranking": ranking,
            "winner": winner
        })

    def emit_export_saved(self, path: str, fmt: str, question_count: int) -> None:
        self._emit("export_saved", {
            "path": path,
            "format": fmt,
            "question_count": question_count
        })

    def emit_llm_metadata(self, action_type: str, prompt_tokens: int, completion_tokens: int,
                          total_tokens: int, latency_ms: float, model: str) -> None:
        """Emit LLM API call metadata (tokens, latency)."""
        self._emit("llm_metadata", {
            "action_type": action_type,
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": total_tokens,
            "latency_ms": latency_ms,
            "model": model
        })
