"""
Run recorder that saves match events and exports to files.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from threading import Lock

from ..core.questions import Question
from ..core.results import export_filename, export_questions


class RunRecorder:
    """Records match events to files in a run directory."""

    def __init__(self, runs_dir: str = "runs"):
        self.runs_dir = Path(runs_dir)
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        self.current_run_dir: Optional[Path] = None
        self.events_file: Optional[Path] = None
        self.metadata_file: Optional[Path] = None
        self._lock = Lock()
        self._event_count = 0

    def create_run(self, run_name: Optional[str] = None) -> str:
        """
        Create a new run directory.

        Args:
            run_name: Optional custom run name. If None, generates timestamp-based name.

        Returns:
            The run name (directory name)
        """
        if run_name is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            run_name = f"run_{timestamp}"

        self.current_run_dir = self.runs_dir / run_name
        self.current_run_dir.mkdir(exist_ok=True)

        self.events_file = self.current_run_dir / "events.jsonl"
        self.metadata_file = self.current_run_dir / "metadata.json"
        self._event_count = 0

        return run_name

    def record_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """
        Record an event to the events file (JSONL format).

        Args:
            event_type: Type of event
            data: Event data
        """
        if not self.events_file:
            return

        with self._lock:
            event = {
                "timestamp": datetime.now().isoformat(),
                "event_type": event_type,
                "data": data,
                "sequence": self._event_count
            }
            self._event_count += 1

            with open(self.events_file, 'a', encoding='utf-8') as f:
                f.write(json.dumps(event, ensure_ascii=False) + '\n')

    def save_metadata(self, metadata: Dict[str, Any]) -> None:
        """
        Save run metadata to metadata.json.

        Args:
            metadata: Metadata dictionary
        """
        if not self.metadata_file:
            return

        with self._lock:
            with open(self.metadata_file, 'w', encoding='utf-8') as f:
                json.dump(metadata, f, indent=2, ensure_ascii=False)

    def save_export(self, questions: Sequence[Question], fmt: str = "json") -> Optional[Path]:
        """
        Write the exported question set into the current run directory.

        Returns:
            Path of the written file, or None when no run is active
        """
        if not self.current_run_dir:
            return None

        content = export_questions(questions, fmt)
        export_file = self.current_run_dir / export_filename(fmt)
        with self._lock:
            with open(export_file, 'w', encoding='utf-8') as f:
                f.write(content)
        return export_file

    def get_run_path(self) -> Optional[Path]:
        """Get the current run directory path."""
        return self.current_run_dir

    def list_exports(self, run_name: str) -> List[str]:
        run_dir = self.runs_dir / run_name
        if not run_dir.is_dir():
            return []
        return sorted(p.name for p in run_dir.glob("jeopardy_questions_*"))

    def list_runs(self) -> List[Dict[str, Any]]:
        """
        List all available runs.

        Returns:
            List of run info dictionaries
        """
        runs = []
        if not self.runs_dir.exists():
            return runs

        for run_dir in sorted(self.runs_dir.iterdir(), reverse=True):
            if not run_dir.is_dir():
                continue

            metadata_file = run_dir / "metadata.json"
            events_file = run_dir / "events.jsonl"

            run_info = {
                "name": run_dir.name,
                "path": str(run_dir),
                "has_metadata": metadata_file.exists(),
                "has_events": events_file.exists(),
                "exports": self.list_exports(run_dir.name),
            }

            if metadata_file.exists():
                try:
                    with open(metadata_file, 'r', encoding='utf-8') as f:
                        run_info["metadata"] = json.load(f)
                except (OSError, json.JSONDecodeError) as e:
                    print(f"Could not read metadata for {run_dir.name}: {e}")

            # Count events and extract match outcome
            if events_file.exists():
                event_count = 0
                winner = None
                try:
                    with open(events_file, 'r', encoding='utf-8') as f:
                        for line in f:
                            if not line.strip():
                                continue
                            event_count += 1
                            try:
                                event = json.loads(line)
                            except json.JSONDecodeError:
                                continue
                            if event.get("event_type") == "match_complete":
                                winner = event.get("data", {}).get("winner")
                except OSError as e:
                    print(f"Could not read events for {run_dir.name}: {e}")

                run_info["event_count"] = event_count
                run_info["completed"] = winner is not None
                if winner:
                    run_info["winner"] = winner

            runs.append(run_info)

        return runs
