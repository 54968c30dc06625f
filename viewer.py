"""
Web viewer server for browsing saved match runs and exported questions.
Run this separately from main.py.
"""

import argparse
from typing import Any, Dict, List

from jeopardy_match.web.run_recorder import RunRecorder
from jeopardy_match.web.viewer_server import ViewerServer


def format_run_listing(runs: List[Dict[str, Any]]) -> str:
    """One block per run: outcome, event count and question exports."""
    if not runs:
        return "No saved runs."

    lines = []
    for run in runs:
        if run.get("completed"):
            status = f"winner: {run['winner']}"
        elif run.get("has_events"):
            status = "in progress"
        else:
            status = "no events"
        lines.append(f"{run['name']}  ({status}, {run.get('event_count', 0)} events)")
        for export in run.get("exports", []):
            lines.append(f"    {export}")
    return "\n".join(lines)


def main():
    """Entry point for the viewer server."""
    parser = argparse.ArgumentParser(
        description="Browse saved match runs and their question exports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python viewer.py                    # Start server on default port 5000
  python viewer.py --port 8080       # Start server on port 8080
  python viewer.py --runs-dir custom_runs  # Use custom runs directory
  python viewer.py --list            # Print runs, winners and exports, then exit
        """
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=5000,
        help="Port for web server (default: 5000)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default='127.0.0.1',
        help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--runs-dir",
        type=str,
        default="runs",
        help="Directory containing match runs (default: runs)"
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List saved runs with their winner and question exports instead of serving"
    )

    args = parser.parse_args()

    if args.list:
        print(format_run_listing(RunRecorder(runs_dir=args.runs_dir).list_runs()))
        return

    server = ViewerServer(port=args.port, host=args.host, runs_dir=args.runs_dir)
    server.start()


if __name__ == "__main__":
    main()
