"""
Run a simulated Jeopardy-style match with dummy contestants.
"""

import argparse
import random
from typing import Dict, Optional

from dotenv import load_dotenv

from jeopardy_match.agents import AgentContext, BaseAgent, DummyAgent
from jeopardy_match.config import GameConfig, load_config
from jeopardy_match.core import MatchPhase, QuestionStatus, rank_participants
from jeopardy_match.errors import MatchError
from jeopardy_match.session import MatchSession
from jeopardy_match.web import EventEmitter, RunRecorder


class SimulatedMatch:
    """Drives a MatchSession from lobby to final ranking with dummy agents."""

    def __init__(self, config: Optional[GameConfig] = None, contestants: int = 3,
                 event_emitter: Optional[EventEmitter] = None, run_name: Optional[str] = None):
        self.config = config or GameConfig()

        # Create run recorder and event emitter
        if event_emitter is None:
            run_recorder = RunRecorder()
            run_name = run_recorder.create_run(run_name)
            self.event_emitter = EventEmitter(run_recorder)
            self.run_recorder = run_recorder
            print(f"Recording match to: runs/{run_name}/")
        else:
            self.event_emitter = event_emitter
            self.run_recorder = event_emitter.run_recorder

        # Generate seed if not provided
        if self.config.random_seed is None:
            self.config.random_seed = random.randint(0, 2**31 - 1)
        self.random = random.Random(self.config.random_seed)

        contestants = min(contestants, self.config.max_participants - 1)
        self.session = MatchSession("Game Master", self.config, event_emitter=self.event_emitter)
        self.gm_id = self.session.game_master_id
        self.agents: Dict[str, BaseAgent] = {}
        for seat in range(1, contestants + 1):
            participant = self.session.join(f"Player {seat}")
            self.agents[participant.participant_id] = DummyAgent(participant, self.config, seat=seat)

    def _context(self, agent: BaseAgent, question=None) -> AgentContext:
        participant = agent.participant
        return AgentContext(
            participant=participant,
            phase=self.session.phase,
            categories=list(self.session.match_state.categories),
            scores={p.participant_id: p.score for p in self.session.participants},
            question=question,
            ability_cost=self.session.play.abilities.cost_for(participant) if participant.ability else None,
        )

    def run_lobby(self) -> None:
        for participant_id in self.agents:
            self.session.set_ready(participant_id, True)
        self.session.generate_categories(self.gm_id)
        self.session.start_question_phase(self.gm_id)

    def run_question_writing(self) -> None:
        """Contestants write one question per slot in turn; the GM approves each into a free slot."""
        writers = list(self.agents.values())
        turn = 0
        for category in self.session.match_state.categories:
            while self.session.available_points(category):
                agent = writers[turn % len(writers)]
                turn += 1
                prompt, answer = agent.write_question(self._context(agent), category)
                question = self.session.submit_question(agent.participant.participant_id, category, prompt, answer)
                points = self.session.available_points(category, question.question_id)[0]
                self.session.review_question(self.gm_id, question.question_id, QuestionStatus.APPROVED,
                                             edits={"points": points})

    def run_play(self) -> None:
        board = self.session.start_play(self.gm_id)
        cells = [(row, column) for row, column, cell in board.iter_cells() if cell.is_playable]
        self.random.shuffle(cells)

        for row, column in cells:
            if self.session.phase != MatchPhase.IN_PLAY:
                break
            self._offer_abilities()
            opened = self.session.select_cell(self.gm_id, row, column)
            self.session.reveal_answer(self.gm_id)
            correct = [
                participant_id for participant_id, agent in self.agents.items()
                if agent.answers_correctly(self._context(agent, opened.question))
            ]
            self.session.resolve(self.gm_id, correct)

    def _offer_abilities(self) -> None:
        for participant_id, agent in self.agents.items():
            if agent.wants_to_activate(self._context(agent)):
                try:
                    self.session.activate_ability(participant_id, participant_id)
                except MatchError:
                    # Already reported by the session; the agent simply doesn't get it this turn
                    continue

    def run_match(self) -> str:
        """
        Run the complete match.
        Returns the winner's name.
        """
        if self.run_recorder:
            self.run_recorder.save_metadata({
                "lobby_code": self.session.match_state.lobby_code,
                "participants": [p.to_dict() for p in self.session.participants],
                "config": {
                    "board_size": self.config.board_size,
                    "use_abilities": self.config.use_abilities,
                    "randomize_abilities": self.config.randomize_abilities,
                    "llm_model": self.config.llm_model,
                    "random_seed": self.config.random_seed
                }
            })

        print("=" * 60)
        print(f"JEOPARDY MATCH - Lobby {self.session.match_state.lobby_code}")
        print("=" * 60)

        self.run_lobby()
        self.run_question_writing()
        self.run_play()

        ranking = rank_participants(self.session.participants)
        self._print_ranking()
        return ranking[0].name if ranking else "Nobody"

    def _print_ranking(self) -> None:
        """Print the final scoreboard."""
        print("\n📊 FINAL RANKING")
        print("-" * 60)
        for place, participant in enumerate(self.session.ranking(), start=1):
            ability = f" [{participant.ability.name} x{participant.ability_uses}]" if participant.ability else ""
            print(f"{place}. {participant.name}: {participant.score}{ability}")
        print(f"\nRandom Seed: {self.config.random_seed}")


def main():
    """Entry point for running a simulated match."""
    parser = argparse.ArgumentParser(
        description="Run a simulated Jeopardy-style match",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                  # Use default config
  python main.py --config configs/default.yaml    # Use a YAML config
  python main.py --players 5 --seed 42            # Reproducible match with 5 contestants
  python main.py --export txt                     # Export questions as text
  python main.py --serve --port 8080              # Stream events to browsers while playing
        """
    )
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="Path to YAML configuration file (default: use default config)")
    parser.add_argument("--seed", "-s", type=int, default=None,
                        help="Random seed for reproducible behavior")
    parser.add_argument("--model", "-m", type=str, default=None,
                        help="LLM model used for category generation. Overrides config file setting.")
    parser.add_argument("--players", "-p", type=int, default=3,
                        help="Number of simulated contestants (default: 3)")
    parser.add_argument("--run-name", "-r", type=str, default=None,
                        help="Custom name for this run (default: auto-generated timestamp)")
    parser.add_argument("--export", "-e", choices=["json", "txt"], default="json",
                        help="Format of the exported question set (default: json)")
    parser.add_argument("--serve", action="store_true",
                        help="Broadcast events over Socket.IO while the match runs")
    parser.add_argument("--port", type=int, default=5000,
                        help="Port for the live match server (default: 5000)")

    args = parser.parse_args()
    load_dotenv()

    config = load_config(args.config) if args.config else GameConfig()

    # Seed is only set via command line, ignore any seed in YAML config
    config.random_seed = args.seed

    if args.model is not None:
        config.llm_model = args.model

    match = SimulatedMatch(config=config, contestants=args.players, run_name=args.run_name)

    if args.serve:
        from jeopardy_match.web.match_server import MatchServer
        server = MatchServer(port=args.port, event_emitter=match.event_emitter)
        server.run_match_in_background(match.session, match.run_match)
        server.start()
        return

    winner = match.run_match()
    print(f"\nWinner: {winner}")

    export_path = match.session.save_export(args.export)
    if export_path:
        print(f"Questions exported to: {export_path}")

    if match.run_recorder:
        run_path = match.run_recorder.get_run_path()
        if run_path:
            print(f"Match events saved to: {run_path}")


if __name__ == "__main__":
    main()
