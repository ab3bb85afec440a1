"""
PVCGL Engine - Console Game Loop

Entry point for playing in the console.
Supports Human vs Scripted Bot, or Bot vs Bot.

Usage:
    python src/play_console.py
    python src/play_console.py --player-deck src/decks/dragapult_ex.txt --seed 7
    python src/play_console.py --bot-vs-bot --max-turns 60
"""

import argparse
import logging
import os
import sys
from typing import Dict, Optional

from models import GameState, Side
from config import GameConfig
from engine import GameEngine
from session import GameSession
from agents import HumanAgent, PlayerAgent, ScriptedBot
from game_setup import setup_game, parse_deck_string, load_deck_from_file
from utils import XRayLogger


logger = logging.getLogger(__name__)

DECKS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "decks")
DEFAULT_PLAYER_DECK_PATH = os.path.join(DECKS_DIR, "mega_lucario_ex.txt")
DEFAULT_OPPONENT_DECK_PATH = os.path.join(DECKS_DIR, "dragapult_ex.txt")
MAX_TURNS = 200


# ============================================================================
# GAME LOOPS
# ============================================================================

def play_game(
    agents: Dict[Side, PlayerAgent],
    state: GameState,
    engine: GameEngine,
    max_turns: int = MAX_TURNS,
    verbose: bool = True,
    xray_logger: Optional[XRayLogger] = None
) -> GameState:
    """
    Run an agent-vs-agent game loop without a turn clock.

    Returns:
        Final game state
    """
    for side, agent in agents.items():
        agent.on_game_start(side)

    _print_header(agents)
    if xray_logger:
        xray_logger.log_state(state)

    while not state.is_game_over() and state.turn_count <= max_turns:
        legal_actions = engine.get_legal_actions(state)
        if not legal_actions:
            logger.error(f"No legal actions at turn {state.turn_count}")
            break

        agent = agents[legal_actions[0].side]
        action = agent.choose_action(state, legal_actions)
        result = engine.step(state, action)

        if xray_logger:
            xray_logger.log_action(state.turn_count, agent.name, action, result.message)
            xray_logger.log_state(result.state)

        if not result.ok:
            agent.on_action_rejected(action, result.message)
            # Keep a stuck agent from looping forever
            result = engine.end_turn(state, force=True)
        elif verbose:
            print(f"[{agent.name}] {result.message}")
        state = result.state

    if state.turn_count > max_turns and not state.is_game_over():
        print(f"\n[WARNING] Maximum turns ({max_turns}) reached. Game stopped without a winner.")

    _finish(state, agents, xray_logger)
    return state


def play_session(
    session: GameSession,
    human: HumanAgent,
    max_turns: int = MAX_TURNS,
    use_timer: bool = False,
    xray_logger: Optional[XRayLogger] = None
) -> GameState:
    """
    Human vs automated opponent through a GameSession.

    With use_timer the turn clock runs in the background and forces the
    turn to end at zero, for both sides.
    """
    human.on_game_start(session.human_side)
    agents = {session.human_side: human, session.ai_side: session.ai_agent}
    _print_header(agents)
    if use_timer:
        session.start_timer()

    try:
        while not session.is_game_over() and session.snapshot().turn_count <= max_turns:
            state = session.snapshot()
            if xray_logger:
                xray_logger.log_state(state)

            if session.is_human_turn():
                action = human.choose_action(state, session.engine.get_legal_actions(state))
                result = session.submit(action)
                if xray_logger:
                    xray_logger.log_action(state.turn_count, human.name, action, result.message)
                if result.ok:
                    print(f"\n{result.message}")
                else:
                    human.on_action_rejected(action, result.message)
            else:
                for result in session.run_ai_turn(pace=use_timer):
                    print(f"[{session.ai_agent.name}] {result.message}")
    finally:
        session.close()

    state = session.snapshot()
    _finish(state, agents, xray_logger)
    return state


def _print_header(agents: Dict[Side, PlayerAgent]):
    print("\n" + "=" * 70)
    print("GAME START")
    print("=" * 70)
    for side, agent in agents.items():
        print(f"{side.value.capitalize()}: {agent.name}")
    print("=" * 70)


def _finish(state: GameState, agents: Dict[Side, PlayerAgent], xray_logger: Optional[XRayLogger]):
    print("\n" + "=" * 70)
    print("GAME OVER")
    print("=" * 70)

    winner_name = None
    if state.winner is not None:
        winner_name = agents[state.winner].name
        print(f"Winner: {winner_name}")
    else:
        print("Game ended without result.")

    print(f"\nPrizes Remaining:")
    for side, agent in agents.items():
        print(f"  {agent.name}: {state.get_player(side).prizes.count()}")
    print("=" * 70)

    if xray_logger:
        xray_logger.log_game_end(winner_name, state.message)
    for agent in agents.values():
        agent.on_game_end(state)


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

def main():
    """Main entry point for console game."""
    parser = argparse.ArgumentParser(
        description="PVCGL Engine - Console Game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python src/play_console.py
  python src/play_console.py --player-deck src/decks/dragapult_ex.txt
  python src/play_console.py --bot-vs-bot --seed 42 --xray
        """
    )
    parser.add_argument('--player-deck', type=str, default=DEFAULT_PLAYER_DECK_PATH,
                        help='Path to the player deck file')
    parser.add_argument('--opponent-deck', type=str, default=DEFAULT_OPPONENT_DECK_PATH,
                        help='Path to the opponent deck file')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for deterministic games (default: None)')
    parser.add_argument('--turn-time', type=int, default=60,
                        help='Seconds per turn (default: 60)')
    parser.add_argument('--bot-vs-bot', action='store_true',
                        help='Let two scripted bots play each other')
    parser.add_argument('--timer', action='store_true',
                        help='Run the turn clock and pace the bot (human games only)')
    parser.add_argument('--max-turns', type=int, default=MAX_TURNS,
                        help=f'Maximum turns before stopping (default: {MAX_TURNS})')
    parser.add_argument('--xray', action='store_true',
                        help='Write an X-Ray trace of every action and state')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: WARNING)')

    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    print("=" * 70)
    print("PVCGL ENGINE - CONSOLE MODE")
    print("=" * 70)

    print(f"\n[Deck Loading]")
    print(f"  Player:   {args.player_deck}")
    print(f"  Opponent: {args.opponent_deck}")

    try:
        player_deck = parse_deck_string(load_deck_from_file(args.player_deck))
        opponent_deck = parse_deck_string(load_deck_from_file(args.opponent_deck))
    except FileNotFoundError as e:
        print(f"\n[ERROR] Deck file not found: {e}")
        sys.exit(1)
    except ValueError as e:
        print(f"\n[ERROR] Failed to load deck: {e}")
        sys.exit(1)

    config = GameConfig(turn_time_limit=args.turn_time)
    engine = GameEngine(config=config, random_seed=args.seed)
    human = None if args.bot_vs_bot else HumanAgent(name="Player")

    print("\n[Setup] Building game state...")
    try:
        state = setup_game(
            player_deck, opponent_deck, random_seed=args.seed, config=config,
            choose_active=human.choose_active if human else None,
        )
    except ValueError as e:
        print(f"\n[ERROR] Failed to setup game: {e}")
        sys.exit(1)

    xray_logger = XRayLogger() if args.xray else None

    try:
        if human is None:
            seed = args.seed
            agents = {
                Side.PLAYER: ScriptedBot(name="Bot A", seed=seed, engine=engine, config=config),
                Side.OPPONENT: ScriptedBot(name="Bot B", seed=None if seed is None else seed + 1,
                                           engine=engine, config=config),
            }
            play_game(agents, state, engine, max_turns=args.max_turns, xray_logger=xray_logger)
        else:
            session = GameSession(state, engine=engine, config=config, human_side=Side.PLAYER,
                                  random_seed=args.seed)
            play_session(session, human, max_turns=args.max_turns, use_timer=args.timer,
                         xray_logger=xray_logger)
    except (KeyboardInterrupt, EOFError):
        print("\n\nGame interrupted by user.")
        if xray_logger:
            xray_logger.log_game_end(None, "User interrupted")

    print("\n[Exit] Game session complete.")


if __name__ == "__main__":
    main()
