"""
X-Ray Logging System - Linear State Trace

Provides complete visibility into all game zones (including hidden information)
for debugging and verifying card conservation.

Format: Continuous stream of Action -> Game State transitions.
"""

import os
from datetime import datetime
from typing import Optional

from models import GameState, Action, Card, PlayerState, Side


class XRayLogger:
    """
    X-Ray Logger - Complete game state visibility for debugging.

    Logs all game state including hidden information (hands, decks, prizes).
    Useful for auditing card movements and verifying rules enforcement.
    """

    def __init__(self, xray_dir: Optional[str] = None):
        """Initialize X-Ray logger and create log file."""
        xray_dir = xray_dir or os.path.join("src", "utils", "xrays")
        os.makedirs(xray_dir, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_path = os.path.join(xray_dir, f"xray_game_{timestamp}.log")

        with open(self.log_path, 'w', encoding='utf-8') as f:
            f.write("=" * 80 + "\n")
            f.write("X-RAY GAME LOG - LINEAR STATE TRACE\n")
            f.write(f"Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
            f.write("=" * 80 + "\n\n")

        print(f"[X-Ray Logger] Logging to: {self.log_path}")

    def _fmt(self, card: Optional[Card]) -> str:
        """Format card as 'Riolu (a1b2c3d4)' using the last 8 characters of its ID."""
        if card is None:
            return "(Empty)"
        short_id = card.id[-8:] if len(card.id) >= 8 else card.id
        return f"{card.name} ({short_id})"

    def log_action(self, turn_count: int, player_name: str, action: Action, message: str = "") -> None:
        """Log an action header with the engine's result message."""
        with open(self.log_path, 'a', encoding='utf-8') as f:
            f.write("#" * 80 + "\n")
            f.write(f"[TURN {turn_count} | PLAYER: {player_name}] ACTION: {action}\n")
            if message:
                f.write(f"RESULT: {message}\n")
            f.write("#" * 80 + "\n\n")

    def log_state(self, state: GameState) -> None:
        """Log complete game state snapshot (including hidden zones)."""
        with open(self.log_path, 'a', encoding='utf-8') as f:
            f.write("=" * 80 + "\n")

            # Stable ordering: player first, then opponent
            for side in Side:
                f.write(self._format_player(state.get_player(side)))
                f.write("\n")

            f.write("[GLOBAL]\n")
            if state.stadium:
                owner = state.stadium_owner.value if state.stadium_owner else "?"
                f.write(f"Stadium: {self._fmt(state.stadium)} (owner: {owner})\n")
            else:
                f.write("Stadium: (None)\n")
            if state.pending.is_active:
                f.write(f"Pending: {state.pending.mode.value} for {state.pending.side.value} "
                        f"({state.pending.source_name})\n")
            f.write(f"Time remaining: {state.time_remaining}s\n")

            f.write("=" * 80 + "\n\n")

    def _format_player(self, player: PlayerState) -> str:
        lines = [f"[{player.side.value.upper()}: {player.name}]"]

        if player.board.active_spot:
            lines.append(self._format_pokemon_line(player.board.active_spot, "ACTIVE"))
        else:
            lines.append("ACTIVE:  (Empty)")

        for i, pokemon in enumerate(player.board.bench):
            lines.append(self._format_pokemon_line(pokemon, f"BENCH {i+1}"))

        for label, zone in (("HAND", player.hand), ("PRIZES", player.prizes),
                            ("DISCARD", player.discard), ("DECK", player.deck)):
            cards = ", ".join(self._fmt(card) for card in zone.cards)
            lines.append(f"{label} ({zone.count()}): [{cards}]")

        return "\n".join(lines) + "\n"

    def _format_pokemon_line(self, pokemon: Card, label: str) -> str:
        """
        Format a single-line Pokemon display.

        Format: "ACTIVE:  Riolu (..a1b2) | HP: 60/70 | Energy: [...] | Under: [...]"
        """
        hp_str = f"HP: {pokemon.remaining_hp}/{pokemon.hp}"
        energy_str = f"Energy: [{', '.join(self._fmt(e) for e in pokemon.attached_energy)}]"
        under_str = f"Under: [{', '.join(self._fmt(c) for c in pokemon.prior_stages)}]"
        return f"{label}:  {self._fmt(pokemon)} | {hp_str} | {energy_str} | {under_str}"

    def log_game_end(self, winner: Optional[str], reason: str) -> None:
        """
        Log game end result.

        Args:
            winner: Winning player's name (None if the game stopped without a winner)
            reason: Reason for game end
        """
        with open(self.log_path, 'a', encoding='utf-8') as f:
            f.write("\n" + "=" * 80 + "\n")
            f.write("GAME END\n")
            f.write("=" * 80 + "\n")
            if winner is not None:
                f.write(f"Winner: {winner}\n")
            else:
                f.write(f"Result: No winner\n")
            f.write(f"Reason: {reason}\n")
            f.write(f"Ended: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
            f.write("=" * 80 + "\n")
