"""
PVCGL Engine - Human Agent

Interactive console-based player for human users.
Displays legal actions and prompts for input.
"""

from collections import Counter
from typing import List, TYPE_CHECKING
from agents.base import PlayerAgent

if TYPE_CHECKING:
    from models import GameState, Action, Card, Side


class HumanAgent(PlayerAgent):
    """
    Human player agent with console interface.

    Displays numbered list of legal actions and accepts user input.
    Validates input and re-prompts on invalid choices.

    Example:
        >>> agent = HumanAgent(name="Alice")
        >>> action = agent.choose_action(state, legal_actions)

        === ALICE'S TURN ===
        Legal Actions:
          [0] Play Riolu to Bench
          [1] Attach Basic Fighting Energy to Riolu (Active)
          [2] End Turn

        Choose action [0-2]: 1
    """

    def choose_action(self, state: 'GameState', legal_actions: List['Action']) -> 'Action':
        """
        Prompt human player to choose an action.

        Raises:
            ValueError: If no legal actions available
            KeyboardInterrupt: If the player quits
        """
        if not legal_actions:
            raise ValueError("No legal actions available")

        # Single action - auto-select
        if len(legal_actions) == 1:
            action = legal_actions[0]
            print(f"\n[Auto-selected] {action}")
            print("(Only one legal move available - Auto-playing)")
            return action

        print(f"\n{'=' * 60}")
        print(f"{self.name.upper()}'S TURN")
        print(f"{'=' * 60}")

        self._display_state_summary(state)

        if state.pending.is_active:
            print(f"\n>>> {state.message}")

        print(f"\nLegal Actions:")
        for i, action in enumerate(legal_actions):
            print(f"  [{i}] {action}")

        while True:
            try:
                choice = input(f"\nChoose action [0-{len(legal_actions) - 1}]: ").strip()

                if choice.lower() in ['q', 'quit', 'exit']:
                    print("\nGame aborted by user.")
                    raise KeyboardInterrupt

                idx = int(choice)

                if 0 <= idx < len(legal_actions):
                    selected_action = legal_actions[idx]
                    print(f"\n[Selected] {selected_action}")
                    return selected_action
                else:
                    print(f"Invalid choice. Enter a number between 0 and {len(legal_actions) - 1}.")

            except ValueError:
                print("Invalid input. Enter a number.")
            except (KeyboardInterrupt, EOFError):
                print("\n\nGame interrupted by user.")
                raise

    def choose_active(self, side: 'Side', basics: List['Card']) -> str:
        """Pick the starting Active Pokémon during setup. Returns its instance id."""
        if len(basics) == 1:
            return basics[0].id

        print(f"\n{'CHOOSE YOUR ACTIVE POKEMON':=^60}")
        for i, card in enumerate(basics):
            print(f"  [{i}] {card.name} ({card.hp} HP)")
        while True:
            choice = input(f"\nChoose Active [0-{len(basics) - 1}]: ").strip()
            if choice.isdigit() and 0 <= int(choice) < len(basics):
                return basics[int(choice)].id
            print(f"Invalid choice. Enter a number between 0 and {len(basics) - 1}.")

    def on_action_rejected(self, action: 'Action', reason: str):
        print(f"\n[Rejected] {reason}")

    def _display_state_summary(self, state: 'GameState'):
        """Display current game state summary."""
        player = state.get_player(self.side)
        opponent = state.get_player(self.side.other)

        print(f"\nTurn: {state.turn_count} | Time left: {state.time_remaining}s")
        print(f"Deck: {player.deck.count()} cards | Prizes: {player.prizes.count()} remaining")
        if state.stadium:
            print(f"Stadium: {state.stadium.name}")

        print(f"\n{'YOUR ACTIVE POKEMON':=^60}")
        if player.board.active_spot:
            print(self._format_pokemon(player.board.active_spot))
        else:
            print(f"  (none)")

        print(f"\n{'YOUR BENCH':=^60}")
        if player.board.get_bench_count() > 0:
            for i, pokemon in enumerate(player.board.bench):
                print(f"  [{i}] {self._format_pokemon(pokemon).strip()}")
        else:
            print(f"  (empty)")

        print(f"\n{'YOUR HAND ({} cards)'.format(player.hand.count()):=^60}")
        if player.hand.cards:
            card_counts = Counter(card.name for card in player.hand.cards)
            for card_name, count in sorted(card_counts.items()):
                if count > 1:
                    print(f"  {count}x {card_name}")
                else:
                    print(f"  {card_name}")
        else:
            print(f"  (empty)")

        print(f"\n{'OPPONENT ACTIVE POKEMON':=^60}")
        if opponent.board.active_spot:
            print(self._format_pokemon(opponent.board.active_spot))
        else:
            print(f"  (none)")

        print(f"\n{'OPPONENT BENCH':=^60}")
        if opponent.board.get_bench_count() > 0:
            for i, pokemon in enumerate(opponent.board.bench):
                print(f"  [{i}] {self._format_pokemon(pokemon).strip()}")
        else:
            print(f"  (empty)")

    @staticmethod
    def _format_pokemon(pokemon: 'Card') -> str:
        energy = ", ".join(e.energy_type.value for e in pokemon.attached_energy if e.energy_type)
        return f"  {pokemon.name} - {pokemon.remaining_hp}/{pokemon.hp} HP - Energy: [{energy}]"
