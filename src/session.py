"""
PVCGL Engine - Game Session

Single-writer container around the live GameState.

Every state change (human intents, timer ticks, the automated side's
actions) goes through one lock, so a tick can never interleave with an
action half-way through.

LIFECYCLE:
1. Host builds a GameState (game_setup) and wraps it in a GameSession
2. start_timer() begins the per-second countdown
3. Human intents arrive through submit(); the host calls run_ai_turn()
   when the automated side is on turn
4. Timer expiry forces end_turn and stops any AI loop in progress
5. close() cancels the timer
"""

import logging
import random
import threading
import time
from typing import List, Optional

from models import Action, ActionResult, ActionStatus, ActionType, GameState, Side
from config import GameConfig, DEFAULT_CONFIG
from engine import GameEngine
from turn_timer import TurnTimer
from agents.base import PlayerAgent
from agents.scripted_bot import ScriptedBot


logger = logging.getLogger(__name__)

# Longest stretch the AI pacing wait goes without re-checking both cancel events
WAIT_SLICE = 0.05


def acting_side(state: GameState) -> Side:
    """Side that must act next: the owner of an open selection, else the side on turn."""
    if state.pending.is_active and state.pending.side is not None:
        return state.pending.side
    return state.current_side


class GameSession:
    """
    Owns the live GameState, its engine, timer and the automated opponent.

    Attributes:
        engine: Rules engine shared by the human and automated sides
        config: Tunables (turn time, AI pacing, action cap)
        human_side: Side driven by submit()
        ai_agent: Agent driving the other side in run_ai_turn()
    """

    def __init__(
        self,
        state: GameState,
        engine: Optional[GameEngine] = None,
        config: Optional[GameConfig] = None,
        human_side: Side = Side.PLAYER,
        ai_agent: Optional[PlayerAgent] = None,
        random_seed: Optional[int] = None,
    ):
        self.config = config or (engine.config if engine else DEFAULT_CONFIG)
        self.engine = engine or GameEngine(config=self.config, random_seed=random_seed)
        self.human_side = human_side
        self.ai_side = human_side.other
        self.ai_agent = ai_agent or ScriptedBot(engine=self.engine, config=self.config, seed=random_seed)
        self.ai_agent.on_game_start(self.ai_side)
        self.rng = random.Random(random_seed)

        self._lock = threading.RLock()
        self._state = state
        self._timer: Optional[TurnTimer] = None
        self._timer_interval = 1.0
        self._timer_generation = 0
        self._ai_cancel = threading.Event()

    # ========================================================================
    # STATE ACCESS
    # ========================================================================

    def snapshot(self) -> GameState:
        """Copy of the live state, safe to render or inspect."""
        with self._lock:
            return self._state.clone()

    def is_human_turn(self) -> bool:
        with self._lock:
            return acting_side(self._state) == self.human_side

    def is_game_over(self) -> bool:
        with self._lock:
            return self._state.is_game_over()

    def load_state(self, state: GameState) -> None:
        """
        Replace the live state.

        Any AI loop in progress is stopped and a running timer is replaced
        by a fresh one, so at most one timer ever drives this session.
        """
        with self._lock:
            restart = self._timer is not None
            self.stop_timer()
            self._ai_cancel.set()
            self._state = state
            logger.info(f"Loaded state at turn {state.turn_count}")
            if restart:
                self.start_timer(self._timer_interval)

    # ========================================================================
    # INTENTS
    # ========================================================================

    def submit(self, action: Action) -> ActionResult:
        """Apply an action from the human side."""
        with self._lock:
            if action.side != self.human_side:
                return ActionResult(status=ActionStatus.REJECTED, state=self._state,
                                    message="It is not your turn")
            return self._apply(action)

    def _apply(self, action: Action) -> ActionResult:
        result = self.engine.step(self._state, action)
        if result.ok:
            self._state = result.state
        return result

    # ========================================================================
    # TIMER
    # ========================================================================

    def start_timer(self, interval: float = 1.0) -> None:
        with self._lock:
            self.stop_timer()
            self._timer_interval = interval
            generation = self._timer_generation
            self._timer = TurnTimer(lambda: self._timer_tick(generation), interval)
            self._timer.start()

    def stop_timer(self) -> None:
        with self._lock:
            timer, self._timer = self._timer, None
            self._timer_generation += 1
        if timer is not None:
            timer.cancel()

    def _timer_tick(self, generation: int) -> Optional[ActionResult]:
        with self._lock:
            # A tick already waiting on the lock when its timer was replaced
            if generation != self._timer_generation:
                return None
            return self.tick()

    def tick(self) -> Optional[ActionResult]:
        """
        One second passes on the turn clock.

        Returns:
            The forced end_turn result when time ran out, else None
        """
        with self._lock:
            if self._state.is_game_over():
                return None
            ticked = self._state.clone()
            ticked.time_remaining = max(0, ticked.time_remaining - 1)
            self._state = ticked
            if ticked.time_remaining > 0:
                return None

            logger.info(f"Time expired for {ticked.get_current_player().name}")
            self._ai_cancel.set()
            result = self.engine.end_turn(self._state, force=True)
            if result.ok:
                self._state = result.state
            return result

    # ========================================================================
    # AUTOMATED SIDE
    # ========================================================================

    def run_ai_turn(self, cancel_event: Optional[threading.Event] = None, pace: bool = True) -> List[ActionResult]:
        """
        Let the automated side act until its turn ends.

        Each step re-reads the live state, asks the agent for one action and
        applies it. Between steps it waits a random delay on the cancel
        event; setting the event (timer expiry, load_state) stops the loop.

        Args:
            cancel_event: Extra event that also stops the loop
            pace: Wait between actions (off for tests and bot-vs-bot runs)

        Returns:
            Results of every action the automated side submitted
        """
        self._ai_cancel.clear()
        results: List[ActionResult] = []
        low, high = self.config.ai_action_delay_range

        for _ in range(self.config.max_ai_actions_per_turn):
            if self._cancelled(cancel_event):
                break
            with self._lock:
                state = self._state
                if state.is_game_over() or acting_side(state) != self.ai_side:
                    return results
                legal = self.engine.get_legal_actions(state)
                if not legal:
                    results.append(self._force_end_turn("no legal actions"))
                    return results
                action = self.ai_agent.choose_action(state, legal)
                result = self._apply(action)
                results.append(result)
                if not result.ok:
                    self.ai_agent.on_action_rejected(action, result.message)
                    logger.debug(f"AI action rejected: {result.message}")
                if action.action_type == ActionType.END_TURN and result.ok:
                    return results

            if pace and self._wait(cancel_event, self.rng.uniform(low, high)):
                break
        else:
            with self._lock:
                if not self._state.is_game_over() and acting_side(self._state) == self.ai_side:
                    results.append(self._force_end_turn("action limit reached"))

        return results

    def _force_end_turn(self, reason: str) -> ActionResult:
        logger.info(f"Ending automated turn: {reason}")
        result = self.engine.end_turn(self._state, force=True)
        if result.ok:
            self._state = result.state
        return result

    def _cancelled(self, cancel_event: Optional[threading.Event]) -> bool:
        return self._ai_cancel.is_set() or (cancel_event is not None and cancel_event.is_set())

    def _wait(self, cancel_event: Optional[threading.Event], delay: float) -> bool:
        """Sleep up to delay seconds. True as soon as either cancel event is set."""
        deadline = time.monotonic() + delay
        while not self._cancelled(cancel_event):
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            self._ai_cancel.wait(min(remaining, WAIT_SLICE))
        return True

    @property
    def timer_running(self) -> bool:
        return self._timer is not None and self._timer.running

    def close(self) -> None:
        self.stop_timer()
        self._ai_cancel.set()
