"""
PVCGL Engine - Configuration

Tunable rule and pacing constants. Every layer (setup, engine, session, AI)
takes a GameConfig and falls back to DEFAULT_CONFIG when none is given.
"""

from typing import Tuple
from pydantic import BaseModel, Field, field_validator


class GameConfig(BaseModel):
    """Rule constants and AI pacing."""

    # Rules
    turn_time_limit: int = Field(60, gt=0, description="Seconds per turn before a forced end of turn")
    max_bench_size: int = Field(5, gt=0)
    prize_count: int = Field(6, gt=0)
    opening_hand_size: int = Field(7, gt=0)
    deck_size: int = Field(60, gt=0)

    # Scripted opponent
    ai_basics_per_turn: int = Field(2, ge=0, description="Basics the AI benches per turn")
    ai_item_chance: float = Field(0.5, ge=0.0, le=1.0, description="Chance the AI plays a given Item")
    ai_action_delay_range: Tuple[float, float] = Field((0.5, 1.5), description="Seconds between AI actions")
    max_ai_actions_per_turn: int = Field(40, gt=0)

    @field_validator('ai_action_delay_range')
    @classmethod
    def validate_delay_range(cls, value: Tuple[float, float]) -> Tuple[float, float]:
        low, high = value
        if low < 0 or high < low:
            raise ValueError(f"Invalid AI delay range: {value}")
        return value


DEFAULT_CONFIG = GameConfig()
