"""
Bots module - Computer-controlled travellers.

Provides:
- BotPolicy: Interface for encounter decisions
- RandomPolicy / FirstOptionPolicy / ScholarPolicy
- AIArbiter: Schedules rolls and decisions for computer seats
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstOptionPolicy, ScholarPolicy
from .arbiter import AIArbiter

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstOptionPolicy",
    "ScholarPolicy",
    "AIArbiter",
]
