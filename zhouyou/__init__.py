"""
Zhouyou - Confucius travels among the states

A deterministic, timer-driven engine for a turn-based board game.
Players travel a cyclic track, landing tiles open trials, fate, chance and
historical events, and the first to gather enough sacrificial meat wins.
The engine provides:
- State management through a single store
- Cancelable, re-validated scheduled transitions
- Encounter resolution and victory detection
- Computer-controlled travellers
"""

__version__ = "0.1.0"
