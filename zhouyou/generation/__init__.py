"""
Generation - Content-generation collaborator for trials.

The generator:
1. Takes a thematic label (the state a tile stands for)
2. Asks an LLM for one multiple-choice trial
3. Validates the structured response
4. Falls back to the static deck on any failure

Generation is never fatal; the game always gets a valid 4-option card.
"""

from .generator import (
    TrialGenerator, TrialSource, TrialDraw, GeneratedTrial, GenerationError, parse_trial,
)
from .client import LLMClient, AnthropicClient
from .prompts import TrialPrompts, RESPONSE_SCHEMA

__all__ = [
    "TrialGenerator",
    "TrialSource",
    "TrialDraw",
    "GeneratedTrial",
    "GenerationError",
    "parse_trial",
    "LLMClient",
    "AnthropicClient",
    "TrialPrompts",
    "RESPONSE_SCHEMA",
]
