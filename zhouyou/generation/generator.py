"""
Trial Generator - Produces trial cards through the LLM collaborator.

The generator:
1. Builds the trial prompt for a thematic label
2. Calls the LLM client
3. Validates the response against the trial schema
4. Returns a TrialCard marked as generated

Any transport failure or unusable payload raises GenerationError.
TrialSource turns that into a uniformly random static card. With an
executor, the LLM call runs on a worker thread and the caller collects the
future when it is done.
"""

from __future__ import annotations
from concurrent.futures import Executor, Future
from dataclasses import dataclass
import logging
import random
import re
import uuid
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..engine_core.cards import TrialCard
from .client import LLMClient
from .prompts import TrialPrompts

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class GenerationError(Exception):
    """Raised when a trial could not be generated."""


class GeneratedTrial(BaseModel):
    """Expected response record."""
    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    question: str = Field(min_length=1)
    options: list[str] = Field(min_length=4, max_length=4)
    answer_index: int = Field(alias="answerIndex", ge=0, le=3)
    analysis: str
    quote: str

    def to_card(self) -> TrialCard:
        return TrialCard(
            card_id=f"generated-{uuid.uuid4().hex[:8]}",
            quote=self.quote,
            question=self.question,
            options=tuple(self.options),
            answer_index=self.answer_index,
            analysis=self.analysis,
            generated=True,
        )


def parse_trial(text: str) -> GeneratedTrial:
    """Validate raw model output; tolerates a markdown code fence."""
    cleaned = _FENCE.sub("", text.strip())
    try:
        return GeneratedTrial.model_validate_json(cleaned)
    except ValidationError as e:
        raise GenerationError(f"Unusable trial payload: {e.error_count()} error(s)") from e


class TrialGenerator:
    """
    Generates trials about a topic.

    Usage:
        generator = TrialGenerator(AnthropicClient(model="..."))
        card = generator.generate("State of Wei")
    """

    def __init__(self, client: LLMClient, prompts: TrialPrompts | None = None):
        self.client = client
        self.prompts = prompts or TrialPrompts()

    def generate(self, topic: str) -> TrialCard:
        prompt = self.prompts.trial(topic)
        try:
            text = self.client.complete(
                prompt, system=self.prompts.system(), schema=self.prompts.schema()
            )
        except Exception as e:
            raise GenerationError(f"Trial request failed: {e}") from e

        if not text:
            raise GenerationError("Empty trial response")
        return parse_trial(text).to_card()


@dataclass
class TrialDraw:
    card: TrialCard
    fell_back: bool = False
    error: str | None = None


class TrialSource:
    """
    Supplies trial cards: static deck draws, or generation with fallback.

    Generation is split in two so the LLM call can leave the caller's thread:
    `request()` starts it (on `executor` when one is given) and `collect()`
    turns the finished future into a TrialDraw. Only the generator runs on
    the worker; deck draws stay with the caller.
    """

    def __init__(
        self,
        deck: Sequence[TrialCard],
        generator: TrialGenerator | None = None,
        rng: random.Random | None = None,
        executor: Executor | None = None,
    ):
        if not deck:
            raise ValueError("Static trial deck must not be empty")
        self.deck = list(deck)
        self.generator = generator
        self.rng = rng or random.Random()
        self.executor = executor

    def draw_static(self) -> TrialCard:
        return self.rng.choice(self.deck)

    def request(self, topic: str) -> Future:
        """Start generating a trial about `topic`."""
        if self.generator is None:
            future = Future()
            future.set_exception(GenerationError("no generator"))
            return future
        if self.executor is not None:
            return self.executor.submit(self.generator.generate, topic)

        future = Future()
        try:
            future.set_result(self.generator.generate(topic))
        except GenerationError as e:
            future.set_exception(e)
        return future

    def collect(self, topic: str, future: Future) -> TrialDraw:
        """Resolve a finished request, falling back to the static deck."""
        try:
            card = future.result()
        except GenerationError as e:
            logger.warning("Trial generation for %r failed, falling back: %s", topic, e)
            return TrialDraw(card=self.draw_static(), fell_back=True, error=str(e))

        logger.info("Generated trial %s for %r", card.card_id, topic)
        return TrialDraw(card=card)
