"""
Effects - Tagged effect variants shared by fate and chance cards.

A card carries a compact `CardEffect` record (the shape the decks are
authored in). Before resolution the record is expanded into an ordered list
of concrete effect variants:

1. MeatDelta      - signed resource change, clamped at 0
2. ImposePause    - pause flag set, one more turn to skip
3. GrantProtection
4. SwapOrReset    - swap with a named player, else back to start + re-trigger
   Relocate       - absolute position override + re-trigger
5. DiceBranch     - chance only; resolved by the encounter resolver

Application is a pure function over the whole GameState snapshot.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .state import GameState


class SpecialTag(Enum):
    """Closed set of special-case effects."""
    PROTECTION = "protection"
    SWAP_OR_RESET = "swap_or_reset"
    DICE_BRANCH = "dice_branch"


@dataclass(frozen=True)
class CardEffect:
    """Effect record as authored on a fate/chance card."""
    meat: int = 0
    pause: bool = False
    position: int | None = None
    special: SpecialTag | None = None
    swap_target: str | None = None  # character name for SWAP_OR_RESET


@dataclass(frozen=True)
class MeatDelta:
    amount: int


@dataclass(frozen=True)
class ImposePause:
    pass


@dataclass(frozen=True)
class GrantProtection:
    pass


@dataclass(frozen=True)
class SwapOrReset:
    target_character: str


@dataclass(frozen=True)
class Relocate:
    position: int


@dataclass(frozen=True)
class DiceBranch:
    pass


Effect = Union[MeatDelta, ImposePause, GrantProtection, SwapOrReset, Relocate, DiceBranch]


def expand_effect(effect: CardEffect) -> list[Effect]:
    """Expand a card's effect record into ordered effect variants."""
    if effect.special is SpecialTag.DICE_BRANCH:
        return [DiceBranch()]

    effects: list[Effect] = []
    if effect.meat:
        effects.append(MeatDelta(effect.meat))
    if effect.pause:
        effects.append(ImposePause())
    if effect.special is SpecialTag.PROTECTION:
        effects.append(GrantProtection())
    if effect.special is SpecialTag.SWAP_OR_RESET:
        effects.append(SwapOrReset(effect.swap_target or ""))
    elif effect.position is not None:
        effects.append(Relocate(effect.position))
    return effects


def meat_change(effects: list[Effect]) -> int:
    """Total resource delta carried by a list of effects."""
    return sum(e.amount for e in effects if isinstance(e, MeatDelta))


@dataclass
class EffectOutcome:
    """
    Result of applying effects for the acting player.

    `retrigger_at` is set when the actor was relocated and the tile action at
    that cell must run instead of a turn advance.
    """
    state: GameState
    retrigger_at: int | None = None
    changes: list[str] = field(default_factory=list)


def apply_effects(state: GameState, player_id: str, effects: list[Effect]) -> EffectOutcome:
    """
    Apply effects to the acting player in order.

    DiceBranch is not applicable here; the resolver replaces it with concrete
    effects once the die is rolled.
    """
    outcome = EffectOutcome(state=state)

    for effect in effects:
        current = outcome.state
        actor = current.get_player(player_id)
        if actor is None:
            break

        if isinstance(effect, MeatDelta):
            outcome.state = current.with_player(actor.with_meat_delta(effect.amount))
            outcome.changes.append(f"meat {effect.amount:+d}")

        elif isinstance(effect, ImposePause):
            outcome.state = current.with_player(actor.with_pause_added())
            outcome.changes.append("paused")

        elif isinstance(effect, GrantProtection):
            outcome.state = current.with_player(actor._copy_with(has_protection=True))
            outcome.changes.append("protected")

        elif isinstance(effect, SwapOrReset):
            target = current.find_by_character(effect.target_character)
            if target is not None and target.player_id == actor.player_id:
                outcome.changes.append("swapped places with self")
            elif target is not None:
                outcome.state = current.with_players([
                    actor._copy_with(position=target.position),
                    target._copy_with(position=actor.position),
                ])
                outcome.changes.append(f"swapped places with {target.character}")
            else:
                outcome.state = current.with_player(actor._copy_with(position=0))
                outcome.retrigger_at = 0
                outcome.changes.append("returned to start")

        elif isinstance(effect, Relocate):
            outcome.state = current.with_player(actor._copy_with(position=effect.position))
            outcome.retrigger_at = effect.position
            outcome.changes.append(f"moved to tile {effect.position}")

        elif isinstance(effect, DiceBranch):
            raise ValueError("DiceBranch must be resolved before application")

        else:
            raise TypeError(f"Unknown effect type: {type(effect)}")

    return outcome
