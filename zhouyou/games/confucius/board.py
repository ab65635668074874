"""
Board - The 24-cell track of Confucius' travels, starting and ending in Lu.
"""

from __future__ import annotations

from ...engine_core.cards import Tile, TileKind

_LAYOUT = [
    (TileKind.PLAIN, "State of Lu", None),
    (TileKind.STATE, "State of Wei", "Wei"),
    (TileKind.FATE, "Fate", None),
    (TileKind.EVENT, "Siege at Kuang", None),
    (TileKind.STATE, "State of Cao", "Cao"),
    (TileKind.CHANCE, "Chance", None),
    (TileKind.STATE, "State of Song", "Song"),
    (TileKind.PLAIN, "Road to Zheng", None),
    (TileKind.EVENT, "Gate of Zheng", None),
    (TileKind.FATE, "Fate", None),
    (TileKind.STATE, "State of Chen", "Chen"),
    (TileKind.CHANCE, "Chance", None),
    (TileKind.EVENT, "Between Chen and Cai", None),
    (TileKind.STATE, "State of Cai", "Cai"),
    (TileKind.FATE, "Fate", None),
    (TileKind.EVENT, "Duke of She asks about government", None),
    (TileKind.STATE, "State of Chu", "Chu"),
    (TileKind.CHANCE, "Chance", None),
    (TileKind.PLAIN, "Banks of the Yellow River", None),
    (TileKind.STATE, "State of Qi", "Qi"),
    (TileKind.FATE, "Fate", None),
    (TileKind.EVENT, "Zhou Archives", None),
    (TileKind.CHANCE, "Chance", None),
    (TileKind.STATE, "State of Wei (return)", "Wei"),
]

BOARD_TILES: tuple[Tile, ...] = tuple(
    Tile(index=i, kind=kind, name=name, label=label)
    for i, (kind, name, label) in enumerate(_LAYOUT)
)

TRACK_LENGTH = len(BOARD_TILES)

CHARACTERS = ("Confucius", "Yan Hui", "Zilu", "Zigong", "Zengzi", "Zixia")
