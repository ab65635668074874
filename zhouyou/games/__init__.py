"""Game content packages (boards and decks)."""
