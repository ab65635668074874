"""
Events - Historical vignettes keyed by the event tile they belong to.

Event tiles without an entry here ("Zhou Archives") are quiet stops.
"""

from ...engine_core.cards import EventCard, EventEffectKind

EVENT_CARDS = {
    "Siege at Kuang": EventCard(
        tile_name="Siege at Kuang",
        title="Reading the sources: besieged at Kuang",
        content=(
            "In 495 BC, when Confucius was 57, the people of Kuang mistook him for "
            "Yang Hu, who had once treated them brutally, and surrounded him. In danger "
            "he said: 'If Heaven does not intend this culture to perish, what can the "
            "people of Kuang do to me?'"
        ),
        effect_label="Besieged by mistake: pause one turn",
        effect_kind=EventEffectKind.PAUSE,
    ),
    "Gate of Zheng": EventCard(
        tile_name="Gate of Zheng",
        title="Reading the sources: a stray dog without a home",
        content=(
            "The Records of the Grand Historian tell how Confucius, separated from his "
            "disciples in Zheng, waited alone at the east gate. A man of Zheng said he "
            "looked 'forlorn as a stray dog'. Confucius laughed: 'That is exactly so!'"
        ),
        effect_label="Forlorn and lost: lose one portion of meat",
        effect_kind=EventEffectKind.LOSE_MEAT,
    ),
    "Between Chen and Cai": EventCard(
        tile_name="Between Chen and Cai",
        title="Reading the sources: starving between Chen and Cai",
        content=(
            "Between Chen and Cai the travellers ran out of food and the followers fell "
            "ill. Confucius kept teaching and singing, telling his disciples that the "
            "gentleman holds firm in adversity."
        ),
        effect_label="Out of provisions: pause one turn",
        effect_kind=EventEffectKind.PAUSE,
    ),
    "Duke of She asks about government": EventCard(
        tile_name="Duke of She asks about government",
        title="Reading the sources: the Duke of She asks about government",
        content=(
            "Analects 13.16. The Duke of She asked about government. Confucius said: "
            "'When those who are near are pleased, those who are far will come.'"
        ),
        effect_label="Benevolent rule attracts: gain one portion of meat",
        effect_kind=EventEffectKind.GAIN_MEAT,
    ),
}
