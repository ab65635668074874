"""
Static decks - Trials, fates and chances for the Confucius board.

Trials are drawn when no generated trial is requested or generation fails.
"""

from ...engine_core.cards import ChanceCard, FateCard, TrialCard
from ...engine_core.effects import CardEffect, SpecialTag

TRIAL_CARDS = (
    TrialCard(
        card_id="trial-1",
        quote="Is it not a pleasure to learn and to practise what you have learned? (Analects 1.1)",
        question="According to this passage, what makes learning a pleasure?",
        options=(
            "A. Winning office through learning",
            "B. Putting what is learned into regular practice",
            "C. Memorising as many texts as possible",
            "D. Being praised by one's teacher",
        ),
        answer_index=1,
        analysis="The joy comes from practising what one learns at the proper times, not from reward.",
    ),
    TrialCard(
        card_id="trial-2",
        quote="Do not impose on others what you do not wish for yourself. (Analects 15.24)",
        question="Which virtue did Confucius say this single phrase sums up?",
        options=("A. Reciprocity (shu)", "B. Courage (yong)", "C. Ritual (li)", "D. Filial piety (xiao)"),
        answer_index=0,
        analysis="Asked by Zigong for one word to live by, Confucius answered 'reciprocity' and gave this rule.",
    ),
    TrialCard(
        card_id="trial-3",
        quote="The gentleman holds firm in adversity; the small man in adversity runs wild. (Analects 15.2)",
        question="Where was Confucius when he said this to Zilu?",
        options=("A. In the court of Qi", "B. At home in Lu", "C. Without food between Chen and Cai", "D. In the archives of Zhou"),
        answer_index=2,
        analysis="The remark answers Zilu's indignation when provisions ran out between Chen and Cai.",
    ),
    TrialCard(
        card_id="trial-4",
        quote="When three walk together, one of them is sure to be my teacher. (Analects 7.22)",
        question="What attitude does this passage express?",
        options=(
            "A. Only ancient sages are worth learning from",
            "B. Choose the good to follow and the bad to correct in oneself",
            "C. Travel in groups of three for safety",
            "D. Teachers should be chosen by rank",
        ),
        answer_index=1,
        analysis="Confucius continues: 'I pick out the good points to follow and the bad to change in myself.'",
    ),
    TrialCard(
        card_id="trial-5",
        quote="If Heaven does not intend this culture to perish, what can the people of Kuang do to me? (Analects 9.5)",
        question="What does Confucius show by speaking this way under siege?",
        options=(
            "A. Fear of the people of Kuang",
            "B. Contempt for Heaven",
            "C. Confidence in his mission to preserve the culture of Zhou",
            "D. A plan to escape at night",
        ),
        answer_index=2,
        analysis="He saw himself as the bearer of the Zhou cultural tradition, entrusted by Heaven.",
    ),
    TrialCard(
        card_id="trial-6",
        quote="Duke Jing of Qi asked about government. (Analects 12.11)",
        question="What was Confucius' answer to Duke Jing of Qi?",
        options=(
            "A. Let the ruler be a ruler, the minister a minister, the father a father, the son a son",
            "B. Fill the granaries and strengthen the army",
            "C. Govern by laws and punishments",
            "D. Let the people choose their lord",
        ),
        answer_index=0,
        analysis="Each role carried out properly is the foundation of order in this reply.",
    ),
    TrialCard(
        card_id="trial-7",
        quote="At fifteen I set my heart on learning; at thirty I stood firm. (Analects 2.4)",
        question="At what age did Confucius say he was 'free from doubts'?",
        options=("A. Thirty", "B. Forty", "C. Fifty", "D. Sixty"),
        answer_index=1,
        analysis="'At forty I had no doubts; at fifty I knew the decree of Heaven.'",
    ),
    TrialCard(
        card_id="trial-8",
        quote="He was forlorn as a stray dog. (Records of the Grand Historian)",
        question="How did Confucius respond when told he looked like a stray dog?",
        options=(
            "A. He was angry and left Zheng",
            "B. He punished the speaker",
            "C. He wept at the east gate",
            "D. He laughed and agreed",
        ),
        answer_index=3,
        analysis="He accepted the description with humour: 'That is exactly so!'",
    ),
)

FATE_CARDS = (
    FateCard(
        card_id="fate-1",
        title="Favour of Duke Ling",
        description="Duke Ling of Wei receives you with courtesy and sends a gift of meat.",
        effect=CardEffect(meat=1),
    ),
    FateCard(
        card_id="fate-2",
        title="Huan Tui's ambush",
        description="The Song minister Huan Tui fells the tree you taught beneath; you flee and lose provisions.",
        effect=CardEffect(meat=-1),
    ),
    FateCard(
        card_id="fate-3",
        title="Road washed out",
        description="Rains wash out the road; the carriage waits a turn.",
        effect=CardEffect(pause=True),
    ),
    FateCard(
        card_id="fate-4",
        title="Heaven's mandate",
        description="Your conviction that Heaven protects this culture steadies you.",
        effect=CardEffect(special=SpecialTag.PROTECTION),
    ),
    FateCard(
        card_id="fate-5",
        title="Zilu drives the carriage",
        description="Zilu takes the reins and you trade places; if he is not travelling, you return to Lu.",
        effect=CardEffect(special=SpecialTag.SWAP_OR_RESET, swap_target="Zilu"),
    ),
    FateCard(
        card_id="fate-6",
        title="Summoned home",
        description="Ji Kangzi sends for you; you return to Lu at once.",
        effect=CardEffect(position=0),
    ),
    FateCard(
        card_id="fate-7",
        title="Sacrifice in the suburbs",
        description="The state sacrifice is held and portions are distributed to the worthy.",
        effect=CardEffect(meat=2),
    ),
    FateCard(
        card_id="fate-8",
        title="Slander at court",
        description="Courtiers slander you; you lose meat and must wait before travelling on.",
        effect=CardEffect(meat=-1, pause=True),
    ),
)

CHANCE_CARDS = (
    ChanceCard(
        card_id="chance-1",
        title="A disciple's gift",
        challenge="Zigong's trading brings a bundle of dried meat for the teacher.",
        effect=CardEffect(meat=1),
    ),
    ChanceCard(
        card_id="chance-2",
        title="Playing the qin",
        challenge="Your music moves the host, who rewards you generously.",
        effect=CardEffect(meat=2),
    ),
    ChanceCard(
        card_id="chance-3",
        title="The hermits' mockery",
        challenge="Changju and Jieni mock your travels; you lose heart and provisions.",
        effect=CardEffect(meat=-1),
    ),
    ChanceCard(
        card_id="chance-4",
        title="Audience with a lord",
        challenge="Roll the die: an even number wins the lord's favour, an odd one his suspicion.",
        effect=CardEffect(special=SpecialTag.DICE_BRANCH),
    ),
    ChanceCard(
        card_id="chance-5",
        title="Ford the river",
        challenge="You find the ford and cross to the State of Chen.",
        effect=CardEffect(position=10),
    ),
    ChanceCard(
        card_id="chance-6",
        title="Visit Laozi",
        challenge="You ask Laozi about ritual at the Zhou archives.",
        effect=CardEffect(position=21),
    ),
    ChanceCard(
        card_id="chance-7",
        title="Lost in the hills",
        challenge="The guide leads you astray for a turn.",
        effect=CardEffect(pause=True),
    ),
    ChanceCard(
        card_id="chance-8",
        title="A village feast",
        challenge="The villagers of Daxiang honour your learning with a feast.",
        effect=CardEffect(meat=1),
    ),
)
