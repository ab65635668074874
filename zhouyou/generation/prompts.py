"""
Trial Prompts - Prompt and response contract for generated trials.

The prompt asks for exactly one multiple-choice trial about a thematic
label (usually the state a tile represents). The response must be a single
JSON object matching RESPONSE_SCHEMA.
"""

from dataclasses import dataclass


RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "id": {"type": "integer"},
        "question": {"type": "string"},
        "options": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 4,
            "maxItems": 4,
        },
        "answerIndex": {"type": "integer", "minimum": 0, "maximum": 3},
        "analysis": {"type": "string"},
        "quote": {"type": "string"},
    },
    "required": ["question", "options", "answerIndex", "analysis", "quote"],
}


@dataclass
class TrialPrompts:
    """
    Collection of prompts for trial generation.

    Prompts include:
    - System context
    - Generation instructions
    - Output format specification
    - Response schema for structured output
    """

    @staticmethod
    def schema() -> dict:
        """JSON schema the response must satisfy."""
        return RESPONSE_SCHEMA

    @staticmethod
    def system() -> str:
        return (
            "You are a senior scholar of Confucian thought and of the history "
            "of the Spring and Autumn period. You answer with JSON only."
        )

    @staticmethod
    def trial(topic: str) -> str:
        """Prompt for one multiple-choice trial about `topic`."""
        return f"""
Based on the historical background of Confucius travelling among the states,
in particular the episodes connected with "{topic}", and on Confucian thought
(the Analects and the Records of the Grand Historian), write one
single-answer multiple-choice trial.

Requirements:
1. Include a passage quoted from a classical text (quote).
2. Ask a question that invites real reflection on that passage (question).
3. Give exactly 4 options (options), starting with "A.", "B.", "C.", "D.".
4. Give the index of the correct option (answerIndex, starting at 0).
5. Give a detailed analysis explaining why that option is correct (analysis).
6. Keep the trial about Confucius' travels or Confucian thought.

Record the trial as a single JSON object with exactly these fields:
question, options, answerIndex, analysis, quote.
"""
