import re
from typing import List

from core.state import ModdoState

# Prompts this short rarely describe the product well enough for concepts.
MIN_PROMPT_CHARS = 6


def normalize_prompt_node(state: ModdoState) -> ModdoState:
    """
    Clean the raw prompt into the form every later node uses.

    Writes:
      - state["prompt"]   : trimmed, internal whitespace collapsed
      - state["warnings"] : note when the prompt is too short to be specific
    """
    warnings: List[str] = state.get("warnings", []) or []

    prompt = re.sub(r"\s+", " ", state.get("prompt") or "").strip()
    if len(prompt) < MIN_PROMPT_CHARS:
        warnings.append("Prompt is very short. Describe the product in more detail for better concepts.")

    state["prompt"] = prompt
    state["warnings"] = warnings
    return state
