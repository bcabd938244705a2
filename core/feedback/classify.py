from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from core.models import FeedbackType, MaterialType, SizeAdjustment, to_camel_dict

# A rule maps a group of keywords to a label. Rule lists are ordered.
KeywordRule = Tuple[Tuple[str, ...], str]

FEEDBACK_TYPE_RULES: Sequence[KeywordRule] = (
    (("perfect", "looks good", "approve", "ready"), "approval"),
    (("change", "adjust", "make it", "need", "should be", "add", "remove"), "refinement_request"),
)
DEFAULT_FEEDBACK_TYPE: FeedbackType = "comment"

SIZE_RULES: Sequence[KeywordRule] = (
    (("bigger", "larger", "increase size"), "larger"),
    (("smaller", "reduce size", "compact"), "smaller"),
    (("wider", "broader"), "wider"),
    (("taller", "higher"), "taller"),
)

MATERIAL_RULES: Sequence[KeywordRule] = (
    (("flexible", "rubbery", "tpu"), "TPU"),
    (("rigid", "hard", "pla"), "PLA"),
    (("durable", "strong", "petg"), "PETG"),
    (("abs",), "ABS"),
)

FUNCTIONAL_RULES: Sequence[KeywordRule] = (
    (("hole", "opening"), "Add holes or openings"),
    (("grip", "texture"), "Add grip texture"),
    (("compartment", "section"), "Add compartments"),
    (("smooth", "rounded"), "Smooth edges"),
)


@dataclass(frozen=True)
class FeedbackParameters:
    size_adjustment: Optional[SizeAdjustment] = None
    material_change: Optional[MaterialType] = None
    functional_changes: Optional[Tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        return to_camel_dict(self)


def _has_any(text: str, keywords: Sequence[str]) -> bool:
    return any(k in text for k in keywords)


def first_match(text: str, rules: Sequence[KeywordRule]) -> Optional[str]:
    """Label of the first rule whose keywords appear in `text` (already lowercased)."""
    for keywords, label in rules:
        if _has_any(text, keywords):
            return label
    return None


def all_matches(text: str, rules: Sequence[KeywordRule]) -> List[str]:
    """Labels of every matching rule, in rule order."""
    return [label for keywords, label in rules if _has_any(text, keywords)]


def classify_feedback(text: str) -> FeedbackType:
    """
    Categorize feedback as approval, refinement request or plain comment.

    Approval keywords win over refinement keywords, so
    "perfect, but please add a hole" is an approval.
    """
    return first_match(text.lower(), FEEDBACK_TYPE_RULES) or DEFAULT_FEEDBACK_TYPE


def extract_feedback_parameters(text: str) -> Optional[FeedbackParameters]:
    """
    Pull refinement hints out of free text.

    Plain substring matching: "not bigger" still reads as "larger".
    Returns None when nothing was recognized.
    """
    lower = text.lower()

    size = first_match(lower, SIZE_RULES)
    material = first_match(lower, MATERIAL_RULES)
    functional = all_matches(lower, FUNCTIONAL_RULES)

    if size is None and material is None and not functional:
        return None

    return FeedbackParameters(
        size_adjustment=size,
        material_change=material,
        functional_changes=tuple(functional) if functional else None,
    )
