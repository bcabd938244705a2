from core.feedback.classify import classify_feedback
from core.state import ModdoState


def classify_feedback_node(state: ModdoState) -> ModdoState:
    text = state.get("feedback_text") or ""
    state["feedback_type"] = classify_feedback(text)
    return state
