from core.feedback.classify import extract_feedback_parameters
from core.state import ModdoState


def extract_parameters_node(state: ModdoState) -> ModdoState:
    """
    Structured refinement hints (size / material / functional changes).
    state["extracted_parameters"] stays None when nothing was recognized.
    """
    params = extract_feedback_parameters(state.get("feedback_text") or "")
    state["extracted_parameters"] = params.to_dict() if params else None
    return state
