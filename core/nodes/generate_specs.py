from core.models import to_camel_dict
from core.specs import generate_product_specs
from core.state import ModdoState


def generate_specs_node(state: ModdoState) -> ModdoState:
    """
    Derive product specifications from the prompt.
    Writes state["specifications"] (camelCase, ready to store).
    """
    prompt = (state.get("prompt") or "").strip()
    state["specifications"] = to_camel_dict(generate_product_specs(prompt))
    return state
