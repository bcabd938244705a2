import logging
import time

from core.concepts import build_concepts, generate_concept_images
from core.models import to_camel_dict
from core.state import ModdoState

logger = logging.getLogger(__name__)


def generate_concepts_node(state: ModdoState) -> ModdoState:
    """
    Generate the four concept views for the prompt.

    Writes:
      - state["concept_image_urls"] : one URL per view (Front, Back, Side, Top)
      - state["concepts"]           : Concept records for the API response
    """
    prompt = (state.get("prompt") or "").strip()
    project_id = state.get("project_id", "")

    started = time.perf_counter()
    logger.info('Generating concepts for project %s: "%s"', project_id, prompt)
    urls = generate_concept_images(prompt)
    elapsed_ms = (time.perf_counter() - started) * 1000

    state["concept_image_urls"] = urls
    state["concepts"] = [to_camel_dict(c) for c in build_concepts(project_id, prompt, urls, elapsed_ms)]
    return state
