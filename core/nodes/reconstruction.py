import logging

from core.services.reconstruction import ReconstructionClient
from core.state import ModdoState

logger = logging.getLogger(__name__)


def make_submit_reconstruction_node(client: ReconstructionClient):
    def submit_reconstruction_node(state: ModdoState) -> ModdoState:
        images = state.get("concept_images") or []
        state["job_id"] = client.submit(images, state.get("prompt") or "")
        return state

    return submit_reconstruction_node


def make_await_reconstruction_node(client: ReconstructionClient):
    def await_reconstruction_node(state: ModdoState) -> ModdoState:
        """Poll the reconstruction job; raises ReconstructionError on failure/timeout."""
        result = client.wait_for_job(state["job_id"])
        logger.info("Reconstruction job %s completed: %s", state["job_id"], result.get("downloadUrl"))
        state["job_result"] = result
        state["model_file_url"] = result["downloadUrl"]
        return state

    return await_reconstruction_node
