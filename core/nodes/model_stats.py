import random

from core.services.stl_converter import simulate_model_stats
from core.state import ModdoState


def make_model_stats_node(rng: random.Random):
    def model_stats_node(state: ModdoState) -> ModdoState:
        """
        Mesh statistics of the reconstructed model.
        Simulated until the GLTF is downloaded and parsed.
        """
        state["model_stats"] = simulate_model_stats(rng)
        return state

    return model_stats_node
