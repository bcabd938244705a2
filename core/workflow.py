import random

from langgraph.graph import StateGraph, START, END

from core.state import ModdoState
from core.services.reconstruction import ReconstructionClient
from core.services.stl_converter import StlConverter
from core.services.storage import LocalFileStorage

from core.nodes.normalize_prompt import normalize_prompt_node
from core.nodes.generate_specs import generate_specs_node
from core.nodes.generate_concepts import generate_concepts_node
from core.nodes.classify_feedback import classify_feedback_node
from core.nodes.extract_parameters import extract_parameters_node
from core.nodes.reconstruction import make_submit_reconstruction_node, make_await_reconstruction_node
from core.nodes.model_stats import make_model_stats_node
from core.nodes.printability import model_printability_node, stl_printability_node
from core.nodes.convert_stl import make_convert_stl_node
from core.nodes.upload_stl import make_upload_stl_node


def _chain(graph: StateGraph, *names: str) -> None:
    graph.add_edge(START, names[0])
    for a, b in zip(names, names[1:]):
        graph.add_edge(a, b)
    graph.add_edge(names[-1], END)


def build_concepts_app():
    """Stage 1 -> 2: prompt to specifications + four concept views."""
    graph = StateGraph(ModdoState)
    graph.add_node("NORMALIZE_PROMPT", normalize_prompt_node)
    graph.add_node("GENERATE_SPECS", generate_specs_node)
    graph.add_node("GENERATE_CONCEPTS", generate_concepts_node)
    _chain(graph, "NORMALIZE_PROMPT", "GENERATE_SPECS", "GENERATE_CONCEPTS")
    return graph.compile()


def build_feedback_app():
    """Feedback loop: type + structured parameters (independent of each other)."""
    graph = StateGraph(ModdoState)
    graph.add_node("CLASSIFY_FEEDBACK", classify_feedback_node)
    graph.add_node("EXTRACT_PARAMETERS", extract_parameters_node)
    _chain(graph, "CLASSIFY_FEEDBACK", "EXTRACT_PARAMETERS")
    return graph.compile()


def build_model_app(reconstruction: ReconstructionClient, rng: random.Random | None = None):
    """Stage 2 -> 3: concept images to a GLTF model with a printability check."""
    rng = rng or random.Random()

    graph = StateGraph(ModdoState)
    graph.add_node("SUBMIT_RECONSTRUCTION", make_submit_reconstruction_node(reconstruction))
    graph.add_node("AWAIT_RECONSTRUCTION", make_await_reconstruction_node(reconstruction))
    graph.add_node("MODEL_STATS", make_model_stats_node(rng))
    graph.add_node("MODEL_PRINTABILITY", model_printability_node)
    _chain(graph, "SUBMIT_RECONSTRUCTION", "AWAIT_RECONSTRUCTION", "MODEL_STATS", "MODEL_PRINTABILITY")
    return graph.compile()


def build_stl_app(converter: StlConverter, files: LocalFileStorage):
    """Stage 3 -> 4: GLTF to an uploaded, checked STL file."""
    graph = StateGraph(ModdoState)
    graph.add_node("CONVERT_STL", make_convert_stl_node(converter))
    graph.add_node("STL_PRINTABILITY", stl_printability_node)
    graph.add_node("UPLOAD_STL", make_upload_stl_node(files))
    _chain(graph, "CONVERT_STL", "STL_PRINTABILITY", "UPLOAD_STL")
    return graph.compile()
