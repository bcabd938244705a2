from typing import List

from core.printability.rules import analyze_model_printability, analyze_stl_printability
from core.state import ModdoState


def _note_issues(state: ModdoState, issues) -> None:
    warnings: List[str] = state.get("warnings", []) or []
    for issue in issues:
        if issue not in warnings:
            warnings.append(issue)
    state["warnings"] = warnings


def model_printability_node(state: ModdoState) -> ModdoState:
    """Printability check right after 3D reconstruction (vertex count + file size)."""
    stats = state.get("model_stats") or {}
    verdict = analyze_model_printability(
        vertices=float(stats.get("vertices", 0) or 0),
        file_size=float(stats.get("file_size", 0) or 0),
    )
    state["printability_check"] = verdict.to_dict()
    _note_issues(state, verdict.issues)
    return state


def stl_printability_node(state: ModdoState) -> ModdoState:
    """Printability check of the converted STL (face count + volume)."""
    stats = state.get("stl_stats") or {}
    verdict = analyze_stl_printability(
        vertices=float(stats.get("vertices", 0) or 0),
        faces=float(stats.get("faces", 0) or 0),
        volume_cm3=float(stats.get("volume_cm3", 0) or 0),
    )
    state["printability_check"] = verdict.to_dict()
    _note_issues(state, verdict.issues)
    return state
