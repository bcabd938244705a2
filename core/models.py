"""
Records exchanged between the workflow nodes, the document store and the API.

Everything is a plain dataclass; `to_camel_dict` turns one into the camelCase
JSON shape the front-end and the stored documents use.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, is_dataclass
from typing import Any, Dict, List, Literal, Optional

MaterialType = Literal["PLA", "TPU", "PETG", "ABS"]
FeedbackType = Literal["comment", "refinement_request", "approval"]
SizeAdjustment = Literal["larger", "smaller", "wider", "taller"]
ProjectStatus = Literal["generating", "concepts", "refining", "modeling", "preview", "completed", "error"]

VIEW_NAMES = ["Front View", "Back View", "Side View", "Top View"]


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p[:1].upper() + p[1:] for p in rest)


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(k): _camelize(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_camelize(v) for v in value]
    return value


def to_camel_dict(obj: Any) -> Dict[str, Any]:
    """Serialize a dataclass (or dict) with camelCase keys, dropping None fields."""
    if is_dataclass(obj):
        obj = asdict(obj)
    return _camelize(obj)


@dataclass
class Dimensions:
    width: float   # mm
    height: float  # mm
    depth: float   # mm


@dataclass
class PrintSettings:
    layer_height: float
    infill_percentage: int
    support_required: bool


@dataclass
class ProductSpecs:
    dimensions: Dimensions
    material: MaterialType
    estimated_weight: int            # grams
    estimated_print_time: int        # minutes
    estimated_material_cost: float   # USD
    functionality: List[str]
    print_settings: PrintSettings


@dataclass
class Concept:
    id: str
    project_id: str
    index: int          # 0-3 (Front, Back, Side, Top)
    view_name: str
    image_url: str
    image_prompt: str
    generation_time_ms: float
    image_size: int = 0  # bytes; unknown for placeholder images


@dataclass
class Feedback:
    project_id: str
    user_id: str
    text: str
    type: FeedbackType
    emoji: str = "💭"
    concept_index: Optional[int] = None
    position: Optional[Dict[str, float]] = None
    processed: bool = False
    extracted_parameters: Optional[Dict[str, Any]] = None


@dataclass
class ModelData:
    id: str
    project_id: str
    source_concept_index: int
    gltf_url: str
    vertices: int
    faces: int
    file_size: int               # bytes
    conversion_time_ms: int
    printability_check: Dict[str, Any]
    edge_one_job_id: Optional[str] = None
    stl_url: Optional[str] = None
    thumbnail_url: Optional[str] = None


@dataclass
class Project:
    user_id: str
    prompt: str
    status: ProjectStatus = "generating"
    concepts_generated: bool = False
    model_generated: bool = False
    stl_generated: bool = False
    specifications: Optional[ProductSpecs] = None
    time_spent_refining: int = 0
    download_count: int = 0
    selected_concept_index: Optional[int] = None
    concept_images: Optional[List[str]] = None
    model_file_url: Optional[str] = None
    stl_file_url: Optional[str] = None
