from typing import TypedDict, List, Dict, Any, Optional


class ModdoState(TypedDict, total=False):
    # --- Raw inputs (as received) ---
    project_id: str
    prompt: str
    feedback_text: str
    concept_images: List[str]
    concept_index: int
    model_file_url: str

    # --- Concepts stage ---
    specifications: Dict[str, Any]
    concept_image_urls: List[str]
    concepts: List[Dict[str, Any]]

    # --- Feedback stage ---
    feedback_type: str
    extracted_parameters: Optional[Dict[str, Any]]

    # --- 3D model stage ---
    job_id: str
    job_result: Dict[str, Any]
    model_stats: Dict[str, Any]

    # --- STL stage ---
    stl_bytes: bytes
    stl_stats: Dict[str, Any]
    stl_file_name: str
    stl_url: str

    # --- Output shared by model + STL stages ---
    printability_check: Dict[str, Any]

    # --- Diagnostics ---
    warnings: List[str]
