import logging
import uuid
from typing import List

from core.models import VIEW_NAMES, Concept

logger = logging.getLogger(__name__)

VIEWS = ["front", "back", "side", "top"]

# Placeholder renders until an image model is wired in.
PLACEHOLDER_IMAGES = [
    "https://via.placeholder.com/400x400/6366f1/ffffff?text=Front+View",
    "https://via.placeholder.com/400x400/8b5cf6/ffffff?text=Back+View",
    "https://via.placeholder.com/400x400/06b6d4/ffffff?text=Side+View",
    "https://via.placeholder.com/400x400/10b981/ffffff?text=Top+View",
]


def build_view_prompts(prompt: str) -> List[str]:
    return [
        f"{prompt}, {view} view, product photography, white background, professional lighting"
        for view in VIEWS
    ]


def generate_concept_images(prompt: str) -> List[str]:
    """Return one image URL per view, in VIEWS order."""
    for view_prompt in build_view_prompts(prompt):
        logger.debug("Concept image prompt: %s", view_prompt)
    return list(PLACEHOLDER_IMAGES)


def build_concepts(project_id: str, prompt: str, image_urls: List[str], elapsed_ms: float) -> List[Concept]:
    per_image_ms = elapsed_ms / len(VIEWS)
    return [
        Concept(
            id=str(uuid.uuid4()),
            project_id=project_id,
            index=i,
            view_name=VIEW_NAMES[i],
            image_url=url,
            image_prompt=f"{prompt}, {VIEWS[i]} view",
            generation_time_ms=per_image_ms,
        )
        for i, url in enumerate(image_urls[: len(VIEWS)])
    ]
