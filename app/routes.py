import logging
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from app.dependencies import get_file_storage, get_reconstruction_client, get_stl_converter, get_store
from app.schemas import CreateProjectRequest, FeedbackRequest, ModelRequest, StlRequest
from core.errors import Forbidden, ModdoError, NotFound, ServiceFailed, ValidationFailed
from core.models import Feedback, ModelData, Project, to_camel_dict
from core.services.reconstruction import ReconstructionClient
from core.services.stl_converter import StlConverter
from core.services.storage import JsonDocumentStore, LocalFileStorage
from core.workflow import build_concepts_app, build_feedback_app, build_model_app, build_stl_app

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects")

concepts_app = build_concepts_app()
feedback_app = build_feedback_app()

PROJECTS = "projects"
FEEDBACK = "feedback"


def ok(data: Any) -> Dict[str, Any]:
    return {"success": True, "data": data}


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


@contextmanager
def failure_as(code: str, message: str, on_error: Optional[Callable[[], None]] = None):
    """Turn unexpected exceptions into a 500 with the route's error code."""
    try:
        yield
    except ModdoError:
        raise
    except Exception as exc:
        logger.exception("%s: %s", code, exc)
        if on_error is not None:
            on_error()
        raise ServiceFailed(code, message, details=str(exc)) from exc


def _require_user(user_id: Optional[str]) -> str:
    if not user_id or not isinstance(user_id, str):
        raise ValidationFailed("INVALID_USER", "User ID is required")
    return user_id


def _is_concept_index(value: Any) -> bool:
    # bool is an int subclass; JSON true must not select concept 1
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 3


def _owned_project(store: JsonDocumentStore, project_id: str, user_id: str) -> Dict[str, Any]:
    project = store.get(PROJECTS, project_id)
    if project is None:
        raise NotFound("PROJECT_NOT_FOUND", "Project not found")
    if project.get("userId") != user_id:
        raise Forbidden("UNAUTHORIZED", "User does not own this project")
    return project


def _mark_error(store: JsonDocumentStore, project_id: str) -> Callable[[], None]:
    def mark() -> None:
        try:
            store.update(PROJECTS, project_id, {"status": "error"})
        except Exception as exc:
            logger.error("Failed to update project %s status to error: %s", project_id, exc)

    return mark


# ------------------------------------------------------------
# Projects + concepts
# ------------------------------------------------------------
@router.post("")
def create_project(body: CreateProjectRequest, store: JsonDocumentStore = Depends(get_store)):
    if not body.prompt or not body.prompt.strip():
        raise ValidationFailed("INVALID_PROMPT", "Prompt is required and must be a non-empty string")
    user_id = _require_user(body.userId)
    prompt = body.prompt.strip()

    with failure_as("GENERATION_FAILED", "Failed to generate project concepts"):
        started = time.perf_counter()

        project_id = store.add(PROJECTS, to_camel_dict(Project(user_id=user_id, prompt=prompt)))
        result = concepts_app.invoke({"project_id": project_id, "prompt": prompt})

        store.update(PROJECTS, project_id, {
            "specifications": result["specifications"],
            "conceptImages": result["concept_image_urls"],
            "conceptsGenerated": True,
            "status": "concepts",
        })

        processing_ms = _elapsed_ms(started)
        logger.info("Generated concepts for project %s in %dms", project_id, processing_ms)

        return ok({
            "projectId": project_id,
            "concepts": result["concepts"],
            "specifications": result["specifications"],
            "processingTimeMs": processing_ms,
            "warnings": result.get("warnings", []),
        })


# ------------------------------------------------------------
# Feedback loop
# ------------------------------------------------------------
@router.post("/{project_id}/feedback")
def add_feedback(project_id: str, body: FeedbackRequest, store: JsonDocumentStore = Depends(get_store)):
    if not body.text or not body.text.strip():
        raise ValidationFailed("INVALID_FEEDBACK", "Feedback text is required")
    user_id = _require_user(body.userId)

    with failure_as("FEEDBACK_FAILED", "Failed to add feedback"):
        _owned_project(store, project_id, user_id)

        text = body.text.strip()
        result = feedback_app.invoke({"project_id": project_id, "feedback_text": text})
        feedback_type = result["feedback_type"]
        params = result.get("extracted_parameters")

        feedback = Feedback(
            project_id=project_id,
            user_id=user_id,
            text=text,
            type=feedback_type,
            emoji=body.emoji or "💭",
            concept_index=body.conceptIndex,
            position=body.position,
            extracted_parameters=params,
        )
        feedback_id = store.add(FEEDBACK, to_camel_dict(feedback))

        if feedback_type == "refinement_request":
            store.update(PROJECTS, project_id, {"status": "refining"})

        logger.info(
            "New %s feedback %s on project %s: text=%r params=%s concept=%s",
            feedback_type, feedback_id, project_id, text[:100], params, body.conceptIndex,
        )

        data: Dict[str, Any] = {"feedbackId": feedback_id}
        if params is not None:
            data["extractedParameters"] = params
        return ok(data)


@router.get("/{project_id}/feedback")
def list_feedback(project_id: str, userId: Optional[str] = None, store: JsonDocumentStore = Depends(get_store)):
    user_id = _require_user(userId)

    with failure_as("FEEDBACK_RETRIEVAL_FAILED", "Failed to retrieve feedback"):
        _owned_project(store, project_id, user_id)
        feedback = store.query(FEEDBACK, "projectId", project_id, order_by="createdAt")
        logger.info("Retrieved %d feedback items for project %s", len(feedback), project_id)
        return ok({"feedback": feedback})


# ------------------------------------------------------------
# 3D model
# ------------------------------------------------------------
@router.post("/{project_id}/model")
def generate_model(
    project_id: str,
    body: ModelRequest,
    store: JsonDocumentStore = Depends(get_store),
    reconstruction: ReconstructionClient = Depends(get_reconstruction_client),
):
    user_id = _require_user(body.userId)
    if not _is_concept_index(body.conceptIndex):
        raise ValidationFailed("INVALID_CONCEPT", "Concept index must be between 0 and 3")

    with failure_as("MODEL_GENERATION_FAILED", "Failed to generate 3D model", on_error=_mark_error(store, project_id)):
        project = _owned_project(store, project_id, user_id)
        if not project.get("conceptsGenerated") or not project.get("conceptImages"):
            raise ValidationFailed("CONCEPTS_NOT_READY", "Concepts must be generated first")

        started = time.perf_counter()
        store.update(PROJECTS, project_id, {"status": "modeling", "selectedConceptIndex": body.conceptIndex})

        result = build_model_app(reconstruction).invoke({
            "project_id": project_id,
            "prompt": project.get("prompt", ""),
            "concept_images": project["conceptImages"],
            "concept_index": body.conceptIndex,
        })
        stats = result["model_stats"]

        model = ModelData(
            id=f"model_{project_id}",
            project_id=project_id,
            source_concept_index=body.conceptIndex,
            edge_one_job_id=result["job_id"],
            gltf_url=result["model_file_url"],
            vertices=stats["vertices"],
            faces=stats["faces"],
            file_size=stats["file_size"],
            conversion_time_ms=_elapsed_ms(started),
            printability_check=result["printability_check"],
        )

        store.update(PROJECTS, project_id, {
            "modelGenerated": True,
            "modelFileUrl": model.gltf_url,
            "status": "preview",
        })

        processing_ms = _elapsed_ms(started)
        logger.info("Generated 3D model for project %s in %dms", project_id, processing_ms)

        return ok({
            "projectId": project_id,
            "modelData": to_camel_dict(model),
            "processingTimeMs": processing_ms,
            "warnings": result.get("warnings", []),
        })


@router.get("/{project_id}/model")
def model_status(project_id: str, userId: Optional[str] = None, store: JsonDocumentStore = Depends(get_store)):
    user_id = _require_user(userId)

    with failure_as("MODEL_STATUS_FAILED", "Failed to get model status"):
        project = _owned_project(store, project_id, user_id)
        return ok({
            "projectId": project_id,
            "modelGenerated": project.get("modelGenerated", False),
            "modelFileUrl": project.get("modelFileUrl"),
            "status": project.get("status"),
            "selectedConceptIndex": project.get("selectedConceptIndex"),
        })


# ------------------------------------------------------------
# STL
# ------------------------------------------------------------
@router.post("/{project_id}/stl")
def generate_stl(
    project_id: str,
    body: StlRequest,
    store: JsonDocumentStore = Depends(get_store),
    converter: StlConverter = Depends(get_stl_converter),
    files: LocalFileStorage = Depends(get_file_storage),
):
    user_id = _require_user(body.userId)

    with failure_as("STL_CONVERSION_FAILED", "Failed to convert model to STL", on_error=_mark_error(store, project_id)):
        project = _owned_project(store, project_id, user_id)
        if not project.get("modelGenerated") or not project.get("modelFileUrl"):
            raise ValidationFailed("MODEL_NOT_READY", "3D model must be generated first")

        started = time.perf_counter()
        result = build_stl_app(converter, files).invoke({
            "project_id": project_id,
            "prompt": project.get("prompt", ""),
            "model_file_url": project["modelFileUrl"],
        })

        store.update(PROJECTS, project_id, {
            "stlGenerated": True,
            "stlFileUrl": result["stl_url"],
            "status": "completed",
        })

        logger.info("Generated STL for project %s in %dms", project_id, _elapsed_ms(started))

        return ok({
            "projectId": project_id,
            "stlUrl": result["stl_url"],
            "fileSize": len(result["stl_bytes"]),
            "printabilityCheck": result["printability_check"],
            "warnings": result.get("warnings", []),
        })


@router.get("/{project_id}/stl")
def stl_status(
    project_id: str,
    userId: Optional[str] = None,
    download: Optional[str] = None,
    store: JsonDocumentStore = Depends(get_store),
):
    user_id = _require_user(userId)

    with failure_as("STL_STATUS_FAILED", "Failed to get STL status"):
        project = _owned_project(store, project_id, user_id)
        downloads = project.get("downloadCount") or 0

        if download == "true" and project.get("stlFileUrl"):
            store.update(PROJECTS, project_id, {"downloadCount": downloads + 1})
            return RedirectResponse(project["stlFileUrl"], status_code=307)

        return ok({
            "projectId": project_id,
            "stlGenerated": project.get("stlGenerated", False),
            "stlFileUrl": project.get("stlFileUrl"),
            "downloadCount": downloads,
            "status": project.get("status"),
        })
