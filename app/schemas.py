from typing import Any, Dict, Optional

from pydantic import BaseModel


# Request bodies are permissive; the routes return the specific error codes
# (INVALID_PROMPT, INVALID_USER, ...) for missing or blank fields.
class CreateProjectRequest(BaseModel):
    prompt: Optional[str] = None
    userId: Optional[str] = None


class FeedbackRequest(BaseModel):
    text: Optional[str] = None
    userId: Optional[str] = None
    conceptIndex: Optional[int] = None
    position: Optional[Dict[str, float]] = None
    emoji: Optional[str] = None


class ModelRequest(BaseModel):
    userId: Optional[str] = None
    conceptIndex: Any = None  # validated in the route; booleans and strings are rejected


class StlRequest(BaseModel):
    userId: Optional[str] = None
