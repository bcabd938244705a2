"""
Photo-to-3D reconstruction client (EdgeOne).

The remote API is not called yet: submissions are logged and answered with a
job id that encodes its creation time, and status checks report the job as
"processing" until the configured delay has elapsed. The job id format and
the status payload match what the remote service returns, so callers do not
change when the real request is switched on.
"""
from __future__ import annotations

import logging
import random
import string
import time
from typing import Any, Callable, Dict, List

from core.config import Settings
from core.errors import ReconstructionError

logger = logging.getLogger(__name__)

MODEL_BUCKET_URL = "https://storage.googleapis.com/moddo-models"


def _now_ms() -> int:
    return int(time.time() * 1000)


class ReconstructionClient:
    def __init__(
        self,
        settings: Settings,
        clock: Callable[[], int] = _now_ms,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
    ):
        self.api_key = settings.edgeone_api_key
        self.base_url = settings.edgeone_api_url
        self.delay_ms = settings.reconstruction_delay_s * 1000
        self.poll_interval_s = settings.model_poll_interval_s
        self.max_attempts = settings.model_poll_max_attempts
        self._clock = clock
        self._sleep = sleep
        self._rng = rng or random.Random()

    def submit(self, image_urls: List[str], prompt: str) -> str:
        """Submit concept images for multi-view reconstruction. Returns a job id."""
        payload = {
            "images": image_urls,
            "prompt": prompt,
            "quality": "high",
            "format": "gltf",
            "reconstruction_type": "multi_view",
            "texture_resolution": 1024,
            "mesh_quality": "medium",
        }
        logger.info("Reconstruction request to %s/reconstruct: %s", self.base_url, payload)

        suffix = "".join(self._rng.choices(string.ascii_lowercase + string.digits, k=9))
        job_id = f"edge_{self._clock()}_{suffix}"
        logger.info("Reconstruction job submitted with id %s", job_id)
        return job_id

    def check_status(self, job_id: str) -> Dict[str, Any]:
        try:
            submitted_ms = int(job_id.split("_")[1])
        except (IndexError, ValueError):
            logger.error("Cannot read submission time from job id %r", job_id)
            return {"status": "failed", "error": "Failed to check job status"}

        age = self._clock() - submitted_ms
        if age < self.delay_ms:
            progress = min(90.0, (age / self.delay_ms) * 90) if self.delay_ms > 0 else 90.0
            return {"status": "processing", "progress": progress}

        return {
            "status": "completed",
            "progress": 100,
            "downloadUrl": f"{MODEL_BUCKET_URL}/{job_id}.gltf",
        }

    def wait_for_job(self, job_id: str) -> Dict[str, Any]:
        """Poll until the job completes or fails; raise on failure or timeout."""
        result: Dict[str, Any] = {}
        for attempt in range(self.max_attempts):
            result = self.check_status(job_id)
            if result["status"] in ("completed", "failed"):
                break
            logger.debug("Job %s still %s (attempt %d)", job_id, result["status"], attempt + 1)
            self._sleep(self.poll_interval_s)

        if not result or result["status"] == "failed":
            raise ReconstructionError(result.get("error") or "Reconstruction job failed or timed out")
        if result["status"] != "completed" or not result.get("downloadUrl"):
            raise ReconstructionError("Reconstruction job did not complete successfully")
        return result
