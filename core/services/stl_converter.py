"""
GLTF -> STL conversion.

Until a real converter is plugged in, the output is a placeholder cube
(exported through trimesh so slicers can open it) and the mesh statistics
are simulated in the ranges the reconstruction service typically produces.
"""
from __future__ import annotations

import logging
import random
import re
import time
from dataclasses import dataclass
from typing import Callable, Dict

import trimesh

from core.config import Settings
from core.errors import ConversionError

logger = logging.getLogger(__name__)

MIB = 1024 * 1024


@dataclass
class ConversionResult:
    stl_bytes: bytes
    vertices: int
    faces: int
    volume_cm3: float


def simulate_model_stats(rng: random.Random) -> Dict[str, int]:
    """Mesh stats for a freshly reconstructed GLTF (2-3 MiB, ~5-15k vertices)."""
    return {
        "vertices": 5000 + rng.randrange(10000),
        "faces": 3000 + rng.randrange(6000),
        "file_size": 2 * MIB + rng.randrange(MIB),
    }


def placeholder_stl(project_id: str) -> bytes:
    """ASCII STL of a 10mm cube, solid named after the project."""
    mesh = trimesh.creation.box(extents=[10.0, 10.0, 10.0])
    text = mesh.export(file_type="stl_ascii")
    if isinstance(text, bytes):
        text = text.decode("utf-8")

    lines = text.strip().splitlines()
    lines[0] = f"solid Moddo_{project_id}"
    lines[-1] = f"endsolid Moddo_{project_id}"
    return ("\n".join(lines) + "\n").encode("utf-8")


def stl_file_name(prompt: str, project_id: str) -> str:
    slug = re.sub(r"[^a-zA-Z0-9]", "_", prompt)[:30]
    return f"{slug}_{project_id}.stl"


class StlConverter:
    def __init__(
        self,
        settings: Settings,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.delay_s = settings.stl_conversion_delay_s
        self._rng = rng or random.Random()
        self._sleep = sleep

    def convert(self, gltf_url: str, project_id: str) -> ConversionResult:
        logger.info("Converting GLTF to STL for project %s: %s", project_id, gltf_url)
        try:
            if self.delay_s > 0:
                self._sleep(self.delay_s)
            stl_bytes = placeholder_stl(project_id)
        except Exception as exc:
            logger.error("STL conversion error: %s", exc)
            raise ConversionError("Failed to convert GLTF to STL") from exc

        result = ConversionResult(
            stl_bytes=stl_bytes,
            vertices=5000 + self._rng.randrange(10000),
            faces=3000 + self._rng.randrange(6000),
            volume_cm3=15 + self._rng.random() * 30,
        )
        logger.info("STL conversion completed: %d vertices, %d faces", result.vertices, result.faces)
        return result
