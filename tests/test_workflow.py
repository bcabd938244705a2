import random

from core.config import Settings
from core.services.reconstruction import ReconstructionClient
from core.services.stl_converter import StlConverter
from core.services.storage import LocalFileStorage
from core.workflow import build_concepts_app, build_feedback_app, build_model_app, build_stl_app


def test_concepts_app():
    result = build_concepts_app().invoke({"project_id": "p1", "prompt": "  phone stand  "})
    assert result["specifications"]["material"] == "PLA"
    assert result["specifications"]["dimensions"] == {"width": 80, "height": 150, "depth": 15}
    assert len(result["concept_image_urls"]) == 4
    assert [c["viewName"] for c in result["concepts"]] == ["Front View", "Back View", "Side View", "Top View"]
    assert result["concepts"][0]["imagePrompt"] == "phone stand, front view"


def test_feedback_app_refinement_with_parameters():
    result = build_feedback_app().invoke({"feedback_text": "Make it bigger and use flexible material"})
    assert result["feedback_type"] == "refinement_request"
    assert result["extracted_parameters"] == {"sizeAdjustment": "larger", "materialChange": "TPU"}


def test_feedback_app_plain_comment():
    result = build_feedback_app().invoke({"feedback_text": "Nice colors"})
    assert result["feedback_type"] == "comment"
    assert result["extracted_parameters"] is None


def test_model_app(settings):
    client = ReconstructionClient(settings)
    result = build_model_app(client, rng=random.Random(0)).invoke({
        "project_id": "p1",
        "prompt": "lamp",
        "concept_images": ["a", "b", "c", "d"],
        "concept_index": 0,
    })
    assert result["job_id"].startswith("edge_")
    assert result["model_file_url"].endswith(".gltf")
    # simulated stats always stay under both thresholds
    assert result["printability_check"]["passed"] is True
    assert result["printability_check"]["recommendations"][0] == "Model appears print-ready"


def test_stl_app(settings, tmp_path):
    files = LocalFileStorage(str(tmp_path / "files"), base_url="/files")
    converter = StlConverter(settings, rng=random.Random(0))
    result = build_stl_app(converter, files).invoke({
        "project_id": "p1",
        "prompt": "desk lamp",
        "model_file_url": "https://example.com/m.gltf",
    })
    assert result["stl_file_name"] == "desk_lamp_p1.stl"
    assert result["stl_url"] == "/files/stl-files/p1/desk_lamp_p1.stl"
    assert (tmp_path / "files" / "stl-files" / "p1" / "desk_lamp_p1.stl").exists()
    assert result["printability_check"]["passed"] is True
    assert result["printability_check"]["recommendations"][0] == "Model appears optimized for 3D printing"


def test_stl_app_reports_issues_as_warnings(tmp_path):
    class TinyConverter(StlConverter):
        def convert(self, gltf_url, project_id):
            result = super().convert(gltf_url, project_id)
            result.volume_cm3 = 0.2
            result.faces = 20
            return result

    files = LocalFileStorage(str(tmp_path / "files"))
    converter = TinyConverter(Settings(stl_conversion_delay_s=0.0))
    result = build_stl_app(converter, files).invoke({
        "project_id": "p2",
        "prompt": "bead",
        "model_file_url": "u",
    })
    check = result["printability_check"]
    assert check["passed"] is False
    assert check["issues"] == [
        "Model may be too small for reliable printing",
        "Low face count may result in blocky appearance",
    ]
    assert result["warnings"] == check["issues"]


def test_concepts_app_normalizes_prompt():
    result = build_concepts_app().invoke({"project_id": "p1", "prompt": "  durable \n outdoor   box "})
    assert result["prompt"] == "durable outdoor box"
    assert result["specifications"]["material"] == "PETG"
    assert result["warnings"] == []


def test_concepts_app_warns_on_short_prompt():
    result = build_concepts_app().invoke({"project_id": "p1", "prompt": " cup "})
    assert result["warnings"] == ["Prompt is very short. Describe the product in more detail for better concepts."]
    assert result["specifications"]["functionality"] == ["Custom designed product"]


def test_short_prompt_warning_does_not_claim_default_specs():
    result = build_concepts_app().invoke({"project_id": "p1", "prompt": "phone"})
    assert result["specifications"]["functionality"] == ["Phone holder", "Adjustable viewing angle"]
    assert len(result["warnings"]) == 1
    assert "default" not in result["warnings"][0]
