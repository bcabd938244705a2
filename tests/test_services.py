import io
import random

import pytest
import trimesh

from core.config import Settings
from core.errors import ReconstructionError
from core.services.reconstruction import ReconstructionClient
from core.services.stl_converter import StlConverter, placeholder_stl, simulate_model_stats, stl_file_name
from core.services.storage import JsonDocumentStore, LocalFileStorage


class FakeClock:
    def __init__(self, now_ms=1_000_000):
        self.now_ms = now_ms

    def __call__(self):
        return self.now_ms


def make_client(clock, **overrides):
    settings = Settings(reconstruction_delay_s=5.0, model_poll_interval_s=5.0, model_poll_max_attempts=12)
    for k, v in overrides.items():
        setattr(settings, k, v)
    sleeps = []

    def sleep(seconds):
        sleeps.append(seconds)
        clock.now_ms += int(seconds * 1000)

    return ReconstructionClient(settings, clock=clock, sleep=sleep, rng=random.Random(1)), sleeps


# ------------------------------------------------------------
# Reconstruction
# ------------------------------------------------------------
def test_job_id_encodes_submission_time():
    clock = FakeClock()
    client, _ = make_client(clock)
    job_id = client.submit(["a.png"], "a lamp")
    prefix, ts, suffix = job_id.split("_")
    assert prefix == "edge"
    assert ts == "1000000"
    assert len(suffix) == 9


def test_status_progresses_then_completes():
    clock = FakeClock()
    client, _ = make_client(clock)
    job_id = client.submit([], "x")

    clock.now_ms += 2500
    status = client.check_status(job_id)
    assert status["status"] == "processing"
    assert status["progress"] == pytest.approx(45.0)

    clock.now_ms += 2500
    status = client.check_status(job_id)
    assert status["status"] == "completed"
    assert status["downloadUrl"].endswith(f"{job_id}.gltf")


def test_malformed_job_id_fails():
    client, _ = make_client(FakeClock())
    assert client.check_status("garbage")["status"] == "failed"


def test_wait_for_job_polls_until_done():
    clock = FakeClock()
    client, sleeps = make_client(clock)
    job_id = client.submit([], "x")
    result = client.wait_for_job(job_id)
    assert result["status"] == "completed"
    assert sleeps == [5.0]


def test_wait_for_job_times_out():
    clock = FakeClock()
    client, _ = make_client(clock, reconstruction_delay_s=120.0, model_poll_max_attempts=3)
    job_id = client.submit([], "x")
    with pytest.raises(ReconstructionError):
        client.wait_for_job(job_id)


def test_wait_for_failed_job_raises():
    client, _ = make_client(FakeClock())
    with pytest.raises(ReconstructionError):
        client.wait_for_job("broken")


# ------------------------------------------------------------
# STL conversion
# ------------------------------------------------------------
def test_placeholder_stl_is_a_named_loadable_cube():
    data = placeholder_stl("p42")
    text = data.decode("utf-8")
    assert text.startswith("solid Moddo_p42\n")
    assert text.rstrip().endswith("endsolid Moddo_p42")

    mesh = trimesh.load(io.BytesIO(data), file_type="stl")
    assert len(mesh.faces) == 12


def test_converter_stats_ranges():
    converter = StlConverter(Settings(stl_conversion_delay_s=0.0), rng=random.Random(7))
    result = converter.convert("https://example.com/m.gltf", "p1")
    assert 5000 <= result.vertices < 15000
    assert 3000 <= result.faces < 9000
    assert 15 <= result.volume_cm3 <= 45
    assert result.stl_bytes.startswith(b"solid Moddo_p1")


def test_converter_waits_configured_delay():
    sleeps = []
    converter = StlConverter(Settings(stl_conversion_delay_s=2.0), sleep=sleeps.append)
    converter.convert("u", "p1")
    assert sleeps == [2.0]


def test_simulated_model_stats_ranges():
    stats = simulate_model_stats(random.Random(3))
    assert 5000 <= stats["vertices"] < 15000
    assert 2 * 1024 * 1024 <= stats["file_size"] < 3 * 1024 * 1024


def test_stl_file_name():
    assert stl_file_name("Phone stand w/ cable slot!", "abc") == "Phone_stand_w__cable_slot__abc.stl"
    assert stl_file_name("x" * 50, "id") == "x" * 30 + "_id.stl"


# ------------------------------------------------------------
# Storage
# ------------------------------------------------------------
def test_document_store_roundtrip(tmp_path):
    store = JsonDocumentStore(str(tmp_path))
    doc_id = store.add("projects", {"prompt": "lamp", "status": "generating"})
    doc = store.get("projects", doc_id)
    assert doc["prompt"] == "lamp"
    assert doc["createdAt"] == doc["updatedAt"]

    store.update("projects", doc_id, {"status": "concepts"})
    doc = store.get("projects", doc_id)
    assert doc["status"] == "concepts"
    assert doc["updatedAt"] >= doc["createdAt"]


def test_document_store_missing(tmp_path):
    store = JsonDocumentStore(str(tmp_path))
    assert store.get("projects", "nope") is None
    assert store.get("projects", "../etc/passwd") is None
    with pytest.raises(KeyError):
        store.update("projects", "nope", {"a": 1})


def test_document_store_query_filters_and_orders(tmp_path):
    store = JsonDocumentStore(str(tmp_path))
    first = store.add("feedback", {"projectId": "p1", "text": "one"})
    store.add("feedback", {"projectId": "p2", "text": "other"})
    second = store.add("feedback", {"projectId": "p1", "text": "two"})

    docs = store.query("feedback", "projectId", "p1")
    assert [d["id"] for d in docs] == [first, second]
    assert [d["text"] for d in docs] == ["one", "two"]


def test_file_storage_upload(tmp_path):
    files = LocalFileStorage(str(tmp_path), base_url="/files/")
    url = files.upload("stl-files/p1/a.stl", b"solid x", "application/sla", {"project-id": "p1"})
    assert url == "/files/stl-files/p1/a.stl"
    assert (tmp_path / "stl-files" / "p1" / "a.stl").read_bytes() == b"solid x"
    assert (tmp_path / "stl-files" / "p1" / "a.stl.meta.json").exists()
