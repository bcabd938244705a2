from core.concepts import build_concepts, build_view_prompts, generate_concept_images


def test_view_prompts_in_fixed_order():
    prompts = build_view_prompts("a lamp")
    assert len(prompts) == 4
    assert prompts[0].startswith("a lamp, front view")
    assert prompts[3].startswith("a lamp, top view")
    assert all(p.endswith("professional lighting") for p in prompts)


def test_build_concepts():
    urls = generate_concept_images("a lamp")
    concepts = build_concepts("p1", "a lamp", urls, elapsed_ms=400)
    assert [c.view_name for c in concepts] == ["Front View", "Back View", "Side View", "Top View"]
    assert [c.index for c in concepts] == [0, 1, 2, 3]
    assert concepts[2].image_prompt == "a lamp, side view"
    assert all(c.generation_time_ms == 100 for c in concepts)
    assert all(c.project_id == "p1" for c in concepts)
    assert len({c.id for c in concepts}) == 4
