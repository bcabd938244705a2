import os
import uuid

import requests
import streamlit as st

# =========================
# CONFIG
# =========================
st.set_page_config(
    page_title="Moddo",
    page_icon="🟪",
    layout="wide",
)

API_URL = os.getenv("API_URL", "http://127.0.0.1:8000").rstrip("/")

STEPS = ["Prompt", "Concepts", "3D Preview", "Printable STL"]

# =========================
# THEME COLORS
# =========================
PRIMARY = "#6366f1"
BG = "#f6f7f9"
CARD = "#ffffff"
TEXT = "#0f172a"
MUTED = "#64748b"
BORDER = "#e5e7eb"

st.markdown(
    f"""
<style>
.stApp {{
    background: {BG};
}}
.block-container {{
    padding-top: 1.0rem !important;
}}
#MainMenu {{visibility: hidden;}}
footer {{visibility: hidden;}}

.md-topbar {{
    background: {PRIMARY};
    color: white;
    border-radius: 14px;
    padding: 14px 18px;
    display: flex;
    align-items: center;
    justify-content: space-between;
    margin-bottom: 16px;
}}
.md-title {{
    font-size: 18px;
    font-weight: 800;
}}
.md-sub {{
    font-size: 12px;
    opacity: 0.9;
}}
.md-section {{
    background: {CARD};
    border-radius: 16px;
    border: 1px solid {BORDER};
    padding: 14px 14px;
    margin-top: 12px;
}}
.md-section-title {{
    font-weight: 900;
    color: {TEXT};
    margin-bottom: 8px;
}}
.md-muted {{
    color: {MUTED};
    font-size: 12px;
}}
</style>
""",
    unsafe_allow_html=True,
)

# =========================
# SESSION STATE
# =========================
defaults = {
    "user_id": f"demo_{uuid.uuid4().hex[:8]}",
    "step": 1,
    "project": None,      # concept generation response
    "model": None,        # model generation response
    "stl": None,          # stl conversion response
    "selected_concept": 0,
}
for key, value in defaults.items():
    if key not in st.session_state:
        st.session_state[key] = value


# =========================
# Helpers
# =========================
class ApiError(Exception):
    pass


def call_api(method: str, path: str, **kwargs) -> dict:
    r = requests.request(method, f"{API_URL}{path}", timeout=120, **kwargs)
    try:
        result = r.json()
    except ValueError:
        r.raise_for_status()
        raise ApiError(f"Unexpected response from {path}")
    if not result.get("success"):
        err = result.get("error") or {}
        raise ApiError(err.get("message") or "Request failed")
    return result["data"]


def project_id() -> str:
    return st.session_state.project["projectId"]


def bullets(items):
    if items:
        st.markdown("\n".join(f"- {i}" for i in items))


def render_printability(check: dict):
    st.markdown('<div class="md-section">', unsafe_allow_html=True)
    st.markdown('<div class="md-section-title">🖨️ Printability Check</div>', unsafe_allow_html=True)
    if check.get("passed"):
        st.success("Passed")
    else:
        st.warning("Issues found")
        bullets(check.get("issues", []))
    st.markdown("**Recommendations:**")
    bullets(check.get("recommendations", []))
    st.markdown("</div>", unsafe_allow_html=True)


def render_specs(specs: dict):
    dims = specs.get("dimensions", {})
    settings = specs.get("printSettings", {})
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Size (mm)", f"{dims.get('width')}×{dims.get('height')}×{dims.get('depth')}")
    c2.metric("Material", specs.get("material", "—"))
    c3.metric("Weight", f"{specs.get('estimatedWeight', '—')} g")
    c4.metric("Print time", f"{specs.get('estimatedPrintTime', '—')} min")
    st.caption(
        f"Layer height {settings.get('layerHeight')}mm • infill {settings.get('infillPercentage')}% • "
        f"supports {'required' if settings.get('supportRequired') else 'not required'} • "
        f"est. cost ${specs.get('estimatedMaterialCost')}"
    )
    bullets(specs.get("functionality", []))


# =========================
# SIDEBAR
# =========================
with st.sidebar:
    st.markdown("### Moddo")
    st.caption(f"User: {st.session_state.user_id}")
    if st.button("➕  New Project", use_container_width=True):
        for key in ("project", "model", "stl"):
            st.session_state[key] = None
        st.session_state.step = 1
        st.rerun()

    st.markdown("#### STAGES")
    for i, name in enumerate(STEPS, start=1):
        marker = "●" if i == st.session_state.step else ("✓" if i < st.session_state.step else "○")
        st.markdown(f"{marker} {name}")


# =========================
# HEADER
# =========================
step = st.session_state.step
st.markdown(
    f"""
<div class="md-topbar">
  <div>
    <div class="md-title">{STEPS[step - 1]}</div>
    <div class="md-sub">Prompt → concepts → 3D model → printable file</div>
  </div>
</div>
""",
    unsafe_allow_html=True,
)
st.progress(step / len(STEPS))


# =========================
# STAGE 1: PROMPT
# =========================
if step == 1:
    st.info("Describe the product you want to print, e.g. **a phone stand with a cable slot**.")
    prompt = st.text_area("What do you want to make?", height=100)
    if st.button("Generate concepts", type="primary", disabled=not prompt.strip()):
        try:
            with st.spinner("Generating concepts..."):
                st.session_state.project = call_api(
                    "POST", "/api/projects", json={"prompt": prompt, "userId": st.session_state.user_id}
                )
            st.session_state.step = 2
            st.rerun()
        except (ApiError, requests.RequestException) as e:
            st.error(f"Could not generate concepts: {e}")

# =========================
# STAGE 2: CONCEPTS + FEEDBACK
# =========================
elif step == 2:
    project = st.session_state.project
    cols = st.columns(4)
    for col, concept in zip(cols, project["concepts"]):
        with col:
            st.image(concept["imageUrl"], caption=concept["viewName"], use_container_width=True)

    st.markdown('<div class="md-section">', unsafe_allow_html=True)
    st.markdown('<div class="md-section-title">📐 Specifications</div>', unsafe_allow_html=True)
    render_specs(project["specifications"])
    for warning in project.get("warnings", []):
        st.warning(warning)
    st.markdown("</div>", unsafe_allow_html=True)

    st.markdown('<div class="md-section">', unsafe_allow_html=True)
    st.markdown('<div class="md-section-title">💬 Feedback</div>', unsafe_allow_html=True)
    concept_index = st.radio(
        "Concept",
        options=list(range(len(project["concepts"]))),
        format_func=lambda i: project["concepts"][i]["viewName"],
        horizontal=True,
    )
    st.session_state.selected_concept = concept_index

    comment = st.chat_input("Tell us what to change, e.g. 'make it bigger and add a hole'")
    if comment:
        try:
            result = call_api(
                "POST",
                f"/api/projects/{project_id()}/feedback",
                json={"text": comment, "userId": st.session_state.user_id, "conceptIndex": concept_index},
            )
            if result.get("extractedParameters"):
                st.toast(f"Understood: {result['extractedParameters']}")
        except (ApiError, requests.RequestException) as e:
            st.error(f"Could not send feedback: {e}")

    try:
        feedback = call_api(
            "GET", f"/api/projects/{project_id()}/feedback", params={"userId": st.session_state.user_id}
        )["feedback"]
    except (ApiError, requests.RequestException) as e:
        feedback = []
        st.error(f"Could not load feedback: {e}")

    if not feedback:
        st.caption("No feedback yet.")
    for item in feedback:
        label = item.get("type", "comment").replace("_", " ")
        st.markdown(f"{item.get('emoji', '💭')} **{label}** — {item.get('text')}")
        if item.get("extractedParameters"):
            st.markdown(f'<div class="md-muted">{item["extractedParameters"]}</div>', unsafe_allow_html=True)
    st.markdown("</div>", unsafe_allow_html=True)

    if st.button("Approve & build 3D model", type="primary"):
        try:
            with st.spinner("Reconstructing 3D model..."):
                st.session_state.model = call_api(
                    "POST",
                    f"/api/projects/{project_id()}/model",
                    json={"userId": st.session_state.user_id, "conceptIndex": concept_index},
                )
            st.session_state.step = 3
            st.rerun()
        except (ApiError, requests.RequestException) as e:
            st.error(f"Could not generate the 3D model: {e}")

# =========================
# STAGE 3: 3D PREVIEW
# =========================
elif step == 3:
    model = st.session_state.model["modelData"]
    c1, c2, c3 = st.columns(3)
    c1.metric("Vertices", f"{model['vertices']:,}")
    c2.metric("Faces", f"{model['faces']:,}")
    c3.metric("File size", f"{model['fileSize'] / (1024 * 1024):.1f} MB")
    st.markdown(f"Model file: `{model['gltfUrl']}`")
    render_printability(model["printabilityCheck"])

    if st.button("Convert to STL", type="primary"):
        try:
            with st.spinner("Converting to STL..."):
                st.session_state.stl = call_api(
                    "POST", f"/api/projects/{project_id()}/stl", json={"userId": st.session_state.user_id}
                )
            st.session_state.step = 4
            st.rerun()
        except (ApiError, requests.RequestException) as e:
            st.error(f"Could not convert to STL: {e}")

# =========================
# STAGE 4: STL DOWNLOAD
# =========================
else:
    stl = st.session_state.stl
    st.success("Your printable file is ready.")
    st.metric("STL size", f"{stl['fileSize']:,} bytes")
    download_url = f"{API_URL}/api/projects/{project_id()}/stl?userId={st.session_state.user_id}&download=true"
    st.link_button("⬇️ Download STL", download_url, type="primary")
    render_printability(stl["printabilityCheck"])
