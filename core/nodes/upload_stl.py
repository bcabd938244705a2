from datetime import datetime, timezone

from core.services.storage import LocalFileStorage
from core.state import ModdoState

STL_CONTENT_TYPE = "application/sla"


def make_upload_stl_node(files: LocalFileStorage):
    def upload_stl_node(state: ModdoState) -> ModdoState:
        project_id = state.get("project_id", "")
        state["stl_url"] = files.upload(
            f"stl-files/{project_id}/{state['stl_file_name']}",
            state["stl_bytes"],
            content_type=STL_CONTENT_TYPE,
            metadata={
                "project-id": project_id,
                "generated-at": datetime.now(timezone.utc).isoformat(),
                "file-type": "stl",
            },
        )
        return state

    return upload_stl_node
