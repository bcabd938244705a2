from core.services.stl_converter import StlConverter, stl_file_name
from core.state import ModdoState


def make_convert_stl_node(converter: StlConverter):
    def convert_stl_node(state: ModdoState) -> ModdoState:
        """
        Convert the GLTF model to STL.

        Writes:
          - state["stl_bytes"]     : file content
          - state["stl_stats"]     : vertices / faces / volume_cm3
          - state["stl_file_name"] : download name derived from the prompt
        """
        project_id = state.get("project_id", "")
        result = converter.convert(state["model_file_url"], project_id)

        state["stl_bytes"] = result.stl_bytes
        state["stl_stats"] = {
            "vertices": result.vertices,
            "faces": result.faces,
            "volume_cm3": result.volume_cm3,
        }
        state["stl_file_name"] = stl_file_name(state.get("prompt") or "", project_id)
        return state

    return convert_stl_node
