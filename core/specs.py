from core.models import Dimensions, MaterialType, PrintSettings, ProductSpecs

# g/cm³
MATERIAL_DENSITY = {"TPU": 1.2, "PETG": 1.27}
DEFAULT_DENSITY = 1.24

# USD per gram
MATERIAL_COST_PER_GRAM = {"TPU": 0.08}
DEFAULT_COST_PER_GRAM = 0.03

INFILL_FRACTION = 0.2
PRINT_MINUTES_PER_CM3 = 2.5


def generate_product_specs(prompt: str) -> ProductSpecs:
    """
    Heuristic product specs from the prompt (product type + use-case keywords).
    Rule-based (no LLM).
    """
    p = prompt.lower()

    def has_any(words) -> bool:
        return any(w in p for w in words)

    dimensions = Dimensions(width=100, height=50, depth=20)
    material: MaterialType = "PLA"
    functionality = ["Custom designed product"]

    # --- Material from use case ---
    if has_any(["flexible", "cable"]):
        material = "TPU"
    elif has_any(["durable", "outdoor"]):
        material = "PETG"

    # --- Size from product type ---
    if has_any(["phone", "mobile"]):
        dimensions = Dimensions(width=80, height=150, depth=15)
        functionality = ["Phone holder", "Adjustable viewing angle"]
    elif has_any(["organizer", "storage"]):
        dimensions = Dimensions(width=120, height=80, depth=30)
        functionality = ["Storage compartments", "Modular design"]
    elif has_any(["stand", "holder"]):
        dimensions = Dimensions(width=100, height=60, depth=80)
        functionality = ["Stable base", "Ergonomic design"]

    volume_cm3 = (dimensions.width * dimensions.height * dimensions.depth) / 1000
    density = MATERIAL_DENSITY.get(material, DEFAULT_DENSITY)
    weight = round(volume_cm3 * density * INFILL_FRACTION)
    print_time = round(volume_cm3 * PRINT_MINUTES_PER_CM3)
    cost = round(weight * MATERIAL_COST_PER_GRAM.get(material, DEFAULT_COST_PER_GRAM), 2)

    return ProductSpecs(
        dimensions=dimensions,
        material=material,
        estimated_weight=weight,
        estimated_print_time=print_time,
        estimated_material_cost=cost,
        functionality=functionality,
        print_settings=PrintSettings(
            layer_height=0.2,
            infill_percentage=20,
            support_required=dimensions.height > dimensions.width * 1.5,
        ),
    )
