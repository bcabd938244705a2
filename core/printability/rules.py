from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Tuple

MeshStats = Mapping[str, float]

MIB = 1024 * 1024


@dataclass(frozen=True)
class PrintabilityRule:
    check: Callable[[MeshStats], bool]
    issue: str
    recommendation: str


@dataclass(frozen=True)
class RuleSet:
    name: str
    rules: Tuple[PrintabilityRule, ...]
    # Used instead of the per-rule recommendations when nothing fired.
    default_recommendations: Tuple[str, ...]


@dataclass(frozen=True)
class PrintabilityVerdict:
    issues: Tuple[str, ...]
    recommendations: Tuple[str, ...]

    @property
    def passed(self) -> bool:
        return not self.issues

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "issues": list(self.issues),
            "recommendations": list(self.recommendations),
        }


def evaluate(rule_set: RuleSet, stats: MeshStats) -> PrintabilityVerdict:
    """
    Run every rule against the stats (no short-circuit).
    Issues and recommendations keep rule declaration order.
    """
    issues: List[str] = []
    recommendations: List[str] = []

    for rule in rule_set.rules:
        if not rule.check(stats):
            continue
        if rule.issue not in issues:
            issues.append(rule.issue)
        if rule.recommendation not in recommendations:
            recommendations.append(rule.recommendation)

    if not issues:
        recommendations = list(rule_set.default_recommendations)

    return PrintabilityVerdict(issues=tuple(issues), recommendations=tuple(recommendations))


# ------------------------------------------------------------
# After 3D reconstruction: vertices + file size (bytes)
# ------------------------------------------------------------
MODEL_RULES = RuleSet(
    name="model",
    rules=(
        PrintabilityRule(
            lambda s: s["vertices"] > 100_000,
            "High vertex count may slow printing",
            "Consider reducing model complexity",
        ),
        PrintabilityRule(
            lambda s: s["file_size"] > 10 * MIB,
            "Large file size may indicate excessive detail",
            "Optimize mesh for 3D printing",
        ),
    ),
    default_recommendations=(
        "Model appears print-ready",
        "Recommended layer height: 0.2mm",
        "Supports may be needed for overhangs",
    ),
)

# ------------------------------------------------------------
# After STL conversion: faces + volume (cm³)
# ------------------------------------------------------------
STL_RULES = RuleSet(
    name="stl",
    rules=(
        PrintabilityRule(
            lambda s: s["volume_cm3"] < 1,
            "Model may be too small for reliable printing",
            "Consider scaling up the model",
        ),
        PrintabilityRule(
            lambda s: s["volume_cm3"] > 1000,  # 1000 cm³ = 10cm cube
            "Model may be too large for some 3D printers",
            "Consider scaling down or printing in parts",
        ),
        PrintabilityRule(
            lambda s: s["faces"] > 50_000,
            "High face count may cause slicer performance issues",
            "Consider mesh decimation to reduce complexity",
        ),
        PrintabilityRule(
            lambda s: s["faces"] < 100,
            "Low face count may result in blocky appearance",
            "Consider increasing mesh resolution",
        ),
    ),
    default_recommendations=(
        "Model appears optimized for 3D printing",
        "Recommended infill: 15-20%",
        "Recommended layer height: 0.2mm",
        "Consider orientation to minimize supports",
    ),
)


def analyze_model_printability(vertices: float, file_size: float) -> PrintabilityVerdict:
    return evaluate(MODEL_RULES, {"vertices": vertices, "file_size": file_size})


def analyze_stl_printability(vertices: float, faces: float, volume_cm3: float) -> PrintabilityVerdict:
    return evaluate(STL_RULES, {"vertices": vertices, "faces": faces, "volume_cm3": volume_cm3})
