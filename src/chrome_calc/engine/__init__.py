"""Attack-resolution engine interfaces."""

from chrome_calc.engine.attributes import resolve_effective_attributes, serialize_cyber_mods
from chrome_calc.engine.calculator import CalculationResult, calculate_attack, compute_damage
from chrome_calc.engine.classifier import classify
from chrome_calc.engine.engine_config import EngineConfig

__all__ = [
    "CalculationResult",
    "EngineConfig",
    "calculate_attack",
    "classify",
    "compute_damage",
    "resolve_effective_attributes",
    "serialize_cyber_mods",
]
