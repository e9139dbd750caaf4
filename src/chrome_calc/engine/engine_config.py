"""Configuration knobs for the attack engine.

Defaults match the stock rule set. These are the hard-coded tag rules that
are not expressed as catalog effect records.
"""

from dataclasses import dataclass


@dataclass(slots=True)
class EngineConfig:
    """Tuneable parameters that aren't formula constants."""

    # Attribute pre-adjustments for unarmed/kick, applied before the formula
    unarmed_body_tag: str = "Boxing"
    unarmed_reflexes_tag: str = "Brawling"
    unarmed_training_bonus: int = 10

    # Tag-driven combat bonuses (fractions, multipliers)
    melee_training_tag: str = "Melee Training"
    melee_training_crit: float = 0.05
    fencing_tag: str = "Fencing"
    fencing_crit: float = 0.15
    aikido_tag: str = "Aikido"
    aikido_damage_mult: float = 1.25
    archery_tag: str = "Archery"
    archery_hit: float = 0.15
    archery_crit: float = 0.15
    kickboxing_tag: str = "Thai Kick Boxing"
    kickboxing_damage_mult: float = 1.5

    # Trace
    heal_proc_label: str = "Feedback Circuit"
