"""Attack calculation entry point.

Ties the pipeline together for one button press:

    classify -> effective attributes -> base formulas -> modifier stack
             -> resolution -> trace

Inputs are only read. A failure in any stage comes back as a failed
CalculationResult (never as a 0-damage miss).
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Mapping

from chrome_calc.engine.attributes import SerializedCyberMods, resolve_effective_attributes
from chrome_calc.engine.classifier import classify
from chrome_calc.engine.engine_config import EngineConfig
from chrome_calc.engine.formulas import BaseNumbers, RandomSource, evaluate_base
from chrome_calc.engine.modifiers import ResolutionState, apply_modifiers
from chrome_calc.engine.resolution import AttackOutcome, resolve
from chrome_calc.engine.status import StatusContext, build_status_context
from chrome_calc.engine.trace import format_failure, format_trace
from chrome_calc.models.catalog import RuleCatalog
from chrome_calc.models.character import WeaponConfig
from chrome_calc.models.combat_settings import CombatSettings
from chrome_calc.models.constants import AttackCategory, AttackSubtype, Attribute

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CalculationResult:
    """Outcome and trace of one calculation, or the reason it failed."""

    text: str
    outcome: AttackOutcome | None = None
    category: AttackCategory | None = None
    subtype: AttackSubtype | None = None
    effective_attributes: dict[Attribute, float] | None = None
    status: StatusContext | None = None
    base: BaseNumbers | None = None
    modified: ResolutionState | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def calculate_attack(
    attributes: Mapping[Any, Any],
    tags: Mapping[str, bool],
    cyber_mods: SerializedCyberMods,
    weapon: WeaponConfig,
    catalog: RuleCatalog,
    status: Mapping[str, Any] | None = None,
    *,
    rng: RandomSource | None = None,
    settings: CombatSettings | None = None,
    config: EngineConfig | None = None,
) -> CalculationResult:
    """Resolve one attack and explain it.

    *rng* defaults to a fresh unseeded random.Random; pass a seeded one
    for reproducible results.
    """
    rng = rng or random.Random()
    settings = settings or CombatSettings.defaults()
    config = config or EngineConfig()
    tags = tags or {}

    try:
        category, subtype = classify(weapon.type)
        effective = resolve_effective_attributes(attributes, cyber_mods, catalog, settings)
        ctx = build_status_context(weapon, status, settings)
        base = evaluate_base(category, subtype, effective, weapon, tags, rng, settings, config)
        modified = apply_modifiers(
            base, category, subtype, ctx, catalog, cyber_mods, tags, settings, config
        )
        outcome = resolve(modified, rng)
        text = format_trace(category, subtype, base, modified, outcome, config)
    except Exception as exc:
        logger.exception("Attack calculation failed for weapon type %r", weapon.type)
        message = str(exc) or type(exc).__name__
        return CalculationResult(text=format_failure(message), error=message)

    return CalculationResult(
        text=text,
        outcome=outcome,
        category=category,
        subtype=subtype,
        effective_attributes=effective,
        status=ctx,
        base=base,
        modified=modified,
    )


def compute_damage(
    attributes: Mapping[Any, Any],
    tags: Mapping[str, bool],
    cyber_mods: SerializedCyberMods,
    weapon: WeaponConfig,
    catalog: RuleCatalog,
    status: Mapping[str, Any] | None = None,
    *,
    rng: RandomSource | None = None,
    settings: CombatSettings | None = None,
    config: EngineConfig | None = None,
) -> str:
    """Trace text only, as shown by the sheet's Calculate button."""
    return calculate_attack(
        attributes, tags, cyber_mods, weapon, catalog, status,
        rng=rng, settings=settings, config=config,
    ).text
