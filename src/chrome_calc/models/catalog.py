"""Rule catalog: tag definitions and cyber-mod systems.

The catalog is external content, loaded once by the parser and read by the
engine. Nothing here is ever mutated after construction.
"""

from dataclasses import dataclass, field

from chrome_calc.models.character import CyberModSystemState
from chrome_calc.models.constants import (
    EMPTY_SLOT,
    HANDS_SYSTEM,
    OPERATING_SYSTEM,
    syskey,
)
from chrome_calc.models.effect import EffectSet, TagEffect


def numeric_tier_key(tier: str) -> str | None:
    """'03' -> '3', '2.50' -> '2.5'; None when *tier* is not numeric."""
    try:
        number = float(tier)
    except ValueError:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    if number.is_integer():
        return str(int(number))
    return repr(number)


@dataclass(frozen=True, slots=True)
class TagChoice:
    id: str | None
    label: str | None
    effects: tuple[TagEffect, ...] = ()


@dataclass(frozen=True, slots=True)
class TagDefinition:
    """A named trait. Choices carry their own effects on top of the tag's."""
    name: str
    effects: tuple[TagEffect, ...] = ()
    choices: tuple[TagChoice, ...] = ()

    def choice(self, choice_id: str | None) -> TagChoice | None:
        """Find a choice by id, falling back to its label."""
        if not choice_id:
            return None
        for option in self.choices:
            if option.id == choice_id:
                return option
        for option in self.choices:
            if option.label == choice_id:
                return option
        return None

    def active_effects(self, choice_id: str | None = None) -> tuple[TagEffect, ...]:
        """The tag's own effects plus the chosen option's effects."""
        option = self.choice(choice_id)
        if option is None:
            return self.effects
        return self.effects + option.effects


@dataclass(frozen=True, slots=True)
class CyberMod:
    """One installable modification.

    `tiers` is keyed by tier label. Tiered and base effects are a general
    capability, though only the Operating System uses them in stock data.
    """
    id: str
    name: str
    desc: str = ""
    effects: EffectSet = field(default_factory=EffectSet)
    base_effects: EffectSet = field(default_factory=EffectSet)
    tiers: dict[str, EffectSet] = field(default_factory=dict)

    def tier_effects(self, tier: str | None) -> EffectSet | None:
        if not tier or not self.tiers:
            return None
        found = self.tiers.get(tier)
        if found is not None:
            return found
        numeric = numeric_tier_key(tier)
        if numeric is None:
            return None
        return self.tiers.get(numeric)

    def resolve(self, tier: str | None = None) -> EffectSet:
        """Flat effects, then base_effects, then the matching tier, overlaid."""
        combined = self.effects.merged(self.base_effects)
        tiered = self.tier_effects(tier)
        if tiered is not None:
            combined = combined.merged(tiered)
        return combined


@dataclass(frozen=True, slots=True)
class CyberSystem:
    name: str
    slots: int = 1
    mods: tuple[CyberMod, ...] = ()

    @property
    def key(self) -> str:
        return syskey(self.name)

    def lookup(self, identifier: str) -> CyberMod | None:
        """Find a modification by id or display name."""
        for mod in self.mods:
            if mod.id == identifier or mod.name == identifier:
                return mod
        return None


@dataclass
class RuleCatalog:
    """Read-only lookup over tags and systems.

    Systems are keyed by their normalized name ("operating_system").
    """

    systems: dict[str, CyberSystem] = field(default_factory=dict)
    tags: dict[str, TagDefinition] = field(default_factory=dict)

    @classmethod
    def from_parts(
        cls,
        systems: list[CyberSystem],
        tags: list[TagDefinition] | None = None,
    ) -> "RuleCatalog":
        return cls(
            systems={s.key: s for s in systems},
            tags={t.name: t for t in (tags or [])},
        )

    def system(self, name: str) -> CyberSystem | None:
        """Look up a system by catalog key or by any casing of its name."""
        found = self.systems.get(name)
        if found is not None:
            return found
        return self.systems.get(syskey(name))

    def lookup_mod(self, system_name: str, identifier: str) -> CyberMod | None:
        system = self.system(system_name)
        if system is None:
            return None
        return system.lookup(identifier)

    def tag(self, name: str) -> TagDefinition | None:
        return self.tags.get(name)

    def default_cyber_mods_state(
        self,
        hands_extra_slots: int = 1,
    ) -> dict[str, CyberModSystemState]:
        """Empty installation for every known system, keyed by display name."""
        state: dict[str, CyberModSystemState] = {}
        for system in self.systems.values():
            total = system.slots
            if system.name == HANDS_SYSTEM:
                total += hands_extra_slots
            state[system.name] = CyberModSystemState(
                slots=[EMPTY_SLOT] * total,
                tier="" if system.name == OPERATING_SYSTEM else None,
            )
        return state
