"""Result objects returned by rules validation.

Rules validation reports problems as messages for the player instead of
raising, so callers can show every problem at once.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ValidationResult(BaseModel):
    """Outcome of validating a set of choices."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errors: tuple[str, ...] = ()

    @classmethod
    def from_errors(cls, errors: list[str]) -> ValidationResult:
        """Build a result that is valid exactly when ``errors`` is empty."""
        return cls(is_valid=not errors, errors=tuple(errors))


class EquipmentValidationResult(BaseModel):
    """Outcome of checking whether an item can be equipped.

    Attributes:
        can_equip: Whether the item can be equipped.
        reason: Why it cannot, for the player.
        conflicts: Slugs of equipped items that block it.
    """

    model_config = ConfigDict(frozen=True)

    can_equip: bool = True
    reason: str | None = None
    conflicts: tuple[str, ...] = ()


class StepValidation(BaseModel):
    """Completion state of a creation wizard step."""

    model_config = ConfigDict(frozen=True)

    is_complete: bool
    missing_selections: tuple[str, ...] = ()
    next_required_action: str | None = None

    @property
    def progress_percent(self) -> int:
        """100 when complete, otherwise 25 points off per missing selection."""
        if self.is_complete:
            return 100
        return max(0, 100 - len(self.missing_selections) * 25)


class ProficiencySummary(BaseModel):
    """Armor, weapon, tool and skill proficiencies from all sources."""

    armor: list[str] = Field(default_factory=list)
    weapons: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)


__all__ = [
    "ValidationResult",
    "EquipmentValidationResult",
    "StepValidation",
    "ProficiencySummary",
]
