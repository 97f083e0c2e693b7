"""Medication and treatment guideline schemas.

Records are frozen once loaded; the Knowledge Repository is their only
owner and hands out the same instances to every caller.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from medsafety.schemas.base import (
    AgeGroup,
    EvidenceLevel,
    InteractionEvidence,
    InteractionSeverity,
    PregnancyCategory,
    SpecialPopulation,
)


class FrozenModel(BaseModel):
    """Base for immutable reference records."""

    model_config = ConfigDict(frozen=True)


class Interaction(FrozenModel):
    """An interaction registered against a medication."""

    medication: str = Field(..., description="Counterpart medication name or drug class")
    severity: InteractionSeverity
    description: str | None = None
    evidence_level: InteractionEvidence = InteractionEvidence.MODERATE


class WeightRange(FrozenModel):
    """Inclusive body-weight band in kilograms."""

    min_kg: float | None = None
    max_kg: float | None = None

    def contains(self, weight_kg: float) -> bool:
        if self.min_kg is not None and weight_kg < self.min_kg:
            return False
        if self.max_kg is not None and weight_kg > self.max_kg:
            return False
        return True


class DosageGuideline(FrozenModel):
    """Dosing recommendation for a route, population and condition."""

    route: str
    dosage: str
    frequency: str
    max_daily_dose: str
    age_group: AgeGroup | None = None
    condition: str | None = None
    weight_range: WeightRange | None = None
    duration: str | None = None
    notes: str | None = None


class PediatricUse(FrozenModel):
    """Pediatric suitability."""

    is_safe: bool
    minimum_age: float | None = None
    dosage_adjustment: str | None = None
    warnings: tuple[str, ...] = ()


class BeersCriteria(FrozenModel):
    """AGS Beers Criteria fact for older adults."""

    is_inappropriate: bool
    rationale: str | None = None
    recommendation: str | None = None


class OrganDosing(FrozenModel):
    """Renal or hepatic dose adjustment."""

    requires_adjustment: bool
    guidelines: str | None = None


class MedicationRecord(FrozenModel):
    """Canonical medication record."""

    id: str
    name: str = Field(..., description="Canonical medication name")
    generic_name: str
    brand_names: tuple[str, ...] = ()
    classification: str = ""
    drug_classes: tuple[str, ...] = ()
    rx_norm_code: str | None = None
    atc_code: str | None = None
    forms: tuple[str, ...] = ()
    strengths: tuple[str, ...] = ()
    indications: tuple[str, ...] = ()
    contraindications: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    side_effects: tuple[str, ...] = ()
    interactions: tuple[Interaction, ...] = ()
    dosage_guidelines: tuple[DosageGuideline, ...] = ()
    pediatric_use: PediatricUse | None = None
    pregnancy_category: PregnancyCategory | None = None
    beers_criteria: BeersCriteria | None = None
    renal_dosing: OrganDosing | None = None
    hepatic_dosing: OrganDosing | None = None
    references: tuple[str, ...] = ()
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class TreatmentOption(FrozenModel):
    """A set of interchangeable medications at one line of therapy."""

    medications: tuple[str, ...]
    notes: str | None = None


class PopulationGuidance(FrozenModel):
    """Recommendations specific to a patient population."""

    population: SpecialPopulation
    recommendations: tuple[str, ...] = ()
    medications: tuple[str, ...] = ()


class TreatmentGuideline(FrozenModel):
    """Treatment guideline for a condition."""

    id: str
    condition: str
    icd10_codes: tuple[str, ...] = ()
    first_line_options: tuple[TreatmentOption, ...] = ()
    second_line_options: tuple[TreatmentOption, ...] = ()
    special_populations: tuple[PopulationGuidance, ...] = ()
    source: str = ""
    last_updated: datetime
    evidence_level: EvidenceLevel


class InteractionMatch(BaseModel):
    """An interaction found between a medication and a candidate drug."""

    interacting_drug: str = Field(..., description="Candidate drug as supplied by the caller")
    counterpart: str = Field(..., description="Registered interaction entry that matched")
    severity: InteractionSeverity
    description: str | None = None
