"""Pydantic schemas for the medication safety engine."""

from medsafety.schemas.base import (
    AgeGroup,
    AlertType,
    EvidenceLevel,
    InteractionEvidence,
    InteractionSeverity,
    IssueSeverity,
    IssueStatus,
    PregnancyCategory,
    PrescriptionStatus,
    SafetyIssueType,
    SpecialPopulation,
)
from medsafety.schemas.medication import (
    BeersCriteria,
    DosageGuideline,
    Interaction,
    InteractionMatch,
    MedicationRecord,
    OrganDosing,
    PediatricUse,
    PopulationGuidance,
    TreatmentGuideline,
    TreatmentOption,
    WeightRange,
)
from medsafety.schemas.safety import (
    InteractionFrequency,
    MedicationIssueCount,
    MedicationStatistic,
    PrescriptionSafetyTally,
    PrescriptionSuggestion,
    SafetyAlert,
    SafetyEvaluation,
    SafetyIssue,
    SafetyIssueCreate,
    SafetyStatistics,
    SideEffectFrequency,
)

__all__ = [
    # Enums
    "AgeGroup",
    "AlertType",
    "EvidenceLevel",
    "InteractionEvidence",
    "InteractionSeverity",
    "IssueSeverity",
    "IssueStatus",
    "PregnancyCategory",
    "PrescriptionStatus",
    "SafetyIssueType",
    "SpecialPopulation",
    # Reference data
    "BeersCriteria",
    "DosageGuideline",
    "Interaction",
    "InteractionMatch",
    "MedicationRecord",
    "OrganDosing",
    "PediatricUse",
    "PopulationGuidance",
    "TreatmentGuideline",
    "TreatmentOption",
    "WeightRange",
    # Safety
    "InteractionFrequency",
    "MedicationIssueCount",
    "MedicationStatistic",
    "PrescriptionSafetyTally",
    "PrescriptionSuggestion",
    "SafetyAlert",
    "SafetyEvaluation",
    "SafetyIssue",
    "SafetyIssueCreate",
    "SafetyStatistics",
    "SideEffectFrequency",
]
