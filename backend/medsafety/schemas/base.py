"""Base schemas and enums for the medication safety engine."""

from enum import Enum


class InteractionSeverity(str, Enum):
    """Severity of a registered drug interaction."""

    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class InteractionEvidence(str, Enum):
    """Strength of the evidence behind an interaction entry."""

    STRONG = "strong"
    MODERATE = "moderate"
    LIMITED = "limited"


class EvidenceLevel(str, Enum):
    """Evidence level of a treatment guideline."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class PregnancyCategory(str, Enum):
    """FDA pregnancy risk categories (legacy letter system)."""

    A = "A"  # Adequate studies show no risk
    B = "B"  # Animal studies no risk, no human studies
    C = "C"  # Animal studies show risk, no human studies
    D = "D"  # Evidence of human fetal risk, may be acceptable
    X = "X"  # Contraindicated in pregnancy


class AgeGroup(str, Enum):
    """Patient age bands used by dosage guidelines."""

    PEDIATRIC = "pediatric"
    ADULT = "adult"
    GERIATRIC = "geriatric"

    def contains(self, age: float) -> bool:
        """Whether ``age`` (years) falls inside this band."""
        if self is AgeGroup.PEDIATRIC:
            return age < 18
        if self is AgeGroup.GERIATRIC:
            return age >= 65
        return age >= 18


class SpecialPopulation(str, Enum):
    """Populations with guideline-specific recommendations."""

    PEDIATRIC = "pediatric"
    GERIATRIC = "geriatric"
    PREGNANT = "pregnant"
    RENAL_IMPAIRMENT = "renal_impairment"
    HEPATIC_IMPAIRMENT = "hepatic_impairment"


class SafetyIssueType(str, Enum):
    """Types of medication safety issues that can be reported."""

    ADVERSE_REACTION = "adverse_reaction"
    INTERACTION = "interaction"
    INCORRECT_DOSAGE = "incorrect_dosage"
    CONTRAINDICATION = "contraindication"
    ALLERGY = "allergy"
    MEDICATION_ERROR = "medication_error"
    SIDE_EFFECT = "side_effect"
    OTHER = "other"


class IssueSeverity(str, Enum):
    """Severity of a reported safety issue, mildest first."""

    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    LIFE_THREATENING = "life_threatening"

    @property
    def rank(self) -> int:
        """Ordinal position, 0 for MILD."""
        return list(IssueSeverity).index(self)

    def at_least(self, other: "IssueSeverity") -> bool:
        return self.rank >= other.rank


class IssueStatus(str, Enum):
    """Lifecycle status of a reported safety issue."""

    REPORTED = "reported"
    UNDER_INVESTIGATION = "under_investigation"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class PrescriptionStatus(str, Enum):
    """Review status of an AI-generated prescription suggestion."""

    PENDING = "pending"
    APPROVED = "approved"
    REQUIRES_REVIEW = "requires_review"
    REJECTED = "rejected"


class AlertType(str, Enum):
    """Kinds of alerts raised by a knowledge-based safety check."""

    HIGH_RISK_INTERACTION = "high_risk_interaction"
    CONTRAINDICATION = "contraindication"
    ALLERGY_DETECTED = "allergy_detected"
    BEERS_CRITERIA = "beers_criteria"
    PREGNANCY_RISK = "pregnancy_risk"
