"""Safety issue, medication statistic and evaluation schemas."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from medsafety.schemas.base import (
    AlertType,
    IssueSeverity,
    IssueStatus,
    PrescriptionStatus,
    SafetyIssueType,
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SafetyIssueCreate(BaseModel):
    """Schema for reporting a new safety issue."""

    patient_id: str = Field(..., description="Patient identifier")
    provider_id: str | None = Field(None, description="Reporting provider")
    medications: list[str] = Field(..., min_length=1, description="Implicated medication names")
    issue_type: SafetyIssueType
    severity: IssueSeverity
    description: str
    symptoms: list[str] = Field(default_factory=list)


class SafetyIssue(BaseModel):
    """A reported medication safety issue.

    ``resolution`` and ``resolved_date`` are only populated while the
    status is RESOLVED.
    """

    id: str
    patient_id: str
    provider_id: str | None = None
    medications: list[str]
    issue_type: SafetyIssueType
    severity: IssueSeverity
    description: str
    symptoms: list[str] = Field(default_factory=list)
    report_date: datetime = Field(default_factory=_utcnow)
    status: IssueStatus = IssueStatus.REPORTED
    resolution: str | None = None
    resolved_date: datetime | None = None
    related_prescription_ids: list[str] = Field(default_factory=list)

    def link_prescription(self, prescription_id: str) -> bool:
        """Attach a prescription id; False if it was already linked."""
        if prescription_id in self.related_prescription_ids:
            return False
        self.related_prescription_ids.append(prescription_id)
        return True


class SideEffectFrequency(BaseModel):
    symptom: str
    count: int = 0
    percentage_of_users: float = 0.0


class InteractionFrequency(BaseModel):
    interacting_medication: str
    count: int = 0
    percentage_of_users: float = 0.0


class MedicationStatistic(BaseModel):
    """Accumulated usage and adverse-event counts for one medication."""

    medication_name: str
    total_prescriptions: int = Field(0, ge=0)
    adverse_events: int = Field(0, ge=0)
    common_side_effects: list[SideEffectFrequency] = Field(default_factory=list)
    interaction_frequency: list[InteractionFrequency] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=_utcnow)

    @property
    def adverse_event_rate(self) -> float | None:
        """Adverse events per prescription as a percentage, None without prescriptions."""
        if self.total_prescriptions <= 0:
            return None
        return self.adverse_events / self.total_prescriptions * 100


class SafetyEvaluation(BaseModel):
    """Verdict for a candidate prescription."""

    is_safe: bool = True
    warnings: list[str] = Field(default_factory=list)
    related_issues: list[SafetyIssue] = Field(default_factory=list)


class PrescriptionSuggestion(BaseModel):
    """An AI-generated prescription suggestion awaiting review."""

    medication_name: str | None = None
    dosage: str | None = None
    frequency: str | None = None
    rationale: str | None = None
    status: PrescriptionStatus = PrescriptionStatus.PENDING


class PrescriptionSafetyTally(BaseModel):
    safe_count: int = 0
    review_count: int = 0
    rejected_count: int = 0

    @property
    def total(self) -> int:
        return self.safe_count + self.review_count + self.rejected_count


class MedicationIssueCount(BaseModel):
    medication: str
    count: int


class SafetyStatistics(BaseModel):
    """Aggregated safety issue report for a time window."""

    start_date: datetime
    end_date: datetime
    total_issues: int = 0
    issues_by_type: dict[SafetyIssueType, int] = Field(default_factory=dict)
    issues_by_severity: dict[IssueSeverity, int] = Field(default_factory=dict)
    resolved_issue_rate: float = 0.0
    medications_with_most_issues: list[MedicationIssueCount] = Field(default_factory=list)


class SafetyAlert(BaseModel):
    """Alert produced by a knowledge-based medication safety check."""

    type: AlertType
    message: str
    medications: list[str]
    recommended_action: str | None = None
    timestamp: datetime = Field(default_factory=_utcnow)
