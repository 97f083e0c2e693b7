"""Tests for engine schemas."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from medsafety.schemas import (
    AgeGroup,
    BeersCriteria,
    IssueSeverity,
    IssueStatus,
    MedicationRecord,
    MedicationStatistic,
    PrescriptionSafetyTally,
    SafetyIssue,
    SafetyIssueCreate,
    SafetyIssueType,
    WeightRange,
)


class TestEnums:
    """Test enum helpers."""

    def test_severity_ordering(self) -> None:
        assert IssueSeverity.SEVERE.at_least(IssueSeverity.MODERATE)
        assert IssueSeverity.MODERATE.at_least(IssueSeverity.MODERATE)
        assert not IssueSeverity.MILD.at_least(IssueSeverity.MODERATE)
        assert IssueSeverity.LIFE_THREATENING.rank == 3

    @pytest.mark.parametrize(
        "group,age,expected",
        [
            (AgeGroup.PEDIATRIC, 8, True),
            (AgeGroup.PEDIATRIC, 18, False),
            (AgeGroup.ADULT, 18, True),
            (AgeGroup.ADULT, 70, True),
            (AgeGroup.GERIATRIC, 64.9, False),
            (AgeGroup.GERIATRIC, 65, True),
        ],
    )
    def test_age_group_contains(self, group: AgeGroup, age: float, expected: bool) -> None:
        assert group.contains(age) is expected

    def test_weight_range_inclusive(self) -> None:
        band = WeightRange(min_kg=10, max_kg=20)
        assert band.contains(10)
        assert band.contains(20)
        assert not band.contains(9.9)
        assert not band.contains(20.1)
        assert WeightRange(min_kg=40).contains(200)


class TestMedicationSchemas:
    """Test reference record schemas."""

    def test_records_are_frozen(self) -> None:
        beers = BeersCriteria(is_inappropriate=True)
        with pytest.raises(ValidationError):
            beers.is_inappropriate = False

    def test_record_collections_are_immutable(self) -> None:
        record = MedicationRecord(id="1", name="Ibuprofen", generic_name="ibuprofen", brand_names=["Advil"])

        assert record.brand_names == ("Advil",)
        with pytest.raises(AttributeError):
            record.brand_names.append("Motrin")

    def test_record_collections_dump_as_lists(self) -> None:
        record = MedicationRecord(id="1", name="Ibuprofen", generic_name="ibuprofen", drug_classes=["NSAID"])

        assert record.model_dump(mode="json")["drug_classes"] == ["NSAID"]


class TestSafetySchemas:
    """Test safety issue and statistic schemas."""

    def test_issue_create_requires_medication(self) -> None:
        with pytest.raises(ValidationError):
            SafetyIssueCreate(
                patient_id="P001",
                medications=[],
                issue_type=SafetyIssueType.SIDE_EFFECT,
                severity=IssueSeverity.MILD,
                description="Nausea",
            )

    def test_issue_defaults(self) -> None:
        issue = SafetyIssue(
            id="issue-1",
            patient_id="P001",
            medications=["Aspirin"],
            issue_type=SafetyIssueType.ADVERSE_REACTION,
            severity=IssueSeverity.SEVERE,
            description="GI bleed",
        )
        assert issue.status == IssueStatus.REPORTED
        assert issue.resolution is None
        assert issue.resolved_date is None
        assert issue.related_prescription_ids == []

    def test_link_prescription_deduplicates(self) -> None:
        issue = SafetyIssue(
            id="issue-1",
            patient_id="P001",
            medications=["Aspirin"],
            issue_type=SafetyIssueType.ADVERSE_REACTION,
            severity=IssueSeverity.SEVERE,
            description="GI bleed",
        )
        assert issue.link_prescription("rx1") is True
        assert issue.link_prescription("rx1") is False
        assert issue.related_prescription_ids == ["rx1"]

    def test_issue_json_round_trip(self) -> None:
        issue = SafetyIssue(
            id="issue-1",
            patient_id="P001",
            medications=["Aspirin"],
            issue_type=SafetyIssueType.INTERACTION,
            severity=IssueSeverity.MODERATE,
            description="Bruising",
            report_date=datetime(2024, 3, 1, tzinfo=UTC),
        )
        restored = SafetyIssue.model_validate(issue.model_dump(mode="json"))
        assert restored == issue

    def test_adverse_event_rate(self) -> None:
        stat = MedicationStatistic(medication_name="Aspirin", total_prescriptions=100, adverse_events=12)
        assert stat.adverse_event_rate == pytest.approx(12.0)

    def test_adverse_event_rate_without_prescriptions(self) -> None:
        stat = MedicationStatistic(medication_name="Aspirin", adverse_events=3)
        assert stat.adverse_event_rate is None

    def test_negative_total_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MedicationStatistic(medication_name="Aspirin", total_prescriptions=-1)

    def test_tally_total(self) -> None:
        tally = PrescriptionSafetyTally(safe_count=2, review_count=1, rejected_count=1)
        assert tally.total == 4
