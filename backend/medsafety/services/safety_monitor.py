"""Medication Safety Monitor Service.

Tracks reported medication safety issues and per-medication usage
statistics, and evaluates candidate prescriptions against a patient's
safety history.

Both collections are held in memory and written through to the cache
after every mutation. The in-memory state is authoritative: a failed
cache write is logged and the mutation stands until the next successful
write.

Note: This is a clinical decision support tool and should not replace
clinical judgment.
"""

from collections import Counter
from datetime import UTC, datetime
import logging
import threading
from uuid import uuid4

from pydantic import TypeAdapter

from medsafety.core.audit import AuditAction, log_audit, log_safety_decision
from medsafety.core.cache import CacheBackend, get_cache
from medsafety.core.config import settings
from medsafety.schemas.base import (
    AlertType,
    InteractionSeverity,
    IssueSeverity,
    IssueStatus,
    PregnancyCategory,
    PrescriptionStatus,
    SafetyIssueType,
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
from medsafety.services.base import CacheBackedService, normalize_key, partial_match
from medsafety.services.knowledge_repository import KnowledgeRepository, get_knowledge_repository

logger = logging.getLogger(__name__)

SAFETY_ISSUES_CACHE_KEY = "safety_issues"
MEDICATION_STATS_CACHE_KEY = "medication_stats"

# Prior issues at or above this severity make a prescription unsafe
WARNING_SEVERITY = IssueSeverity.MODERATE
SERIOUS_SEVERITIES = {IssueSeverity.SEVERE, IssueSeverity.LIFE_THREATENING}
ADVERSE_ISSUE_TYPES = {SafetyIssueType.ADVERSE_REACTION, SafetyIssueType.SIDE_EFFECT}
FREQUENCY_LIST_LIMIT = 10

_issue_list = TypeAdapter(list[SafetyIssue])
_stat_list = TypeAdapter(list[MedicationStatistic])


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _percentage(count: int, total: int) -> float:
    return count / total * 100 if total > 0 else 0.0


def _as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class SafetyMonitor(CacheBackedService):
    """Service for tracking safety issues and evaluating prescriptions."""

    def __init__(
        self,
        cache: CacheBackend | None = None,
        repository: KnowledgeRepository | None = None,
    ) -> None:
        super().__init__(cache or get_cache())
        self._repository = repository or get_knowledge_repository()
        self._safety_issues: dict[str, SafetyIssue] = {}
        self._medication_stats: dict[str, MedicationStatistic] = {}

    @property
    def repository(self) -> KnowledgeRepository:
        return self._repository

    # ========================================================================
    # Loading and persistence
    # ========================================================================

    async def _load(self) -> None:
        await self._repository.initialize()

        cached_issues = await self._cache.get(SAFETY_ISSUES_CACHE_KEY)
        cached_stats = await self._cache.get(MEDICATION_STATS_CACHE_KEY)

        self._safety_issues.clear()
        for issue in _issue_list.validate_python(cached_issues or []):
            self._safety_issues[issue.id] = issue

        self._medication_stats.clear()
        for stat in _stat_list.validate_python(cached_stats or []):
            self._medication_stats[normalize_key(stat.medication_name)] = stat

        if cached_issues is None or cached_stats is None:
            # No persistent store behind the cache yet; start from what was found
            await self._persist_safety_issues()
            await self._persist_medication_stats()

        logger.info(
            f"Safety monitor initialized with {len(self._safety_issues)} safety issues "
            f"and {len(self._medication_stats)} medication statistics"
        )

    async def _persist_safety_issues(self) -> bool:
        issues = [issue.model_dump(mode="json") for issue in self._safety_issues.values()]
        persisted = await self._persist(SAFETY_ISSUES_CACHE_KEY, issues, settings.cache_ttl_seconds)
        if persisted:
            logger.debug(f"Persisted {len(issues)} safety issues to cache")
        return persisted

    async def _persist_medication_stats(self) -> bool:
        stats = [stat.model_dump(mode="json") for stat in self._medication_stats.values()]
        persisted = await self._persist(MEDICATION_STATS_CACHE_KEY, stats, settings.cache_ttl_seconds)
        if persisted:
            logger.debug(f"Persisted {len(stats)} medication statistics to cache")
        return persisted

    # ========================================================================
    # Safety issues
    # ========================================================================

    async def report_safety_issue(self, report: SafetyIssueCreate) -> SafetyIssue:
        """Record a new medication safety issue.

        Args:
            report: Issue details supplied by the reporter.

        Returns:
            The stored issue with generated id, report date and REPORTED status.
        """
        await self.initialize()

        issue = SafetyIssue(
            id=str(uuid4()),
            report_date=_utcnow(),
            status=IssueStatus.REPORTED,
            related_prescription_ids=[],
            **report.model_dump(),
        )
        self._safety_issues[issue.id] = issue
        self._record_issue_in_stats(issue)

        await self._persist_safety_issues()
        await self._persist_medication_stats()

        log_audit(
            action=AuditAction.REPORT,
            resource_type="safety_issue",
            resource_id=issue.id,
            patient_id=issue.patient_id,
            details={
                "issue_type": issue.issue_type.value,
                "severity": issue.severity.value,
                "medications": issue.medications,
            },
        )
        self._alert_on_serious_issue(issue)
        return issue

    async def update_issue_status(
        self,
        issue_id: str,
        status: IssueStatus,
        resolution: str | None = None,
    ) -> SafetyIssue | None:
        """Move a safety issue to a new status.

        RESOLVED stamps the resolved date and stores the resolution text
        (left unset if none is given). Any other status clears both.

        Returns:
            The updated issue, or None if no issue has this id.
        """
        await self.initialize()

        issue = self._safety_issues.get(issue_id)
        if issue is None:
            return None

        previous = issue.status
        issue.status = status
        if status is IssueStatus.RESOLVED:
            issue.resolved_date = _utcnow()
            issue.resolution = resolution
        else:
            issue.resolved_date = None
            issue.resolution = None

        await self._persist_safety_issues()

        log_audit(
            action=AuditAction.UPDATE,
            resource_type="safety_issue",
            resource_id=issue.id,
            patient_id=issue.patient_id,
            details={"from": previous.value, "to": status.value},
        )
        return issue

    async def get_safety_issue(self, issue_id: str) -> SafetyIssue | None:
        await self.initialize()
        return self._safety_issues.get(issue_id)

    async def get_patient_safety_issues(self, patient_id: str) -> list[SafetyIssue]:
        """All issues reported for a patient, newest first."""
        await self.initialize()
        return self._newest_first(i for i in self._safety_issues.values() if i.patient_id == patient_id)

    async def get_medication_safety_issues(self, medication_name: str) -> list[SafetyIssue]:
        """All issues implicating a medication (partial name match), newest first."""
        await self.initialize()
        return self._newest_first(
            i for i in self._safety_issues.values() if self._implicates(i, medication_name)
        )

    @staticmethod
    def _implicates(issue: SafetyIssue, medication_name: str) -> bool:
        return any(partial_match(med, medication_name) for med in issue.medications)

    @staticmethod
    def _newest_first(issues) -> list[SafetyIssue]:
        return sorted(issues, key=lambda i: i.report_date, reverse=True)

    def _alert_on_serious_issue(self, issue: SafetyIssue) -> None:
        if issue.severity in SERIOUS_SEVERITIES:
            logger.warning(
                f"Serious medication issue reported: {issue.issue_type.value} - {issue.severity.value} "
                f"(issue={issue.id}, patient={issue.patient_id}, medications={issue.medications}, "
                f"symptoms={issue.symptoms})"
            )

    # ========================================================================
    # Prescription evaluation
    # ========================================================================

    async def evaluate_prescription_safety(
        self,
        prescription_id: str,
        medications: list[str],
        patient_id: str,
    ) -> SafetyEvaluation:
        """Evaluate a candidate prescription against the patient's safety history.

        For each medication:
        - prior non-dismissed issues of this patient at MODERATE or worse add
          a warning, make the prescription unsafe, and are linked to it
        - an adverse event rate above the configured threshold adds a
          warning and makes the prescription unsafe
        - known common side effects add an informational warning

        Args:
            prescription_id: Prescription being evaluated.
            medications: Medication names on the prescription.
            patient_id: Patient the prescription is for.

        Returns:
            SafetyEvaluation with verdict, warnings and related issues.
        """
        await self.initialize()

        evaluation = SafetyEvaluation()
        related_ids: set[str] = set()
        linked_any = False

        patient_issues = [i for i in self._safety_issues.values() if i.patient_id == patient_id]

        for medication in medications:
            for issue in self._newest_first(i for i in patient_issues if self._implicates(i, medication)):
                if issue.status is IssueStatus.DISMISSED or not issue.severity.at_least(WARNING_SEVERITY):
                    continue
                evaluation.warnings.append(
                    f"Previous {issue.issue_type.value} with {medication}: {issue.description}"
                )
                evaluation.is_safe = False
                if issue.id not in related_ids:
                    related_ids.add(issue.id)
                    evaluation.related_issues.append(issue)
                if issue.link_prescription(prescription_id):
                    linked_any = True

            stats = self._medication_stats.get(normalize_key(medication))
            if stats is None:
                continue

            rate = stats.adverse_event_rate
            if rate is not None and rate > settings.adverse_event_rate_threshold:
                evaluation.warnings.append(f"High adverse event rate ({rate:.1f}%) for {medication}")
                evaluation.is_safe = False

            if stats.common_side_effects:
                top = stats.common_side_effects[:FREQUENCY_LIST_LIMIT]
                symptoms = ", ".join(se.symptom for se in top)
                evaluation.warnings.append(f"Common side effects of {medication}: {symptoms}")

        if linked_any:
            await self._persist_safety_issues()
            for issue in evaluation.related_issues:
                log_audit(
                    action=AuditAction.LINK,
                    resource_type="safety_issue",
                    resource_id=issue.id,
                    patient_id=patient_id,
                    details={"prescription_id": prescription_id},
                )

        log_safety_decision(
            prescription_id=prescription_id,
            patient_id=patient_id,
            is_safe=evaluation.is_safe,
            warning_count=len(evaluation.warnings),
            related_issue_ids=[i.id for i in evaluation.related_issues],
        )
        return evaluation

    async def check_medication_safety(
        self,
        medications: list[str],
        conditions: list[str] | None = None,
        allergies: list[str] | None = None,
        age: float | None = None,
        pregnant: bool = False,
    ) -> list[SafetyAlert]:
        """Check a medication list against reference knowledge.

        Raises alerts for high-severity interactions within the list,
        allergies matching a medication name or drug class, contraindicated
        conditions, Beers Criteria for patients 65 and older, and pregnancy
        categories D and X.
        """
        await self.initialize()
        repo = self._repository
        alerts: list[SafetyAlert] = []

        for index, medication in enumerate(medications):
            others = medications[index + 1:]
            for match in await repo.check_interactions(medication, others):
                if match.severity is InteractionSeverity.HIGH:
                    alerts.append(
                        SafetyAlert(
                            type=AlertType.HIGH_RISK_INTERACTION,
                            message=f"Potential high interaction between {medication} and "
                            f"{match.interacting_drug}: {match.description or match.counterpart}",
                            medications=[medication, match.interacting_drug],
                            recommended_action="Avoid combination. Consider alternative medication.",
                        )
                    )

            record = await repo.get_medication_by_name(medication)
            if record is None:
                continue

            for allergy in allergies or []:
                names = [record.name, record.generic_name, *record.drug_classes]
                if any(partial_match(allergy, name) for name in names):
                    alerts.append(
                        SafetyAlert(
                            type=AlertType.ALLERGY_DETECTED,
                            message=f"Patient has a documented allergy to {allergy}, which may affect {record.name}",
                            medications=[medication],
                            recommended_action="Consider alternative medication. Verify whether this is a "
                            "true allergy or an intolerance.",
                        )
                    )
                    break

            for condition in conditions or []:
                for contraindication in record.contraindications:
                    if partial_match(condition, contraindication):
                        alerts.append(
                            SafetyAlert(
                                type=AlertType.CONTRAINDICATION,
                                message=f"{record.name} is contraindicated for patients with {condition}",
                                medications=[medication],
                                recommended_action="Consider alternative medication.",
                            )
                        )
                        break

            if age is not None and age >= 65 and record.beers_criteria and record.beers_criteria.is_inappropriate:
                alerts.append(
                    SafetyAlert(
                        type=AlertType.BEERS_CRITERIA,
                        message=f"{record.name} is potentially inappropriate for older adults: "
                        f"{record.beers_criteria.rationale or 'Beers Criteria'}",
                        medications=[medication],
                        recommended_action=record.beers_criteria.recommendation,
                    )
                )

            if pregnant and record.pregnancy_category in (PregnancyCategory.D, PregnancyCategory.X):
                alerts.append(
                    SafetyAlert(
                        type=AlertType.PREGNANCY_RISK,
                        message=f"{record.name} is pregnancy category {record.pregnancy_category.value}",
                        medications=[medication],
                        recommended_action="Avoid in pregnancy unless benefit clearly outweighs fetal risk.",
                    )
                )

        for alert in alerts:
            logger.warning(f"MEDICATION SAFETY ALERT: {alert.type.value} - {alert.message}")
        return alerts

    # ========================================================================
    # Statistics
    # ========================================================================

    async def record_prescription_fulfilled(self, medications: list[str], patient_id: str) -> None:
        """Count a fulfilled prescription towards each medication's statistic."""
        await self.initialize()

        now = _utcnow()
        for medication in medications:
            stats = self._get_or_create_stats(medication)
            stats.total_prescriptions += 1
            self._refresh_frequencies(stats)
            stats.last_updated = now

        await self._persist_medication_stats()
        log_audit(
            action=AuditAction.FULFILL,
            resource_type="prescription",
            patient_id=patient_id,
            details={"medications": medications},
        )
        logger.info(f"Recorded prescription fulfillment for patient {patient_id}")

    async def get_medication_stats(self, medication_name: str) -> MedicationStatistic | None:
        """Statistic for a medication by name, None if never recorded.

        Returns a copy with the side effect and interaction lists cut to
        the most frequent entries.
        """
        await self.initialize()
        stats = self._medication_stats.get(normalize_key(medication_name))
        if stats is None:
            return None
        view = stats.model_copy(deep=True)
        view.common_side_effects = view.common_side_effects[:FREQUENCY_LIST_LIMIT]
        view.interaction_frequency = view.interaction_frequency[:FREQUENCY_LIST_LIMIT]
        return view

    def _get_or_create_stats(self, medication: str) -> MedicationStatistic:
        key = normalize_key(medication)
        stats = self._medication_stats.get(key)
        if stats is None:
            stats = MedicationStatistic(medication_name=medication.strip())
            self._medication_stats[key] = stats
        return stats

    def _record_issue_in_stats(self, issue: SafetyIssue) -> None:
        """Fold a newly reported issue into the implicated medications' tallies."""
        seen: set[str] = set()
        for medication in issue.medications:
            key = normalize_key(medication)
            if key in seen:
                continue
            seen.add(key)
            stats = self._get_or_create_stats(medication)

            if issue.issue_type in ADVERSE_ISSUE_TYPES:
                stats.adverse_events += 1
                side_effects = {normalize_key(se.symptom): se for se in stats.common_side_effects}
                for symptom in dict.fromkeys(s.strip() for s in issue.symptoms if s.strip()):
                    entry = side_effects.get(normalize_key(symptom))
                    if entry is None:
                        entry = SideEffectFrequency(symptom=symptom)
                        side_effects[normalize_key(symptom)] = entry
                    entry.count += 1
                stats.common_side_effects = list(side_effects.values())

            if issue.issue_type is SafetyIssueType.INTERACTION:
                frequencies = {normalize_key(f.interacting_medication): f for f in stats.interaction_frequency}
                for other in issue.medications:
                    other_key = normalize_key(other)
                    if other_key == key:
                        continue
                    entry = frequencies.get(other_key)
                    if entry is None:
                        entry = InteractionFrequency(interacting_medication=other.strip())
                        frequencies[other_key] = entry
                    entry.count += 1
                stats.interaction_frequency = list(frequencies.values())

            self._refresh_frequencies(stats)
            stats.last_updated = _utcnow()

    @staticmethod
    def _refresh_frequencies(stats: MedicationStatistic) -> None:
        """Recompute percentages against the current prescription total.

        Tallies are kept complete and ordered by count, most first; ties
        keep first-reported order. Only readers cut them down.
        """
        total = stats.total_prescriptions
        for se in stats.common_side_effects:
            se.percentage_of_users = _percentage(se.count, total)
        for freq in stats.interaction_frequency:
            freq.percentage_of_users = _percentage(freq.count, total)
        stats.common_side_effects.sort(key=lambda se: se.count, reverse=True)
        stats.interaction_frequency.sort(key=lambda f: f.count, reverse=True)

    async def track_prescription_safety(
        self,
        suggestions: list[PrescriptionSuggestion],
        patient_id: str,
        diagnosis_id: str,
    ) -> PrescriptionSafetyTally:
        """Tally AI prescription suggestions by review outcome.

        Suggestions still PENDING count towards review.
        """
        tally = PrescriptionSafetyTally()
        for suggestion in suggestions:
            if suggestion.status is PrescriptionStatus.APPROVED:
                tally.safe_count += 1
            elif suggestion.status is PrescriptionStatus.REJECTED:
                tally.rejected_count += 1
            else:
                tally.review_count += 1

        safe_rate = tally.safe_count / tally.total if tally.total else 0.0
        logger.info(
            f"AI prescription performance: {tally.safe_count} safe, {tally.review_count} need review, "
            f"{tally.rejected_count} rejected (diagnosis={diagnosis_id}, safe_rate={safe_rate:.2f})"
        )
        log_audit(
            action=AuditAction.TRACK,
            resource_type="diagnosis",
            resource_id=diagnosis_id,
            patient_id=patient_id,
            details=tally.model_dump(),
        )
        return tally

    async def generate_safety_statistics(self, start_date: datetime, end_date: datetime) -> SafetyStatistics:
        """Aggregate safety issues reported within ``[start_date, end_date]``.

        Medications are ranked by the number of issues implicating them,
        most first; ties keep the order in which medications were first seen.
        """
        await self.initialize()
        start_date = _as_utc(start_date)
        end_date = _as_utc(end_date)

        issues = [i for i in self._safety_issues.values() if start_date <= i.report_date <= end_date]

        by_type = dict.fromkeys(SafetyIssueType, 0)
        by_severity = dict.fromkeys(IssueSeverity, 0)
        medication_counts: Counter[str] = Counter()
        display_names: dict[str, str] = {}
        resolved = 0

        for issue in issues:
            by_type[issue.issue_type] += 1
            by_severity[issue.severity] += 1
            if issue.status is IssueStatus.RESOLVED:
                resolved += 1
            for medication in dict.fromkeys(normalize_key(m) for m in issue.medications):
                medication_counts[medication] += 1
            for name in issue.medications:
                display_names.setdefault(normalize_key(name), name.strip())

        ranked = sorted(medication_counts.items(), key=lambda item: item[1], reverse=True)
        return SafetyStatistics(
            start_date=start_date,
            end_date=end_date,
            total_issues=len(issues),
            issues_by_type=by_type,
            issues_by_severity=by_severity,
            resolved_issue_rate=_percentage(resolved, len(issues)),
            medications_with_most_issues=[
                MedicationIssueCount(medication=display_names[key], count=count)
                for key, count in ranked[: settings.top_medications_limit]
            ],
        )


# Singleton instance and lock for thread safety
_safety_monitor: SafetyMonitor | None = None
_safety_monitor_lock = threading.Lock()


def get_safety_monitor() -> SafetyMonitor:
    """Get the singleton SafetyMonitor instance."""
    global _safety_monitor
    if _safety_monitor is None:
        with _safety_monitor_lock:
            if _safety_monitor is None:
                logger.info("Creating singleton SafetyMonitor instance")
                _safety_monitor = SafetyMonitor()
    return _safety_monitor


def reset_safety_monitor() -> None:
    """Reset the singleton instance (for testing)."""
    global _safety_monitor
    with _safety_monitor_lock:
        _safety_monitor = None
