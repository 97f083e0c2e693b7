"""Knowledge Repository Service.

In-memory, multi-indexed store of canonical medication records and
treatment guidelines. Populated lazily from the cache, or from the bundled
reference dataset when the cache is empty.

Name lookups resolve in tiers:
1. Exact canonical name (case-insensitive)
2. Exact brand name (case-insensitive)
3. Partial canonical name (substring in either direction)

Partial matches are resolved in insertion order of the medication index,
which follows the order of the cached or seeded collection.
"""

import logging
import threading
from typing import Any

from pydantic import TypeAdapter

from medsafety.core.cache import CacheBackend, get_cache
from medsafety.core.config import settings
from medsafety.schemas.base import PregnancyCategory
from medsafety.schemas.medication import (
    BeersCriteria,
    DosageGuideline,
    InteractionMatch,
    MedicationRecord,
    TreatmentGuideline,
)
from medsafety.services.base import CacheBackedService, normalize_key, partial_match
from medsafety.services.reference_data import (
    REFERENCE_DATASET_VERSION,
    REFERENCE_GUIDELINES,
    REFERENCE_MEDICATIONS,
)

logger = logging.getLogger(__name__)

MEDICATIONS_CACHE_KEY = "medications"
GUIDELINES_CACHE_KEY = "treatment_guidelines"

_medication_list = TypeAdapter(list[MedicationRecord])
_guideline_list = TypeAdapter(list[TreatmentGuideline])


class KnowledgeRepository(CacheBackedService):
    """Read-only lookup of medication and guideline facts."""

    def __init__(self, cache: CacheBackend | None = None) -> None:
        super().__init__(cache or get_cache())
        # Primary indices
        self._medications: dict[str, MedicationRecord] = {}
        self._guidelines: dict[str, TreatmentGuideline] = {}
        # Secondary indices (normalized key -> primary id)
        self._name_index: dict[str, str] = {}
        self._brand_index: dict[str, str] = {}
        self._rxnorm_index: dict[str, str] = {}
        self._condition_index: dict[str, str] = {}
        self._icd10_index: dict[str, str] = {}
        self.seeded_from_reference = False

    # ========================================================================
    # Loading
    # ========================================================================

    async def _load(self) -> None:
        cached_medications = await self._cache.get(MEDICATIONS_CACHE_KEY)
        cached_guidelines = await self._cache.get(GUIDELINES_CACHE_KEY)

        if cached_medications is not None and cached_guidelines is not None:
            self._build_indices(
                _medication_list.validate_python(cached_medications),
                _guideline_list.validate_python(cached_guidelines),
            )
            self.seeded_from_reference = False
            logger.info(
                f"Knowledge repository initialized from cache with {len(self._medications)} medications "
                f"and {len(self._guidelines)} guidelines"
            )
            return

        self._build_indices(list(REFERENCE_MEDICATIONS), list(REFERENCE_GUIDELINES))
        self.seeded_from_reference = True
        logger.info(
            f"Knowledge repository seeded from reference dataset {REFERENCE_DATASET_VERSION} "
            f"({len(self._medications)} medications, {len(self._guidelines)} guidelines)"
        )

        ttl = settings.cache_ttl_seconds
        await self._persist(
            MEDICATIONS_CACHE_KEY,
            [m.model_dump(mode="json") for m in self._medications.values()],
            ttl,
        )
        await self._persist(
            GUIDELINES_CACHE_KEY,
            [g.model_dump(mode="json") for g in self._guidelines.values()],
            ttl,
        )

    def _build_indices(
        self,
        medications: list[MedicationRecord],
        guidelines: list[TreatmentGuideline],
    ) -> None:
        self._medications.clear()
        self._guidelines.clear()
        self._name_index.clear()
        self._brand_index.clear()
        self._rxnorm_index.clear()
        self._condition_index.clear()
        self._icd10_index.clear()

        for med in medications:
            self._medications[med.id] = med
            # First record wins on duplicate keys, matching iteration order
            self._name_index.setdefault(normalize_key(med.name), med.id)
            for brand in med.brand_names:
                self._brand_index.setdefault(normalize_key(brand), med.id)
            if med.rx_norm_code:
                self._rxnorm_index.setdefault(med.rx_norm_code.strip(), med.id)

        for guideline in guidelines:
            self._guidelines[guideline.id] = guideline
            self._condition_index.setdefault(normalize_key(guideline.condition), guideline.id)
            for code in guideline.icd10_codes:
                self._icd10_index.setdefault(code.strip().upper(), guideline.id)

    # ========================================================================
    # Lookups
    # ========================================================================

    async def get_medication(self, medication_id: str) -> MedicationRecord | None:
        """Get a medication by its repository id."""
        await self.initialize()
        return self._medications.get(medication_id)

    async def get_medication_by_name(self, name: str) -> MedicationRecord | None:
        """Resolve a medication by canonical name, brand name or partial name.

        Args:
            name: Name as typed by a user or returned by another system.

        Returns:
            The first record found under the tiered resolution, or None.
        """
        await self.initialize()
        return self._resolve_medication(name)

    def _resolve_medication(self, name: str) -> MedicationRecord | None:
        key = normalize_key(name)
        if not key:
            return None

        med_id = self._name_index.get(key) or self._brand_index.get(key)
        if med_id is not None:
            return self._medications[med_id]

        for med in self._medications.values():
            if partial_match(med.name, key):
                return med
        return None

    async def get_medication_by_rxnorm(self, code: str) -> MedicationRecord | None:
        """Get a medication by RxNorm code."""
        await self.initialize()
        med_id = self._rxnorm_index.get(code.strip())
        if med_id is None:
            return None
        return self._medications.get(med_id)

    async def get_guidelines_for_condition(self, condition: str) -> TreatmentGuideline | None:
        """Get the treatment guideline for a condition (exact, then partial)."""
        await self.initialize()
        key = normalize_key(condition)
        if not key:
            return None

        guideline_id = self._condition_index.get(key)
        if guideline_id is not None:
            return self._guidelines[guideline_id]

        for guideline in self._guidelines.values():
            if partial_match(guideline.condition, key):
                return guideline
        return None

    async def get_guidelines_by_icd10(self, code: str) -> TreatmentGuideline | None:
        """Get the treatment guideline listing an ICD-10 code."""
        await self.initialize()
        guideline_id = self._icd10_index.get(code.strip().upper())
        if guideline_id is None:
            return None
        return self._guidelines.get(guideline_id)

    # ========================================================================
    # Clinical facts
    # ========================================================================

    async def check_beers_criteria(self, name: str) -> BeersCriteria | None:
        """Beers Criteria fact for a medication, None if unknown or not assessed."""
        medication = await self.get_medication_by_name(name)
        if medication is None:
            return None
        return medication.beers_criteria

    async def check_pregnancy_category(self, name: str) -> PregnancyCategory | None:
        """Pregnancy category letter for a medication, None if unknown or unrated."""
        medication = await self.get_medication_by_name(name)
        if medication is None:
            return None
        return medication.pregnancy_category

    async def check_interactions(self, medication_name: str, candidates: list[str]) -> list[InteractionMatch]:
        """Find registered interactions between a medication and candidate drugs.

        A candidate matches an interaction entry when either string contains
        the other (case-insensitive). Candidates that resolve to a known
        medication are also matched through their canonical name, generic
        name, classification and drug classes, so class-level entries such
        as "NSAIDs" catch "Ibuprofen".

        Args:
            medication_name: Base medication.
            candidates: Other drugs the patient takes or is being prescribed.

        Returns:
            One InteractionMatch per (interaction entry, candidate) pair.
            Empty when the base medication is unknown or has no interactions.
        """
        medication = await self.get_medication_by_name(medication_name)
        if medication is None or not medication.interactions:
            return []

        matches: list[InteractionMatch] = []
        for interaction in medication.interactions:
            for candidate in candidates:
                terms = self._candidate_terms(candidate)
                if any(partial_match(interaction.medication, term) for term in terms):
                    matches.append(
                        InteractionMatch(
                            interacting_drug=candidate,
                            counterpart=interaction.medication,
                            severity=interaction.severity,
                            description=interaction.description,
                        )
                    )
        return matches

    def _candidate_terms(self, candidate: str) -> list[str]:
        terms = [candidate]
        resolved = self._resolve_medication(candidate)
        if resolved is not None:
            terms.extend([resolved.name, resolved.generic_name])
            if resolved.classification:
                terms.append(resolved.classification)
            terms.extend(resolved.drug_classes)
        return terms

    async def get_dosage_guidelines(
        self,
        name: str,
        age: float | None = None,
        weight_kg: float | None = None,
        condition: str | None = None,
    ) -> list[DosageGuideline] | None:
        """Dosage guidelines applicable to a patient.

        A guideline applies when each constraint it declares is satisfied
        by the corresponding argument; constraints whose argument is None
        are not applied. Weight bands only filter guidelines that declare one.

        Returns:
            The applicable guidelines (possibly empty), or None if the
            medication is unknown.
        """
        medication = await self.get_medication_by_name(name)
        if medication is None:
            return None

        condition_key = normalize_key(condition) if condition else None
        applicable = []
        for guideline in medication.dosage_guidelines:
            if age is not None and guideline.age_group is not None and not guideline.age_group.contains(age):
                continue
            if (
                condition_key is not None
                and guideline.condition is not None
                and normalize_key(guideline.condition) != condition_key
            ):
                continue
            if weight_kg is not None and guideline.weight_range is not None and not guideline.weight_range.contains(weight_kg):
                continue
            applicable.append(guideline)
        return applicable

    # ========================================================================
    # Browsing
    # ========================================================================

    async def list_medications(self) -> list[MedicationRecord]:
        await self.initialize()
        return list(self._medications.values())

    async def list_guidelines(self) -> list[TreatmentGuideline]:
        await self.initialize()
        return list(self._guidelines.values())

    async def search_medications(self, query: str, limit: int = 10) -> list[MedicationRecord]:
        """Search medications by name, generic name, brand or drug class."""
        await self.initialize()
        key = normalize_key(query)
        if not key:
            return []

        matches = []
        for med in self._medications.values():
            fields = [med.name, med.generic_name, med.classification, *med.brand_names, *med.drug_classes]
            if any(key in normalize_key(f) for f in fields if f):
                matches.append(med)
        return matches[:limit]

    async def get_stats(self) -> dict[str, Any]:
        """Get statistics about the loaded reference data."""
        await self.initialize()
        by_pregnancy: dict[str, int] = {}
        beers_flagged = 0
        for med in self._medications.values():
            if med.pregnancy_category is not None:
                letter = med.pregnancy_category.value
                by_pregnancy[letter] = by_pregnancy.get(letter, 0) + 1
            if med.beers_criteria is not None and med.beers_criteria.is_inappropriate:
                beers_flagged += 1

        return {
            "total_medications": len(self._medications),
            "total_guidelines": len(self._guidelines),
            "rxnorm_codes": len(self._rxnorm_index),
            "icd10_codes": len(self._icd10_index),
            "beers_inappropriate": beers_flagged,
            "by_pregnancy_category": by_pregnancy,
            "seeded_from_reference": self.seeded_from_reference,
        }


# Singleton instance and lock for thread safety
_knowledge_repository: KnowledgeRepository | None = None
_knowledge_repository_lock = threading.Lock()


def get_knowledge_repository() -> KnowledgeRepository:
    """Get the singleton KnowledgeRepository instance."""
    global _knowledge_repository
    if _knowledge_repository is None:
        with _knowledge_repository_lock:
            if _knowledge_repository is None:
                logger.info("Creating singleton KnowledgeRepository instance")
                _knowledge_repository = KnowledgeRepository()
    return _knowledge_repository


def reset_knowledge_repository() -> None:
    """Reset the singleton instance (for testing)."""
    global _knowledge_repository
    with _knowledge_repository_lock:
        _knowledge_repository = None
