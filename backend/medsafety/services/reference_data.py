"""Bundled reference dataset used to seed the Knowledge Repository.

Consumed only when the cache holds no medication or guideline
collections. Bump REFERENCE_DATASET_VERSION whenever records change so
operators can tell which seed a cache was populated from.

Note: Demo data for decision support development. Always consult current
prescribing information.
"""

from datetime import UTC, datetime

from medsafety.schemas.base import (
    AgeGroup,
    EvidenceLevel,
    InteractionEvidence,
    InteractionSeverity,
    PregnancyCategory,
    SpecialPopulation,
)
from medsafety.schemas.medication import (
    BeersCriteria,
    DosageGuideline,
    Interaction,
    MedicationRecord,
    OrganDosing,
    PediatricUse,
    PopulationGuidance,
    TreatmentGuideline,
    TreatmentOption,
    WeightRange,
)

REFERENCE_DATASET_VERSION = "2024.1"
REFERENCE_DATASET_DATE = datetime(2024, 1, 15, tzinfo=UTC)


# ============================================================================
# Medications
# ============================================================================

REFERENCE_MEDICATIONS: list[MedicationRecord] = [
    MedicationRecord(
        id="1",
        name="Lisinopril",
        generic_name="lisinopril",
        brand_names=["Prinivil", "Zestril"],
        classification="ACE Inhibitor",
        drug_classes=["Antihypertensive", "ACE Inhibitor"],
        rx_norm_code="29046",
        atc_code="C09AA03",
        forms=["Tablet", "Solution"],
        strengths=["5 mg", "10 mg", "20 mg", "40 mg"],
        indications=["Hypertension", "Heart Failure", "Post-Myocardial Infarction"],
        contraindications=["Pregnancy", "History of angioedema", "Bilateral renal artery stenosis"],
        warnings=["May cause cough", "May increase potassium levels", "Risk of hypotension"],
        side_effects=["Cough", "Dizziness", "Headache", "Fatigue", "Hyperkalemia"],
        interactions=[
            Interaction(
                medication="Spironolactone",
                severity=InteractionSeverity.MODERATE,
                description="May increase risk of hyperkalemia",
                evidence_level=InteractionEvidence.STRONG,
            ),
            Interaction(
                medication="NSAIDs",
                severity=InteractionSeverity.MODERATE,
                description="May reduce antihypertensive effect",
                evidence_level=InteractionEvidence.STRONG,
            ),
            Interaction(
                medication="Lithium",
                severity=InteractionSeverity.MODERATE,
                description="May increase lithium levels",
                evidence_level=InteractionEvidence.MODERATE,
            ),
        ],
        dosage_guidelines=[
            DosageGuideline(
                condition="Hypertension",
                route="Oral",
                dosage="10 mg",
                frequency="Once daily",
                max_daily_dose="40 mg",
                notes="Start with 5 mg in patients on diuretics",
            ),
            DosageGuideline(
                condition="Heart Failure",
                route="Oral",
                dosage="5 mg",
                frequency="Once daily",
                max_daily_dose="40 mg",
                notes="Titrate up to target dose as tolerated",
            ),
        ],
        pregnancy_category=PregnancyCategory.D,
        beers_criteria=BeersCriteria(is_inappropriate=False),
        renal_dosing=OrganDosing(
            requires_adjustment=True,
            guidelines="For CrCl < 30 mL/min, start with 5 mg daily",
        ),
        hepatic_dosing=OrganDosing(requires_adjustment=False),
        references=["American Heart Association Guidelines", "JNC 8 Guidelines for Hypertension"],
        updated_at=REFERENCE_DATASET_DATE,
    ),
    MedicationRecord(
        id="2",
        name="Metformin",
        generic_name="metformin",
        brand_names=["Glucophage", "Fortamet", "Glumetza", "Riomet"],
        classification="Biguanide",
        drug_classes=["Antidiabetic", "Biguanide"],
        rx_norm_code="6809",
        atc_code="A10BA02",
        forms=["Tablet", "Extended-release tablet", "Solution"],
        strengths=["500 mg", "850 mg", "1000 mg"],
        indications=["Type 2 Diabetes Mellitus", "Insulin Resistance", "PCOS"],
        contraindications=[
            "Renal impairment (eGFR < 30 mL/min)",
            "Metabolic acidosis",
            "Severe heart failure",
        ],
        warnings=[
            "Risk of lactic acidosis",
            "Temporarily discontinue in patients undergoing radiologic studies with iodinated contrast",
            "May impair vitamin B12 absorption",
        ],
        side_effects=["Diarrhea", "Nausea", "Abdominal pain", "Metallic taste", "Vitamin B12 deficiency"],
        interactions=[
            Interaction(
                medication="Cimetidine",
                severity=InteractionSeverity.MODERATE,
                description="May increase metformin levels",
                evidence_level=InteractionEvidence.MODERATE,
            ),
            Interaction(
                medication="Furosemide",
                severity=InteractionSeverity.LOW,
                description="May reduce metformin clearance",
                evidence_level=InteractionEvidence.MODERATE,
            ),
            Interaction(
                medication="Contrast media",
                severity=InteractionSeverity.HIGH,
                description="Increases risk of lactic acidosis",
                evidence_level=InteractionEvidence.STRONG,
            ),
        ],
        dosage_guidelines=[
            DosageGuideline(
                condition="Type 2 Diabetes",
                route="Oral",
                dosage="500 mg",
                frequency="Twice daily",
                max_daily_dose="2550 mg",
                notes="Take with meals to reduce GI side effects",
            ),
            DosageGuideline(
                condition="Type 2 Diabetes - Extended Release",
                route="Oral",
                dosage="500-1000 mg",
                frequency="Once daily",
                max_daily_dose="2000 mg",
                notes="Take with evening meal",
            ),
        ],
        pregnancy_category=PregnancyCategory.B,
        beers_criteria=BeersCriteria(is_inappropriate=False),
        renal_dosing=OrganDosing(
            requires_adjustment=True,
            guidelines="Contraindicated if eGFR < 30 mL/min. For eGFR 30-45 mL/min, maximum 1000 mg/day.",
        ),
        hepatic_dosing=OrganDosing(
            requires_adjustment=True,
            guidelines="Avoid in severe hepatic impairment due to increased risk of lactic acidosis",
        ),
        references=["American Diabetes Association Standards of Care", "NICE Guidelines for Type 2 Diabetes"],
        updated_at=REFERENCE_DATASET_DATE,
    ),
    MedicationRecord(
        id="3",
        name="Ibuprofen",
        generic_name="ibuprofen",
        brand_names=["Advil", "Motrin", "Nurofen"],
        classification="NSAID",
        drug_classes=["NSAID", "Anti-inflammatory", "Analgesic", "Antipyretic"],
        rx_norm_code="5640",
        atc_code="M01AE01",
        forms=["Tablet", "Capsule", "Suspension", "Gel"],
        strengths=["200 mg", "400 mg", "600 mg", "800 mg"],
        indications=["Pain", "Inflammation", "Fever", "Arthritis"],
        contraindications=[
            "Active peptic ulcer disease",
            "Severe heart failure",
            "Third trimester of pregnancy",
            "History of NSAID-induced asthma",
        ],
        warnings=[
            "Increased risk of cardiovascular events",
            "Increased risk of GI bleeding",
            "May cause renal impairment",
            "May worsen hypertension",
        ],
        side_effects=["Nausea", "Dyspepsia", "GI bleeding", "Dizziness", "Edema", "Hypertension"],
        interactions=[
            Interaction(
                medication="Aspirin",
                severity=InteractionSeverity.MODERATE,
                description="Increased risk of GI bleeding",
                evidence_level=InteractionEvidence.STRONG,
            ),
            Interaction(
                medication="Warfarin",
                severity=InteractionSeverity.HIGH,
                description="Increased risk of bleeding",
                evidence_level=InteractionEvidence.STRONG,
            ),
            Interaction(
                medication="ACE inhibitors",
                severity=InteractionSeverity.MODERATE,
                description="May reduce antihypertensive effect",
                evidence_level=InteractionEvidence.STRONG,
            ),
            Interaction(
                medication="Lithium",
                severity=InteractionSeverity.MODERATE,
                description="May increase lithium levels",
                evidence_level=InteractionEvidence.MODERATE,
            ),
        ],
        dosage_guidelines=[
            DosageGuideline(
                condition="Pain/Fever",
                route="Oral",
                dosage="200-400 mg",
                frequency="Every 4-6 hours",
                max_daily_dose="1200 mg",
                notes="Take with food to reduce GI side effects",
            ),
            DosageGuideline(
                condition="Arthritis",
                route="Oral",
                dosage="400-800 mg",
                frequency="Three times daily",
                max_daily_dose="3200 mg",
            ),
            DosageGuideline(
                age_group=AgeGroup.PEDIATRIC,
                condition="Pain/Fever",
                route="Oral",
                dosage="5-10 mg/kg",
                frequency="Every 6-8 hours",
                max_daily_dose="40 mg/kg/day",
                notes="Not for children under 6 months",
            ),
        ],
        pediatric_use=PediatricUse(
            is_safe=True,
            minimum_age=0.5,
            dosage_adjustment="Weight-based dosing required",
        ),
        pregnancy_category=PregnancyCategory.C,
        beers_criteria=BeersCriteria(
            is_inappropriate=True,
            rationale="Increased risk of GI bleeding and peptic ulcer disease in older adults",
            recommendation="Avoid chronic use unless other alternatives are not effective",
        ),
        renal_dosing=OrganDosing(
            requires_adjustment=True,
            guidelines="Avoid in severe renal impairment (CrCl < 30 mL/min)",
        ),
        hepatic_dosing=OrganDosing(
            requires_adjustment=True,
            guidelines="Use with caution in hepatic impairment; reduce dosage",
        ),
        references=["FDA prescribing information", "American College of Rheumatology Guidelines"],
        updated_at=REFERENCE_DATASET_DATE,
    ),
    MedicationRecord(
        id="4",
        name="Diphenhydramine",
        generic_name="diphenhydramine",
        brand_names=["Benadryl", "Nytol", "Sominex"],
        classification="Antihistamine",
        drug_classes=["Antihistamine", "Anticholinergic", "Sedative"],
        rx_norm_code="3627",
        atc_code="R06AA02",
        forms=["Tablet", "Capsule", "Liquid", "Injection"],
        strengths=["25 mg", "50 mg"],
        indications=["Allergic reactions", "Insomnia", "Motion sickness", "Cough suppression"],
        contraindications=["Narrow-angle glaucoma", "Prostatic hyperplasia", "Bladder neck obstruction", "Asthma"],
        warnings=[
            "May cause sedation",
            "Anticholinergic effects",
            "May worsen urinary retention",
            "May worsen glaucoma",
        ],
        side_effects=[
            "Drowsiness",
            "Dry mouth",
            "Blurred vision",
            "Constipation",
            "Urinary retention",
            "Confusion (especially in elderly)",
        ],
        interactions=[
            Interaction(
                medication="Alcohol",
                severity=InteractionSeverity.HIGH,
                description="Enhanced CNS depression",
                evidence_level=InteractionEvidence.STRONG,
            ),
            Interaction(
                medication="MAO inhibitors",
                severity=InteractionSeverity.MODERATE,
                description="May prolong and intensify anticholinergic effects",
                evidence_level=InteractionEvidence.MODERATE,
            ),
            Interaction(
                medication="Other anticholinergics",
                severity=InteractionSeverity.MODERATE,
                description="Additive anticholinergic effects",
                evidence_level=InteractionEvidence.STRONG,
            ),
        ],
        dosage_guidelines=[
            DosageGuideline(
                condition="Allergic reactions",
                route="Oral",
                dosage="25-50 mg",
                frequency="Every 4-6 hours",
                max_daily_dose="300 mg",
            ),
            DosageGuideline(
                condition="Insomnia",
                route="Oral",
                dosage="50 mg",
                frequency="At bedtime",
                max_daily_dose="50 mg",
            ),
            DosageGuideline(
                age_group=AgeGroup.PEDIATRIC,
                condition="Allergic reactions",
                weight_range=WeightRange(min_kg=10, max_kg=20),
                route="Oral",
                dosage="12.5-25 mg",
                frequency="Every 4-6 hours",
                max_daily_dose="150 mg",
                notes="Not for children under 2 years",
            ),
        ],
        pediatric_use=PediatricUse(
            is_safe=True,
            minimum_age=2,
            dosage_adjustment="Weight-based dosing required",
            warnings=["May cause paradoxical excitation in young children"],
        ),
        pregnancy_category=PregnancyCategory.B,
        beers_criteria=BeersCriteria(
            is_inappropriate=True,
            rationale="Highly anticholinergic; increased risk of confusion, dry mouth, constipation, "
            "and other anticholinergic effects",
            recommendation="Avoid use in older adults",
        ),
        renal_dosing=OrganDosing(requires_adjustment=True, guidelines="Consider reduced dosage in renal impairment"),
        hepatic_dosing=OrganDosing(requires_adjustment=True, guidelines="Consider reduced dosage in hepatic impairment"),
        references=["FDA prescribing information", "American Geriatrics Society Beers Criteria"],
        updated_at=REFERENCE_DATASET_DATE,
    ),
    MedicationRecord(
        id="5",
        name="Warfarin",
        generic_name="warfarin",
        brand_names=["Coumadin", "Jantoven"],
        classification="Anticoagulant",
        drug_classes=["Anticoagulant", "Vitamin K Antagonist"],
        rx_norm_code="11289",
        atc_code="B01AA03",
        forms=["Tablet"],
        strengths=["1 mg", "2 mg", "2.5 mg", "5 mg", "10 mg"],
        indications=["Atrial Fibrillation", "Deep Vein Thrombosis", "Pulmonary Embolism", "Mechanical heart valve"],
        contraindications=["Active bleeding", "Hemorrhagic stroke", "Pregnancy", "Severe uncontrolled hypertension"],
        warnings=[
            "Can cause major or fatal bleeding",
            "Regular INR monitoring required",
            "Numerous drug and food interactions",
        ],
        side_effects=["Bleeding", "Bruising", "Hematuria"],
        interactions=[
            Interaction(
                medication="NSAIDs",
                severity=InteractionSeverity.HIGH,
                description="Increased risk of bleeding",
                evidence_level=InteractionEvidence.STRONG,
            ),
            Interaction(
                medication="Aspirin",
                severity=InteractionSeverity.HIGH,
                description="Additive antiplatelet effect with major bleeding risk",
                evidence_level=InteractionEvidence.STRONG,
            ),
            Interaction(
                medication="Amiodarone",
                severity=InteractionSeverity.HIGH,
                description="Inhibits warfarin metabolism; INR rises",
                evidence_level=InteractionEvidence.STRONG,
            ),
        ],
        dosage_guidelines=[
            DosageGuideline(
                condition="Atrial Fibrillation",
                route="Oral",
                dosage="2-5 mg",
                frequency="Once daily",
                max_daily_dose="10 mg",
                notes="Adjust to target INR 2-3",
            ),
            DosageGuideline(
                age_group=AgeGroup.GERIATRIC,
                route="Oral",
                dosage="1-2.5 mg",
                frequency="Once daily",
                max_daily_dose="5 mg",
                notes="Increased sensitivity; titrate by INR",
            ),
        ],
        pregnancy_category=PregnancyCategory.X,
        beers_criteria=BeersCriteria(
            is_inappropriate=False,
            rationale="Avoid starting as first-line therapy for atrial fibrillation unless DOACs are contraindicated",
        ),
        renal_dosing=OrganDosing(requires_adjustment=False, guidelines="Monitor INR closely"),
        hepatic_dosing=OrganDosing(requires_adjustment=True, guidelines="Reduced doses, closer monitoring"),
        references=["CHEST Antithrombotic Guidelines", "FDA prescribing information"],
        updated_at=REFERENCE_DATASET_DATE,
    ),
    MedicationRecord(
        id="6",
        name="Aspirin",
        generic_name="acetylsalicylic acid",
        brand_names=["Bayer", "Ecotrin", "Bufferin"],
        classification="Salicylate",
        drug_classes=["Antiplatelet", "NSAID", "Analgesic"],
        rx_norm_code="1191",
        atc_code="B01AC06",
        forms=["Tablet", "Chewable tablet", "Enteric-coated tablet"],
        strengths=["81 mg", "325 mg", "500 mg"],
        indications=["Secondary prevention of cardiovascular events", "Pain", "Fever"],
        contraindications=["Active GI bleeding", "Children with viral illness", "Aspirin-sensitive asthma"],
        warnings=["Increased risk of GI bleeding", "Risk of Reye syndrome in children"],
        side_effects=["Dyspepsia", "Stomach pain", "Nausea", "Bruising"],
        interactions=[
            Interaction(
                medication="Warfarin",
                severity=InteractionSeverity.HIGH,
                description="Additive antiplatelet effect with major bleeding risk",
                evidence_level=InteractionEvidence.STRONG,
            ),
            Interaction(
                medication="Ibuprofen",
                severity=InteractionSeverity.MODERATE,
                description="May interfere with antiplatelet effect of low-dose aspirin",
                evidence_level=InteractionEvidence.MODERATE,
            ),
        ],
        dosage_guidelines=[
            DosageGuideline(
                condition="Secondary prevention of cardiovascular events",
                route="Oral",
                dosage="81 mg",
                frequency="Once daily",
                max_daily_dose="325 mg",
            ),
            DosageGuideline(
                age_group=AgeGroup.ADULT,
                condition="Pain",
                route="Oral",
                dosage="325-650 mg",
                frequency="Every 4-6 hours",
                max_daily_dose="4000 mg",
            ),
        ],
        pediatric_use=PediatricUse(
            is_safe=False,
            minimum_age=18,
            warnings=["Risk of Reye syndrome if given during viral infections"],
        ),
        pregnancy_category=PregnancyCategory.D,
        beers_criteria=BeersCriteria(
            is_inappropriate=True,
            rationale="Primary prevention use in older adults carries bleeding risk exceeding benefit",
            recommendation="Avoid for primary prevention of cardiovascular disease",
        ),
        references=["USPSTF Aspirin Use Recommendation", "American Geriatrics Society Beers Criteria"],
        updated_at=REFERENCE_DATASET_DATE,
    ),
]


# ============================================================================
# Treatment guidelines
# ============================================================================

REFERENCE_GUIDELINES: list[TreatmentGuideline] = [
    TreatmentGuideline(
        id="1",
        condition="Hypertension",
        icd10_codes=["I10", "I11", "I12", "I13"],
        first_line_options=[
            TreatmentOption(
                medications=["Lisinopril", "Hydrochlorothiazide", "Amlodipine", "Losartan"],
                notes="Choice depends on comorbidities and patient characteristics",
            )
        ],
        second_line_options=[
            TreatmentOption(
                medications=["Metoprolol", "Chlorthalidone", "Valsartan", "Diltiazem"],
                notes="Consider if inadequate response to first-line options",
            )
        ],
        special_populations=[
            PopulationGuidance(
                population=SpecialPopulation.PREGNANT,
                recommendations=["Avoid ACE inhibitors and ARBs"],
                medications=["Methyldopa", "Labetalol", "Nifedipine"],
            ),
            PopulationGuidance(
                population=SpecialPopulation.RENAL_IMPAIRMENT,
                recommendations=["Avoid thiazide diuretics if eGFR < 30 mL/min"],
                medications=["Amlodipine", "Hydralazine"],
            ),
        ],
        source="JNC 8 Guidelines",
        last_updated=datetime(2021, 1, 15, tzinfo=UTC),
        evidence_level=EvidenceLevel.HIGH,
    ),
    TreatmentGuideline(
        id="2",
        condition="Type 2 Diabetes Mellitus",
        icd10_codes=["E11"],
        first_line_options=[
            TreatmentOption(
                medications=["Metformin"],
                notes="Start with low dose and titrate up to reduce GI side effects",
            )
        ],
        second_line_options=[
            TreatmentOption(
                medications=["Sulfonylureas", "DPP-4 inhibitors", "SGLT2 inhibitors", "GLP-1 receptor agonists"],
                notes="Add second agent if HbA1c target not achieved after 3 months of metformin",
            )
        ],
        special_populations=[
            PopulationGuidance(
                population=SpecialPopulation.RENAL_IMPAIRMENT,
                recommendations=["Avoid metformin if eGFR < 30 mL/min"],
                medications=["DPP-4 inhibitors", "Insulin"],
            ),
            PopulationGuidance(
                population=SpecialPopulation.GERIATRIC,
                recommendations=["Avoid sulfonylureas due to hypoglycemia risk"],
                medications=["DPP-4 inhibitors", "Metformin"],
            ),
        ],
        source="American Diabetes Association Standards of Care",
        last_updated=datetime(2022, 1, 20, tzinfo=UTC),
        evidence_level=EvidenceLevel.HIGH,
    ),
    TreatmentGuideline(
        id="3",
        condition="Acute Pain",
        icd10_codes=["R52", "G89.0", "G89.1"],
        first_line_options=[
            TreatmentOption(
                medications=["Acetaminophen", "Ibuprofen", "Naproxen"],
                notes="Start with non-opioid analgesics",
            )
        ],
        second_line_options=[
            TreatmentOption(
                medications=["Tramadol", "Codeine", "Hydrocodone", "Oxycodone"],
                notes="Consider weak opioids if inadequate pain relief with non-opioids",
            )
        ],
        special_populations=[
            PopulationGuidance(
                population=SpecialPopulation.GERIATRIC,
                recommendations=["Start with lower doses", "Avoid NSAIDs if possible"],
                medications=["Acetaminophen", "Tramadol (reduced dose)"],
            ),
            PopulationGuidance(
                population=SpecialPopulation.HEPATIC_IMPAIRMENT,
                recommendations=["Avoid acetaminophen or reduce dosage"],
                medications=["Tramadol (reduced dose)", "Hydromorphone (reduced dose)"],
            ),
        ],
        source="WHO Pain Ladder Guidelines",
        last_updated=datetime(2021, 6, 10, tzinfo=UTC),
        evidence_level=EvidenceLevel.HIGH,
    ),
    TreatmentGuideline(
        id="4",
        condition="Atrial Fibrillation",
        icd10_codes=["I48", "I48.0", "I48.91"],
        first_line_options=[
            TreatmentOption(
                medications=["Apixaban", "Rivaroxaban", "Dabigatran"],
                notes="DOACs preferred for stroke prevention when CHA2DS2-VASc warrants anticoagulation",
            )
        ],
        second_line_options=[
            TreatmentOption(
                medications=["Warfarin"],
                notes="Use when DOACs are contraindicated, e.g. mechanical valves",
            )
        ],
        special_populations=[
            PopulationGuidance(
                population=SpecialPopulation.RENAL_IMPAIRMENT,
                recommendations=["Dose-adjust DOACs by creatinine clearance"],
                medications=["Apixaban", "Warfarin"],
            ),
        ],
        source="AHA/ACC/HRS Atrial Fibrillation Guideline",
        last_updated=datetime(2023, 11, 30, tzinfo=UTC),
        evidence_level=EvidenceLevel.HIGH,
    ),
]
