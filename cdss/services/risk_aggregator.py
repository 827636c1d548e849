"""
high-risk pregnancy flagging.

combines independent checks (maternal age, gravida, blood pressure history)
into an ordered list of risk factors. the order is the display priority of
the anc risk badges and must not change.
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence

from cdss.models.assessment import RiskFactor, VisitBloodPressure
from cdss.services.obstetric_calculator import DateLike, calculate_age

# maternal age bands (full years)
ADVANCED_MATERNAL_AGE = 35
ADOLESCENT_AGE = 18

GRAND_MULTIPARA_GRAVIDA = 5

# chronic hypertension: high bp at this many visits
HYPERTENSION_SYSTOLIC = 140
HYPERTENSION_DIASTOLIC = 90
HYPERTENSION_MIN_VISITS = 2

ADVANCED_MATERNAL_AGE_LABEL = "Advanced Maternal Age (>35)"
ADOLESCENT_PREGNANCY_LABEL = "Adolescent Pregnancy (<18)"
GRAND_MULTIPARA_LABEL = "Grand Multipara (G>5)"
CHRONIC_HYPERTENSION_LABEL = "Chronic Hypertension"


def _age_risk(patient_dob: Optional[DateLike], reference_date: DateLike) -> Optional[RiskFactor]:
    if not patient_dob:
        return None
    age = calculate_age(patient_dob, reference_date)
    if age > ADVANCED_MATERNAL_AGE:
        return RiskFactor(ADVANCED_MATERNAL_AGE_LABEL)
    if age < ADOLESCENT_AGE:
        return RiskFactor(ADOLESCENT_PREGNANCY_LABEL)
    return None


def _gravida_risk(gravida: Optional[int]) -> Optional[RiskFactor]:
    if gravida is not None and gravida > GRAND_MULTIPARA_GRAVIDA:
        return RiskFactor(GRAND_MULTIPARA_LABEL)
    return None


def _is_high_bp_visit(visit: VisitBloodPressure) -> bool:
    # both readings must be present for the visit to count
    if not visit.systolic or not visit.diastolic:
        return False
    return visit.systolic > HYPERTENSION_SYSTOLIC or visit.diastolic > HYPERTENSION_DIASTOLIC


def _hypertension_risk(visits: Sequence[VisitBloodPressure]) -> Optional[RiskFactor]:
    if len(visits) < HYPERTENSION_MIN_VISITS:
        return None
    high_bp_count = sum(1 for visit in visits if _is_high_bp_visit(visit))
    if high_bp_count >= HYPERTENSION_MIN_VISITS:
        return RiskFactor(CHRONIC_HYPERTENSION_LABEL)
    return None


def calculate_high_risk_factors(
    patient_dob: Optional[date],
    gravida: int,
    visits: Optional[Iterable[VisitBloodPressure]],
    reference_date: DateLike,
) -> List[RiskFactor]:
    """
    identify high-risk conditions for one pregnancy.

    factors are appended in a fixed order:
        1. maternal age (advanced > 35, else adolescent < 18)
        2. grand multipara (gravida > 5)
        3. chronic hypertension (high bp at 2+ visits)

    args:
        patient_dob: patient's date of birth, None when unknown
        gravida: number of pregnancies including this one
        visits: blood pressure readings from prior anc visits
        reference_date: date the patient's age is measured at

    returns:
        list of RiskFactor, empty when no risk is found
    """
    visit_list = list(visits or [])

    candidates = [
        _age_risk(patient_dob, reference_date),
        _gravida_risk(gravida),
        _hypertension_risk(visit_list),
    ]

    return [factor for factor in candidates if factor is not None]


def is_high_risk(factors: Sequence[RiskFactor]) -> bool:
    """whether the pregnancy gets the "high risk anc" badge."""
    return len(factors) > 0
