"""
encounter-level composition of the clinical decision support engine.

turns raw form input and stored clinic records into the structures the
triage, consultation and anc screens render: per-vital statuses with an
alert count, enrollment previews, anc visit checks and the pregnancy
summary with its risk factors.
"""

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from cdss.models.assessment import VisitBloodPressure, VitalReading
from cdss.repositories.anc_repository import AncRepository
from cdss.repositories.vitals_repository import VitalsRepository
from cdss.services.obstetric_calculator import (
    DateLike,
    calculate_days_to_delivery,
    calculate_gestational_age,
    create_pregnancy_record,
    format_days_to_delivery,
    format_gestational_age,
    get_fetal_heart_rate_status,
    get_fundal_height_status,
    get_trimester,
)
from cdss.services.risk_aggregator import calculate_high_risk_factors, is_high_risk
from cdss.services.vitals_assessor import (
    calculate_bmi,
    get_bp_status,
    get_heart_rate_status,
    get_temperature_status,
    get_vital_alert_count,
)

logger = logging.getLogger(__name__)


# custom exceptions
class EncounterServiceError(Exception):
    """base exception for encounter service."""
    pass


class InvalidInputError(EncounterServiceError):
    """raised when request input cannot be parsed."""
    pass


class RecordNotFoundError(EncounterServiceError):
    """raised when a required clinic record does not exist."""
    pass


def _to_dict_or_none(value: Any) -> Optional[Dict[str, Any]]:
    return value.to_dict() if value is not None else None


def parse_date(value: Any, field_name: str) -> date:
    """
    parse a required date field.

    args:
        value: date, datetime or iso-8601 string ("2024-01-01")
        field_name: field name used in error messages

    returns:
        calendar date

    raises:
        InvalidInputError: if the value is missing or not a valid date
    """
    if value is None or value == "":
        raise InvalidInputError(f"{field_name} is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidInputError(f"{field_name} must be an iso date string")

    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        raise InvalidInputError(f"{field_name} must be an iso date (yyyy-mm-dd), got '{value}'")


def parse_optional_date(value: Any, field_name: str) -> Optional[date]:
    if value is None or value == "":
        return None
    return parse_date(value, field_name)


def parse_optional_number(
    value: Any, field_name: str, cast: Callable[[Any], Any] = float
) -> Optional[Any]:
    """
    parse an optional numeric form field.

    empty strings and None mean "not measured".

    args:
        value: raw value (number or numeric string)
        field_name: field name used in error messages
        cast: float or int

    returns:
        parsed number or none

    raises:
        InvalidInputError: if the value is not numeric
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidInputError(f"{field_name} must be a number")
    if cast is int and isinstance(value, float):
        if not value.is_integer():
            raise InvalidInputError(f"{field_name} must be a whole number")
        return int(value)

    try:
        return cast(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field_name} must be a number, got '{value}'")


def reading_from_payload(payload: Dict[str, Any]) -> VitalReading:
    """
    build a VitalReading from triage form input.

    args:
        payload: dict with optional temperature, bp_systolic, bp_diastolic,
            heart_rate, weight_kg and height_cm

    returns:
        VitalReading

    raises:
        InvalidInputError: if any present field is not numeric
    """
    return VitalReading(
        temperature=parse_optional_number(payload.get("temperature"), "temperature"),
        systolic=parse_optional_number(payload.get("bp_systolic"), "bp_systolic", int),
        diastolic=parse_optional_number(payload.get("bp_diastolic"), "bp_diastolic", int),
        heart_rate=parse_optional_number(payload.get("heart_rate"), "heart_rate", int),
        weight_kg=parse_optional_number(payload.get("weight_kg"), "weight_kg"),
        height_cm=parse_optional_number(payload.get("height_cm"), "height_cm"),
    )


def assess_vitals(reading: VitalReading) -> Dict[str, Any]:
    """
    classify every measurement in a reading.

    args:
        reading: VitalReading to assess

    returns:
        dict containing:
            - temperature, blood_pressure, heart_rate: status dicts or none
            - bmi: bmi dict or none
            - alert_count: number of non-normal temperature/bp/hr statuses
    """
    return {
        "temperature": _to_dict_or_none(get_temperature_status(reading.temperature)),
        "blood_pressure": _to_dict_or_none(get_bp_status(reading.systolic, reading.diastolic)),
        "heart_rate": _to_dict_or_none(get_heart_rate_status(reading.heart_rate)),
        "bmi": _to_dict_or_none(calculate_bmi(reading.weight_kg, reading.height_cm)),
        "alert_count": get_vital_alert_count(
            reading.temperature, reading.systolic, reading.diastolic, reading.heart_rate
        ),
    }


def preview_enrollment(lmp: DateLike, reference_date: DateLike) -> Dict[str, Any]:
    """
    dates shown while a patient is being enrolled in anc.

    args:
        lmp: first day of the last menstrual period
        reference_date: today, as seen by the caller

    returns:
        dict with lmp, edd, gestational_age, gestational_age_display and trimester
    """
    record = create_pregnancy_record(lmp)
    gestational_age = calculate_gestational_age(record.lmp, reference_date)

    return {
        "lmp": record.lmp.isoformat(),
        "edd": record.edd.isoformat(),
        "gestational_age": gestational_age.to_dict(),
        "gestational_age_display": format_gestational_age(
            gestational_age.weeks, gestational_age.days
        ),
        "trimester": get_trimester(gestational_age.weeks).to_dict(),
    }


def assess_anc_visit(
    gestational_weeks: int,
    fundal_height_cm: Optional[float] = None,
    fetal_heart_rate: Optional[int] = None,
    systolic: Optional[int] = None,
    diastolic: Optional[int] = None,
) -> Dict[str, Any]:
    """
    classify the measurements taken at one anc visit.

    blood pressure is only assessed when both values were recorded.

    returns:
        dict with fetal_heart_rate, fundal_height and blood_pressure statuses
        (each none when not measured)
    """
    bp_status = get_bp_status(systolic, diastolic) if systolic and diastolic else None

    return {
        "fetal_heart_rate": _to_dict_or_none(
            get_fetal_heart_rate_status(fetal_heart_rate) if fetal_heart_rate else None
        ),
        "fundal_height": _to_dict_or_none(
            get_fundal_height_status(fundal_height_cm, gestational_weeks)
            if fundal_height_cm
            else None
        ),
        "blood_pressure": _to_dict_or_none(bp_status),
    }


def _visit_weeks(visit: Any, lmp: date) -> int:
    if visit.gestational_age_weeks is not None:
        return visit.gestational_age_weeks
    return calculate_gestational_age(lmp, visit.visit_date).weeks


def build_anc_summary(
    enrollment: Any,
    visits: Sequence[Any],
    patient_dob: Optional[date],
    reference_date: DateLike,
) -> Dict[str, Any]:
    """
    pregnancy summary for the anc journey screen.

    args:
        enrollment: AncEnrollment (or any object with the same columns)
        visits: the enrollment's AncVisit rows, newest first
        patient_dob: patient's date of birth, none when unknown
        reference_date: today, as seen by the caller

    returns:
        dict containing:
            - pregnancy: lmp, edd (lmp + 280 days), gravida, para, ...
            - gestational_age / gestational_age_display
            - days_to_delivery / days_to_delivery_display
            - trimester
            - risk_factors: ordered labels
            - high_risk: true when any risk factor was found
            - visits: per-visit record and assessment
    """
    record = create_pregnancy_record(
        enrollment.lmp,
        gravida=enrollment.gravida,
        para=enrollment.para,
        blood_group=enrollment.blood_group,
        genotype=enrollment.genotype,
        hiv_status=enrollment.hiv_status,
    )
    gestational_age = calculate_gestational_age(record.lmp, reference_date)
    days_to_delivery = calculate_days_to_delivery(record.edd, reference_date)

    risk_factors = calculate_high_risk_factors(
        patient_dob,
        record.gravida,
        [VisitBloodPressure.from_record(visit) for visit in visits],
        reference_date,
    )

    visit_summaries: List[Dict[str, Any]] = []
    for visit in visits:
        visit_summaries.append({
            "visit": visit.to_dict(),
            "assessment": assess_anc_visit(
                _visit_weeks(visit, record.lmp),
                fundal_height_cm=visit.fundal_height_cm,
                fetal_heart_rate=visit.fetal_heart_rate,
                systolic=visit.blood_pressure_systolic,
                diastolic=visit.blood_pressure_diastolic,
            ),
        })

    return {
        "pregnancy": record.to_dict(),
        "gestational_age": gestational_age.to_dict(),
        "gestational_age_display": format_gestational_age(
            gestational_age.weeks, gestational_age.days
        ),
        "days_to_delivery": days_to_delivery,
        "days_to_delivery_display": format_days_to_delivery(days_to_delivery),
        "trimester": get_trimester(gestational_age.weeks).to_dict(),
        "risk_factors": [factor.label for factor in risk_factors],
        "high_risk": is_high_risk(risk_factors),
        "visits": visit_summaries,
    }


def build_triage_assessment(session: Session, appointment_id: str) -> Dict[str, Any]:
    """
    assess the latest vitals recorded for an appointment.

    args:
        session: sqlalchemy session
        appointment_id: appointment identifier

    returns:
        dict with appointment_id, the stored vitals, their assessment and
        reading_count (rows recorded for the appointment)

    raises:
        RecordNotFoundError: if no vitals were recorded for the appointment
    """
    repo = VitalsRepository(session)
    vital = repo.get_latest_vitals(appointment_id)

    if vital is None:
        raise RecordNotFoundError(f"no vitals found for appointment {appointment_id}")

    logger.debug("assessing vitals %s for appointment %s", vital.id, appointment_id)

    return {
        "appointment_id": appointment_id,
        "vitals": vital.to_dict(),
        "reading_count": repo.count_vitals(appointment_id),
        "assessment": assess_vitals(VitalReading.from_record(vital)),
    }


def build_patient_anc_summary(
    session: Session, patient_id: str, reference_date: DateLike
) -> Dict[str, Any]:
    """
    anc summary for a patient's active enrollment.

    args:
        session: sqlalchemy session
        patient_id: patient identifier
        reference_date: today, as seen by the caller

    returns:
        dict with patient_id, enrollment_id and the build_anc_summary fields

    raises:
        RecordNotFoundError: if the patient or an active enrollment is missing
    """
    repo = AncRepository(session)

    patient = repo.get_patient(patient_id)
    if patient is None:
        raise RecordNotFoundError(f"patient {patient_id} not found")

    enrollment = repo.get_active_enrollment(patient_id)
    if enrollment is None:
        raise RecordNotFoundError(f"no active anc enrollment for patient {patient_id}")

    visits = repo.get_visits(enrollment.id)
    logger.debug(
        "building anc summary for patient %s (enrollment %s, %d visits)",
        patient_id, enrollment.id, len(visits)
    )

    summary = build_anc_summary(enrollment, visits, patient.dob, reference_date)
    summary["patient_id"] = patient_id
    summary["enrollment_id"] = enrollment.id
    return summary
