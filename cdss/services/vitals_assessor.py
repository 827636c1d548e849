"""
rule-based classification of single vital-sign readings.

maps one measurement (or a blood pressure pair) to a three-tier severity
with a human-readable label. every function is pure and total: a missing
measurement yields None, which callers must read as "no data", not "normal".
no range validation is performed; any number is classified.
"""

from typing import Callable, List, Optional, Tuple

from cdss.models.assessment import BMIResult, VitalLevel, VitalStatus


# temperature thresholds (celsius)
TEMP_MILD_FEVER = 37.5
TEMP_HIGH_FEVER = 38.5

# blood pressure thresholds (mmhg)
SYSTOLIC_CRISIS = 180
DIASTOLIC_CRISIS = 120
SYSTOLIC_URGENCY = 160
DIASTOLIC_URGENCY = 100
SYSTOLIC_HIGH = 140
DIASTOLIC_HIGH = 90
SYSTOLIC_LOW = 90
DIASTOLIC_LOW = 60

# heart rate thresholds (bpm)
HR_TACHYCARDIA = 120
HR_ELEVATED = 100
HR_BRADYCARDIA = 60

# bmi band upper bounds (kg/m^2), who classification
BMI_SEVERE_UNDERWEIGHT = 16.0
BMI_UNDERWEIGHT = 18.5
BMI_NORMAL = 25.0
BMI_OVERWEIGHT = 30.0
BMI_OBESE_I = 35.0
BMI_OBESE_II = 40.0

NORMAL_LABEL = "Normal"


# ordered (predicate, level, label) tables, first match wins
_TEMPERATURE_RULES: List[Tuple[Callable[[float], bool], VitalLevel, str]] = [
    (lambda t: t > TEMP_HIGH_FEVER, VitalLevel.CRITICAL, "High Fever"),
    (lambda t: t > TEMP_MILD_FEVER, VitalLevel.WARNING, "Mild Fever"),
]

_HEART_RATE_RULES: List[Tuple[Callable[[float], bool], VitalLevel, str]] = [
    (lambda hr: hr > HR_TACHYCARDIA, VitalLevel.CRITICAL, "Tachycardia"),
    (lambda hr: hr > HR_ELEVATED, VitalLevel.WARNING, "Elevated HR"),
    (lambda hr: hr < HR_BRADYCARDIA, VitalLevel.WARNING, "Bradycardia"),
]


def _diastolic_above(diastolic: Optional[int], threshold: int) -> bool:
    # an absent (or zero) diastolic never contributes
    return bool(diastolic) and diastolic > threshold


def _diastolic_below(diastolic: Optional[int], threshold: int) -> bool:
    return bool(diastolic) and diastolic < threshold


_BP_RULES: List[Tuple[Callable[[int, Optional[int]], bool], VitalLevel, str]] = [
    (
        lambda s, d: s > SYSTOLIC_CRISIS or _diastolic_above(d, DIASTOLIC_CRISIS),
        VitalLevel.CRITICAL,
        "Hypertensive Crisis",
    ),
    (
        lambda s, d: s > SYSTOLIC_URGENCY or _diastolic_above(d, DIASTOLIC_URGENCY),
        VitalLevel.CRITICAL,
        "Hypertensive Urgency",
    ),
    (
        lambda s, d: s > SYSTOLIC_HIGH or _diastolic_above(d, DIASTOLIC_HIGH),
        VitalLevel.WARNING,
        "High BP",
    ),
    (
        lambda s, d: s < SYSTOLIC_LOW or _diastolic_below(d, DIASTOLIC_LOW),
        VitalLevel.CRITICAL,
        "Low BP",
    ),
]

_BMI_BANDS: List[Tuple[float, str, VitalLevel]] = [
    (BMI_SEVERE_UNDERWEIGHT, "Severe Underweight", VitalLevel.CRITICAL),
    (BMI_UNDERWEIGHT, "Underweight", VitalLevel.WARNING),
    (BMI_NORMAL, "Normal", VitalLevel.NORMAL),
    (BMI_OVERWEIGHT, "Overweight", VitalLevel.WARNING),
    (BMI_OBESE_I, "Obese Class I", VitalLevel.WARNING),
    (BMI_OBESE_II, "Obese Class II", VitalLevel.CRITICAL),
]
BMI_TOP_BAND = ("Obese Class III", VitalLevel.CRITICAL)


def _first_match(rules, *values) -> VitalStatus:
    """
    evaluate an ordered rule table against the given values.

    args:
        rules: list of (predicate, level, label) tuples
        values: arguments passed to each predicate

    returns:
        status of the first matching rule, normal if none match
    """
    for predicate, level, label in rules:
        if predicate(*values):
            return VitalStatus(level=level, label=label)
    return VitalStatus(level=VitalLevel.NORMAL, label=NORMAL_LABEL)


def get_temperature_status(temp_c: Optional[float]) -> Optional[VitalStatus]:
    """
    classify body temperature.

    args:
        temp_c: temperature in degrees celsius

    returns:
        VitalStatus, or None when the temperature was not measured
    """
    if temp_c is None:
        return None
    return _first_match(_TEMPERATURE_RULES, temp_c)


def get_bp_status(
    systolic: Optional[int], diastolic: Optional[int]
) -> Optional[VitalStatus]:
    """
    classify a blood pressure pair.

    rules are checked in priority order: crisis, urgency, high, low.
    a diastolic value on its own is not enough to classify.

    args:
        systolic: systolic pressure in mmhg
        diastolic: diastolic pressure in mmhg, may be None

    returns:
        VitalStatus, or None when systolic was not measured
    """
    if systolic is None:
        return None
    return _first_match(_BP_RULES, systolic, diastolic)


def get_heart_rate_status(hr: Optional[int]) -> Optional[VitalStatus]:
    """
    classify heart rate.

    args:
        hr: heart rate in bpm

    returns:
        VitalStatus, or None when heart rate was not measured
    """
    if hr is None:
        return None
    return _first_match(_HEART_RATE_RULES, hr)


def calculate_bmi(
    weight_kg: Optional[float], height_cm: Optional[float]
) -> Optional[BMIResult]:
    """
    calculate and classify body-mass index.

    a zero weight or height counts as not measured, as does a height too
    small to square to a non-zero float.

    args:
        weight_kg: body weight in kilograms
        height_cm: height in centimetres

    returns:
        BMIResult with the index rounded to one decimal, or None
    """
    if not weight_kg or not height_cm:
        return None

    height_m = height_cm / 100
    denominator = height_m * height_m
    if not denominator:
        return None

    bmi = weight_kg / denominator

    category, level = BMI_TOP_BAND
    for upper_bound, band_category, band_level in _BMI_BANDS:
        if bmi < upper_bound:
            category, level = band_category, band_level
            break

    return BMIResult(value=round(bmi, 1), category=category, level=level)


def get_vital_alert_count(
    temp: Optional[float],
    systolic: Optional[int],
    diastolic: Optional[int],
    heart_rate: Optional[int],
) -> int:
    """
    count non-normal readings for dashboard alert badges.

    bmi is not counted.

    returns:
        number of temperature, blood pressure and heart rate alerts (0-3)
    """
    statuses = [
        get_temperature_status(temp),
        get_bp_status(systolic, diastolic),
        get_heart_rate_status(heart_rate),
    ]
    return sum(1 for status in statuses if status is not None and status.is_alert)
