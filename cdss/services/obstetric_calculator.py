"""
pregnancy dating and fetal/maternal classification.

date arithmetic for antenatal care (edd by naegele's rule, gestational age,
trimester, days to delivery) plus the fetal heart rate and fundal height
checks used at anc visits. every "today" is an explicit reference_date.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from cdss.models.assessment import (
    GestationalAge,
    ObstetricStatus,
    PregnancyRecord,
    Trimester,
    VitalLevel,
)

DateLike = Union[date, datetime]

# naegele's rule: 40 weeks from lmp, no cycle-length adjustment
PREGNANCY_DURATION_DAYS = 280

# trimester boundaries (completed weeks)
SECOND_TRIMESTER_START = 14
THIRD_TRIMESTER_START = 28

# fetal heart rate thresholds (bpm); hard limits outside, soft limits inside
FHR_HARD_LOW = 110
FHR_HARD_HIGH = 160
FHR_SOFT_LOW = 120
FHR_SOFT_HIGH = 150

# fundal height tolerance (cm away from gestational weeks)
FUNDAL_NORMAL_TOLERANCE = 2
FUNDAL_CHECK_TOLERANCE = 4

DUE_LABEL = "Due!"

BLOOD_GROUP_OPTIONS: List[str] = ["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]
GENOTYPE_OPTIONS: List[str] = ["AA", "AS", "SS", "AC", "SC"]
FETAL_PRESENTATION_OPTIONS: List[str] = ["Cephalic", "Breech", "Transverse", "Oblique"]
HIV_STATUS_OPTIONS: List[str] = ["Negative", "Positive", "Unknown"]


def _as_date(value: DateLike) -> date:
    # datetime subclasses date; compare calendar days only
    if isinstance(value, datetime):
        return value.date()
    return value


def _pluralize(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def calculate_edd(lmp: DateLike) -> date:
    """
    expected date of delivery by naegele's rule.

    args:
        lmp: first day of the last menstrual period

    returns:
        lmp + 280 days
    """
    return _as_date(lmp) + timedelta(days=PREGNANCY_DURATION_DAYS)


def create_pregnancy_record(
    lmp: DateLike,
    gravida: int = 1,
    para: int = 0,
    blood_group: Optional[str] = None,
    genotype: Optional[str] = None,
    hiv_status: Optional[str] = None,
) -> PregnancyRecord:
    """build a PregnancyRecord with its edd derived from lmp."""
    lmp_date = _as_date(lmp)
    return PregnancyRecord(
        lmp=lmp_date,
        edd=calculate_edd(lmp_date),
        gravida=gravida,
        para=para,
        blood_group=blood_group,
        genotype=genotype,
        hiv_status=hiv_status,
    )


def calculate_gestational_age(lmp: DateLike, reference_date: DateLike) -> GestationalAge:
    """
    gestational age at a reference date.

    weeks and days use floor division, so a reference date before lmp gives
    negative weeks with days still in 0-6 (3 days early is -1 weeks 4 days).

    args:
        lmp: first day of the last menstrual period
        reference_date: date to measure at

    returns:
        GestationalAge with weeks, days and total_days
    """
    total_days = (_as_date(reference_date) - _as_date(lmp)).days
    weeks, days = divmod(total_days, 7)
    return GestationalAge(weeks=weeks, days=days, total_days=total_days)


def format_gestational_age(weeks: int, days: int) -> str:
    """
    format gestational age for display.

    examples: "0 days", "1 day", "12 weeks", "24w 3d".
    """
    if weeks == 0 and days == 0:
        return "0 days"
    if weeks == 0:
        return _pluralize(days, "day")
    if days == 0:
        return _pluralize(weeks, "week")
    return f"{weeks}w {days}d"


def calculate_days_to_delivery(edd: DateLike, reference_date: DateLike) -> int:
    """
    days remaining until the edd.

    returns:
        whole days; zero or negative once the pregnancy is due or overdue
    """
    return (_as_date(edd) - _as_date(reference_date)).days


def format_days_to_delivery(days: int) -> str:
    """display text for days to delivery: the count, or "Due!" when not positive."""
    return str(days) if days > 0 else DUE_LABEL


def get_trimester(weeks: int) -> Trimester:
    if weeks < SECOND_TRIMESTER_START:
        return Trimester(trimester=1, label="First Trimester")
    if weeks < THIRD_TRIMESTER_START:
        return Trimester(trimester=2, label="Second Trimester")
    return Trimester(trimester=3, label="Third Trimester")


def get_fetal_heart_rate_status(fhr: Optional[int]) -> Optional[ObstetricStatus]:
    """
    classify fetal heart rate.

    the hard limits (110/160) are checked first; the soft limits (120/150)
    then flag a borderline zone inside them.

    args:
        fhr: fetal heart rate in bpm

    returns:
        ObstetricStatus, or None when not measured
    """
    if fhr is None:
        return None
    if fhr < FHR_HARD_LOW:
        return ObstetricStatus(status=VitalLevel.CRITICAL, label="Bradycardia")
    if fhr > FHR_HARD_HIGH:
        return ObstetricStatus(status=VitalLevel.CRITICAL, label="Tachycardia")
    if fhr < FHR_SOFT_LOW or fhr > FHR_SOFT_HIGH:
        return ObstetricStatus(status=VitalLevel.WARNING, label="Borderline")
    return ObstetricStatus(status=VitalLevel.NORMAL, label="Normal")


def get_fundal_height_status(
    fundal_height_cm: Optional[float], gestational_weeks: int
) -> Optional[ObstetricStatus]:
    """
    compare fundal height with gestational age.

    fundal height in cm should track gestational weeks within about 2 cm.

    args:
        fundal_height_cm: symphysis-fundal height in centimetres
        gestational_weeks: completed weeks of gestation

    returns:
        ObstetricStatus, or None when not measured
    """
    if fundal_height_cm is None:
        return None
    difference = abs(fundal_height_cm - gestational_weeks)
    if difference <= FUNDAL_NORMAL_TOLERANCE:
        return ObstetricStatus(status=VitalLevel.NORMAL, label="Normal")
    if difference <= FUNDAL_CHECK_TOLERANCE:
        return ObstetricStatus(status=VitalLevel.WARNING, label="Check")
    return ObstetricStatus(status=VitalLevel.CRITICAL, label="Review")


def calculate_age(dob: DateLike, reference_date: DateLike) -> int:
    """
    age in full years at the reference date.

    args:
        dob: date of birth
        reference_date: date to measure at

    returns:
        completed years (a birthday counts on the day itself)
    """
    dob_date = _as_date(dob)
    ref = _as_date(reference_date)
    before_birthday = (ref.month, ref.day) < (dob_date.month, dob_date.day)
    return ref.year - dob_date.year - (1 if before_birthday else 0)
