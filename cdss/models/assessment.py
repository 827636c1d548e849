"""
value types returned by the clinical decision support engine.

every type here is an immutable value built fresh for one evaluation call.
none of them are persisted; callers render them through to_dict().
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from functools import total_ordering
from typing import Any, Dict, Optional


@total_ordering
class VitalLevel(Enum):
    """three-tier severity, ordered normal < warning < critical."""

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(VitalLevel).index(self)

    def __lt__(self, other):
        if not isinstance(other, VitalLevel):
            return NotImplemented
        return self.rank < other.rank


# presentation hints (text colour, badge background) per level
LEVEL_STYLES: Dict[VitalLevel, Dict[str, str]] = {
    VitalLevel.NORMAL: {
        "color_class": "text-green-600 dark:text-green-400",
        "bg_class": "bg-green-500/10 border-green-500/30",
    },
    VitalLevel.WARNING: {
        "color_class": "text-orange-600 dark:text-orange-400",
        "bg_class": "bg-orange-500/10 border-orange-500/30",
    },
    VitalLevel.CRITICAL: {
        "color_class": "text-red-600 dark:text-red-400",
        "bg_class": "bg-red-500/10 border-red-500/30",
    },
}


@dataclass(frozen=True)
class VitalReading:
    """
    one set of measurements at a point in time.

    attributes:
        temperature: degrees celsius
        systolic: systolic blood pressure (mmhg)
        diastolic: diastolic blood pressure (mmhg)
        heart_rate: beats per minute
        weight_kg: body weight in kilograms
        height_cm: height in centimetres

    any attribute may be None (not measured).
    """

    temperature: Optional[float] = None
    systolic: Optional[int] = None
    diastolic: Optional[int] = None
    heart_rate: Optional[int] = None
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None

    @classmethod
    def from_record(cls, vital: Any) -> "VitalReading":
        """
        build a reading from a stored vitals row.

        args:
            vital: Vital model instance (or any object with the same columns)

        returns:
            VitalReading carrying the row's measurements
        """
        return cls(
            temperature=vital.temperature,
            systolic=vital.blood_pressure_systolic,
            diastolic=vital.blood_pressure_diastolic,
            heart_rate=vital.heart_rate,
            weight_kg=vital.weight_kg,
            height_cm=vital.height_cm,
        )


@dataclass(frozen=True)
class VitalStatus:
    """classification of one measurement."""

    level: VitalLevel
    label: str

    @property
    def color_class(self) -> str:
        return LEVEL_STYLES[self.level]["color_class"]

    @property
    def bg_class(self) -> str:
        return LEVEL_STYLES[self.level]["bg_class"]

    @property
    def is_alert(self) -> bool:
        return self.level is not VitalLevel.NORMAL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "label": self.label,
            "color_class": self.color_class,
            "bg_class": self.bg_class,
        }


@dataclass(frozen=True)
class BMIResult:
    """
    derived body-mass index.

    value is rounded to one decimal for display; the category was chosen
    from the unrounded index.
    """

    value: float
    category: str
    level: VitalLevel

    @property
    def color_class(self) -> str:
        return LEVEL_STYLES[self.level]["color_class"]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "category": self.category,
            "level": self.level.value,
            "color_class": self.color_class,
        }


@dataclass(frozen=True)
class PregnancyRecord:
    """
    one active antenatal enrollment.

    edd is derived from lmp (lmp + 280 days); gravida and para are
    clinician-entered.
    """

    lmp: date
    edd: date
    gravida: int = 1
    para: int = 0
    blood_group: Optional[str] = None
    genotype: Optional[str] = None
    hiv_status: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lmp": self.lmp.isoformat(),
            "edd": self.edd.isoformat(),
            "gravida": self.gravida,
            "para": self.para,
            "blood_group": self.blood_group,
            "genotype": self.genotype,
            "hiv_status": self.hiv_status,
        }


@dataclass(frozen=True)
class GestationalAge:
    """pregnancy duration at a reference date; total_days == weeks * 7 + days."""

    weeks: int
    days: int
    total_days: int

    def to_dict(self) -> Dict[str, int]:
        return {"weeks": self.weeks, "days": self.days, "total_days": self.total_days}


@dataclass(frozen=True)
class Trimester:
    trimester: int
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {"trimester": self.trimester, "label": self.label}


@dataclass(frozen=True)
class ObstetricStatus:
    """classification of a fetal or fundal measurement."""

    status: VitalLevel
    label: str

    def to_dict(self) -> Dict[str, str]:
        return {"status": self.status.value, "label": self.label}


@dataclass(frozen=True)
class VisitBloodPressure:
    """blood pressure recorded at one prior anc visit."""

    systolic: Optional[int] = None
    diastolic: Optional[int] = None

    @classmethod
    def from_record(cls, visit: Any) -> "VisitBloodPressure":
        return cls(
            systolic=visit.blood_pressure_systolic,
            diastolic=visit.blood_pressure_diastolic,
        )


@dataclass(frozen=True)
class RiskFactor:
    """one identified high-risk condition."""

    label: str

    def __str__(self) -> str:
        return self.label
