"""
patient and antenatal-care (anc) data models.

defines the orm models for patients, anc enrollments and anc visits, the
records the obstetric calculator and risk aggregator read from.
"""

from datetime import datetime
from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String

from cdss.models.base import Base


class Patient(Base):
    """
    registered patient.

    attributes:
        id: patient identifier
        first_name: given name
        last_name: family name
        dob: date of birth, may be unknown
        gender: free-text gender
    """

    __tablename__ = "patients"

    id = Column(String, primary_key=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    dob = Column(Date, nullable=True)
    gender = Column(String, nullable=True)

    def __repr__(self) -> str:
        return f"<Patient(id='{self.id}', name='{self.first_name} {self.last_name}')>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "dob": self.dob.isoformat() if self.dob else None,
            "gender": self.gender,
        }


class AncEnrollment(Base):
    """
    one antenatal-care enrollment (a single pregnancy).

    attributes:
        id: enrollment identifier
        patient_id: enrolled patient
        lmp: first day of the last menstrual period
        edd: expected date of delivery, always lmp + 280 days
        gravida: number of pregnancies including this one
        para: number of previous deliveries
        blood_group: one of the blood group options
        genotype: one of the genotype options
        hiv_status: one of the hiv status options
        is_active: whether this is the patient's current pregnancy
        created_at: enrollment timestamp (utc)
    """

    __tablename__ = "anc_enrollments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(String, ForeignKey("patients.id"), nullable=False, index=True)
    lmp = Column(Date, nullable=False)
    edd = Column(Date, nullable=False)
    gravida = Column(Integer, nullable=False, default=1)
    para = Column(Integer, nullable=False, default=0)
    blood_group = Column(String, nullable=True)
    genotype = Column(String, nullable=True)
    hiv_status = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return (
            f"<AncEnrollment(id={self.id}, patient_id='{self.patient_id}', "
            f"lmp='{self.lmp}', edd='{self.edd}')>"
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "patient_id": self.patient_id,
            "lmp": self.lmp.isoformat() if self.lmp else None,
            "edd": self.edd.isoformat() if self.edd else None,
            "gravida": self.gravida,
            "para": self.para,
            "blood_group": self.blood_group,
            "genotype": self.genotype,
            "hiv_status": self.hiv_status,
            "is_active": self.is_active,
        }


class AncVisit(Base):
    """
    one antenatal visit within an enrollment.

    attributes:
        id: visit identifier
        enrollment_id: owning enrollment
        patient_id: patient seen
        visit_date: date of the visit
        gestational_age_weeks: completed weeks at the visit
        gestational_age_days: extra days at the visit (0-6)
        fundal_height_cm: symphysis-fundal height in centimetres
        fetal_heart_rate: beats per minute
        fetal_presentation: one of the fetal presentation options
        edema: whether edema was observed
        weight_kg: maternal weight
        blood_pressure_systolic: systolic blood pressure (mmhg)
        blood_pressure_diastolic: diastolic blood pressure (mmhg)
    """

    __tablename__ = "anc_visits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    enrollment_id = Column(Integer, ForeignKey("anc_enrollments.id"), nullable=False, index=True)
    patient_id = Column(String, ForeignKey("patients.id"), nullable=False)
    visit_date = Column(Date, nullable=False)
    gestational_age_weeks = Column(Integer, nullable=True)
    gestational_age_days = Column(Integer, nullable=True)
    fundal_height_cm = Column(Float, nullable=True)
    fetal_heart_rate = Column(Integer, nullable=True)
    fetal_presentation = Column(String, nullable=True)
    edema = Column(Boolean, nullable=False, default=False)
    weight_kg = Column(Float, nullable=True)
    blood_pressure_systolic = Column(Integer, nullable=True)
    blood_pressure_diastolic = Column(Integer, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<AncVisit(id={self.id}, enrollment_id={self.enrollment_id}, "
            f"visit_date='{self.visit_date}')>"
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "enrollment_id": self.enrollment_id,
            "patient_id": self.patient_id,
            "visit_date": self.visit_date.isoformat() if self.visit_date else None,
            "gestational_age_weeks": self.gestational_age_weeks,
            "gestational_age_days": self.gestational_age_days,
            "fundal_height_cm": self.fundal_height_cm,
            "fetal_heart_rate": self.fetal_heart_rate,
            "fetal_presentation": self.fetal_presentation,
            "edema": self.edema,
            "weight_kg": self.weight_kg,
            "blood_pressure_systolic": self.blood_pressure_systolic,
            "blood_pressure_diastolic": self.blood_pressure_diastolic,
        }
