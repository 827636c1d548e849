"""
vitals data model for triage measurements.

defines the sqlalchemy orm model for the vitals table written at triage
and read back by the cdss engine.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, Float, String, DateTime

from cdss.models.base import Base


class Vital(Base):
    """
    represents one set of triage measurements taken for an appointment.

    every measurement column is nullable: a missing value means the
    measurement was not taken, never that it was zero.

    attributes:
        id: primary key
        appointment_id: appointment the vitals were taken for
        temperature: degrees celsius
        blood_pressure_systolic: systolic blood pressure (mmhg)
        blood_pressure_diastolic: diastolic blood pressure (mmhg)
        heart_rate: beats per minute
        weight_kg: body weight in kilograms
        height_cm: height in centimetres
        created_at: when the vitals were recorded (utc)
    """

    __tablename__ = "vitals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    appointment_id = Column(String, nullable=False, index=True)

    temperature = Column(Float, nullable=True)
    blood_pressure_systolic = Column(Integer, nullable=True)
    blood_pressure_diastolic = Column(Integer, nullable=True)
    heart_rate = Column(Integer, nullable=True)
    weight_kg = Column(Float, nullable=True)
    height_cm = Column(Float, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    def __repr__(self) -> str:
        """string representation of vital record."""
        return (
            f"<Vital(appointment_id='{self.appointment_id}', "
            f"created_at='{self.created_at}', "
            f"temp={self.temperature}, "
            f"bp={self.blood_pressure_systolic}/{self.blood_pressure_diastolic})>"
        )

    def to_dict(self) -> dict:
        """
        convert vital record to dictionary.

        returns:
            dict representation of the vital record
        """
        return {
            "id": self.id,
            "appointment_id": self.appointment_id,
            "temperature": self.temperature,
            "blood_pressure_systolic": self.blood_pressure_systolic,
            "blood_pressure_diastolic": self.blood_pressure_diastolic,
            "heart_rate": self.heart_rate,
            "weight_kg": self.weight_kg,
            "height_cm": self.height_cm,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
