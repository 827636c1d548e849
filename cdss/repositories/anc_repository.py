"""
repository for patients and antenatal-care records.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
from cdss.models.anc import AncEnrollment, AncVisit, Patient


class AncRepository:
    """
    data access layer for anc enrollments and visits.
    """

    def __init__(self, db_session: Session):
        """
        initialize repository with database session.

        args:
            db_session: sqlalchemy session for database operations
        """
        self.session = db_session

    def get_patient(self, patient_id: str) -> Optional[Patient]:
        return self.session.get(Patient, patient_id)

    def get_active_enrollment(self, patient_id: str) -> Optional[AncEnrollment]:
        """
        fetch the patient's current pregnancy.

        args:
            patient_id: patient identifier

        returns:
            newest active enrollment, or none if the patient is not enrolled
        """
        enrollment = (
            self.session.query(AncEnrollment)
            .filter(AncEnrollment.patient_id == patient_id)
            .filter(AncEnrollment.is_active.is_(True))
            .order_by(AncEnrollment.created_at.desc(), AncEnrollment.id.desc())
            .first()
        )

        return enrollment

    def get_visits(self, enrollment_id: int) -> List[AncVisit]:
        """
        fetch all visits for an enrollment.

        args:
            enrollment_id: enrollment identifier

        returns:
            list of visits, newest visit first
        """
        visits = (
            self.session.query(AncVisit)
            .filter(AncVisit.enrollment_id == enrollment_id)
            .order_by(AncVisit.visit_date.desc(), AncVisit.id.desc())
            .all()
        )

        return visits
