"""
repository for querying triage vitals.

provides data access methods for retrieving vital signs from the database.
"""

from typing import Optional
from sqlalchemy.orm import Session
from cdss.models.vitals import Vital


class VitalsRepository:
    """
    data access layer for triage vitals.

    handles all database queries related to vital signs.
    """

    def __init__(self, db_session: Session):
        """
        initialize repository with database session.

        args:
            db_session: sqlalchemy session for database operations
        """
        self.session = db_session

    def get_latest_vitals(self, appointment_id: str) -> Optional[Vital]:
        """
        fetch the most recent vitals taken for an appointment.

        args:
            appointment_id: appointment identifier

        returns:
            single vital record (most recent) or none if no data exists
        """
        latest = (
            self.session.query(Vital)
            .filter(Vital.appointment_id == appointment_id)
            .order_by(Vital.created_at.desc(), Vital.id.desc())
            .first()
        )

        return latest

    def count_vitals(self, appointment_id: str) -> int:
        """
        count vital records for an appointment.

        args:
            appointment_id: appointment identifier

        returns:
            number of vital records
        """
        count = (
            self.session.query(Vital)
            .filter(Vital.appointment_id == appointment_id)
            .count()
        )

        return count
