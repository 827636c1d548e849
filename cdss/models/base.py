"""
shared declarative base for the clinic record models.
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
