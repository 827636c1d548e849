"""
configuration module for application settings and database connection.

loads environment variables and provides database engine/session management
for the read-side of the clinic records consumed by the cdss engine.
"""

import os
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

# load environment variables from .env file
load_dotenv()


class Config:
    """application configuration class."""

    # database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///cdss.db")
    SQL_ECHO: bool = os.getenv("SQL_ECHO", "False").lower() == "true"

    # logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # flask settings
    FLASK_ENV: str = os.getenv("FLASK_ENV", "development")
    FLASK_DEBUG: bool = os.getenv("FLASK_DEBUG", "True").lower() == "true"
    FLASK_PORT: int = int(os.getenv("FLASK_PORT", "5000"))


# database engine and session factory
engine = create_engine(
    Config.DATABASE_URL,
    echo=Config.SQL_ECHO,
    connect_args={"check_same_thread": False} if "sqlite" in Config.DATABASE_URL else {}
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db_session() -> Session:
    """
    create and return a new database session.

    returns:
        sqlalchemy Session object
    """
    return SessionLocal()


def init_db() -> None:
    """create any missing clinic record tables on the configured engine."""
    from cdss.models.base import Base
    from cdss.models import anc, app_log, vitals  # noqa: F401 (registers tables)

    Base.metadata.create_all(bind=engine)
