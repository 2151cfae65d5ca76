"""
SQLite database setup and run history model for Accessibility Tester.
Uses SQLAlchemy for ORM.
"""
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

# Create SQLite engine
engine = create_engine(
    settings.database_url,
    # Required for SQLite
    connect_args={"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


class TestRun(Base):
    """History of submitted test runs, keyed by report id."""
    __tablename__ = "test_runs"
    __test__ = False

    id = Column(String(64), primary_key=True)
    url = Column(String(2048), nullable=False)
    status = Column(String(20), default="running")  # running, completed, failed, exported
    score = Column(Integer, nullable=True)
    grade = Column(String(4), nullable=True)
    error_code = Column(String(32), nullable=True)
    error_message = Column(Text, nullable=True)
    started_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)
    exported_at = Column(DateTime, nullable=True)


def init_db():
    """Initialize database tables."""
    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency for getting database sessions."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
