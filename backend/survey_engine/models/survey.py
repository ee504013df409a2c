import json
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.types import CHAR, TypeDecorator

from ..database import Base


class GUID(TypeDecorator):
    """Platform-independent UUID type.

    Uses CHAR(36) to store UUIDs as strings, compatible with all backends
    including SQLite.
    """

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return uuid.UUID(value)
        return value


class Survey(Base):
    __tablename__ = "surveys"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default="Active")  # Active | Paused | Closed | Draft
    tags_json = Column(Text, nullable=False, default="[]")

    # Normalized question list and scoring configuration, stored as JSON text
    questions_json = Column(Text, nullable=False)
    score_config_json = Column(Text, nullable=True)  # NULL means "not scored"
    scoring_engine_id = Column(String(64), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    responses = relationship("SurveyResponse", back_populates="survey", cascade="all, delete-orphan")

    @property
    def tags(self) -> list:
        return json.loads(self.tags_json or "[]")


class SurveyResponse(Base):
    __tablename__ = "survey_responses"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    survey_id = Column(GUID(), ForeignKey("surveys.id"), nullable=False, index=True)
    answers_json = Column(Text, nullable=False)
    scoring_engine_id = Column(String(64), nullable=False)

    # Snapshot of the scoring pass, NULL when the survey is not scored
    total_score = Column(Float, nullable=True)
    percentage = Column(Float, nullable=True)
    band_id = Column(String(128), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    survey = relationship("Survey", back_populates="responses")

    @property
    def answers(self) -> dict:
        return json.loads(self.answers_json)
