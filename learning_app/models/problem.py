import uuid
from datetime import datetime

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text, Boolean, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from learning_app.core.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


class Problem(Base):
    """Generated challenge question belonging to a session."""

    __tablename__ = "problems"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(Uuid(as_uuid=True), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    type = Column(String(32), nullable=False)  # multiple_choice, matching, recall, construction, ...
    text = Column(Text, nullable=False)
    difficulty = Column(String(16), nullable=True)  # Easy, Medium, Hard
    options = Column(JSONType, nullable=True)  # ["...", "..."] for choice/ordering questions
    column_a = Column(JSONType, nullable=True)  # matching: left items
    column_b = Column(JSONType, nullable=True)  # matching: right items
    solution = Column(JSONType, nullable=True)  # index, [indices], bool or {a: b}
    user_answer = Column(Text, nullable=True)
    is_correct = Column(Boolean, nullable=True)
    feedback = Column(Text, nullable=True)
    next_step = Column(Text, nullable=True)
    evaluated_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    session = relationship("Session", back_populates="problems")

    @property
    def is_evaluated(self) -> bool:
        return self.evaluated_at is not None

    def __repr__(self):
        return f"<Problem {self.type} - {self.difficulty}>"
