import uuid
from datetime import datetime

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from learning_app.core.constants import SessionStatus
from learning_app.core.database import Base


class Session(Base):
    """Study session: one viewer quizzed on one time range of a source."""

    __tablename__ = "sessions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    viewer_id = Column(String(64), nullable=False, index=True)
    source_id = Column(Uuid(as_uuid=True), ForeignKey("sources.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(Integer, nullable=False, default=0)  # seconds
    end_time = Column(Integer, nullable=True)  # seconds, null = until the end
    status = Column(String(32), nullable=False, default=SessionStatus.CHALLENGING, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    source = relationship("Source", back_populates="sessions")
    problems = relationship(
        "Problem",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="Problem.position"
    )

    def __repr__(self):
        return f"<Session {self.id} - {self.status}>"
