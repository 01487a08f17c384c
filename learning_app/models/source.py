import uuid
from datetime import datetime

from sqlalchemy import Column, String, Integer, DateTime, Text, Uuid
from sqlalchemy.orm import relationship

from learning_app.core.database import Base


class Source(Base):
    """Source model for storing processed YouTube videos."""

    __tablename__ = "sources"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    url = Column(Text, nullable=False)
    video_id = Column(String(32), nullable=False, unique=True, index=True)
    transcript = Column(Text, nullable=False)  # "[m:ss] text" per line
    duration = Column(Integer, nullable=False, default=0)  # seconds
    thumbnail = Column(Text, nullable=True)
    breakpoints = Column(Text, nullable=True)  # JSON: [{"timestamp": 600, "reason": "..."}]
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    sessions = relationship(
        "Session",
        back_populates="source",
        cascade="all, delete-orphan",
        order_by="Session.created_at.desc()"
    )

    def __repr__(self):
        return f"<Source {self.video_id} - {self.title}>"
