import uuid

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.cores.db import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    hourly_rate = Column(Integer, nullable=False)  # en paise
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    facilities = relationship("Facility", back_populates="activity")

    def __repr__(self):
        return f"<Activity(id={self.id}, name={self.name}, hourly_rate={self.hourly_rate})>"
