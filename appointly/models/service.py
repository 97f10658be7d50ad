# appointly/models/service.py
"""
Service Model - bookable services offered by a provider.
Duration is the source of truth for an appointment's end time.
"""
from sqlalchemy import Column, String, Numeric, Integer, ForeignKey, Boolean, DateTime, Text, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from appointly.models.base import Base


class Service(Base):
    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("duration > 0", name="ck_services_duration_positive"),
        CheckConstraint("price >= 0", name="ck_services_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    provider_id = Column(
        Integer,
        ForeignKey("providers.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)  # in minutes
    price = Column(Numeric(10, 2), nullable=False, default=0)
    requirements = Column(Text, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    provider = relationship("Provider", back_populates="services")

    def __repr__(self):
        return f"<Service(id={self.id}, name={self.name}, provider_id={self.provider_id})>"

    def to_summary(self):
        """Short form embedded in appointment responses"""
        return {
            "id": self.id,
            "name": self.name,
            "duration": self.duration,
            "price": float(self.price) if self.price is not None else None,
        }

    def to_dict(self):
        """Convert to dictionary for API responses"""
        return {
            **self.to_summary(),
            "description": self.description,
            "requirements": self.requirements,
            "is_active": self.is_active,
        }
