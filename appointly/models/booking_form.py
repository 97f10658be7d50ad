# appointly/models/booking_form.py
"""
BookingForm Model - presentation settings for a provider's public booking page
"""
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.sql import func
from appointly.models.base import Base


class BookingForm(Base):
    __tablename__ = "booking_forms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    provider_id = Column(
        Integer,
        ForeignKey("providers.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )

    title = Column(String(200), nullable=False, default="Book Your Appointment")
    description = Column(Text, nullable=False, default="Schedule your appointment with us today.")
    background_color = Column(String(20), nullable=False, default="#6366F1")
    button_color = Column(String(20), nullable=False, default="#10B981")
    header_image = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "provider_id": self.provider_id,
            "title": self.title,
            "description": self.description,
            "background_color": self.background_color,
            "button_color": self.button_color,
            "header_image": self.header_image,
            "is_active": self.is_active,
        }
