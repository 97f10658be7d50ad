# appointly/models/client.py
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from appointly.models.base import Base


class Client(Base):
    """End customer of a provider; created implicitly by public bookings"""
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    provider_id = Column(
        Integer,
        ForeignKey("providers.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(30), nullable=False)
    whatsapp = Column(String(30), nullable=True)
    status = Column(String(20), nullable=False, default="active")  # active, inactive
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    provider = relationship("Provider", back_populates="clients")

    def __repr__(self):
        return f"<Client(id={self.id}, email={self.email}, provider_id={self.provider_id})>"

    def to_summary(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
        }
