# appointly/models/provider.py
"""
Provider Model - the tenant that owns availability, services, clients and appointments
"""
from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from appointly.models.base import Base


class Provider(Base):
    __tablename__ = "providers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    business_name = Column(String(200), nullable=True)
    phone = Column(String(30), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    availability_rules = relationship(
        "AvailabilityRule", back_populates="provider", cascade="all, delete-orphan"
    )
    services = relationship("Service", back_populates="provider", cascade="all, delete-orphan")
    clients = relationship("Client", back_populates="provider", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Provider(id={self.id}, name={self.name})>"
