# belajarshafa/models/organization.py
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from belajarshafa.db.base import Base
from belajarshafa.models.associations import organization_managers, organization_members


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    logo_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    managers = relationship(
        "User", secondary=organization_managers, back_populates="managed_orgs"
    )
    members = relationship(
        "User", secondary=organization_members, back_populates="member_orgs"
    )
    classes = relationship("Class", back_populates="organization")
