# belajarshafa/models/user.py
from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from belajarshafa.db.base import Base
from belajarshafa.models.associations import (
    class_mentees,
    class_mentors,
    organization_managers,
    organization_members,
)
from belajarshafa.models.enums import Role


class UserRole(Base):
    __tablename__ = "user_roles"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role = Column(Enum(Role, native_enum=False, length=20), primary_key=True)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    avatar_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    role_links = relationship(
        "UserRole",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    managed_orgs = relationship(
        "Organization", secondary=organization_managers, back_populates="managers"
    )
    member_orgs = relationship(
        "Organization", secondary=organization_members, back_populates="members"
    )
    mentored_classes = relationship(
        "Class", secondary=class_mentors, back_populates="mentors"
    )
    joined_classes = relationship(
        "Class", secondary=class_mentees, back_populates="mentees"
    )
    enrollments = relationship(
        "Enrollment",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Enrollment.enrolled_at.desc()",
    )
    attendances = relationship(
        "Attendance",
        foreign_keys="Attendance.user_id",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def roles(self) -> list[Role]:
        order = list(Role)
        return sorted((link.role for link in self.role_links), key=order.index)

    @roles.setter
    def roles(self, values) -> None:
        wanted = {Role(v) for v in values}
        self.role_links = [link for link in self.role_links if link.role in wanted]
        current = {link.role for link in self.role_links}
        for role in sorted(wanted - current, key=list(Role).index):
            self.role_links.append(UserRole(role=role))

    def has_role(self, *roles: Role) -> bool:
        """True when the user holds at least one of ``roles``."""
        held = {link.role for link in self.role_links}
        return any(Role(r) in held for r in roles)
