# /school-backend/app/db/models/school_user_models.py

"""
This module defines the SQLAlchemy ORM models for the tenant (`School`) and
the people who log in (`User`). Almost every other table points back at one
of these two.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Table, Uuid
from sqlalchemy.orm import relationship

from ..base_class import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow

# Association table linking users to their RBAC roles.
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utcnow, nullable=False),
)


class School(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A school is the tenant boundary for users, students, projects and facilities."""
    __tablename__ = "schools"

    name = Column(String(150), nullable=False, index=True)
    short_name = Column(String(10), nullable=True)
    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)
    email = Column(String(255), nullable=True)
    established_year = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    users = relationship("User", back_populates="school")
    blocks = relationship("Block", back_populates="school", cascade="all, delete")


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    An authenticated account. The `role` column is the coarse-grained role used
    for school scoping (super_admin, admin, manager, teacher, student, user);
    fine-grained permissions come from the RBAC roles in `user_roles`.
    """
    __tablename__ = "users"

    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    role = Column(String(30), default="user", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=True, index=True)

    school = relationship("School", back_populates="users")
    roles = relationship("Role", secondary=user_roles, back_populates="users")
