# /school-backend/app/db/models/rbac_models.py

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Uuid
from sqlalchemy.orm import relationship

from ..base_class import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow
from .school_user_models import user_roles

role_permissions = Table(
    "role_permissions",
    Base.metadata,
    Column("role_id", Uuid, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    Column("permission_id", Uuid, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", DateTime(timezone=True), default=utcnow, nullable=False),
)


class Role(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "roles"

    name = Column(String(128), unique=True, index=True, nullable=False)
    description = Column(String(255), nullable=True)

    permissions = relationship("Permission", secondary=role_permissions, back_populates="roles")
    users = relationship("User", secondary=user_roles, back_populates="roles")


class Permission(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A single (resource, action) grant, e.g. ("projectGrade", "update")."""
    __tablename__ = "permissions"

    name = Column(String(128), unique=True, index=True, nullable=False)
    description = Column(String(255), nullable=True)
    resource = Column(String(64), nullable=False, index=True)
    action = Column(String(20), nullable=False)

    roles = relationship("Role", secondary=role_permissions, back_populates="permissions")
