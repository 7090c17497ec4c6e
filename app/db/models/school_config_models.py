# /school-backend/app/db/models/school_config_models.py

"""
SQLAlchemy models for the physical and organisational layout of a school:
buildings (`Block`), rooms inside them (`Classroom`) and `Department`s.
"""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from ..base_class import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Block(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "blocks"

    school_id = Column(Uuid, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    number_of_classrooms = Column(Integer, nullable=False)
    details = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    year_built = Column(Integer, nullable=True)
    status = Column(String(20), default="active", nullable=False, index=True)

    school = relationship("School", back_populates="blocks")
    classrooms = relationship("Classroom", back_populates="block", cascade="all, delete")


class Classroom(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "classrooms"

    name = Column(String(100), nullable=False)
    room_type = Column(String(30), default="standard", nullable=False, index=True)
    max_students = Column(Integer, nullable=False)
    block_id = Column(Uuid, ForeignKey("blocks.id", ondelete="CASCADE"), nullable=False, index=True)
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=False, index=True)
    details = Column(Text, nullable=True)
    floor = Column(Integer, nullable=True)
    features = Column(JSON, nullable=True)
    status = Column(String(20), default="active", nullable=False, index=True)

    block = relationship("Block", back_populates="classrooms")


class Department(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "departments"

    name = Column(String(150), nullable=False)
    code = Column(String(20), unique=True, index=True, nullable=True)
    description = Column(Text, nullable=True)
    head_of_department_id = Column(Uuid, ForeignKey("users.id"), nullable=True, index=True)
    contact_email = Column(String(255), nullable=True)
    phone_number = Column(String(30), nullable=True)
    faculty_count = Column(Integer, nullable=True)
    student_count = Column(Integer, nullable=True)
    location = Column(String(255), nullable=True)
    budget = Column(Numeric(14, 2, asdecimal=False), nullable=True)
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=False, index=True)
    is_default = Column(Boolean, default=False, nullable=False)
