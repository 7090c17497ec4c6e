# /school-backend/app/db/models/student_models.py

"""
SQLAlchemy model for an enrolled student. A student is always backed by a
`User` account (one-to-one) and belongs to exactly one school.
"""

from sqlalchemy import JSON, Boolean, Column, Date, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from ..base_class import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Student(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "students"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=False, index=True)
    # Free-form level such as "Grade 7" or "Form 2"; drives student number generation.
    grade_level = Column(String(50), nullable=True, index=True)
    class_id = Column(Uuid, nullable=True, index=True)
    enrollment_date = Column(Date, nullable=False)
    student_number = Column(String(50), unique=True, index=True, nullable=False)
    guardian_info = Column(JSON, nullable=True)
    health_info = Column(JSON, nullable=True)
    previous_school = Column(JSON, nullable=True)
    enrollment_notes = Column(Text, nullable=True)
    active_status = Column(Boolean, default=True, nullable=False)

    user = relationship("User")
    school = relationship("School")
    grades = relationship("ProjectGrade", back_populates="student", cascade="all, delete")
