# /school-backend/app/db/models/project_models.py

"""
This module defines the SQLAlchemy ORM models for projects and everything
attached to a project: grades, threaded feedback and uploaded files.

Deleting a `Project` through the ORM cascades to all of its children.
"""

from sqlalchemy import (
    Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text,
    UniqueConstraint, Uuid,
)
from sqlalchemy.orm import relationship

from ..base_class import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow


class Project(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "projects"

    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    instructions = Column(Text, nullable=True)
    due_date = Column(Date, nullable=True)
    assigned_date = Column(Date, nullable=True)
    status = Column(String(20), default="draft", nullable=False, index=True)
    difficulty = Column(String(20), default="medium", nullable=False)
    max_points = Column(Integer, nullable=True)
    is_group_project = Column(Boolean, default=False, nullable=False)

    # Subjects and classes are catalogued outside this service; only their ids are kept.
    subject_id = Column(Uuid, nullable=True, index=True)
    class_id = Column(Uuid, nullable=True, index=True)
    teacher_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    school_id = Column(Uuid, ForeignKey("schools.id"), nullable=False, index=True)
    created_by_id = Column(Uuid, ForeignKey("users.id"), nullable=True)
    modified_by_id = Column(Uuid, ForeignKey("users.id"), nullable=True)

    grades = relationship("ProjectGrade", back_populates="project", cascade="all, delete")
    feedback = relationship("ProjectFeedback", back_populates="project", cascade="all, delete")
    files = relationship("ProjectFile", back_populates="project", cascade="all, delete")


class ProjectGrade(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A student's grade on a project. At most one grade per (project, student)."""
    __tablename__ = "project_grades"
    __table_args__ = (
        UniqueConstraint("project_id", "student_id", name="uq_project_grades_project_student"),
    )

    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    grader_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    score = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False, default=100.0)
    comments = Column(Text, nullable=True)
    submission_date = Column(DateTime(timezone=True), nullable=True)
    graded_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    status = Column(String(20), default="graded", nullable=False)

    project = relationship("Project", back_populates="grades")
    student = relationship("Student", back_populates="grades")


class ProjectFeedback(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """
    A feedback entry on a project. Entries with a `parent_id` are replies,
    forming a one-level-deep thread under the parent. Rows are never removed;
    deletion sets `status` to "deleted".
    """
    __tablename__ = "project_feedback"

    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    type = Column(String(20), default="comment", nullable=False)
    author_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    parent_id = Column(Uuid, ForeignKey("project_feedback.id"), nullable=True, index=True)
    status = Column(String(20), default="active", nullable=False, index=True)
    is_private = Column(Boolean, default=False, nullable=False)

    project = relationship("Project", back_populates="feedback")
    parent = relationship("ProjectFeedback", remote_side="ProjectFeedback.id", back_populates="replies")
    replies = relationship("ProjectFeedback", back_populates="parent")


class ProjectFile(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "project_files"

    project_id = Column(Uuid, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    file_size = Column(Integer, nullable=False)
    file_type = Column(String(100), nullable=False)
    file_path = Column(String(500), nullable=False)
    uploaded_by_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    file_url = Column(String(500), nullable=True)
    thumbnail_url = Column(String(500), nullable=True)
    download_count = Column(Integer, default=0, nullable=False)

    project = relationship("Project", back_populates="files")
