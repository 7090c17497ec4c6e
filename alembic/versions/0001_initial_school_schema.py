"""Initial school management schema

Revision ID: a1c4e7f20b01
Revises:
Create Date: 2026-10-16 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e7f20b01'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create tenancy, RBAC, student, project and school configuration tables."""
    # --- Tenancy & accounts ---
    op.create_table(
        'schools',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(150), nullable=False, index=True),
        sa.Column('short_name', sa.String(10), nullable=True),
        sa.Column('address', sa.String(255), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('established_year', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('username', sa.String(50), nullable=False, unique=True, index=True),
        sa.Column('email', sa.String(255), nullable=True, unique=True, index=True),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(50), nullable=False),
        sa.Column('last_name', sa.String(50), nullable=False),
        sa.Column('role', sa.String(30), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('school_id', sa.Uuid(), sa.ForeignKey('schools.id'), nullable=True, index=True),
        *_timestamps(),
    )

    # --- RBAC ---
    op.create_table(
        'roles',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(128), nullable=False, unique=True, index=True),
        sa.Column('description', sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'permissions',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(128), nullable=False, unique=True, index=True),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('resource', sa.String(64), nullable=False, index=True),
        sa.Column('action', sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'role_permissions',
        sa.Column('role_id', sa.Uuid(), sa.ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('permission_id', sa.Uuid(), sa.ForeignKey('permissions.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        'user_roles',
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role_id', sa.Uuid(), sa.ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    # --- Students ---
    op.create_table(
        'students',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True, index=True),
        sa.Column('school_id', sa.Uuid(), sa.ForeignKey('schools.id'), nullable=False, index=True),
        sa.Column('grade_level', sa.String(50), nullable=True, index=True),
        sa.Column('class_id', sa.Uuid(), nullable=True, index=True),
        sa.Column('enrollment_date', sa.Date(), nullable=False),
        sa.Column('student_number', sa.String(50), nullable=False, unique=True, index=True),
        sa.Column('guardian_info', sa.JSON(), nullable=True),
        sa.Column('health_info', sa.JSON(), nullable=True),
        sa.Column('previous_school', sa.JSON(), nullable=True),
        sa.Column('enrollment_notes', sa.Text(), nullable=True),
        sa.Column('active_status', sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    # --- Projects ---
    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(200), nullable=False, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('assigned_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, index=True),
        sa.Column('difficulty', sa.String(20), nullable=False),
        sa.Column('max_points', sa.Integer(), nullable=True),
        sa.Column('is_group_project', sa.Boolean(), nullable=False),
        sa.Column('subject_id', sa.Uuid(), nullable=True, index=True),
        sa.Column('class_id', sa.Uuid(), nullable=True, index=True),
        sa.Column('teacher_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('school_id', sa.Uuid(), sa.ForeignKey('schools.id'), nullable=False, index=True),
        sa.Column('created_by_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('modified_by_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        'project_grades',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('project_id', sa.Uuid(), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('student_id', sa.Uuid(), sa.ForeignKey('students.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('grader_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('max_score', sa.Float(), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('submission_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('graded_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('project_id', 'student_id', name='uq_project_grades_project_student'),
    )
    op.create_table(
        'project_feedback',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('project_id', sa.Uuid(), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('author_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('parent_id', sa.Uuid(), sa.ForeignKey('project_feedback.id'), nullable=True, index=True),
        sa.Column('status', sa.String(20), nullable=False, index=True),
        sa.Column('is_private', sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'project_files',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('project_id', sa.Uuid(), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('filename', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('file_type', sa.String(100), nullable=False),
        sa.Column('file_path', sa.String(500), nullable=False),
        sa.Column('uploaded_by_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('file_url', sa.String(500), nullable=True),
        sa.Column('thumbnail_url', sa.String(500), nullable=True),
        sa.Column('download_count', sa.Integer(), nullable=False),
        *_timestamps(),
    )

    # --- School configuration ---
    op.create_table(
        'blocks',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('school_id', sa.Uuid(), sa.ForeignKey('schools.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('number_of_classrooms', sa.Integer(), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('year_built', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, index=True),
        *_timestamps(),
    )
    op.create_table(
        'classrooms',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('room_type', sa.String(30), nullable=False, index=True),
        sa.Column('max_students', sa.Integer(), nullable=False),
        sa.Column('block_id', sa.Uuid(), sa.ForeignKey('blocks.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('school_id', sa.Uuid(), sa.ForeignKey('schools.id'), nullable=False, index=True),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('floor', sa.Integer(), nullable=True),
        sa.Column('features', sa.JSON(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, index=True),
        *_timestamps(),
    )
    op.create_table(
        'departments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('code', sa.String(20), nullable=True, unique=True, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('head_of_department_id', sa.Uuid(), sa.ForeignKey('users.id'), nullable=True, index=True),
        sa.Column('contact_email', sa.String(255), nullable=True),
        sa.Column('phone_number', sa.String(30), nullable=True),
        sa.Column('faculty_count', sa.Integer(), nullable=True),
        sa.Column('student_count', sa.Integer(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('budget', sa.Numeric(14, 2), nullable=True),
        sa.Column('school_id', sa.Uuid(), sa.ForeignKey('schools.id'), nullable=False, index=True),
        sa.Column('is_default', sa.Boolean(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    for table in (
        'departments', 'classrooms', 'blocks',
        'project_files', 'project_feedback', 'project_grades', 'projects',
        'students', 'user_roles', 'role_permissions', 'permissions', 'roles',
        'users', 'schools',
    ):
        op.drop_table(table)
