# /school-backend/app/services/database_helpers/project_repository_sql.py

"""
SQL repositories for the Project table and its children: grades, feedback
and files.
"""

from typing import List, Optional, Tuple

from sqlalchemy import or_

from app.db.models.project_models import Project, ProjectFeedback, ProjectFile, ProjectGrade
from app.models.project_feedback_model import ProjectFeedbackListQuery
from app.models.project_file_model import ProjectFileListQuery
from app.models.project_grade_model import ProjectGradeListQuery
from app.models.project_model import ProjectBulkDelete, ProjectListQuery
from .base_repository_sql import BaseRepositorySQL


# --- PROJECT ---

class ProjectRepositorySQL(BaseRepositorySQL):
    model = Project
    entity_name = "project"

    def find_by_title(self, title: str, teacher_id, class_id=None, exclude_id=None) -> Optional[Project]:
        """Finds a project with the same title for the same teacher (and class, when given)."""
        with self._guard("checking project title", teacher_id=teacher_id):
            q = self.db.query(Project).filter(Project.title == title, Project.teacher_id == teacher_id)
            if class_id:
                q = q.filter(Project.class_id == class_id)
            if exclude_id:
                q = q.filter(Project.id != exclude_id)
            return q.first()

    def get_by_field(self, field: str, value) -> List[Project]:
        with self._guard(f"fetching projects by {field}", value=value):
            return (
                self.db.query(Project)
                .filter(getattr(Project, field) == value)
                .order_by(Project.due_date.is_(None), Project.due_date, Project.created_at)
                .all()
            )

    def find_for_bulk_delete(self, criteria: ProjectBulkDelete) -> List[Project]:
        with self._guard("selecting projects for deletion"):
            q = self.db.query(Project)
            if criteria.ids:
                q = q.filter(Project.id.in_(criteria.ids))
            for field in ("class_id", "subject_id", "teacher_id", "school_id"):
                value = getattr(criteria, field)
                if value:
                    q = q.filter(getattr(Project, field) == value)
            return q.all()

    def delete_many(self, projects: List[Project]) -> int:
        """Deletes through the ORM so grades, feedback and files cascade. Never commits."""
        with self._guard("bulk deleting projects", count=len(projects)):
            for project in projects:
                self.db.delete(project)
            self.db.flush()
            return len(projects)

    def list(self, query: ProjectListQuery) -> Tuple[List[Project], int]:
        with self._guard("listing projects"):
            q = self.db.query(Project)
            if query.search:
                term = f"%{query.search}%"
                q = q.filter(or_(Project.title.ilike(term), Project.description.ilike(term)))
            for field in ("class_id", "subject_id", "teacher_id", "school_id", "is_group_project"):
                value = getattr(query, field)
                if value is not None:
                    q = q.filter(getattr(Project, field) == value)
            if query.status:
                q = q.filter(Project.status == query.status.value)
            if query.difficulty:
                q = q.filter(Project.difficulty == query.difficulty.value)
            if query.due_date_from:
                q = q.filter(Project.due_date >= query.due_date_from)
            if query.due_date_to:
                q = q.filter(Project.due_date <= query.due_date_to)
            return self._paginate(q, query.page, query.limit, query.sort_by, query.sort_order)


# --- GRADES ---

class ProjectGradeRepositorySQL(BaseRepositorySQL):
    model = ProjectGrade
    entity_name = "project grade"

    def get_by_project(self, project_id) -> List[ProjectGrade]:
        with self._guard("fetching grades by project", project_id=project_id):
            return (
                self.db.query(ProjectGrade)
                .filter(ProjectGrade.project_id == project_id)
                .order_by(ProjectGrade.graded_date.desc())
                .all()
            )

    def get_by_student(self, student_id) -> List[ProjectGrade]:
        with self._guard("fetching grades by student", student_id=student_id):
            return (
                self.db.query(ProjectGrade)
                .filter(ProjectGrade.student_id == student_id)
                .order_by(ProjectGrade.graded_date.desc())
                .all()
            )

    def get_by_project_and_student(self, project_id, student_id) -> Optional[ProjectGrade]:
        with self._guard("fetching grade by project and student", project_id=project_id, student_id=student_id):
            return (
                self.db.query(ProjectGrade)
                .filter(ProjectGrade.project_id == project_id, ProjectGrade.student_id == student_id)
                .first()
            )

    def delete_by_project(self, project_id) -> int:
        """Single-statement delete of every grade of a project. Never commits."""
        with self._guard("bulk deleting grades", project_id=project_id):
            return (
                self.db.query(ProjectGrade)
                .filter(ProjectGrade.project_id == project_id)
                .delete(synchronize_session=False)
            )

    def list(self, query: ProjectGradeListQuery) -> Tuple[List[ProjectGrade], int]:
        with self._guard("listing grades"):
            q = self.db.query(ProjectGrade)
            for field in ("project_id", "student_id", "grader_id"):
                value = getattr(query, field)
                if value:
                    q = q.filter(getattr(ProjectGrade, field) == value)
            if query.status:
                q = q.filter(ProjectGrade.status == query.status.value)
            if query.min_score is not None:
                q = q.filter(ProjectGrade.score >= query.min_score)
            if query.max_score is not None:
                q = q.filter(ProjectGrade.score <= query.max_score)
            return self._paginate(q, query.page, query.limit, query.sort_by, query.sort_order)


# --- FEEDBACK ---

class ProjectFeedbackRepositorySQL(BaseRepositorySQL):
    model = ProjectFeedback
    entity_name = "project feedback"

    def get_top_level_by_project(self, project_id) -> List[ProjectFeedback]:
        with self._guard("fetching feedback by project", project_id=project_id):
            return (
                self.db.query(ProjectFeedback)
                .filter(
                    ProjectFeedback.project_id == project_id,
                    ProjectFeedback.parent_id.is_(None),
                    ProjectFeedback.status == "active",
                )
                .order_by(ProjectFeedback.created_at.desc())
                .all()
            )

    def get_by_author(self, author_id) -> List[ProjectFeedback]:
        with self._guard("fetching feedback by author", author_id=author_id):
            return (
                self.db.query(ProjectFeedback)
                .filter(ProjectFeedback.author_id == author_id, ProjectFeedback.status == "active")
                .order_by(ProjectFeedback.created_at.desc())
                .all()
            )

    def get_replies(self, parent_id) -> List[ProjectFeedback]:
        with self._guard("fetching feedback replies", parent_id=parent_id):
            return (
                self.db.query(ProjectFeedback)
                .filter(ProjectFeedback.parent_id == parent_id, ProjectFeedback.status == "active")
                .order_by(ProjectFeedback.created_at.asc())
                .all()
            )

    def get_active_by_project(self, project_id) -> List[ProjectFeedback]:
        with self._guard("fetching feedback by project", project_id=project_id):
            return (
                self.db.query(ProjectFeedback)
                .filter(ProjectFeedback.project_id == project_id, ProjectFeedback.status != "deleted")
                .all()
            )

    def soft_delete_by_project(self, project_id) -> int:
        """Single-statement soft delete of all feedback of a project. Never commits."""
        with self._guard("bulk deleting feedback", project_id=project_id):
            return (
                self.db.query(ProjectFeedback)
                .filter(ProjectFeedback.project_id == project_id, ProjectFeedback.status != "deleted")
                .update({ProjectFeedback.status: "deleted"}, synchronize_session=False)
            )

    def list(self, query: ProjectFeedbackListQuery) -> Tuple[List[ProjectFeedback], int]:
        with self._guard("listing feedback", project_id=query.project_id):
            q = self.db.query(ProjectFeedback).filter(
                ProjectFeedback.project_id == query.project_id,
                ProjectFeedback.status == query.status.value,
            )
            if query.author_id:
                q = q.filter(ProjectFeedback.author_id == query.author_id)
            if query.parent_id:
                q = q.filter(ProjectFeedback.parent_id == query.parent_id)
            if query.type:
                q = q.filter(ProjectFeedback.type == query.type.value)
            if query.search:
                q = q.filter(ProjectFeedback.content.ilike(f"%{query.search}%"))
            return self._paginate(q, query.page, query.limit, query.sort_by, query.sort_order)


# --- FILES ---

class ProjectFileRepositorySQL(BaseRepositorySQL):
    model = ProjectFile
    entity_name = "project file"

    def get_by_project(self, project_id) -> List[ProjectFile]:
        with self._guard("fetching files by project", project_id=project_id):
            return (
                self.db.query(ProjectFile)
                .filter(ProjectFile.project_id == project_id)
                .order_by(ProjectFile.created_at.desc())
                .all()
            )

    def delete_by_project(self, project_id) -> int:
        """Single-statement delete of every file row of a project. Never commits."""
        with self._guard("bulk deleting files", project_id=project_id):
            return (
                self.db.query(ProjectFile)
                .filter(ProjectFile.project_id == project_id)
                .delete(synchronize_session=False)
            )

    def increment_download_count(self, project_file: ProjectFile) -> ProjectFile:
        with self._guard("recording file download", id=project_file.id):
            project_file.download_count = ProjectFile.download_count + 1
            return self._save(project_file, commit=True)

    def list(self, query: ProjectFileListQuery) -> Tuple[List[ProjectFile], int]:
        with self._guard("listing files", project_id=query.project_id):
            q = self.db.query(ProjectFile).filter(ProjectFile.project_id == query.project_id)
            if query.search:
                q = q.filter(ProjectFile.filename.ilike(f"%{query.search}%"))
            if query.file_type:
                q = q.filter(ProjectFile.file_type == query.file_type)
            return self._paginate(q, query.page, query.limit, query.sort_by, query.sort_order)
