# /school-backend/app/services/database_helpers/student_repository_sql.py

from typing import List, Optional, Tuple

import pandas as pd

from app.db.models.student_models import Student
from app.models.student_model import StudentListQuery
from .base_repository_sql import BaseRepositorySQL, rows_as_dataframe


class StudentRepositorySQL(BaseRepositorySQL):
    model = Student
    entity_name = "student"

    def get_by_user_id(self, user_id) -> Optional[Student]:
        with self._guard("fetching student by user", user_id=user_id):
            return self.db.query(Student).filter(Student.user_id == user_id).first()

    def get_by_student_number(self, student_number: str) -> Optional[Student]:
        with self._guard("fetching student by number", student_number=student_number):
            return self.db.query(Student).filter(Student.student_number == student_number).first()

    def count_by_school_and_grade(self, school_id, grade_level: Optional[str]) -> int:
        with self._guard("counting students", school_id=school_id):
            return (
                self.db.query(Student)
                .filter(Student.school_id == school_id, Student.grade_level == grade_level)
                .count()
            )

    def get_by_school(self, school_id) -> List[Student]:
        with self._guard("fetching students by school", school_id=school_id):
            return self.db.query(Student).filter(Student.school_id == school_id).order_by(Student.student_number).all()

    def get_by_class(self, class_id) -> List[Student]:
        with self._guard("fetching students by class", class_id=class_id):
            return self.db.query(Student).filter(Student.class_id == class_id).order_by(Student.student_number).all()

    def list(self, query: StudentListQuery) -> Tuple[List[Student], int]:
        with self._guard("listing students"):
            q = self.db.query(Student)
            if query.search:
                q = q.filter(Student.student_number.ilike(f"%{query.search}%"))
            if query.school_id:
                q = q.filter(Student.school_id == query.school_id)
            if query.class_id:
                q = q.filter(Student.class_id == query.class_id)
            if query.grade_level:
                q = q.filter(Student.grade_level == query.grade_level)
            if query.active_status is not None:
                q = q.filter(Student.active_status == query.active_status)
            return self._paginate(q, query.page, query.limit, query.sort_by, query.sort_order)

    def get_students_as_dataframe(self) -> pd.DataFrame:
        with self._guard("loading student statistics"):
            rows = self.db.query(Student).all()
            return rows_as_dataframe(rows, ["id", "school_id", "grade_level", "active_status"])
