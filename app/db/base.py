# /school-backend/app/db/base.py

# This file acts as a central registry for all our SQLAlchemy models.
# By importing them all here, we ensure that the Base class knows about them
# when Alembic runs its auto-generation scan and when `create_all` runs.

from .base_class import Base  # noqa: F401

from .models.school_user_models import School, User, user_roles  # noqa: F401
from .models.rbac_models import Role, Permission, role_permissions  # noqa: F401
from .models.student_models import Student  # noqa: F401
from .models.project_models import Project, ProjectGrade, ProjectFeedback, ProjectFile  # noqa: F401
from .models.school_config_models import Block, Classroom, Department  # noqa: F401
