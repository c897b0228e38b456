# belajarshafa/models/__init__.py
from belajarshafa.models.associations import (  # noqa
    class_mentees,
    class_mentors,
    organization_managers,
    organization_members,
)
from belajarshafa.models.user import User, UserRole  # noqa
from belajarshafa.models.organization import Organization  # noqa
from belajarshafa.models.classroom import Class  # noqa
from belajarshafa.models.class_session import ClassSession  # noqa
from belajarshafa.models.attendance import Attendance  # noqa
from belajarshafa.models.category import Category  # noqa
from belajarshafa.models.course import Course  # noqa
from belajarshafa.models.topic import Topic  # noqa
from belajarshafa.models.material import Material  # noqa
from belajarshafa.models.enrollment import Enrollment  # noqa
from belajarshafa.models.progress import Progress  # noqa
