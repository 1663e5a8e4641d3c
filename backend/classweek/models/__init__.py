from classweek.models.course import Course  # noqa: F401
from classweek.models.enrollment import Enrollment  # noqa: F401
from classweek.models.schedule_day_lock import ScheduleDayLock  # noqa: F401
from classweek.models.teacher import Teacher  # noqa: F401
from classweek.models.teaching_session import SessionType, TeachingSession  # noqa: F401
from classweek.models.user import User, UserRole  # noqa: F401
