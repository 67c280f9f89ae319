# coursehub/db/base.py
from sqlalchemy.orm import declarative_base

Base = declarative_base()

from coursehub.models.user import User  # noqa
from coursehub.models.category import Category  # noqa
from coursehub.models.training import Training  # noqa
from coursehub.models.training_schedule import TrainingSchedule  # noqa
from coursehub.models.enrollment import Enrollment  # noqa
from coursehub.models.review import Review  # noqa
