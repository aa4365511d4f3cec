# Declarative Base plus every model, so create_all() and relationship
# resolution see all tables before the database is initialized.
from ramplo.db.base_class import Base

from ramplo.db.models.user import User
from ramplo.db.models.profile import UserProfile
from ramplo.db.models.task import Task
from ramplo.db.models.progress import UserProgress, DailyConnections, DailyLoanActions
from ramplo.db.models.coaching import DealCoachSession
