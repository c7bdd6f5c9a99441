"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Project is the aggregate root for memberships and submissions;
      Submission is the aggregate root for reviews and comments

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from codereview.models.user import User  # noqa: F401
from codereview.models.project import Project  # noqa: F401
from codereview.models.project_member import ProjectMember  # noqa: F401
from codereview.models.submission import Submission  # noqa: F401
from codereview.models.review import Review  # noqa: F401
from codereview.models.comment import Comment  # noqa: F401
