"""Schema constraints — the test store enforces foreign keys and ON DELETE actions.

Invariants:
    - Rows pointing at a missing parent are rejected
    - Deleting a project row directly cascades to memberships and submissions
    - Deleting a user row directly nulls reviewer_id on their ledger entries
"""

from uuid import UUID, uuid4

import pytest
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from codereview.models.project import Project
from codereview.models.project_member import ProjectMember
from codereview.models.review import Review
from codereview.models.submission import Submission
from codereview.models.user import User

from tests.services.helpers import headers_for


async def test_orphan_project_rejected(test_db):
    test_db.add(Project(name="Orphan", created_by=uuid4()))
    with pytest.raises(IntegrityError):
        await test_db.commit()
    await test_db.rollback()


async def test_orphan_submission_rejected(test_db, owner):
    test_db.add(Submission(project_id=uuid4(), user_id=owner.user_id, code="x"))
    with pytest.raises(IntegrityError):
        await test_db.commit()
    await test_db.rollback()


async def test_project_row_delete_cascades(client, project, submission, test_db):
    project_id = UUID(project["id"])
    await test_db.execute(delete(Project).where(Project.id == project_id))
    await test_db.commit()

    assert await test_db.scalar(
        select(func.count(ProjectMember.id)).where(ProjectMember.project_id == project_id),
    ) == 0
    assert await test_db.scalar(select(func.count(Submission.id))) == 0


async def test_user_row_delete_nulls_reviewer(client, submission, reviewer, test_db):
    decided = await client.post(
        f"/api/v1/submissions/{submission['id']}/approve",
        headers=headers_for(reviewer),
    )
    review_id = UUID(decided.json()["review"]["id"])

    await test_db.execute(delete(User).where(User.id == reviewer.user_id))
    await test_db.commit()

    reviewer_id = await test_db.scalar(
        select(Review.reviewer_id).where(Review.id == review_id),
    )
    assert reviewer_id is None
    assert await test_db.scalar(select(func.count(Review.id))) == 1
