"""Review Decision Engine — ledger entries, status coupling, atomicity, corrections.

Invariants:
    - A decision appends one Review and moves Submission.status in one transaction
    - approved → approved, changes_requested → under_review; latest decision wins
    - Only the project owner or a reviewer may decide
    - A failed status write leaves neither the Review nor the status change behind
    - Correcting an older entry never overrides the latest decision's status
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest
from sqlalchemy import func, select

from codereview.core.domain_types import Decision
from codereview.models.review import Review
from codereview.models.submission import Submission
from codereview.services.review_decisions import ReviewDecisionEngine
from codereview.services.submission_lifecycle import SubmissionLifecycleManager

from tests.services.helpers import headers_for


async def test_approve_records_review_and_status(client, submission, reviewer):
    res = await client.post(
        f"/api/v1/submissions/{submission['id']}/reviews",
        json={"decision": "approved", "comment": "LGTM"},
        headers=headers_for(reviewer),
    )
    assert res.status_code == 200
    body = res.json()
    assert body["review"]["decision"] == "approved"
    assert body["review"]["comment"] == "LGTM"
    assert body["review"]["reviewer_id"] == str(reviewer.user_id)
    assert body["submission"]["id"] == submission["id"]
    assert body["submission"]["status"] == "approved"


async def test_request_changes_moves_to_under_review(client, submission, reviewer):
    res = await client.post(
        f"/api/v1/submissions/{submission['id']}/request-changes",
        json={"comment": "rename add()"},
        headers=headers_for(reviewer),
    )
    assert res.json()["submission"]["status"] == "under_review"
    assert res.json()["review"]["decision"] == "changes_requested"


async def test_shortcut_without_body_uses_empty_comment(client, submission, reviewer):
    res = await client.post(
        f"/api/v1/submissions/{submission['id']}/approve",
        headers=headers_for(reviewer),
    )
    assert res.status_code == 200
    assert res.json()["review"]["comment"] == ""


async def test_owner_may_decide(client, submission, owner):
    res = await client.post(
        f"/api/v1/submissions/{submission['id']}/approve",
        headers=headers_for(owner),
    )
    assert res.status_code == 200


async def test_submitter_cannot_decide(client, submission, member, test_db):
    res = await client.post(
        f"/api/v1/submissions/{submission['id']}/approve",
        headers=headers_for(member),
    )
    assert res.status_code == 403
    assert await test_db.scalar(select(func.count(Review.id))) == 0


async def test_decision_on_unknown_submission_is_404(client, reviewer):
    res = await client.post(
        f"/api/v1/submissions/{uuid4()}/approve", headers=headers_for(reviewer),
    )
    assert res.status_code == 404


async def test_invalid_decision_is_400(client, submission, reviewer):
    res = await client.post(
        f"/api/v1/submissions/{submission['id']}/reviews",
        json={"decision": "rejected"},
        headers=headers_for(reviewer),
    )
    assert res.status_code == 400


async def test_two_reviewers_latest_decision_wins(
    client, submission, reviewer, second_reviewer,
):
    await client.post(
        f"/api/v1/submissions/{submission['id']}/approve",
        headers=headers_for(reviewer),
    )
    last = await client.post(
        f"/api/v1/submissions/{submission['id']}/request-changes",
        headers=headers_for(second_reviewer),
    )
    assert last.json()["submission"]["status"] == "under_review"

    ledger = await client.get(
        f"/api/v1/submissions/{submission['id']}/reviews",
        headers=headers_for(reviewer),
    )
    decisions = [r["decision"] for r in ledger.json()]
    assert decisions == ["approved", "changes_requested"]

    latest = await client.get(
        f"/api/v1/submissions/{submission['id']}/reviews/latest",
        headers=headers_for(reviewer),
    )
    assert latest.json()["reviewer_id"] == str(second_reviewer.user_id)


async def test_latest_is_null_without_reviews(client, submission, reviewer):
    res = await client.get(
        f"/api/v1/submissions/{submission['id']}/reviews/latest",
        headers=headers_for(reviewer),
    )
    assert res.status_code == 200
    assert res.json() is None


async def test_failed_status_write_rolls_back_review(
    test_db, submission, reviewer, monkeypatch,
):
    async def _explode(self, submission, decision):
        raise RuntimeError("status write failed")

    monkeypatch.setattr(SubmissionLifecycleManager, "apply_decision", _explode)
    submission_id = UUID(submission["id"])

    with pytest.raises(RuntimeError):
        await ReviewDecisionEngine(test_db).submit_decision(
            reviewer, submission_id, Decision.APPROVED, "LGTM",
        )

    assert await test_db.scalar(select(func.count(Review.id))) == 0
    status = await test_db.scalar(
        select(Submission.status).where(Submission.id == submission_id),
    )
    assert status == "pending"


async def test_reviewer_lists_own_reviews_and_stats(
    client, submission, reviewer, second_reviewer,
):
    sid = submission["id"]
    await client.post(f"/api/v1/submissions/{sid}/approve", headers=headers_for(reviewer))
    await client.post(
        f"/api/v1/submissions/{sid}/request-changes", headers=headers_for(reviewer),
    )
    await client.post(
        f"/api/v1/submissions/{sid}/approve", headers=headers_for(second_reviewer),
    )

    mine = await client.get("/api/v1/reviews/mine", headers=headers_for(reviewer))
    assert len(mine.json()) == 2

    stats = await client.get(
        f"/api/v1/reviews/stats/{reviewer.user_id}", headers=headers_for(second_reviewer),
    )
    assert stats.json() == {
        "reviewer_id": str(reviewer.user_id),
        "total_reviews": 2,
        "approved_count": 1,
        "changes_requested_count": 1,
    }


async def test_stats_for_reviewer_without_reviews(client, reviewer):
    res = await client.get(
        f"/api/v1/reviews/stats/{reviewer.user_id}", headers=headers_for(reviewer),
    )
    assert res.json()["total_reviews"] == 0


async def test_correct_latest_decision_updates_status(client, submission, reviewer):
    decided = await client.post(
        f"/api/v1/submissions/{submission['id']}/approve",
        headers=headers_for(reviewer),
    )
    review_id = decided.json()["review"]["id"]

    res = await client.put(
        f"/api/v1/reviews/{review_id}",
        json={"decision": "changes_requested", "comment": "missed a bug"},
        headers=headers_for(reviewer),
    )
    assert res.status_code == 200
    assert res.json()["review"]["decision"] == "changes_requested"
    assert res.json()["review"]["comment"] == "missed a bug"
    assert res.json()["submission"]["status"] == "under_review"


async def test_correct_older_decision_keeps_latest_status(
    test_db, submission, reviewer, second_reviewer,
):
    submission_id = UUID(submission["id"])
    earlier = datetime.now(timezone.utc) - timedelta(minutes=5)
    older = Review(
        submission_id=submission_id, reviewer_id=reviewer.user_id,
        decision="changes_requested", comment="", created_at=earlier,
    )
    newer = Review(
        submission_id=submission_id, reviewer_id=second_reviewer.user_id,
        decision="approved", comment="", created_at=earlier + timedelta(minutes=1),
    )
    test_db.add_all([older, newer])
    row = await test_db.get(Submission, submission_id)
    row.status = "approved"
    await test_db.commit()

    outcome = await ReviewDecisionEngine(test_db).correct_decision(
        reviewer, older.id, Decision.APPROVED,
    )
    assert outcome.review.decision == "approved"
    assert outcome.submission.status == "approved"

    outcome = await ReviewDecisionEngine(test_db).correct_decision(
        reviewer, older.id, Decision.CHANGES_REQUESTED,
    )
    assert outcome.submission.status == "approved"


async def test_only_original_reviewer_corrects(
    client, submission, reviewer, second_reviewer, owner,
):
    decided = await client.post(
        f"/api/v1/submissions/{submission['id']}/approve",
        headers=headers_for(reviewer),
    )
    review_id = decided.json()["review"]["id"]
    for intruder in (second_reviewer, owner):
        res = await client.put(
            f"/api/v1/reviews/{review_id}",
            json={"decision": "changes_requested"},
            headers=headers_for(intruder),
        )
        assert res.status_code == 403


async def test_get_unknown_review_is_404(client, reviewer):
    res = await client.get(f"/api/v1/reviews/{uuid4()}", headers=headers_for(reviewer))
    assert res.status_code == 404


async def test_decision_without_profile_is_401(
    client, submission, unregistered_reviewer, test_db,
):
    res = await client.post(
        f"/api/v1/submissions/{submission['id']}/approve",
        headers=headers_for(unregistered_reviewer),
    )
    assert res.status_code == 401
    assert await test_db.scalar(select(func.count(Review.id))) == 0
    current = await client.get(
        f"/api/v1/submissions/{submission['id']}",
        headers=headers_for(unregistered_reviewer),
    )
    assert current.json()["status"] == "pending"
