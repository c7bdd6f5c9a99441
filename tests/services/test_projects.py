"""Membership Registry — project CRUD and membership over HTTP.

Invariants:
    - Any identity may create a project and becomes its owner
    - Update, delete, and member management are owner-only (403 otherwise)
    - Adding the same member twice is a 409 conflict
    - Deleting a project removes its submissions
"""

from uuid import uuid4

from sqlalchemy import func, select

from codereview.core.domain_types import Identity, Role
from codereview.models.project import Project
from codereview.models.project_member import ProjectMember
from codereview.models.submission import Submission

from tests.services.helpers import headers_for


async def test_create_project_sets_owner(client, owner):
    res = await client.post(
        "/api/v1/projects", json={"name": "Core"}, headers=headers_for(owner),
    )
    assert res.status_code == 201
    body = res.json()
    assert body["created_by"] == str(owner.user_id)
    assert body["description"] is None


async def test_create_project_requires_identity(client):
    res = await client.post("/api/v1/projects", json={"name": "Core"})
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"


async def test_unauthenticated_beats_not_found(client):
    res = await client.get(f"/api/v1/projects/{uuid4()}")
    assert res.status_code == 401


async def test_get_unknown_project_is_404(client, owner):
    res = await client.get(f"/api/v1/projects/{uuid4()}", headers=headers_for(owner))
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_update_project_owner_only(client, project, owner, member):
    res = await client.put(
        f"/api/v1/projects/{project['id']}",
        json={"name": "Renamed"},
        headers=headers_for(member),
    )
    assert res.status_code == 403

    res = await client.put(
        f"/api/v1/projects/{project['id']}",
        json={"name": "Renamed"},
        headers=headers_for(owner),
    )
    assert res.status_code == 200
    assert res.json()["name"] == "Renamed"
    assert res.json()["description"] == "Billing service"


async def test_mine_and_memberships(client, project, owner, member):
    mine = await client.get("/api/v1/projects/mine", headers=headers_for(owner))
    assert [p["id"] for p in mine.json()] == [project["id"]]

    joined = await client.get("/api/v1/projects/memberships", headers=headers_for(member))
    assert [p["id"] for p in joined.json()] == [project["id"]]

    none = await client.get("/api/v1/projects/memberships", headers=headers_for(owner))
    assert none.json() == []


async def test_list_members(client, project, owner, member):
    res = await client.get(
        f"/api/v1/projects/{project['id']}/members", headers=headers_for(owner),
    )
    assert res.status_code == 200
    assert [m["user_id"] for m in res.json()] == [str(member.user_id)]


async def test_duplicate_member_is_conflict(client, project, owner, member, test_db):
    res = await client.post(
        f"/api/v1/projects/{project['id']}/members",
        json={"user_id": str(member.user_id)},
        headers=headers_for(owner),
    )
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"

    count = await test_db.scalar(
        select(func.count(ProjectMember.id))
        .where(ProjectMember.user_id == member.user_id),
    )
    assert count == 1


async def test_owner_cannot_be_added_as_member(client, project, owner):
    res = await client.post(
        f"/api/v1/projects/{project['id']}/members",
        json={"user_id": str(owner.user_id)},
        headers=headers_for(owner),
    )
    assert res.status_code == 409


async def test_only_owner_adds_members(client, project, member, outsider):
    res = await client.post(
        f"/api/v1/projects/{project['id']}/members",
        json={"user_id": str(outsider.user_id)},
        headers=headers_for(member),
    )
    assert res.status_code == 403


async def test_add_unknown_user_is_404(client, project, owner):
    res = await client.post(
        f"/api/v1/projects/{project['id']}/members",
        json={"user_id": str(uuid4())},
        headers=headers_for(owner),
    )
    assert res.status_code == 404


async def test_remove_member(client, project, owner, member):
    url = f"/api/v1/projects/{project['id']}/members/{member.user_id}"
    res = await client.delete(url, headers=headers_for(owner))
    assert res.status_code == 200

    again = await client.delete(url, headers=headers_for(owner))
    assert again.status_code == 404


async def test_removed_member_can_no_longer_submit(client, project, owner, member):
    await client.delete(
        f"/api/v1/projects/{project['id']}/members/{member.user_id}",
        headers=headers_for(owner),
    )
    res = await client.post(
        "/api/v1/submissions",
        json={"project_id": project["id"], "code": "print(1)"},
        headers=headers_for(member),
    )
    assert res.status_code == 403


async def test_delete_project_cascades(client, project, submission, owner, member, test_db):
    res = await client.delete(
        f"/api/v1/projects/{project['id']}", headers=headers_for(member),
    )
    assert res.status_code == 403

    res = await client.delete(
        f"/api/v1/projects/{project['id']}", headers=headers_for(owner),
    )
    assert res.status_code == 200

    res = await client.get(
        f"/api/v1/submissions/{submission['id']}", headers=headers_for(owner),
    )
    assert res.status_code == 404
    remaining = await test_db.scalar(select(func.count(Submission.id)))
    assert remaining == 0


async def test_project_submissions_listing(client, project, submission, outsider):
    res = await client.get(
        f"/api/v1/projects/{project['id']}/submissions", headers=headers_for(outsider),
    )
    assert res.status_code == 200
    assert [s["id"] for s in res.json()] == [submission["id"]]


async def test_create_project_without_profile_is_401(client, unregistered_reviewer, test_db):
    res = await client.post(
        "/api/v1/projects", json={"name": "Core"},
        headers=headers_for(unregistered_reviewer),
    )
    assert res.status_code == 401
    assert res.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"
    assert await test_db.scalar(select(func.count(Project.id))) == 0


async def test_create_project_after_deleting_own_profile_is_401(client):
    who = Identity(user_id=uuid4(), role=Role.SUBMITTER)
    res = await client.post(
        "/api/v1/users",
        json={"name": "Short Lived", "email": "short@example.com"},
        headers=headers_for(who),
    )
    assert res.status_code == 201
    res = await client.delete(f"/api/v1/users/{who.user_id}", headers=headers_for(who))
    assert res.status_code == 200

    res = await client.post(
        "/api/v1/projects", json={"name": "P"}, headers=headers_for(who),
    )
    assert res.status_code == 401


async def test_update_project_rejects_blank_name(client, project, owner):
    res = await client.put(
        f"/api/v1/projects/{project['id']}",
        json={"name": "   "},
        headers=headers_for(owner),
    )
    assert res.status_code == 400

    current = await client.get(
        f"/api/v1/projects/{project['id']}", headers=headers_for(owner),
    )
    assert current.json()["name"] == "Payments"


async def test_update_project_strips_name(client, project, owner):
    res = await client.put(
        f"/api/v1/projects/{project['id']}",
        json={"name": "  Ledger  "},
        headers=headers_for(owner),
    )
    assert res.json()["name"] == "Ledger"
