"""
API tests for the user routes.
"""

import pytest
from fastapi import status

from models import ProjectRole
from tests.factories import ProjectFactory, persist
from tests.helpers import add_membership, add_task


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_me_requires_authentication(self, client):
        response = await client.get("/api/users/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["error_code"] == "AUTHENTICATION_REQUIRED"

    @pytest.mark.asyncio
    async def test_me_returns_profile_without_secrets(self, client, test_user, user_headers):
        response = await client.get("/api/users/me", headers=user_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["id"] == test_user.id
        assert data["email"] == test_user.email
        assert "password_hash" not in data
        assert "remember_token" not in data

    @pytest.mark.asyncio
    async def test_update_me_ignores_is_admin(self, client, user_headers):
        response = await client.put(
            "/api/users/me", json={"name": "Renamed", "is_admin": True}, headers=user_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["name"] == "Renamed"
        assert response.json()["data"]["is_admin"] is False

    @pytest.mark.asyncio
    async def test_update_me_email_conflict(self, client, test_user_2, user_headers):
        response = await client.put(
            "/api/users/me", json={"email": test_user_2.email}, headers=user_headers
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error_code"] == "EMAIL_ALREADY_TAKEN"


class TestRoleLookup:
    @pytest.mark.asyncio
    async def test_my_role(self, client, test_project, manager_membership, user_headers):
        response = await client.get(f"/api/users/me/projects/{test_project.id}/role", headers=user_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["role"] == "manager"

    @pytest.mark.asyncio
    async def test_not_part_of_project(self, client, test_project, user_headers):
        response = await client.get(f"/api/users/me/projects/{test_project.id}/role", headers=user_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"status": False, "message": "User is not part of this project."}

    @pytest.mark.asyncio
    async def test_admin_looks_up_other_user(
        self, client, test_project, test_user_2, developer_membership, admin_headers
    ):
        response = await client.get(
            f"/api/users/{test_user_2.id}/projects/{test_project.id}/role", headers=admin_headers
        )

        assert response.json()["data"] == {
            "project_id": test_project.id,
            "user_id": test_user_2.id,
            "role": "developer",
        }


class TestMyTasks:
    @pytest.mark.asyncio
    async def test_created_tasks(self, client, test_task, user_headers):
        response = await client.get("/api/users/me/tasks/created", headers=user_headers)

        assert [t["id"] for t in response.json()["data"]] == [test_task.id]

    @pytest.mark.asyncio
    async def test_project_tasks(self, test_db, client, test_project, test_task, test_user, user_2_headers):
        own = await add_task(test_db, test_project, test_user, test_user, "manager task")

        everything = await client.get("/api/users/me/tasks/projects", headers=user_2_headers)
        assigned = await client.get(
            "/api/users/me/tasks/projects", params={"assigned_only": "true"}, headers=user_2_headers
        )

        assert [t["id"] for t in everything.json()["data"]] == [test_task.id, own.id]
        assert [t["id"] for t in assigned.json()["data"]] == [test_task.id]


class TestUserAdministration:
    @pytest.mark.asyncio
    async def test_create_user(self, client, admin_headers):
        response = await client.post(
            "/api/users/",
            json={"name": "Fresh", "email": "fresh@example.com", "password": "password123", "is_admin": True},
            headers=admin_headers,
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["email"] == "fresh@example.com"
        assert data["is_admin"] is False

    @pytest.mark.asyncio
    async def test_create_user_validation(self, client, admin_headers):
        response = await client.post(
            "/api/users/", json={"name": "Bad", "email": "nope", "password": "short"}, headers=admin_headers
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        body = response.json()
        assert body["status"] is False
        assert body["message"] == "Validation error"
        assert {tuple(err["loc"])[-1] for err in body["details"]} == {"email", "password"}

    @pytest.mark.asyncio
    async def test_list_users(self, client, admin_user, test_user, admin_headers):
        response = await client.get("/api/users/", headers=admin_headers)

        data = response.json()["data"]
        assert data["total"] == 2
        ids = [u["id"] for u in data["users"]]
        assert ids == sorted(ids)
        assert set(ids) == {admin_user.id, test_user.id}

    @pytest.mark.asyncio
    async def test_grant_admin(self, client, test_user, admin_headers, user_headers):
        response = await client.put(
            f"/api/users/{test_user.id}/admin", json={"is_admin": True}, headers=admin_headers
        )
        assert response.json()["data"]["is_admin"] is True

        now_allowed = await client.get("/api/users/", headers=user_headers)
        assert now_allowed.status_code == status.HTTP_200_OK

    @pytest.mark.asyncio
    async def test_soft_delete_restore_and_force_delete(self, client, test_user, admin_headers, user_headers):
        first = await client.delete(f"/api/users/{test_user.id}", headers=admin_headers)
        second = await client.delete(f"/api/users/{test_user.id}", headers=admin_headers)

        assert first.json()["message"] == "User deleted successfully"
        assert second.json()["message"] == "User already deleted"
        assert (await client.get("/api/users/me", headers=user_headers)).status_code == 401

        restored = await client.post(f"/api/users/{test_user.id}/restore", headers=admin_headers)
        assert restored.json()["data"]["deleted_at"] is None

        forced = await client.delete(f"/api/users/{test_user.id}/force", headers=admin_headers)
        assert forced.status_code == status.HTTP_200_OK
        missing = await client.delete(f"/api/users/{test_user.id}/force", headers=admin_headers)
        assert missing.status_code == status.HTTP_404_NOT_FOUND
        assert missing.json()["error_code"] == "USER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_get_user(self, client, test_user, admin_headers):
        response = await client.get(f"/api/users/{test_user.id}", headers=admin_headers)
        missing = await client.get("/api/users/999", headers=admin_headers)

        assert response.json()["data"]["name"] == test_user.name
        assert missing.status_code == status.HTTP_404_NOT_FOUND


class TestMyProjects:
    @pytest.mark.asyncio
    async def test_projects_with_pivot_data(self, test_db, client, test_project, test_user, manager_membership, user_headers):
        deleted = await persist(test_db, ProjectFactory.build())
        await add_membership(test_db, test_user, deleted, ProjectRole.tester)
        deleted.soft_delete()
        await test_db.commit()

        response = await client.get("/api/users/me/projects", headers=user_headers)

        assert response.json()["data"] == [
            {
                "project_id": test_project.id,
                "name": "Test Project",
                "description": "A test project for testing",
                "role": "manager",
                "contribution_hours": 12,
                "last_activity": None,
            }
        ]
