# tests/test_organizations.py
from belajarshafa.models.enums import Role


class TestOrganizations:
    def test_manager_creates_and_manages(self, client, test_manager, auth_headers):
        resp = client.post(
            "/api/organizations/",
            json={"name": "Rumah Tahfidz"},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 201
        assert [m["id"] for m in resp.json()["managers"]] == [test_manager.id]

    def test_mentee_cannot_create(self, client, test_mentee, auth_headers):
        resp = client.post(
            "/api/organizations/", json={"name": "Rumah Tahfidz"}, headers=auth_headers(test_mentee)
        )
        assert resp.status_code == 403

    def test_add_members(self, client, test_organization, test_manager, test_mentee, auth_headers):
        resp = client.post(
            f"/api/organizations/{test_organization.id}/members",
            json={"user_ids": [test_mentee.id]},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 200
        assert [m["id"] for m in resp.json()["members"]] == [test_mentee.id]

        # listed for the new member
        resp = client.get("/api/organizations/", headers=auth_headers(test_mentee))
        assert [o["id"] for o in resp.json()] == [test_organization.id]

    def test_add_unknown_member(self, client, test_organization, test_manager, auth_headers):
        resp = client.post(
            f"/api/organizations/{test_organization.id}/members",
            json={"user_ids": [9999]},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "One or more user IDs are invalid"

    def test_other_manager_cannot_add(
        self, client, make_user, test_organization, test_mentee, auth_headers
    ):
        outsider = make_user(Role.MANAGER)
        resp = client.post(
            f"/api/organizations/{test_organization.id}/members",
            json={"user_ids": [test_mentee.id]},
            headers=auth_headers(outsider),
        )
        assert resp.status_code == 403

    def test_outsider_cannot_view(self, client, test_organization, test_mentee, auth_headers):
        resp = client.get(
            f"/api/organizations/{test_organization.id}", headers=auth_headers(test_mentee)
        )
        assert resp.status_code == 403

    def test_admin_sees_everything(self, client, test_organization, test_admin, auth_headers):
        resp = client.get("/api/organizations/", headers=auth_headers(test_admin))
        assert [o["name"] for o in resp.json()] == ["Shafa Foundation"]


class TestHealth:
    def test_live(self, client):
        assert client.get("/api/health/live").json() == {"status": "ok"}

    def test_db(self, client):
        resp = client.get("/api/health/db")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}
