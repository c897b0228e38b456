# tests/test_users.py
from belajarshafa.models.enums import Role


class TestUserDirectory:
    def test_admin_sees_everybody_with_pagination(
        self, client, make_user, test_admin, auth_headers
    ):
        for _ in range(5):
            make_user(Role.MENTEE)

        resp = client.get(
            "/api/users/",
            params={"page": 2, "limit": 2, "sort_by": "email", "sort_order": "asc"},
            headers=auth_headers(test_admin),
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["meta"] == {"total": 6, "page": 2, "limit": 2, "total_pages": 3}
        assert len(body["data"]) == 2

    def test_manager_only_sees_shared_org_or_class(
        self, client, db_session, make_user, test_manager, test_organization, auth_headers
    ):
        colleague = make_user(Role.MENTOR, name="Colleague")
        test_organization.members.append(colleague)
        db_session.commit()
        make_user(Role.MENTEE, name="Stranger")

        resp = client.get("/api/users/", headers=auth_headers(test_manager))
        assert resp.status_code == 200
        names = {u["name"] for u in resp.json()["data"]}
        assert names == {"Manager", "Colleague"}

    def test_manager_without_memberships_sees_nothing(
        self, client, make_user, test_manager, auth_headers
    ):
        make_user(Role.MENTEE)
        resp = client.get("/api/users/", headers=auth_headers(test_manager))
        assert resp.json()["data"] == []
        assert resp.json()["meta"]["total"] == 0

    def test_filters(self, client, make_user, test_admin, auth_headers):
        make_user(Role.MENTOR, name="Ustadz Ahmad")
        make_user(Role.MENTEE, name="Ahmad Junior", is_active=False)
        make_user(Role.MENTEE, name="Fatimah")

        headers = auth_headers(test_admin)
        resp = client.get("/api/users/", params={"search": "ahmad"}, headers=headers)
        assert {u["name"] for u in resp.json()["data"]} == {"Ustadz Ahmad", "Ahmad Junior"}

        resp = client.get(
            "/api/users/", params={"search": "ahmad", "is_active": True}, headers=headers
        )
        assert [u["name"] for u in resp.json()["data"]] == ["Ustadz Ahmad"]

        resp = client.get("/api/users/", params={"roles": ["MENTOR"]}, headers=headers)
        assert [u["name"] for u in resp.json()["data"]] == ["Ustadz Ahmad"]

    def test_mentee_cannot_list(self, client, test_mentee, auth_headers):
        resp = client.get("/api/users/", headers=auth_headers(test_mentee))
        assert resp.status_code == 403

    def test_stats(self, client, make_user, test_admin, auth_headers):
        make_user(Role.MENTOR)
        make_user(Role.MENTEE, is_active=False)
        make_user(Role.MENTEE, Role.MENTOR)

        resp = client.get("/api/users/stats", headers=auth_headers(test_admin))
        assert resp.status_code == 200
        assert resp.json() == {
            "total": 4,
            "active": 3,
            "inactive": 1,
            "by_role": {"admins": 1, "managers": 0, "mentors": 2, "mentees": 2},
        }

    def test_mentors_listing(self, client, make_user, test_mentee, auth_headers):
        make_user(Role.MENTOR, name="Active Mentor")
        make_user(Role.MENTOR, name="Retired Mentor", is_active=False)
        resp = client.get("/api/users/mentors", headers=auth_headers(test_mentee))
        assert [u["name"] for u in resp.json()] == ["Active Mentor"]


class TestUserManagement:
    def test_manager_creates_user(self, client, test_manager, auth_headers):
        resp = client.post(
            "/api/users/",
            json={
                "email": "mentor.baru@belajar.id",
                "password": "password123",
                "name": "Mentor Baru",
                "roles": ["MENTOR", "MENTEE"],
            },
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 201, resp.text
        assert resp.json()["roles"] == ["MENTOR", "MENTEE"]

    def test_update_roles(self, client, test_manager, test_mentee, auth_headers):
        resp = client.patch(
            f"/api/users/{test_mentee.id}/roles",
            json={"roles": ["MENTOR"]},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 200
        assert resp.json()["roles"] == ["MENTOR"]

    def test_cannot_modify_own_roles(self, client, test_manager, auth_headers):
        resp = client.patch(
            f"/api/users/{test_manager.id}/roles",
            json={"roles": ["ADMIN"]},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 403
        assert resp.json()["detail"] == "You cannot modify your own roles"

        resp = client.patch(
            f"/api/users/{test_manager.id}",
            json={"roles": ["ADMIN"]},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 403

    def test_can_edit_own_profile_without_roles(self, client, test_manager, auth_headers):
        resp = client.patch(
            f"/api/users/{test_manager.id}",
            json={"name": "Manager Baru"},
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Manager Baru"

    def test_toggle_active(self, client, test_manager, test_mentee, auth_headers):
        resp = client.patch(
            f"/api/users/{test_mentee.id}/toggle-active",
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 200
        assert resp.json()["is_active"] is False

    def test_cannot_deactivate_self(self, client, test_manager, auth_headers):
        resp = client.patch(
            f"/api/users/{test_manager.id}/toggle-active",
            headers=auth_headers(test_manager),
        )
        assert resp.status_code == 403
        assert resp.json()["detail"] == "You cannot deactivate yourself"

    def test_details(self, client, test_admin, test_class, test_mentee, auth_headers):
        resp = client.get(
            f"/api/users/{test_mentee.id}/details", headers=auth_headers(test_admin)
        )
        assert resp.status_code == 200
        assert [c["code"] for c in resp.json()["joined_classes"]] == ["TAHSIN01"]

    def test_unknown_user(self, client, test_admin, auth_headers):
        resp = client.get("/api/users/999", headers=auth_headers(test_admin))
        assert resp.status_code == 404
        assert resp.json()["detail"] == "User with ID 999 not found"

    def test_only_admin_deletes(self, client, test_manager, test_admin, test_mentee, auth_headers):
        url = f"/api/users/{test_mentee.id}"
        assert client.delete(url, headers=auth_headers(test_manager)).status_code == 403
        assert client.delete(url, headers=auth_headers(test_admin)).status_code == 204
        assert client.get(url, headers=auth_headers(test_admin)).status_code == 404
