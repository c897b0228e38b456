# tests/test_progress.py
import pytest

from belajarshafa.models.enrollment import Enrollment
from belajarshafa.models.material import Material
from belajarshafa.models.progress import Progress
from belajarshafa.schemas.progress import ProgressUpdate
from belajarshafa.services import enrollment_service, progress_service
from belajarshafa.services.enrollment_service import compute_percent


def _material_ids(db_session, course):
    topic = course.topics[0]
    return [
        m.id
        for m in db_session.query(Material)
        .filter(Material.topic_id == topic.id)
        .order_by(Material.sequence)
        .all()
    ]


class TestComputePercent:
    @pytest.mark.parametrize(
        "part,whole,expected",
        [
            (1, 8, 13),
            (0, 0, 0),
            (2, 4, 50),
            (199, 200, 100),
            (1, 3, 33),
            (2, 3, 67),
            (4, 4, 100),
        ],
    )
    def test_rounds_half_up(self, part, whole, expected):
        assert compute_percent(part, whole) == expected


class TestEnrollment:
    def test_enroll_once(self, client, test_course, test_mentee, auth_headers):
        headers = auth_headers(test_mentee)
        resp = client.post("/api/enrollments/", json={"course_id": test_course.id}, headers=headers)
        assert resp.status_code == 201
        assert resp.json()["progress_percent"] == 0
        assert resp.json()["course"]["title"] == "Tajwid Dasar"

        resp = client.post("/api/enrollments/", json={"course_id": test_course.id}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "You are already enrolled in this course"

    def test_inactive_course_rejected(
        self, client, db_session, test_course, test_mentee, auth_headers
    ):
        test_course.is_active = False
        db_session.commit()
        resp = client.post(
            "/api/enrollments/",
            json={"course_id": test_course.id},
            headers=auth_headers(test_mentee),
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Course is not active"

    def test_unknown_course(self, client, test_mentee, auth_headers):
        resp = client.post(
            "/api/enrollments/", json={"course_id": 404}, headers=auth_headers(test_mentee)
        )
        assert resp.status_code == 404

    def test_unenroll(self, client, db_session, test_course, test_mentee, auth_headers):
        headers = auth_headers(test_mentee)
        client.post("/api/enrollments/", json={"course_id": test_course.id}, headers=headers)

        resp = client.delete(f"/api/enrollments/course/{test_course.id}", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["message"] == "Successfully unenrolled from course"
        assert db_session.query(Enrollment).count() == 0

        resp = client.delete(f"/api/enrollments/course/{test_course.id}", headers=headers)
        assert resp.status_code == 404

    def test_unenroll_removes_progress(
        self, client, db_session, test_course, test_mentee, auth_headers
    ):
        headers = auth_headers(test_mentee)
        for material_id in _material_ids(db_session, test_course)[:2]:
            resp = client.post(f"/api/progress/material/{material_id}/complete", headers=headers)
            assert resp.status_code == 200
        assert db_session.query(Progress).count() == 2

        resp = client.delete(f"/api/enrollments/course/{test_course.id}", headers=headers)
        assert resp.status_code == 200
        assert db_session.query(Enrollment).count() == 0
        assert db_session.query(Progress).count() == 0

    def test_concurrent_enroll_is_rejected(
        self, client, db_session, test_course, test_mentee, auth_headers, monkeypatch
    ):
        db_session.add(Enrollment(user_id=test_mentee.id, course_id=test_course.id))
        db_session.commit()
        # the other request's row lands after the enrollment lookup
        monkeypatch.setattr(enrollment_service, "get_enrollment", lambda *args: None)

        resp = client.post(
            "/api/enrollments/",
            json={"course_id": test_course.id},
            headers=auth_headers(test_mentee),
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "You are already enrolled in this course"
        assert db_session.query(Enrollment).count() == 1

    def test_concurrent_auto_enroll_reuses_existing(
        self, db_session, test_course, test_mentee, monkeypatch
    ):
        db_session.add(Enrollment(user_id=test_mentee.id, course_id=test_course.id))
        db_session.commit()
        real_get_enrollment = enrollment_service.get_enrollment
        calls = []

        def stale_first_lookup(*args):
            calls.append(args)
            if len(calls) == 1:
                return None
            return real_get_enrollment(*args)

        monkeypatch.setattr(enrollment_service, "get_enrollment", stale_first_lookup)
        material_id = _material_ids(db_session, test_course)[0]
        progress = progress_service.update_material_progress(
            db_session,
            user=test_mentee,
            material_id=material_id,
            obj_in=ProgressUpdate(is_completed=True),
        )

        assert progress.is_completed is True
        assert db_session.query(Enrollment).count() == 1
        assert db_session.query(Progress).count() == 1
        assert db_session.query(Enrollment).one().progress_percent == 25

    def test_course_enrollment_is_null_when_not_enrolled(
        self, client, test_course, test_mentee, auth_headers
    ):
        resp = client.get(
            f"/api/enrollments/course/{test_course.id}", headers=auth_headers(test_mentee)
        )
        assert resp.status_code == 200
        assert resp.json() is None

    def test_my_courses(self, client, test_course, test_mentee, auth_headers):
        headers = auth_headers(test_mentee)
        client.post("/api/enrollments/", json={"course_id": test_course.id}, headers=headers)

        resp = client.get("/api/enrollments/my-courses", headers=headers)
        assert resp.status_code == 200
        assert [e["course_id"] for e in resp.json()] == [test_course.id]


class TestMaterialProgress:
    def test_progress_write_auto_enrolls(
        self, client, db_session, test_course, test_mentee, auth_headers
    ):
        material_id = _material_ids(db_session, test_course)[0]
        resp = client.patch(
            f"/api/progress/material/{material_id}",
            json={"watched_duration": 120},
            headers=auth_headers(test_mentee),
        )
        assert resp.status_code == 200, resp.text
        assert resp.json()["watched_duration"] == 120
        assert resp.json()["is_completed"] is False

        enrollment = db_session.query(Enrollment).one()
        assert enrollment.user_id == test_mentee.id
        assert enrollment.progress_percent == 0
        assert enrollment.last_accessed_at is not None

    def test_percent_follows_completed_materials(
        self, client, db_session, test_course, test_mentee, auth_headers
    ):
        headers = auth_headers(test_mentee)
        material_ids = _material_ids(db_session, test_course)
        for material_id in material_ids[:2]:
            resp = client.post(f"/api/progress/material/{material_id}/complete", headers=headers)
            assert resp.status_code == 200

        resp = client.get(f"/api/enrollments/course/{test_course.id}", headers=headers)
        assert resp.json()["progress_percent"] == 50
        assert resp.json()["completed_at"] is None

        for material_id in material_ids[2:]:
            client.post(f"/api/progress/material/{material_id}/complete", headers=headers)

        resp = client.get(f"/api/enrollments/course/{test_course.id}", headers=headers)
        body = resp.json()
        assert body["progress_percent"] == 100
        assert body["completed_at"] is not None
        first_completed_at = body["completed_at"]

        # un-completing and re-completing keeps the first completion time
        client.patch(
            f"/api/progress/material/{material_ids[0]}",
            json={"is_completed": False},
            headers=headers,
        )
        client.post(f"/api/progress/material/{material_ids[0]}/complete", headers=headers)
        resp = client.get(f"/api/enrollments/course/{test_course.id}", headers=headers)
        assert resp.json()["completed_at"] == first_completed_at

    def test_complete_course_early_rejected(
        self, client, db_session, test_course, test_mentee, auth_headers
    ):
        headers = auth_headers(test_mentee)
        material_id = _material_ids(db_session, test_course)[0]
        client.post(f"/api/progress/material/{material_id}/complete", headers=headers)

        resp = client.post(f"/api/enrollments/course/{test_course.id}/complete", headers=headers)
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Course is not yet completed"

    def test_complete_course_when_done(
        self, client, db_session, test_course, test_mentee, auth_headers
    ):
        headers = auth_headers(test_mentee)
        for material_id in _material_ids(db_session, test_course):
            client.post(f"/api/progress/material/{material_id}/complete", headers=headers)

        resp = client.post(f"/api/enrollments/course/{test_course.id}/complete", headers=headers)
        assert resp.status_code == 200
        assert resp.json()["progress_percent"] == 100
        assert resp.json()["completed_at"] is not None

    def test_untouched_material_reads_as_zero(
        self, client, db_session, test_course, test_mentee, auth_headers
    ):
        material_id = _material_ids(db_session, test_course)[0]
        resp = client.get(
            f"/api/progress/material/{material_id}", headers=auth_headers(test_mentee)
        )
        assert resp.status_code == 200
        assert resp.json() == {
            "material_id": material_id,
            "watched_duration": 0,
            "is_completed": False,
            "last_accessed_at": None,
        }

    def test_unknown_material(self, client, test_mentee, auth_headers):
        resp = client.get("/api/progress/material/999", headers=auth_headers(test_mentee))
        assert resp.status_code == 404

    def test_topic_progress(self, client, db_session, test_course, test_mentee, auth_headers):
        headers = auth_headers(test_mentee)
        material_id = _material_ids(db_session, test_course)[0]
        client.post(f"/api/progress/material/{material_id}/complete", headers=headers)

        topic_id = test_course.topics[0].id
        resp = client.get(f"/api/progress/topic/{topic_id}", headers=headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["completed_count"] == 1
        assert body["total_count"] == 4
        assert body["progress_percent"] == 25
        assert [m["is_completed"] for m in body["materials"]] == [True, False, False, False]
