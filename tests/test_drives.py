"""
Tests for the drive catalog endpoints and DriveService.
"""

from datetime import datetime, timedelta

import pytest
from bson import ObjectId

from skillgate.core.errors import ValidationError
from skillgate.services.drive_service import DriveService, caller_owns
from tests.conftest import PAST


class TestCreateDrive:
    """POST /api/drives"""

    def test_create_drive(self, client, company, drive_payload):
        response = client.post("/api/drives", json=drive_payload(), headers=company["headers"])

        assert response.status_code == 201
        data = response.json()
        assert data["companyId"] == company["id"]
        assert data["companyName"] == "Acme"
        assert data["status"] == "active"
        assert data["skills"] == ["Python", "SQL", "Docker"]
        assert data["duration"] == 60
        assert data["cgpaCutoff"] == 7.5
        assert [q["kind"] for q in data["questions"]] == ["text", "mcq"]
        assert data["questions"][1]["options"] == ["list", "tuple"]

    def test_questions_get_ids(self, client, company, drive_payload):
        payload = drive_payload()
        payload["questions"][0]["id"] = "chosen-by-client"

        data = client.post("/api/drives", json=payload, headers=company["headers"]).json()

        ids = [q["id"] for q in data["questions"]]
        assert len(set(ids)) == 2
        assert all(ObjectId.is_valid(i) for i in ids)

    def test_defaults(self, client, company, drive_payload):
        payload = drive_payload(skills=["Go"])
        del payload["questions"]

        data = client.post("/api/drives", json=payload, headers=company["headers"]).json()

        assert data["questions"] == []
        assert data["skills"] == ["Go"]
        assert data["testDate"] is None

    @pytest.mark.parametrize("missing", ["title", "description", "batchYear", "cgpaCutoff", "salary", "deadline"])
    def test_required_fields(self, client, company, drive_payload, missing):
        payload = drive_payload()
        del payload[missing]

        response = client.post("/api/drives", json=payload, headers=company["headers"])

        assert response.status_code == 400

    def test_pending_company_cannot_post(self, client, make_account, drive_payload):
        pending = make_account("company", approved=False, name="Acme")
        assert pending["status"] == "pending"

        response = client.post("/api/drives", json=drive_payload(), headers=pending["headers"])

        assert response.status_code == 403
        assert "not approved" in response.json()["detail"]

    def test_rejected_company_cannot_post(self, client, make_account, admin_headers, drive_payload):
        company = make_account("company")
        client.put(f"/api/admin/users/{company['id']}/status", json={"status": "rejected"}, headers=admin_headers)

        response = client.post("/api/drives", json=drive_payload(), headers=company["headers"])

        assert response.status_code == 403

    def test_student_cannot_post(self, client, make_account, drive_payload):
        student = make_account("student")

        response = client.post("/api/drives", json=drive_payload(), headers=student["headers"])

        assert response.status_code == 403

    def test_company_name_is_a_snapshot(self, client, company, drive):
        client.put("/api/auth/profile", json={"name": "Acme Renamed"}, headers=company["headers"])

        drives = client.get("/api/drives/company", headers=company["headers"]).json()

        assert drives[0]["companyName"] == "Acme"

    def test_service_rejects_blank_required_field(self, company):
        service = DriveService()
        with pytest.raises(ValidationError):
            service.create_drive(company, {"title": "", "description": "d", "batchYear": 2025,
                                           "cgpaCutoff": 7, "salary": "x", "deadline": datetime(2099, 1, 1)})


class TestListActiveDrives:
    """GET /api/drives"""

    def test_excludes_expired_and_closed(self, client, company, drive_payload, make_account):
        headers = company["headers"]
        open_drive = client.post("/api/drives", json=drive_payload(title="Open"), headers=headers).json()
        client.post("/api/drives", json=drive_payload(title="Expired", deadline=PAST), headers=headers)
        closed = client.post("/api/drives", json=drive_payload(title="Closed"), headers=headers).json()
        client.put(f"/api/drives/{closed['id']}/close", headers=headers)
        student = make_account("student")

        response = client.get("/api/drives", headers=student["headers"])

        assert response.status_code == 200
        assert [d["id"] for d in response.json()] == [open_drive["id"]]

    def test_newest_first(self, mongo_db, company):
        now = datetime(2030, 1, 1)
        base = {"companyId": ObjectId(company["id"]), "companyName": "Acme", "description": "d",
                "batchYear": 2025, "cgpaCutoff": 6.0, "skills": [], "salary": "x",
                "deadline": now + timedelta(days=30), "questions": [], "duration": 60, "status": "active"}
        mongo_db["drives"].insert_many([
            {**base, "title": "older", "createdAt": now - timedelta(days=2)},
            {**base, "title": "newer", "createdAt": now - timedelta(days=1)},
        ])

        titles = [d["title"] for d in DriveService().list_active_drives(now=now)]

        assert titles == ["newer", "older"]

    def test_deadline_boundary(self, mongo_db, company):
        now = datetime(2030, 1, 1, 12, 0)
        mongo_db["drives"].insert_one({
            "companyId": ObjectId(company["id"]), "companyName": "Acme", "title": "edge",
            "description": "d", "batchYear": 2025, "cgpaCutoff": 6.0, "salary": "x",
            "deadline": now, "status": "active", "createdAt": now,
        })

        assert [d["title"] for d in DriveService().list_active_drives(now=now)] == ["edge"]
        assert DriveService().list_active_drives(now=now + timedelta(seconds=1)) == []

    def test_company_cannot_use_student_listing(self, client, company):
        response = client.get("/api/drives", headers=company["headers"])
        assert response.status_code == 403


class TestCompanyDrives:
    """GET /api/drives/company, GET /api/drives/{id}, PUT /api/drives/{id}/close"""

    def test_own_drives_with_applicant_count(self, client, company, drive, drive_payload, make_account):
        client.post("/api/drives", json=drive_payload(title="Second"), headers=company["headers"])
        for cgpa in (8.0, 9.0):
            student = make_account("student", cgpa=cgpa)
            client.post("/api/applications", json={"driveId": drive["id"]}, headers=student["headers"])
        other = make_account("company", name="Globex")
        client.post("/api/drives", json=drive_payload(title="Not mine"), headers=other["headers"])

        response = client.get("/api/drives/company", headers=company["headers"])

        counts = {d["title"]: d["applicantCount"] for d in response.json()}
        assert counts == {"Graduate Software Engineer": 2, "Second": 0}

    def test_get_own_drive(self, client, company, drive):
        response = client.get(f"/api/drives/{drive['id']}", headers=company["headers"])

        assert response.status_code == 200
        assert response.json()["applicantCount"] == 0
        assert response.json()["description"] == "Backend services in Python"

    def test_get_other_companys_drive(self, client, drive, make_account):
        other = make_account("company", name="Globex")

        response = client.get(f"/api/drives/{drive['id']}", headers=other["headers"])

        assert response.status_code == 403

    def test_get_unknown_drive(self, client, company):
        response = client.get(f"/api/drives/{ObjectId()}", headers=company["headers"])
        assert response.status_code == 404

    def test_close_is_idempotent(self, client, company, drive):
        first = client.put(f"/api/drives/{drive['id']}/close", headers=company["headers"])
        second = client.put(f"/api/drives/{drive['id']}/close", headers=company["headers"])

        assert first.status_code == second.status_code == 200
        assert first.json()["status"] == second.json()["status"] == "closed"

    def test_close_other_companys_drive(self, client, drive, make_account):
        other = make_account("company", name="Globex")

        response = client.put(f"/api/drives/{drive['id']}/close", headers=other["headers"])

        assert response.status_code == 403


class TestDriveTest:
    """GET /api/drives/{id}/test"""

    def test_projection(self, client, drive, make_account):
        student = make_account("student", cgpa=5.0)

        response = client.get(f"/api/drives/{drive['id']}/test", headers=student["headers"])

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"id", "title", "questions", "duration"}
        assert data["id"] == drive["id"]
        assert len(data["questions"]) == 2
        assert data["duration"] == 60

    def test_question_ids_match_the_drive(self, client, drive, make_account):
        student = make_account("student")

        data = client.get(f"/api/drives/{drive['id']}/test", headers=student["headers"]).json()

        assert [q["id"] for q in data["questions"]] == [q["id"] for q in drive["questions"]]
        assert data["questions"][0]["text"] == "Explain a Python generator"

    @pytest.mark.parametrize("drive_id", [str(ObjectId()), "not-an-object-id"])
    def test_unknown_drive(self, client, make_account, drive_id):
        student = make_account("student")

        response = client.get(f"/api/drives/{drive_id}/test", headers=student["headers"])

        assert response.status_code == 404


def test_caller_owns():
    company_id = ObjectId()
    drive = {"companyId": company_id}
    assert caller_owns(drive, {"id": str(company_id)})
    assert not caller_owns(drive, {"id": str(ObjectId())})


def test_count_by_drive(mongo_db):
    from skillgate.services.mongo_service import ApplicationStore

    busy, quiet, other = ObjectId(), ObjectId(), ObjectId()
    mongo_db["applications"].insert_many([
        {"studentId": ObjectId(), "driveId": busy},
        {"studentId": ObjectId(), "driveId": busy},
        {"studentId": ObjectId(), "driveId": other},
    ])

    assert ApplicationStore().count_by_drive([busy, quiet]) == {str(busy): 2}
