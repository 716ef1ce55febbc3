"""
/api/applications endpoints
"""
import pytest
from app.models import ApplicationStage


@pytest.fixture
def application(storage, student, university, program):
    return storage.create_application({
        "student_id": student.id,
        "university_id": university.id,
        "program_id": program.id,
        "notes": "Awaiting transcripts",
    })


class TestCreateApplication:

    def test_string_ids_are_stored_as_integers(self, staff_client, storage, db, student, university, program):
        response = staff_client.post("/api/applications", json={
            "studentId": str(student.id),
            "universityId": str(university.id),
            "programId": str(program.id),
            "agentId": "none",
        })
        assert response.status_code == 201
        body = response.json()
        assert body["studentId"] == student.id
        assert body["agentId"] is None
        assert body["stage"] == "document_collection"
        assert body["status"] == "in_progress"

        db.expire_all()
        stored = storage.get_application_by_id(body["id"])
        assert stored.student_id == student.id
        assert isinstance(stored.student_id, int)
        assert stored.agent_id is None

    def test_with_agent_and_dates(self, staff_client, student, university, program, agent):
        response = staff_client.post("/api/applications", json={
            "studentId": student.id,
            "universityId": university.id,
            "programId": program.id,
            "agentId": str(agent.id),
            "intakeDate": "2025-09-01T00:00:00",
            "isHighPriority": True,
        })
        assert response.status_code == 201
        body = response.json()
        assert body["agentId"] == agent.id
        assert body["intakeDate"].startswith("2025-09-01")
        assert body["isHighPriority"] is True

    def test_missing_student_reference(self, staff_client, university, program):
        response = staff_client.post("/api/applications", json={
            "studentId": "9999", "universityId": university.id, "programId": program.id,
        })
        assert response.status_code == 400
        assert response.json()["detail"] == "Referenced student does not exist"

    def test_student_is_required(self, staff_client, university, program):
        response = staff_client.post("/api/applications", json={
            "studentId": "none", "universityId": university.id, "programId": program.id,
        })
        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "Invalid request data"

    def test_anonymous_cannot_create(self, client, student, university, program):
        response = client.post("/api/applications", json={
            "studentId": student.id, "universityId": university.id, "programId": program.id,
        })
        assert response.status_code == 401


class TestReadApplications:

    def test_list_and_get(self, staff_client, application):
        listed = staff_client.get("/api/applications").json()
        assert [a["id"] for a in listed] == [application.id]

        body = staff_client.get(f"/api/applications/{application.id}").json()
        assert body["notes"] == "Awaiting transcripts"

    def test_get_missing(self, staff_client):
        assert staff_client.get("/api/applications/9999").status_code == 404
        assert staff_client.get("/api/applications/abc").status_code == 400

    def test_student_applications_are_enriched(self, staff_client, application, student):
        response = staff_client.get(f"/api/applications/student/{student.id}")
        assert response.status_code == 200
        items = response.json()
        assert len(items) == 1
        assert items[0]["universityName"] == "University of Melbourne"
        assert items[0]["programName"] == "MSc Data Science"

    def test_student_without_applications(self, staff_client, student):
        assert staff_client.get(f"/api/applications/student/{student.id}").json() == []

    def test_student_applications_bad_id(self, staff_client):
        assert staff_client.get("/api/applications/student/abc").status_code == 400

    def test_by_university_and_program(self, staff_client, application, university, program):
        by_university = staff_client.get(f"/api/applications/university/{university.id}").json()
        by_program = staff_client.get(f"/api/applications/program/{program.id}").json()
        assert [a["id"] for a in by_university] == [application.id]
        assert [a["id"] for a in by_program] == [application.id]
        assert staff_client.get("/api/applications/university/9999").json() == []

    def test_filter_by_stage(self, staff_client, storage, application):
        storage.update_application(application.id, {"stage": ApplicationStage.CONDITIONAL_OFFER})

        offers = staff_client.get("/api/applications/filter/stage/conditional_offer").json()
        assert [a["id"] for a in offers] == [application.id]
        assert staff_client.get("/api/applications/filter/stage/document_collection").json() == []
        assert staff_client.get("/api/applications/filter/stage/nonsense").json() == []


class TestUpdateApplication:

    def test_partial_update(self, staff_client, application):
        response = staff_client.put(f"/api/applications/{application.id}", json={"stage": "under_review"})
        assert response.status_code == 200
        body = response.json()
        assert body["stage"] == "under_review"
        assert body["notes"] == "Awaiting transcripts"

    def test_reassign_and_clear_agent(self, staff_client, application, agent):
        response = staff_client.put(f"/api/applications/{application.id}", json={"agentId": str(agent.id)})
        assert response.json()["agentId"] == agent.id

        response = staff_client.put(f"/api/applications/{application.id}", json={"agentId": "none"})
        assert response.json()["agentId"] is None

    def test_cannot_point_at_missing_program(self, staff_client, application):
        response = staff_client.put(f"/api/applications/{application.id}", json={"programId": 9999})
        assert response.status_code == 400
        assert response.json()["detail"] == "Referenced program does not exist"

    def test_update_missing(self, staff_client):
        assert staff_client.put("/api/applications/9999", json={"notes": "x"}).status_code == 404


class TestDeleteApplication:

    def test_delete(self, staff_client, application):
        application_id = application.id
        assert staff_client.delete(f"/api/applications/{application_id}").status_code == 204
        assert staff_client.get(f"/api/applications/{application_id}").status_code == 404
        assert staff_client.delete(f"/api/applications/{application_id}").status_code == 404
