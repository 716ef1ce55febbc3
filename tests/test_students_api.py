"""
/api/students endpoints
"""
import pytest


@pytest.fixture
def student_payload():
    return {
        "firstName": "Kenji",
        "lastName": "Watanabe",
        "email": "kenji.w@mail.com",
        "phone": "+81 90 1234 5678",
        "stage": "application",
        "nationality": "Japanese",
    }


class TestCreateStudent:
    """Test cases for student creation and reference normalization"""

    def test_none_agent_is_stored_as_null(self, staff_client, student_payload, storage, db):
        student_payload.update({"agent": "none", "university": "none", "program": "none"})
        response = staff_client.post("/api/students", json=student_payload)
        assert response.status_code == 201
        body = response.json()
        assert body["agent"] is None

        db.expire_all()
        stored = storage.get_student_by_id(body["id"])
        assert stored.agent is None
        assert stored.university is None
        assert stored.program is None

    def test_numeric_string_references(self, staff_client, student_payload, agent, university, program):
        student_payload.update({"agent": str(agent.id), "university": str(university.id), "program": program.id})
        response = staff_client.post("/api/students", json=student_payload)
        assert response.status_code == 201
        body = response.json()
        assert body["agent"] == agent.id
        assert body["university"] == university.id
        assert body["program"] == program.id
        assert body["stage"] == "application"
        assert body["status"] == "active"
        assert body["isHighPriority"] is False

    def test_trailing_slash_is_accepted(self, staff_client, student_payload):
        assert staff_client.post("/api/students/", json=student_payload).status_code == 201

    def test_unknown_reference_is_rejected(self, staff_client, student_payload):
        student_payload["agent"] = "9999"
        response = staff_client.post("/api/students", json=student_payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Referenced agent does not exist"

    def test_non_numeric_reference_is_invalid(self, staff_client, student_payload):
        student_payload["agent"] = "global-pathways"
        response = staff_client.post("/api/students", json=student_payload)
        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "Invalid request data"

    def test_missing_required_fields(self, staff_client):
        response = staff_client.post("/api/students", json={"firstName": "Kenji"})
        assert response.status_code == 400


class TestReadStudents:

    def test_list(self, staff_client, student):
        response = staff_client.get("/api/students")
        assert response.status_code == 200
        students = response.json()
        assert len(students) == 1
        assert students[0]["firstName"] == "Lina"
        assert students[0]["email"] == "lina.haddad@mail.com"

    def test_list_filters(self, staff_client, storage, agent):
        storage.create_student({"first_name": "A", "last_name": "One", "email": "a1@mail.com", "agent": agent.id, "stage": "offer"})
        storage.create_student({"first_name": "B", "last_name": "Two", "email": "b2@mail.com", "stage": "offer", "is_high_priority": True})
        storage.create_student({"first_name": "C", "last_name": "Three", "email": "c3@mail.com"})

        assert len(staff_client.get("/api/students", params={"stage": "offer"}).json()) == 2
        assert len(staff_client.get("/api/students", params={"agent": agent.id}).json()) == 1
        assert len(staff_client.get("/api/students", params={"isHighPriority": "true"}).json()) == 1
        assert len(staff_client.get("/api/students", params={"status": "active"}).json()) == 3
        assert staff_client.get("/api/students", params={"stage": "graduated"}).status_code == 400

    def test_filter_by_stage(self, staff_client, storage):
        storage.create_student({"first_name": "A", "last_name": "One", "email": "a1@mail.com", "stage": "visa"})
        storage.create_student({"first_name": "B", "last_name": "Two", "email": "b2@mail.com"})

        visa = staff_client.get("/api/students/filter/stage/visa").json()
        assert [s["firstName"] for s in visa] == ["A"]
        assert staff_client.get("/api/students/filter/stage/graduated").json() == []

    def test_get_enriched_with_names(self, staff_client, storage, agent, university, program):
        created = storage.create_student({
            "first_name": "Amara", "last_name": "Nwosu", "email": "amara@mail.com",
            "agent": agent.id, "university": university.id, "program": program.id,
        })

        response = staff_client.get(f"/api/students/{created.id}")
        assert response.status_code == 200
        body = response.json()
        assert body["agent"] == agent.id
        assert body["agentName"] == "Priya Shah"
        assert body["universityName"] == "University of Melbourne"
        assert body["programName"] == "MSc Data Science"

    def test_get_without_references_has_null_names(self, staff_client, student):
        body = staff_client.get(f"/api/students/{student.id}").json()
        assert body["agentName"] is None
        assert body["universityName"] is None
        assert body["programName"] is None

    def test_dangling_reference_gives_null_name(self, staff_client, storage, agent):
        agent_id = agent.id
        created = storage.create_student({
            "first_name": "Amara", "last_name": "Nwosu", "email": "amara@mail.com", "agent": agent_id,
        })
        student_id = created.id
        # SQLite doesn't enforce the SET NULL foreign key here, leaving the id behind
        storage.delete_agent(agent_id)

        body = staff_client.get(f"/api/students/{student_id}").json()
        assert body["agent"] == agent_id
        assert body["agentName"] is None

    def test_missing_and_malformed_ids(self, staff_client):
        assert staff_client.get("/api/students/9999").status_code == 404
        assert staff_client.get("/api/students/abc").status_code == 400


class TestUpdateStudent:

    def test_partial_update(self, staff_client, student):
        response = staff_client.put(f"/api/students/{student.id}", json={"stage": "offer"})
        assert response.status_code == 200
        body = response.json()
        assert body["stage"] == "offer"
        assert body["firstName"] == "Lina"
        assert body["email"] == "lina.haddad@mail.com"

    def test_assign_and_clear_agent(self, staff_client, student, agent):
        response = staff_client.put(f"/api/students/{student.id}", json={"agent": str(agent.id)})
        assert response.json()["agent"] == agent.id

        response = staff_client.put(f"/api/students/{student.id}", json={"agent": "none"})
        assert response.status_code == 200
        assert response.json()["agent"] is None

    def test_null_first_name_rejected(self, staff_client, student):
        response = staff_client.put(f"/api/students/{student.id}", json={"firstName": None})
        assert response.status_code == 400

    def test_update_missing(self, staff_client):
        assert staff_client.put("/api/students/9999", json={"stage": "offer"}).status_code == 404


class TestDeleteStudent:

    def test_delete(self, staff_client, student):
        student_id = student.id
        response = staff_client.delete(f"/api/students/{student_id}")
        assert response.status_code == 204
        assert staff_client.get(f"/api/students/{student_id}").status_code == 404
        assert staff_client.delete(f"/api/students/{student_id}").status_code == 404

    def test_delete_missing_leaves_table_untouched(self, staff_client, student):
        assert staff_client.delete("/api/students/9999").status_code == 404
        assert len(staff_client.get("/api/students").json()) == 1
