"""
Universities, programs, agents and dashboard stats
"""


class TestUniversities:

    def test_create_returns_stored_values(self, admin_client):
        response = admin_client.post("/api/universities", json={
            "name": "University of Toronto",
            "country": "Canada",
            "city": "Toronto",
            "province": "Ontario",
            "tier": "tier1",
            "contactName": "Jane Doe",
            "contactEmail": "intl@utoronto.ca",
            "agreementStatus": "active",
            "commissionRate": 12.5,
            "tags": ["research", "public"],
        })
        assert response.status_code == 201
        university_id = response.json()["id"]

        body = admin_client.get(f"/api/universities/{university_id}").json()
        assert body["tier"] == "tier1"
        assert body["status"] == "active"
        assert body["contactName"] == "Jane Doe"
        assert body["contactEmail"] == "intl@utoronto.ca"
        assert body["agreementStatus"] == "active"
        assert body["commissionRate"] == 12.5
        assert body["tags"] == ["research", "public"]

        listed = admin_client.get("/api/universities").json()
        assert listed[0]["province"] == "Ontario"

    def test_commission_rate_bounds(self, admin_client):
        response = admin_client.post("/api/universities", json={"name": "X", "country": "Y", "commissionRate": 150})
        assert response.status_code == 400

    def test_update(self, admin_client, university):
        response = admin_client.put(f"/api/universities/{university.id}", json={"tier": "tier2", "website": ""})
        assert response.status_code == 200
        body = response.json()
        assert body["tier"] == "tier2"
        assert body["website"] is None
        assert body["name"] == "University of Melbourne"

    def test_delete(self, admin_client, university):
        university_id = university.id
        response = admin_client.delete(f"/api/universities/{university_id}")
        assert response.status_code == 200
        assert response.json() == {"message": "University deleted successfully"}
        assert admin_client.get(f"/api/universities/{university_id}").status_code == 404
        assert admin_client.delete(f"/api/universities/{university_id}").status_code == 404

    def test_missing(self, admin_client):
        assert admin_client.get("/api/universities/9999").status_code == 404
        assert admin_client.put("/api/universities/9999", json={"city": "x"}).status_code == 404


class TestPrograms:

    def test_create_with_string_university_id(self, admin_client, university):
        response = admin_client.post("/api/programs", json={
            "name": "Bachelor of Commerce",
            "universityId": str(university.id),
            "level": "Bachelor",
            "duration": "3 years",
            "tuitionFee": "AUD 45,000",
        })
        assert response.status_code == 201
        body = response.json()
        assert body["universityId"] == university.id
        assert body["tuitionFee"] == "AUD 45,000"

    def test_create_for_missing_university(self, admin_client):
        response = admin_client.post("/api/programs", json={"name": "MBA", "universityId": 9999, "level": "Master"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Referenced university does not exist"

    def test_list_by_university(self, admin_client, program, university):
        programs = admin_client.get(f"/api/programs/university/{university.id}").json()
        assert [p["name"] for p in programs] == ["MSc Data Science"]
        assert admin_client.get("/api/programs/university/9999").json() == []

    def test_update_and_delete(self, admin_client, program):
        program_id = program.id
        response = admin_client.put(f"/api/programs/{program_id}", json={"duration": "2 years"})
        assert response.status_code == 200
        assert response.json()["duration"] == "2 years"
        assert response.json()["level"] == "Master"

        assert admin_client.delete(f"/api/programs/{program_id}").status_code == 204
        assert admin_client.get(f"/api/programs/{program_id}").status_code == 404

    def test_staff_read_only(self, staff_client, program):
        assert staff_client.get(f"/api/programs/{program.id}").status_code == 200
        assert staff_client.put(f"/api/programs/{program.id}", json={"duration": "1 year"}).status_code == 403
        assert staff_client.delete(f"/api/programs/{program.id}").status_code == 403


class TestAgents:

    def test_create(self, admin_client):
        response = admin_client.post("/api/agents", json={
            "name": "Carlos Mendes",
            "company": "EduBridge",
            "email": "carlos@edubridge.com",
            "country": "Brazil",
            "commissionRate": 8,
            "isFeatured": True,
        })
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "active"
        assert body["isFeatured"] is True
        assert body["commissionRate"] == 8

    def test_invalid_email(self, admin_client):
        response = admin_client.post("/api/agents", json={"name": "Carlos", "email": "carlos"})
        assert response.status_code == 400

    def test_update(self, admin_client, agent):
        response = admin_client.put(f"/api/agents/{agent.id}", json={"status": "suspended"})
        assert response.status_code == 200
        assert response.json()["status"] == "suspended"
        assert response.json()["company"] == "Global Pathways"

    def test_delete(self, admin_client, agent):
        agent_id = agent.id
        assert admin_client.delete(f"/api/agents/{agent_id}").status_code == 204
        assert admin_client.get("/api/agents").json() == []
        assert admin_client.delete(f"/api/agents/{agent_id}").status_code == 404


class TestStats:

    def test_student_stage_counts(self, staff_client, storage):
        for index, stage in enumerate(["inquiry", "inquiry", "offer"]):
            storage.create_student({
                "first_name": "S", "last_name": str(index), "email": f"s{index}@mail.com", "stage": stage,
            })

        response = staff_client.get("/api/stats/students/stage-counts")
        assert response.status_code == 200
        assert response.json() == {"inquiry": 2, "offer": 1}

    def test_application_stage_counts(self, staff_client, storage, student, university, program):
        for stage in ["document_collection", "rejected", "rejected"]:
            storage.create_application({
                "student_id": student.id, "university_id": university.id,
                "program_id": program.id, "stage": stage,
            })

        response = staff_client.get("/api/stats/applications/stage-counts")
        assert response.json() == {"document_collection": 1, "rejected": 2}

    def test_empty_counts(self, staff_client):
        assert staff_client.get("/api/stats/students/stage-counts").json() == {}
