"""Tests for the admin CRUD endpoints: faculties, zones, lots, vehicles, permits and campus users."""


class TestFaculties:

    def test_create_update_delete(self, client):
        created = client.post("/admin/faculties", json={"name": "Faculty of Science", "code": "FS"})
        assert created.status_code == 201
        faculty_id = created.json()["id"]

        updated = client.put(f"/admin/faculties/{faculty_id}", json={"location_desc": "Block C"})
        assert updated.json()["location_desc"] == "Block C"
        assert updated.json()["code"] == "FS"

        deleted = client.delete(f"/admin/faculties/{faculty_id}")
        assert deleted.status_code == 200
        assert client.get("/admin/faculties").json() == []

    def test_duplicate_code(self, client, campus):
        response = client.post("/admin/faculties", json={"name": "Copy", "code": "FC"})
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_faculty_in_use_cannot_be_deleted(self, client, campus):
        response = client.delete(f"/admin/faculties/{campus['faculty']}")
        assert response.status_code == 400

    def test_unknown_faculty(self, client):
        assert client.put("/admin/faculties/404", json={"name": "X"}).status_code == 404


class TestZonesAndLots:

    def test_zone_occupancy(self, client, campus, db_session):
        from models import ParkingLot
        lot = db_session.get(ParkingLot, campus["lots"]["Staff1"])
        lot.status = "Occupied"
        db_session.commit()

        zones = {z["zone_type"]: z for z in client.get("/admin/zones").json()}
        assert zones["Staff"]["total_spots"] == 2
        assert zones["Staff"]["occupied_spots"] == 1
        assert zones["Staff"]["occupancy_rate"] == 50.0
        assert zones["Student"]["total_spots"] == 3
        assert zones["Student"]["occupied_spots"] == 0

    def test_zone_needs_existing_faculty(self, client):
        response = client.post("/admin/zones", json={"faculty_id": 99, "name": "Z", "zone_type": "Mixed"})
        assert response.status_code == 404

    def test_zone_type_is_checked(self, client, campus):
        response = client.post("/admin/zones", json={
            "faculty_id": campus["faculty"], "name": "Z", "zone_type": "VIP"})
        assert response.status_code == 422

    def test_zone_with_lots_cannot_be_deleted(self, client, campus):
        response = client.delete(f"/admin/zones/{campus['zones']['Mixed']}")
        assert response.status_code == 400

    def test_empty_zone_is_deleted(self, client, campus):
        zone = client.post("/admin/zones", json={
            "faculty_id": campus["faculty"], "name": "Overflow", "zone_type": "Visitor", "capacity": 10}).json()
        assert client.delete(f"/admin/zones/{zone['id']}").status_code == 200

    def test_lot_numbers_unique_per_zone(self, client, campus):
        duplicate = client.post("/admin/lots", json={"zone_id": campus["zones"]["Student"], "lot_number": "S01"})
        assert duplicate.status_code == 400

        elsewhere = client.post("/admin/lots", json={"zone_id": campus["zones"]["Mixed"], "lot_number": "S01"})
        assert elsewhere.status_code == 201
        assert elsewhere.json()["status"] == "Available"

    def test_lot_to_maintenance(self, client, campus):
        lot_id = campus["lots"]["Visitor1"]
        response = client.put(f"/admin/lots/{lot_id}", json={"status": "Maintenance"})
        assert response.status_code == 200

        lots = client.get(f"/admin/zones/{campus['zones']['Visitor']}/lots").json()
        assert {lot["id"]: lot["status"] for lot in lots}[lot_id] == "Maintenance"

    def test_reserved_lot_cannot_be_deleted(self, client, campus, booking):
        client.post("/reservations", json=booking())
        response = client.delete(f"/admin/lots/{campus['lots']['Student1']}")
        assert response.status_code == 400
        assert client.delete(f"/admin/lots/{campus['lots']['Student2']}").status_code == 200


class TestVehiclesAndPermits:

    def vehicle(self, client, plate="abc 123"):
        return client.post("/admin/vehicles", json={
            "plate_num": plate, "vehicle_type": "Motorcycle", "owner_name": "Farid", "owner_type": "Staff"})

    def test_plate_is_normalised(self, client):
        response = self.vehicle(client)
        assert response.status_code == 201
        assert response.json()["plate_num"] == "ABC123"

        assert self.vehicle(client, plate="ABC123").status_code == 400
        assert [v["plate_num"] for v in client.get("/admin/vehicles", params={"search": "abc"}).json()] == ["ABC123"]

    def test_delete_vehicle_with_reservation(self, client, booking):
        vehicle_id = client.post("/reservations", json=booking()).json()["reservation"]["vehicle_id"]
        assert client.delete(f"/admin/vehicles/{vehicle_id}").status_code == 400

    def test_permit_dates(self, client, campus):
        vehicle_id = self.vehicle(client).json()["id"]
        body = {"vehicle_id": vehicle_id, "zone_id": campus["zones"]["Staff"], "permit_type": "Semester",
                "start_date": "2024-02-01", "end_date": "2024-01-01"}
        assert client.post("/admin/permits", json=body).status_code == 400

        body["end_date"] = "2024-06-30"
        permit = client.post("/admin/permits", json=body)
        assert permit.status_code == 201
        assert permit.json()["status"] == "Active"

        revoked = client.put(f"/admin/permits/{permit.json()['id']}", json={"status": "Revoked"})
        assert revoked.json()["status"] == "Revoked"

        # permits go with their vehicle
        assert client.delete(f"/admin/vehicles/{vehicle_id}").status_code == 200
        assert client.get("/admin/permits").json() == []


class TestCampusUsers:

    def test_search(self, client, campus):
        users = client.get("/admin/campus-users", params={"search": "siti"}).json()
        assert [u["staff_no"] for u in users] == ["S1001"]

    def test_update(self, client, campus):
        user_id = client.get("/admin/campus-users", params={"search": "A15CS0099"}).json()[0]["id"]
        response = client.put(f"/admin/campus-users/{user_id}", json={"status": "Active"})
        assert response.json()["status"] == "Active"

    def test_email_must_stay_unique(self, client, campus):
        user_id = client.get("/admin/campus-users", params={"search": "Aina"}).json()[0]["id"]
        response = client.put(f"/admin/campus-users/{user_id}", json={"email": "siti@campus.edu"})
        assert response.status_code == 400

    def test_unknown_user(self, client, campus):
        assert client.put("/admin/campus-users/999", json={"full_name": "X"}).status_code == 404

    def test_admins_listed_without_password(self, client, db_session):
        from routers.users import create_default_admin_if_not_exists
        create_default_admin_if_not_exists(db_session)

        admins = client.get("/admin/admins").json()
        assert len(admins) == 1
        assert "password_hash" not in admins[0]
