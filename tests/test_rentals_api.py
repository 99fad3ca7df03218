import uuid


def book(client, headers, vehicle, start, end):
    return client.post(
        "/api/rentals",
        json={"vehicleId": str(vehicle.vehicle_uid), "startDate": start, "endDate": end},
        headers=headers,
    )


def test_create_rental(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner, daily_price=30.0)

    response = book(client, auth_headers(tenant), vehicle, "2030-07-01", "2030-07-05")

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["vehicleId"] == str(vehicle.vehicle_uid)
    assert body["clientId"] == str(tenant.user_uid)
    assert body["ownerId"] == str(owner.user_uid)
    assert body["startDate"] == "2030-07-01"
    assert body["endDate"] == "2030-07-05"
    assert body["totalCost"] == 150.0


def test_overlapping_rental_is_rejected(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    headers = auth_headers(tenant)
    book(client, headers, vehicle, "2030-07-01", "2030-07-05")

    response = book(client, headers, vehicle, "2030-07-05", "2030-07-09")

    assert response.status_code == 400
    assert response.json() == {"message": "Vehicle is not available for the requested dates"}
    assert len(client.get("/api/rentals", headers=headers).json()) == 1


def test_rental_for_unknown_vehicle(client, tenant, auth_headers):
    response = client.post(
        "/api/rentals",
        json={"vehicleId": str(uuid.uuid4()), "startDate": "2030-07-01", "endDate": "2030-07-02"},
        headers=auth_headers(tenant),
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Vehicle not found"}


def test_rental_requires_authentication(client, owner, make_vehicle):
    vehicle = make_vehicle(owner)
    response = book(client, {}, vehicle, "2030-07-01", "2030-07-02")
    assert response.status_code == 401


def test_listing_endpoints(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    book(client, auth_headers(tenant), vehicle, "2030-07-01", "2030-07-02")

    owner_rentals = client.get("/api/rentals/owner", headers=auth_headers(owner))
    client_rentals = client.get("/api/rentals/client", headers=auth_headers(tenant))

    assert owner_rentals.status_code == 200
    assert len(owner_rentals.json()) == 1
    assert client_rentals.json() == owner_rentals.json()


def test_empty_listing_is_not_found(client, tenant, auth_headers):
    response = client.get("/api/rentals/client", headers=auth_headers(tenant))

    assert response.status_code == 404
    assert response.json() == {"message": "No rentals found for this client"}


def test_owner_rentals_requires_owner_role(client, tenant, auth_headers):
    assert client.get("/api/rentals/owner", headers=auth_headers(tenant)).status_code == 403


def test_get_rental_by_id(client, make_user, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    rental_id = book(client, auth_headers(tenant), vehicle, "2030-07-01", "2030-07-02").json()["id"]
    stranger = make_user("stan")

    assert client.get(f"/api/rentals/{rental_id}", headers=auth_headers(owner)).status_code == 200
    assert client.get(f"/api/rentals/{rental_id}", headers=auth_headers(stranger)).status_code == 403
    assert client.get(f"/api/rentals/{uuid.uuid4()}", headers=auth_headers(owner)).status_code == 404


def test_owner_confirms_rental(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    rental_id = book(client, auth_headers(tenant), vehicle, "2030-07-01", "2030-07-02").json()["id"]

    assert client.put(f"/api/rentals/{rental_id}/confirm", headers=auth_headers(tenant)).status_code == 403

    response = client.put(f"/api/rentals/{rental_id}/confirm", headers=auth_headers(owner))
    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"

    again = client.put(f"/api/rentals/{rental_id}/confirm", headers=auth_headers(owner))
    assert again.status_code == 400


def test_cancel_frees_the_dates(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    headers = auth_headers(tenant)
    rental_id = book(client, headers, vehicle, "2030-07-01", "2030-07-02").json()["id"]

    response = client.put(f"/api/rentals/{rental_id}/cancel", headers=headers)

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert client.get(f"/api/vehicles/{vehicle.vehicle_uid}/unavailability", headers=headers).json() == []
    assert book(client, headers, vehicle, "2030-07-01", "2030-07-02").status_code == 201


def test_update_rental(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    headers = auth_headers(tenant)
    rental_id = book(client, headers, vehicle, "2030-07-01", "2030-07-02").json()["id"]

    response = client.put(f"/api/rentals/{rental_id}", json={"endDate": "2030-07-03"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["endDate"] == "2030-07-03"

    bad = client.put(f"/api/rentals/{rental_id}", json={"startDate": "2030-08-01"}, headers=headers)
    assert bad.status_code == 400


def test_delete_rental(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    headers = auth_headers(tenant)
    rental_id = book(client, headers, vehicle, "2030-07-01", "2030-07-02").json()["id"]

    assert client.delete(f"/api/rentals/{rental_id}", headers=headers).status_code == 204
    assert client.delete(f"/api/rentals/{rental_id}", headers=headers).status_code == 404


def unavailability(client, headers, vehicle):
    return client.get(f"/api/vehicles/{vehicle.vehicle_uid}/unavailability", headers=headers).json()


def test_client_cannot_confirm_through_update(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    headers = auth_headers(tenant)
    rental_id = book(client, headers, vehicle, "2030-07-01", "2030-07-02").json()["id"]

    response = client.put(f"/api/rentals/{rental_id}", json={"status": "confirmed"}, headers=headers)

    assert response.status_code == 403
    assert client.get(f"/api/rentals/{rental_id}", headers=headers).json()["status"] == "pending"


def test_owner_confirms_through_update(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    rental_id = book(client, auth_headers(tenant), vehicle, "2030-07-01", "2030-07-02").json()["id"]

    response = client.put(f"/api/rentals/{rental_id}", json={"status": "confirmed"}, headers=auth_headers(owner))

    assert response.status_code == 200
    assert response.json()["status"] == "confirmed"


def test_cancel_through_update_frees_the_dates(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    headers = auth_headers(tenant)
    rental_id = book(client, headers, vehicle, "2030-07-01", "2030-07-02").json()["id"]

    response = client.put(f"/api/rentals/{rental_id}", json={"status": "cancelled"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert unavailability(client, headers, vehicle) == []
    assert book(client, headers, vehicle, "2030-07-01", "2030-07-02").status_code == 201


def test_changed_dates_then_cancel_leaves_no_window(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    headers = auth_headers(tenant)
    rental_id = book(client, headers, vehicle, "2030-07-01", "2030-07-02").json()["id"]

    client.put(f"/api/rentals/{rental_id}", json={"endDate": "2030-07-04"}, headers=headers)
    windows = unavailability(client, headers, vehicle)
    assert [(w["unavailableFrom"], w["unavailableTo"]) for w in windows] == [("2030-07-01", "2030-07-04")]

    client.put(f"/api/rentals/{rental_id}/cancel", headers=headers)
    assert unavailability(client, headers, vehicle) == []


def test_extending_into_another_booking_is_rejected(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    headers = auth_headers(tenant)
    rental_id = book(client, headers, vehicle, "2030-07-01", "2030-07-02").json()["id"]
    book(client, headers, vehicle, "2030-07-05", "2030-07-08")

    response = client.put(f"/api/rentals/{rental_id}", json={"endDate": "2030-07-06"}, headers=headers)

    assert response.status_code == 400
    rental = client.get(f"/api/rentals/{rental_id}", headers=headers).json()
    assert (rental["startDate"], rental["endDate"]) == ("2030-07-01", "2030-07-02")
    assert len(unavailability(client, headers, vehicle)) == 2


def test_delete_frees_the_dates(client, tenant, owner, make_vehicle, auth_headers):
    vehicle = make_vehicle(owner)
    headers = auth_headers(tenant)
    rental_id = book(client, headers, vehicle, "2030-07-01", "2030-07-02").json()["id"]

    assert client.delete(f"/api/rentals/{rental_id}", headers=headers).status_code == 204
    assert unavailability(client, headers, vehicle) == []
    assert book(client, headers, vehicle, "2030-07-01", "2030-07-02").status_code == 201
