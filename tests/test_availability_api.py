from studio.db.models import AuditLog


def create_window(api, headers, date="2030-06-01", start="09:00", end="12:00"):
    return api.post(
        "/availability",
        json={"date": date, "startTime": start, "endTime": end},
        headers=headers,
    )


def test_create_requires_admin(api):
    res = api.post("/availability", json={"date": "2030-06-01", "startTime": "09:00", "endTime": "12:00"})

    assert res.status_code == 401
    assert res.json() == {"error": "Not authenticated"}


def test_create_and_list(api, admin_headers, db):
    res = create_window(api, admin_headers)
    assert res.status_code == 200

    window = res.json()
    assert window["date"] == "2030-06-01"
    assert window["startTime"] == "09:00"
    assert window["endTime"] == "12:00"
    assert window["isActive"] is True

    listed = api.get("/availability").json()
    assert [w["id"] for w in listed] == [window["id"]]

    assert db.query(AuditLog).filter(AuditLog.action == "availability.created").count() == 1


def test_missing_fields(api, admin_headers):
    res = api.post("/availability", json={"date": "2030-06-01"}, headers=admin_headers)

    assert res.status_code == 400
    assert res.json()["error"] == "Missing required fields: date, startTime, endTime"


def test_bad_formats(api, admin_headers):
    res = create_window(api, admin_headers, date="06/01/2030")
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid date format. Use YYYY-MM-DD"

    res = create_window(api, admin_headers, start="9am")
    assert res.json()["error"] == "Invalid time format. Use HH:MM"

    res = create_window(api, admin_headers, start="12:00", end="09:00")
    assert res.json()["error"] == "End time must be after start time"


def test_overlap_rejected_and_adjacent_allowed(api, admin_headers):
    create_window(api, admin_headers)

    res = create_window(api, admin_headers, start="11:00", end="13:00")
    assert res.status_code == 400
    assert res.json() == {"error": "Time slot overlaps with existing availability"}

    assert create_window(api, admin_headers, start="12:00", end="14:00").status_code == 200
    assert len(api.get("/availability").json()) == 2


def test_update_window(api, admin_headers):
    window = create_window(api, admin_headers).json()

    res = api.put(
        f"/availability/{window['id']}",
        json={"date": "2030-06-01", "startTime": "10:00", "endTime": "13:00", "isActive": False},
        headers=admin_headers,
    )

    assert res.status_code == 200
    assert res.json()["startTime"] == "10:00"
    assert res.json()["isActive"] is False


def test_update_unknown_window(api, admin_headers):
    res = api.put(
        "/availability/missing",
        json={"date": "2030-06-01", "startTime": "10:00", "endTime": "13:00"},
        headers=admin_headers,
    )

    assert res.status_code == 404
    assert res.json() == {"error": "Availability slot not found"}


def test_delete_window(api, admin_headers):
    window = create_window(api, admin_headers).json()

    res = api.delete(f"/availability/{window['id']}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json() == {"id": window["id"], "message": "Availability slot deleted successfully"}

    assert api.get("/availability").json() == []
    assert api.delete(f"/availability/{window['id']}", headers=admin_headers).status_code == 404


def test_list_ordered_by_date_then_start(api, admin_headers):
    create_window(api, admin_headers, date="2030-06-02", start="09:00", end="10:00")
    create_window(api, admin_headers, date="2030-06-01", start="14:00", end="15:00")
    create_window(api, admin_headers, date="2030-06-01", start="09:00", end="10:00")

    listed = api.get("/availability").json()
    assert [(w["date"], w["startTime"]) for w in listed] == [
        ("2030-06-01", "09:00"),
        ("2030-06-01", "14:00"),
        ("2030-06-02", "09:00"),
    ]


def test_open_dates(api, admin_headers):
    create_window(api, admin_headers, date="2030-06-02")
    create_window(api, admin_headers, date="2030-06-01")
    create_window(api, admin_headers, date="2001-01-01")

    assert api.get("/availability/dates").json() == ["2030-06-01", "2030-06-02"]


def test_slots_for_package(api, admin_headers, package, book):
    create_window(api, admin_headers, start="09:00", end="12:00")

    res = api.get("/availability/slots", params={"date": "2030-06-01", "packageId": package["id"]})
    assert res.status_code == 200
    assert [(s["startTime"], s["endTime"]) for s in res.json()] == [
        ("09:00", "10:00"),
        ("10:00", "11:00"),
        ("11:00", "12:00"),
    ]

    booking = book(start="10:00", end="11:00").json()["booking"]
    api.patch(f"/bookings/{booking['id']}", json={"status": "approved"}, headers=admin_headers)

    res = api.get("/availability/slots", params={"date": "2030-06-01", "packageId": package["id"]})
    assert [s["startTime"] for s in res.json()] == ["09:00", "11:00"]


def test_slots_with_duration(api, admin_headers):
    create_window(api, admin_headers, start="09:00", end="12:00")

    res = api.get("/availability/slots", params={"date": "2030-06-01", "duration": 1.5})
    assert [(s["startTime"], s["endTime"]) for s in res.json()] == [
        ("09:00", "10:30"),
        ("10:00", "11:30"),
    ]


def test_slots_require_package_or_duration(api):
    res = api.get("/availability/slots", params={"date": "2030-06-01"})

    assert res.status_code == 400
    assert res.json() == {"error": "Missing parameters: packageId or duration"}


def test_slots_unknown_package(api):
    res = api.get("/availability/slots", params={"date": "2030-06-01", "packageId": "missing"})

    assert res.status_code == 404


def test_trailing_newline_in_time_rejected(api, admin_headers):
    res = create_window(api, admin_headers, start="10:00\n")

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid time format. Use HH:MM"}
    assert api.get("/availability").json() == []
