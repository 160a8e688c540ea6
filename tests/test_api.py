from services import BookingService, CalendarService, VenueService
from schemas import BookingCreate, BookingStatus, VenueCreate


def create(client, **overrides):
    payload = {
        "hallName": "Hall A",
        "slotTitle": "AI Workshop",
        "bookingName": "Dr. Rao",
        "department": "CSE",
        "date": "2024-03-04",
        "startTime": "09:00",
        "endTime": "10:00",
        "status": "APPROVED",
    }
    payload.update(overrides)
    response = client.post("/api/v1/bookings", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["id"]


def test_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json()["status"] == "healthy"


def test_venues(client):
    assert client.post("/api/v1/venues", json={"name": "Hall A", "capacity": 120}).status_code == 201
    assert client.post("/api/v1/venues", json={"name": "Hall A"}).status_code == 409
    assert client.post("/api/v1/venues", json={"name": "  "}).status_code == 422

    venues = client.get("/api/v1/venues").json()
    assert venues == [{"id": 1, "name": "Hall A", "capacity": 120}]
    assert client.get("/api/v1/venues/1").json()["name"] == "Hall A"
    assert client.get("/api/v1/venues/99").status_code == 404


def test_booking_listing_and_status_update(client):
    first = create(client)
    second = create(client, hallName="Hall B", date="2024-03-05", status="PENDING")
    assert (first, second) == ("0000001", "0000002")

    records = client.get("/api/v1/bookings", params={"date": "2024-03-04"}).json()
    assert [r["id"] for r in records] == [first]
    assert records[0]["hallName"] == "Hall A"
    assert records[0]["startTime"] == "09:00"

    by_hall = client.get("/api/v1/bookings", params={"hallName": "Hall B"}).json()
    assert [r["id"] for r in by_hall] == [second]

    response = client.put(f"/api/v1/bookings/{second}/status", json={"status": "CANCELLED", "reason": "Exam"})
    assert response.status_code == 200
    booking = client.get(f"/api/v1/bookings/{second}").json()
    assert booking["status"] == "CANCELLED"
    assert booking["cancellationReason"] == "Exam"

    assert client.get("/api/v1/bookings/9999999").status_code == 404
    assert client.put("/api/v1/bookings/9999999/status", json={"status": "APPROVED"}).status_code == 404


def test_booking_validation(client):
    bad_time = client.post("/api/v1/bookings", json={
        "hallName": "Hall A", "slotTitle": "X", "date": "2024-03-04", "startTime": "11:00", "endTime": "10:00",
    })
    assert bad_time.status_code == 422
    no_day = client.post("/api/v1/bookings", json={"hallName": "Hall A", "slotTitle": "X"})
    assert no_day.status_code == 422
    bad_date = client.post("/api/v1/bookings", json={"hallName": "Hall A", "slotTitle": "X", "date": "2024-02-30"})
    assert bad_date.status_code == 422
    compact = client.post("/api/v1/bookings", json={"hallName": "Hall A", "slotTitle": "X", "date": "20240304"})
    assert compact.status_code == 422


def test_month_grid_from_store(client):
    create(client)
    create(client, startTime="10:00", endTime="11:00")
    create(client, startTime="12:00", endTime="17:00", status="REJECTED")
    create(client, hallName="Hall B", date="2024-03-05")

    grid = client.get("/api/v1/calendar/month", params={"year": 2024, "month": 3, "venue": "Hall A"}).json()
    assert grid["leadingBlanks"] == 5
    assert grid["cells"][:5] == [None] * 5
    assert len(grid["cells"]) == 5 + 31
    march_4 = grid["cells"][5 + 3]
    assert march_4["date"] == "2024-03-04"
    assert march_4["bookingCount"] == 2
    assert march_4["percentFull"] == 25
    assert grid["cells"][5 + 4]["bookingCount"] == 0


def test_month_grid_invalid_parameters(client):
    response = client.get("/api/v1/calendar/month", params={"year": 2025, "month": 13, "venue": "Hall A"})
    assert response.status_code == 400
    assert "month" in response.json()["detail"]
    assert client.get("/api/v1/calendar/month", params={"year": "abc", "month": 1}).status_code == 400


def test_month_grid_from_posted_records(client):
    body = {
        "year": 2024,
        "month": 2,
        "venue": "12",
        "records": [
            {"date": "2024-02-01", "startTime": "9:00 AM", "endTime": "5:00 PM", "status": "approved", "hall_id": 12},
            {"date": "2024-02-01", "startTime": "09:00", "endTime": "10:00", "status": "APPROVED", "hall_id": 13},
            "junk",
        ],
    }
    grid = client.post("/api/v1/calendar/month", json=body).json()
    assert grid["leadingBlanks"] == 4
    first = grid["cells"][4]
    assert first["date"] == "2024-02-01"
    assert (first["bookingCount"], first["percentFull"]) == (1, 100)

    body["month"] = "13"
    assert client.post("/api/v1/calendar/month", json=body).status_code == 400


def test_day_detail(client):
    create(client, slotTitle="Morning")
    create(client, slotTitle="Rejected", status="REJECTED")
    create(client, slotTitle="Other hall", hallName="Hall B")

    detail = client.get("/api/v1/calendar/day/2024-03-04", params={"venue": "Hall A"}).json()
    assert [d["title"] for d in detail] == ["Morning"]
    assert detail[0]["timeRange"] == "09:00 — 10:00"
    assert detail[0]["key"] == "0000001"

    everything = client.get("/api/v1/calendar/day/2024-03-04").json()
    assert len(everything) == 2

    assert client.get("/api/v1/calendar/day/2024-03-06").json() == []
    assert client.get("/api/v1/calendar/day/not-a-day").status_code == 400
    assert client.get("/api/v1/calendar/day/20240304").status_code == 400


def test_export(client):
    for start, end in [("09:00", "10:00"), ("10:00", "11:00"), ("11:00", "12:00")]:
        create(client, startTime=start, endTime=end)

    sheet = client.get("/api/v1/calendar/export", params={"year": 2024, "month": 3, "venue": "Hall A"}).json()
    assert sheet["totalWeeks"] == 6
    assert len(sheet["days"][3]["visible"]) == 2
    assert len(sheet["overflow"]) == 1

    csv_response = client.get("/api/v1/calendar/export",
                              params={"year": 2024, "month": 3, "venue": "Hall A", "format": "csv"})
    assert csv_response.status_code == 200
    assert csv_response.headers["content-type"].startswith("text/csv")
    assert len(csv_response.text.strip().splitlines()) == 4

    assert client.get("/api/v1/calendar/export", params={"year": 2024, "month": 0}).status_code == 400


def test_services_open_their_own_session(db_session):
    VenueService.create_venue(VenueCreate(name="Hall Z"))
    booking_id = BookingService.create_booking(BookingCreate(
        hall_name="Hall Z", slot_title="Talk", date="2024-05-02", start_time="13:00", end_time="15:00",
    ))
    assert BookingService.update_status(booking_id, BookingStatus.APPROVED)

    grid = CalendarService.get_month_grid(2024, 5, "Hall Z")
    assert grid.day("2024-05-02").percent_full == 25
    assert [v.name for v in VenueService.list_venues()] == ["Hall Z"]
