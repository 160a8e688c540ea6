import pytest

from ingestion import RecordRejected, ingest_bookings, normalize_booking, resolve_venue_refs
from schemas import Booking


def test_identifier_fallback_chain():
    assert normalize_booking({"id": 7, "date": "2024-01-02"}, 0).key == "7"
    assert normalize_booking({"_id": "abc", "date": "2024-01-02"}, 0).key == "abc"
    assert normalize_booking({"_key": "k1", "date": "2024-01-02"}, 0).key == "k1"
    assert normalize_booking({"raw": {"_id": "r9"}, "date": "2024-01-02"}, 0).key == "r9"


def test_missing_identifier_gets_positional_key():
    booking = normalize_booking({"date": "2024-01-02"}, 4)
    assert booking.key == "idx-4"
    assert booking.id is None


def test_venue_references_from_every_candidate_field():
    record = {"hallName": "Hall A", "hall": {"name": "Hall A", "title": "Main"}, "hall_id": 12, "room": "R1"}
    assert resolve_venue_refs(record) == ["Hall A", "Main", "12", "R1"]
    assert normalize_booking(dict(record, date="2024-01-02"), 0).venue == "Hall A"


def test_plain_string_hall_is_a_venue_reference():
    booking = normalize_booking({"hall": "Auditorium", "date": "2024-01-02"}, 0)
    assert booking.venue == "Auditorium"


def test_date_resolution_order_and_timestamp_trimming():
    assert normalize_booking({"date": "2024-05-01", "startDate": "2024-06-01"}, 0).date == "2024-05-01"
    assert normalize_booking({"startDate": "2024-06-01"}, 0).date == "2024-06-01"
    assert normalize_booking({"appliedAt": "2024-07-09T10:11:12"}, 0).date == "2024-07-09"
    assert normalize_booking({"createdAt": "2024-08-10 08:00"}, 0).date == "2024-08-10"


def test_unparseable_date_is_kept_without_a_date():
    booking = normalize_booking({"date": "2024-02-30", "status": "approved"}, 0)
    assert booking.date is None
    assert booking.status == "APPROVED"


@pytest.mark.parametrize("value", ["20240304", "2024-W10-1", "2024-3-4"])
def test_only_dashed_calendar_dates_are_accepted(value):
    assert normalize_booking({"date": value}, 0).date is None


def test_record_without_any_date_field_is_rejected():
    with pytest.raises(RecordRejected) as exc:
        normalize_booking({"hallName": "Hall A"}, 3)
    assert exc.value.position == 3
    assert "missing required field: date" in exc.value.reason


def test_date_not_required_for_day_detail_ingestion():
    booking = normalize_booking({"id": "x", "status": "APPROVED"}, 0, require_date=False)
    assert booking.date is None


def test_batch_reports_rejections_without_aborting():
    result = ingest_bookings([{"date": "2024-01-01"}, "junk", {"hallName": "B"}, {"date": "2024-01-02"}])
    assert [b.date for b in result.bookings] == ["2024-01-01", "2024-01-02"]
    assert [pos for pos, _ in result.rejected] == [1, 2]


def test_non_list_input_is_empty():
    assert ingest_bookings(None).bookings == []
    assert ingest_bookings({"date": "2024-01-01"}).bookings == []


def test_canonical_bookings_pass_through():
    booking = Booking(key="k", date="2024-01-01", status="APPROVED")
    assert ingest_bookings([booking]).bookings[0] is booking


def test_passthrough_fields():
    booking = normalize_booking({
        "date": "2024-01-01", "bookingName": "Dr. Rao", "dept": "CSE",
        "bookingEmail": "a@b.c", "bookingPhone": "123", "remarks": "Projector",
    }, 0)
    assert booking.title == "Dr. Rao"
    assert booking.booking_name == "Dr. Rao"
    assert booking.department == "CSE"
    assert booking.email == "a@b.c"
    assert booking.phone == "123"
    assert booking.remarks == "Projector"
