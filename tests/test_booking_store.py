from unittest import mock

import pytest
from sqlalchemy.exc import OperationalError

from bustrack.bookings.store import BookingStore, booking_key, bus_seats_key, user_bookings_key
from bustrack.exceptions import NotFound, StoreError
from bustrack.store.kv_store import KeyValueStore
from tests.conftest import JOURNEY_DATE, make_booking


def test_create_and_get(store):
    booking = make_booking("BKG100", seats=["1A", "1B"])
    store.create_booking(booking)

    fetched = store.get_booking("BKG100")

    assert fetched == booking


def test_booked_seats_include_new_booking(store):
    store.create_booking(make_booking("BKG1", seats=["1A", "1B"]))

    seats = store.get_booked_seats("BUS001", JOURNEY_DATE)

    assert set(seats) >= {"1A", "1B"}


def test_seat_index_merges_without_duplicates(store):
    store.create_booking(make_booking("BKG1", seats=["1A", "1B"]))
    store.create_booking(make_booking("BKG2", seats=["1B", "2C"], email="y@example.com"))

    assert store.get_booked_seats("BUS001", JOURNEY_DATE) == ["1A", "1B", "2C"]


def test_seat_index_is_per_bus_and_date(store):
    store.create_booking(make_booking("BKG1", seats=["1A"]))
    store.create_booking(make_booking("BKG2", seats=["2A"], bus_id="BUS003"))

    assert store.get_booked_seats("BUS001", JOURNEY_DATE) == ["1A"]
    assert store.get_booked_seats("BUS003", JOURNEY_DATE) == ["2A"]
    assert store.get_booked_seats("BUS001", "2030-05-18") == []


def test_booked_seats_accepts_timestamp_date(store):
    store.create_booking(make_booking("BKG1", seats=["4D"]))

    assert store.get_booked_seats("BUS001", "2030-05-17T00:00:00.000Z") == ["4D"]


def test_user_bookings_in_creation_order(store):
    first = make_booking("BKG2", seats=["1A"])
    second = make_booking("BKG1", seats=["1B"])
    store.create_booking(first)
    store.create_booking(second)
    store.create_booking(make_booking("BKG3", seats=["1C"], email="someone@example.com"))

    bookings = store.list_bookings_for_user("x@example.com")

    assert [b.booking_id for b in bookings] == ["BKG2", "BKG1"]


def test_user_without_bookings(store):
    assert store.list_bookings_for_user("nobody@example.com") == []


def test_missing_referenced_booking_is_skipped(store, db):
    store.create_booking(make_booking("BKG1", seats=["1A"]))
    store.create_booking(make_booking("BKG2", seats=["1B"]))
    KeyValueStore(db).delete(booking_key("BKG1"))

    bookings = store.list_bookings_for_user("x@example.com")

    assert [b.booking_id for b in bookings] == ["BKG2"]


def test_get_unknown_booking(store):
    assert store.find_booking("nonexistent") is None
    with pytest.raises(NotFound):
        store.get_booking("nonexistent")


def test_key_layout(store, db):
    store.create_booking(make_booking("BKG9", seats=["3B"]))
    kv = KeyValueStore(db)

    assert kv.get(booking_key("BKG9"))["booking_id"] == "BKG9"
    assert kv.get(user_bookings_key("x@example.com")) == ["BKG9"]
    assert kv.get(bus_seats_key("BUS001", JOURNEY_DATE)) == ["3B"]
    assert bus_seats_key("BUS001", JOURNEY_DATE) == "bus_seats:BUS001:2030-05-17"


def test_failed_write_leaves_store_untouched(store, db):
    store.create_booking(make_booking("BKG1", seats=["1A"]))

    with mock.patch.object(db, "commit", side_effect=OperationalError("COMMIT", {}, Exception("disk full"))):
        with pytest.raises(StoreError):
            store.create_booking(make_booking("BKG2", seats=["2A"]))

    assert store.find_booking("BKG2") is None
    assert [b.booking_id for b in store.list_bookings_for_user("x@example.com")] == ["BKG1"]
    assert store.get_booked_seats("BUS001", JOURNEY_DATE) == ["1A"]


def test_kv_prefix_scan(db):
    kv = KeyValueStore(db)
    kv.mset({"booking:a": {"n": 1}, "booking:b": {"n": 2}, "user_bookings:x": ["a"]})

    assert kv.get_by_prefix("booking:") == {"booking:a": {"n": 1}, "booking:b": {"n": 2}}
    assert kv.mget(["booking:b", "missing", "booking:a"]) == [{"n": 2}, None, {"n": 1}]


def test_kv_overwrite_and_delete(db):
    kv = KeyValueStore(db)
    kv.set("k", [1])
    kv.set("k", [1, 2])

    assert kv.get("k") == [1, 2]

    kv.mdelete(["k"])
    assert kv.get("k") is None
