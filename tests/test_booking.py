import unittest
from datetime import date

from hotel_booking import (
    NO_ROOM,
    Booking,
    InvalidRangeError,
    Room,
    find_first_available_room,
    fully_occupied_dates,
    has_date_overlap,
    is_room_available,
)
from hotel_booking.booking import parse_flag


class TestDateOverlap(unittest.TestCase):
    def setUp(self) -> None:
        self.exist_start = date(2026, 3, 10)
        self.exist_end = date(2026, 3, 12)

    def test_stay_ending_day_before_does_not_overlap(self) -> None:
        self.assertFalse(has_date_overlap(date(2026, 3, 7), date(2026, 3, 9), self.exist_start, self.exist_end))

    def test_stay_starting_day_after_does_not_overlap(self) -> None:
        self.assertFalse(has_date_overlap(date(2026, 3, 13), date(2026, 3, 14), self.exist_start, self.exist_end))

    def test_sharing_boundary_day_overlaps(self) -> None:
        self.assertTrue(has_date_overlap(date(2026, 3, 12), date(2026, 3, 14), self.exist_start, self.exist_end))
        self.assertTrue(has_date_overlap(date(2026, 3, 8), date(2026, 3, 10), self.exist_start, self.exist_end))

    def test_fully_contained_overlaps(self) -> None:
        self.assertTrue(has_date_overlap(date(2026, 3, 11), date(2026, 3, 11), self.exist_start, self.exist_end))

    def test_enclosing_overlaps(self) -> None:
        self.assertTrue(has_date_overlap(date(2026, 3, 1), date(2026, 3, 31), self.exist_start, self.exist_end))


class TestBookingModel(unittest.TestCase):
    def test_start_after_end_is_rejected(self) -> None:
        with self.assertRaises(InvalidRangeError):
            Booking(start_date=date(2026, 3, 5), end_date=date(2026, 3, 4))

    def test_single_day_booking_is_allowed(self) -> None:
        booking = Booking(start_date=date(2026, 3, 5), end_date=date(2026, 3, 5))
        self.assertEqual(booking.room_id, NO_ROOM)
        self.assertTrue(booking.is_active)

    def test_from_dict_accepts_strings_and_dates(self) -> None:
        from_strings = Booking.from_dict(
            {"id": 3, "room_id": 2, "customer_id": 7, "start_date": "2026-03-05", "end_date": "2026-03-06", "is_active": False}
        )
        from_dates = Booking.from_dict({"id": 3, "room_id": 2, "start_date": date(2026, 3, 5), "end_date": date(2026, 3, 6)})

        self.assertEqual(from_strings.start_date, date(2026, 3, 5))
        self.assertFalse(from_strings.is_active)
        self.assertEqual(from_strings.to_dict()["end_date"], "2026-03-06")
        self.assertIsNone(from_dates.customer_id)
        self.assertTrue(from_dates.is_active)

    def test_from_dict_reads_quoted_and_numeric_flags(self) -> None:
        base = {"id": 1, "room_id": 1, "start_date": "2026-03-05", "end_date": "2026-03-05"}

        self.assertFalse(Booking.from_dict({**base, "is_active": "false"}).is_active)
        self.assertFalse(Booking.from_dict({**base, "is_active": 0}).is_active)
        self.assertTrue(Booking.from_dict({**base, "is_active": "True"}).is_active)
        self.assertTrue(Booking.from_dict({**base, "is_active": 1}).is_active)
        with self.assertRaises(ValueError):
            Booking.from_dict({**base, "is_active": "maybe"})

    def test_parse_flag_rejects_other_integers(self) -> None:
        with self.assertRaises(ValueError):
            parse_flag(2, "is_active")
        self.assertTrue(parse_flag(" yes "))


class TestRoomAvailability(unittest.TestCase):
    def test_inactive_booking_does_not_block_room(self) -> None:
        bookings = [Booking(start_date=date(2026, 3, 5), end_date=date(2026, 3, 8), room_id=1, is_active=False)]
        self.assertTrue(is_room_available(1, date(2026, 3, 6), date(2026, 3, 7), bookings))

    def test_booking_of_other_room_does_not_block_room(self) -> None:
        bookings = [Booking(start_date=date(2026, 3, 5), end_date=date(2026, 3, 8), room_id=2)]
        self.assertTrue(is_room_available(1, date(2026, 3, 6), date(2026, 3, 7), bookings))
        self.assertFalse(is_room_available(2, date(2026, 3, 6), date(2026, 3, 7), bookings))

    def test_first_available_room_is_lowest_free_id(self) -> None:
        rooms = [Room(id=3), Room(id=1), Room(id=2)]
        bookings = [Booking(start_date=date(2026, 3, 5), end_date=date(2026, 3, 8), room_id=1)]

        self.assertEqual(find_first_available_room(date(2026, 3, 6), date(2026, 3, 6), rooms, bookings), 2)
        self.assertEqual(find_first_available_room(date(2026, 3, 9), date(2026, 3, 9), rooms, bookings), 1)

    def test_first_available_room_returns_no_room_when_all_taken(self) -> None:
        rooms = [Room(id=1), Room(id=2)]
        bookings = [
            Booking(start_date=date(2026, 3, 5), end_date=date(2026, 3, 8), room_id=1),
            Booking(start_date=date(2026, 3, 7), end_date=date(2026, 3, 7), room_id=2),
        ]
        self.assertEqual(find_first_available_room(date(2026, 3, 6), date(2026, 3, 7), rooms, bookings), NO_ROOM)

    def test_first_available_room_without_rooms(self) -> None:
        self.assertEqual(find_first_available_room(date(2026, 3, 6), date(2026, 3, 7), [], []), NO_ROOM)


class TestFullyOccupiedDates(unittest.TestCase):
    def setUp(self) -> None:
        self.rooms = [Room(id=1), Room(id=2)]

    def test_start_after_end_raises(self) -> None:
        with self.assertRaises(InvalidRangeError) as context:
            fully_occupied_dates(date(2026, 3, 2), date(2026, 3, 1), self.rooms, [])
        self.assertIn("The start date cannot be later than the end date.", str(context.exception))

    def test_no_rooms_means_nothing_is_fully_occupied(self) -> None:
        bookings = [Booking(start_date=date(2026, 3, 1), end_date=date(2026, 3, 3), room_id=1)]
        self.assertEqual(fully_occupied_dates(date(2026, 3, 1), date(2026, 3, 3), [], bookings), [])

    def test_no_bookings_means_nothing_is_fully_occupied(self) -> None:
        self.assertEqual(fully_occupied_dates(date(2026, 3, 1), date(2026, 3, 3), self.rooms, []), [])

    def test_returns_days_where_every_room_is_booked(self) -> None:
        bookings = [
            Booking(start_date=date(2026, 3, 1), end_date=date(2026, 3, 4), room_id=1),
            Booking(start_date=date(2026, 3, 3), end_date=date(2026, 3, 6), room_id=2),
        ]
        self.assertEqual(
            fully_occupied_dates(date(2026, 3, 1), date(2026, 3, 10), self.rooms, bookings),
            [date(2026, 3, 3), date(2026, 3, 4)],
        )

    def test_result_is_clipped_to_queried_range(self) -> None:
        bookings = [
            Booking(start_date=date(2026, 3, 1), end_date=date(2026, 3, 20), room_id=1),
            Booking(start_date=date(2026, 3, 1), end_date=date(2026, 3, 20), room_id=2),
        ]
        self.assertEqual(
            fully_occupied_dates(date(2026, 3, 19), date(2026, 3, 22), self.rooms, bookings),
            [date(2026, 3, 19), date(2026, 3, 20)],
        )

    def test_inactive_bookings_do_not_count(self) -> None:
        bookings = [
            Booking(start_date=date(2026, 3, 1), end_date=date(2026, 3, 2), room_id=1),
            Booking(start_date=date(2026, 3, 1), end_date=date(2026, 3, 2), room_id=2, is_active=False),
        ]
        self.assertEqual(fully_occupied_dates(date(2026, 3, 1), date(2026, 3, 2), self.rooms, bookings), [])

    def test_double_booked_room_does_not_count_twice(self) -> None:
        bookings = [
            Booking(start_date=date(2026, 3, 1), end_date=date(2026, 3, 3), room_id=1),
            Booking(start_date=date(2026, 3, 2), end_date=date(2026, 3, 2), room_id=1),
        ]
        self.assertEqual(fully_occupied_dates(date(2026, 3, 1), date(2026, 3, 3), self.rooms, bookings), [])

    def test_bookings_for_unknown_rooms_are_ignored(self) -> None:
        bookings = [
            Booking(start_date=date(2026, 3, 1), end_date=date(2026, 3, 1), room_id=1),
            Booking(start_date=date(2026, 3, 1), end_date=date(2026, 3, 1), room_id=99),
        ]
        self.assertEqual(fully_occupied_dates(date(2026, 3, 1), date(2026, 3, 1), self.rooms, bookings), [])

    def test_single_room_booked_never_fills_two_room_hotel(self) -> None:
        bookings = [
            Booking(start_date=date(2026, 3, day), end_date=date(2026, 3, day), room_id=1) for day in range(1, 11)
        ]
        self.assertEqual(fully_occupied_dates(date(2026, 3, 1), date(2026, 3, 10), self.rooms, bookings), [])


if __name__ == "__main__":
    unittest.main()
