from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Callable

from .booking import (
    NO_ROOM,
    Booking,
    InvalidDateError,
    InvalidRangeError,
    Room,
    find_first_available_room,
    fully_occupied_dates,
)
from .repository import Repository


class BookingManager:
    """Availability engine over a room repository and a booking repository.

    Every call re-reads both collections, so the manager keeps no state of
    its own besides the repositories and the clock.
    """

    def __init__(
        self,
        booking_repository: Repository[Booking],
        room_repository: Repository[Room],
        today_provider: Callable[[], date] | None = None,
    ) -> None:
        self.booking_repository = booking_repository
        self.room_repository = room_repository
        self._today: Callable[[], date] = today_provider or date.today

    def get_fully_occupied_dates(self, start_date: date, end_date: date) -> list[date]:
        if start_date > end_date:
            raise InvalidRangeError("The start date cannot be later than the end date.")

        rooms = self.room_repository.get_all()
        bookings = self.booking_repository.get_all()
        return fully_occupied_dates(start_date, end_date, rooms, bookings)

    def find_available_room(self, start_date: date, end_date: date) -> int:
        """Return the lowest free room id for [start_date, end_date], or NO_ROOM."""
        if start_date <= self._today():
            raise InvalidDateError("The start date must be in the future.")
        if start_date > end_date:
            raise InvalidRangeError("The start date cannot be later than the end date.")

        rooms = self.room_repository.get_all()
        bookings = self.booking_repository.get_all()
        return find_first_available_room(start_date, end_date, rooms, bookings)

    def place_booking(self, booking: Booking) -> Booking | None:
        """Store ``booking`` in the first free room and return the stored copy.

        Returns None when every room is taken for the requested days; nothing
        is written in that case.
        """
        if booking.start_date <= self._today():
            raise InvalidDateError("Booking cannot start in the past.")

        room_id = self.find_available_room(booking.start_date, booking.end_date)
        if room_id == NO_ROOM:
            return None

        return self.booking_repository.add(replace(booking, room_id=room_id, is_active=True))

    def create_booking(self, booking: Booking) -> bool:
        return self.place_booking(booking) is not None
