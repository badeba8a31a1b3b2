from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable, Iterator

NO_ROOM = -1


class InvalidRangeError(ValueError):
    pass


class InvalidDateError(ValueError):
    pass


@dataclass(frozen=True)
class Room:
    id: int | None = None
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "description": self.description}

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Room":
        return Room(
            id=(int(data["id"]) if data.get("id") is not None else None),
            description=str(data.get("description") or ""),
        )


@dataclass(frozen=True)
class Booking:
    start_date: date
    end_date: date
    room_id: int = NO_ROOM
    customer_id: int | None = None
    is_active: bool = True
    id: int | None = None

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise InvalidRangeError("The start date cannot be later than the end date.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "room_id": self.room_id,
            "customer_id": self.customer_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "is_active": self.is_active,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Booking":
        return Booking(
            id=(int(data["id"]) if data.get("id") is not None else None),
            room_id=int(data.get("room_id", NO_ROOM)),
            customer_id=(int(data["customer_id"]) if data.get("customer_id") is not None else None),
            start_date=_parse_date(data["start_date"]),
            end_date=_parse_date(data["end_date"]),
            is_active=parse_flag(data.get("is_active", True), "is_active"),
        )


def parse_flag(value: Any, field: str = "flag") -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "1", "yes"}:
            return True
        if normalized in {"false", "0", "no"}:
            return False
    raise ValueError(f"{field} must be a boolean.")


def _parse_date(value: Any) -> date:
    # PyYAML already turns unquoted ISO dates into date objects.
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def has_date_overlap(new_start: date, new_end: date, exist_start: date, exist_end: date) -> bool:
    """Return True when two whole-day intervals share at least one day.

    Both intervals are inclusive: [start, end], so a stay ending on the 5th
    and another starting on the 5th overlap.
    """
    return new_start <= exist_end and exist_start <= new_end


def iter_dates(start_date: date, end_date: date) -> Iterator[date]:
    cursor = start_date
    while cursor <= end_date:
        yield cursor
        cursor += timedelta(days=1)


def is_room_available(room_id: int, start_date: date, end_date: date, bookings: Iterable[Booking]) -> bool:
    """Return True if no active booking of ``room_id`` overlaps the requested days."""
    for booking in bookings:
        if not booking.is_active or booking.room_id != room_id:
            continue
        if has_date_overlap(start_date, end_date, booking.start_date, booking.end_date):
            return False
    return True


def find_first_available_room(
    start_date: date,
    end_date: date,
    rooms: Iterable[Room],
    bookings: Iterable[Booking],
) -> int:
    """Return the lowest room id free for the whole range, or NO_ROOM."""
    active = [booking for booking in bookings if booking.is_active]
    room_ids = sorted({room.id for room in rooms if room.id is not None})
    for room_id in room_ids:
        if is_room_available(room_id, start_date, end_date, active):
            return room_id
    return NO_ROOM


def fully_occupied_dates(
    start_date: date,
    end_date: date,
    rooms: Iterable[Room],
    bookings: Iterable[Booking],
) -> list[date]:
    if start_date > end_date:
        raise InvalidRangeError("The start date cannot be later than the end date.")

    room_ids = {room.id for room in rooms}
    room_count = len(room_ids)
    if room_count == 0:
        return []

    active = [booking for booking in bookings if booking.is_active]
    if not active:
        return []

    occupied: list[date] = []
    for day in iter_dates(start_date, end_date):
        # Rooms, not bookings: a double-booked room still counts once.
        booked_rooms = {
            booking.room_id
            for booking in active
            if booking.start_date <= day <= booking.end_date and booking.room_id in room_ids
        }
        if len(booked_rooms) == room_count:
            occupied.append(day)
    return occupied
