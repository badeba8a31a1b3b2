from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
import traceback

from hotel_booking import (
    NO_ROOM,
    Booking,
    BookingManager,
    BookingYamlRepository,
    RoomYamlRepository,
    seed_test_data,
)


def main() -> int:
    print("[INFO] Hotel Booking Quick Check")
    print("[INFO] Generating and validating test data...")

    rooms = RoomYamlRepository("data")
    bookings = BookingYamlRepository("data")
    today = date.today()

    generated = seed_test_data(rooms, bookings, today=today, overwrite=True)
    print(f"[OK] Test data generated: {len(rooms.get_all())} rooms, {len(generated)} bookings")

    manager = BookingManager(bookings, rooms)
    occupied = manager.get_fully_occupied_dates(today, today + timedelta(days=30))
    print(f"[OK] Fully occupied dates in the next 30 days: {[day.isoformat() for day in occupied]}")

    start = today + timedelta(days=3)
    end = start + timedelta(days=2)
    room_id = manager.find_available_room(start, end)
    if room_id == NO_ROOM:
        print(f"[OK] No room free for {start.isoformat()}~{end.isoformat()}")
    else:
        print(f"[OK] First free room for {start.isoformat()}~{end.isoformat()}: {room_id}")

    created = manager.place_booking(Booking(start_date=start, end_date=end, customer_id=1))
    if created is None:
        print("[OK] Booking rejected: all rooms occupied")
    else:
        print(f"[OK] Booked: id={created.id}, room={created.room_id}")

    print(f"[OK] Rooms YAML: {Path('data/rooms.yaml').resolve()}")
    print(f"[OK] Bookings YAML: {Path('data/bookings.yaml').resolve()}")
    print(f"[OK] Event Log YAML: {Path('data/hotel_events.yaml').resolve()}")

    print("[DONE] Quick check completed successfully.")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception:
        print("[ERROR] Quick check failed.")
        traceback.print_exc()
        raise SystemExit(1)
