from __future__ import annotations

from datetime import date
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from hotel_booking import Booking, BookingManager, BookingYamlRepository, RoomYamlRepository

mcp = FastMCP(
    "Hotel Booking MCP Server",
    instructions="Expose room availability and booking operations from the hotel_booking project.",
    json_response=True,
)

DATA_DIR = Path(__file__).parent / "data"
ROOMS = RoomYamlRepository(DATA_DIR)
BOOKINGS = BookingYamlRepository(DATA_DIR)
MANAGER = BookingManager(BOOKINGS, ROOMS)


@mcp.resource("hotel://rooms")
async def list_rooms() -> list[dict]:
    """List the hotel's rooms."""
    return [room.to_dict() for room in ROOMS.get_all()]


@mcp.tool()
def list_bookings(room_id: int | None = None, active_only: bool = True) -> list[dict]:
    """Return bookings, optionally filtered by room and active flag."""
    records = BOOKINGS.get_all()
    filtered = [
        record
        for record in records
        if (room_id is None or record.room_id == room_id) and (record.is_active or not active_only)
    ]
    return [record.to_dict() for record in filtered]


@mcp.tool()
def find_available_room(start_date: str, end_date: str) -> int:
    """Return the lowest free room id for the ISO date range, or -1 when none is free."""
    return MANAGER.find_available_room(date.fromisoformat(start_date), date.fromisoformat(end_date))


@mcp.tool()
def book_room(start_date: str, end_date: str, customer_id: int | None = None) -> dict:
    """Book the first free room for the ISO date range."""
    created = MANAGER.place_booking(
        Booking(
            start_date=date.fromisoformat(start_date),
            end_date=date.fromisoformat(end_date),
            customer_id=customer_id,
        )
    )
    if created is None:
        return {"ok": False, "message": "All rooms are occupied for the requested dates."}
    return {"ok": True, "booking": created.to_dict()}


@mcp.tool()
def fully_occupied_dates(start_date: str, end_date: str) -> list[str]:
    """List the dates in the ISO range on which every room is booked."""
    occupied = MANAGER.get_fully_occupied_dates(date.fromisoformat(start_date), date.fromisoformat(end_date))
    return [day.isoformat() for day in occupied]


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
