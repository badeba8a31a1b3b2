from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Callable

from flask import Flask, jsonify, request

from .booking import NO_ROOM, Booking, Room, is_room_available, parse_flag
from .manager import BookingManager
from .yaml_store import BookingYamlRepository, RoomYamlRepository


def create_app(
    data_dir: str | Path = "data",
    today_provider: Callable[[], date] | None = None,
) -> Flask:
    app = Flask(__name__)
    rooms = RoomYamlRepository(data_dir)
    bookings = BookingYamlRepository(data_dir)
    manager = BookingManager(bookings, rooms, today_provider=today_provider)

    @app.after_request
    def add_cors_headers(response: Any) -> Any:
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.get("/api/rooms")
    def list_rooms() -> Any:
        return jsonify({"ok": True, "rooms": [room.to_dict() for room in rooms.get_all()]})

    @app.post("/api/rooms")
    def add_room() -> Any:
        payload = request.get_json(silent=True) or {}
        created = rooms.add(Room(description=str(payload.get("description", "")).strip()))
        return jsonify({"ok": True, "room": created.to_dict()}), 201

    @app.get("/api/rooms/<int:room_id>")
    def get_room(room_id: int) -> Any:
        room = rooms.get(room_id)
        if room is None:
            return jsonify({"ok": False, "message": "Room not found."}), 404
        return jsonify({"ok": True, "room": room.to_dict()})

    @app.delete("/api/rooms/<int:room_id>")
    def delete_room(room_id: int) -> Any:
        if rooms.get(room_id) is None:
            return jsonify({"ok": False, "message": "Room not found."}), 404
        removed = rooms.remove(room_id)
        return jsonify({"ok": True, "room": removed.to_dict()})

    @app.get("/api/rooms/available")
    def available_room() -> Any:
        try:
            start, end = _read_date_range(request.args)
            room_id = manager.find_available_room(start, end)
        except ValueError as error:
            return jsonify({"ok": False, "message": str(error)}), 400

        return jsonify({"ok": True, "room_id": room_id, "available": room_id != NO_ROOM})

    @app.get("/api/bookings")
    def list_bookings() -> Any:
        return jsonify({"ok": True, "bookings": [booking.to_dict() for booking in bookings.get_all()]})

    @app.get("/api/bookings/<int:booking_id>")
    def get_booking(booking_id: int) -> Any:
        booking = bookings.get(booking_id)
        if booking is None:
            return jsonify({"ok": False, "message": "Booking not found."}), 404
        return jsonify({"ok": True, "booking": booking.to_dict()})

    @app.post("/api/bookings")
    def create_booking() -> Any:
        payload = request.get_json(silent=True) or {}
        try:
            candidate = _booking_from_payload(payload)
            created = manager.place_booking(candidate)
        except ValueError as error:
            return jsonify({"ok": False, "message": str(error)}), 400

        if created is None:
            return (
                jsonify({"ok": False, "message": "The booking could not be created. All rooms are occupied."}),
                409,
            )
        return jsonify({"ok": True, "booking": created.to_dict()}), 201

    @app.put("/api/bookings/<int:booking_id>")
    def update_booking(booking_id: int) -> Any:
        current = bookings.get(booking_id)
        if current is None:
            return jsonify({"ok": False, "message": "Booking not found."}), 404

        payload = request.get_json(silent=True) or {}
        try:
            updated = _booking_from_payload(payload, current)
        except ValueError as error:
            return jsonify({"ok": False, "message": str(error)}), 400

        others = [booking for booking in bookings.get_all() if booking.id != updated.id]
        if updated.is_active and not is_room_available(updated.room_id, updated.start_date, updated.end_date, others):
            return (
                jsonify({"ok": False, "message": "Updated booking overlaps with an existing active booking."}),
                409,
            )

        bookings.edit(updated)
        return jsonify({"ok": True, "booking": updated.to_dict()})

    @app.delete("/api/bookings/<int:booking_id>")
    def delete_booking(booking_id: int) -> Any:
        if bookings.get(booking_id) is None:
            return jsonify({"ok": False, "message": "Booking not found."}), 404
        removed = bookings.remove(booking_id)
        return jsonify({"ok": True, "booking": removed.to_dict()})

    @app.get("/api/occupancy")
    def occupancy() -> Any:
        try:
            start, end = _read_date_range(request.args)
            occupied = manager.get_fully_occupied_dates(start, end)
        except ValueError as error:
            return jsonify({"ok": False, "message": str(error)}), 400

        return jsonify(
            {
                "ok": True,
                "start": start.isoformat(),
                "end": end.isoformat(),
                "fully_occupied_dates": [day.isoformat() for day in occupied],
            }
        )

    return app


def _read_date_range(args: Any) -> tuple[date, date]:
    start_raw = str(args.get("start", "")).strip()
    end_raw = str(args.get("end", "")).strip() or start_raw
    if not start_raw:
        raise ValueError("start is required (YYYY-MM-DD).")
    return _parse_iso_date(start_raw, "start"), _parse_iso_date(end_raw, "end")


def _parse_iso_date(value: Any, field: str) -> date:
    try:
        return date.fromisoformat(str(value))
    except ValueError as error:
        raise ValueError(f"{field} must be an ISO date (YYYY-MM-DD).") from error


def _booking_from_payload(payload: dict[str, Any], current: Booking | None = None) -> Booking:
    if current is None and ("start_date" not in payload or "end_date" not in payload):
        raise ValueError("start_date and end_date are required.")

    start = _parse_iso_date(payload["start_date"], "start_date") if "start_date" in payload else current.start_date  # type: ignore[union-attr]
    end = _parse_iso_date(payload["end_date"], "end_date") if "end_date" in payload else current.end_date  # type: ignore[union-attr]

    customer_raw = payload.get("customer_id", current.customer_id if current else None)
    room_raw = payload.get("room_id", current.room_id if current else NO_ROOM)
    try:
        customer_id = int(customer_raw) if customer_raw is not None else None
        room_id = int(room_raw) if room_raw is not None else NO_ROOM
    except (TypeError, ValueError) as error:
        raise ValueError("room_id and customer_id must be integers.") from error

    is_active = parse_flag(payload["is_active"], "is_active") if "is_active" in payload else (current.is_active if current else True)

    return Booking(
        id=current.id if current else None,
        room_id=room_id,
        customer_id=customer_id,
        start_date=start,
        end_date=end,
        is_active=is_active,
    )


if __name__ == "__main__":
    app = create_app()
    app.run(host="127.0.0.1", port=5000, debug=False)
