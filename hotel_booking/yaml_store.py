from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar
import random
import shutil

import yaml

from .booking import Booking, Room, has_date_overlap
from .repository import assign_entity_id

T = TypeVar("T")


class HotelStorageError(RuntimeError):
    pass


DEFAULT_ROOM_COUNT = 5
SEED_WINDOW_DAYS = 30
EVENT_LOG_FILENAME = "hotel_events.yaml"


class YamlRepository(Generic[T]):
    """Repository keeping one entity type as a YAML list in ``base_dir``.

    Mutations are appended to a shared event log next to the data file.
    """

    filename = "entities.yaml"
    event_prefix = "ENTITY"

    def __init__(
        self,
        base_dir: str | Path,
        decode: Callable[[dict[str, Any]], T],
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.base_dir = Path(base_dir)
        self.data_file = self.base_dir / self.filename
        self.log_file = self.base_dir / EVENT_LOG_FILENAME
        self._decode = decode
        self._clock: Callable[[], datetime] = clock or datetime.now
        self._ensure_files()

    def _ensure_files(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        for path in (self.data_file, self.log_file):
            if not path.exists():
                path.write_text("[]\n", encoding="utf-8")

    def _read_rows(self, path: Path) -> list[dict[str, Any]]:
        try:
            payload = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            path.write_text("[]\n", encoding="utf-8")
            return []
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as error:
            self._quarantine_corrupt_file(path, error)
            return []

        if payload is None:
            return []
        if not isinstance(payload, list):
            self._quarantine_corrupt_file(path, ValueError("top-level YAML is not a list"))
            return []

        sanitized: list[dict[str, Any]] = []
        for index, row in enumerate(payload):
            reason = _row_problem(row, requires_id=path != self.log_file)
            if reason is None:
                sanitized.append(row)
                continue
            if path == self.log_file:
                continue
            self._log_event(
                "YAML_ROW_SKIPPED",
                {
                    "entity": self.event_prefix.lower(),
                    "file": str(path.name),
                    "index": index,
                    "reason": reason,
                },
            )
        return sanitized

    def _write_rows(self, path: Path, rows: list[dict[str, Any]]) -> None:
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            temp_path.write_text(yaml.safe_dump(rows, allow_unicode=True, sort_keys=False), encoding="utf-8")
            temp_path.replace(path)
        except OSError as error:
            raise HotelStorageError(f"Failed to write YAML file: {path}") from error
        finally:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)

    def _quarantine_corrupt_file(self, path: Path, error: Exception) -> None:
        timestamp = self._clock().strftime("%Y%m%d%H%M%S")
        backup_path = path.with_name(f"{path.stem}.corrupt.{timestamp}{path.suffix}")
        try:
            if path.exists():
                shutil.copy2(path, backup_path)
        except OSError:
            pass

        path.write_text("[]\n", encoding="utf-8")
        if path != self.log_file:
            self._log_event(
                "YAML_RECOVERED",
                {
                    "entity": self.event_prefix.lower(),
                    "file": str(path.name),
                    "backup": str(backup_path.name),
                    "reason": str(error),
                },
            )

    def _log_event(self, event_type: str, payload: dict[str, Any], event_time: datetime | None = None) -> None:
        timestamp = (event_time or self._clock()).isoformat(timespec="seconds")
        events = self._read_rows(self.log_file)
        events.append({"event_time": timestamp, "event_type": event_type, "payload": payload})
        self._write_rows(self.log_file, events)

    def _find_index(self, rows: list[dict[str, Any]], entity_id: int) -> int:
        for index, row in enumerate(rows):
            if row.get("id") is not None and int(row["id"]) == entity_id:
                return index
        return -1

    def get_all(self) -> list[T]:
        return [self._decode(row) for row in self._read_rows(self.data_file)]

    def get(self, entity_id: int) -> T | None:
        rows = self._read_rows(self.data_file)
        found_index = self._find_index(rows, entity_id)
        if found_index < 0:
            return None
        return self._decode(rows[found_index])

    def add(self, entity: T) -> T:
        rows = self._read_rows(self.data_file)
        stored = assign_entity_id(entity, [int(row["id"]) for row in rows if row.get("id") is not None])
        payload = stored.to_dict()  # type: ignore[attr-defined]
        rows.append(payload)
        self._write_rows(self.data_file, rows)
        self._log_event(f"{self.event_prefix}_ADDED", payload)
        return stored

    def edit(self, entity: T) -> T:
        entity_id = getattr(entity, "id")
        rows = self._read_rows(self.data_file)
        found_index = -1 if entity_id is None else self._find_index(rows, entity_id)
        if found_index < 0:
            raise ValueError(f"id {entity_id} not found in {self.data_file.name}")

        payload = entity.to_dict()  # type: ignore[attr-defined]
        rows[found_index] = payload
        self._write_rows(self.data_file, rows)
        self._log_event(f"{self.event_prefix}_UPDATED", payload)
        return entity

    def remove(self, entity_id: int) -> T:
        rows = self._read_rows(self.data_file)
        found_index = self._find_index(rows, entity_id)
        if found_index < 0:
            raise ValueError(f"id {entity_id} not found in {self.data_file.name}")

        removed = rows.pop(found_index)
        self._write_rows(self.data_file, rows)
        self._log_event(f"{self.event_prefix}_REMOVED", removed)
        return self._decode(removed)

    def clear(self) -> None:
        self._write_rows(self.data_file, [])


def _row_problem(row: Any, requires_id: bool) -> str | None:
    if not isinstance(row, dict):
        return "row is not a mapping"
    entity_id = row.get("id")
    if requires_id and (not isinstance(entity_id, int) or isinstance(entity_id, bool)):
        return "row has no integer id"
    return None


class RoomYamlRepository(YamlRepository[Room]):
    filename = "rooms.yaml"
    event_prefix = "ROOM"

    def __init__(self, base_dir: str | Path = "data", clock: Callable[[], datetime] | None = None) -> None:
        super().__init__(base_dir, Room.from_dict, clock)


class BookingYamlRepository(YamlRepository[Booking]):
    filename = "bookings.yaml"
    event_prefix = "BOOKING"

    def __init__(self, base_dir: str | Path = "data", clock: Callable[[], datetime] | None = None) -> None:
        super().__init__(base_dir, Booking.from_dict, clock)


def generate_test_bookings(today: date, room_ids: list[int]) -> list[Booking]:
    """Build a reproducible set of future bookings for ``room_ids``.

    Stays span 1-5 days within SEED_WINDOW_DAYS after ``today``, never
    overlapping on the same room. Roughly one in eight is cancelled.
    """
    if not room_ids:
        raise ValueError("room_ids must not be empty")

    rng = random.Random(f"seed:{today.isoformat()}:{len(room_ids)}")
    window_start = today + timedelta(days=1)
    window_end = today + timedelta(days=SEED_WINDOW_DAYS)

    bookings: list[Booking] = []
    customer_id = 1
    for room_id in sorted(room_ids):
        taken: list[tuple[date, date]] = []
        for _ in range(rng.randint(2, 5)):
            start = window_start + timedelta(days=rng.randint(0, SEED_WINDOW_DAYS - 1))
            end = min(start + timedelta(days=rng.randint(0, 4)), window_end)
            if any(has_date_overlap(start, end, taken_start, taken_end) for taken_start, taken_end in taken):
                continue

            taken.append((start, end))
            bookings.append(
                Booking(
                    start_date=start,
                    end_date=end,
                    room_id=room_id,
                    customer_id=customer_id,
                    is_active=rng.random() >= 0.125,
                )
            )
            customer_id += 1

    return sorted(bookings, key=lambda booking: (booking.start_date, booking.room_id))


def seed_test_data(
    rooms: RoomYamlRepository,
    bookings: BookingYamlRepository,
    today: date | None = None,
    room_count: int = DEFAULT_ROOM_COUNT,
    overwrite: bool = True,
) -> list[Booking]:
    if room_count <= 0:
        raise ValueError("room_count must be greater than zero")

    effective_today = today or date.today()
    if overwrite:
        rooms.clear()
        bookings.clear()

    room_ids: list[int] = [rooms.add(Room(description=f"Room {index}")).id for index in range(1, room_count + 1)]  # type: ignore[misc]
    generated = [bookings.add(booking) for booking in generate_test_bookings(effective_today, room_ids)]

    bookings._log_event(
        "TEST_DATA_GENERATED",
        {
            "seeded_for": effective_today.isoformat(),
            "rooms": room_count,
            "bookings": len(generated),
            "window_days": SEED_WINDOW_DAYS,
            "overwrite": overwrite,
        },
    )
    return generated
