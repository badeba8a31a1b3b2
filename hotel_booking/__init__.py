from .booking import (
	NO_ROOM,
	Booking,
	InvalidDateError,
	InvalidRangeError,
	Room,
	find_first_available_room,
	fully_occupied_dates,
	has_date_overlap,
	is_room_available,
)
from .manager import BookingManager
from .repository import InMemoryRepository, Repository
from .yaml_store import (
	BookingYamlRepository,
	HotelStorageError,
	RoomYamlRepository,
	generate_test_bookings,
	seed_test_data,
)

__all__ = [
	"NO_ROOM",
	"Booking",
	"Room",
	"InvalidDateError",
	"InvalidRangeError",
	"has_date_overlap",
	"is_room_available",
	"find_first_available_room",
	"fully_occupied_dates",
	"BookingManager",
	"Repository",
	"InMemoryRepository",
	"BookingYamlRepository",
	"RoomYamlRepository",
	"HotelStorageError",
	"generate_test_bookings",
	"seed_test_data",
]
