from __future__ import annotations

from dataclasses import replace
from typing import Any, Generic, Iterable, Protocol, TypeVar

T = TypeVar("T")


class Repository(Protocol[T]):
    """Storage contract consumed by the booking manager.

    Entities are frozen dataclasses with an integer ``id``; ``add`` assigns one
    when the entity arrives with ``id=None``.
    """

    def get_all(self) -> list[T]: ...

    def get(self, entity_id: int) -> T | None: ...

    def add(self, entity: T) -> T: ...

    def edit(self, entity: T) -> T: ...

    def remove(self, entity_id: int) -> T: ...


def next_entity_id(existing_ids: Iterable[int]) -> int:
    return max(existing_ids, default=0) + 1


def assign_entity_id(entity: T, existing_ids: Iterable[int]) -> T:
    existing = set(existing_ids)
    entity_id: Any = getattr(entity, "id")
    if entity_id is None:
        return replace(entity, id=next_entity_id(existing))  # type: ignore[type-var]
    if entity_id in existing:
        raise ValueError(f"id {entity_id} already exists")
    return entity


class InMemoryRepository(Generic[T]):
    def __init__(self, entities: Iterable[T] = ()) -> None:
        self._entities: dict[int, T] = {}
        for entity in entities:
            self.add(entity)

    def get_all(self) -> list[T]:
        return list(self._entities.values())

    def get(self, entity_id: int) -> T | None:
        return self._entities.get(entity_id)

    def add(self, entity: T) -> T:
        stored = assign_entity_id(entity, self._entities.keys())
        self._entities[getattr(stored, "id")] = stored
        return stored

    def edit(self, entity: T) -> T:
        entity_id = getattr(entity, "id")
        if entity_id not in self._entities:
            raise ValueError(f"id {entity_id} not found")
        self._entities[entity_id] = entity
        return entity

    def remove(self, entity_id: int) -> T:
        if entity_id not in self._entities:
            raise ValueError(f"id {entity_id} not found")
        return self._entities.pop(entity_id)
