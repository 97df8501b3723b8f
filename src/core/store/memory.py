"""
In-memory хранилища пользовательских маппингов и append-only списков определений.

KeyValueStore повторяет маппинг леджера: чтение отсутствующего ключа даёт
значение по умолчанию, поэтому пользователей не нужно создавать явно.
AppendOnlyArena выдаёт плотные индексы, которые не переиспользуются и не
уплотняются: вызывающие хранят id челленджей/квестов между вызовами.
"""

from typing import Callable, Generic, Hashable, Iterator, Protocol, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class KeyValueStore(Protocol[K, V]):
    """Минимальный интерфейс маппинга, используемый движками."""

    def get(self, key: K) -> V:
        ...

    def set(self, key: K, value: V) -> None:
        ...


class InMemoryKeyValueStore(Generic[K, V]):
    """
    KeyValueStore на dict со значением по умолчанию для отсутствующих ключей.

    default_factory вызывается при каждом промахе, изменяемые значения по
    умолчанию не разделяются между ключами. Чтение не вставляет ключ.
    """

    def __init__(self, default_factory: Callable[[], V]):
        self._default_factory = default_factory
        self._data: dict[K, V] = {}

    def get(self, key: K) -> V:
        if key in self._data:
            return self._data[key]
        return self._default_factory()

    def set(self, key: K, value: V) -> None:
        self._data[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def items(self) -> Iterator[tuple[K, V]]:
        return iter(list(self._data.items()))


class AppendOnlyArena(Generic[V]):
    """
    Плотный append-only список записей с монотонно растущим индексом.

    Запись можно заменить на месте (например, деактивированной копией), но
    не удалить, поэтому индекс валиден всё время жизни арены.
    """

    def __init__(self) -> None:
        self._items: list[V] = []

    def append(self, value: V) -> int:
        """Сохранить value и вернуть новый индекс."""
        self._items.append(value)
        return len(self._items) - 1

    def contains(self, index: int) -> bool:
        """Был ли index выдан через append."""
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(self._items)

    def get(self, index: int) -> V:
        """
        Запись по индексу.

        Raises:
            IndexError: Если index не выдавался
        """
        if not self.contains(index):
            raise IndexError(f"arena index out of range: {index}")
        return self._items[index]

    def replace(self, index: int, value: V) -> None:
        """
        Заменить запись по существующему индексу.

        Raises:
            IndexError: Если index не выдавался
        """
        if not self.contains(index):
            raise IndexError(f"arena index out of range: {index}")
        self._items[index] = value

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[V]:
        return iter(list(self._items))
