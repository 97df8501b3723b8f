"""
EventLog — упорядоченный приёмник уведомлений

Компоненты разделяют один EventLog, поэтому порядок публикации между
движком прогрессии, реестром челленджей и адаптером пула совпадает с
порядком переходов. Каждое событие также пишется в стандартный logger со
структурным полем `event`.
"""

import logging
from typing import Iterator, Optional, TypeVar

from src.core.domain.events import Notification

logger = logging.getLogger(__name__)

N = TypeVar("N", bound=Notification)


class EventLog:
    """Append-only список уведомлений в памяти."""

    def __init__(self) -> None:
        self._events: list[Notification] = []

    def emit(self, event: Notification) -> None:
        """Записать событие и залогировать его."""
        self._events.append(event)
        logger.info(
            "Notification emitted: %s",
            event.kind,
            extra={
                "event": f"notification.{event.kind}",
                "payload": event.model_dump(mode="json", exclude={"kind"}),
            },
        )

    def events(self, kind: Optional[type[N]] = None) -> list:
        """
        События в порядке публикации, опционально отфильтрованные по классу.

        Args:
            kind: Подкласс Notification для фильтра (None = все)

        Returns:
            Список событий
        """
        if kind is None:
            return list(self._events)
        return [e for e in self._events if isinstance(e, kind)]

    def count(self, kind: Optional[type[N]] = None) -> int:
        """Число опубликованных событий, опционально одного класса."""
        return len(self.events(kind))

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Notification]:
        return iter(list(self._events))
