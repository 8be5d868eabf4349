"""Event publisher port — abstract interface for integration message delivery.

Delivery is at-least-once and fire-and-forget from the ordering
service's point of view: ``publish`` returns once the message has been
handed over, and consumers must tolerate duplicates.
"""

from abc import ABC, abstractmethod

from ordering.publisher.messages import _Message


class EventPublisher(ABC):
    @abstractmethod
    def publish(self, message: _Message) -> None:
        """Hand a message over for delivery."""
        ...
