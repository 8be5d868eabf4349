"""Recording publisher for development and tests — keeps every message in memory."""

from ordering.publisher.messages import _Message
from ordering.publisher.port import EventPublisher


class RecordingPublisher(EventPublisher):
    def __init__(self) -> None:
        self.messages: list[_Message] = []

    def publish(self, message: _Message) -> None:
        self.messages.append(message)

    def of_type(self, message_cls) -> list[_Message]:
        return [m for m in self.messages if isinstance(m, message_cls)]

    def clear(self) -> None:
        self.messages.clear()
