"""Event publisher factory.

Provides get_publisher() / set_publisher() to swap implementations:
- RecordingPublisher for development and testing (``ORDERING_EVENT_PUBLISHER=memory``)
- BrokerPublisher for production (``ORDERING_EVENT_PUBLISHER=broker``)
"""

import os

from ordering.publisher.port import EventPublisher

_current_publisher: EventPublisher | None = None


def get_publisher() -> EventPublisher:
    """Return the current publisher, building it from the environment on first use."""
    global _current_publisher
    if _current_publisher is None:
        kind = os.environ.get("ORDERING_EVENT_PUBLISHER", "memory")
        if kind == "memory":
            from ordering.publisher.fake_adapter import RecordingPublisher

            _current_publisher = RecordingPublisher()
        elif kind == "broker":
            from ordering.publisher.broker_adapter import BrokerPublisher

            _current_publisher = BrokerPublisher()
        else:
            raise ValueError(f"Unknown event publisher: {kind}")
    return _current_publisher


def set_publisher(publisher: EventPublisher) -> None:
    """Override the active publisher (useful for tests)."""
    global _current_publisher
    _current_publisher = publisher


def reset_publisher() -> None:
    """Reset to the environment default."""
    global _current_publisher
    _current_publisher = None
