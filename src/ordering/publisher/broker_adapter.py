"""Broker publisher — pushes integration messages onto the domain's message broker.

In production the ``default`` broker is Redis Streams, so downstream
services subscribe to the ``ordering::integration`` stream.
"""

import structlog
from protean.utils.globals import current_domain

from ordering.publisher.messages import _Message
from ordering.publisher.port import EventPublisher

logger = structlog.get_logger(__name__)

INTEGRATION_STREAM = "ordering::integration"


class BrokerPublisher(EventPublisher):
    def __init__(self, broker_name: str = "default", stream: str = INTEGRATION_STREAM) -> None:
        self.broker_name = broker_name
        self.stream = stream

    def publish(self, message: _Message) -> None:
        broker = current_domain.brokers[self.broker_name]
        identifier = broker.publish(self.stream, message.to_dict())
        logger.info(
            "Published integration message",
            message_type=message.__type__,
            stream=self.stream,
            message_id=identifier,
        )
