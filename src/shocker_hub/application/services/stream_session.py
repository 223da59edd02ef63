"""Handling of inbound streaming messages."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from shocker_hub.application.services.broadcast_engine import build_envelope
from shocker_hub.domain.errors import ValidationError
from shocker_hub.domain.models import Envelope, InboundMessage, MessageType

if TYPE_CHECKING:
    from shocker_hub.application.services.device_state_machine import DeviceStateMachine
    from shocker_hub.application.services.subscription_table import SubscriptionTable
    from shocker_hub.domain.contracts import ConnectionProtocol

logger = logging.getLogger(__name__)


class StreamSession:
    """Turns one inbound text frame into one reply envelope.

    Malformed input produces an `error` envelope; it never closes the
    connection.
    """

    def __init__(self, device: DeviceStateMachine, subscriptions: SubscriptionTable) -> None:
        """Initialize the session handler.

        Args:
            device: Source of status snapshots.
            subscriptions: Table mutated by subscribe/unsubscribe requests.
        """
        self._device = device
        self._subscriptions = subscriptions

    def handle_text(self, connection: ConnectionProtocol, text: str) -> Envelope:
        """Process one inbound frame and return the reply."""
        message = self._parse(text)
        if message is None:
            return build_envelope(MessageType.ERROR, message="Invalid message format")

        match message.message_type():
            case MessageType.PING:
                return build_envelope(MessageType.PONG)
            case MessageType.STATUS:
                return build_envelope(MessageType.STATUS, self._device.snapshot().to_json())
            case MessageType.SUBSCRIBE_BROADCAST:
                return self._subscribe(connection, message)
            case MessageType.UNSUBSCRIBE_BROADCAST:
                return self._unsubscribe(connection)
            case _:
                logger.info(f"Unknown message type: {message.type}")
                return build_envelope(
                    MessageType.ERROR, message=f"Unsupported message type: {message.type}"
                )

    @staticmethod
    def _parse(text: str) -> InboundMessage | None:
        try:
            payload = json.loads(text)
        except (TypeError, ValueError) as e:
            logger.warning(f"Error parsing WebSocket message: {e}")
            return None
        if not isinstance(payload, dict):
            logger.warning("WebSocket message is not a JSON object")
            return None
        try:
            return InboundMessage.model_validate(payload)
        except PydanticValidationError as e:
            logger.warning(f"WebSocket message has invalid fields: {e.error_count()} error(s)")
            return None

    def _subscribe(self, connection: ConnectionProtocol, message: InboundMessage) -> Envelope:
        try:
            device_ids = self._subscriptions.subscribe(
                connection,
                message.shockers,
                message.openshock_token,
                api_key=message.api_key,
            )
        except ValidationError as e:
            return build_envelope(MessageType.ERROR, message=e.message)
        return build_envelope(
            MessageType.SUBSCRIBED,
            message="Successfully subscribed to broadcasts",
            shockers=device_ids,
        )

    def _unsubscribe(self, connection: ConnectionProtocol) -> Envelope:
        if self._subscriptions.unsubscribe(connection):
            return build_envelope(
                MessageType.UNSUBSCRIBED, message="Successfully unsubscribed from broadcasts"
            )
        return build_envelope(MessageType.UNSUBSCRIBED, message="Not subscribed to broadcasts")
