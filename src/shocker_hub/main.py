"""Main entry point for the shocker hub server."""

import asyncio
import logging
import sys
from dataclasses import dataclass

import aiohttp
from starlette.applications import Starlette

from shocker_hub.adapters.config import AppConfig
from shocker_hub.adapters.credentials import FileCredentialStore
from shocker_hub.adapters.openshock_api import OpenShockHttpClient
from shocker_hub.adapters.tls import FileCertificateProvider
from shocker_hub.adapters.web import HttpHandlers, WebServer, WebSocketHandler, create_app
from shocker_hub.adapters.youtube_api import YouTubeChannelStatisticsSource
from shocker_hub.application.services import (
    BroadcastEngine,
    ConnectionRegistry,
    DeviceStateMachine,
    ForwardingDispatcher,
    PollSettings,
    PollSupervisor,
    StreamSession,
    SubscriptionTable,
)
from shocker_hub.domain.errors import ConfigurationError
from shocker_hub.domain.models import BroadcastKind, DeviceSnapshot, MessageType

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


@dataclass
class HubServices:
    """The wired object graph behind the web surface."""

    device: DeviceStateMachine
    registry: ConnectionRegistry
    subscriptions: SubscriptionTable
    engine: BroadcastEngine
    dispatcher: ForwardingDispatcher
    supervisor: PollSupervisor
    session: StreamSession

    async def shutdown(self) -> None:
        """Stop polling and cancel pending auto-off timers."""
        await self.supervisor.shutdown()
        await self.device.shutdown()


def build_services(
    config: AppConfig, http_session: aiohttp.ClientSession | None = None
) -> HubServices:
    """Create and connect the hub's services.

    Removal from the registry removes the subscription, every subscription
    change runs the supervisor's edge check, and auto-off sends a status
    event to every connection.
    """
    registry = ConnectionRegistry()
    subscriptions = SubscriptionTable(
        default_device_ids=config.default_shocker_ids,
        default_credential=config.openshock_api_token,
    )
    engine = BroadcastEngine(registry, subscriptions)

    control_api = None
    if http_session is not None:
        control_api = OpenShockHttpClient(
            http_session,
            config.openshock_api_url,
            custom_name=config.openshock_custom_name,
            timeout_seconds=config.openshock_timeout_seconds,
        )
    dispatcher = ForwardingDispatcher(subscriptions, engine, control_api)

    metric_source = None
    if http_session is not None and config.youtube_enabled:
        metric_source = YouTubeChannelStatisticsSource(
            http_session,
            config.youtube_api_key,
            config.youtube_channel_id,
            timeout_seconds=config.youtube_timeout_seconds,
        )
    supervisor = PollSupervisor(
        subscriptions,
        dispatcher,
        metric_source,
        PollSettings(
            interval_seconds=config.poll_interval_seconds,
            broadcast_on_change=config.broadcast_on_change,
            intensity=config.broadcast_intensity,
            duration=config.broadcast_duration,
            kind=BroadcastKind(config.broadcast_type),
        ),
    )

    async def announce_auto_off(snapshot: DeviceSnapshot) -> None:
        await engine.notify_all(MessageType.STATUS, snapshot.to_json())

    device = DeviceStateMachine(on_auto_off=announce_auto_off)

    registry.add_removal_listener(subscriptions.remove_on_disconnect)
    subscriptions.add_listener(supervisor.on_subscriber_set_changed)

    return HubServices(
        device=device,
        registry=registry,
        subscriptions=subscriptions,
        engine=engine,
        dispatcher=dispatcher,
        supervisor=supervisor,
        session=StreamSession(device, subscriptions),
    )


def build_app(
    config: AppConfig, services: HubServices, credentials: FileCredentialStore
) -> Starlette:
    """Create the Starlette app serving the hub's HTTP and WebSocket routes."""
    http_handlers = HttpHandlers(
        device=services.device,
        notifier=services.engine,
        dispatcher=services.dispatcher,
        credentials=credentials,
    )
    websocket_handler = WebSocketHandler(services.registry, services.session)
    return create_app(http_handlers, websocket_handler, config)


async def main() -> None:
    """Main application entry point."""
    config = AppConfig()
    try:
        config.load_toml_overrides()
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    credentials = FileCredentialStore(config.api_keys_file, config.api_key_generate_count)
    try:
        keys = credentials.load_or_generate()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)
    logger.info(f"{len(keys)} API key(s) authorized for /broadcast and /admin/keys")

    if not config.youtube_enabled:
        logger.info("YouTube polling disabled: YOUTUBE_API_KEY or YOUTUBE_CHANNEL_ID not set")

    certificate_provider = None
    if config.https_enabled:
        certificate_provider = FileCertificateProvider(config.cert_dir)

    async with aiohttp.ClientSession() as http_session:
        services = build_services(config, http_session)
        server = WebServer(build_app(config, services, credentials), config, certificate_provider)
        try:
            await server.start()
        except ConfigurationError as e:
            logger.error(f"Cannot start HTTPS listener: {e}")
            sys.exit(1)
        finally:
            logger.info("Shutting down...")
            await server.stop()
            await services.shutdown()


def run() -> None:
    """Console script entry point."""
    configure_logging()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    run()
