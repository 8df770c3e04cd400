"""
Service entry point. Builds one insights engine and serves it over HTTP.
"""
import asyncio
import structlog
import uvicorn

from xphora_pulse.config import config
from xphora_pulse.engine import InsightsEngine
from xphora_pulse.logging_setup import configure_logging
from xphora_pulse.services import InsightsService

configure_logging(config.log_level)

log = structlog.get_logger()


async def main():
    engine = InsightsEngine.from_config(config)
    service = InsightsService(config, engine)

    server = uvicorn.Server(uvicorn.Config(
        service.app, host="0.0.0.0", port=config.http_port, log_level="warning"
    ))

    log.info("service_starting", service=config.service_name, http=config.http_port,
             buffer_capacity=config.buffer_capacity,
             upcoming_feed=config.upcoming_events_url or "static")

    try:
        await server.serve()
    finally:
        log.info("service_stopped", service=config.service_name,
                 buffered=len(engine.buffer))


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
