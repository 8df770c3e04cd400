"""
Simulator entry point. Posts synthetic Bengaluru city events to a running
insights service at a fixed interval.
"""

import asyncio
import random

import structlog

from xphora_pulse.config import config
from xphora_pulse.logging_setup import configure_logging
from xphora_pulse.services.simulation import run_simulation_round

configure_logging(config.log_level)

log = structlog.get_logger()


async def main():
    rng = random.Random()
    log.info("simulator_starting", target=config.simulator_target,
             interval=config.simulator_interval, batch_size=config.simulator_batch_size)

    round_index = 0
    while True:
        await run_simulation_round(
            config.simulator_target,
            config.simulator_batch_size,
            rng=rng,
            burst_every=5,
            round_index=round_index,
        )
        round_index += 1
        await asyncio.sleep(config.simulator_interval)


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("simulator_stopped")


if __name__ == "__main__":
    run()
