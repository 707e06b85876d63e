"""
Scheduler tick entrypoint.

Runs one pass over the due leads and exits; meant to be invoked by cron:

    python -m app.adapters.inbound.scheduler.tick
"""

import asyncio
import sys

from dotenv import load_dotenv

from app.application.dtos.transition import SchedulerTickResult
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import logger
from app.infrastructure.wiring.dependencies import create_run_scheduler_tick


async def run_once() -> SchedulerTickResult:
    """Run one scheduler tick with the configured dependencies."""
    tick = create_run_scheduler_tick()
    return await tick.execute(settings.scheduler_organization_id)


def main() -> int:
    load_dotenv()
    result = asyncio.run(run_once())
    for item in result.results:
        if not item.success:
            logger.warning(
                f"Lead {item.lead_id} not advanced "
                f"{item.from_status.value} → {item.to_status.value}: {item.error}"
            )
    return 0


if __name__ == "__main__":
    sys.exit(main())
