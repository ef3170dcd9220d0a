"""Command line entrypoint that runs a single reminder pass."""

import asyncio
import json

from diapets.app_logging import configure_logging
from diapets.containers import AppContainer, build_container
from diapets.domain.notifications import DispatchReport


async def run(container: AppContainer) -> DispatchReport:
    """Run the scheduler once and release resources afterwards."""
    try:
        return await container.scheduler.run_once()
    finally:
        await container.close_resources()


def main() -> None:
    """Run one insulin reminder pass and print the dispatch report."""
    configure_logging()
    report = asyncio.run(run(build_container()))
    print(json.dumps(report.as_dict(), indent=2))  # noqa: T201


if __name__ == "__main__":
    main()
