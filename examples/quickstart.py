"""
Run the sync and async samples from Python instead of the CLI.

Start the Cosmos DB emulator first, or set ACCOUNT_HOST and ACCOUNT_KEY.
"""

import asyncio
from pathlib import Path

from cosmos_samples import AsyncSample, SyncSample
from cosmos_samples.core import ConfigManager, SampleMetrics, setup_logging


CONFIG_FILE = Path(__file__).with_name("samples.yaml")


def main():
    config = ConfigManager().load(config_file=str(CONFIG_FILE))
    setup_logging(level=config.logging.level, format_type=config.logging.format)

    metrics = SampleMetrics()

    print("Running sync sample...\n")
    sync_report = SyncSample(config, metrics=metrics).run()
    print(f"  Sync total request charge: {sync_report.total_request_charge:.2f}\n")

    print("Running async sample...\n")
    async_report = asyncio.run(AsyncSample(config, metrics=metrics).run())
    print(f"  Async total request charge: {async_report.total_request_charge:.2f}\n")

    print(f"Create charge across both runs: {metrics.request_charge('create_item'):.2f}")
    for report in (sync_report, async_report):
        for error in report.errors:
            print(f"  {report.variant} {error.operation} failed: {error.message}")


if __name__ == "__main__":
    main()
