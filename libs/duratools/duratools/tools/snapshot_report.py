"""Summarize the number and size of an account's snapshots."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass, field

from duratools.config import Settings
from duratools.durastore import DuraStoreClient, connect
from duratools.tools._common import durastore_settings, run_tool

logger = logging.getLogger(__name__)

BYTES_PER_GB = 1_000_000_000


@dataclass
class SnapshotReport:
    host: str
    sizes_bytes: list[int] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.sizes_bytes)

    @property
    def total_bytes(self) -> int:
        return sum(self.sizes_bytes)

    def render(self) -> str:
        lines = [
            f"Snapshots for: {self.host}",
            f"  Number of snapshots: {self.count}",
            f"  Total size of all snapshots: {self.total_bytes / BYTES_PER_GB:.2f} GB",
            "  Individual snapshot size (in GB):",
        ]
        lines.extend(f"{size / BYTES_PER_GB:.2f}" for size in self.sizes_bytes)
        return "\n".join(lines)


def collect_report(store: DuraStoreClient, host: str) -> SnapshotReport:
    report = SnapshotReport(host=host)
    for summary in store.get_snapshots():
        details = store.get_snapshot(summary.snapshot_id)
        logger.debug("snapshot %s: %d bytes", summary.snapshot_id, details.total_size_bytes)
        report.sizes_bytes.append(details.total_size_bytes)
    return report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snapshot-report-tool",
        description="Report on the snapshots held by a DuraCloud account.",
    )
    parser.add_argument("-H", "--duracloud-host", dest="host", help="the host at which the duracloud app can be found")
    parser.add_argument(
        "-u",
        "--duracloud-username",
        dest="username",
        help="the username necessary to read from duracloud",
    )
    parser.add_argument(
        "-p",
        "--duracloud-password",
        dest="password",
        help="the password necessary to read from duracloud",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    def _body(settings: Settings) -> None:
        ds = durastore_settings(args, settings.durastore)
        with connect(ds) as store:
            report = collect_report(store, ds.host)
        print(report.render())

    return run_tool(args, _body)


if __name__ == "__main__":
    raise SystemExit(main())
