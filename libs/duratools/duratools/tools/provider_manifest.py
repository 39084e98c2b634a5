"""Write a TSV manifest (space, content id, MD5) of a space straight from DuraStore."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from duratools.config import Settings
from duratools.durastore import CONTENT_CHECKSUM, DuraStoreClient, connect
from duratools.tools._common import (
    add_durastore_arguments,
    durastore_settings,
    log_banner,
    run_tool,
    timestamp_plain,
)

logger = logging.getLogger(__name__)

MANIFEST_HEADER = ("space-id", "content-id", "MD5")


def manifest_filename(space_id: str, stamp: str | None = None) -> str:
    return f"{space_id}-provider-manifest-{stamp or timestamp_plain()}.tsv"


def write_manifest(
    store: DuraStoreClient,
    space_id: str,
    output_path: Path,
    *,
    page_size: int,
) -> int:
    """Write one row per content item; rows are flushed as they are written."""
    rows = 0
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write("\t".join(MANIFEST_HEADER) + "\n")
        for content_id in store.get_space_contents(space_id, page_size=page_size):
            props = store.get_content_properties(space_id, content_id)
            checksum = props.get(CONTENT_CHECKSUM, "")
            f.write(f"{space_id}\t{content_id}\t{checksum}\n")
            f.flush()
            rows += 1
    logger.info("Manifest complete: %d content items written to %s", rows, output_path)
    return rows


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="provider-manifest-tool",
        description="Generate a manifest of content directly from a DuraCloud storage provider.",
    )
    parser.add_argument("-s", "--space", required=True, help="the ID of the space to be listed")
    parser.add_argument("-o", "--output-dir", help="directory in which the manifest is written")
    add_durastore_arguments(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    def _body(settings: Settings) -> None:
        ds = durastore_settings(args, settings.durastore)
        log_banner(
            "Provider Manifest Tool",
            {"host": ds.host, "port": ds.port, "space name": args.space},
        )
        output_dir = Path(args.output_dir or settings.output_dir)
        output_path = output_dir / manifest_filename(args.space)
        logger.info("Writing to output file: %s", output_path.resolve())
        with connect(ds) as store:
            write_manifest(store, args.space, output_path, page_size=settings.listing.page_size)

    return run_tool(args, _body)


if __name__ == "__main__":
    raise SystemExit(main())
