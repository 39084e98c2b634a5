"""Replace the prefix of every content item in a space that starts with it."""

from __future__ import annotations

import argparse
import logging
import tempfile

from duratools.config import Settings
from duratools.durastore import DuraStoreClient, connect
from duratools.tools._common import add_durastore_arguments, durastore_settings, log_banner, run_tool

logger = logging.getLogger(__name__)


def renamed(content_id: str, old_prefix: str, new_prefix: str) -> str | None:
    if not content_id.startswith(old_prefix):
        return None
    return new_prefix + content_id[len(old_prefix):]


def update_prefixes(
    store: DuraStoreClient,
    space_id: str,
    old_prefix: str,
    new_prefix: str,
    *,
    dry_run: bool = False,
    page_size: int,
) -> int:
    """Move matching items to their new ids; returns the number of items updated.

    The full listing is spooled to a temporary file before any move, so items
    created by the moves themselves are never picked up by the listing.
    """
    updated = 0
    with tempfile.TemporaryFile("w+", encoding="utf-8", prefix="original-content-listing-") as listing:
        logger.info("Retrieving Content Item List...")
        for content_id in store.get_space_contents(space_id, page_size=page_size):
            listing.write(content_id + "\n")
        listing.seek(0)

        logger.info("Beginning Updates...")
        for line in listing:
            content_id = line.rstrip("\n")
            new_content_id = renamed(content_id, old_prefix, new_prefix)
            if new_content_id is None:
                continue
            logger.info("Updating %s to %s", content_id, new_content_id)
            if not dry_run:
                store.move_content(space_id, content_id, space_id, new_content_id)
            updated += 1
    return updated


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prefix-update-tool",
        description="Update the prefix value on a set of content items in a DuraCloud space.",
    )
    parser.add_argument(
        "-s",
        "--spacename",
        required=True,
        help="the name of the space in which content will be updated",
    )
    parser.add_argument(
        "-o",
        "--old-prefix",
        required=True,
        help="the original prefix that should be replaced - only files with this prefix will be updated",
    )
    parser.add_argument("-n", "--new-prefix", required=True, help="the new prefix to apply")
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        help="designate this execution as a dry run, no changes will be made, "
        "but output will indicate what would have happened",
    )
    add_durastore_arguments(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    def _body(settings: Settings) -> None:
        ds = durastore_settings(args, settings.durastore)
        log_banner(
            "Prefix Update Tool",
            {
                "space name": args.spacename,
                "host": ds.host,
                "port": ds.port,
                "prefix to replace": args.old_prefix,
                "new prefix": args.new_prefix,
            },
            dry_run=args.dry_run,
        )
        with connect(ds) as store:
            update_prefixes(
                store,
                args.spacename,
                args.old_prefix,
                args.new_prefix,
                dry_run=args.dry_run,
                page_size=settings.listing.page_size,
            )
        logger.info("Prefix Update Tool process complete.")

    return run_tool(args, _body)


if __name__ == "__main__":
    raise SystemExit(main())
