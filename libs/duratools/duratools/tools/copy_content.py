"""Copy content between spaces, deriving destinations from a space-name regex."""

from __future__ import annotations

import argparse
import logging
import re
from dataclasses import dataclass

from duratools.config import Settings
from duratools.durastore import DuraStoreClient, connect
from duratools.exceptions import ConfigurationError
from duratools.tools._common import (
    add_durastore_arguments,
    durastore_settings,
    log_banner,
    read_id_list,
    run_tool,
)

logger = logging.getLogger(__name__)

DEFAULT_INPUT_SPACE_REGEX = r"^(.*)-(open|campus|closed)$"
DEFAULT_DESTINATION_SPACE_FORMAT = "${2}"
DEFAULT_DESTINATION_CONTENT_FORMAT = "${1}/${contentId}"

_PLACEHOLDER = re.compile(r"\$\{(\w+)\}")


def expand(template: str, match: re.Match[str], *, content_id: str | None = None) -> str:
    """Fill ``${n}`` with regex group n and ``${contentId}`` with the content id."""

    def _sub(m: re.Match[str]) -> str:
        name = m.group(1)
        if name == "contentId":
            if content_id is None:
                raise ConfigurationError(f"${{contentId}} is not available in {template!r}")
            return content_id
        if name.isdigit():
            index = int(name)
            if index > (match.re.groups or 0):
                raise ConfigurationError(f"{template!r} refers to missing regex group {index}")
            return match.group(index) or ""
        raise ConfigurationError(f"Unknown placeholder ${{{name}}} in {template!r}")

    return _PLACEHOLDER.sub(_sub, template)


@dataclass(frozen=True)
class CopyRules:
    input_space_regex: str = DEFAULT_INPUT_SPACE_REGEX
    destination_space_format: str = DEFAULT_DESTINATION_SPACE_FORMAT
    destination_content_format: str = DEFAULT_DESTINATION_CONTENT_FORMAT

    def compiled(self) -> re.Pattern[str]:
        try:
            return re.compile(self.input_space_regex)
        except re.error as exc:
            raise ConfigurationError(f"Invalid input space regex {self.input_space_regex!r}: {exc}") from exc


class CopyContentTool:
    def __init__(
        self,
        store: DuraStoreClient,
        *,
        rules: CopyRules | None = None,
        dry_run: bool = False,
        page_size: int,
    ) -> None:
        self.store = store
        self.rules = rules or CopyRules()
        self.dry_run = dry_run
        self.page_size = page_size
        self._pattern = self.rules.compiled()

    def run(self, spaces: list[str] | None = None) -> int:
        if spaces is None:
            logger.debug("No spaces list given; all spaces associated with the account will be copied...")
            spaces = self.store.get_spaces()

        logger.info("Ready to copy %d spaces...", len(spaces))
        copied = 0
        for space_id in spaces:
            copied += self.copy_space(space_id)
        logger.info("Copy Content Tool process complete.")
        return copied

    def copy_space(self, space_id: str) -> int:
        match = self._pattern.search(space_id)
        if match is None:
            logger.info(
                'Space %s does not match the input space regular expression: "%s". Skipping.',
                space_id,
                self.rules.input_space_regex,
            )
            return 0

        dest_space_id = expand(self.rules.destination_space_format, match)
        logger.info("Beginning copy of contents of %s to %s", space_id, dest_space_id)
        self._ensure_space(dest_space_id)

        copied = 0
        for content_id in self.store.get_space_contents(space_id, page_size=self.page_size):
            dest_content_id = expand(self.rules.destination_content_format, match, content_id=content_id)
            message = f"Copying {content_id} from {space_id} to {dest_content_id} in {dest_space_id}"
            if self.dry_run:
                logger.info("DRY RUN -- NO COPY : %s", message)
            else:
                logger.info(message)
                self.store.copy_content(space_id, content_id, dest_space_id, dest_content_id)
                logger.info(
                    "Content successfully copied: %s in %s was copied to %s in %s",
                    content_id,
                    space_id,
                    dest_content_id,
                    dest_space_id,
                )
            copied += 1
        return copied

    def _ensure_space(self, space_id: str) -> None:
        if self.store.space_exists(space_id):
            logger.info("Space already exists - no space created: %s", space_id)
        elif self.dry_run:
            logger.info("DRY RUN: destination space to be created: %s", space_id)
        else:
            logger.info("Creating space: %s", space_id)
            self.store.create_space(space_id)
            logger.info("Space created: %s", space_id)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copy-content-tool",
        description="Copy content from one space to another.",
    )
    parser.add_argument(
        "-s",
        "--space-list",
        help="the path to the file containing a list of spaces to be copied (default: all spaces)",
    )
    parser.add_argument(
        "--input-space-regex",
        default=DEFAULT_INPUT_SPACE_REGEX,
        help="spaces not matching this expression are skipped",
    )
    parser.add_argument(
        "--destination-space-format",
        default=DEFAULT_DESTINATION_SPACE_FORMAT,
        help="destination space id; ${n} is replaced by regex group n",
    )
    parser.add_argument(
        "--destination-content-format",
        default=DEFAULT_DESTINATION_CONTENT_FORMAT,
        help="destination content id; supports ${n} and ${contentId}",
    )
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
            "Copy Content Tool",
            {"host": ds.host, "port": ds.port, "spaces list file path": args.space_list},
            dry_run=args.dry_run,
        )
        rules = CopyRules(
            input_space_regex=args.input_space_regex,
            destination_space_format=args.destination_space_format,
            destination_content_format=args.destination_content_format,
        )
        spaces = read_id_list(args.space_list, what="spaces") if args.space_list else None
        logger.info("Setting up tool...")
        with connect(ds) as store:
            CopyContentTool(
                store,
                rules=rules,
                dry_run=args.dry_run,
                page_size=settings.listing.page_size,
            ).run(spaces)

    return run_tool(args, _body)


if __name__ == "__main__":
    raise SystemExit(main())
