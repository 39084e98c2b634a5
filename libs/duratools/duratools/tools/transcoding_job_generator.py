"""Create Elastic Transcoder HLS jobs for the media in an S3 bucket or a content list."""

from __future__ import annotations

import argparse
import logging
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from duratools.aws import build_session, s3_client, transcoder_client
from duratools.config import AWSSettings, Settings, TranscodingSettings
from duratools.storage import DEFAULT_PAGE_SIZE, iter_bucket_keys
from duratools.tools._common import log_banner, read_id_list, run_tool

logger = logging.getLogger(__name__)

AUDIO_SUFFIX = ".mp3"
VIDEO_SUFFIX = ".mp4"


@dataclass(frozen=True)
class GeneratorSummary:
    files_processed: int
    jobs_created: int


def build_job_request(
    content_id: str,
    pipeline_id: str,
    settings: TranscodingSettings,
) -> dict[str, Any] | None:
    """Return `create_job` kwargs for a media item, or None if it is not .mp3/.mp4."""
    if content_id.endswith(AUDIO_SUFFIX):
        stem = content_id[: -len(AUDIO_SUFFIX)]
        output_keys = [f"{stem}-a160k"]
        preset_ids = [settings.audio_preset_id]
    elif content_id.endswith(VIDEO_SUFFIX):
        stem = content_id[: -len(VIDEO_SUFFIX)]
        output_keys = [f"{stem}-a160k", f"{stem}-v2m"]
        preset_ids = [settings.audio_preset_id, settings.video_preset_id]
    else:
        return None

    return {
        "PipelineId": pipeline_id,
        "Input": {"Key": content_id},
        "Outputs": [
            {
                "Key": key,
                "PresetId": preset_id,
                "SegmentDuration": settings.segment_duration,
            }
            for key, preset_id in zip(output_keys, preset_ids)
        ],
        "Playlists": [
            {
                "Name": f"{stem}-playlist",
                "Format": settings.playlist_format,
                "OutputKeys": output_keys,
            }
        ],
    }


class TranscodingJobGenerator:
    def __init__(
        self,
        *,
        s3: Any,
        transcoder: Any,
        pipeline_id: str,
        bucket_name: str | None = None,
        file_path: str | None = None,
        settings: TranscodingSettings | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        verbose: bool = False,
        dry_run: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not bucket_name and not file_path:
            raise ValueError("either bucket_name or file_path is required")
        self.s3 = s3
        self.transcoder = transcoder
        self.pipeline_id = pipeline_id
        self.bucket_name = bucket_name
        self.file_path = file_path
        self.settings = settings or TranscodingSettings()
        self.page_size = page_size
        self.verbose = verbose
        self.dry_run = dry_run
        self._sleep = sleep

    def content_ids(self) -> Iterator[str]:
        if self.bucket_name:
            return iter_bucket_keys(self.s3, self.bucket_name, page_size=self.page_size)
        return iter(read_id_list(str(self.file_path), what="content item"))

    def run(self) -> GeneratorSummary:
        files_processed = 0
        jobs_created = 0
        for content_id in self.content_ids():
            files_processed += 1
            if self.create_job(content_id):
                jobs_created += 1

        logger.info(
            "Transcoding Job Generator process complete. %d files processed, %d jobs created",
            files_processed,
            jobs_created,
        )
        return GeneratorSummary(files_processed=files_processed, jobs_created=jobs_created)

    def create_job(self, content_id: str) -> bool:
        request = build_job_request(content_id, self.pipeline_id, self.settings)
        if request is None:
            logger.info("SKIPPING file: %s (it does not have a .mp3 or .mp4 extension)", content_id)
            return False

        if self.dry_run:
            logger.info("Transcoding Job created for: %s; current status: none (dryrun mode).", content_id)
        else:
            resp = self.transcoder.create_job(**request)
            status = (resp.get("Job") or {}).get("Status", "unknown")
            logger.info("Transcoding Job created for: %s; current status: %s", content_id, status)
            if self.settings.create_interval_s > 0:
                self._sleep(self.settings.create_interval_s)

        if self.verbose:
            logger.info("\t Job Details: %s", request)
        return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transcoding-job-generator",
        description="Create Elastic Transcoder jobs for content in an S3 bucket.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-b",
        "--bucketname",
        help="the name of the bucket in which content to be transcoded resides",
    )
    source.add_argument("-f", "--file", help="the path to a file which has one content ID per line")
    parser.add_argument(
        "-c",
        "--credentials-profile",
        required=True,
        help="the AWS CLI credentials profile to use for connection to AWS",
    )
    parser.add_argument(
        "-p",
        "--pipeline",
        required=True,
        help="the ID of the Elastic Transcoder Pipeline in which Jobs will be created",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="provides additional detail in output")
    parser.add_argument(
        "-d",
        "--dryrun",
        action="store_true",
        help="indicates that this is a dry-run, no jobs should be created",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    def _body(settings: Settings) -> None:
        source = {"bucket name": args.bucketname} if args.bucketname else {"file path": args.file}
        log_banner(
            "Transcoding Job Generator",
            {
                "AWS profile": args.credentials_profile,
                **source,
                "pipeline ID": args.pipeline,
                "verbose": args.verbose,
            },
            dry_run=args.dryrun,
        )
        aws = AWSSettings(profile=args.credentials_profile, region=settings.aws.region)
        session = build_session(aws)
        generator = TranscodingJobGenerator(
            s3=s3_client(session),
            transcoder=transcoder_client(session),
            pipeline_id=args.pipeline,
            bucket_name=args.bucketname,
            file_path=args.file,
            settings=settings.transcoding,
            page_size=settings.listing.page_size,
            verbose=args.verbose,
            dry_run=args.dryrun,
        )
        generator.run()

    return run_tool(args, _body)


if __name__ == "__main__":
    raise SystemExit(main())
