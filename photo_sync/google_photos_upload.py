#!/usr/bin/env python3
"""
Google Photos Sync
==================
Uploads media files missing in Google Photos and manages album sharing.

Every directory is an album named after the directory (without its parent path).
Sub-directories are processed recursively as albums of their own.

    photos/
    ├── 2019-03 Skiing/        → album "2019-03 Skiing"
    │   ├── IMG_001.jpg
    │   └── Day 2/             → album "Day 2"
    └── ...

Files already in the album (by file name) are not uploaded again; their
description holds the checksum of the uploaded content, so a changed local file
is reported. Album items without a local file are reported too, never deleted.

Usage:
    google_photos_upload.py ~/photos/2019-03\\ Skiing
    google_photos_upload.py --dry-run ~/photos
    google_photos_upload.py -s 'Skiing' -e 'Skiing' -f tokens.txt
    google_photos_upload.py -g family -i 2 5 -f tokens.txt
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

import requests
from google.auth.exceptions import GoogleAuthError

import actions
from auth import authenticate
from client import GooglePhotosClient
from config import CONFIG_FILE, MEDIA_FILENAME_REGEX, SHARE_TOKENS_FILE
from errors import PhotoSyncError
from files import find_media_files, find_subdirectories, format_size
from fingerprint import extract_checksum_string, generate_description, is_checksum_matching
from library import get_or_create_album
from log import parse_level, setup_logging, temp_log_file
from models import MediaItem
from reconcile import classify
from settings import Settings, load_settings, resolve_path
from uploader import upload_and_create

logger = logging.getLogger("photo_sync")


@dataclass
class DirectoryReport:
    album_title: str
    matching: int = 0
    non_matching: int = 0
    missing: int = 0
    uploaded: list[MediaItem] = field(default_factory=list)
    failed: int = 0


def process_directory(client: GooglePhotosClient, directory: Path, album_title: str,
                      filename_regex: str | None = None, dry_run: bool = False,
                      log: logging.Logger | None = None) -> DirectoryReport:
    """
    Reconciles one directory with its album and uploads the missing files.
    Errors are not caught here.
    """
    log = log or logger
    files = find_media_files(directory, filename_regex or MEDIA_FILENAME_REGEX)

    log.info("Opening album %s", album_title)
    album = get_or_create_album(client, album_title, log)
    log.debug("Album URL: %s", album.product_url)

    result = classify(client, album, files)
    report = DirectoryReport(
        album_title=album_title,
        matching=len(result.matching_items),
        non_matching=len(result.non_matching_items),
        missing=len(result.missing_files),
    )

    by_name = {media_file.name: media_file for media_file in files}
    log.info("%d media items match local files", report.matching)
    for item in result.matching_items:
        media_file = by_name[item.filename]
        log.debug("%s [%s] ~ %s [%s]", media_file.path, generate_description(media_file),
                  item.product_url, item.description)
        if not is_checksum_matching(media_file, extract_checksum_string(item.description)):
            log.warning("File %s differs from the uploaded one, replace it manually: %s",
                        media_file.path, item.product_url)

    log.info("%d media items without a local file", report.non_matching)
    for item in result.non_matching_items:
        log.warning("File %s is missing locally, remove the media item manually: %s",
                    directory / item.filename, item.product_url)

    total_size = sum(f.size() for f in result.missing_files)
    log.info("%d files missing in the album (%s)", report.missing, format_size(total_size))
    for media_file in result.missing_files:
        log.warning("File %s is not in the album", media_file.path)

    if dry_run or not result.missing_files:
        return report

    log.info("Uploading media items...")
    for item in upload_and_create(client, album, result.missing_files, log):
        log.info("Uploaded %s: %s", item.filename, item.product_url)
        report.uploaded.append(item)
    report.failed = report.missing - len(report.uploaded)
    if report.failed:
        log.warning("%d of %d files were not uploaded into %s", report.failed, report.missing,
                    album_title)
    return report


def process_directories(client: GooglePhotosClient, directories: list[Path],
                        filename_regex: str | None = None, dry_run: bool = False,
                        log: logging.Logger | None = None) -> list[DirectoryReport]:
    """Processes every directory and then its sub-directories, depth first."""
    log = log or logger
    reports = []
    for directory in directories:
        directory = Path(directory).absolute()
        log.info("Processing directory %s", directory)
        try:
            reports.append(process_directory(client, directory, directory.name,
                                             filename_regex, dry_run, log))
        except (OSError, requests.RequestException, GoogleAuthError) as e:
            log.error("Error processing directory %s: %s", directory, e)

        try:
            subdirectories = find_subdirectories(directory)
        except OSError as e:
            log.error("Cannot list sub-directories of %s: %s", directory, e)
            continue
        reports.extend(process_directories(client, subdirectories, filename_regex, dry_run, log))
    return reports


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photo-sync",
        description="Uploads missing media files into Google Photos and controls their sharing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ~/photos                      Upload missing files of all albums
  %(prog)s --dry-run ~/photos            Only report what would be uploaded
  %(prog)s -l 'Skiing'                   List albums matching a regex
  %(prog)s -e '' -f tokens.txt           Export share tokens of all shared albums
  %(prog)s -i 3 5 -f tokens.txt          Join albums of tokens 3 to 5
        """,
    )
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More logging; -v or -vv")
    parser.add_argument("-q", "--quiet", "--silent", action="count", default=0,
                        help="Less logging; -q, -qq or -qqq")
    parser.add_argument("-c", "--config", default=CONFIG_FILE,
                        help=f"Name of or path to the configuration file (default: {CONFIG_FILE})")
    parser.add_argument("-g", "--credentials-profile", nargs="*", metavar="PROFILE",
                        help="Credentials profile(s); the actions run for each of them")
    parser.add_argument("-l", "--list-albums", nargs="?", const="", metavar="REGEX",
                        help="List albums matching a regex, alphabetically (empty matches all)")
    parser.add_argument("-p", "--list-shared-albums", nargs="?", const="", metavar="REGEX",
                        help="List shared albums matching a regex, alphabetically")
    parser.add_argument("-u", "--unshare-albums", nargs="?", const="", metavar="REGEX",
                        help="Unshare shared albums matching a regex")
    parser.add_argument("-s", "--share-albums", nargs="?", const="", metavar="REGEX",
                        help="Share (by URL) albums matching a regex")
    parser.add_argument("-o", "--collaborative-sharing", action="store_true",
                        help="When sharing, let others add media items")
    parser.add_argument("-m", "--commentable-sharing", action="store_true",
                        help="When sharing, let others comment")
    parser.add_argument("-f", "--import-export-file", type=Path, default=Path(SHARE_TOKENS_FILE),
                        help=f"Share tokens file to import from or export into (default: {SHARE_TOKENS_FILE})")
    parser.add_argument("-e", "--export-share-tokens", nargs="?", const="", metavar="REGEX",
                        help="Export share tokens of shared albums matching a regex into a new file")
    parser.add_argument("-i", "--import-share-tokens", nargs="*", type=int, metavar="N",
                        help="Join shared albums of tokens from the file: all (no value), "
                             "the N-th (one value) or the N-th to M-th (two values); the first is 1")
    parser.add_argument("-d", "--leave-share-tokens", action="store_true",
                        help="Leave shared albums of the tokens in the file")
    parser.add_argument("-n", "--dry-run", action="store_true",
                        help="Report what would be uploaded without uploading")
    parser.add_argument("directories", nargs="*", type=Path, metavar="media-directory",
                        help="Directories of media files (recursively; album = directory name)")
    return parser


REGEX_OPTIONS = ("list_albums", "list_shared_albums", "unshare_albums", "share_albums",
                 "export_share_tokens")


def invalid_regex(pattern: str) -> str | None:
    """The compilation error of a regular expression, None if it is valid."""
    try:
        re.compile(pattern)
    except re.error as e:
        return str(e)
    return None


def has_action(args: argparse.Namespace) -> bool:
    return any((
        args.list_albums is not None,
        args.list_shared_albums is not None,
        args.unshare_albums is not None,
        args.share_albums is not None,
        args.export_share_tokens is not None,
        args.import_share_tokens is not None,
        args.leave_share_tokens,
        bool(args.directories),
    ))


def run_for_profile(args: argparse.Namespace, settings: Settings, profile: str | None):
    """Connects with the credentials of a profile and runs the requested actions."""
    for directory in args.directories:
        if not directory.is_dir():
            raise NotADirectoryError(f"Directory not found: {directory}")

    credentials = settings.credentials_for(profile)
    logger.debug("Connecting to Google Photos (profile %s)", profile or "default")
    creds = authenticate(resolve_path(credentials.client_secret_file),
                         resolve_path(credentials.token_file))
    client = GooglePhotosClient(creds)

    if args.list_albums is not None:
        logger.debug("Listing albums %r", args.list_albums)
        actions.list_albums(client, args.list_albums)
    if args.list_shared_albums is not None:
        logger.debug("Listing shared albums %r", args.list_shared_albums)
        actions.list_shared_albums(client, args.list_shared_albums)
    if args.unshare_albums is not None:
        logger.debug("Unsharing albums %r", args.unshare_albums)
        actions.unshare_albums(client, args.unshare_albums)
    if args.share_albums is not None:
        logger.debug("Sharing albums %r", args.share_albums)
        actions.share_albums(client, args.share_albums,
                             args.collaborative_sharing, args.commentable_sharing)
    if args.export_share_tokens is not None:
        logger.debug("Exporting tokens %r into %s", args.export_share_tokens, args.import_export_file)
        actions.export_share_tokens(client, args.import_export_file, args.export_share_tokens)
    if args.import_share_tokens is not None:
        actions.import_share_tokens(client, args.import_export_file, args.import_share_tokens)
    if args.leave_share_tokens:
        logger.debug("Leaving tokens from %s", args.import_export_file)
        actions.leave_share_tokens(client, args.import_export_file)
    if args.directories:
        logger.debug("Scanning directories")
        process_directories(client, args.directories, settings.filename_regex, args.dry_run)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.import_share_tokens is not None and len(args.import_share_tokens) > 2:
        parser.error("--import-share-tokens takes at most two values")
    for option in REGEX_OPTIONS:
        pattern = getattr(args, option)
        error = pattern is not None and invalid_regex(pattern)
        if error:
            flag = "--" + option.replace("_", "-")
            parser.error(f"{flag}: invalid regular expression {pattern!r}: {error}")

    log_filename = temp_log_file()
    console_handler = setup_logging(args.verbose - args.quiet, log_filename)
    logger.debug("Log file: %s", log_filename)

    try:
        settings = load_settings(args.config)
    except PhotoSyncError as e:
        logger.error("%s", e)
        return 1
    error = invalid_regex(settings.filename_regex)
    if error:
        logger.error("Invalid media.filename_regex %r in %s: %s", settings.filename_regex,
                     settings.config_path, error)
        return 1
    # console level from the config file unless given on the command line
    if not args.verbose and not args.quiet:
        level = parse_level(settings.console_level)
        if level is not None:
            console_handler.setLevel(level)

    if not has_action(args):
        parser.print_help()
        return 0

    exit_code = 0
    for profile in args.credentials_profile or [None]:
        try:
            run_for_profile(args, settings, profile)
        except (PhotoSyncError, OSError, ValueError, requests.RequestException,
                GoogleAuthError) as e:
            logger.error("Profile %s failed: %s", profile or "default", e)
            logger.debug("Traceback for profile %s", profile or "default", exc_info=True)
            exit_code = 1
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
