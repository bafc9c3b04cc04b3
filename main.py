"""Service Versions Updater - Refresh serviceVersions.json from the Minecraft server release APIs."""

import argparse
import sys
from pathlib import Path

from config import Config
from logging_setup import get_logger, setup_logging
from manifest import ManifestError, load_manifest, save_manifest
from providers import build_providers
from updater import update_manifest


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Refresh download URLs in serviceVersions.json from the Paper, Purpur and Mojang APIs",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.toml)",
    )
    parser.add_argument(
        "-m", "--manifest",
        type=str,
        default=None,
        help="Override manifest path from config (default: serviceVersions.json)",
    )

    # Logging verbosity (mutually exclusive)
    verbosity_group = parser.add_mutually_exclusive_group()
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output (DEBUG level)",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (only warnings and errors)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write logs to file (always DEBUG level)",
    )

    return parser.parse_args()


def main() -> int:
    args = parse_args()

    verbosity = 1 if args.verbose else (-1 if args.quiet else 0)
    setup_logging(verbosity=verbosity, log_file=args.log_file)
    logger = get_logger()

    logger.debug("Loading configuration...")
    try:
        config = Config.load(
            config_path=args.config,
            manifest_path_override=args.manifest,
        )
    except (OSError, ValueError) as e:
        logger.error("Error loading configuration: %s", e)
        return 1

    logger.debug("Manifest path: %s", config.manifest_path)
    logger.debug("Providers: %s", ", ".join(config.providers))

    try:
        manifest = load_manifest(config.manifest_path)
    except ManifestError as e:
        logger.error("Error loading manifest: %s", e)
        return 1

    manifest, results = update_manifest(manifest, build_providers(config))

    try:
        save_manifest(config.manifest_path, manifest)
    except ManifestError as e:
        logger.error("Error writing manifest: %s", e)
        return 1

    logger.info("")
    logger.info("=" * 50)
    logger.info("Update Summary")
    logger.info("=" * 50)
    for result in results:
        if result.listing_error:
            logger.info("%s: versions could not be listed", result.provider)
            continue
        logger.info(
            "%s: %d added, %d updated, %d up to date, %d failed",
            result.provider,
            len(result.added),
            len(result.updated),
            len(result.up_to_date),
            len(result.failed),
        )

    logger.info("%s has been updated!", config.manifest_path.name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
