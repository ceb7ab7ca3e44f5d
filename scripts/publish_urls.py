#!/usr/bin/env python3
"""
Helper script for publishing or purging pages in the static bucket.

Configure the parameters below and run the script. Storage settings are read
from S3_PUBLISHER_* environment variables (or .env).
"""

import logging
import sys

from s3_static_publisher import HttpRenderer, PublisherConfig, PublisherError, StaticContentLookup, StaticPublisher

# =============================================================================
# CONFIGURATION - Edit these parameters for your run
# =============================================================================

# "publish" or "purge"
ACTION = "publish"

# Pages to process (path-only URLs are rendered against ORIGIN_URL)
URLS = [
    "/",
    "/about",
    "/contact",
]

# Origin serving the rendered CMS pages
ORIGIN_URL = "http://localhost:8080"
RENDER_TIMEOUT = 30.0

# Paths of published custom error pages
ERROR_PAGES = ["/404"]

# =============================================================================
# SCRIPT EXECUTION - No need to edit below this line
# =============================================================================


def main() -> int:
    """Publish or purge the configured URLs, returning the number of failures."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    logger = logging.getLogger(__name__)

    config = PublisherConfig()
    logger.info(f"Running {ACTION} for {len(URLS)} URLs against bucket '{config.bucket}' (prefix '{config.prefix}')")

    failures = 0
    with HttpRenderer(ORIGIN_URL, timeout=RENDER_TIMEOUT) as renderer:
        publisher = StaticPublisher(
            config=config,
            renderer=renderer,
            content_lookup=StaticContentLookup(ERROR_PAGES),
        )
        for url in URLS:
            try:
                if ACTION == "purge":
                    outcome = publisher.purge(url)
                else:
                    outcome = publisher.publish(url)
            except PublisherError as e:
                logger.error(f"{url}: {e}")
                failures += 1
                continue

            logger.info(f"{url}: {outcome.to_dict()}")
            if not outcome.success:
                failures += 1

    logger.info(f"Done: {len(URLS) - failures}/{len(URLS)} succeeded")
    return failures


if __name__ == "__main__":
    sys.exit(1 if main() else 0)
