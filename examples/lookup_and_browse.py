#!/usr/bin/env python3
"""
Example: Look up an artist and walk through their releases.

Demonstrates:
1. Configuring the client with an application user agent
2. A lookup with additional includes
3. Paging through a browse result with a cursor
4. Handling service errors as values

Requirements:
- Network access to musicbrainz.org (or MUSICBRAINZ_SERVER)
"""

import logging
import sys

from musicbrainz_client import ErrorCode, Include, Query, ReleaseType, Result, ServiceConfig

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

QUEEN = "0383dadf-2a4e-4d10-a46a-e9e041da8eb3"


def main(mbid: str = QUEEN) -> int:
    config = ServiceConfig.from_env(user_agent="MusicBrainzClientExample/0.9 (example@example.org)")

    with Query(config) as query:
        result = Result.capture(query.lookup_artist, mbid, Include.ALIASES | Include.TAGS)
        if result.kind is ErrorCode.REMOTE_ERROR:
            logger.error("Lookup failed: %s", result.error)
            return 1
        artist = result.unwrap()
        logger.info("Artist: %s", artist)
        for alias in artist.aliases or []:
            logger.info("  alias: %s", alias.name)

        cursor = query.browse_release_groups(artist=mbid, type=ReleaseType.ALBUM, limit=25)
        for group in cursor.items():
            logger.info("  %s  %s", group.first_release_date or "????", group.title)
        if cursor.anomalies:
            logger.warning("Server reported %d paging inconsistencies", len(cursor.anomalies))

    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
