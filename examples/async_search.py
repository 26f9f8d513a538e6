#!/usr/bin/env python3
"""
Example: Concurrent searches on the asynchronous client.

Several searches are started at once; the client still sends them one at a
time, spaced by the configured request interval. Transient network failures
are retried with an explicit retry policy.

Requirements:
- Network access to musicbrainz.org
"""

import asyncio
import logging
import sys

from musicbrainz_client import AsyncQuery, RetryPolicy, ServiceConfig

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def best_match(query: AsyncQuery, policy: RetryPolicy, text: str) -> None:
    cursor = query.find_recordings(text, limit=3, simple=True)
    page = await policy.call_async(cursor.next)
    for hit in page:
        logger.info("%-30s [%3d] %s", text, hit.score, hit.item.title)


async def main(terms) -> None:
    config = ServiceConfig(user_agent="MusicBrainzClientExample/0.9 (example@example.org)")
    policy = RetryPolicy(max_attempts=3, base_delay=2.0)
    async with AsyncQuery(config) as query:
        await asyncio.gather(*(best_match(query, policy, term) for term in terms))


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:] or ["bohemian rhapsody", "under pressure", "radio ga ga"]))
