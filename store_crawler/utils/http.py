from __future__ import annotations

import os
from pathlib import Path
from typing import Optional
from aiohttp import ClientSession, ClientTimeout
import aiofiles
import aiohttp
import logging

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


async def download_file(
    session: ClientSession,
    url: str,
    path: str | os.PathLike[str],
    *,
    timeout: float = 30.0,
    user_agent: Optional[str] = None,
) -> bool:
    """
    Stream ``url`` to ``path``. Returns False on failure; nothing is retried.
    """
    headers = {}
    if user_agent:
        headers["User-Agent"] = user_agent

    target = Path(path)
    try:
        async with session.get(url, headers=headers, timeout=ClientTimeout(total=timeout)) as resp:
            resp.raise_for_status()
            async with aiofiles.open(target, "wb") as f:
                async for chunk in resp.content.iter_chunked(_CHUNK_SIZE):
                    await f.write(chunk)
    except Exception as exc:  # broad catch: one failed download never stops the product
        logger.warning("Error downloading file from %s: %r", url, exc)
        target.unlink(missing_ok=True)
        return False
    return True


def create_session() -> ClientSession:
    """
    Create a shared aiohttp ClientSession.
    """
    # Note: caller is responsible for closing the session (await session.close()).
    connector = aiohttp.TCPConnector(limit=0)  # unlimited; concurrency managed via semaphore
    return aiohttp.ClientSession(connector=connector)
