from __future__ import annotations

import logging
import time
from http.client import HTTPException
from urllib.error import HTTPError
from urllib.request import Request, urlopen

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 16 * 1024


class SourceFetcher:
    """Single GET per call; every transport failure comes back as ``None``.

    ``timeout_seconds`` bounds each socket operation and also the body
    download as a whole, so a server trickling bytes cannot hold a caller
    past the deadline. Bodies above ``max_bytes`` are discarded.
    """

    def __init__(
        self,
        timeout_seconds: float = 8.0,
        user_agent: str = "quotewatch/1.0",
        max_bytes: int = 2_000_000,
    ):
        self.timeout_seconds = max(0.1, float(timeout_seconds))
        self.user_agent = user_agent
        self.max_bytes = max(1, int(max_bytes))
        self._headers = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/json;q=0.9,*/*;q=0.8",
        }

    def _read_body(self, response, url: str, deadline: float) -> bytes | None:
        chunks: list[bytes] = []
        size = 0
        while True:
            if time.monotonic() >= deadline:
                logger.warning("Source %s exceeded %ss download deadline", url, self.timeout_seconds)
                return None
            chunk = response.read1(_CHUNK_SIZE)
            if not chunk:
                return b"".join(chunks)
            size += len(chunk)
            if size > self.max_bytes:
                logger.warning("Source %s body larger than %d bytes", url, self.max_bytes)
                return None
            chunks.append(chunk)

    def fetch(self, url: str) -> str | None:
        deadline = time.monotonic() + self.timeout_seconds
        try:
            request = Request(url, headers=self._headers)
            with urlopen(request, timeout=self.timeout_seconds) as response:
                charset = response.headers.get_content_charset() or "utf-8"
                raw = self._read_body(response, url, deadline)
                if raw is None:
                    return None
                body = raw.decode(charset, errors="replace")
        except HTTPError as exc:
            logger.warning("Source %s answered HTTP %s", url, exc.code)
            return None
        except (OSError, HTTPException, LookupError, ValueError) as exc:
            logger.warning("Source %s unreachable: %s", url, exc)
            return None
        return body

    __call__ = fetch
