import logging
from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from threading import RLock
from time import monotonic

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


logger = logging.getLogger(__name__)

GRAPHIC_PATH = "/graphic.svg"


class SlidingWindowLimiter:
    """Per-key request counter over a trailing time window.

    Keys whose window has emptied are forgotten, and a full sweep runs at most
    once per window, so the table only holds clients seen in the last window.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        self.max_requests = max(1, max_requests)
        self.window_seconds = max(1, window_seconds)
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._next_sweep = clock() + self.window_seconds
        self._lock = RLock()

    def __len__(self) -> int:
        return len(self._hits)

    def acquire(self, key: str) -> int | None:
        """Record a request for ``key``.

        Returns ``None`` when allowed, otherwise the seconds to wait.
        """

        now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(cutoff)
                self._next_sweep = now + self.window_seconds

            hits = self._hits.get(key)
            if hits is not None:
                while hits and hits[0] <= cutoff:
                    hits.popleft()
            else:
                hits = self._hits[key] = deque()

            if len(hits) >= self.max_requests:
                return max(1, int(self.window_seconds - (now - hits[0])))

            hits.append(now)
            return None

    def _sweep(self, cutoff: float) -> None:
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
        if stale:
            logger.debug("Evicted %d idle rate-limit keys", len(stale))


class GraphicRateLimitMiddleware(BaseHTTPMiddleware):
    """Per-client limiter for GET /graphic.svg, the only rendering endpoint
    reachable by plain ``<img>`` embeds."""

    def __init__(
        self,
        app,
        requests_per_window: int = 30,
        window_seconds: int = 60,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        super().__init__(app)
        self.limiter = SlidingWindowLimiter(requests_per_window, window_seconds, clock)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method != "GET" or request.url.path != GRAPHIC_PATH:
            return await call_next(request)

        client = client_key(request)
        retry_after = self.limiter.acquire(client)
        if retry_after is not None:
            logger.info("Rate limit hit for %s", client)
            return JSONResponse(
                status_code=429,
                content={"detail": "Too Many Requests"},
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)


def client_key(request: Request) -> str:
    """First X-Forwarded-For hop when behind a proxy, else the peer address."""

    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip() or "unknown"
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
