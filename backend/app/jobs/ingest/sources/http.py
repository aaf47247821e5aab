import asyncio
import logging
import random
import time

import httpx

from app.core.config import AppConfig

logger = logging.getLogger(__name__)

RETRY_STATUSES = {429, 502, 503, 504, 520, 522, 524}


async def log_request(request: httpx.Request) -> None:
    logger.debug("HTTP %s %s", request.method, request.url)


def make_client(cfg: AppConfig, **kwargs) -> httpx.AsyncClient:
    timeout = httpx.Timeout(
        connect=cfg.connect_timeout,
        read=cfg.read_timeout,
        write=cfg.write_timeout,
        pool=cfg.pool_timeout,
    )
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": "quiet-slots/0.1"},
        event_hooks={"request": [log_request]},
        **kwargs,
    )


async def sleep_backoff(cfg: AppConfig, *, attempt: int, url: str) -> None:
    sleep_s = cfg.backoff_base * (2 ** (attempt - 1))
    sleep_s += random.uniform(0, 0.5)
    logger.info("Sleeping %.2fs before retrying %s", sleep_s, url)
    await asyncio.sleep(sleep_s)


async def get_with_retry(cfg: AppConfig, client: httpx.AsyncClient, url: str) -> httpx.Response:
    last_err: Exception | None = None

    for attempt in range(1, cfg.retries + 1):
        t0 = time.perf_counter()
        try:
            r = await client.get(url)
            elapsed = time.perf_counter() - t0

            if r.status_code in RETRY_STATUSES:
                snippet = (r.text or "")[:300]
                logger.warning(
                    "Retryable HTTP %d (attempt %d/%d) GET %s after %.2fs body_snippet=%r",
                    r.status_code,
                    attempt,
                    cfg.retries,
                    url,
                    elapsed,
                    snippet,
                )
                raise httpx.HTTPStatusError("Retryable status", request=r.request, response=r)

            logger.debug("GET %s completed in %.2fs status=%d", url, elapsed, r.status_code)
            r.raise_for_status()
            return r

        except httpx.TimeoutException as e:
            elapsed = time.perf_counter() - t0
            last_err = e
            logger.warning(
                "%s (attempt %d/%d) GET %s after %.2fs",
                e.__class__.__name__,
                attempt,
                cfg.retries,
                url,
                elapsed,
            )

        except httpx.HTTPStatusError as e:
            elapsed = time.perf_counter() - t0
            last_err = e
            status = e.response.status_code if e.response is not None else None
            if status not in RETRY_STATUSES:
                snippet = (e.response.text or "")[:300] if e.response is not None else None
                logger.error(
                    "Non-retryable HTTP %s GET %s after %.2fs body_snippet=%r",
                    status,
                    url,
                    elapsed,
                    snippet,
                )
                raise

        except httpx.TransportError as e:
            elapsed = time.perf_counter() - t0
            last_err = e
            logger.warning(
                "Request failed (attempt %d/%d) GET %s after %.2fs error=%r",
                attempt,
                cfg.retries,
                url,
                elapsed,
                e,
            )

        if attempt < cfg.retries:
            await sleep_backoff(cfg, attempt=attempt, url=url)

    raise last_err  # type: ignore
