# backend/clinic_admin/timing.py
import logging
from time import perf_counter

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

log = logging.getLogger("clinic_admin.timing")


class TimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        t0 = perf_counter()
        resp = await call_next(request)
        total = (perf_counter() - t0) * 1000.0
        resp.headers["X-Total-Time-ms"] = f"{total:.1f}"
        log.info(
            "%s %s -> %d total=%.1f ms",
            request.method, request.url.path, resp.status_code, total
        )
        return resp
