"""Synthetic access log generator for demos and local development."""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Optional

from accesslog.domain.models import AccessLogCreate
from accesslog.utils import utcnow

PATHS = (
    "/",
    "/products",
    "/products/1",
    "/products/2",
    "/cart",
    "/checkout",
    "/about",
    "/contact",
    "/blog",
    "/blog/post-1",
    "/blog/post-2",
    "/login",
    "/register",
    "/profile",
    "/settings",
    "/orders",
    "/orders/123",
    "/search",
    "/faq",
    "/pricing",
)
METHODS = ("GET", "POST", "PUT", "DELETE")
STATUS_CODES = (200, 201, 301, 302, 400, 401, 403, 404, 500)
DEVICES = ("Desktop", "Mobile", "Tablet")
BROWSERS = ("Chrome", "Firefox", "Safari", "Edge", "Opera")
OPERATING_SYSTEMS = ("Windows", "macOS", "Linux", "iOS", "Android")
COUNTRIES = ("China", "USA", "Japan", "UK", "Germany", "France")
CITIES = ("Beijing", "Shanghai", "New York", "Tokyo", "London", "Paris")

MIN_REQUESTS_PER_SESSION = 3
MAX_REQUESTS_PER_SESSION = 12
MIN_GAP_SECONDS = 10
MAX_GAP_SECONDS = 300
START_WINDOW = timedelta(days=7)


def _session_id(rng: random.Random, now: datetime) -> str:
    suffix = "".join(rng.choices("abcdefghijklmnopqrstuvwxyz0123456789", k=6))
    return f"session_{int(now.timestamp() * 1000)}_{suffix}"


def generate_session(rng: random.Random, now: datetime) -> list[AccessLogCreate]:
    """Generate the records of one synthetic visit.

    The first request is always a GET, GET requests always succeed and the
    visit starts at a random point of the last seven days.
    """

    session_id = _session_id(rng, now)
    device = rng.choice(DEVICES)
    browser = rng.choice(BROWSERS)
    os_name = rng.choice(OPERATING_SYSTEMS)
    country = rng.choice(COUNTRIES)
    city = rng.choice(CITIES)
    ip_address = ".".join(str(rng.randrange(256)) for _ in range(4))

    current = now - rng.random() * START_WINDOW
    records: list[AccessLogCreate] = []
    for index in range(rng.randint(MIN_REQUESTS_PER_SESSION, MAX_REQUESTS_PER_SESSION)):
        method = "GET" if index == 0 else rng.choice(METHODS)
        status_code = 200 if method == "GET" else rng.choice(STATUS_CODES)
        records.append(
            AccessLogCreate(
                session_id=session_id,
                user_id=f"user_{rng.randrange(100)}" if rng.random() > 0.5 else None,
                ip_address=ip_address,
                user_agent=f"{browser}/{rng.randint(1, 100)} {os_name}/{rng.randint(1, 10)}",
                path=rng.choice(PATHS),
                method=method,
                status_code=status_code,
                response_time=rng.randint(10, 509),
                referer=rng.choice(PATHS) if index > 0 else None,
                country=country,
                city=city,
                device=device,
                browser=browser,
                os=os_name,
                created_at=current,
            )
        )
        current += timedelta(seconds=rng.uniform(MIN_GAP_SECONDS, MAX_GAP_SECONDS))

    return records


def generate_seed_records(
    session_count: int,
    *,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> list[AccessLogCreate]:
    """Generate ``session_count`` synthetic sessions worth of records."""

    rng = rng or random.Random()
    now = now or utcnow()

    records: list[AccessLogCreate] = []
    for _ in range(session_count):
        records.extend(generate_session(rng, now))
    return records


__all__ = ["generate_seed_records", "generate_session"]
