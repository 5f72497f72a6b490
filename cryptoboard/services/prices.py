from __future__ import annotations

import datetime as dt
from typing import Any

from cryptoboard.core.errors import UpstreamError
from cryptoboard.services.fetcher import Fetcher

def _points(data: Any) -> list[dict[str, Any]]:
    prices = data.get("prices") if isinstance(data, dict) else None
    if not isinstance(prices, list):
        raise UpstreamError("price history: missing prices")
    out = []
    for pair in prices:
        try:
            price = float(pair[1])
            day = dt.datetime.fromtimestamp(pair[0] / 1000, tz=dt.timezone.utc).date()
        except (TypeError, ValueError, IndexError, KeyError, OverflowError, OSError) as e:
            raise UpstreamError(f"price history: bad point {pair!r}") from e
        out.append({"date": day.isoformat(), "price": price})
    return out

async def fetch_price_history(fetcher: Fetcher, url: str, coin: str, days: int) -> list[dict[str, Any]]:
    data = await fetcher.get_json(
        url.format(coin=coin),
        params={"vs_currency": "usd", "days": days, "interval": "daily"},
    )
    return _points(data)

def fit_line(values: list[float]) -> tuple[float, float]:
    """Ordinary least squares over x = 0..n-1. Returns (slope, intercept)."""
    n = len(values)
    if n == 0:
        return 0.0, 0.0
    if n == 1:
        return 0.0, values[0]
    mean_x = (n - 1) / 2
    mean_y = sum(values) / n
    sxx = sum((x - mean_x) ** 2 for x in range(n))
    sxy = sum((x - mean_x) * (y - mean_y) for x, y in enumerate(values))
    slope = sxy / sxx
    return slope, mean_y - slope * mean_x

def linear_trend(points: list[dict[str, Any]], projection_days: int = 0) -> list[dict[str, Any]]:
    """Attach the fitted ``trend`` to each point and append ``projection_days`` projected days.

    Projected points carry ``price: None``.
    """
    slope, intercept = fit_line([p["price"] for p in points])
    out = [{**p, "trend": slope * i + intercept} for i, p in enumerate(points)]
    if not points or projection_days <= 0:
        return out

    last = dt.date.fromisoformat(points[-1]["date"])
    n = len(points)
    for k in range(1, projection_days + 1):
        out.append(
            {
                "date": (last + dt.timedelta(days=k)).isoformat(),
                "price": None,
                "trend": slope * (n - 1 + k) + intercept,
            }
        )
    return out
