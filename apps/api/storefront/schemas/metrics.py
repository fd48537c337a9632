from storefront.schemas.common import ResponseModel


class TimingStats(ResponseModel):
    count: int
    avg_s: float
    max_s: float


class MetricsResponse(ResponseModel):
    """Counters keyed by name; per-status transitions use `<counter>:<status>`."""

    counters: dict[str, int]
    timings: dict[str, TimingStats]
