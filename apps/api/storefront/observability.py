import json
import logging
import threading
import time
from collections import defaultdict
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

LOGGER_NAME = "storefront.api"

ORDER_STATUS_TRANSITIONS = "order_status_transitions_total"
ORDERS_PLACED = "orders_placed_total"
DASHBOARD_FAILURES = "dashboard_aggregation_failures_total"
PRODUCTS_DEACTIVATED = "products_deactivated_total"

_request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

# Identifiers every storefront log line may carry.
_CONTEXT_FIELDS = ("order_id", "product_id", "user_id", "order_status")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None) or _request_id_ctx.get(),
        }
        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(level: int = logging.INFO) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)


@dataclass
class MetricsSnapshot:
    counters: dict[str, int]
    timings: dict[str, dict[str, float]]


class MetricsStore:
    """In-process counters and timings.

    Dashboard reads record from worker threads, so updates take a lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, int] = defaultdict(int)
        self._timings: dict[str, list[float]] = defaultdict(list)

    def increment(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[name] += amount

    def observe(self, name: str, value_s: float) -> None:
        with self._lock:
            self._timings[name].append(value_s)

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._timings.clear()

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            counters = dict(self._counters)
            samples = {key: list(values) for key, values in self._timings.items() if values}
        timings = {
            key: {"count": len(values), "avg_s": sum(values) / len(values), "max_s": max(values)}
            for key, values in samples.items()
        }
        return MetricsSnapshot(counters=counters, timings=timings)


metrics_store = MetricsStore()


def set_request_id(request_id: str) -> None:
    _request_id_ctx.set(request_id)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


def log_event(
    message: str,
    *,
    order_id: str | None = None,
    product_id: str | None = None,
    user_id: str | None = None,
    order_status: str | None = None,
    level: int = logging.INFO,
) -> None:
    logging.getLogger(LOGGER_NAME).log(
        level,
        message,
        extra={
            "request_id": get_request_id(),
            "order_id": order_id,
            "product_id": product_id,
            "user_id": user_id,
            "order_status": order_status,
        },
    )


def record_status_transition(new_status: str) -> None:
    metrics_store.increment(ORDER_STATUS_TRANSITIONS)
    metrics_store.increment(f"{ORDER_STATUS_TRANSITIONS}:{new_status}")


def record_order_placed() -> None:
    metrics_store.increment(ORDERS_PLACED)


def record_dashboard_failure() -> None:
    metrics_store.increment(DASHBOARD_FAILURES)


def record_product_deactivated() -> None:
    metrics_store.increment(PRODUCTS_DEACTIVATED)


@contextmanager
def observe_timing(metric_name: str) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        metrics_store.observe(metric_name, time.perf_counter() - start)
