"""
Monitoring and observability module for the ITTPizen client.

Provides in-process metrics and insights for:
- Backend API calls (counts, latency, errors per endpoint)
- Session and feed activity
"""

from __future__ import annotations

import time
import logging
from datetime import datetime, timezone, timedelta
from typing import Dict, List, Any, Optional
from dataclasses import dataclass
from collections import deque
from enum import Enum

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of client events."""
    API_CALL = "api_call"
    LOGIN = "login"
    LOGOUT = "logout"
    FEED_LOADED = "feed_loaded"
    PAGE_LOADED = "page_loaded"
    POST_LIKED = "post_liked"
    POST_UNLIKED = "post_unliked"
    COMMENT_CREATED = "comment_created"
    ERROR = "error"


@dataclass
class SystemEvent:
    """A recorded client event."""
    timestamp: datetime
    event_type: EventType
    endpoint: Optional[str]
    details: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "endpoint": self.endpoint,
            "details": self.details,
            "age_seconds": (datetime.now(timezone.utc) - self.timestamp).total_seconds()
        }


class MetricsCollector:
    """
    Collects and aggregates API call metrics per endpoint.
    """

    MAX_LATENCIES = 1000

    def __init__(self):
        self._start_time = time.time()
        self._call_counts: Dict[str, int] = {}
        self._latencies: Dict[str, List[float]] = {}
        self._error_counts: Dict[str, int] = {}
        self._transport_failures = 0

    def record_api_call(
        self,
        endpoint: str,
        latency_ms: float,
        error: bool = False,
        transport_failure: bool = False
    ) -> None:
        """Record a backend API call."""
        self._call_counts[endpoint] = self._call_counts.get(endpoint, 0) + 1

        latencies = self._latencies.setdefault(endpoint, [])
        latencies.append(latency_ms)
        if len(latencies) > self.MAX_LATENCIES:
            self._latencies[endpoint] = latencies[-self.MAX_LATENCIES:]

        if error:
            self._error_counts[endpoint] = self._error_counts.get(endpoint, 0) + 1
        if transport_failure:
            self._transport_failures += 1

    def _calculate_percentiles(self, values: List[float]) -> Dict[str, float]:
        """Calculate p50, p95, p99 percentiles."""
        if not values:
            return {"p50": 0, "p95": 0, "p99": 0, "avg": 0}

        sorted_values = sorted(values)
        n = len(sorted_values)

        return {
            "p50": sorted_values[int(n * 0.50)],
            "p95": sorted_values[min(n - 1, int(n * 0.95))],
            "p99": sorted_values[min(n - 1, int(n * 0.99))],
            "avg": sum(values) / n,
        }

    def get_metrics(self) -> Dict[str, Any]:
        """Get all collected metrics."""
        uptime = time.time() - self._start_time
        total_calls = sum(self._call_counts.values())
        total_errors = sum(self._error_counts.values())
        error_rate = total_errors / total_calls if total_calls > 0 else 0

        all_latencies = [v for values in self._latencies.values() for v in values]

        return {
            "uptime_seconds": int(uptime),
            "uptime_human": self._format_duration(uptime),
            "api": {
                "calls": total_calls,
                "by_endpoint": dict(self._call_counts),
                "errors": dict(self._error_counts),
                "error_rate": f"{error_rate:.1%}",
                "transport_failures": self._transport_failures,
                "latency_ms": self._calculate_percentiles(all_latencies),
            },
        }

    def _format_duration(self, seconds: float) -> str:
        """Format duration as human-readable string."""
        if seconds < 60:
            return f"{int(seconds)}s"
        elif seconds < 3600:
            return f"{int(seconds // 60)}m {int(seconds % 60)}s"
        else:
            hours = int(seconds // 3600)
            minutes = int((seconds % 3600) // 60)
            return f"{hours}h {minutes}m"


class ActivityFeed:
    """
    Bounded feed of recent client events.
    """

    def __init__(self, max_events: int = 500):
        self.max_events = max_events
        self._events: deque = deque(maxlen=max_events)

    def add_event(
        self,
        event_type: EventType,
        endpoint: Optional[str] = None,
        **details
    ) -> None:
        """Add an event to the feed."""
        event = SystemEvent(
            timestamp=datetime.now(timezone.utc),
            event_type=event_type,
            endpoint=endpoint,
            details=details
        )
        self._events.append(event)

    def get_recent(self, limit: int = 50, event_type: Optional[EventType] = None) -> List[Dict]:
        """Get recent events, optionally filtered by type."""
        # Appended in time order; most recent first
        events = list(reversed(self._events))

        if event_type:
            events = [e for e in events if e.event_type == event_type]

        return [e.to_dict() for e in events[:limit]]

    def get_event_counts(self, since_minutes: int = 5) -> Dict[str, int]:
        """Get event counts by type since N minutes ago."""
        cutoff = datetime.now(timezone.utc) - timedelta(minutes=since_minutes)

        counts: Dict[str, int] = {}
        for event in self._events:
            if event.timestamp >= cutoff:
                key = event.event_type.value
                counts[key] = counts.get(key, 0) + 1

        return counts


class SystemMonitor:
    """
    Central monitoring hub for the client.
    """

    def __init__(self):
        self.metrics = MetricsCollector()
        self.activity = ActivityFeed()

    def get_dashboard_data(self) -> Dict[str, Any]:
        """Get everything the CLI status command prints."""
        return {
            "metrics": self.metrics.get_metrics(),
            "recent_activity": self.activity.get_recent(limit=20),
            "event_counts_5m": self.activity.get_event_counts(since_minutes=5),
        }


# Global monitor instance
monitor = SystemMonitor()


__all__ = [
    "SystemMonitor",
    "MetricsCollector",
    "ActivityFeed",
    "EventType",
    "SystemEvent",
    "monitor",
]
