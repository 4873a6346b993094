"""
Gateway process and traffic metrics
"""

import os
import resource
import threading
import time
from typing import Any, Dict, Optional


class GatewayMetrics:
    """Request counters and CBS latency, plus process resource usage"""

    def __init__(self):
        self._lock = threading.Lock()
        self._started = time.monotonic()
        self.requests_total = 0
        self.responses_by_status: Dict[str, int] = {}
        self.cbs_calls = 0
        self.cbs_failures = 0
        self.cbs_time_ms = 0.0

    @property
    def uptime(self) -> float:
        return time.monotonic() - self._started

    def record_request(self, status_code: int, cbs_time_ms: Optional[float] = None,
                       cbs_failed: bool = False) -> None:
        with self._lock:
            self.requests_total += 1
            bucket = f"{status_code // 100}xx"
            self.responses_by_status[bucket] = self.responses_by_status.get(bucket, 0) + 1
            if cbs_time_ms is not None:
                self.cbs_calls += 1
                self.cbs_time_ms += cbs_time_ms
            if cbs_failed:
                self.cbs_failures += 1

    def snapshot(self) -> Dict[str, Any]:
        usage = resource.getrusage(resource.RUSAGE_SELF)
        times = os.times()
        with self._lock:
            average = self.cbs_time_ms / self.cbs_calls if self.cbs_calls else 0.0
            return {
                "uptime": self.uptime,
                "memory": {
                    # Peak resident set size, not current usage
                    "maxRss": usage.ru_maxrss * 1024,  # Linux reports kilobytes
                },
                "cpu": {
                    "user": times.user,
                    "system": times.system,
                },
                "requests": {
                    "total": self.requests_total,
                    "byStatus": dict(self.responses_by_status),
                },
                "cbs": {
                    "calls": self.cbs_calls,
                    "failures": self.cbs_failures,
                    "averageResponseTimeMs": round(average, 3),
                },
            }
