from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class HealthReport:
    overall_status: str
    services: dict[str, str] = field(default_factory=dict)
    message: str = ""

    @property
    def healthy(self) -> bool:
        return self.overall_status == "UP"

    def summary(self) -> str:
        if not self.services:
            return f"Services: {self.overall_status}"
        parts = ", ".join(f"{name} {status}" for name, status in sorted(self.services.items()))
        return f"Services: {self.overall_status} ({parts})"


class HealthService:
    """Reads the gateway health dashboard. Public endpoint, no token."""

    def __init__(self, base_url: str, http: requests.Session | None = None, timeout: float = 5.0):
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout

    def check(self) -> HealthReport:
        try:
            r = self.http.get(f"{self.base_url}/dashboard/health", timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            log.warning("health_check_failed error=%s", e)
            return HealthReport(overall_status="ERROR", message="Unable to fetch service health")

        services = {}
        for name, info in (data.get("services") or {}).items():
            if isinstance(info, dict):
                services[name] = str(info.get("status", "DOWN"))
            else:
                services[name] = str(info)
        return HealthReport(
            overall_status=str(data.get("overallStatus", "ERROR")),
            services=services,
            message=str(data.get("message") or ""),
        )
