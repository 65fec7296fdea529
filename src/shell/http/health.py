"""
Health endpoints.

Key behaviors:
- /health/live: Liveness probe (process alive)
- /health: Readiness, including whether the meta settings load and validate
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.api.deps import get_settings_service
from src.components.settings import MetaConfigError, SettingsService

# --- Types ---


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class CheckResult:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0.0
    details: dict[str, Any] = field(default_factory=dict)


# --- Built-in Checks ---


class SettingsCheck:
    """Meta settings load and validate."""

    name = "settings"

    def __init__(self, settings_service: SettingsService) -> None:
        self._settings_service = settings_service

    def check(self) -> CheckResult:
        start = time.perf_counter()
        try:
            settings = self._settings_service.get()
        except MetaConfigError as e:
            return CheckResult(
                name=self.name,
                status=HealthStatus.UNHEALTHY,
                message=str(e).splitlines()[0],
                latency_ms=(time.perf_counter() - start) * 1000,
            )
        return CheckResult(
            name=self.name,
            status=HealthStatus.HEALTHY,
            latency_ms=(time.perf_counter() - start) * 1000,
            details={
                "profiles": sorted(settings.field_profiles),
                "cache_enabled": settings.cache_enabled,
            },
        )


# --- Router ---

router = APIRouter()


@router.get("/health/live", summary="Liveness probe")
def live() -> dict[str, str]:
    return {"status": HealthStatus.HEALTHY.value}


@router.get("/health", summary="Readiness probe")
def health(
    settings_service: SettingsService = Depends(get_settings_service),
) -> JSONResponse:
    checks = [SettingsCheck(settings_service).check()]
    healthy = all(check.status == HealthStatus.HEALTHY for check in checks)
    overall = HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": overall.value,
            "checks": [{**asdict(check), "status": check.status.value} for check in checks],
        },
    )
