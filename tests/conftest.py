from __future__ import annotations

import pytest
from hypothesis import HealthCheck, settings

from plancast.infra.config_loader import reset_config_cache

# Health checks on speed are noise on loaded CI machines, not a functional failure.
settings.register_profile(
    "plancast_stable",
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)

settings.load_profile("plancast_stable")


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "PLANCAST_CONFIG",
        "PLANCAST_LOG_LEVEL",
        "PLANCAST_LOG_FORMAT",
        "PLANCAST_ALLOW_SIGN_INVERSION",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
