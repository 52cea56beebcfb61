"""共通フィクスチャ"""

import pytest

from coordinates_app.features.coordinates.domain.enums import AuthorizationState
from coordinates_app.features.coordinates.services.fallback import FallbackPolicy
from coordinates_app.features.coordinates.services.state_manager import CoordinateStateManager
from coordinates_app.features.location.providers.simulated_provider import (
    SimulatedLocationProvider,
)
from coordinates_app.shared.logging import config as logging_config


@pytest.fixture(autouse=True)
def _skip_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    """ハンドラーの差し替えを防ぎ、pytestのログキャプチャに任せる"""
    monkeypatch.setattr(logging_config, "_logger_configured", True)


@pytest.fixture
def provider() -> SimulatedLocationProvider:
    """認可済み・手動応答のプロバイダー"""
    return SimulatedLocationProvider(
        authorization=AuthorizationState.GRANTED,
        auto_respond=False,
    )


@pytest.fixture
def manager(provider: SimulatedLocationProvider) -> CoordinateStateManager:
    return CoordinateStateManager(provider)


@pytest.fixture
def settled_manager(provider: SimulatedLocationProvider) -> CoordinateStateManager:
    """初回リクエストが完了済み（以降の失敗はユーザーに通知される）マネージャー"""
    manager = CoordinateStateManager(provider, FallbackPolicy())
    provider.change_authorization(AuthorizationState.GRANTED)
    assert not manager.is_initial_request
    return manager
