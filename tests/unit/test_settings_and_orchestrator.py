"""設定・オーケストレーターのテスト"""

import threading
from unittest.mock import MagicMock

import pytest

from coordinates_app.features.app.orchestrator import AppOrchestrator
from coordinates_app.features.coordinates.domain.enums import AuthorizationState
from coordinates_app.features.coordinates.domain.models import (
    DEFAULT_COORDINATES,
    MOCK_COORDINATES,
    CoordinateValue,
)
from coordinates_app.features.location.providers.ip_geolocation_provider import (
    IpGeolocationProvider,
)
from coordinates_app.features.location.providers.simulated_provider import (
    SimulatedLocationProvider,
)
from coordinates_app.infrastructure.config.settings import Settings
from coordinates_app.shared.exceptions.errors import ConfigurationError
from coordinates_app.shared.reactive.dispatcher import ImmediateDispatcher, QueueDispatcher


def test_default_settings() -> None:
    settings = Settings(_env_file=None)

    assert settings.location_provider == "simulated"
    assert settings.environment == "development"
    policy = settings.build_fallback_policy()
    assert not policy.use_mock_fallback_on_initial_failure
    assert not policy.use_mock_fallback_on_provider_error


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COORDINATES_SIMULATED_AUTHORIZATION", "denied")
    monkeypatch.setenv("COORDINATES_SIMULATION_MODE", "true")
    monkeypatch.setenv("COORDINATES_LOCATION_PROVIDER", "ip")

    settings = Settings(_env_file=None)

    assert settings.simulated_authorization == AuthorizationState.DENIED
    assert settings.location_provider == "ip"
    policy = settings.build_fallback_policy()
    assert policy.use_mock_fallback_on_initial_failure
    assert policy.use_mock_fallback_on_provider_error


def test_orchestrator_builds_simulated_provider() -> None:
    orchestrator = AppOrchestrator(Settings(_env_file=None))

    assert isinstance(orchestrator.provider, SimulatedLocationProvider)
    assert isinstance(orchestrator.dispatcher, ImmediateDispatcher)
    assert orchestrator.locate_and_wait() is True
    assert orchestrator.manager.current_coordinates == MOCK_COORDINATES


def test_orchestrator_builds_ip_provider() -> None:
    settings = Settings(_env_file=None, location_provider="ip", http_timeout=3.0)

    orchestrator = AppOrchestrator(settings)

    assert isinstance(orchestrator.provider, IpGeolocationProvider)
    assert isinstance(orchestrator.dispatcher, QueueDispatcher)
    assert orchestrator.provider.http_client.timeout == 3.0
    orchestrator.close()


def test_ip_provider_rejects_immediate_dispatcher() -> None:
    settings = Settings(_env_file=None, location_provider="ip")

    with pytest.raises(ConfigurationError):
        AppOrchestrator(settings, dispatcher=ImmediateDispatcher())


def test_ip_fix_is_committed_on_calling_thread() -> None:
    """ワーカースレッドの取得結果は呼び出し元のスレッドで反映される"""
    orchestrator = AppOrchestrator(Settings(_env_file=None, location_provider="ip"))
    orchestrator.provider.http_client.get_json = MagicMock(  # type: ignore[attr-defined, method-assign]
        return_value={"status": "success", "lat": 35.68, "lon": 139.76}
    )
    commit_threads: list[str] = []
    orchestrator.manager.coordinates.subscribe(
        lambda _: commit_threads.append(threading.current_thread().name), emit_current=False
    )

    assert orchestrator.locate_and_wait(timeout=5.0) is True

    assert orchestrator.manager.current_coordinates == CoordinateValue(35.68, 139.76)
    assert commit_threads == [threading.current_thread().name]
    orchestrator.close()


def test_locate_and_wait_drains_queue() -> None:
    settings = Settings(_env_file=None, simulated_service_available=True)
    orchestrator = AppOrchestrator(settings, dispatcher=QueueDispatcher())

    assert orchestrator.locate_and_wait(timeout=5.0) is True
    assert orchestrator.manager.current_coordinates == MOCK_COORDINATES
    assert orchestrator.manager.authorization_state.value == AuthorizationState.GRANTED


def test_locate_with_services_disabled() -> None:
    settings = Settings(_env_file=None, simulated_service_available=False)
    orchestrator = AppOrchestrator(settings, dispatcher=QueueDispatcher())

    assert orchestrator.locate_and_wait(timeout=1.0) is True
    assert orchestrator.manager.current_coordinates == DEFAULT_COORDINATES
    assert orchestrator.manager.user_facing_error_message.value is not None
