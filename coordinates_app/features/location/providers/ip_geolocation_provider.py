"""IPアドレスベースの位置情報プロバイダー"""

from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Optional

import requests

from ....shared.exceptions.errors import HTTPError, NetworkError, TransientProviderError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ....shared.reactive.dispatcher import Dispatcher
from ...coordinates.domain.enums import AuthorizationState
from .base import LocationProvider

logger = get_logger(__name__)

DEFAULT_IP_GEOLOCATION_URL = "http://ip-api.com/json/"


class IpGeolocationProvider(LocationProvider):
    """
    HTTP経由で接続元IPのおおよその位置を取得するプロバイダー

    端末の許可ダイアログが存在しないため、認可は常にGRANTED。
    取得は単一のワーカースレッドで要求順に行い、結果はディスパッチャーで
    転送する（結果は常に要求と同じ順に届く）。
    """

    def __init__(
        self,
        http_client: Optional[HTTPClient] = None,
        url: str = DEFAULT_IP_GEOLOCATION_URL,
        dispatcher: Optional[Dispatcher] = None,
    ) -> None:
        """
        Args:
            http_client: HTTPクライアント（Noneの場合は新規作成）
            url: 位置情報APIのURL
            dispatcher: コールバック転送用ディスパッチャー
        """
        super().__init__(dispatcher)
        self.http_client = http_client or HTTPClient()
        self.url = url
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ip-geolocation-fetch")
        self._last_fetch: Optional[Future[None]] = None

        logger.info(f"IpGeolocationProvider initialized: url={url}")

    def is_service_available(self) -> bool:
        return True

    def current_authorization(self) -> AuthorizationState:
        return AuthorizationState.GRANTED

    def request_authorization(self) -> None:
        self._emit("on_authorization_changed", AuthorizationState.GRANTED)

    def request_location(self) -> None:
        self._last_fetch = self._executor.submit(self._fetch)

    def join(self, timeout: Optional[float] = None) -> None:
        """発行済みの取得がすべて終わるまで待つ"""
        if self._last_fetch is not None:
            wait([self._last_fetch], timeout=timeout)

    def _fetch(self) -> None:
        try:
            latitude, longitude = self.fetch_fix()
        except TransientProviderError as e:
            logger.warning(f"IP geolocation failed: {e}")
            self._emit("on_location_failed", e)
            return
        except Exception as e:
            logger.error(f"Unexpected error during IP geolocation: {e}", exc_info=True)
            self._emit(
                "on_location_failed",
                TransientProviderError(f"Unexpected error during IP geolocation: {e}"),
            )
            return

        logger.debug(f"IP geolocation fix: ({latitude}, {longitude})")
        self._emit("on_location_received", latitude, longitude)

    def fetch_fix(self) -> tuple[float, float]:
        """
        位置を同期的に取得

        Returns:
            tuple[float, float]: (緯度, 経度)

        Raises:
            NetworkError: 通信に失敗した場合
            TransientProviderError: レスポンスが不正な場合
        """
        try:
            payload = self.http_client.get_json(self.url)
        except HTTPError as e:
            if isinstance(e.__cause__, (requests.ConnectionError, requests.Timeout)):
                raise NetworkError(str(e)) from e
            raise TransientProviderError(str(e)) from e
        except ValueError as e:
            raise TransientProviderError(f"Invalid JSON from {self.url}: {e}") from e

        return self._parse_payload(payload)

    def _parse_payload(self, payload: Any) -> tuple[float, float]:
        if not isinstance(payload, dict):
            raise TransientProviderError(f"Unexpected response: {payload!r}")

        if payload.get("status") == "fail":
            raise TransientProviderError(f"Lookup failed: {payload.get('message', 'unknown')}")

        latitude = payload.get("lat", payload.get("latitude"))
        longitude = payload.get("lon", payload.get("longitude"))

        if latitude is None or longitude is None:
            raise TransientProviderError("Invalid response (missing lat/lon)")

        try:
            return float(latitude), float(longitude)
        except (TypeError, ValueError) as e:
            raise TransientProviderError(f"Invalid lat/lon: {latitude}, {longitude}") from e

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
        self.http_client.close()
