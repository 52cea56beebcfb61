"""アプリケーション設定（Pydantic Settings）"""
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...features.coordinates.domain.enums import AuthorizationState
from ...features.coordinates.services.fallback import FallbackPolicy


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COORDINATES_",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    environment: str = Field(
        default="development",
        description="環境 (development, staging, production)",
    )

    # Location provider
    location_provider: Literal["simulated", "ip"] = Field(
        default="simulated",
        description="位置情報プロバイダー (simulated: シミュレーション, ip: IPベース)",
    )
    location_wait_timeout: float = Field(
        default=15.0,
        description="CLIで位置取得の完了を待つ最大時間（秒）",
    )

    # Fallback
    simulation_mode: bool = Field(
        default=False,
        description="シミュレーションモード（失敗時にモック座標を使用）",
    )
    use_mock_fallback_on_initial_failure: bool = Field(
        default=False,
        description="初回リクエスト失敗時にモック座標を使用するか",
    )
    use_mock_fallback_on_provider_error: bool = Field(
        default=False,
        description="分類できないプロバイダーエラー時にモック座標を使用するか",
    )

    # Simulated provider
    simulated_service_available: bool = Field(
        default=True,
        description="シミュレーション: 位置情報サービスが有効か",
    )
    simulated_authorization: AuthorizationState = Field(
        default=AuthorizationState.UNDETERMINED,
        description="シミュレーション: 初期の認可ステータス",
    )
    simulated_authorization_answer: AuthorizationState = Field(
        default=AuthorizationState.GRANTED,
        description="シミュレーション: 認可要求への回答",
    )

    # IP geolocation provider
    ip_geolocation_url: str = Field(
        default="http://ip-api.com/json/",
        description="IPベース位置情報APIのURL",
    )
    http_timeout: float = Field(
        default=10.0,
        description="HTTPリクエストのタイムアウト（秒）",
    )
    http_max_retries: int = Field(
        default=2,
        description="HTTPリクエストのリトライ回数",
    )
    http_user_agent: str = Field(
        default="coordinates-app/1.0",
        description="HTTPリクエストのUser-Agent",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    gcp_logging_enabled: bool = Field(
        default=False,
        description="Cloud Loggingを有効にするか",
    )
    gcp_project_id: Optional[str] = Field(
        default=None,
        description="GCPプロジェクトID（Cloud Logging有効時）",
    )

    # HTTP server
    port: int = Field(
        default=8080,
        description="HTTPサーバーのポート番号",
    )

    def build_fallback_policy(self) -> FallbackPolicy:
        """設定からフォールバック規則を作成"""
        if self.simulation_mode:
            return FallbackPolicy.simulation()
        return FallbackPolicy(
            use_mock_fallback_on_initial_failure=self.use_mock_fallback_on_initial_failure,
            use_mock_fallback_on_provider_error=self.use_mock_fallback_on_provider_error,
        )
