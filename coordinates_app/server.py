"""HTTPサーバー（FastAPI）"""
import asyncio
from typing import Any, Optional, Union

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .features.app.orchestrator import AppOrchestrator
from .infrastructure.config.settings import Settings
from .shared.logging.config import get_logger, setup_logging
from .shared.reactive.dispatcher import AsyncioDispatcher, Dispatcher

logger = get_logger(__name__)


class ManualEditRequest(BaseModel):
    """手動編集リクエスト（入力欄の文字列をそのまま受け付ける）"""

    latitude: Union[str, float]
    longitude: Union[str, float]


def create_app(settings: Optional[Settings] = None, dispatcher: Optional[Dispatcher] = None) -> FastAPI:
    """
    FastAPIアプリケーションを作成

    Args:
        settings: アプリケーション設定（Noneの場合は環境変数から読み込み）
        dispatcher: コールバック転送用ディスパッチャー（Noneの場合はイベントループ）

    Returns:
        FastAPI: アプリケーション
    """
    settings = settings or Settings()

    setup_logging(
        level=settings.log_level,
        enable_cloud_logging=settings.gcp_logging_enabled,
        project_id=settings.gcp_project_id,
    )

    orchestrator = AppOrchestrator(settings, dispatcher=dispatcher or AsyncioDispatcher())
    manager = orchestrator.manager

    app = FastAPI(
        title="Coordinates Service",
        description="現在の座標の表示・手動編集・位置情報プロバイダーからの更新",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.orchestrator = orchestrator

    @app.on_event("startup")
    async def startup_event() -> None:
        """起動時の処理（画面表示時と同様に初回の位置取得を行う）"""
        if isinstance(orchestrator.dispatcher, AsyncioDispatcher):
            orchestrator.dispatcher.attach(asyncio.get_running_loop())

        logger.info("Application starting up")
        logger.info(f"Environment: {settings.environment}")
        logger.info(f"Location provider: {settings.location_provider}")

        manager.request_location()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        """シャットダウン時の処理"""
        orchestrator.close()
        logger.info("Application shutting down")

    @app.get("/")
    async def root() -> dict[str, Any]:
        """ルートエンドポイント"""
        return {
            "service": "coordinates",
            "version": "1.0.0",
            "status": "running",
            "environment": settings.environment,
        }

    @app.get("/health")
    async def health() -> dict[str, str]:
        """ヘルスチェックエンドポイント"""
        return {"status": "healthy"}

    @app.get("/coordinates")
    async def get_coordinates() -> dict[str, Any]:
        """現在の状態を取得"""
        return manager.snapshot()

    @app.put("/coordinates")
    async def put_coordinates(body: ManualEditRequest) -> dict[str, Any]:
        """
        座標を手動で更新

        入力が不正な場合は422（field と message を返す）
        """
        result = manager.apply_manual_edit(str(body.latitude), str(body.longitude))

        if result.error is not None:
            raise HTTPException(
                status_code=422,
                detail={
                    "field": result.error.field,
                    "message": result.error.user_message,
                },
            )

        return manager.snapshot()

    @app.post("/coordinates/locate", status_code=202)
    async def locate() -> dict[str, Any]:
        """位置情報プロバイダーから現在地を取得（結果は非同期に反映）"""
        logger.info("Received location request")
        manager.request_location()
        return manager.snapshot()

    @app.post("/coordinates/mock")
    async def mock() -> dict[str, Any]:
        """モック座標を設定"""
        manager.set_mock_location()
        return manager.snapshot()

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """グローバル例外ハンドラー"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error", "detail": str(exc)},
        )

    return app


def main() -> None:
    """uvicornでサーバーを起動"""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
