"""CLIエントリーポイント"""
import argparse
import sys
from typing import Optional

from .features.app.orchestrator import AppOrchestrator
from .features.coordinates.services.state_manager import CoordinateStateManager
from .infrastructure.config.settings import Settings
from .shared.logging.config import get_logger, setup_logging
from .shared.reactive.dispatcher import QueueDispatcher

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2
EXIT_INTERRUPTED = 130  # SIGINT


def build_parser() -> argparse.ArgumentParser:
    """引数パーサーを作成"""
    parser = argparse.ArgumentParser(
        prog="coordinates-app",
        description="Show, edit or refresh a single latitude/longitude pair",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="環境変数ファイルのパス（デフォルト: .env）",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="ログレベル",
    )
    parser.add_argument(
        "--simulate",
        action="store_true",
        help="シミュレーションモード（失敗時にモック座標を使用）",
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("show", help="現在の座標を表示")
    subparsers.add_parser("locate", help="位置情報プロバイダーから現在地を取得")
    subparsers.add_parser("mock", help="モック座標を設定")

    set_parser = subparsers.add_parser("set", help="座標を手動で設定")
    set_parser.add_argument("latitude", type=str, help="緯度（-90〜90）")
    set_parser.add_argument("longitude", type=str, help="経度（-180〜180）")

    return parser


def print_state(manager: CoordinateStateManager) -> None:
    """現在の状態を標準出力に表示"""
    coordinates = manager.current_coordinates
    print(f"Latitude:  {coordinates.formatted_latitude}")
    print(f"Longitude: {coordinates.formatted_longitude}")

    message = manager.user_facing_error_message.value
    if message:
        print(message)


def main(argv: Optional[list[str]] = None) -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 成功, 1: 失敗, 2: 入力エラー）
    """
    args = build_parser().parse_args(argv)
    command = args.command or "show"

    try:
        settings = Settings(_env_file=args.env_file)

        if args.log_level:
            settings.log_level = args.log_level
        if args.simulate:
            settings.simulation_mode = True

        setup_logging(
            level=settings.log_level,
            enable_cloud_logging=settings.gcp_logging_enabled,
            project_id=settings.gcp_project_id,
        )

        logger.info(f"Running command: {command}")
        logger.info(f"Environment: {settings.environment}")

        orchestrator = AppOrchestrator(settings, dispatcher=QueueDispatcher())
        manager = orchestrator.manager

        try:
            if command == "locate":
                if not orchestrator.locate_and_wait():
                    print("Timed out waiting for a location fix", file=sys.stderr)
                    print_state(manager)
                    return EXIT_FAILURE
            elif command == "mock":
                manager.set_mock_location()
            elif command == "set":
                result = manager.apply_manual_edit(args.latitude, args.longitude)
                if result.error is not None:
                    print(result.error.user_message, file=sys.stderr)
                    return EXIT_INVALID_INPUT

            print_state(manager)
        finally:
            orchestrator.close()

        return EXIT_OK

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
