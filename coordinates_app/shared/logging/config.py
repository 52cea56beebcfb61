"""ロギング設定"""
import logging
import sys
from typing import Optional

# アプリケーションのロガー名前空間
APP_LOGGER_NAME = "coordinates_app"

# 指定レベルに関わらずWARNING未満を抑えるライブラリ
# （HTTPのリトライ・接続ログ、サーバーのアクセスログ）
QUIET_LIBRARIES = ("urllib3", "requests", "uvicorn.access")

# プロバイダーの結果はワーカースレッドから届くため、スレッド名も出力する
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s] %(message)s"

# ロガー設定済みフラグ
_logger_configured = False


def setup_logging(
    level: str = "INFO",
    enable_cloud_logging: bool = False,
    project_id: Optional[str] = None,
) -> None:
    """
    ロギングを設定

    ルートロガーにハンドラーを1つだけ設定し、アプリケーションの名前空間
    （coordinates_app）には指定レベルを適用する。HTTP・サーバー系の
    ライブラリはDEBUG指定時でもWARNING以上のみ出力する。

    Args:
        level: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_cloud_logging: Cloud Loggingを有効にするか（gcp extra が必要）
        project_id: GCPプロジェクトID (Cloud Logging有効時に必要)
    """
    global _logger_configured

    if _logger_configured:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    # ログは標準エラーへ（CLIの出力と混ざらないように）
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(console_handler)

    logging.getLogger(APP_LOGGER_NAME).setLevel(log_level)

    library_level = max(log_level, logging.WARNING)
    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)

    if enable_cloud_logging:
        _add_cloud_logging_handler(root_logger, project_id)

    _logger_configured = True
    get_logger(__name__).info(f"Logging configured with level: {logging.getLevelName(log_level)}")


def _add_cloud_logging_handler(root_logger: logging.Logger, project_id: Optional[str]) -> None:
    try:
        from google.cloud import logging as cloud_logging

        client = cloud_logging.Client(project=project_id)
        root_logger.addHandler(cloud_logging.handlers.CloudLoggingHandler(client))
        get_logger(__name__).info("Cloud Logging enabled")
    except Exception as e:
        get_logger(__name__).warning(f"Failed to enable Cloud Logging: {e}")


def get_logger(name: str) -> logging.Logger:
    """
    指定名のロガーを取得

    Args:
        name: ロガー名（通常は__name__を指定）

    Returns:
        ロガーインスタンス
    """
    return logging.getLogger(name)
