"""ロギング設定"""
import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# プロバイダー呼び出しごとにログを出すライブラリ
_NOISY_LOGGERS = ("urllib3", "googlemaps", "asyncio", "uvicorn.access")

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """
    ルートロガーを標準出力向けに設定（2回目以降の呼び出しは無視）

    Args:
        level: ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    global _configured
    if _configured:
        return

    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
    logging.info(f"Logging configured with level: {level}")


def get_logger(name: str) -> logging.Logger:
    """モジュール用のロガーを取得（通常は __name__ を渡す）"""
    return logging.getLogger(name)
