#!/usr/bin/env python3
"""ローカル開発用のロケーションピッカー実行スクリプト"""
import argparse
import asyncio
import json
import sys
from pathlib import Path

# プロジェクトルートをPythonパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.features.app.orchestrator import LocationOrchestrator
from src.features.geocoding.domain.models import LocationData
from src.features.notifications.providers.notifier import InMemoryNotifier
from src.infrastructure.config.settings import Settings
from src.shared.logging.config import setup_logging, get_logger


async def run_picker(orchestrator: LocationOrchestrator, query: str, index: int) -> None:
    """入力、候補表示、候補選択の流れを1回実行"""
    logger = get_logger(__name__)
    notifier = InMemoryNotifier()
    emitted: list[LocationData] = []

    picker = orchestrator.create_picker(on_change=emitted.append, notifier=notifier)
    picker.mount()
    try:
        picker.type_text(query)
        await picker.wait_idle()

        logger.info(f"Suggestions for '{query}': {len(picker.suggestions)}")
        for i, suggestion in enumerate(picker.suggestions):
            logger.info(f"  [{i}] {suggestion.display_name} ({suggestion.provider})")

        if picker.suggestions:
            suggestion = picker.suggestions[min(index, len(picker.suggestions) - 1)]
            await picker.select_suggestion(suggestion)
        else:
            await picker.submit()

        for message in notifier.drain():
            logger.info(f"{message.emoji} {message.message}")

        print(json.dumps(picker.snapshot(), ensure_ascii=False, indent=2))
    finally:
        picker.unmount()


def main():
    """メイン関数"""
    parser = argparse.ArgumentParser(
        description="ロケーションピッカー（ローカル開発用）"
    )
    parser.add_argument(
        "query",
        type=str,
        help="入力するテキスト（例: Monas）",
    )
    parser.add_argument(
        "--index",
        "-i",
        type=int,
        default=0,
        help="選択する候補の番号（デフォルト: 0）",
    )
    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="デバッグモードで実行",
    )

    args = parser.parse_args()

    # 設定を読み込み
    settings = Settings()

    # ロギングを設定
    log_level = "DEBUG" if args.debug else settings.log_level
    setup_logging(level=log_level)
    logger = get_logger(__name__)

    logger.info("=" * 80)
    logger.info("ロケーションピッカー（ローカル開発用）")
    logger.info("=" * 80)
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Google Places: {'enabled' if settings.google_places_configured else 'disabled'}")
    logger.info("=" * 80)

    orchestrator = LocationOrchestrator(settings)
    try:
        asyncio.run(run_picker(orchestrator, args.query, args.index))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Picker run failed: {e}", exc_info=True)
        sys.exit(1)
    finally:
        orchestrator.close()


if __name__ == "__main__":
    main()
