"""CLIエントリーポイント"""
import argparse
import json
import sys
from pathlib import Path
from typing import Any

from .features.app.orchestrator import LocationOrchestrator
from .features.geocoding.domain.models import LegacyLocation
from .infrastructure.config.settings import Settings
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _load_legacy_locations(path: str) -> list[LegacyLocation]:
    """
    旧形式の位置情報をJSONファイルから読み込む

    Args:
        path: JSONファイルのパス（オブジェクトの配列）

    Returns:
        list[LegacyLocation]: 旧形式の位置情報リスト
    """
    with Path(path).open(encoding="utf-8") as f:
        records = json.load(f)

    if not isinstance(records, list):
        raise ValueError(f"Expected a JSON array in {path}")

    return [
        LegacyLocation(
            address=record.get("address"),
            city=record.get("city"),
            lat=record.get("lat"),
            lng=record.get("lng", record.get("lon")),
            country=record.get("country"),
        )
        for record in records
    ]


def build_parser() -> argparse.ArgumentParser:
    """コマンドライン引数のパーサーを作成"""
    parser = argparse.ArgumentParser(
        description="イベント・コミュニティ向け位置情報ツール"
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

    subparsers = parser.add_subparsers(dest="command", required=True)

    suggest = subparsers.add_parser("suggest", help="入力テキストの候補を表示")
    suggest.add_argument("query", type=str, help="検索テキスト")

    search = subparsers.add_parser("search", help="都市を検索")
    search.add_argument("query", type=str, help="都市名・場所名")
    search.add_argument("--limit", type=int, default=5, help="最大件数（デフォルト: 5）")

    geocode = subparsers.add_parser("geocode", help="住所をジオコーディング")
    geocode.add_argument("address", type=str, help="住所または都市名")

    reverse = subparsers.add_parser("reverse", help="座標を逆ジオコーディング")
    reverse.add_argument("lat", type=float, help="緯度")
    reverse.add_argument("lon", type=float, help="経度")

    migrate = subparsers.add_parser("migrate", help="旧形式の位置情報を移行")
    migrate.add_argument("input", type=str, help="旧形式の位置情報を含むJSONファイル")
    migrate.add_argument("--output", "-o", type=str, help="移行結果の出力先（省略時は標準出力）")
    migrate.add_argument(
        "--delay",
        type=float,
        default=1.0,
        help="リクエスト間の待機時間（秒、デフォルト: 1.0）",
    )

    return parser


def run_command(args: argparse.Namespace, orchestrator: LocationOrchestrator) -> int:
    """
    サブコマンドを実行

    Returns:
        int: 終了コード（0: 成功, 1: 失敗）
    """
    service = orchestrator.geocoding_service

    if args.command == "suggest":
        suggestions = orchestrator.chain.suggest(args.query)
        _print_json([s.to_dict() for s in suggestions])
        return 0

    if args.command == "search":
        _print_json(service.search_locations(args.query, args.limit))
        return 0

    if args.command == "geocode":
        result = service.geocode_address(args.address)
    elif args.command == "reverse":
        result = service.reverse_geocode(args.lat, args.lon)
    else:
        service.delay_between_requests = args.delay
        results, stats = service.migrate_batch(_load_legacy_locations(args.input))
        output = {
            "stats": stats,
            "results": [r.to_dict() for r in results],
        }
        if args.output:
            with Path(args.output).open("w", encoding="utf-8") as f:
                json.dump(output, f, ensure_ascii=False, indent=2)
            logger.info(f"Migration results written to {args.output}")
        else:
            _print_json(output)
        return 0 if stats["failure"] == 0 else 1

    _print_json(result.to_dict())
    return 0 if result.success else 1


def main() -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 成功, 1: 失敗）
    """
    args = build_parser().parse_args()

    try:
        # 設定を読み込み
        settings = Settings(_env_file=args.env_file)

        # ログレベルを上書き
        if args.log_level:
            settings.log_level = args.log_level

        setup_logging(level=settings.log_level)

        logger.info(f"Running command: {args.command}")
        logger.info(f"Environment: {settings.environment}")

        orchestrator = LocationOrchestrator(settings)
        try:
            return run_command(args, orchestrator)
        finally:
            orchestrator.close()

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except Exception as e:
        logger.error(f"Command failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
