"""位置情報APIサーバー（FastAPI）"""
from typing import Any, Optional, Union

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .features.app.orchestrator import LocationOrchestrator
from .features.geocoding.domain.models import GeocodeResult
from .infrastructure.config.settings import Settings
from .shared.logging.config import get_logger, setup_logging

# 設定を読み込み
settings = Settings()

# ロギングを設定
setup_logging(level=settings.log_level)
logger = get_logger(__name__)

SERVICE_NAME = "ConnectSpace Locations"
SERVICE_VERSION = "1.0.0"

app = FastAPI(
    title=SERVICE_NAME,
    description="イベント・コミュニティの場所検索、ジオコーディング、逆ジオコーディングを提供するサービス",
    version=SERVICE_VERSION,
)

_orchestrator: Optional[LocationOrchestrator] = None

# エラーメッセージとHTTPステータスの対応
_BAD_REQUEST_ERRORS = {
    "Address must be at least 2 characters",
    "Invalid coordinates",
    "No location provided",
    "No valid address or city to geocode",
}
_UNAVAILABLE_ERRORS = {
    "Geocoding service unavailable",
    "Reverse geocoding service unavailable",
}


class ValidateLocationRequest(BaseModel):
    """位置情報の検証リクエスト"""

    location: Union[str, dict[str, Any], None] = None


def get_orchestrator() -> LocationOrchestrator:
    """オーケストレーターを取得（初回のみ生成）"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = LocationOrchestrator(settings)
    return _orchestrator


def _result_response(result: GeocodeResult) -> JSONResponse:
    """GeocodeResult をステータスコード付きのレスポンスに変換"""
    if result.success:
        status_code = 200
    elif result.error in _BAD_REQUEST_ERRORS:
        status_code = 400
    elif result.error in _UNAVAILABLE_ERRORS:
        status_code = 503
    else:
        status_code = 404
    return JSONResponse(status_code=status_code, content=result.to_dict())


@app.on_event("startup")
async def startup_event() -> None:
    """起動時の処理（プロバイダーを初期化）"""
    logger.info("Application starting up")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Google Places: {'enabled' if settings.google_places_configured else 'disabled'}")
    get_orchestrator()


@app.on_event("shutdown")
async def shutdown_event() -> None:
    """シャットダウン時の処理"""
    global _orchestrator
    logger.info("Application shutting down")
    if _orchestrator is not None:
        _orchestrator.close()
        _orchestrator = None


@app.get("/")
async def root() -> dict[str, Any]:
    """ルートエンドポイント"""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "running",
        "environment": settings.environment,
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """ヘルスチェックエンドポイント"""
    return {"status": "healthy"}


@app.get("/api/locations/search")
def search_locations(
    q: str = Query(..., description="都市名・場所名"),
    orchestrator: LocationOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """
    プロフィール用の都市検索

    Args:
        q: 検索テキスト

    Returns:
        dict[str, Any]: id, name, display_name, lat, lon を持つ結果
    """
    results = orchestrator.geocoding_service.search_locations(q, settings.suggestion_limit)
    return {"results": results}


@app.get("/api/locations/suggest")
def suggest_locations(
    q: str = Query(..., description="入力途中のテキスト"),
    orchestrator: LocationOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """ロケーションピッカー用の候補（フォールバックチェーン経由）"""
    suggestions = orchestrator.chain.suggest(q)
    return {"suggestions": [s.to_dict() for s in suggestions]}


@app.get("/api/locations/reverse")
def reverse_geocode(
    lat: float = Query(..., description="緯度"),
    lon: float = Query(..., description="経度"),
    orchestrator: LocationOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """地図クリック時の逆ジオコーディング"""
    return _result_response(orchestrator.geocoding_service.reverse_geocode(lat, lon))


@app.get("/api/locations/geocode")
def geocode_address(
    address: str = Query(..., description="住所または都市名"),
    orchestrator: LocationOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """住所・都市名の前方ジオコーディング"""
    return _result_response(orchestrator.geocoding_service.geocode_address(address))


@app.post("/api/locations/validate")
def validate_location(
    request: ValidateLocationRequest,
    orchestrator: LocationOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """保存前に位置情報を検証・補完"""
    result = orchestrator.geocoding_service.validate_and_enrich_location(request.location)
    return _result_response(result)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """グローバル例外ハンドラー"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "detail": str(exc)},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
