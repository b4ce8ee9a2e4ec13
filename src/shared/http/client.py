"""外部ジオコーディングAPI向けのHTTPクライアント"""

from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions.errors import HTTPError, ProviderResponseError
from ..logging.config import get_logger

logger = get_logger(__name__)

# Nominatimの利用規約上、アプリを識別できるUser-Agentが必須
DEFAULT_USER_AGENT = "ConnectSpace/1.0"

RETRY_STATUSES = (429, 500, 502, 503, 504)


class HTTPClient:
    """
    Photon / Nominatim 用のHTTPクライアント

    1つのセッションを全プロバイダーで共有する。
    一時的なエラー（429, 5xx）は urllib3 の Retry で指数バックオフしながら再送し、
    それでも失敗した場合は HTTPError を送出する。
    """

    def __init__(
        self,
        timeout: float = 10,
        max_retries: int = 2,
        backoff_factor: float = 0.3,
        status_forcelist: tuple[int, ...] = RETRY_STATUSES,
        user_agent: Optional[str] = None,
        accept_language: Optional[str] = None,
    ):
        """
        Args:
            timeout: 1リクエストあたりのタイムアウト（秒）
            max_retries: 再送回数
            backoff_factor: 再送間隔の係数
            status_forcelist: 再送するステータスコード
            user_agent: User-Agent（Noneの場合は DEFAULT_USER_AGENT）
            accept_language: 結果の言語（都市名を揃えるため通常は "en"）
        """
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.accept_language = accept_language

        retry = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=status_forcelist,
            allowed_methods=["HEAD", "GET"],
            respect_retry_after_header=True,
        )
        self.session = self._create_session(retry)

    def _create_session(self, retry: Retry) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(max_retries=retry)
        for prefix in ("http://", "https://"):
            session.mount(prefix, adapter)

        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        if self.accept_language:
            headers["Accept-Language"] = self.accept_language
        session.headers.update(headers)
        return session

    def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> requests.Response:
        """
        GETリクエストを送信

        Raises:
            HTTPError: 接続失敗・タイムアウト・再送後もエラーステータスの場合
        """
        logger.debug(f"GET {url} params={params}")
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"GET {url} failed: {e}")
            raise HTTPError(f"Failed to GET {url}: {e}") from e

        logger.debug(f"GET {url} -> {response.status_code}")
        return response

    def get_json(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        GETリクエストを送信し、JSONをデコードして返す

        Raises:
            HTTPError: リクエスト失敗時
            ProviderResponseError: レスポンスがJSONでない場合
        """
        response = self.get(url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as e:
            raise ProviderResponseError(f"Invalid JSON from {url}: {e}") from e

    def close(self) -> None:
        self.session.close()
        logger.debug("HTTP session closed")

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
