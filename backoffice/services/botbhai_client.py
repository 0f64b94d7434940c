import httpx
from typing import Optional, Dict, Any, Union
import logging
from backoffice.schemas.botbhai import UpstreamResponse

logger = logging.getLogger(__name__)

class BotBhaiApiError(Exception):
    """Базовое исключение для ошибок API BotBhai"""
    pass

class BotBhaiConnectionError(BotBhaiApiError):
    """Ошибка подключения к BotBhai (сеть, DNS, обрыв соединения)"""
    pass

class BotBhaiResponseError(BotBhaiApiError):
    """Ответ BotBhai со статусом не 2xx"""
    def __init__(self, message: str, status_code: int, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

class BotBhaiClient:
    """HTTP клиент внешнего API BotBhai (/external/products, /external/orders)"""

    def __init__(
        self,
        products_url: str,
        orders_url: str,
        api_key: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.products_url = products_url
        self.orders_url = orders_url
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()

    async def connect(self):
        """Создание HTTP сессии"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers=self._get_headers(),
                transport=self._transport
            )
            logger.debug("BotBhai HTTP session opened")

    async def disconnect(self):
        """Закрытие HTTP сессии"""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("BotBhai HTTP session closed")

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
        }

    async def _request(
        self,
        method: str,
        url: str,
        payload: Union[Dict[str, Any], list]
    ) -> UpstreamResponse:
        """
        Один запрос без повторов.

        Статус ответа не проверяется: решение об ошибке принимает вызывающий код.
        Сетевые ошибки превращаются в BotBhaiConnectionError.
        """
        if self._client is None:
            await self.connect()

        logger.debug(f"Request to BotBhai: {method} {url}")

        try:
            response = await self._client.request(method=method, url=url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise BotBhaiConnectionError(f"{type(e).__name__}: {e}") from e

        return UpstreamResponse(
            ok=response.is_success,
            status=response.status_code,
            body=response.text
        )

    async def push_product(self, payload: Dict[str, Any]) -> UpstreamResponse:
        """Создание/обновление товара"""
        return await self._request("POST", self.products_url, payload)

    async def remove_product(self, product_id: str) -> UpstreamResponse:
        return await self._request("DELETE", self.products_url, {"id": product_id})

    async def push_order(self, payload: Dict[str, Any]) -> UpstreamResponse:
        """Создание/обновление заказа"""
        return await self._request("POST", self.orders_url, payload)

    async def remove_order(self, order_id: str) -> UpstreamResponse:
        return await self._request("DELETE", self.orders_url, {"id": order_id})

def raise_for_upstream(response: UpstreamResponse) -> UpstreamResponse:
    """Бросить BotBhaiResponseError, если BotBhai ответил не 2xx"""
    if not response.ok:
        raise BotBhaiResponseError(
            f"BotBhai API error: {response.status} - {response.body[:200]}",
            response.status,
            response.body
        )
    return response
