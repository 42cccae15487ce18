"""
Backend API Client

Async REST client for the Krishi Sahayak backend built on ``httpx``.
Authenticated requests carry the stored bearer token; a 401 response clears
the token and triggers the forced-logout hook.
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx

from krishi_sahayak.config import ApiConfig
from krishi_sahayak.core.storage import PreferenceStore
from krishi_sahayak.exceptions import ApiError, AuthenticationError, KrishiSahayakError

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    401: "Authentication required",
    403: "Access denied",
    404: "Resource not found",
    429: "Too many requests. Please try again later.",
    500: "Server error. Please try again later.",
}


def handle_api_error(error: Exception) -> str:
    """
    Convert a failed API call into a message for the farmer.

    Args:
        error: Exception raised by an ``ApiClient`` call

    Returns:
        User-facing error text
    """
    logger.error(f"API Error: {error}")

    if isinstance(error, AuthenticationError):
        return STATUS_MESSAGES[401]

    if isinstance(error, ApiError):
        if error.is_network_error:
            return "Network error. Please check your connection."
        if error.status_code == 400:
            return error.response_message or "Invalid request data"
        if error.status_code in STATUS_MESSAGES:
            return STATUS_MESSAGES[error.status_code]
        return error.response_message or "Something went wrong"

    return "An unexpected error occurred"


def _response_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        return str(message) if message else None
    return None


class ApiClient:
    """
    {
        "name": "ApiClient",
        "version": "1.0.0",
        "description": "Bearer-authenticated async client for the farming advisory backend.",
        "dependencies": ["httpx", "PreferenceStore"],
        "interface": {
            "inputs": ["method: str", "path: str", "params/json/files"],
            "outputs": "Decoded JSON payloads or ApiError/AuthenticationError"
        }
    }
    """

    def __init__(
        self,
        config: ApiConfig,
        preferences: PreferenceStore,
        *,
        on_unauthorized: Callable[[], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.preferences = preferences
        self.on_unauthorized = on_unauthorized
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def _auth_headers(self) -> dict[str, str]:
        token = self.preferences.load_token()
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _handle_unauthorized(self, path: str) -> None:
        logger.warning(f"Received 401 from {path}; clearing stored token")
        self.preferences.remove_token()
        if self.on_unauthorized is not None:
            try:
                self.on_unauthorized()
            except KrishiSahayakError as e:
                logger.error(f"Forced logout failed: {e}")

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Send a request and decode the JSON response.

        Raises:
            AuthenticationError: On a 401 response
            ApiError: On any other HTTP error status or a transport failure
        """
        headers = {**self._auth_headers(), **kwargs.pop("headers", {})}
        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(
                f"Network error calling {method} {path}: {e}", endpoint=path
            ) from e

        if response.status_code == 401:
            self._handle_unauthorized(path)
            raise AuthenticationError(
                f"Unauthorized response from {path}", status_code=401
            )

        if response.is_error:
            raise ApiError(
                f"{method} {path} failed with status {response.status_code}",
                status_code=response.status_code,
                endpoint=path,
                response_message=_response_message(response),
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(
                f"Invalid JSON in response from {path}",
                status_code=response.status_code,
                endpoint=path,
            ) from e

    async def get(self, path: str, params: dict[str, Any] | None = None, **kwargs: Any) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        return await self.request("GET", path, params=params, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    def _multipart(self, files: dict[str, Any], data: dict[str, Any] | None = None) -> dict[str, Any]:
        # httpx derives the multipart content type and boundary
        return {"files": files, "data": data or {}}

    # Prices

    async def get_prices(self, crop: str, location: str | None = None) -> Any:
        return await self.get("/prices", {"crop": crop, "location": location})

    async def get_price_history(
        self, crop: str, location: str | None = None, days: int = 30
    ) -> Any:
        return await self.get(
            "/prices/history", {"crop": crop, "location": location, "days": days}
        )

    async def get_forecast(
        self, crop: str, location: str | None = None, days: int = 7
    ) -> Any:
        return await self.get(
            "/prices/forecast", {"crop": crop, "location": location, "days": days}
        )

    async def get_market_prices(self, crop: str, state: str) -> Any:
        return await self.get(
            "/market/prices",
            {"crop": crop, "state": state},
            timeout=self.config.market_timeout_seconds,
        )

    async def get_market_trends(self, crop: str, state: str, days: int = 30) -> Any:
        return await self.get(
            "/market/trends",
            {"crop": crop, "state": state, "days": days},
            timeout=self.config.market_timeout_seconds,
        )

    async def get_market_recommendations(self, crop: str, state: str) -> Any:
        return await self.get(
            "/market/recommendations",
            {"crop": crop, "state": state},
            timeout=self.config.market_timeout_seconds,
        )

    # Crops and diseases

    async def get_crops(self) -> Any:
        return await self.get("/crops")

    async def get_crop_info(self, crop_id: str | int) -> Any:
        return await self.get(f"/crops/{crop_id}")

    async def detect_disease(
        self,
        image: bytes,
        filename: str = "leaf.jpg",
        content_type: str = "image/jpeg",
        fields: dict[str, Any] | None = None,
    ) -> Any:
        return await self.post(
            "/diseases/detect",
            timeout=self.config.upload_timeout_seconds,
            **self._multipart({"image": (filename, image, content_type)}, fields),
        )

    # Calculator and chatbot

    async def calculate_cost(self, cost_data: dict[str, Any]) -> Any:
        return await self.post("/calculator/cost", json=cost_data)

    async def get_bot_response(self, query_data: dict[str, Any]) -> Any:
        return await self.post("/chatbot/query", json=query_data)

    async def speech_to_text(
        self, audio: bytes, language: str = "hi", filename: str = "speech.webm"
    ) -> Any:
        return await self.post(
            "/chatbot/speech-to-text",
            **self._multipart(
                {"audio": (filename, audio, "audio/webm")}, {"language": language}
            ),
        )

    async def text_to_speech(self, text_data: dict[str, Any]) -> Any:
        return await self.post("/chatbot/text-to-speech", json=text_data)

    # Profile

    async def update_profile(self, profile_data: dict[str, Any]) -> Any:
        return await self.put("/auth/profile", json=profile_data)

    async def get_user_activity(self) -> Any:
        return await self.get("/auth/activity")

    async def get_user_favorites(self) -> Any:
        return await self.get("/auth/favorites")

    # Weather

    async def get_weather_data(self, location: str) -> Any:
        return await self.get("/weather", {"location": location})

    # Authentication

    async def login(self, credentials: dict[str, Any]) -> Any:
        return await self.post("/auth/login", json=credentials)

    async def signup(self, user_data: dict[str, Any]) -> Any:
        return await self.post("/auth/signup", json=user_data)

    async def refresh_token(self) -> Any:
        return await self.post("/auth/refresh")

    # Translation

    async def translate(self, text: str, source_language: str, target_language: str) -> Any:
        return await self.post(
            "/translation/translate",
            json={
                "text": text,
                "source_language": source_language,
                "target_language": target_language,
            },
        )

    async def translate_batch(
        self, texts: list[str], source_language: str, target_language: str
    ) -> Any:
        return await self.post(
            "/translation/translate-batch",
            json={
                "texts": texts,
                "source_language": source_language,
                "target_language": target_language,
            },
        )

    async def detect_language(self, text: str) -> Any:
        return await self.post("/translation/detect-language", json={"text": text})
