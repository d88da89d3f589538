"""Text extraction HTTP client for reading receipt images"""

import httpx
from paycycle.domain.exceptions import TextExtractionError
from paycycle.config import settings
from paycycle.infrastructure.observability.metrics import extraction_latency_histogram


class TextExtractionClient:
    """Client for the external receipt text-extraction endpoint"""

    def __init__(self, endpoint_url: str | None = None, timeout: float | None = None):
        self.endpoint_url = endpoint_url or settings.text_extraction_url
        self.timeout = timeout or settings.http_timeout_seconds

    async def extract_text(self, image_base64: str) -> str:
        """
        Send a base64-encoded image and return the raw recognized text.

        Returns an empty string when the service found no text.

        Raises:
            TextExtractionError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                with extraction_latency_histogram.time():
                    response = await client.post(
                        self.endpoint_url,
                        json={"imageBase64": image_base64},
                    )
                response.raise_for_status()
                data = response.json()

                text = data.get("text") or ""
                if not isinstance(text, str):
                    raise TypeError(f"expected text string, got {type(text).__name__}")
                return text

            except httpx.TimeoutException as e:
                raise TextExtractionError(f"Text extraction timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise TextExtractionError(f"Text extraction error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise TextExtractionError(f"Text extraction unavailable: {e}") from e
            except (AttributeError, ValueError, TypeError) as e:
                raise TextExtractionError(f"Invalid response from text extraction service: {e}") from e
