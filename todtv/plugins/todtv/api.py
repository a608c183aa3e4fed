"""
TOD TV API Client

This module handles the JSON endpoints of the TOD TV site: the per-title
video lookup used as the last link resolution strategy, and the account
login that yields a bearer token.
"""

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Optional

import aiohttp
from pydantic import BaseModel, ValidationError

from todtv.core.exceptions import NetworkError


logger = logging.getLogger(__name__)


class VideoResponse(BaseModel):
    """Body of ``/api/video/{id}``."""

    url: Optional[str] = None
    hls: Optional[str] = None

    @property
    def stream_url(self) -> Optional[str]:
        """Playable URL, preferring ``url`` over ``hls``."""
        return self.url or self.hls or None


class AuthResponse(BaseModel):
    """Body of ``/api/auth/login``."""

    token: str


class TodTvApi:
    """Client for the TOD TV JSON endpoints."""

    def __init__(
        self,
        get_session: Callable[[], aiohttp.ClientSession],
        main_url: str = "https://www.todtv.com.tr",
        auth_token: Optional[str] = None,
    ):
        """
        Initialize TOD TV API client.

        Args:
            get_session: Returns the HTTP session to use for a request
            main_url: Site root URL
            auth_token: Bearer token, if one was configured
        """
        self._get_session = get_session
        self.main_url = main_url.rstrip("/")
        self.auth_token = auth_token

    @property
    def headers(self) -> Dict[str, str]:
        """Headers the video API expects; the bearer may be empty."""
        return {
            "Authorization": f"Bearer {self.auth_token or ''}",
            "X-Requested-With": "XMLHttpRequest",
            "Accept": "application/json, text/plain, */*",
        }

    async def _request_json(self, method: str, url: str, **kwargs) -> Optional[Any]:
        """
        Make a request and decode its JSON body.

        Returns:
            Decoded JSON, or None when the body is not JSON

        Raises:
            NetworkError: On HTTP error status, connection failure or timeout
        """
        try:
            async with self._get_session().request(method, url, **kwargs) as response:
                body = await response.text()
                if response.status >= 400:
                    raise NetworkError(
                        f"{method} {url} failed with status {response.status}",
                        url=url,
                        status_code=response.status,
                        details=body[:500]
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"Network error calling {url}: {e}", url=url)

        try:
            return json.loads(body)
        except json.JSONDecodeError:
            logger.debug(f"Non-JSON response from {url}")
            return None

    async def get_video(self, video_id: str) -> Optional[VideoResponse]:
        """
        Look up the stream of a title by its identifier.

        Args:
            video_id: Trailing path segment of the title URL

        Returns:
            Parsed video response, or None when the body is not usable

        Raises:
            NetworkError: If the request fails
        """
        url = f"{self.main_url}/api/video/{video_id}"
        data = await self._request_json("GET", url, headers=self.headers)
        if not isinstance(data, dict):
            return None

        try:
            return VideoResponse.model_validate(data)
        except ValidationError as e:
            logger.debug(f"Unexpected video response for {video_id}: {e}")
            return None

    async def login(self, email: str, password: str) -> Optional[str]:
        """
        Log in and remember the returned bearer token.

        Args:
            email: Account e-mail
            password: Account password

        Returns:
            The token, or None when the reply carries none

        Raises:
            NetworkError: If the request fails
        """
        url = f"{self.main_url}/api/auth/login"
        data = await self._request_json("POST", url, json={"email": email, "password": password})
        if not isinstance(data, dict):
            return None

        try:
            token = AuthResponse.model_validate(data).token
        except ValidationError:
            logger.warning("Login response did not contain a token")
            return None

        self.auth_token = token
        logger.info("Obtained TOD TV auth token")
        return token


__all__ = ["TodTvApi", "VideoResponse", "AuthResponse"]
