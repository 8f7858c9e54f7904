"""Application-only OAuth2 client for the Reddit listing API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp

from catso.core.errors import AuthenticationFailed, UpstreamFetchFailed
from catso.core.secrets import Credentials
from catso.core.settings import Settings

logger = logging.getLogger(__name__)

# https://github.com/reddit-archive/reddit/wiki/OAuth2#application-only-oauth
TOKEN_REQUEST_BODY = "grant_type=client_credentials&username=&password="


class RedditClient:
    def __init__(self, settings: Settings, credentials: Credentials) -> None:
        # The token URL carries client_id:client_secret as userinfo.
        self._token_url = credentials.reddit_token_url
        self._api_base = settings.reddit_api_base
        self._user_agent = settings.reddit_user_agent
        self._timeout = settings.http_timeout_seconds

    async def _fetch_token(self, session: aiohttp.ClientSession) -> str:
        if not self._token_url:
            raise AuthenticationFailed("Reddit token URL is not configured")
        headers = {
            "User-Agent": self._user_agent,
            "Content-Type": "application/x-www-form-urlencoded",
        }
        try:
            async with session.post(self._token_url, data=TOKEN_REQUEST_BODY, headers=headers) as resp:
                raw = await resp.text()
                status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise AuthenticationFailed(f"Could not authenticate: {exc}") from exc

        if status >= 400:
            raise AuthenticationFailed(f"Token endpoint HTTP {status}")
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise AuthenticationFailed("Token endpoint returned invalid JSON") from exc
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthenticationFailed("Token endpoint returned no access_token")
        return token

    async def _fetch_listing(self, session: aiohttp.ClientSession, category: str, token: str) -> dict[str, Any]:
        url = f"{self._api_base}/r/{category}/top/.json"
        headers = {
            "Authorization": f"bearer {token}",
            "User-Agent": self._user_agent,
        }
        try:
            async with session.get(url, params={"count": "0"}, headers=headers) as resp:
                raw = await resp.text()
                status = resp.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise UpstreamFetchFailed(f"Failed to get top posts: {exc}") from exc

        if status >= 400:
            raise UpstreamFetchFailed(f"Listing HTTP {status} for r/{category}")
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise UpstreamFetchFailed(f"Invalid JSON listing for r/{category}") from exc
        if not isinstance(payload, dict):
            raise UpstreamFetchFailed(f"Unexpected listing shape for r/{category}")
        return payload

    async def fetch_top_posts(self, category: str, count: int) -> list[dict[str, Any]]:
        """Return the first ``count`` posts of ``/r/{category}/top``."""
        timeout = aiohttp.ClientTimeout(total=float(self._timeout))
        async with aiohttp.ClientSession(timeout=timeout) as session:
            token = await self._fetch_token(session)
            listing = await self._fetch_listing(session, category, token)

        data = listing.get("data")
        if not isinstance(data, dict):
            raise UpstreamFetchFailed(f"Unexpected listing shape for r/{category}")
        children = data.get("children")
        if not isinstance(children, list):
            raise UpstreamFetchFailed(f"Listing for r/{category} has no children")
        posts = [
            child["data"]
            for child in children
            if isinstance(child, dict) and isinstance(child.get("data"), dict)
        ]
        logger.info(
            "reddit.top_posts.fetched",
            extra={"category": category, "received": len(posts), "requested": count},
        )
        return posts[:count]


__all__ = ["RedditClient", "TOKEN_REQUEST_BODY"]
