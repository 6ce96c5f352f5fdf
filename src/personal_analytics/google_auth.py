"""Shared OAuth handling for the Google API clients.

Notes:
    The Google API client is synchronous. The clients built on this base wrap
    those calls using `asyncio.to_thread` so the rest of the codebase can
    remain async-friendly. Calendar, Sheets and Gmail share one token file, so
    the token is requested with every scope in `Settings.google_scopes`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import structlog

from personal_analytics.config import Settings
from personal_analytics.exceptions import AuthenticationError, ConfigurationError

logger = structlog.get_logger()


def build_google_service(
    api_name: str,
    api_version: str,
    credentials_path: Path,
    token_path: Path,
    scopes: list[str],
) -> Any:
    """Create an authenticated googleapiclient service.

    Runs the installed-app OAuth flow when no valid token is stored and writes
    the resulting token back to `token_path`.
    """
    # Imported lazily to keep import-time cost low and tests fast.
    from google.auth.transport.requests import Request
    from google.oauth2.credentials import Credentials
    from google_auth_oauthlib.flow import InstalledAppFlow
    from googleapiclient.discovery import build

    creds: Credentials | None = None
    if token_path.exists():
        creds = Credentials.from_authorized_user_file(str(token_path), scopes=scopes)

    if creds is not None and creds.expired and creds.refresh_token:
        creds.refresh(Request())

    if creds is None or not creds.valid:
        flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=scopes)
        creds = flow.run_local_server(port=0)
        token_path.parent.mkdir(parents=True, exist_ok=True)
        token_path.write_text(creds.to_json(), encoding="utf-8")

    # cache_discovery=False prevents writing discovery docs to disk.
    return build(api_name, api_version, credentials=creds, cache_discovery=False)


class GoogleServiceClient:
    """Base class for clients of a single Google API.

    Subclasses set `api_name` and `api_version`. A prebuilt service can be
    injected, which is how tests run without OAuth.
    """

    api_name: str = ""
    api_version: str = ""

    def __init__(self, settings: Settings | None = None, service: Any | None = None) -> None:
        """Initialize the client.

        Args:
            settings: Application settings. If None, uses default settings.
            service: Prebuilt googleapiclient service. If None, one is built
                on `authenticate()`.
        """
        from personal_analytics.config import get_settings

        self.settings = settings or get_settings()
        self._service: Any | None = service
        logger.info("google_client_initialized", api=self.api_name)

    async def authenticate(self) -> None:
        """Authenticate with the Google API using OAuth2.

        Raises:
            ConfigurationError: If the client secrets file is missing.
            AuthenticationError: If authentication fails.
        """

        if self._service is not None:
            return

        credentials_path = Path(self.settings.google_credentials_path)
        token_path = Path(self.settings.google_token_path)
        scopes = list(self.settings.google_scopes)

        if not credentials_path.exists() and not token_path.exists():
            raise ConfigurationError(
                f"Google credentials file not found: {credentials_path}. "
                "See README.md -> Google API Setup."
            )

        logger.info(
            "google_authentication_started",
            api=self.api_name,
            credentials_path=str(credentials_path),
            token_path=str(token_path),
        )

        try:
            self._service = await asyncio.to_thread(
                build_google_service,
                self.api_name,
                self.api_version,
                credentials_path,
                token_path,
                scopes,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("google_authentication_failed", api=self.api_name, error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        logger.info("google_authentication_completed", api=self.api_name)

    def _ensure_authenticated(self) -> Any:
        if self._service is None:
            raise AuthenticationError(
                f"{type(self).__name__} is not authenticated. "
                "Call await authenticate() first."
            )
        return self._service
