"""Google Vertex AI provider implementation.

Vertex accepts several authentication methods; whichever is present wins,
in this order: service account file, service account fields from the
environment, Generative AI API key.
"""

import asyncio
import logging
import os
from typing import Any, Dict, Optional

from .google_ai_provider import GoogleAIProvider

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def detect_auth_method(environ=None) -> str:
    """Name the Vertex authentication method available in the environment."""
    env = os.environ if environ is None else environ
    if env.get("GOOGLE_APPLICATION_CREDENTIALS"):
        return "service_account_file"
    if env.get("GOOGLE_AUTH_CLIENT_EMAIL"):
        return "environment_variables"
    if env.get("GOOGLE_GENERATIVE_AI_API_KEY"):
        return "api_key"
    return "none"


class VertexProvider(GoogleAIProvider):
    """Gemini models on Vertex AI."""

    name = "vertex"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = dict(config or {})
        self.project = config.get('project') or os.getenv("GOOGLE_VERTEX_PROJECT")
        self.location = config.get('location') or os.getenv("GOOGLE_VERTEX_LOCATION", "us-central1")
        self.auth_method = config.get('auth_method') or detect_auth_method()
        config.setdefault('api_key', os.getenv("GOOGLE_GENERATIVE_AI_API_KEY"))
        config.setdefault(
            'base_url',
            f"https://{self.location}-aiplatform.googleapis.com/v1",
        )
        self._credentials = None
        super().__init__(config)

    def _validate_credentials(self) -> None:
        if self.auth_method == "none":
            raise ValueError(
                "Vertex AI needs GOOGLE_APPLICATION_CREDENTIALS, GOOGLE_AUTH_CLIENT_EMAIL "
                "or GOOGLE_GENERATIVE_AI_API_KEY"
            )
        if self.auth_method != "api_key" and not self.project:
            raise ValueError("Vertex AI project is required (GOOGLE_VERTEX_PROJECT)")

    def _endpoint(self) -> str:
        if self.auth_method == "api_key" and not self.project:
            return f"{self.base_url}/publishers/google/models/{self.model}:generateContent"
        return (
            f"{self.base_url}/projects/{self.project}/locations/{self.location}"
            f"/publishers/google/models/{self.model}:generateContent"
        )

    def _load_credentials(self):
        import google.auth
        from google.oauth2 import service_account

        if self.auth_method == "environment_variables":
            info = {
                "type": "service_account",
                "client_email": os.getenv("GOOGLE_AUTH_CLIENT_EMAIL"),
                "private_key": (os.getenv("GOOGLE_AUTH_PRIVATE_KEY") or "").replace("\\n", "\n"),
                "token_uri": "https://oauth2.googleapis.com/token",
                "project_id": self.project,
            }
            return service_account.Credentials.from_service_account_info(info, scopes=[CLOUD_PLATFORM_SCOPE])

        credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
        return credentials

    def _access_token(self) -> str:
        from google.auth.transport.requests import Request

        if self._credentials is None:
            self._credentials = self._load_credentials()
        if not self._credentials.valid:
            self._credentials.refresh(Request())
        return self._credentials.token

    async def _auth(self) -> Dict[str, Any]:
        if self.auth_method == "api_key":
            return {"headers": None, "params": {"key": self.api_key}}
        # google-auth refreshes tokens with blocking HTTP
        token = await asyncio.to_thread(self._access_token)
        return {"headers": {"Authorization": f"Bearer {token}"}, "params": None}
