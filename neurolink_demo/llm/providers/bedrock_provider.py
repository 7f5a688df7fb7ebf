"""Amazon Bedrock provider, using the Anthropic SDK's Bedrock client."""

import os
from typing import Any, Dict, Optional

from .anthropic_provider import AnthropicProvider


class BedrockProvider(AnthropicProvider):
    """Claude models served through Amazon Bedrock."""

    name = "bedrock"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = dict(config or {})
        self.aws_access_key = config.get('aws_access_key') or os.getenv("AWS_ACCESS_KEY_ID")
        self.aws_secret_key = config.get('aws_secret_key') or os.getenv("AWS_SECRET_ACCESS_KEY")
        self.aws_session_token = config.get('aws_session_token') or os.getenv("AWS_SESSION_TOKEN")
        self.aws_region = config.get('aws_region') or os.getenv("AWS_REGION", "us-east-2")
        config.setdefault('api_key', self.aws_access_key)
        super().__init__(config)
        self.base_url = f"https://bedrock-runtime.{self.aws_region}.amazonaws.com"

    def _validate_credentials(self) -> None:
        if not (self.aws_access_key and self.aws_secret_key):
            raise ValueError("AWS credentials are required (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY)")

    def _build_client(self):
        from anthropic import AnthropicBedrock

        return AnthropicBedrock(
            aws_access_key=self.aws_access_key,
            aws_secret_key=self.aws_secret_key,
            aws_session_token=self.aws_session_token,
            aws_region=self.aws_region,
            timeout=self.timeout_seconds,
            max_retries=0,
        )
