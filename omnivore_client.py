#!/usr/bin/env python3
"""
Omnivore Client Module for Pocket to Omnivore Importer
Saves articles to Omnivore through its GraphQL API.
"""

import json
import logging
from typing import Dict, Optional

import requests
from requests import Session

from errors import OmnivoreError, SaveErrorKind
from models import SaveRequest, SaveResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api-prod.omnivore.app"
DEFAULT_TIMEOUT_MS = 30000

SAVE_URL_MUTATION = """
mutation SaveUrl($input: SaveUrlInput!) {
  saveUrl(input: $input) {
    ... on SaveSuccess {
      url
      clientRequestId
    }
    ... on SaveError {
      errorCodes
      message
    }
  }
}
"""


class OmnivoreClient:
    """Thin client for the Omnivore saveUrl mutation. Never retries."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        session: Optional[Session] = None,
    ):
        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.graphql_url = f"{self.base_url}/api/graphql"
        self.timeout = timeout_ms / 1000.0
        self.session = session or requests.Session()

    def save_article(self, request: SaveRequest) -> SaveResult:
        """
        Save a single article by URL.

        Args:
            request: Prepared save request

        Returns:
            SaveResult with the id Omnivore acknowledged

        Raises:
            OmnivoreError: classified as a GraphQL, network or unknown failure
        """
        data = self._post(
            {"query": SAVE_URL_MUTATION, "variables": {"input": request.to_payload()}}
        )

        errors = data.get("errors")
        if errors:
            messages = "; ".join(str(error.get("message", error)) for error in errors)
            raise OmnivoreError(SaveErrorKind.GRAPHQL, messages)

        result = (data.get("data") or {}).get("saveUrl")
        if not result:
            raise OmnivoreError(SaveErrorKind.GRAPHQL, "Empty saveUrl response")

        if "errorCodes" in result:
            message = result.get("message") or ", ".join(result.get("errorCodes") or [])
            raise OmnivoreError(SaveErrorKind.GRAPHQL, message or "Save failed")

        article_id = result.get("clientRequestId") or request.client_request_id
        logger.debug(f"Saved {request.url} as {article_id}")
        return SaveResult(id=article_id, state=request.state or "SUCCEEDED")

    def _post(self, payload: Dict) -> Dict:
        try:
            response = self.session.post(
                self.graphql_url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": self.api_key,
                },
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise OmnivoreError(SaveErrorKind.NETWORK, f"Request timeout: {e}") from e
        except requests.exceptions.RequestException as e:
            raise OmnivoreError(SaveErrorKind.NETWORK, str(e)) from e

        if response.status_code == 401:
            raise OmnivoreError(
                SaveErrorKind.NETWORK, "Authentication failed. Check your API key."
            )

        if not 200 <= response.status_code < 300:
            raise OmnivoreError(
                SaveErrorKind.NETWORK,
                f"API request failed with status {response.status_code}: {response.text}",
            )

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise OmnivoreError(SaveErrorKind.UNKNOWN, f"Invalid JSON response: {e}") from e
