"""
Environment configuration for the Pocket to Omnivore importer.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from errors import ConfigurationError
from omnivore_client import DEFAULT_BASE_URL


@dataclass
class OmnivoreConfig:
    api_key: str
    base_url: Optional[str] = None

    @property
    def effective_base_url(self) -> str:
        return self.base_url or DEFAULT_BASE_URL


def load_config(dotenv_path: Optional[str] = None) -> OmnivoreConfig:
    """
    Load Omnivore credentials from the environment (and a .env file if present).

    Raises:
        ConfigurationError: OMNIVORE_API_KEY is missing or blank
    """
    load_dotenv(dotenv_path)

    api_key = os.getenv("OMNIVORE_API_KEY")
    base_url = os.getenv("OMNIVORE_BASE_URL")

    if not api_key or api_key.strip() == "":
        raise ConfigurationError("OMNIVORE_API_KEY environment variable is required")

    return OmnivoreConfig(
        api_key=api_key.strip(),
        base_url=base_url.strip() if base_url and base_url.strip() else None,
    )
