"""
Error taxonomy for the Pocket to Omnivore importer.

Row validation and save failures are fatal to a run; dead URLs are not
errors at all (they become skipped rows).
"""

from enum import Enum
from typing import Optional

from models import RunStatistics


class PocketImportError(Exception):
    """Base class for all importer errors."""


class ConfigurationError(PocketImportError):
    pass


class CsvReadError(PocketImportError):
    pass


class RowValidationError(PocketImportError):
    def __init__(self, row_number: int, message: str):
        self.row_number = row_number
        super().__init__(message)


class EmptyUrlError(RowValidationError):
    def __init__(self, row_number: int):
        super().__init__(row_number, "Empty URL found")


class InvalidUrlFormatError(RowValidationError):
    def __init__(self, row_number: int, url: str, detail: str = ""):
        self.url = url
        message = f"Invalid URL format: {url}"
        if detail:
            message += f" Error: {detail}"
        super().__init__(row_number, message)


class SaveErrorKind(Enum):
    GRAPHQL = "GraphQLError"
    NETWORK = "NetworkError"
    UNKNOWN = "UnknownError"


class OmnivoreError(PocketImportError):
    """Raised by the Omnivore client; `kind` classifies the failure."""

    def __init__(self, kind: SaveErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)


class RemoteSaveError(PocketImportError):
    prefix = "Omnivore error: "

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"{self.prefix}{message}")


class RemoteGraphQLError(RemoteSaveError):
    prefix = "GraphQL error: "


class RemoteNetworkError(RemoteSaveError):
    prefix = "Network error: "


class RemoteOtherError(RemoteSaveError):
    prefix = "Omnivore error: "


class UnexpectedSaveError(RemoteSaveError):
    prefix = "Unexpected error - "


_REMOTE_ERRORS = {
    SaveErrorKind.GRAPHQL: RemoteGraphQLError,
    SaveErrorKind.NETWORK: RemoteNetworkError,
    SaveErrorKind.UNKNOWN: RemoteOtherError,
}


def remote_save_error(error: Exception) -> RemoteSaveError:
    """Map a failure raised by the save collaborator to its remote error type."""
    if isinstance(error, OmnivoreError):
        return _REMOTE_ERRORS[error.kind](error.message)
    return UnexpectedSaveError(str(error))


class ImportAbortedError(PocketImportError):
    """Fatal, row-annotated error that stops a whole import run."""

    def __init__(
        self,
        row_number: int,
        error: Exception,
        title: str = "",
        url: str = "",
        tags: str = "",
        status: str = "",
        statistics: Optional[RunStatistics] = None,
    ):
        self.row_number = row_number
        self.error = error
        self.title = title
        self.url = url
        self.tags = tags
        self.status = status
        self.statistics = statistics or RunStatistics()
        super().__init__(f"Row {row_number}: {error}")
