from __future__ import annotations

import logging
import traceback
from typing import Optional

from .config import TRACE_BASIC, TRACE_NONE

_logger = logging.getLogger(__name__)


def _alias_label(alias: Optional[str]) -> str:
    return alias or "default"


def _format_stack(err: BaseException) -> str:
    return "".join(traceback.format_exception(type(err), err, err.__traceback__))


class DeveloperError(Exception):
    """An error with a client-readable message plus diagnostic detail."""

    def __init__(
        self,
        message: str,
        detail_message: Optional[str] = None,
        stack: Optional[str] = None,
        *,
        alias: Optional[str] = None,
    ):
        self.message = message
        self.detail_message = detail_message or ""
        self.stack = stack or ""
        self.alias = alias
        super().__init__(message)

    @classmethod
    def from_exception(cls, err: BaseException) -> DeveloperError:
        """Wrap any exception; DeveloperErrors pass through untouched."""
        if isinstance(err, DeveloperError):
            return err
        return cls(str(err), "unhandled exception", _format_stack(err))

    def log(self, trace_level: int, logger: Optional[logging.Logger] = None) -> None:
        """Log this error according to the trace level (-1 logs nothing)."""
        log = logger or _logger
        if trace_level <= TRACE_NONE:
            return
        if trace_level == TRACE_BASIC:
            log.error("Error occurred:%s", self.message)
        else:
            log.error(
                "Error occurred:%s \n %s \n %s",
                self.message,
                self.detail_message,
                self.stack,
            )


class ToolUnavailable(DeveloperError):
    """The Salesforce CLI could not be launched."""

    def __init__(self, alias: Optional[str], detail_message: str, stack: Optional[str] = None):
        super().__init__(
            f"Error occurred while asking the salesforce cli for alias:{_alias_label(alias)}, "
            "is the salesforce cli installed?",
            detail_message,
            stack,
            alias=alias,
        )


class MalformedResponse(DeveloperError):
    """The Salesforce CLI produced output that is not a JSON object."""

    def __init__(self, alias: Optional[str], detail_message: str, stack: Optional[str] = None):
        super().__init__(
            f"Unable to get connection:{_alias_label(alias)}",
            detail_message,
            stack,
            alias=alias,
        )


class ResolutionFailed(DeveloperError):
    """The Salesforce CLI ran and reported a non-zero status."""

    def __init__(
        self,
        alias: Optional[str],
        detail_message: Optional[str],
        stack: Optional[str] = None,
        *,
        status: Optional[int] = None,
        name: Optional[str] = None,
    ):
        self.status = status
        self.name = name
        super().__init__(
            f"Unable to find connection:{_alias_label(alias)}",
            detail_message,
            stack,
            alias=alias,
        )


class IoFailure(DeveloperError):
    """A file helper failed after its existence check passed."""

    def __init__(self, message: str, path: str, err: BaseException):
        self.path = path
        super().__init__(message, str(err), _format_stack(err))
