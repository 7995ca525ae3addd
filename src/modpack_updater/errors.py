"""Exception hierarchy for modpack-updater."""

from __future__ import annotations

from typing import Optional


class UpdaterError(Exception):
    """
    Base exception for every failure the updater reports.

    ``step`` names the pipeline stage that failed and is prefixed to the
    message so the user can tell where things went wrong.
    """

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.step = step

    def __str__(self) -> str:
        if self.step:
            return f"{self.step}: {self.message}"
        return self.message


class ConfigError(UpdaterError):
    """An environment or CLI setting has an invalid value."""


class NetworkError(UpdaterError):
    """A request or transfer failed."""


class NotFoundError(UpdaterError):
    """The repository has no published release."""


class AuthError(UpdaterError):
    """GitHub rejected the request as unauthorized or rate limited."""


class AssetNotFoundError(UpdaterError):
    """The latest release has no asset for the chosen launcher."""

    def __init__(self, asset_name: str, tag: str):
        super().__init__(
            f"Release {tag} has no asset named '{asset_name}'",
            step="Selecting asset",
        )
        self.asset_name = asset_name
        self.tag = tag


class IntegrityError(UpdaterError):
    """Downloaded content does not match its declared checksum or size."""


class EnvironmentVariableError(UpdaterError):
    """A variable needed to locate the launcher directory is unset."""

    def __init__(self, variable: str):
        super().__init__(
            f"Environment variable {variable} is not set",
            step="Resolving install directory",
        )
        self.variable = variable


class InvalidChoiceError(UpdaterError):
    """The launcher selection is not one of the known launchers."""

    def __init__(self, choice: str):
        super().__init__(f"Invalid choice: {choice!r}", step="Resolving install directory")
        self.choice = choice


class FilesystemError(UpdaterError):
    """Creating, deleting, writing or extracting files failed."""
