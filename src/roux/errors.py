"""Error hierarchy for the roux resolution engine."""

from __future__ import annotations

from typing import Any

__all__ = [
    "RouxError",
    "ConfigNotFoundError",
    "ConfigError",
    "PantryDoesNotExistError",
    "PantryNotADirectoryError",
    "PantrySearchError",
    "IngredientDoesNotExistError",
    "IngredientHasNoSuchEntrypointError",
    "ErrorCodes",
]


class ErrorCodes:
    """All roux error codes as constants.

    The code is the kind tag of an error. Match on it instead of on the
    exception class when a list of failures has to be classified.

    Example:
        if error.code == ErrorCodes.PANTRY_NOT_FOUND:
            handle_not_found()
    """

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    PANTRY_NOT_FOUND = "PANTRY_NOT_FOUND"
    PANTRY_NOT_A_DIRECTORY = "PANTRY_NOT_A_DIRECTORY"
    PANTRY_SEARCH_FAILED = "PANTRY_SEARCH_FAILED"
    INGREDIENT_NOT_FOUND = "INGREDIENT_NOT_FOUND"
    ENTRY_POINT_NOT_FOUND = "ENTRY_POINT_NOT_FOUND"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")


class RouxError(Exception):
    """Base error for all roux errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigNotFoundError(RouxError):
    """Raised when a configuration file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code=ErrorCodes.CONFIG_NOT_FOUND,
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(RouxError):
    """Raised when a configuration file is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code=ErrorCodes.CONFIG_INVALID, message=message, **kwargs)


class PantryDoesNotExistError(RouxError):
    """Raised when nothing exists at a pantry's path."""

    def __init__(self, pantry_path: str, **kwargs: Any) -> None:
        super().__init__(
            code=ErrorCodes.PANTRY_NOT_FOUND,
            message=f"Pantry {pantry_path} does not exist.",
            details={"pantry_path": pantry_path},
            **kwargs,
        )

    @property
    def pantry_path(self) -> str:
        """The absolute path that was checked."""
        return self.details["pantry_path"]


class PantryNotADirectoryError(RouxError):
    """Raised when a pantry's path exists but is not a directory."""

    def __init__(self, pantry_path: str, **kwargs: Any) -> None:
        super().__init__(
            code=ErrorCodes.PANTRY_NOT_A_DIRECTORY,
            message=f'Invalid pantry "{pantry_path}", not a directory',
            details={"pantry_path": pantry_path},
            **kwargs,
        )

    @property
    def pantry_path(self) -> str:
        """The absolute path that was checked."""
        return self.details["pantry_path"]


class PantrySearchError(RouxError):
    """Raised when every search path failed to produce a pantry for mixed reasons."""

    def __init__(self, pantry: str, errors: list[BaseException], **kwargs: Any) -> None:
        if errors:
            reasons = "; ".join(str(e) for e in errors)
            message = f'Pantry "{pantry}" could not be initialized from any search path: {reasons}'
        else:
            message = f'Pantry "{pantry}" could not be found: no search paths configured'
        super().__init__(
            code=ErrorCodes.PANTRY_SEARCH_FAILED,
            message=message,
            details={"pantry": pantry, "errors": list(errors)},
            **kwargs,
        )

    @property
    def pantry(self) -> str:
        """The pantry name that was searched for."""
        return self.details["pantry"]

    @property
    def errors(self) -> list[BaseException]:
        """One failure per search path, in search-path order."""
        return self.details["errors"]


class IngredientDoesNotExistError(RouxError):
    """Raised when a pantry has no ingredient with the requested name."""

    def __init__(self, pantry: str, ingredient: str, **kwargs: Any) -> None:
        super().__init__(
            code=ErrorCodes.INGREDIENT_NOT_FOUND,
            message=f'Pantry "{pantry}" has no ingredient "{ingredient}"',
            details={"pantry": pantry, "ingredient": ingredient},
            **kwargs,
        )

    @property
    def pantry(self) -> str:
        return self.details["pantry"]

    @property
    def ingredient(self) -> str:
        return self.details["ingredient"]


class IngredientHasNoSuchEntrypointError(RouxError):
    """Raised when an ingredient has no file matching the requested entry point."""

    def __init__(self, pantry: str, ingredient: str, entry_point: str, **kwargs: Any) -> None:
        super().__init__(
            code=ErrorCodes.ENTRY_POINT_NOT_FOUND,
            message=f'Ingredient "{pantry}/{ingredient}" has no "{entry_point}" entry point',
            details={"pantry": pantry, "ingredient": ingredient, "entry_point": entry_point},
            **kwargs,
        )

    @property
    def pantry(self) -> str:
        return self.details["pantry"]

    @property
    def ingredient(self) -> str:
        return self.details["ingredient"]

    @property
    def entry_point(self) -> str:
        return self.details["entry_point"]
