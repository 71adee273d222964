"""Exception definitions for sabaccui-cli"""

from typing import Dict, List, Optional

from ..constants import ErrorCode, MSG_MISSING_SPACE, MSG_NOT_FOUND


class SabaccUIError(Exception):
    """Base exception for sabaccui-cli"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class AuthRequiredError(SabaccUIError):
    """Missing or rejected credentials"""

    def __init__(self, message: str = "Authentication failed. Please check your Login."):
        super().__init__(message, ErrorCode.AUTH_REQUIRED)


class AccessDeniedError(SabaccUIError):
    """License or permission failure"""

    def __init__(self, message: str = "Access denied. Please check your license."):
        super().__init__(message, ErrorCode.ACCESS_DENIED)


class NotFoundError(SabaccUIError):
    """Catalog resource not found"""

    def __init__(self, kind: Optional[str] = None, key: Optional[str] = None):
        if kind and key:
            message = MSG_NOT_FOUND.format(kind=kind, key=key)
        else:
            message = "Resource not found."
        super().__init__(message, ErrorCode.NOT_FOUND)
        self.kind = kind
        self.key = key


class ValidationFailedError(SabaccUIError):
    """Field level validation errors reported by the catalog API"""

    def __init__(self, field_errors: Dict[str, List[str]], message: str = None):
        self.field_errors = field_errors or {}
        if message is None:
            lines = [
                f"{field}: {error}"
                for field, errors in self.field_errors.items()
                for error in errors
            ]
            message = "Validation failed:\n" + "\n".join(lines) if lines else "Validation failed."
        super().__init__(message, ErrorCode.VALIDATION_FAILED)


class ApiError(SabaccUIError):
    """Generic remote API error"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, ErrorCode.API_ERROR)
        self.status = status


class ManifestError(SabaccUIError):
    """Artifact manifest problem"""
    pass


class ManifestMissingError(ManifestError):
    """Archive does not contain a manifest"""

    def __init__(self, path: str):
        super().__init__(f"Manifest not found in artifact: {path}", ErrorCode.MANIFEST_MISSING)
        self.path = path


class ManifestInvalidError(ManifestError):
    """Manifest could not be parsed"""

    def __init__(self, message: str):
        super().__init__(f"Invalid manifest: {message}", ErrorCode.MANIFEST_INVALID)


class MissingSpaceError(SabaccUIError):
    """No target CMS space available"""

    def __init__(self, message: str = MSG_MISSING_SPACE):
        super().__init__(message, ErrorCode.MISSING_SPACE)


class SourceCloneError(SabaccUIError):
    """External source repository could not be cloned"""

    def __init__(self, source: str, reason: str):
        super().__init__(
            f"Failed to clone source repository {source}: {reason}",
            ErrorCode.SOURCE_CLONE_FAILED
        )
        self.source = source


class PushError(SabaccUIError):
    """Component definition could not be pushed to the CMS"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.PUSH_FAILED)


class DependencyInstallError(SabaccUIError):
    """Package manager invocation failed"""

    def __init__(self, command: str, reason: str):
        super().__init__(
            f"Package installation failed ({command}): {reason}",
            ErrorCode.DEPENDENCY_INSTALL_FAILED
        )
        self.command = command


class MigrationError(SabaccUIError):
    """Migration script failed"""

    def __init__(self, migration: str, reason: str):
        super().__init__(f"Migration {migration} failed: {reason}", ErrorCode.MIGRATION_FAILED)
        self.migration = migration


class ConfigError(SabaccUIError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_ERROR)


class ValidationError(SabaccUIError):
    """Invalid local input"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INVALID_INPUT)


class TemplateStepError(SabaccUIError):
    """A sequential template installation step failed"""

    def __init__(self, step: str, cause: Exception):
        super().__init__(f"Template installation failed at step '{step}': {cause}",
                         ErrorCode.TEMPLATE_STEP_FAILED)
        self.step = step
        self.cause = cause
