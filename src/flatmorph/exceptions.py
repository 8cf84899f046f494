# Custom exceptions for Flatmorph

class FlatmorphError(Exception):
    """Base exception for all application-specific errors."""
    pass

class StructuralError(FlatmorphError):
    """Raised when a source file does not have the shape an editor requires."""
    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        self.message = message
        super().__init__(message)

class PreconditionError(FlatmorphError):
    """Raised when an edit targets a config entry that is missing or malformed."""
    pass

class ConfigError(FlatmorphError):
    """Raised for configuration-related problems."""
    pass


class WorkspaceError(FlatmorphError):
    """Raised when edited content cannot be persisted."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Failed to write {path}: {message}")
