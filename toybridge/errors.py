class ToyBridgeError(Exception):
    """Base class for every error raised while building a project."""

class RemoteFetchError(ToyBridgeError):
    """The source document could not be retrieved or decoded."""

class UnsupportedInputError(ToyBridgeError, ValueError):
    """A pass samples an input the target project cannot express."""

class MalformedSourceError(ToyBridgeError, ValueError):
    """The source document is structurally unusable (no passes, duplicate names, ...)."""

class FilesystemError(ToyBridgeError, OSError):
    """A directory or file operation failed while writing the project."""

class ConfigError(ToyBridgeError, ValueError):
    """A config file could not be read or parsed."""
