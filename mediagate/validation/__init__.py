"""mediagate/validation/__init__.py - file checks shared by the gateway and the avatar flow."""

from mediagate.validation.file_validator import validate_file

__all__ = ["validate_file"]
