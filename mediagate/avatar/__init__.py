"""mediagate/avatar/__init__.py - profile picture upload flow."""

from mediagate.avatar.flow import AvatarState, AvatarUploadFlow

__all__ = ["AvatarState", "AvatarUploadFlow"]
