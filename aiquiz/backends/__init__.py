from .base import BackendError, ModelBackend

__all__ = ["BackendError", "ModelBackend"]
