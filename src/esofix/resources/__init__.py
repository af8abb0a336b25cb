"""Resource models for credentials, stores and store references."""

from .models import *  # noqa: F401,F403
from .models import __all__ as _models_all

__all__ = list(_models_all)
