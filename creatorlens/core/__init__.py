"""Core models and exceptions for CreatorLens."""

from .exceptions import *  # noqa: F401,F403
from .exceptions import __all__ as _exception_exports
from .models import *  # noqa: F401,F403
from .models import __all__ as _model_exports

__all__ = list(_model_exports) + list(_exception_exports)
