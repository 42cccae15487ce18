"""
Application Context

The provider that owns a session's store and effects, and the hook facade
that exposes narrow views of it.
"""

from .hooks import (
    use_app_context,
    use_auth,
    use_language,
    use_notifications,
    use_preferences,
    use_theme,
)
from .provider import AppProvider, DocumentSurface

__all__ = [
    "AppProvider",
    "DocumentSurface",
    "use_app_context",
    "use_auth",
    "use_language",
    "use_notifications",
    "use_preferences",
    "use_theme",
]
