# harvest_service/adapters/mixins/__init__.py
from .headers_mixin import BrowserHeadersMixin

__all__ = ["BrowserHeadersMixin"]
