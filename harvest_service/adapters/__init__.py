# harvest_service/adapters/__init__.py
from .base_v3 import BaseAdapterV3
from .netkeiba_adapter import NetkeibaAdapter

__all__ = ["BaseAdapterV3", "NetkeibaAdapter"]
