from .base import BaseDataSource
from .registry import SourceRegistry, get_registry

__all__ = ['BaseDataSource', 'SourceRegistry', 'get_registry']
