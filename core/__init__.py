from .config import Config
from .container import Container, RequestsHttpClient
from .protocols import HttpClient

__all__ = ['Config', 'Container', 'RequestsHttpClient', 'HttpClient']
