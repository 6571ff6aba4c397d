from .base import Converter
from .embed import EmbedConverter
from .placeholder import PlaceholderConverter
from .registry import available_converters, get_converter
from .webp import WebPConverter

__all__ = [
    "Converter",
    "EmbedConverter",
    "PlaceholderConverter",
    "WebPConverter",
    "available_converters",
    "get_converter",
]
