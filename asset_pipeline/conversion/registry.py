"""Lookup of converter variants by name."""
from typing import Dict, List, Type

from .base import Converter
from .embed import EmbedConverter
from .placeholder import PlaceholderConverter
from .webp import WebPConverter

CONVERTERS: Dict[str, Type[Converter]] = {
    cls.name: cls for cls in (PlaceholderConverter, EmbedConverter, WebPConverter)
}


def available_converters() -> List[str]:
    return sorted(CONVERTERS)


def get_converter(name: str, config: dict) -> Converter:
    """Instantiate the converter registered under ``name``."""
    try:
        cls = CONVERTERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown target '{name}'. Choose one of: {', '.join(available_converters())}"
        ) from None
    return cls(config)
