"""Batch asset pipeline: convert a source image tree and verify the output."""
from .pipeline import AssetPipeline
from .verification.verifier import Verifier

__version__ = "0.1.0"

__all__ = ["AssetPipeline", "Verifier", "__version__"]
