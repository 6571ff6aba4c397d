from .svg_optimizer import SVGOptimizer

__all__ = ["SVGOptimizer"]
