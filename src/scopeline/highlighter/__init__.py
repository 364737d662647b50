"""Line highlighter and the span resolution it is built on."""

from .line_highlighter import LineHighlighter
from .resolution import ScopeTracking, resolve_spans

__all__ = ["LineHighlighter", "ScopeTracking", "resolve_spans"]
