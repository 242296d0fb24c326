"""
nmsearch: Nelder-Mead单纯形搜索，支持可选的可行域投影
"""

from nmsearch.config.search_config import SearchConfig
from nmsearch.optimization.nelder_mead import NelderMead, SearchResult
from nmsearch.optimization.errors import (
    SearchError, InvalidDimension, InvalidArgument, InvalidTolerance, InvalidScale
)
from nmsearch.optimization.projection import clamp_to_box, make_box_projector
from nmsearch.utils.search_trace import SearchTracer

__version__ = "1.0.0"

__all__ = [
    "NelderMead",
    "SearchResult",
    "SearchConfig",
    "SearchTracer",
    "SearchError",
    "InvalidDimension",
    "InvalidArgument",
    "InvalidTolerance",
    "InvalidScale",
    "clamp_to_box",
    "make_box_projector",
]
