from .nelder_mead import NelderMead, SearchResult, SearchState
from .errors import (
    SearchError, InvalidDimension, InvalidArgument, InvalidTolerance, InvalidScale
)
from .projection import clamp_to_box, make_box_projector

__all__ = [
    "NelderMead",
    "SearchResult",
    "SearchState",
    "SearchError",
    "InvalidDimension",
    "InvalidArgument",
    "InvalidTolerance",
    "InvalidScale",
    "clamp_to_box",
    "make_box_projector",
]
