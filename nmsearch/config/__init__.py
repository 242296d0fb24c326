from .search_config import SearchConfig

__all__ = ["SearchConfig"]
