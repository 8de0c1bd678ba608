"""Two-column terminal file browser with search, clipboard and archive actions."""

__version__ = "0.5.0"
__all__ = ["actions", "browser", "entries", "menu", "search", "ui"]