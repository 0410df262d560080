"""Menu customization helpers."""

from .options import MissingOption, OptionSelection, is_required

__all__ = ["MissingOption", "OptionSelection", "is_required"]
