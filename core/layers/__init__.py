"""
Precedence-ordered configuration layers.
"""

from .sequence import LayerSequence, glob_match, matches_any

__all__ = ["LayerSequence", "glob_match", "matches_any"]
