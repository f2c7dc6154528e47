"""
Parse-tree transformers
=======================

Turn Lark parse trees into shadowgen syntax nodes.
"""

from .base import ShadowTransformer, Spanned, Delimited, ReturnType

__all__ = [
    'ShadowTransformer',
    'Spanned',
    'Delimited',
    'ReturnType',
]
