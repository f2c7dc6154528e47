"""
Frontend: grammar, parser and printer for the Rust syntax of impl blocks.
"""

from .parser import Parser, mask_outside
from .printer import (
    print_type, print_path, print_bound, print_bounds, print_predicate,
    print_generic_param, print_generic_params, print_where_clause,
)
