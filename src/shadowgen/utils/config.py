"""
Configuration constants for shadowgen
"""

import os
import tempfile

# Naming convention: Foo -> ShadowFoo, `T: Shadow`, `T::Shadowed`
SHADOW_TYPE_PREFIX = "Shadow"
SHADOW_CAPABILITY_TRAIT = "Shadow"
SHADOW_PROJECTION_MEMBER = "Shadowed"

# Marker attribute names
UNIT_MARKER = "shadow_impl"
METHOD_MARKER = "shadow_method"

# Directive keywords inside marker arguments
TRANSFORM_BOUNDS_KEYWORD = "transform_bounds"
ADD_BOUNDS_KEYWORD = "add_bounds"
ADD_BOUNDS_ALIAS = "bounds"  # accepted for markers written against older releases

# Parser configuration constants (cache under temp dir to avoid cluttering project root)
DEFAULT_PARSER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "shadowgen_parser.cache")

# Pseudo file names used when the caller passes text rather than a path
DEFAULT_SOURCE_FILE = "<input>"
DEFAULT_ARGS_FILE = "<args>"

# Emission layout
INDENT = "    "

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Diagnostics colour override (NO_COLOR always wins)
COLOR_ENV_VAR = "SHADOWGEN_COLOR"
