"""Line-oriented text notation for diagrams."""

from erdiagram.dsl.errors import DSLSyntaxError
from erdiagram.dsl.lexer import classify, is_dsl_format, is_json_format
from erdiagram.dsl.layout import compute_levels, layout_diagram
from erdiagram.dsl.parser import parse_dsl
from erdiagram.dsl.serializer import serialize_dsl

__all__ = [
    "DSLSyntaxError",
    "classify",
    "is_dsl_format",
    "is_json_format",
    "compute_levels",
    "layout_diagram",
    "parse_dsl",
    "serialize_dsl",
]
