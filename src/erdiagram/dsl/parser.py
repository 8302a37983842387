"""DSL text to diagram."""

import logging
from typing import Optional

from erdiagram.config import LayoutConfig
from erdiagram.core.generators import Generators, resolve_generators
from erdiagram.dsl.builder import EntityBuilder
from erdiagram.dsl.layout import layout_diagram
from erdiagram.dsl.lexer import classify
from erdiagram.dsl.resolver import resolve_references
from erdiagram.models import ERDiagram

logger = logging.getLogger(__name__)


def parse_dsl(
    text: str,
    generators: Optional[Generators] = None,
    layout: Optional[LayoutConfig] = None,
) -> ERDiagram:
    """Parse DSL text into a laid-out diagram.

    Args:
        text: DSL document
        generators: Id factory and clock for the new entities
        layout: Spacing for the hierarchical layout

    Returns:
        A new ERDiagram with generated ids and computed table positions

    Raises:
        DSLSyntaxError: On the first malformed or unresolvable line
    """
    generators = resolve_generators(generators)
    builder = EntityBuilder(generators)
    for directive in classify(text):
        builder.apply(directive)

    result = builder.build()
    tables, relations = resolve_references(result.tables, result.references, generators)
    diagram = ERDiagram(tables=tables, relations=relations, memos=result.memos)

    logger.debug(
        f"Parsed {len(tables)} tables, {len(relations)} relations, "
        f"{len(result.memos)} memos"
    )
    return layout_diagram(diagram, layout)
