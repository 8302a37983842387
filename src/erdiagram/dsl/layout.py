"""Hierarchical auto-layout for diagrams.

A table's level is the length of the longest chain of parents above it.
Levels become columns on the canvas (``x = level * horizontal_spacing``)
and tables sharing a level are stacked in declaration order
(``y = slot * vertical_spacing``).
"""

import logging
from typing import Dict, List, Optional, Set

from erdiagram.config import LayoutConfig
from erdiagram.models import ERDiagram, Position, Relation, Table

logger = logging.getLogger(__name__)


def compute_levels(tables: List[Table], relations: List[Relation]) -> Dict[str, int]:
    """Assign every table its hierarchy level.

    Levels are resolved iteratively: each round levels every table whose
    parents are all levelled already. Tables left over once a round makes
    no progress sit on (or below) a reference cycle and are forced to 0.
    Self-references and relations to unknown tables are ignored.

    Args:
        tables: Tables in declaration order
        relations: Relations; source is the parent, target the child

    Returns:
        Mapping of table id to level
    """
    order = [table.id for table in tables]
    known = set(order)
    parents: Dict[str, Set[str]] = {table_id: set() for table_id in order}
    for relation in relations:
        child, parent = relation.target_table_id, relation.source_table_id
        if child in known and parent in known and child != parent:
            parents[child].add(parent)

    levels: Dict[str, int] = {}
    unresolved = list(dict.fromkeys(order))
    while unresolved:
        remaining = []
        for table_id in unresolved:
            if all(parent in levels for parent in parents[table_id]):
                levels[table_id] = 1 + max(
                    (levels[parent] for parent in parents[table_id]), default=-1
                )
            else:
                remaining.append(table_id)
        if len(remaining) == len(unresolved):
            break
        unresolved = remaining

    if unresolved:
        logger.debug(f"Forcing {len(unresolved)} cyclic table(s) to level 0")
        for table_id in unresolved:
            levels[table_id] = 0
    return levels


def layout_diagram(diagram: ERDiagram, config: Optional[LayoutConfig] = None) -> ERDiagram:
    """Return a copy of ``diagram`` with every table positioned by level.

    Memos and relations are copied unchanged; the input is not modified.
    """
    config = config or LayoutConfig()
    levels = compute_levels(diagram.tables, diagram.relations)

    slots: Dict[int, int] = {}
    tables = []
    for table in diagram.tables:
        level = levels[table.id]
        slot = slots.get(level, 0)
        slots[level] = slot + 1
        position = Position(
            x=level * config.horizontal_spacing, y=slot * config.vertical_spacing
        )
        tables.append(table.model_copy(deep=True, update={"position": position}))

    return ERDiagram(
        tables=tables,
        relations=[relation.model_copy(deep=True) for relation in diagram.relations],
        memos=[memo.model_copy(deep=True) for memo in diagram.memos],
    )
