"""Diagram to DSL text."""

from typing import Dict, List, Optional, Tuple

from erdiagram.core.generators import Generators, resolve_generators
from erdiagram.dsl.lexer import encode_quoted
from erdiagram.models import Column, ERDiagram, Relation, Table

HEADER_TITLE = "# erdiagram DSL"


def _table_line(table: Table) -> str:
    parts = [f"TABLE {table.name}"]
    if table.description:
        parts.append(encode_quoted(table.description))
    key = next((c for c in table.columns if c.is_key), None)
    label = next((c for c in table.columns if c.is_label), None)
    if key:
        parts.append(f"PK={key.name}")
    if label:
        parts.append(f"LABEL={label.name}")
    if table.color:
        parts.append(f"COLOR={table.color}")
    return " ".join(parts)


def _column_line(table: Table, column: Column) -> str:
    parts = [f"COL {table.name}.{column.name} {column.type}"]
    if column.constraints.required:
        parts.append("req")
    if column.constraints.unique:
        parts.append("uniq")
    if column.is_virtual:
        parts.append("virtual")
    if column.description:
        parts.append(encode_quoted(column.description))
    return " ".join(parts)


def _ref_line(
    table: Table, column: Column, relation: Relation, tables_by_id: Dict[str, Table]
) -> Optional[str]:
    """Build a REF line from the relation, or None if its source does not resolve."""
    parent = tables_by_id.get(relation.source_table_id)
    parent_column = parent.get_column(relation.source_column_id) if parent else None
    if parent_column is None:
        return None

    parts = [f"REF {table.name}.{column.name} -> {parent.name}.{parent_column.name}"]
    if column.constraints.required:
        parts.append("req")
    if column.description:
        parts.append(encode_quoted(column.description))
    return " ".join(parts)


def serialize_dsl(
    diagram: ERDiagram,
    include_header: bool = True,
    generators: Optional[Generators] = None,
) -> str:
    """Emit canonical DSL text for a diagram.

    Positions, ids and timestamps are not part of the DSL. REF lines are
    derived from the relation list: a column that is the child endpoint of
    a relation is written as REF, every other column (including a Ref
    column with no matching relation) as COL.

    Args:
        diagram: Diagram to serialize
        include_header: Prefix the output with a comment header
        generators: Clock used for the header timestamp

    Returns:
        DSL text ending with a newline
    """
    lines: List[str] = []
    if include_header:
        now = resolve_generators(generators).now()
        lines.extend([HEADER_TITLE, f"# Generated at: {now}", ""])

    tables_by_id: Dict[str, Table] = {}
    for table in diagram.tables:
        tables_by_id.setdefault(table.id, table)

    incoming: Dict[Tuple[str, str], Relation] = {}
    for relation in diagram.relations:
        incoming.setdefault((relation.target_table_id, relation.target_column_id), relation)

    for table in diagram.tables:
        lines.append(_table_line(table))
        for column in sorted(table.columns, key=lambda c: c.order):
            relation = incoming.get((table.id, column.id))
            line = _ref_line(table, column, relation, tables_by_id) if relation else None
            lines.append(line or _column_line(table, column))
        lines.append("")

    if diagram.memos:
        for memo in diagram.memos:
            lines.append(f"MEMO {encode_quoted(memo.text)}")
        lines.append("")

    return "\n".join(lines)
