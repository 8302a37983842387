"""Second pass: turn pending REF directives into Ref columns and relations."""

from typing import Dict, List, Optional, Tuple

from erdiagram.core.generators import Generators, resolve_generators
from erdiagram.dsl.builder import PendingReference
from erdiagram.dsl.errors import DSLSyntaxError
from erdiagram.models import Relation, Table


def resolve_references(
    tables: List[Table],
    references: List[PendingReference],
    generators: Optional[Generators] = None,
) -> Tuple[List[Table], List[Relation]]:
    """Resolve every pending reference against the complete table list.

    The referenced table becomes the relation source (parent, "1" side)
    and the declaring table the target (child, "N" side).

    Args:
        tables: Tables produced by the builder
        references: REF directives collected by the builder, in source order
        generators: Id factory used for the new relations

    Returns:
        Tuple of (tables with Ref constraints filled in, relations)

    Raises:
        DSLSyntaxError: If a referenced table or column does not exist
    """
    generators = resolve_generators(generators)
    by_name = {table.name: table for table in tables}
    ref_targets: Dict[Tuple[str, str], Tuple[str, str]] = {}
    relations: List[Relation] = []

    for pending in references:
        directive = pending.directive
        parent = by_name.get(directive.ref_table)
        if parent is None:
            raise DSLSyntaxError(
                f"REF target table '{directive.ref_table}' is not declared",
                directive.line,
                directive.line_number,
            )
        parent_column = parent.find_column(directive.ref_column)
        if parent_column is None:
            raise DSLSyntaxError(
                f"REF target column '{directive.ref_table}.{directive.ref_column}' "
                f"is not declared",
                directive.line,
                directive.line_number,
            )

        ref_targets[(pending.table_id, pending.column_id)] = (parent.id, parent_column.id)
        relations.append(
            Relation(
                id=generators.new_id(),
                source_table_id=parent.id,
                source_column_id=parent_column.id,
                target_table_id=pending.table_id,
                target_column_id=pending.column_id,
                type="one-to-many",
            )
        )

    resolved = []
    for table in tables:
        columns = []
        for column in table.columns:
            target = ref_targets.get((table.id, column.id))
            if target is not None:
                constraints = column.constraints.model_copy(
                    update={"ref_table_id": target[0], "ref_column_id": target[1]}
                )
                column = column.model_copy(update={"constraints": constraints})
            columns.append(column)
        resolved.append(table.model_copy(update={"columns": columns}))
    return resolved, relations
