"""Accumulates classified directives into Table and Column values."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from erdiagram.core.generators import Generators, resolve_generators
from erdiagram.dsl.errors import DSLSyntaxError
from erdiagram.dsl.lexer import (
    ColumnDirective,
    Directive,
    MemoDirective,
    RefDirective,
    TableDirective,
)
from erdiagram.models import Column, ColumnConstraints, Memo, Position, Table
from erdiagram.models.table import REF_COLUMN_TYPE

logger = logging.getLogger(__name__)

# Parsed memos are stacked above the tables
MEMO_WIDTH = 300
MEMO_HEIGHT = 150
MEMO_TOP = -200
MEMO_SPACING = 250


@dataclass
class PendingReference:
    """A REF directive waiting for the second (resolution) pass."""

    table_id: str
    column_id: str
    directive: RefDirective


@dataclass
class _TableDraft:
    id: str
    directive: TableDirective
    columns: List[Column] = field(default_factory=list)


@dataclass
class BuildResult:
    tables: List[Table]
    memos: List[Memo]
    references: List[PendingReference]


class EntityBuilder:
    """Builds tables, columns and memos from directives in a single forward pass.

    COL and REF directives attach to the most recently declared table.
    REF directives produce a Ref-typed column immediately and are queued
    as :class:`PendingReference` for the resolver, so the referenced table
    may be declared later in the document.
    """

    def __init__(self, generators: Optional[Generators] = None):
        self.generators = resolve_generators(generators)
        self._drafts: List[_TableDraft] = []
        self._by_name: Dict[str, _TableDraft] = {}
        self._current: Optional[_TableDraft] = None
        self._memos: List[MemoDirective] = []
        self._references: List[PendingReference] = []

    def apply(self, directive: Directive) -> None:
        """Apply one directive."""
        if isinstance(directive, TableDirective):
            self._add_table(directive)
        elif isinstance(directive, ColumnDirective):
            self._add_column(directive)
        elif isinstance(directive, RefDirective):
            self._add_reference(directive)
        elif isinstance(directive, MemoDirective):
            self._memos.append(directive)

    def _add_table(self, directive: TableDirective) -> None:
        if directive.name in self._by_name:
            raise DSLSyntaxError(
                f"Table '{directive.name}' is already declared",
                directive.line,
                directive.line_number,
            )
        draft = _TableDraft(id=self.generators.new_id(), directive=directive)
        self._drafts.append(draft)
        self._by_name[directive.name] = draft
        self._current = draft

    def _owning_table(self, directive) -> _TableDraft:
        """Return the current table, checking the directive is scoped to it."""
        kind = "COL" if isinstance(directive, ColumnDirective) else "REF"
        if self._current is None:
            raise DSLSyntaxError(
                f"{kind} appears before any TABLE declaration",
                directive.line,
                directive.line_number,
            )
        if directive.table != self._current.directive.name:
            if directive.table in self._by_name:
                reason = (
                    f"{kind} for table '{directive.table}' appears inside the block "
                    f"of table '{self._current.directive.name}'"
                )
            else:
                reason = f"{kind} refers to undeclared table '{directive.table}'"
            raise DSLSyntaxError(reason, directive.line, directive.line_number)
        if any(c.name == directive.name for c in self._current.columns):
            raise DSLSyntaxError(
                f"Column '{directive.name}' is already declared on table '{directive.table}'",
                directive.line,
                directive.line_number,
            )
        return self._current

    def _new_column(self, draft: _TableDraft, directive, **fields) -> Column:
        table = draft.directive
        return Column(
            id=self.generators.new_id(),
            name=directive.name,
            is_key=table.pk == directive.name,
            is_label=table.label == directive.name,
            description=directive.description,
            order=len(draft.columns),
            **fields,
        )

    def _add_column(self, directive: ColumnDirective) -> None:
        draft = self._owning_table(directive)
        column = self._new_column(
            draft,
            directive,
            type=directive.type,
            is_virtual=directive.virtual,
            constraints=ColumnConstraints(
                required=directive.required, unique=directive.unique
            ),
        )
        draft.columns.append(column)

    def _add_reference(self, directive: RefDirective) -> None:
        draft = self._owning_table(directive)
        column = self._new_column(
            draft,
            directive,
            type=REF_COLUMN_TYPE,
            constraints=ColumnConstraints(required=directive.required, unique=False),
        )
        draft.columns.append(column)
        self._references.append(
            PendingReference(table_id=draft.id, column_id=column.id, directive=directive)
        )

    def build(self) -> BuildResult:
        """Assemble fresh Table and Memo values from everything applied so far."""
        now = self.generators.now()
        tables = []
        for draft in self._drafts:
            header = draft.directive
            declared = {c.name for c in draft.columns}
            for option, name in (("PK", header.pk), ("LABEL", header.label)):
                if name and name not in declared:
                    logger.debug(
                        f"{option}={name} on table '{header.name}' names no declared column"
                    )
            tables.append(
                Table(
                    id=draft.id,
                    name=header.name,
                    description=header.description,
                    columns=list(draft.columns),
                    color=header.color,
                    created_at=now,
                    updated_at=now,
                )
            )

        memos = [
            Memo(
                id=self.generators.new_id(),
                text=directive.text,
                position=Position(x=0, y=MEMO_TOP - index * MEMO_SPACING),
                width=MEMO_WIDTH,
                height=MEMO_HEIGHT,
                created_at=now,
                updated_at=now,
            )
            for index, directive in enumerate(self._memos)
        ]
        return BuildResult(tables=tables, memos=memos, references=list(self._references))
