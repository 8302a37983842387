"""Structural normalizer: repairs arbitrary input into a well-typed diagram.

Every field of every entity gets a safe value: missing or invalid ids are
regenerated, names get positional placeholders, enumerations fall back to
defaults, numeric rendering options are clamped into range and column
order is re-numbered densely. Normalization never raises and is
idempotent.
"""

import logging
import math
import sys
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Set

from erdiagram.core.generators import Generators, resolve_generators
from erdiagram.models import (
    Column,
    ColumnConstraints,
    ERBaseModel,
    ERDiagram,
    Memo,
    Position,
    Relation,
    Table,
)
from erdiagram.models.table import EXPORT_TARGETS, REF_COLUMN_TYPE
from erdiagram.models.relation import (
    DEFAULT_ICON_NAME,
    DEFAULT_ICON_SIZE,
    DEFAULT_ICON_SPEED,
    DEFAULT_RELATION_TYPE,
    EDGE_LINE_STYLES,
    EDGE_VISIBILITIES,
    MAX_ICON_SIZE,
    MAX_ICON_SPEED,
    MIN_ICON_SIZE,
    MIN_ICON_SPEED,
    RELATION_TYPES,
)
from erdiagram.utils.type_utils import coerce_type

logger = logging.getLogger(__name__)

DIAGRAM_FIELDS = ("tables", "relations", "memos")

TABLE_ORIGIN = 100
TABLE_CASCADE = 30
MEMO_ORIGIN = 200
MEMO_CASCADE = 20


def _as_mapping(value: Any) -> Dict[str, Any]:
    if isinstance(value, ERBaseModel):
        value = value.to_dict()
    return dict(value) if isinstance(value, Mapping) else {}


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, list) else []


def _is_number(value: Any) -> bool:
    """Finite int or float, excluding bool; ints must also fit in a float."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return abs(value) <= sys.float_info.max
    return isinstance(value, float) and math.isfinite(value)


def _number(value: Any, default: Optional[float] = None) -> Optional[float]:
    return value if _is_number(value) else default


def _string(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _non_empty(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _flag(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def looks_like_diagram(value: Any) -> bool:
    """Check whether ``value`` is shaped like a bare (un-enveloped) diagram.

    At least one of tables/relations/memos must be present and every one
    that is present must be a list.
    """
    if not isinstance(value, Mapping):
        return False
    present = [key for key in DIAGRAM_FIELDS if key in value]
    return bool(present) and all(isinstance(value[key], list) for key in present)


class _IdPool:
    """Hands out ids that are unique within one namespace."""

    def __init__(self, generators: Generators, namespace: str):
        self.generators = generators
        self.namespace = namespace
        self.seen: Set[str] = set()

    def claim(self, candidate: Any, index: int) -> str:
        value = _non_empty(candidate)
        if value is None or value in self.seen:
            value = self.generators.new_id()
            while value in self.seen:
                value = self.generators.new_id()
            logger.debug(f"Generated id for {self.namespace} at index {index}")
        self.seen.add(value)
        return value


def normalize_constraints(raw: Any, column_type: str) -> ColumnConstraints:
    """Keep each known constraint only when it has the right type."""
    obj = _as_mapping(raw)

    default_value = obj.get("defaultValue")
    if isinstance(default_value, (bool, int)) or _is_number(default_value):
        default_value = str(default_value)

    min_length = _number(obj.get("minLength"))
    max_length = _number(obj.get("maxLength"))
    enum_values = obj.get("enumValues")
    is_ref = column_type == REF_COLUMN_TYPE

    return ColumnConstraints(
        required=_flag(obj.get("required")),
        unique=_flag(obj.get("unique")),
        default_value=_string(default_value),
        min_value=_number(obj.get("minValue")),
        max_value=_number(obj.get("maxValue")),
        min_length=int(min_length) if min_length is not None else None,
        max_length=int(max_length) if max_length is not None else None,
        pattern=_string(obj.get("pattern")),
        enum_values=(
            [v for v in enum_values if isinstance(v, str)]
            if isinstance(enum_values, list)
            else None
        ),
        ref_table_id=_non_empty(obj.get("refTableId")) if is_ref else None,
        ref_column_id=_non_empty(obj.get("refColumnId")) if is_ref else None,
    )


def normalize_column(raw: Any, index: int, ids: _IdPool) -> Column:
    """Normalize one column. ``order`` is provisional until the table re-numbers."""
    obj = _as_mapping(raw)
    column_type = coerce_type(obj.get("type"))
    dummy_values = obj.get("dummyValues")
    app_sheet = obj.get("appSheet")

    return Column(
        id=ids.claim(obj.get("id"), index),
        name=_non_empty(obj.get("name")) or f"Column{index + 1}",
        type=column_type,
        is_key=_flag(obj.get("isKey")) or False,
        is_label=_flag(obj.get("isLabel")) or False,
        is_virtual=_flag(obj.get("isVirtual")) or False,
        description=_string(obj.get("description")),
        app_sheet=dict(app_sheet) if isinstance(app_sheet, Mapping) else None,
        dummy_values=(
            [v for v in dummy_values if isinstance(v, str)]
            if isinstance(dummy_values, list)
            else None
        ),
        constraints=normalize_constraints(obj.get("constraints"), column_type),
        order=0,
    )


def _normalize_columns(raw_columns: Any, generators: Generators) -> List[Column]:
    """Normalize a table's columns and re-number ``order`` densely from 0.

    Columns are stably sorted by their stored order; a missing order
    counts as the column's position in the list.
    """
    ids = _IdPool(generators, "column")
    keyed = []
    for index, raw in enumerate(_as_list(raw_columns)):
        stored_order = _number(_as_mapping(raw).get("order"), index)
        keyed.append((stored_order, index, normalize_column(raw, index, ids)))

    keyed.sort(key=lambda item: (item[0], item[1]))
    return [
        column.model_copy(update={"order": position})
        for position, (_, _, column) in enumerate(keyed)
    ]


def _normalize_position(raw: Any, default: float) -> Position:
    obj = _as_mapping(raw)
    return Position(x=_number(obj.get("x"), default), y=_number(obj.get("y"), default))


def _normalize_export_targets(raw: Any) -> List[str]:
    """An absent list means every target; an empty list means none."""
    if not isinstance(raw, list):
        return list(EXPORT_TARGETS)
    targets: List[str] = []
    for value in raw:
        if value in EXPORT_TARGETS and value not in targets:
            targets.append(value)
    return targets


def normalize_table(
    raw: Any, index: int, ids: _IdPool, now: str, generators: Generators
) -> Table:
    obj = _as_mapping(raw)
    return Table(
        id=ids.claim(obj.get("id"), index),
        name=_non_empty(obj.get("name")) or f"Table{index + 1}",
        description=_string(obj.get("description")),
        columns=_normalize_columns(obj.get("columns"), generators),
        position=_normalize_position(obj.get("position"), TABLE_ORIGIN + index * TABLE_CASCADE),
        color=_string(obj.get("color")),
        export_targets=_normalize_export_targets(obj.get("exportTargets")),
        sync_group_id=_string(obj.get("syncGroupId")),
        created_at=_non_empty(obj.get("createdAt")) or now,
        updated_at=_non_empty(obj.get("updatedAt")) or now,
    )


def normalize_relation(raw: Any, index: int, ids: _IdPool) -> Relation:
    """Normalize one relation. Endpoints are copied verbatim, never validated."""
    obj = _as_mapping(raw)

    relation_type = obj.get("type")
    if relation_type not in RELATION_TYPES:
        relation_type = DEFAULT_RELATION_TYPE

    icon_name = _string(obj.get("edgeFollowerIconName"))
    icon_size = _number(obj.get("edgeFollowerIconSize"))
    icon_speed = _number(obj.get("edgeFollowerIconSpeed"))
    line_style = obj.get("edgeLineStyle")
    visibility = obj.get("edgeVisibility")

    return Relation(
        id=ids.claim(obj.get("id"), index),
        source_table_id=_string(obj.get("sourceTableId")) or "",
        source_column_id=_string(obj.get("sourceColumnId")) or "",
        target_table_id=_string(obj.get("targetTableId")) or "",
        target_column_id=_string(obj.get("targetColumnId")) or "",
        type=relation_type,
        label=_string(obj.get("label")),
        edge_animation_enabled=_flag(obj.get("edgeAnimationEnabled")),
        edge_follower_icon_enabled=_flag(obj.get("edgeFollowerIconEnabled")),
        edge_follower_icon_name=(icon_name or "").strip() or DEFAULT_ICON_NAME,
        edge_follower_icon_size=(
            int(_clamp(math.trunc(icon_size), MIN_ICON_SIZE, MAX_ICON_SIZE))
            if icon_size is not None
            else DEFAULT_ICON_SIZE
        ),
        edge_follower_icon_speed=(
            _clamp(icon_speed, MIN_ICON_SPEED, MAX_ICON_SPEED)
            if icon_speed is not None
            else DEFAULT_ICON_SPEED
        ),
        edge_line_style=line_style if line_style in EDGE_LINE_STYLES else None,
        edge_visibility=visibility if visibility in EDGE_VISIBILITIES else None,
    )


def normalize_memo(raw: Any, index: int, ids: _IdPool, now: str) -> Memo:
    obj = _as_mapping(raw)
    return Memo(
        id=ids.claim(obj.get("id"), index),
        text=_string(obj.get("text")) or "",
        position=_normalize_position(obj.get("position"), MEMO_ORIGIN + index * MEMO_CASCADE),
        width=_number(obj.get("width")),
        height=_number(obj.get("height")),
        created_at=_non_empty(obj.get("createdAt")) or now,
        updated_at=_non_empty(obj.get("updatedAt")) or now,
    )


def normalize_diagram(raw: Any, generators: Optional[Generators] = None) -> ERDiagram:
    """Repair ``raw`` into a fully well-typed diagram.

    Args:
        raw: A mapping in wire (camelCase) form, or an ERDiagram
        generators: Id factory and clock for fields that must be filled in

    Returns:
        A new ERDiagram; ``raw`` is never modified
    """
    generators = resolve_generators(generators)
    obj = _as_mapping(raw)
    now = generators.now()

    table_ids = _IdPool(generators, "table")
    relation_ids = _IdPool(generators, "relation")
    memo_ids = _IdPool(generators, "memo")

    return ERDiagram(
        tables=[
            normalize_table(t, i, table_ids, now, generators)
            for i, t in enumerate(_as_list(obj.get("tables")))
        ],
        relations=[
            normalize_relation(r, i, relation_ids)
            for i, r in enumerate(_as_list(obj.get("relations")))
        ],
        memos=[
            normalize_memo(m, i, memo_ids, now)
            for i, m in enumerate(_as_list(obj.get("memos")))
        ],
    )
