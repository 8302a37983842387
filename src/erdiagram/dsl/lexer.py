"""Line classification for the diagram DSL.

Each non-blank, non-comment line is one directive::

    TABLE <name> ["<description>"] [PK=<col>] [LABEL=<col>] [COLOR=<color>]
    COL <table>.<name> <Type> [req] [uniq] [virtual] ["<description>"]
    REF <table>.<name> -> <refTable>.<refCol> [req] ["<description>"]
    MEMO "<text with \\n, \\" and \\\\ escapes>"
"""

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional, Tuple, Union

from erdiagram.dsl.errors import DSLSyntaxError
from erdiagram.utils.type_utils import normalize_type

COMMENT_PREFIXES = ("#", "//")
KEYWORDS = ("TABLE", "COL", "REF", "MEMO")
ARROW = "->"

# Escape sequences recognised inside quoted strings
_ESCAPES = {"n": "\n", '"': '"', "\\": "\\"}


class Token(NamedTuple):
    value: str
    quoted: bool


@dataclass
class TableDirective:
    line_number: int
    line: str
    name: str
    description: Optional[str] = None
    pk: Optional[str] = None
    label: Optional[str] = None
    color: Optional[str] = None


@dataclass
class ColumnDirective:
    line_number: int
    line: str
    table: str
    name: str
    type: str
    required: bool = False
    unique: bool = False
    virtual: bool = False
    description: Optional[str] = None


@dataclass
class RefDirective:
    line_number: int
    line: str
    table: str
    name: str
    ref_table: str
    ref_column: str
    required: bool = False
    description: Optional[str] = None


@dataclass
class MemoDirective:
    line_number: int
    line: str
    text: str


Directive = Union[TableDirective, ColumnDirective, RefDirective, MemoDirective]


def decode_quoted(raw: str) -> str:
    """Decode the body of a quoted string.

    ``\\n`` (line break), ``\\"`` (quote) and ``\\\\`` (backslash) are
    escapes; any other backslash is kept as written.
    """
    out = []
    i = 0
    while i < len(raw):
        char = raw[i]
        if char == "\\" and i + 1 < len(raw) and raw[i + 1] in _ESCAPES:
            out.append(_ESCAPES[raw[i + 1]])
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)


def encode_quoted(text: str) -> str:
    """Inverse of :func:`decode_quoted`, including the surrounding quotes."""
    body = (
        text.replace("\\", "\\\\")
        .replace("\r\n", "\n")
        .replace('"', '\\"')
        .replace("\n", "\\n")
    )
    return f'"{body}"'


def tokenize_line(line: str, line_number: Optional[int] = None) -> List[Token]:
    """Split a line on whitespace, keeping quoted strings as single tokens."""
    tokens: List[Token] = []
    current: List[str] = []
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if current:
                tokens.append(Token("".join(current), False))
                current = []
            end = i + 1
            while end < len(line) and line[end] != '"':
                end += 2 if line[end] == "\\" else 1
            if end >= len(line):
                raise DSLSyntaxError("Unterminated quoted string", line, line_number)
            tokens.append(Token(decode_quoted(line[i + 1 : end]), True))
            i = end + 1
            continue
        if char.isspace():
            if current:
                tokens.append(Token("".join(current), False))
                current = []
        else:
            current.append(char)
        i += 1
    if current:
        tokens.append(Token("".join(current), False))
    return tokens


def _split_qualified(token: Token, what: str, line: str, line_number: int) -> Tuple[str, str]:
    """Split ``table.column`` at the first dot."""
    if token.quoted or "." not in token.value:
        raise DSLSyntaxError(f"Expected <table>.<column> for {what}", line, line_number)
    table, _, column = token.value.partition(".")
    if not table or not column:
        raise DSLSyntaxError(f"Expected <table>.<column> for {what}", line, line_number)
    return table, column


def _take_description(
    tokens: List[Token], line: str, line_number: int
) -> Tuple[List[str], Optional[str]]:
    """Separate bare tokens from the single optional quoted description."""
    bare = [t.value for t in tokens if not t.quoted]
    quoted = [t.value for t in tokens if t.quoted]
    if len(quoted) > 1:
        raise DSLSyntaxError("Only one quoted description is allowed", line, line_number)
    return bare, (quoted[0] or None) if quoted else None


def _parse_flags(
    bare: List[str], allowed: Tuple[str, ...], line: str, line_number: int
) -> List[str]:
    flags = []
    for token in bare:
        flag = token.lower()
        if flag not in allowed:
            raise DSLSyntaxError(f"Unknown flag '{token}'", line, line_number)
        flags.append(flag)
    return flags


def _classify_table(tokens: List[Token], line: str, line_number: int) -> TableDirective:
    if not tokens or tokens[0].quoted:
        raise DSLSyntaxError("TABLE requires a table name", line, line_number)

    directive = TableDirective(line_number=line_number, line=line, name=tokens[0].value)
    bare, directive.description = _take_description(tokens[1:], line, line_number)

    for option in bare:
        key, sep, value = option.partition("=")
        key = key.upper()
        if not sep or not value or key not in ("PK", "LABEL", "COLOR"):
            raise DSLSyntaxError(f"Unknown TABLE option '{option}'", line, line_number)
        setattr(directive, key.lower(), value)
    return directive


def _classify_column(tokens: List[Token], line: str, line_number: int) -> ColumnDirective:
    if len(tokens) < 2 or tokens[1].quoted:
        raise DSLSyntaxError("COL requires <table>.<column> and a type", line, line_number)

    table, name = _split_qualified(tokens[0], "COL", line, line_number)
    try:
        column_type = normalize_type(tokens[1].value)
    except ValueError:
        raise DSLSyntaxError(f"Unknown column type '{tokens[1].value}'", line, line_number)

    bare, description = _take_description(tokens[2:], line, line_number)
    flags = _parse_flags(bare, ("req", "uniq", "virtual"), line, line_number)
    return ColumnDirective(
        line_number=line_number,
        line=line,
        table=table,
        name=name,
        type=column_type,
        required="req" in flags,
        unique="uniq" in flags,
        virtual="virtual" in flags,
        description=description,
    )


def _classify_ref(tokens: List[Token], line: str, line_number: int) -> RefDirective:
    if len(tokens) < 3 or tokens[1] != Token(ARROW, False):
        raise DSLSyntaxError(
            "REF requires <table>.<column> -> <refTable>.<refColumn>", line, line_number
        )

    table, name = _split_qualified(tokens[0], "REF", line, line_number)
    ref_table, ref_column = _split_qualified(tokens[2], "REF target", line, line_number)
    bare, description = _take_description(tokens[3:], line, line_number)
    flags = _parse_flags(bare, ("req",), line, line_number)
    return RefDirective(
        line_number=line_number,
        line=line,
        table=table,
        name=name,
        ref_table=ref_table,
        ref_column=ref_column,
        required="req" in flags,
        description=description,
    )


def _classify_memo(tokens: List[Token], line: str, line_number: int) -> MemoDirective:
    if len(tokens) != 1 or not tokens[0].quoted:
        raise DSLSyntaxError("MEMO requires exactly one quoted string", line, line_number)
    return MemoDirective(line_number=line_number, line=line, text=tokens[0].value)


_CLASSIFIERS = {
    "TABLE": _classify_table,
    "COL": _classify_column,
    "REF": _classify_ref,
    "MEMO": _classify_memo,
}


def is_comment_or_blank(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT_PREFIXES)


def classify_line(line: str, line_number: int) -> Optional[Directive]:
    """Classify one line. Returns None for comments and blank lines.

    Raises:
        DSLSyntaxError: If the line is not a well-formed directive
    """
    if is_comment_or_blank(line):
        return None

    stripped = line.strip()
    tokens = tokenize_line(stripped, line_number)
    keyword = tokens[0].value.upper() if not tokens[0].quoted else ""
    classifier = _CLASSIFIERS.get(keyword)
    if classifier is None:
        raise DSLSyntaxError(
            f"Unknown directive, expected one of {', '.join(KEYWORDS)}", stripped, line_number
        )
    return classifier(tokens[1:], stripped, line_number)


def classify(text: str) -> Iterator[Directive]:
    """Yield the directives of a DSL document in source order."""
    for index, line in enumerate(text.splitlines(), start=1):
        directive = classify_line(line, index)
        if directive is not None:
            yield directive


def is_dsl_format(text: str) -> bool:
    """Check whether the first meaningful line of ``text`` is a DSL directive."""
    for line in text.splitlines():
        if is_comment_or_blank(line):
            continue
        first = line.strip().split(None, 1)[0]
        return first.upper() in KEYWORDS
    return False


def is_json_format(text: str) -> bool:
    """Check whether ``text`` looks like a JSON object or array."""
    return text.strip().startswith(("{", "["))
