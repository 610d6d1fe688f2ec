"""Record schemas: an explicit, ordered field list with a text codec per field.

A schema is declared once per record type and describes how each field is
rendered into a cell and parsed back out of one:

    schema = RecordSchema(
        [Field("name", TEXT), Field("count", INTEGER), Field("ratio", FLOAT)],
        record_type=Sample,
    )

Dataclasses can derive the same declaration from their fields and type hints:

    schema = RecordSchema.for_dataclass(Sample)
"""

from __future__ import annotations

import dataclasses
import enum
import types
import typing
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class TextCodec:
    """Renders a field value to cell text and parses it back.

    Attributes:
        name: Codec name, used in error messages.
        format: Value -> text. Must be inverted exactly by ``parse``.
        parse: Text -> value. Raises ValueError (or similar) on bad input.
        accepts: Types ``format`` will take. Empty means any.
        nullable: Whether ``None`` is a valid value (rendered as an empty cell).
    """

    name: str
    format: Callable[[Any], str]
    parse: Callable[[str], Any]
    accepts: tuple[type, ...] = ()
    nullable: bool = False

    def accepts_value(self, value: Any) -> bool:
        if value is None:
            return self.nullable
        if not self.accepts:
            return True
        # bool is an int subclass; only the boolean codec takes it
        if isinstance(value, bool) and bool not in self.accepts:
            return False
        return isinstance(value, self.accepts)


def _parse_int(text: str) -> int:
    text = text.strip()
    if "_" in text:
        raise ValueError(f"invalid integer literal: {text!r}")
    return int(text)


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"invalid boolean literal: {text!r}")


def _parse_decimal(text: str) -> Decimal:
    try:
        return Decimal(text.strip())
    except ArithmeticError as e:
        raise ValueError(f"invalid decimal literal: {text!r}") from e


TEXT = TextCodec("text", str, str, accepts=(str,))
INTEGER = TextCodec("integer", lambda v: str(int(v)), _parse_int, accepts=(int,))
# repr gives the shortest string that round-trips to the same float
FLOAT = TextCodec("float", lambda v: repr(float(v)), lambda s: float(s.strip()), accepts=(float, int))
BOOLEAN = TextCodec("boolean", lambda v: "true" if v else "false", _parse_bool, accepts=(bool,))
DECIMAL = TextCodec("decimal", str, _parse_decimal, accepts=(Decimal, int))
DATE = TextCodec("date", date.isoformat, lambda s: date.fromisoformat(s.strip()), accepts=(date,))
DATETIME = TextCodec(
    "datetime", datetime.isoformat, lambda s: datetime.fromisoformat(s.strip()), accepts=(datetime,)
)


def optional(codec: TextCodec) -> TextCodec:
    """Wrap a codec so that ``None`` maps to an empty cell and back.

    The empty cell always means ``None``. A non-None value that renders to
    ``""`` (such as the empty string in an ``Optional[str]`` field) is
    rejected with ``EncodingError`` when the record is encoded.
    """
    if codec.nullable:
        return codec

    def format_value(value: Any) -> str:
        return "" if value is None else codec.format(value)

    def parse_text(text: str) -> Any:
        return None if text == "" else codec.parse(text)

    return TextCodec(
        f"optional {codec.name}",
        format_value,
        parse_text,
        accepts=codec.accepts,
        nullable=True,
    )


def enum_codec(enum_type: type[enum.Enum]) -> TextCodec:
    """Codec storing enum members by name."""

    def parse_text(text: str) -> enum.Enum:
        try:
            return enum_type[text.strip()]
        except KeyError as e:
            raise ValueError(f"{text!r} is not a member of {enum_type.__name__}") from e

    return TextCodec(enum_type.__name__, lambda v: v.name, parse_text, accepts=(enum_type,))


_CODECS_BY_TYPE: dict[type, TextCodec] = {
    str: TEXT,
    int: INTEGER,
    float: FLOAT,
    bool: BOOLEAN,
    Decimal: DECIMAL,
    date: DATE,
    datetime: DATETIME,
}


def codec_for_type(tp: Any) -> TextCodec:
    """Pick the codec for a type annotation.

    Supports the primitive types, ``Decimal``, ``date``, ``datetime``, enums,
    and ``Optional[T]`` / ``T | None`` of those.

    Raises:
        TypeError: If no codec is registered for the type.
    """
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1 and len(typing.get_args(tp)) == 2:
            return optional(codec_for_type(args[0]))
        raise TypeError(f"Unsupported union type: {tp!r}")

    if isinstance(tp, type):
        if issubclass(tp, enum.Enum):
            return enum_codec(tp)
        if tp in _CODECS_BY_TYPE:
            return _CODECS_BY_TYPE[tp]

    raise TypeError(f"No text codec for type {tp!r}; pass one explicitly")


@dataclass(frozen=True)
class Field:
    """A named column of a record schema."""

    name: str
    codec: TextCodec = TEXT


class RecordSchema:
    """Ordered field declaration for one record type.

    Args:
        fields: Fields in column order. ``(name, codec)`` tuples are accepted.
        record_type: Class instantiated with one keyword argument per field on
            decode. Field values are read from it by attribute on encode.
            When omitted, records are plain dicts.
        factory: Overrides ``record_type`` for building decoded records.
    """

    def __init__(
        self,
        fields: Sequence[Field | tuple[str, TextCodec]],
        record_type: type | None = None,
        factory: Callable[..., Any] | None = None,
    ) -> None:
        self.fields: tuple[Field, ...] = tuple(
            f if isinstance(f, Field) else Field(*f) for f in fields
        )
        if not self.fields:
            raise ValueError("A record schema needs at least one field")

        names = [f.name for f in self.fields]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"Duplicate field names: {sorted(duplicates)}")

        self.record_type = record_type
        self._factory = factory or record_type or dict

    @classmethod
    def for_dataclass(
        cls,
        record_type: type,
        overrides: Mapping[str, TextCodec] | None = None,
    ) -> RecordSchema:
        """Declare a schema from a dataclass's fields, in definition order.

        Args:
            record_type: A dataclass type.
            overrides: Codecs to use instead of the type-derived ones, by field name.
        """
        if not dataclasses.is_dataclass(record_type):
            raise TypeError(f"{record_type!r} is not a dataclass")

        overrides = dict(overrides or {})
        hints = typing.get_type_hints(record_type)
        fields = []
        for f in dataclasses.fields(record_type):
            if not f.init:
                continue
            codec = overrides.pop(f.name, None) or codec_for_type(hints[f.name])
            fields.append(Field(f.name, codec))

        if overrides:
            raise ValueError(f"Overrides for unknown fields: {sorted(overrides)}")
        return cls(fields, record_type=record_type)

    @property
    def names(self) -> list[str]:
        """Field names in declared order (the header row)."""
        return [f.name for f in self.fields]

    def __len__(self) -> int:
        return len(self.fields)

    def __repr__(self) -> str:
        type_name = self.record_type.__name__ if self.record_type else "dict"
        return f"RecordSchema({type_name}, {self.names})"

    def get_value(self, record: Any, name: str) -> Any:
        """Read one field from a record."""
        if isinstance(record, Mapping):
            return record[name]
        return getattr(record, name)

    def build(self, values: dict[str, Any]) -> Any:
        """Construct a record from parsed field values."""
        return self._factory(**values)
