"""Compile filter dicts into SQLAlchemy expressions.

Filters address columns and relationships by attribute name::

    {
        "$or": [
            {"date": {"$gt": today}},
            {"date": today, "time_slot": {"start": {"$gt": now}}},
        ],
        "state": {"status": False, "group": {"id": 3}},
    }

Keys in one dict are AND-ed. A relationship key nests a filter on the related
model and compiles to EXISTS (``has`` for to-one, ``any`` for to-many), so a
nested dict always matches a single related row.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Callable, Optional

from sqlalchemy import and_, func, inspect, not_, or_
from sqlalchemy.orm import RelationshipProperty
from sqlalchemy.sql.elements import ColumnElement

from ..exceptions import InvalidFilterError


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _between(column, value):
    bounds = _as_list(value)
    if len(bounds) != 2:
        raise InvalidFilterError("$between expects exactly two values", {"value": value})
    return column.between(bounds[0], bounds[1])


OPERATORS: dict[str, Callable[[Any, Any], ColumnElement]] = {
    "$eq": lambda col, v: col.is_(None) if v is None else col == v,
    "$eqi": lambda col, v: func.lower(col) == str(v).lower(),
    "$ne": lambda col, v: col.is_not(None) if v is None else col != v,
    "$lt": lambda col, v: col < v,
    "$lte": lambda col, v: col <= v,
    "$gt": lambda col, v: col > v,
    "$gte": lambda col, v: col >= v,
    "$in": lambda col, v: col.in_(_as_list(v)),
    "$notIn": lambda col, v: col.not_in(_as_list(v)),
    "$contains": lambda col, v: col.contains(v, autoescape=True),
    "$notContains": lambda col, v: not_(col.contains(v, autoescape=True)),
    "$containsi": lambda col, v: func.lower(col).contains(str(v).lower(), autoescape=True),
    "$notContainsi": lambda col, v: not_(
        func.lower(col).contains(str(v).lower(), autoescape=True)
    ),
    "$startsWith": lambda col, v: col.startswith(v, autoescape=True),
    "$endsWith": lambda col, v: col.endswith(v, autoescape=True),
    "$null": lambda col, v: col.is_(None) if v else col.is_not(None),
    "$notNull": lambda col, v: col.is_not(None) if v else col.is_(None),
    "$between": _between,
}

# Operators whose value is a flag, not a column value
_FLAG_OPERATORS = ("$null", "$notNull")

_TRUE_STRINGS = ("true", "1", "yes")
_FALSE_STRINGS = ("false", "0", "no")


def _python_type(column) -> Optional[type]:
    try:
        return column.type.python_type
    except (AttributeError, NotImplementedError):
        return None


def _to_utc(value: datetime) -> datetime:
    # Stores without offset support keep the wall clock, so aware values go in as UTC
    return value.astimezone(timezone.utc) if value.tzinfo is not None else value


def coerce_value(column, value: Any) -> Any:
    """Convert wire values (strings from GraphQL/JSON) to the column's Python type.

    Aware datetimes for datetime columns are normalised to UTC.
    """
    if isinstance(value, (list, tuple, set)):
        return [coerce_value(column, v) for v in value]
    if isinstance(value, datetime) and _python_type(column) is datetime:
        return _to_utc(value)
    if value is None or not isinstance(value, str):
        return value

    python_type = _python_type(column)
    if python_type is None:
        return value

    try:
        if python_type is bool:
            lowered = value.lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
            raise ValueError(value)
        if python_type is int:
            return int(value)
        if python_type is float:
            return float(value)
        if python_type is datetime:
            return _to_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        if python_type is date:
            return date.fromisoformat(value[:10])
        if python_type is time:
            return time.fromisoformat(value)
    except ValueError:
        raise InvalidFilterError(
            f"Cannot convert {value!r} for column '{column.key}'",
            {"column": column.key, "value": value},
        ) from None
    return value


def _is_operator_dict(value: Any) -> bool:
    return isinstance(value, dict) and any(k in OPERATORS for k in value)


def _compile_column(column, value: Any) -> ColumnElement:
    """Compile the filter for one column."""
    if isinstance(value, dict):
        clauses = []
        for op, operand in value.items():
            if op == "$not":
                clauses.append(not_(_compile_column(column, operand)))
                continue
            if op in ("$and", "$or"):
                parts = [_compile_column(column, v) for v in _as_list(operand)]
                if parts:
                    clauses.append(and_(*parts) if op == "$and" else or_(*parts))
                continue
            if op not in OPERATORS:
                raise InvalidFilterError(
                    f"Unknown operator '{op}' on '{column.key}'",
                    {"operator": op, "column": column.key},
                )
            if op not in _FLAG_OPERATORS:
                operand = coerce_value(column, operand)
            clauses.append(OPERATORS[op](column, operand))
        if not clauses:
            raise InvalidFilterError(f"Empty filter on '{column.key}'", {"column": column.key})
        return and_(*clauses) if len(clauses) > 1 else clauses[0]

    if isinstance(value, (list, tuple, set)):
        return column.in_(coerce_value(column, list(value)))
    if value is None:
        return column.is_(None)
    return column == coerce_value(column, value)


def _compile_relation(model: type, key: str, rel: RelationshipProperty, value: Any) -> ColumnElement:
    attr = getattr(model, key)
    target = rel.mapper.class_

    if value is None:
        return not_(attr.any()) if rel.uselist else attr == None  # noqa: E711

    if isinstance(value, dict) and not _is_operator_dict(value):
        inner = compile_filters(target, value)
    else:
        # Scalar, list or operator dict: compare the related primary key
        pk = rel.mapper.primary_key[0]
        inner = _compile_column(getattr(target, pk.key), value)

    if rel.uselist:
        return attr.any(inner) if inner is not None else attr.any()
    return attr.has(inner) if inner is not None else attr.has()


def _compile_list(model: type, key: str, value: Any) -> list[ColumnElement]:
    if isinstance(value, dict):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise InvalidFilterError(f"{key} expects a list of filters", {"value": value})
    clauses = []
    for item in value:
        clause = compile_filters(model, item)
        if clause is not None:
            clauses.append(clause)
    return clauses


def compile_filters(model: type, filters: Optional[dict]) -> Optional[ColumnElement]:
    """Compile a filter dict for ``model``. Returns None for an empty filter."""
    if filters is None:
        return None
    if not isinstance(filters, dict):
        raise InvalidFilterError(
            f"Filters for {model.__name__} must be a dict",
            {"filters": filters},
        )

    mapper = inspect(model)
    clauses: list[ColumnElement] = []

    for key, value in filters.items():
        if key == "$and":
            parts = _compile_list(model, key, value)
            if parts:
                clauses.append(and_(*parts))
        elif key == "$or":
            parts = _compile_list(model, key, value)
            if parts:
                clauses.append(or_(*parts))
        elif key == "$not":
            inner = compile_filters(model, value)
            if inner is not None:
                clauses.append(not_(inner))
        elif key in mapper.relationships:
            clauses.append(_compile_relation(model, key, mapper.relationships[key], value))
        elif key in mapper.column_attrs:
            clauses.append(_compile_column(getattr(model, key), value))
        else:
            raise InvalidFilterError(
                f"Unknown field '{key}' on {model.__name__}",
                {"field": key, "model": model.__name__},
            )

    if not clauses:
        return None
    return and_(*clauses) if len(clauses) > 1 else clauses[0]
