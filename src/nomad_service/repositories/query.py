"""Sort, populate and serialization helpers for the entity service."""

from typing import Any, Optional, Union

from sqlalchemy import Select, inspect
from sqlalchemy.orm import aliased, selectinload

from ..exceptions import InvalidFilterError

SortSpec = Union[str, dict, list, None]
PopulateSpec = Union[bool, str, list, dict, None]

# Relation name -> nested populate tree
PopulateTree = dict[str, "PopulateTree"]


def _sort_terms(sort: SortSpec, prefix: tuple[str, ...] = ()) -> list[tuple[tuple[str, ...], str]]:
    """Flatten a sort spec into ``(path, direction)`` pairs, keeping order."""
    if sort is None:
        return []
    if isinstance(sort, str):
        field, _, direction = sort.partition(":")
        path = prefix + tuple(p for p in field.strip().split(".") if p)
        return [(path, direction or "asc")]
    if isinstance(sort, (list, tuple)):
        terms = []
        for item in sort:
            terms.extend(_sort_terms(item, prefix))
        return terms
    if isinstance(sort, dict):
        terms = []
        for key, value in sort.items():
            if isinstance(value, (dict, list)):
                terms.extend(_sort_terms(value, prefix + (key,)))
            else:
                terms.append((prefix + (key,), str(value)))
        return terms
    raise InvalidFilterError("Invalid sort specification", {"sort": sort})


def apply_sort(stmt: Select, model: type, sort: SortSpec) -> Select:
    """Add ORDER BY clauses, outer-joining to-one relations for nested fields."""
    joined: dict[tuple[str, ...], Any] = {}

    for path, direction in _sort_terms(sort):
        direction = direction.strip().lower()
        if direction not in ("asc", "desc"):
            raise InvalidFilterError(f"Invalid sort direction '{direction}'", {"path": ".".join(path)})
        if not path:
            raise InvalidFilterError("Empty sort field", {"sort": sort})

        entity: Any = model
        current = model
        for depth, name in enumerate(path[:-1]):
            mapper = inspect(current)
            if name not in mapper.relationships:
                raise InvalidFilterError(
                    f"Unknown relation '{name}' on {current.__name__}",
                    {"path": ".".join(path)},
                )
            rel = mapper.relationships[name]
            if rel.uselist:
                raise InvalidFilterError(
                    f"Cannot sort on to-many relation '{name}'",
                    {"path": ".".join(path)},
                )
            key = path[: depth + 1]
            if key not in joined:
                alias = aliased(rel.mapper.class_)
                stmt = stmt.outerjoin(getattr(entity, name).of_type(alias))
                joined[key] = alias
            entity = joined[key]
            current = rel.mapper.class_

        field = path[-1]
        if field not in inspect(current).column_attrs:
            raise InvalidFilterError(
                f"Unknown sort field '{field}' on {current.__name__}",
                {"path": ".".join(path)},
            )
        column = getattr(entity, field)
        stmt = stmt.order_by(column.asc() if direction == "asc" else column.desc())

    return stmt


def _merge(into: PopulateTree, other: PopulateTree) -> PopulateTree:
    for key, sub in other.items():
        _merge(into.setdefault(key, {}), sub)
    return into


def _populate_path(model: type, path: list[str]) -> PopulateTree:
    if not path:
        return {}
    name = path[0]
    if name == "*":
        return {rel: {} for rel in inspect(model).relationships.keys()}
    mapper = inspect(model)
    if name not in mapper.relationships:
        raise InvalidFilterError(
            f"Cannot populate '{name}' on {model.__name__}",
            {"relation": name, "model": model.__name__},
        )
    target = mapper.relationships[name].mapper.class_
    return {name: _populate_path(target, path[1:])}


def normalize_populate(model: type, populate: PopulateSpec) -> PopulateTree:
    """Turn any accepted populate form into a nested relation tree."""
    if populate is None or populate is False:
        return {}
    if populate is True or populate == "*":
        return {rel: {} for rel in inspect(model).relationships.keys()}
    if isinstance(populate, str):
        tree: PopulateTree = {}
        for part in populate.split(","):
            if part.strip():
                _merge(tree, _populate_path(model, part.strip().split(".")))
        return tree
    if isinstance(populate, (list, tuple)):
        tree = {}
        for item in populate:
            _merge(tree, normalize_populate(model, item))
        return tree
    if isinstance(populate, dict):
        mapper = inspect(model)
        tree = {}
        for name, value in populate.items():
            if value is False or value is None:
                continue
            if name not in mapper.relationships:
                raise InvalidFilterError(
                    f"Cannot populate '{name}' on {model.__name__}",
                    {"relation": name, "model": model.__name__},
                )
            target = mapper.relationships[name].mapper.class_
            if isinstance(value, dict) and "populate" in value:
                value = value["populate"]
            elif isinstance(value, dict) and not value:
                value = None
            tree[name] = {} if value is True else normalize_populate(target, value)
        return tree
    raise InvalidFilterError("Invalid populate specification", {"populate": populate})


def loader_options(model: type, tree: PopulateTree) -> list:
    """selectinload options for every relation in the tree."""
    options = []
    mapper = inspect(model)
    for name, sub in tree.items():
        target = mapper.relationships[name].mapper.class_
        option = selectinload(getattr(model, name))
        children = loader_options(target, sub)
        if children:
            option = option.options(*children)
        options.append(option)
    return options


def serialize(obj: Any, tree: Optional[PopulateTree] = None) -> dict[str, Any]:
    """Plain dict of an entity: its columns without foreign keys plus populated relations."""
    tree = tree or {}
    mapper = inspect(type(obj))
    data: dict[str, Any] = {}

    for attr in mapper.column_attrs:
        if any(column.foreign_keys for column in attr.columns):
            continue
        data[attr.key] = getattr(obj, attr.key)

    for name, sub in tree.items():
        value = getattr(obj, name)
        if value is None:
            data[name] = None
        elif mapper.relationships[name].uselist:
            data[name] = [serialize(item, sub) for item in value]
        else:
            data[name] = serialize(value, sub)

    return data
