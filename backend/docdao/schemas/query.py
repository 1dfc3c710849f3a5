"""
Structured query values: sort specifications and field projections.

Both accept the compact string forms callers tend to pass around
("_id:-1", "name,email") and hand the store a normalized value.
"""

from typing import Dict, Iterable, List, Tuple, Union

from pydantic import RootModel, field_validator


ASCENDING = 1
DESCENDING = -1

_DIRECTIONS = {
    "1": ASCENDING,
    "asc": ASCENDING,
    "ascending": ASCENDING,
    "-1": DESCENDING,
    "desc": DESCENDING,
    "descending": DESCENDING,
}


class SortSpec(RootModel[List[Tuple[str, int]]]):
    """
    Ordered list of (field, direction) pairs.

    Example:
        >>> SortSpec.parse("name:asc,created_at:-1").keys
        [('name', 1), ('created_at', -1)]
    """

    @field_validator("root")
    @classmethod
    def validate_keys(cls, v: List[Tuple[str, int]]) -> List[Tuple[str, int]]:
        """Every key needs a field name and a direction of 1 or -1."""
        for field, direction in v:
            if not field:
                raise ValueError("sort field name cannot be empty")
            if direction not in (ASCENDING, DESCENDING):
                raise ValueError(
                    f"sort direction for '{field}' must be 1 or -1, got {direction}"
                )
        return v

    @classmethod
    def parse(cls, value: Union[str, "SortSpec", Iterable[Tuple[str, int]], None]) -> "SortSpec":
        """
        Build a SortSpec from a string, pairs or an existing spec.

        String form is comma separated; each part is "field:direction",
        "-field" (descending) or "field" (ascending).

        Raises:
            ValueError: If a part has an unknown direction or no field name
        """
        if value is None:
            return cls([])
        if isinstance(value, SortSpec):
            return value
        if not isinstance(value, str):
            return cls([(field, int(direction)) for field, direction in value])

        keys: List[Tuple[str, int]] = []
        for part in value.split(","):
            part = part.strip()
            if not part:
                continue

            if ":" in part:
                field, _, raw_direction = part.partition(":")
                field = field.strip()
                direction = _DIRECTIONS.get(raw_direction.strip().lower())
                if direction is None:
                    raise ValueError(
                        f"Unknown sort direction '{raw_direction}' for field '{field}'"
                    )
            elif part.startswith("-"):
                field, direction = part[1:].strip(), DESCENDING
            else:
                field, direction = part.lstrip("+").strip(), ASCENDING

            if not field:
                raise ValueError(f"Sort key '{part}' has no field name")
            keys.append((field, direction))

        return cls(keys)

    @property
    def keys(self) -> List[Tuple[str, int]]:
        return list(self.root)

    def __bool__(self) -> bool:
        return bool(self.root)


class Projection(RootModel[Tuple[str, ...]]):
    """
    Inclusion projection over a set of field names.

    Example:
        >>> Projection.parse("name, email").to_mongo()
        {'name': 1, 'email': 1}
    """

    @classmethod
    def parse(cls, value: Union[str, "Projection", Iterable[str], None]) -> "Projection":
        """Build a projection from a comma separated string or field names."""
        if value is None:
            return cls(())
        if isinstance(value, Projection):
            return value
        if isinstance(value, str):
            value = value.split(",")

        fields: List[str] = []
        for name in value:
            name = name.strip()
            if name and name not in fields:
                fields.append(name)
        return cls(tuple(fields))

    @property
    def names(self) -> Tuple[str, ...]:
        return self.root

    def to_mongo(self) -> Dict[str, int]:
        return {field: 1 for field in self.root}

    def __bool__(self) -> bool:
        return bool(self.root)
