"""
Query constraints for the document store.

Constraints are a closed set of immutable values (Where, OrderBy, Limit).
Bad operator/value combinations fail when the constraint is built, so the
store never sees a query it cannot translate.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union


class Operator(str, Enum):
    """Comparison operators accepted in a Where constraint."""

    EQ = "=="
    NE = "!="
    LT = "<"
    LTE = "<="
    GT = ">"
    GTE = ">="
    IN = "in"
    NOT_IN = "not-in"
    ARRAY_CONTAINS = "array-contains"


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


_RANGE_OPERATORS = {Operator.LT, Operator.LTE, Operator.GT, Operator.GTE}
_LIST_OPERATORS = {Operator.IN, Operator.NOT_IN}

_MONGO_OPERATORS = {
    Operator.NE: "$ne",
    Operator.LT: "$lt",
    Operator.LTE: "$lte",
    Operator.GT: "$gt",
    Operator.GTE: "$gte",
    Operator.IN: "$in",
    Operator.NOT_IN: "$nin",
}


def _check_field(field: str) -> None:
    if not isinstance(field, str) or not field.strip():
        raise ValueError("Constraint field must be a non-empty string")


@dataclass(frozen=True)
class Where:
    """Filter on a single field."""

    field: str
    op: Operator
    value: Any

    def __post_init__(self) -> None:
        _check_field(self.field)
        # Accept the raw operator strings ("==", ">=", ...) as well as the enum
        object.__setattr__(self, "op", Operator(self.op))
        if self.op in _LIST_OPERATORS:
            if not isinstance(self.value, (list, tuple)):
                raise ValueError(f"Operator '{self.op.value}' requires a list value")
            object.__setattr__(self, "value", list(self.value))
        elif self.op in _RANGE_OPERATORS:
            if self.value is None or isinstance(self.value, (list, tuple, dict)):
                raise ValueError(f"Operator '{self.op.value}' requires a scalar value")


@dataclass(frozen=True)
class OrderBy:
    field: str
    direction: Direction = Direction.ASC

    def __post_init__(self) -> None:
        _check_field(self.field)
        object.__setattr__(self, "direction", Direction(self.direction))


@dataclass(frozen=True)
class Limit:
    count: int

    def __post_init__(self) -> None:
        if isinstance(self.count, bool) or not isinstance(self.count, int) or self.count <= 0:
            raise ValueError("Limit must be a positive integer")


Constraint = Union[Where, OrderBy, Limit]


def where(field: str, op: Union[Operator, str], value: Any) -> Where:
    return Where(field, Operator(op), value)


def order_by(field: str, direction: Union[Direction, str] = Direction.ASC) -> OrderBy:
    return OrderBy(field, Direction(direction))


def limit(count: int) -> Limit:
    return Limit(count)


def _field_condition(clause: Where) -> Any:
    if clause.op is Operator.EQ or clause.op is Operator.ARRAY_CONTAINS:
        # Mongo equality on an array field already means "contains"
        return clause.value
    return {_MONGO_OPERATORS[clause.op]: clause.value}


def build_mongo_query(
    constraints: Iterable[Constraint],
) -> Tuple[Dict[str, Any], List[Tuple[str, int]], Optional[int]]:
    """
    Translate constraints into (filter, sort, limit) for Motor.

    Several Where clauses on the same field are combined: operator clauses
    merge into one dict, and anything that cannot merge goes under $and.
    The last Limit wins.
    """
    mongo_filter: Dict[str, Any] = {}
    extra: List[Dict[str, Any]] = []
    sort: List[Tuple[str, int]] = []
    max_count: Optional[int] = None

    for constraint in constraints:
        if isinstance(constraint, Where):
            field = "_id" if constraint.field == "id" else constraint.field
            condition = _field_condition(constraint)
            if field not in mongo_filter:
                mongo_filter[field] = condition
            elif isinstance(mongo_filter[field], dict) and isinstance(condition, dict) and not (
                mongo_filter[field].keys() & condition.keys()
            ):
                mongo_filter[field] = {**mongo_filter[field], **condition}
            else:
                extra.append({field: condition})
        elif isinstance(constraint, OrderBy):
            sort.append((constraint.field, 1 if constraint.direction is Direction.ASC else -1))
        elif isinstance(constraint, Limit):
            max_count = constraint.count
        else:
            raise TypeError(f"Unsupported constraint: {constraint!r}")

    if extra:
        mongo_filter = {"$and": [mongo_filter, *extra]} if mongo_filter else {"$and": extra}
    return mongo_filter, sort, max_count
