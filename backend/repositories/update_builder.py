"""
Sparse SET clause builder

Builds `SET n.a = $set_a, n.b = $set_b, ...` from only the fields a caller
supplied. Property names come from a fixed whitelist and values always travel
as parameters, so no input ever reaches the query text.
"""
from typing import Any, Dict, Iterable, List, NamedTuple, Tuple


class Assignment(NamedTuple):
    field: str
    placeholder: str
    value: Any


class SparseUpdateBuilder:
    """
    Accumulates (field, placeholder, value) triples and renders a SET clause.

    Usage:
        builder = SparseUpdateBuilder('m', MUTABLE_FIELDS)
        builder.set('title', 'New title')
        builder.touch('updated_at', now)
        clause, params = builder.render()
    """

    def __init__(self, variable: str, allowed_fields: Iterable[str]):
        if not variable.isidentifier():
            raise ValueError(f"Invalid Cypher variable: {variable}")
        self.variable = variable
        self.allowed_fields = frozenset(allowed_fields)
        self._assignments: List[Assignment] = []
        self._touches: List[Assignment] = []

    def _assignment(self, field: str, value: Any) -> Assignment:
        if field not in self.allowed_fields:
            raise ValueError(f"Field not updatable: {field}")
        return Assignment(field, f"set_{field}", value)

    def set(self, field: str, value: Any) -> 'SparseUpdateBuilder':
        """Add a field change; a repeated field replaces the earlier value"""
        self._assignments = [a for a in self._assignments if a.field != field]
        self._assignments.append(self._assignment(field, value))
        return self

    def touch(self, field: str, value: Any) -> 'SparseUpdateBuilder':
        """Add an assignment written with every update, such as updated_at"""
        self._touches = [a for a in self._touches if a.field != field]
        self._touches.append(self._assignment(field, value))
        return self

    def render(self) -> Tuple[str, Dict[str, Any]]:
        """Return (SET clause, parameters)"""
        assignments = self._assignments + self._touches
        if not assignments:
            raise ValueError("Nothing to update")
        clause = "SET " + ", ".join(
            f"{self.variable}.{a.field} = ${a.placeholder}" for a in assignments
        )
        params = {a.placeholder: a.value for a in assignments}
        return clause, params
