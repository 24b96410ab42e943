"""Fluent builder for Odoo search domains."""

from typing import Any, Iterator


class Criteria:
    """
    Ordered list of ``(field, operator, value)`` search criteria.

    Insertion order is kept: the result of :meth:`get` is sent verbatim as
    the domain of a ``search`` call.

    Example:
        Criteria.create().equal("login", "admin").greater_than("id", 1)
    """

    EQUAL = "="
    LESS_THAN = "<"
    LESS_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_EQUAL = ">="
    LIKE = "like"
    ILIKE = "ilike"
    NOT_EQUAL = "!="

    def __init__(self) -> None:
        self._criteria: list[list[Any]] = []

    @classmethod
    def create(cls) -> "Criteria":
        """Return an empty builder."""
        return cls()

    def add(self, field: str, value: Any, operator: str = EQUAL) -> "Criteria":
        """Append a criterion, no check is done on field, value or operator."""
        self._criteria.append([field, operator, value])
        return self

    def get(self) -> list[list[Any]]:
        """Return the criteria in the domain format expected by Odoo."""
        return list(self._criteria)

    def equal(self, field: str, value: Any) -> "Criteria":
        return self.add(field, value, self.EQUAL)

    def not_equal(self, field: str, value: Any) -> "Criteria":
        return self.add(field, value, self.NOT_EQUAL)

    def less_than(self, field: str, value: Any) -> "Criteria":
        return self.add(field, value, self.LESS_THAN)

    def less_equal(self, field: str, value: Any) -> "Criteria":
        return self.add(field, value, self.LESS_EQUAL)

    def greater_than(self, field: str, value: Any) -> "Criteria":
        return self.add(field, value, self.GREATER_THAN)

    def greater_equal(self, field: str, value: Any) -> "Criteria":
        return self.add(field, value, self.GREATER_EQUAL)

    def like(self, field: str, value: Any) -> "Criteria":
        return self.add(field, value, self.LIKE)

    def ilike(self, field: str, value: Any) -> "Criteria":
        return self.add(field, value, self.ILIKE)

    def __len__(self) -> int:
        return len(self._criteria)

    def __iter__(self) -> Iterator[list[Any]]:
        return iter(self.get())

    def __repr__(self) -> str:
        return f"Criteria({self._criteria!r})"
