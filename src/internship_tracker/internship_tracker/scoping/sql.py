from __future__ import annotations

from .visibility import ScopeFilter


def scope_clauses(scope: ScopeFilter, *, owner_column: str, supervisor_column: str) -> tuple[list[str], list[object]]:
    """SQL predicates for a ScopeFilter (to be AND-ed into a WHERE)."""

    clauses: list[str] = []
    params: list[object] = []

    if scope.user_id is not None:
        clauses.append(f"{owner_column}=%s")
        params.append(int(scope.user_id))
    if scope.supervisor_id is not None:
        clauses.append(f"{supervisor_column}=%s")
        params.append(int(scope.supervisor_id))

    return clauses, params
