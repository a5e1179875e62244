"""Cyclomatic complexity of Rust function bodies.

CC = 1 + one increment per decision point:

    if / if let          while / while let       for        loop
    each match arm       each && or ||           each ? (error propagation)

Closures have no identity of their own, so their decision points count
toward the enclosing function. Nested items (``fn``, ``impl``, ``trait``,
``mod``) are skipped: their functions are separate records.

Macro invocation bodies are opaque token trees and contribute nothing.
"""

from __future__ import annotations

from typing import Any

# Node type -> fixed increment
_DECISION_POINTS: dict[str, int] = {
    "if_expression": 1,
    "if_let_expression": 1,  # older grammars
    "while_expression": 1,
    "while_let_expression": 1,  # older grammars
    "for_expression": 1,
    "loop_expression": 1,
    "match_arm": 1,
    "try_expression": 1,
}

_SHORT_CIRCUIT_OPERATORS = frozenset({"&&", "||"})

_NESTED_ITEMS = frozenset({"function_item", "impl_item", "trait_item", "mod_item"})


def _increment(node: Any) -> int:
    node_type = node.type
    if node_type == "binary_expression":
        operator = node.child_by_field_name("operator")
        return 1 if operator is not None and operator.type in _SHORT_CIRCUIT_OPERATORS else 0
    if node_type == "let_chain":
        # `if let Some(x) = a && b` joins its conditions with bare tokens
        return sum(1 for child in node.children if child.type in _SHORT_CIRCUIT_OPERATORS)
    return _DECISION_POINTS.get(node_type, 0)


def compute_complexity(body: Any) -> int:
    """Return the cyclomatic complexity (>= 1) of a function body node.

    Args:
        body: The function's body block, or None for a missing body.
    """
    complexity = 1
    if body is None:
        return complexity

    stack = list(body.named_children)
    while stack:
        node = stack.pop()
        if node.type in _NESTED_ITEMS:
            continue
        complexity += _increment(node)
        stack.extend(node.named_children)
    return complexity
