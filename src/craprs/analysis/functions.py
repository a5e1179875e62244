"""Function inventory extraction from Rust syntax trees.

Walks a tree-sitter tree and produces one ``FunctionRecord`` per named
function: free functions, ``impl`` methods, trait default methods and
functions declared inside other function bodies. Closures are never records;
their bodies belong to the enclosing function (see ``complexity``).

Scope is tracked with an explicit stack of name segments:

    src/net/mod.rs          -> ("net",)
    mod wire { ... }        -> ("net", "wire")
    impl Frame { ... }      -> ("net", "wire", "Frame")
    fn decode() { fn hex() } -> hex has scope ("net", "wire", "Frame", "decode")

Test-only code (``#[test]``, ``#[cfg(test)]`` on an item, ``#![cfg(test)]``
inside a module) is flagged, and everything lexically inside it inherits
the flag regardless of its own attributes.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from craprs.analysis.parser import ParseResult

# Siblings that may sit between an item and its outer attributes
_ATTRIBUTE_RUN = frozenset({"attribute_item", "line_comment", "block_comment"})

_UNNAMED_IMPL = "<impl>"


@dataclass(frozen=True, slots=True)
class FunctionRecord:
    """A named function located in one source file.

    Lines are 1-based and inclusive: ``start_line`` is the line of the
    function's name, ``end_line`` the line of its body's closing brace.
    """

    name: str
    scope: tuple[str, ...]
    file_path: str
    start_line: int
    end_line: int
    is_test: bool = False
    body: Any = field(default=None, compare=False, repr=False)  # Tree-sitter Node

    @property
    def qualified_scope(self) -> str:
        return "::".join(self.scope)

    @property
    def qualified_name(self) -> str:
        return "::".join((*self.scope, self.name))


def _text(node: Any) -> str:
    return node.text.decode("utf-8", errors="replace")


def _attribute_path(attr_item: Any) -> tuple[str, Any]:
    """Return (path text, arguments token tree or None) of an attribute item."""
    for child in attr_item.named_children:
        if child.type == "attribute":
            path = child.named_children[0] if child.named_children else None
            if path is None:
                return "", None
            return _text(path), child.child_by_field_name("arguments")
    return "", None


def _is_test_attribute(attr_item: Any) -> bool:
    path, _ = _attribute_path(attr_item)
    return path == "test" or path.endswith("::test")


def _is_cfg_test_attribute(attr_item: Any) -> bool:
    """``cfg(test)`` only; ``cfg(not(test))`` and ``cfg(all(test, ..))`` do not count."""
    path, arguments = _attribute_path(attr_item)
    if path != "cfg" or arguments is None:
        return False
    return any(
        child.type == "identifier" and _text(child) == "test" for child in arguments.children
    )


def _outer_attributes(node: Any) -> list[Any]:
    attrs: list[Any] = []
    sibling = node.prev_sibling
    while sibling is not None and sibling.type in _ATTRIBUTE_RUN:
        if sibling.type == "attribute_item":
            attrs.append(sibling)
        sibling = sibling.prev_sibling
    return attrs


def _has_test_marker(node: Any) -> bool:
    return any(
        _is_test_attribute(attr) or _is_cfg_test_attribute(attr)
        for attr in _outer_attributes(node)
    )


def _has_inner_cfg_test(container: Any) -> bool:
    """Check for ``#![cfg(test)]`` directly inside a file or module body."""
    return any(
        child.type == "inner_attribute_item" and _is_cfg_test_attribute(child)
        for child in container.named_children
    )


def _type_name(node: Any) -> str:
    """Name of an implementing type: ``Foo<T>`` -> ``Foo``, ``&a::Foo`` -> ``a::Foo``."""
    if node is None:
        return _UNNAMED_IMPL
    if node.type in ("type_identifier", "scoped_type_identifier", "primitive_type"):
        return _text(node)
    if node.type in ("generic_type", "reference_type"):
        return _type_name(node.child_by_field_name("type"))
    return _UNNAMED_IMPL


class FunctionExtractor:
    """Collects FunctionRecords from one file's syntax tree.

    Item nodes are dispatched through a fixed handler table; every other
    node is only searched for nested items.
    """

    def __init__(self, file_path: str, module_path: Sequence[str] = ()) -> None:
        self.file_path = file_path
        self.scope: list[str] = [segment for segment in module_path if segment]
        self.records: list[FunctionRecord] = []
        self._handlers: dict[str, Callable[[Any, bool], None]] = {
            "function_item": self._visit_function,
            "impl_item": self._visit_impl,
            "trait_item": self._visit_trait,
            "mod_item": self._visit_mod,
        }

    def visit_root(self, root: Any) -> list[FunctionRecord]:
        self._visit_children(root, _has_inner_cfg_test(root))
        return self.records

    def _visit_children(self, node: Any, in_test: bool) -> None:
        """Dispatch item descendants of ``node`` in source order."""
        stack = list(reversed(node.named_children))
        while stack:
            child = stack.pop()
            handler = self._handlers.get(child.type)
            if handler is not None:
                handler(child, in_test)
            else:
                stack.extend(reversed(child.named_children))

    def _visit_scoped(self, name: str, body: Any, in_test: bool) -> None:
        self.scope.append(name)
        try:
            self._visit_children(body, in_test)
        finally:
            self.scope.pop()

    def _visit_function(self, node: Any, in_test: bool) -> None:
        name_node = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        if name_node is None or body is None:
            return

        is_test = in_test or _has_test_marker(node)
        name = _text(name_node)
        self.records.append(
            FunctionRecord(
                name=name,
                scope=tuple(self.scope),
                file_path=self.file_path,
                start_line=name_node.start_point[0] + 1,
                end_line=body.end_point[0] + 1,
                is_test=is_test,
                body=body,
            )
        )
        self._visit_scoped(name, body, is_test)

    def _visit_impl(self, node: Any, in_test: bool) -> None:
        body = node.child_by_field_name("body")
        if body is None:
            return
        is_test = in_test or _has_test_marker(node)
        self._visit_scoped(_type_name(node.child_by_field_name("type")), body, is_test)

    def _visit_trait(self, node: Any, in_test: bool) -> None:
        name_node = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        if name_node is None or body is None:
            return
        is_test = in_test or _has_test_marker(node)
        self._visit_scoped(_text(name_node), body, is_test)

    def _visit_mod(self, node: Any, in_test: bool) -> None:
        name_node = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        # `mod foo;` lives in its own file and is analyzed from there
        if name_node is None or body is None:
            return
        is_test = in_test or _has_test_marker(node) or _has_inner_cfg_test(body)
        self._visit_scoped(_text(name_node), body, is_test)


def extract_functions(
    result: ParseResult,
    *,
    file_path: str,
    module_path: Sequence[str] = (),
    include_tests: bool = False,
) -> list[FunctionRecord]:
    """Extract the function inventory of one parsed file.

    Args:
        result: Parsed file.
        file_path: Identity of the file, stored on every record.
        module_path: Module segments the file itself lives under.
        include_tests: Keep test-only functions (flagged ``is_test``).

    Returns:
        Records in source order.
    """
    records = FunctionExtractor(file_path, module_path).visit_root(result.root_node)
    if include_tests:
        return records
    return [record for record in records if not record.is_test]
