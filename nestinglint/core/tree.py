"""
Syntax tree representation consumed by the analyzer.

The analyzer never parses source text. A tree provider builds SyntaxNode
trees, either directly or from a serialized tree document:

```json
{
  "name": "src/lib.rs",
  "imports": [{"name": "yew::html", "alias": "h"}],
  "root": {
    "kind": "Other",
    "span": [1, 0, 12, 1],
    "children": [
      {"kind": "Block", "span": [1, 10, 12, 1], "children": []}
    ]
  }
}
```
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional
import json

import yaml

from nestinglint.core.findings import Span
from nestinglint.exceptions import TraversalError, TreeFormatError


class NodeKind(Enum):
    """Closed set of node kinds the walker distinguishes."""
    BLOCK = "Block"
    IF = "If"
    ELSE_IF = "ElseIf"
    ELSE = "Else"
    MATCH_ARM = "MatchArm"
    CLOSURE = "Closure"
    MACRO_INVOCATION = "MacroInvocation"
    OTHER = "Other"


# Kinds that may continue a conditional chain as an else-link
ELSE_LINK_KINDS = (NodeKind.ELSE_IF, NodeKind.ELSE, NodeKind.IF)

# Kinds that carry a test and a then-body
CONDITIONAL_KINDS = (NodeKind.IF, NodeKind.ELSE_IF)


@dataclass(frozen=True, eq=False)
class SyntaxNode:
    """
    A node in a parsed tree.

    Attributes are frozen once the node is built. Nodes compare by identity,
    so the same subtree reached twice is recognised as the same node.
    """
    kind: NodeKind
    span: Span = field(default_factory=Span)
    children: List["SyntaxNode"] = field(default_factory=list)
    invoked_name: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.kind, str):
            object.__setattr__(self, "kind", NodeKind(self.kind))
        if self.kind is NodeKind.MACRO_INVOCATION and not self.invoked_name:
            raise ValueError("MacroInvocation nodes need an invoked_name")

    def __repr__(self) -> str:
        name = f", invoked_name={self.invoked_name!r}" if self.invoked_name else ""
        return f"SyntaxNode(kind={self.kind.value}{name}, span={self.span})"

    @property
    def then_body(self) -> Optional["SyntaxNode"]:
        """The block run when this conditional's test holds."""
        if self.kind not in CONDITIONAL_KINDS:
            return None
        for child in self.children:
            if child.kind is NodeKind.BLOCK:
                return child
        return None

    @property
    def else_branch(self) -> Optional["SyntaxNode"]:
        """The next link of a conditional chain, if any."""
        if self.kind not in CONDITIONAL_KINDS or len(self.children) < 2:
            return None
        # the else-link always follows the then-body
        body = self.then_body
        last = self.children[-1]
        if body is None or last is body or last.kind not in ELSE_LINK_KINDS:
            return None
        return last

    @classmethod
    def from_dict(cls, data: Dict[str, Any], file: str = "") -> "SyntaxNode":
        """Create a node and its subtree from a dictionary."""
        if not isinstance(data, dict):
            raise TreeFormatError(f"expected a node object, got {type(data).__name__}")
        try:
            kind = NodeKind(data["kind"])
        except KeyError:
            raise TreeFormatError("node without a kind") from None
        except ValueError:
            raise TreeFormatError(f"unknown node kind: {data['kind']!r}") from None
        try:
            span = Span.from_value(data.get("span"), file=file)
        except (TypeError, ValueError) as e:
            raise TreeFormatError(f"bad span on {kind.value} node: {e}") from e
        children = data.get("children") or []
        if not isinstance(children, list):
            raise TreeFormatError(f"children of {kind.value} node must be a list")
        try:
            return cls(
                kind=kind,
                span=span,
                children=[cls.from_dict(child, file=file) for child in children],
                invoked_name=data.get("invoked_name"),
            )
        except ValueError as e:
            raise TreeFormatError(f"{e} (at {span})") from e

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "kind": self.kind.value,
            "span": [self.span.start_line, self.span.start_column,
                     self.span.end_line, self.span.end_column],
        }
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        if self.invoked_name:
            result["invoked_name"] = self.invoked_name
        return result


def iter_chain(root: SyntaxNode) -> Iterator[SyntaxNode]:
    """
    Yield the links of a conditional chain, starting with ``root``.

    Raises TraversalError if the chain leads back to one of its own links.
    """
    seen = set()
    link: Optional[SyntaxNode] = root
    while link is not None:
        if id(link) in seen:
            raise TraversalError("conditional chain loops back on itself", link.span)
        seen.add(id(link))
        yield link
        link = link.else_branch


@dataclass(frozen=True)
class MacroImport:
    """
    One import or aliasing statement that makes a macro visible locally.

    ``name`` is the imported path as written (``yew::html``); ``alias`` is the
    local rename, if any.
    """
    name: str
    alias: Optional[str] = None

    @property
    def original_name(self) -> str:
        """Bare identifier of the imported macro."""
        for separator in ("::", "."):
            if separator in self.name:
                return self.name.rsplit(separator, 1)[1]
        return self.name

    @property
    def local_name(self) -> str:
        """Name the macro is invoked by in this unit."""
        return self.alias or self.original_name


@dataclass
class CompilationUnit:
    """A syntax tree plus the unit's macro imports."""
    name: str
    root: SyntaxNode
    imports: List[MacroImport] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_name: str = "<unit>") -> "CompilationUnit":
        if not isinstance(data, dict):
            raise TreeFormatError("expected a unit object")
        if "root" not in data:
            raise TreeFormatError("unit without a root node")
        name = data.get("name") or default_name
        imports = []
        for entry in data.get("imports") or []:
            if isinstance(entry, str):
                imports.append(MacroImport(name=entry))
            elif isinstance(entry, dict) and isinstance(entry.get("name"), str):
                imports.append(MacroImport(name=entry["name"], alias=entry.get("alias")))
            else:
                raise TreeFormatError(f"bad import entry: {entry!r}")
        return cls(
            name=name,
            root=SyntaxNode.from_dict(data["root"], file=name),
            imports=imports,
        )


def load_unit(path: str) -> CompilationUnit:
    """
    Load a compilation unit from a JSON or YAML tree document.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Tree document not found: {path}")

    content = path.read_text(encoding="utf-8")

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise TreeFormatError(f"cannot parse {path}: {e}") from e

    return CompilationUnit.from_dict(data, default_name=str(path))
