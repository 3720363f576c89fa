"""声明式结构描述（ExtractionSchema）与校验。

结构以数据的形式描述，而不是为每种输出写死一个类：
每个节点是一个带 kind 标签的 SchemaNode，kind 取值为
string / enum / array / object，并附带对应的约束。

同一个描述既可以翻译成 Provider 的 response schema，
也可以用来校验模型返回的 JSON。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, List, Literal, Mapping, Optional, Tuple

from career_core.domain.exceptions import SchemaViolationError


SchemaKind = Literal["string", "enum", "array", "object"]


@dataclass(frozen=True)
class SchemaNode:
    """结构描述中的一个节点。

    - values: enum 节点允许的取值。
    - items: array 节点的元素结构。
    - fields: object 节点的字段，保持声明顺序。
    - required: object 节点的必填字段名集合。
    """

    kind: SchemaKind
    description: str = ""
    values: Tuple[str, ...] = ()
    items: Optional["SchemaNode"] = None
    fields: Tuple[Tuple[str, "SchemaNode"], ...] = ()
    required: FrozenSet[str] = frozenset()

    @property
    def properties(self) -> Dict[str, "SchemaNode"]:
        return dict(self.fields)


def string(description: str = "") -> SchemaNode:
    return SchemaNode(kind="string", description=description)


def enum_of(values: Iterable[str], description: str = "") -> SchemaNode:
    vals = tuple(values)
    if not vals:
        raise ValueError("enum node needs at least one value")
    return SchemaNode(kind="enum", description=description, values=vals)


def array_of(items: SchemaNode, description: str = "") -> SchemaNode:
    return SchemaNode(kind="array", description=description, items=items)


def object_of(
    fields: Mapping[str, SchemaNode],
    required: Optional[Iterable[str]] = None,
    description: str = "",
) -> SchemaNode:
    """构造 object 节点；未指定 required 时所有字段都必填。"""

    pairs = tuple(fields.items())
    names = {name for name, _ in pairs}
    req = frozenset(names if required is None else required)
    unknown = req - names
    if unknown:
        raise ValueError(f"required fields not declared: {sorted(unknown)}")
    return SchemaNode(kind="object", description=description, fields=pairs, required=req)


def validate(node: SchemaNode, value: Any, path: str = "$") -> Any:
    """按结构校验 value，返回只包含已声明字段的新结构。

    校验失败抛出 SchemaViolationError，错误信息中包含 JSON 路径。
    入参不会被修改。
    """

    if node.kind == "string":
        if not isinstance(value, str):
            raise _violation(path, f"expected string, got {type(value).__name__}")
        return value

    if node.kind == "enum":
        if not isinstance(value, str):
            raise _violation(path, f"expected enum string, got {type(value).__name__}")
        if value not in node.values:
            raise _violation(path, f"{value!r} not in {list(node.values)}")
        return value

    if node.kind == "array":
        if not isinstance(value, list):
            raise _violation(path, f"expected array, got {type(value).__name__}")
        if node.items is None:
            raise _violation(path, "array node declares no item schema")
        return [validate(node.items, item, f"{path}[{i}]") for i, item in enumerate(value)]

    if node.kind == "object":
        if not isinstance(value, dict):
            raise _violation(path, f"expected object, got {type(value).__name__}")
        missing = sorted(name for name in node.required if name not in value)
        if missing:
            raise _violation(path, f"missing required fields {missing}")
        out: Dict[str, Any] = {}
        for name, child in node.fields:
            if name in value:
                out[name] = validate(child, value[name], f"{path}.{name}")
        return out

    raise _violation(path, f"unknown schema kind {node.kind!r}")


def to_provider_schema(node: SchemaNode) -> Dict[str, Any]:
    """翻译为 Gemini responseSchema（OpenAPI 子集）格式。"""

    out: Dict[str, Any]
    if node.kind == "string":
        out = {"type": "STRING"}
    elif node.kind == "enum":
        out = {"type": "STRING", "enum": list(node.values)}
    elif node.kind == "array":
        if node.items is None:
            raise ValueError("array node declares no item schema")
        out = {"type": "ARRAY", "items": to_provider_schema(node.items)}
    else:
        names: List[str] = [name for name, _ in node.fields]
        out = {
            "type": "OBJECT",
            "properties": {name: to_provider_schema(child) for name, child in node.fields},
            "required": [name for name in names if name in node.required],
            "propertyOrdering": names,
        }
    if node.description:
        out["description"] = node.description
    return out


def _violation(path: str, detail: str) -> SchemaViolationError:
    return SchemaViolationError(code="SCHEMA_VIOLATION", message=f"{path}: {detail}", path=path)
