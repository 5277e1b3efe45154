from __future__ import annotations

from typing import Any, Literal, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

Contain = Literal["none", "width", "both"]
TextRenderer = Literal["canvas", "sdf"]
NodeKind = Literal["node", "text"]


class SceneNode(BaseModel):
    """
    In-memory scene graph entity.

    Holds the creation options of a rendering-engine node as plain,
    validated attributes. Mutations assign to them directly
    (`node.font_family = "Ubuntu"`); every public assignment is counted.
    Nothing is laid out or drawn.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    node_id: int = 0
    kind: NodeKind = "node"

    # geometry
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    mount: float = Field(default=0.0, ge=0.0, le=1.0)
    z_index: int = 0

    # 0xRRGGBBAA
    color: int = Field(default=0xFFFFFFFF, ge=0, le=0xFFFFFFFF)

    # text
    text: str = ""
    font_size: float = Field(default=16.0, gt=0)
    font_family: str = "sans-serif"
    contain: Contain = "none"
    text_renderer_override: Optional[TextRenderer] = None

    parent: Optional[SceneNode] = Field(default=None, exclude=True, repr=False)

    _assignments: int = PrivateAttr(default=0)

    def __setattr__(self, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        if not name.startswith("_"):
            self._assignments += 1

    @property
    def assignments(self) -> int:
        return self._assignments

    def props(self) -> dict[str, Any]:
        return self.model_dump(exclude={"node_id", "kind"})


class RenderingEngine(Protocol):
    """
    The slice of a rendering engine the harness cases rely on.
    """

    @property
    def root(self) -> Any:
        ...

    def create_text_node(self, **options: Any) -> Any:
        ...


class SceneRenderer:
    """
    Headless RenderingEngine: creates SceneNodes and keeps them in
    creation order. Unknown or invalid options raise pydantic's
    ValidationError.
    """

    def __init__(self, *, width: float = 1920, height: float = 1080) -> None:
        self._nodes: list[SceneNode] = []
        self._root = self._register(SceneNode(kind="node", width=width, height=height, color=0x00000000))

    @property
    def root(self) -> SceneNode:
        return self._root

    @property
    def nodes(self) -> tuple[SceneNode, ...]:
        return tuple(self._nodes)

    def create_node(self, **options: Any) -> SceneNode:
        options.setdefault("parent", self._root)
        return self._register(SceneNode(kind="node", **options))

    def create_text_node(self, **options: Any) -> SceneNode:
        options.setdefault("parent", self._root)
        return self._register(SceneNode(kind="text", **options))

    def children_of(self, node: SceneNode) -> list[SceneNode]:
        """
        Direct children in paint order (z_index, then creation order).
        """
        kids = [n for n in self._nodes if n.parent is node]
        return sorted(kids, key=lambda n: n.z_index)

    def _register(self, node: SceneNode) -> SceneNode:
        # node_id is set through the model so validation still applies
        node.node_id = len(self._nodes)
        node._assignments = 0
        self._nodes.append(node)
        return node
