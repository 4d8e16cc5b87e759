"""Scene graphs of voxel models: naming, hierarchy and instance discovery."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional, Sequence, Union

from .animation import VoxelAnimationPlayer
from .model import VoxelModel

logger = logging.getLogger(__name__)

Vec3 = tuple[float, float, float]


@dataclass
class TransformNode:
    """A node that places its single child, with optional name and visibility."""

    attributes: dict[str, str] = field(default_factory=dict)
    frames: list[dict[str, str]] = field(default_factory=list)
    child: int = 0
    layer_id: int = -1


@dataclass
class GroupNode:
    """A node that holds several children, each normally a transform node."""

    children: list[int] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)


@dataclass
class ShapeNode:
    """A node referencing one model, or several models played as an animation."""

    models: list[int] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)


SceneNode = Union[TransformNode, GroupNode, ShapeNode]


@dataclass(frozen=True)
class LayerInfo:
    """A layer of the scene, with an optional name."""

    name: Optional[str] = None
    is_hidden: bool = False


@dataclass
class SceneEntity:
    """One entity in a built scene, with its components and children."""

    name: Optional[str] = None
    layer_id: Optional[int] = None
    layer_name: Optional[str] = None
    visible: bool = True
    translation: Vec3 = (0.0, 0.0, 0.0)
    model: Optional[VoxelModel] = None
    mesh_label: Optional[str] = None
    material_label: Optional[str] = None
    cloud_label: Optional[str] = None
    fog_scale: Optional[Vec3] = None
    animation_player: Optional[VoxelAnimationPlayer] = None
    animation_frame: Optional[int] = None
    children: list[SceneEntity] = field(default_factory=list)


@dataclass(frozen=True)
class VoxelInstanceReady:
    """Reported once for each entity in a scene that instances a model."""

    instance: SceneEntity
    model_name: Optional[str]
    layer_name: Optional[str]


def accumulated_and_node_name(
    parent_name: Optional[str], node_name: Optional[str]
) -> tuple[Optional[str], Optional[str]]:
    """Return the name passed down to children and the name of this node.

    A parent's name passes down through unnamed children; named children of a
    named parent are called ``parent/child``.
    """
    if parent_name is None:
        return node_name, node_name
    if node_name is None:
        return parent_name, None
    accumulated = f"{parent_name}/{node_name}"
    return accumulated, accumulated


def parse_bool(value: Optional[str]) -> bool:
    """Parse a ``"1"``/``"0"`` attribute; anything else counts as false."""
    if value is None or value == "0":
        return False
    if value == "1":
        return True
    logger.warning("Invalid boolean string: %r", value)
    return False


def position_from_frame(frame: Mapping[str, str], scene_scale: float) -> Vec3:
    """Translation of a frame, converted to right-handed Y-up space and scaled.

    A frame without a readable ``_t`` attribute has no translation.
    """
    raw = frame.get("_t")
    if raw is None:
        return (0.0, 0.0, 0.0)
    try:
        x, y, z = (int(part) for part in raw.split())
    except ValueError:
        logger.warning("Invalid frame position: %r", raw)
        return (0.0, 0.0, 0.0)
    return (-x * scene_scale, z * scene_scale, y * scene_scale)


def _node_at(graph: Sequence[SceneNode], index: int) -> SceneNode:
    if not 0 <= index < len(graph):
        raise ValueError(f"scene graph has no node {index}")
    return graph[index]


def find_model_names(model_count: int, graph: Sequence[SceneNode]) -> list[Optional[str]]:
    """Name each model after the node that instances it, starting at the first node.

    Different models that would share a name get ``_0``, ``_1``... appended.
    """
    names: list[Optional[str]] = [None] * model_count
    if not graph:
        return names

    def visit(node: SceneNode, parent_name: Optional[str]) -> None:
        if not isinstance(node, TransformNode):
            return
        accumulated, node_name = accumulated_and_node_name(
            parent_name, node.attributes.get("_name")
        )
        child = _node_at(graph, node.child)
        if isinstance(child, GroupNode):
            for grandchild in child.children:
                visit(_node_at(graph, grandchild), accumulated)
        elif isinstance(child, ShapeNode) and child.models and node_name is not None:
            model_id = child.models[0]
            if not 0 <= model_id < model_count:
                raise ValueError(f"shape references missing model {model_id}")
            others = names[:model_id] + names[model_id + 1:]
            candidate = node_name
            disambiguator = 0
            while candidate in others:
                candidate = f"{node_name}_{disambiguator}"
                disambiguator += 1
            names[model_id] = candidate

    visit(graph[0], None)
    return names


@dataclass
class _SceneBuilder:
    graph: Sequence[SceneNode]
    models: Sequence[VoxelModel]
    layers: Sequence[LayerInfo]
    scene_scale: float
    subscenes: dict[str, SceneEntity] = field(default_factory=dict)

    def _layer(self, layer_id: int) -> Optional[LayerInfo]:
        if 0 <= layer_id < len(self.layers):
            return self.layers[layer_id]
        return None

    def _model(self, model_id: int) -> VoxelModel:
        if not 0 <= model_id < len(self.models):
            raise ValueError(f"shape references missing model {model_id}")
        return self.models[model_id]

    def transform(
        self, node: TransformNode, parent_name: Optional[str], is_root: bool
    ) -> SceneEntity:
        accumulated, node_name = accumulated_and_node_name(
            parent_name, node.attributes.get("_name")
        )
        entity = SceneEntity(name=node_name)
        layer = self._layer(node.layer_id)
        if layer is not None:
            entity.layer_id = node.layer_id
            entity.layer_name = layer.name
        node_hidden = parse_bool(node.attributes.get("_hidden"))
        entity.visible = not (node_hidden or (layer is not None and layer.is_hidden))
        self.child(_node_at(self.graph, node.child), entity, accumulated)
        if not is_root:
            frame = node.frames[0] if node.frames else {}
            entity.translation = position_from_frame(frame, self.scene_scale)
            if node_name is not None and node_name not in self.subscenes:
                self.subscenes[node_name] = self.transform(node, parent_name, True)
        return entity

    def node(self, node: SceneNode, parent_name: Optional[str]) -> SceneEntity:
        if isinstance(node, TransformNode):
            return self.transform(node, parent_name, False)
        logger.warning("Found Group or Shape Node without a parent Transform")
        entity = SceneEntity()
        self.child(node, entity, parent_name)
        return entity

    def child(self, node: SceneNode, entity: SceneEntity, parent_name: Optional[str]) -> None:
        if isinstance(node, TransformNode):
            logger.warning("Found nested Transform nodes")
            entity.children.append(self.node(node, parent_name))
        elif isinstance(node, GroupNode):
            entity.children.extend(
                self.node(_node_at(self.graph, index), parent_name) for index in node.children
            )
        elif len(node.models) == 1:
            self._attach_model(entity, self._model(node.models[0]))
        elif len(node.models) > 1:
            entity.animation_player = VoxelAnimationPlayer(
                frames=list(range(len(node.models)))
            )
            for index, model_id in enumerate(node.models):
                frame = SceneEntity(animation_frame=index, visible=index == 0)
                self._attach_model(frame, self._model(model_id))
                entity.children.append(frame)

    @staticmethod
    def _attach_model(entity: SceneEntity, model: VoxelModel) -> None:
        entity.model = model
        if model.has_mesh:
            entity.mesh_label = f"{model.name}@mesh"
            entity.material_label = f"{model.name}@material"
        if model.has_cloud:
            entity.children.append(
                SceneEntity(
                    cloud_label=f"{model.name}@cloud-image",
                    fog_scale=model.model_size(),
                )
            )


def parse_scene_graph(
    graph: Sequence[SceneNode],
    root: SceneNode,
    models: Sequence[VoxelModel],
    layers: Sequence[LayerInfo],
    scene_scale: float,
) -> tuple[SceneEntity, dict[str, SceneEntity]]:
    """Build the scene rooted at ``root`` and a sub-scene for every named node.

    The root keeps an identity transform. Sub-scenes are keyed by the node's
    full slash-separated name; the first node with a given name wins.
    """
    builder = _SceneBuilder(graph, models, layers, scene_scale)
    if not isinstance(root, TransformNode):
        return SceneEntity(), builder.subscenes
    scene = builder.transform(root, None, True)
    return scene, builder.subscenes


def find_instances(root: SceneEntity) -> Iterator[VoxelInstanceReady]:
    """Yield an event for every model instance in the scene, depth first."""
    if root.model is not None:
        yield VoxelInstanceReady(
            instance=root, model_name=root.name, layer_name=root.layer_name
        )
    for child in root.children:
        yield from find_instances(child)