# voxscene

Voxel grids, palettes, signed distance fields, frame animations and scene
graphs in pure Python, following the conventions of MagicaVoxel worlds. It has
no dependencies outside the standard library.

## Modules

- `voxscene.voxel`: `Voxel` (palette index 1-255, `Voxel.EMPTY` is `Voxel(0)`)
  and `RawVoxel` (stored index 0-254, `RawVoxel.EMPTY` is `RawVoxel(255)`),
  converted with `Voxel.to_raw()` and `RawVoxel.to_voxel()`.
- `voxscene.settings`: `VoxLoaderSettings` (voxel size, outer-face padding,
  mesh offset, emission strength, sRGB, diffuse roughness, remeshing) and
  `UnitOffset` with `ZERO`, `CENTER` and `CENTER_BASE`.
- `voxscene.data`: `VoxelData`, a padded voxel grid. It converts between local
  space and voxel space, reads and writes voxels (raising `OutOfBoundsError`
  outside the model), converts left-handed Z-up voxels with
  `VoxelData.from_model`, classifies voxels with `visible_voxels` and extracts
  cloud densities with `cloud_voxels`. `create_cloud_image` packs densities
  into a `CloudImage` of little-endian 32-bit floats.
- `voxscene.sdf`: `SDF` with `sphere`, `cuboid`, `add`, `subtract`,
  `intersect`, `translate`, `rotate`, `warp` and `distort`, sampled into
  `VoxelData` by `map_to_voxels` or `voxelize`; `Quat` for rotations.
- `voxscene.palette`: `Color`, `VoxelElement`, `MaterialProperty` and
  `VoxelPalette` (`from_colors`, `from_gradient`, `from_materials`).
  `VoxelPalette.create_material()` returns a `Material` whose `Texture`s hold
  the raw colour, emission, metallic/roughness and transmission bytes.
- `voxscene.model`: `VoxelModel`, `create_voxel_model` and
  `create_voxel_animation`, which return `ModelBuild`s carrying the model, its
  classified voxels, average index of refraction, material and cloud image.
- `voxscene.modify`: `VoxelRegion`, `clamp_region` and `modify_voxels`.
- `voxscene.animation`: `VoxelAnimationPlayer`, `AnimationUpdate` and
  `frame_visibilities`.
- `voxscene.scene`: `TransformNode`, `GroupNode`, `ShapeNode`, `LayerInfo`,
  `find_model_names`, `parse_scene_graph` (which builds a tree of
  `SceneEntity` plus a sub-scene for every named node) and `find_instances`
  (which yields a `VoxelInstanceReady` for every model instance).

## Install

```
pip install voxscene
```

## Examples

Generate voxels from a signed distance field and query them:

```python
from voxscene.sdf import SDF
from voxscene.settings import VoxLoaderSettings
from voxscene.voxel import Voxel

data = (
    SDF.cuboid((2.0, 2.0, 2.0))
    .subtract(SDF.sphere(2.5))
    .voxelize((6, 6, 6), VoxLoaderSettings(), Voxel(1))
)
print(data.size())                      # (6, 6, 6)
print(data.get_voxel_at_point((0, 0, 0)))
```

Build a model against a palette and edit it:

```python
from voxscene.model import create_voxel_model
from voxscene.modify import VoxelRegion, modify_voxels
from voxscene.palette import Color, VoxelPalette

palette = VoxelPalette.from_colors([Color.linear_rgba(0.0, 0.5, 0.5, 1.0)])
build = create_voxel_model(data, "box", palette)
print(build.model.has_mesh)             # True

modify_voxels(data, lambda pos, voxel, model: Voxel(7), VoxelRegion((2, 2, 2), (1, 1, 1)))
print(data.get_voxel_at_point((2, 2, 2)))  # Voxel(value=7)
```

Play an animation:

```python
from voxscene.animation import VoxelAnimationPlayer

player = VoxelAnimationPlayer(frames=[0, 1, 2, 3], frame_rate=0.001)
print(player.advance(0.002).frame)      # 1
```

Arrange models in a scene graph:

```python
from voxscene.scene import (
    GroupNode, LayerInfo, ShapeNode, TransformNode,
    find_instances, find_model_names, parse_scene_graph,
)

graph = [
    TransformNode(attributes={"_name": "root"}, child=1),
    GroupNode(children=[2]),
    TransformNode(attributes={"_name": "box"}, frames=[{"_t": "1 2 3"}], child=3, layer_id=0),
    ShapeNode(models=[0]),
]
print(find_model_names(1, graph))       # ['root/box']
scene, subscenes = parse_scene_graph(graph, graph[0], [build.model], [LayerInfo("ground")], 1.0)
print([event.model_name for event in find_instances(scene)])  # ['root/box']
print(sorted(subscenes))                # ['root/box']
```

## What it does not do

- It does not read or write `.vox` files; scene nodes, voxels, palette colours
  and material properties are supplied as Python values.
- It does not build triangle meshes. `visible_voxels` classifies voxels for
  meshing, and scene entities refer to meshes, materials and cloud images only
  by label strings such as `"box@mesh"`.
- It does not render anything: materials and textures are plain data, and
  there is no window, camera or engine integration.

## Running the tests

```
pip install -e ".[test]"
pytest
```