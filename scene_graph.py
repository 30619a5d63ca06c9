# scene_graph.py
import numpy as np
from typing import Iterator, List, Optional, Tuple

def rotation_x(angle_rad: float) -> np.ndarray:
    c, s = np.cos(angle_rad), np.sin(angle_rad)
    return np.array([[1.0, 0.0, 0.0],
                     [0.0, c, -s],
                     [0.0, s, c]])

def rotation_y(angle_rad: float) -> np.ndarray:
    c, s = np.cos(angle_rad), np.sin(angle_rad)
    return np.array([[c, 0.0, s],
                     [0.0, 1.0, 0.0],
                     [-s, 0.0, c]])

def rotation_z(angle_rad: float) -> np.ndarray:
    c, s = np.cos(angle_rad), np.sin(angle_rad)
    return np.array([[c, -s, 0.0],
                     [s, c, 0.0],
                     [0.0, 0.0, 1.0]])

def euler_to_matrix(rotation: np.ndarray) -> np.ndarray:
    """Rotation matrix for Euler angles applied in XYZ order (R = Rx @ Ry @ Rz)."""
    return rotation_x(rotation[0]) @ rotation_y(rotation[1]) @ rotation_z(rotation[2])


class SceneNode:
    """A transform node in the retained-mode scene.

    Each node has a local position and an Euler XYZ rotation relative to its
    parent. World transforms compose from the root down, so a planet mesh
    placed on its orbit in local XZ coordinates is tilted by the inclination
    carried on its container node, and by the scene tilt carried on the root.

    Attributes:
        name (str): Label used in logs and for lookups.
        position (np.ndarray): Local translation [x, y, z].
        rotation (np.ndarray): Local Euler angles [rx, ry, rz] in radians.
        children (List[SceneNode]): Child nodes, drawn with this node's transform.
        parent (SceneNode | None): Owning node, or None for a root.
        visible (bool): Hidden nodes and their subtrees are skipped by the renderer.
    """
    def __init__(self, name: str = "node"):
        self.name = name
        self.position = np.zeros(3, dtype=np.float64)
        self.rotation = np.zeros(3, dtype=np.float64)
        self.children: List['SceneNode'] = []
        self.parent: Optional['SceneNode'] = None
        self.visible = True

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r}, children={len(self.children)})"

    def add(self, child: 'SceneNode') -> 'SceneNode':
        if child is self:
            raise ValueError(f"Scene node '{self.name}' cannot be its own child.")
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: 'SceneNode'):
        if child in self.children:
            self.children.remove(child)
            child.parent = None

    def local_rotation(self) -> np.ndarray:
        return euler_to_matrix(self.rotation)

    def world_transform(self) -> Tuple[np.ndarray, np.ndarray]:
        """Returns (R, t) such that world = R @ local + t for points in this node's frame."""
        rot = self.local_rotation()
        trans = self.position.copy()
        node = self.parent
        while node is not None:
            parent_rot = node.local_rotation()
            trans = parent_rot @ trans + node.position
            rot = parent_rot @ rot
            node = node.parent
        return rot, trans

    def world_position(self) -> np.ndarray:
        if self.parent is None:
            return self.position.copy()
        rot, trans = self.parent.world_transform()
        return rot @ self.position + trans

    def to_world(self, points: np.ndarray) -> np.ndarray:
        """Transforms an (N, 3) array of points from this node's frame to world space."""
        rot, trans = self.world_transform()
        return np.asarray(points, dtype=np.float64) @ rot.T + trans

    def traverse(self, visible_only: bool = False) -> Iterator['SceneNode']:
        if visible_only and not self.visible:
            return
        yield self
        for child in self.children:
            yield from child.traverse(visible_only)

    def find(self, name: str) -> Optional['SceneNode']:
        for node in self.traverse():
            if node.name == name:
                return node
        return None


class MeshNode(SceneNode):
    """A sphere mesh. `texture` stays None until a loader resolves `texture_path`."""
    def __init__(self, name: str, radius: float, color: Tuple[int, int, int],
                 texture_path: Optional[str] = None, lit: bool = True):
        super().__init__(name)
        self.radius = float(radius)
        self.color = tuple(color)
        self.texture_path = texture_path
        self.texture = None
        self.lit = lit


class LineNode(SceneNode):
    """A polyline in the node's local frame, e.g. an orbit track."""
    def __init__(self, name: str, points: np.ndarray, color: Tuple[int, int, int], closed: bool = False):
        super().__init__(name)
        self.points = np.asarray(points, dtype=np.float64)
        self.color = tuple(color)
        self.closed = closed


class PointsNode(SceneNode):
    """A static point cloud with one RGB colour (floats in [0, 1]) per point."""
    def __init__(self, name: str, positions: np.ndarray, colors: np.ndarray, size: float = 0.2):
        super().__init__(name)
        self.positions = np.asarray(positions, dtype=np.float64)
        self.colors = np.asarray(colors, dtype=np.float64)
        self.size = float(size)
        if self.positions.shape != self.colors.shape:
            raise ValueError(
                f"PointsNode '{name}' needs one colour per position "
                f"(positions {self.positions.shape}, colors {self.colors.shape})."
            )
