"""Arena-backed scene graph of shapes and groups.

The graph owns every shape in a flat table keyed by integer identifier.
Hierarchy lives beside the table, not inside the shapes:

    _parents:  child id -> group id     (roots have no entry)
    _children: group id -> [child ids]  (insertion order)
    _roots:    ids without a parent     (ascending id)

so a shape never holds a reference to its parent and walking up the tree
is a dictionary lookup. Identifiers come from a per-graph counter and are
never reused.

Structural edits fail fast with ``SceneGraphError``: a shape can have at
most one parent, only groups can have children, and a group may not be
added below itself or any of its descendants.

Each shape's object-space bounding box is cached. A group's box is the
union of its children's boxes taken through each child's transform and is
recomputed along the ancestor chain whenever a child is added, removed or
re-transformed.

Example:
    >>> from src.tracer.core.matrix import translation
    >>> graph = SceneGraph()
    >>> group = graph.add_group(transform=translation(0, 1, 0))
    >>> ball = graph.add_sphere()
    >>> graph.add_child(group, ball)
    >>> graph.parent_of(ball) == group
    True
"""

import bisect
import logging
from dataclasses import replace
from typing import Any

from src.tracer.core.matrix import IDENTITY, Matrix4
from src.tracer.core.ray import Ray
from src.tracer.core.tuples import Tuple4, normalize
from src.tracer.geometry.bounds import INFINITY, Bounds
from src.tracer.geometry.cube import Cube
from src.tracer.geometry.cylinder import Cone, Cylinder
from src.tracer.geometry.plane import Plane
from src.tracer.geometry.shape import GroupGeometry, Shape, ShapeKind
from src.tracer.geometry.sphere import Sphere
from src.tracer.geometry.triangle import SmoothTriangle, Triangle
from src.tracer.materials.material import Material
from src.tracer.scene.intersection import Intersection

logger = logging.getLogger(__name__)


class SceneGraphError(ValueError):
    """Raised for an invalid structural edit of the scene graph."""


class SceneGraph:
    """Shapes, their parent/child links, and the world/object space mapping.

    Attributes:
        None public; use the query methods. ``len(graph)`` is the number of
        shapes and ``shape_id in graph`` tests membership.
    """

    def __init__(self) -> None:
        self._shapes: dict[int, Shape] = {}
        self._parents: dict[int, int] = {}
        self._children: dict[int, list[int]] = {}
        self._bounds: dict[int, Bounds] = {}
        self._roots: list[int] = []
        self._next_id = 0

    def __len__(self) -> int:
        return len(self._shapes)

    def __contains__(self, shape_id: object) -> bool:
        return shape_id in self._shapes

    # =========================================================================
    # Construction
    # =========================================================================

    def add_shape(
        self,
        kind: ShapeKind,
        geometry: Any,
        transform: Matrix4 | None = None,
        material: Material | None = None,
        casts_shadow: bool = True,
    ) -> int:
        """Add a root shape to the graph.

        Args:
            kind: The shape variant.
            geometry: Parameters matching ``kind`` (e.g. ``Cylinder(...)``).
            transform: Object -> parent space transform. Default identity.
            material: The shape's material. Default ``Material()``.
            casts_shadow: Whether shadow rays are blocked by this shape.

        Returns:
            The new shape's identifier.

        Raises:
            SingularMatrixError: If ``transform`` is not invertible.
            TypeError: If ``geometry`` does not match ``kind``.
        """
        shape_id = self._next_id
        shape = Shape(
            id=shape_id,
            kind=kind,
            geometry=geometry,
            transform=IDENTITY if transform is None else transform,
            material=Material() if material is None else material,
            casts_shadow=casts_shadow,
        )
        self._next_id += 1
        self._shapes[shape_id] = shape
        self._roots.append(shape_id)

        if shape.is_group:
            self._children[shape_id] = []
            self._bounds[shape_id] = Bounds.empty()
        else:
            self._bounds[shape_id] = shape.local_bounds()

        logger.debug("Added %s shape %d", kind.name, shape_id)
        return shape_id

    def add_sphere(self, **kwargs: Any) -> int:
        return self.add_shape(ShapeKind.SPHERE, Sphere(), **kwargs)

    def add_plane(self, **kwargs: Any) -> int:
        return self.add_shape(ShapeKind.PLANE, Plane(), **kwargs)

    def add_cube(self, **kwargs: Any) -> int:
        return self.add_shape(ShapeKind.CUBE, Cube(), **kwargs)

    def add_cylinder(
        self, minimum: float = -INFINITY, maximum: float = INFINITY, closed: bool = False, **kwargs: Any
    ) -> int:
        return self.add_shape(ShapeKind.CYLINDER, Cylinder(minimum, maximum, closed), **kwargs)

    def add_cone(
        self, minimum: float = -INFINITY, maximum: float = INFINITY, closed: bool = False, **kwargs: Any
    ) -> int:
        return self.add_shape(ShapeKind.CONE, Cone(minimum, maximum, closed), **kwargs)

    def add_triangle(self, p1: Tuple4, p2: Tuple4, p3: Tuple4, **kwargs: Any) -> int:
        """Add a flat triangle.

        Raises:
            DegenerateTriangleError: If the vertices are collinear.
        """
        return self.add_shape(ShapeKind.TRIANGLE, Triangle(p1, p2, p3), **kwargs)

    def add_smooth_triangle(
        self,
        p1: Tuple4,
        p2: Tuple4,
        p3: Tuple4,
        n1: Tuple4,
        n2: Tuple4,
        n3: Tuple4,
        **kwargs: Any,
    ) -> int:
        return self.add_shape(ShapeKind.SMOOTH_TRIANGLE, SmoothTriangle(p1, p2, p3, n1, n2, n3), **kwargs)

    def add_group(self, children: tuple[int, ...] = (), **kwargs: Any) -> int:
        """Add a group, optionally adopting existing root shapes as children."""
        group_id = self.add_shape(ShapeKind.GROUP, GroupGeometry(), **kwargs)
        for child_id in children:
            self.add_child(group_id, child_id)
        return group_id

    # =========================================================================
    # Structure
    # =========================================================================

    def _require(self, shape_id: int) -> Shape:
        try:
            return self._shapes[shape_id]
        except KeyError:
            raise SceneGraphError(f"Unknown shape id {shape_id}") from None

    def add_child(self, group_id: int, child_id: int) -> None:
        """Attach a root shape to a group.

        Raises:
            SceneGraphError: If either id is unknown, the parent is not a
                group, the child is the group itself or one of its
                ancestors, or the child already has a parent.
        """
        group = self._require(group_id)
        self._require(child_id)

        if not group.is_group:
            raise SceneGraphError(f"Shape {group_id} is a {group.kind.name}, not a GROUP")
        if child_id == group_id:
            raise SceneGraphError(f"Cannot add group {group_id} to itself")
        if self.is_ancestor(child_id, group_id):
            raise SceneGraphError(f"Adding {child_id} to {group_id} would create a cycle")
        if child_id in self._parents:
            raise SceneGraphError(f"Shape {child_id} already belongs to group {self._parents[child_id]}")

        self._children[group_id].append(child_id)
        self._parents[child_id] = group_id
        self._roots.remove(child_id)
        self._refresh_bounds(group_id)
        logger.debug("Attached shape %d to group %d", child_id, group_id)

    def remove_child(self, group_id: int, child_id: int) -> None:
        """Detach a child from its group; it becomes a root again."""
        self._require(group_id)
        self._require(child_id)
        if self._parents.get(child_id) != group_id:
            raise SceneGraphError(f"Shape {child_id} is not a child of {group_id}")

        self._children[group_id].remove(child_id)
        del self._parents[child_id]
        bisect.insort(self._roots, child_id)
        self._refresh_bounds(group_id)
        logger.debug("Detached shape %d from group %d", child_id, group_id)

    def remove_shape(self, shape_id: int) -> None:
        """Delete a shape and everything below it from the graph.

        The shape is first detached from its group, if it has one. The
        deleted identifiers are not reused.
        """
        self._require(shape_id)
        parent = self._parents.get(shape_id)
        if parent is not None:
            self.remove_child(parent, shape_id)
        self._roots.remove(shape_id)

        for sid in [shape_id] + self.descendants(shape_id):
            self._parents.pop(sid, None)
            self._children.pop(sid, None)
            del self._bounds[sid]
            del self._shapes[sid]
        logger.debug("Removed shape %d", shape_id)

    def set_transform(self, shape_id: int, m: Matrix4) -> None:
        """Replace a shape's transform and refresh the cached inverses and bounds."""
        shape = self._require(shape_id)
        self._shapes[shape_id] = replace(shape, transform=m)
        parent = self._parents.get(shape_id)
        if parent is not None:
            self._refresh_bounds(parent)

    def set_material(self, shape_id: int, material: Material) -> None:
        """Assign a material.

        For a group the material is copied onto every primitive below it;
        the group itself keeps no material of its own that is ever used.
        """
        shape = self._require(shape_id)
        if not shape.is_group:
            self._shapes[shape_id] = replace(shape, material=material)
            return
        for descendant in self.descendants(shape_id):
            child = self._shapes[descendant]
            if not child.is_group:
                self._shapes[descendant] = replace(child, material=replace(material))

    def _refresh_bounds(self, group_id: int | None) -> None:
        """Recompute group bounds from ``group_id`` up to its root."""
        while group_id is not None:
            box = Bounds.empty()
            for child_id in self._children[group_id]:
                box = box.merge(self.parent_space_bounds(child_id))
            self._bounds[group_id] = box
            group_id = self._parents.get(group_id)

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, shape_id: int) -> Shape:
        return self._require(shape_id)

    def parent_of(self, shape_id: int) -> int | None:
        self._require(shape_id)
        return self._parents.get(shape_id)

    def children_of(self, shape_id: int) -> tuple[int, ...]:
        self._require(shape_id)
        return tuple(self._children.get(shape_id, ()))

    def roots(self) -> list[int]:
        """Shapes without a parent, in insertion order."""
        return list(self._roots)

    def ancestors(self, shape_id: int) -> list[int]:
        """Groups above a shape, nearest first."""
        self._require(shape_id)
        chain = []
        parent = self._parents.get(shape_id)
        while parent is not None:
            chain.append(parent)
            parent = self._parents.get(parent)
        return chain

    def descendants(self, shape_id: int) -> list[int]:
        """Every shape below ``shape_id``, depth first."""
        found = []
        stack = list(reversed(self.children_of(shape_id)))
        while stack:
            sid = stack.pop()
            found.append(sid)
            stack.extend(reversed(self._children.get(sid, ())))
        return found

    def is_ancestor(self, ancestor_id: int, shape_id: int) -> bool:
        return ancestor_id in self.ancestors(shape_id)

    def casts_shadow(self, shape_id: int) -> bool:
        """Does a shape block shadow rays? A group that opts out covers everything below it."""
        sid: int | None = shape_id
        while sid is not None:
            if not self._require(sid).casts_shadow:
                return False
            sid = self._parents.get(sid)
        return True

    def bounds_of(self, shape_id: int) -> Bounds:
        """Object-space bounding box of a shape."""
        self._require(shape_id)
        return self._bounds[shape_id]

    def parent_space_bounds(self, shape_id: int) -> Bounds:
        """Bounding box of a shape expressed in its parent's space."""
        return self.bounds_of(shape_id).transform(self._shapes[shape_id].transform)

    # =========================================================================
    # Space conversion
    # =========================================================================

    def world_transform(self, shape_id: int) -> Matrix4:
        """Object -> world transform: the forward chain root to leaf."""
        m = self._require(shape_id).transform
        for ancestor in self.ancestors(shape_id):
            m = self._shapes[ancestor].transform @ m
        return m

    def world_to_object(self, shape_id: int, world_point: Tuple4) -> Tuple4:
        """Map a world point into a shape's object space.

        The inverses are applied from the root down to the shape itself.
        """
        shape = self._require(shape_id)
        p = world_point
        for ancestor in reversed(self.ancestors(shape_id)):
            p = self._shapes[ancestor].inverse @ p
        return shape.inverse @ p

    def normal_to_world(self, shape_id: int, object_normal: Tuple4) -> Tuple4:
        """Map an object-space normal to a unit world-space normal.

        Each level applies its inverse transpose, clears w (translation
        leaks into it) and renormalizes, walking from the shape to the root.
        """
        n = object_normal
        sid: int | None = shape_id
        while sid is not None:
            n = self._require(sid).inverse_transpose @ n
            n[3] = 0.0
            n = normalize(n)
            sid = self._parents.get(sid)
        return n

    def normal_at(self, shape_id: int, world_point: Tuple4, hit: Intersection | None = None) -> Tuple4:
        """World-space unit normal of a primitive at a world point."""
        shape = self._require(shape_id)
        if shape.is_group:
            raise SceneGraphError(f"Group {shape_id} has no surface normal")
        local_point = self.world_to_object(shape_id, world_point)
        local_normal = shape.local_normal_at(local_point, hit)
        return self.normal_to_world(shape_id, local_normal)

    # =========================================================================
    # Intersection
    # =========================================================================

    def intersect(self, shape_id: int, ray: Ray) -> list[Intersection]:
        """Intersect a ray given in the shape's parent space.

        Groups reject the ray early if it misses their bounding box;
        otherwise their children's results are concatenated unsorted.
        """
        shape = self._require(shape_id)
        local_ray = ray.transform(shape.inverse)

        if shape.is_group:
            if not self._bounds[shape_id].intersects(local_ray):
                return []
            xs: list[Intersection] = []
            for child_id in self._children[shape_id]:
                xs.extend(self.intersect(child_id, local_ray))
            return xs

        return [Intersection(t, shape_id, u, v) for t, u, v in shape.local_intersect(local_ray)]

    # =========================================================================
    # Bounding volume hierarchy
    # =========================================================================

    def partition_children(self, group_id: int) -> tuple[list[int], list[int]]:
        """Split a group's children between the two halves of its bounds.

        Children that straddle the split, or do not fit either half, stay in
        the group. The chosen children are removed from the group.

        Returns:
            Tuple of (left, right) child id lists.
        """
        left_box, right_box = self.bounds_of(group_id).split()
        left: list[int] = []
        right: list[int] = []
        for child_id in self._children[group_id]:
            box = self.parent_space_bounds(child_id)
            if left_box.contains_bounds(box):
                left.append(child_id)
            elif right_box.contains_bounds(box):
                right.append(child_id)

        # A side that would take every child makes no progress
        count = len(self._children[group_id])
        if len(left) == count or len(right) == count:
            return [], []

        for child_id in left + right:
            self.remove_child(group_id, child_id)
        return left, right

    def make_subgroup(self, group_id: int, child_ids: list[int]) -> int:
        """Wrap the given root shapes in a new group attached to ``group_id``."""
        sub = self.add_group(children=tuple(child_ids))
        self.add_child(group_id, sub)
        return sub

    def divide(self, shape_id: int, threshold: int) -> None:
        """Build a bounding volume hierarchy below a group.

        A group with at least ``threshold`` children has them partitioned
        into up to two new subgroups; then every child group is divided in
        turn. Primitives are left as they are.
        """
        shape = self._require(shape_id)
        if not shape.is_group:
            return

        if len(self._children[shape_id]) >= threshold:
            left, right = self.partition_children(shape_id)
            if left:
                self.make_subgroup(shape_id, left)
            if right:
                self.make_subgroup(shape_id, right)
            if left or right:
                logger.debug(
                    "Divided group %d: %d left, %d right, %d kept",
                    shape_id,
                    len(left),
                    len(right),
                    len(self._children[shape_id]) - bool(left) - bool(right),
                )

        for child_id in list(self._children[shape_id]):
            self.divide(child_id, threshold)
