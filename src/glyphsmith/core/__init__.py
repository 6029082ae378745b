"""Core algorithms for glyphsmith.

This module contains the engine behind every preview and export:

- Geometry operations (bounds, flattening, intersections, transforms)
- Path simplification and slicing
- Group expansion for rule declarations
- Character resolution (links, composites, positions, kerns)
- Canvas fitting
- Auto-kerning and its debounced batch queue

Everything except AutoKernQueue is:
- Stateless (safe for use in worker processes)
- Pure (reads a RenderContext, never mutates it)

Key functions:
- flatten_path: Convert a path to polylines
- path_bounds: Exact bounding box of a path, grown by stroke width
- simplify_path: Ramer-Douglas-Peucker simplification
- slice_path: Cut a path along a line into fragments
- expand_members: Expand $ and @ group references
- resolve: Resolve a character into paths plus availability flags
- fit: Frame paths on a square canvas
- propose_kerning: Scanline kerning proposals for a batch of pairs
- run_kerning_batch: Picklable worker entry point

Key classes:
- RenderContext: Read-only input bundle for resolution
- ResolutionCache: Memoizes resolutions per store version
- AutoKernQueue: Debounces pair requests and applies the latest batch
"""

from glyphsmith.core.autokern import (
    KerningPair,
    build_batch_request,
    ink_span,
    propose_kerning,
    recommended_pairs,
    run_kerning_batch,
    target_distance_for,
)
from glyphsmith.core.context import RenderContext
from glyphsmith.core.fitter import FitTransform, fit
from glyphsmith.core.geometry import (
    BoundingBox,
    Polyline,
    attachment_point,
    flatten_path,
    line_intersection,
    path_bounds,
    paths_bounds,
    perpendicular_distance,
    transform_paths,
    translate_paths,
)
from glyphsmith.core.groups import expand_members, is_group_reference, is_member
from glyphsmith.core.resolver import (
    Resolution,
    ResolutionCache,
    default_mark_offset,
    find_attachment_rule,
    kern_offset,
    resolve,
    resolve_paths,
)
from glyphsmith.core.scheduler import AutoKernQueue
from glyphsmith.core.simplify import simplify_path
from glyphsmith.core.slicing import slice_path

__all__ = [
    # Scheduler
    "AutoKernQueue",
    # Geometry
    "BoundingBox",
    "FitTransform",
    # Auto-kerning
    "KerningPair",
    "Polyline",
    # Resolution
    "RenderContext",
    "Resolution",
    "ResolutionCache",
    "attachment_point",
    "build_batch_request",
    "default_mark_offset",
    "expand_members",
    "find_attachment_rule",
    "fit",
    "flatten_path",
    "ink_span",
    "is_group_reference",
    "is_member",
    "kern_offset",
    "line_intersection",
    "path_bounds",
    "paths_bounds",
    "perpendicular_distance",
    "propose_kerning",
    "recommended_pairs",
    "resolve",
    "resolve_paths",
    "run_kerning_batch",
    "simplify_path",
    "slice_path",
    "target_distance_for",
    "transform_paths",
    "translate_paths",
]
