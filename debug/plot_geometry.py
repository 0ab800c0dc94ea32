"""Simple geometry visualization helpers for debugging."""

from typing import Iterable

import matplotlib.pyplot as plt
from shapely.geometry import Polygon, MultiPolygon
from shapely.geometry.base import BaseGeometry


def plot_reduction(before: Iterable[BaseGeometry], after: Iterable[BaseGeometry], title: str = "Reduction"):
    """Plot input polygons and merged polygons side by side.

    Args:
        before: Polygons fed into the reduction
        after: Polygons it produced
        title: Plot title
    """
    before = list(before)
    after = list(after)
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 5), sharex=True, sharey=True)

    for geom in before:
        _plot_geometry(ax1, geom, color='red', alpha=0.3)
    ax1.set_title(f"Input ({len(before)} polygons)")
    ax1.set_aspect('equal')
    ax1.grid(True, alpha=0.3)

    for geom in after:
        _plot_geometry(ax2, geom, color='blue', alpha=0.5)
    ax2.set_title(f"Merged ({len(after)} polygons)")
    ax2.set_aspect('equal')
    ax2.grid(True, alpha=0.3)

    fig.suptitle(title)
    plt.tight_layout()
    plt.show()


def _plot_geometry(ax, geom: BaseGeometry, color='blue', alpha=0.5):
    if isinstance(geom, Polygon):
        _plot_polygon(ax, geom, color=color, alpha=alpha)
    elif isinstance(geom, MultiPolygon):
        for poly in geom.geoms:
            _plot_polygon(ax, poly, color=color, alpha=alpha)


def _plot_polygon(ax, poly: Polygon, color='blue', alpha=0.5):
    """Plot a single polygon with holes."""
    x, y = poly.exterior.xy
    ax.fill(x, y, color=color, alpha=alpha, edgecolor='black', linewidth=1.5)

    # Holes drawn white
    for interior in poly.interiors:
        x, y = interior.xy
        ax.fill(x, y, color='white', edgecolor='black', linewidth=1)
