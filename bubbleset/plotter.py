from typing import Optional, Sequence, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle as CirclePatch

from bubbleset.transitions import fallback_circle


def format_count(n):
    """Format large record counts into readable form."""
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    elif n >= 1_000:
        return f"{n / 1_000:.1f}K"
    else:
        return str(n)


def plot_layout(
    layout,
    ax=None,
    title: Optional[str] = None,
    draw_labels: bool = True,
    draw_inner_radius: bool = False,
    point_size: float = 6.0,
    cmap: str = "tab10",
    figsize: Tuple[float, float] = (8, 8),
):
    """Draw the solved circles of a fitted `BubbleSet`, its region centers and the placed records.

    Records of the same region share a color. Returns the axes.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=figsize)

    xs, ys = [], []
    for name, circle in layout.current_circles().items():
        x, y, r = circle.x, circle.y, circle.radius
        ax.add_patch(CirclePatch((x, y), r, fill=False, linewidth=1.2, edgecolor="k", alpha=0.9))
        if draw_labels:
            ax.text(x, y - r, name, ha="center", va="bottom", fontsize=9)
        xs += [x - r, x + r]
        ys += [y - r, y + r]

    colors = plt.get_cmap(cmap)
    for i, region in enumerate(layout.regions.values()):
        color = colors(i % colors.N)
        if region.center is not None and draw_inner_radius and region.inner_radius:
            ax.add_patch(
                CirclePatch(
                    (region.center.x, region.center.y),
                    max(region.inner_radius, 0.0),
                    fill=False,
                    linestyle=":",
                    edgecolor=color,
                )
            )
        P = np.array(
            [(rec["x"], rec["y"]) for rec in region.records if rec.get("x") is not None], float
        ).reshape(-1, 2)
        if len(P):
            ax.scatter(P[:, 0], P[:, 1], s=point_size, color=color, label=f"{region.key} ({format_count(len(P))})")
            xs += P[:, 0].tolist()
            ys += P[:, 1].tolist()

    if xs:
        xmin, xmax = min(xs), max(xs)
        ymin, ymax = min(ys), max(ys)
        padx = 0.06 * (xmax - xmin) if xmax > xmin else 1.0
        pady = 0.06 * (ymax - ymin) if ymax > ymin else 1.0
        ax.set_xlim(xmin - padx, xmax + padx)
        ax.set_ylim(ymin - pady, ymax + pady)
    ax.set_aspect("equal", "box")
    # canvas coordinates grow downwards
    ax.invert_yaxis()
    if title:
        ax.set_title(title)
    if draw_labels and layout.regions:
        ax.legend(loc="upper right", fontsize=8)
    return ax


def plot_tween(layout, key: str, ts: Sequence[float] = (0.0, 0.5, 1.0), ax=None, figsize=(8, 8)):
    """Draw the member circles of a region at several interpolation parameters of its transition."""
    if ax is None:
        _, ax = plt.subplots(figsize=figsize)
    region = layout.regions[key]
    fallback = fallback_circle(layout.size)
    for t in ts:
        for name in region.member_sets:
            tracked = layout.circles.get(name)
            if tracked is None:
                continue
            c = tracked.interpolate(t, fallback)
            ax.add_patch(CirclePatch((c.x, c.y), c.radius, fill=False, alpha=0.3 + 0.7 * t))
    ax.set_xlim(0, layout.size[0])
    ax.set_ylim(0, layout.size[1])
    ax.set_aspect("equal", "box")
    ax.invert_yaxis()
    ax.set_title(f"{key}: t = {', '.join(str(t) for t in ts)}")
    return ax
