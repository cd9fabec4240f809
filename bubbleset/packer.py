# ============================================================
# Circle packing of the records of one region
# - area-proportional leaf radii from weights
# - sunflower seeding + capped Jacobi overlap separation
# - fit of the packed cluster inside the disc of the target square
# ============================================================

import math
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.spatial import cKDTree

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


# ---------------- basic helpers ----------------


def _base_radii_from_weights(weights: Sequence[float]) -> np.ndarray:
    w = np.asarray(weights, float)
    w = np.where(np.isfinite(w), np.maximum(w, 0.0), 0.0)
    r = np.sqrt(w)
    mx = float(np.max(r)) if r.size else 0.0
    return r / mx if mx > 0 else np.ones_like(r)


def _sunflower_seeds(r: np.ndarray) -> np.ndarray:
    """Seed centers on a Vogel spiral, spaced so that circles of the mean radius almost touch."""
    n = len(r)
    spacing = 1.1 * float(np.mean(r)) if n else 1.0
    i = np.arange(n, dtype=float)
    rho = spacing * np.sqrt(i + 0.5)
    theta = i * GOLDEN_ANGLE
    return np.stack([rho * np.cos(theta), rho * np.sin(theta)], axis=1)


def candidate_pairs(P: np.ndarray, reach: float) -> Tuple[np.ndarray, np.ndarray]:
    """Unique index pairs (i < j) of points closer than `reach`."""
    n = len(P)
    if n <= 1 or reach <= 0:
        return np.empty(0, int), np.empty(0, int)
    pairs = cKDTree(P).query_pairs(r=reach, output_type="ndarray")
    if pairs.size == 0:
        return np.empty(0, int), np.empty(0, int)
    return pairs[:, 0], pairs[:, 1]


# ---------------- overlap separation ----------------


def separate_overlaps_2d(
    P0: np.ndarray,
    radii: Sequence[float],
    gap: float = 0.0,
    tol: float = 1e-9,
    max_sweeps: int = 60,
    ur: float = 0.7,  # under-relaxation
    node_cap_frac: float = 0.9,  # per-node step cap vs worst incident "need"
    recenter: bool = True,
) -> np.ndarray:
    """
    Move centers only (no radii change) until all pairs satisfy
        ||p_i - p_j|| >= r_i + r_j + gap.
    Candidate pairs come from a kd-tree, impulses are mass weighted (area) and capped per node.
    """
    P = np.asarray(P0, float).copy()
    r = np.asarray(radii, float)
    n = len(r)
    if n <= 1:
        return P

    inv_m = 1.0 / (r**2 + 1e-12)
    reach = 2.0 * float(np.max(r)) + gap

    for _ in range(max_sweeps):
        I, J = candidate_pairs(P, reach)
        if I.size == 0:
            break

        dvec = P[I] - P[J]
        dist = np.linalg.norm(dvec, axis=1)
        need = (r[I] + r[J] + gap) - dist
        mask = need > tol
        if not np.any(mask):
            break

        im, jm = I[mask], J[mask]
        dvm, distm, needm = dvec[mask], dist[mask], need[mask]

        u = np.zeros_like(dvm)
        nz = distm >= 1e-12
        u[nz] = dvm[nz] / distm[nz][:, None]
        if np.any(~nz):  # coincident fallback
            u[~nz, 0] = 1.0

        move = ur * (needm + tol)
        wi, wj = inv_m[im], inv_m[jm]
        ws = wi + wj
        ti = wi / (ws + 1e-12)
        tj = wj / (ws + 1e-12)

        dPi = (ti * move)[:, None] * u
        dPj = -(tj * move)[:, None] * u

        add_x = np.bincount(im, weights=dPi[:, 0], minlength=n) + np.bincount(
            jm, weights=dPj[:, 0], minlength=n
        )
        add_y = np.bincount(im, weights=dPi[:, 1], minlength=n) + np.bincount(
            jm, weights=dPj[:, 1], minlength=n
        )

        # node-wise cap vs worst incident need
        worst_need = np.zeros(n, float)
        np.maximum.at(worst_need, im, needm)
        np.maximum.at(worst_need, jm, needm)
        cap = node_cap_frac * worst_need

        step_norm = np.hypot(add_x, add_y)
        scale = np.ones(n, float)
        ok = step_norm > (cap + 1e-12)
        if np.any(ok):
            scale[ok] = cap[ok] / (step_norm[ok] + 1e-12)

        P[:, 0] += add_x * scale
        P[:, 1] += add_y * scale

        if recenter:
            P -= P.mean(axis=0, keepdims=True)

    return P


def _fit_inside_disc(
    P: np.ndarray,
    r: np.ndarray,
    center: np.ndarray,
    radius: float,
    fill_frac: float = 1.0,
) -> Tuple[np.ndarray, np.ndarray, float]:
    """Uniformly scale a packed cluster so that it fits the disc; returns centers, radii and the scale."""
    c = P.mean(axis=0)
    ext = float(np.max(np.linalg.norm(P - c, axis=1) + r))
    s = (fill_frac * radius / ext) if ext > 1e-12 else (fill_frac * radius)
    return center + s * (P - c), s * r, s


# ---------------- leaves of one region ----------------


def pack_leaves(
    weights: Sequence[float],
    size: float,
    padding: float = 0.0,
    fill_frac: float = 1.0,
    max_sweeps: int = 60,
    seeds: Optional[np.ndarray] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """Pack one circle per weight, area proportional to it, into the square [0, size]^2.

    The leaves are packed side by side, then the cluster is scaled into the disc inscribed in the
    square. With padding, leaves are packed again with radii inflated by half the padding, converted
    to the packing's own units, which leaves a gap of roughly `padding` after scaling.

    Returns
    -------
        positions: (n, 2) leaf centers in the square's frame.
        radii: (n, ) leaf radii.
    """
    n = len(weights)
    if n == 0:
        return np.empty((0, 2), float), np.empty((0,), float)

    size = max(float(size), 0.0)
    half = size / 2
    center = np.array([half, half], float)
    if n == 1 or size == 0:
        leaf_radius = fill_frac * half if n == 1 else 0.0
        return np.repeat(center[None, :], n, axis=0), np.full(n, leaf_radius)

    r = _base_radii_from_weights(weights)
    P = _sunflower_seeds(r) if seeds is None else np.asarray(seeds, float)
    P = separate_overlaps_2d(P, r, gap=0.0, max_sweeps=max_sweeps)
    P_fit, r_fit, s = _fit_inside_disc(P, r, center, half, fill_frac)

    if padding > 0 and s > 0:
        pad = padding / (2 * s)
        P = separate_overlaps_2d(P, r + pad, gap=0.0, max_sweeps=max_sweeps)
        P_fit, r_padded, s = _fit_inside_disc(P, r + pad, center, half, fill_frac)
        r_fit = np.maximum(0.0, r_padded - s * pad)

    return P_fit, r_fit
