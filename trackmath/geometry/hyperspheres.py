"""Hypersphere intersection tests."""
import numpy as np


def bounds_intersect_ball(point, r_squared, rect_min, rect_max):
    """
    Whether a ball of squared radius r_squared about point intersects a
    hyperrectangle.

    The test accumulates, per dimension, the smaller squared distance to the
    two bounding faces and stops as soon as the sum exceeds r_squared. A
    dimension contributes nothing when the point lies within the closed slab
    rect_min <= p <= rect_max, or when both faces lie strictly within the
    radius. The latter can admit a ball that misses the box by a small margin
    in several dimensions at once, which is acceptable for pruning a search.
    At exact tangency (sum equal to r_squared) the result is True.

    Parameters
    ----------
    point : ndarray [k]
        Center of the ball
    r_squared : float
        Squared radius of the ball
    rect_min : ndarray [k]
        Lower bounds of the hyperrectangle
    rect_max : ndarray [k]
        Upper bounds of the hyperrectangle

    Returns
    -------
    bool
        True if the ball intersects the hyperrectangle

    Raises
    ------
    ValueError
        If the lengths differ, a coordinate is not finite or r_squared is NaN.
    """
    point = np.asarray(point, dtype=float).reshape(-1)
    rect_min = np.asarray(rect_min, dtype=float).reshape(-1)
    rect_max = np.asarray(rect_max, dtype=float).reshape(-1)
    if not point.shape == rect_min.shape == rect_max.shape:
        raise ValueError(
            f"point, rect_min and rect_max must have equal length, got "
            f"{point.shape[0]}, {rect_min.shape[0]} and {rect_max.shape[0]}."
        )
    if not (np.all(np.isfinite(point)) and np.all(np.isfinite(rect_min))
            and np.all(np.isfinite(rect_max))):
        raise ValueError("point, rect_min and rect_max must be finite.")
    if np.isnan(r_squared):
        raise ValueError("r_squared must not be NaN.")

    cum_dist = 0.0
    for p, lo, hi in zip(point, rect_min, rect_max):
        if lo <= p <= hi:
            continue
        dist1 = (p - lo) ** 2
        dist2 = (p - hi) ** 2
        if dist1 < r_squared and dist2 < r_squared:
            continue

        cum_dist += min(dist1, dist2)
        if cum_dist > r_squared:
            return False

    return True
