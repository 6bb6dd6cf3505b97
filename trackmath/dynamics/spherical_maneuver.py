"""Spherical maneuvering-target drift function.

Continuous-time constant direction and speed model where the velocity is
parameterized by azimuth (phi), elevation (theta) and speed (s), together
with the rates of those terms.

State: [x, y, z, phi, theta, s, phiDot, thetaDot] or
       [x, y, z, phi, theta, s, phiDot, thetaDot, sDot]

Azimuth is measured counterclockwise from the x-axis in the x-y plane and
elevation is measured up from the x-y plane towards the z-axis. The 8D model
is model 2 of D. Laneuville, "New models for 3D maneuvering target tracking",
2014; the 9D model adds a derivative term for the speed.
"""
import numpy as np

VALID_STATE_DIMS = (8, 9)

# Indices into the state vector
PHI, THETA, SPEED = 3, 4, 5
PHI_DOT, THETA_DOT, SPEED_DOT = 6, 7, 8


def _check_state(x):
    x = np.asarray(x, dtype=float)
    if x.ndim == 2 and x.shape[1] == 1:
        x = x[:, 0]
    if x.ndim != 1:
        raise ValueError(f"x must be a vector or column vector, got shape {x.shape}.")
    if x.shape[0] not in VALID_STATE_DIMS:
        raise ValueError(f"x must be 8 or 9 dimensional, got {x.shape[0]}.")
    return x


def _trig(x):
    phi, theta = x[PHI], x[THETA]
    return np.sin(phi), np.cos(phi), np.sin(theta), np.cos(theta)


def spher_maneuver_drift(x):
    """
    Drift function a(x) of the spherical maneuvering model.

    Parameters
    ----------
    x : ndarray [8] or [9]
        Target state

    Returns
    -------
    ndarray [8] or [9]
        Time derivative of the state
    """
    x = _check_state(x)
    n_x = x.shape[0]
    sin_phi, cos_phi, sin_theta, cos_theta = _trig(x)
    s = x[SPEED]

    # The paper's x and y components are swapped so that the velocity agrees
    # with the azimuth/elevation convention in the module docstring.
    a = np.zeros(n_x)
    a[0] = s * cos_phi * cos_theta
    a[1] = s * sin_phi * cos_theta
    a[2] = s * sin_theta
    a[PHI] = x[PHI_DOT]
    a[THETA] = x[THETA_DOT]
    if n_x == 9:
        a[SPEED] = x[SPEED_DOT]
    return a


def spher_maneuver_jacobian(x):
    """
    Jacobian of the drift function.

    Parameters
    ----------
    x : ndarray [8] or [9]
        Target state

    Returns
    -------
    J : ndarray [n_x, n_x]
        J[i, j] is the partial derivative of a_i with respect to x_j
    """
    x = _check_state(x)
    n_x = x.shape[0]
    sin_phi, cos_phi, sin_theta, cos_theta = _trig(x)
    s = x[SPEED]

    J = np.zeros((n_x, n_x))

    # d/d(phi, theta, s) of s*cos(phi)*cos(theta)
    J[0, PHI] = -s * sin_phi * cos_theta
    J[0, THETA] = -s * cos_phi * sin_theta
    J[0, SPEED] = cos_phi * cos_theta

    # d/d(phi, theta, s) of s*sin(phi)*cos(theta)
    J[1, PHI] = s * cos_phi * cos_theta
    J[1, THETA] = -s * sin_phi * sin_theta
    J[1, SPEED] = sin_phi * cos_theta

    # d/d(phi, theta, s) of s*sin(theta)
    J[2, THETA] = s * cos_theta
    J[2, SPEED] = sin_theta

    # Rate pass-through
    J[PHI, PHI_DOT] = 1.0
    J[THETA, THETA_DOT] = 1.0
    if n_x == 9:
        J[SPEED, SPEED_DOT] = 1.0
    return J


def spher_maneuver_hessian(x):
    """
    Hessian of the drift function.

    Only the velocity components depend nonlinearly on the state, and only
    through (phi, theta, s), so every other entry is zero.

    Parameters
    ----------
    x : ndarray [8] or [9]
        Target state

    Returns
    -------
    Hess : ndarray [n_x, n_x, n_x]
        Hess[i, j, k] is the second partial derivative of a_i with respect
        to x_j and x_k
    """
    x = _check_state(x)
    n_x = x.shape[0]
    sin_phi, cos_phi, sin_theta, cos_theta = _trig(x)
    s = x[SPEED]

    # 3x3 blocks over (phi, theta, s) for each velocity component
    vx = np.array([
        [-s * cos_phi * cos_theta, s * sin_phi * sin_theta, -sin_phi * cos_theta],
        [s * sin_phi * sin_theta, -s * cos_phi * cos_theta, -cos_phi * sin_theta],
        [-sin_phi * cos_theta, -cos_phi * sin_theta, 0.0],
    ])
    vy = np.array([
        [-s * sin_phi * cos_theta, -s * cos_phi * sin_theta, cos_phi * cos_theta],
        [-s * cos_phi * sin_theta, -s * sin_phi * cos_theta, -sin_phi * sin_theta],
        [cos_phi * cos_theta, -sin_phi * sin_theta, 0.0],
    ])
    vz = np.array([
        [0.0, 0.0, 0.0],
        [0.0, -s * sin_theta, cos_theta],
        [0.0, cos_theta, 0.0],
    ])

    Hess = np.zeros((n_x, n_x, n_x))
    block = slice(PHI, SPEED + 1)
    Hess[0, block, block] = vx
    Hess[1, block, block] = vy
    Hess[2, block, block] = vz
    return Hess


def spher_maneuver_time_partial(x):
    """Partial derivative of the drift with respect to time (all zeros)."""
    x = _check_state(x)
    return np.zeros(x.shape[0])


_TIERS = (
    spher_maneuver_drift,
    spher_maneuver_jacobian,
    spher_maneuver_hessian,
    spher_maneuver_time_partial,
)


def spher_maneuver(x, n_outputs=1):
    """
    Evaluate the drift function and, optionally, its derivatives.

    Parameters
    ----------
    x : ndarray [8] or [9]
        Target state
    n_outputs : int
        Number of outputs to compute (1 to 4), taken in the order
        (drift, jacobian, hessian, time_partial)

    Returns
    -------
    ndarray or tuple
        The drift alone if n_outputs is 1, otherwise a tuple holding the
        first n_outputs of (drift, jacobian, hessian, time_partial)
    """
    if isinstance(n_outputs, bool) or n_outputs not in (1, 2, 3, 4):
        raise ValueError(f"n_outputs must be between 1 and 4, got {n_outputs}.")
    x = _check_state(x)

    outputs = tuple(fn(x) for fn in _TIERS[:n_outputs])
    return outputs[0] if n_outputs == 1 else outputs
