"""Time-varying Linear Gaussian State Space Model (LGSSM)."""
import numpy as np


def linear_gaussian_ssm(H, F, R, Q, x0, rng, us=None):
    """
    Simulate a time-varying Linear Gaussian SSM.

    x[k] = F[k-1] @ x[k-1] + u[k-1] + v,  z[k] = H[k] @ x[k] + w

    Parameters
    ----------
    H : ndarray [N, n_z, n_x]
        Measurement matrices
    F : ndarray [N-1, n_x, n_x]
        State transition matrices
    R : ndarray [N, n_z, n_z]
        Measurement noise covariances
    Q : ndarray [N-1, n_x, n_x]
        Process noise covariances
    x0 : ndarray [n_x]
        State at step 0
    rng : numpy.random.Generator
        Random number generator
    us : ndarray [N-1, n_x], optional
        Control inputs

    Returns
    -------
    xs : ndarray [N, n_x]
        Latent states
    zs : ndarray [N, n_z]
        Measurements
    """
    N, n_z, n_x = H.shape

    xs = np.zeros((N, n_x))
    zs = np.zeros((N, n_z))

    x = np.asarray(x0, dtype=float)
    for t in range(N):
        if t > 0:
            x = F[t - 1] @ x + rng.multivariate_normal(np.zeros(n_x), Q[t - 1])
            if us is not None:
                x = x + us[t - 1]
        z = H[t] @ x + rng.multivariate_normal(np.zeros(n_z), R[t])
        xs[t], zs[t] = x, z

    return xs, zs


def constant_velocity_model(N, dt=1.0, q=0.1, r=1.0, n_dims=1):
    """
    Constant velocity model observing positions, stacked over a window.

    State per dimension: [position, velocity]; the full state is
    [p_1, v_1, ..., p_n, v_n].

    Parameters
    ----------
    N : int
        Number of time steps
    dt : float
        Time step
    q : float
        Continuous-time white-noise acceleration intensity
    r : float
        Position measurement noise variance
    n_dims : int
        Number of spatial dimensions

    Returns
    -------
    H : ndarray [N, n_dims, 2*n_dims]
    F : ndarray [N-1, 2*n_dims, 2*n_dims]
    R : ndarray [N, n_dims, n_dims]
    Q : ndarray [N-1, 2*n_dims, 2*n_dims]
    """
    F1 = np.array([[1.0, dt], [0.0, 1.0]])
    Q1 = q * np.array([
        [dt**3 / 3, dt**2 / 2],
        [dt**2 / 2, dt]
    ])
    H1 = np.array([[1.0, 0.0]])

    I = np.eye(n_dims)
    F_step = np.kron(I, F1)
    Q_step = np.kron(I, Q1)
    H_step = np.kron(I, H1)

    H = np.tile(H_step, (N, 1, 1))
    F = np.tile(F_step, (N - 1, 1, 1))
    R = np.tile(r * I, (N, 1, 1))
    Q = np.tile(Q_step, (N - 1, 1, 1))
    return H, F, R, Q
