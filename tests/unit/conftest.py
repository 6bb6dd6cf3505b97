"""Shared pytest fixtures for unit tests."""

import numpy as np
import pytest


@pytest.fixture
def rng():
    """Seeded random number generator."""
    return np.random.default_rng(42)


@pytest.fixture
def scalar_model():
    """Scalar random walk with N=3 steps."""
    N = 3
    H = np.ones((N, 1, 1))
    F = np.full((N - 1, 1, 1), 0.9)
    R = np.array([[[0.5]], [[0.2]], [[0.4]]])
    Q = np.array([[[0.1]], [[0.3]]])
    zs = np.array([[1.0], [-0.5], [2.0]])
    return {'H': H, 'F': F, 'R': R, 'Q': Q, 'zs': zs, 'N': N}


@pytest.fixture
def cv_model():
    """Constant velocity model observing position only."""
    N, dt, q, r = 6, 1.0, 0.2, 0.5
    F1 = np.array([[1.0, dt], [0.0, 1.0]])
    Q1 = q * np.array([[dt**3 / 3, dt**2 / 2], [dt**2 / 2, dt]])
    H = np.tile(np.array([[1.0, 0.0]]), (N, 1, 1))
    F = np.tile(F1, (N - 1, 1, 1))
    R = np.tile(np.array([[r]]), (N, 1, 1))
    Q = np.tile(Q1, (N - 1, 1, 1))
    return {'H': H, 'F': F, 'R': R, 'Q': Q, 'N': N}


@pytest.fixture
def noncommutative_model(rng):
    """Time-varying 2D model with non-diagonal, mutually non-commuting F."""
    N = 5
    F = np.array([
        [[1.0, 0.4], [-0.3, 0.9]],
        [[0.8, -0.5], [0.6, 1.1]],
        [[1.2, 0.3], [0.2, 0.7]],
        [[0.9, 0.7], [-0.4, 1.0]],
    ])
    Q = np.array([np.diag([0.2, 0.1]) + 0.05 * np.ones((2, 2)) * (t + 1) / N
                  for t in range(N - 1)])
    H = np.array([[[1.0, 0.5]], [[0.3, 1.0]], [[1.0, -0.2]], [[0.7, 0.7]], [[1.0, 0.0]]])
    R = np.array([[[0.3 + 0.1 * t]] for t in range(N)])
    zs = rng.standard_normal((N, 1))
    us = 0.1 * rng.standard_normal((N - 1, 2))
    return {'H': H, 'F': F, 'R': R, 'Q': Q, 'zs': zs, 'us': us, 'N': N}


def check_psd(matrix, tol=1e-10):
    """Check if matrix is positive semi-definite."""
    return np.all(np.linalg.eigvalsh(matrix) >= -tol)


def batch_smoothed_estimate(H, F, R, Q, zs, us=None):
    """
    Weighted least squares over the stacked states of a whole window.

    Returns the estimates [N, n_x] and the diagonal blocks of their
    covariance [N, n_x, n_x]; with no prior this is the exact smoothed
    solution.
    """
    N, n_z, n_x = H.shape
    zs = zs.reshape(N, n_z)
    if us is None:
        us = np.zeros((N - 1, n_x))

    info = np.zeros((N * n_x, N * n_x))
    vec = np.zeros(N * n_x)
    for j in range(N):
        sj = slice(j * n_x, (j + 1) * n_x)
        Rinv = np.linalg.inv(R[j])
        info[sj, sj] += H[j].T @ Rinv @ H[j]
        vec[sj] += H[j].T @ Rinv @ zs[j]
    for j in range(N - 1):
        # Residual x[j+1] - F[j] x[j] - u[j] as a linear map of the stack
        G = np.zeros((n_x, N * n_x))
        G[:, j * n_x:(j + 1) * n_x] = -F[j]
        G[:, (j + 1) * n_x:(j + 2) * n_x] = np.eye(n_x)
        Qinv = np.linalg.inv(Q[j])
        info += G.T @ Qinv @ G
        vec += G.T @ Qinv @ us[j]

    cov = np.linalg.inv(info)
    x = cov @ vec
    blocks = np.array([cov[j * n_x:(j + 1) * n_x, j * n_x:(j + 1) * n_x] for j in range(N)])
    return x.reshape(N, n_x), blocks
