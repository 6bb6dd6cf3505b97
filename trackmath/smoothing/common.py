"""Common utilities for the smoothers."""
import numpy as np
from scipy.linalg import cho_factor as cholesky_factor, cho_solve as cholesky_solve


def right_divide(X, M):
    """
    Compute X @ inv(M) by solving the transposed system.

    Parameters
    ----------
    X : ndarray [m, n]
    M : ndarray [n, n]

    Returns
    -------
    ndarray [m, n]
    """
    return np.linalg.solve(M.T, X.T).T


def measurement_information(H, R):
    """
    Information contributed by a linear measurement.

    Parameters
    ----------
    H : ndarray [n_z, n_x]
        Measurement matrix
    R : ndarray [n_z, n_z]
        Measurement noise covariance (symmetric positive definite)

    Returns
    -------
    HtRinv : ndarray [n_x, n_z]
        H' R^{-1}
    info : ndarray [n_x, n_x]
        H' R^{-1} H
    """
    HtRinv = cholesky_solve(cholesky_factor(R), H).T
    return HtRinv, HtRinv @ H


def joseph_update(P_pred, K, H, R):
    """
    Compute Joseph-stabilized covariance update.

    Parameters
    ----------
    P_pred : ndarray [n_x, n_x]
        Predicted covariance
    K : ndarray [n_x, n_z]
        Kalman gain
    H : ndarray [n_z, n_x]
        Measurement matrix
    R : ndarray [n_z, n_z]
        Measurement noise covariance

    Returns
    -------
    ndarray [n_x, n_x]
        Updated covariance
    """
    n_x = P_pred.shape[0]
    IKH = np.eye(n_x) - K @ H
    return IKH @ P_pred @ IKH.T + K @ R @ K.T


def check_model_sequences(H, F, R, Q):
    """
    Validate time-major model sequences and return them as float arrays.

    Parameters
    ----------
    H : array_like [N, n_z, n_x]
    F : array_like [N-1, n_x, n_x]
    R : array_like [N, n_z, n_z]
    Q : array_like [N-1, n_x, n_x]

    Returns
    -------
    H, F, R, Q : ndarray
    """
    H, F, R, Q = (np.asarray(M, dtype=float) for M in (H, F, R, Q))
    if H.ndim != 3:
        raise ValueError(f"H must be [N, n_z, n_x], got shape {H.shape}.")
    N, n_z, n_x = H.shape
    if N < 1:
        raise ValueError("At least one time step is required.")

    expected = {
        'F': (F, (N - 1, n_x, n_x)),
        'R': (R, (N, n_z, n_z)),
        'Q': (Q, (N - 1, n_x, n_x)),
    }
    for name, (M, shape) in expected.items():
        # An empty transition sequence may arrive with any trailing shape.
        if shape[0] == 0 and M.size == 0:
            continue
        if M.shape != shape:
            raise ValueError(f"{name} must have shape {shape}, got {M.shape}.")

    if N == 1:
        F = np.zeros((0, n_x, n_x))
        Q = np.zeros((0, n_x, n_x))
    return H, F, R, Q
