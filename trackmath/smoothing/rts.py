"""Rauch-Tung-Striebel (RTS) smoother for time-varying linear models."""
import numpy as np
from scipy import linalg as sla

from .common import check_model_sequences, joseph_update


def _solve_cholesky(S, B):
    """Solve S @ X = B using Cholesky factorization (assumes S is SPD)."""
    L = sla.cholesky(S, lower=True)
    return sla.cho_solve((L, True), B)


def kalman_filter_tv(H, F, R, Q, zs, m0, P0, us=None, joseph=True):
    """
    Kalman filter for a time-varying linear Gaussian model.

    The prior (m0, P0) is on the state at step 0, before its measurement.

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
    zs : ndarray [N, n_z]
        Measurements
    m0 : ndarray [n_x]
        Prior mean
    P0 : ndarray [n_x, n_x]
        Prior covariance
    us : ndarray [N-1, n_x], optional
        Control inputs
    joseph : bool
        Use Joseph stabilized covariance update (default: True)

    Returns
    -------
    m_filt : ndarray [N, n_x]
    P_filt : ndarray [N, n_x, n_x]
    m_pred : ndarray [N, n_x]
        Predicted means (m_pred[0] is the prior)
    P_pred : ndarray [N, n_x, n_x]
        Predicted covariances (P_pred[0] is the prior)
    """
    H, F, R, Q = check_model_sequences(H, F, R, Q)
    N, n_z, n_x = H.shape
    zs = np.asarray(zs, dtype=float).reshape(N, n_z)
    if us is None:
        us = np.zeros((max(N - 1, 0), n_x))

    m, P = np.asarray(m0, dtype=float).copy(), np.asarray(P0, dtype=float).copy()
    m_filt = np.zeros((N, n_x))
    P_filt = np.zeros((N, n_x, n_x))
    m_pred = np.zeros((N, n_x))
    P_pred = np.zeros((N, n_x, n_x))

    for t in range(N):
        # Predict
        if t > 0:
            m = F[t - 1] @ m + us[t - 1]
            P = F[t - 1] @ P @ F[t - 1].T + Q[t - 1]
        m_pred[t], P_pred[t] = m, P

        # Update: K = P @ H.T @ S^{-1}
        S = H[t] @ P @ H[t].T + R[t]
        K = _solve_cholesky(S, H[t] @ P).T
        m = m + K @ (zs[t] - H[t] @ m)
        P = joseph_update(P, K, H[t], R[t]) if joseph else (np.eye(n_x) - K @ H[t]) @ P

        m_filt[t], P_filt[t] = m, P

    return m_filt, P_filt, m_pred, P_pred


def rts_smoother(H, F, R, Q, zs, m0, P0, us=None, joseph=True):
    """
    Forward Kalman filter followed by the RTS backward pass.

    Parameters
    ----------
    H, F, R, Q : ndarray
        Model sequences, as in kalman_filter_tv
    zs : ndarray [N, n_z]
        Measurements
    m0, P0 : ndarray
        Prior on the state at step 0
    us : ndarray [N-1, n_x], optional
        Control inputs
    joseph : bool
        Use Joseph stabilized covariance update in the forward pass

    Returns
    -------
    m_smooth : ndarray [N, n_x]
    P_smooth : ndarray [N, n_x, n_x]
    m_filt : ndarray [N, n_x]
    P_filt : ndarray [N, n_x, n_x]
    """
    m_filt, P_filt, m_pred, P_pred = kalman_filter_tv(H, F, R, Q, zs, m0, P0, us, joseph)
    F = np.asarray(F, dtype=float)
    N = m_filt.shape[0]

    m_smooth = m_filt.copy()
    P_smooth = P_filt.copy()
    for t in range(N - 2, -1, -1):
        # Smoother gain G = P_filt F' P_pred^{-1}
        G = _solve_cholesky(P_pred[t + 1], F[t] @ P_filt[t]).T
        m_smooth[t] = m_filt[t] + G @ (m_smooth[t + 1] - m_pred[t + 1])
        P_smooth[t] = P_filt[t] + G @ (P_smooth[t + 1] - P_pred[t + 1]) @ G.T
        P_smooth[t] = 0.5 * (P_smooth[t] + P_smooth[t].T)

    return m_smooth, P_smooth, m_filt, P_filt
