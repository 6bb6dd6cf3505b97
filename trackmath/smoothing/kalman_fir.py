"""Kalman finite impulse response (FIR) smoother.

Coefficients such that a smoothed state estimate at one step of a window is
a linear combination of the window's measurements and control inputs,
without any prior on the state. Assumed forward-time model:

    x[k] = F[k-1] @ x[k-1] + u[k-1] + v,   v ~ N(0, Q[k-1])
    z[k] = H[k] @ x[k] + w,                w ~ N(0, R[k])

Reference: D. F. Crouse, P. Willett and Y. Bar-Shalom, "A low-complexity
sliding-window Kalman FIR smoother for discrete-time models," IEEE Signal
Processing Letters, vol. 17, no. 2, pp. 177-180, 2010.
"""
import numpy as np

from .common import check_model_sequences, measurement_information, right_divide


def kalman_fir_smoother_coeffs(H, F, R, Q, k):
    """
    Coefficients of the Kalman FIR smoother for the estimate at step k.

    The estimate is

        x_hat = sum_{j < N-1} (A[j] @ z[j] + B[j] @ u[j]) + A[N-1] @ z[N-1]

    and P is its error covariance.

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
    k : int
        Zero-based step at which the smoothed estimate is desired

    Returns
    -------
    A : ndarray [N, n_x, n_z]
        Measurement coefficients
    B : ndarray [N-1, n_x, n_x]
        Control input coefficients. The control input at the last step only
        affects the state after the window, so it has no coefficient.
    P : ndarray [n_x, n_x]
        Covariance of the smoothed estimate at step k

    Raises
    ------
    ValueError
        If the shapes are inconsistent or k is outside [0, N-1].
    numpy.linalg.LinAlgError
        If a noise, transition or intermediate matrix is singular.
    """
    H, F, R, Q = check_model_sequences(H, F, R, Q)
    N, n_z, n_x = H.shape
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)) or not 0 <= k < N:
        raise ValueError(f"k must be an integer in [0, {N - 1}], got {k!r}.")

    HtRinv = np.zeros((N, n_x, n_z))
    info = np.zeros((N, n_x, n_x))
    for j in range(N):
        HtRinv[j], info[j] = measurement_information(H[j], R[j])

    # Forward-time information filter, only needed up to step k.
    PInv_fwd = np.zeros((k + 1, n_x, n_x))
    PInvPred_fwd = np.zeros((max(k, 1), n_x, n_x))
    D_fwd = np.zeros((max(k, 1), n_x, n_x))

    PInv_fwd[0] = info[0]
    for i in range(1, k + 1):
        PInvFinv = right_divide(PInv_fwd[i - 1], F[i - 1])
        # The process noise multiplies on the right.
        DInv = F[i - 1].T + PInvFinv @ Q[i - 1]
        PInvPred_fwd[i - 1] = np.linalg.solve(DInv, PInvFinv)
        PInv_fwd[i] = PInvPred_fwd[i - 1] + info[i]
        D_fwd[i - 1] = np.linalg.inv(DInv)

    # Reverse-time information filter, only needed back to step k.
    PInv_bwd = np.zeros((N, n_x, n_x))
    PInvPred_bwd = np.zeros((N, n_x, n_x))
    D_bwd = np.zeros((N, n_x, n_x))

    PInv_bwd[N - 1] = info[N - 1]
    for i in range(N - 2, k - 1, -1):
        DInv = np.linalg.inv(F[i]).T + right_divide(PInv_bwd[i + 1] @ Q[i], F[i].T)
        PInvPred_bwd[i + 1] = np.linalg.solve(DInv, PInv_bwd[i + 1] @ F[i])
        PInv_bwd[i] = PInvPred_bwd[i + 1] + info[i]
        D_bwd[i + 1] = np.linalg.inv(DInv)

    if k > 0:
        PInv_k = PInvPred_fwd[k - 1] + PInv_bwd[k]
    else:
        PInv_k = PInv_bwd[k]
    P = np.linalg.inv(PInv_k)

    A = np.zeros((N, n_x, n_z))
    B = np.zeros((N - 1, n_x, n_x))

    # Forward coefficients. The product over D_fwd must run backwards:
    # D_fwd[k-1] @ D_fwd[k-2] @ ... @ D_fwd[j].
    for j in range(k):
        DProd_B = np.eye(n_x)
        for n in range(k - 1, j, -1):
            DProd_B = DProd_B @ D_fwd[n]
        DProd_A = DProd_B @ D_fwd[j]

        A[j] = np.linalg.solve(PInv_k, DProd_A @ HtRinv[j])
        B[j] = np.linalg.solve(PInv_k, DProd_B @ PInvPred_fwd[j])

    # Backward coefficients. The product over D_bwd must run forwards:
    # D_bwd[k+1] @ D_bwd[k+2] @ ... @ D_bwd[j].
    DProd = np.eye(n_x)
    for j in range(k, N):
        if j > k:
            DProd = DProd @ D_bwd[j]
        A[j] = np.linalg.solve(PInv_k, DProd @ HtRinv[j])
        if j < N - 1:
            B[j] = -np.linalg.solve(PInv_k, right_divide(DProd @ PInvPred_bwd[j + 1], F[j]))

    return A, B, P


def fir_smoothed_estimate(A, B, zs, us=None):
    """
    Apply FIR smoother coefficients to a window of data.

    Parameters
    ----------
    A : ndarray [N, n_x, n_z]
        Measurement coefficients
    B : ndarray [N-1, n_x, n_x]
        Control input coefficients
    zs : ndarray [N, n_z]
        Measurements
    us : ndarray [N-1, n_x], optional
        Control inputs; us[j] drives the transition from step j to j+1.
        Zero if None.

    Returns
    -------
    ndarray [n_x]
        Smoothed state estimate
    """
    A = np.asarray(A, dtype=float)
    zs = np.asarray(zs, dtype=float).reshape(A.shape[0], A.shape[2])
    x_hat = np.einsum('jxz,jz->x', A, zs)
    if us is not None and len(B) > 0:
        us = np.asarray(us, dtype=float).reshape(len(B), -1)
        x_hat = x_hat + np.einsum('jxy,jy->x', np.asarray(B, dtype=float), us)
    return x_hat


def kalman_fir_smoother(H, F, R, Q, zs, us=None):
    """
    Smoothed estimates at every step of a window using the FIR smoother.

    Parameters
    ----------
    H, F, R, Q : ndarray
        Model sequences, as in kalman_fir_smoother_coeffs
    zs : ndarray [N, n_z]
        Measurements
    us : ndarray [N-1, n_x], optional
        Control inputs

    Returns
    -------
    m_smooth : ndarray [N, n_x]
        Smoothed state means
    P_smooth : ndarray [N, n_x, n_x]
        Smoothed state covariances
    """
    H = np.asarray(H, dtype=float)
    N, _, n_x = H.shape

    m_smooth = np.zeros((N, n_x))
    P_smooth = np.zeros((N, n_x, n_x))
    for k in range(N):
        A, B, P = kalman_fir_smoother_coeffs(H, F, R, Q, k)
        m_smooth[k] = fir_smoothed_estimate(A, B, zs, us)
        P_smooth[k] = P

    return m_smooth, P_smooth
