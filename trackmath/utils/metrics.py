"""
Metrics for evaluating smoother performance.
"""
import numpy as np


def compute_mse(estimated, true):
    """
    Compute Mean Squared Error.

    Parameters
    ----------
    estimated : ndarray
        Estimated values
    true : ndarray
        True values

    Returns
    -------
    float
        Mean squared error
    """
    return np.mean((estimated - true)**2)


def compute_rmse(estimated, true):
    """Root mean squared error."""
    return np.sqrt(compute_mse(estimated, true))


def compute_nees(m_est, P_est, xs, regularize=1e-8):
    """
    Compute Normalized Estimation Error Squared (NEES).

    NEES = (x - m)' * P^{-1} * (x - m)

    For a consistent estimator, NEES follows a chi-squared(n_x) distribution.

    Parameters
    ----------
    m_est : ndarray [T, n_x]
        Estimated means
    P_est : ndarray [T, n_x, n_x]
        Estimate covariances
    xs : ndarray [T, n_x]
        True states
    regularize : float
        Small value added to diagonal for numerical stability

    Returns
    -------
    ndarray [T]
        NEES values at each time step
    """
    T, n_x = m_est.shape
    nees = np.zeros(T)

    for t in range(T):
        error = xs[t] - m_est[t]
        P_reg = P_est[t] + regularize * np.eye(n_x)
        nees[t] = error @ np.linalg.solve(P_reg, error)

    return nees


def compute_symmetry_error(P_est):
    """
    Compute symmetry error ||P - P'||_F / ||P||_F over all time steps.

    Parameters
    ----------
    P_est : ndarray [T, n_x, n_x]
        Covariance matrices

    Returns
    -------
    ndarray [T]
        Relative symmetry error at each time step
    """
    T = P_est.shape[0]
    sym_err = np.zeros(T)
    for t in range(T):
        P = P_est[t]
        norm_P = np.linalg.norm(P, 'fro')
        if norm_P > 0:
            sym_err[t] = np.linalg.norm(P - P.T, 'fro') / norm_P
    return sym_err


def compute_min_eigenvalues(P_est):
    """
    Minimum eigenvalue of the symmetric part of P at each time step.

    Negative values indicate loss of positive semi-definiteness.
    """
    sym = 0.5 * (P_est + np.swapaxes(P_est, -1, -2))
    return np.linalg.eigvalsh(sym).min(axis=-1)


def max_relative_error(approx, exact, floor=1e-12):
    """
    Largest elementwise relative error, with a floor on the denominator.

    Parameters
    ----------
    approx, exact : ndarray
        Arrays of equal shape
    floor : float
        Lower bound on |exact| used in the denominator

    Returns
    -------
    float
    """
    approx, exact = np.asarray(approx), np.asarray(exact)
    denom = np.maximum(np.abs(exact), floor)
    return float(np.max(np.abs(approx - exact) / denom))
