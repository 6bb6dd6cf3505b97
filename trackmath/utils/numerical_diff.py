"""
Finite-difference derivatives.

Used to check analytic Jacobians and Hessians of drift functions.
"""
import numpy as np


def numerical_jacobian(f, x, epsilon=1e-6):
    """
    Central-difference Jacobian of a vector function.

    Parameters
    ----------
    f : callable
        f(x) -> ndarray [n_out] (or [n_out, ...] for stacked outputs)
    x : ndarray [n_x]
        Point at which to differentiate
    epsilon : float or ndarray [n_x]
        Step size per component

    Returns
    -------
    J : ndarray [n_out, ..., n_x]
        J[..., j] is the partial derivative of f with respect to x[j]
    """
    x = np.asarray(x, dtype=float).reshape(-1)
    n_x = x.shape[0]
    steps = np.broadcast_to(np.asarray(epsilon, dtype=float), (n_x,))

    f0 = np.asarray(f(x), dtype=float)
    J = np.zeros(f0.shape + (n_x,))
    for j in range(n_x):
        dx = np.zeros(n_x)
        dx[j] = steps[j]
        J[..., j] = (np.asarray(f(x + dx)) - np.asarray(f(x - dx))) / (2.0 * steps[j])
    return J


def numerical_hessian(jacobian, x, epsilon=1e-6):
    """
    Hessian from central differences of an analytic Jacobian.

    Parameters
    ----------
    jacobian : callable
        jacobian(x) -> ndarray [n_out, n_x]
    x : ndarray [n_x]
        Point at which to differentiate
    epsilon : float or ndarray [n_x]
        Step size per component

    Returns
    -------
    ndarray [n_out, n_x, n_x]
        Second partial derivatives, last axis is the differentiation variable
    """
    return numerical_jacobian(jacobian, x, epsilon)
