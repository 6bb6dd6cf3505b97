"""Finite-difference check of the spherical maneuver model derivatives."""
import os
import sys
import time

import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from trackmath.dynamics import spher_maneuver
from trackmath.utils.numerical_diff import numerical_jacobian, numerical_hessian
from trackmath.utils.metrics import max_relative_error
from trackmath.utils.experiment_logger import ExperimentLogger

# Relative errors are measured against max(|exact|, FLOOR)
FLOOR = 1.0
TOLERANCE = 1e-6


def sample_states(rng, n_samples, n_x):
    """Random states with speeds in [10, 300] and angles over the full range."""
    X = np.zeros((n_samples, n_x))
    X[:, :3] = rng.uniform(-1e4, 1e4, (n_samples, 3))
    X[:, 3] = rng.uniform(-np.pi, np.pi, n_samples)
    X[:, 4] = rng.uniform(-np.pi / 2, np.pi / 2, n_samples)
    X[:, 5] = rng.uniform(10.0, 300.0, n_samples)
    X[:, 6:] = rng.normal(0.0, 0.1, (n_samples, n_x - 6))
    return X


def check_state_dim(n_x, n_samples, rng, epsilon):
    """Worst-case relative errors of the Jacobian and Hessian over random states."""
    jac_errors = np.zeros(n_samples)
    hess_errors = np.zeros(n_samples)

    drift = lambda x: spher_maneuver(x)
    jacobian = lambda x: spher_maneuver(x, n_outputs=2)[1]

    for i, x in enumerate(sample_states(rng, n_samples, n_x)):
        _, J, Hess, dadt = spher_maneuver(x, n_outputs=4)
        assert not np.any(dadt)

        jac_errors[i] = max_relative_error(numerical_jacobian(drift, x, epsilon), J, floor=FLOOR)
        hess_errors[i] = max_relative_error(numerical_hessian(jacobian, x, epsilon), Hess, floor=FLOOR)

    return jac_errors, hess_errors


def save_report(results, filepath):
    """Write the error table."""
    with open(filepath, 'w') as f:
        f.write("=" * 60 + "\n")
        f.write("SPHERICAL MANEUVER MODEL: analytic vs. finite differences\n")
        f.write("=" * 60 + "\n\n")
        f.write(f"{'State':<8} {'Max Jacobian err':<18} {'Max Hessian err':<18} {'Status'}\n")
        f.write("-" * 60 + "\n")
        for n_x, (jac_err, hess_err) in results.items():
            ok = max(jac_err.max(), hess_err.max()) < TOLERANCE
            f.write(f"{str(n_x) + 'D':<8} {jac_err.max():<18.3e} {hess_err.max():<18.3e} "
                    f"{'OK' if ok else 'FAIL'}\n")

    print(f"Report saved: {filepath}")


if __name__ == "__main__":
    config = {'n_samples': 500, 'seed': 42, 'epsilon': 1e-5}
    logger = ExperimentLogger(experiment_name='exp_2_spher_maneuver_derivatives')
    rng = np.random.default_rng(config['seed'])

    start = time.time()
    results = {}
    for n_x in (8, 9):
        t0 = time.time()
        jac_err, hess_err = check_state_dim(n_x, config['n_samples'], rng, config['epsilon'])
        results[n_x] = (jac_err, hess_err)
        print(f"{n_x}D: max Jacobian err {jac_err.max():.3e}, max Hessian err {hess_err.max():.3e}")

        logger.save_algorithm_result(
            algorithm=f'spher_maneuver_{n_x}d',
            config=config,
            data={'jacobian_errors': jac_err, 'hessian_errors': hess_err},
            metrics={'max_error': float(max(jac_err.max(), hess_err.max()))},
            runtime_sec=time.time() - t0,
        )

    logger.create_timestamped_run_dir()
    save_report(results, os.path.join(logger.get_metrics_dir(), 'derivative_report.txt'))
    logger.log_experiment(config, duration_sec=time.time() - start)
