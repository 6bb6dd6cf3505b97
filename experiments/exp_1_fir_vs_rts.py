"""FIR smoother vs. diffuse-prior RTS smoother on a constant velocity track."""
import os
import sys
import time
from typing import Dict, List, Optional

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from trackmath.ssm import linear_gaussian_ssm, constant_velocity_model
from trackmath.smoothing import kalman_fir_smoother, rts_smoother
from trackmath.utils.metrics import compute_rmse, compute_nees, compute_min_eigenvalues
from trackmath.utils.experiment_logger import ExperimentLogger
from trackmath.utils.visualization import plot_smoothed_estimates

ALGORITHMS = ['FIR', 'RTS']

# Diffuse prior variance for the RTS reference
P0_SCALE = 1e8

# --- Smoother Implementations ---

def run_fir(H, F, R, Q, zs):
    """Prior-free FIR smoother over the whole window."""
    start = time.time()
    m, P = kalman_fir_smoother(H, F, R, Q, zs)
    return m, P, time.time() - start


def run_rts(H, F, R, Q, zs):
    """RTS smoother with a diffuse prior."""
    n_x = F.shape[-1]
    start = time.time()
    m, P, _, _ = rts_smoother(H, F, R, Q, zs, m0=np.zeros(n_x), P0=P0_SCALE * np.eye(n_x))
    return m, P, time.time() - start


RUNNERS = {'FIR': run_fir, 'RTS': run_rts}

# --- Reporting ---

def save_table(metrics: Dict[str, Dict], save_path: str) -> None:
    """Save the summary table to file."""
    with open(save_path, 'w') as f:
        f.write('=' * 70 + '\n')
        f.write('FIR smoother vs. RTS smoother (diffuse prior)\n')
        f.write('=' * 70 + '\n\n')

        header = f"{'Algorithm':<10} {'RMSE':>12} {'Mean NEES':>12} {'Runtime(ms)':>12} {'Failures':>10}"
        f.write(header + '\n')
        f.write('-' * 70 + '\n')
        for name, m in metrics.items():
            f.write(f"{name:<10} {m['rmse']:>12.4f} {m['mean_nees']:>12.3f} "
                    f"{1000 * m['mean_runtime']:>12.3f} {m['n_failed']:>10d}\n")

        if 'max_error' in metrics.get('FIR', {}):
            f.write('\nMax |FIR - RTS| over all trials: '
                    f"{metrics['FIR']['max_error']:.3e}\n")
        f.write('=' * 70 + '\n')

    print(f'Table saved to: {save_path}')

# --- Main Experiment ---

def run_experiment(
    N: int = 30,
    n_trials: int = 100,
    q: float = 0.05,
    r: float = 1.0,
    seed: int = 42,
    algorithms: Optional[List[str]] = None,
    force_rerun: bool = False
) -> Dict:
    """
    Monte-Carlo comparison of the FIR and RTS smoothers.

    Parameters
    ----------
    N : int
        Window length
    n_trials : int
        Number of simulated tracks
    q : float
        Process noise intensity
    r : float
        Measurement noise variance
    seed : int
        Random seed
    algorithms : list[str], optional
        Smoothers to run. Default: all
    force_rerun : bool
        If True, ignore cached results

    Returns
    -------
    dict
        Summary metrics per algorithm
    """
    if algorithms is None:
        algorithms = ALGORITHMS

    logger = ExperimentLogger(experiment_name='exp_1_fir_vs_rts')
    config = {'N': N, 'n_trials': n_trials, 'q': q, 'r': r, 'seed': seed}

    cached_algos = [] if force_rerun else logger.get_cached_algorithms(**config)
    algos_to_run = [a for a in algorithms if a not in cached_algos]

    logger.create_timestamped_run_dir()
    figs_dir = logger.get_figures_dir()
    metrics_dir = logger.get_metrics_dir()

    H, F, R, Q = constant_velocity_model(N, dt=1.0, q=q, r=r, n_dims=2)
    n_x = F.shape[-1]

    results = {}
    for algo in algorithms:
        if algo in cached_algos:
            cached = logger.load_algorithm_result(algo, **config)
            if cached is not None:
                results[algo] = cached

    if algos_to_run:
        # Same tracks for every smoother
        rng = np.random.default_rng(seed)
        tracks = []
        for _ in range(n_trials):
            x0 = np.array([0.0, 1.0, 0.0, 0.5]) + rng.standard_normal(n_x)
            tracks.append(linear_gaussian_ssm(H, F, R, Q, x0, rng))
        xs_all = np.array([xs for xs, _ in tracks])
        zs_all = np.array([zs for _, zs in tracks])

        for algo in algos_to_run:
            print(f'Running {algo} on {n_trials} tracks...')
            m_all = np.full((n_trials, N, n_x), np.nan)
            P_all = np.full((n_trials, N, n_x, n_x), np.nan)
            runtimes = np.zeros(n_trials)
            n_failed = 0

            for i in range(n_trials):
                try:
                    m_all[i], P_all[i], runtimes[i] = RUNNERS[algo](H, F, R, Q, zs_all[i])
                except np.linalg.LinAlgError as e:
                    n_failed += 1
                    print(f'  trial {i}: {algo} failed ({e})')

            ok = ~np.isnan(m_all[:, 0, 0])
            nees = compute_nees(m_all[ok].reshape(-1, n_x), P_all[ok].reshape(-1, n_x, n_x),
                                xs_all[ok].reshape(-1, n_x))
            algo_metrics = {
                'rmse': compute_rmse(m_all[ok], xs_all[ok]),
                'mean_nees': float(np.mean(nees)),
            }

            logger.save_algorithm_result(
                algorithm=algo,
                config=config,
                data={'m_smooth': m_all, 'P_smooth': P_all, 'runtime': runtimes,
                      'xs_true': xs_all, 'zs': zs_all, 'n_failed': np.array(n_failed)},
                metrics=algo_metrics,
                runtime_sec=float(np.sum(runtimes)),
                notes=f'{n_failed} failed' if n_failed else '',
                status='completed' if n_failed < n_trials else 'failed',
            )
            results[algo] = {'m_smooth': m_all, 'P_smooth': P_all, 'runtime': runtimes,
                             'xs_true': xs_all, 'zs': zs_all, 'n_failed': np.array(n_failed)}

    # Summary metrics
    metrics = {}
    for algo, res in results.items():
        ok = ~np.isnan(res['m_smooth'][:, 0, 0])
        m_ok, P_ok, xs_ok = res['m_smooth'][ok], res['P_smooth'][ok], res['xs_true'][ok]
        nees = compute_nees(m_ok.reshape(-1, n_x), P_ok.reshape(-1, n_x, n_x), xs_ok.reshape(-1, n_x))
        metrics[algo] = {
            'rmse': compute_rmse(m_ok, xs_ok),
            'mean_nees': float(np.mean(nees)),
            'mean_runtime': float(np.mean(res['runtime'][ok])),
            'n_failed': int(res['n_failed']),
            'min_eig': float(np.min(compute_min_eigenvalues(P_ok))),
        }
        print(f"{algo:<5} RMSE={metrics[algo]['rmse']:.4f}  "
              f"NEES={metrics[algo]['mean_nees']:.3f} (n_x={n_x})  "
              f"min eig={metrics[algo]['min_eig']:.2e}")

    if 'FIR' in results and 'RTS' in results:
        diff = np.abs(results['FIR']['m_smooth'] - results['RTS']['m_smooth'])
        metrics['FIR']['max_error'] = float(np.nanmax(diff))
        print(f"Max |FIR - RTS| = {metrics['FIR']['max_error']:.3e}")

    # Plot the first track, x position and x velocity
    first = next(iter(results.values()))
    estimates = {algo: (res['m_smooth'][0], res['P_smooth'][0]) for algo, res in results.items()}
    plot_smoothed_estimates(first['xs_true'][0], estimates, state_idx=0,
                            zs=first['zs'][0][:, 0],
                            save_path=os.path.join(figs_dir, 'track_position.png'),
                            title='Smoothed x position')
    plot_smoothed_estimates(first['xs_true'][0], estimates, state_idx=1,
                            save_path=os.path.join(figs_dir, 'track_velocity.png'),
                            title='Smoothed x velocity')

    save_table(metrics, os.path.join(metrics_dir, 'table.txt'))
    return metrics


if __name__ == "__main__":
    start = time.time()
    config = dict(N=30, n_trials=100, q=0.05, r=1.0, seed=42)
    run_experiment(**config)
    ExperimentLogger('exp_1_fir_vs_rts').log_experiment(config, duration_sec=time.time() - start)
