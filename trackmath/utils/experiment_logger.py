"""
Experiment Logger - Track experiment configurations and results.

Results are cached per algorithm as compressed numpy archives, keyed by a
hash of the configuration, so a rerun only computes what is missing.
"""
import os
import csv
import hashlib
import numpy as np
from datetime import datetime
from typing import Dict, List, Optional, Any


class ExperimentLogger:
    """
    Logger for tracking experiment configurations and per-algorithm results.

    Features:
    - Per-algorithm result caching (numpy arrays saved as .npz files)
    - Single CSV log file tracking individual algorithm runs
    - Timestamped run directories for figures and metrics

    Usage:
        logger = ExperimentLogger(experiment_name='exp_1_fir_vs_rts')
        config = {'N': 20, 'n_trials': 100, 'seed': 42}

        result = logger.load_algorithm_result('FIR', **config)
        if result is None:
            result = run_fir(...)
            logger.save_algorithm_result('FIR', config, result,
                                         metrics={'rmse': 0.12})

        run_dir = logger.create_timestamped_run_dir()
    """

    CONFIG_COLUMNS = ['N', 'n_trials', 'n_samples', 'seed']

    METRIC_COLUMNS = ['rmse', 'mean_nees', 'max_error']

    LOG_COLUMNS = (
        ['timestamp', 'experiment_name', 'algorithm']
        + CONFIG_COLUMNS + METRIC_COLUMNS
        + ['runtime_sec', 'cache_file', 'status', 'notes']
    )

    def __init__(self, experiment_name: str, results_root: Optional[str] = None):
        """
        Initialize experiment logger.

        Parameters
        ----------
        experiment_name : str
            Name of the experiment; logs are stored in
            {results_root}/{experiment_name}/.
        results_root : str, optional
            Root directory for results (default: results/ at the repo root).
        """
        if results_root is None:
            package_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
            results_root = os.path.join(os.path.dirname(package_dir), 'results')

        self.experiment_name = experiment_name
        self.log_dir = os.path.join(results_root, experiment_name)
        self.log_file = os.path.join(self.log_dir, 'algorithm_log.csv')
        self.cache_dir = os.path.join(self.log_dir, 'cache')

        os.makedirs(self.cache_dir, exist_ok=True)
        if not os.path.exists(self.log_file):
            with open(self.log_file, 'w', newline='') as f:
                csv.DictWriter(f, fieldnames=self.LOG_COLUMNS).writeheader()

        self._current_run_dir: Optional[str] = None

    def _config_hash(self, algorithm: str, config: Dict) -> str:
        """Short hash of the algorithm name and sorted config items."""
        key_parts = [algorithm] + [f"{k}={config[k]}" for k in sorted(config)]
        return hashlib.md5("_".join(key_parts).encode()).hexdigest()[:12]

    def get_cache_path(self, algorithm: str, config: Dict) -> str:
        """
        Get the full path to the cache file for an algorithm.

        Parameters
        ----------
        algorithm : str
            Algorithm name
        config : dict
            Experiment configuration

        Returns
        -------
        str
            Full path to cache file
        """
        safe_algo = algorithm.replace('(', '_').replace(')', '').replace(' ', '_')
        filename = f"{safe_algo}_{self._config_hash(algorithm, config)}.npz"
        return os.path.join(self.cache_dir, filename)

    def algorithm_result_exists(self, algorithm: str, **config) -> bool:
        """Check if a cached result exists for the algorithm + config."""
        return os.path.exists(self.get_cache_path(algorithm, config))

    def save_algorithm_result(
        self,
        algorithm: str,
        config: Dict[str, Any],
        data: Dict[str, Any],
        metrics: Optional[Dict[str, float]] = None,
        runtime_sec: float = 0.0,
        notes: str = '',
        status: str = 'completed'
    ) -> str:
        """
        Save algorithm result to cache and append a row to the CSV log.

        Parameters
        ----------
        algorithm : str
            Algorithm name
        config : dict
            Experiment configuration
        data : dict
            Result arrays to cache, e.g. {'m_smooth': array, 'P_smooth': array}
        metrics : dict, optional
            Summary metrics; keys in METRIC_COLUMNS are logged
        runtime_sec : float
            Algorithm runtime in seconds
        notes : str
            Optional notes
        status : str
            Run status, 'completed' or 'failed'

        Returns
        -------
        str
            Path to saved cache file
        """
        cache_path = self.get_cache_path(algorithm, config)
        if status == 'completed':
            np.savez_compressed(cache_path, **data)

        metrics = metrics or {}
        row = {
            'timestamp': datetime.now().strftime('%Y-%m-%d_%H-%M-%S'),
            'experiment_name': self.experiment_name,
            'algorithm': algorithm,
            'runtime_sec': f"{runtime_sec:.4f}",
            'cache_file': os.path.basename(cache_path) if status == 'completed' else '',
            'status': status,
            'notes': notes,
        }
        for key in self.CONFIG_COLUMNS:
            row[key] = config.get(key, '')
        for key in self.METRIC_COLUMNS:
            value = metrics.get(key)
            row[key] = f"{value:.6g}" if value is not None else ''

        with open(self.log_file, 'a', newline='') as f:
            csv.DictWriter(f, fieldnames=self.LOG_COLUMNS).writerow(row)

        print(f"  Logged {algorithm} ({status}): {row['cache_file'] or '-'}")
        return cache_path

    def load_algorithm_result(self, algorithm: str, **config) -> Optional[Dict[str, np.ndarray]]:
        """
        Load cached algorithm result.

        Returns
        -------
        dict or None
            Dictionary of numpy arrays if cache exists, else None.
        """
        cache_path = self.get_cache_path(algorithm, config)
        if not os.path.exists(cache_path):
            return None

        with np.load(cache_path) as npz:
            data = {key: npz[key] for key in npz.files}

        print(f"  Loaded cached {algorithm}: {os.path.basename(cache_path)}")
        return data

    def get_cached_algorithms(self, **config) -> List[str]:
        """Algorithms with a completed, still-present cache for this config."""
        cached = []
        with open(self.log_file, 'r', newline='') as f:
            for row in csv.DictReader(f):
                algo = row['algorithm']
                if row.get('status') != 'completed' or algo in cached:
                    continue
                if self.algorithm_result_exists(algo, **config):
                    cached.append(algo)
        return cached

    def create_timestamped_run_dir(self, timestamp: Optional[str] = None) -> str:
        """
        Create a timestamped directory for figures and metrics.

        Parameters
        ----------
        timestamp : str, optional
            Custom timestamp string. If None, uses current time.
            Format: YYYY-MM-DD_HH-MM-SS

        Returns
        -------
        str
            Path to the created run directory.
        """
        if timestamp is None:
            timestamp = datetime.now().strftime('%Y-%m-%d_%H-%M-%S')

        self._current_run_dir = os.path.join(self.log_dir, timestamp)
        os.makedirs(self._current_run_dir, exist_ok=True)
        return self._current_run_dir

    def get_run_dir(self) -> Optional[str]:
        """Get the current run directory."""
        return self._current_run_dir

    def _run_subdir(self, name: str) -> str:
        if self._current_run_dir is None:
            raise RuntimeError("Call create_timestamped_run_dir() first")
        path = os.path.join(self._current_run_dir, name)
        os.makedirs(path, exist_ok=True)
        return path

    def get_figures_dir(self) -> str:
        """Get the figures directory for the current run."""
        return self._run_subdir('figures')

    def get_metrics_dir(self) -> str:
        """Get the metrics directory for the current run."""
        return self._run_subdir('metrics')

    def clear_algorithm_cache(self, algorithm: str, **config) -> bool:
        """Remove the cached result for one algorithm; False if absent."""
        cache_path = self.get_cache_path(algorithm, config)
        if os.path.exists(cache_path):
            os.remove(cache_path)
            print(f"Removed cache: {os.path.basename(cache_path)}")
            return True
        return False

    def log_experiment(self, config: Dict[str, Any], duration_sec: float = 0.0,
                       notes: str = '') -> None:
        """
        Append an experiment summary to experiment_log.txt.

        Parameters
        ----------
        config : dict
            Experiment configuration
        duration_sec : float
            Total duration in seconds
        notes : str
            Optional notes
        """
        timestamp = datetime.now().strftime('%Y-%m-%d_%H-%M-%S')
        log_path = os.path.join(self.log_dir, 'experiment_log.txt')

        with open(log_path, 'a') as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"Timestamp: {timestamp}\n")
            f.write(f"Duration: {duration_sec:.1f}s\n")
            for key, val in config.items():
                f.write(f"  {key}: {val}\n")
            if notes:
                f.write(f"Notes: {notes}\n")

        print(f"Experiment completed in {duration_sec:.1f}s")
