"""Unit tests for the experiment logger."""

import csv

import numpy as np
import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', '..'))

from trackmath.utils.experiment_logger import ExperimentLogger


@pytest.fixture
def logger(tmp_path):
    """Logger writing under a temporary results root."""
    return ExperimentLogger(experiment_name='exp_test', results_root=str(tmp_path))


@pytest.fixture
def config():
    return {'N': 20, 'n_trials': 5, 'seed': 42}


def read_log(logger):
    with open(logger.log_file, newline='') as f:
        return list(csv.DictReader(f))


class TestCaching:
    """Tests for per-algorithm result caching."""

    def test_creates_directories_and_header(self, logger):
        """Log directory, cache directory and CSV header exist after init."""
        assert os.path.isdir(logger.cache_dir)
        with open(logger.log_file, newline='') as f:
            header = next(csv.reader(f))
        assert header == ExperimentLogger.LOG_COLUMNS

    def test_save_and_load_roundtrip(self, logger, config):
        """Saved arrays are returned unchanged."""
        data = {'m_smooth': np.arange(6.0).reshape(3, 2), 'rmse': np.array(0.5)}

        logger.save_algorithm_result('FIR', config, data, metrics={'rmse': 0.5})
        loaded = logger.load_algorithm_result('FIR', **config)

        np.testing.assert_array_equal(loaded['m_smooth'], data['m_smooth'])
        assert logger.algorithm_result_exists('FIR', **config)

    def test_missing_result(self, logger, config):
        """Loading an absent result returns None."""
        assert logger.load_algorithm_result('RTS', **config) is None
        assert not logger.algorithm_result_exists('RTS', **config)

    def test_config_changes_cache_key(self, logger, config):
        """Different configurations do not share a cache file."""
        other = dict(config, seed=7)

        assert logger.get_cache_path('FIR', config) != logger.get_cache_path('FIR', other)
        assert logger.get_cache_path('FIR', config) == logger.get_cache_path('FIR', dict(config))

    def test_cached_algorithms(self, logger, config):
        """Only completed runs with cache files are reported."""
        logger.save_algorithm_result('FIR', config, {'x': np.zeros(2)})
        logger.save_algorithm_result('RTS(diffuse)', config, {'x': np.ones(2)})
        logger.save_algorithm_result('RTS(tight)', config, {}, status='failed')

        assert logger.get_cached_algorithms(**config) == ['FIR', 'RTS(diffuse)']

        logger.clear_algorithm_cache('FIR', **config)
        assert logger.get_cached_algorithms(**config) == ['RTS(diffuse)']
        assert not logger.clear_algorithm_cache('FIR', **config)


class TestCsvLog:
    """Tests for the CSV run log."""

    def test_row_contents(self, logger, config):
        """Config and metric columns are filled in."""
        logger.save_algorithm_result('FIR', config, {'x': np.zeros(1)},
                                     metrics={'rmse': 0.25, 'mean_nees': 2.1},
                                     runtime_sec=1.5, notes='smoke')

        row = read_log(logger)[-1]

        assert row['algorithm'] == 'FIR'
        assert row['N'] == '20'
        assert row['seed'] == '42'
        assert row['n_samples'] == ''
        assert float(row['rmse']) == 0.25
        assert float(row['mean_nees']) == 2.1
        assert row['max_error'] == ''
        assert row['status'] == 'completed'
        assert row['notes'] == 'smoke'

    def test_failed_run_has_no_cache(self, logger, config):
        """Failed runs are logged without writing a cache file."""
        logger.save_algorithm_result('FIR', config, {}, status='failed', notes='singular')

        row = read_log(logger)[-1]

        assert row['status'] == 'failed'
        assert row['cache_file'] == ''
        assert not logger.algorithm_result_exists('FIR', **config)


class TestRunDirectories:
    """Tests for timestamped run directories."""

    def test_requires_run_dir(self, logger):
        """Figures directory needs a run directory first."""
        with pytest.raises(RuntimeError):
            logger.get_figures_dir()

    def test_creates_subdirectories(self, logger):
        """Run, figures and metrics directories are created."""
        run_dir = logger.create_timestamped_run_dir('2026-01-01_00-00-00')

        assert run_dir == logger.get_run_dir()
        assert os.path.basename(run_dir) == '2026-01-01_00-00-00'
        assert os.path.isdir(logger.get_figures_dir())
        assert os.path.isdir(logger.get_metrics_dir())

    def test_log_experiment(self, logger, config):
        """Experiment summaries are appended to a text log."""
        logger.log_experiment(config, duration_sec=3.0, notes='done')

        with open(os.path.join(logger.log_dir, 'experiment_log.txt')) as f:
            text = f.read()

        assert 'Duration: 3.0s' in text
        assert 'n_trials: 5' in text
        assert 'Notes: done' in text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
