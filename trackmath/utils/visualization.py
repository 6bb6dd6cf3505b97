"""
Visualization of smoothed state estimates.
"""
import os

import numpy as np
import matplotlib.pyplot as plt


def plot_smoothed_estimates(xs_true, estimates, state_idx=0, n_sigma=2.0,
                            zs=None, save_path=None, title='Smoothed Estimates',
                            figsize=(12, 8)):
    """
    Plot smoothed estimates with uncertainty bands and their absolute errors.

    Parameters
    ----------
    xs_true : ndarray [T, n_x]
        True states
    estimates : dict
        Mapping of smoother name to (m_smooth [T, n_x], P_smooth [T, n_x, n_x])
    state_idx : int
        Which state dimension to plot
    n_sigma : float
        Number of standard deviations for bands
    zs : ndarray [T] or [T, n_z], optional
        Measurements of the plotted state, drawn as markers
    save_path : str, optional
        Path to save figure. The figure is closed in either case.
    title : str
        Plot title

    Returns
    -------
    matplotlib.figure.Figure
    """
    T = xs_true.shape[0]
    t = np.arange(T)
    xs = xs_true[:, state_idx]

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=figsize, sharex=True)
    ax1.plot(t, xs, 'k-', linewidth=2, label='True State', alpha=0.8)
    if zs is not None:
        z = zs if zs.ndim == 1 else zs[:, 0]
        ax1.plot(t, z, 'k+', markersize=6, label='Measurement', alpha=0.6)

    for name, (m_smooth, P_smooth) in estimates.items():
        m = m_smooth[:, state_idx]
        std = np.sqrt(P_smooth[:, state_idx, state_idx])
        line, = ax1.plot(t, m, '--', linewidth=1.5, label=name)
        ax1.fill_between(t, m - n_sigma * std, m + n_sigma * std,
                         alpha=0.2, color=line.get_color())
        ax2.plot(t, np.abs(m - xs), '-', linewidth=1.5, color=line.get_color(), label=name)

    ax1.set_ylabel(f'State {state_idx + 1}')
    ax1.set_title(title)
    ax1.legend()
    ax1.grid(True, alpha=0.3)

    ax2.set_yscale('log')
    ax2.set_xlabel('Time step')
    ax2.set_ylabel('Absolute Error')
    ax2.legend()
    ax2.grid(True, alpha=0.3)

    plt.tight_layout()
    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"  Saved: {os.path.basename(save_path)}")
    plt.close(fig)
    return fig
