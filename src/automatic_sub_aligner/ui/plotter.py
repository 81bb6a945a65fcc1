# src/automatic_sub_aligner/ui/plotter.py

"""Static matplotlib plot of an alignment result."""

import matplotlib.pyplot as plt


def plot_alignment(subs, final_sum, theoretical_max=None, filename=None, show=False):
    """
    Plot every individual sub, the aligned sum and, optionally, the
    theoretical (phase-aligned) maximum on a log frequency axis.

    Args:
        subs: Band-limited responses of the individual subs.
        final_sum: Combined response under the chosen parameters.
        theoretical_max: Upper bound response, drawn dashed.
        filename: Save the figure here when given.
        show: Open an interactive window.

    Returns:
        The matplotlib figure.
    """
    fig = plt.figure(figsize=(12, 8))
    ax = fig.add_subplot(1, 1, 1)

    for sub in subs:
        ax.semilogx(sub.freqs, sub.magnitude_db, alpha=0.5, linewidth=1, label=sub.label)

    if theoretical_max is not None:
        ax.semilogx(theoretical_max.freqs, theoretical_max.magnitude_db,
                    color='k', linestyle='--', label='Theoretical maximum')

    ax.semilogx(final_sum.freqs, final_sum.magnitude_db, color='r', linewidth=2, label='Aligned sum')

    ax.set_title('Subwoofer Alignment')
    ax.set_xlabel('Frequency (Hz)')
    ax.set_ylabel('Magnitude (dB)')
    ax.grid(True, which="both", ls="-", alpha=0.3)
    if len(final_sum):
        ax.set_xlim(final_sum.start_freq, final_sum.end_freq)
    ax.legend()
    fig.tight_layout()

    if filename:
        fig.savefig(filename, dpi=150)
        print(f"Plot saved to '{filename}'")
    if show:
        plt.show()
    return fig
