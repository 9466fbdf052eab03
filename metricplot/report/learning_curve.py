# metricplot/report/learning_curve.py
import matplotlib.pyplot as plt

from metricplot.report.base import Report
from metricplot.report.result import PlotResult


class LearningCurveReport(Report):
    def __init__(self, output_path):
        self._path = output_path

    def render(self, result: PlotResult):
        fig, axes = plt.subplots(
            len(result.metric_names), 1,
            figsize=(10, 3 * len(result.metric_names)),
            squeeze=False,
        )
        for m, name in enumerate(result.metric_names):
            ax = axes[m][0]
            ax.plot(result.iterations, result.scores[m], marker=".")
            ax.set_title(f"{name} on {result.token}")
            ax.set_xlabel("Iteration")
            ax.set_ylabel(name)
        fig.tight_layout()
        fig.savefig(self._path)
        plt.close(fig)
        return self._path
