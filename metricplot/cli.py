#!filepath: metricplot/cli.py
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich import print

from metricplot import __version__, init_logging
from metricplot.config.app_config import AppConfig
from metricplot.config.plot_config import PlotConfig
from metricplot.metrics.registry import available_metrics, resolve_metric
from metricplot.utils.errors import MetricPlotError, UserInputError

app = typer.Typer(help="MetricPlot: metric trajectories over model iterations")


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def metrics():
    """
    列出所有已注册的 metric
    """
    for name in available_metrics():
        m = resolve_metric(name)
        kind = "additive" if m.is_additive() else "non-additive"
        print(f"[cyan]{name:<20}[/cyan] {m.error_type.value:<16} {kind}")


@app.command("eval")
def eval_metrics(
        model: Path = typer.Option(..., "--model", help="joblib model file"),
        data: Path = typer.Option(..., "--data", help="parquet / csv / tsv dataset"),
        target: str = typer.Option(..., "--target", help="target column"),
        weight: Optional[str] = typer.Option(None, "--weight", help="weight column"),
        feature: Optional[List[str]] = typer.Option(
            None, "--feature", "-f", help="feature column (repeatable); default: every other column"
        ),
        pairs: Optional[Path] = typer.Option(None, "--pairs", help="pairs file (winner, loser[, weight])"),
        metric: Optional[List[str]] = typer.Option(None, "--metric", "-m"),
        begin: Optional[int] = typer.Option(None, "--begin"),
        end: Optional[int] = typer.Option(None, "--end", help="0 = all iterations"),
        step: Optional[int] = typer.Option(None, "--step"),
        result_dir: Optional[Path] = typer.Option(None, "--result-dir"),
        tmp_dir: Optional[Path] = typer.Option(None, "--tmp-dir"),
        config: Optional[Path] = typer.Option(None, "--config", help="YAML config"),
        no_plot: bool = typer.Option(False, "--no-plot", help="skip learning_curve.png"),
):
    """
    计算 model 每个 checkpoint 上的 metric 曲线并写入 result_dir
    """
    from metricplot.workflows.eval_metrics import run_eval_metrics

    try:
        cfg = AppConfig.load(str(config) if config else None)
        overrides = {
            "metrics": metric or None,
            "begin": begin,
            "end": end,
            "step": step,
            "result_dir": str(result_dir) if result_dir else None,
            "tmp_dir": str(tmp_dir) if tmp_dir else None,
            "plot_curve": False if no_plot else None,
        }
        plot = PlotConfig(
            **{**cfg.plot.model_dump(), **{k: v for k, v in overrides.items() if v is not None}}
        )
        cfg = cfg.model_copy(update={"plot": plot})
        init_logging(cfg.log)

        print(f"[green]Evaluating {model.name} on {data.name}[/green]")
        result = run_eval_metrics(
            cfg=cfg,
            model_path=model,
            data_path=data,
            target_column=target,
            weight_column=weight,
            feature_columns=feature or None,
            pairs_path=pairs,
        )
    except (ValidationError, FileNotFoundError, MetricPlotError, UserInputError) as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    last = result.to_frame().tail(1)
    print(f"[blue]{result.checkpoint_count} checkpoints -> {cfg.plot.result_dir}[/blue]")
    print(last.to_string())


if __name__ == "__main__":
    app()

# python -m metricplot.cli eval --model model.joblib --data eval.parquet --target label
