"""CLI entrypoint for the two-compartment simulation.

Subcommands:

- ``run``      drive a session headlessly and write history/figure/summary
- ``view``     open the live matplotlib viewer
- ``animate``  render a fresh session to a .gif (Pillow) or video (FFmpeg)

Every subcommand accepts ``--config path/to/config.json``. CLI arguments
override config-file values; config-file values override built-in defaults.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from random import Random

from compartment_markov.config.constants import (
    DEFAULT_POPULATION_A,
    DEFAULT_POPULATION_B,
    DEFAULT_PROB_PCT,
    FRAMES_PER_BATCH,
    HISTORY_CAPACITY,
    TRANSITION_SPEED,
    TRIALS_PER_BATCH,
)
from compartment_markov.config.types import EngineConfig, SimulationParams
from compartment_markov.io.paths import (
    history_path,
    resolve_within_base,
    summary_path,
    timeseries_figure_path,
)
from compartment_markov.io.persistence import write_history_parquet
from compartment_markov.simulation.headless import run_headless
from compartment_markov.viz.render import LiveViewer, render_history_timeseries, save_animation
from compartment_markov.viz.theme import REGISTERED_THEMES, get_theme

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def _coerce_int(raw: object, key: str) -> int:
    """Coerce raw value to int; rejects booleans and non-integer floats."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be an integer value")
    if isinstance(raw, float):
        if raw != int(raw):
            raise ValueError(f"{key} must be an integer value, got {raw!r}")
        return int(raw)
    if isinstance(raw, (int, str)):
        return int(raw)
    raise ValueError(f"{key} must be an integer value")


def _coerce_float(raw: object, key: str) -> float:
    """Coerce raw value to float; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a float value")
    if isinstance(raw, (int, float, str)):
        return float(raw)
    raise ValueError(f"{key} must be a float value")


def _coerce_str(raw: object, key: str) -> str:
    """Coerce raw value to str; rejects booleans."""
    if isinstance(raw, bool):
        raise ValueError(f"{key} must be a string-coercible value")
    if isinstance(raw, (str, Path, int, float)):
        return str(raw)
    raise ValueError(f"{key} must be a string-coercible value")


def _get_val(cli_val: object, key: str, file_cfg: dict[str, object], default: object) -> object:
    """CLI > file > default resolution."""
    if cli_val is not None:
        return cli_val
    return file_cfg.get(key, default)


def _get_int(cli_val: int | None, key: str, file_cfg: dict[str, object], default: int) -> int:
    return _coerce_int(_get_val(cli_val, key, file_cfg, default), key)


def _get_float(
    cli_val: float | None, key: str, file_cfg: dict[str, object], default: float
) -> float:
    return _coerce_float(_get_val(cli_val, key, file_cfg, default), key)


def _get_str(cli_val: str | None, key: str, file_cfg: dict[str, object], default: str) -> str:
    return _coerce_str(_get_val(cli_val, key, file_cfg, default), key)


def _get_optional_int(
    cli_val: int | None, key: str, file_cfg: dict[str, object]
) -> int | None:
    raw = _get_val(cli_val, key, file_cfg, None)
    return None if raw is None else _coerce_int(raw, key)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _add_common_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON config file (CLI args override file values)",
    )
    p.add_argument("--population-a", type=int, default=None)
    p.add_argument("--population-b", type=int, default=None)
    p.add_argument("--prob-ab", type=float, default=None, help="P(A->B) per trial, percent")
    p.add_argument("--prob-ba", type=float, default=None, help="P(B->A) per trial, percent")
    p.add_argument("--name-a", type=str, default=None)
    p.add_argument("--name-b", type=str, default=None)
    p.add_argument("--frames-per-batch", type=int, default=None)
    p.add_argument("--trials-per-batch", type=int, default=None)
    p.add_argument("--history-capacity", type=int, default=None)
    p.add_argument("--transition-speed", type=float, default=None)
    p.add_argument("--seed", type=int, default=None, help="Seed the random source (default: unseeded)")
    p.add_argument("--theme", type=str, choices=sorted(REGISTERED_THEMES), default=None)
    p.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Two-compartment stochastic simulation")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run headlessly and write artifacts")
    _add_common_arguments(run)
    run.add_argument("--frames", type=int, default=None)
    run.add_argument("--out-dir", type=Path, default=None)
    run.add_argument("--base-dir", type=Path, default=Path("."))
    run.set_defaults(func=_handle_run)

    view = sub.add_parser("view", help="Open the live viewer")
    _add_common_arguments(view)
    view.add_argument("--interval-ms", type=int, default=None)
    view.add_argument(
        "--autostart", action=argparse.BooleanOptionalAction, default=True
    )
    view.set_defaults(func=_handle_view)

    anim = sub.add_parser("animate", help="Save an animation of a fresh session")
    _add_common_arguments(anim)
    anim.add_argument("--frames", type=int, default=None)
    anim.add_argument("--fps", type=int, default=None)
    anim.add_argument("--output", type=Path, required=True)
    anim.add_argument("--base-dir", type=Path, default=Path("."))
    anim.set_defaults(func=_handle_animate)
    return parser


def _load_file_config(parser: argparse.ArgumentParser, path: Path | None) -> dict[str, object]:
    if path is None:
        return {}
    try:
        loaded = json.loads(Path(path).read_text())
    except FileNotFoundError:
        parser.error(f"Config file not found: {path}")
    except json.JSONDecodeError as exc:
        parser.error(f"Config file is not valid JSON: {path}: {exc}")
    if not isinstance(loaded, dict):
        parser.error(f"Config file must contain a JSON object: {path}")
    return loaded


def _resolve_settings(
    args: argparse.Namespace, file_cfg: dict[str, object]
) -> tuple[SimulationParams, EngineConfig, Random]:
    params = SimulationParams(
        population_a=_get_int(args.population_a, "population_a", file_cfg, DEFAULT_POPULATION_A),
        population_b=_get_int(args.population_b, "population_b", file_cfg, DEFAULT_POPULATION_B),
        prob_a_to_b_pct=_get_float(args.prob_ab, "prob_ab", file_cfg, DEFAULT_PROB_PCT),
        prob_b_to_a_pct=_get_float(args.prob_ba, "prob_ba", file_cfg, DEFAULT_PROB_PCT),
        name_a=_get_str(args.name_a, "name_a", file_cfg, "A"),
        name_b=_get_str(args.name_b, "name_b", file_cfg, "B"),
    )
    config = EngineConfig(
        frames_per_batch=_get_int(
            args.frames_per_batch, "frames_per_batch", file_cfg, FRAMES_PER_BATCH
        ),
        trials_per_batch=_get_int(
            args.trials_per_batch, "trials_per_batch", file_cfg, TRIALS_PER_BATCH
        ),
        history_capacity=_get_int(
            args.history_capacity, "history_capacity", file_cfg, HISTORY_CAPACITY
        ),
        transition_speed=_get_float(
            args.transition_speed, "transition_speed", file_cfg, TRANSITION_SPEED
        ),
    )
    seed = _get_optional_int(args.seed, "seed", file_cfg)
    rng = Random(seed) if seed is not None else Random()
    return params, config, rng


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def _handle_run(args: argparse.Namespace, file_cfg: dict[str, object]) -> None:
    params, config, rng = _resolve_settings(args, file_cfg)
    theme = get_theme(_get_str(args.theme, "theme", file_cfg, "light"))
    frames = _get_int(args.frames, "frames", file_cfg, 2_000)
    base_dir = Path(args.base_dir).resolve()
    out_dir = resolve_within_base(Path(_get_str(args.out_dir, "out_dir", file_cfg, "data")), base_dir)

    session = run_headless(frames, params=params, config=config, rng=rng)
    history = session.history
    write_history_parquet(history, history_path(out_dir), params=params)
    render_history_timeseries(
        history,
        timeseries_figure_path(out_dir),
        name_a=params.name_a,
        name_b=params.name_b,
        total_population=params.total_population,
        theme=theme,
    )
    count_a, count_b = session.counts
    summary = {
        "frames": session.frame,
        "step": session.step,
        "name_a": params.name_a,
        "name_b": params.name_b,
        "count_a": count_a,
        "count_b": count_b,
        "prob_a_to_b_pct": params.prob_a_to_b_pct,
        "prob_b_to_a_pct": params.prob_b_to_a_pct,
        "history_samples": len(history),
    }
    summary_path(out_dir).write_text(json.dumps(summary, indent=2))
    session.teardown()
    print(json.dumps(summary, ensure_ascii=False, indent=2))


def _handle_view(args: argparse.Namespace, file_cfg: dict[str, object]) -> None:
    params, config, rng = _resolve_settings(args, file_cfg)
    theme = get_theme(_get_str(args.theme, "theme", file_cfg, "light"))
    interval_ms = _get_int(args.interval_ms, "interval_ms", file_cfg, 16)
    viewer = LiveViewer(params=params, config=config, rng=rng, theme=theme, interval_ms=interval_ms)
    viewer.show(autostart=args.autostart)


def _handle_animate(args: argparse.Namespace, file_cfg: dict[str, object]) -> None:
    params, config, rng = _resolve_settings(args, file_cfg)
    theme = get_theme(_get_str(args.theme, "theme", file_cfg, "light"))
    frames = _get_int(args.frames, "frames", file_cfg, 300)
    fps = _get_int(args.fps, "fps", file_cfg, 30)
    output = resolve_within_base(Path(args.output), Path(args.base_dir).resolve())
    save_animation(
        output, frames, params=params, config=config, rng=rng, theme=theme, fps=fps
    )
    print(str(output))


# ---------------------------------------------------------------------------
# Main CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    file_cfg = _load_file_config(parser, args.config)
    try:
        args.func(args, file_cfg)
    except ValueError as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    main()
