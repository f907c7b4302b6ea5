"""
Configuration loading from config.yaml.

Uses typed dataclasses throughout so the rest of the app gets IDE
completion and type-checker support without touching raw dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class RoundConfig:
    seed: int | None = None                 # seeds the pending-set RNG; None = system entropy
    check_invariants: bool = __debug__      # verify index consistency after every mutation


@dataclass
class SimulationConfig:
    entrants: list[str] = field(default_factory=list)
    tie_probability: float = 0.0   # chance that a simulated pairing ends in a tie


@dataclass
class Config:
    round: RoundConfig = field(default_factory=RoundConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    log_level: str = "INFO"


def load_config(path: str | Path = "config.yaml") -> Config:
    """
    Load and validate config.yaml.

    Raises:
        FileNotFoundError: config.yaml is missing.
        ValueError: required fields are absent or invalid.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {cfg_path.resolve()}\n"
            "Copy config.example.yaml to config.yaml and list your entrants."
        )

    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    try:
        round_raw = raw.get("round") or {}
        seed = round_raw.get("seed")
        round_cfg = RoundConfig(
            seed=None if seed is None else int(seed),
            check_invariants=_parse_check_invariants(round_raw.get("check_invariants")),
        )

        sim_raw = raw.get("simulation") or {}
        sim_cfg = SimulationConfig(
            entrants=_parse_entrants(sim_raw.get("entrants")),
            tie_probability=float(sim_raw.get("tie_probability", 0.0)),
        )

        logging_raw = raw.get("logging") or {}
        config = Config(
            round=round_cfg,
            simulation=sim_cfg,
            log_level=str(logging_raw.get("level", "INFO")).upper(),
        )
        _validate(config)
        return config

    except (AttributeError, KeyError, TypeError) as exc:
        raise ValueError(f"Invalid config.yaml structure: {exc}") from exc


def _validate(config: Config) -> None:
    if not 0.0 <= config.simulation.tie_probability <= 1.0:
        raise ValueError(
            "simulation.tie_probability must be between 0 and 1, "
            f"got {config.simulation.tie_probability}"
        )
    entrants = config.simulation.entrants
    if len(entrants) < 2:
        raise ValueError("simulation.entrants must list at least 2 entrants")
    if len(set(entrants)) != len(entrants):
        raise ValueError("simulation.entrants must not contain duplicates")
    if config.log_level not in LOG_LEVELS:
        raise ValueError(f"logging.level must be one of {LOG_LEVELS}, got '{config.log_level}'")


def _parse_check_invariants(value: object) -> bool:
    if value is None:
        return __debug__
    if isinstance(value, bool):
        return value
    raise ValueError(
        f"round.check_invariants must be true/false when provided, got {value!r}"
    )


def _parse_entrants(value: object) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(e) for e in value]
    raise ValueError(f"simulation.entrants must be a list of names, got {value!r}")
