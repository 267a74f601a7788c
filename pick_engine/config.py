"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``     : committed static defaults
  2. ``config/local.toml``       : optional local overrides (gitignored)
  3. ``.env``                    : local secrets and env overrides (gitignored)
  4. Environment variables       : ``PICK_ENGINE_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Every engine tunable lives in ``EngineConfig``.  The engine functions accept
an optional ``EngineConfig`` and fall back to ``EngineConfig()``; the
defaults below are the current production values, there are no versioned
alternatives.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator

from pick_engine.taxonomy.market_taxonomy import (
    CautionLevel,
    ConfidenceLevel,
    MarketType,
)


def _check_probability(name: str, v: float) -> float:
    if not 0.0 < v < 1.0:
        raise ValueError(f"{name} must be in (0.0, 1.0), got {v}.")
    return v


# ── Engine sub-config models ──────────────────────────────────────────────────


class ScoringConfig(BaseModel):
    """Per-candidate score terms (base + signals)."""

    model_config = ConfigDict(frozen=True)

    base_scores: dict[MarketType, int] = {
        MarketType.MATCH_RESULT: 50,
        MarketType.OVER_2_5: 50,
        MarketType.DOUBLE_CHANCE: 48,
        MarketType.OVER_1_5: 46,
    }

    # Sentiment signal
    volume_bonus: int = 10
    volume_threshold: float = 1000.0
    alignment_bonus: int = 10
    alignment_max_gap: float = 0.15
    alignment_min_probability: float = 0.35
    low_payout_penalty: int = -10
    low_payout_threshold: float = 0.96

    confidence_bonus: dict[ConfidenceLevel, int] = {
        ConfidenceLevel.HIGH: 20,
        ConfidenceLevel.MEDIUM: 10,
        ConfidenceLevel.LOW: 0,
    }

    # Probability tiebreak: 0 at floor, max_points at ceiling, linear between
    tiebreak_floor: float = 0.40
    tiebreak_ceiling: float = 0.70
    tiebreak_max_points: int = 8

    # Divergence between forecast and market
    divergence_value_gap: float = 0.10
    divergence_value_bonus: int = 5
    divergence_contra_gap: float = 0.15
    divergence_contra_penalty: int = -5

    # Coin-flip match winner
    low_probability_threshold: float = 0.55
    low_probability_penalty: int = -8

    @field_validator("base_scores")
    @classmethod
    def validate_base_scores(cls, v: dict[MarketType, int]) -> dict[MarketType, int]:
        missing = set(MarketType) - set(v)
        if missing:
            raise ValueError(f"base_scores missing market types: {sorted(missing)}.")
        return v

    @field_validator(
        "alignment_max_gap",
        "alignment_min_probability",
        "low_payout_threshold",
        "tiebreak_floor",
        "tiebreak_ceiling",
        "divergence_value_gap",
        "divergence_contra_gap",
        "low_probability_threshold",
    )
    @classmethod
    def validate_probability(cls, v: float, info: ValidationInfo) -> float:
        return _check_probability(info.field_name, v)

    @model_validator(mode="after")
    def validate_tiebreak_range(self) -> "ScoringConfig":
        if self.tiebreak_ceiling <= self.tiebreak_floor:
            raise ValueError(
                f"tiebreak_ceiling ({self.tiebreak_ceiling}) must be > "
                f"tiebreak_floor ({self.tiebreak_floor})."
            )
        return self


class RiskPenaltyRow(BaseModel):
    """Risk penalties for one forecast confidence level."""

    model_config = ConfigDict(frozen=True)

    mild: int
    strong: int
    combined_flags: int


class RiskPenaltyConfig(BaseModel):
    """Risk penalty table keyed by (forecast confidence x caution level)."""

    model_config = ConfigDict(frozen=True)

    high: RiskPenaltyRow = RiskPenaltyRow(mild=-15, strong=-30, combined_flags=-10)
    medium: RiskPenaltyRow = RiskPenaltyRow(mild=-10, strong=-20, combined_flags=-5)
    low: RiskPenaltyRow = RiskPenaltyRow(mild=-5, strong=-10, combined_flags=0)

    def row(self, confidence: ConfidenceLevel) -> RiskPenaltyRow:
        return {
            ConfidenceLevel.HIGH: self.high,
            ConfidenceLevel.MEDIUM: self.medium,
            ConfidenceLevel.LOW: self.low,
        }[confidence]

    def caution_penalty(self, confidence: ConfidenceLevel, caution: CautionLevel) -> int:
        row = self.row(confidence)
        if caution == CautionLevel.MILD:
            return row.mild
        if caution == CautionLevel.STRONG:
            return row.strong
        return 0


class ConstraintConfig(BaseModel):
    """Hard blocks that forbid a candidate from being the primary pick."""

    model_config = ConfigDict(frozen=True)

    # Usefulness ceiling (only active when the favorite is dominant)
    ceiling_favorite_threshold: float = 0.68
    over_1_5_ceiling: float = 0.78
    double_chance_ceiling: float = 0.75

    # Draw safeguard
    draw_min_probability: float = 0.15
    draw_max_favorite_probability: float = 0.65

    @field_validator("*")
    @classmethod
    def validate_probability(cls, v: float, info: ValidationInfo) -> float:
        return _check_probability(info.field_name, v)


class DominanceConfig(BaseModel):
    """Lopsided-favorite override."""

    model_config = ConfigDict(frozen=True)

    favorite_min_probability: float = 0.60
    underdog_max_probability: float = 0.25
    min_total_volume: float = 500.0
    expressive_boost: int = 8

    @field_validator("favorite_min_probability", "underdog_max_probability")
    @classmethod
    def validate_probability(cls, v: float, info: ValidationInfo) -> float:
        return _check_probability(info.field_name, v)


class SelectionConfig(BaseModel):
    """Primary/secondary selection parameters."""

    model_config = ConfigDict(frozen=True)

    safe_block_boost: int = 4
    secondary_margin: int = 15
    other_markets_limit: int = 4
    correlated_pairs: list[tuple[MarketType, MarketType]] = [
        (MarketType.MATCH_RESULT, MarketType.DOUBLE_CHANCE),
        (MarketType.OVER_1_5, MarketType.DOUBLE_CHANCE),
        (MarketType.OVER_1_5, MarketType.OVER_2_5),
    ]

    @field_validator("other_markets_limit")
    @classmethod
    def validate_other_markets_limit(cls, v: int) -> int:
        if not 0 <= v <= 4:
            raise ValueError(f"other_markets_limit must be in [0, 4], got {v}.")
        return v

    def are_correlated(self, first: MarketType, second: MarketType) -> bool:
        return any(
            {first, second} == {a, b} for a, b in self.correlated_pairs
        )


class ClassificationConfig(BaseModel):
    """Category thresholds on the primary's final score."""

    model_config = ConfigDict(frozen=True)

    banker_min_score: int = 70
    value_min_score: int = 55
    sanity_max_divergence: float = 0.25

    @field_validator("sanity_max_divergence")
    @classmethod
    def validate_divergence(cls, v: float) -> float:
        return _check_probability("sanity_max_divergence", v)

    @model_validator(mode="after")
    def validate_ordering(self) -> "ClassificationConfig":
        if self.value_min_score > self.banker_min_score:
            raise ValueError(
                f"value_min_score ({self.value_min_score}) must be <= "
                f"banker_min_score ({self.banker_min_score})."
            )
        return self


class DailyCapConfig(BaseModel):
    """Cross-event ranking for one calendar day."""

    model_config = ConfigDict(frozen=True)

    min_score: int = 40
    max_picks: int = 5
    timezone: str = "Africa/Lagos"

    @field_validator("max_picks")
    @classmethod
    def validate_max_picks(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"max_picks must be >= 0, got {v}.")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{v}'.") from exc
        return v


class EngineConfig(BaseModel):
    """Every tunable of the scoring and selection engine."""

    model_config = ConfigDict(frozen=True)

    scoring: ScoringConfig = ScoringConfig()
    risk: RiskPenaltyConfig = RiskPenaltyConfig()
    constraints: ConstraintConfig = ConstraintConfig()
    dominance: DominanceConfig = DominanceConfig()
    selection: SelectionConfig = SelectionConfig()
    classification: ClassificationConfig = ClassificationConfig()
    daily_cap: DailyCapConfig = DailyCapConfig()


# ── Application sub-config models ─────────────────────────────────────────────


class FixtureSelectionConfig(BaseModel):
    """Which events are worth sending through the engine."""

    model_config = ConfigDict(frozen=True)

    market_confidence_threshold: float = 0.65
    big_teams: dict[str, list[str]] = {
        "EPL": [
            "Arsenal FC", "Chelsea FC", "Liverpool FC", "Manchester City FC",
            "Manchester United FC", "Tottenham Hotspur FC",
        ],
        "LALIGA": [
            "Real Madrid CF", "FC Barcelona", "Club Atlético de Madrid",
            "Athletic Club", "Real Sociedad de Fútbol",
        ],
        "BL1": [
            "FC Bayern München", "Borussia Dortmund", "RB Leipzig",
            "Bayer 04 Leverkusen",
        ],
        "SA": [
            "Juventus FC", "FC Internazionale Milano", "AC Milan", "SSC Napoli",
            "AS Roma", "SS Lazio",
        ],
        "FL1": [
            "Paris Saint-Germain FC", "AS Monaco FC", "Olympique de Marseille",
            "Olympique Lyonnais", "LOSC Lille",
        ],
        "CL": [
            "Real Madrid CF", "FC Barcelona", "FC Bayern München",
            "Manchester City FC", "Liverpool FC", "Paris Saint-Germain FC",
            "FC Internazionale Milano", "Juventus FC", "Arsenal", "Chelsea FC",
        ],
    }

    @field_validator("market_confidence_threshold")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        if not 0.0 < v < 1.0:
            raise ValueError(
                f"market_confidence_threshold must be in (0.0, 1.0), got {v}."
            )
        return v


class DataConfig(BaseModel):
    """Filesystem paths for inputs and reports."""

    model_config = ConfigDict(frozen=True)

    input_dir: str = "data/inputs"
    output_dir: str = "data/outputs"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth."""

    model_config = ConfigDict(frozen=True)

    engine: EngineConfig = EngineConfig()
    fixture_selection: FixtureSelectionConfig = FixtureSelectionConfig()
    data: DataConfig = DataConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    load_dotenv(dotenv_path=root / ".env", override=False)

    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply PICK_ENGINE_* env vars to the raw config dict.

    Supported overrides:
      PICK_ENGINE_LOG_LEVEL   → raw["logging"]["level"]
      PICK_ENGINE_OUTPUT_DIR  → raw["data"]["output_dir"]
      PICK_ENGINE_DEBUG       → raw["debug"]
    """
    if log_level := os.environ.get("PICK_ENGINE_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if output_dir := os.environ.get("PICK_ENGINE_OUTPUT_DIR"):
        raw.setdefault("data", {})["output_dir"] = output_dir

    if debug := os.environ.get("PICK_ENGINE_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    return AppConfig(
        engine=EngineConfig.model_validate(raw.get("engine", {})),
        fixture_selection=FixtureSelectionConfig(**raw.get("fixture_selection", {})),
        data=DataConfig(**raw.get("data", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
