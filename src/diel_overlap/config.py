"""
diel_overlap Configuration
==========================

This module handles configuration loading for activity analysis runs.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    DIEL_BANDWIDTH   -> density.bandwidth
    DIEL_GRID_SIZE   -> density.grid_size
    DIEL_KERNEL      -> density.kernel
    DIEL_RESAMPLES   -> bootstrap.n_resamples
    DIEL_SEED        -> bootstrap.seed
    DIEL_CONFIDENCE  -> bootstrap.confidence
    DIEL_WORKERS     -> bootstrap.n_workers
    DIEL_ESTIMATOR   -> analysis.estimator
    DIEL_LOG_LEVEL   -> logging.level
    DIEL_LOG_FORMAT  -> logging.format

Example:
    from diel_overlap.config import load_config

    settings = load_config("config.yaml")
    print(settings.density.bandwidth)
    print(settings.bootstrap.n_resamples)
"""

import os
import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from diel_overlap.density.kernels import KERNELS
from diel_overlap.overlap.bootstrap import CI_METHODS
from diel_overlap.overlap.estimators import ESTIMATORS


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class DensityConfig(BaseModel):
    """Circular kernel density configuration."""

    bandwidth: float = Field(
        default=1.0,
        gt=0,
        description="Smoothing multiplier; larger = smoother curves",
    )
    grid_size: int = Field(
        default=512,
        ge=2,
        description="Number of grid points on [0, 2π)",
    )
    kernel: str = Field(
        default="vonmises",
        description="Kernel: 'vonmises' or 'wrapped_normal'",
    )
    max_kappa: float = Field(
        default=500.0,
        gt=0,
        description="Cap on the fitted von Mises concentration",
    )

    @field_validator("kernel")
    @classmethod
    def validate_kernel(cls, v: str) -> str:
        """Ensure the kernel is known."""
        if v not in KERNELS:
            raise ValueError(f"kernel must be one of {sorted(KERNELS)}")
        return v


class BootstrapConfig(BaseModel):
    """Bootstrap confidence interval configuration."""

    n_resamples: int = Field(
        default=1000,
        ge=1,
        description="Number of bootstrap resamples",
    )
    confidence: float = Field(
        default=0.95,
        gt=0,
        lt=1.0,
        description="Confidence level of the interval",
    )
    ci_method: str = Field(
        default="percentile",
        description="Interval method: 'percentile', 'basic' or 'normal'",
    )
    seed: Optional[int] = Field(
        default=None,
        description="Seed for resampling (None = not reproducible)",
    )
    n_workers: int = Field(
        default=1,
        ge=1,
        description="Threads used for bootstrap replicates",
    )

    @field_validator("ci_method")
    @classmethod
    def validate_ci_method(cls, v: str) -> str:
        """Ensure the interval method is known."""
        if v not in CI_METHODS:
            raise ValueError(f"ci_method must be one of {list(CI_METHODS)}")
        return v


class LoaderConfig(BaseModel):
    """Input table configuration."""

    species_column: str = Field(default="species", description="Species label column")
    timestamp_column: str = Field(default="timestamp", description="Date-time column")
    time_column: Optional[str] = Field(
        default=None,
        description="Optional 'HH:MM:SS' column used instead of the timestamp",
    )
    date_column: Optional[str] = Field(
        default=None,
        description="Optional date column combined with time_column",
    )
    exclude: List[str] = Field(
        default_factory=lambda: ["none", "unknown"],
        description="Species labels dropped on load",
    )


class AnalysisConfig(BaseModel):
    """Analysis pipeline configuration."""

    estimator: str = Field(
        default="auto",
        description="Overlap estimator: 'dhat1', 'dhat4', 'dhat5' or 'auto'",
    )
    min_observations: int = Field(
        default=2,
        ge=1,
        description="Species with fewer observations are skipped",
    )

    @field_validator("estimator")
    @classmethod
    def validate_estimator(cls, v: str) -> str:
        """Ensure the estimator is known."""
        if v != "auto" and v not in ESTIMATORS:
            raise ValueError(f"estimator must be one of {list(ESTIMATORS) + ['auto']}")
        return v


class OutputConfig(BaseModel):
    """Report and figure output configuration."""

    report_path: Optional[str] = Field(
        default=None,
        description="Path of the JSON report (None = print to stdout)",
    )
    plots_dir: Optional[str] = Field(
        default=None,
        description="Directory for figures (None = no figures)",
    )
    dpi: int = Field(default=150, ge=50, le=600, description="Figure resolution")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for diel_overlap.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    density: DensityConfig = Field(default_factory=DensityConfig)
    bootstrap: BootstrapConfig = Field(default_factory=BootstrapConfig)
    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ValidationError: If a file or environment value is invalid
    """
    if config_path is not None and not Path(config_path).exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path:
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    # Build settings object
    settings = Settings.model_validate(config_data)

    return settings


def _apply_env_overrides(config_data: dict) -> None:
    """
    Apply environment variable overrides to config data.

    Values are passed through as strings; Settings validation converts them
    and rejects malformed values with a ValidationError.
    """

    # Density settings
    if env_bw := os.environ.get("DIEL_BANDWIDTH"):
        config_data.setdefault("density", {})["bandwidth"] = env_bw
    if env_grid := os.environ.get("DIEL_GRID_SIZE"):
        config_data.setdefault("density", {})["grid_size"] = env_grid
    if env_kernel := os.environ.get("DIEL_KERNEL"):
        config_data.setdefault("density", {})["kernel"] = env_kernel

    # Bootstrap settings
    if env_resamples := os.environ.get("DIEL_RESAMPLES"):
        config_data.setdefault("bootstrap", {})["n_resamples"] = env_resamples
    if env_seed := os.environ.get("DIEL_SEED"):
        config_data.setdefault("bootstrap", {})["seed"] = env_seed
    if env_conf := os.environ.get("DIEL_CONFIDENCE"):
        config_data.setdefault("bootstrap", {})["confidence"] = env_conf
    if env_workers := os.environ.get("DIEL_WORKERS"):
        config_data.setdefault("bootstrap", {})["n_workers"] = env_workers

    # Analysis settings
    if env_estimator := os.environ.get("DIEL_ESTIMATOR"):
        config_data.setdefault("analysis", {})["estimator"] = env_estimator

    # Logging settings
    if env_log := os.environ.get("DIEL_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("DIEL_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_fmt


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
