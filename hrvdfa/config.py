from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ArtifactConfig(BaseModel):
    """Physiological bounds used to accept, repair or drop RR intervals.
    """

    min_rr_ms: float = Field(300.0, gt=0, description="Shortest plausible RR interval (~200 bpm)")
    max_rr_ms: float = Field(1300.0, gt=0, description="Longest plausible RR interval (~46 bpm)")
    max_relative_jump: float = Field(
        0.30, gt=0, description="Max |rr - last accepted| / last accepted before a beat is an artifact"
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> "ArtifactConfig":
        if self.min_rr_ms >= self.max_rr_ms:
            raise ValueError("min_rr_ms must be below max_rr_ms")
        return self


class DfaConfig(BaseModel):
    min_box_size: int = Field(4, ge=2, description="Smallest box (beats) for alpha1")
    max_box_size: int = Field(16, ge=2, description="Largest box (beats) for alpha1")
    min_samples: int = Field(50, ge=1, description="Cleaned beats required before alpha1 is defined")
    zero_floor: float = Field(
        1e-9, ge=0, description="F(n) at or below this is treated as zero and excluded"
    )

    @model_validator(mode="after")
    def _check_boxes(self) -> "DfaConfig":
        if self.max_box_size <= self.min_box_size:
            raise ValueError("max_box_size must exceed min_box_size")
        return self

    @property
    def box_sizes(self) -> List[int]:
        return list(range(self.min_box_size, self.max_box_size + 1))


class WindowConfig(BaseModel):
    window_width: int = Field(200, ge=1, description="Beats fed to each alpha1 computation")
    headroom: int = Field(50, ge=0, description="Extra beats kept beyond the window")

    @property
    def capacity(self) -> int:
        return self.window_width + self.headroom


class ZoneThresholds(BaseModel):
    """Display-only alpha1 levels for aerobic (AeT) and anaerobic (AnT) threshold.
    """

    aerobic: float = Field(0.75, description="alpha1 above this reads as aerobic")
    anaerobic: float = Field(0.50, description="alpha1 at or below this reads as anaerobic")

    @model_validator(mode="after")
    def _check_order(self) -> "ZoneThresholds":
        if self.anaerobic >= self.aerobic:
            raise ValueError("anaerobic threshold must be below aerobic threshold")
        return self


class HistoryConfig(BaseModel):
    min_interval_ms: int = Field(2000, ge=0, description="Minimum spacing of stored history points")


class RuntimeConfig(BaseModel):
    artifacts: ArtifactConfig = Field(default_factory=ArtifactConfig)
    dfa: DfaConfig = Field(default_factory=DfaConfig)
    window: WindowConfig = Field(default_factory=WindowConfig)
    zones: ZoneThresholds = Field(default_factory=ZoneThresholds)
    history: HistoryConfig = Field(default_factory=HistoryConfig)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    HRVDFA_CONFIG: Optional[str] = None

    @field_validator("LOG_FORMAT")
    @classmethod
    def _check_format(cls, v: str) -> str:
        v = v.lower()
        if v not in {"json", "text"}:
            raise ValueError("LOG_FORMAT must be 'json' or 'text'")
        return v


class AppConfig(BaseModel):
    env: EnvSettings
    runtime: RuntimeConfig

    @field_validator("env", mode="before")
    @classmethod
    def _coerce_env(cls, v):  # type: ignore[no-untyped-def]
        if isinstance(v, dict):
            return EnvSettings(**v)
        return v

    @staticmethod
    def load(config_path: Optional[Path] = None) -> "AppConfig":
        env = EnvSettings()  # loads from environment and .env

        runtime = RuntimeConfig()
        if config_path is None:
            if env.HRVDFA_CONFIG:
                config_path = Path(env.HRVDFA_CONFIG)
            else:
                default_path = Path("config.yaml")
                config_path = default_path if default_path.exists() else None

        if config_path is not None:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ValueError(f"Config file not found: {config_path}")
            with open(config_path, "r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
            try:
                runtime = RuntimeConfig(**raw)
            except (ValidationError, TypeError) as ve:
                raise ValueError(f"Invalid {config_path.name}: {ve}")

        return AppConfig(env=env, runtime=runtime)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load merged configuration from environment and optional YAML."""

    return AppConfig.load(config_path)
