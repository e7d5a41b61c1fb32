"""Shared Pydantic data contracts for Laptop Advisor.

These models define the shapes that cross the boundary between the
persistence/HTTP layers and the analysis engine. All modules import from here.
"""

from __future__ import annotations

import json
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from .gpu_tier import clamp_gpu_tier, get_gpu_tier

# Sentinel the spec normalizer emits when the CPU could not be parsed
UNKNOWN_CPU = "알 수 없음"


# === Enums ===

class Usage(str, Enum):
    """Use cases a laptop is scored against."""
    GAMING = "gaming"
    WORK = "work"
    STUDENT = "student"
    VIDEO = "video"
    PORTABLE = "portable"


class Priority(str, Enum):
    """What the buyer cares about most in the recommendation wizard."""
    VALUE = "value"
    PERFORMANCE = "performance"
    PORTABLE = "portable"
    LATEST = "latest"


# === Hardware spec ===

class ParsedSpec(BaseModel):
    """Normalized hardware description of a single laptop."""
    cpu: str = UNKNOWN_CPU
    cpu_gen: str | None = None
    gpu: str | None = None
    gpu_vram: int | None = Field(default=None, ge=0, description="VRAM in GB")
    gpu_tier: int | None = Field(default=None, description="1 (iGPU) .. 10 (flagship)")
    ram_gb: int = Field(default=16, gt=0)
    ram_type: str | None = None
    ssd_gb: int = Field(default=512, gt=0)
    screen_size: float | None = Field(default=None, gt=0, description="Inches")
    resolution: str | None = None
    refresh_rate: int | None = Field(default=None, gt=0, description="Hz")
    panel_type: str | None = None
    brightness: int | None = Field(default=None, ge=0, description="nits")
    color_gamut: str | None = None
    weight_kg: float | None = Field(default=None, gt=0)
    battery_wh: float | None = Field(default=None, gt=0)
    usb_a_count: int | None = Field(default=None, ge=0)
    usb_c_count: int | None = Field(default=None, ge=0)
    thunderbolt: bool = False
    hdmi_version: str | None = None
    sd_card: bool = False
    lan_port: bool = False
    audio_jack: bool = True
    wifi_version: str | None = None
    bt_version: str | None = None
    pcie_gen: str | None = None
    has_npu: bool = False

    @field_validator("cpu", mode="before")
    @classmethod
    def _default_unknown_cpu(cls, value: str | None) -> str:
        if value is None or not str(value).strip():
            return UNKNOWN_CPU
        return str(value).strip()

    @model_validator(mode="after")
    def _resolve_gpu_tier(self) -> ParsedSpec:
        if self.gpu_tier is None:
            self.gpu_tier = get_gpu_tier(self.gpu)
        else:
            self.gpu_tier = clamp_gpu_tier(self.gpu_tier)
        return self

    @property
    def has_hdmi(self) -> bool:
        return bool(self.hdmi_version)

    @property
    def effective_refresh_rate(self) -> int:
        return self.refresh_rate or 60


# === Recommendation query ===

class Budget(BaseModel):
    """Inclusive price range in KRW."""
    min: int = Field(default=0, ge=0)
    max: int = Field(ge=0)

    @model_validator(mode="after")
    def _check_range(self) -> Budget:
        if self.min > self.max:
            raise ValueError(f"budget min {self.min:,} exceeds max {self.max:,}")
        return self


class RecommendRequest(BaseModel):
    """Wizard input: budget, requested use cases and a priority."""
    budget: Budget | None = None
    usage: list[Usage] = Field(default_factory=list)
    priority: Priority | None = None

    def stable_cache_key(self) -> str:
        """Deterministic cache key for the narrative built on this query."""
        payload = self.model_dump(mode="json")
        payload["usage"] = sorted(payload["usage"])
        return "recommend:" + json.dumps(payload, sort_keys=True, ensure_ascii=False)
