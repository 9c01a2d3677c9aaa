"""
Base models for gpiosim configuration and description files.

Provides shared base models with centralized configuration for all
schema classes, so individual models don't repeat ``model_config``.

Two ``extra`` policies exist:
StrictModel (extra="forbid") is for objects a user writes by hand
(GpioConfig, Scenario steps) where extra fields indicate typos.
FlexibleModel (extra="ignore") is for memory-map models where vendor
extensions like ``x-vendor-attr`` are accepted silently.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class GpioBaseModel(BaseModel):
    """Base model with shared configuration for all gpiosim schema models.

    Provides camelCase aliasing, assignment validation, and allows field
    population by either alias or Python name.
    """

    model_config = {
        "validate_assignment": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class StrictModel(GpioBaseModel):
    """Base model that forbids unknown fields."""

    model_config = {
        **GpioBaseModel.model_config,
        "extra": "forbid",
    }


class FlexibleModel(GpioBaseModel):
    """Base model that silently ignores unknown fields."""

    model_config = {
        **GpioBaseModel.model_config,
        "extra": "ignore",
    }
