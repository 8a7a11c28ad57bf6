"""Configuration loader wrapping the shared schema models."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .defaults import DEFAULT_YEAR, default_configuration
from .schema import (
    BenefitConfig,
    ChildcareCostConfig,
    ConfigurationError,
    ContributionRates,
    FamilyAllowanceConfig,
    FamilyBonusConfig,
    GenericHousingConfig,
    GraduatedRate,
    HousingSubsidyConfig,
    MinimumIncomeConfig,
    RegionInfo,
    SingleEarnerConfig,
    SpecialPaymentConfig,
    StyriaHousingConfig,
    TaxBracket,
    TaxConfig,
    TaxYearManifest,
    TaxYearManifestEntry,
    ViennaHousingConfig,
    YearConfiguration,
    lookup_tier,
)

_LOGGER = logging.getLogger(__name__)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> TaxYearManifest:
    """Load and cache the configuration manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return TaxYearManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


@lru_cache(maxsize=8)
def load_year_configuration(year: int) -> YearConfiguration:
    """Load configuration for the specified tax year from disk."""

    try:
        manifest_entry = load_manifest().get_entry(year)
    except KeyError as exc:
        raise FileNotFoundError(f"Configuration for year {year} not declared in manifest") from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file for year {year} missing: {config_file.name}"
        )

    raw_config = _load_yaml(config_file)
    raw_config.setdefault("year", year)

    try:
        configuration = YearConfiguration.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(f"Configuration validation failed for {year}: {error}") from error

    if configuration.year != year:
        raise ConfigurationError(
            f"Configuration year mismatch: expected {year}, found {configuration.year}"
        )

    return configuration


@dataclass(frozen=True)
class ConfigurationResult:
    """Outcome of loading a year configuration with a deterministic fallback.

    ``error`` carries the load failure when ``configuration`` is the hardcoded
    default table rather than the published YAML file.
    """

    configuration: YearConfiguration
    error: Exception | None = None

    @property
    def is_fallback(self) -> bool:
        return self.error is not None


def load_configuration(year: int | None = None) -> ConfigurationResult:
    """Load ``year`` (or the latest configured year), falling back to defaults."""

    try:
        resolved_year = year if year is not None else latest_year()
        return ConfigurationResult(load_year_configuration(resolved_year))
    except (FileNotFoundError, ConfigurationError, OSError, yaml.YAMLError) as exc:
        fallback_year = year if year is not None else DEFAULT_YEAR
        _LOGGER.warning(
            "Falling back to default configuration for %s: %s", fallback_year, exc
        )
        return ConfigurationResult(default_configuration(fallback_year), exc)


def available_years() -> Sequence[int]:
    """Return the tax years declared in the manifest."""

    return load_manifest().supported_years


def latest_year() -> int:
    """Return the most recent configured tax year."""

    years = available_years()
    if not years:
        raise ConfigurationError("Configuration manifest declares no years")
    return years[-1]


__all__ = [
    "BenefitConfig",
    "CONFIG_DIRECTORY",
    "ChildcareCostConfig",
    "ConfigurationError",
    "ConfigurationResult",
    "ContributionRates",
    "FamilyAllowanceConfig",
    "FamilyBonusConfig",
    "GenericHousingConfig",
    "GraduatedRate",
    "HousingSubsidyConfig",
    "MANIFEST_FILE",
    "MinimumIncomeConfig",
    "RegionInfo",
    "SingleEarnerConfig",
    "SpecialPaymentConfig",
    "StyriaHousingConfig",
    "TaxBracket",
    "TaxConfig",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ViennaHousingConfig",
    "YearConfiguration",
    "available_years",
    "default_configuration",
    "latest_year",
    "load_configuration",
    "load_manifest",
    "load_year_configuration",
    "lookup_tier",
]
