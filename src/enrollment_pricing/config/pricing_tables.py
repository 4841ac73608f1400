"""
Pricing Tables - Immutable configuration for the quote engine.

Holds the base price per program level, the package discount / expiry terms
per session count, and the recognized promo codes. The engine never reads
module state; it is handed a PricingTables instance (the defaults below, or
one loaded from the CSV files in the pricing data directory).
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

import pandas as pd

logger = logging.getLogger(__name__)


class PricingTablesError(ValueError):
    """Raised when a pricing table file is malformed."""


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ProgramLevel:
    """A program level and its package base price (minor units)."""
    level_id: str
    name: str
    base_cents: int
    description: str = ""


@dataclass(frozen=True)
class PackageTerms:
    """Discount and validity window for a session-package size."""
    sessions: int
    discount_pct: int
    expiry_days: int


@dataclass(frozen=True)
class PricingTables:
    """
    Read-only lookup tables for quote calculation.

    Unknown levels resolve to ``default_level``; unknown session counts
    resolve to ``fallback_discount_pct`` / ``fallback_expiry_days``.
    """
    levels: Mapping[str, ProgramLevel]
    packages: Mapping[int, PackageTerms]
    promo_codes: Mapping[str, int]
    default_level: str = 'level2'
    fallback_discount_pct: int = 0
    fallback_expiry_days: int = 30

    def __post_init__(self):
        # Copy into read-only views
        object.__setattr__(self, 'levels', MappingProxyType(dict(self.levels)))
        object.__setattr__(self, 'packages', MappingProxyType(dict(self.packages)))

        promo_codes = {}
        for code, pct in self.promo_codes.items():
            key = str(code).strip().upper()
            if key in promo_codes:
                raise PricingTablesError(f"Promo code '{code}' duplicates '{key}' once upper-cased")
            promo_codes[key] = pct
        object.__setattr__(self, 'promo_codes', MappingProxyType(promo_codes))
        self._validate()

    def _validate(self):
        errors = []
        for level_id, level in self.levels.items():
            if level_id != level.level_id:
                errors.append(f"Level key '{level_id}' does not match level_id '{level.level_id}'")
            if not _is_int(level.base_cents):
                errors.append(f"Base price for '{level_id}' must be an integer number of cents")
            elif level.base_cents < 0:
                errors.append(f"Base price for '{level_id}' must be non-negative")
        if self.default_level not in self.levels:
            errors.append(f"Default level '{self.default_level}' is not in the level table")
        for sessions, terms in self.packages.items():
            if sessions != terms.sessions:
                errors.append(f"Package key {sessions} does not match sessions {terms.sessions}")
            if not _is_int(terms.discount_pct):
                errors.append(f"Package discount for {sessions} sessions must be an integer")
            elif not 0 <= terms.discount_pct <= 100:
                errors.append(f"Package discount for {sessions} sessions must be 0-100")
            if not _is_int(terms.expiry_days):
                errors.append(f"Expiry days for {sessions} sessions must be an integer")
            elif terms.expiry_days <= 0:
                errors.append(f"Expiry days for {sessions} sessions must be positive")
        for code, pct in self.promo_codes.items():
            if not code:
                errors.append("Promo code must not be blank")
            if not _is_int(pct):
                errors.append(f"Promo discount for '{code}' must be an integer")
            elif not 0 <= pct <= 100:
                errors.append(f"Promo discount for '{code}' must be 0-100")
        if not _is_int(self.fallback_discount_pct) or not 0 <= self.fallback_discount_pct <= 100:
            errors.append("Fallback package discount must be an integer 0-100")
        if not _is_int(self.fallback_expiry_days) or self.fallback_expiry_days <= 0:
            errors.append("Fallback expiry days must be a positive integer")
        if errors:
            raise PricingTablesError("; ".join(errors))

    def level(self, level_id: str) -> Optional[ProgramLevel]:
        return self.levels.get(level_id)

    def package(self, sessions: int) -> Optional[PackageTerms]:
        return self.packages.get(sessions)

    def promo_pct(self, code: str) -> Optional[int]:
        return self.promo_codes.get(code)

    @property
    def default_base_cents(self) -> int:
        return self.levels[self.default_level].base_cents


DEFAULT_PRICING_TABLES = PricingTables(
    levels={
        'level1': ProgramLevel(
            'level1', 'Level 1 - Beginner', 8000,
            'Perfect for English and Maths beginners aged 4-8',
        ),
        'level2': ProgramLevel(
            'level2', 'Level 2 - Intermediate', 10000,
            'For intermediate English and Maths learners aged 6-10',
        ),
        'level3': ProgramLevel(
            'level3', 'Level 3 - Advanced', 12000,
            'For advanced English and Maths learners aged 8-12',
        ),
    },
    packages={
        8: PackageTerms(8, 0, 30),
        16: PackageTerms(16, 10, 60),
        24: PackageTerms(24, 20, 90),
    },
    promo_codes={'WELCOME10': 10},
)


LEVELS_FILE = 'levels.csv'
PACKAGES_FILE = 'packages.csv'
PROMO_CODES_FILE = 'promo_codes.csv'


def _read_table(path: Path, required: list[str], upper_key: bool = False) -> pd.DataFrame:
    """
    Read a CSV as strings, strip cells and headers, and check columns.

    The first required column is the key; it must be unique (after
    upper-casing when ``upper_key`` is set).
    """
    try:
        df = pd.read_csv(path, dtype=str).fillna('')
    except pd.errors.EmptyDataError:
        raise PricingTablesError(f"{path.name} is empty") from None
    df.columns = [c.strip() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise PricingTablesError(f"{path.name} is missing columns: {', '.join(missing)}")

    if upper_key:
        df[required[0]] = df[required[0]].str.upper()
    df = df[df[required[0]] != '']
    dupes = df[df[required[0]].duplicated()][required[0]].tolist()
    if dupes:
        raise PricingTablesError(f"{path.name} has duplicate {required[0]} values: {', '.join(dupes)}")
    return df


def _to_int(value: str, path: Path, column: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise PricingTablesError(f"{path.name}: '{value}' in column {column} is not an integer") from None


def load_pricing_tables(directory: Optional[Path] = None, default_level: str = 'level2') -> PricingTables:
    """
    Load pricing tables from CSV files.

    Each of levels.csv, packages.csv and promo_codes.csv is optional; a
    missing file (or a missing directory) keeps the built-in default table.

    Args:
        directory: Folder holding the CSV files
        default_level: Level used when a quote names an unknown level

    Returns:
        PricingTables instance
    """
    defaults = DEFAULT_PRICING_TABLES
    if directory is None or not directory.exists():
        logger.info("Pricing data directory %s not found, using built-in tables", directory)
        return defaults

    levels = dict(defaults.levels)
    levels_path = directory / LEVELS_FILE
    if levels_path.exists():
        df = _read_table(levels_path, ['level', 'name', 'base_cents'])
        levels = {
            row['level']: ProgramLevel(
                level_id=row['level'],
                name=row['name'],
                base_cents=_to_int(row['base_cents'], levels_path, 'base_cents'),
                description=row.get('description', ''),
            )
            for _, row in df.iterrows()
        }

    packages = dict(defaults.packages)
    packages_path = directory / PACKAGES_FILE
    if packages_path.exists():
        df = _read_table(packages_path, ['sessions', 'discount_pct', 'expiry_days'])
        packages = {}
        for _, row in df.iterrows():
            sessions = _to_int(row['sessions'], packages_path, 'sessions')
            packages[sessions] = PackageTerms(
                sessions=sessions,
                discount_pct=_to_int(row['discount_pct'], packages_path, 'discount_pct'),
                expiry_days=_to_int(row['expiry_days'], packages_path, 'expiry_days'),
            )

    promo_codes = dict(defaults.promo_codes)
    promos_path = directory / PROMO_CODES_FILE
    if promos_path.exists():
        df = _read_table(promos_path, ['code', 'discount_pct'], upper_key=True)
        promo_codes = {
            row['code']: _to_int(row['discount_pct'], promos_path, 'discount_pct')
            for _, row in df.iterrows()
        }

    tables = PricingTables(
        levels=levels,
        packages=packages,
        promo_codes=promo_codes,
        default_level=default_level,
    )
    logger.info(
        "Loaded pricing tables from %s: %d levels, %d packages, %d promo codes",
        directory, len(tables.levels), len(tables.packages), len(tables.promo_codes),
    )
    return tables
