#!/usr/bin/env python3
"""
Generate per-country holiday lists for the Gantt chart's days-off settings.

Usage:
  python scripts/generate_holidays.py
  python scripts/generate_holidays.py --output-dir public/i18n/holidays --countries countries.json --year 2026

This writes one UTF-8 text file per country:
  - public/i18n/holidays/<CODE>.txt ("<date> <weekday> <name>" per line)
"""
from __future__ import annotations

import argparse
import datetime as dt
import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from babel.dates import format_date
import holidays
from holidays.constants import PUBLIC


DEFAULT_OUTPUT_DIR = Path("public/i18n/holidays")
YEARS_BEFORE = 2
YEARS_AFTER = 5
EXCLUDED_KINDS = {"observance"}


class UnrecognizedDateFormat(ValueError):
    pass


class DateFormat(Enum):
    MONTH_DAY_YEAR = "MM/dd/yyyy"
    YEAR_MONTH_DAY_SLASH = "yyyy/MM/dd"
    DAY_MONTH_YEAR_SLASH = "dd/MM/yyyy"
    DAY_MONTH_YEAR_DASH = "dd-MM-yyyy"
    YEAR_MONTH_DAY_DASH = "yyyy-MM-dd"

    @classmethod
    def parse(cls, value: str) -> "DateFormat":
        try:
            return cls(value)
        except ValueError:
            raise UnrecognizedDateFormat(f"Unrecognized date format: {value!r}") from None


_DATE_LAYOUTS: Dict[DateFormat, str] = {
    DateFormat.MONTH_DAY_YEAR: "{month}/{day}/{year}",
    DateFormat.YEAR_MONTH_DAY_SLASH: "{year}/{month}/{day}",
    DateFormat.DAY_MONTH_YEAR_SLASH: "{day}/{month}/{year}",
    DateFormat.DAY_MONTH_YEAR_DASH: "{day}-{month}-{year}",
    DateFormat.YEAR_MONTH_DAY_DASH: "{year}-{month}-{day}",
}


@dataclass(frozen=True)
class CountryConfig:
    code: str
    language: str
    date_format: DateFormat
    region: Optional[str] = None


@dataclass(frozen=True)
class HolidayEntry:
    date: dt.date
    name: str
    kind: str


COUNTRIES: Tuple[CountryConfig, ...] = (
    CountryConfig("US", "en", DateFormat.MONTH_DAY_YEAR),
    CountryConfig("JP", "ja", DateFormat.YEAR_MONTH_DAY_SLASH),
    CountryConfig("DE", "de", DateFormat.DAY_MONTH_YEAR_SLASH),
    CountryConfig("FR", "fr", DateFormat.DAY_MONTH_YEAR_SLASH),
    CountryConfig("CN", "zh", DateFormat.YEAR_MONTH_DAY_DASH),
    CountryConfig("KR", "ko", DateFormat.YEAR_MONTH_DAY_DASH),
    CountryConfig("CA", "en", DateFormat.YEAR_MONTH_DAY_DASH),
)


def load_country_table(path: Path) -> List[CountryConfig]:
    """Load and validate a JSON list of ``{code, language, dateFormat, region?}`` objects."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"Country table must be a JSON list: {path}")

    countries: List[CountryConfig] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"Country entry #{index} is not an object")
        missing = [key for key in ("code", "language", "dateFormat") if not item.get(key)]
        if missing:
            raise ValueError(f"Country entry #{index} is missing: {', '.join(missing)}")
        countries.append(
            CountryConfig(
                code=str(item["code"]).upper(),
                language=str(item["language"]),
                date_format=DateFormat.parse(str(item["dateFormat"])),
                region=item.get("region") or None,
            )
        )
    return countries


class HolidayProvider(Protocol):
    def fetch(self, country: CountryConfig, year: int) -> List[HolidayEntry]:
        ...


def negotiate_language(language: str, supported: Iterable[str]) -> Optional[str]:
    # "en" -> "en_US" when only regional variants exist; None keeps the country default
    supported = list(supported)
    if language in supported:
        return language
    prefix = language.split("_")[0] + "_"
    for candidate in supported:
        if candidate.startswith(prefix):
            return candidate
    return None


class PythonHolidaysProvider:
    """Holiday data backed by the ``holidays`` package, one entry per (date, name, category)."""

    def __init__(self, categories: Sequence[str] = (PUBLIC,)) -> None:
        self.categories = tuple(categories)

    def fetch(self, country: CountryConfig, year: int) -> List[HolidayEntry]:
        probe = holidays.country_holidays(country.code, subdiv=country.region)
        language = negotiate_language(country.language, getattr(probe, "supported_languages", ()))
        supported_categories = set(getattr(probe, "supported_categories", (PUBLIC,)))

        entries: List[HolidayEntry] = []
        for category in self.categories:
            if category not in supported_categories:
                continue
            calendar = holidays.country_holidays(
                country.code,
                subdiv=country.region,
                years=year,
                language=language,
                categories=(category,),
            )
            for day in sorted(calendar):
                for name in calendar.get_list(day):
                    entries.append(HolidayEntry(date=day, name=name, kind=category))

        entries.sort(key=lambda e: e.date)
        return entries


def format_holiday(country: CountryConfig, holiday: HolidayEntry) -> str:
    locale = country.language
    parts = {
        "year": format_date(holiday.date, "yyyy", locale=locale),
        "month": format_date(holiday.date, "MM", locale=locale),
        "day": format_date(holiday.date, "dd", locale=locale),
    }
    weekday = format_date(holiday.date, "EEE", locale=locale)

    layout = _DATE_LAYOUTS.get(country.date_format)
    if layout is None:
        raise UnrecognizedDateFormat(f"Unrecognized date format: {country.date_format!r}")
    formatted_date = layout.format(**parts)
    return f"{formatted_date} {weekday} {holiday.name}"


def year_window(current_year: int) -> range:
    return range(current_year - YEARS_BEFORE, current_year + YEARS_AFTER + 1)


def collect_holidays(provider: HolidayProvider, country: CountryConfig, years: Iterable[int]) -> List[HolidayEntry]:
    collected: List[HolidayEntry] = []
    for year in years:
        collected.extend(h for h in provider.fetch(country, year) if h.kind not in EXCLUDED_KINDS)
    return collected


def export_holidays(
    output_dir: Path = DEFAULT_OUTPUT_DIR,
    countries: Sequence[CountryConfig] = COUNTRIES,
    provider: Optional[HolidayProvider] = None,
    current_year: Optional[int] = None,
) -> List[Path]:
    provider = provider or PythonHolidaysProvider()
    if current_year is None:
        current_year = dt.date.today().year

    output_dir.mkdir(parents=True, exist_ok=True)

    written: List[Path] = []
    for country in countries:
        entries = collect_holidays(provider, country, year_window(current_year))
        content = "\n".join(format_holiday(country, h) for h in entries)
        target = output_dir / f"{country.code}.txt"
        target.write_text(content, encoding="utf-8")
        print(f"  {target} ({len(entries)} holidays)")
        written.append(target)
    return written


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate per-country holiday text files")
    parser.add_argument("--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR, help="Directory for <CODE>.txt files")
    parser.add_argument("--countries", type=Path, default=None, help="JSON country table (default: built-in list)")
    parser.add_argument("--year", type=int, default=None, help="Reference year (default: current year)")
    args = parser.parse_args(argv)

    countries = load_country_table(args.countries) if args.countries else list(COUNTRIES)

    print("Generating holidays:")
    written = export_holidays(output_dir=args.output_dir, countries=countries, current_year=args.year)
    print(f"Done. {len(written)} files written to: {args.output_dir.resolve()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
