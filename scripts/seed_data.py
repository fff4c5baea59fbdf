"""
Schema and sample data loader for the Hydro Query Gateway.

Creates the development schema from `db/init.sql`, generates deterministic
pseudo-random infrastructure, water-level and rainfall rows, writes them as
CSV and loads them with Postgres COPY.
"""

from __future__ import annotations

import csv
import random
import sys
import tempfile
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, Sequence

import psycopg
import typer

from hydro_gateway.domain.models import (
    PUMP_HOUSE,
    PUMP_STATION,
    SLUICE_GATE,
    SLUICE_GATE_ABBREVIATION,
    WEIR,
)
from hydro_gateway.infrastructure.db_factory import build_dsn

app = typer.Typer(help="Create the schema and load sample hydrology data into Postgres.")

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "db" / "init.sql"

INFRASTRUC_COLUMNS = (
    "infrastruc_id",
    "infrastruc_name",
    "infrastruc_type",
    "coordinates_lat",
    "coordinates_long",
    "province",
)
WATERLEVEL_COLUMNS = ("province", "waterlevel_value", "waterlevel_date")
RAINFALL_COLUMNS = ("rainfall_value", "rainfall_datetime", "station_id")

# Exact labels plus longer phrases that only match as substrings.
INFRASTRUC_TYPES = (
    SLUICE_GATE,
    f"{SLUICE_GATE}ปากคลอง",
    f"อาคาร {SLUICE_GATE_ABBREVIATION}",
    WEIR,
    f"{WEIR}น้ำล้น",
    PUMP_STATION,
    f"{PUMP_HOUSE}ด้วยไฟฟ้า",
    "อ่างเก็บน้ำ",
)
PROVINCES = ("เชียงใหม่", "ลำพูน", "นครสวรรค์", "อยุธยา", "สงขลา")


def _build_dsn(dsn_override: str | None) -> str:
    if dsn_override:
        return dsn_override
    return build_dsn()


def _generate_infrastruc_rows(rng: random.Random, rows: int) -> list[list[str]]:
    out: list[list[str]] = []
    for i in range(1, rows + 1):
        infra_type = rng.choice(INFRASTRUC_TYPES)
        # Roughly one in five records falls outside the served bounding box.
        if rng.random() < 0.2:
            lat, lon = rng.uniform(21.0, 28.0), rng.uniform(106.0, 110.0)
        else:
            lat, lon = rng.uniform(5.61, 20.46), rng.uniform(97.35, 105.65)
        out.append(
            [
                str(i),
                f"{infra_type} {i}",
                infra_type,
                f"{lat:.6f}",
                f"{lon:.6f}",
                rng.choice(PROVINCES),
            ]
        )
    return out


def _generate_waterlevel_rows(rng: random.Random, start: datetime) -> list[list[str]]:
    return [
        [province, f"{rng.uniform(0, 12):.2f}", start.date().isoformat()]
        for province in PROVINCES
    ]


def _generate_rainfall_rows(
    rng: random.Random, start: datetime, days: int, stations: int
) -> list[list[str]]:
    out: list[list[str]] = []
    for day in range(days):
        ts = start + timedelta(days=day)
        for station in range(1, stations + 1):
            out.append([f"{rng.uniform(0, 120):.2f}", ts.isoformat(sep=" "), f"ST{station:03d}"])
    return out


def _write_csv(csv_path: Path, header: Sequence[str], rows: Iterable[Sequence[str]]) -> None:
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)


def _apply_schema(dsn: str, reset: bool = False) -> None:
    with psycopg.connect(dsn) as conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            if reset:
                cur.execute(
                    "TRUNCATE TABLE public.infrastruc, public.waterlevel_province, "
                    "public.rainfall_daily RESTART IDENTITY"
                )
        conn.commit()


def _copy_into_db(dsn: str, table: str, columns: Sequence[str], csv_path: Path) -> int:
    with psycopg.connect(dsn) as conn:
        with conn.cursor() as cur:
            with cur.copy(
                f"COPY public.{table} ({', '.join(columns)}) "
                "FROM STDIN WITH (FORMAT csv, HEADER TRUE)"
            ) as copy:
                with csv_path.open("r", encoding="utf-8") as f:
                    for line in f:
                        copy.write(line)
            rowcount = cur.rowcount
        conn.commit()
    return rowcount


def seed(
    dsn: str,
    infrastruc_rows: int = 40,
    rainfall_days: int = 31,
    stations: int = 3,
    seed_value: int = 42,
    start: datetime = datetime(2024, 1, 1),
    reset: bool = True,
) -> dict[str, int]:
    """
    Create the schema and load every table; returns rows loaded per table.
    """
    rng = random.Random(seed_value)
    _apply_schema(dsn, reset=reset)
    datasets = {
        "infrastruc": (INFRASTRUC_COLUMNS, _generate_infrastruc_rows(rng, infrastruc_rows)),
        "waterlevel_province": (WATERLEVEL_COLUMNS, _generate_waterlevel_rows(rng, start)),
        "rainfall_daily": (
            RAINFALL_COLUMNS,
            _generate_rainfall_rows(rng, start, rainfall_days, stations),
        ),
    }
    loaded: dict[str, int] = {}
    with tempfile.TemporaryDirectory(prefix="hydro_seed_") as tmpdir:
        for table, (columns, rows) in datasets.items():
            csv_path = Path(tmpdir) / f"{table}.csv"
            _write_csv(csv_path, columns, rows)
            loaded[table] = _copy_into_db(dsn, table, columns, csv_path)
    return loaded


@app.command()
def main(
    infrastruc_rows: int = typer.Option(
        40,
        "--infrastruc-rows",
        "-i",
        help="Number of infrastructure records to generate.",
    ),
    rainfall_days: int = typer.Option(
        31,
        "--rainfall-days",
        "-d",
        help="Number of consecutive days of rainfall readings.",
    ),
    stations: int = typer.Option(
        3,
        "--stations",
        help="Number of rainfall stations reporting each day.",
    ),
    seed_value: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    keep: bool = typer.Option(
        False,
        "--keep",
        help="Append to existing rows instead of truncating the tables first.",
    ),
) -> None:
    """
    Create the schema and load deterministic sample data using COPY.
    """
    start = time.perf_counter()
    loaded = seed(
        _build_dsn(dsn),
        infrastruc_rows=infrastruc_rows,
        rainfall_days=rainfall_days,
        stations=stations,
        seed_value=seed_value,
        reset=not keep,
    )
    duration = time.perf_counter() - start
    for table, count in loaded.items():
        typer.echo(f"{table:<20} {count:>6,} rows")
    typer.echo(f"Seed completed in {duration:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
