"""ORM conversion helpers."""

from __future__ import annotations

import enum

import pandas as pd


def _plain(value):
    return value.value if isinstance(value, enum.Enum) else value


def orm_to_df(objects, columns: list[str] | None = None, id_column_name: str | None = None) -> pd.DataFrame:
    """Convert ORM rows to a DataFrame; enum members become their values."""
    if not objects:
        return pd.DataFrame(columns=columns or [])

    rows = []
    for obj in objects:
        attrs = {k: v for k, v in obj.__dict__.items() if not k.startswith("_")}
        if columns:
            attrs = {name: attrs.get(name) for name in columns}
        rows.append({k: _plain(v) for k, v in attrs.items() if not hasattr(v, "__table__")})
    df = pd.DataFrame(rows)
    if id_column_name and "id" in df.columns:
        df = df.rename(columns={"id": id_column_name})
    return df
