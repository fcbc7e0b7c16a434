# export.py
from __future__ import annotations
from pathlib import Path
from typing import Sequence

import pandas as pd

from models import RecordReading

COLUMNS = ["id", "timestamp", "temperature", "humidity", "light"]


def records_dataframe(records: Sequence[RecordReading]) -> pd.DataFrame:
    rows = [
        {
            "id": r.id,
            "timestamp": r.timestamp,
            "temperature": r.temperature,
            "humidity": r.humidity,
            "light": r.light,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def export_to_excel(records: Sequence[RecordReading], output_file: Path) -> None:
    df = records_dataframe(records)
    if Path(output_file).suffix.lower() == ".csv":
        df.to_csv(output_file, index=False)
    else:
        df.to_excel(output_file, index=False)
