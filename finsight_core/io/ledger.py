from __future__ import annotations

from pathlib import Path
from typing import List

import pandas as pd
import structlog

from finsight_core.domain.models import Record

logger = structlog.get_logger()

REQUIRED_COLUMNS = {"date", "amount", "kind"}


def load_ledger(csv_path: str | Path) -> List[Record]:
    """
    Read a ledger CSV (date, amount, kind[, category]) into records.
    Cells are kept as read; bad dates or amounts are dealt with at aggregation.
    """
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(path)

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns in ledger CSV: {sorted(missing)}")

    has_category = "category" in df.columns
    records: List[Record] = []
    for _, row in df.iterrows():
        records.append(
            Record(
                timestamp=row["date"].strip(),
                amount=row["amount"].strip(),
                kind=row["kind"].strip().lower(),
                category=row["category"].strip() if has_category else "",
            )
        )
    logger.info("ledger_loaded", path=str(path), records=len(records))
    return records
