from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.error import URLError

import pandas as pd

"""CSV reader for catalogue exports.

pandas does the CSV syntax work (quoting, delimiters, encodings). Every cell is
kept as text (dtype=str, no NA conversion) so coercion decisions stay with the
normalizer: "N/A" in a price column becomes NaN there, not here.
"""

__all__ = [
    "CatalogueReadError",
    "RawTable",
    "read_catalogue_csv",
    "parse_csv_text",
    "is_remote_source",
]


class CatalogueReadError(Exception):
    """Raised when the CSV source cannot be read or parsed."""


@dataclass
class RawTable:
    columns: list[str]
    rows: list[dict[str, Any]] = field(default_factory=list)  # 列名→生セル文字列


def is_remote_source(source: str | Path) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _frame_to_table(df: pd.DataFrame) -> RawTable:
    columns = [str(c) for c in df.columns]
    rows = df.to_dict(orient="records")
    return RawTable(columns=columns, rows=rows)


def _read(buffer_or_path: Any, encoding: str) -> RawTable:
    try:
        df = pd.read_csv(
            buffer_or_path,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
            skip_blank_lines=True,
            encoding=encoding,
        )
    except pd.errors.EmptyDataError:
        # 完全に空のファイル: 行なしとして扱い、呼び出し側で空データセット判定
        return RawTable(columns=[], rows=[])
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise CatalogueReadError(f"unparseable csv: {e}") from e
    return _frame_to_table(df)


def read_catalogue_csv(source: str | Path, *, encoding: str = "utf-8") -> RawTable:
    """Read a catalogue CSV from a local path or an http(s) URL.

    Raises:
        CatalogueReadError: missing file, network failure or malformed CSV
    """
    if not is_remote_source(source):
        path = Path(source)
        if not path.exists():
            raise CatalogueReadError(f"csv not found: {path}")
        if not path.is_file():
            raise CatalogueReadError(f"csv path is not a file: {path}")
        source = path
    try:
        return _read(source, encoding)
    except CatalogueReadError:
        raise
    except (OSError, URLError) as e:
        raise CatalogueReadError(f"failed to read {source}: {e}") from e


def parse_csv_text(text: str) -> RawTable:
    """Parse CSV text already held in memory (e.g. an uploaded file body)."""
    return _read(io.StringIO(text), "utf-8")
