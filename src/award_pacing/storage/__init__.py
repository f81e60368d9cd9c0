"""Record loading, Parquet output and the Postgres snapshot store."""

from award_pacing.storage.parquet_writer import ParquetWriter
from award_pacing.storage.records import RecordLoadError, load_records

__all__ = [
    "ParquetWriter",
    "RecordLoadError",
    "load_records",
]
