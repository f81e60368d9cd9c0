"""Parquet writer for award item snapshots.

Writes Arrow tables with consistent writer settings so repeated exports of
the same snapshot produce identical files.
"""

from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq


class ParquetWriter:
    """Writer for Parquet tables with deterministic output.

    Example:
        writer = ParquetWriter()
        writer.write(
            table=items_table,
            path=Path("exports/pacing.parquet"),
            metadata={"checkin_window_days": "14"},
        )
    """

    def __init__(
        self,
        compression: str = "snappy",
        version: str = "2.6",
    ) -> None:
        """Initialize Parquet writer.

        Args:
            compression: Compression codec (snappy, gzip, brotli, zstd, lz4).
            version: Parquet format version (1.0, 2.4, 2.6).
        """
        self.compression = compression
        self.version = version

    def write(
        self,
        table: pa.Table,
        path: Path,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Write Arrow table to Parquet file.

        Args:
            table: PyArrow table to write.
            path: Path to output Parquet file.
            metadata: Custom metadata to attach to the schema.
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        if metadata:
            existing_metadata = table.schema.metadata or {}
            combined_metadata = {**existing_metadata, **metadata}
            table = table.replace_schema_metadata(combined_metadata)

        pq.write_table(
            table,
            path,
            compression=self.compression,
            version=self.version,
            write_statistics=True,
            use_dictionary=True,
            store_schema=True,
        )

    @staticmethod
    def read(path: Path) -> pa.Table:
        """Read Parquet file into Arrow table.

        Raises:
            FileNotFoundError: If file doesn't exist.
        """
        return pq.read_table(path)
