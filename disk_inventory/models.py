from dataclasses import dataclass, astuple
from pathlib import Path
from typing import Optional, Tuple

# Declared column order per table. The integrity digest walks cells in
# exactly this order, so changing it changes every signature.
DATA_COLUMNS: Tuple[str, ...] = (
    "id",
    "full_path",
    "file_name",
    "file_extension",
    "hash_md5",
    "size_bytes",
    "date_creation",
    "date_last_modification",
)

METADATA_COLUMNS: Tuple[str, ...] = (
    "id",
    "signature_md5",
    "challenge",
    "so",
    "architecture",
    "date_db_creation",
)


@dataclass
class FileRecord:
    """
    One enumerated filesystem entry.

    Created Unenriched (empty strings, size_bytes None) and populated once
    by the enrichment worker owning its id.
    """
    full_path: str
    file_name: str = ""
    file_extension: str = ""
    hash_md5: str = ""
    size_bytes: Optional[int] = None
    date_creation: str = ""
    date_last_modification: str = ""
    id: Optional[int] = None

    @classmethod
    def placeholder(cls, path) -> "FileRecord":
        return cls(full_path=str(path))

    @classmethod
    def from_row(cls, row: tuple) -> "FileRecord":
        """Builds a record from a row selected in DATA_COLUMNS order."""
        rid, full_path, name, ext, md5, size, created, modified = row
        return cls(
            id=rid,
            full_path=full_path,
            file_name=name or "",
            file_extension=ext or "",
            hash_md5=md5 or "",
            size_bytes=size,
            date_creation=created or "",
            date_last_modification=modified or "",
        )

    def as_row(self) -> tuple:
        """Values in DATA_COLUMNS order."""
        return (
            self.id,
            self.full_path,
            self.file_name,
            self.file_extension,
            self.hash_md5,
            self.size_bytes,
            self.date_creation,
            self.date_last_modification,
        )

    @property
    def is_enriched(self) -> bool:
        return self.size_bytes is not None or bool(self.hash_md5)


@dataclass
class RunMetadata:
    signature_md5: str
    challenge: str
    so: str
    architecture: str
    date_db_creation: str
    id: Optional[int] = None

    @classmethod
    def from_row(cls, row: tuple) -> "RunMetadata":
        rid, signature, challenge, so, arch, created = row
        return cls(
            id=rid,
            signature_md5=signature,
            challenge=challenge,
            so=so,
            architecture=arch,
            date_db_creation=created,
        )

    def as_row(self) -> tuple:
        return (self.id,) + astuple(self)[:-1]


@dataclass
class RunSummary:
    """What the coordinator hands back once a run is finished."""
    record_count: int
    workers: int
    elapsed_sec: float
    db_path: Path
    signature: str
