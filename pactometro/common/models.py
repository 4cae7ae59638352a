"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class CandidacyResult:
    party_id: str
    party_name: str
    seats: int
    vote_pct: float | None
    votes: int
    code: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RecordLine:
    """One totals record split into its raw fields."""

    line_number: int
    record_type: str
    fields: list[str]


@dataclass(frozen=True)
class ProvinceRecord:
    province_id: str
    province_name: str
    line_number: int
    fields: list[str]


@dataclass(frozen=True)
class LocatedRecords:
    region: RecordLine
    provinces: list[ProvinceRecord]
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DecodedRecord:
    candidacies: list[CandidacyResult]
    pct_counted: float | None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidacies": [c.to_dict() for c in self.candidacies],
            "pct_counted": self.pct_counted,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class DecodedProvince:
    province_id: str
    province_name: str
    decoded: DecodedRecord

    @property
    def candidacies(self) -> list[CandidacyResult]:
        return self.decoded.candidacies

    def to_dict(self) -> dict[str, Any]:
        payload = {"province_id": self.province_id, "province_name": self.province_name}
        payload.update(self.decoded.to_dict())
        return payload


@dataclass(frozen=True)
class RegionRow:
    party_id: str
    party_name: str
    seats_2025: int
    vote_pct_2025: float | None
    seats_2023: int | None
    pct_escrutado: float | None
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProvinceRow:
    province_id: str
    province_name: str
    party_id: str
    party_name: str
    seats_2025: int
    vote_pct_2025: float | None
    votos_totales: int
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DecodedSnapshot:
    snapshot_id: str
    region: DecodedRecord
    provinces: list[DecodedProvince]
    warnings: list[str] = field(default_factory=list)

    def all_warnings(self) -> list[str]:
        out = list(self.warnings)
        out.extend(self.region.warnings)
        for province in self.provinces:
            out.extend(f"{province.province_id}:{w}" for w in province.decoded.warnings)
        return out

    def to_dict(self) -> dict[str, Any]:
        return {
            "snapshot_id": self.snapshot_id,
            "region": self.region.to_dict(),
            "provinces": [p.to_dict() for p in self.provinces],
            "warnings": self.all_warnings(),
        }
