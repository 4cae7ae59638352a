"""Split a totals payload into the region record and province records."""

from __future__ import annotations

from pactometro.common.constants import RECORD_TYPE_PROVINCE, RECORD_TYPE_REGION
from pactometro.common.errors import RecordNotFoundError
from pactometro.common.models import LocatedRecords, ProvinceRecord, RecordLine
from pactometro.common.slugs import province_id
from pactometro.feed.layout import LAYOUT_V1, FeedLayout, split_lines

DUPLICATE_REGION_RECORD = "DUPLICATE_REGION_RECORD"


def _field(fields: list[str], index: int) -> str:
    if index < len(fields):
        return fields[index].strip()
    return ""


def locate_records(body: str, layout: FeedLayout = LAYOUT_V1) -> LocatedRecords:
    region: RecordLine | None = None
    provinces: list[ProvinceRecord] = []
    warnings: list[str] = []

    for line_number, line in enumerate(split_lines(body), start=1):
        fields = line.split(";")
        record_type = _field(fields, layout.type_index)

        if record_type == RECORD_TYPE_REGION:
            if region is None:
                region = RecordLine(line_number=line_number, record_type=record_type, fields=fields)
            else:
                warnings.append(f"{DUPLICATE_REGION_RECORD}:line={line_number}")
        elif record_type == RECORD_TYPE_PROVINCE:
            name = _field(fields, layout.province_name_index)
            provinces.append(
                ProvinceRecord(
                    province_id=province_id(name),
                    province_name=name,
                    line_number=line_number,
                    fields=fields,
                )
            )

    if region is None:
        raise RecordNotFoundError(f'No record of type "{RECORD_TYPE_REGION}" found in totals payload')

    return LocatedRecords(region=region, provinces=provinces, warnings=warnings)


def fetch_and_locate(client, snapshot_id: str, layout: FeedLayout = LAYOUT_V1) -> LocatedRecords:
    return locate_records(client.fetch_totals(snapshot_id), layout=layout)
