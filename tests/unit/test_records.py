import pytest

from pactometro.common.errors import RecordNotFoundError
from pactometro.feed.records import fetch_and_locate, locate_records


def test_locate_splits_region_and_provinces_in_feed_order(extremadura_totals):
    located = locate_records(extremadura_totals)

    assert located.region.record_type == "CM"
    assert located.region.line_number == 1
    assert [(p.province_id, p.province_name) for p in located.provinces] == [
        ("badajoz", "Badajoz"),
        ("caceres", "Cáceres"),
    ]
    assert located.warnings == []


def test_first_region_record_wins_and_duplicates_are_reported(totals_line):
    body = "\n".join(
        [
            totals_line("PR", "Badajoz"),
            totals_line("CM", "Extremadura", pct_counted="1000"),
            totals_line("CM", "Extremadura", pct_counted="2000"),
        ]
    )

    located = locate_records(body)

    assert located.region.line_number == 2
    assert located.region.fields[9] == "1000"
    assert located.warnings == ["DUPLICATE_REGION_RECORD:line=3"]


def test_missing_region_record_raises(totals_line):
    with pytest.raises(RecordNotFoundError):
        locate_records(totals_line("PR", "Badajoz"))


def test_other_record_types_and_short_lines_are_ignored(totals_line):
    body = "\n".join(["garbage", "510;MU;x", totals_line("CM"), ""])

    located = locate_records(body)

    assert located.provinces == []


def test_no_provinces_is_allowed(totals_line):
    located = locate_records(totals_line("CM"))
    assert located.provinces == []


def test_fetch_and_locate_uses_snapshot_id(fake_feed_cls, extremadura_totals):
    client = fake_feed_cls("51", {"51": extremadura_totals})

    located = fetch_and_locate(client, "51")

    assert client.totals_requests == ["51"]
    assert len(located.provinces) == 2


def test_crlf_bodies_are_split_into_records(extremadura_totals):
    located = locate_records(extremadura_totals.replace("\n", "\r\n") + "\r\n")

    assert [p.province_name for p in located.provinces] == ["Badajoz", "Cáceres"]
    assert located.provinces[1].fields[-1] == "12"


def test_unicode_line_separators_inside_fields_do_not_split_records(totals_line):
    body = "\n".join(
        [
            totals_line("CM"),
            totals_line("PR", "Bad\x85ajoz", groups=[["0001", "PP", "150000", "4401", "17"]]),
        ]
    )

    located = locate_records(body)

    assert [p.province_name for p in located.provinces] == ["Bad\x85ajoz"]
    assert located.provinces[0].fields[22:] == ["0001", "PP", "150000", "4401", "17"]
