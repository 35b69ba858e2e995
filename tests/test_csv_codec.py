from __future__ import annotations

import pytest

from conftest import make_record
from jobtracker.csv_codec import (
    HEADERS,
    export_csv,
    import_csv_text,
    import_rows,
    parse,
    parse_header,
    parse_rows,
    read_csv,
    serialize,
    tokenize,
)
from jobtracker.errors import FormatError
from jobtracker.models import ApplicationStatus


def _fields(record) -> dict:
    data = record.model_dump()
    data.pop("id")
    return data


def _sample_records():
    return [
        make_record(record_id="a", company="Stripe", status=ApplicationStatus.OFFER, fit=91),
        make_record(
            record_id="b",
            company='Acme, "Inc"',
            role="Data Scientist",
            location="",
            status=ApplicationStatus.RESEARCH,
            vibe="",
            fit=0,
            tags="AI",
            notes="Line one\nLine two, with comma\r\nand CRLF",
            applied="",
        ),
        make_record(record_id="c", company="", role="", status=ApplicationStatus.REJECTED, vibe="🔥"),
    ]


def test_serialize_quotes_every_field_and_has_fixed_header():
    text = serialize([make_record(company='Say "cheese"', fit=75)])
    lines = text.split("\n")
    assert lines[0] == "Company,Role,Location,Status,Vibe,Fit Score,Tags,Notes,Applied Date"
    assert lines[1] == (
        '"Say ""cheese""","Staff Engineer","Remote","Applied","🙂","75",'
        '"FinTech,Infra","","2024-03-01"'
    )
    assert not text.endswith("\n")


def test_serialize_empty_store_is_header_only():
    assert serialize([]) == ",".join(HEADERS)


def test_round_trip_preserves_everything_but_ids():
    records = _sample_records()
    imported = import_csv_text(serialize(records))

    assert [_fields(r) for r in imported] == [_fields(r) for r in records]
    assert len({r.id for r in imported}) == len(records)
    assert not {r.id for r in imported} & {r.id for r in records}


def test_parse_header_recovers_column_positions():
    header = parse_header(serialize(_sample_records()))
    assert header == {name: idx for idx, name in enumerate(HEADERS)}


def test_reordered_columns_import_by_name():
    text = (
        "Applied Date, Status ,Company,Fit Score,Role\n"
        '2024-05-02,Interviewing,Figma,88,"Frontend Eng"\n'
    )
    [record] = import_csv_text(text)
    assert record.company == "Figma"
    assert record.role == "Frontend Eng"
    assert record.status is ApplicationStatus.INTERVIEWING
    assert record.fit == 88
    assert record.applied == "2024-05-02"


def test_doubled_quotes_become_literal_quote():
    rows = parse_rows('Company,Notes\nAcme,"He said ""hi"""\n')
    assert rows == [["Acme", 'He said "hi"']]


def test_single_column_header_is_format_error():
    with pytest.raises(FormatError):
        parse('"OnlyOneColumn"\n"value"')


def test_empty_input_is_format_error():
    with pytest.raises(FormatError):
        parse("")
    with pytest.raises(FormatError):
        import_csv_text("\n\n")


def test_missing_status_column_defaults_to_applied():
    [record] = import_csv_text("Company,Role\nRamp,ML Eng")
    assert record.status is ApplicationStatus.APPLIED


def test_unknown_status_defaults_to_applied_and_known_status_is_case_insensitive():
    records = import_csv_text("Company,Status\nA,Ghosted\nB, offer \nC,")
    assert [r.status for r in records] == [
        ApplicationStatus.APPLIED,
        ApplicationStatus.OFFER,
        ApplicationStatus.APPLIED,
    ]


def test_location_defaults_to_remote_only_when_absent():
    absent = import_csv_text("Company,Role\nA,PM")
    present_but_empty = import_csv_text('Company,Location\nA,""')
    short_row = import_csv_text("Company,Role,Location\nA,PM")
    assert absent[0].location == "Remote"
    assert present_but_empty[0].location == ""
    assert short_row[0].location == "Remote"


def test_role_title_alias_is_used_when_role_missing_or_empty():
    records = import_csv_text(
        "Company,Role,Role Title\n"
        "A,,Product Analyst\n"
        "B,DevRel,Ignored\n"
    )
    assert [r.role for r in records] == ["Product Analyst", "DevRel"]


def test_fit_score_parsing():
    records = import_csv_text("Company,Fit Score\nA,85\nB,72.6\nC,high\nD,-4\nE,")
    assert [r.fit for r in records] == [85, 72, 0, 0, 0]


def test_unknown_columns_are_ignored():
    [record] = import_csv_text("Company,Recruiter,Tags\nLinear,Jo,DevTools")
    assert record.company == "Linear"
    assert record.tags == "DevTools"
    assert record.notes == ""


def test_import_rows_skips_empty_rows_and_avoids_taken_ids():
    taken = {"x"}
    records = import_rows({"Company": 0, "Role": 1}, [[], ["A", "PM"], []], taken)
    assert len(records) == 1
    assert records[0].id != "x"
    assert records[0].id in taken


def test_tokenize_handles_crlf_bare_cr_and_blank_lines():
    text = 'Company,Role\r\nA,PM\r\n\r\nB,"Eng\r\nII"\rC,ML\n'
    assert tokenize(text) == [
        ["Company", "Role"],
        ["A", "PM"],
        ["B", "Eng\r\nII"],
        ["C", "ML"],
    ]


def test_tokenize_strips_byte_order_mark():
    assert tokenize("\ufeffCompany,Role\nA,B") == [["Company", "Role"], ["A", "B"]]


def test_tokenize_keeps_trailing_empty_field():
    assert tokenize("a,b,\n,,") == [["a", "b", ""], ["", "", ""]]


def test_tokenize_is_lenient_with_malformed_quotes():
    # stray quote in an unquoted field, text after a closing quote,
    # and an unterminated quoted field
    assert tokenize('ab"c,"x"y,"open\nend') == [['ab"c', "xy", "open\nend"]]


def test_export_and_read_file(tmp_path):
    records = _sample_records()
    path = export_csv(records, tmp_path / "job-search-data.csv")

    assert path.read_bytes().startswith(b"Company,Role")
    imported = import_csv_text(read_csv(path))
    assert [_fields(r) for r in imported] == [_fields(r) for r in records]


def test_read_csv_drops_excel_byte_order_mark(tmp_path):
    path = tmp_path / "excel.csv"
    path.write_bytes("Company,Role\nAcme,PM\n".encode("utf-8-sig"))
    assert parse_header(read_csv(path)) == {"Company": 0, "Role": 1}
