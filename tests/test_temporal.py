from salesdash.models import TransactionRecord
from salesdash.temporal import DateFilter, extract_temporal, latest_date, resolve_dates


def test_iso_date():
    tq = extract_temporal("sales on 2024-01-05 please")
    assert tq.explicit_date == "2024-01-05"
    assert not tq.has_range
    assert tq.day_number is None


def test_iso_date_is_not_a_range():
    tq = extract_temporal("2024-01-05")
    assert tq.range_start is None


def test_only_first_explicit_date():
    tq = extract_temporal("2024-01-05 or 2024-01-08")
    assert tq.explicit_date == "2024-01-05"


def test_slash_date():
    assert extract_temporal("orders 5/1").explicit_date == "5/1"


def test_bare_range():
    tq = extract_temporal("yom 1-10")
    assert (tq.range_start, tq.range_end) == (1, 10)
    assert tq.day_number is None


def test_english_range():
    tq = extract_temporal("sales from 3 to 9")
    assert (tq.range_start, tq.range_end) == (3, 9)


def test_arabic_range_with_and_without_end():
    tq = extract_temporal("المبيعات من يوم 2 ليوم 6")
    assert (tq.range_start, tq.range_end) == (2, 6)
    tq = extract_temporal("المبيعات من يوم 4 ل")
    assert (tq.range_start, tq.range_end) == (4, 14)


def test_single_day_variants():
    assert extract_temporal("sales yom 5").day_number == 5
    assert extract_temporal("مبيعات يوم 7").day_number == 7
    assert extract_temporal("total for day 12").day_number == 12


def test_range_beats_day():
    tq = extract_temporal("day 3 from 1 to 10")
    assert tq.has_range
    assert tq.day_number is None


def test_inverted_range_is_malformed():
    tq = extract_temporal("sales from 10 to 2")
    assert not tq.has_range
    assert tq.malformed
    assert resolve_dates(tq, []) is None


def test_marker_without_number():
    tq = extract_temporal("sales today")
    assert tq.is_temporal
    assert not tq.has_value


def test_not_temporal():
    assert not extract_temporal("xyz123").is_temporal


def test_resolve_day_number_takes_last_in_record_order():
    newest_first = [
        TransactionRecord("2024-02-05", "Maadi", 1, 100),
        TransactionRecord("2024-01-05", "Maadi", 9, 900),
    ]
    window = resolve_dates(extract_temporal("yom 5"), newest_first)
    assert window == DateFilter(date="2024-01-05")
    window = resolve_dates(extract_temporal("yom 5"), newest_first[::-1])
    assert window == DateFilter(date="2024-02-05")


def test_franco_range():
    tq = extract_temporal("el sales men yom 1 le yom 5")
    assert (tq.range_start, tq.range_end) == (1, 5)
    tq = extract_temporal("men yom 3 le")
    assert (tq.range_start, tq.range_end) == (3, 13)


def test_resolve_missing_day(records):
    assert resolve_dates(extract_temporal("yom 20"), records) is None


def test_resolve_marker_uses_latest(records):
    window = resolve_dates(extract_temporal("today"), records)
    assert window.date == latest_date(records) == "2024-01-12"


def test_resolve_marker_without_data():
    assert resolve_dates(extract_temporal("today"), []) is None


def test_resolve_slash_date(records):
    assert resolve_dates(extract_temporal("8/1"), records).date == "2024-01-08"


def test_range_filter(records):
    window = resolve_dates(extract_temporal("from 1 to 5"), records)
    rows = window.apply(records)
    assert {r.date for r in rows} == {"2024-01-01", "2024-01-05"}
