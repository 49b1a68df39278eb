import pytest

from euro_metrics.charts.bar_chart import format_number, prepare_bars
from euro_metrics.charts.withholding_chain import parse_withholding_chain
from euro_metrics.provider.schemas import CountryRecord


def _records():
    return [
        CountryRecord(name="B", metric=50, color="rgb(2, 2, 2)"),
        CountryRecord(name="C"),
        CountryRecord(name="A", metric=100, color="rgb(1, 1, 1)"),
        CountryRecord(name="D", metric=25, color="rgb(3, 3, 3)"),
    ]


def test_format_number():
    assert format_number(1500) == "1.5K"
    assert format_number(1000) == "1.0K"
    assert format_number(999) == 999
    assert format_number(None) is None


def test_bars_sorted_best_first_and_sized():
    bars = prepare_bars(_records(), "straight")
    assert [b.name for b in bars] == ["A", "B", "D"]
    assert [b.width_pct for b in bars] == [50, 30, 20]
    assert bars[0].color == "rgb(1, 1, 1)"
    assert bars[0].label == 100


def test_bars_reversed_order():
    bars = prepare_bars(_records(), "reversed")
    assert [b.name for b in bars] == ["D", "B", "A"]


def test_bars_zero_max_uses_minimum_width():
    bars = prepare_bars([CountryRecord(name="Z", metric=0)], "straight")
    assert bars[0].width_pct == 10


def test_bars_empty_when_no_metrics():
    assert prepare_bars([CountryRecord(name="C")], "straight") == []


def test_withholding_chain_default_capital():
    chain = parse_withholding_chain("company(0.3), country:eu(all), investor")
    assert chain[0].icons == ["company"]
    assert chain[0].withheld == pytest.approx(0.3)
    assert chain[0].money == pytest.approx(0.7)
    assert chain[1].icons == ["country", "eu"]
    assert chain[1].withheld == pytest.approx(0.7)
    assert chain[1].money == pytest.approx(0.0)
    assert chain[2].icons == ["investor"]
    assert chain[2].withheld is None


def test_withholding_chain_with_capital():
    chain = parse_withholding_chain("fund(25), bank(all)", capital="100")
    assert [p.money for p in chain] == [75, 0]
    assert chain[1].withheld == 75


def test_withholding_chain_zero_capital_defaults_to_one():
    chain = parse_withholding_chain("a(0.5)", capital=0)
    assert chain[0].money == 0.5


def test_withholding_chain_rejects_bad_amounts():
    with pytest.raises(ValueError):
        parse_withholding_chain("a(lots)")
    with pytest.raises(ValueError):
        parse_withholding_chain("a(1)", capital="plenty")
