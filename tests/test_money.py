import pytest

from coincalc.services.money import format_idr, format_rate, format_usdt


@pytest.mark.parametrize(
    "value, expected",
    [
        (7_200_000, "Rp 7.200.000"),
        (0, "Rp 0"),
        (999.5, "Rp 1.000"),
        (100_557_731.99999999, "Rp 100.557.732"),
        (-1500, "-Rp 1.500"),
    ],
)
def test_format_idr(value, expected):
    assert format_idr(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (480.0, "480 USDT"),
        (6703.8488, "6,703.8488 USDT"),
        (0.1234567, "0.123457 USDT"),
        (0, "0 USDT"),
        (1234567.5, "1,234,567.5 USDT"),
    ],
)
def test_format_usdt(value, expected):
    assert format_usdt(value) == expected


def test_format_rate():
    assert format_rate(15000.0) == "15000"
    assert format_rate(16250.5) == "16250.5"
