"""
Unit tests for date conversion and decimal hour helpers.
"""

import datetime as dt
from decimal import Decimal

import pytest

from tracker.decimal_utils import format_hours, is_blank_hours, parse_hours, round_hours, sum_hours, to_decimal
from tracker.utils.dates import (
    add_days,
    days_until,
    is_internal_date,
    to_display_date,
    to_internal_date,
    week_start,
)


class TestDates:
    """Internal YYYYMMDD <-> display format conversion"""

    @pytest.mark.parametrize('raw, expected', [
        ('01/15/2024', '20240115'),
        ('20240115', '20240115'),
        ('2024-01-15', '20240115'),
        ('2024-01-15T09:30:00', '20240115'),
        (dt.date(2024, 1, 15), '20240115'),
        ('', ''),
        (None, ''),
    ])
    def test_to_internal(self, raw, expected):
        assert to_internal_date(raw) == expected

    def test_custom_display_format(self):
        assert to_internal_date('15/01/2024', '%d/%m/%Y') == '20240115'
        assert to_display_date('20240115', '%d/%m/%Y') == '15/01/2024'

    def test_invalid_input_raises(self):
        with pytest.raises(ValueError):
            to_internal_date('someday')

    def test_display_passes_through_unparseable(self):
        assert to_display_date('garbage') == 'garbage'
        assert to_display_date('') == ''
        assert to_display_date('20240115') == '01/15/2024'

    def test_is_internal_date(self):
        assert is_internal_date('20240229')
        assert not is_internal_date('20230229')
        assert not is_internal_date('2024-02-29')
        assert not is_internal_date(20240229)

    def test_add_days_across_month(self):
        assert add_days('20240101', 42) == '20240212'
        assert add_days('20240228', 1) == '20240229'

    def test_week_start_is_monday(self):
        assert week_start('20240101') == '20240101'
        assert week_start('20240107') == '20240101'
        assert week_start('20240108') == '20240108'

    def test_days_until(self):
        today = dt.date(2024, 1, 10)
        assert days_until('20240110', today) == 0
        assert days_until('20240108', today) == -2
        assert days_until('', today) is None
        assert days_until('bogus', today) is None


class TestHours:
    """Decimal arithmetic for hour fields"""

    def test_no_float_drift(self):
        assert sum_hours(['0.1', '0.2']) == Decimal('0.3')
        assert format_hours(sum_hours(['8.0', '6.5'])) == '14.50'

    def test_blank_values_count_as_zero(self):
        assert sum_hours(['', None, '2']) == Decimal('2')
        assert is_blank_hours('')
        assert is_blank_hours('n/a')
        assert not is_blank_hours('0')

    def test_rounding_half_up(self):
        assert round_hours('1.005') == Decimal('1.01')
        assert format_hours('7') == '7.00'

    def test_to_decimal_fallbacks(self):
        assert to_decimal('abc') == Decimal(0)
        assert to_decimal('inf') == Decimal(0)
        assert to_decimal(None, Decimal('-1')) == Decimal('-1')

    def test_parse_hours_limits(self):
        assert parse_hours('24', 24) == Decimal('24')
        assert parse_hours('') == Decimal(0)
        with pytest.raises(ValueError):
            parse_hours('24.01', 24)
        with pytest.raises(ValueError):
            parse_hours('-0.5')
        with pytest.raises(ValueError):
            parse_hours('NaN')
