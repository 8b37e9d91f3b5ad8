from decimal import Decimal

import pytest

from apps.procurement.services.tax import (
    GSTBreakdown,
    calculate_gst,
    is_inter_state,
    round_money,
)


class TestCalculateGst:
    """Tests for the GST split."""

    def test_intra_state_split(self):
        result = calculate_gst(Decimal('1000'), Decimal('18'), '27', '27')

        assert result.taxable_amount == Decimal('1000.00')
        assert result.cgst == Decimal('90.00')
        assert result.sgst == Decimal('90.00')
        assert result.igst == Decimal('0')
        assert result.total_amount == Decimal('1180.00')

    def test_inter_state_split(self):
        result = calculate_gst(Decimal('1000'), Decimal('18'), '27', '29')

        assert result.cgst == Decimal('0')
        assert result.sgst == Decimal('0')
        assert result.igst == Decimal('180.00')
        assert result.total_amount == Decimal('1180.00')
        assert result.is_inter_state is True

    @pytest.mark.parametrize('vendor,project', [
        ('', '27'),
        ('27', ''),
        (None, '27'),
        ('27', None),
        (None, None),
        ('  ', '29'),
    ])
    def test_missing_state_code_is_intra_state(self, vendor, project):
        result = calculate_gst(Decimal('1000'), Decimal('18'), vendor, project)

        assert result.cgst == Decimal('90.00')
        assert result.sgst == Decimal('90.00')
        assert result.igst == Decimal('0')

    def test_state_codes_compared_after_strip(self):
        result = calculate_gst(Decimal('1000'), Decimal('18'), ' 27', '27 ')

        assert result.igst == Decimal('0')
        assert result.cgst == Decimal('90.00')

    def test_half_up_rounding_on_split(self):
        """0.05 of GST splits into 0.025 each, rounded up to 0.03."""
        result = calculate_gst(Decimal('1.00'), Decimal('5'), '27', '27')

        assert result.cgst == Decimal('0.03')
        assert result.sgst == Decimal('0.03')
        assert result.total_amount == Decimal('1.06')

    def test_total_is_sum_of_rounded_components(self):
        result = calculate_gst(Decimal('333.33'), Decimal('18'), '27', '27')

        assert result.cgst == Decimal('30.00')
        assert result.total_amount == result.taxable_amount + result.cgst + result.sgst + result.igst

    def test_every_component_has_two_decimals(self):
        result = calculate_gst(Decimal('1234.567'), Decimal('12'), '27', '29')

        for value in result.as_dict().values():
            assert value.as_tuple().exponent == -2
        assert result.taxable_amount == Decimal('1234.57')
        assert result.igst == Decimal('148.15')

    def test_accepts_int_str_and_float(self):
        from_int = calculate_gst(1000, 18, '27', '27')
        from_str = calculate_gst('1000', '18', '27', '27')
        from_float = calculate_gst(1000.0, 18.0, '27', '27')

        assert from_int == from_str == from_float

    def test_zero_rate(self):
        result = calculate_gst(Decimal('500'), Decimal('0'), '27', '29')

        assert result.igst == Decimal('0.00')
        assert result.total_amount == Decimal('500.00')

    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError):
            calculate_gst(Decimal('-1'), Decimal('18'))

    def test_negative_rate_rejected(self):
        with pytest.raises(ValueError):
            calculate_gst(Decimal('100'), Decimal('-18'))

    def test_returns_breakdown(self):
        result = calculate_gst(Decimal('100'), Decimal('18'))

        assert isinstance(result, GSTBreakdown)
        assert set(result.as_dict()) == {'taxable_amount', 'cgst', 'sgst', 'igst', 'total_amount'}


class TestHelpers:

    def test_is_inter_state(self):
        assert is_inter_state('27', '29') is True
        assert is_inter_state('27', '27') is False
        assert is_inter_state('', '29') is False

    def test_round_money(self):
        assert round_money('2.345') == Decimal('2.35')
        assert round_money(Decimal('2.344')) == Decimal('2.34')
        assert round_money(0.1) == Decimal('0.10')
