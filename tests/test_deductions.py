"""
Tests for the bill deduction calculator, bill abstract gross and amount in words.
"""

import pytest

from gpworks.billing.deductions import (
    SECURITY_DEPOSIT_CHOICES,
    DeductionRates,
    apply_deduction,
    compute_bill_gross,
    percent_of,
)
from gpworks.billing.schema import parse_bill
from gpworks.billing.words import amount_in_words, rupees_in_words
from gpworks.errors import ValidationError


class TestApplyDeduction:

    def test_standard_example(self, standard_deduction):
        """Gross 1,00,000 at IT 1%, GST 2%, cess 1%, SD 10%."""
        result = standard_deduction
        assert result.income_tax_amount == 1000
        assert result.gst_tds_amount == 2000
        assert result.cgst_amount == 1000.0
        assert result.sgst_amount == 1000.0
        assert result.labour_cess_amount == 1000
        assert result.security_deposit_amount == 10000
        assert result.total_deduction == 14000
        assert result.net_payable == 86000.0

    def test_odd_gst_split_not_rerounded(self):
        """GST TDS 101 splits into 50.5 + 50.5, not 51 + 51."""
        result = apply_deduction(10050, DeductionRates(gst_tds=1))
        assert result.gst_tds_amount == 101
        assert result.cgst_amount == 50.5
        assert result.sgst_amount == 50.5
        assert result.total_deduction == 101

    def test_each_amount_rounded_half_up(self):
        result = apply_deduction(250, DeductionRates(income_tax=1, labour_cess=1))
        assert result.income_tax_amount == 3
        assert result.labour_cess_amount == 3
        assert result.total_deduction == 6
        assert result.net_payable == 244.0

    def test_fractional_gross(self):
        result = apply_deduction(1234.56, DeductionRates(security_deposit=10))
        assert result.security_deposit_amount == 123
        assert result.net_payable == pytest.approx(1111.56)

    def test_rates_as_dict(self):
        result = apply_deduction(100000, {"income_tax": 2, "security_deposit": 5})
        assert result.total_deduction == 7000

    def test_pure_and_repeatable(self, standard_rates):
        assert apply_deduction(98765, standard_rates) == apply_deduction(98765, standard_rates)

    def test_zero_gross(self, standard_rates):
        result = apply_deduction(0, standard_rates)
        assert result.total_deduction == 0
        assert result.net_payable == 0.0

    def test_negative_gross_rejected(self, standard_rates):
        with pytest.raises(ValidationError) as exc:
            apply_deduction(-1, standard_rates)
        assert exc.value.field == "gross"

    @pytest.mark.parametrize("gross", [float("inf"), float("nan")])
    def test_non_finite_gross_rejected(self, standard_rates, gross):
        with pytest.raises(ValidationError) as exc:
            apply_deduction(gross, standard_rates)
        assert exc.value.field == "gross"

    def test_gross_beyond_decimal_precision_rejected(self):
        with pytest.raises(ValidationError):
            apply_deduction(1e40, DeductionRates(income_tax=1))

    @pytest.mark.parametrize("rates", [
        {"income_tax": -1},
        {"gst_tds": 101},
        {"labour_cess": "one"},
        {"stamp_duty": 1},
    ])
    def test_invalid_rates_rejected(self, rates):
        with pytest.raises(ValidationError):
            apply_deduction(1000, rates)

    def test_security_deposit_choices(self):
        assert SECURITY_DEPOSIT_CHOICES == (0.0, 5.0, 10.0)
        # Any non-negative percentage is still accepted
        assert apply_deduction(1000, DeductionRates(security_deposit=7.5)).security_deposit_amount == 75

    def test_to_dict(self, standard_deduction):
        data = standard_deduction.to_dict()
        assert data["rates"]["income_tax"] == 1.0
        assert data["net_payable"] == 86000.0


class TestPercentOf:

    def test_half_up(self):
        assert percent_of(50, 1) == 1
        assert percent_of(150, 1) == 2
        assert percent_of(249, 1) == 2


class TestBillGross:

    def test_round_figures(self):
        totals = compute_bill_gross(100000)
        assert totals.say_amount == 100000
        assert totals.cgst_amount == 9000
        assert totals.sgst_amount == 9000
        assert totals.sub_total == 118000
        assert totals.labour_cess_amount == 1180
        assert totals.gross_bill_amount == 119180

    def test_say_amount_rounds_actual_value(self):
        totals = compute_bill_gross(1234.56)
        assert totals.say_amount == 1235
        assert totals.cgst_amount == 111
        assert totals.sgst_amount == 111
        assert totals.sub_total == 1457
        assert totals.labour_cess_amount == 15
        assert totals.gross_bill_amount == 1472

    def test_negative_rejected(self):
        with pytest.raises(ValidationError):
            compute_bill_gross(-10)

    def test_infinite_rejected(self):
        with pytest.raises(ValidationError):
            compute_bill_gross(float("inf"))


class TestBillRecord:

    def test_rates_over_defaults(self):
        bill = parse_bill({"gross": 5000, "rates": {"income_tax": 2}})
        rates = bill.resolve_rates({"income_tax": 1, "security_deposit": 10})
        assert rates.income_tax == 2.0
        assert rates.security_deposit == 10.0

    def test_amount_required(self):
        with pytest.raises(ValidationError):
            parse_bill({"bill_number": "1/2025"})

    def test_unknown_rate_rejected(self):
        with pytest.raises(ValidationError) as exc:
            parse_bill({"gross": 5000, "rates": {"stamp_duty": 1}})
        assert exc.value.field == "rates.stamp_duty"

    def test_info_block(self):
        bill = parse_bill({"actual_value": 1000, "bill_number": 7, "work_name": "Drain"})
        info = bill.info()
        assert info.bill_number == "7"
        assert info.work_name == "Drain"


class TestAmountInWords:

    @pytest.mark.parametrize("amount,words", [
        (0, "Zero"),
        (7, "Seven"),
        (19, "Nineteen"),
        (45, "Forty Five"),
        (101, "One Hundred One"),
        (1000, "One Thousand"),
        (86000, "Eighty Six Thousand"),
        (100000, "One Lakh"),
        (12345678, "One Crore Twenty Three Lakh Forty Five Thousand Six Hundred Seventy Eight"),
    ])
    def test_indian_numbering(self, amount, words):
        assert amount_in_words(amount) == words

    def test_fraction_dropped(self):
        assert amount_in_words(3121.99) == "Three Thousand One Hundred Twenty One"

    def test_negative(self):
        assert amount_in_words(-5) == "Minus Five"

    def test_rupees_wrapper(self):
        assert rupees_in_words(3121) == "Rupees Three Thousand One Hundred Twenty One Only"
