"""Payment link generation and field setter tests."""

from decimal import Decimal
from urllib.parse import parse_qsl, urlsplit

import pytest

from paylink.core.exceptions import (
    EmptyDescriptionError,
    InvalidAmountError,
    InvalidCultureError,
    InvalidCurrencyError,
    InvalidDescriptionError,
    InvalidInvoiceIdError,
    InvalidParameterSetError,
    UnsupportedHashAlgorithmError,
    ValidationError,
)
from paylink.payments import Culture, HashAlgorithm, Payment

from tests.conftest import MERCHANT_LOGIN, PASSWORD_1, PASSWORD_2

REFERENCE_SIGNATURE = "55c4a9ab813b6cc33d1ad64d6090ce65"


class TestPaymentDocument:
    """Signed request fields for the payment page."""

    def test_reference_signature(self, configured_payment):
        # Act
        document = configured_payment.get_payment_document()

        # Assert
        assert document.signature == REFERENCE_SIGNATURE
        assert configured_payment.signature == REFERENCE_SIGNATURE

    def test_fixed_fields_order(self, configured_payment):
        document = configured_payment.get_payment_document()

        assert list(document.fixed_fields()) == [
            "MerchantLogin",
            "InvId",
            "OutSum",
            "OutSumCurrency",
            "Desc",
            "SignatureValue",
            "Encoding",
            "Culture",
            "IncCurrLabel",
        ]

    def test_fixed_fields_values(self, configured_payment):
        fields = configured_payment.get_payment_document().fixed_fields()

        assert fields == {
            "MerchantLogin": "shop1",
            "InvId": "42",
            "OutSum": "100.00",
            "OutSumCurrency": "",
            "Desc": "Order #42",
            "SignatureValue": REFERENCE_SIGNATURE,
            "Encoding": "utf-8",
            "Culture": "ru",
            "IncCurrLabel": "",
        }

    def test_test_mode_and_email_appended(self):
        payment = (
            Payment(MERCHANT_LOGIN, PASSWORD_1, PASSWORD_2, test_mode=True)
            .set_out_sum(10)
            .set_invoice_id(1)
            .set_description("Test")
            .set_email("buyer@example.com")
        )

        fields = payment.get_payment_document().fixed_fields()

        assert list(fields)[-2:] == ["IsTest", "Email"]
        assert fields["IsTest"] == "1"
        assert fields["Email"] == "buyer@example.com"

    def test_currency_is_signed(self, configured_payment):
        without_currency = configured_payment.get_payment_document().signature

        document = configured_payment.set_out_sum_currency("USD").get_payment_document()

        assert document.out_sum_currency == "USD"
        assert document.signature != without_currency

    def test_custom_params_after_fixed_fields(self, configured_payment):
        configured_payment.add_custom_parameters({"user": "7", "order": "abc"})

        params = configured_payment.get_payment_document().to_query_params()

        assert params[-2:] == [("shp_order", "abc"), ("shp_user", "7")]

    def test_signature_overwritten_on_each_call(self, configured_payment):
        first = configured_payment.get_payment_document().signature

        second = configured_payment.set_invoice_id(43).get_payment_document().signature

        assert first != second
        assert configured_payment.signature == second


class TestCustomParameterOrder:
    def test_signature_independent_of_insertion_order(self):
        # Arrange
        one_call = Payment(MERCHANT_LOGIN, PASSWORD_1, PASSWORD_2)
        two_calls = Payment(MERCHANT_LOGIN, PASSWORD_1, PASSWORD_2)
        for payment in (one_call, two_calls):
            payment.set_out_sum(100).set_invoice_id(42).set_description("Order #42")

        # Act
        one_call.add_custom_parameters({"a": 1, "b": 2, "c": 3})
        two_calls.add_custom_parameters({"b": 2, "a": 1}).add_custom_parameters({"c": 3})

        # Assert
        assert (
            one_call.get_payment_document().signature
            == two_calls.get_payment_document().signature
            == "01e93fddc24bae315a6c330ec2cc2b08"
        )

    def test_prefix_added_on_store(self, payment):
        payment.add_custom_parameters({"user": 7})

        assert payment.custom_params == {"shp_user": "7"}
        assert payment.get_custom_param("user") == "7"
        assert payment.get_custom_param("missing") is None

    @pytest.mark.parametrize("params", [["a", "b"], "a=1", None, 5])
    def test_non_mapping_rejected(self, payment, params):
        with pytest.raises(InvalidParameterSetError):
            payment.add_custom_parameters(params)


class TestPaymentUrl:
    def test_url(self, configured_payment):
        url = configured_payment.get_payment_url()

        assert url == (
            "https://auth.robokassa.ru/Merchant/Index.aspx?"
            "MerchantLogin=shop1&InvId=42&OutSum=100.00&OutSumCurrency="
            "&Desc=Order+%2342&SignatureValue=55c4a9ab813b6cc33d1ad64d6090ce65"
            "&Encoding=utf-8&Culture=ru&IncCurrLabel="
        )

    def test_custom_params_in_query(self, configured_payment):
        configured_payment.add_custom_parameters({"user": "a b"})

        query = parse_qsl(urlsplit(configured_payment.get_payment_url()).query, keep_blank_values=True)

        assert query[-1] == ("shp_user", "a b")

    def test_custom_base_url(self):
        payment = (
            Payment(MERCHANT_LOGIN, PASSWORD_1, PASSWORD_2, base_url="http://localhost/pay?")
            .set_out_sum(1)
            .set_invoice_id(1)
            .set_description("x")
        )

        assert payment.get_payment_url().startswith("http://localhost/pay?MerchantLogin=shop1&")


class TestPreconditions:
    """Link generation checks sum, then description, then invoice ID."""

    def test_missing_sum(self, payment):
        payment.set_invoice_id(1).set_description("x")

        with pytest.raises(InvalidAmountError):
            payment.get_payment_url()

    def test_missing_description(self, payment):
        payment.set_out_sum(1).set_invoice_id(1)

        with pytest.raises(EmptyDescriptionError):
            payment.get_payment_url()

    def test_empty_description(self, payment):
        payment.set_out_sum(1).set_invoice_id(1).set_description("")

        with pytest.raises(InvalidDescriptionError):
            payment.get_payment_document()

    def test_none_description(self, payment):
        payment.set_out_sum(100).set_invoice_id(42).set_description(None)

        with pytest.raises(EmptyDescriptionError):
            payment.get_payment_document()

        assert payment.description == ""

    @pytest.mark.parametrize("inv_id", [None, 0, -5])
    def test_invalid_invoice_id(self, payment, inv_id):
        payment.set_out_sum(1).set_description("x")
        if inv_id is not None:
            payment.set_invoice_id(inv_id)

        with pytest.raises(InvalidInvoiceIdError):
            payment.get_payment_url()

    def test_first_failure_reported(self, payment):
        with pytest.raises(InvalidAmountError):
            payment.get_payment_url()

    def test_errors_are_validation_errors(self, payment):
        with pytest.raises(ValidationError) as exc_info:
            payment.set_out_sum(-1)

        assert exc_info.value.error_code == "INVALID_AMOUNT"


class TestSetters:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            (100, Decimal("100.00")),
            (99.5, Decimal("99.50")),
            ("10.005", Decimal("10.01")),
            (Decimal("0.01"), Decimal("0.01")),
        ],
    )
    def test_out_sum_rounded(self, payment, amount, expected):
        assert payment.set_out_sum(amount).out_sum == expected

    @pytest.mark.parametrize("amount", [0, -1, "0.001", "abc", None, "NaN", "Infinity"])
    def test_out_sum_rejected(self, payment, amount):
        with pytest.raises(InvalidAmountError):
            payment.set_out_sum(amount)

    def test_invoice_id_cast_to_int(self, payment):
        assert payment.set_invoice_id("42").invoice_id == 42

    def test_invoice_id_not_a_number(self, payment):
        with pytest.raises(InvalidInvoiceIdError):
            payment.set_invoice_id("abc")

    def test_currency_normalized(self, payment):
        assert payment.set_out_sum_currency("usd").out_sum_currency == "USD"

    @pytest.mark.parametrize("currency", ["xyz", "RUB", ""])
    def test_currency_rejected(self, payment, currency):
        with pytest.raises(InvalidCurrencyError):
            payment.set_out_sum_currency(currency)

    def test_defaults(self, payment):
        assert payment.merchant_login == "shop1"
        assert payment.culture == Culture.RU
        assert payment.currency_label == ""
        assert payment.out_sum_currency is None
        assert payment.email is None
        assert payment.hash_algorithm == HashAlgorithm.MD5
        assert payment.is_test_mode is False
        assert payment.is_valid is False

    def test_culture(self, payment):
        assert payment.set_culture("EN").culture == Culture.EN

        with pytest.raises(InvalidCultureError):
            payment.set_culture("de")

    def test_currency_label_and_description(self, payment):
        payment.set_currency_label("BankCard").set_description(123)

        assert payment.currency_label == "BankCard"
        assert payment.description == "123"

    def test_currency_label_none(self, configured_payment):
        configured_payment.set_currency_label(None)

        assert configured_payment.currency_label == ""
        assert configured_payment.get_payment_document().inc_curr_label == ""

    def test_email_unset(self, payment):
        payment.set_email("a@b.c").set_email(None)

        assert payment.email is None

    def test_hash_algorithm(self, payment):
        assert payment.set_hash_algorithm("SHA512").hash_algorithm == HashAlgorithm.SHA512

        with pytest.raises(UnsupportedHashAlgorithmError):
            payment.set_hash_algorithm("whirlpool")

        assert payment.hash_algorithm == HashAlgorithm.SHA512

    def test_custom_digest_provider(self):
        calls = []

        def digest(algorithm, data):
            calls.append((algorithm, data))
            return "ABCDEF"

        payment = (
            Payment(MERCHANT_LOGIN, PASSWORD_1, PASSWORD_2, digest=digest)
            .set_out_sum(100)
            .set_invoice_id(42)
            .set_description("Order #42")
        )

        assert payment.get_payment_document().signature == "abcdef"
        assert calls == [(HashAlgorithm.MD5, "shop1:100.00:42:pw1")]
