import json
import logging
from typing import Any, Callable, Mapping

from payment_setup.errors import InvalidFieldError, MalformedPayloadError, PaymentSetupError
from payment_setup.fields import (
    OBJECT,
    RECORDS,
    STRICT_INT,
    STRICT_STR,
    URL,
    optional,
    required,
)
from payment_setup.generation_time import parse_generation_time
from payment_setup.grouping import GroupFactory, group_payment_methods
from payment_setup.payment_method import PaymentMethod
from payment_setup.schemas import CompanyDetails, LineItem, PaymentSetup

logger = logging.getLogger(__name__)

MAX_PAYLOAD_SIZE = 5 * 1024 * 1024  # 5 MB limit

MethodFactory = Callable[[Mapping[str, Any], str, bool], PaymentMethod | None]
Payload = bytes | bytearray | str


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Unsupported JSON constant {token}.")


def load_payload(data: Payload, max_payload_size: int = MAX_PAYLOAD_SIZE) -> dict[str, Any]:
    """
    Parse raw payload bytes into a JSON object.

    Raises:
        MalformedPayloadError: If the payload is empty, too large, not UTF-8,
            not valid JSON, or its root is not an object.
    """
    try:
        # The limit applies to the UTF-8 size, also for already-decoded text.
        body = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    except UnicodeEncodeError as exc:
        raise MalformedPayloadError("Payload text is not encodable as UTF-8.") from exc
    if len(body) > max_payload_size:
        raise MalformedPayloadError(f"Payload exceeds {max_payload_size} bytes.")
    if not body:
        raise MalformedPayloadError("Empty payload.")
    try:
        raw = json.loads(body.decode("utf-8"), parse_constant=_reject_constant)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError, ValueError) as exc:
        raise MalformedPayloadError("Invalid JSON.") from exc

    if not isinstance(raw, dict):
        raise MalformedPayloadError("Expected JSON object.")
    return raw


def decode_line_item(record: Mapping[str, Any]) -> LineItem:
    """Decode one ``lineItems`` record. Never fails: bad fields become None."""
    return LineItem(
        item_id=optional(record, "itemId", STRICT_STR),
        description=optional(record, "description", STRICT_STR),
        amount_excluding_tax=optional(record, "amountExcludingTax", STRICT_INT),
        tax_amount=optional(record, "taxAmount", STRICT_INT),
        amount_including_tax=optional(record, "amountIncludingTax", STRICT_INT),
        tax_percentage=optional(record, "taxPercentage", STRICT_INT),
        number_of_items=optional(record, "numberOfItems", STRICT_INT),
        tax_category=optional(record, "taxCategory", STRICT_STR),
    )


def decode_line_items(root: Mapping[str, Any]) -> tuple[LineItem, ...] | None:
    # None (key absent) and () (empty array) are different results.
    records = optional(root, "lineItems", RECORDS)
    if records is None:
        return None
    return tuple(decode_line_item(record) for record in records)


def decode_company_details(root: Mapping[str, Any]) -> CompanyDetails | None:
    company = optional(root, "company", OBJECT)
    if company is None:
        return None
    return CompanyDetails(
        name=optional(company, "name", STRICT_STR),
        registration_number=optional(company, "registrationNumber", STRICT_STR),
        tax_id=optional(company, "taxId", STRICT_STR),
        registry_location=optional(company, "registryLocation", STRICT_STR),
        type=optional(company, "type", STRICT_STR),
        homepage=optional(company, "homepage", STRICT_STR),
    )


class PaymentSetupDecoder:
    """
    Decodes a payment setup payload into an immutable ``PaymentSetup``.

    Decoding is all-or-nothing: the first missing or malformed required
    field rejects the whole payload. Individual payment-method records that
    the method factory rejects are dropped without failing the decode.

    Instances hold no mutable state and may be shared between threads.
    """

    def __init__(
        self,
        method_factory: MethodFactory = PaymentMethod.from_info,
        group_factory: GroupFactory = PaymentMethod.from_members,
        max_payload_size: int = MAX_PAYLOAD_SIZE,
    ) -> None:
        self.method_factory = method_factory
        self.group_factory = group_factory
        self.max_payload_size = max_payload_size

    def decode(self, data: Payload) -> PaymentSetup | None:
        """Return the decoded payment setup, or None if the payload is invalid."""
        try:
            return self.decode_or_raise(data)
        except PaymentSetupError as exc:
            logger.info("Payment setup rejected: %s", exc)
            return None

    def decode_or_raise(self, data: Payload) -> PaymentSetup:
        """
        Decode a payload, raising on the first failure.

        Raises:
            MalformedPayloadError: If the payload is not a JSON object.
            MissingFieldError: If a required field is absent or null.
            InvalidFieldError: If a required field has the wrong type, or a
                URL or the generation time cannot be parsed.
        """
        root = load_payload(data, self.max_payload_size)

        # Required fields, in payload order; any failure aborts the decode.
        payment = required(root, "payment", OBJECT)
        amount = required(payment, "amount", OBJECT, "payment")
        amount_value = required(amount, "value", STRICT_INT, "payment.amount")
        currency_code = required(amount, "currency", STRICT_STR, "payment.amount")
        country_code = required(payment, "countryCode", STRICT_STR, "payment")
        merchant_reference = required(payment, "reference", STRICT_STR, "payment")
        logo_base_url = required(root, "logoBaseUrl", URL)
        initiation_url = required(root, "initiationUrl", URL)
        delete_url = required(root, "disableRecurringDetailUrl", URL)
        generation_date_string = required(root, "generationtime", STRICT_STR)
        try:
            generation_date = parse_generation_time(generation_date_string)
        except ValueError as exc:
            raise InvalidFieldError("generationtime", str(exc).rstrip(".")) from exc
        payment_data = required(root, "paymentData", STRICT_STR)

        preferred = self._decode_methods(
            optional(root, "recurringDetails", RECORDS) or [], logo_base_url, is_one_click=True,
        )
        available = group_payment_methods(
            self._decode_methods(
                optional(root, "paymentMethods", RECORDS) or [], logo_base_url, is_one_click=False,
            ),
            self.group_factory,
        )

        setup = PaymentSetup(
            amount=amount_value,
            currency_code=currency_code,
            country_code=country_code,
            merchant_reference=merchant_reference,
            shopper_reference=optional(payment, "shopperReference", STRICT_STR),
            shopper_locale_identifier=optional(payment, "shopperLocale", STRICT_STR),
            preferred_payment_methods=tuple(preferred),
            available_payment_methods=tuple(available),
            logo_base_url=logo_base_url,
            initiation_url=initiation_url,
            delete_preferred_payment_method_url=delete_url,
            generation_date=generation_date,
            generation_date_string=generation_date_string,
            public_key=optional(root, "publicKey", STRICT_STR),
            payment_data=payment_data,
            line_items=decode_line_items(root),
            company_details=decode_company_details(root),
        )
        logger.debug(
            "Decoded payment setup with %d preferred and %d available payment methods",
            len(setup.preferred_payment_methods),
            len(setup.available_payment_methods),
        )
        return setup

    def _decode_methods(
        self,
        records: list[dict[str, Any]],
        logo_base_url: str,
        is_one_click: bool,
    ) -> list[PaymentMethod]:
        """Decode each record independently, keeping the ones the factory accepts."""
        decoded = [self.method_factory(record, logo_base_url, is_one_click) for record in records]
        methods = [method for method in decoded if method is not None]
        if len(methods) < len(records):
            logger.debug(
                "Dropped %d of %d payment method records (one-click=%s)",
                len(records) - len(methods), len(records), is_one_click,
            )
        return methods


_default_decoder = PaymentSetupDecoder()


def decode_payment_setup(data: Payload) -> PaymentSetup | None:
    """Decode a payload with the default payment-method collaborators."""
    return _default_decoder.decode(data)
