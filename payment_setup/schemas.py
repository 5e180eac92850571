from pydantic import AwareDatetime, BaseModel, ConfigDict, StrictInt, StrictStr

from payment_setup.fields import UrlReference
from payment_setup.payment_method import PaymentMethod


class LineItem(BaseModel):
    """One priced entry of the shopping cart. Every field is optional."""

    model_config = ConfigDict(frozen=True)

    item_id: StrictStr | None = None
    description: StrictStr | None = None
    amount_excluding_tax: StrictInt | None = None
    tax_amount: StrictInt | None = None
    amount_including_tax: StrictInt | None = None
    tax_percentage: StrictInt | None = None
    number_of_items: StrictInt | None = None
    tax_category: StrictStr | None = None


class CompanyDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: StrictStr | None = None
    registration_number: StrictStr | None = None
    tax_id: StrictStr | None = None
    registry_location: StrictStr | None = None
    type: StrictStr | None = None
    homepage: StrictStr | None = None


class PaymentSetup(BaseModel):
    """Data returned by the server when setting up a payment session."""

    model_config = ConfigDict(frozen=True)

    amount: StrictInt  # minor units
    currency_code: StrictStr
    country_code: StrictStr
    merchant_reference: StrictStr
    shopper_reference: StrictStr | None = None
    shopper_locale_identifier: StrictStr | None = None
    preferred_payment_methods: tuple[PaymentMethod, ...] = ()
    available_payment_methods: tuple[PaymentMethod, ...] = ()
    logo_base_url: UrlReference
    initiation_url: UrlReference
    delete_preferred_payment_method_url: UrlReference
    generation_date: AwareDatetime
    generation_date_string: StrictStr
    public_key: StrictStr | None = None
    payment_data: StrictStr
    line_items: tuple[LineItem, ...] | None = None
    company_details: CompanyDetails | None = None
