"""Default payment-method collaborator used by the payment setup decoder."""
import logging
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr

from payment_setup.fields import OBJECT, RECORDS, STRICT_STR, optional

logger = logging.getLogger(__name__)

LOGO_EXTENSION = ".png"


def freeze(value: Any) -> Any:
    """Return a read-only copy of a decoded JSON value (objects and arrays nested)."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def logo_url_for(logo_base_url: str, method_type: str) -> str:
    """Build the logo location for a payment method type."""
    separator = "" if logo_base_url.endswith("/") else "/"
    return f"{logo_base_url}{separator}{method_type}{LOGO_EXTENSION}"


class PaymentMethodGroup(BaseModel):
    """Discriminator that clusters related payment methods into one choice."""

    model_config = ConfigDict(frozen=True)

    type: StrictStr
    name: StrictStr | None = None
    payment_method_data: StrictStr | None = None


class PaymentMethod(BaseModel):
    """A selectable way to pay, either a single method or a merged group."""

    # Nested JSON details are held as read-only mappings.
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: StrictStr
    name: StrictStr
    payment_method_data: StrictStr | None = None
    logo_url: StrictStr | None = None
    is_one_click: StrictBool = False
    group: PaymentMethodGroup | None = None
    configuration: MappingProxyType = Field(default_factory=lambda: MappingProxyType({}))
    stored_details: MappingProxyType | None = None
    input_details: tuple[MappingProxyType, ...] = ()
    members: tuple["PaymentMethod", ...] = ()

    @property
    def is_group(self) -> bool:
        return bool(self.members)

    @classmethod
    def from_info(
        cls,
        info: Mapping[str, Any],
        logo_base_url: str,
        is_one_click: bool,
    ) -> "PaymentMethod | None":
        """
        Build a payment method from one ``paymentMethods``/``recurringDetails`` record.

        Returns None when the record lacks a string ``type``, ``name`` or
        ``paymentMethodData``, or carries a ``group`` object without a type.
        """
        method_type = optional(info, "type", STRICT_STR)
        name = optional(info, "name", STRICT_STR)
        payment_method_data = optional(info, "paymentMethodData", STRICT_STR)
        if method_type is None or name is None or payment_method_data is None:
            logger.debug("Payment method record lacks type, name or paymentMethodData")
            return None

        group = None
        group_info = optional(info, "group", OBJECT)
        if group_info is not None:
            group_type = optional(group_info, "type", STRICT_STR)
            if group_type is None:
                logger.debug("Payment method %r has a group without a type", method_type)
                return None
            group = PaymentMethodGroup(
                type=group_type,
                name=optional(group_info, "name", STRICT_STR),
                payment_method_data=optional(group_info, "paymentMethodData", STRICT_STR),
            )

        configuration = optional(info, "configuration", OBJECT) or {}
        return cls(
            type=method_type,
            name=name,
            payment_method_data=payment_method_data,
            logo_url=logo_url_for(logo_base_url, method_type),
            is_one_click=is_one_click,
            group=group,
            configuration=MappingProxyType({
                key: value for key, value in configuration.items() if isinstance(value, str)
            }),
            stored_details=freeze(optional(info, "storedDetails", OBJECT)),
            input_details=freeze(optional(info, "inputDetails", RECORDS) or ()),
        )

    @classmethod
    def from_members(cls, members: Sequence["PaymentMethod"]) -> "PaymentMethod | None":
        """
        Merge methods sharing a group type into one selectable method.

        The merged method takes its identity from the first member's group.
        Returns None for an empty list or when the first member is ungrouped.
        """
        if not members:
            return None
        group = members[0].group
        if group is None:
            return None
        logo_url = None
        if members[0].logo_url is not None:
            base = members[0].logo_url.rsplit("/", 1)[0]
            logo_url = logo_url_for(base, group.type)
        return cls(
            type=group.type,
            name=group.name or group.type,
            payment_method_data=group.payment_method_data,
            logo_url=logo_url,
            is_one_click=False,
            members=tuple(members),
        )
