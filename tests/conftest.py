import pytest

from payment_setup.decoder import PaymentSetupDecoder


@pytest.fixture(scope="function")
def decoder():
    """Decoder with the default payment-method collaborators."""
    return PaymentSetupDecoder()


@pytest.fixture(scope="function")
def context():
    """Scratch state shared between the steps of one scenario."""
    return {}
