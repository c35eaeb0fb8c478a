"""Checkout redirect and payment-return detection."""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pcnwizard.core.config import PaymentConfig
from pcnwizard.wizard.models import CaseRecord


def checkout_url(case: CaseRecord, config: PaymentConfig | None = None) -> str:
    """Outbound checkout link, tagged with the notice reference when known."""
    config = config or PaymentConfig()
    if case.notice is None or not case.notice.reference_found:
        return config.checkout_url
    parts = urlsplit(config.checkout_url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.append(("client_reference_id", case.notice.pcn_number))
    return urlunsplit(parts._replace(query=urlencode(query)))


def is_payment_success(url: str, config: PaymentConfig | None = None) -> bool:
    config = config or PaymentConfig()
    query = parse_qsl(urlsplit(url).query, keep_blank_values=True)
    return (config.return_param, config.success_value) in query


def strip_payment_param(url: str, config: PaymentConfig | None = None) -> str:
    """Remove the payment return parameter, keeping everything else."""
    config = config or PaymentConfig()
    parts = urlsplit(url)
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key != config.return_param
    ]
    return urlunsplit(parts._replace(query=urlencode(query)))
