"""HTTP client for the external sales API.

The API is looked up by fiscal code and answers with the sale total, the
payment methods and the purchased EANs. Anything unexpected is reported
as ``UpstreamError`` without leaking upstream details to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import requests
from marshmallow import EXCLUDE, Schema, ValidationError, fields, validate
from requests.auth import HTTPBasicAuth

from campaign.errors import UpstreamError

logger = logging.getLogger(__name__)


class _PaymentMethodSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    type = fields.String(required=True)


class _SaleItemSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    ean = fields.String(required=True)


class SalePayloadSchema(Schema):
    """Validate the sales API payload."""

    class Meta:
        unknown = EXCLUDE

    total_value = fields.Float(required=True, validate=validate.Range(min=0))
    payment_methods = fields.List(fields.Nested(_PaymentMethodSchema), load_default=list)
    items = fields.List(fields.Nested(_SaleItemSchema), load_default=list)
    partner_code = fields.String(load_default=None, allow_none=True)
    store = fields.Integer(load_default=None, allow_none=True)
    pdv = fields.Integer(load_default=None, allow_none=True)
    num_coupon = fields.Integer(load_default=None, allow_none=True)
    cnpj = fields.String(load_default=None, allow_none=True)
    creditcard = fields.String(load_default=None, allow_none=True)


@dataclass(frozen=True)
class SaleSummary:
    total_value: float
    payment_types: tuple[str, ...] = ()
    eans: tuple[str, ...] = ()
    partner_code: str | None = None
    store: int | None = None
    pdv: int | None = None
    num_coupon: int | None = None
    cnpj: str | None = None
    creditcard: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False)


_payload_schema = SalePayloadSchema()


def parse_sale_payload(payload: Any) -> SaleSummary:
    if not isinstance(payload, Mapping):
        raise UpstreamError()
    try:
        data = _payload_schema.load(payload)
    except ValidationError as exc:
        logger.warning("Malformed sales payload: %s", exc.messages)
        raise UpstreamError() from exc

    return SaleSummary(
        total_value=float(data["total_value"]),
        payment_types=tuple(str(m["type"]).strip() for m in data["payment_methods"]),
        eans=tuple(str(i["ean"]).strip() for i in data["items"]),
        partner_code=(data.get("partner_code") or "").strip() or None,
        store=data.get("store"),
        pdv=data.get("pdv"),
        num_coupon=data.get("num_coupon"),
        cnpj=data.get("cnpj"),
        creditcard=data.get("creditcard"),
        raw=dict(payload),
    )


class SalesApiClient:
    """Fetch sales by fiscal code over HTTP Basic auth."""

    def __init__(
        self,
        base_url: str,
        username: str = "",
        password: str = "",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth = HTTPBasicAuth(username, password) if username else None
        self._timeout = timeout
        self._http = session or requests.Session()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "SalesApiClient":
        return cls(
            base_url=str(config.get("SALES_API_URL") or ""),
            username=str(config.get("SALES_API_USER") or ""),
            password=str(config.get("SALES_API_PASSWORD") or ""),
            timeout=float(config.get("SALES_API_TIMEOUT") or 10.0),
        )

    def fetch_sale(self, fiscal_code: str) -> SaleSummary:
        url = f"{self._base_url}/{fiscal_code}"
        try:
            response = self._http.get(url, auth=self._auth, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.warning("Sales API request failed for %s: %s", fiscal_code, exc)
            raise UpstreamError() from exc

        if response.status_code != 200:
            logger.warning("Sales API answered %s for %s", response.status_code, fiscal_code)
            raise UpstreamError()

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Sales API returned non-JSON body for %s", fiscal_code)
            raise UpstreamError() from exc

        return parse_sale_payload(payload)
