"""Thin client for the certificate issuance API: submit a CSR and its domains."""
import logging
from dataclasses import dataclass, replace
from typing import Optional

import requests

from . import config
from .csr import build_csr, to_pem
from .descriptor import all_names
from .errors import IssuanceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreateCertificateRequest:
    certificate_domains: str
    certificate_csr: str
    certificate_validity_days: Optional[int] = None
    strict_domains: Optional[int] = None

    @classmethod
    def from_descriptor(cls, private_key, descriptor):
        csr = build_csr(private_key, descriptor)
        return cls(",".join(all_names(descriptor)), to_pem(csr))

    def with_validity_days(self, days: int):
        return replace(self, certificate_validity_days=days)

    def with_strict_domains(self, strict: bool):
        return replace(self, strict_domains=1 if strict else None)

    def to_form(self) -> dict:
        form = {
            "certificate_domains": self.certificate_domains,
            "certificate_csr": self.certificate_csr,
        }
        if self.certificate_validity_days is not None:
            form["certificate_validity_days"] = str(self.certificate_validity_days)
        if self.strict_domains is not None:
            form["strict_domains"] = str(self.strict_domains)
        return form


@dataclass(frozen=True)
class ListCertificatesRequest:
    certificate_status: Optional[str] = None
    certificate_type: Optional[str] = None
    search: Optional[str] = None
    limit: Optional[int] = None
    page: Optional[int] = None

    @classmethod
    def for_search(cls, search: str):
        return cls(search=search)

    def with_status(self, statuses):
        return replace(self, certificate_status=",".join(statuses))

    def to_params(self) -> dict:
        return {k: str(v) for k, v in vars(self).items() if v is not None}


@dataclass(frozen=True)
class CertificateInfo:
    """A certificate record as returned by the create and list calls."""
    id: Optional[str] = None
    type: Optional[str] = None
    common_name: Optional[str] = None
    additional_domains: Optional[str] = None
    created: Optional[str] = None
    expires: Optional[str] = None
    status: Optional[str] = None
    validation_type: Optional[str] = None
    validation_emails: Optional[str] = None
    replacement_for: Optional[str] = None
    validation: Optional[dict] = None

    @classmethod
    def from_mapping(cls, data: dict):
        return cls(**{name: data.get(name) for name in cls.__dataclass_fields__})

    def file_validation(self, domain: str):
        """
        (url, content lines) for HTTP file validation of ``domain``, or None.
        """
        methods = (self.validation or {}).get("other_methods") or {}
        method = methods.get(domain)
        if not isinstance(method, dict):
            return None
        url = method.get("file_validation_url_http")
        content = method.get("file_validation_content")
        if url is None or content is None:
            return None
        return url, list(content)


def check_response(body) -> dict:
    """
    Raise IssuanceError if the body reports a failure.

    The API answers 200 for errors too, with ``success`` false (or 0) and an
    ``error`` object holding code, type and details.
    """
    if not isinstance(body, dict):
        raise IssuanceError(details=f"unexpected response body: {body!r}")
    success = body.get("success", True)
    error = body.get("error")
    if success in (False, 0) or error:
        if isinstance(error, dict):
            raise IssuanceError(error.get("code"), error.get("type"), error.get("details"))
        raise IssuanceError(details=str(error) if error else None)
    return body


class IssuanceClient:
    def __init__(self, api_key=None, api_url=None, timeout=None, session=None):
        self.api_key = api_key if api_key is not None else config.api_key()
        self.api_url = (api_url or config.api_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else config.http_timeout()
        self.session = session or requests.Session()

    def _call(self, method, uri, params=None, data=None):
        resp = self.session.request(
            method,
            f"{self.api_url}{uri}",
            params={"access_key": self.api_key, **(params or {})},
            data=data,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return check_response(resp.json())

    def create_certificate(self, request: CreateCertificateRequest) -> CertificateInfo:
        logger.info("requesting certificate for %s", request.certificate_domains)
        try:
            body = self._call("POST", "/certificates", data=request.to_form())
        except IssuanceError as e:
            logger.warning("certificate request for %s rejected: %s", request.certificate_domains, e)
            raise
        return CertificateInfo.from_mapping(body)

    def list_certificates(self, request: Optional[ListCertificatesRequest] = None):
        request = request or ListCertificatesRequest()
        body = self._call("GET", "/certificates", params=request.to_params())
        return [CertificateInfo.from_mapping(r) for r in body.get("results") or []]
