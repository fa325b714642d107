"""Caller authentication through AWS Signature Version 4 request signing.

Callers sign each request with an access key the way AWS SDKs sign calls to
``execute-api``. The front door rebuilds the signed part of the request it
actually received, lets botocore's signer derive the signature the holder of
the registered secret would have produced, and resolves the access key to
the principal it was issued to.
"""

from __future__ import annotations

import hashlib
import hmac
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from types import MappingProxyType

from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from subs_gateway.front_door.errors import UnauthenticatedError
from subs_gateway.front_door.messages import GatewayRequest  # noqa: TC001
from subs_gateway.shared import CallerCredential, CallerIdentity

ALGORITHM = "AWS4-HMAC-SHA256"
SCOPE_TERMINATOR = "aws4_request"
AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"
DEFAULT_MAX_SKEW_SECONDS = 300
_SIGNATURE_PATTERN = re.compile(r"[0-9a-f]{64}")


@dataclass(slots=True, frozen=True)
class SignatureComponents:
    """Fields parsed from a SigV4 ``Authorization`` header."""

    access_key_id: str
    date: str
    region: str
    service: str
    signed_headers: tuple[str, ...]
    signature: str

    @property
    def scope(self) -> str:
        return f"{self.date}/{self.region}/{self.service}/{SCOPE_TERMINATOR}"


def parse_authorization(header: str) -> SignatureComponents:
    """Parse ``AWS4-HMAC-SHA256 Credential=..., SignedHeaders=..., Signature=...``."""
    algorithm, _, rest = header.strip().partition(" ")
    if algorithm != ALGORITHM:
        msg = f"Unsupported signing algorithm {algorithm!r}."
        raise UnauthenticatedError(msg)

    fields: dict[str, str] = {}
    for part in rest.split(","):
        name, separator, value = part.strip().partition("=")
        if not separator:
            msg = "Malformed Authorization header."
            raise UnauthenticatedError(msg)
        fields[name] = value

    try:
        credential = fields["Credential"]
        signed_headers = fields["SignedHeaders"]
        signature = fields["Signature"]
    except KeyError as exc:
        msg = f"Authorization header is missing {exc.args[0]}."
        raise UnauthenticatedError(msg) from exc

    scope = credential.split("/")
    if len(scope) != 5 or scope[4] != SCOPE_TERMINATOR or not scope[0]:
        msg = "Malformed credential scope."
        raise UnauthenticatedError(msg)
    if not _SIGNATURE_PATTERN.fullmatch(signature):
        msg = "Signature must be 64 lowercase hexadecimal characters."
        raise UnauthenticatedError(msg)

    return SignatureComponents(
        access_key_id=scope[0],
        date=scope[1],
        region=scope[2],
        service=scope[3],
        signed_headers=tuple(
            name.lower() for name in signed_headers.split(";") if name
        ),
        signature=signature,
    )


def verify_payload_hash(request: GatewayRequest) -> None:
    """Reject a declared ``X-Amz-Content-SHA256`` that does not match the body."""
    declared = request.header("x-amz-content-sha256")
    if declared is None or declared == UNSIGNED_PAYLOAD:
        return
    if declared != hashlib.sha256(request.body).hexdigest():
        msg = "Payload does not match X-Amz-Content-SHA256."
        raise UnauthenticatedError(msg)


def signing_request(
    request: GatewayRequest, signed_headers: tuple[str, ...], amz_date: str
) -> AWSRequest:
    """Rebuild the part of *request* covered by the signature as an ``AWSRequest``."""
    host = request.header("host") or ""
    url = f"http://{host}{request.raw_path or request.path}"
    if request.query_string:
        url = f"{url}?{request.query_string}"

    signing = AWSRequest(method=request.method.upper(), url=url, data=request.body)
    for name in sorted(set(signed_headers)):
        values = request.header_values(name)
        if not values:
            msg = f"Signed header {name!r} is not present."
            raise UnauthenticatedError(msg)
        for value in values:
            signing.headers[name] = value
    signing.context["timestamp"] = amz_date
    return signing


def expected_signature(
    credential: CallerCredential,
    components: SignatureComponents,
    signing: AWSRequest,
) -> str:
    """Return the signature the holder of *credential* would send for *signing*."""
    signer = SigV4Auth(
        Credentials(
            components.access_key_id, credential.secret_access_key.get_secret_value()
        ),
        components.service,
        components.region,
    )
    canonical = signer.canonical_request(signing)
    return signer.signature(signer.string_to_sign(signing, canonical), signing)


class CredentialStore:
    """Read-only registry of access keys known to the front door."""

    def __init__(self, credentials: Mapping[str, CallerCredential] | None = None) -> None:
        self._credentials: Mapping[str, CallerCredential] = MappingProxyType(
            dict(credentials or {})
        )

    def lookup(self, access_key_id: str) -> CallerCredential | None:
        return self._credentials.get(access_key_id)

    @property
    def principals(self) -> frozenset[str]:
        return frozenset(credential.principal for credential in self._credentials.values())

    def __len__(self) -> int:
        return len(self._credentials)


class SigV4Authenticator:
    """Verify SigV4-signed requests and resolve the caller identity."""

    def __init__(
        self,
        credentials: CredentialStore,
        *,
        region: str,
        service: str = "execute-api",
        max_skew_seconds: int = DEFAULT_MAX_SKEW_SECONDS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if max_skew_seconds < 0:
            msg = "Signature skew window must be non-negative."
            raise ValueError(msg)
        self._credentials = credentials
        self._region = region
        self._service = service
        self._max_skew_seconds = max_skew_seconds
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    def authenticate(self, request: GatewayRequest) -> CallerIdentity:
        """Return the identity that signed *request* or raise :class:`UnauthenticatedError`."""
        authorization = request.header("authorization")
        if not authorization:
            msg = "Missing Authorization header."
            raise UnauthenticatedError(msg)
        components = parse_authorization(authorization)

        amz_date = request.header("x-amz-date")
        if amz_date is None:
            msg = "Missing X-Amz-Date header."
            raise UnauthenticatedError(msg)
        try:
            signed_at = datetime.strptime(amz_date, AMZ_DATE_FORMAT).replace(tzinfo=UTC)
        except ValueError as exc:
            msg = f"Invalid X-Amz-Date {amz_date!r}."
            raise UnauthenticatedError(msg) from exc

        if components.date != amz_date[:8]:
            msg = "Credential scope date does not match X-Amz-Date."
            raise UnauthenticatedError(msg)
        if components.region != self._region or components.service != self._service:
            msg = f"Credential scope {components.scope} is not valid for this API."
            raise UnauthenticatedError(msg)
        if abs((self._clock() - signed_at).total_seconds()) > self._max_skew_seconds:
            msg = "Signature expired."
            raise UnauthenticatedError(msg)
        if "host" not in components.signed_headers:
            msg = "The host header must be signed."
            raise UnauthenticatedError(msg)

        credential = self._credentials.lookup(components.access_key_id)
        if credential is None:
            msg = f"Unknown access key {components.access_key_id!r}."
            raise UnauthenticatedError(msg)

        verify_payload_hash(request)
        expected = expected_signature(
            credential,
            components,
            signing_request(request, components.signed_headers, amz_date),
        )
        if not hmac.compare_digest(expected.encode(), components.signature.encode()):
            msg = "Request signature does not match."
            raise UnauthenticatedError(msg)

        return CallerIdentity(
            principal=credential.principal, access_key_id=components.access_key_id
        )


__all__ = [
    "ALGORITHM",
    "CredentialStore",
    "SigV4Authenticator",
    "SignatureComponents",
    "expected_signature",
    "parse_authorization",
    "signing_request",
    "verify_payload_hash",
]
