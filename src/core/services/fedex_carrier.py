"""FedEx carrier facade.

This module sequences every operation as build request -> transport ->
parse reply, and owns the credential state that two of those operations
update. The CLI, tests and any future entry-point go through
`FedExCarrier` instead of calling the builders and parsers directly.
"""

from __future__ import annotations

import logging
from typing import Sequence

from adapters.fedex import (
    build_rate_request,
    build_registration_request,
    build_subscription_request,
    build_tracking_request,
    build_version_capture_request,
    parse_rate_reply,
    parse_registration_reply,
    parse_subscription_reply,
    parse_tracking_reply,
    parse_version_capture_reply,
)
from adapters.fedex.codes import CARRIER_NAME
from adapters.fedex.request_builders import DEFAULT_TRANSACTION_ID
from core.config import AppSettings
from core.domain.errors import MissingCredentialsError
from core.domain.models import (
    ClientIdentity,
    Credentials,
    Location,
    Package,
    RateResponse,
    RegistrationResponse,
    SubscriptionResponse,
    TrackingResponse,
    VersionCaptureResponse,
    VersionInfo,
)
from core.domain.options import (
    RateOptions,
    RegistrationOptions,
    SubscriptionOptions,
    TrackingOptions,
    UserContact,
    VersionCaptureOptions,
)
from core.interfaces.transport import Transport

logger = logging.getLogger(__name__)

REQUIRED_CREDENTIALS = ("csp_key", "csp_password")


class FedExCarrier:
    """Entry points for the five gateway operations.

    Rules:
    - `credentials` is shared by reference and read on every request build.
    - A successful registration overwrites `user_key`/`user_password`; a
      successful subscription overwrites `meter_number`.
    - One writer per instance: concurrent calls on the same instance need
      external synchronization around registration and subscription.
    - `test` on each operation overrides the instance default.
    """

    name = CARRIER_NAME

    def __init__(
        self,
        credentials: Credentials,
        *,
        transport: Transport,
        client: ClientIdentity | None = None,
        settings: AppSettings | None = None,
        test: bool = False,
        customer_transaction_id: str = DEFAULT_TRANSACTION_ID,
    ) -> None:
        missing = [name for name in REQUIRED_CREDENTIALS if not getattr(credentials, name)]
        if missing:
            raise MissingCredentialsError(missing)

        self.credentials = credentials
        self.transport = transport
        self.client = client or ClientIdentity()
        self.settings = settings
        self.test = test
        self.customer_transaction_id = customer_transaction_id
        self.last_request: str | None = None
        self.negotiated_version: VersionInfo | None = None

    @classmethod
    def from_settings(cls, settings: AppSettings, *, transport: Transport) -> "FedExCarrier":
        credentials = Credentials(
            csp_key=settings.csp_key,
            csp_password=settings.csp_password,
            account_number=settings.account_number,
            meter_number=settings.meter_number,
            user_key=settings.user_key,
            user_password=settings.user_password,
        )
        client = ClientIdentity(
            product_id=settings.client_product_id,
            product_version=settings.client_product_version,
            region=settings.client_region,
        )
        return cls(
            credentials,
            transport=transport,
            client=client,
            settings=settings,
            test=settings.test_mode,
            customer_transaction_id=settings.customer_transaction_id,
        )

    def user_credentials(self) -> dict[str, str | None]:
        return self.credentials.user_credentials()

    def _use_test(self, test: bool | None) -> bool:
        return self.test if test is None else test

    def _commit(self, request: str, test: bool) -> str:
        self.last_request = request
        logger.debug("Request (%s endpoint): %s", "test" if test else "live", request)
        reply = self.transport.submit(request, test)
        logger.debug("Reply: %s", reply)
        return reply

    # Registration and subscription

    def register(
        self,
        options: RegistrationOptions | None = None,
        *,
        test: bool | None = None,
    ) -> RegistrationResponse:
        if options is None:
            options = (
                RegistrationOptions.from_settings(self.settings)
                if self.settings is not None
                else RegistrationOptions(Location(), UserContact(), Location())
            )
        test = self._use_test(test)
        logger.info("Registering CSP user for account %s", self.credentials.account_number)

        request = build_registration_request(self.credentials, self.client, options)
        response = parse_registration_reply(self._commit(request, test), request=request, test=test)

        if response.success:
            self.credentials.user_key = response.user_key
            self.credentials.user_password = response.user_password
        logger.info("Registration finished: %s", response.message)
        return response

    def subscribe(
        self,
        options: SubscriptionOptions | None = None,
        *,
        test: bool | None = None,
    ) -> SubscriptionResponse:
        if options is None:
            options = (
                SubscriptionOptions.from_settings(self.settings)
                if self.settings is not None
                else SubscriptionOptions(None, UserContact(), Location(), Location())
            )
        test = self._use_test(test)
        logger.info("Subscribing account %s", self.credentials.account_number)

        request = build_subscription_request(self.credentials, self.client, options)
        response = parse_subscription_reply(self._commit(request, test), request=request, test=test)

        if response.success:
            self.credentials.meter_number = response.meter_number
        logger.info("Subscription finished: %s", response.message)
        return response

    def capture_version(
        self,
        customer_transaction_id: str | None = None,
        options: VersionCaptureOptions | None = None,
        *,
        test: bool | None = None,
    ) -> VersionCaptureResponse:
        if options is None:
            options = (
                VersionCaptureOptions.from_settings(self.settings)
                if self.settings is not None
                else VersionCaptureOptions()
            )
        test = self._use_test(test)
        transaction_id = customer_transaction_id or self.customer_transaction_id
        logger.info("Capturing version (transaction %s)", transaction_id)

        request = build_version_capture_request(self.credentials, self.client, transaction_id, options)
        response = parse_version_capture_reply(self._commit(request, test), request=request, test=test)

        if response.success and response.version is not None:
            self.negotiated_version = response.version
        return response

    # Shipping

    def find_rates(
        self,
        origin: Location,
        destination: Location,
        packages: Package | Sequence[Package],
        options: RateOptions | None = None,
        *,
        test: bool | None = None,
    ) -> RateResponse:
        packages = [packages] if isinstance(packages, Package) else list(packages)
        test = self._use_test(test)
        logger.info(
            "Requesting rates %s -> %s for %d package(s)",
            origin.country_code(),
            destination.country_code(),
            len(packages),
        )

        request = build_rate_request(
            self.credentials,
            self.client,
            origin,
            destination,
            packages,
            options,
            customer_transaction_id=self.customer_transaction_id,
        )
        return parse_rate_reply(
            self._commit(request, test),
            origin,
            destination,
            packages,
            request=request,
            test=test,
        )

    def find_tracking_info(
        self,
        tracking_number: str,
        options: TrackingOptions | None = None,
        *,
        test: bool | None = None,
    ) -> TrackingResponse:
        test = self._use_test(test)
        logger.info("Tracking %s", tracking_number)

        request = build_tracking_request(
            self.credentials,
            self.client,
            tracking_number,
            options,
            customer_transaction_id=self.customer_transaction_id,
        )
        return parse_tracking_reply(self._commit(request, test), request=request, test=test)
