"""HTTP client for the storefront API.

Fetches the plan and product catalog and posts checkout submissions.  It is
the production ``CheckoutGateway`` used by ``CheckoutSubmissionAdapter``.
"""

import logging

import requests

from app.domain.exceptions import SubmissionFailedError
from app.domain.rule_catalog import PlanDefinition, ProductRef

logger = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = "We could not reach the store right now. Please try again."


class StoreClient:
    """Thin wrapper over ``requests`` for the ``/store`` namespace.

    Args:
        base_url: Root URL of the running service, e.g. ``http://localhost:5000``.
        session: Optional pre-configured ``requests.Session``.
    """

    def __init__(self, base_url: str, session: requests.Session | None = None):
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config, session: requests.Session | None = None) -> "StoreClient":
        """Build a client targeting ``config["STORE_API_URL"]``."""
        return cls(config["STORE_API_URL"], session=session)

    def fetch_plan(self, slug: str) -> PlanDefinition:
        data = self._get(f"/store/plans/{slug}")
        return PlanDefinition.from_dict(data)

    def fetch_products(self, category: str | None = None) -> list[ProductRef]:
        params = {"category": category} if category else None
        return [ProductRef.from_dict(p) for p in self._get("/store/products", params=params)]

    def submit_subscription(self, payload: dict) -> dict:
        """POST the checkout payload; raise ``SubmissionFailedError`` on any failure."""
        url = f"{self._base_url}/store/checkout/subscription"
        try:
            resp = self._session.post(url, json=payload)
        except requests.exceptions.RequestException as err:
            logger.error("Checkout request to %s failed: %s", url, err)
            raise SubmissionFailedError(UNREACHABLE_MESSAGE) from err

        body = self._json_or_none(resp)
        if not resp.ok:
            message = (body.get("message") if isinstance(body, dict) else None) or UNREACHABLE_MESSAGE
            raise SubmissionFailedError(message, status_code=resp.status_code)
        if not isinstance(body, dict) or not isinstance(body.get("data"), dict):
            logger.error("Unexpected checkout response from %s: status=%s", url, resp.status_code)
            raise SubmissionFailedError(UNREACHABLE_MESSAGE)
        return body["data"]

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get(self, path: str, params: dict | None = None):
        resp = self._session.get(f"{self._base_url}{path}", params=params)
        resp.raise_for_status()
        return resp.json()["data"]

    @staticmethod
    def _json_or_none(resp: requests.Response) -> dict | None:
        try:
            return resp.json()
        except ValueError:
            return None
