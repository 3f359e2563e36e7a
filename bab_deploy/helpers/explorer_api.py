"""
Block explorer API helper - contract verification through Etherscan V2.

Public API
----------
ExplorerClient(api_url, api_key, chain_id)
    is_verified / submit / check_status / wait_for_result against the
    explorer serving ``chain_id``. Replies are mapped onto the
    ``bab_deploy.errors`` taxonomy; a throttled reply is ``ServiceUnavailable``.
"""
import json
import logging
import time

import requests

from bab_deploy.errors import (
    AddressNotFound,
    AlreadyVerified,
    BytecodeMismatch,
    RemoteVerificationError,
    ServiceUnavailable,
)

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30  # seconds
DEFAULT_POLL_INTERVAL = 3.0  # seconds between checkverifystatus calls
DEFAULT_MAX_POLLS = 20

CODE_FORMAT = "solidity-standard-json-input"


def _mask(params: dict) -> dict:
    masked = dict(params)
    if masked.get("apikey"):
        masked["apikey"] = "$API_KEY"
    if "sourceCode" in masked:
        masked["sourceCode"] = f"<{len(masked['sourceCode'])} chars>"
    return masked


def _is_already_verified(text: str) -> bool:
    return "already verified" in text.lower()


def _is_missing_code(text: str) -> bool:
    lowered = text.lower()
    return "unable to locate contractcode" in lowered or "unable to locate contract code" in lowered


def _is_rate_limited(text: str) -> bool:
    return "rate limit" in text.lower()


class ExplorerClient:
    """Etherscan-compatible contract verification API (V2, ``chainid`` routed)."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        chain_id: int,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_polls: int = DEFAULT_MAX_POLLS,
        sleep=time.sleep,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.chain_id = chain_id
        self.session = session or requests.Session()
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._sleep = sleep

    # ---------- transport ----------

    def _request(self, method: str, params: dict) -> dict:
        payload = {**params, "apikey": self.api_key}
        query = {"chainid": str(self.chain_id)}

        logger.debug("--- Sending to explorer ---")
        logger.debug(f"{method} {self.api_url} {_mask(payload)}")

        try:
            if method == "POST":
                response = self.session.post(self.api_url, params=query, data=payload, timeout=self.timeout)
            else:
                response = self.session.get(self.api_url, params={**query, **payload}, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ServiceUnavailable(f"Explorer API request failed: {e}") from e

        logger.debug("--- Received from explorer ---")
        logger.debug(f"Status Code: {response.status_code}")

        if response.status_code == 429 or response.status_code >= 500:
            raise ServiceUnavailable(f"Explorer API returned HTTP {response.status_code}")

        try:
            data = response.json()
        except (ValueError, requests.exceptions.JSONDecodeError) as e:
            raise ServiceUnavailable(f"Explorer API returned a non-JSON response: {e}") from e

        if not isinstance(data, dict):
            raise ServiceUnavailable(f"Unexpected explorer API response: {data!r}")
        logger.debug(f"Response: {data}")

        # Throttling comes back as HTTP 200 with status "0"
        if str(data.get("status")) != "1" and _is_rate_limited(str(data.get("result") or "")):
            raise ServiceUnavailable(f"Explorer API rate limit: {data.get('result')}", data)
        return data

    # ---------- queries ----------

    def get_source_code(self, address: str) -> dict:
        return self._request("GET", {
            "module": "contract",
            "action": "getsourcecode",
            "address": address,
        })

    def is_verified(self, address: str) -> bool:
        """Return True when the explorer already shows verified source for ``address``."""
        data = self.get_source_code(address)
        result = data.get("result")
        if str(data.get("status")) != "1" or not isinstance(result, list) or not result:
            return False

        record = result[0]
        if not isinstance(record, dict):
            return False
        source_code = str(record.get("SourceCode") or "").strip()
        abi = str(record.get("ABI") or "").strip()
        return bool(source_code) and "not verified" not in abi.lower()

    # ---------- verification ----------

    def submit(
        self,
        address: str,
        standard_input: dict,
        contract_name: str,
        compiler_version: str,
        constructor_args: str,
    ) -> str:
        """Submit source for verification and return the explorer's GUID.

        ``compiler_version`` is the long solc version, e.g. ``0.8.30+commit.73712a01``;
        the ``v`` prefix the API expects is added here.
        """
        if not compiler_version.startswith("v"):
            compiler_version = f"v{compiler_version}"

        data = self._request("POST", {
            "module": "contract",
            "action": "verifysourcecode",
            "contractaddress": address,
            "sourceCode": json.dumps(standard_input),
            "codeformat": CODE_FORMAT,
            "contractname": contract_name,
            "compilerversion": compiler_version,
            "constructorArguements": constructor_args,  # sic, the API's spelling
        })

        result = str(data.get("result") or "")
        if str(data.get("status")) == "1" and result:
            logger.info(f"Verification submitted, GUID: {result}")
            return result

        if _is_already_verified(result):
            raise AlreadyVerified(result, data)
        if _is_missing_code(result):
            raise AddressNotFound(result, data)
        raise RemoteVerificationError(f"Verification request rejected: {result or data}", data)

    def check_status(self, guid: str) -> dict:
        return self._request("GET", {
            "module": "contract",
            "action": "checkverifystatus",
            "guid": guid,
        })

    def wait_for_result(self, guid: str) -> str:
        """Poll ``checkverifystatus`` until the explorer settles on an outcome.

        Returns the final status message on success.

        Raises:
            AlreadyVerified: The explorer reports the source as already verified.
            BytecodeMismatch: The explorer could not reproduce the deployed bytecode.
            ServiceUnavailable: Still pending after ``max_polls`` checks.
            RemoteVerificationError: Any other failure reported by the explorer.
        """
        for attempt in range(self.max_polls):
            self._sleep(self.poll_interval)
            data = self.check_status(guid)
            result = str(data.get("result") or "")

            if "pending" in result.lower():
                logger.info(f"Still pending... ({attempt + 1}/{self.max_polls})")
                continue
            if _is_already_verified(result):
                raise AlreadyVerified(result, data)
            if str(data.get("status")) == "1":
                return result
            if "unable to verify" in result.lower() or "bytecode" in result.lower():
                raise BytecodeMismatch(result, data)
            if _is_missing_code(result):
                raise AddressNotFound(result, data)
            raise RemoteVerificationError(f"Verification failed: {result or data}", data)

        raise ServiceUnavailable(
            f"Verification {guid} still pending after {self.max_polls} status checks"
        )
