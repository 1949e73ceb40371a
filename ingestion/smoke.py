"""
Post-deployment smoke check for an ingestion backend.

Runs against a live instance (directly or through the gateway):

    python -m ingestion.smoke --base-url http://localhost:8080 --prefix a
"""
import argparse
import base64
import os
import sys
from dataclasses import dataclass

import requests

from .utils.logging import configure_logging, logger

DEFAULT_PAYLOAD = bytes(range(10))


@dataclass
class CheckResult:
    name: str
    ok: bool
    detail: str = ""


def _get_json(response):
    try:
        return response.json()
    except ValueError:
        return None


def check_health(base_url, session=requests, timeout=10):
    response = session.get(f"{base_url}/health", timeout=timeout)
    data = _get_json(response) or {}
    if response.status_code != 200 or data.get("status") != "ok":
        return CheckResult("health", False, f"{response.status_code}: {data or response.text}")
    return CheckResult("health", True, f"{data.get('backend')} on port {data.get('port')}")


def check_info(base_url, prefix, session=requests, timeout=10):
    endpoint = f"/api/{prefix}"
    response = session.get(f"{base_url}{endpoint}", timeout=timeout)
    data = _get_json(response) or {}
    if response.status_code != 200 or data.get("endpoint") != endpoint:
        return CheckResult("info", False, f"{response.status_code}: {data or response.text}")
    return CheckResult("info", True, data.get("message", ""))


def check_upload(base_url, prefix, payload=DEFAULT_PAYLOAD, filename="smoke.bin",
                 session=requests, timeout=30):
    response = session.post(
        f"{base_url}/api/{prefix}",
        files={"image": (filename, payload, "application/octet-stream")},
        timeout=timeout,
    )
    data = _get_json(response) or {}
    if response.status_code != 200:
        return CheckResult("upload", False, f"{response.status_code}: {data.get('details') or response.text}")
    expected = base64.b64encode(payload).decode("ascii")
    if data.get("uploadedImage") != expected:
        return CheckResult("upload", False, "uploadedImage does not match the posted bytes")
    rows = data.get("rows")
    if not isinstance(rows, list) or len(rows) > 5:
        return CheckResult("upload", False, f"unexpected rows: {rows!r}")
    return CheckResult("upload", True, f"{len(rows)} recent rows")


def run_checks(base_url, prefix, payload=DEFAULT_PAYLOAD, session=None):
    base_url = base_url.rstrip("/")
    session = session or requests.Session()
    results = []
    for name, check in (
        ("health", lambda: check_health(base_url, session=session)),
        ("info", lambda: check_info(base_url, prefix, session=session)),
        ("upload", lambda: check_upload(base_url, prefix, payload, session=session)),
    ):
        try:
            results.append(check())
        except requests.exceptions.RequestException as e:
            results.append(CheckResult(name, False, f"request failed: {e}"))
    return results


def main(argv=None):
    parser = argparse.ArgumentParser(prog="ingestion.smoke", description=__doc__.strip().splitlines()[0])
    parser.add_argument("--base-url", default=os.getenv("SMOKE_BASE_URL", "http://localhost:8080"))
    parser.add_argument("--prefix", choices=["a", "b"], default="a")
    parser.add_argument("--image", help="file to upload instead of the built-in 10-byte payload")
    args = parser.parse_args(argv)

    configure_logging(os.getenv("LOG_LEVEL", "INFO").upper())
    payload = DEFAULT_PAYLOAD
    if args.image:
        with open(args.image, "rb") as f:
            payload = f.read()

    results = run_checks(args.base_url, args.prefix, payload)
    for r in results:
        if r.ok:
            logger.info(f"PASS {r.name}: {r.detail}")
        else:
            logger.error(f"FAIL {r.name}: {r.detail}")
    return 0 if all(r.ok for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
