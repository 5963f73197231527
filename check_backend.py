#!/usr/bin/env python3
"""Diagnostic script: check the backend endpoints the Agent console depends on."""

import json
import os
import sys

import httpx

BACKEND_URL = os.environ.get("AGENT_API_BASE_URL", "http://127.0.0.1:3000").rstrip("/")

# (path, description, required)
ENDPOINTS = [
    ("/api/couriers", "Courier pool", True),
    ("/api/lockers", "Locker pool", True),
    ("/api/customers", "Customers", True),
    ("/api/agent/active-resi", "Active resi catalog (optional)", False),
    ("/api/shipments?limit=5", "Shipments", False),
    ("/api/validate-resi?courier=jne&resi=TEST", "Per-resi check", False),
]


def check_endpoint(client: httpx.Client, path: str, description: str) -> tuple[bool, int | None]:
    print(f"\n{'='*60}")
    print(f"Testing: {description}")
    print(f"URL: {BACKEND_URL}{path}")
    print(f"{'='*60}")
    try:
        response = client.get(path)
    except httpx.TimeoutException:
        print("❌ TIMEOUT: Request took longer than 10 seconds")
        return False, None
    except httpx.HTTPError as e:
        print(f"❌ CONNECTION ERROR: {e}")
        return False, None

    print(f"Status Code: {response.status_code}")
    try:
        body = json.dumps(response.json(), indent=2, ensure_ascii=False)
    except ValueError:
        body = response.text
    print(body[:800])
    return response.is_success, response.status_code


def main() -> int:
    print("🔍 Smart Locker Backend Diagnostic")
    print(f"Target URL: {BACKEND_URL}")

    results = []
    with httpx.Client(base_url=BACKEND_URL, timeout=10.0) as client:
        for path, description, required in ENDPOINTS:
            ok, code = check_endpoint(client, path, description)
            results.append((path, required, ok, code))

    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    for path, required, ok, code in results:
        marker = "✅" if ok else ("❌" if required else "⚠️ ")
        print(f"{marker} {path:<28} status: {code}")

    missing_required = [path for path, required, ok, _ in results if required and not ok]
    if missing_required:
        print("\n❌ Required endpoints failing; the intake form will show an error page.")
        return 1
    print("\n✅ Required endpoints respond. Optional failures only disable auto-fill.")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\n\n⚠️  Check interrupted by user")
        sys.exit(1)
