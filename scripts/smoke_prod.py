#!/usr/bin/env python3
"""Smoke test against a running API: health, keyword search, facets, analytics, company pages.

Run with: python scripts/smoke_prod.py
Requires: API running with a populated database. Start it with EMBED_PROVIDER=deterministic
to skip OpenAI; semantic checks then only verify response shape.
"""

import os
import sys

import requests

API_BASE = os.getenv("API_BASE", "http://localhost:8000").rstrip("/")


def _get(path: str, **params) -> requests.Response:
    return requests.get(f"{API_BASE}{path}", params=params or None, timeout=30)


def _check(failures: list[str], label: str, resp: requests.Response, keys: tuple[str, ...]) -> dict | list | None:
    if resp.status_code != 200:
        failures.append(f"{label} => {resp.status_code}")
        print(f"   FAIL: {resp.status_code}")
        return None
    data = resp.json()
    missing = [k for k in keys if k not in data]
    if missing:
        failures.append(f"{label} missing {missing}")
        print(f"   FAIL: missing {missing}")
        return None
    print("   ok")
    return data


def main() -> int:
    failures: list[str] = []

    print("1. GET /health ...")
    try:
        data = _check(failures, "/health", _get("/health"), ("ok", "version"))
    except requests.RequestException as e:
        print(f"   FAIL: {e}")
        return 1
    if data is None:
        return 1

    print("2. GET /search ...")
    search = _check(failures, "/search", _get("/search", pageSize=5), ("total", "page", "pageSize", "results"))

    print("3. GET /semantic-search ...")
    _check(failures, "/semantic-search", _get("/semantic-search", q="developer tools", pageSize=5), ("total", "results"))

    print("4. GET /facets ...")
    _check(failures, "/facets", _get("/facets"), ("tags", "industries", "regions", "stages", "years"))

    print("5. GET /analytics ...")
    _check(failures, "/analytics", _get("/analytics", colorBy="industries", topN=5), ("series", "rows"))

    if search and search["results"]:
        company_id = search["results"][0]["id"]
        print(f"6. GET /companies/{company_id} ...")
        _check(failures, "/companies/{id}", _get(f"/companies/{company_id}"), ("id", "name", "has_embedding"))

        print(f"7. GET /companies/{company_id}/embedding-map ...")
        r = _get(f"/companies/{company_id}/embedding-map", limit=10)
        if r.status_code == 404:
            print("   404 (no embedding yet)")
        else:
            _check(failures, "/companies/{id}/embedding-map", r, ("method", "selectedCompanyId", "points"))
    else:
        print("6-7. skipped: no companies in database")

    if failures:
        print("\nFAILURES:", failures)
        return 1
    print("\nSmoke passed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
