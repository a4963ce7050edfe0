#!/usr/bin/env python3

"""
Smoke runner that replays canned requests against a running Connect API.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import asyncio
import json
import os
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import httpx

BASE_URL = os.getenv("CONNECT_BASE_URL", "http://localhost:4323/api/v1")
HEADERS = {"Content-Type": "application/json"}
NOW_MS = int(time.time()) * 1000
H1_MS = NOW_MS - 3_600_000


@dataclass(frozen=True)
class Case:
    label: str
    method: str
    path: str
    body: Dict[str, Any] = field(default_factory=dict)
    params: Dict[str, Any] = field(default_factory=dict)
    expect: int = 200
    section: str = ""


def q(ref_id: str, query_type: str, start: int = H1_MS, end: int = NOW_MS, **payload: Any) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "refId": ref_id,
        "queryType": query_type,
        "timeRange": {"from": start, "to": end},
        "intervalMs": 15000,
    }
    d.update(payload)
    return d


def batch(*queries: Dict[str, Any]) -> Dict[str, Any]:
    return {"queries": list(queries)}


CASES: List[Case] = [
    Case("liveness", "GET", "/health", section="Health"),
    Case("connectivity", "POST", "/health/check", section="Health"),

    Case("range up", "POST", "/query", section="Metrics",
         body=batch(q("A", "prometheus", promQL="up"))),
    Case("instant up", "POST", "/query", section="Metrics",
         body=batch(q("A", "prometheus", start=NOW_MS, end=NOW_MS, promQL="up"))),
    Case("missing promQL", "POST", "/query", section="Metrics",
         body=batch(q("A", "prometheus"))),

    Case("job selector", "POST", "/query", section="Logs",
         body=batch(q("A", "loki", logQL='{job=~".+"}'))),

    Case("GET endpoint", "POST", "/query", section="REST",
         body=batch(q("A", "rest", restEndpoint="/"))),
    Case("POST with body", "POST", "/query", section="REST",
         body=batch(q("A", "rest", restEndpoint="/", restMethod="post", restBody='{"q": 1}'))),
    Case("missing endpoint", "POST", "/query", section="REST",
         body=batch(q("A", "rest"))),

    Case("mixed with unknown type", "POST", "/query", section="Batch",
         body=batch(q("A", "prometheus", promQL="up"), q("B", "unknown"))),
    Case("missing refId", "POST", "/query", section="Batch",
         body={"queries": [{"queryType": "prometheus"}]}, expect=400),
    Case("duplicate refId", "POST", "/query", section="Batch",
         body=batch(q("A", "prometheus", promQL="up"), q("A", "loki", logQL="{}")), expect=400),

    Case("prometheus labels", "GET", "/resources/prometheus/api/v1/labels", section="Resources"),
    Case("unknown backend", "GET", "/resources/nope/x", section="Resources", expect=404),
]


def summarize(body: Any) -> List[str]:
    """One line per refId for /query responses: frame/row counts or the error."""
    if not isinstance(body, dict) or not isinstance(body.get("results"), dict):
        return []
    lines = []
    for ref_id, result in body["results"].items():
        if "error" in result:
            lines.append(f"{ref_id}: {result['error']}")
            continue
        frames = result.get("frames") or []
        rows = sum(len(f["fields"][0]["values"]) for f in frames if f.get("fields"))
        lines.append(f"{ref_id}: {len(frames)} frame(s), {rows} row(s)")
    return lines


async def run_case(client: httpx.AsyncClient, case: Case) -> Tuple[bool, Optional[httpx.Response]]:
    try:
        r = await client.request(case.method, case.path, json=case.body or None, params=case.params)
    except httpx.TransportError as exc:
        print(f"  ! {case.label}: transport error: {exc}")
        return False, None
    return r.status_code == case.expect, r


def report(case: Case, ok: bool, r: Optional[httpx.Response], verbose: bool) -> None:
    mark = "ok  " if ok else "FAIL"
    status = r.status_code if r is not None else "---"
    print(f"  [{mark}] {status} {case.method:<6} {case.path:<44} {case.label}")
    if r is None:
        return
    try:
        body: Any = r.json()
    except ValueError:
        body = r.text
    for line in summarize(body):
        print(f"           {line}")
    if verbose or not ok:
        print(f"           expected {case.expect}, body:")
        print(json.dumps(body, indent=2) if isinstance(body, (dict, list)) else f"           {body}")


async def main() -> None:
    import argparse

    parser = argparse.ArgumentParser(description="Replay smoke cases against a running Connect API")
    parser.add_argument("--base-url", default=BASE_URL, help="API base URL including /api/v1")
    parser.add_argument("--section", help="only run cases from this section name")
    parser.add_argument("--verbose", action="store_true", help="print every response body")
    args = parser.parse_args()

    selected = [c for c in CASES if not args.section or c.section == args.section]
    if not selected:
        print(f"no cases in section {args.section!r}")
        sys.exit(1)

    by_section: Dict[str, List[bool]] = {}
    async with httpx.AsyncClient(base_url=args.base_url, headers=HEADERS, timeout=35) as client:
        for case in selected:
            if case.section not in by_section:
                by_section[case.section] = []
                print(f"\n{case.section}")
            ok, r = await run_case(client, case)
            by_section[case.section].append(ok)
            report(case, ok, r, args.verbose)

    print()
    failed = 0
    for section, outcomes in by_section.items():
        failed += outcomes.count(False)
        print(f"  {section:<10} {outcomes.count(True)}/{len(outcomes)} passed")
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    asyncio.run(main())
