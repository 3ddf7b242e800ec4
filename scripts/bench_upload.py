#!/usr/bin/env python3
"""Benchmark document upload: throughput (batches/s) and latency.

Every batch triggers a full knowledge base rebuild, so latency grows with
the catalog size. Run against a scratch database.

Usage:
    export API_URL=http://localhost:8000
    uv run python scripts/bench_upload.py [--batches 20] [--batch-size 5] [--content-size 500]
"""
from __future__ import annotations

import argparse
import os
import statistics
import sys
import time

import httpx


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark document upload")
    parser.add_argument("--batches", type=int, default=20, help="Number of upload requests")
    parser.add_argument("--batch-size", type=int, default=5, help="Files per request")
    parser.add_argument("--content-size", type=int, default=200, help="Approximate text length per file")
    parser.add_argument("--output", type=str, default="/results/bench_upload.txt", help="Output file path")
    parser.add_argument("--cleanup", action="store_true", help="Delete uploaded documents afterwards")
    args = parser.parse_args()

    api_url = os.environ.get("API_URL", "http://localhost:8000").rstrip("/")
    content = "x" * args.content_size
    latencies: list[float] = []
    uploaded: list[str] = []
    errors = 0

    print(f"Uploading {args.batches} batches of {args.batch_size} file(s)...")
    start_total = time.perf_counter()
    with httpx.Client(timeout=300.0) as client:
        for i in range(args.batches):
            files = [
                ("files", (f"bench_{i}_{j}.txt", f"{content} doc_{i}_{j}".encode(), "text/plain"))
                for j in range(args.batch_size)
            ]
            t0 = time.perf_counter()
            r = client.post(f"{api_url}/v1/documents", files=files)
            elapsed = time.perf_counter() - t0
            if r.status_code in (201, 207):
                latencies.append(elapsed)
                uploaded.extend(f["document_id"] for f in r.json()["files"] if f["document_id"])
            else:
                errors += 1
        total_elapsed = time.perf_counter() - start_total

        if args.cleanup:
            print(f"Deleting {len(uploaded)} document(s)...")
            for document_id in uploaded:
                client.delete(f"{api_url}/v1/documents/{document_id}")

    n = len(latencies)
    if n == 0:
        print("No successful uploads.")
        return 1

    batches_per_sec = n / total_elapsed
    docs_per_sec = len(uploaded) / total_elapsed
    p50 = statistics.median(latencies) * 1000
    p95 = sorted(latencies)[int(n * 0.95) - 1] * 1000 if n >= 20 else p50
    p99 = sorted(latencies)[int(n * 0.99) - 1] * 1000 if n >= 100 else p95

    summary = (
        f"Upload benchmark (batches={n}, documents={len(uploaded)}, errors={errors})\n"
        f"  Throughput: {batches_per_sec:.2f} batches/s, {docs_per_sec:.2f} docs/s\n"
        f"  Latency: p50={p50:.1f} ms, p95={p95:.1f} ms, p99={p99:.1f} ms\n"
        f"  Total time: {total_elapsed:.2f} s\n"
    )
    print(summary)

    try:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(summary)
        print(f"Wrote {args.output}")
    except OSError:
        pass

    return 0


if __name__ == "__main__":
    sys.exit(main())
