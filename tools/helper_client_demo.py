"""Drive the helper the way the signing workflow does.

1. GET /generate-payloads and verify the returned material locally.
2. POST the decoded artifact signature to /get-timestamp.
3. Save the TSA reply.
"""
import argparse
import base64
import sys

import httpx

from cryptohelper.crypto.verify import verify_components


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--url", default="http://localhost:8080", help="helper base URL")
    ap.add_argument("--out", default="timestamp.tsr", help="where to write the TSA reply")
    ap.add_argument("--skip-timestamp", action="store_true", help="only fetch and verify payloads")
    ap.add_argument("--timeout", type=float, default=30.0)
    args = ap.parse_args()

    base = args.url.rstrip("/")
    with httpx.Client(timeout=args.timeout) as s:
        r1 = s.get(f"{base}/generate-payloads")
        if r1.status_code != 200:
            print("Unexpected status", r1.status_code, r1.text)
            return 1
        components = r1.json()
        print("artifactHash:", components["artifactHash"])
        print("publicKeyBase64:", components["publicKeyBase64"][:32] + "...")
        if not verify_components(components):
            print("Local verification FAILED")
            return 1
        print("Local verification ok")

        if args.skip_timestamp:
            return 0

        sig = base64.b64decode(components["artifactSignature"])
        r2 = s.post(f"{base}/get-timestamp", content=sig)
        if r2.status_code != 200:
            print("Timestamp failed", r2.status_code, r2.text)
            return 1
        with open(args.out, "wb") as f:
            f.write(r2.content)
        print(f"Timestamp reply ({r2.headers.get('content-type')}, {len(r2.content)} bytes) -> {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
