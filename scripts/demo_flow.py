"""Demo: walk the authorization-code flow against a running mock server.

Start the server first (``python -m mock_oauth``), then run:
    python scripts/demo_flow.py [--base-url http://127.0.0.1:9000]

Uses the default registry in config/ (test_client / user 1).
"""

from __future__ import annotations

import argparse
import sys
from urllib.parse import parse_qs, urlparse

import httpx

CLIENT_ID = "test_client"
CLIENT_SECRET = "test_secret"
REDIRECT_URI = "https://app.demo.test/api/auth/google/callback"
USER_ID = "1"


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--base-url", default="http://127.0.0.1:9000")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, follow_redirects=False) as client:
        # ── Step 1: GET /auth ───────────────────────────────────────────
        r = client.get(
            "/auth",
            params={
                "client_id": CLIENT_ID,
                "redirect_uri": REDIRECT_URI,
                "state": "demo-state",
            },
        )
        print(f"1. GET  /auth               → {r.status_code}  (user picker)")
        if r.status_code != 200:
            print(f"   {r.text}")
            return 1

        # ── Step 2: GET /auth/callback (pick user) ──────────────────────
        r = client.get(
            "/auth/callback",
            params={
                "user_id": USER_ID,
                "client_id": CLIENT_ID,
                "redirect_uri": REDIRECT_URI,
                "state": "demo-state",
            },
        )
        query = parse_qs(urlparse(r.headers["location"]).query)
        code = query["code"][0]
        print(
            f"2. GET  /auth/callback      → {r.status_code}  "
            f"code={code[:12]}…  state={query.get('state', [''])[0]}"
        )

        # ── Step 3: POST /token ─────────────────────────────────────────
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": CLIENT_ID,
            "client_secret": CLIENT_SECRET,
            "redirect_uri": REDIRECT_URI,
        }
        r = client.post("/token", data=form)
        r.raise_for_status()
        token_data = r.json()
        access_token = token_data["access_token"]
        print(
            f"3. POST /token              → {r.status_code}  "
            f"token={access_token[:12]}…  expires_in={token_data['expires_in']}s"
        )

        # ── Step 4: GET /userinfo (bearer header) ───────────────────────
        r = client.get(
            "/userinfo", headers={"Authorization": f"Bearer {access_token}"}
        )
        print(f"4. GET  /userinfo           → {r.status_code}  {r.json()}")

        # ── Step 5: replay the code ─────────────────────────────────────
        r = client.post("/token", data=form)
        print(f"5. POST /token (replay)     → {r.status_code}  {r.text}")

    print("\nAll steps completed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
