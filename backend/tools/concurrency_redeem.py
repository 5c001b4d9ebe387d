import argparse
import concurrent.futures
import os

import requests

BASE = os.environ.get("REDEEMHUB_BASE", "http://127.0.0.1:3000")


def redeem_task(i, code):
    try:
        r = requests.post(f"{BASE}/api/redeem", json={"code": code}, timeout=10)
        return (i, r.status_code, r.text)
    except requests.RequestException as e:
        return (i, "ERR", str(e))


def generate_code(product_id, account_id):
    r = requests.post(
        f"{BASE}/api/codes/generate",
        json={"product_id": product_id, "account_id": account_id},
        timeout=10,
    )
    r.raise_for_status()
    return r.json()["code"]


def run_redeem_concurrent(workers, code):
    print(f"Running redeem test: workers={workers}, code={code}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(redeem_task, i, code) for i in range(workers)]
        results = [f.result() for f in futures]
    for r in results:
        print(r)
    winners = [r for r in results if r[1] == 200]
    print(f"Successful redemptions: {len(winners)} (expected exactly 1)")
    return len(winners)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Fire concurrent redemptions of one code.")
    parser.add_argument("--code", help="existing unused code")
    parser.add_argument("--product-id", type=int, help="generate a fresh code for this product")
    parser.add_argument("--account-id", type=int, help="account to bind the fresh code to")
    parser.add_argument("--workers", type=int, default=8)
    args = parser.parse_args()

    code = args.code
    if not code:
        if args.product_id is None or args.account_id is None:
            parser.error("either --code or both --product-id and --account-id are required")
        code = generate_code(args.product_id, args.account_id)
    run_redeem_concurrent(args.workers, code)
