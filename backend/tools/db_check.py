import sqlite3
import sys

DB = sys.argv[1] if len(sys.argv) > 1 else "database.db"
PRODUCT_CODE = sys.argv[2] if len(sys.argv) > 2 else None

conn = sqlite3.connect(DB)
cur = conn.cursor()

print("=== Products (cached stock vs non-used accounts) ===")
cur.execute(
    """
    SELECT p.id, p.product_code, p.name, p.stock,
      (SELECT COUNT(*) FROM accounts a WHERE a.product_id = p.id AND a.status != 'used')
    FROM products p ORDER BY p.id
    """
)
for r in cur.fetchall():
    drift = "" if r[3] == r[4] else "  <-- drift"
    print({"id": r[0], "code": r[1], "name": r[2], "stock": r[3], "not_used": r[4]}, drift)

if PRODUCT_CODE:
    print(f"\n=== Accounts for {PRODUCT_CODE} ===")
    cur.execute(
        """
        SELECT a.id, a.email, a.status, a.created_at FROM accounts a
        JOIN products p ON p.id = a.product_id
        WHERE p.product_code = ? ORDER BY a.status, a.id
        """,
        (PRODUCT_CODE,),
    )
    for r in cur.fetchall():
        print(r)

    print(f"\n=== Codes for {PRODUCT_CODE} ===")
    cur.execute(
        """
        SELECT c.id, c.code, c.account_id, c.used, c.used_at, c.created_at FROM product_codes c
        JOIN products p ON p.id = c.product_id
        WHERE p.product_code = ? ORDER BY c.created_at DESC LIMIT 50
        """,
        (PRODUCT_CODE,),
    )
    for r in cur.fetchall():
        print(r)
else:
    print("\n=== Recent codes ===")
    cur.execute(
        "SELECT id, code, product_id, account_id, used, used_at FROM product_codes ORDER BY created_at DESC LIMIT 20"
    )
    for r in cur.fetchall():
        print(r)

conn.close()
