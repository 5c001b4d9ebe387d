import pytest

from redeemhub.exceptions import DuplicateError, NotFoundError
from redeemhub.models.account import Account
from redeemhub.models.product import Product
from redeemhub.models.product_code import ProductCode
from redeemhub.services.catalog_service import CatalogService, parse_account_lines
from redeemhub.services.redemption_service import RedemptionService


def _product(db, code="NET1", stock=0):
    return CatalogService(db).create_product(code, f"Product {code}", stock=stock)


def test_create_product_defaults(db, lookup):
    p = CatalogService(db).create_product("NET1", "Netflix")
    stored = lookup(Product, p.id)
    assert stored.logo == "fas fa-box"
    assert stored.stock == 0
    assert stored.created_at is not None


def test_duplicate_product_code_rejected(db):
    svc = CatalogService(db)
    svc.create_product("NET1", "Netflix")
    with pytest.raises(DuplicateError):
        svc.create_product("NET1", "Other")


def test_list_products_newest_first_with_available_count(db):
    svc = CatalogService(db)
    older = svc.create_product("OLD1", "Old")
    newer = svc.create_product("NEW1", "New")
    svc.create_account(older.id, "a@x.com", "p")
    svc.create_account(older.id, "b@x.com", "p")
    RedemptionService(db).generate_code(older.id, svc.list_accounts(older.id)[0].id)

    listed = svc.list_products()
    assert [p["id"] for p in listed] == [newer.id, older.id]
    assert listed[1]["available_accounts"] == 1
    assert listed[0]["available_accounts"] == 0


def test_update_product_overwrites_fields(db, lookup):
    svc = CatalogService(db)
    p = svc.create_product("NET1", "Netflix", description="old", logo="fas fa-film", stock=3)
    svc.update_product(p.id, "Netflix 4K", None, None, 7)
    stored = lookup(Product, p.id)
    assert stored.name == "Netflix 4K"
    assert stored.description is None
    assert stored.logo is None
    assert stored.stock == 7


def test_update_missing_product(db):
    with pytest.raises(NotFoundError):
        CatalogService(db).update_product(999, "x", None, None, 0)


def test_delete_product_cascades(db, lookup):
    svc = CatalogService(db)
    p = _product(db)
    a = svc.create_account(p.id, "a@x.com", "p")
    code = RedemptionService(db).generate_code(p.id, a.id)

    svc.delete_product(p.id)

    assert lookup(Product, p.id) is None
    assert lookup(Account, a.id) is None
    assert lookup(ProductCode, code["code_id"]) is None


def test_delete_missing_product_is_noop(db):
    CatalogService(db).delete_product(12345)


def test_create_account_increments_stock(db, lookup):
    svc = CatalogService(db)
    p = _product(db, stock=2)
    a = svc.create_account(p.id, "a@x.com", "secret")
    assert lookup(Product, p.id).stock == 3
    stored = lookup(Account, a.id)
    assert stored.status == "available"
    assert stored.login_via == "Email"


def test_create_account_unknown_product(db):
    with pytest.raises(NotFoundError):
        CatalogService(db).create_account(404, "a@x.com", "p")


def test_list_accounts_ordered_by_status_then_id(db):
    svc = CatalogService(db)
    p = _product(db)
    first = svc.create_account(p.id, "1@x.com", "p")
    second = svc.create_account(p.id, "2@x.com", "p")
    third = svc.create_account(p.id, "3@x.com", "p")
    RedemptionService(db).generate_code(p.id, first.id)

    ordered = [a.id for a in svc.list_accounts(p.id)]
    assert ordered == [second.id, third.id, first.id]  # "available" < "reserved"
    assert [a.id for a in svc.list_accounts(p.id, only_available=True)] == [second.id, third.id]


def test_bulk_create_counts_and_stock(db, lookup):
    svc = CatalogService(db)
    p = _product(db)
    result = svc.bulk_create_accounts(
        p.id,
        [
            {"email": "a@x.com", "password": "1"},
            {"email": "b@x.com", "password": "2", "login_via": "Google"},
            {"email": "c@x.com"},
        ],
    )
    assert result == {"added": 2, "failed": 1}
    assert lookup(Product, p.id).stock == 2
    vias = sorted(a.login_via for a in svc.list_accounts(p.id))
    assert vias == ["Email", "Google"]


def test_bulk_create_unknown_product(db):
    with pytest.raises(NotFoundError):
        CatalogService(db).bulk_create_accounts(404, [{"email": "a", "password": "b"}])


def test_import_from_text(db, lookup):
    svc = CatalogService(db)
    p = _product(db)
    result = svc.import_accounts_from_text(p.id, "a@x.com|pw1|Email\nbad-line\nb@x.com|pw2")
    assert result == {"imported": 2, "failed": 1}
    assert lookup(Product, p.id).stock == 2
    accounts = svc.list_accounts(p.id)
    assert [(a.email, a.password, a.login_via) for a in accounts] == [
        ("a@x.com", "pw1", "Email"),
        ("b@x.com", "pw2", "Email"),
    ]


def test_parse_account_lines_edge_cases():
    records, failed = parse_account_lines(
        "\n  x@y.com | pw | Facebook  \n\n|nopass\nonly\nz@y.com|p2|\n"
    )
    assert records == [("x@y.com", "pw", "Facebook"), ("z@y.com", "p2", "Email")]
    assert failed == 2


def test_delete_account_decrements_stock(db, lookup):
    svc = CatalogService(db)
    p = _product(db)
    a = svc.create_account(p.id, "a@x.com", "p")
    svc.create_account(p.id, "b@x.com", "p")
    svc.delete_account(a.id)
    assert lookup(Account, a.id) is None
    assert lookup(Product, p.id).stock == 1


def test_delete_used_account_keeps_stock(db, lookup):
    svc = CatalogService(db)
    p = _product(db)
    a = svc.create_account(p.id, "a@x.com", "p")
    engine = RedemptionService(db)
    engine.redeem(engine.generate_code(p.id, a.id)["code"])
    assert lookup(Product, p.id).stock == 0

    svc.delete_account(a.id)
    assert lookup(Product, p.id).stock == 0


def test_delete_missing_account_is_noop(db):
    CatalogService(db).delete_account(999)


def test_reconcile_stock(db, lookup):
    svc = CatalogService(db)
    p = _product(db, stock=10)
    svc.create_account(p.id, "a@x.com", "p")  # cached 11, actual 1
    in_sync = _product(db, code="OK1")

    changed = svc.reconcile_stock()
    assert changed == {p.id: 1}
    assert lookup(Product, p.id).stock == 1
    assert lookup(Product, in_sync.id).stock == 0
