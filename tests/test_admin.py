import json

import pytest

from admin import AdminConsole, TABS, login
from api_client import ApiError
from storage import ADMIN_TOKEN_KEY, EDITING_PRODUCT_KEY, read_json
from ui_text import FILL_REQUIRED, MESSAGES


@pytest.fixture
def backend(fake_api):
    """Admin routes backed by mutable lists, like a tiny server."""
    db = {
        "users": [{"id": 1, "username": "aibek", "email": "a@x.kg", "phone": "+996"}],
        "branches": [{"id": 1, "name": "A", "city": "Бишкек"},
                     {"id": 2, "name": "B", "city": "Ош"},
                     {"id": 3, "name": "C", "city": "Каракол"}],
        "categories": [{"id": 5, "name": "Пицца", "emoji": "🍕"}],
        "subcategories": [{"id": 50, "name": "Классика", "category": 5, "pricing_model": "tiered"},
                          {"id": 51, "name": "Соусы", "category": 5}],
        "products": [{"id": 10, "name": "Маргарита", "image": "m.jpg", "branch": {"id": 1},
                      "subcategory": {"id": 50, "category": 5},
                      "small_price": 300, "medium_price": 400, "large_price": 500}],
    }

    def lister(name):
        def handler(token, **kw):
            if token != "good":
                raise ApiError("HTTP 401", status=401)
            return list(db[name])
        return handler

    def deleter(name, obj_id):
        def handler(token, **kw):
            db[name] = [o for o in db[name] if o["id"] != obj_id]
        return handler

    for name in db:
        fake_api.routes[("GET", f"/api/admin/{name}/")] = lister(name)
    for obj in db["branches"]:
        fake_api.routes[("DELETE", f"/api/admin/branches/{obj['id']}/")] = deleter("branches", obj["id"])
    fake_api.db = db
    return fake_api


def _console(backend, storage, token="good"):
    if token:
        storage.write(ADMIN_TOKEN_KEY, token)
    return AdminConsole(backend, storage, legacy_pizza_ids=frozenset())


def test_missing_token_redirects_without_fetch(backend, storage):
    c = _console(backend, storage, token=None)
    assert not c.start()
    assert c.redirect == "login"
    assert backend.calls == []


def test_rejected_token_is_cleared(backend, storage):
    c = _console(backend, storage, token="stale")
    assert not c.start()
    assert c.redirect == "login"
    assert storage.read(ADMIN_TOKEN_KEY) is None
    assert len(backend.calls) == 1


def test_start_loads_every_collection_with_bearer(backend, storage):
    c = _console(backend, storage)
    assert c.start()
    assert c.authenticated
    assert [b["name"] for b in c.branches] == ["A", "B", "C"]
    assert len(c.products) == 1
    assert {call[2] for call in backend.calls} == {"good"}
    assert c.error is None


def test_one_failing_collection_does_not_block_others(backend, storage):
    backend.routes[("GET", "/api/admin/categories/")] = ApiError("HTTP 500", status=500)
    c = _console(backend, storage)
    assert c.start()
    assert c.categories == []
    assert c.products
    assert "категорий" in c.error


def test_switching_tabs_does_not_refetch(backend, storage):
    c = _console(backend, storage)
    c.start()
    n = len(backend.calls)
    for tab in TABS:
        c.set_active_tab(tab)
    assert len(backend.calls) == n
    with pytest.raises(ValueError):
        c.set_active_tab("products")


def test_delete_branch_keeps_order_of_others(backend, storage):
    c = _console(backend, storage)
    c.start()
    assert c.delete_branch(2)
    assert [b["id"] for b in c.branches] == [1, 3]
    assert c.message == MESSAGES["branch_deleted"]
    assert c.error is None


def test_delete_failure_sets_error(backend, storage):
    backend.routes[("DELETE", "/api/admin/branches/1/")] = ApiError("Нельзя удалить", status=409, detail="Нельзя удалить")
    c = _console(backend, storage)
    c.start()
    assert not c.delete_branch(1)
    assert c.error == "Нельзя удалить"
    assert len(c.branches) == 3


def test_create_branch_clears_form(backend, storage):
    created = []
    backend.routes[("POST", "/api/admin/branches/")] = lambda token, json, **kw: created.append(json) or {"id": 4}
    c = _console(backend, storage)
    c.start()
    c.branch_name, c.branch_city = " D ", "Талас"
    assert c.save_branch()
    assert created == [{"name": "D", "city": "Талас"}]
    assert c.branch_name == ""
    assert c.message == MESSAGES["branch_created"]


def test_edit_branch_updates(backend, storage):
    sent = []
    backend.routes[("PUT", "/api/admin/branches/2/")] = lambda token, json, **kw: sent.append(json)
    c = _console(backend, storage)
    c.start()
    c.edit_branch(c.branches[1])
    assert c.active_tab == "branch"
    assert c.branch_name == "B"
    c.branch_city = "Джалал-Абад"
    assert c.save_branch()
    assert sent == [{"name": "B", "city": "Джалал-Абад"}]
    assert c.editing_branch is None


def test_required_fields(backend, storage):
    c = _console(backend, storage)
    c.start()
    assert not c.save_branch()
    assert c.error == FILL_REQUIRED
    assert not c.save_subcategory()
    assert not c.save_product()


def test_edit_subcategory_preloads(backend, storage):
    c = _console(backend, storage)
    c.start()
    c.edit_subcategory(c.subcategories[0])
    assert c.active_tab == "subcategory"
    assert c.subcategory_name == "Классика"
    assert c.subcategory_category == 5
    assert [s["id"] for s in c.subcategories_for("5")] == [50, 51]


def test_is_pizza_is_data_driven(backend, storage):
    c = _console(backend, storage)
    c.start()
    assert c.is_pizza(50)
    assert not c.is_pizza(51)
    c.legacy_pizza_ids = frozenset({51})
    assert c.is_pizza(51)


def test_edit_product_persists_draft_and_restores(backend, storage):
    c = _console(backend, storage)
    c.start()
    c.edit_product(c.products[0])
    draft = read_json(storage, EDITING_PRODUCT_KEY)
    assert draft["product"]["id"] == 10
    assert draft["saved_at"]

    reloaded = _console(backend, storage)
    reloaded.start()
    assert reloaded.editing_product["id"] == 10
    assert reloaded.product_name == "Маргарита"
    assert reloaded.prices == {"small": 300, "medium": 400, "large": 500}
    assert reloaded.product_branch == 1
    assert reloaded.product_subcategory == 50
    assert reloaded.message == MESSAGES["draft_restored"]


def test_unreadable_draft_is_dropped(backend, storage):
    storage.write(EDITING_PRODUCT_KEY, "{oops")
    c = _console(backend, storage)
    assert c.start()
    assert c.editing_product is None
    assert storage.read(EDITING_PRODUCT_KEY) is None


def test_update_tiered_product_sends_multipart(backend, storage):
    sent = []
    backend.routes[("PUT", "/api/admin/products/10/")] = lambda token, data, files, **kw: sent.append((data, files))
    c = _console(backend, storage)
    c.start()
    c.edit_product(c.products[0])
    c.prices["large"] = "550"
    c.product_image = ("new.png", b"img", "image/png")
    assert c.save_product()

    data, files = sent[0]
    assert data == {"name": "Маргарита", "branch": "1", "subcategory": "50",
                    "small_price": "300", "medium_price": "400", "large_price": "550"}
    assert files == {"image": ("new.png", b"img", "image/png")}
    assert storage.read(EDITING_PRODUCT_KEY) is None
    assert c.editing_product is None


def test_create_flat_product(backend, storage):
    sent = []
    backend.routes[("POST", "/api/admin/products/")] = lambda token, data, files, **kw: sent.append((data, files))
    c = _console(backend, storage)
    c.start()
    c.product_name = "Соус"
    c.product_branch = 2
    c.product_category = 5
    c.product_subcategory = 51
    c.price = "40"
    assert c.save_product()
    assert sent == [({"name": "Соус", "branch": "2", "subcategory": "51", "price": "40"}, None)]


def test_send_promo_code(backend, storage):
    sent = []
    backend.routes[("POST", "/api/admin/users/send-promo/")] = lambda token, json, **kw: sent.append(json)
    c = _console(backend, storage)
    c.start()
    assert c.send_promo_code("aibek", "PIZZA10")
    assert sent == [{"username": "aibek", "promoCode": "PIZZA10"}]
    assert not c.send_promo_code("aibek", "  ")


def test_logout_clears_token(backend, storage):
    c = _console(backend, storage)
    c.start()
    c.logout()
    assert storage.read(ADMIN_TOKEN_KEY) is None
    assert c.redirect == "login"
    assert not c.authenticated


def test_login_extracts_token(fake_api):
    fake_api.routes[("POST", "/api/admin/login/")] = lambda token, json, **kw: {"token": "t-" + json["username"]}
    assert login(fake_api, "admin", "secret") == "t-admin"


def test_login_failure(fake_api):
    fake_api.routes[("POST", "/api/admin/login/")] = ApiError("HTTP 401", status=401)
    with pytest.raises(ApiError):
        login(fake_api, "admin", "wrong")
    fake_api.routes[("POST", "/api/admin/login/")] = {"ok": True}
    with pytest.raises(ApiError):
        login(fake_api, "admin", "secret")
