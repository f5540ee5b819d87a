"""Admin back-office: CRUD over users, branches, categories, subcategories and products."""
import logging

from api_client import ApiError, unwrap_list
from catalog import SIZES, ref_id, tier_price, is_tiered
from storage import (
    ADMIN_TOKEN_KEY,
    EDITING_PRODUCT_KEY,
    StorageError,
    read_json,
    write_json,
)
from ui_text import LOAD_ERRORS, MESSAGES, SERVER_ERROR, FILL_REQUIRED
from utils import get_local_now

logger = logging.getLogger(__name__)

TABS = ("users", "branch", "manageBranches", "category", "subcategory", "manageSubcategories")
COLLECTIONS = ("users", "branches", "categories", "subcategories", "products")
LOGIN_ROUTE = "login"


def login(api, username: str, password: str):
    data = api.post("/api/admin/login/", json={"username": username, "password": password})
    token = None
    if isinstance(data, dict):
        token = data.get("token") or data.get("access") or data.get("access_token")
    elif isinstance(data, str):
        token = data
    if not token:
        raise ApiError("Login response carried no token")
    return token


class AdminApi:
    def __init__(self, client):
        self.client = client

    def list(self, resource: str):
        return unwrap_list(self.client.get(f"/api/admin/{resource}/"))

    def create(self, resource: str, payload: dict):
        return self.client.post(f"/api/admin/{resource}/", json=payload)

    def update(self, resource: str, obj_id, payload: dict):
        return self.client.put(f"/api/admin/{resource}/{obj_id}/", json=payload)

    def delete(self, resource: str, obj_id):
        return self.client.delete(f"/api/admin/{resource}/{obj_id}/")

    def create_product(self, data: dict, files=None):
        return self.client.post("/api/admin/products/", data=data, files=files)

    def update_product(self, obj_id, data: dict, files=None):
        return self.client.put(f"/api/admin/products/{obj_id}/", data=data, files=files)

    def send_promo_code(self, username: str, code: str):
        return self.client.post("/api/admin/users/send-promo/", json={"username": username, "promoCode": code})


def _empty_prices():
    return {s: "" for s in SIZES}


class AdminConsole:
    """Screen state for the admin page; API failures become `error` banners."""

    def __init__(self, api, storage, legacy_pizza_ids=frozenset()):
        self.base_api = api
        self.storage = storage
        self.legacy_pizza_ids = legacy_pizza_ids
        self.admin = None
        self.authenticated = False
        self.redirect = None
        self.active_tab = "users"
        self.error = None
        self.message = None
        self.draft_saved_at = None

        self.users = []
        self.branches = []
        self.categories = []
        self.subcategories = []
        self.products = []

        self.promo_code = ""
        self.product_form_rev = 0
        self.editing_branch = None
        self.editing_subcategory = None
        self.editing_product = None
        self.reset_branch_form()
        self.reset_category_form()
        self.reset_subcategory_form()
        self.reset_product_form()

    # -- auth gate -----------------------------------------------------

    def start(self):
        """Validate the stored token, then load every collection once."""
        token = self.storage.read(ADMIN_TOKEN_KEY)
        if not token:
            logger.info("No admin token, redirecting to login")
            self.redirect = LOGIN_ROUTE
            return False

        admin = AdminApi(self.base_api.with_token(token))
        try:
            users = admin.list("users")
        except ApiError as e:
            logger.warning("Admin token rejected: %s", e)
            self.storage.clear(ADMIN_TOKEN_KEY)
            self.redirect = LOGIN_ROUTE
            return False

        self.admin = admin
        self.authenticated = True
        self.users = users
        for name in COLLECTIONS[1:]:
            self.refresh(name)
        self.restore_product_draft()
        return True

    def logout(self):
        self.storage.clear(ADMIN_TOKEN_KEY)
        self.authenticated = False
        self.admin = None
        self.redirect = LOGIN_ROUTE

    def set_active_tab(self, tab: str):
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab}")
        self.active_tab = tab

    # -- plumbing ------------------------------------------------------

    def refresh(self, name: str):
        try:
            setattr(self, name, self.admin.list(name))
        except ApiError as e:
            logger.error("Loading %s failed: %s", name, e)
            self.error = e.detail or f"{SERVER_ERROR}: {LOAD_ERRORS[name].lower()}"
            return False
        return True

    def _run(self, action, ok_key: str, reload=(), reset=None):
        try:
            action()
        except ApiError as e:
            logger.error("%s failed: %s", ok_key, e)
            self.error = e.detail or f"{SERVER_ERROR} ({e.message})"
            self.message = None
            return False
        logger.info("%s", ok_key)
        self.error = None
        self.message = MESSAGES[ok_key]
        if reset:
            reset()
        for name in reload:
            self.refresh(name)
        return True

    def _invalid(self):
        self.error = FILL_REQUIRED
        self.message = None
        return False

    # -- users ---------------------------------------------------------

    def delete_user(self, user_id):
        return self._run(lambda: self.admin.delete("users", user_id), "user_deleted", reload=("users",))

    def send_promo_code(self, username, code=None):
        code = (code if code is not None else self.promo_code).strip()
        if not code:
            return self._invalid()

        def reset():
            self.promo_code = ""

        return self._run(lambda: self.admin.send_promo_code(username, code), "promo_sent", reset=reset)

    # -- branches ------------------------------------------------------

    def reset_branch_form(self):
        self.branch_name = ""
        self.branch_city = ""
        self.editing_branch = None

    def edit_branch(self, branch: dict):
        self.editing_branch = branch
        self.branch_name = branch.get("name") or ""
        self.branch_city = branch.get("city") or branch.get("address") or ""
        self.active_tab = "branch"

    def save_branch(self):
        name, city = self.branch_name.strip(), self.branch_city.strip()
        if not name:
            return self._invalid()
        payload = {"name": name, "city": city}
        if self.editing_branch:
            bid = self.editing_branch["id"]
            return self._run(lambda: self.admin.update("branches", bid, payload), "branch_updated",
                             reload=("branches",), reset=self.reset_branch_form)
        return self._run(lambda: self.admin.create("branches", payload), "branch_created",
                         reload=("branches",), reset=self.reset_branch_form)

    def delete_branch(self, branch_id):
        def reset():
            if self.editing_branch and self.editing_branch.get("id") == branch_id:
                self.reset_branch_form()

        return self._run(lambda: self.admin.delete("branches", branch_id), "branch_deleted",
                         reload=("branches",), reset=reset)

    # -- categories ----------------------------------------------------

    def reset_category_form(self):
        self.category_name = ""
        self.category_emoji = ""

    def save_category(self):
        name = self.category_name.strip()
        if not name:
            return self._invalid()
        payload = {"name": name, "emoji": self.category_emoji.strip()}
        return self._run(lambda: self.admin.create("categories", payload), "category_created",
                         reload=("categories",), reset=self.reset_category_form)

    def delete_category(self, category_id):
        return self._run(lambda: self.admin.delete("categories", category_id), "category_deleted",
                         reload=("categories", "subcategories"))

    # -- subcategories -------------------------------------------------

    def reset_subcategory_form(self):
        self.subcategory_name = ""
        self.subcategory_category = None
        self.editing_subcategory = None

    def edit_subcategory(self, sub: dict):
        self.editing_subcategory = sub
        self.subcategory_name = sub.get("name") or ""
        self.subcategory_category = ref_id(sub.get("category"))
        self.active_tab = "subcategory"

    def save_subcategory(self):
        name = self.subcategory_name.strip()
        if not name or self.subcategory_category in (None, ""):
            return self._invalid()
        payload = {"name": name, "category": int(self.subcategory_category)}
        if self.editing_subcategory:
            sid = self.editing_subcategory["id"]
            return self._run(lambda: self.admin.update("subcategories", sid, payload), "subcategory_updated",
                             reload=("subcategories",), reset=self.reset_subcategory_form)
        return self._run(lambda: self.admin.create("subcategories", payload), "subcategory_created",
                         reload=("subcategories",), reset=self.reset_subcategory_form)

    def delete_subcategory(self, sub_id):
        def reset():
            if self.editing_subcategory and self.editing_subcategory.get("id") == sub_id:
                self.reset_subcategory_form()

        return self._run(lambda: self.admin.delete("subcategories", sub_id), "subcategory_deleted",
                         reload=("subcategories",), reset=reset)

    def subcategories_for(self, category_id):
        if category_id in (None, ""):
            return []
        cid = int(category_id)
        return [s for s in self.subcategories if ref_id(s.get("category")) == cid]

    def find_subcategory(self, sub_id):
        for s in self.subcategories:
            if s.get("id") == sub_id:
                return s
        return None

    def is_pizza(self, sub_id):
        if sub_id in (None, ""):
            return False
        sub = self.find_subcategory(int(sub_id)) or {"id": int(sub_id)}
        return is_tiered(sub, self.legacy_pizza_ids)

    # -- products ------------------------------------------------------

    def reset_product_form(self):
        self.product_form_rev += 1
        self.product_name = ""
        self.product_image = None  # (filename, bytes, mime)
        self.prices = _empty_prices()
        self.price = ""
        self.product_branch = None
        self.product_category = None
        self.product_subcategory = None
        self.editing_product = None
        self.draft_saved_at = None

    def _load_product_form(self, product: dict):
        sub = product.get("subcategory") or {}
        self.editing_product = product
        self.product_name = product.get("name") or ""
        self.prices = {s: tier_price(product, s) or "" for s in SIZES}
        self.price = product.get("price") or ""
        self.product_branch = ref_id(product.get("branch"))
        self.product_category = ref_id(sub.get("category")) if isinstance(sub, dict) else None
        self.product_subcategory = ref_id(sub)
        self.product_image = None

    def edit_product(self, product: dict):
        self._load_product_form(product)
        self.draft_saved_at = get_local_now().isoformat()
        write_json(self.storage, EDITING_PRODUCT_KEY, {"product": product, "saved_at": self.draft_saved_at})

    def restore_product_draft(self):
        try:
            draft = read_json(self.storage, EDITING_PRODUCT_KEY)
        except StorageError as e:
            logger.warning("Dropping unreadable product draft: %s", e)
            self.storage.clear(EDITING_PRODUCT_KEY)
            return False
        if not isinstance(draft, dict):
            return False
        product = draft.get("product") if "product" in draft else draft
        if not isinstance(product, dict):
            return False
        self._load_product_form(product)
        self.draft_saved_at = draft.get("saved_at")
        self.message = MESSAGES["draft_restored"]
        return True

    def cancel_edit_product(self):
        self.storage.clear(EDITING_PRODUCT_KEY)
        self.reset_product_form()

    def _finish_product(self):
        self.storage.clear(EDITING_PRODUCT_KEY)
        self.reset_product_form()

    def product_form_data(self):
        """Multipart fields + files for create/update, or None when incomplete."""
        name = self.product_name.strip()
        if not name or self.product_branch in (None, "") or self.product_subcategory in (None, ""):
            return None
        data = {
            "name": name,
            "branch": str(self.product_branch),
            "subcategory": str(self.product_subcategory),
        }
        if self.is_pizza(self.product_subcategory):
            for s in SIZES:
                v = str(self.prices.get(s) or "").strip()
                if not v:
                    return None
                data[f"{s}_price"] = v
        else:
            v = str(self.price or "").strip()
            if not v:
                return None
            data["price"] = v
        files = {"image": self.product_image} if self.product_image else None
        return data, files

    def save_product(self):
        form = self.product_form_data()
        if form is None:
            return self._invalid()
        data, files = form
        if self.editing_product:
            pid = self.editing_product["id"]
            return self._run(lambda: self.admin.update_product(pid, data, files), "product_updated",
                             reload=("products",), reset=self._finish_product)
        return self._run(lambda: self.admin.create_product(data, files), "product_created",
                         reload=("products",), reset=self._finish_product)

    def delete_product(self, product_id):
        def reset():
            if self.editing_product and self.editing_product.get("id") == product_id:
                self._finish_product()

        return self._run(lambda: self.admin.delete("products", product_id), "product_deleted",
                         reload=("products",), reset=reset)
