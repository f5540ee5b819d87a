import logging

from api_client import ApiError
from catalog import fetch_branches, load_menu, products_for_branch, menu_sections, size_prices
from ui_text import BRANCHES_LOAD_FAILED, PRODUCTS_EMPTY, MENU_LOAD_FAILED, BRANCH_SWITCH_BLOCKED

logger = logging.getLogger(__name__)

PHASE_BRANCHES = "branches"
PHASE_LOADING = "loading"
PHASE_CONTENT = "content"


class CatalogBrowser:
    """Storefront screen state: branches -> loading -> content."""

    def __init__(self, api, cart, block_switch_after_order=False):
        self.api = api
        self.cart = cart
        self.block_switch_after_order = block_switch_after_order
        self.phase = PHASE_BRANCHES
        self.branches = []
        self.selected_branch = None
        self.categories = []
        self.products = []
        self.selected_product = None
        self.active_category = None
        self.error = None
        self.loaded = False

    def load_branches(self):
        self.loaded = True
        try:
            self.branches = fetch_branches(self.api)
            self.error = None
        except ApiError as e:
            logger.error("Branch list failed: %s", e)
            self.branches = []
            self.error = BRANCHES_LOAD_FAILED

    def select_branch(self, branch):
        logger.info("Branch selected: %s", branch.get("id"))
        self.selected_branch = branch
        self.phase = PHASE_LOADING
        self.error = None
        try:
            categories, products = load_menu(self.api)
            if not products:
                raise ApiError(PRODUCTS_EMPTY, detail=PRODUCTS_EMPTY)
        except ApiError as e:
            logger.error("Menu load failed for branch %s: %s", branch.get("id"), e)
            self.error = e.detail or MENU_LOAD_FAILED
            self.phase = PHASE_BRANCHES
            self.selected_branch = None
            return

        self.categories = categories
        self.products = products_for_branch(products, branch)
        self.cart.load()
        self.active_category = None
        self.phase = PHASE_CONTENT

    def change_branch(self) -> bool:
        if self.block_switch_after_order and self.cart.order_placed:
            self.error = BRANCH_SWITCH_BLOCKED
            return False
        self.phase = PHASE_BRANCHES
        self.selected_branch = None
        self.selected_product = None
        self.error = None
        return True

    def sections(self):
        return menu_sections(self.categories, self.products)

    def open_product(self, product):
        self.selected_product = product

    def close_product(self):
        self.selected_product = None

    def add_to_cart(self, size):
        p = self.selected_product
        if not p:
            return None
        if size_prices(p).get(size) is None:
            return None
        item = self.cart.add(p, size)
        self.selected_product = None
        return item

    def set_active_category(self, category_id):
        self.active_category = category_id

    def go_to_checkout(self, checkout_url):
        """Record the order as placed and hand back where to send the user."""
        self.cart.mark_order_placed()
        logger.info("Checkout: %d items, total %s", self.cart.count, self.cart.total)
        return checkout_url
