import logging

from catalog import resolve_price, to_number, format_price
from storage import CART_KEY, ORDER_PLACED_KEY, StorageError, read_json, write_json
from ui_text import CART_RESET_NOTICE

logger = logging.getLogger(__name__)


def make_cart_item(product, size):
    # Price is fixed here; later server-side changes are not reflected
    return {
        "id": f"{product.get('id')}-{size}",
        "name": product.get("name"),
        "size": size,
        "price": resolve_price(product, size),
        "image": product.get("image"),
    }


class Cart:
    """Ordered list of cart items mirrored to storage on every change."""

    def __init__(self, storage):
        self.storage = storage
        self.items = []
        # set when a corrupt saved cart was thrown away; kept until the
        # cart is next saved or a valid saved cart is read
        self.load_error = None

    def _discard(self, reason):
        logger.warning("Discarding persisted cart: %s", reason)
        self.storage.clear(CART_KEY)
        self.load_error = CART_RESET_NOTICE
        return []

    def load(self):
        try:
            saved = read_json(self.storage, CART_KEY)
        except StorageError as e:
            saved = self._discard(e)
        else:
            if saved is None:
                saved = []
            elif not isinstance(saved, list):
                saved = self._discard("not a list")
            else:
                self.load_error = None
        self.items = saved
        return self.items

    def _persist(self):
        write_json(self.storage, CART_KEY, self.items)
        self.load_error = None

    def add(self, product, size):
        item = make_cart_item(product, size)
        self.items = self.items + [item]
        self._persist()
        logger.info("Added to cart: %s (%s) at %s", item["name"], size, item["price"])
        return item

    def replace(self, items):
        self.items = list(items)
        self._persist()

    def clear(self):
        self.replace([])

    @property
    def count(self):
        return len(self.items)

    @property
    def total(self) -> float:
        return sum(to_number(i.get("price")) for i in self.items if isinstance(i, dict))

    def summary_label(self):
        return f"🛒 {self.count} | {format_price(self.total)} сом"

    @property
    def order_placed(self) -> bool:
        return (self.storage.read(ORDER_PLACED_KEY) or "").lower() == "true"

    def mark_order_placed(self):
        self.storage.write(ORDER_PLACED_KEY, "true")

    def clear_order_placed(self):
        self.storage.clear(ORDER_PLACED_KEY)
