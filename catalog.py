import logging
import math
from concurrent.futures import ThreadPoolExecutor

from api_client import unwrap_list

logger = logging.getLogger(__name__)

SIZES = ("small", "medium", "large")


def _fetch_list(api, path, what):
    logger.info("Loading %s from %s", what, path)
    data = unwrap_list(api.get(path))
    logger.info("Loaded %d %s", len(data), what)
    return data


def fetch_branches(api):
    return _fetch_list(api, "/api/public/branches/", "branches")


def fetch_categories(api):
    return _fetch_list(api, "/api/public/categories/", "categories")


def fetch_products(api):
    return _fetch_list(api, "/api/public/products/", "products")


def load_menu(api):
    """Fetch categories and products side by side; both must succeed."""
    with ThreadPoolExecutor(max_workers=2) as pool:
        cats = pool.submit(fetch_categories, api)
        prods = pool.submit(fetch_products, api)
        return cats.result(), prods.result()


def ref_id(value):
    # References arrive either nested ({"id": 1, ...}) or as a bare id
    if isinstance(value, dict):
        return value.get("id")
    return value


def product_branch_id(p):
    return ref_id(p.get("branch"))


def product_category_id(p):
    sub = p.get("subcategory")
    if not isinstance(sub, dict):
        return None
    return ref_id(sub.get("category"))


def products_for_branch(products, branch):
    bid = branch.get("id")
    return [p for p in products if product_branch_id(p) == bid]


def products_for_category(products, category):
    cid = category.get("id")
    return [p for p in products if product_category_id(p) == cid]


def menu_sections(categories, products):
    """[(category, products)] in category order; empty categories are dropped."""
    sections = []
    for c in categories:
        items = products_for_category(products, c)
        if items:
            sections.append((c, items))
    return sections


def _present(v):
    return v is not None and v != "" and v != 0 and v != "0"


def tier_price(p: dict, size: str):
    v = p.get(f"{size}_price")
    if _present(v):
        return v
    prices = p.get("prices")
    if isinstance(prices, dict) and _present(prices.get(size)):
        return prices[size]
    return None


def has_tiers(p):
    return any(tier_price(p, s) is not None for s in SIZES)


def size_prices(p: dict) -> dict:
    """Price per size button; None means the button is disabled.

    Flat-priced products offer their single price for every size.
    """
    if has_tiers(p):
        return {s: tier_price(p, s) for s in SIZES}
    flat = p.get("price")
    return {s: (flat if _present(flat) else None) for s in SIZES}


def resolve_price(p, size):
    price = tier_price(p, size)
    if price is None:
        price = p.get("price") or 0
    return price


def starting_price(p):
    return tier_price(p, "small") or p.get("price") or 0


def to_number(v) -> float:
    try:
        n = float(v)
    except (TypeError, ValueError):
        return 0.0
    # NaN and infinities ("inf", "1e400") count as no price
    if not math.isfinite(n):
        return 0.0
    return n


def format_price(v) -> str:
    n = to_number(v)
    if n == int(n):
        return f"{int(n):,}".replace(",", " ")
    return f"{n:,.2f}".replace(",", " ")


def is_tiered(subcategory, legacy_ids=frozenset()) -> bool:
    """Tier (S/M/L) pricing for a subcategory.

    The catalog's pricing_model attribute decides; the configured id list is
    only a fallback for API versions that do not send it.
    """
    if not subcategory:
        return False
    model = subcategory.get("pricing_model")
    if model is None and isinstance(subcategory.get("category"), dict):
        model = subcategory["category"].get("pricing_model")
    if model is not None:
        return str(model).lower() == "tiered"
    return ref_id(subcategory) in legacy_ids
