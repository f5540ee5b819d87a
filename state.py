import streamlit as st

from api_client import get_api
from browser import CatalogBrowser
from cart import Cart
from settings import load_settings
from storage import get_storage

ROUTES = ("menu", "admin", "login")


def init_state():
    if "route" not in st.session_state:
        st.session_state.route = "menu"
    if "cart" not in st.session_state:
        cart = Cart(get_storage())
        cart.load()
        st.session_state.cart = cart
    if "browser" not in st.session_state:
        cfg = load_settings()
        st.session_state.browser = CatalogBrowser(
            get_api(),
            st.session_state.cart,
            block_switch_after_order=cfg.block_branch_switch_after_order,
        )


def navigate(route: str):
    if route not in ROUTES:
        raise ValueError(f"Unknown route: {route}")
    st.session_state.route = route
    st.rerun()
