import streamlit as st

from state import init_state, ROUTES
from home import page_home
from auth_ui import page_login
from admin_page import page_admin

ROUTE_LABELS = {"menu": "Меню", "admin": "Админ-панель"}


def run_app():
    init_state()

    st.sidebar.title("🍕 Меню")
    cart = st.session_state.cart
    if cart.count:
        st.sidebar.caption(cart.summary_label())

    # login is only reached by redirect, never from the menu
    route = st.session_state.route
    shown = route if route in ROUTE_LABELS else "admin"
    nav = list(ROUTE_LABELS)
    page = st.sidebar.radio("Раздел", nav, index=nav.index(shown), format_func=ROUTE_LABELS.get)
    if page != shown:
        st.session_state.route = page
        st.rerun()

    if route not in ROUTES:
        st.session_state.route = route = "menu"
    if route == "menu":
        page_home()
    elif route == "admin":
        page_admin()
    else:
        page_login()
