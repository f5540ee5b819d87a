import json

import streamlit as st
import streamlit.components.v1 as components

from browser import PHASE_BRANCHES, PHASE_LOADING
from catalog import size_prices, starting_price, format_price
from scrollspy import nav_html, render_scrollspy, section_anchor
from settings import load_settings
import ui_text as t


def _image(url):
    st.image(url or t.PLACEHOLDER_IMAGE, width="stretch")


def _redirect(url):
    components.html(f"<script>window.parent.location.href = {json.dumps(url)};</script>", height=0)


def _cart_notice(cart):
    if cart.load_error:
        st.warning(cart.load_error)


@st.dialog("Выберите размер")
def _product_dialog(browser):
    p = browser.selected_product
    if not p:
        return
    _image(p.get("image"))
    st.subheader(p.get("name") or t.UNNAMED)

    for size, price in size_prices(p).items():
        label = f"{t.SIZE_LABELS[size]} — {format_price(price) + ' ' + t.CURRENCY if price is not None else t.NOT_AVAILABLE}"
        if st.button(label, key=f"size_{size}", disabled=price is None, width="stretch"):
            browser.add_to_cart(size)
            st.rerun()

    if st.button(t.CLOSE, key="close_dialog", type="tertiary"):
        browser.close_product()
        st.rerun()


def _page_branches(browser, cart):
    st.title(t.BRANCHES_TITLE)

    if not browser.loaded:
        with st.spinner(""):
            browser.load_branches()

    _cart_notice(cart)
    if browser.error:
        st.error(browser.error)
    elif not browser.branches:
        st.info(t.BRANCHES_EMPTY)

    cols = st.columns(3)
    for i, b in enumerate(browser.branches):
        with cols[i % 3]:
            with st.container(border=True):
                st.subheader(b.get("name") or t.UNNAMED)
                st.caption(b.get("address") or b.get("city") or t.NO_ADDRESS)
                if st.button(t.CHOOSE, key=f"branch_{b.get('id')}", width="stretch"):
                    with st.spinner(t.MENU_LOADING):
                        browser.select_branch(b)
                    st.rerun()


def _page_content(browser, cart):
    cfg = load_settings()
    branch = browser.selected_branch or {}

    head, right = st.columns([3, 1])
    with head:
        st.header(branch.get("name") or "Филиал")
        st.caption(branch.get("address") or branch.get("city") or t.NO_ADDRESS)
        if st.button(t.CHANGE_BRANCH, type="tertiary"):
            if browser.change_branch():
                st.rerun()
    with right:
        if cart.count > 0:
            if st.button(cart.summary_label(), key="checkout", type="primary", width="stretch"):
                _redirect(browser.go_to_checkout(cfg.checkout_url))

    _cart_notice(cart)
    if browser.error:
        st.error(browser.error)

    sections = browser.sections()
    if not sections:
        st.info(t.PRODUCTS_EMPTY)
        return

    st.markdown(nav_html(sections, browser.active_category), unsafe_allow_html=True)
    render_scrollspy([section_anchor(c) for c, _ in sections])

    for category, products in sections:
        st.subheader(f"{category.get('emoji') or ''} {category.get('name') or ''}".strip(),
                     anchor=section_anchor(category))
        cols = st.columns(3)
        for i, p in enumerate(products):
            with cols[i % 3]:
                with st.container(border=True):
                    _image(p.get("image"))
                    st.markdown(f"**{p.get('name') or t.UNNAMED}**")
                    st.write(f"от {format_price(starting_price(p))} {t.CURRENCY}")
                    if st.button(t.CHOOSE, key=f"pick_{category.get('id')}_{p.get('id')}", width="stretch"):
                        browser.open_product(p)
                        browser.set_active_category(category.get("id"))
                        _product_dialog(browser)


def page_home():
    browser = st.session_state.browser
    cart = st.session_state.cart

    if browser.phase == PHASE_BRANCHES:
        _page_branches(browser, cart)
    elif browser.phase == PHASE_LOADING:
        st.info(t.MENU_LOADING)
    else:
        _page_content(browser, cart)
