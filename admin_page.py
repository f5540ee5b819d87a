import streamlit as st

from admin import AdminConsole, TABS
from api_client import get_api
from catalog import SIZES, ref_id, tier_price, format_price
from settings import load_settings
from state import navigate
from storage import get_storage
from utils import format_local
import ui_text as t


def _console() -> AdminConsole:
    if "admin_console" not in st.session_state:
        cfg = load_settings()
        st.session_state.admin_console = AdminConsole(get_api(), get_storage(), cfg.pizza_subcategory_ids)
    return st.session_state.admin_console


def _select(label, options: list, current, fmt):
    idx = options.index(current) if current in options else None
    return st.selectbox(label, options, index=idx, format_func=fmt, placeholder="—")


def _names(items: list) -> dict:
    return {i.get("id"): i.get("name") or t.UNNAMED for i in items}


def _tab_users(c: AdminConsole):
    if not c.users:
        st.caption("Пользователей нет.")
    for u in c.users:
        with st.container(border=True):
            st.markdown(f"**Логин:** {u.get('username', '')}")
            st.markdown(f"**Email:** {u.get('email', '')}")
            st.markdown(f"**Телефон:** {u.get('phone', '')}")
            if u.get("date_joined"):
                st.caption(f"Зарегистрирован: {format_local(u['date_joined'])}")
            with st.form(f"promo_{u.get('id')}"):
                code = st.text_input("Промокод", key=f"promo_code_{u.get('id')}")
                if st.form_submit_button("Отправить на email"):
                    c.send_promo_code(u.get("username"), code)
                    st.rerun()
            if st.button("Удалить", key=f"del_user_{u.get('id')}"):
                c.delete_user(u.get("id"))
                st.rerun()


def _tab_branch(c: AdminConsole):
    with st.form("branch_form"):
        name = st.text_input("Название филиала", value=c.branch_name)
        city = st.text_input("Город", value=c.branch_city)
        label = "Сохранить изменения" if c.editing_branch else "Добавить филиал"
        submitted = st.form_submit_button(label, type="primary")
    if submitted:
        c.branch_name, c.branch_city = name, city
        c.save_branch()
        st.rerun()
    if c.editing_branch and st.button("Отменить редактирование"):
        c.reset_branch_form()
        st.rerun()


def _tab_manage_branches(c: AdminConsole):
    cols = st.columns(3)
    for i, b in enumerate(c.branches):
        with cols[i % 3]:
            with st.container(border=True):
                st.markdown(f"**{b.get('name') or t.UNNAMED}**")
                st.caption(b.get("city") or b.get("address") or t.NO_ADDRESS)
                e, d = st.columns(2)
                if e.button("Редактировать", key=f"edit_branch_{b.get('id')}"):
                    c.edit_branch(b)
                    st.rerun()
                if d.button("Удалить", key=f"del_branch_{b.get('id')}"):
                    c.delete_branch(b.get("id"))
                    st.rerun()


def _tab_category(c: AdminConsole):
    with st.form("category_form"):
        emoji = st.text_input("Эмодзи категории (например, 🍕)", value=c.category_emoji)
        name = st.text_input("Название категории", value=c.category_name)
        submitted = st.form_submit_button("Добавить категорию", type="primary")
    if submitted:
        c.category_emoji, c.category_name = emoji, name
        c.save_category()
        st.rerun()

    for cat in c.categories:
        left, right = st.columns([4, 1])
        left.write(f"{cat.get('emoji') or ''} {cat.get('name') or ''}".strip())
        if right.button("Удалить", key=f"del_cat_{cat.get('id')}"):
            c.delete_category(cat.get("id"))
            st.rerun()


def _tab_subcategory(c: AdminConsole):
    cat_names = _names(c.categories)
    with st.form("subcategory_form"):
        cat = _select("Категория", list(cat_names), c.subcategory_category, lambda i: cat_names.get(i, ""))
        name = st.text_input("Название подкатегории", value=c.subcategory_name)
        label = "Сохранить изменения" if c.editing_subcategory else "Добавить подкатегорию"
        submitted = st.form_submit_button(label, type="primary")
    if submitted:
        c.subcategory_category, c.subcategory_name = cat, name
        c.save_subcategory()
        st.rerun()
    if c.editing_subcategory and st.button("Отменить редактирование"):
        c.reset_subcategory_form()
        st.rerun()


def _tab_manage_subcategories(c: AdminConsole):
    cat_names = _names(c.categories)
    for sub in c.subcategories:
        with st.container(border=True):
            st.markdown(f"**{sub.get('name') or t.UNNAMED}**")
            st.caption(f"Категория: {cat_names.get(ref_id(sub.get('category')), '—')}")
            e, d = st.columns(2)
            if e.button("Редактировать", key=f"edit_sub_{sub.get('id')}"):
                c.edit_subcategory(sub)
                st.rerun()
            if d.button("Удалить", key=f"del_sub_{sub.get('id')}"):
                c.delete_subcategory(sub.get("id"))
                st.rerun()


def _product_form(c: AdminConsole):
    st.subheader("Редактировать продукт" if c.editing_product else "Добавить продукт")
    if c.editing_product and c.draft_saved_at:
        st.caption(f"Черновик от {format_local(c.draft_saved_at)}")

    c.product_name = st.text_input("Название продукта", value=c.product_name)
    upload = st.file_uploader("Изображение", type=["png", "jpg", "jpeg", "webp"],
                              key=f"product_image_{c.product_form_rev}")
    if upload is not None:
        c.product_image = (upload.name, upload.getvalue(), upload.type)
    elif c.editing_product and c.editing_product.get("image"):
        st.image(c.editing_product["image"], width=150)

    branch_names = _names(c.branches)
    c.product_branch = _select("Филиал", list(branch_names), c.product_branch, lambda i: branch_names.get(i, ""))

    cat_names = _names(c.categories)
    c.product_category = _select("Категория продукта", list(cat_names), c.product_category, lambda i: cat_names.get(i, ""))
    if c.product_category is not None:
        sub_names = _names(c.subcategories_for(c.product_category))
        c.product_subcategory = _select("Подкатегория", list(sub_names), c.product_subcategory,
                                        lambda i: sub_names.get(i, ""))

    if c.product_subcategory is not None and c.is_pizza(c.product_subcategory):
        cols = st.columns(3)
        placeholders = {"small": "Маленькая", "medium": "Средняя", "large": "Большая"}
        for col, size in zip(cols, SIZES):
            with col:
                c.prices[size] = st.text_input(f"Цена ({placeholders[size]}, в сомах)", value=str(c.prices.get(size) or ""))
    else:
        c.price = st.text_input("Цена (в сомах)", value=str(c.price or ""))

    save, cancel = st.columns(2)
    if save.button("Сохранить изменения" if c.editing_product else "Добавить продукт", type="primary"):
        c.save_product()
        st.rerun()
    if c.editing_product and cancel.button("Отменить редактирование", key="cancel_product"):
        c.cancel_edit_product()
        st.rerun()


def _product_list(c: AdminConsole):
    st.subheader("Продукты")
    cols = st.columns(3)
    for i, p in enumerate(c.products):
        with cols[i % 3]:
            with st.container(border=True):
                st.image(p.get("image") or t.PLACEHOLDER_IMAGE, width="stretch")
                st.markdown(f"**{p.get('name') or t.UNNAMED}**")
                if c.is_pizza(ref_id(p.get("subcategory"))):
                    st.write("Цена: " + " | ".join(
                        f"{format_price(tier_price(p, s))} {t.CURRENCY} ({s[0].upper()})" for s in SIZES))
                else:
                    st.write(f"Цена: {format_price(p.get('price'))} {t.CURRENCY}")
                e, d = st.columns(2)
                if e.button("Редактировать", key=f"edit_prod_{p.get('id')}"):
                    c.edit_product(p)
                    st.rerun()
                if d.button("Удалить", key=f"del_prod_{p.get('id')}"):
                    c.delete_product(p.get("id"))
                    st.rerun()


TAB_RENDERERS = {
    "users": _tab_users,
    "branch": _tab_branch,
    "manageBranches": _tab_manage_branches,
    "category": _tab_category,
    "subcategory": _tab_subcategory,
    "manageSubcategories": _tab_manage_subcategories,
}


def page_admin():
    c = _console()

    if not c.authenticated:
        st.caption(t.AUTH_CHECKING)
        c.start()
    if c.redirect:
        route, c.redirect = c.redirect, None
        st.session_state.pop("admin_console", None)
        navigate(route)

    head, out = st.columns([4, 1])
    head.header(t.ADMIN_TITLE)
    if out.button(t.LOGOUT):
        c.logout()
        st.rerun()

    if c.error:
        st.error(c.error)
    if c.message:
        st.success(c.message)

    tab = st.radio("Раздел", TABS, index=TABS.index(c.active_tab), horizontal=True,
                   format_func=lambda k: t.ADMIN_TABS[k], label_visibility="collapsed")
    c.set_active_tab(tab)
    TAB_RENDERERS[tab](c)

    st.divider()
    _product_form(c)
    _product_list(c)
