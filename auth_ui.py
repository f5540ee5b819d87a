import logging

import streamlit as st

from admin import login
from api_client import ApiError, get_api
from state import navigate
from storage import ADMIN_TOKEN_KEY, get_storage
import ui_text as t

logger = logging.getLogger(__name__)


def page_login():
    st.header(t.LOGIN_TITLE)

    with st.form("admin_login"):
        username = st.text_input("Логин", key="login_username")
        password = st.text_input("Пароль", type="password", key="login_password")
        submitted = st.form_submit_button("Войти")

    if submitted:
        try:
            token = login(get_api(), username.strip(), password)
        except ApiError as e:
            logger.warning("Admin login failed for %s: %s", username, e)
            st.error(t.LOGIN_FAILED)
            return
        get_storage().write(ADMIN_TOKEN_KEY, token)
        # fresh console so the new token is checked
        st.session_state.pop("admin_console", None)
        logger.info("Admin %s logged in", username)
        navigate("admin")
