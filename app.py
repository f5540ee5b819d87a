import logging

import streamlit as st

from settings import load_settings
from app_shell import run_app

logging.basicConfig(
    level=load_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(page_title="Pizza", page_icon="🍕", layout="wide")

run_app()
