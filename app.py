import logging

import streamlit as st

from src.config.env import LOG_LEVEL
from src.config.version import APP_NAME
from src.ui.layout import render_dashboard


def main() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    st.set_page_config(
        page_title=APP_NAME,
        layout="wide",
    )
    render_dashboard()


if __name__ == "__main__":
    main()
