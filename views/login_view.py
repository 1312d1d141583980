import streamlit as st

import auth
from use_cases import auth_flow
from utils import session_manager


def _after_attempt(result, landing):
    if result.status == "CONTINUE":
        target = landing if result.reason == "authenticated" else auth.get_guard_routes().complete_profile
        session_manager.navigate(target)
    elif result.reason == "superseded":
        st.info("A newer sign-in is already in progress.")
    elif result.notice:
        st.error(result.notice)


def render_auth_screen(services):
    routes = auth.get_guard_routes()
    provider = auth.get_identity_provider()

    st.title("🔐 Sign in")
    tab_login, tab_register = st.tabs(["Sign in", "Create account"])

    with tab_login:
        with st.form("login_form", clear_on_submit=False):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in")
            if submitted:
                result = auth_flow.sign_in_with_password(
                    services.resolver, provider, auth.get_profile_repo(), email, password
                )
                _after_attempt(result, routes.landing)

    with tab_register:
        with st.form("register_form", clear_on_submit=True):
            email = st.text_input("Email *")
            password = st.text_input("Password *", type="password")
            password_confirm = st.text_input("Confirm password *", type="password")
            submitted = st.form_submit_button("Create account")
            if submitted:
                if not email.strip() or not password:
                    st.error("Fill in all required fields.")
                elif password != password_confirm:
                    st.error("Passwords do not match.")
                else:
                    result = auth_flow.sign_up_with_password(services.resolver, provider, email, password)
                    _after_attempt(result, routes.landing)
