import time
from datetime import datetime, timezone

import streamlit as st

from infrastructure.observability import setup_observability
setup_observability()

import auth
from use_cases import auth_flow, navigation_flow
from use_cases.session_models import is_authenticated
from utils import session_manager
from views import login_view, pages_view, profile_view

# --- PAGE SETUP ---
st.set_page_config(page_title="Destitutes of India", layout="wide", initial_sidebar_state="expanded")

# Health Check (Basic load-balancer heartbeat)
if st.query_params.get("health") == "1":
    st.write({"status": "ok", "version": "1.0", "uptime": datetime.now(timezone.utc).isoformat()})
    st.stop()

# --- SESSION ---
services = session_manager.init_session_state()
routes = auth.get_guard_routes()

# Expire before any guard sees the session
auth_flow.ensure_fresh_session(services.resolver)

notice = services.resolver.consume_notice()
if notice:
    st.warning(notice)

# --- NAVIGATION ---
requested_path = st.query_params.get("page") or st.session_state.current_path
session = services.store.current()
nav = navigation_flow.resolve_navigation(requested_path, session, services.guard, services.gate)

if nav.status == "REDIRECT":
    if nav.decision.reason in ("resolving", "unauthenticated", "profile-incomplete"):
        st.session_state.return_path = requested_path
    session_manager.navigate(nav.decision.route)

st.session_state.current_path = nav.path

# --- SIDEBAR ---
with st.sidebar:
    st.subheader("Destitutes of India")
    for route in navigation_flow.ROUTES:
        if route.path in (routes.loading, routes.complete_profile, routes.sign_in):
            continue
        if st.button(route.title, key=f"nav_{route.path}", use_container_width=True):
            session_manager.navigate(route.path)

    st.divider()
    if is_authenticated(session):
        if session.state == "incomplete_profile" and st.button("Complete profile", key="nav_profile"):
            session_manager.navigate(routes.complete_profile)
        if st.button("Sign out", key="logout_btn", type="secondary"):
            session_manager.logout()
    elif st.button("Sign in", key="login_btn", type="primary"):
        session_manager.navigate(routes.sign_in)

# --- PAGE ---
if nav.path == routes.loading:
    if services.guard.effective_state(session) == "pending":
        pages_view.render_loading()
        # Bounded by the guard pending timeout: past it effective_state reads anonymous
        time.sleep(1)
        st.rerun()
    session_manager.navigate(st.session_state.pop("return_path", routes.landing))
elif nav.path == routes.sign_in:
    if is_authenticated(session):
        st.info("You are already signed in.")
    else:
        login_view.render_auth_screen(services)
elif nav.path == routes.complete_profile:
    profile_view.render_profile_completion(services)
else:
    pages_view.render_page(nav.route)
