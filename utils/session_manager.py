from dataclasses import dataclass

import streamlit as st

import auth
from use_cases import auth_flow
from use_cases.auth_state import AuthStateResolver
from use_cases.profile_gate import ProfileCompletionGate
from use_cases.route_guard import RouteGuard
from use_cases.session_store import SessionStore

"""
SESSION STATE CONTRACT

This module owns the per-visitor session state kept in st.session_state.

Keys of st.session_state:

session_services: SessionServices | None
    store, resolver and guards for the current visitor
    default: created on first run
    owner: session_manager

auth_state: str
    last observed session state, for widgets that only need the label
    default: "anonymous"
    owner: session_manager

current_path: str
    route the visitor is on
    default: "/"
    owner: navigation
"""


@dataclass(frozen=True)
class SessionServices:
    store: SessionStore
    resolver: AuthStateResolver
    guard: RouteGuard
    gate: ProfileCompletionGate


def build_services(audit=None) -> SessionServices:
    store = SessionStore()
    resolver = AuthStateResolver(store, audit=audit)
    guard = RouteGuard(auth.get_guard_routes(), pending_timeout=auth.get_pending_timeout())
    gate = ProfileCompletionGate(guard, resolver)
    return SessionServices(store=store, resolver=resolver, guard=guard, gate=gate)


def _mirror_state(session):
    st.session_state.auth_state = session.state


def init_session_state():
    if "auth_state" not in st.session_state:
        st.session_state.auth_state = "anonymous"
    if "current_path" not in st.session_state:
        st.session_state.current_path = "/"
    if st.session_state.get("session_services") is None:
        services = build_services(audit=auth.get_audit_repo())
        st.session_state.session_services = services
        services.store.subscribe(_mirror_state)
    return st.session_state.session_services


def get_services() -> SessionServices:
    return init_session_state()


def navigate(path: str):
    st.session_state.current_path = path
    st.query_params["page"] = path
    st.rerun()


def logout():
    auth_flow.sign_out(get_services().resolver)
    navigate(auth.get_guard_routes().landing)
