from datetime import timedelta
import logging
import os

import streamlit as st

from infrastructure.identity.firebase_provider import FirebaseIdentityProvider
from infrastructure.repositories.sqlite_audit_repository import SQLiteAuditRepository
from infrastructure.repositories.sqlite_profile_repository import SQLiteProfileRepository
from use_cases.route_guard import DEFAULT_PENDING_TIMEOUT, GuardRoutes

log = logging.getLogger(__name__)

PROFILES_DB = "profiles.db"
AUDIT_DB = "audit.db"

def get_secret(key):
    try:
        return st.secrets.get(key)
    except FileNotFoundError:
        return None

def get_setting(key, default=None):
    value = get_secret(key)
    if value is None:
        value = os.getenv(key)
    return default if value in (None, "") else value

def get_pending_timeout() -> timedelta:
    raw = get_setting("AUTH_PENDING_TIMEOUT_SECONDS")
    if raw is None:
        return DEFAULT_PENDING_TIMEOUT
    try:
        seconds = float(raw)
    except (TypeError, ValueError):
        log.warning(f"Invalid AUTH_PENDING_TIMEOUT_SECONDS={raw!r}, using default")
        return DEFAULT_PENDING_TIMEOUT
    if seconds <= 0:
        log.warning(f"AUTH_PENDING_TIMEOUT_SECONDS must be positive, got {seconds}; using default")
        return DEFAULT_PENDING_TIMEOUT
    return timedelta(seconds=seconds)

def get_guard_routes() -> GuardRoutes:
    return GuardRoutes(
        sign_in=get_setting("SIGN_IN_ROUTE", "/auth"),
        complete_profile=get_setting("COMPLETE_PROFILE_ROUTE", "/complete-profile"),
        loading=get_setting("LOADING_ROUTE", "/loading"),
        landing=get_setting("LANDING_ROUTE", "/"),
    )

@st.cache_resource
def get_profile_repo() -> SQLiteProfileRepository:
    repo = SQLiteProfileRepository(get_setting("PROFILES_DB", PROFILES_DB))
    repo.init_db()
    return repo

@st.cache_resource
def get_audit_repo() -> SQLiteAuditRepository:
    repo = SQLiteAuditRepository(get_setting("AUDIT_DB", AUDIT_DB))
    repo.init_db()
    return repo

@st.cache_resource
def get_identity_provider() -> FirebaseIdentityProvider:
    api_key = get_setting("FIREBASE_API_KEY")
    if not api_key:
        log.warning("FIREBASE_API_KEY is not set; sign-in attempts will fail.")
    return FirebaseIdentityProvider(api_key)
