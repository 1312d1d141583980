import streamlit as st

import auth
from use_cases import profile_flow
from utils import session_manager

FIELD_LABELS = {"display_name": "Name", "phone": "Phone number", "city": "City"}


def render_profile_completion(services):
    st.title("👤 Complete your profile")
    st.caption("Tell us a little about yourself before you start sharing.")

    with st.form("profile_form", clear_on_submit=False):
        display_name = st.text_input(f"{FIELD_LABELS['display_name']} *")
        phone = st.text_input(f"{FIELD_LABELS['phone']} *")
        city = st.text_input(f"{FIELD_LABELS['city']} *")
        submitted = st.form_submit_button("Save profile")

    if not submitted:
        return

    result = profile_flow.submit_profile(
        services.store.current(),
        profile_flow.ProfileForm(display_name=display_name, phone=phone, city=city),
        auth.get_profile_repo(),
        services.gate,
    )
    if result.status == "COMPLETED":
        st.success("Profile saved.")
        session_manager.navigate(auth.get_guard_routes().landing)
    elif result.reason == "missing_fields":
        st.error("Required: " + ", ".join(FIELD_LABELS[name] for name in result.missing))
    elif result.reason == "save_failed":
        st.error("Could not save your profile. Please try again.")
    else:
        session_manager.navigate(auth.get_guard_routes().sign_in)
