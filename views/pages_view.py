import streamlit as st

# Page copy lives with the content team; these are placeholders for layout
PAGE_SUMMARIES = {
    "/": "Connecting compassionate citizens with people in need.",
    "/about": "Our story, mission and values.",
    "/contact": "Get in touch with the team.",
    "/donate": "Support the platform.",
    "/privacy-policy": "How we handle your data.",
    "/terms-of-service": "Rules for using the platform.",
    "/disclaimer": "The platform is not an emergency response service.",
    "/share": "Share a photo and location of someone who needs help.",
}


def render_page(route):
    st.title(route.title)
    summary = PAGE_SUMMARIES.get(route.path)
    if summary:
        st.write(summary)


def render_loading():
    st.title("⏳ Signing you in")
    st.caption("Waiting for the identity provider to respond.")
