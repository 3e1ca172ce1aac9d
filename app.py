import streamlit as st
import pandas as pd

from log_processing import line_anonymizer
from obfuscation.config import DEFAULT_CONFIG
from obfuscation.obfuscator import Obfuscator
from utils.log_sanitize import total_entries
from utils.mapping_frame import category_counts, mappings_to_frame

# Page config
st.set_page_config(
    page_title="Log Obfuscator",
    page_icon="🕶",
    layout="wide"
)

# Title
st.title("🕶 Deterministic Log Obfuscator")
st.markdown(
    "Upload a log file to replace IPs, hostnames, emails, SSNs, phone and card numbers "
    "with consistent, format-preserving substitutes."
)

# Session key for this browser session's obfuscator. Every upload in the
# session shares its mappings, so values stay consistent across files.
OBFUSCATOR_KEY = "log_obfuscator"


def _get_obfuscator() -> Obfuscator:
    if OBFUSCATOR_KEY not in st.session_state:
        st.session_state[OBFUSCATOR_KEY] = Obfuscator()
    return st.session_state[OBFUSCATOR_KEY]


obfuscator = _get_obfuscator()

# Sidebar settings
with st.sidebar:
    st.header("⚙️ Settings")
    coefficient = st.number_input(
        "Numeric coefficient",
        min_value=0.001,
        value=float(obfuscator.config.coefficient),
        step=0.001,
        format="%.3f",
    )
    date_offset_days = st.number_input(
        "Date offset (days)",
        value=int(obfuscator.config.date_offset_days),
        step=1,
    )
    ip_style = st.selectbox(
        "IP style",
        ["keep_ends", "private_range"],
        index=["keep_ends", "private_range"].index(obfuscator.config.ip_style),
    )
    name_style = st.selectbox(
        "Name style",
        ["readable", "hash_prefixed"],
        index=["readable", "hash_prefixed"].index(obfuscator.config.name_style),
    )
    wanted = {
        "coefficient": float(coefficient),
        "date_offset_days": int(date_offset_days),
        "ip_style": ip_style,
        "name_style": name_style,
    }
    current = {
        "coefficient": obfuscator.config.coefficient,
        "date_offset_days": obfuscator.config.date_offset_days,
        "ip_style": obfuscator.config.ip_style,
        "name_style": obfuscator.config.name_style,
    }
    if wanted != current:
        obfuscator.configure(**wanted)

    if st.button("♻️ Reset mappings"):
        obfuscator.reset()
        st.success("Mappings cleared. Next upload starts a fresh consistency domain.")

    if st.button("↩️ Restore defaults"):
        obfuscator.configure(
            coefficient=DEFAULT_CONFIG.coefficient,
            date_offset_days=DEFAULT_CONFIG.date_offset_days,
            ip_style=DEFAULT_CONFIG.ip_style,
            name_style=DEFAULT_CONFIG.name_style,
        )
        st.rerun()

# File uploader
uploaded_file = st.file_uploader(
    "Upload a log file (log, txt, json)",
    type=["log", "txt", "json"]
)

# Obfuscate button
run_button = st.button("🚀 Obfuscate File")


def obfuscate_uploaded_file(uploaded_file):
    """
    Run the uploaded file through the session's obfuscator.

    Returns:
        df: DataFrame with columns [Line, Obfuscated]
        text: the full obfuscated content
    """
    lines = line_anonymizer.anonymize_upload(
        uploaded_file.getvalue(),
        obfuscator,
        source=uploaded_file.name,
    )
    df = pd.DataFrame(
        [{"Line": ln.number, "Obfuscated": ln.text} for ln in lines],
        columns=["Line", "Obfuscated"],
    )
    return df, line_anonymizer.lines_to_text(lines)


if run_button:

    if uploaded_file is None:
        st.warning("⚠️ Please upload a file before obfuscating.")
    else:
        df, text = obfuscate_uploaded_file(uploaded_file)
        st.success(f"✅ Obfuscated {len(df)} lines.")

        col1, col2 = st.columns([2, 1])

        with col1:
            st.subheader("📄 Obfuscated output")
            if df.empty:
                st.info("The file is empty.")
            else:
                st.dataframe(df, use_container_width=True, hide_index=True)
            st.download_button(
                "⬇️ Download obfuscated file",
                data=text,
                file_name=f"obfuscated-{uploaded_file.name}",
                mime="text/plain",
            )

        with col2:
            st.subheader("🗂 Mapped values")
            mappings = obfuscator.get_mappings()
            st.metric(label="Values mapped this session", value=total_entries(mappings))
            counts = category_counts(mappings_to_frame(mappings))
            if not counts.empty:
                st.bar_chart(counts)

# Mapping review section. Mappings hold original values: only shown on request.
st.markdown("---")
with st.expander("🔐 Mapping table (contains original values)"):
    mappings = obfuscator.get_mappings()
    frame = mappings_to_frame(mappings)
    if frame.empty:
        st.info("No values mapped yet.")
    else:
        st.dataframe(frame, use_container_width=True, hide_index=True)
    st.download_button(
        "⬇️ Download mappings (JSON)",
        data=obfuscator.mappings_json(),
        file_name="obfuscation-mappings.json",
        mime="application/json",
    )
    st.caption("Keep this file private: it reverses the obfuscation.")
