"""
Streamlit UI for the Enrollment Pricing quote calculator.

Features:
- Level / package / promo selection
- Total, breakdown and expiry window
- Warnings for fallbacks and the full resolution trace
- Price grid across all levels and packages
"""
import streamlit as st
import pandas as pd
from datetime import datetime

from enrollment_pricing.engine import PricingEngine, QuoteValidationError
from enrollment_pricing.engine.formatting import format_cents
from enrollment_pricing.config.settings import get_settings


st.set_page_config(
    page_title="Enrollment Pricing",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_engine():
    """Get cached engine instance."""
    return PricingEngine(settings=get_settings())


try:
    engine = get_engine()
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()

tables = engine.tables
level_ids = list(tables.levels.keys())
package_sizes = sorted(tables.packages.keys())


# ============================================================================
# SIDEBAR: Enrollment Selection
# ============================================================================
with st.sidebar:
    st.header("Enrollment")

    with st.container(border=True):
        level = st.selectbox(
            "Program Level",
            options=level_ids,
            index=level_ids.index(tables.default_level) if tables.default_level in level_ids else 0,
            format_func=lambda l: tables.levels[l].name,
        )
        sessions = st.selectbox(
            "Package",
            options=package_sizes,
            format_func=lambda s: f"{s} Sessions (use within {tables.packages[s].expiry_days} days)",
        )
        promo_code = st.text_input("Promo Code", value="")
        currency = st.text_input("Currency", value=engine.default_currency)

    st.divider()
    st.caption(f"{len(tables.levels)} levels | {len(tables.packages)} packages | {len(tables.promo_codes)} promo codes")
    if st.button("Reload Pricing Tables"):
        engine.reload_data()
        st.rerun()


# ============================================================================
# MAIN CONTENT
# ============================================================================
st.title("Enrollment Pricing")
st.caption(f"v1.0 | Quote Engine Active | {datetime.now().strftime('%Y-%m-%d')}")

tab1, tab2 = st.tabs(["Quote", "Price Grid"])

with tab1:
    try:
        result = engine.quote(level, sessions, promo_code, currency)
    except QuoteValidationError as e:
        st.error(f"Invalid selection: {e}")
        st.stop()

    c1, c2, c3 = st.columns(3)
    c1.metric("Total", format_cents(result.total_cents, result.currency))
    c2.metric("Savings", format_cents(
        result.breakdown.package_discount_cents + result.breakdown.promo_cents, result.currency
    ))
    c3.metric("Valid For", f"{result.expiry_days} days")

    breakdown = result.breakdown
    st.dataframe(
        pd.DataFrame([
            {"Item": "Base price", "Amount": format_cents(breakdown.base_cents, result.currency)},
            {"Item": "Package discount", "Amount": format_cents(-breakdown.package_discount_cents, result.currency)},
            {"Item": "Time adjustment", "Amount": format_cents(breakdown.time_adj_cents, result.currency)},
            {"Item": "Promo discount", "Amount": format_cents(-breakdown.promo_cents, result.currency)},
            {"Item": "Total", "Amount": format_cents(result.total_cents, result.currency)},
        ]),
        hide_index=True,
        use_container_width=True,
    )

    for warning in result.warnings:
        st.warning(warning)

    with st.expander("Resolution Details"):
        for t in result.trace:
            if t.value:
                st.caption(f"**{t.step}**: {t.description} = `{t.value}`")
            else:
                st.caption(f"**{t.step}**: {t.description}")

with tab2:
    st.subheader("All Levels and Packages")
    rows = []
    for lvl in level_ids:
        row = {"Level": tables.levels[lvl].name}
        for size in package_sizes:
            q = engine.quote(lvl, size, promo_code, currency)
            row[f"{size} Sessions"] = format_cents(q.total_cents, q.currency)
        rows.append(row)
    st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)
