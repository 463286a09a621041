"""
Streamlit UI for the SR XEROX billing calculator.

Features:
- Settings tab with an editable preset table
- One tab per customer: job entry, discount/tax, rounding, bill preview
- Bill history of recorded snapshots
- Export of every customer's items to CSV/Excel
"""
import streamlit as st
import pandas as pd
import sys
from pathlib import Path
from datetime import datetime

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from xerox_billing.config.settings import get_settings
from xerox_billing.engine import format_price
from xerox_billing.exceptions import BillingError
from xerox_billing.logging_config import setup_logging
from xerox_billing.services.billing_service import BillingSession
from xerox_billing.services.export_service import ExportService
from xerox_billing.services.share_service import ShareService


st.set_page_config(
    page_title="SR XEROX - Price Calculator",
    layout="wide",
    initial_sidebar_state="expanded"
)


@st.cache_resource
def get_settings_cached():
    """Get cached settings and configure logging once per process."""
    settings = get_settings()
    setup_logging(log_level=settings.log_level)
    return settings


try:
    settings = get_settings_cached()
    if 'session' not in st.session_state:
        st.session_state.session = BillingSession.start(settings)
except Exception as e:
    st.error(f"System Error: {e}")
    st.stop()

session: BillingSession = st.session_state.session
currency = settings.currency_symbol
# Streamlit has no native share sheet
share_service = ShareService(title=settings.share_title)


# ============================================================================
# THEME
# ============================================================================
if session.dark_mode:
    st.markdown("""
        <style>
            .stApp { background-color: #111827; color: #f9fafb; }
            [data-testid="stSidebar"] { background-color: #1f2937; }
        </style>
    """, unsafe_allow_html=True)
else:
    st.markdown("""
        <style>
            .stApp { background: linear-gradient(135deg, #ffffff, #f3f4f6); }
        </style>
    """, unsafe_allow_html=True)


# ============================================================================
# SIDEBAR: Session actions
# ============================================================================
with st.sidebar:
    st.header(f"🖨️ {settings.shop_name}")

    if st.button("🌙 Light Mode" if session.dark_mode else "🌙 Dark Mode", use_container_width=True):
        session.toggle_dark_mode()
        st.rerun()

    if st.button("➕ Add Customer", type="primary", use_container_width=True):
        session.add_customer()
        st.rerun()

    st.divider()
    st.subheader("Export")

    exporter = ExportService(session, settings)
    csv_file = exporter.to_csv()
    st.download_button(
        "📥 CSV",
        data=csv_file.data,
        file_name=csv_file.filename,
        mime=csv_file.mime,
        use_container_width=True
    )
    xlsx_file = exporter.to_excel()
    st.download_button(
        "📥 Excel",
        data=xlsx_file.data,
        file_name=xlsx_file.filename,
        mime=xlsx_file.mime,
        use_container_width=True
    )


# ============================================================================
# MAIN CONTENT: TABBED INTERFACE
# ============================================================================
st.title(f"{settings.shop_name} - Price Calculator")
st.caption(f"v1.0 | {len(session.catalog)} presets | {datetime.now().strftime('%Y-%m-%d')}")

customers = session.list_customers()
tab_labels = ["⚙️ Settings"] + [c.name or "Unnamed" for c in customers] + ["🧾 History"]
tabs = st.tabs(tab_labels)


# ============================================================================
# TAB: SETTINGS
# ============================================================================
with tabs[0]:
    st.subheader("Pricing Presets")
    st.caption("Changes re-price every existing item immediately.")

    edited_presets = st.data_editor(
        session.catalog.to_dataframe(),
        use_container_width=True,
        num_rows="dynamic",
        column_config={
            "name": st.column_config.TextColumn("Type", required=True),
            "pages_per_sheet": st.column_config.NumberColumn("Pages / Sheet", min_value=1, step=1, required=True),
            "price_per_sheet": st.column_config.NumberColumn(f"Price / Sheet ({currency})", min_value=0.0, step=0.5, format="%.2f", required=True),
        },
        hide_index=True,
        key="preset_editor"
    )

    if st.button("💾 Save Presets"):
        records = [
            {
                'name': str(row['name']).strip(),
                'pages_per_sheet': int(row['pages_per_sheet']),
                'price_per_sheet': float(row['price_per_sheet']),
            }
            for _, row in edited_presets.iterrows()
            if pd.notna(row['name']) and str(row['name']).strip()
        ]
        try:
            session.replace_presets(records)
            st.toast("Presets saved")
            st.rerun()
        except (BillingError, ValueError, TypeError) as e:
            st.error(f"Presets not saved: {e}")


# ============================================================================
# TABS: ONE PER CUSTOMER
# ============================================================================
def render_customer(customer):
    cid = customer.customer_id

    name = st.text_input("Customer Name", value=customer.name, key=f"name_{cid}")
    if name != customer.name:
        session.update_customer(cid, name=name)
        st.rerun()

    col1, col2 = st.columns([1.8, 1.2], gap="large")

    with col1:
        st.subheader("Add Job")
        with st.form(key=f"item_form_{cid}", clear_on_submit=True):
            item_name = st.text_input("Item Name", placeholder="e.g. Notes Chapter 3")
            c1, c2, c3 = st.columns(3)
            with c1:
                item_type = st.selectbox("Type", options=session.catalog.names())
            with c2:
                pages = st.number_input("Pages", min_value=0, value=1, step=1)
            with c3:
                sets = st.number_input("Sets", min_value=1, value=1, step=1)
            if st.form_submit_button("➕ Add Item", type="primary"):
                if item_name and item_type:
                    session.add_item(cid, item_name, item_type, int(pages), int(sets))
                    st.rerun()
                else:
                    st.warning("Item name and type are required")

        bill = session.price_customer(cid)

        if bill.lines:
            st.markdown("##### 📝 Items")
            st.dataframe(pd.DataFrame([{
                'Item': line.item.name,
                'Type': line.item.type,
                'Pages': line.item.pages,
                'Sets': line.item.sets,
                'Price': f"{currency}{line.formatted_price}",
            } for line in bill.lines]), use_container_width=True, hide_index=True)

            labels = {line.item.item_id: f"{line.item.name} ({line.item.type})" for line in bill.lines}
            d1, d2 = st.columns([3, 1])
            with d1:
                to_delete = st.selectbox("Remove item", options=list(labels), format_func=labels.get,
                                         key=f"del_item_{cid}", label_visibility="collapsed")
            with d2:
                if st.button("🗑️ Remove", key=f"del_btn_{cid}", use_container_width=True):
                    session.delete_item(cid, to_delete)
                    st.rerun()
        else:
            st.info("No items yet")

        for warning in bill.warnings:
            st.warning(warning)

    with col2:
        st.subheader("Bill")
        with st.container(border=True):
            a1, a2 = st.columns(2)
            with a1:
                discount = st.number_input(f"Discount ({currency})", min_value=0.0, value=float(customer.discount),
                                           step=1.0, key=f"discount_{cid}")
            with a2:
                tax = st.number_input("Tax (%)", min_value=0.0, value=float(customer.tax),
                                      step=0.5, key=f"tax_{cid}")
            if discount != customer.discount or tax != customer.tax:
                session.update_customer(cid, discount=discount, tax=tax)
                st.rerun()

            show = st.toggle("Rounding options", value=customer.show_rounding_options, key=f"show_round_{cid}")
            if show != customer.show_rounding_options:
                session.update_customer(cid, show_rounding_options=show)
            if show:
                r_ind = st.checkbox("Round each item up", value=customer.round_individual, key=f"round_ind_{cid}")
                r_tot = st.checkbox("Round total up", value=customer.round_total, key=f"round_tot_{cid}")
                if r_ind != customer.round_individual or r_tot != customer.round_total:
                    session.update_customer(cid, round_individual=r_ind, round_total=r_tot)
                    st.rerun()

            st.metric("Total", f"{currency}{bill.formatted_total}")
            if customer.round_individual != customer.round_total:
                rounded_sum = sum(float(format_price(line.price, True)) for line in bill.lines)
                st.caption(f"Items and total use different rounding (rounded items sum to {currency}{rounded_sum:.0f}).")

            st.caption("Use the copy icon to copy the bill.")
            st.code(session.engine.render_bill(bill), language=None)

            with st.expander("🔍 Calculation Details"):
                st.text(bill.get_trace_text())

        b1, b2 = st.columns(2)
        with b1:
            if st.button("📤 Share", key=f"share_{cid}", use_container_width=True):
                note = share_service.share_bill(session.engine.render_bill(bill))
                st.toast(note.message)
            if st.button("🧾 Record Bill", key=f"record_{cid}", use_container_width=True):
                session.record_bill(cid)
                st.toast("Bill saved to history")
        with b2:
            if st.button("🧹 Clear Items", key=f"clear_{cid}", use_container_width=True):
                session.clear_items(cid)
                st.rerun()
            if st.button("❌ Delete Customer", key=f"delete_{cid}", use_container_width=True):
                session.delete_customer(cid)
                st.rerun()


for tab, customer in zip(tabs[1:-1], customers):
    with tab:
        render_customer(customer)


# ============================================================================
# TAB: HISTORY
# ============================================================================
with tabs[-1]:
    st.subheader("🧾 Recorded Bills")
    if session.history:
        for snapshot in reversed(session.history):
            with st.expander(f"{snapshot.created_at.strftime('%H:%M:%S')} | {snapshot.customer_name} | {currency}{snapshot.formatted_total}"):
                st.code(snapshot.bill_text, language=None)
    else:
        st.info("No bills recorded this session.")
