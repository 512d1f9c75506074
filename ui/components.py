from typing import Any, Dict, List

import pandas as pd
import streamlit as st

from core.formatting import format_currency, format_percentage


def metric_row(metrics: List[Dict[str, Any]]):
    cols = st.columns(len(metrics))
    for col, m in zip(cols, metrics):
        col.metric(m["label"], m["value"])


def render_table(title: str, data: List[Dict[str, Any]], columns: List[str]):
    st.markdown(f"**{title}**")
    if not data:
        st.info("Nothing here yet")
        return
    df = pd.DataFrame(data)
    st.dataframe(df[[c for c in columns if c in df.columns]], use_container_width=True, hide_index=True)


def pricing_block(product: Dict[str, Any], currency: str):
    costing = product.get("costing", {})
    pricing = product.get("pricing", {})
    metric_row(
        [
            {"label": "Cost / unit", "value": format_currency(costing.get("product_cost"), currency)},
            {"label": "Price", "value": format_currency(pricing.get("price"), currency)},
            {"label": "Profit", "value": format_currency(pricing.get("profit"), currency)},
            {"label": "Margin", "value": format_percentage(pricing.get("margin"))},
            {"label": "Markup", "value": format_percentage(pricing.get("markup"))},
        ]
    )
    cols = st.columns(3)
    cols[0].write(f"Materials: **{format_currency(costing.get('materials_cost'), currency)}**")
    cols[1].write(f"Labor: **{format_currency(costing.get('labor_cost'), currency)}**")
    cols[2].write(f"Other: **{format_currency(costing.get('other_cost'), currency)}**")


def success(msg: str):
    st.success(msg)


def error(msg: str):
    st.error(msg)


def warning(msg: str):
    st.warning(msg)


def info(msg: str):
    st.info(msg)
