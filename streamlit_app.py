from typing import Any, Dict, List, Optional

import streamlit as st

from core.errors import ValidationAppException
from core.formatting import format_currency, format_number, format_percentage
from modules.costing.cost import compute_product_cost
from modules.costing.pricing import metrics_from_price, price_from_method
from modules.costing.types import LaborLine, MaterialLine, OtherCostLine, ProductCostProfile
from ui import components as ui
from ui.api_client import delete as api_delete
from ui.api_client import get as api_get
from ui.api_client import get_bytes as api_get_bytes
from ui.api_client import patch as api_patch
from ui.api_client import post as api_post
from ui.api_client import put as api_put
from ui.texts import (
    APP_TITLE,
    BTN_CHECK_STOCK,
    BTN_CREATE,
    BTN_DELETE,
    BTN_DOWNLOAD_SHEET,
    BTN_SAVE,
    ERR_NAME_REQUIRED,
    LBL_BATCH_SIZE,
    LBL_LOW_STOCK_ONLY,
    LBL_PRICING_METHOD,
    LBL_PRICING_VALUE,
    LBL_SEARCH_MATERIAL,
    LBL_SEARCH_PRODUCT,
    LBL_STATUS,
    METHOD_LABELS,
    MSG_NO_PRODUCTS,
    MSG_ON_SALE_NOTE,
    MSG_STOCK_OK,
    MSG_STOCK_SHORT,
    MSG_SUCCESS_MATERIAL,
    MSG_SUCCESS_PRODUCT,
    MSG_SUCCESS_SETTINGS,
    PAGE_MATERIALS,
    PAGE_NEW_PRODUCT,
    PAGE_PRODUCTS,
    PAGE_SETTINGS,
    STATUS_LABELS,
)

st.set_page_config(page_title=APP_TITLE, layout="wide")


def flash(message: str, kind: str = "success"):
    st.session_state["flash_message"] = message
    st.session_state["flash_type"] = kind


def load(path: str, what: str, params: Optional[Dict[str, Any]] = None) -> Any:
    try:
        return api_get(path, params=params)
    except Exception as exc:
        ui.error(f"Could not load {what}: {exc}")
        return [] if path != "/settings" else {"currency": "USD", "units": ["pcs"]}


# --- new product -----------------------------------------------------------------


def material_lines_form(materials: List[Dict[str, Any]], units: List[str]) -> List[Dict[str, Any]]:
    st.markdown("**Materials**")
    library = {f"{m['name']} ({format_currency(m['price_per_unit'])}/{m['unit']})": m for m in materials}
    count = st.number_input("Material lines", min_value=0, max_value=20, value=1, step=1, key="np_material_count")
    lines: List[Dict[str, Any]] = []
    for i in range(int(count)):
        cols = st.columns([3, 1, 1, 1, 1])
        choice = cols[0].selectbox(f"Material {i + 1}", ["(custom)"] + list(library), key=f"np_mat_pick_{i}")
        picked = library.get(choice)
        name = picked["name"] if picked else cols[0].text_input(f"Name {i + 1}", key=f"np_mat_name_{i}")
        quantity = cols[1].number_input(f"Qty {i + 1}", min_value=0.0, value=1.0, key=f"np_mat_qty_{i}")
        unit_options = units if not picked or picked["unit"] in units else units + [picked["unit"]]
        unit = cols[2].selectbox(
            f"Unit {i + 1}",
            unit_options,
            index=unit_options.index(picked["unit"]) if picked else 0,
            key=f"np_mat_unit_{i}",
        )
        price = cols[3].number_input(
            f"Price/unit {i + 1}",
            min_value=0.0,
            value=float(picked["price_per_unit"]) if picked else 0.0,
            key=f"np_mat_price_{i}",
        )
        units_made = cols[4].number_input(f"Units made {i + 1}", min_value=1, value=1, step=1, key=f"np_mat_made_{i}")
        if name and name.strip():
            lines.append(
                {
                    "name": name.strip(),
                    "quantity": quantity,
                    "unit": unit,
                    "price_per_unit": price,
                    "units_made": int(units_made),
                    "library_material_id": picked["id"] if picked else None,
                }
            )
    return lines


def labor_lines_form(default_rate: float) -> List[Dict[str, Any]]:
    st.markdown("**Labor**")
    count = st.number_input("Labor lines", min_value=0, max_value=10, value=0, step=1, key="np_labor_count")
    lines: List[Dict[str, Any]] = []
    for i in range(int(count)):
        cols = st.columns([3, 1, 1, 1])
        activity = cols[0].text_input(f"Activity {i + 1}", key=f"np_lab_act_{i}")
        minutes = cols[1].number_input(f"Minutes {i + 1}", min_value=0.0, value=10.0, key=f"np_lab_min_{i}")
        rate = cols[2].number_input(f"Hourly rate {i + 1}", min_value=0.0, value=default_rate, key=f"np_lab_rate_{i}")
        per_batch = cols[3].checkbox(f"Per batch {i + 1}", key=f"np_lab_batch_{i}")
        if activity.strip():
            lines.append(
                {"activity": activity.strip(), "time_spent_minutes": minutes, "hourly_rate": rate, "per_unit": not per_batch}
            )
    return lines


def other_cost_lines_form() -> List[Dict[str, Any]]:
    st.markdown("**Other costs**")
    count = st.number_input("Other cost lines", min_value=0, max_value=10, value=0, step=1, key="np_other_count")
    lines: List[Dict[str, Any]] = []
    for i in range(int(count)):
        cols = st.columns([3, 1, 1, 1])
        item = cols[0].text_input(f"Item {i + 1}", key=f"np_oth_item_{i}")
        quantity = cols[1].number_input(f"Qty {i + 1}", min_value=0.0, value=1.0, key=f"np_oth_qty_{i}")
        cost = cols[2].number_input(f"Cost {i + 1}", min_value=0.0, value=0.0, key=f"np_oth_cost_{i}")
        per_batch = cols[3].checkbox(f"Per batch {i + 1}", key=f"np_oth_batch_{i}")
        if item.strip():
            lines.append({"item": item.strip(), "quantity": quantity, "cost": cost, "per_unit": not per_batch})
    return lines


def cost_preview(batch_size: int, materials, labor, other, method: str, value: float, currency: str):
    profile = ProductCostProfile(
        batch_size=batch_size,
        materials=tuple(
            MaterialLine(m["name"], m["quantity"], m["price_per_unit"], m["unit"], m["units_made"]) for m in materials
        ),
        labor_lines=tuple(LaborLine(l["activity"], l["time_spent_minutes"], l["hourly_rate"], l["per_unit"]) for l in labor),
        other_cost_lines=tuple(OtherCostLine(o["item"], o["quantity"], o["cost"], o["per_unit"]) for o in other),
    )
    cost = compute_product_cost(profile)
    try:
        price = price_from_method(method, value, cost.total)
        metrics = metrics_from_price(price, cost.total)
    except ValidationAppException as exc:
        ui.warning(exc.message)
        return
    ui.metric_row(
        [
            {"label": "Cost / unit", "value": format_currency(cost.total, currency)},
            {"label": "Price", "value": format_currency(metrics.price, currency)},
            {"label": "Profit", "value": format_currency(metrics.profit, currency)},
            {"label": "Margin", "value": format_percentage(metrics.margin)},
        ]
    )


def new_product_tab(materials: List[Dict[str, Any]], settings: Dict[str, Any]):
    st.header(PAGE_NEW_PRODUCT)
    currency = settings.get("currency", "USD")
    cols = st.columns([3, 2, 2, 1])
    name = cols[0].text_input("Product name", key="np_name")
    sku = cols[1].text_input("SKU", key="np_sku")
    category = cols[2].text_input("Category", key="np_category")
    batch_size = cols[3].number_input(LBL_BATCH_SIZE, min_value=1, value=1, step=1, key="np_batch")
    description = st.text_area("Description", "", key="np_description")

    material_lines = material_lines_form(materials, settings.get("units") or ["pcs"])
    labor_lines = labor_lines_form(float(settings.get("labor_hourly_cost") or 0.0))
    other_lines = other_cost_lines_form()

    st.markdown("---")
    pricing_methods = load("/pricing/methods", "pricing methods")
    method_cols = st.columns([2, 1])
    method = method_cols[0].selectbox(
        LBL_PRICING_METHOD,
        [m["method"] for m in pricing_methods] or list(METHOD_LABELS),
        format_func=lambda m: METHOD_LABELS.get(m, m),
        key="np_method",
    )
    value = method_cols[1].number_input(LBL_PRICING_VALUE, min_value=0.0, value=50.0, key="np_value")
    description_by_method = {m["method"]: m["description"] for m in pricing_methods}
    if method in description_by_method:
        st.caption(description_by_method[method])

    cost_preview(int(batch_size), material_lines, labor_lines, other_lines, method, value, currency)

    if st.button(BTN_CREATE, type="primary", key="np_save"):
        if not name.strip():
            ui.error(ERR_NAME_REQUIRED)
            return
        payload = {
            "name": name.strip(),
            "sku": sku.strip() or None,
            "category": category.strip() or None,
            "description": description or None,
            "batch_size": int(batch_size),
            "pricing_method": method,
            "pricing_value": value,
            "materials": material_lines,
            "labor_costs": labor_lines,
            "other_costs": other_lines,
        }
        try:
            api_post("/products", payload)
        except Exception as exc:
            ui.error(f"Product could not be saved: {exc}")
            return
        flash(MSG_SUCCESS_PRODUCT)
        st.rerun()


# --- products --------------------------------------------------------------------


def product_detail(product_id: int, currency: str):
    product = api_get(f"/products/{product_id}")
    ui.pricing_block(product, currency)

    ui.render_table(
        "Materials",
        [
            {
                "Material": m["name"],
                "Quantity": format_number(m["quantity"], 3),
                "Unit": m["unit"],
                "Price / unit": format_currency(m["price_per_unit"], currency),
                "Units made": m["units_made"],
                "Cost / unit": format_currency(m["line_cost"], currency),
                "Stock tracked": "Yes" if m.get("library_material_id") else "No",
            }
            for m in product["materials"]
        ],
        ["Material", "Quantity", "Unit", "Price / unit", "Units made", "Cost / unit", "Stock tracked"],
    )
    ui.render_table(
        "Labor",
        [
            {
                "Activity": l["activity"],
                "Minutes": l["time_spent_minutes"],
                "Rate": format_currency(l["hourly_rate"], currency),
                "Allocation": "Per unit" if l["per_unit"] else "Per batch",
                "Line cost": format_currency(l["line_cost"], currency),
            }
            for l in product["labor_costs"]
        ],
        ["Activity", "Minutes", "Rate", "Allocation", "Line cost"],
    )
    if product["variants"]:
        ui.render_table(
            "Variants",
            [
                {
                    "Variant": v["display_name"],
                    "SKU": v.get("sku") or "-",
                    "Cost": format_currency(v["effective_cost"], currency),
                    "Price": format_currency(v["effective_price"], currency),
                    "Stock": v["stock_level"],
                    "Active": "Yes" if v["is_active"] else "No",
                }
                for v in product["variants"]
            ],
            ["Variant", "SKU", "Cost", "Price", "Stock", "Active"],
        )

    st.markdown("**Pricing**")
    method_keys = list(METHOD_LABELS)
    current_method = product.get("pricing_method") or "markup"
    cols = st.columns([2, 1, 1])
    method = cols[0].selectbox(
        LBL_PRICING_METHOD,
        method_keys,
        index=method_keys.index(current_method),
        format_func=lambda m: METHOD_LABELS[m],
        key=f"pd_method_{product_id}",
    )
    default_value = float(product.get("pricing_value") or 0.0)
    if method != current_method and product["pricing"].get("price") is not None:
        # Keep the current price when switching methods.
        converted = api_post(
            "/pricing/convert",
            {"method": method, "price": product["pricing"]["price"], "cost": product["costing"]["product_cost"]},
        )
        default_value = max(0.0, float(converted["value"]))
    value = cols[1].number_input(LBL_PRICING_VALUE, min_value=0.0, value=default_value, key=f"pd_value_{product_id}_{method}")
    if cols[2].button(BTN_SAVE, key=f"pd_save_pricing_{product_id}"):
        try:
            api_patch(f"/products/{product_id}/pricing", {"method": method, "value": value})
            flash(MSG_SUCCESS_PRODUCT)
            st.rerun()
        except Exception as exc:
            ui.error(str(exc))

    st.markdown("**Status & stock**")
    statuses = list(STATUS_LABELS)
    cols = st.columns([2, 1, 1])
    new_status = cols[0].selectbox(
        LBL_STATUS,
        statuses,
        index=statuses.index(product["status"]),
        format_func=lambda s: STATUS_LABELS[s],
        key=f"pd_status_{product_id}",
    )
    stock_batch = cols[1].number_input(
        LBL_BATCH_SIZE, min_value=1, value=int(product["batch_size"]), step=1, key=f"pd_stock_batch_{product_id}"
    )
    if new_status == "on_sale" and product["status"] != "on_sale":
        st.caption(MSG_ON_SALE_NOTE)
    if cols[2].button(BTN_SAVE, key=f"pd_save_status_{product_id}"):
        try:
            api_patch(f"/products/{product_id}/status", {"status": new_status, "stock_batch_size": int(stock_batch)})
            flash(MSG_SUCCESS_PRODUCT)
            st.rerun()
        except Exception as exc:
            ui.error(str(exc))

    if st.button(BTN_CHECK_STOCK, key=f"pd_stock_check_{product_id}"):
        check = api_get(f"/products/{product_id}/stock-check", params={"batch_size": int(stock_batch)})
        (ui.success if check["sufficient"] else ui.warning)(MSG_STOCK_OK if check["sufficient"] else MSG_STOCK_SHORT)
        ui.render_table(
            "Stock check",
            check["lines"],
            ["material_name", "unit", "current_stock", "required_quantity", "shortfall"],
        )

    cols = st.columns(2)
    try:
        sheet = api_get_bytes(f"/products/{product_id}/excel")
        cols[0].download_button(
            BTN_DOWNLOAD_SHEET,
            data=sheet,
            file_name=f"product_{product_id}_costing.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key=f"pd_download_{product_id}",
        )
    except Exception as exc:
        cols[0].error(str(exc))
    if cols[1].button(BTN_DELETE, key=f"pd_delete_{product_id}"):
        api_delete(f"/products/{product_id}")
        flash("Product deleted", "info")
        st.rerun()


def products_tab(settings: Dict[str, Any]):
    st.header(PAGE_PRODUCTS)
    currency = settings.get("currency", "USD")
    cols = st.columns([3, 1])
    search = cols[0].text_input(LBL_SEARCH_PRODUCT, key="products_search")
    status = cols[1].selectbox(
        LBL_STATUS, ["all"] + list(STATUS_LABELS), format_func=lambda s: STATUS_LABELS.get(s, "All"), key="products_status"
    )
    params = {"search": search or None, "status": None if status == "all" else status}
    products = load("/products", "products", params={k: v for k, v in params.items() if v})
    if not products:
        ui.info(MSG_NO_PRODUCTS)
        return

    rows = [
        {
            "Name": p["name"],
            "SKU": p.get("sku") or "-",
            "Status": STATUS_LABELS.get(p["status"], p["status"]),
            "Cost": format_currency(p["costing"]["product_cost"], currency),
            "Price": format_currency(p["pricing"].get("price"), currency),
            "Profit": format_currency(p["pricing"].get("profit"), currency),
            "Margin %": p["pricing"].get("margin"),
            "Variants": p["variant_summary"]["active_count"],
        }
        for p in products
    ]
    ui.render_table("Products", rows, ["Name", "SKU", "Status", "Cost", "Price", "Profit", "Margin %", "Variants"])

    st.markdown("---")
    labels = {f"{p['name']} (#{p['id']})": p["id"] for p in products}
    selected = st.selectbox("Product", list(labels), key="products_select")
    product_detail(labels[selected], currency)


# --- materials -------------------------------------------------------------------


def materials_tab(settings: Dict[str, Any]):
    st.header(PAGE_MATERIALS)
    currency = settings.get("currency", "USD")
    cols = st.columns([3, 1])
    search = cols[0].text_input(LBL_SEARCH_MATERIAL, key="materials_search")
    low_stock = cols[1].checkbox(LBL_LOW_STOCK_ONLY, key="materials_low_stock")
    params: Dict[str, Any] = {"sort_by": "name", "sort_order": "asc"}
    if search:
        params["search"] = search
    if low_stock:
        params["low_stock"] = "true"
    materials = load("/materials", "materials", params=params)
    ui.render_table(
        "Library",
        [
            {
                "Name": m["name"],
                "Category": m.get("category") or "-",
                "Price / unit": f"{format_currency(m['price_per_unit'], currency)}/{m['unit']}",
                "Stock": format_number(m["stock_level"], 2),
                "Reorder at": format_number(m["reorder_point"], 2),
                "Low": "⚠" if m["is_low_stock"] else "",
                "Supplier": m.get("supplier") or "-",
            }
            for m in materials
        ],
        ["Name", "Category", "Price / unit", "Stock", "Reorder at", "Low", "Supplier"],
    )

    with st.expander("Add material"):
        cols = st.columns([3, 1, 1, 1])
        name = cols[0].text_input("Name", key="mat_name")
        price = cols[1].number_input("Pack price", min_value=0.0, key="mat_price")
        quantity = cols[2].number_input("Pack quantity", min_value=0.0, value=1.0, key="mat_qty")
        unit = cols[3].selectbox("Unit", settings.get("units") or ["pcs"], key="mat_unit")
        cols = st.columns(4)
        stock_level = cols[0].number_input("Stock level", min_value=0.0, key="mat_stock")
        reorder_point = cols[1].number_input("Reorder point", min_value=0.0, key="mat_reorder")
        category = cols[2].text_input("Category", key="mat_category")
        supplier = cols[3].text_input("Supplier", key="mat_supplier")
        if st.button(BTN_CREATE, key="mat_save"):
            if not name.strip():
                ui.error(ERR_NAME_REQUIRED)
                return
            try:
                api_post(
                    "/materials",
                    {
                        "name": name.strip(),
                        "price": price,
                        "quantity": quantity,
                        "unit": unit,
                        "stock_level": stock_level,
                        "reorder_point": reorder_point,
                        "category": category.strip() or None,
                        "supplier": supplier.strip() or None,
                    },
                )
            except Exception as exc:
                ui.error(f"Material could not be saved: {exc}")
                return
            flash(MSG_SUCCESS_MATERIAL)
            st.rerun()


# --- settings --------------------------------------------------------------------


def settings_tab(settings: Dict[str, Any]):
    st.header(PAGE_SETTINGS)
    cols = st.columns(2)
    currency = cols[0].text_input("Currency (ISO code)", value=settings.get("currency", "USD"), key="set_currency")
    unit_system = cols[1].selectbox(
        "Unit system",
        ["metric", "imperial"],
        index=0 if settings.get("unit_system", "metric") == "metric" else 1,
        key="set_unit_system",
    )
    cols = st.columns(3)
    tax = cols[0].number_input("Tax %", min_value=0.0, max_value=100.0, value=float(settings.get("tax_percentage") or 0))
    labor_rate = cols[1].number_input("Default hourly rate", min_value=0.0, value=float(settings.get("labor_hourly_cost") or 0))
    revenue_goal = cols[2].number_input("Revenue goal", min_value=0.0, value=float(settings.get("revenue_goal") or 0))
    if st.button(BTN_SAVE, key="set_save"):
        payload = {
            "currency": currency,
            "unit_system": unit_system,
            "tax_percentage": tax,
            "labor_hourly_cost": labor_rate or None,
            "revenue_goal": revenue_goal or None,
        }
        if unit_system == settings.get("unit_system"):
            payload["units"] = settings.get("units")
        try:
            api_put("/settings", payload)
        except Exception as exc:
            ui.error(str(exc))
            return
        flash(MSG_SUCCESS_SETTINGS)
        st.rerun()


def main():
    flash_msg = st.session_state.pop("flash_message", None)
    flash_type = st.session_state.pop("flash_type", None)
    if flash_msg:
        if flash_type == "success":
            ui.success(flash_msg)
        elif flash_type == "warning":
            ui.warning(flash_msg)
        else:
            ui.info(flash_msg)

    settings = load("/settings", "settings")
    materials = load("/materials", "materials", params={"sort_by": "name", "sort_order": "asc"})

    tabs = st.tabs([PAGE_PRODUCTS, PAGE_NEW_PRODUCT, PAGE_MATERIALS, PAGE_SETTINGS])
    with tabs[0]:
        products_tab(settings)
    with tabs[1]:
        new_product_tab(materials, settings)
    with tabs[2]:
        materials_tab(settings)
    with tabs[3]:
        settings_tab(settings)


if __name__ == "__main__":
    main()
