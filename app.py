import altair as alt
import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import List, Optional

from deficit_core.charts import deficit_by_sub_unit_chart
from deficit_core.data import load_deficit_data
from deficit_core.filters import ALL, CategoryFilter, SortDirection, filter_records
from deficit_core.metrics_deficit import view_to_frame
from deficit_core.view import DeficitDashboard, DerivedView

alt.data_transformers.disable_max_rows()

CATEGORY_LABELS = {
    CategoryFilter.ALL: "Todos",
    CategoryFilter.TIER_A: "CAP",
    CategoryFilter.TIER_B: "TEN",
    CategoryFilter.QOEM: "QOEM",
    CategoryFilter.QOE: "QOE",
}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(command_filter: str, sub_unit_filter: str, category: CategoryFilter) -> str:
    chips = [
        f"Grande Comando: {'Todos' if command_filter == ALL else command_filter}",
        f"OPM: {'Todas' if sub_unit_filter == ALL else sub_unit_filter}",
        f"Posto: {CATEGORY_LABELS.get(category, 'Todos')}",
    ]
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def sort_arrow(view: DerivedView, header: str) -> str:
    if view.sort_indicator.key != header:
        return "◆"
    return "▲" if view.sort_indicator.direction is SortDirection.ASCENDING else "▼"


def render_summary_cards(view: DerivedView):
    s = view.summary
    cols = st.columns(4)
    cols[0].metric("Total Déficit de Postos", f"{s.total_deficit:,}")
    cols[1].metric("Déficit Total CAP", f"{s.deficit_tier_a:,}")
    cols[2].metric("Déficit Total 1º TEN", f"{s.deficit_tier_b1:,}")
    cols[3].metric("Déficit Total 2º TEN", f"{s.deficit_tier_b2:,}")


def render_sort_buttons(dashboard: DeficitDashboard, view: DerivedView):
    cols = st.columns(len(view.headers))
    for col, header in zip(cols, view.headers):
        if col.button(f"{header} {sort_arrow(view, header)}", key=f"sort_{header}", use_container_width=True):
            dashboard.change_sort(header)
            st.rerun()


def render_table(view: DerivedView):
    table = view_to_frame(view)
    highlighted: Optional[str] = (
        view.headers[view.sort_indicator.column_index] if view.sort_indicator.column_index is not None else None
    )
    styled = table.style
    if highlighted is not None:
        styled = styled.set_properties(subset=[highlighted], **{"background-color": "#e0f2fe", "font-weight": "600"})
    st.dataframe(styled, hide_index=True, use_container_width=True)


def _index_of(options: List[str], value: str) -> int:
    return options.index(value) if value in options else 0


# ---------- UI setup ----------
st.set_page_config(page_title="Déficit de Postos", layout="wide")
inject_base_styles()
st.title("Tabela de Déficit por Posto")

data_ctx = load_deficit_data()
frame: pd.DataFrame = data_ctx["frame"]
if frame.empty:
    st.error("No deficit records available.")
    st.stop()

if "dashboard" not in st.session_state:
    st.session_state["dashboard"] = DeficitDashboard(frame)
dashboard: DeficitDashboard = st.session_state["dashboard"]
params = dashboard.params

# ----- Location and category filters -----
f1, f2, f3 = st.columns([3, 3, 4])
with f1:
    commands = [ALL] + dashboard.command_options()
    command = st.selectbox(
        "Grande Comando",
        options=commands,
        index=_index_of(commands, params.command_filter),
        format_func=lambda c: "Todos os Grandes Comandos" if c == ALL else c,
    )
    if command != params.command_filter:
        dashboard.change_filters(command_filter=command)
        st.rerun()
with f2:
    opms = [ALL] + dashboard.sub_unit_options()
    opm = st.selectbox(
        "OPM",
        options=opms,
        index=_index_of(opms, params.sub_unit_filter),
        format_func=lambda o: "Todas as OPMs" if o == ALL else o,
    )
    if opm != params.sub_unit_filter:
        dashboard.change_filters(sub_unit_filter=opm)
        st.rerun()
with f3:
    categories = list(CATEGORY_LABELS)
    category = st.radio(
        "Filtrar por Posto",
        options=categories,
        index=categories.index(params.category_filter),
        format_func=lambda c: CATEGORY_LABELS[c],
        horizontal=True,
    )
    if category is not params.category_filter:
        dashboard.change_filters(category_filter=category)
        st.rerun()

view = dashboard.view()
st.markdown(
    f"<div class='chip-row'>{format_filter_summary(params.command_filter, params.sub_unit_filter, params.category_filter)}</div>",
    unsafe_allow_html=True,
)

render_summary_cards(view)

with card("Déficit por OPM"):
    render_sort_buttons(dashboard, view)
    render_table(view)
    st.download_button(
        "Export CSV",
        data=view_to_frame(view).to_csv(index=False).encode("utf-8"),
        file_name="deficit.csv",
        mime="text/csv",
    )

filtered = filter_records(frame, params.command_filter, params.sub_unit_filter)
if not filtered.empty:
    with card("Déficit por OPM e Posto"):
        st.altair_chart(deficit_by_sub_unit_chart(filtered), use_container_width=True)
