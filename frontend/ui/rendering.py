"""Shared rendering helpers for Streamlit pages."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import pandas as pd
import streamlit as st
from streamlit.delta_generator import DeltaGenerator

from services.report_formatting import MetricRow


@dataclass(frozen=True)
class MetricSpec:
    """Specification for a Streamlit metric card."""

    label: str
    value: str
    help: Optional[str] = None
    caption: Optional[str] = None


def metric_specs_from_rows(rows: Sequence[MetricRow]) -> List[MetricSpec]:
    """Reuse the report's formatted label/value rows as metric cards."""
    return [MetricSpec(label=row.label, value=row.value) for row in rows]


def render_metrics(columns: Sequence[DeltaGenerator], specs: Sequence[MetricSpec]) -> None:
    for col, spec in zip(columns, specs):
        col.metric(spec.label, spec.value, help=spec.help)
        if spec.caption:
            col.caption(spec.caption)


def render_report_table(headers: Sequence[str], rows: Sequence[Sequence[str]], empty_message: str) -> None:
    """Show the same formatted rows the PDF prints, or an info note when there are none."""
    if not rows:
        st.info(empty_message)
        return
    st.dataframe(pd.DataFrame(list(rows), columns=list(headers)), use_container_width=True, hide_index=True)
