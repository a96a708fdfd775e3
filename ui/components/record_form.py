"""Create/edit form for a CRUD controller's open dialog."""
from __future__ import annotations
import streamlit as st

from core.utils import parse_date
from ui.services.crud import CrudController, FieldSpec, FormState


def _render_field(spec: FieldSpec, form: FormState, key: str) -> None:
    value = form.values.get(spec.name, spec.default)
    widget_key = f"{key}_{spec.name}"
    label = f"{spec.label} *" if spec.required else spec.label

    if spec.kind == "select":
        options = list(spec.options)
        if value not in options and value:
            options.append(value)
        form.set(spec.name, st.selectbox(label, options, index=options.index(value) if value in options else 0, key=widget_key))
    elif spec.kind == "date":
        form.set(spec.name, st.date_input(label, value=parse_date(value), key=widget_key, format="YYYY-MM-DD"))
    elif spec.kind == "bool":
        form.set(spec.name, st.checkbox(label, value=bool(value), key=widget_key))
    elif spec.kind == "textarea":
        form.set(spec.name, st.text_area(label, value=value or "", key=widget_key))
    else:
        # Numbers are typed as text; intermediate states like "-" or "." are kept
        form.set(spec.name, st.text_input(label, value="" if value is None else str(value), key=widget_key))


def render_record_form(controller: CrudController, key: str) -> None:
    """Render the controller's open dialog, if any, and handle Save/Cancel."""
    form = controller.form
    if form is None:
        return

    title = f"Edit {controller.entity_label}" if form.is_edit else f"New {controller.entity_label}"
    with st.container(border=True):
        st.subheader(title)
        for spec in controller.fields:
            _render_field(spec, form, f"{key}_{form.editing_id or 'new'}")
        for error in form.errors:
            st.error(error)

        col1, col2 = st.columns(2)
        with col1:
            if st.button("Save", key=f"{key}_save", type="primary"):
                if controller.submit(form):
                    st.rerun()
        with col2:
            if st.button("Cancel", key=f"{key}_cancel"):
                controller.close_form()
                st.rerun()
