"""
Streamlit Frontend for Finance Tracker

This is the user interface for recording transactions and managing
categories.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. The UI only renders form state; all rules live in finance_tracker.forms
3. Clear error messages in simple language
4. Visual feedback (toast) for every submit

Each browser session gets its own form instances. The stores are shared
and cached for the lifetime of the server.
"""

import asyncio
from datetime import date

import streamlit as st

from finance_tracker.config import validate_all_settings
from finance_tracker.display import audit_history_rows, category_row_html
from finance_tracker.forms import CategoryManagementPanel, TransactionEntryForm
from finance_tracker.models.finance import FormState, RecurrenceFrequency, TransactionType
from finance_tracker.notifications import CollectingNotifier
from finance_tracker.orchestrator import Stores, create_app_components, create_stores


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .category-row {
        padding: 10px;
        border: 1px solid #e5e7eb;
        border-radius: 8px;
        margin: 4px 0;
    }
    .color-dot {
        width: 14px;
        height: 14px;
        border-radius: 50%;
        display: inline-block;
        margin-left: 8px;
        vertical-align: middle;
    }
</style>
""", unsafe_allow_html=True)

DIRECTION_LABELS = {
    TransactionType.EXPENSE: "Despesa",
    TransactionType.INCOME: "Receita",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_stores() -> Stores:
    """Get or create the stores (cached across sessions)."""
    return create_stores(use_storage=True)


def get_session_components() -> tuple[TransactionEntryForm, CategoryManagementPanel, CollectingNotifier]:
    """Per-session forms over the shared stores."""
    if "components" not in st.session_state:
        st.session_state.components = create_app_components(
            stores=get_stores(),
            notifier=CollectingNotifier(),
        )
        st.session_state.transaction_generation = 0
        st.session_state.category_generation = 0
    return st.session_state.components


def show_notifications(notifier: CollectingNotifier) -> None:
    for note in notifier.drain():
        icon = "✅" if note.level == "success" else "❌"
        st.toast(note.message, icon=icon)


def main():
    """Main application entry point."""
    transaction_form, category_panel, notifier = get_session_components()

    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navegar para:",
        ["➕ Nova Transação", "🏷️ Categorias", "⚙️ Configurações"],
        index=0,
    )

    if get_stores().backend == "memory":
        st.sidebar.info(
            "Modo demonstração: os dados ficam apenas em memória "
            "até o servidor reiniciar."
        )

    show_notifications(notifier)

    if page == "➕ Nova Transação":
        render_transaction_page(transaction_form)
    elif page == "🏷️ Categorias":
        render_categories_page(category_panel)
    elif page == "⚙️ Configurações":
        render_settings_page()


def render_transaction_page(form: TransactionEntryForm):
    """Render the new transaction form."""
    st.title("Nova Transação")

    try:
        run_async(form.refresh())
    except Exception as e:
        st.error(f"Não foi possível carregar contas e categorias: {e}")
        return

    gen = st.session_state.transaction_generation

    direction = st.radio(
        "Tipo",
        options=[TransactionType.EXPENSE, TransactionType.INCOME],
        index=0 if form.direction == TransactionType.EXPENSE else 1,
        format_func=lambda d: DIRECTION_LABELS[d],
        horizontal=True,
        key="direction",
    )
    form.set_direction(direction)

    amount = st.text_input("Valor *", value=form.draft.amount, placeholder="0,00", key=f"amount_{gen}")
    description = st.text_input(
        "Descrição *",
        value=form.draft.description,
        placeholder="Ex: Almoço, Salário, Compras...",
        key=f"description_{gen}",
    )

    targets = form.funding_targets()
    target_ids = [t.id for t in targets]
    labels = {t.id: f"{t.display_icon} {t.label}" for t in targets}
    account_id = st.selectbox(
        "Conta/Cartão *",
        options=target_ids,
        index=target_ids.index(form.draft.account_id) if form.draft.account_id in target_ids else None,
        format_func=lambda i: labels[i],
        placeholder="Selecione uma conta ou cartão",
        key=f"account_{gen}",
    )

    options = form.category_options()
    option_ids = [c.id for c in options]
    names = {c.id: f"{c.icon} {c.name}" for c in options}
    if form.categories_loading:
        st.caption("Carregando categorias...")
    category_id = st.selectbox(
        "Categoria *",
        options=option_ids,
        index=option_ids.index(form.draft.category_id) if form.draft.category_id in option_ids else None,
        format_func=lambda i: names[i],
        placeholder="Selecione uma categoria",
        key=f"category_{gen}_{form.direction.value}",
    )

    when = st.date_input("Data", value=date.fromisoformat(form.draft.date), key=f"date_{gen}")

    with st.expander("Mais opções"):
        notes = st.text_area("Observações", value=form.draft.notes, key=f"notes_{gen}")
        tags = st.text_input(
            "Tags (separadas por vírgula)",
            value=", ".join(form.draft.tags),
            key=f"tags_{gen}",
        )
        is_recurring = st.checkbox("Transação recorrente", value=form.draft.is_recurring, key=f"recurring_{gen}")
        frequency = None
        end_date = None
        if is_recurring:
            frequency = st.selectbox(
                "Frequência",
                options=list(RecurrenceFrequency),
                format_func=lambda f: f.value.title(),
                key=f"frequency_{gen}",
            )
            end_date = st.date_input("Termina em (opcional)", value=None, key=f"end_date_{gen}")

    receipt = st.file_uploader(
        "Anexar Comprovante/Nota Fiscal",
        type=["jpg", "jpeg", "png", "webp", "pdf"],
        key=f"receipt_{gen}",
    )

    form.update(
        amount=amount,
        description=description,
        account_id=account_id or "",
        category_id=category_id or "",
        date=when.isoformat(),
        notes=notes,
        tags=[t.strip() for t in tags.split(",") if t.strip()],
        is_recurring=is_recurring,
        recurrence_frequency=frequency,
        recurrence_end_date=end_date,
    )
    if receipt is not None:
        form.attach_receipt(receipt.name, receipt.getvalue(), receipt.type or "application/octet-stream")
        st.caption(f"Arquivo selecionado: {receipt.name}")
    else:
        form.clear_receipt()

    if st.button(form.submit_label, type="primary", disabled=form.is_submitting):
        with st.spinner("Adicionando..."):
            run_async(form.submit())
        if form.last_outcome == FormState.SUCCESS:
            st.session_state.transaction_generation += 1
        st.rerun()


def _category_row(category) -> None:
    st.markdown(category_row_html(category), unsafe_allow_html=True)


def render_categories_page(panel: CategoryManagementPanel):
    """Render the category management page."""
    try:
        run_async(panel.refresh())
    except Exception as e:
        st.error(f"Não foi possível carregar as categorias: {e}")
        return

    if panel.loading:
        st.info("Carregando categorias...")
        return

    col1, col2 = st.columns([3, 1])
    with col1:
        st.title("Gerenciar Categorias")
    with col2:
        if st.button("➕ Nova Categoria"):
            panel.toggle_form()
            st.rerun()

    gen = st.session_state.category_generation

    if panel.show_form:
        st.subheader("Adicionar Categoria Personalizada")
        c1, c2 = st.columns(2)
        with c1:
            name = st.text_input(
                "Nome da Categoria *",
                value=panel.draft.name,
                placeholder="Ex: Pets, Academia...",
                key=f"cat_name_{gen}",
            )
            direction = st.selectbox(
                "Tipo *",
                options=[TransactionType.EXPENSE, TransactionType.INCOME],
                index=0 if panel.draft.transaction_type == TransactionType.EXPENSE else 1,
                format_func=lambda d: DIRECTION_LABELS[d],
                key=f"cat_type_{gen}",
            )
        with c2:
            icon = st.text_input("Ícone", value=panel.draft.icon, key=f"cat_icon_{gen}")
            color = st.color_picker("Cor", value=panel.draft.color, key=f"cat_color_{gen}")

        panel.update(name=name, transaction_type=direction, icon=icon, color=color)

        b1, b2 = st.columns(2)
        with b1:
            if st.button("Cancelar", key=f"cat_cancel_{gen}"):
                panel.cancel()
                st.rerun()
        with b2:
            if st.button("Adicionar Categoria", type="primary", key=f"cat_submit_{gen}"):
                created = run_async(panel.submit())
                if created is not None:
                    st.session_state.category_generation += 1
                st.rerun()

    st.markdown("---")
    left, right = st.columns(2)
    with left:
        st.subheader("🟢 Categorias de Receita")
        for category in panel.income_categories:
            _category_row(category)
    with right:
        st.subheader("🔴 Categorias de Despesa")
        for category in panel.expense_categories:
            _category_row(category)

    suggestions = panel.suggestions()
    if suggestions:
        st.markdown("---")
        st.subheader("Sugestões de Novas Categorias")
        cols = st.columns(2)
        for index, suggestion in enumerate(suggestions):
            with cols[index % 2]:
                if st.button(f"{suggestion.icon} {suggestion.name}", key=f"suggestion_{suggestion.name}"):
                    run_async(panel.choose_suggestion(suggestion))
                    st.session_state.category_generation += 1
                    st.rerun()


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Configurações")

    st.markdown("### Status das Conexões")

    status = validate_all_settings()
    services = [
        ("Google Sheets (Armazenamento)", "google_sheets"),
        ("Cloudinary (Comprovantes)", "cloudinary"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configurado")
        else:
            error = status.get(f"{key}_error", "Não configurado")
            st.error(f"❌ {name} - {error}")

    st.markdown(f"**Armazenamento em uso:** {get_stores().backend}")

    st.markdown("---")
    st.markdown("### Histórico recente")
    try:
        events = run_async(get_stores().audit_logger.recent_events(limit=20))
    except Exception as e:
        st.error(f"Não foi possível carregar o histórico: {e}")
        events = []
    if events:
        st.dataframe(audit_history_rows(events), hide_index=True, use_container_width=True)
    else:
        st.caption("Nenhum evento registrado ainda.")

    st.markdown("---")
    st.markdown("### Configuração")
    st.markdown(
        "Para configurar a aplicação, crie um arquivo `.env` com suas credenciais. "
        "Veja `.env.example` para as variáveis necessárias."
    )


if __name__ == "__main__":
    main()
