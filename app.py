# app.py
"""
Team Productivity Dashboard - Main Entry Point

Version: 1.0.0
"""

import streamlit as st
from utils.auth import AuthManager
from utils.db import check_db_connection
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ==================== PAGE CONFIGURATION ====================

APP_NAME = "Produtividade da Equipe"
APP_ICON = "📊"
APP_VERSION = "1.0.0"

st.set_page_config(
    page_title=APP_NAME,
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded"
)

# ==================== CUSTOM CSS ====================

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        margin-bottom: 0.5rem;
        color: #3b82f6;
    }

    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }

    .welcome-box {
        background: linear-gradient(135deg, #3b82f6 0%, #8b5cf6 100%);
        color: white;
        padding: 2rem;
        border-radius: 0.75rem;
        margin-bottom: 2rem;
    }

    .welcome-title {
        font-size: 1.75rem;
        font-weight: 600;
        margin-bottom: 0.5rem;
    }

    .info-card {
        background: #f8f9fa;
        padding: 1.5rem;
        border-radius: 0.5rem;
        border-left: 4px solid #3b82f6;
        margin-bottom: 1rem;
    }

    .footer {
        text-align: center;
        color: #888;
        padding: 1rem;
        margin-top: 3rem;
        border-top: 1px solid #eee;
        font-size: 0.9rem;
    }
</style>
""", unsafe_allow_html=True)

# ==================== INITIALIZATION ====================

auth = AuthManager()

NAV_CARDS = [
    ("📊 Dashboard", "Totais do período, ranking de agentes e evolução semanal."),
    ("➕ Registrar produtividade", "Lance as atualizações realizadas por um agente em uma data."),
    ("👥 Equipe", "Cards por agente com tendência semanal e principais funções."),
]

# ==================== HELPER FUNCTIONS ====================

def show_login_page():
    """Display the login page"""
    st.markdown(f'<p class="main-header">{APP_ICON} {APP_NAME}</p>', unsafe_allow_html=True)
    st.markdown('<p class="sub-header">Acompanhamento de atualizações por agente e função de liderança</p>', unsafe_allow_html=True)

    db_ok, db_error = check_db_connection()
    if not db_ok:
        st.error(f"⚠️ {db_error}")
        return

    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        with st.form("login_form", clear_on_submit=False):
            st.markdown("#### 🔐 Entrar")

            email = st.text_input(
                "E-mail",
                placeholder="seu@email.com",
                key="login_email"
            )
            password = st.text_input(
                "Senha",
                type="password",
                key="login_password"
            )

            submit = st.form_submit_button(
                "🔑 Entrar",
                type="primary",
                use_container_width=True
            )

            if submit:
                if not email or not password:
                    st.warning("Informe e-mail e senha")
                else:
                    with st.spinner("Autenticando..."):
                        success, result = auth.authenticate(email, password)

                    if success:
                        auth.login(result)
                        st.success("✅ Login realizado!")
                        st.rerun()
                    else:
                        st.error(result.get("error", "Falha na autenticação"))


def show_main_app():
    """Display the home screen after login"""

    with st.sidebar:
        st.markdown(f"### 👤 {auth.get_user_display_name()}")
        st.caption(st.session_state.get('user_email', ''))
        st.markdown("---")

        if st.button("🚪 Sair", use_container_width=True):
            auth.logout()
            st.rerun()

    st.markdown(f"""
    <div class="welcome-box">
        <div class="welcome-title">Olá, {auth.get_user_display_name()}! 👋</div>
        <div>Escolha uma página no menu lateral para começar.</div>
    </div>
    """, unsafe_allow_html=True)

    for title, description in NAV_CARDS:
        st.markdown(f"""
        <div class="info-card">
            <strong>{title}</strong><br>
            <span style="color: #666;">{description}</span>
        </div>
        """, unsafe_allow_html=True)

    if st.session_state.get('debug_mode'):
        with st.expander("🔧 Status do sistema"):
            from utils.db import get_connection_pool_status
            pool_status = get_connection_pool_status()

            col1, col2, col3 = st.columns(3)
            with col1:
                st.metric("Banco de dados", pool_status.get("status", "OK"))
            with col2:
                st.metric("Conexões em uso", pool_status.get("checked_out", 0))
            with col3:
                st.metric("Disponíveis", pool_status.get("checked_in", 0))

    st.markdown(f"""
    <div class="footer">
        <strong>{APP_NAME}</strong> v{APP_VERSION}
    </div>
    """, unsafe_allow_html=True)


# ==================== MAIN ====================

def main():
    """Main application entry point"""
    if not auth.check_session():
        show_login_page()
    else:
        show_main_app()


if __name__ == "__main__":
    main()
