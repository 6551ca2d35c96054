# utils/auth.py
"""
Manager sign-in for the productivity dashboard

E-mail + password against the users table (SHA256 + per-user salt) and a
Streamlit session that expires after SESSION_TIMEOUT_HOURS.
"""

import streamlit as st
import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple
import logging
from sqlalchemy import text
from .db import execute_query, get_db_engine, get_transaction
from .config import config

logger = logging.getLogger(__name__)

SESSION_KEYS = [
    'authenticated', 'user_id', 'user_email', 'user_role',
    'user_fullname', 'login_time', 'debug_mode', 'recent_records'
]

MSG_MISSING_CREDENTIALS = "Informe e-mail e senha."
MSG_INVALID_CREDENTIALS = "E-mail ou senha inválidos."
MSG_INACTIVE = "Conta inativa. Fale com o administrador."
MSG_FAILURE = "Falha na autenticação. Tente novamente."


class AuthManager:
    """Sign-in and session handling used by app.py and every page"""

    def __init__(self, engine=None):
        self._engine = engine
        self.session_timeout = timedelta(
            hours=config.get_app_setting("SESSION_TIMEOUT_HOURS", 8)
        )

    @property
    def engine(self):
        if self._engine is None:
            self._engine = get_db_engine()
        return self._engine

    # ==================== PASSWORDS ====================

    @staticmethod
    def hash_password(password: str, salt: str = None) -> Tuple[str, str]:
        """
        SHA256 of password + salt. A new random salt is drawn when none is given.

        Returns:
            Tuple of (hex digest, salt)
        """
        salt = salt or secrets.token_hex(32)
        return hashlib.sha256((password + salt).encode()).hexdigest(), salt

    def verify_password(self, password: str, stored_hash: Optional[str], salt: str) -> bool:
        candidate, _ = self.hash_password(password, salt)
        return secrets.compare_digest(candidate, stored_hash or '')

    # ==================== SIGN-IN ====================

    def authenticate(self, email: str, password: str) -> Tuple[bool, Dict]:
        """
        Check credentials. E-mail matching ignores case and surrounding spaces.

        Returns:
            (True, user_info) or (False, {'error': message})
        """
        email = (email or '').strip().lower()
        if not email or not password:
            return False, {"error": MSG_MISSING_CREDENTIALS}

        try:
            user = self._find_user(email)
        except Exception as e:
            logger.error(f"Authentication error: {e}")
            return False, {"error": MSG_FAILURE}

        if user is None:
            logger.warning(f"Login attempt for non-existent user: {email}")
            return False, {"error": MSG_INVALID_CREDENTIALS}

        if not user['is_active']:
            logger.warning(f"Login attempt for inactive user: {email}")
            return False, {"error": MSG_INACTIVE}

        if not self.verify_password(password, user['password_hash'], user['password_salt']):
            logger.warning(f"Invalid password for user: {email}")
            return False, {"error": MSG_INVALID_CREDENTIALS}

        self._touch_last_login(user['id'])
        logger.info(f"User {email} authenticated")

        return True, {
            'id': user['id'],
            'email': user['email'],
            'role': user['role'],
            'full_name': user['full_name'] or user['email'],
            'login_time': datetime.now(),
        }

    def _find_user(self, email: str) -> Optional[Dict]:
        rows = execute_query(
            """
            SELECT id, email, full_name, password_hash, password_salt, role, is_active
            FROM users
            WHERE LOWER(email) = :email
            """,
            {'email': email},
            engine=self.engine,
        )
        return rows[0] if rows else None

    def _touch_last_login(self, user_id: str):
        # a failed timestamp update must not block the sign-in
        try:
            with get_transaction(self.engine) as conn:
                conn.execute(
                    text("UPDATE users SET last_login = :now WHERE id = :user_id"),
                    {'now': datetime.now().strftime('%Y-%m-%d %H:%M:%S'), 'user_id': user_id},
                )
        except Exception as e:
            logger.warning(f"Could not update last_login: {e}")

    # ==================== SESSION ====================

    def check_session(self) -> bool:
        """True while signed in and within SESSION_TIMEOUT_HOURS of login"""
        if not st.session_state.get('authenticated'):
            return False

        login_time = st.session_state.get('login_time')
        if login_time and datetime.now() - login_time > self.session_timeout:
            logger.info(f"Session expired for user: {st.session_state.get('user_email')}")
            self.logout()
            return False

        return True

    def login(self, user_info: Dict):
        st.session_state.authenticated = True
        st.session_state.user_id = user_info['id']
        st.session_state.user_email = user_info['email']
        st.session_state.user_role = user_info['role']
        st.session_state.user_fullname = user_info['full_name']
        st.session_state.login_time = user_info['login_time']
        st.session_state.debug_mode = config.is_feature_enabled("DEBUG_MODE")

        logger.info(f"User {user_info['email']} logged in")

    def logout(self):
        """Drop session keys and cached query results"""
        email = st.session_state.get('user_email', 'Unknown')

        for key in SESSION_KEYS:
            st.session_state.pop(key, None)

        st.cache_data.clear()
        logger.info(f"User {email} logged out")

    def get_user_display_name(self) -> str:
        return st.session_state.get('user_fullname') or st.session_state.get('user_email', 'Usuário')


__all__ = [
    'AuthManager',
]
