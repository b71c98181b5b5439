# ==============================================================================
# REPOSITORIO DE USUARIOS
# ==============================================================================
# Usuarios indexados por id: {id: {username, email, password, role, ...}}
# ==============================================================================

from typing import Any, Dict, List, Optional

from menta_verde.repositories.base import DictRepository


class UserRepository(DictRepository):
    """
    Repositorio para gestión de usuarios.

    El campo 'password' guarda el hash werkzeug, nunca texto plano.
    """

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.get_by_id(user_id)

    def get_by_login(self, identifier: str) -> Optional[Dict[str, Any]]:
        """
        Busca un usuario por nombre de usuario o por correo.

        Args:
            identifier: username o email tal como lo escribió el usuario

        Returns:
            Datos del usuario o None
        """
        if not identifier:
            return None
        ident = identifier.strip()
        for user in self.list_all():
            if user.get('username') == ident or user.get('email') == ident:
                return user
        return None

    def username_exists(self, username: str) -> bool:
        return self.find_by('username', username) is not None

    def email_exists(self, email: str) -> bool:
        return self.find_by('email', email) is not None

    def create_user(self, user_data: Dict[str, Any]) -> None:
        self.update(user_data['id'], user_data)

    def update_user(self, user_id: str, updates: Dict[str, Any]) -> bool:
        """
        Actualiza campos de un usuario.

        Returns:
            True si se actualizó
        """
        user = self.get_by_id(user_id)
        if user is None:
            return False
        user.update(updates)
        self.update(user_id, user)
        return True

    def get_users_by_role(self, role: str) -> List[Dict[str, Any]]:
        return self.find_all(lambda u: u.get('role') == role)

    def count_admins(self) -> int:
        return len(self.get_users_by_role('ADMIN'))
