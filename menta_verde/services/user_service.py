# ==============================================================================
# SERVICIO DE USUARIOS
# ==============================================================================
# Centraliza la lógica de usuarios: acceso, registro, alta por admin,
# edición y roles.
#
# REGLA: siempre debe quedar al menos un ADMIN. No se puede degradar ni
# eliminar al último administrador.
# ==============================================================================

from typing import Any, Dict, List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from menta_verde.models import User, UserRole, new_timestamp_id
from menta_verde.repositories.user_repository import UserRepository
from menta_verde.services.audit_service import AuditService


class ProtectedAccountError(Exception):
    """Se intentó dejar el sistema sin administradores."""
    pass


LOGIN_ERROR = 'Credenciales incorrectas. Verifica tu usuario y contraseña.'
RESET_SENT = 'Si el correo está registrado, recibirás instrucciones para restablecer tu contraseña.'

# Campos editables desde la pantalla de usuarios
EDITABLE_FIELDS = (
    'username', 'email', 'nombre', 'nombreCorto', 'apellidoPaterno',
    'apellidoMaterno', 'fechaNacimiento', 'celular', 'role',
)


class UserService:
    """
    Servicio para gestión de usuarios.

    Responsabilidades:
    - Autenticación por usuario o correo
    - Registro público (siempre rol USER)
    - Alta y edición desde la pantalla de administración
    - Protección del último ADMIN
    """

    ROLE_ADMIN = UserRole.ADMIN.value
    ROLE_USER = UserRole.USER.value
    VALID_ROLES = frozenset([ROLE_ADMIN, ROLE_USER])

    def __init__(
        self,
        user_repo: UserRepository,
        audit_service: AuditService = None
    ):
        self.user_repo = user_repo
        self.audit_service = audit_service

    @staticmethod
    def _public(user: Dict[str, Any]) -> Dict[str, Any]:
        """Copia del usuario sin el hash de contraseña."""
        return {k: v for k, v in user.items() if k != 'password'}

    # =========================================================================
    # AUTENTICACIÓN
    # =========================================================================

    def authenticate(self, identifier: str, password: str) -> Optional[Dict[str, Any]]:
        """
        Autentica un usuario por username o email.

        Args:
            identifier: Nombre de usuario o correo
            password: Contraseña en texto plano

        Returns:
            Datos públicos del usuario si es válido, None si no
        """
        if not identifier or not password:
            return None

        user = self.user_repo.get_by_login(identifier)
        if not user:
            return None

        if not check_password_hash(user.get('password', ''), password):
            return None

        if self.audit_service:
            self.audit_service.log_user_login(user['username'])

        return self._public(user)

    def logout(self, username: str) -> None:
        if self.audit_service:
            self.audit_service.log_user_logout(username)

    def request_password_reset(self, email: str) -> Dict[str, Any]:
        """
        Recuperación de contraseña simulada: no se envía ningún correo y la
        respuesta es la misma exista o no la cuenta.
        """
        email = (email or '').strip()
        if not email:
            return {'ok': False, 'error': 'El correo es obligatorio'}
        return {'ok': True, 'mensaje': RESET_SENT}

    # =========================================================================
    # CONSULTA
    # =========================================================================

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        user = self.user_repo.get_user(user_id)
        return self._public(user) if user else None

    def get_all_users(self) -> List[Dict[str, Any]]:
        return [self._public(u) for u in self.user_repo.list_all()]

    # =========================================================================
    # ALTAS
    # =========================================================================

    def _build_user(self, data: Dict[str, Any], username: str, role: str) -> Dict[str, Any]:
        user = User.from_dict({**data, 'id': new_timestamp_id(), 'username': username, 'role': role})
        user.password_hash = generate_password_hash(data['password'])
        return user.to_dict(include_password=True)

    def _check_unique(self, username: str, email: str, exclude_id: str = None) -> Optional[str]:
        for user in self.user_repo.list_all():
            if user.get('id') == exclude_id:
                continue
            if user.get('username') == username:
                return f'El usuario "{username}" ya existe'
            if email and user.get('email') == email:
                return f'El correo "{email}" ya está registrado'
        return None

    def register(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Registro público de una cuenta.

        El username se deriva de la parte local del correo y el rol es
        siempre USER.

        Returns:
            Dict con ok, user o error
        """
        data = data or {}
        email = (data.get('email') or '').strip()
        if not (data.get('nombre') or '').strip() or not email or not data.get('password'):
            return {'ok': False, 'error': 'Nombre, correo y contraseña son obligatorios'}

        username = email.split('@')[0]
        error = self._check_unique(username, email)
        if error:
            return {'ok': False, 'error': error}

        user = self._build_user({**data, 'email': email}, username, self.ROLE_USER)
        self.user_repo.create_user(user)

        if self.audit_service:
            self.audit_service.log_user_change(username, username, 'registrado')

        return {'ok': True, 'user': self._public(user)}

    def add_user(self, actor: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Alta de usuario desde la pantalla de administración.

        Args:
            actor: Admin que crea el usuario
            data: username, email y password obligatorios; role opcional
        """
        data = data or {}
        username = (data.get('username') or '').strip()
        email = (data.get('email') or '').strip()
        if not username or not email or not data.get('password'):
            return {'ok': False, 'error': 'Por favor completa los campos obligatorios.'}

        role = data.get('role') or self.ROLE_USER
        if role not in self.VALID_ROLES:
            return {'ok': False, 'error': f'Rol inválido: {role}'}

        error = self._check_unique(username, email)
        if error:
            return {'ok': False, 'error': error}

        user = self._build_user({**data, 'email': email}, username, role)
        self.user_repo.create_user(user)

        if self.audit_service:
            self.audit_service.log_user_change(actor, username, 'creado')

        return {'ok': True, 'user': self._public(user)}

    # =========================================================================
    # EDICIÓN
    # =========================================================================

    def update_user(self, actor: str, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """
        Reemplaza los campos editables de un usuario (match por id).

        Raises:
            ProtectedAccountError: si el cambio dejaría al sistema sin ADMIN
        """
        current = self.user_repo.get_user(user_id)
        if not current:
            return {'ok': False, 'error': 'Usuario no encontrado'}

        changes = changes or {}
        updates = {k: changes[k] for k in EDITABLE_FIELDS if k in changes}

        if 'role' in updates and updates['role'] not in self.VALID_ROLES:
            return {'ok': False, 'error': f"Rol inválido: {updates['role']}"}

        if (current.get('role') == self.ROLE_ADMIN
                and updates.get('role') == self.ROLE_USER
                and self.user_repo.count_admins() <= 1):
            raise ProtectedAccountError('No se puede degradar al último administrador')

        username = (updates.get('username', current.get('username')) or '').strip()
        email = (updates.get('email', current.get('email')) or '').strip()
        if not username or not email:
            return {'ok': False, 'error': 'Usuario y correo son obligatorios'}
        error = self._check_unique(username, email, exclude_id=user_id)
        if error:
            return {'ok': False, 'error': error}

        if changes.get('password'):
            updates['password'] = generate_password_hash(changes['password'])

        self.user_repo.update_user(user_id, updates)

        if self.audit_service:
            self.audit_service.log_user_change(actor, username, 'actualizado')

        return {'ok': True, 'user': self.get_user(user_id)}
