# ==============================================================================
# DATOS SEMILLA
# ==============================================================================
# Colecciones con las que arranca el proceso. Al reiniciar el servidor todo
# vuelve a este estado.
# ==============================================================================

import os
from typing import Any, Dict, List

from werkzeug.security import generate_password_hash

from menta_verde.models import AppPermissions


DEFAULT_ADMIN_PASSWORD = os.environ.get('MENTA_ADMIN_PASSWORD', 'admin1234')


def initial_users() -> Dict[str, Dict[str, Any]]:
    return {
        '1': {
            'id': '1',
            'username': 'admin',
            'email': 'admin@mentaverde.com',
            'password': generate_password_hash(DEFAULT_ADMIN_PASSWORD),
            'nombre': 'Administrador',
            'nombreCorto': 'Admin',
            'apellidoPaterno': 'Principal',
            'apellidoMaterno': 'Menta',
            'fechaNacimiento': '1990-01-01',
            'celular': '5512345678',
            'role': 'ADMIN',
        }
    }


def initial_sellers() -> Dict[str, Dict[str, Any]]:
    return {
        '1': {'id': '1', 'nombre': 'Admin Principal', 'nombreCorto': 'Admin',
              'usuario': 'admin_sales', 'password': '123', 'activo': True},
        '2': {'id': '2', 'nombre': 'Beatriz Solis', 'nombreCorto': 'Betty',
              'usuario': 'betty_01', 'password': '123', 'activo': True},
    }


def initial_customers() -> Dict[str, Dict[str, Any]]:
    return {
        '1': {
            'id': '1',
            'nombre': 'Tecnologías Globales S.A.',
            'email': 'contacto@tglobals.com',
            'telefono': '5544332211',
            'direccion': 'Av. Reforma 100, CDMX',
            'fechaNacimiento': '1985-05-15',
            'activo': True,
        }
    }


def initial_services() -> Dict[str, Dict[str, Any]]:
    return {
        '1': {'id': '1', 'nombre': 'Limpieza Facial Profunda', 'precio': 850.0,
              'descripcion': 'Tratamiento completo con exfoliación y mascarilla hidratante.',
              'activo': True},
        '2': {'id': '2', 'nombre': 'Masaje Relajante 60min', 'precio': 1200.0,
              'descripcion': 'Masaje corporal completo con aceites esenciales de menta.',
              'activo': True},
    }


def initial_permissions() -> Dict[str, bool]:
    return AppPermissions().to_dict()


def initial_tables() -> List[Dict[str, Any]]:
    return [
        {
            'name': 'usuarios',
            'columns': [
                {'name': 'id', 'type': 'INT', 'key': 'PRI', 'extra': 'AUTO_INCREMENT'},
                {'name': 'usuario', 'type': 'VARCHAR(50)'},
                {'name': 'email', 'type': 'VARCHAR(100)'},
            ],
        }
    ]
