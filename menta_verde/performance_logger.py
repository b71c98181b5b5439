# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide rendimiento de rutas y funciones sin afectar la experiencia del usuario.
# Guarda logs legibles en logs/ para análisis humano.
#
# ACTIVAR/DESACTIVAR: variable de entorno MENTA_ENABLE_PROFILING (1/0)
# DIRECTORIO: variable de entorno MENTA_LOGS_DIR
# ==============================================================================

import os
import time
import threading
from datetime import datetime
from functools import wraps
from collections import defaultdict

from flask import g, request, session

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

ENABLE_PROFILING = os.environ.get('MENTA_ENABLE_PROFILING', '1') == '1'

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

LOGS_DIR = os.environ.get(
    'MENTA_LOGS_DIR',
    os.path.join(os.path.dirname(os.path.abspath(__file__)), 'logs')
)

PERFORMANCE_LOG = os.path.join(LOGS_DIR, 'performance.log')
SLOW_ROUTES_LOG = os.path.join(LOGS_DIR, 'slow_routes.log')
SLOW_FUNCTIONS_LOG = os.path.join(LOGS_DIR, 'slow_functions.log')

# Mapeo de rutas a nombres legibles (para logs más humanos)
ROUTE_NAMES = {
    # Sesión
    'GET /api/session': 'Consultar sesión',
    'POST /api/login': 'Iniciar sesión',
    'POST /api/logout': 'Cerrar sesión',
    'POST /api/register': 'Registrar cuenta',
    'POST /api/forgot-password': 'Recuperar contraseña',

    # Panel
    'GET /api/dashboard': 'Ver panel principal',

    # Usuarios y permisos
    'GET /api/users': 'Ver usuarios',
    'POST /api/users': 'Crear usuario',
    'PUT /api/users/<user_id>': 'Editar usuario',
    'GET /api/permissions': 'Ver permisos',
    'PUT /api/permissions': 'Guardar permisos',
    'POST /api/permissions/<key>/toggle': 'Cambiar permiso',

    # Catálogos
    'POST /api/sellers': 'Crear vendedor',
    'PUT /api/sellers/<seller_id>': 'Editar vendedor',
    'POST /api/sellers/<seller_id>/toggle': 'Activar/desactivar vendedor',
    'POST /api/customers': 'Crear cliente',
    'POST /api/customers/quick': 'Alta rápida de cliente',
    'PUT /api/customers/<customer_id>': 'Editar cliente',
    'POST /api/customers/<customer_id>/toggle': 'Activar/desactivar cliente',
    'POST /api/services': 'Crear servicio',
    'PUT /api/services/<service_id>': 'Editar servicio',
    'POST /api/services/<service_id>/toggle': 'Activar/desactivar servicio',

    # Agenda
    'GET /api/appointments': 'Ver citas del día',
    'POST /api/appointments': 'Agendar cita',
    'PUT /api/appointments/<appointment_id>': 'Editar cita',
    'GET /api/appointments/<appointment_id>/reminder': 'Recordatorio WhatsApp',
    'GET /api/calendar/<int:year>/<int:month>': 'Ver calendario',

    # Carrito
    'GET /api/carrito': 'Ver carrito',
    'POST /api/carrito/agregar': 'Agregar servicio al carrito',
    'POST /api/carrito/cantidad': 'Cambiar cantidad',
    'POST /api/carrito/eliminar': 'Eliminar del carrito',
    'POST /api/carrito/limpiar': 'Vaciar carrito',

    # Ventas
    'POST /api/ventas': 'Registrar venta',
    'GET /api/ventas': 'Ver historial de ventas',
    'POST /api/ventas/resumen': 'Resumen de pago',
    'POST /api/ventas/cliente': 'Seleccionar cliente',
    'GET /api/folio': 'Ver folio siguiente',
    'PUT /api/folio': 'Cambiar folio',

    # Asistente y esquema
    'POST /api/asistente': 'Preguntar al asistente',
    'POST /api/esquema/sugerencia': 'Sugerencia SQL',

    # Auditoría
    'GET /api/actividad': 'Ver registro de actividad',
}


# ═══════════════════════════════════════════════════════════════════════════
# ESCRITURA DE LOGS
# ═══════════════════════════════════════════════════════════════════════════

if ENABLE_PROFILING:
    os.makedirs(LOGS_DIR, exist_ok=True)

# {nombre: {calls, total_time, max_time}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()
_write_lock = threading.Lock()

RULE = '─' * 40


def slow_level(time_ms):
    """'CRITICAL', 'WARNING' o None según los umbrales."""
    if time_ms >= THRESHOLD_CRITICAL:
        return 'CRITICAL'
    if time_ms >= THRESHOLD_WARNING:
        return 'WARNING'
    return None


def _write_entry(filepath, header, *lines):
    stamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    body = '\n'.join(lines)
    try:
        with _write_lock:
            with open(filepath, 'a', encoding='utf-8') as f:
                f.write(f"\n{header} {stamp}\n{RULE}\n{body}\n")
    except OSError:
        pass  # Un log que falla no debe tumbar la petición


def route_name(method, rule):
    """Nombre legible de la ruta, o 'MÉTODO regla' si no tiene uno."""
    key = f"{method} {rule}"
    return ROUTE_NAMES.get(key, key)


# ═══════════════════════════════════════════════════════════════════════════
# RUTAS
# ═══════════════════════════════════════════════════════════════════════════

def init_profiling(app):
    """
    Registra hooks before/after request que miden cada petición.

    Cada petición va a performance.log; las que pasan los umbrales se
    repiten en slow_routes.log con su severidad.
    """
    if not ENABLE_PROFILING:
        return

    @app.before_request
    def _start_timer():
        g.start_time = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if not hasattr(g, 'start_time'):
            return response

        elapsed = (time.perf_counter() - g.start_time) * 1000
        rule = str(request.url_rule) if request.url_rule else request.path
        action = route_name(request.method, rule)
        user = session.get('user') or 'anónimo'
        detail = f"{request.method} {request.path}"

        _write_entry(
            PERFORMANCE_LOG, '[PERFORMANCE]',
            f"Acción: {action}", f"Usuario: {user}", f"Ruta: {detail}",
            f"Tiempo: {elapsed:.0f} ms",
        )

        level = slow_level(elapsed)
        if level:
            threshold = THRESHOLD_CRITICAL if level == 'CRITICAL' else THRESHOLD_WARNING
            _write_entry(
                SLOW_ROUTES_LOG, f"[{level}]",
                f"Ruta lenta: {action}", f"Usuario: {user}", f"Detalle: {detail}",
                f"Tiempo: {elapsed:.0f} ms (umbral: {threshold} ms)",
            )

        return response


# ═══════════════════════════════════════════════════════════════════════════
# FUNCIONES CLAVE
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(name):
    """
    Decorador que acumula llamadas y tiempos de una operación de negocio.

    Uso:
        @profile_function(name="Registrar venta")
        def submit_sale(...):
            ...
    """
    def decorator(fn):
        if not ENABLE_PROFILING:
            return fn

        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                with _stats_lock:
                    stats = _function_stats[name]
                    stats['calls'] += 1
                    stats['total_time'] += elapsed_ms
                    stats['max_time'] = max(stats['max_time'], elapsed_ms)

                level = slow_level(elapsed_ms)
                if level:
                    _write_entry(
                        SLOW_FUNCTIONS_LOG, f"[{level}]",
                        f"Función: {name}", f"Tiempo: {elapsed_ms:.0f} ms",
                    )

        return wrapper
    return decorator


# ═══════════════════════════════════════════════════════════════════════════
# REPORTE (pantalla de rendimiento)
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """{nombre: {calls, avg_time, max_time}} en milisegundos."""
    with _stats_lock:
        return {
            fn_name: {
                'calls': stats['calls'],
                'avg_time': round(stats['total_time'] / stats['calls'], 2) if stats['calls'] else 0,
                'max_time': round(stats['max_time'], 2),
            }
            for fn_name, stats in _function_stats.items()
        }


def get_log_summary():
    """
    Tamaño y líneas de cada archivo de log.

    Returns:
        dict: {archivo: {exists, size_kb, lines}}
    """
    summary = {}
    for key, path in (('performance', PERFORMANCE_LOG),
                      ('slow_routes', SLOW_ROUTES_LOG),
                      ('slow_functions', SLOW_FUNCTIONS_LOG)):
        if not os.path.exists(path):
            summary[key] = {'exists': False, 'size_kb': 0, 'lines': 0}
            continue
        with open(path, 'r', encoding='utf-8') as f:
            lines = sum(1 for _ in f)
        summary[key] = {
            'exists': True,
            'size_kb': round(os.path.getsize(path) / 1024, 2),
            'lines': lines,
        }
    return summary
