from flask import Flask, request, session, jsonify
from functools import wraps
import os
import time
import uuid

# Sistema de profiling interno
from menta_verde.performance_logger import init_profiling, get_function_stats, get_log_summary

# ═══════════════════════════════════════════════════════════════════════════
# CONTENEDOR DE DEPENDENCIAS - Servicios y Repositorios
# ═══════════════════════════════════════════════════════════════════════════
# Las rutas solo traducen HTTP <-> servicios. Toda regla de negocio vive
# en services/.
# ═══════════════════════════════════════════════════════════════════════════
from menta_verde.app_container import get_container
from menta_verde.models import ViewMode
from menta_verde.services.user_service import LOGIN_ERROR, ProtectedAccountError

app = Flask(__name__)

# Mide rendimiento de rutas. Logs en MENTA_LOGS_DIR
init_profiling(app)

# ═══════════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════════
# SECRET_KEY: en producción DEBE definirse via variable de entorno
# Comando: export MENTA_SECRET_KEY="tu_clave_secreta_muy_larga_y_aleatoria"
_DEFAULT_SECRET = "menta_verde_dev_secret_key_change_in_production"
app.secret_key = os.environ.get("MENTA_SECRET_KEY") or _DEFAULT_SECRET

app.config.update(
    SESSION_COOKIE_HTTPONLY=True,
    SESSION_COOKIE_SECURE=False,       # True solo detrás de HTTPS
    SESSION_COOKIE_SAMESITE='Lax',
    PERMANENT_SESSION_LIFETIME=86400,  # 24 horas
    # Pausas simuladas de acceso y recuperación (segundos)
    AUTH_DELAY_SECONDS=float(os.environ.get('MENTA_AUTH_DELAY', '1.2')),
    RESET_DELAY_SECONDS=float(os.environ.get('MENTA_RESET_DELAY', '1.5')),
)

MUTATING_METHODS = frozenset(['POST', 'PUT', 'PATCH', 'DELETE'])


# ═══════════════════════════════════════════════════════════════════════════════
# DECORADORES Y RESPUESTAS
# ═══════════════════════════════════════════════════════════════════════════════

def _error(message, status=400):
    return jsonify({'ok': False, 'error': message}), status


def _result(result, status=200):
    """Traduce el dict de un servicio a una respuesta JSON (400 si falló)."""
    if not result.get('ok'):
        return jsonify(result), 400
    return jsonify(result), status


def _json_body():
    """Cuerpo JSON si es un objeto; cualquier otra cosa cuenta como vacío."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _payload():
    """Cuerpo JSON sin el token CSRF."""
    return {k: v for k, v in _json_body().items() if k != 'csrf_token'}


def _delay(key):
    seconds = app.config.get(key, 0)
    if seconds:
        time.sleep(seconds)


def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if "user" not in session:
            return _error("Debes iniciar sesión.", 401)
        return f(*args, **kwargs)
    return wrapper


def role_required(role_name):
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if session.get("role") != role_name:
                return _error("Permiso denegado.", 403)
            return f(*args, **kwargs)
        return wrapper
    return deco


def view_required(view):
    """Exige que el rol en sesión pueda abrir la pantalla indicada."""
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            permissions = get_container().permissions_service
            if not permissions.can_access(session.get("role"), view):
                return _error("Permiso denegado.", 403)
            return f(*args, **kwargs)
        return wrapper
    return deco


def generate_csrf_token():
    if 'csrf_token' not in session:
        session['csrf_token'] = uuid.uuid4().hex
    return session['csrf_token']


def verify_csrf(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if request.method in MUTATING_METHODS:
            token = session.get('csrf_token')
            sent = (
                request.headers.get('X-CSRF-Token') or
                request.headers.get('X-CSRFToken') or
                request.form.get('csrf_token')
            )
            if not sent and request.is_json:
                sent = _json_body().get('csrf_token')

            if not token or not sent or token != sent:
                return _error("CSRF token inválido", 403)
        return f(*args, **kwargs)
    return wrapper


@app.after_request
def set_security_headers(response):
    response.headers['X-Frame-Options'] = 'DENY'
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['Referrer-Policy'] = 'no-referrer-when-downgrade'
    response.headers['Permissions-Policy'] = 'geolocation=(), microphone=()'
    if request.is_secure:
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
    return response


@app.errorhandler(ProtectedAccountError)
def handle_protected_account(error):
    return _error(str(error), 400)


@app.errorhandler(404)
def handle_not_found(error):
    return _error("Recurso no encontrado", 404)


# ═══════════════════════════════════════════════════════════════════════════════
# SESIÓN: acceso, registro, recuperación
# ═══════════════════════════════════════════════════════════════════════════════

def _session_payload():
    container = get_container()
    user = None
    views = []
    if "user_id" in session:
        user = container.user_service.get_user(session["user_id"])
        views = container.permissions_service.visible_views(session.get("role"))
    return {
        'csrf_token': generate_csrf_token(),
        'user': user,
        'views': views,
    }


@app.route("/api/session", methods=["GET"])
def api_session():
    return jsonify(_session_payload())


@app.route("/api/login", methods=["POST"])
@verify_csrf
def api_login():
    data = _payload()
    _delay('AUTH_DELAY_SECONDS')

    user = get_container().user_service.authenticate(
        (data.get("identifier") or data.get("username") or "").strip(),
        data.get("password") or ""
    )
    if not user:
        return _error(LOGIN_ERROR, 401)

    session.permanent = True
    session["user"] = user["username"]
    session["user_id"] = user["id"]
    session["role"] = user["role"]
    return jsonify({'ok': True, **_session_payload()})


@app.route("/api/logout", methods=["POST"])
@login_required
@verify_csrf
def api_logout():
    get_container().user_service.logout(session.get("user"))
    session.clear()
    return jsonify({'ok': True, 'mensaje': 'Sesión cerrada.'})


@app.route("/api/register", methods=["POST"])
@verify_csrf
def api_register():
    _delay('AUTH_DELAY_SECONDS')
    return _result(get_container().user_service.register(_payload()), 201)


@app.route("/api/forgot-password", methods=["POST"])
@verify_csrf
def api_forgot_password():
    _delay('RESET_DELAY_SECONDS')
    return _result(get_container().user_service.request_password_reset(_payload().get("email")))


@app.route("/api/dashboard", methods=["GET"])
@login_required
def api_dashboard():
    container = get_container()
    user = container.user_service.get_user(session["user_id"]) or {'username': session["user"]}
    return jsonify(container.dashboard_service.build(user))


# ═══════════════════════════════════════════════════════════════════════════════
# USUARIOS Y PERMISOS (solo ADMIN)
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/api/users", methods=["GET"])
@login_required
@role_required("ADMIN")
def api_users():
    return jsonify(get_container().user_service.get_all_users())


@app.route("/api/users", methods=["POST"])
@login_required
@role_required("ADMIN")
@verify_csrf
def api_add_user():
    return _result(get_container().user_service.add_user(session["user"], _payload()), 201)


@app.route("/api/users/<user_id>", methods=["PUT"])
@login_required
@role_required("ADMIN")
@verify_csrf
def api_update_user(user_id):
    service = get_container().user_service
    if service.get_user(user_id) is None:
        return _error("Usuario no encontrado", 404)
    result = service.update_user(session["user"], user_id, _payload())
    if result.get('ok') and user_id == session.get("user_id"):
        session["role"] = result['user']['role']
    return _result(result)


@app.route("/api/permissions", methods=["GET"])
@login_required
def api_permissions():
    return jsonify(get_container().permissions_service.get_permissions())


@app.route("/api/permissions", methods=["PUT"])
@login_required
@role_required("ADMIN")
@verify_csrf
def api_update_permissions():
    return _result(get_container().permissions_service.update(session["user"], _payload()))


@app.route("/api/permissions/<key>/toggle", methods=["POST"])
@login_required
@role_required("ADMIN")
@verify_csrf
def api_toggle_permission(key):
    return _result(get_container().permissions_service.toggle(session["user"], key))


# ═══════════════════════════════════════════════════════════════════════════════
# VENDEDORES
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/api/sellers", methods=["GET"])
@login_required
def api_sellers():
    service = get_container().seller_service
    if request.args.get("active") == "1":
        return jsonify(service.list_active())
    return jsonify(service.list_sellers())


@app.route("/api/sellers", methods=["POST"])
@login_required
@view_required(ViewMode.SELLERS_MANAGER)
@verify_csrf
def api_add_seller():
    return _result(get_container().seller_service.add_seller(session["user"], _payload()), 201)


@app.route("/api/sellers/<seller_id>", methods=["PUT"])
@login_required
@view_required(ViewMode.SELLERS_MANAGER)
@verify_csrf
def api_update_seller(seller_id):
    service = get_container().seller_service
    if service.get_seller(seller_id) is None:
        return _error("Vendedor no encontrado", 404)
    return _result(service.update_seller(session["user"], seller_id, _payload()))


@app.route("/api/sellers/<seller_id>/toggle", methods=["POST"])
@login_required
@view_required(ViewMode.SELLERS_MANAGER)
@verify_csrf
def api_toggle_seller(seller_id):
    service = get_container().seller_service
    if service.get_seller(seller_id) is None:
        return _error("Vendedor no encontrado", 404)
    return _result(service.toggle_seller(session["user"], seller_id))


# ═══════════════════════════════════════════════════════════════════════════════
# CLIENTES
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/api/customers", methods=["GET"])
@login_required
def api_customers():
    return jsonify(get_container().customer_service.search(request.args.get("q", "")))


@app.route("/api/customers/search", methods=["GET"])
@login_required
def api_customers_pick():
    """Sugerencias del selector de cliente (ventas y agenda)."""
    return jsonify(get_container().customer_service.pick(request.args.get("q", "")))


@app.route("/api/customers", methods=["POST"])
@login_required
@view_required(ViewMode.CUSTOMERS_MANAGER)
@verify_csrf
def api_add_customer():
    return _result(get_container().customer_service.add_customer(session["user"], _payload()), 201)


@app.route("/api/customers/quick", methods=["POST"])
@login_required
@view_required(ViewMode.SALES_FORM)
@verify_csrf
def api_quick_customer():
    """Alta rápida desde la venta; el cliente queda seleccionado."""
    data = _payload()
    result = get_container().customer_service.quick_create(
        session["user"],
        data.get("nombre"),
        data.get("telefono"),
        data.get("email", "")
    )
    if result.get('ok'):
        customer = result['customer']
        session["cliente"] = {'id': customer['id'], 'nombre': customer['nombre']}
    return _result(result, 201)


@app.route("/api/customers/<customer_id>", methods=["PUT"])
@login_required
@view_required(ViewMode.CUSTOMERS_MANAGER)
@verify_csrf
def api_update_customer(customer_id):
    service = get_container().customer_service
    if service.get_customer(customer_id) is None:
        return _error("Cliente no encontrado", 404)
    return _result(service.update_customer(session["user"], customer_id, _payload()))


@app.route("/api/customers/<customer_id>/toggle", methods=["POST"])
@login_required
@view_required(ViewMode.CUSTOMERS_MANAGER)
@verify_csrf
def api_toggle_customer(customer_id):
    service = get_container().customer_service
    if service.get_customer(customer_id) is None:
        return _error("Cliente no encontrado", 404)
    return _result(service.toggle_customer(session["user"], customer_id))


# ═══════════════════════════════════════════════════════════════════════════════
# CATÁLOGO DE SERVICIOS
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/api/services", methods=["GET"])
@login_required
def api_services():
    return jsonify(get_container().catalog_service.search(
        request.args.get("q", ""),
        only_active=request.args.get("active") == "1"
    ))


@app.route("/api/services", methods=["POST"])
@login_required
@view_required(ViewMode.SERVICES_MANAGER)
@verify_csrf
def api_add_service():
    return _result(get_container().catalog_service.add_service(session["user"], _payload()), 201)


@app.route("/api/services/<service_id>", methods=["PUT"])
@login_required
@view_required(ViewMode.SERVICES_MANAGER)
@verify_csrf
def api_update_service(service_id):
    service = get_container().catalog_service
    if service.get_service(service_id) is None:
        return _error("Servicio no encontrado", 404)
    return _result(service.update_service(session["user"], service_id, _payload()))


@app.route("/api/services/<service_id>/toggle", methods=["POST"])
@login_required
@view_required(ViewMode.SERVICES_MANAGER)
@verify_csrf
def api_toggle_service(service_id):
    service = get_container().catalog_service
    if service.get_service(service_id) is None:
        return _error("Servicio no encontrado", 404)
    return _result(service.toggle_service(session["user"], service_id))


# ═══════════════════════════════════════════════════════════════════════════════
# AGENDA
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/api/appointments", methods=["GET"])
@login_required
@view_required(ViewMode.CALENDAR)
def api_appointments():
    return jsonify(get_container().appointment_service.for_date(request.args.get("date")))


@app.route("/api/appointments", methods=["POST"])
@login_required
@view_required(ViewMode.CALENDAR)
@verify_csrf
def api_add_appointment():
    data = _payload()
    return _result(get_container().appointment_service.create(
        session["user"],
        data.get("customerId"),
        data.get("serviceId"),
        day=data.get("date"),
        time=data.get("time"),
        notes=data.get("notes", "")
    ), 201)


@app.route("/api/appointments/<appointment_id>", methods=["PUT"])
@login_required
@view_required(ViewMode.CALENDAR)
@verify_csrf
def api_update_appointment(appointment_id):
    service = get_container().appointment_service
    if service.get_appointment(appointment_id) is None:
        return _error("Cita no encontrada", 404)
    return _result(service.update(session["user"], {**_payload(), 'id': appointment_id}))


@app.route("/api/appointments/<appointment_id>/reminder", methods=["GET"])
@login_required
@view_required(ViewMode.CALENDAR)
def api_appointment_reminder(appointment_id):
    link = get_container().appointment_service.reminder_link(appointment_id)
    if link is None:
        return _error("Cita no encontrada", 404)
    return jsonify({'ok': True, 'url': link})


@app.route("/api/calendar/<int:year>/<int:month>", methods=["GET"])
@login_required
@view_required(ViewMode.CALENDAR)
def api_calendar(year, month):
    if not 1 <= month <= 12:
        return _error("Mes inválido")
    return jsonify({
        'year': year,
        'month': month,
        'cells': get_container().appointment_service.month_grid(year, month),
    })


# ═══════════════════════════════════════════════════════════════════════════════
# CARRITO
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/api/carrito", methods=["GET"])
@login_required
@view_required(ViewMode.SALES_FORM)
def api_carrito():
    return jsonify(get_container().cart_service.get_cart())


@app.route("/api/carrito/agregar", methods=["POST"])
@login_required
@view_required(ViewMode.SALES_FORM)
@verify_csrf
def api_carrito_agregar():
    return _result(get_container().cart_service.add_service(_payload().get("serviceId")))


@app.route("/api/carrito/cantidad", methods=["POST"])
@login_required
@view_required(ViewMode.SALES_FORM)
@verify_csrf
def api_carrito_cantidad():
    data = _payload()
    return _result(get_container().cart_service.update_quantity(data.get("serviceId"), data.get("cantidad")))


@app.route("/api/carrito/eliminar", methods=["POST"])
@login_required
@view_required(ViewMode.SALES_FORM)
@verify_csrf
def api_carrito_eliminar():
    return _result(get_container().cart_service.remove_service(_payload().get("serviceId")))


@app.route("/api/carrito/limpiar", methods=["POST"])
@login_required
@view_required(ViewMode.SALES_FORM)
@verify_csrf
def api_carrito_limpiar():
    return _result(get_container().cart_service.clear_cart())


# ═══════════════════════════════════════════════════════════════════════════════
# VENTAS
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/api/ventas/cliente", methods=["POST"])
@login_required
@view_required(ViewMode.SALES_FORM)
@verify_csrf
def api_ventas_cliente():
    """Selecciona (o quita con customerId vacío) el cliente de la venta."""
    customer_id = _payload().get("customerId")
    if not customer_id:
        session.pop("cliente", None)
        return jsonify({'ok': True, 'cliente': None})

    customer = get_container().customer_service.get_customer(customer_id)
    if customer is None:
        return _error("Cliente no encontrado", 404)
    if not customer.get('activo', True):
        return _error("El cliente está inactivo")
    session["cliente"] = {'id': customer['id'], 'nombre': customer['nombre']}
    return jsonify({'ok': True, 'cliente': session["cliente"]})


@app.route("/api/ventas/resumen", methods=["POST"])
@login_required
@view_required(ViewMode.SALES_FORM)
@verify_csrf
def api_ventas_resumen():
    """Total pagado, etiqueta de método y subtotal del carrito, sin registrar."""
    container = get_container()
    data = _payload()
    summary = container.payment_service.summarize(data, data.get("importeTerminal"))
    summary['subtotalServicios'] = container.cart_service.get_cart()['subtotal']
    return jsonify({'ok': True, **summary})


@app.route("/api/ventas", methods=["POST"])
@login_required
@view_required(ViewMode.SALES_FORM)
@verify_csrf
def api_ventas_registrar():
    container = get_container()
    cliente = session.get("cliente") or {}

    result = container.sales_service.submit_sale(
        session["user"],
        _payload(),
        cart_items=container.cart_service.get_cart_items(),
        cliente=cliente.get("nombre")
    )
    if not result.get('ok'):
        return _result(result)

    # Venta registrada: limpiar carrito y cliente para la siguiente
    container.cart_service.clear_cart()
    session.pop("cliente", None)
    return jsonify(result), 201


@app.route("/api/ventas", methods=["GET"])
@login_required
@view_required(ViewMode.SALES_FORM)
def api_ventas_historial():
    return jsonify(get_container().sales_service.history(
        request.args.get("q", ""),
        request.args.get("desde") or None,
        request.args.get("hasta") or None
    ))


@app.route("/api/folio", methods=["GET"])
@login_required
@view_required(ViewMode.SALES_FORM)
def api_folio():
    return jsonify({'folio': get_container().sales_service.next_folio()})


@app.route("/api/folio", methods=["PUT"])
@login_required
@view_required(ViewMode.SALES_FORM)
@verify_csrf
def api_set_folio():
    return _result(get_container().sales_service.set_folio(session["user"], _payload().get("folio")))


# ═══════════════════════════════════════════════════════════════════════════════
# ASISTENTE
# ═══════════════════════════════════════════════════════════════════════════════

def assistant_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not get_container().permissions_service.can_use_assistant(session.get("role")):
            return _error("Permiso denegado.", 403)
        return f(*args, **kwargs)
    return wrapper


@app.route("/api/asistente", methods=["GET"])
@login_required
@assistant_required
def api_asistente():
    service = get_container().assistant_service
    return jsonify({'messages': service.get_history(), 'pending': service.is_pending()})


@app.route("/api/asistente", methods=["POST"])
@login_required
@assistant_required
@verify_csrf
def api_asistente_enviar():
    return jsonify(get_container().assistant_service.send(_payload().get("message")))


@app.route("/api/asistente/reset", methods=["POST"])
@login_required
@assistant_required
@verify_csrf
def api_asistente_reset():
    return jsonify({'ok': True, 'messages': get_container().assistant_service.reset_history()})


# ═══════════════════════════════════════════════════════════════════════════════
# DISEÑADOR DE ESQUEMA
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/api/esquema", methods=["GET"])
@login_required
@view_required(ViewMode.DATABASE)
def api_esquema():
    service = get_container().schema_service
    return jsonify({'tables': service.list_tables(), 'sql': service.generate_sql()})


@app.route("/api/esquema/tablas", methods=["POST"])
@login_required
@view_required(ViewMode.DATABASE)
@verify_csrf
def api_esquema_agregar_tabla():
    return _result(get_container().schema_service.add_table(_payload().get("name")), 201)


@app.route("/api/esquema/tablas/<int:index>", methods=["DELETE"])
@login_required
@view_required(ViewMode.DATABASE)
@verify_csrf
def api_esquema_eliminar_tabla(index):
    return _result(get_container().schema_service.delete_table(index))


@app.route("/api/esquema/tablas/<int:index>/columnas", methods=["POST"])
@login_required
@view_required(ViewMode.DATABASE)
@verify_csrf
def api_esquema_agregar_columna(index):
    return _result(get_container().schema_service.add_column(index), 201)


@app.route("/api/esquema/tablas/<int:index>/columnas/<int:col_index>", methods=["PUT"])
@login_required
@view_required(ViewMode.DATABASE)
@verify_csrf
def api_esquema_editar_columna(index, col_index):
    data = _payload()
    return _result(get_container().schema_service.update_column(
        index, col_index, data.get("field"), data.get("value")
    ))


@app.route("/api/esquema/tablas/<int:index>/columnas/<int:col_index>", methods=["DELETE"])
@login_required
@view_required(ViewMode.DATABASE)
@verify_csrf
def api_esquema_eliminar_columna(index, col_index):
    return _result(get_container().schema_service.delete_column(index, col_index))


@app.route("/api/esquema/sugerencia", methods=["POST"])
@login_required
@view_required(ViewMode.DATABASE)
@verify_csrf
def api_esquema_sugerencia():
    return _result(get_container().schema_service.suggest_table())


# ═══════════════════════════════════════════════════════════════════════════════
# ACTIVIDAD Y RENDIMIENTO (solo ADMIN)
# ═══════════════════════════════════════════════════════════════════════════════

@app.route("/api/actividad", methods=["GET"])
@login_required
@role_required("ADMIN")
def api_actividad():
    return jsonify(get_container().audit_service.get_logs(
        request.args.get("q", ""),
        request.args.get("tipo") or None
    ))


@app.route("/api/rendimiento", methods=["GET"])
@login_required
@role_required("ADMIN")
def api_rendimiento():
    return jsonify({'functions': get_function_stats(), 'logs': get_log_summary()})


if __name__ == "__main__":
    DEBUG = os.environ.get('FLASK_DEBUG', '0') == '1'
    HOST = os.environ.get('FLASK_HOST', '127.0.0.1')
    PORT = int(os.environ.get('FLASK_PORT', 5000))

    if not DEBUG:
        print(f"\n{'='*50}")
        print(f"  Menta Verde en http://{HOST}:{PORT}")
        print(f"{'='*50}\n")

    app.run(host=HOST, port=PORT, debug=DEBUG)
