# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio de Menta Verde.
# Los nombres de campo en to_dict() son los que viajan por la API JSON.
# ==============================================================================

import math
import time
import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


def new_timestamp_id() -> str:
    """Identificador opaco basado en la hora actual (ms) con sufijo aleatorio."""
    return f"{int(time.time() * 1000)}{uuid.uuid4().hex[:4]}"


def new_random_id() -> str:
    """Token aleatorio corto (9 caracteres)."""
    return uuid.uuid4().hex[:9]


def today_iso() -> str:
    return date.today().isoformat()


def to_float(value: Any, default: float = 0.0) -> float:
    """Convierte a float; valores vacíos, inválidos o no finitos se vuelven `default`."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return result if math.isfinite(result) else default


def to_text(value: Any) -> str:
    """Texto del valor; None se vuelve cadena vacía."""
    return '' if value is None else str(value)


# Cadenas que los formularios mandan como falso
FALSE_STRINGS = frozenset(['false', '0', 'no', 'off', ''])


def to_bool(value: Any, default: bool = True) -> bool:
    """Interpreta banderas que pueden llegar como bool, número o texto."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_STRINGS
    return bool(value)


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class UserRole(str, Enum):
    """Roles de usuario disponibles en el sistema."""
    ADMIN = "ADMIN"
    USER = "USER"


class AppointmentStatus(str, Enum):
    """Estados de una cita. Se asigna al crearla y no se transiciona."""
    PENDIENTE = "PENDIENTE"
    CONFIRMADA = "CONFIRMADA"
    CANCELADA = "CANCELADA"


class PaymentMethod(str, Enum):
    """Etiquetas de método de pago de una venta."""
    EFECTIVO = "EFECTIVO"
    TRANSFERENCIA = "TRANSFERENCIA"
    TARJETA = "TARJETA"
    MIXTO = "MIXTO"
    OTRO = "OTRO"


class ViewMode(str, Enum):
    """Pantallas de la consola."""
    LOGIN = "LOGIN"
    REGISTER = "REGISTER"
    FORGOT_PASSWORD = "FORGOT_PASSWORD"
    DASHBOARD = "DASHBOARD"
    DATABASE = "DATABASE"
    USERS_LIST = "USERS_LIST"
    PERMISSIONS = "PERMISSIONS"
    SALES_FORM = "SALES_FORM"
    SELLERS_MANAGER = "SELLERS_MANAGER"
    CUSTOMERS_MANAGER = "CUSTOMERS_MANAGER"
    SERVICES_MANAGER = "SERVICES_MANAGER"
    CALENDAR = "CALENDAR"


class AssistantContext(str, Enum):
    """Personalidad con la que responde el asistente."""
    SECURITY = "security"
    SQL = "sql"


# ==============================================================================
# USUARIOS Y PERMISOS
# ==============================================================================

@dataclass
class User:
    """
    Usuario de la consola.

    Attributes:
        id: Identificador opaco
        username: Nombre de acceso (único)
        email: Correo (también sirve para iniciar sesión)
        password_hash: Hash werkzeug de la contraseña
        role: ADMIN o USER; el rol decide qué pantallas se ven
    """
    id: str
    username: str
    email: str
    password_hash: str = ''
    nombre: str = ''
    nombre_corto: str = ''
    apellido_paterno: str = ''
    apellido_materno: str = ''
    fecha_nacimiento: str = ''
    celular: str = ''
    role: UserRole = UserRole.USER

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_dict(self, include_password: bool = False) -> Dict[str, Any]:
        d = {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'nombre': self.nombre,
            'nombreCorto': self.nombre_corto,
            'apellidoPaterno': self.apellido_paterno,
            'apellidoMaterno': self.apellido_materno,
            'fechaNacimiento': self.fecha_nacimiento,
            'celular': self.celular,
            'role': self.role.value if isinstance(self.role, Enum) else self.role,
        }
        if include_password:
            d['password'] = self.password_hash
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        try:
            role = UserRole(data.get('role', 'USER'))
        except ValueError:
            role = UserRole.USER
        return cls(
            id=str(data.get('id', '')),
            username=data.get('username', ''),
            email=data.get('email', ''),
            password_hash=data.get('password', ''),
            nombre=to_text(data.get('nombre')),
            nombre_corto=to_text(data.get('nombreCorto')),
            apellido_paterno=data.get('apellidoPaterno', ''),
            apellido_materno=data.get('apellidoMaterno', ''),
            fecha_nacimiento=data.get('fechaNacimiento', ''),
            celular=data.get('celular', ''),
            role=role,
        )


@dataclass
class AppPermissions:
    """Pantallas que los usuarios estándar pueden abrir."""
    show_database_designer: bool = True
    show_ai_assistant: bool = True
    show_analytics: bool = False
    show_sales_form: bool = True
    show_sellers_manager: bool = True
    show_customers_manager: bool = True
    show_services_manager: bool = True

    # Clave JSON -> atributo
    KEYS = {
        'showDatabaseDesigner': 'show_database_designer',
        'showAIAssistant': 'show_ai_assistant',
        'showAnalytics': 'show_analytics',
        'showSalesForm': 'show_sales_form',
        'showSellersManager': 'show_sellers_manager',
        'showCustomersManager': 'show_customers_manager',
        'showServicesManager': 'show_services_manager',
    }

    def to_dict(self) -> Dict[str, bool]:
        return {key: getattr(self, attr) for key, attr in self.KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppPermissions':
        perms = cls()
        for key, attr in cls.KEYS.items():
            if key in data:
                setattr(perms, attr, bool(data[key]))
        return perms


# ==============================================================================
# CATÁLOGOS: VENDEDORES, CLIENTES, SERVICIOS
# ==============================================================================

@dataclass
class Seller:
    """Personal de ventas. Solo los activos aparecen en la pantalla de ventas."""
    id: str
    nombre: str
    nombre_corto: str
    usuario: str
    password: str = ''
    activo: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'nombre': self.nombre,
            'nombreCorto': self.nombre_corto,
            'usuario': self.usuario,
            'activo': self.activo,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Seller':
        return cls(
            id=str(data.get('id', '')),
            nombre=to_text(data.get('nombre')),
            nombre_corto=to_text(data.get('nombreCorto')),
            usuario=to_text(data.get('usuario')),
            password=to_text(data.get('password')),
            activo=to_bool(data.get('activo'), True),
        )


@dataclass
class Customer:
    """Cliente del spa."""
    id: str
    nombre: str
    email: str = ''
    telefono: str = ''
    direccion: str = ''
    fecha_nacimiento: str = ''
    activo: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'nombre': self.nombre,
            'email': self.email,
            'telefono': self.telefono,
            'direccion': self.direccion,
            'fechaNacimiento': self.fecha_nacimiento,
            'activo': self.activo,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Customer':
        return cls(
            id=str(data.get('id', '')),
            nombre=to_text(data.get('nombre')),
            email=to_text(data.get('email')),
            telefono=to_text(data.get('telefono')),
            direccion=to_text(data.get('direccion')),
            fecha_nacimiento=to_text(data.get('fechaNacimiento')),
            activo=to_bool(data.get('activo'), True),
        )


@dataclass
class Service:
    """Servicio del catálogo (tratamiento, masaje, etc.)."""
    id: str
    nombre: str
    precio: float
    descripcion: str = ''
    activo: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'nombre': self.nombre,
            'precio': self.precio,
            'descripcion': self.descripcion,
            'activo': self.activo,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Service':
        return cls(
            id=str(data.get('id', '')),
            nombre=to_text(data.get('nombre')),
            precio=to_float(data.get('precio')),
            descripcion=to_text(data.get('descripcion')),
            activo=to_bool(data.get('activo'), True),
        )


# ==============================================================================
# CITAS
# ==============================================================================

@dataclass
class Appointment:
    """Cita: fecha + hora + servicio + cliente."""
    id: str
    customer_id: str
    customer_name: str
    phone: str
    date: str
    time: str
    service_id: str
    service_name: str
    status: AppointmentStatus = AppointmentStatus.PENDIENTE
    notes: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'customerId': self.customer_id,
            'customerName': self.customer_name,
            'phone': self.phone,
            'date': self.date,
            'time': self.time,
            'serviceId': self.service_id,
            'serviceName': self.service_name,
            'status': self.status.value if isinstance(self.status, Enum) else self.status,
            'notes': self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Appointment':
        try:
            status = AppointmentStatus(data.get('status', 'PENDIENTE'))
        except ValueError:
            status = AppointmentStatus.PENDIENTE
        return cls(
            id=str(data.get('id', '')),
            customer_id=str(data.get('customerId', '')),
            customer_name=data.get('customerName', ''),
            phone=data.get('phone', ''),
            date=data.get('date', ''),
            time=data.get('time', ''),
            service_id=str(data.get('serviceId', '')),
            service_name=data.get('serviceName', ''),
            status=status,
            notes=to_text(data.get('notes')),
        )


# ==============================================================================
# VENTAS
# ==============================================================================

@dataclass
class ServiceLineItem:
    """Renglón del carrito. subtotal = cantidad * precio_unitario siempre."""
    service_id: str
    nombre: str
    cantidad: int
    precio_unitario: float

    @property
    def subtotal(self) -> float:
        return round(self.cantidad * self.precio_unitario, 2)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'serviceId': self.service_id,
            'nombre': self.nombre,
            'cantidad': self.cantidad,
            'precioUnitario': self.precio_unitario,
            'subtotal': self.subtotal,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ServiceLineItem':
        return cls(
            service_id=str(data.get('serviceId', '')),
            nombre=to_text(data.get('nombre')),
            cantidad=int(data.get('cantidad', 0) or 0),
            precio_unitario=to_float(data.get('precioUnitario')),
        )


@dataclass
class PagoDetalle:
    """Reparto fijo de un pago entre efectivo, transferencia y tarjeta."""
    efectivo: float = 0.0
    transferencia: float = 0.0
    tarjeta: float = 0.0

    @property
    def total(self) -> float:
        return round(self.efectivo + self.transferencia + self.tarjeta, 2)

    def active_methods(self) -> List[str]:
        """Nombres de los métodos con monto mayor a cero, en orden fijo."""
        return [name for name, value in self.to_dict().items() if value > 0]

    def to_dict(self) -> Dict[str, float]:
        return {
            'efectivo': self.efectivo,
            'transferencia': self.transferencia,
            'tarjeta': self.tarjeta,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'PagoDetalle':
        data = data or {}
        return cls(
            efectivo=to_float(data.get('efectivo')),
            transferencia=to_float(data.get('transferencia')),
            tarjeta=to_float(data.get('tarjeta')),
        )


@dataclass(frozen=True)
class SaleRecord:
    """
    Venta registrada. Inmutable: es una foto de la transacción.

    Attributes:
        folio: Número secuencial mostrado en el recibo
        importe_bruto: Suma de los tres montos de pago al registrar
        importe_terminal: Monto reportado por la terminal de tarjeta
            (conciliación, no se suma al bruto)
        metodo_pago: Etiqueta derivada de los montos (EFECTIVO, MIXTO, ...)
        servicios: Copia del carrito al momento de la venta
    """
    id: str
    folio: int
    fecha: str
    vendedor: str
    vendedor_short: str
    importe_bruto: float
    importe_terminal: float
    detalles_pago: PagoDetalle
    metodo_pago: str
    cliente: Optional[str] = None
    servicios: tuple = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'folio': self.folio,
            'fecha': self.fecha,
            'vendedor': self.vendedor,
            'vendedorShort': self.vendedor_short,
            'cliente': self.cliente,
            'importeBruto': self.importe_bruto,
            'importeTerminal': self.importe_terminal,
            'detallesPago': self.detalles_pago.to_dict(),
            'metodoPago': self.metodo_pago,
            'servicios': [item.to_dict() for item in self.servicios],
        }


# ==============================================================================
# DISEÑADOR DE ESQUEMA Y CHAT
# ==============================================================================

@dataclass
class TableColumn:
    name: str
    type: str
    key: Optional[str] = None  # 'PRI' | 'FOR'
    extra: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {'name': self.name, 'type': self.type}
        if self.key:
            d['key'] = self.key
        if self.extra:
            d['extra'] = self.extra
        return d


@dataclass
class DBTable:
    name: str
    columns: List[TableColumn] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'columns': [c.to_dict() for c in self.columns]}


@dataclass
class ChatMessage:
    role: str  # 'user' | 'assistant'
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {'role': self.role, 'content': self.content}
