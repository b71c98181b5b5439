import pytest


# =========================================================================
# VENDEDORES
# =========================================================================

def test_add_seller_requires_fields(container):
    result = container.seller_service.add_seller('admin', {'nombre': 'Laura Díaz', 'usuario': 'laura'})
    assert not result['ok']


def test_add_seller_is_active_and_hides_password(container):
    result = container.seller_service.add_seller(
        'admin', {'nombre': 'Laura Díaz', 'nombreCorto': 'Lau', 'usuario': 'laura', 'password': 'x'}
    )
    assert result['ok']
    assert result['seller']['activo'] is True
    assert 'password' not in result['seller']
    assert len(container.seller_service.list_active()) == 3


def test_add_seller_accepts_numeric_values(container):
    result = container.seller_service.add_seller('admin', {'nombre': 1001, 'nombreCorto': 7, 'usuario': 55})
    assert result['ok']
    assert result['seller']['nombre'] == '1001'
    assert result['seller']['usuario'] == '55'


def test_inactive_seller_leaves_active_list(container):
    container.seller_service.toggle_seller('admin', '2')
    assert [s['id'] for s in container.seller_service.list_active()] == ['1']


def test_update_seller_keeps_required_fields(container):
    result = container.seller_service.update_seller('admin', '2', {'nombreCorto': ''})
    assert not result['ok']
    assert container.seller_service.get_seller('2')['nombreCorto'] == 'Betty'


# =========================================================================
# TOGGLE (vale para los tres catálogos)
# =========================================================================

@pytest.mark.parametrize('service_attr, getter, toggler', [
    ('seller_service', 'get_seller', 'toggle_seller'),
    ('customer_service', 'get_customer', 'toggle_customer'),
    ('catalog_service', 'get_service', 'toggle_service'),
])
def test_toggle_twice_restores_record(container, service_attr, getter, toggler):
    service = getattr(container, service_attr)
    before = getattr(service, getter)('1')

    first = getattr(service, toggler)('admin', '1')
    assert first['ok']
    assert getattr(service, getter)('1')['activo'] is False

    getattr(service, toggler)('admin', '1')
    assert getattr(service, getter)('1') == before


def test_toggle_unknown_record(container):
    assert not container.customer_service.toggle_customer('admin', 'nope')['ok']


# =========================================================================
# CLIENTES
# =========================================================================

def test_add_customer_requires_name(container):
    assert not container.customer_service.add_customer('admin', {'telefono': '555'})['ok']


def test_customer_search(container):
    service = container.customer_service
    service.add_customer('admin', {'nombre': 'Ana Torres', 'telefono': '5511112222', 'email': 'ana@correo.mx'})

    assert [c['nombre'] for c in service.search('ana')] == ['Ana Torres']
    assert [c['nombre'] for c in service.search('4433')] == ['Tecnologías Globales S.A.']
    assert [c['nombre'] for c in service.search('CORREO.MX')] == ['Ana Torres']
    assert len(service.search('')) == 2


def test_picker_limits_to_five_active(container):
    service = container.customer_service
    for i in range(7):
        service.add_customer('admin', {'nombre': f'Cliente {i}', 'telefono': f'55000000{i}'})
    hidden = service.add_customer('admin', {'nombre': 'Cliente oculto', 'telefono': '559'})
    service.toggle_customer('admin', hidden['customer']['id'])

    matches = service.pick('cliente')
    assert len(matches) == 5
    assert all(c['activo'] for c in matches)
    assert service.pick('') == []


def test_quick_create_requires_name_and_phone(container):
    service = container.customer_service
    assert not service.quick_create('admin', 'Ana', '')['ok']
    assert not service.quick_create('admin', ' ', '5511')['ok']


def test_quick_create_builds_full_record(container):
    result = container.customer_service.quick_create('admin', 'Ana Torres', '5511112222')

    customer = result['customer']
    assert result['ok']
    assert customer['activo'] is True
    assert customer['email'] == ''
    assert customer['direccion'] == ''
    assert customer['fechaNacimiento'] == ''
    assert container.customer_service.get_customer(customer['id']) == customer


# =========================================================================
# SERVICIOS
# =========================================================================

@pytest.mark.parametrize('data', [
    {'nombre': 'Pedicure', 'precio': 0},
    {'nombre': 'Pedicure', 'precio': 'gratis'},
    {'nombre': '', 'precio': 300},
])
def test_add_service_validation(container, data):
    assert not container.catalog_service.add_service('admin', data)['ok']


def test_add_and_search_service(container):
    service = container.catalog_service
    result = service.add_service('admin', {'nombre': 'Pedicure Spa', 'precio': '450', 'descripcion': 'Con sales de menta'})

    assert result['ok']
    assert result['service']['precio'] == 450.0
    assert [s['nombre'] for s in service.search('pedicure')] == ['Pedicure Spa']
    # el masaje semilla también menciona menta
    assert len(service.search('MENTA')) == 2


def test_update_service_requires_name(container):
    assert not container.catalog_service.update_service('admin', '1', {'nombre': ' '})['ok']
    result = container.catalog_service.update_service('admin', '1', {'precio': 900})
    assert result['service']['precio'] == 900.0
    assert result['service']['nombre'] == 'Limpieza Facial Profunda'


def test_catalog_changes_are_logged(container):
    container.catalog_service.add_service('admin', {'nombre': 'Pedicure', 'precio': 300})
    logs = container.audit_service.get_logs(log_type='CATALOGO')
    assert "Servicio 'Pedicure' creado por admin" == logs[0]['message']


# =========================================================================
# DATOS MAL FORMADOS
# =========================================================================

def test_update_customer_with_null_name(container):
    result = container.customer_service.update_customer('admin', '1', {'nombre': None})
    assert result == {'ok': False, 'error': 'El nombre del cliente es obligatorio'}
    assert container.customer_service.get_customer('1')['nombre'] == 'Tecnologías Globales S.A.'


def test_update_service_with_null_name(container):
    result = container.catalog_service.update_service('admin', '1', {'nombre': None})
    assert not result['ok']


def test_numeric_phone_is_stored_as_text(container):
    result = container.customer_service.quick_create('admin', 'Ana Ruiz', 5511112222)
    assert result['customer']['telefono'] == '5511112222'
    assert container.customer_service.pick('551111')[0]['nombre'] == 'Ana Ruiz'


@pytest.mark.parametrize('flag, expected', [
    ('false', False),
    ('0', False),
    ('off', False),
    ('true', True),
    (False, False),
    (1, True),
])
def test_active_flag_from_text(container, flag, expected):
    result = container.customer_service.add_customer('admin', {'nombre': 'Ana Ruiz', 'activo': flag})
    assert result['customer']['activo'] is expected
