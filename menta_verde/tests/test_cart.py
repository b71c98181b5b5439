import pytest

from menta_verde.main import app


@pytest.fixture
def cart(container):
    with app.test_request_context():
        yield container.cart_service


def test_add_same_service_twice_keeps_one_line(cart):
    cart.add_service('1')
    result = cart.add_service('1')

    assert result['ok']
    items = result['carrito']['items']
    assert len(items) == 1
    assert items[0]['cantidad'] == 2
    assert items[0]['subtotal'] == 1700.0


def test_new_service_starts_with_quantity_one(cart):
    cart.add_service('1')
    cart.add_service('2')

    data = cart.get_cart()
    assert [i['serviceId'] for i in data['items']] == ['1', '2']
    assert all(i['cantidad'] == 1 for i in data['items'])
    assert data['subtotal'] == 2050.0
    assert data['total_items'] == 2


def test_update_quantity_recomputes_subtotal(cart):
    cart.add_service('2')
    result = cart.update_quantity('2', 3)

    assert result['ok']
    assert result['carrito']['items'][0]['subtotal'] == 3600.0


@pytest.mark.parametrize('qty', [0, -1])
def test_quantity_zero_or_less_removes_line(cart, qty):
    cart.add_service('1')
    cart.add_service('2')

    result = cart.update_quantity('1', qty)

    assert result['ok']
    assert [i['serviceId'] for i in result['carrito']['items']] == ['2']


def test_unknown_service_is_rejected(cart):
    result = cart.add_service('999')
    assert not result['ok']
    assert cart.get_cart()['items_count'] == 0


def test_inactive_service_is_rejected(cart, container):
    container.catalog_service.toggle_service('admin', '1')
    result = cart.add_service('1')

    assert result == {'ok': False, 'error': 'El servicio está inactivo'}
    assert cart.get_cart()['items_count'] == 0


def test_update_quantity_of_missing_line(cart):
    result = cart.update_quantity('1', 2)
    assert not result['ok']


def test_clear_cart(cart):
    cart.add_service('1')
    cart.clear_cart()
    assert cart.get_cart() == {'items': [], 'total_items': 0, 'subtotal': 0, 'items_count': 0}
