import pytest
from werkzeug.security import check_password_hash

from menta_verde.services.user_service import ProtectedAccountError


@pytest.fixture
def users(container):
    return container.user_service


@pytest.mark.parametrize('identifier', ['admin', 'admin@mentaverde.com'])
def test_login_with_username_or_email(users, identifier):
    user = users.authenticate(identifier, 'admin1234')
    assert user['username'] == 'admin'
    assert user['role'] == 'ADMIN'
    assert 'password' not in user


@pytest.mark.parametrize('identifier, password', [
    ('admin', 'mala'),
    ('nadie', 'admin1234'),
    ('', 'admin1234'),
    ('admin', ''),
])
def test_login_failures(users, identifier, password):
    assert users.authenticate(identifier, password) is None


def test_passwords_are_hashed(container):
    stored = container.user_repo.get_user('1')['password']
    assert stored != 'admin1234'
    assert check_password_hash(stored, 'admin1234')


def test_register_derives_username_and_role(users):
    result = users.register({
        'nombre': 'Lucía', 'email': 'lucia.mora@correo.mx', 'password': 'secreta', 'role': 'ADMIN'
    })

    assert result['ok']
    assert result['user']['username'] == 'lucia.mora'
    assert result['user']['role'] == 'USER'
    assert users.authenticate('lucia.mora', 'secreta')


@pytest.mark.parametrize('data', [
    {'email': 'a@b.mx', 'password': 'x'},
    {'nombre': 'A', 'password': 'x'},
    {'nombre': 'A', 'email': 'a@b.mx'},
])
def test_register_required_fields(users, data):
    assert not users.register(data)['ok']


def test_register_duplicate(users):
    result = users.register({'nombre': 'Otro', 'email': 'admin@otro.mx', 'password': 'x'})
    assert not result['ok']
    assert 'admin' in result['error']


def test_add_user_required_fields(users):
    result = users.add_user('admin', {'username': 'caja', 'email': ''})
    assert result == {'ok': False, 'error': 'Por favor completa los campos obligatorios.'}


def test_add_user_with_role(users):
    result = users.add_user('admin', {'username': 'gerente', 'email': 'g@mv.mx', 'password': 'x', 'role': 'ADMIN'})
    assert result['user']['role'] == 'ADMIN'
    assert not users.add_user('admin', {'username': 'z', 'email': 'z@mv.mx', 'password': 'x', 'role': 'ROOT'})['ok']


def test_update_user_keeps_password_unless_given(users):
    users.update_user('admin', '1', {'nombre': 'Dueña', 'password': ''})
    assert users.authenticate('admin', 'admin1234')['nombre'] == 'Dueña'

    users.update_user('admin', '1', {'password': 'nueva'})
    assert users.authenticate('admin', 'admin1234') is None
    assert users.authenticate('admin', 'nueva')


def test_cannot_demote_last_admin(users):
    with pytest.raises(ProtectedAccountError):
        users.update_user('admin', '1', {'role': 'USER'})
    assert users.get_user('1')['role'] == 'ADMIN'


def test_can_demote_when_another_admin_exists(users):
    other = users.add_user('admin', {'username': 'g', 'email': 'g@mv.mx', 'password': 'x', 'role': 'ADMIN'})
    result = users.update_user('admin', other['user']['id'], {'role': 'USER'})
    assert result['user']['role'] == 'USER'


def test_password_reset_is_simulated(users):
    assert users.request_password_reset('nadie@x.mx')['ok']
    assert not users.request_password_reset('')['ok']
