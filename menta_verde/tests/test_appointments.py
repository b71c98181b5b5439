import pytest

from menta_verde.models import today_iso


@pytest.fixture
def agenda(container):
    return container.appointment_service


def test_create_copies_customer_and_service(agenda):
    result = agenda.create('admin', '1', '2', day='2026-10-21', time='11:30', notes='Primera visita')

    appt = result['appointment']
    assert result['ok']
    assert appt['customerName'] == 'Tecnologías Globales S.A.'
    assert appt['phone'] == '5544332211'
    assert appt['serviceName'] == 'Masaje Relajante 60min'
    assert appt['status'] == 'PENDIENTE'
    assert appt['time'] == '11:30'
    assert len(appt['id']) == 9


def test_create_defaults(agenda):
    appt = agenda.create('admin', '1', '1')['appointment']
    assert appt['date'] == today_iso()
    assert appt['time'] == '09:00'


def test_unknown_service_name(agenda):
    appt = agenda.create('admin', '1', 'borrado')['appointment']
    assert appt['serviceName'] == 'Servicio desconocido'


@pytest.mark.parametrize('customer_id, service_id', [('', '1'), ('1', ''), ('999', '1')])
def test_create_requires_customer_and_service(agenda, customer_id, service_id):
    assert not agenda.create('admin', customer_id, service_id)['ok']
    assert agenda.list_appointments() == []


def test_for_date(agenda):
    agenda.create('admin', '1', '1', day='2026-10-21')
    agenda.create('admin', '1', '2', day='2026-10-22')

    assert [a['serviceId'] for a in agenda.for_date('2026-10-22')] == ['2']
    assert agenda.for_date('2026-10-23') == []


def test_update_replaces_by_id(agenda):
    appt = agenda.create('admin', '1', '1', day='2026-10-21')['appointment']
    result = agenda.update('admin', {**appt, 'time': '16:00', 'status': 'CONFIRMADA'})

    assert result['ok']
    stored = agenda.get_appointment(appt['id'])
    assert stored['time'] == '16:00'
    assert stored['status'] == 'CONFIRMADA'
    assert len(agenda.list_appointments()) == 1


def test_update_unknown(agenda):
    assert not agenda.update('admin', {'id': 'nope'})['ok']


def test_month_grid_is_sunday_first(agenda):
    agenda.create('admin', '1', '1', day='2026-10-15')

    cells = agenda.month_grid(2026, 10)

    # 1 de octubre de 2026 cae en jueves
    assert cells[:4] == [None, None, None, None]
    assert cells[4] == {'date': '2026-10-01', 'day': 1, 'hasAppointments': False}
    assert len(cells) == 4 + 31
    assert cells[4 + 14]['date'] == '2026-10-15'
    assert cells[4 + 14]['hasAppointments'] is True


def test_month_starting_on_sunday_has_no_padding(agenda):
    # 1 de febrero de 2026 es domingo
    cells = agenda.month_grid(2026, 2)
    assert cells[0]['date'] == '2026-02-01'
    assert len(cells) == 28


def test_reminder_link(agenda, container):
    container.customer_service.update_customer('admin', '1', {'telefono': '+52 (55) 4433-2211'})
    appt = agenda.create('admin', '1', '1', day='2026-10-21', time='10:00')['appointment']

    link = agenda.reminder_link(appt['id'])

    assert link.startswith('https://wa.me/525544332211?text=')
    assert 'Hola%20Tecnolog%C3%ADas%20Globales%20S.A.%2C%20te%20recordamos' in link
    assert 'el%20d%C3%ADa%202026-10-21%20a%20las%2010%3A00' in link
    assert link.endswith('%C2%A1Te%20esperamos!')


def test_reminder_for_missing_appointment(agenda):
    assert agenda.reminder_link('nope') is None
