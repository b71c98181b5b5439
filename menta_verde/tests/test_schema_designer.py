from unittest import mock

import pytest

from menta_verde.services.assistant_service import UNAVAILABLE_REPLY


@pytest.fixture
def schema(container):
    return container.schema_service


def test_initial_table(schema):
    tables = schema.list_tables()
    assert [t['name'] for t in tables] == ['usuarios']
    assert tables[0]['columns'][0] == {'name': 'id', 'type': 'INT', 'key': 'PRI', 'extra': 'AUTO_INCREMENT'}


def test_add_table_normalizes_name(schema):
    result = schema.add_table('  Historial   Clinico ')

    assert result['table']['name'] == 'historial_clinico'
    assert result['index'] == 1
    assert result['table']['columns'] == [{'name': 'id', 'type': 'INT', 'key': 'PRI', 'extra': 'AUTO_INCREMENT'}]
    assert not schema.add_table('  ')['ok']


def test_add_and_edit_columns(schema):
    schema.add_column(0)
    table = schema.add_column(0)['table']
    assert [c['name'] for c in table['columns'][-2:]] == ['columna_4', 'columna_5']
    assert table['columns'][-1]['type'] == 'VARCHAR(255)'

    schema.update_column(0, 4, 'name', 'cliente_id')
    schema.update_column(0, 4, 'key', 'FOR')
    table = schema.update_column(0, 4, 'type', 'INT')['table']
    assert table['columns'][4] == {'name': 'cliente_id', 'type': 'INT', 'key': 'FOR'}

    table = schema.update_column(0, 4, 'key', '')['table']
    assert 'key' not in table['columns'][4]


def test_update_column_validation(schema):
    assert not schema.update_column(0, 0, 'color', 'rojo')['ok']
    assert not schema.update_column(0, 9, 'name', 'x')['ok']
    assert not schema.update_column(5, 0, 'name', 'x')['ok']


def test_delete_column(schema):
    table = schema.delete_column(0, 1)['table']
    assert [c['name'] for c in table['columns']] == ['id', 'email']


def test_last_table_cannot_be_deleted(schema):
    assert not schema.delete_table(0)['ok']
    schema.add_table('citas')
    assert schema.delete_table(0)['ok']
    assert [t['name'] for t in schema.list_tables()] == ['citas']


def test_generate_sql(schema):
    schema.add_table('citas')
    sql = schema.generate_sql()

    assert sql.startswith('CREATE DATABASE IF NOT EXISTS menta_verde_portal;\nUSE menta_verde_portal;\n\n')
    assert (
        'CREATE TABLE usuarios (\n'
        '  id INT PRIMARY KEY AUTO_INCREMENT,\n'
        '  usuario VARCHAR(50),\n'
        '  email VARCHAR(100)\n'
        ');\n\n'
    ) in sql
    assert sql.endswith('CREATE TABLE citas (\n  id INT PRIMARY KEY AUTO_INCREMENT\n);\n\n')


def test_suggest_table_appends_answer(schema, container):
    with mock.patch.object(container.assistant_service, 'ask', return_value='CREATE TABLE pagos (id INT);') as ask:
        result = schema.suggest_table()

    assert ask.call_args[0][1] == 'sql'
    assert '"name": "usuarios"' in ask.call_args[0][0]
    assert result['sql'].endswith('\n-- SUGERENCIA DE IA --\nCREATE TABLE pagos (id INT);')


def test_suggest_table_when_assistant_is_down(schema):
    with mock.patch('menta_verde.services.assistant_service.requests.post', side_effect=OSError('caído')):
        result = schema.suggest_table()
    assert result['suggestion'] == UNAVAILABLE_REPLY
