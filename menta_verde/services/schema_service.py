# ==============================================================================
# SERVICIO DEL DISEÑADOR DE ESQUEMA
# ==============================================================================
# Edición de tablas MySQL en memoria y generación del script SQL.
# ==============================================================================

import json
import re
from typing import Any, Dict, List

from menta_verde.models import AssistantContext
from menta_verde.repositories.schema_repository import SchemaRepository
from menta_verde.services.assistant_service import AssistantService


DATABASE_NAME = 'menta_verde_portal'
ID_COLUMN = {'name': 'id', 'type': 'INT', 'key': 'PRI', 'extra': 'AUTO_INCREMENT'}
COLUMN_FIELDS = ('name', 'type', 'key', 'extra')
VALID_KEYS = ('PRI', 'FOR')
SUGGESTION_HEADER = '-- SUGERENCIA DE IA --'


class SchemaService:
    """Diseñador de tablas. Siempre queda al menos una tabla."""

    def __init__(self, schema_repo: SchemaRepository, assistant_service: AssistantService = None):
        self.schema_repo = schema_repo
        self.assistant_service = assistant_service

    def list_tables(self) -> List[Dict[str, Any]]:
        return self.schema_repo.get_all()

    def _table_or_error(self, index: int):
        table = self.schema_repo.get_table(index)
        if table is None:
            return None, {'ok': False, 'error': 'Tabla no encontrada'}
        return table, None

    # =========================================================================
    # TABLAS
    # =========================================================================

    def add_table(self, name: str) -> Dict[str, Any]:
        """
        Agrega una tabla con la columna id autoincremental.

        El nombre se pasa a minúsculas y los espacios a guion bajo.
        """
        if not (name or '').strip():
            return {'ok': False, 'error': 'El nombre de la tabla es obligatorio'}

        table = {
            'name': re.sub(r'\s+', '_', name.strip().lower()),
            'columns': [dict(ID_COLUMN)],
        }
        self.schema_repo.append(table)
        return {'ok': True, 'table': table, 'index': self.schema_repo.count() - 1}

    def delete_table(self, index: int) -> Dict[str, Any]:
        if self.schema_repo.count() <= 1:
            return {'ok': False, 'error': 'Debe quedar al menos una tabla'}
        _, error = self._table_or_error(index)
        if error:
            return error
        removed = self.schema_repo.remove_table(index)
        return {'ok': True, 'table': removed}

    # =========================================================================
    # COLUMNAS
    # =========================================================================

    def add_column(self, index: int) -> Dict[str, Any]:
        table, error = self._table_or_error(index)
        if error:
            return error
        column = {'name': f"columna_{len(table['columns']) + 1}", 'type': 'VARCHAR(255)'}
        table['columns'].append(column)
        self.schema_repo.set_table(index, table)
        return {'ok': True, 'table': table}

    def update_column(self, index: int, col_index: int, field: str, value: Any) -> Dict[str, Any]:
        """
        Cambia un campo de una columna (name, type, key, extra).

        Una key vacía o distinta de PRI/FOR quita la llave.
        """
        if field not in COLUMN_FIELDS:
            return {'ok': False, 'error': f'Campo inválido: {field}'}
        table, error = self._table_or_error(index)
        if error:
            return error
        if not 0 <= col_index < len(table['columns']):
            return {'ok': False, 'error': 'Columna no encontrada'}

        column = table['columns'][col_index]
        if field == 'key':
            if value in VALID_KEYS:
                column['key'] = value
            else:
                column.pop('key', None)
        elif field == 'extra' and not value:
            column.pop('extra', None)
        else:
            column[field] = value

        self.schema_repo.set_table(index, table)
        return {'ok': True, 'table': table}

    def delete_column(self, index: int, col_index: int) -> Dict[str, Any]:
        table, error = self._table_or_error(index)
        if error:
            return error
        if not 0 <= col_index < len(table['columns']):
            return {'ok': False, 'error': 'Columna no encontrada'}
        table['columns'].pop(col_index)
        self.schema_repo.set_table(index, table)
        return {'ok': True, 'table': table}

    # =========================================================================
    # SQL
    # =========================================================================

    def generate_sql(self) -> str:
        code = f"CREATE DATABASE IF NOT EXISTS {DATABASE_NAME};\nUSE {DATABASE_NAME};\n\n"
        for table in self.schema_repo.get_all():
            lines = []
            for col in table['columns']:
                line = f"  {col['name']} {col['type']}"
                if col.get('key') == 'PRI':
                    line += ' PRIMARY KEY'
                if col.get('extra'):
                    line += f" {col['extra']}"
                lines.append(line)
            code += f"CREATE TABLE {table['name']} (\n" + ',\n'.join(lines) + "\n);\n\n"
        return code

    def suggest_table(self) -> Dict[str, Any]:
        """Pide al asistente SQL una tabla nueva y la agrega al script."""
        if self.assistant_service is None:
            return {'ok': False, 'error': 'Asistente no disponible'}
        tables = self.schema_repo.get_all()
        prompt = (
            f"Basado en estas tablas: {json.dumps(tables, ensure_ascii=False)}, sugiere una "
            "nueva tabla que mejoraría la base de datos para un portal empresarial. "
            "Proporciona solo el script SQL CREATE TABLE en español."
        )
        suggestion = self.assistant_service.ask(prompt, AssistantContext.SQL.value)
        return {
            'ok': True,
            'suggestion': suggestion,
            'sql': f"{self.generate_sql()}\n{SUGGESTION_HEADER}\n{suggestion}",
        }
