# ==============================================================================
# SERVICIO DEL ASISTENTE
# ==============================================================================
# Asistente de chat sobre un modelo generativo externo (API REST de Gemini).
# Cualquier fallo de red o de formato se convierte en un texto de disculpa;
# nunca se propaga una excepción al llamador.
# ==============================================================================

import logging
import threading
import uuid
from typing import Any, Dict, List

import requests
from flask import session

from menta_verde.models import AssistantContext, ChatMessage, to_text
from menta_verde.performance_logger import profile_function

logger = logging.getLogger(__name__)


EMPTY_REPLY = 'Lo siento, no pude procesar esa solicitud.'
UNAVAILABLE_REPLY = 'El asistente está descansando en este momento. Por favor, inténtalo más tarde.'
GREETING = '¡Hola! Soy tu asistente de seguridad de Menta Verde. ¿En qué puedo ayudarte hoy?'

PERSONAS = {
    AssistantContext.SECURITY: (
        'Eres un asistente de seguridad servicial para Menta Verde. Sé conciso, '
        'profesional y amable. Ayuda a los usuarios con problemas de inicio de '
        'sesión y mejores prácticas de seguridad en español.'
    ),
    AssistantContext.SQL: (
        'Eres un experto en bases de datos MySQL. Proporciona código SQL válido '
        'y optimizado. Explica conceptos como normalización e índices de forma '
        'breve y clara en español.'
    ),
}

# Máximo de mensajes guardados por sesión
HISTORY_LIMIT = 30


class GenerativeClient:
    """Cliente mínimo del endpoint generateContent."""

    def __init__(
        self,
        api_key: str,
        model: str,
        api_base: str = 'https://generativelanguage.googleapis.com/v1beta',
        timeout: float = 30,
        temperature: float = 0.7
    ):
        self.api_key = api_key
        self.model = model
        self.api_base = api_base.rstrip('/')
        self.timeout = timeout
        self.temperature = temperature

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    def generate(self, prompt: str, system_instruction: str) -> str:
        """
        Envía el prompt y devuelve el texto de la respuesta ('' si viene vacío).

        Raises:
            requests.RequestException: error de red o HTTP
            ValueError: respuesta sin JSON válido
        """
        payload = {
            'systemInstruction': {'parts': [{'text': system_instruction}]},
            'contents': [{'role': 'user', 'parts': [{'text': prompt}]}],
            'generationConfig': {'temperature': self.temperature},
        }
        resp = requests.post(
            self.endpoint,
            params={'key': self.api_key},
            json=payload,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        data = resp.json()

        candidates = data.get('candidates') or []
        if not candidates:
            return ''
        parts = (candidates[0].get('content') or {}).get('parts') or []
        return ''.join(p.get('text', '') for p in parts)


class AssistantService:
    """
    Respuestas del asistente y conversación de la sesión.

    La conversación se guarda en session['chat'] y empieza con el saludo.
    """

    def __init__(self, client: GenerativeClient):
        self.client = client
        self._lock = threading.Lock()
        self._pending = set()

    @profile_function(name="Consultar asistente")
    def ask(self, prompt: str, context: str = AssistantContext.SECURITY.value) -> str:
        """
        Pide una respuesta con la personalidad indicada.

        Args:
            prompt: Texto del usuario
            context: 'security' o 'sql'

        Returns:
            Texto de la respuesta o uno de los mensajes de respaldo
        """
        try:
            persona = PERSONAS[AssistantContext(context)]
        except ValueError:
            persona = PERSONAS[AssistantContext.SECURITY]

        try:
            text = self.client.generate(prompt, persona)
        except Exception:
            logger.exception('Error del asistente generativo')
            return UNAVAILABLE_REPLY

        return text or EMPTY_REPLY

    # =========================================================================
    # CONVERSACIÓN
    # =========================================================================

    def get_history(self) -> List[Dict[str, str]]:
        if 'chat' not in session:
            session['chat'] = [ChatMessage('assistant', GREETING).to_dict()]
        return session['chat']

    def reset_history(self) -> List[Dict[str, str]]:
        session['chat'] = [ChatMessage('assistant', GREETING).to_dict()]
        return session['chat']

    @staticmethod
    def _chat_key() -> str:
        """Identifica la sesión del navegador (token CSRF o un id propio)."""
        if session.get('csrf_token'):
            return session['csrf_token']
        if 'chat_id' not in session:
            session['chat_id'] = uuid.uuid4().hex
        return session['chat_id']

    def is_pending(self) -> bool:
        with self._lock:
            return self._chat_key() in self._pending

    def send(self, message: str) -> Dict[str, Any]:
        """
        Agrega el mensaje del usuario y la respuesta a la conversación.

        Mensajes en blanco o enviados mientras la misma sesión espera una
        respuesta se ignoran. Las solicitudes pendientes viven en el proceso,
        no en la cookie, para que otras peticiones las vean.
        """
        text = to_text(message).strip()
        history = self.get_history()
        key = self._chat_key()

        with self._lock:
            if not text or key in self._pending:
                return {'ok': False, 'ignored': True, 'messages': history}
            self._pending.add(key)

        try:
            history.append(ChatMessage('user', text).to_dict())
            reply = self.ask(text, AssistantContext.SECURITY.value)
            history.append(ChatMessage('assistant', reply).to_dict())
        finally:
            with self._lock:
                self._pending.discard(key)

        session['chat'] = history[-HISTORY_LIMIT:]
        session.modified = True
        return {'ok': True, 'reply': reply, 'messages': session['chat']}
