"""
Cliente del colaborador de IA (Google Gemini)

Las operaciones atrapan sus errores, los registran y devuelven un texto de
respaldo (salvo la guía de angustia, que decide el llamador). No hay
reintentos: el siguiente tick o la siguiente petición es el
reintento.

Variables de entorno:
  GEMINI_API_KEY        -> requerida para llamadas reales
  GEMINI_MODEL          -> modelo para chat, insights y visión
  GEMINI_SUMMARY_MODEL  -> modelo para el resumen médico
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import json
import logging

from google import genai
from google.genai import types

from app.models.notification import NotificationCategory

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = "Failed to generate summary. Please check your connection and API key."
INSIGHT_FALLBACK = "Stay hydrated and follow your schedule."
INSIGHT_QUOTA_FALLBACK = "Monitoring your health patterns. Everything looks stable."
SNOOZE_EMPTY_FALLBACK = "Delaying medication can lead to complications."
SNOOZE_ERROR_FALLBACK = "Delaying medication increases health risks. Please take it as soon as possible."
DISTRESS_EMPTY_FALLBACK = "Please stay calm. Help is being notified."
DISTRESS_QUOTA_FALLBACK = (
    "I detected a distress signal. Please stay calm. "
    "If this is an emergency, please call for help immediately."
)

SEND_NOTIFICATION = "send_notification"
TALK_TO_PATIENT = "talk_to_patient"
WAKE_UP = "wake_up"


def is_quota_error(error: Exception) -> bool:
    message = str(error)
    return "429" in message or "quota" in message.lower()


@dataclass
class AgentAction:
    """Llamada a función devuelta por el modelo"""
    name: str
    args: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AgentReply:
    text: Optional[str] = None
    actions: List[AgentAction] = field(default_factory=list)


def _string(description: str, enum: Optional[List[str]] = None) -> types.Schema:
    return types.Schema(type=types.Type.STRING, description=description, enum=enum)


AGENT_TOOLS = [
    types.Tool(function_declarations=[
        types.FunctionDeclaration(
            name=SEND_NOTIFICATION,
            description="Send a notification to the patient's device.",
            parameters=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "title": _string("The title of the notification."),
                    "body": _string("The message body of the notification."),
                    "type": _string(
                        "The severity/type of the notification.",
                        enum=[category.value for category in NotificationCategory]
                    ),
                },
                required=["title", "body"],
            ),
        ),
        types.FunctionDeclaration(
            name=TALK_TO_PATIENT,
            description="Speak directly to the patient using text-to-speech.",
            parameters=types.Schema(
                type=types.Type.OBJECT,
                properties={"message": _string("The message to speak to the patient.")},
                required=["message"],
            ),
        ),
        types.FunctionDeclaration(
            name=WAKE_UP,
            description="Wake up the agent to start a conversation or alert the patient.",
            parameters=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "reason": _string("The reason for waking up (e.g., 'Scream detected', 'Patient spoke').")
                },
                required=["reason"],
            ),
        ),
    ])
]


class GeminiService:
    """Servicio de IA generativa"""

    def __init__(self, settings, client=None):
        self.settings = settings
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or bool(self.settings.GEMINI_API_KEY)

    @property
    def client(self):
        if self._client is None:
            if not self.settings.GEMINI_API_KEY:
                raise RuntimeError("GEMINI_API_KEY no configurada")
            self._client = genai.Client(api_key=self.settings.GEMINI_API_KEY)
        return self._client

    def _generate(self, contents, model: Optional[str] = None, config=None):
        return self.client.models.generate_content(
            model=model or self.settings.GEMINI_MODEL,
            contents=contents,
            config=config,
        )

    def generate_health_summary(self, logs: List[Dict[str, Any]], profile: Dict[str, Any],
                                medications: List[Dict[str, Any]]) -> str:
        """Resumen para el médico con los últimos 20 registros"""
        med_lines = "\n".join(
            f"- {m['name']} ({m.get('dosage')}, {m.get('frequency')}) at {m['time']}" for m in medications
        )
        log_lines = "\n".join(
            f"- {entry.get('timestamp')}: {entry.get('medication_name') or 'General'} - "
            f"Status: {entry.get('status')}, Mood: {entry.get('mood')}, Notes: {entry.get('notes')}"
            for entry in logs[:20]
        )
        prompt = (
            "As a medical AI assistant, generate a concise summary for a doctor about this "
            "patient's recent health history.\n\n"
            "Patient Profile:\n"
            f"- Name: {profile.get('name')}\n"
            f"- Condition: {profile.get('condition')}\n"
            f"- Doctor's Notes: {profile.get('doctor_notes')}\n\n"
            f"Current Medications:\n{med_lines}\n\n"
            f"Recent Logs (Last 20 entries):\n{log_lines}\n\n"
            "Please provide:\n"
            "1. A summary of medication adherence.\n"
            "2. Trends in mood or symptoms.\n"
            "3. Any critical alerts or missed doses that need immediate attention.\n"
            "4. A concise \"Doctor's Brief\" for quick decision making."
        )
        try:
            response = self._generate(prompt, model=self.settings.GEMINI_SUMMARY_MODEL)
            return response.text or "No summary generated."
        except Exception as e:
            logger.error(f"Error generando resumen: {e}")
            return SUMMARY_FALLBACK

    def agent_response(self, message: str, context: Dict[str, Any]) -> Optional[AgentReply]:
        """Respuesta del agente con posibles acciones; None si falla"""
        profile = context.get("profile", {})
        med_names = ", ".join(m["name"] for m in context.get("medications", []))
        prompt = (
            "You are MediSafe Agent, a supportive AI companion for a patient with chronic illness.\n"
            "Your goal is to help them manage their health, stay positive, and ensure they take their meds.\n\n"
            "Context:\n"
            f"- Patient Name: {profile.get('name')}\n"
            f"- Condition: {profile.get('condition')}\n"
            f"- Current Meds: {med_names}\n"
            f"- MedBox Status: {json.dumps(context.get('medbox'), default=str)}\n\n"
            f"User Message: {message}\n\n"
            "Respond with empathy, professional but warm tone. If they seem very ill, advise them "
            "to contact their doctor.\n"
            "You can send notifications, talk to the patient, or wake up if needed."
        )
        try:
            response = self._generate(prompt, config=types.GenerateContentConfig(tools=AGENT_TOOLS))
        except Exception as e:
            logger.error(f"Error obteniendo respuesta del agente: {e}")
            return None

        actions = [
            AgentAction(name=call.name, args=dict(call.args or {}))
            for call in (response.function_calls or [])
        ]
        return AgentReply(text=response.text, actions=actions)

    def daily_insight(self, profile: Dict[str, Any], medications: List[Dict[str, Any]]) -> Optional[str]:
        """Insight de una frase; None conserva el insight anterior"""
        prompt = (
            f"Based on patient profile: {json.dumps(profile, default=str)} and meds: "
            f"{json.dumps(medications, default=str)}, provide a one-sentence health insight for today."
        )
        try:
            response = self._generate(prompt)
            return response.text or INSIGHT_FALLBACK
        except Exception as e:
            logger.error(f"Error generando insight: {e}")
            if is_quota_error(e):
                return INSIGHT_QUOTA_FALLBACK
            return None

    def snooze_disclaimer(self, medication_name: str, dosage: Optional[str], condition: Optional[str]) -> str:
        prompt = (
            f"The patient wants to snooze their {medication_name} ({dosage}). Their condition is "
            f"{condition}. Provide a serious medical disclaimer about the risks of delaying this "
            "specific medication. Keep it concise but urgent."
        )
        try:
            response = self._generate(prompt)
            return response.text or SNOOZE_EMPTY_FALLBACK
        except Exception as e:
            logger.error(f"Error generando advertencia de posposición: {e}")
            return SNOOZE_ERROR_FALLBACK

    def distress_guidance(self, condition: Optional[str]) -> str:
        """Instrucciones de primeros auxilios; los errores se propagan al llamador"""
        prompt = (
            f"The patient ({condition}) just screamed or made a loud distress noise. Provide immediate, "
            "calm first-aid instructions for their condition. Also, assess their likely mood "
            "(e.g., 'Panic', 'Pain', 'Fear')."
        )
        response = self._generate(prompt)
        return response.text or DISTRESS_EMPTY_FALLBACK

    def verify_ingestion(self, frame: bytes, mime_type: str = "image/jpeg") -> bool:
        """¿Se ve al paciente tragando el medicamento en el cuadro?"""
        contents = [
            "Analyze this video frame. Is the patient swallowing their medication? Answer only 'YES' "
            "if you see them putting a pill in their mouth and swallowing, otherwise 'NO'.",
            types.Part.from_bytes(data=frame, mime_type=mime_type),
        ]
        try:
            response = self._generate(contents)
        except Exception as e:
            logger.error(f"Error de visión: {e}")
            return False
        return "YES" in (response.text or "")
