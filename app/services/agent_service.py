"""
Servicio del agente acompañante

Orquesta las llamadas a Gemini con el contexto de la base de datos y el
estado en memoria: chat con acciones, resumen médico, insight diario,
señal de angustia, advertencia de posposición y verificación de ingesta.
"""
from sqlalchemy.orm import Session
from datetime import timedelta
from typing import Any, Dict, Optional
import base64
import binascii
import logging

from app.models.dose_log import DoseStatus
from app.models.notification import NotificationCategory
from app.schemas.agent import ChatMessage, ChatResponse, ChatRole
from app.schemas.dose_log import DoseLogCreate
from app.schemas.notification import AINotificationCreate
from app.services.ai_service import (
    DISTRESS_QUOTA_FALLBACK,
    SEND_NOTIFICATION,
    TALK_TO_PATIENT,
    WAKE_UP,
    is_quota_error
)
from app.services.app_settings_service import AppSettingsService
from app.services.dose_log_service import DoseLogService
from app.services.medbox_service import MedBoxService
from app.services.medication_service import MedicationService
from app.services.notification_service import NotificationService
from app.services.profile_service import ProfileService
from app.services.scheduler import apply_snooze

logger = logging.getLogger(__name__)

CHAT_FALLBACK = "I'm having trouble connecting right now. Please try again in a moment."
DISTRESS_OPENING = "I heard a distress signal. What happened? I'm here to help."
MOODS = ("Panic", "Pain", "Fear")


class InvalidFrameError(ValueError):
    """El cuadro de cámara no es base64 válido"""


class VerificationInProgressError(RuntimeError):
    """Ya hay una verificación por cámara en curso"""


def detect_mood(text: str) -> str:
    lowered = text.lower()
    for mood in MOODS:
        if mood.lower() in lowered:
            return mood
    return "Distressed"


class AgentService:
    """Servicio del agente"""

    def __init__(self, runtime, db: Session):
        self.runtime = runtime
        self.db = db
        self.ai = runtime.ai

    def build_context(self) -> Dict[str, Any]:
        """Estado serializado de la aplicación para los prompts"""
        return {
            "profile": ProfileService.to_dict(ProfileService(self.db).get_profile()),
            "medications": [
                MedicationService.to_dict(m) for m in MedicationService(self.db).get_medications()
            ],
            "logs": DoseLogService(self.db).get_logs(limit=20),
            "medbox": MedBoxService.to_dict(MedBoxService(self.db).get_medbox()),
        }

    def chat(self, message: str, autonomous: bool = False) -> ChatResponse:
        """Turno de chat; ejecuta las acciones que pida el modelo"""
        if autonomous:
            opening = ChatMessage(role=ChatRole.ASSISTANT, content=f"[Autonomous Wake-up]: {message}")
        else:
            opening = ChatMessage(role=ChatRole.USER, content=message)
        result = ChatResponse(messages=[opening])

        reply = self.ai.agent_response(message, self.build_context())
        if reply is None:
            result.messages.append(ChatMessage(role=ChatRole.ASSISTANT, content=CHAT_FALLBACK))
            return result

        for action in reply.actions:
            result.actions.append(action.name)
            if action.name == SEND_NOTIFICATION:
                if self._send_notification(action.args):
                    result.notifications_created += 1
            elif action.name == TALK_TO_PATIENT:
                if AppSettingsService(self.db).get_settings().voice_agent_enabled:
                    result.speech = action.args.get("message")
            elif action.name == WAKE_UP:
                reason = action.args.get("reason")
                result.messages.append(ChatMessage(
                    role=ChatRole.ASSISTANT,
                    content=f"I'm awake! Reason: {reason}. How can I help?"
                ))
            else:
                logger.warning(f"Acción desconocida del agente: {action.name}")

        if reply.text:
            result.messages.append(ChatMessage(role=ChatRole.ASSISTANT, content=reply.text))
        return result

    def _send_notification(self, args: Dict[str, Any]) -> bool:
        title, body = args.get("title"), args.get("body")
        if not title or not body:
            logger.warning("send_notification sin título o cuerpo, ignorada")
            return False

        try:
            category = NotificationCategory(args.get("type") or NotificationCategory.INFO)
        except ValueError:
            category = NotificationCategory.INFO

        notifications = NotificationService(self.db)
        notifications.create_notification(
            AINotificationCreate(title=title, body=body, type=category),
            timestamp=self.runtime.now()
        )
        self.runtime.feed.merge_persisted(notifications.get_recent(self.runtime.settings.AI_NOTIFICATIONS_LIMIT))
        return True

    def summary(self) -> str:
        context = self.build_context()
        return self.ai.generate_health_summary(context["logs"], context["profile"], context["medications"])

    def insight(self) -> Dict[str, Any]:
        """Siguiente toma e insight del día (llamada a IA limitada por intervalo)"""
        medications = MedicationService(self.db).get_medications()
        state = self.runtime.state
        now = self.runtime.now()
        result = {
            "next_dose": self.runtime.scheduler.next_dose(medications),
            "throttled": False,
        }

        min_interval = timedelta(seconds=self.runtime.settings.INSIGHT_MIN_INTERVAL)
        if state.last_insight_at is not None and now - state.last_insight_at < min_interval:
            result["throttled"] = True
        else:
            state.last_insight_at = now
            text = self.ai.daily_insight(
                ProfileService.to_dict(ProfileService(self.db).get_profile()),
                [MedicationService.to_dict(m) for m in medications]
            )
            if text:
                state.insight = text

        result["insight"] = state.insight
        result["mood"] = state.current_mood
        return result

    def distress(self) -> Dict[str, Any]:
        """Responder a una señal de angustia detectada por el cliente"""
        state = self.runtime.state
        if not AppSettingsService(self.db).get_settings().distress_monitor_enabled:
            return {"handled": False, "reason": "disabled"}

        with self.runtime.lock:
            now = self.runtime.now()
            if state.distress_processing:
                return {"handled": False, "reason": "processing"}
            cooldown = timedelta(seconds=self.runtime.settings.DISTRESS_COOLDOWN)
            if state.last_distress_at is not None and now - state.last_distress_at < cooldown:
                return {"handled": False, "reason": "cooldown"}
            state.distress_processing = True
            state.last_distress_at = now

        try:
            condition = ProfileService(self.db).get_profile().condition
            message = DISTRESS_OPENING
            wake_up = None

            try:
                guidance = self.ai.distress_guidance(condition)
            except Exception as e:
                logger.error(f"Error de IA en señal de angustia: {e}")
                if is_quota_error(e):
                    message = DISTRESS_QUOTA_FALLBACK
            else:
                message = guidance
                state.current_mood = detect_mood(guidance)
                wake_up = self.chat(
                    f"EMERGENCY: Distress detected for patient with {condition}. Context: {guidance}",
                    autonomous=True
                )

            logger.warning(f"🚨 Señal de angustia atendida (estado de ánimo: {state.current_mood})")
            return {
                "handled": True,
                "message": message,
                "mood": state.current_mood,
                "wake_up": wake_up,
            }
        finally:
            state.distress_processing = False

    def snooze(self, medication) -> Dict[str, Any]:
        """Posponer recordatorios con advertencia médica"""
        condition = ProfileService(self.db).get_profile().condition
        duration = AppSettingsService(self.db).get_settings().snooze_duration_minutes
        disclaimer = self.ai.snooze_disclaimer(medication.name, medication.dosage, condition)

        snooze = apply_snooze(duration, self.runtime.now(), disclaimer)
        self.runtime.set_snooze(snooze)
        return {"medication_id": medication.id, "until": snooze.until, "disclaimer": disclaimer}

    def verify_ingestion(self, frame_b64: str, mime_type: str = "image/jpeg") -> Dict[str, Optional[int]]:
        """Verificar con la cámara que el paciente tomó la dosis vencida"""
        try:
            frame = base64.b64decode(frame_b64, validate=True)
        except (binascii.Error, ValueError):
            raise InvalidFrameError("Cuadro de cámara inválido")

        state = self.runtime.state
        with self.runtime.lock:
            if state.verifying:
                raise VerificationInProgressError("Ya hay una verificación en curso")
            state.verifying = True
        try:
            verified = self.ai.verify_ingestion(frame, mime_type)
        finally:
            state.verifying = False

        result = {"verified": verified, "medication_id": None, "log_id": None}
        if not verified:
            return result

        medications = MedicationService(self.db).get_medications()
        dose = self.runtime.scheduler.due_dose(medications)
        if dose is not None:
            log = DoseLogService(self.db).create_log(
                DoseLogCreate(medication_id=dose.id, status=DoseStatus.TAKEN, mood="Normal", notes=""),
                timestamp=self.runtime.now()
            )
            self.runtime.resolve_dose(dose.id, DoseStatus.TAKEN)
            result.update(medication_id=dose.id, log_id=log.id)

        self.runtime.clear_snooze()
        logger.info(f"✅ Ingesta verificada por cámara (medicamento {result['medication_id']})")
        return result
