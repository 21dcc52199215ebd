from fastapi import APIRouter, Depends
from sqlmodel import Session

from apontt.api.deps import get_current_user, get_db
from apontt.core.logging_setup import logger, sanitize_for_log
from apontt.models.user import User
from apontt.schemas.notification import WhatsAppLink, WhatsAppSendRequest
from apontt.services.activity import ActivityService
from apontt.services.notifications import build_whatsapp_link
from apontt.utils.documents import normalize_phone

router = APIRouter(prefix="/whatsapp", tags=["whatsapp"])


@router.post("/send", response_model=WhatsAppLink)
def send_whatsapp(
    payload: WhatsAppSendRequest,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> WhatsAppLink:
    url = build_whatsapp_link(payload.phone, payload.message)
    phone = normalize_phone(payload.phone)
    ActivityService(session).record("whatsapp_sent", f"Mensagem de WhatsApp preparada para {phone}")
    logger.info("Link de WhatsApp gerado para %s", sanitize_for_log(phone))
    return WhatsAppLink(phone=phone, url=url)
