import html
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendResult:
    ok: bool
    reason: Optional[str] = None

    @classmethod
    def success(cls):
        return cls(ok=True)

    @classmethod
    def failure(cls, reason):
        return cls(ok=False, reason=reason)


def build_subject(event):
    return f'⏰ {event.title} — coming up soon'


def format_event_time(event, tz_name='UTC'):
    """Formats the event time like 'Monday, January 6, 09:30 AM'."""
    local = event.occurs_at.astimezone(ZoneInfo(tz_name))
    return f'{local:%A, %B} {local.day}, {local:%I:%M %p}'


def build_email(event, tz_name='UTC'):
    title = html.escape(event.title)
    when = html.escape(format_event_time(event, tz_name))
    notes = ''
    if event.notes:
        notes = (
            '<p style="color:#c0bfb8;font-size:14px;border-left:2px solid #00e5a0;padding-left:12px">'
            f'{html.escape(event.notes)}</p>'
        )

    return f"""
  <div style="font-family:sans-serif;max-width:520px;margin:0 auto">
    <div style="background:#0c0c0e;padding:28px;border-radius:12px">
      <p style="color:#00e5a0;font-size:11px;letter-spacing:.12em;margin:0 0 14px">CHRONO REMINDER</p>
      <h1 style="color:#f0efe8;font-size:22px;margin:0 0 8px">⏰ {title}</h1>
      <p style="color:#666672;font-size:14px;margin:0 0 20px">{when}</p>
      {notes}
    </div>
    <p style="font-size:11px;color:#888;text-align:center;margin-top:16px">Sent by Chrono</p>
  </div>"""


def build_text(event, tz_name='UTC'):
    lines = [f'⏰ {event.title}', format_event_time(event, tz_name)]
    if event.notes:
        lines += ['', event.notes]
    lines += ['', 'Sent by Chrono']
    return '\n'.join(lines) + '\n'


class SmtpSender:
    """Sends notifications over SMTP with implicit TLS."""

    def __init__(self, host, port, from_email, from_name='', username='', password='', timeout=30):
        self.host = host
        self.port = port
        self.from_email = from_email
        self.from_name = from_name
        self.username = username
        self.password = password
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings):
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            from_email=settings.FROM_EMAIL,
            from_name=settings.FROM_NAME,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            timeout=settings.SMTP_TIMEOUT_SECONDS,
        )

    def send(self, recipient, subject, html_body, text_body=None):
        msg = EmailMessage()
        msg['Subject'] = subject
        msg['From'] = formataddr((self.from_name, self.from_email)) if self.from_name else self.from_email
        msg['To'] = recipient
        if text_body:
            msg.set_content(text_body)
            msg.add_alternative(html_body, subtype='html')
        else:
            msg.set_content(html_body, subtype='html')

        try:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as smtp:
                if self.username:
                    smtp.login(self.username, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning('SMTP send to %s failed: %s', recipient, e)
            return SendResult.failure(str(e) or e.__class__.__name__)

        logger.debug('SMTP send to %s accepted', recipient)
        return SendResult.success()
