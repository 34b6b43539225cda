# backend/utils/mailer.py
"""
Outgoing mail for password recovery
"""
import logging
import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Optional

from config import settings

logger = logging.getLogger(__name__)


class Mailer:

    def __init__(self):
        self.smtp_server = settings.SMTP_SERVER
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.FROM_EMAIL

    def send_email(
        self,
        to_emails: List[str],
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        """Send an email; returns False instead of raising on SMTP errors"""
        if not self.smtp_server:
            logger.warning(f"SMTP not configured, email to {to_emails} not sent: {subject}")
            return False

        try:
            msg = MIMEMultipart('alternative')
            msg['Subject'] = subject
            msg['From'] = self.from_email
            msg['To'] = ', '.join(to_emails)

            if not text_content:
                text_content = re.sub(r'<[^>]+>', '', html_content)
            msg.attach(MIMEText(text_content, 'plain'))
            msg.attach(MIMEText(html_content, 'html'))

            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                server.starttls()
                if self.smtp_username:
                    server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            logger.info(f"Email sent successfully to {to_emails}")
            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_emails}: {e}")
            return False

    def send_password_reset(self, to_email: str, full_name: Optional[str], reset_link: str) -> bool:
        if not self.smtp_server:
            # Local development: the link is only written to the log
            logger.info(f"Password reset link for {to_email}: {reset_link}")
            return False

        name = full_name or to_email
        html_content = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2>Reset Password</h2>
            <p>Halo {name},</p>
            <p>Kami menerima permintaan untuk mereset password akun APD Dashboard Anda.</p>
            <p><a href="{reset_link}">Klik di sini untuk membuat password baru</a></p>
            <p>Link ini berlaku selama {settings.RESET_TOKEN_EXPIRE_MINUTES} menit dan hanya dapat digunakan satu kali.</p>
            <p>Jika Anda tidak meminta reset password, abaikan email ini.</p>
        </div>
        """
        return self.send_email([to_email], "Reset Password APD Dashboard", html_content)


mailer = Mailer()
