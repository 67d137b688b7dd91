# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261017v1
# ---------------------------------------------------------------------------
"""
Outbound email for the password-reset flow.

One ``SmtpMailer`` is built from settings when the application starts and is
handed to request handlers through ``dependencies.get_notifier``.  Each
message is sent in its own SMTP session; there is no retry.  Any transport
error is logged and re-raised as :class:`core.errors.DeliveryFailure` so the
reset lifecycle can roll the secret back.

The reset secret itself is never written to the log.
"""

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Protocol

from core.errors import DeliveryFailure
from core.logger import logger


class Notifier(Protocol):
    """What the reset lifecycle needs from a delivery channel.

    Both methods raise :class:`DeliveryFailure` when the message cannot be sent.
    """

    def send_otp(self, email: str, otp: str, expires_minutes: int = 10) -> None: ...

    def send_reset_link(self, email: str, url: str, expires_minutes: int = 60) -> None: ...


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; background-color: #f9f9f9; }
    .header { background: linear-gradient(135deg, #ff8, #ffa500); padding: 20px;
              text-align: center; border-radius: 10px 10px 0 0; }
    .content { background: white; padding: 30px; border-radius: 0 0 10px 10px; }
    .otp-box { background: linear-gradient(135deg, #ff8, #ffa500); color: #333;
               font-size: 32px; font-weight: bold; text-align: center; padding: 20px;
               border-radius: 10px; letter-spacing: 8px; margin: 30px 0;
               font-family: 'Courier New', monospace; }
    .button { display: inline-block; background: #ffa500; color: #333; padding: 14px 28px;
              border-radius: 6px; text-decoration: none; font-weight: bold; margin: 30px 0; }
    .warning { background-color: #fff3cd; border: 1px solid #ffc107; padding: 15px;
               border-radius: 5px; margin: 20px 0; color: #856404; }
    .footer { text-align: center; margin-top: 20px; color: #666; font-size: 12px; }
"""


def _html_page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>{_STYLE}</style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h2 style="color: #333; margin: 0;">{title}</h2>
        </div>
        <div class="content">
            <p>Hello,</p>
            {body}
            <p>If you did not request this password reset, please ignore this email and your password will remain unchanged.</p>
        </div>
        <div class="footer">
            <p>This is an automated message, please do not reply.</p>
        </div>
    </div>
</body>
</html>
"""  # noqa: E501


def render_otp_email(otp: str, expires_minutes: int) -> tuple[str, str]:
    """Return ``(text, html)`` bodies for a reset code."""
    text = (
        "You have requested to reset your password.\n\n"
        f"Your one-time password is: {otp}\n\n"
        f"This code will expire in {expires_minutes} minutes. Do not share it with anyone.\n\n"
        "If you did not request this password reset, please ignore this email."
    )
    html = _html_page(
        "Password Reset OTP",
        f"""<p>You have requested to reset your password. Please use the following OTP (One-Time Password) to verify your identity:</p>
            <div class="otp-box">{otp}</div>
            <div class="warning">
                <strong>Important:</strong> This OTP will expire in {expires_minutes} minutes. Do not share this code with anyone.
            </div>
            <p>Enter this OTP on the password reset page to proceed with resetting your password.</p>""",  # noqa: E501
    )
    return text, html


def render_reset_link_email(url: str, expires_minutes: int) -> tuple[str, str]:
    """Return ``(text, html)`` bodies for a reset link."""
    text = (
        "You have requested to reset your password.\n\n"
        f"Open the following link to choose a new password:\n{url}\n\n"
        f"This link will expire in {expires_minutes} minutes and can only be used once.\n\n"
        "If you did not request this password reset, please ignore this email."
    )
    html = _html_page(
        "Password Reset",
        f"""<p>You have requested to reset your password. Click the button below to choose a new one:</p>
            <p style="text-align: center;"><a class="button" href="{url}">Reset password</a></p>
            <div class="warning">
                <strong>Important:</strong> This link will expire in {expires_minutes} minutes and can only be used once.
            </div>
            <p>If the button does not work, copy this address into your browser:<br>{url}</p>""",  # noqa: E501
    )
    return text, html


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


class SmtpMailer:
    """SMTP delivery of reset codes and reset links."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str = "",
        password: str = "",
        from_email: str = "noreply@example.com",
        from_name: str = "Password Reset",
        starttls: bool = True,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.from_name = from_name
        self.starttls = starttls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, config) -> "SmtpMailer":
        return cls(
            host=config.smtp_host,
            port=config.smtp_port,
            username=config.smtp_user,
            password=config.smtp_password,
            from_email=config.mail_from,
            from_name=config.mail_from_name,
            starttls=config.smtp_starttls,
            timeout=config.smtp_timeout,
        )

    def send_otp(self, email: str, otp: str, expires_minutes: int = 10) -> None:
        text, html = render_otp_email(otp, expires_minutes)
        self._send(email, "Password Reset OTP", text, html)

    def send_reset_link(self, email: str, url: str, expires_minutes: int = 60) -> None:
        text, html = render_reset_link_email(url, expires_minutes)
        self._send(email, "Password Reset Request", text, html)

    def build_message(self, email: str, subject: str, text: str, html: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = email
        msg["Subject"] = subject
        # Clients render the last part they understand, so HTML goes last
        msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))
        return msg

    def _send(self, email: str, subject: str, text: str, html: str) -> None:
        msg = self.build_message(email, subject, text, html)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.starttls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send '%s' email to %s: %s", subject, email, exc)
            raise DeliveryFailure() from exc

        logger.info("Sent '%s' email to %s", subject, email)
