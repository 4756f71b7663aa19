# proplayhub_app/services/mailer.py
# -*- coding: utf-8 -*-
from __future__ import annotations
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from flask import current_app

BOX = ('<div style="font-family: Arial, sans-serif; max-width: 640px; margin: auto; padding: 20px; '
       'border: 1px solid #ddd; border-radius: 10px;">')
FOOTER = "<p>Best regards,<br/>ProPlayHub Team</p></div>"


class Mailer:
    """Envio SMTP. Sem MAIL_HOST (dev/testes) o e-mail só é logado."""

    def __init__(self, app=None):
        self.host = ""
        self.port = 587
        self.username = ""
        self.password = ""
        self.sender = ""
        self.logger = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.host = app.config.get("MAIL_HOST", "")
        self.port = int(app.config.get("MAIL_PORT", 587))
        self.username = app.config.get("MAIL_USERNAME", "")
        self.password = app.config.get("MAIL_PASSWORD", "")
        self.sender = app.config.get("MAIL_FROM", "")
        self.logger = app.logger
        app.extensions["mailer"] = self

    def send(self, to: str, subject: str, html: str, text: str | None = None) -> bool:
        if not self.host:
            self.logger.info("[DEV] e-mail não enviado (MAIL_HOST vazio): %s -> %s", subject, to)
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        if text:
            msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))

        if self.port == 465:
            with smtplib.SMTP_SSL(self.host, self.port, context=ssl.create_default_context(), timeout=15) as server:
                self._login_and_send(server, to, msg)
        else:
            with smtplib.SMTP(self.host, self.port, timeout=15) as server:
                server.starttls(context=ssl.create_default_context())
                self._login_and_send(server, to, msg)
        self.logger.info("E-mail enviado: %s -> %s", subject, to)
        return True

    def _login_and_send(self, server, to, msg):
        if self.username:
            server.login(self.username, self.password)
        server.sendmail(self.sender, [to], msg.as_string())


def get_mailer() -> Mailer:
    return current_app.extensions["mailer"]


# ---------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------
def welcome_email(name: str, username: str) -> tuple[str, str]:
    html = (
        f'{BOX}<h2 style="color: #4f46e5;">Welcome {name} to ProPlayHub!</h2>'
        f"<p>Thank you for registering a ProPlayHub account. We are excited to have you!</p>"
        f"<p>Username: <strong>{username}</strong></p>"
        f"<p>Start your gaming journey today!</p>{FOOTER}"
    )
    return "Welcome to ProPlayHub!", html


def verification_email(name: str, url: str) -> tuple[str, str]:
    html = (
        f'{BOX}<h2 style="color: #4f46e5;">Welcome {name} to ProPlayHub!</h2>'
        f"<p>Please click the link below to verify your email:</p>"
        f'<p><a href="{url}">{url}</a></p>'
        f'<p style="color: #666; font-size: 12px;">Note: This link expires in 15 minutes.</p>{FOOTER}'
    )
    return "Verify your ProPlayHub account", html


def password_reset_email(name: str, otp: str) -> tuple[str, str]:
    html = (
        f'{BOX}<h2 style="color: #4f46e5;">ProPlayHub password reset request</h2>'
        f"<p>Hello {name},</p><p>Use the OTP below to reset your password:</p>"
        f'<p style="font-size: 24px; font-weight: bold; letter-spacing: 4px;">{otp}</p>'
        f"<p>If you did not request a password reset, please ignore this email.</p>"
        f'<p style="color: #666; font-size: 12px;">Note: This OTP expires in 5 minutes.</p>{FOOTER}'
    )
    return "Your ProPlayHub password reset OTP", html


def receipt_email(name: str, sub: dict) -> tuple[str, str]:
    disc = sub.get("appliedDiscount")
    disc_line = f"<p><strong>Discount:</strong> {disc['code']} (-£{disc['amount']:.2f})</p>" if disc else ""
    addons = "".join(f"<li>{a['name']} - £{a['price']:.2f}</li>" for a in sub.get("purchasedAddons") or [])
    html = (
        f'{BOX}<h2 style="color: #4f46e5;">ProPlayHub Subscription Receipt</h2>'
        f"<p>Hi {name},</p><p>Thank you for your payment. Below are the details of your subscription:</p>"
        f"<p><strong>Package:</strong> {sub['packageName']}</p>"
        f"<p><strong>Package Code:</strong> {sub['packageSlug']}</p>"
        f"<p><strong>Price:</strong> £{sub['pricePerPeriod']:.2f} {sub.get('period') or ''}</p>"
        f"{disc_line}"
        f"{'<ul>' + addons + '</ul>' if addons else ''}"
        f"<p><strong>Status:</strong> {sub['status']}</p>"
        f"<p><strong>Started At:</strong> {sub.get('startedAt') or 'N/A'}</p>"
        f"<p><strong>Next Billing Date:</strong> {sub.get('nextBillingDate') or 'N/A'}</p>{FOOTER}"
    )
    return f"Your ProPlayHub Subscription Receipt – {sub['packageName']}", html


def addon_purchase_email(name: str, package_name: str, package_slug: str, addons: list[dict], charge_total: float) -> tuple[str, str]:
    items = "".join(f"<li>{a['name']} - £{a['price']:.2f}</li>" for a in addons)
    html = (
        f'{BOX}<h2 style="color: #4f46e5;">Add-on purchase confirmed</h2>'
        f"<p>Hi {name},</p><p>You just upgraded your subscription by adding these items:</p>"
        f"<p><strong>Package:</strong> {package_name} ({package_slug})</p>"
        f"<ul>{items}</ul><p><strong>Charged today:</strong> £{charge_total:.2f}</p>"
        f"<p>Your monthly billing will include these add-ons from now on.</p>{FOOTER}"
    )
    return f"Your add-ons are active for {package_name}", html


def send_template(to: str, template, *args) -> bool:
    subject, html = template(*args)
    return get_mailer().send(to, subject, html)
