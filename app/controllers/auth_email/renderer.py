from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

BRAND = "MailFlow"
LINK_EXPIRY_MINUTES = 10

_environment = Environment(
    loader=FileSystemLoader(Path(__file__).parent / "templates"),
    autoescape=select_autoescape(["html"]),
    keep_trailing_newline=True,
)


@dataclass(frozen=True)
class EmailCopy:
    subject: str
    description: str


GENERIC_COPY = EmailCopy(
    subject=f"Your {BRAND} Login Link",
    description="Click the button below to sign in to your account:",
)

COPY_BY_ACTION: dict[str, EmailCopy] = {
    "signup": EmailCopy(
        subject=f"Welcome to {BRAND} — Confirm Your Email",
        description="Click the button below to confirm your email and get started:",
    ),
    "login": GENERIC_COPY,
    "magiclink": GENERIC_COPY,
    "recovery": GENERIC_COPY,
    "email_change": EmailCopy(
        subject="Confirm Email Change",
        description="Click the button below to confirm your email change:",
    ),
}


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str


def copy_for(action_type: str | None) -> EmailCopy:
    """Unknown or missing action types get the generic login copy."""
    return COPY_BY_ACTION.get(action_type or "", GENERIC_COPY)


def render_auth_email(action_type: str | None, confirm_url: str, token: str | None = None) -> RenderedEmail:
    copy = copy_for(action_type)
    html = _environment.get_template("auth_email.html").render(
        brand=BRAND,
        description=copy.description,
        confirm_url=confirm_url,
        token=token,
        expires_in_minutes=LINK_EXPIRY_MINUTES,
    )
    return RenderedEmail(subject=copy.subject, html=html)
