"""
MJML Email Templates
Password reset and event invitation mail, compiled to HTML by email_service
"""

from html import escape
from typing import Optional

# Prairie evening palette
THEME = {
    "primary": "#6366f1",
    "primary_dark": "#4f46e5",
    "background": "#f8fafc",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
}

APP_NAME = "Saskatoon Events"


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
    is_user_email: bool = False,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="#ffffff" padding="0 40px 48px 40px">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    footer_notice = ""
    if is_user_email:
        footer_notice = f"""
        <mj-text align="center" font-size="12px" color="#94a3b8" padding="12px 0 0 0">
          You're receiving this because you have an account with {APP_NAME}.
        </mj-text>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="#ffffff" padding="32px 40px 0 40px">
          <mj-column>
            <mj-text font-size="20px" font-weight="700" color="{THEME['primary_dark']}" padding="0">
              {APP_NAME}
            </mj-text>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="24px 0 32px 0" />
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="0 40px 32px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              {APP_NAME}, Saskatoon, SK
            </mj-text>
            {footer_notice}
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def password_reset_template(reset_link: str) -> str:
    content = """
            <mj-text>
              We received a request to reset your password.
            </mj-text>
            <mj-text>
              Click the button below to choose a new password. This link will expire in 1 hour.
            </mj-text>
            <mj-text font-size="13px" color="#64748b">
              If you didn't request this, you can safely ignore this email. Your password won't be changed.
            </mj-text>
    """
    return get_base_template(
        title="Reset Your Password",
        preview_text=f"Reset your {APP_NAME} password",
        content_sections=content,
        cta_url=reset_link,
        cta_label="Reset Password",
        is_user_email=True,
    )


def event_invitation_template(
    guest_name: str,
    host_name: str,
    event_name: str,
    when: str,
    location: str,
    description: str,
) -> str:
    """Invitation body; the calendar entry travels as an .ics attachment"""
    content = f"""
            <mj-text>
              Hi {escape(guest_name)},
            </mj-text>
            <mj-text>
              {escape(host_name)} has invited you to <strong>{escape(event_name)}</strong>.
            </mj-text>
            <mj-text padding="8px 25px">
              <strong>When:</strong> {escape(when)}<br/>
              <strong>Where:</strong> {escape(location)}
            </mj-text>
            <mj-text>
              {escape(description)}
            </mj-text>
            <mj-text font-size="13px" color="{THEME['text_muted']}">
              Open the attached invitation to add this event to your calendar and RSVP.
            </mj-text>
    """
    return get_base_template(
        title=f"You're invited: {escape(event_name)}",
        preview_text=f"{escape(host_name)} invited you to {escape(event_name)}",
        content_sections=content,
    )
