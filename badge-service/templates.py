"""
templates.py — Badge Email Renderer
=====================================
Renders the badge delivery email to (subject, body_text, body_html).
Plain text is always provided for non-HTML clients; the badge itself
travels as a PNG attachment and is referenced inline by the HTML part.
"""

from html import escape

BADGE_CID = "visitor-badge"


# ── HTML base template ────────────────────────────────────────────────────────

def _html_wrap(title: str, body_inner: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{title}</title>
</head>
<body style="margin:0;padding:0;background:#f6f8fa;font-family:'Segoe UI',system-ui,sans-serif;">
  <table width="100%" cellpadding="0" cellspacing="0" style="background:#f6f8fa;padding:40px 0;">
    <tr><td align="center">
      <table width="480" cellpadding="0" cellspacing="0"
             style="background:#ffffff;border:1px solid #d0d7de;border-radius:12px;overflow:hidden;">
        <!-- Header -->
        <tr>
          <td style="background:#0d1117;padding:28px 32px;text-align:center;">
            <div style="color:#ffffff;font-size:22px;font-weight:700;letter-spacing:2px;">
              {title}
            </div>
          </td>
        </tr>
        <!-- Body -->
        <tr>
          <td style="padding:32px;">
            {body_inner}
          </td>
        </tr>
        <!-- Footer -->
        <tr>
          <td style="padding:16px 32px 24px;border-top:1px solid #d0d7de;text-align:center;">
            <div style="color:#57606a;font-size:11px;">
              This is an automated message. If you didn't request a badge,
              you can safely ignore it.
            </div>
          </td>
        </tr>
      </table>
    </td></tr>
  </table>
</body>
</html>"""


# ── Badge email ───────────────────────────────────────────────────────────────

def render_badge_email(name: str, email: str, photo_url: str | None) -> tuple[str, str, str]:
    """Returns (subject, body_text, body_html)."""
    subject = f"Your visitor badge, {name}"
    photo_line = "Your photo is on the badge." if photo_url else "Your initials are on the badge."
    text = (
        f"Hi {name},\n\n"
        f"Thanks for stopping by. Your visitor badge is attached to this email.\n\n"
        f"Name  : {name}\n"
        f"Email : {email}\n\n"
        f"{photo_line}\n"
        f"Save it or share it, it's yours."
    )
    html = _html_wrap("Your Visitor Badge", f"""
        <h2 style="color:#1f2328;margin:0 0 16px;font-size:20px;">Hi {escape(name)},</h2>
        <p style="color:#57606a;margin:0 0 24px;line-height:1.6;">
          Thanks for stopping by. Here is your visitor badge.
        </p>
        <div style="text-align:center;margin:28px 0;">
          <img src="cid:{BADGE_CID}" alt="Visitor badge for {escape(name)}"
               width="300" style="border-radius:8px;border:1px solid #d0d7de;">
        </div>
        <p style="color:#57606a;font-size:12px;margin:16px 0 0;text-align:center;">
          Sent to {escape(email)} · The badge is also attached as a PNG file
        </p>
    """)
    return subject, text, html
