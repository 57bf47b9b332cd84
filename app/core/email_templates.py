# app/core/email_templates.py
from html import escape

_LAYOUT = """\
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>{title}</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background: {accent}; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
      <h1 style="margin: 0; font-size: 28px;">{heading}</h1>
    </div>
    <div style="background: #f8f9fa; padding: 30px; border-radius: 0 0 10px 10px;">
      <p>Dear <strong>{name}</strong>,</p>
      {body}
      <div style="text-align: center; margin: 30px 0;">
        <a href="{link}" style="background: {accent}; color: white; padding: 12px 30px; text-decoration: none; border-radius: 5px; display: inline-block; font-weight: bold;">{link_label}</a>
      </div>
      <p style="color: #666; font-size: 14px; margin-top: 30px;">{footer}</p>
    </div>
  </div>
</body>
</html>
"""


def registration_email(name: str, login_url: str) -> str:
    body = (
        "<p>Your registration has been completed successfully.</p>"
        "<ul>"
        "<li>Log in with your phone number or email</li>"
        "<li>Your password is your phone number</li>"
        "<li>Generate and download your certificate</li>"
        "<li>Update your profile photo anytime</li>"
        "</ul>"
    )
    return _LAYOUT.format(
        title="Registration Successful",
        heading="Welcome to Certificate System!",
        accent="#667eea",
        name=escape(name),
        body=body,
        link=escape(login_url, quote=True),
        link_label="Login Now",
        footer="If you have any questions, please contact our support team.",
    )


def certificate_email(name: str, certificate_url: str) -> str:
    body = (
        "<p>Your certificate has been generated and is ready to view.</p>"
        "<p>It carries a QR code that anyone can scan to look it up on our "
        "verification page.</p>"
    )
    return _LAYOUT.format(
        title="Certificate Generated",
        heading="Certificate Ready!",
        accent="#28a745",
        name=escape(name),
        body=body,
        link=escape(certificate_url, quote=True),
        link_label="View Certificate",
        footer="You can share this certificate link or print it for official use.",
    )
