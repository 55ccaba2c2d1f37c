"""HTML email templates rendered with Jinja2 (autoescaped)."""

_FOOTER = """
    <hr style="margin: 30px 0;">
    <p style="color: #6b7280; font-size: 14px;">
        This is an automated message from MySkin Aesthetics. Please reply to
        {{ clinic_email }} for any questions.
    </p>
"""

_ORDER_BOX = """
    <div style="background-color: #f3f4f6; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <h3>Order Details:</h3>
        <p><strong>Order ID:</strong> #{{ order_number }}</p>
        <p><strong>Total Amount:</strong> {{ total_amount }}</p>
        {% if payment_method %}<p><strong>Payment Method:</strong> {{ payment_method }}</p>{% endif %}
        {% if status_label %}<p><strong>Status:</strong> {{ status_label }}</p>{% endif %}
    </div>
"""

PAYMENT_APPROVED_TEMPLATE = (
    """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2 style="color: #16a34a;">Payment Approved!</h2>
    <p>Dear {{ customer_name }},</p>
    <p>Great news! Your payment has been verified and approved. Your order is now being processed.</p>
"""
    + _ORDER_BOX
    + """
    <p>Your order will be processed and shipped within 2-3 business days.</p>
    <p>Thank you for choosing MySkin Aesthetics!</p>
"""
    + _FOOTER
    + "</div>"
)

PAYMENT_REJECTED_TEMPLATE = (
    """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2 style="color: #dc2626;">Payment Verification Issue</h2>
    <p>Dear {{ customer_name }},</p>
    <p>We were unable to verify your bank transfer payment for the following order:</p>
"""
    + _ORDER_BOX
    + """
    {% if reason %}<p><strong>Reason:</strong> {{ reason }}</p>{% endif %}
    <p>Please contact our customer support team or try submitting your payment details again. Make sure to:</p>
    <ul>
        <li>Transfer the exact amount shown</li>
        <li>Use the correct bank account details</li>
        <li>Provide the correct sender name and reference</li>
    </ul>
    <p>We apologize for any inconvenience and are here to help resolve this quickly.</p>
"""
    + _FOOTER
    + "</div>"
)

ORDER_STATUS_TEMPLATE = (
    """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Order Status Update</h2>
    <p>Dear {{ customer_name }},</p>
    <p>{{ status_message }}</p>
"""
    + _ORDER_BOX
    + """
    <p>Thank you for choosing MySkin Aesthetics!</p>
"""
    + _FOOTER
    + "</div>"
)

CONTACT_FORM_TEMPLATE = """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2 style="color: #c19a88;">New Contact Form Submission</h2>
    <div style="background-color: #f3f4f6; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <h3>Contact Details:</h3>
        <p><strong>Name:</strong> {{ name }}</p>
        <p><strong>Email:</strong> {{ email }}</p>
        <p><strong>Phone:</strong> {{ phone or "Not provided" }}</p>
        <p><strong>Subject:</strong> {{ subject or "General Inquiry" }}</p>
    </div>
    <div style="background-color: #f9f9f9; padding: 20px; border-radius: 8px; margin: 20px 0;">
        <h3>Message:</h3>
        <p style="white-space: pre-wrap;">{{ message }}</p>
    </div>
    <hr style="margin: 30px 0;">
    <p style="color: #6b7280; font-size: 14px;">
        This message was sent from the MySkin Aesthetics contact form on {{ sent_on }}.
        You can reply directly to this email to respond to {{ name }}.
    </p>
</div>
"""

PASSWORD_RESET_TEMPLATE = (
    """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2 style="color: #c19a88;">Reset your password</h2>
    <p>Dear {{ customer_name }},</p>
    <p>We received a request to reset the password for your MySkin Aesthetics account.</p>
    <p><a href="{{ reset_url }}" style="color: #c19a88;">Choose a new password</a></p>
    <p>This link expires in {{ expires_minutes }} minutes. If you did not request it, you can ignore this email.</p>
"""
    + _FOOTER
    + "</div>"
)
